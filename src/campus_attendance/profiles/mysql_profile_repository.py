from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from mysql.connector import Error as MySQLError

from ..core.exceptions import ConflictError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, duplicate_key_name, fetchone
from .model import NewStudentProfile, NewTeacherProfile, Student, Teacher
from .repository import ProfileRepository

_STUDENT_COLUMNS = """
    student_id, user_id, first_name, middle_name, last_name, roll_no,
    branch_id, current_semester_id, academic_year, batch, image
"""

_TEACHER_COLUMNS = """
    teacher_id, user_id, first_name, middle_name, last_name, card_no, dept_id,
    designation, specialization, image, office_hours, room_number
"""


def _row_to_student(r: dict) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        user_id=int(r["user_id"]),
        first_name=r["first_name"],
        middle_name=r.get("middle_name"),
        last_name=r["last_name"],
        roll_no=r["roll_no"],
        branch_id=int(r["branch_id"]),
        current_semester_id=int(r["current_semester_id"]) if r.get("current_semester_id") is not None else None,
        academic_year=r.get("academic_year"),
        batch=r.get("batch"),
        image=r.get("image"),
    )


def _row_to_teacher(r: dict) -> Teacher:
    return Teacher(
        teacher_id=int(r["teacher_id"]),
        user_id=int(r["user_id"]),
        first_name=r["first_name"],
        middle_name=r.get("middle_name"),
        last_name=r["last_name"],
        card_no=r["card_no"],
        dept_id=int(r["dept_id"]),
        designation=r["designation"],
        specialization=r.get("specialization"),
        image=r.get("image"),
        office_hours=r.get("office_hours"),
        room_number=r.get("room_number"),
    )


class MySQLProfileRepository(ProfileRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _student_where(self, column: str, value) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_STUDENT_COLUMNS} FROM students WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _row_to_student(row) if row else None

    def _teacher_where(self, column: str, value) -> Optional[Teacher]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_TEACHER_COLUMNS} FROM teachers WHERE {column}=%s", (value,))
            row = fetchone(cur)
            return _row_to_teacher(row) if row else None

    def get_student(self, student_id: int) -> Optional[Student]:
        return self._student_where("student_id", student_id)

    def get_student_by_user(self, user_id: int) -> Optional[Student]:
        return self._student_where("user_id", user_id)

    def get_student_by_roll_no(self, roll_no: str) -> Optional[Student]:
        return self._student_where("roll_no", roll_no)

    def get_teacher(self, teacher_id: int) -> Optional[Teacher]:
        return self._teacher_where("teacher_id", teacher_id)

    def get_teacher_by_user(self, user_id: int) -> Optional[Teacher]:
        return self._teacher_where("user_id", user_id)

    def get_teacher_by_card_no(self, card_no: str) -> Optional[Teacher]:
        return self._teacher_where("card_no", card_no)

    def create_student_profile(self, profile: NewStudentProfile) -> Student:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO students(user_id, first_name, middle_name, last_name, roll_no,
                                         branch_id, current_semester_id, academic_year, batch, image)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        profile.user_id,
                        profile.first_name,
                        profile.middle_name,
                        profile.last_name,
                        profile.roll_no,
                        profile.branch_id,
                        profile.current_semester_id,
                        profile.academic_year,
                        profile.batch,
                        profile.image,
                    ),
                )
                student_id = int(cur.lastrowid)
                cur.execute("UPDATE users SET is_profile_complete=1 WHERE user_id=%s", (profile.user_id,))
        except MySQLError as e:
            key = duplicate_key_name(e)
            if key == "uq_students_roll_no":
                raise ConflictError("Roll number already exists.") from e
            if key == "uq_students_user":
                raise ValidationError("Student profile already exists for this user.") from e
            raise
        return Student(student_id=student_id, **asdict(profile))

    def create_teacher_profile(self, profile: NewTeacherProfile) -> Teacher:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO teachers(user_id, first_name, middle_name, last_name, card_no, dept_id,
                                         designation, specialization, image, office_hours, room_number)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        profile.user_id,
                        profile.first_name,
                        profile.middle_name,
                        profile.last_name,
                        profile.card_no,
                        profile.dept_id,
                        profile.designation,
                        profile.specialization,
                        profile.image,
                        profile.office_hours,
                        profile.room_number,
                    ),
                )
                teacher_id = int(cur.lastrowid)
                cur.execute("UPDATE users SET is_profile_complete=1 WHERE user_id=%s", (profile.user_id,))
        except MySQLError as e:
            key = duplicate_key_name(e)
            if key == "uq_teachers_card_no":
                raise ConflictError("Card number already exists.") from e
            if key == "uq_teachers_user":
                raise ValidationError("Teacher profile already exists for this user.") from e
            raise
        return Teacher(teacher_id=teacher_id, **asdict(profile))
