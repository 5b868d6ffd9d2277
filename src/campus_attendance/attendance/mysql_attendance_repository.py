from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..core.constants import ATTENDANCE_WEIGHTS
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..profiles.model import join_name
from .model import (
    AttendanceMark,
    ClassSession,
    MarkUpdate,
    SheetStudent,
    StudentMark,
    SubjectOverview,
    TeacherSubjectRow,
)
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_semester_subjects(self, *, branch_id: int, semester_id: int) -> Sequence[SubjectOverview]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.subject_id, s.code, s.name, t.first_name, t.last_name
                FROM subjects s
                JOIN teachers t ON t.teacher_id = s.teacher_id
                WHERE s.branch_id=%s AND s.semester_id=%s
                ORDER BY s.code
                """,
                (branch_id, semester_id),
            )
            return [
                SubjectOverview(
                    subject_id=int(r["subject_id"]),
                    code=r["code"],
                    name=r["name"],
                    teacher_name=join_name(r["first_name"], r["last_name"]),
                )
                for r in fetchall(cur)
            ]

    def list_student_marks(self, student_id: int) -> Sequence[StudentMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT cs.subject_id, ar.status
                FROM attendance_records ar
                JOIN class_sessions cs ON cs.session_id = ar.session_id
                WHERE ar.student_id=%s
                """,
                (student_id,),
            )
            return [
                StudentMark(subject_id=int(r["subject_id"]), status=AttendanceStatus(r["status"]))
                for r in fetchall(cur)
            ]

    def list_teacher_subject_rows(self, teacher_id: int) -> Sequence[TeacherSubjectRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            # One derived table per aggregate so the joins do not multiply counts.
            cur.execute(
                """
                SELECT s.subject_id, s.code, s.name,
                       COALESCE(cs.total_classes, 0) AS total_classes,
                       COALESCE(e.total_students, 0) AS total_students,
                       COALESCE(ar.present_students, 0) AS present_students,
                       COALESCE(ar.n_present, 0) AS n_present,
                       COALESCE(ar.n_delayed, 0) AS n_delayed,
                       COALESCE(ar.n_late, 0) AS n_late,
                       COALESCE(ar.n_absent, 0) AS n_absent
                FROM subjects s
                LEFT JOIN (
                    SELECT subject_id, COUNT(DISTINCT session_id) AS total_classes
                    FROM class_sessions
                    GROUP BY subject_id
                ) cs ON cs.subject_id = s.subject_id
                LEFT JOIN (
                    SELECT subject_id, COUNT(DISTINCT student_id) AS total_students
                    FROM enrollments
                    GROUP BY subject_id
                ) e ON e.subject_id = s.subject_id
                LEFT JOIN (
                    SELECT c.subject_id,
                           COUNT(DISTINCT CASE WHEN r.status='PRESENT' THEN r.student_id END) AS present_students,
                           SUM(r.status='PRESENT') AS n_present,
                           SUM(r.status='LATE') AS n_delayed,
                           SUM(r.status='VERY_LATE') AS n_late,
                           SUM(r.status='ABSENT') AS n_absent
                    FROM attendance_records r
                    JOIN class_sessions c ON c.session_id = r.session_id
                    GROUP BY c.subject_id
                ) ar ON ar.subject_id = s.subject_id
                WHERE s.teacher_id=%s
                ORDER BY s.code
                """,
                (teacher_id,),
            )
            return [
                TeacherSubjectRow(
                    subject_id=int(r["subject_id"]),
                    code=r["code"],
                    name=r["name"],
                    total_classes=int(r["total_classes"]),
                    total_students=int(r["total_students"]),
                    present_students=int(r["present_students"]),
                    present=int(r["n_present"]),
                    delayed=int(r["n_delayed"]),
                    late=int(r["n_late"]),
                    absent=int(r["n_absent"]),
                )
                for r in fetchall(cur)
            ]

    def list_sessions(self, subject_id: int) -> Sequence[ClassSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, subject_id, session_date, start_time, topic
                FROM class_sessions
                WHERE subject_id=%s
                ORDER BY session_date, start_time, session_id
                """,
                (subject_id,),
            )
            return [
                ClassSession(
                    session_id=int(r["session_id"]),
                    subject_id=int(r["subject_id"]),
                    session_date=r["session_date"],
                    start_time=r.get("start_time"),
                    topic=r.get("topic"),
                )
                for r in fetchall(cur)
            ]

    def list_enrolled_students(self, subject_id: int) -> Sequence[SheetStudent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT st.student_id, st.roll_no, st.first_name, st.middle_name, st.last_name
                FROM enrollments e
                JOIN students st ON st.student_id = e.student_id
                WHERE e.subject_id=%s
                ORDER BY st.roll_no
                """,
                (subject_id,),
            )
            return [
                SheetStudent(
                    student_id=int(r["student_id"]),
                    roll_no=r["roll_no"],
                    name=join_name(r["first_name"], r.get("middle_name"), r["last_name"]),
                )
                for r in fetchall(cur)
            ]

    def list_subject_marks(self, subject_id: int) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT ar.student_id, ar.session_id, ar.status
                FROM attendance_records ar
                JOIN class_sessions cs ON cs.session_id = ar.session_id
                WHERE cs.subject_id=%s
                """,
                (subject_id,),
            )
            return [
                AttendanceMark(
                    student_id=int(r["student_id"]),
                    session_id=int(r["session_id"]),
                    status=AttendanceStatus(r["status"]),
                )
                for r in fetchall(cur)
            ]

    def apply_mark_updates(self, updates: Sequence[MarkUpdate], *, marked_by: str) -> int:
        now = datetime.now()
        with db_cursor(self._conn_factory) as (_, cur):
            for u in updates:
                if u.status is None:
                    cur.execute(
                        "DELETE FROM attendance_records WHERE student_id=%s AND session_id=%s",
                        (u.student_id, u.session_id),
                    )
                    continue
                cur.execute(
                    """
                    INSERT INTO attendance_records(student_id, session_id, status, score, scan_time, marked_by)
                    VALUES(%s,%s,%s,%s,%s,%s)
                    ON DUPLICATE KEY UPDATE
                        status=VALUES(status), score=VALUES(score), marked_by=VALUES(marked_by)
                    """,
                    (u.student_id, u.session_id, u.status.value, ATTENDANCE_WEIGHTS[u.status], now, marked_by),
                )
        return len(updates)
