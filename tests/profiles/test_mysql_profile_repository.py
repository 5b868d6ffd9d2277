from __future__ import annotations

import pytest

from campus_attendance.core.exceptions import ConflictError, ValidationError
from campus_attendance.profiles.model import NewStudentProfile, NewTeacherProfile
from campus_attendance.profiles.mysql_profile_repository import MySQLProfileRepository
from fakes import StubConnectionFactory, StubCursor, duplicate_entry

STUDENT = NewStudentProfile(user_id=7, first_name="Sita", last_name="Karki", roll_no="PAS078BEI001", branch_id=1)
TEACHER = NewTeacherProfile(
    user_id=8, first_name="KK", last_name="B", card_no="t_KK_002", dept_id=1, designation="Lecturer"
)


def _repo(key):
    factory = StubConnectionFactory(StubCursor(error=duplicate_entry("x", key)))
    return MySQLProfileRepository(factory), factory


def test_roll_no_race_becomes_conflict():
    repo, factory = _repo("students.uq_students_roll_no")

    with pytest.raises(ConflictError, match="Roll number already exists."):
        repo.create_student_profile(STUDENT)
    assert factory.connection.rolled_back is True


def test_second_student_row_for_user_is_rejected():
    repo, _ = _repo("students.uq_students_user")

    with pytest.raises(ValidationError, match="Student profile already exists for this user."):
        repo.create_student_profile(STUDENT)


def test_card_no_race_becomes_conflict():
    repo, factory = _repo("teachers.uq_teachers_card_no")

    with pytest.raises(ConflictError, match="Card number already exists."):
        repo.create_teacher_profile(TEACHER)
    assert factory.connection.rolled_back is True


def test_student_insert_marks_profile_complete_in_same_transaction():
    cursor = StubCursor()
    factory = StubConnectionFactory(cursor)

    student = MySQLProfileRepository(factory).create_student_profile(STUDENT)

    assert student.student_id == 1
    assert student.roll_no == "PAS078BEI001"
    assert "INSERT INTO students" in cursor.statements[0]
    assert "UPDATE users SET is_profile_complete=1" in cursor.statements[1]
    assert factory.connection.committed is True
