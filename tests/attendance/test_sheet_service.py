from __future__ import annotations

from datetime import date
from io import BytesIO

import pandas as pd
import pytest

from campus_attendance.attendance.model import ClassSession
from campus_attendance.attendance.sheet_service import session_labels
from campus_attendance.core.enums import AttendanceStatus, UserRole
from campus_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from campus_attendance.profiles.model import Student, Teacher


@pytest.fixture
def second_student(campus, seeded):
    user = campus.users.add(email="sita@campus.test", phone="9800000401", role=UserRole.STUDENT,
                            profile_complete=True)
    student = Student(2, user.user_id, "Sita", "Karki", "PAS078BEI001", 1, current_semester_id=5)
    campus.profiles.students[2] = student
    campus.attendance.enrollments.add((2, 1))
    # 14 present, 6 absent -> 70 %
    for session_id in range(1, 21):
        status = AttendanceStatus.PRESENT if session_id <= 14 else AttendanceStatus.ABSENT
        campus.attendance.records[(2, session_id)] = status
    return student


def test_admin_sees_grid_sorted_by_roll_no(campus, seeded, second_student):
    sheet = campus.container.sheet_service.get_sheet(seeded["admin_user"].user_id, 1)
    data = sheet.to_dict()

    assert [s["rollNo"] for s in data["students"]] == ["PAS078BEI001", "PAS078BEI023"]
    assert len(data["sessions"]) == 20
    assert data["sessions"][0]["date"] == "2026-01-01"

    mukesh = data["students"][1]
    assert mukesh["marks"]["1"] == "P"
    assert mukesh["marks"]["19"] == "DP"
    assert mukesh["marks"]["20"] == "A"
    assert mukesh["percentage"] == 94.0
    assert mukesh["status"] == "good"

    assert data["stats"] == {
        "totalClasses": 20,
        "totalStudents": 2,
        "avgAttendance": 82.0,
        "warningAttendance": 1,
        "criticalAttendance": 0,
    }


def test_filter_matches_name_or_roll_no_and_keeps_class_stats(campus, seeded, second_student):
    svc = campus.container.sheet_service
    admin_id = seeded["admin_user"].user_id

    by_name = svc.get_sheet(admin_id, 1, q="sita").to_dict()
    by_roll = svc.get_sheet(admin_id, 1, q=" bei023 ").to_dict()

    assert [s["name"] for s in by_name["students"]] == ["Sita Karki"]
    assert [s["rollNo"] for s in by_roll["students"]] == ["PAS078BEI023"]
    assert by_name["stats"]["totalStudents"] == 2


def test_owning_teacher_may_open_sheet(campus, seeded):
    sheet = campus.container.sheet_service.get_sheet(seeded["teacher_user"].user_id, 1)
    assert sheet.subject.code == "OS"


def test_other_teacher_and_students_are_forbidden(campus, seeded):
    other = campus.users.add(email="t2@campus.test", phone="9800000402", role=UserRole.TEACHER,
                             profile_complete=True)
    campus.profiles.teachers[2] = Teacher(2, other.user_id, "KK", "B", "t_KK_002", 1, "Lecturer")
    svc = campus.container.sheet_service

    with pytest.raises(AuthorizationError):
        svc.get_sheet(other.user_id, 1)
    with pytest.raises(AuthorizationError):
        svc.get_sheet(seeded["student_user"].user_id, 1)


def test_unknown_subject(campus, seeded):
    with pytest.raises(NotFoundError, match="Subject not found"):
        campus.container.sheet_service.get_sheet(seeded["admin_user"].user_id, 99)


def test_update_marks_upserts_and_clears(campus, seeded):
    svc = campus.container.sheet_service
    sheet = svc.update_marks(
        seeded["teacher_user"].user_id,
        1,
        [
            {"studentId": 1, "sessionId": 20, "mark": "lp"},
            {"studentId": 1, "sessionId": 19, "mark": ""},
        ],
    )

    assert campus.attendance.records[(1, 20)] == AttendanceStatus.VERY_LATE
    assert campus.attendance.marked_by[(1, 20)] == "MANUAL"
    assert (1, 19) not in campus.attendance.records

    row = sheet.to_dict()["students"][0]
    assert row["marks"]["19"] is None
    assert row["unmarked"] == 1
    assert row["late"] == 1
    # 18 + 0.6 over 19 recorded marks
    assert row["percentage"] == 97.9


@pytest.mark.parametrize(
    "updates,message",
    [
        ([], "No attendance changes provided"),
        ([{"studentId": 1, "sessionId": 1, "mark": "X"}], "Invalid attendance mark"),
        ([{"studentId": 7, "sessionId": 1, "mark": "P"}], "Student is not enrolled in this subject"),
        ([{"studentId": 1, "sessionId": 77, "mark": "P"}], "Class session does not belong to this subject"),
        (["P"], "Invalid attendance change"),
    ],
)
def test_update_marks_validation(campus, seeded, updates, message):
    with pytest.raises(ValidationError, match=message):
        campus.container.sheet_service.update_marks(seeded["admin_user"].user_id, 1, updates)


def test_export_xlsx_has_one_row_per_student(campus, seeded, second_student):
    output = campus.container.sheet_service.export_xlsx(seeded["admin_user"].user_id, 1)

    df = pd.read_excel(BytesIO(output.getvalue()), engine="openpyxl")
    assert list(df["Roll No"]) == ["PAS078BEI001", "PAS078BEI023"]
    assert list(df.columns[:3]) == ["Roll No", "Name", "2026-01-01"]
    assert list(df.columns[-6:]) == ["P", "DP", "LP", "A", "Unmarked", "Percentage"]
    assert df.loc[1, "Percentage"] == 94.0
    assert df.loc[1, "2026-01-20"] == "A"


def test_session_labels_disambiguate_same_day():
    sessions = [
        ClassSession(1, 1, date(2026, 1, 1)),
        ClassSession(2, 1, date(2026, 1, 1)),
        ClassSession(3, 1, date(2026, 1, 2)),
    ]
    assert session_labels(sessions) == {1: "2026-01-01", 2: "2026-01-01 (2)", 3: "2026-01-02"}


def test_unmarked_cells_are_reported_in_grid_and_export(campus, seeded):
    for session_id in range(2, 21):
        campus.attendance.records.pop((1, session_id))
    svc = campus.container.sheet_service

    row = svc.get_sheet(seeded["admin_user"].user_id, 1).to_dict()["students"][0]
    df = pd.read_excel(BytesIO(svc.export_xlsx(seeded["admin_user"].user_id, 1).getvalue()), engine="openpyxl")

    assert row["present"] == 1
    assert row["unmarked"] == 19
    assert row["percentage"] == 100.0
    assert df.loc[0, "Unmarked"] == 19
