from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """Account role used for routing and permission checks."""

    STUDENT = "STUDENT"
    TEACHER = "TEACHER"
    ADMIN = "ADMIN"
    HOD = "HOD"

    @classmethod
    def from_signup(cls, value: str) -> "UserRole | None":
        """Map the lowercase role sent by the signup form.

        Only students and teachers can sign themselves up.
        """

        return {"student": cls.STUDENT, "teacher": cls.TEACHER}.get((value or "").strip().lower())


class AttendanceStatus(str, Enum):
    """Attendance status stored per (student, class session)."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    VERY_LATE = "VERY_LATE"
    ABSENT = "ABSENT"


class SheetMark(str, Enum):
    """Short marks shown in the attendance sheet grid."""

    P = "P"
    DP = "DP"
    LP = "LP"
    A = "A"

    @property
    def status(self) -> AttendanceStatus:
        return _MARK_TO_STATUS[self]

    @classmethod
    def from_status(cls, status: AttendanceStatus) -> "SheetMark":
        return _STATUS_TO_MARK[status]


_MARK_TO_STATUS = {
    SheetMark.P: AttendanceStatus.PRESENT,
    SheetMark.DP: AttendanceStatus.LATE,
    SheetMark.LP: AttendanceStatus.VERY_LATE,
    SheetMark.A: AttendanceStatus.ABSENT,
}
_STATUS_TO_MARK = {v: k for k, v in _MARK_TO_STATUS.items()}


class AttendanceBand(str, Enum):
    """Traffic-light band of an attendance percentage."""

    GOOD = "good"
    WARNING = "warning"
    CRITICAL = "critical"
