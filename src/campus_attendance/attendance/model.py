from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus, SheetMark


@dataclass(frozen=True)
class SubjectOverview:
    """Subject row joined with its teacher's display name."""

    subject_id: int
    code: str
    name: str
    teacher_name: str


@dataclass(frozen=True)
class StudentMark:
    """One attendance record of a student, tagged with the session's subject."""

    subject_id: int
    status: AttendanceStatus


@dataclass(frozen=True)
class TeacherSubjectRow:
    subject_id: int
    code: str
    name: str
    total_classes: int
    total_students: int
    present_students: int
    present: int = 0
    delayed: int = 0
    late: int = 0
    absent: int = 0


@dataclass(frozen=True)
class ClassSession:
    session_id: int
    subject_id: int
    session_date: date
    start_time: Optional[datetime] = None
    topic: Optional[str] = None


@dataclass(frozen=True)
class SheetStudent:
    student_id: int
    roll_no: str
    name: str


@dataclass(frozen=True)
class AttendanceMark:
    student_id: int
    session_id: int
    status: AttendanceStatus

    @property
    def mark(self) -> SheetMark:
        return SheetMark.from_status(self.status)


@dataclass(frozen=True)
class MarkUpdate:
    """Sheet cell change; ``status`` None clears the cell."""

    student_id: int
    session_id: int
    status: Optional[AttendanceStatus]
