from __future__ import annotations

from typing import Protocol, Sequence

from .model import (
    AttendanceMark,
    ClassSession,
    MarkUpdate,
    SheetStudent,
    StudentMark,
    SubjectOverview,
    TeacherSubjectRow,
)


class AttendanceRepository(Protocol):
    """Read models and writes over class sessions and attendance records."""

    def list_semester_subjects(self, *, branch_id: int, semester_id: int) -> Sequence[SubjectOverview]:
        raise NotImplementedError

    def list_student_marks(self, student_id: int) -> Sequence[StudentMark]:
        raise NotImplementedError

    def list_teacher_subject_rows(self, teacher_id: int) -> Sequence[TeacherSubjectRow]:
        """Per subject taught: distinct sessions, enrollments, distinct PRESENT
        students and status counts over every record of the subject."""
        raise NotImplementedError

    def list_sessions(self, subject_id: int) -> Sequence[ClassSession]:
        raise NotImplementedError

    def list_enrolled_students(self, subject_id: int) -> Sequence[SheetStudent]:
        raise NotImplementedError

    def list_subject_marks(self, subject_id: int) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def apply_mark_updates(self, updates: Sequence[MarkUpdate], *, marked_by: str) -> int:
        """Upsert / clear the given cells in one transaction; returns the count applied."""
        raise NotImplementedError
