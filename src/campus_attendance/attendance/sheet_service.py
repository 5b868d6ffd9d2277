from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from ..academics.model import Subject
from ..academics.repository import AcademicsRepository
from ..common.validators import parse_id
from ..core.enums import AttendanceBand, SheetMark, UserRole
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..profiles.repository import ProfileRepository
from ..users.repository import UserRepository
from .model import ClassSession, MarkUpdate, SheetStudent
from .repository import AttendanceRepository
from .scoring import AttendanceTally, attendance_percentage

logger = logging.getLogger(__name__)

MANUAL_MARKER = "MANUAL"


@dataclass(frozen=True)
class SheetRow:
    student: SheetStudent
    marks: Dict[int, Optional[SheetMark]]
    tally: AttendanceTally

    @property
    def unmarked(self) -> int:
        """Session columns with no mark; they do not count towards the percentage."""
        return sum(1 for m in self.marks.values() if m is None)


@dataclass(frozen=True)
class AttendanceSheet:
    subject: Subject
    sessions: Sequence[ClassSession]
    rows: Sequence[SheetRow]
    stats: Dict[str, Any]

    def to_dict(self) -> dict:
        return {
            "subject": {"id": self.subject.subject_id, "code": self.subject.code, "name": self.subject.name},
            "sessions": [
                {"id": s.session_id, "date": s.session_date.isoformat(), "topic": s.topic} for s in self.sessions
            ],
            "students": [
                {
                    "studentId": r.student.student_id,
                    "rollNo": r.student.roll_no,
                    "name": r.student.name,
                    "marks": {str(sid): (m.value if m else None) for sid, m in r.marks.items()},
                    "present": r.tally.present,
                    "delayed": r.tally.delayed,
                    "late": r.tally.late,
                    "absent": r.tally.absent,
                    "unmarked": r.unmarked,
                    "percentage": r.tally.percentage,
                    "status": r.tally.band.value,
                }
                for r in self.rows
            ],
            "stats": self.stats,
        }


def session_labels(sessions: Sequence[ClassSession]) -> Dict[int, str]:
    """Column label per session: its date, suffixed when a date repeats."""
    labels: Dict[int, str] = {}
    seen: Dict[str, int] = {}
    for s in sessions:
        label = s.session_date.isoformat()
        seen[label] = seen.get(label, 0) + 1
        labels[s.session_id] = label if seen[label] == 1 else f"{label} ({seen[label]})"
    return labels


def _matches(student: SheetStudent, q: str) -> bool:
    return q in student.name.lower() or q in student.roll_no.lower()


class AttendanceSheetService:
    """Use cases: view, edit and export a subject's attendance grid.

    Admins and HODs may open any subject; a teacher only the subjects they teach.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        academics: AcademicsRepository,
        profiles: ProfileRepository,
        users: UserRepository,
    ):
        self._attendance = attendance
        self._academics = academics
        self._profiles = profiles
        self._users = users

    def _authorized_subject(self, viewer_id: int, subject_id: int) -> Subject:
        viewer = self._users.get_by_id(viewer_id)
        if not viewer:
            raise AuthorizationError("Forbidden")

        subject = self._academics.get_subject(subject_id)
        if not subject:
            raise NotFoundError("Subject not found")

        if viewer.role in (UserRole.ADMIN, UserRole.HOD):
            return subject
        if viewer.role == UserRole.TEACHER:
            teacher = self._profiles.get_teacher_by_user(viewer.user_id)
            if teacher and teacher.teacher_id == subject.teacher_id:
                return subject
        raise AuthorizationError("Forbidden")

    def get_sheet(self, viewer_id: int, subject_id: int, q: Optional[str] = None) -> AttendanceSheet:
        subject = self._authorized_subject(viewer_id, subject_id)
        return self._build_sheet(subject, q)

    def _build_sheet(self, subject: Subject, q: Optional[str]) -> AttendanceSheet:
        sessions = list(self._attendance.list_sessions(subject.subject_id))
        students = list(self._attendance.list_enrolled_students(subject.subject_id))

        grid: Dict[int, Dict[int, SheetMark]] = {}
        for m in self._attendance.list_subject_marks(subject.subject_id):
            grid.setdefault(m.student_id, {})[m.session_id] = m.mark

        rows: List[SheetRow] = []
        for st in students:
            cells = grid.get(st.student_id, {})
            marks = {s.session_id: cells.get(s.session_id) for s in sessions}
            tally = AttendanceTally.from_statuses(m.status for m in marks.values() if m is not None)
            rows.append(SheetRow(student=st, marks=marks, tally=tally))

        # stats cover the whole class, the filter only narrows the rows shown
        combined = AttendanceTally()
        warning = critical = 0
        for r in rows:
            combined = combined + r.tally
            if r.tally.band == AttendanceBand.CRITICAL:
                critical += 1
            elif r.tally.band == AttendanceBand.WARNING:
                warning += 1

        stats = {
            "totalClasses": len(sessions),
            "totalStudents": len(students),
            "avgAttendance": attendance_percentage(combined.weighted_score, combined.total),
            "warningAttendance": warning,
            "criticalAttendance": critical,
        }

        needle = (q or "").strip().lower()
        if needle:
            rows = [r for r in rows if _matches(r.student, needle)]

        return AttendanceSheet(subject=subject, sessions=sessions, rows=rows, stats=stats)

    def update_marks(self, viewer_id: int, subject_id: int, updates: Sequence[Any]) -> AttendanceSheet:
        """Apply ``[{studentId, sessionId, mark}]`` cell edits; empty mark clears a cell."""
        subject = self._authorized_subject(viewer_id, subject_id)
        if not isinstance(updates, (list, tuple)) or not updates:
            raise ValidationError("No attendance changes provided")

        session_ids = {s.session_id for s in self._attendance.list_sessions(subject.subject_id)}
        student_ids = {s.student_id for s in self._attendance.list_enrolled_students(subject.subject_id)}

        parsed: List[MarkUpdate] = []
        for item in updates:
            if not isinstance(item, dict):
                raise ValidationError("Invalid attendance change")
            student_id = parse_id(item.get("studentId"), "studentId")
            session_id = parse_id(item.get("sessionId"), "sessionId")
            if student_id not in student_ids:
                raise ValidationError("Student is not enrolled in this subject")
            if session_id not in session_ids:
                raise ValidationError("Class session does not belong to this subject")

            raw = item.get("mark")
            if raw is None or str(raw).strip() == "":
                status = None
            else:
                try:
                    status = SheetMark(str(raw).strip().upper()).status
                except ValueError:
                    raise ValidationError("Invalid attendance mark")
            parsed.append(MarkUpdate(student_id=student_id, session_id=session_id, status=status))

        applied = self._attendance.apply_mark_updates(parsed, marked_by=MANUAL_MARKER)
        logger.info("Attendance sheet updated subject_id=%s cells=%s by user_id=%s", subject_id, applied, viewer_id)
        return self._build_sheet(subject, None)

    def export_xlsx(self, viewer_id: int, subject_id: int, q: Optional[str] = None) -> io.BytesIO:
        sheet = self.get_sheet(viewer_id, subject_id, q)
        labels = session_labels(sheet.sessions)

        data = []
        for r in sheet.rows:
            row = {"Roll No": r.student.roll_no, "Name": r.student.name}
            for s in sheet.sessions:
                mark = r.marks.get(s.session_id)
                row[labels[s.session_id]] = mark.value if mark else ""
            row.update(
                {
                    "P": r.tally.present,
                    "DP": r.tally.delayed,
                    "LP": r.tally.late,
                    "A": r.tally.absent,
                    "Unmarked": r.unmarked,
                    "Percentage": r.tally.percentage,
                }
            )
            data.append(row)

        columns = ["Roll No", "Name"] + [labels[s.session_id] for s in sheet.sessions]
        columns += ["P", "DP", "LP", "A", "Unmarked", "Percentage"]
        df = pd.DataFrame(data, columns=columns)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name=(sheet.subject.code or "Attendance")[:31])
        output.seek(0)
        return output
