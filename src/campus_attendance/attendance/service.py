from __future__ import annotations

import logging
from collections import defaultdict
from typing import Optional

from ..academics.repository import AcademicsRepository
from ..core.exceptions import NotFoundError, ValidationError
from ..profiles.repository import ProfileRepository
from ..users.repository import UserRepository
from .repository import AttendanceRepository
from .scoring import AttendanceTally, ScoredSubject, overall_stats, round_half_up

logger = logging.getLogger(__name__)


class DashboardService:
    """Use cases: per-subject attendance for the student and teacher dashboards."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        profiles: ProfileRepository,
        academics: AcademicsRepository,
        users: UserRepository,
    ):
        self._attendance = attendance
        self._profiles = profiles
        self._academics = academics
        self._users = users

    def student_dashboard(self, user_id: int) -> dict:
        student = self._profiles.get_student_by_user(user_id)
        if not student:
            raise NotFoundError("Student not found")

        branch = self._academics.get_branch(student.branch_id)
        semester = (
            self._academics.get_semester(student.current_semester_id)
            if student.current_semester_id is not None
            else None
        )

        subjects = []
        if semester is not None:
            subjects = list(
                self._attendance.list_semester_subjects(branch_id=student.branch_id, semester_id=semester.semester_id)
            )

        statuses_by_subject = defaultdict(list)
        for mark in self._attendance.list_student_marks(student.student_id):
            statuses_by_subject[mark.subject_id].append(mark.status)

        rows = []
        scored = []
        for s in subjects:
            tally = AttendanceTally.from_statuses(statuses_by_subject.get(s.subject_id, ()))
            scored.append(ScoredSubject(name=s.name, tally=tally))
            rows.append(
                {
                    "subjectId": s.subject_id,
                    "subjectCode": s.code,
                    "subjectName": s.name,
                    "teacher": s.teacher_name,
                    "totalClasses": tally.total,
                    "present": tally.present,
                    "delayedPresent": tally.delayed,
                    "latePresent": tally.late,
                    "absent": tally.absent,
                    "weightedScore": round_half_up(tally.weighted_score, 2),
                    "maxPossibleScore": tally.total,
                    "attendancePercentage": tally.percentage,
                    "status": tally.band.value,
                }
            )

        return {
            "student": {
                "id": student.student_id,
                "name": student.full_name,
                "rollNo": student.roll_no,
                "semester": semester.number if semester else None,
                "branch": branch.name if branch else None,
            },
            "subjects": rows,
            "overall": overall_stats(scored).to_dict(),
        }

    def teacher_dashboard(self, *, user_id: Optional[int] = None, teacher_id: Optional[int] = None) -> dict:
        """Dashboard of the teacher owning ``user_id``, or of ``teacher_id`` when given."""
        if teacher_id is not None:
            teacher = self._profiles.get_teacher(teacher_id)
        elif user_id is not None:
            teacher = self._profiles.get_teacher_by_user(user_id)
        else:
            raise ValidationError("teacherId is required")
        if not teacher:
            raise NotFoundError("Teacher not found")

        user = self._users.get_by_id(teacher.user_id)
        department = self._academics.get_department(teacher.dept_id)

        subjects = []
        for r in self._attendance.list_teacher_subject_rows(teacher.teacher_id):
            tally = AttendanceTally(present=r.present, delayed=r.delayed, late=r.late, absent=r.absent)
            subjects.append(
                {
                    "subjectId": r.subject_id,
                    "subjectCode": r.code,
                    "subjectName": r.name,
                    "totalClasses": r.total_classes,
                    "totalStudents": r.total_students,
                    "presentStudents": r.present_students,
                    "attendancePercentage": tally.percentage,
                    "status": tally.band.value,
                }
            )

        return {
            "teacher": {
                "id": teacher.teacher_id,
                "name": teacher.full_name,
                "email": user.email if user else None,
                "department": department.name if department else None,
            },
            "subjects": subjects,
        }
