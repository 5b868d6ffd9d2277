from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..academics.repository import AcademicsRepository
from ..common.validators import optional_text, parse_id, parse_optional_id, require_fields
from ..core.enums import UserRole
from ..core.exceptions import ConflictError, ValidationError
from ..users.repository import UserRepository
from .model import NewStudentProfile, NewTeacherProfile, Student, Teacher
from .repository import ProfileRepository

logger = logging.getLogger(__name__)

STUDENT_REQUIRED = ("userId", "firstName", "lastName", "rollNo", "branchId")
TEACHER_REQUIRED = ("userId", "firstName", "lastName", "cardNo", "departmentId", "designation")


class ProfileService:
    """Use cases: one-time completion of the student / teacher profile."""

    def __init__(self, users: UserRepository, profiles: ProfileRepository, academics: AcademicsRepository):
        self._users = users
        self._profiles = profiles
        self._academics = academics

    def _eligible_user(self, user_id: int, role: UserRole, role_name: str):
        user = self._users.get_by_id(user_id)
        if not user or user.role != role:
            raise ValidationError(f"User not found or not a {role_name}.")
        if user.is_profile_complete:
            raise ValidationError("Profile is already completed.")
        return user

    def complete_student_profile(self, data: Mapping[str, Any]) -> Student:
        """``data`` uses the form's camelCase keys (userId, firstName, ...)."""
        require_fields(data, STUDENT_REQUIRED, "Missing required fields for student profile.")
        user_id = parse_id(data["userId"], "userId")
        branch_id = parse_id(data["branchId"], "branchId")
        semester_id = parse_optional_id(data.get("currentSemesterId"), "currentSemesterId")

        user = self._eligible_user(user_id, UserRole.STUDENT, "student")

        if self._profiles.get_student_by_user(user.user_id):
            raise ValidationError("Student profile already exists for this user.")

        roll_no = str(data["rollNo"]).strip()
        if self._profiles.get_student_by_roll_no(roll_no):
            raise ConflictError("Roll number already exists.")

        if not self._academics.get_branch(branch_id):
            raise ValidationError("Branch not found.")
        if semester_id is not None:
            semester = self._academics.get_semester(semester_id)
            if not semester or semester.branch_id != branch_id:
                raise ValidationError("Semester not found for this branch.")

        student = self._profiles.create_student_profile(
            NewStudentProfile(
                user_id=user.user_id,
                first_name=str(data["firstName"]).strip(),
                middle_name=optional_text(data.get("middleName")),
                last_name=str(data["lastName"]).strip(),
                roll_no=roll_no,
                branch_id=branch_id,
                current_semester_id=semester_id,
                academic_year=optional_text(data.get("academicYear")),
                batch=optional_text(data.get("batch")),
                image=optional_text(data.get("image")),
            )
        )
        logger.info("Student profile completed user_id=%s student_id=%s", user.user_id, student.student_id)
        return student

    def complete_teacher_profile(self, data: Mapping[str, Any]) -> Teacher:
        require_fields(data, TEACHER_REQUIRED, "Missing required fields for teacher profile.")
        user_id = parse_id(data["userId"], "userId")
        dept_id = parse_id(data["departmentId"], "departmentId")

        user = self._eligible_user(user_id, UserRole.TEACHER, "teacher")

        if self._profiles.get_teacher_by_user(user.user_id):
            raise ValidationError("Teacher profile already exists for this user.")

        card_no = str(data["cardNo"]).strip()
        if self._profiles.get_teacher_by_card_no(card_no):
            raise ConflictError("Card number already exists.")

        if not self._academics.get_department(dept_id):
            raise ValidationError("Department not found.")

        teacher = self._profiles.create_teacher_profile(
            NewTeacherProfile(
                user_id=user.user_id,
                first_name=str(data["firstName"]).strip(),
                middle_name=optional_text(data.get("middleName")),
                last_name=str(data["lastName"]).strip(),
                card_no=card_no,
                dept_id=dept_id,
                designation=str(data["designation"]).strip(),
                specialization=optional_text(data.get("specialization")),
                image=optional_text(data.get("image")),
                office_hours=optional_text(data.get("officeHours")),
                room_number=optional_text(data.get("roomNumber")),
            )
        )
        logger.info("Teacher profile completed user_id=%s teacher_id=%s", user.user_id, teacher.teacher_id)
        return teacher

    def form_options(self, branch_id: Optional[int] = None) -> dict:
        return {
            "departments": [{"id": d.dept_id, "name": d.name} for d in self._academics.list_departments()],
            "branches": [
                {"id": b.branch_id, "name": b.name, "code": b.code, "departmentId": b.dept_id}
                for b in self._academics.list_branches()
            ],
            "semesters": [
                {"id": s.semester_id, "branchId": s.branch_id, "number": s.number, "name": s.name}
                for s in self._academics.list_semesters(branch_id)
            ],
        }
