from __future__ import annotations

from typing import Optional, Protocol

from .model import NewStudentProfile, NewTeacherProfile, Student, Teacher


class ProfileRepository(Protocol):
    """Student and teacher rows linked one-to-one to a user."""

    def get_student(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_student_by_user(self, user_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_student_by_roll_no(self, roll_no: str) -> Optional[Student]:
        raise NotImplementedError

    def get_teacher(self, teacher_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def get_teacher_by_user(self, user_id: int) -> Optional[Teacher]:
        raise NotImplementedError

    def get_teacher_by_card_no(self, card_no: str) -> Optional[Teacher]:
        raise NotImplementedError

    def create_student_profile(self, profile: NewStudentProfile) -> Student:
        """Insert the student row and set ``users.is_profile_complete`` atomically.

        Raises ``ConflictError`` on a roll number collision.
        """
        raise NotImplementedError

    def create_teacher_profile(self, profile: NewTeacherProfile) -> Teacher:
        """Insert the teacher row and set ``users.is_profile_complete`` atomically.

        Raises ``ConflictError`` on a card number collision.
        """
        raise NotImplementedError
