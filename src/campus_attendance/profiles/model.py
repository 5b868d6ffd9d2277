from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


def join_name(*parts: Optional[str]) -> str:
    return " ".join(p for p in parts if p)


@dataclass(frozen=True)
class Student:
    student_id: int
    user_id: int
    first_name: str
    last_name: str
    roll_no: str
    branch_id: int
    middle_name: Optional[str] = None
    current_semester_id: Optional[int] = None
    academic_year: Optional[str] = None
    batch: Optional[str] = None
    image: Optional[str] = None

    @property
    def full_name(self) -> str:
        return join_name(self.first_name, self.middle_name, self.last_name)


@dataclass(frozen=True)
class Teacher:
    teacher_id: int
    user_id: int
    first_name: str
    last_name: str
    card_no: str
    dept_id: int
    designation: str
    middle_name: Optional[str] = None
    specialization: Optional[str] = None
    image: Optional[str] = None
    office_hours: Optional[str] = None
    room_number: Optional[str] = None

    @property
    def full_name(self) -> str:
        return join_name(self.first_name, self.middle_name, self.last_name)


@dataclass(frozen=True)
class NewStudentProfile:
    """Validated student profile input, not yet persisted."""

    user_id: int
    first_name: str
    last_name: str
    roll_no: str
    branch_id: int
    middle_name: Optional[str] = None
    current_semester_id: Optional[int] = None
    academic_year: Optional[str] = None
    batch: Optional[str] = None
    image: Optional[str] = None


@dataclass(frozen=True)
class NewTeacherProfile:
    """Validated teacher profile input, not yet persisted."""

    user_id: int
    first_name: str
    last_name: str
    card_no: str
    dept_id: int
    designation: str
    middle_name: Optional[str] = None
    specialization: Optional[str] = None
    image: Optional[str] = None
    office_hours: Optional[str] = None
    room_number: Optional[str] = None
