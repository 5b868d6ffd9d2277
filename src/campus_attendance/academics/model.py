from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Department:
    dept_id: int
    name: str


@dataclass(frozen=True)
class Branch:
    branch_id: int
    name: str
    code: str
    dept_id: int


@dataclass(frozen=True)
class Semester:
    semester_id: int
    branch_id: int
    number: int
    name: str


@dataclass(frozen=True)
class Subject:
    subject_id: int
    code: str
    name: str
    branch_id: int
    semester_id: int
    teacher_id: int
    is_lab: bool = False
    credits: int = 3
