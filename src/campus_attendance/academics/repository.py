from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Branch, Department, Semester, Subject


class AcademicsRepository(Protocol):
    """Read access to departments, branches, semesters and subjects."""

    def list_departments(self) -> Sequence[Department]:
        raise NotImplementedError

    def list_branches(self) -> Sequence[Branch]:
        raise NotImplementedError

    def list_semesters(self, branch_id: Optional[int] = None) -> Sequence[Semester]:
        raise NotImplementedError

    def get_department(self, dept_id: int) -> Optional[Department]:
        raise NotImplementedError

    def get_branch(self, branch_id: int) -> Optional[Branch]:
        raise NotImplementedError

    def get_semester(self, semester_id: int) -> Optional[Semester]:
        raise NotImplementedError

    def get_subject(self, subject_id: int) -> Optional[Subject]:
        raise NotImplementedError
