from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Branch, Department, Semester, Subject
from .repository import AcademicsRepository


def _department(r: dict) -> Department:
    return Department(dept_id=int(r["dept_id"]), name=r["name"])


def _branch(r: dict) -> Branch:
    return Branch(branch_id=int(r["branch_id"]), name=r["name"], code=r["code"], dept_id=int(r["dept_id"]))


def _semester(r: dict) -> Semester:
    return Semester(
        semester_id=int(r["semester_id"]),
        branch_id=int(r["branch_id"]),
        number=int(r["number"]),
        name=r["name"],
    )


def _subject(r: dict) -> Subject:
    return Subject(
        subject_id=int(r["subject_id"]),
        code=r["code"],
        name=r["name"],
        branch_id=int(r["branch_id"]),
        semester_id=int(r["semester_id"]),
        teacher_id=int(r["teacher_id"]),
        is_lab=bool(r.get("is_lab")),
        credits=int(r.get("credits") or 0),
    )


class MySQLAcademicsRepository(AcademicsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_departments(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT dept_id, name FROM departments ORDER BY name")
            return [_department(r) for r in fetchall(cur)]

    def list_branches(self) -> Sequence[Branch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT branch_id, name, code, dept_id FROM branches ORDER BY code")
            return [_branch(r) for r in fetchall(cur)]

    def list_semesters(self, branch_id: Optional[int] = None) -> Sequence[Semester]:
        with db_cursor(self._conn_factory) as (_, cur):
            if branch_id is None:
                cur.execute("SELECT semester_id, branch_id, number, name FROM semesters ORDER BY branch_id, number")
            else:
                cur.execute(
                    "SELECT semester_id, branch_id, number, name FROM semesters WHERE branch_id=%s ORDER BY number",
                    (branch_id,),
                )
            return [_semester(r) for r in fetchall(cur)]

    def get_department(self, dept_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT dept_id, name FROM departments WHERE dept_id=%s", (dept_id,))
            row = fetchone(cur)
            return _department(row) if row else None

    def get_branch(self, branch_id: int) -> Optional[Branch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT branch_id, name, code, dept_id FROM branches WHERE branch_id=%s", (branch_id,))
            row = fetchone(cur)
            return _branch(row) if row else None

    def get_semester(self, semester_id: int) -> Optional[Semester]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT semester_id, branch_id, number, name FROM semesters WHERE semester_id=%s",
                (semester_id,),
            )
            row = fetchone(cur)
            return _semester(row) if row else None

    def get_subject(self, subject_id: int) -> Optional[Subject]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT subject_id, code, name, branch_id, semester_id, teacher_id, is_lab, credits
                FROM subjects
                WHERE subject_id=%s
                """,
                (subject_id,),
            )
            row = fetchone(cur)
            return _subject(row) if row else None
