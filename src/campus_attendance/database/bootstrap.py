from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.constants import ATTENDANCE_WEIGHTS
from ..core.enums import AttendanceStatus
from .connection import DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"
SEED_PATH = Path(__file__).resolve().parent / "seed.sql"

DEMO_PASSWORD = "Demo@1234"
DEMO_SESSION_COUNT = 20


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in _strip_comments(sql):
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
            continue

        if ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
            continue

        if ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, sql: str) -> None:
    for stmt in iter_sql_statements(sql):
        cur.execute(stmt)


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied to %s", target.database)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path = SEED_PATH) -> None:
    target = DBConfig.from_dict(db_config)
    sql = _strip_create_db_and_use(Path(seed_path).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        _exec_sql(cur, sql)
        conn.commit()
    finally:
        conn.close()
    logger.info("Reference data seeded into %s", target.database)


def ensure_demo_users(db_config: dict, *, today: datetime | None = None) -> None:
    """Demo accounts plus one subject with twenty recorded classes.

    Teacher ``t_BP_001`` teaches Operating Systems (BEI, semester 5); student
    ``PAS078BEI023`` is enrolled with 18 PRESENT, 1 LATE and 1 ABSENT marks.
    Every account uses ``DEMO_PASSWORD``.
    """
    target = DBConfig.from_dict(db_config)
    base = (today or datetime.now()).replace(hour=8, minute=0, second=0, microsecond=0)

    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)

        def scalar(sql: str, params: tuple) -> int:
            cur.execute(sql, params)
            row = cur.fetchone()
            if not row:
                raise RuntimeError(f"Missing seed row: {sql.strip()} {params}")
            return int(row["id"])

        def upsert_user(email: str, phone: str, role: str) -> int:
            password_hash = generate_password_hash(DEMO_PASSWORD)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    """
                    UPDATE users
                    SET password_hash=%s, role=%s, is_email_verified=1, is_profile_complete=1, is_active=1
                    WHERE user_id=%s
                    """,
                    (password_hash, role, existing["user_id"]),
                )
                return int(existing["user_id"])
            cur.execute(
                """
                INSERT INTO users (email, phone, password_hash, role, is_email_verified, is_profile_complete)
                VALUES (%s, %s, %s, %s, 1, 1)
                """,
                (email, phone, password_hash, role),
            )
            return int(cur.lastrowid)

        dept_id = scalar(
            "SELECT dept_id AS id FROM departments WHERE name=%s",
            ("Department of Electronics & Computer Engineering",),
        )
        branch_id = scalar("SELECT branch_id AS id FROM branches WHERE code=%s", ("BEI",))
        semester_id = scalar(
            "SELECT semester_id AS id FROM semesters WHERE branch_id=%s AND number=%s",
            (branch_id, 5),
        )

        upsert_user("admin@example.test", "9800000001", "ADMIN")
        teacher_user_id = upsert_user("bp@example.test", "9800000002", "TEACHER")
        student_user_id = upsert_user("pas078bei023@student.test", "9800000003", "STUDENT")

        cur.execute(
            """
            INSERT INTO teachers (user_id, first_name, last_name, card_no, dept_id, designation, image)
            VALUES (%s, 'BP', 'Teacher', 't_BP_001', %s, 'Lecturer', 'placeholder.jpg')
            ON DUPLICATE KEY UPDATE dept_id=VALUES(dept_id)
            """,
            (teacher_user_id, dept_id),
        )
        teacher_id = scalar("SELECT teacher_id AS id FROM teachers WHERE card_no=%s", ("t_BP_001",))

        cur.execute(
            """
            INSERT INTO subjects (code, name, branch_id, semester_id, teacher_id, is_lab, credits)
            VALUES ('OS', 'Operating Systems', %s, %s, %s, 0, 3)
            ON DUPLICATE KEY UPDATE
                name=VALUES(name), branch_id=VALUES(branch_id),
                semester_id=VALUES(semester_id), teacher_id=VALUES(teacher_id)
            """,
            (branch_id, semester_id, teacher_id),
        )
        subject_id = scalar("SELECT subject_id AS id FROM subjects WHERE code=%s", ("OS",))

        cur.execute(
            """
            INSERT INTO students (user_id, first_name, middle_name, last_name, roll_no,
                                  branch_id, current_semester_id, image)
            VALUES (%s, 'Mukesh', 'Amaresh', 'Thakur', 'PAS078BEI023', %s, %s, 'mukesh.jpg')
            ON DUPLICATE KEY UPDATE branch_id=VALUES(branch_id), current_semester_id=VALUES(current_semester_id)
            """,
            (student_user_id, branch_id, semester_id),
        )
        student_id = scalar("SELECT student_id AS id FROM students WHERE roll_no=%s", ("PAS078BEI023",))

        cur.execute(
            """
            INSERT INTO enrollments (student_id, subject_id, status) VALUES (%s, %s, 'active')
            ON DUPLICATE KEY UPDATE status='active'
            """,
            (student_id, subject_id),
        )

        cur.execute("SELECT COUNT(*) AS id FROM class_sessions WHERE subject_id=%s", (subject_id,))
        if int(cur.fetchone()["id"]) == 0:
            for i in range(1, DEMO_SESSION_COUNT + 1):
                start = base - timedelta(days=DEMO_SESSION_COUNT - i)
                cur.execute(
                    """
                    INSERT INTO class_sessions (subject_id, teacher_id, session_date, start_time, end_time, topic)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    """,
                    (subject_id, teacher_id, start.date(), start, start + timedelta(hours=1),
                     f"Lecture {i} - Operating Systems"),
                )

        cur.execute(
            "SELECT session_id FROM class_sessions WHERE subject_id=%s ORDER BY start_time, session_id",
            (subject_id,),
        )
        session_ids = [int(r["session_id"]) for r in cur.fetchall()]
        now = datetime.now()
        for i, session_id in enumerate(session_ids, start=1):
            if i <= 18:
                status = AttendanceStatus.PRESENT
            elif i == 19:
                status = AttendanceStatus.LATE
            else:
                status = AttendanceStatus.ABSENT
            cur.execute(
                """
                INSERT INTO attendance_records
                    (student_id, session_id, status, score, scan_time, arrival_time, device_id, marked_by, notes)
                VALUES (%s, %s, %s, %s, %s, %s, 'seed-script', 'MANUAL_SYSTEM', 'seeded-record')
                ON DUPLICATE KEY UPDATE status=VALUES(status), score=VALUES(score)
                """,
                (student_id, session_id, status.value, ATTENDANCE_WEIGHTS[status], now, now),
            )

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo accounts ready (password %s)", DEMO_PASSWORD)


def list_tables(db_config: dict) -> list[str]:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
