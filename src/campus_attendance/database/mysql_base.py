from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from .connection import DatabaseConnection

_DUP_KEY_RE = re.compile(r"for key '(?:[\w]+\.)?([\w]+)'")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit when the block succeeds, rollback otherwise.

    Every statement executed inside one block belongs to one transaction.
    """
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def is_duplicate_key(exc: BaseException) -> bool:
    return isinstance(exc, IntegrityError) and getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def duplicate_key_name(exc: BaseException) -> Optional[str]:
    """Name of the unique index a duplicate-entry error points at.

    MySQL reports e.g. ``Duplicate entry 'x' for key 'students.uq_students_roll_no'``.
    """
    if not is_duplicate_key(exc):
        return None
    m = _DUP_KEY_RE.search(str(getattr(exc, "msg", None) or exc))
    return m.group(1) if m else None
