from __future__ import annotations

import pytest
from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError, OperationalError

from campus_attendance.database.mysql_base import db_cursor, duplicate_key_name, is_duplicate_key
from fakes import StubConnectionFactory, StubCursor, duplicate_entry


def test_duplicate_key_name_reads_mysql8_message():
    err = duplicate_entry("9811111111", "users.uq_users_phone")

    assert is_duplicate_key(err) is True
    assert duplicate_key_name(err) == "uq_users_phone"


def test_duplicate_key_name_reads_message_without_table_prefix():
    assert duplicate_key_name(duplicate_entry("PAS078BEI023", "uq_students_roll_no")) == "uq_students_roll_no"


def test_other_errors_are_not_duplicates():
    fk = IntegrityError(msg="Cannot add or update a child row", errno=errorcode.ER_NO_REFERENCED_ROW_2)
    down = OperationalError(msg="Lost connection", errno=errorcode.CR_SERVER_LOST)

    assert is_duplicate_key(fk) is False
    assert duplicate_key_name(fk) is None
    assert duplicate_key_name(down) is None


def test_db_cursor_commits_on_success():
    factory = StubConnectionFactory(StubCursor())

    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT 1")

    assert factory.connection.committed is True
    assert factory.connection.rolled_back is False
    assert factory.connection.closed is True


def test_db_cursor_rolls_back_on_error():
    factory = StubConnectionFactory(StubCursor(error=duplicate_entry("x", "users.uq_users_email")))

    with pytest.raises(IntegrityError):
        with db_cursor(factory) as (_, cur):
            cur.execute("INSERT INTO users(email) VALUES('x')")

    assert factory.connection.committed is False
    assert factory.connection.rolled_back is True
    assert factory.connection.closed is True
