from __future__ import annotations

import pytest
from mysql.connector import errors

from src.employee_portal.employee_portal.core.exceptions import TransientError
from src.employee_portal.employee_portal.database.mysql_base import db_cursor, is_transient


class FakeCursor:
    def __init__(self, conn):
        self._conn = conn

    def execute(self, sql, params=None):
        self._conn.executed.append((sql, params))
        if self._conn.fail_on and sql.startswith(self._conn.fail_on[0]):
            raise self._conn.fail_on[1]

    def close(self):
        if self._conn.dropped:
            raise errors.OperationalError(msg="Lost connection", errno=2013)


class FakeConnection:
    def __init__(self, *, fail_on=None, dropped=False):
        self.fail_on = fail_on
        self.dropped = dropped
        self.executed = []
        self.committed = False
        self.closed = False

    def cursor(self, dictionary=True):
        return FakeCursor(self)

    def commit(self):
        self.committed = True

    def rollback(self):
        if self.dropped:
            raise errors.OperationalError(msg="Commands out of sync", errno=2055)

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self, conn=None, *, timeout_seconds=5, connect_error=None):
        self._conn = conn
        self.timeout_seconds = timeout_seconds
        self._connect_error = connect_error

    def connect(self):
        if self._connect_error:
            raise self._connect_error
        return self._conn


def test_session_deadlines_cover_reads_and_lock_waits():
    conn = FakeConnection()

    with db_cursor(FakeConnectionFactory(conn, timeout_seconds=3)) as (_, cur):
        cur.execute("UPDATE attendance_records SET work_hours = 1")

    assert ("SET SESSION MAX_EXECUTION_TIME=%s", (3000,)) in conn.executed
    assert ("SET SESSION innodb_lock_wait_timeout=%s", (3,)) in conn.executed
    assert conn.committed
    assert conn.closed


def test_lost_connection_maps_to_transient_even_if_rollback_fails():
    conn = FakeConnection(fail_on=("SELECT", errors.OperationalError(msg="Lost connection", errno=2013)), dropped=True)

    with pytest.raises(TransientError):
        with db_cursor(FakeConnectionFactory(conn)) as (_, cur):
            cur.execute("SELECT 1")

    assert not conn.committed
    assert conn.closed


def test_lock_wait_timeout_maps_to_transient():
    conn = FakeConnection(fail_on=("UPDATE", errors.DatabaseError(msg="Lock wait timeout", errno=1205)))

    with pytest.raises(TransientError):
        with db_cursor(FakeConnectionFactory(conn)) as (_, cur):
            cur.execute("UPDATE otp_codes SET attempts = attempts + 1")


def test_non_transient_errors_propagate_unchanged():
    conn = FakeConnection(fail_on=("SELEC", errors.ProgrammingError(msg="syntax", errno=1064)), dropped=True)

    with pytest.raises(errors.ProgrammingError):
        with db_cursor(FakeConnectionFactory(conn)) as (_, cur):
            cur.execute("SELEC 1")


def test_connect_failure_is_transient():
    factory = FakeConnectionFactory(connect_error=errors.InterfaceError(msg="Can't connect", errno=2003))

    with pytest.raises(TransientError):
        with db_cursor(factory):
            pass


def test_is_transient_by_errno():
    assert is_transient(errors.DatabaseError(msg="deadlock", errno=1213))
    assert not is_transient(errors.IntegrityError(msg="dup", errno=1062))
