from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import TransientError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

_TRANSIENT_ERRNOS = {
    1205,  # ER_LOCK_WAIT_TIMEOUT
    1213,  # ER_LOCK_DEADLOCK
    3024,  # ER_QUERY_TIMEOUT (MAX_EXECUTION_TIME exceeded)
    2002,  # CR_CONNECTION_ERROR
    2003,  # CR_CONN_HOST_ERROR
    2006,  # CR_SERVER_GONE_ERROR
    2013,  # CR_SERVER_LOST
}


def is_transient(exc: mysql.connector.Error) -> bool:
    if isinstance(exc, (mysql.connector.errors.OperationalError, mysql.connector.errors.InterfaceError)):
        return True
    return getattr(exc, "errno", None) in _TRANSIENT_ERRNOS


def is_duplicate_key(exc: mysql.connector.Error) -> bool:
    return isinstance(exc, mysql.connector.errors.IntegrityError) and exc.errno == errorcode.ER_DUP_ENTRY


def _quietly(action, what: str) -> None:
    # Cleanup on a dropped connection (e.g. errno 2013) fails too.
    try:
        action()
    except mysql.connector.Error as e:
        logger.debug("%s failed: %s", what, e)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True) -> Iterator[tuple[Any, Any]]:
    """Open a connection + cursor for one unit of work.

    Commits on success, rolls back on error. Connector failures that a retry
    can fix are re-raised as TransientError; everything else propagates as-is.

    The deadline covers reads (MAX_EXECUTION_TIME) and row-lock waits of
    writes (innodb_lock_wait_timeout).
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        logger.warning("Database connection failed: %s", e)
        raise TransientError("Database unavailable") from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            timeout = max(1, int(conn_factory.timeout_seconds))
            cur.execute("SET SESSION MAX_EXECUTION_TIME=%s", (timeout * 1000,))
            cur.execute("SET SESSION innodb_lock_wait_timeout=%s", (timeout,))
            yield conn, cur
            conn.commit()
        finally:
            _quietly(cur.close, "Cursor close")
    except mysql.connector.Error as e:
        _quietly(conn.rollback, "Rollback")
        if is_transient(e):
            logger.warning("Transient database error: %s", e)
            raise TransientError("Database operation timed out") from e
        raise
    except Exception:
        _quietly(conn.rollback, "Rollback")
        raise
    finally:
        _quietly(conn.close, "Connection close")


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def ping(conn_factory: DatabaseConnection) -> None:
    with db_cursor(conn_factory, dictionary=False) as (_, cur):
        cur.execute("SELECT 1")
        cur.fetchall()
