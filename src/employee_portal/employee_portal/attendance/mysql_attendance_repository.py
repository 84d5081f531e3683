from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

import mysql.connector

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        check_out_time=r.get("check_out_time"),
        work_hours=float(r["work_hours"]) if r.get("work_hours") is not None else None,
        status=AttendanceStatus(r["status"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT attendance_id, user_id, work_date, check_in_time, check_out_time, work_hours, status
                FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                """,
                (user_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> Optional[AttendanceRecord]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(user_id, work_date, check_in_time, status)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (user_id, work_date, check_in_time, status.value),
                )
                attendance_id = int(cur.lastrowid)
        except mysql.connector.Error as e:
            if is_duplicate_key(e):
                return None
            raise

        return AttendanceRecord(
            attendance_id=attendance_id,
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            status=status,
        )

    def complete_checkout(self, *, attendance_id: int, check_out_time: datetime, work_hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, work_hours=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, work_hours, attendance_id),
            )
            return cur.rowcount > 0
