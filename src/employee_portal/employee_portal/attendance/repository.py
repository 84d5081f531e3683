from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    """Store for attendance records, unique on (user_id, work_date)."""

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
    ) -> Optional[AttendanceRecord]:
        """Insert if absent. Returns None when a record for the day already exists."""

        raise NotImplementedError

    def complete_checkout(self, *, attendance_id: int, check_out_time: datetime, work_hours: float) -> bool:
        """Set check-out once. Returns False if it was already set."""

        raise NotImplementedError
