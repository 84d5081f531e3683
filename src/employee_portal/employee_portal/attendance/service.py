from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, time
from typing import Optional

from ..common.datetime_utils import hours_between, now_local
from ..core.constants import DEFAULT_LATE_CUTOFF
from ..core.exceptions import AlreadyCheckedIn, AlreadyCheckedOut, NotCheckedIn
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Per-user, per-day state machine: NotCheckedIn -> CheckedIn -> CheckedOut.

    Concurrent calls for the same day are settled by the repository
    (unique (user, day) insert, conditional check-out update).
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        strategy_factory: Optional[AttendanceStrategyFactory] = None,
        late_cutoff: time = DEFAULT_LATE_CUTOFF,
    ):
        self._attendance = attendance
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._late_cutoff = late_cutoff

    def check_in(self, user_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        if self._attendance.get_for_user_and_date(user_id, today):
            raise AlreadyCheckedIn()

        strategy = self._factory.for_checkin(now=now, today=today, cutoff=self._late_cutoff)
        decision = strategy.decide_checkin(now=now, today=today, cutoff=self._late_cutoff)

        record = self._attendance.create_checkin(
            user_id=user_id,
            work_date=today,
            check_in_time=now,
            status=decision.status,
        )
        if record is None:
            # Lost the insert race to a concurrent check-in.
            raise AlreadyCheckedIn()

        logger.info(
            "User %s checked in at %s (%s, %s)", user_id, now.isoformat(), decision.status.value, decision.note
        )
        return record

    def check_out(self, user_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()

        record = self._attendance.get_for_user_and_date(user_id, now.date())
        if not record:
            raise NotCheckedIn()
        if record.is_checked_out:
            raise AlreadyCheckedOut()

        check_out_time = max(now, record.check_in_time)
        work_hours = hours_between(record.check_in_time, check_out_time)
        if not self._attendance.complete_checkout(
            attendance_id=record.attendance_id,
            check_out_time=check_out_time,
            work_hours=work_hours,
        ):
            raise AlreadyCheckedOut()

        logger.info("User %s checked out after %.2f hours", user_id, work_hours)
        return replace(record, check_out_time=check_out_time, work_hours=work_hours)

    def get_today(self, user_id: int, *, now: Optional[datetime] = None) -> Optional[AttendanceRecord]:
        """Today's record, or None if the user has not checked in yet."""
        now = now or now_local()
        return self._attendance.get_for_user_and_date(user_id, now.date())
