from __future__ import annotations

from datetime import date, datetime, time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Check-in on or before the cutoff."""

    def decide_checkin(self, *, now: datetime, today: date, cutoff: time) -> StatusDecision:
        early_minutes = int((datetime.combine(today, cutoff) - now).total_seconds() / 60)
        return StatusDecision(status=AttendanceStatus.PRESENT, note=f"{early_minutes} min before cutoff")
