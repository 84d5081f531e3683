from __future__ import annotations

from datetime import date, datetime, time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in; the note says by how much."""

    def decide_checkin(self, *, now: datetime, today: date, cutoff: time) -> StatusDecision:
        late_minutes = int((now - datetime.combine(today, cutoff)).total_seconds() / 60)
        return StatusDecision(status=AttendanceStatus.LATE, note=f"{late_minutes} min late")
