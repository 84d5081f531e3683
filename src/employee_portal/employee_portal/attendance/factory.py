from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time

from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, now: datetime, today: date, cutoff: time) -> AttendanceStrategy:
        if now <= datetime.combine(today, cutoff):
            return PresentStrategy()
        return LateStrategy()
