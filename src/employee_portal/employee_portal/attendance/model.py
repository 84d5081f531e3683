from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one user's attendance for one calendar day.

    Invariant: check_out_time >= check_in_time, and work_hours is set exactly
    when check_out_time is.
    """

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: datetime
    status: AttendanceStatus
    check_out_time: Optional[datetime] = None
    work_hours: Optional[float] = None

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "userId": self.user_id,
            "date": self.work_date.isoformat(),
            "checkInTime": self.check_in_time.isoformat(),
            "checkOutTime": self.check_out_time.isoformat() if self.check_out_time else None,
            "workHours": self.work_hours,
            "status": self.status.value,
        }
