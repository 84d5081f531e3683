from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for authorization checks."""

    ADMIN = "ADMIN"
    HR = "HR"
    EMPLOYEE = "EMPLOYEE"


class AttendanceStatus(str, Enum):
    """Normalized attendance status stored in the database."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    ABSENT = "ABSENT"
