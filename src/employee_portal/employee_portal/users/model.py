from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: Identity.

    Note: plain data object (no DB access code). Users are never deleted,
    only deactivated.
    """

    user_id: int
    email: str
    full_name: str
    role: Role
    employee_id: Optional[str] = None
    is_active: bool = True
    last_login: Optional[datetime] = None

    def to_profile(self) -> dict:
        return {
            "id": self.user_id,
            "employeeId": self.employee_id,
            "email": self.email,
            "fullName": self.full_name,
            "role": self.role.value,
            "isActive": self.is_active,
            "lastLogin": self.last_login.isoformat() if self.last_login else None,
        }
