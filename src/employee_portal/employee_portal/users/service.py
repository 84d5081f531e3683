from __future__ import annotations

import logging

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Use case: read and administer identities."""

    def __init__(self, users: UserRepository):
        self._users = users

    def get_profile(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def set_active(self, *, actor_role: Role, user_id: int, is_active: bool) -> User:
        if actor_role not in (Role.ADMIN, Role.HR):
            raise AuthorizationError()

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        if user.role == Role.ADMIN and actor_role != Role.ADMIN:
            raise AuthorizationError("Only an admin can change an admin account")

        self._users.set_active(user_id, is_active=is_active)
        logger.info("User %s active=%s", user_id, is_active)
        return self.get_profile(user_id)
