"""Bearer-token authentication for incoming requests.

``authenticate_header`` is the pure core: header in, claims out, no store
access. The decorators wrap it for Flask views and stash the claims on
``flask.g.current_user``.
"""

from __future__ import annotations

from datetime import datetime
from functools import wraps
from typing import Optional

from flask import g, request

from ..common.responses import error_response
from ..core.constants import ROLE_RANK
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError
from .model import TokenClaims
from .token_service import TokenService

BEARER_PREFIX = "Bearer "


def extract_bearer_token(header: Optional[str]) -> str:
    if not header or not header.startswith(BEARER_PREFIX):
        raise AuthenticationError("No authentication token provided")
    token = header[len(BEARER_PREFIX):].strip()
    if not token:
        raise AuthenticationError("No authentication token provided")
    return token


def authenticate_header(header: Optional[str], tokens: TokenService, *, now: Optional[datetime] = None) -> TokenClaims:
    return tokens.verify_access_token(extract_bearer_token(header), now=now)


def has_role(claims: TokenClaims, required_role: Role) -> bool:
    """Capability check: ADMIN covers HR, HR covers EMPLOYEE."""
    return ROLE_RANK[claims.role.value] >= ROLE_RANK[required_role.value]


def current_claims() -> TokenClaims:
    return g.current_user


class SessionMiddleware:
    def __init__(self, tokens: TokenService):
        self._tokens = tokens

    def login_required(self, view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.current_user = authenticate_header(request.headers.get("Authorization"), self._tokens)
            except AuthenticationError as e:
                return error_response(e)
            return view(*args, **kwargs)

        return wrapper

    def role_required(self, required_role: Role):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                if not has_role(current_claims(), required_role):
                    return error_response(AuthorizationError())
                return view(*args, **kwargs)

            return self.login_required(wrapper)

        return decorator
