from __future__ import annotations

import secrets

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.constants import DEFAULT_HASH_METHOD, OTP_LENGTH


class SecretGenerator:
    """Generates one-time codes and hashes them for storage.

    Hashing uses werkzeug's salted PBKDF2; the iteration count in
    ``hash_method`` (e.g. ``pbkdf2:sha256:600000``) is the cost factor.
    """

    def __init__(self, *, hash_method: str = DEFAULT_HASH_METHOD, length: int = OTP_LENGTH):
        self._hash_method = hash_method
        self._length = int(length)

    def generate_code(self) -> str:
        return f"{secrets.randbelow(10 ** self._length):0{self._length}d}"

    def hash(self, secret: str) -> str:
        return generate_password_hash(secret, method=self._hash_method)

    def verify(self, secret: str, digest: str) -> bool:
        try:
            return check_password_hash(digest, secret)
        except (ValueError, TypeError):
            # e.g. corrupted or placeholder digests
            return False
