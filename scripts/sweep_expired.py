"""Delete expired one-time codes and expired/revoked refresh tokens.

Meant to run periodically (cron, systemd timer).
"""

from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.employee_portal.employee_portal.container import build_container


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=getattr(settings, "LOG_LEVEL", "INFO"))

    container = build_container(settings=settings)
    codes = container.otp_authenticator.sweep_expired()
    tokens = container.token_service.sweep_expired()
    print(f"OK: removed {codes} expired OTP codes, {tokens} refresh tokens")


if __name__ == "__main__":
    main()
