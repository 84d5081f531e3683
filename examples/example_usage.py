"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the login flow and attendance rules live in services.
With EMAIL_BACKEND=console the one-time code shows up in the log.
"""

import importlib
import logging

from config import get_settings_module

from src.employee_portal.employee_portal.container import build_container


def main():
    logging.basicConfig(level=logging.INFO)
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings=settings)

    email = "employee@example.com"
    expires_at = container.auth_service.initiate_login(email)
    print(f"Code sent to {email}, valid until {expires_at:%H:%M}")

    code = input("Code: ").strip()
    result = container.auth_service.verify_otp_and_login(email, code)
    print("Logged in as", result.user.full_name)

    claims = container.token_service.verify_access_token(result.tokens.access_token)
    print("Today:", container.attendance_service.get_today(claims.user_id))


if __name__ == "__main__":
    main()
