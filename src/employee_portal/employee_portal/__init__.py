"""Employee Portal core package.

Passwordless (one-time code) authentication, JWT session lifecycle and the
daily attendance state machine, organized by feature modules (users, auth,
attendance) with a thin Flask controller layer over service/repository layers.
"""
