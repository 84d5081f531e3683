from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

import mysql.connector


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "employee_portal")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


# Quoted strings and comments are single tokens so a ";" inside them never ends a statement.
_SQL_TOKEN = re.compile(
    r"""
    '(?:[^'\\]|\\.)*'      # single-quoted literal
    | "(?:[^"\\]|\\.)*"    # double-quoted literal
    | `[^`]*`              # quoted identifier
    | --[^\n]*             # line comment
    | ;
    | [^'"`;-]+
    | .
    """,
    re.VERBOSE | re.DOTALL,
)
# The target database comes from DB_CONFIG, not from the file.
_DATABASE_SELECTOR = re.compile(r"(?i)^(CREATE\s+DATABASE|USE)\b")


def split_sql_statements(sql: str) -> Iterator[str]:
    """Yield the statements of a schema file, without comments or the trailing ";"."""
    parts: list[str] = []
    for token in _SQL_TOKEN.findall(sql):
        if token.startswith("--"):
            continue
        if token != ";":
            parts.append(token)
            continue
        statement = "".join(parts).strip()
        parts = []
        if statement:
            yield statement
    tail = "".join(parts).strip()
    if tail:
        yield tail


def schema_statements(sql: str) -> list[str]:
    return [stmt for stmt in split_sql_statements(sql) if not _DATABASE_SELECTOR.match(stmt)]


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    statements = schema_statements(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


DEMO_USERS = (
    # (employee_id, email, full_name, role)
    ("EMP-0001", "admin@example.com", "Admin Demo", "ADMIN"),
    ("EMP-0002", "hr@example.com", "HR Demo", "HR"),
    ("EMP-0003", "employee@example.com", "Employee Demo", "EMPLOYEE"),
)


def ensure_demo_users(db_config: dict) -> None:
    """Upsert demo identities (re-activating them if they were deactivated)."""

    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        for employee_id, email, full_name, role in DEMO_USERS:
            cur.execute(
                """
                INSERT INTO users (employee_id, email, full_name, role, is_active)
                VALUES (%s, %s, %s, %s, 1)
                ON DUPLICATE KEY UPDATE full_name=VALUES(full_name), role=VALUES(role), is_active=1
                """,
                (employee_id, email, full_name, role),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
