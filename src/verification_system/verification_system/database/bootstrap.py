from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)


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
        database=str(db_config.get("database", "verification_db")),
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


def _strip_create_db_and_use(sql: str) -> str:
    # schema.sql names a database; the configured one wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside quoted strings."""
    buf: list[str] = []
    quote = None
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue
        if ch == "\\":
            buf.append(ch)
            escape = True
            continue
        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
            buf.append(ch)
            continue
        if ch == ";" and quote is None:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> int:
    target = _as_target(db_config)
    sql = _strip_line_comments(_strip_create_db_and_use(Path(path).read_text(encoding="utf-8")))

    conn = _connect(target)
    count = 0
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("Applied %s (%d statements)", Path(schema_path).name, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("Applied %s (%d statements)", Path(seed_path).name, count)


DEMO_USERS = (
    # email, password, name, first, last, role, user_type, verified
    ("admin@example.com", "admin123", "Admin Demo", "Admin", "Demo", "admin", "Employer", True),
    ("employee@example.com", "employee123", "Maria Santos", "Maria", "Santos", "user", "Employee", False),
    ("agency@example.com", "agency123", "Agency Demo", "Agency", "Demo", "partner", "Agency", False),
)


def ensure_demo_users(db_config: dict) -> None:
    """Create or refresh the demo accounts with freshly hashed passwords."""
    target = _as_target(db_config)
    conn = _connect(target)
    try:
        cur = conn.cursor(dictionary=True)
        for email, password, name, first, last, role, user_type, verified in DEMO_USERS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE users
                    SET name=%s, first_name=%s, last_name=%s, password_hash=%s,
                        role=%s, user_type=%s, is_active=1
                    WHERE email=%s
                    """,
                    (name, first, last, password_hash, role, user_type, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (email, name, first_name, last_name, password_hash, role, user_type, user_verified)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
                    """,
                    (email, name, first, last, password_hash, role, user_type, int(verified)),
                )
        conn.commit()
    finally:
        conn.close()
    logger.info("Demo users ready (%d)", len(DEMO_USERS))


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(_as_target(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
