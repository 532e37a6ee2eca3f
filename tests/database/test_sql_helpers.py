from __future__ import annotations

from src.verification_system.verification_system.core.enums import VerificationStatus
from src.verification_system.verification_system.database.bootstrap import (
    _strip_create_db_and_use,
    _strip_line_comments,
    iter_sql_statements,
)
from src.verification_system.verification_system.database.mysql_base import set_clause


def test_split_ignores_semicolons_in_strings():
    sql = "INSERT INTO t VALUES ('a;b'); INSERT INTO t VALUES ('it\\'s');\nSELECT 1"
    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        "INSERT INTO t VALUES ('it\\'s')",
        "SELECT 1",
    ]


def test_configured_database_wins():
    sql = "CREATE DATABASE IF NOT EXISTS other;\nUSE other;\n-- users\nCREATE TABLE users (id INT);"
    cleaned = _strip_line_comments(_strip_create_db_and_use(sql))
    assert list(iter_sql_statements(cleaned)) == ["CREATE TABLE users (id INT)"]


def test_set_clause_unwraps_enums():
    sql, params = set_clause({"status": VerificationStatus.VERIFIED, "verified_by": 1})
    assert sql == "status=%s, verified_by=%s"
    assert params == ["verified", 1]
