from __future__ import annotations

from contextlib import contextmanager
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success, roll back on any error.

    Everything executed on one cursor commits together, which is how a
    status change and its audit row stay atomic.
    """
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def set_clause(fields: Mapping[str, Any]) -> tuple[str, list[Any]]:
    """Build "a=%s, b=%s" plus params from a column->value mapping."""
    cols = [f"{name}=%s" for name in fields]
    return ", ".join(cols), [db_value(v) for v in fields.values()]
