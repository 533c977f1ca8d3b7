from __future__ import annotations

from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
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


def in_clause(values) -> str:
    """Placeholder list for `IN (...)`; callers must pass a non-empty sequence."""
    return ", ".join(["%s"] * len(values))


def normalize_mysql_date(value: Any) -> Optional[date]:
    """Normalize MySQL DATE values across connector implementations.

    mysql-connector can return DATE as:
    - datetime.date
    - datetime.datetime (DATETIME columns read back through views)
    - string (e.g. '2024-01-10')
    """

    if value is None:
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, (bytes, bytearray)):
        value = value.decode()

    if isinstance(value, str):
        return date.fromisoformat(value.strip()[:10])

    raise TypeError(f"Unsupported MySQL DATE value type: {type(value)!r}")


def normalize_mysql_datetime(value: Any) -> Optional[datetime]:
    if value is None:
        return None

    if isinstance(value, datetime):
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    if isinstance(value, (bytes, bytearray)):
        value = value.decode()

    if isinstance(value, str):
        return datetime.fromisoformat(value.strip())

    raise TypeError(f"Unsupported MySQL DATETIME value type: {type(value)!r}")
