from __future__ import annotations

import uuid
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor); commit on success, rollback on any error."""

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


def new_id() -> str:
    return uuid.uuid4().hex


def in_clause(values: Sequence[Any]) -> Tuple[str, Tuple[Any, ...]]:
    """Build "IN (%s, %s, ...)" with its parameters; values must be non-empty."""

    return "IN (" + ", ".join(["%s"] * len(values)) + ")", tuple(values)


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Coerce a TIME column into ``datetime.time``.

    mysql-connector returns TIME as ``timedelta``; other drivers and string
    columns give ``time`` or "HH:MM[:SS]".
    """

    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        minutes, seconds = divmod(int(value.total_seconds()) % 86400, 60)
        hours, minutes = divmod(minutes, 60)
        return time(hours, minutes, seconds)

    if isinstance(value, str):
        parts = [int(p) for p in value.strip().split(":") if p]
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        return time(*parts[:3])

    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
