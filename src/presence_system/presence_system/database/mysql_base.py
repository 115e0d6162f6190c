from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    shared = conn_factory.current_transaction()
    if shared is not None:
        # commit/rollback belong to the surrounding transaction()
        cur = shared.cursor(dictionary=dictionary)
        try:
            yield shared, cur
        finally:
            cur.close()
        return

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


def upsert_returning_id(cur, sql: str, params: tuple) -> int:
    """Run an ``INSERT ... ON DUPLICATE KEY UPDATE id=LAST_INSERT_ID(id)``.

    ``lastrowid`` is the new row's id or, on a unique-key hit, the existing one.
    """
    cur.execute(sql, params)
    return int(cur.lastrowid)
