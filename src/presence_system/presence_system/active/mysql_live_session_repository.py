from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LiveSession
from .repository import LiveSessionRepository


_SELECT = """
    SELECT id, group_id, room_id, device_id, start_time, last_activity, end_time, created_by
    FROM active_groups
"""


def _to_session(row: dict) -> LiveSession:
    return LiveSession(
        id=int(row["id"]),
        group_id=int(row["group_id"]),
        room_id=int(row["room_id"]),
        device_id=row.get("device_id"),
        start_time=row["start_time"],
        last_activity=row["last_activity"],
        end_time=row.get("end_time"),
        created_by=row.get("created_by"),
    )


class MySQLLiveSessionRepository(LiveSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_room(self, room_id: int) -> Sequence[LiveSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE room_id=%s AND end_time IS NULL ORDER BY start_time DESC, id DESC",
                (room_id,),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def find_by_device(self, device_id: int) -> Optional[LiveSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE device_id=%s AND end_time IS NULL ORDER BY start_time DESC, id DESC LIMIT 1",
                (device_id,),
            )
            row = fetchone(cur)
            return _to_session(row) if row else None

    def get_by_id(self, session_id: int) -> Optional[LiveSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id=%s", (session_id,))
            row = fetchone(cur)
            return _to_session(row) if row else None

    def lock_for_update(self, session_id: int) -> Optional[LiveSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id=%s FOR UPDATE", (session_id,))
            row = fetchone(cur)
            return _to_session(row) if row else None

    def create(
        self,
        *,
        group_id: int,
        room_id: int,
        device_id: Optional[int],
        start_time: datetime,
        created_by: Optional[int],
    ) -> LiveSession:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO active_groups (group_id, room_id, device_id, start_time, last_activity, created_by)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (group_id, room_id, device_id, start_time, start_time, created_by),
            )
            return LiveSession(
                id=int(cur.lastrowid),
                group_id=group_id,
                room_id=room_id,
                device_id=device_id,
                start_time=start_time,
                last_activity=start_time,
                created_by=created_by,
            )

    def update_last_activity(self, session_id: int, when: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE active_groups SET last_activity=%s WHERE id=%s AND end_time IS NULL",
                (when, session_id),
            )
            return cur.rowcount > 0
