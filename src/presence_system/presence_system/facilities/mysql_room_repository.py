from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, upsert_returning_id
from .model import Room
from .repository import RoomRepository


_SELECT = "SELECT id, name, capacity, category, color FROM rooms"


def _to_room(row: dict) -> Room:
    capacity = row.get("capacity")
    return Room(
        id=int(row["id"]),
        name=row["name"],
        capacity=int(capacity) if capacity is not None else None,
        category=row.get("category"),
        color=row.get("color"),
    )


class MySQLRoomRepository(RoomRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, room_id: int) -> Optional[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id=%s", (room_id,))
            row = fetchone(cur)
            return _to_room(row) if row else None

    def get_by_name(self, name: str) -> Optional[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE name=%s", (name,))
            row = fetchone(cur)
            return _to_room(row) if row else None

    def lock_for_update(self, room_id: int) -> Optional[Room]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE id=%s FOR UPDATE", (room_id,))
            row = fetchone(cur)
            return _to_room(row) if row else None

    def get_or_create(self, *, name: str, capacity: Optional[int], category: Optional[str], color: Optional[str]) -> Room:
        with db_cursor(self._conn_factory) as (_, cur):
            room_id = upsert_returning_id(
                cur,
                """
                INSERT INTO rooms (name, capacity, category, color) VALUES (%s, %s, %s, %s)
                ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id)
                """,
                (name, capacity, category, color),
            )
            cur.execute(f"{_SELECT} WHERE id=%s", (room_id,))
            return _to_room(fetchone(cur))
