from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, upsert_returning_id
from .model import ActivityCategory, ActivityGroup
from .repository import ActivityRepository


_SELECT_GROUP = """
    SELECT id, name, category_id, max_participants, is_open, planned_room_id, created_by
    FROM activity_groups
"""


def _to_group(row: dict) -> ActivityGroup:
    return ActivityGroup(
        id=int(row["id"]),
        name=row["name"],
        category_id=int(row["category_id"]),
        max_participants=int(row["max_participants"]),
        is_open=bool(row.get("is_open", True)),
        planned_room_id=row.get("planned_room_id"),
        created_by=row.get("created_by"),
    )


class MySQLActivityRepository(ActivityRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_group(self, group_id: int) -> Optional[ActivityGroup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT_GROUP} WHERE id=%s", (group_id,))
            row = fetchone(cur)
            return _to_group(row) if row else None

    def find_groups_by_name(self, name: str) -> Sequence[ActivityGroup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT_GROUP} WHERE name=%s ORDER BY id", (name,))
            return [_to_group(r) for r in fetchall(cur)]

    def get_or_create_category(self, *, name: str, description: Optional[str], color: Optional[str]) -> ActivityCategory:
        with db_cursor(self._conn_factory) as (_, cur):
            category_id = upsert_returning_id(
                cur,
                """
                INSERT INTO activity_categories (name, description, color) VALUES (%s, %s, %s)
                ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id)
                """,
                (name, description, color),
            )
            cur.execute("SELECT id, name, description, color FROM activity_categories WHERE id=%s", (category_id,))
            row = fetchone(cur)
            return ActivityCategory(
                id=int(row["id"]),
                name=row["name"],
                description=row.get("description"),
                color=row.get("color"),
            )

    def get_or_create_group(
        self,
        *,
        name: str,
        category_id: int,
        max_participants: int,
        planned_room_id: Optional[int],
        created_by: Optional[int],
    ) -> ActivityGroup:
        with db_cursor(self._conn_factory) as (_, cur):
            group_id = upsert_returning_id(
                cur,
                """
                INSERT INTO activity_groups (name, category_id, max_participants, is_open, planned_room_id, created_by)
                VALUES (%s, %s, %s, 1, %s, %s)
                ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id)
                """,
                (name, category_id, max_participants, planned_room_id, created_by),
            )
            cur.execute(f"{_SELECT_GROUP} WHERE id=%s", (group_id,))
            return _to_group(fetchone(cur))
