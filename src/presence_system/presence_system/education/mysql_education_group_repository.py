from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import EducationGroup
from .repository import EducationGroupRepository


class MySQLEducationGroupRepository(EducationGroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, group_id: int) -> Optional[EducationGroup]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, name, room_id FROM education_groups WHERE id=%s", (group_id,))
            row = fetchone(cur)
            if not row:
                return None
            return EducationGroup(id=int(row["id"]), name=row["name"], room_id=row.get("room_id"))
