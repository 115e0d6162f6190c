from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Staff
from .repository import StaffRepository


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, person_id FROM staff WHERE id=%s", (staff_id,))
            row = fetchone(cur)
            return Staff(id=int(row["id"]), person_id=int(row["person_id"])) if row else None

    def get_by_person_id(self, person_id: int) -> Optional[Staff]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, person_id FROM staff WHERE person_id=%s", (person_id,))
            row = fetchone(cur)
            return Staff(id=int(row["id"]), person_id=int(row["person_id"])) if row else None
