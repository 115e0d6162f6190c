from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Person
from .repository import PersonRepository


def _to_person(row: dict) -> Person:
    return Person(
        id=int(row["id"]),
        first_name=row["first_name"],
        last_name=row["last_name"],
        tag_id=row.get("tag_id"),
    )


class MySQLPersonRepository(PersonRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_tag(self, tag_id: str) -> Optional[Person]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, first_name, last_name, tag_id FROM persons WHERE tag_id=%s",
                (tag_id,),
            )
            row = fetchone(cur)
            return _to_person(row) if row else None
