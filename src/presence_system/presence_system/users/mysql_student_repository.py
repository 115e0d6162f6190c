from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Student
from .repository import StudentRepository


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_person_id(self, person_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT id, person_id, school_class, group_id FROM students WHERE person_id=%s",
                (person_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Student(
                id=int(row["id"]),
                person_id=int(row["person_id"]),
                school_class=row.get("school_class") or "",
                group_id=row.get("group_id"),
            )
