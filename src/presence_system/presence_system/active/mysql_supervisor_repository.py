from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import SupervisorAssignment
from .repository import SupervisorRepository


class MySQLSupervisorRepository(SupervisorRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_session(self, session_id: int) -> Sequence[SupervisorAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, staff_id, active_group_id, start_date, end_date
                FROM group_supervisors
                WHERE active_group_id=%s AND end_date IS NULL
                ORDER BY id
                """,
                (session_id,),
            )
            return [
                SupervisorAssignment(
                    id=int(r["id"]),
                    staff_id=int(r["staff_id"]),
                    active_group_id=int(r["active_group_id"]),
                    start_date=r["start_date"],
                    end_date=r.get("end_date"),
                )
                for r in fetchall(cur)
            ]

    def replace_active_supervisors(self, session_id: int, staff_ids: Sequence[int], *, now: datetime) -> None:
        """End assignments whose staff is no longer listed and add the missing ones.

        Assignments of staff that stay listed are left untouched.
        """
        wanted = list(dict.fromkeys(int(s) for s in staff_ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT staff_id FROM group_supervisors WHERE active_group_id=%s AND end_date IS NULL",
                (session_id,),
            )
            current = {int(r["staff_id"]) for r in fetchall(cur)}

            for staff_id in current - set(wanted):
                cur.execute(
                    """
                    UPDATE group_supervisors SET end_date=%s
                    WHERE active_group_id=%s AND staff_id=%s AND end_date IS NULL
                    """,
                    (now, session_id, staff_id),
                )

            for staff_id in wanted:
                if staff_id in current:
                    continue
                cur.execute(
                    "INSERT INTO group_supervisors (staff_id, active_group_id, start_date) VALUES (%s, %s, %s)",
                    (staff_id, session_id, now),
                )
