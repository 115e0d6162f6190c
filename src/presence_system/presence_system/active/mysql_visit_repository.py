from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import ActiveVisitError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Visit
from .repository import VisitRepository

_VISIT_COLUMNS = "id, student_id, active_group_id, entry_time, exit_time"


def _to_visit(row: dict) -> Visit:
    return Visit(
        id=int(row["id"]),
        student_id=int(row["student_id"]),
        active_group_id=int(row["active_group_id"]),
        entry_time=row["entry_time"],
        exit_time=row.get("exit_time"),
    )


class MySQLVisitRepository(VisitRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_current_for_student(self, student_id: int) -> Optional[Visit]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_VISIT_COLUMNS}
                FROM visits
                WHERE student_id=%s AND exit_time IS NULL
                ORDER BY entry_time DESC, id DESC
                LIMIT 1
                """,
                (student_id,),
            )
            row = fetchone(cur)
            return _to_visit(row) if row else None

    def lock_open_for_student(self, student_id: int) -> List[Visit]:
        with db_cursor(self._conn_factory) as (_, cur):
            # The student row lock also covers the case where no visit row exists yet.
            cur.execute("SELECT id FROM students WHERE id=%s FOR UPDATE", (student_id,))
            fetchall(cur)
            cur.execute(
                f"SELECT {_VISIT_COLUMNS} FROM visits WHERE student_id=%s AND exit_time IS NULL FOR UPDATE",
                (student_id,),
            )
            return [_to_visit(row) for row in fetchall(cur)]

    def count_open_for_session(self, session_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM visits WHERE active_group_id=%s AND exit_time IS NULL",
                (session_id,),
            )
            row = fetchone(cur)
            return int(row["n"]) if row else 0

    def create(self, *, student_id: int, active_group_id: int, entry_time: datetime) -> Visit:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    "INSERT INTO visits (student_id, active_group_id, entry_time) VALUES (%s, %s, %s)",
                    (student_id, active_group_id, entry_time),
                )
            except IntegrityError as e:
                if e.errno == errorcode.ER_DUP_ENTRY:
                    raise ActiveVisitError("student already has an active visit") from e
                raise
            return Visit(
                id=int(cur.lastrowid),
                student_id=student_id,
                active_group_id=active_group_id,
                entry_time=entry_time,
            )

    def end_visit(self, visit_id: int, *, exit_time: datetime, sync_attendance: bool = False) -> bool:
        # Both updates share one connection, so they commit together.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE visits SET exit_time=%s WHERE id=%s AND exit_time IS NULL",
                (exit_time, visit_id),
            )
            closed = cur.rowcount > 0
            if closed and sync_attendance:
                cur.execute(
                    """
                    UPDATE attendance a
                    JOIN visits v ON v.student_id = a.student_id
                    SET a.check_out_time=%s
                    WHERE v.id=%s AND a.date=%s AND a.check_out_time IS NULL
                    """,
                    (exit_time, visit_id, exit_time.date()),
                )
            return closed
