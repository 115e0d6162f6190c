from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..active.model import LiveSession, Visit
from ..active.repository import LiveSessionRepository, VisitRepository
from ..core.exceptions import ActiveVisitError
from ..facilities.repository import RoomRepository
from .model import CurrentVisit


class VisitTracker:
    """Reads and closes a student's open visit."""

    def __init__(
        self,
        visits: VisitRepository,
        sessions: LiveSessionRepository,
        rooms: RoomRepository,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._visits = visits
        self._sessions = sessions
        self._rooms = rooms
        self._log = logger or logging.getLogger(__name__)

    def current_visit(self, student_id: int) -> Optional[CurrentVisit]:
        try:
            visit = self._visits.get_current_for_student(student_id)
            if visit is None or not visit.is_open:
                return None

            session = self._sessions.get_by_id(visit.active_group_id)
            room = self._rooms.get_by_id(session.room_id) if session is not None else None
            return CurrentVisit(visit=visit, session=session, room=room)
        except Exception as e:
            self._log.warning("[CHECKIN] could not load current visit for student %s: %s", student_id, e)
            return None

    def checkout(self, current: CurrentVisit, *, now: datetime, sync_attendance: bool = False) -> bool:
        """Close the visit. False when it was already closed, e.g. by a concurrent scan."""
        closed = self._visits.end_visit(current.visit.id, exit_time=now, sync_attendance=sync_attendance)
        if not closed:
            self._log.warning(
                "[CHECKIN] visit %s of student %s was already closed", current.visit.id, current.visit.student_id
            )
            return False
        self._log.info(
            "[CHECKIN] student %s left room %s (visit %s, attendance_sync=%s)",
            current.visit.student_id,
            current.room_id,
            current.visit.id,
            sync_attendance,
        )
        return True

    def ensure_no_open_visit(self, student_id: int) -> None:
        # Must run inside the check-in transaction so the locks hold until the insert.
        if self._visits.lock_open_for_student(student_id):
            raise ActiveVisitError("student already has an active visit")

    def checkin(self, student_id: int, session: LiveSession, *, now: datetime) -> Visit:
        visit = self._visits.create(student_id=student_id, active_group_id=session.id, entry_time=now)
        self._log.info(
            "[CHECKIN] student %s entered room %s (session %s, visit %s)",
            student_id,
            session.room_id,
            session.id,
            visit.id,
        )
        return visit
