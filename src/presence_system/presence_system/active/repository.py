from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import LiveSession, SupervisorAssignment, Visit


class LiveSessionRepository(Protocol):
    def find_by_room(self, room_id: int) -> Sequence[LiveSession]:
        """Live sessions of a room, most recently started first (tie: highest id)."""
        raise NotImplementedError

    def find_by_device(self, device_id: int) -> Optional[LiveSession]:
        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[LiveSession]:
        raise NotImplementedError

    def lock_for_update(self, session_id: int) -> Optional[LiveSession]:
        raise NotImplementedError

    def create(
        self,
        *,
        group_id: int,
        room_id: int,
        device_id: Optional[int],
        start_time: datetime,
        created_by: Optional[int],
    ) -> LiveSession:
        raise NotImplementedError

    def update_last_activity(self, session_id: int, when: datetime) -> bool:
        raise NotImplementedError


class VisitRepository(Protocol):
    def get_current_for_student(self, student_id: int) -> Optional[Visit]:
        raise NotImplementedError

    def lock_open_for_student(self, student_id: int) -> Sequence[Visit]:
        """Lock the student row and return its open visits (row-locked) inside the current transaction."""
        raise NotImplementedError

    def count_open_for_session(self, session_id: int) -> int:
        raise NotImplementedError

    def create(self, *, student_id: int, active_group_id: int, entry_time: datetime) -> Visit:
        raise NotImplementedError

    def end_visit(self, visit_id: int, *, exit_time: datetime, sync_attendance: bool = False) -> bool:
        """Close the visit; with ``sync_attendance`` also close the student's attendance for that day."""
        raise NotImplementedError


class SupervisorRepository(Protocol):
    def list_for_session(self, session_id: int) -> Sequence[SupervisorAssignment]:
        """Active (end_date NULL) supervisor assignments of a session."""
        raise NotImplementedError

    def replace_active_supervisors(self, session_id: int, staff_ids: Sequence[int], *, now: datetime) -> None:
        raise NotImplementedError
