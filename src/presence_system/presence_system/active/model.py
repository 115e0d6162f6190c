from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class LiveSession:
    """A running instance of an activity in a room (``active_groups`` row).

    ``end_time`` None means the session is live.
    """

    id: int
    group_id: int
    room_id: int
    start_time: datetime
    last_activity: datetime
    device_id: Optional[int] = None
    end_time: Optional[datetime] = None
    created_by: Optional[int] = None

    @property
    def is_live(self) -> bool:
        return self.end_time is None


@dataclass(frozen=True)
class Visit:
    id: int
    student_id: int
    active_group_id: int
    entry_time: datetime
    exit_time: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.exit_time is None


@dataclass(frozen=True)
class SupervisorAssignment:
    id: int
    staff_id: int
    active_group_id: int
    start_date: datetime
    end_date: Optional[datetime] = None
