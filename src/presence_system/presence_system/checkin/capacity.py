from __future__ import annotations

from ..active.model import LiveSession
from ..active.repository import LiveSessionRepository, VisitRepository
from ..activities.repository import ActivityRepository
from ..core.enums import CapacityKind
from ..core.exceptions import CapacityExceededError
from ..facilities.model import Room


class CapacityGuard:
    """Room and activity occupancy checks.

    Callers hold the room row lock while checking and inserting the visit.
    """

    def __init__(self, visits: VisitRepository, sessions: LiveSessionRepository, activities: ActivityRepository):
        self._visits = visits
        self._sessions = sessions
        self._activities = activities

    def room_occupancy(self, room_id: int) -> int:
        return sum(self._visits.count_open_for_session(s.id) for s in self._sessions.find_by_room(room_id))

    def activity_occupancy(self, session_id: int) -> int:
        return self._visits.count_open_for_session(session_id)

    def check_room(self, room: Room) -> None:
        if room.capacity is None:
            return
        current = self.room_occupancy(room.id)
        if current >= room.capacity:
            raise CapacityExceededError(
                capacity_kind=CapacityKind.ROOM,
                resource_id=room.id,
                name=room.name,
                current=current,
                limit=room.capacity,
            )

    def check_activity(self, session: LiveSession) -> None:
        activity = self._activities.get_group(session.group_id)
        if activity is None:
            return
        current = self.activity_occupancy(session.id)
        if current >= activity.max_participants:
            raise CapacityExceededError(
                capacity_kind=CapacityKind.ACTIVITY,
                resource_id=activity.id,
                name=activity.name,
                current=current,
                limit=activity.max_participants,
            )
