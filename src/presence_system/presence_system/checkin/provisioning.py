from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..active.model import LiveSession
from ..active.repository import LiveSessionRepository
from ..activities.model import ActivityGroup
from ..activities.repository import ActivityRepository
from ..core.constants import (
    SCHULHOF_ACTIVITY_NAME,
    SCHULHOF_CATEGORY_DESCRIPTION,
    SCHULHOF_CATEGORY_NAME,
    SCHULHOF_COLOR,
    SCHULHOF_MAX_PARTICIPANTS,
    SCHULHOF_ROOM_CAPACITY,
    SCHULHOF_ROOM_NAME,
)
from ..core.exceptions import InternalServerError, NotFoundError
from ..facilities.model import Room
from ..facilities.repository import RoomRepository
from ..users.model import Staff


class SessionProvisioner:
    """Finds the live session of a room, creating the schoolyard session on demand.

    Only the "Schulhof" room gets a session provisioned; every other room
    needs a session started elsewhere.
    """

    def __init__(
        self,
        sessions: LiveSessionRepository,
        rooms: RoomRepository,
        activities: ActivityRepository,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._sessions = sessions
        self._rooms = rooms
        self._activities = activities
        self._log = logger or logging.getLogger(__name__)

    def resolve_session(
        self,
        room_id: int,
        *,
        staff: Optional[Staff],
        device_id: Optional[int],
        now: datetime,
        room: Optional[Room] = None,
    ) -> LiveSession:
        live = list(self._sessions.find_by_room(room_id))
        if live:
            if len(live) > 1:
                self._log.warning(
                    "[CHECKIN] room %s has %d live sessions, using session %s",
                    room_id,
                    len(live),
                    live[0].id,
                )
            return live[0]

        room = room or self._rooms.get_by_id(room_id)
        if room is None or room.name != SCHULHOF_ROOM_NAME:
            raise NotFoundError("no active groups in specified room")

        return self._provision_schulhof(room, staff=staff, device_id=device_id, now=now)

    def _provision_schulhof(self, room: Room, *, staff: Optional[Staff], device_id: Optional[int], now: datetime) -> LiveSession:
        if staff is None:
            raise InternalServerError("no supervising staff attached to device request")

        category = self._activities.get_or_create_category(
            name=SCHULHOF_CATEGORY_NAME,
            description=SCHULHOF_CATEGORY_DESCRIPTION,
            color=SCHULHOF_COLOR,
        )
        # UNIQUE name: resolves to the scanned room
        room = self._rooms.get_or_create(
            name=SCHULHOF_ROOM_NAME,
            capacity=SCHULHOF_ROOM_CAPACITY,
            category=SCHULHOF_CATEGORY_NAME,
            color=SCHULHOF_COLOR,
        )
        activity = self._ensure_schulhof_activity(room, staff, category.id)

        session = self._sessions.create(
            group_id=activity.id,
            room_id=room.id,
            device_id=device_id,
            start_time=now,
            created_by=staff.id,
        )
        self._log.info(
            "[SCHULHOF] started session %s (activity %s, room %s, device %s)",
            session.id,
            activity.id,
            room.id,
            device_id,
        )
        return session

    def _ensure_schulhof_activity(self, room: Room, staff: Staff, category_id: int) -> ActivityGroup:
        for activity in self._activities.find_groups_by_name(SCHULHOF_ACTIVITY_NAME):
            if activity.name == SCHULHOF_ACTIVITY_NAME:
                return activity

        activity = self._activities.get_or_create_group(
            name=SCHULHOF_ACTIVITY_NAME,
            category_id=category_id,
            max_participants=SCHULHOF_MAX_PARTICIPANTS,
            planned_room_id=room.id,
            created_by=staff.id,
        )
        self._log.info("[SCHULHOF] created activity %s in category %s", activity.id, category_id)
        return activity
