from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..active.repository import LiveSessionRepository, SupervisorRepository
from ..activities.repository import ActivityRepository
from ..core.exceptions import NotFoundError
from ..database.transaction import TransactionManager
from ..devices.model import DeviceContext
from ..users.model import Person, Staff
from .model import SupervisorScanResult


class SupervisorAuthenticator:
    """Registers a scanning staff member as supervisor of the device's live session."""

    def __init__(
        self,
        sessions: LiveSessionRepository,
        supervisors: SupervisorRepository,
        activities: ActivityRepository,
        tx: TransactionManager,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._sessions = sessions
        self._supervisors = supervisors
        self._activities = activities
        self._tx = tx
        self._log = logger or logging.getLogger(__name__)

    def authenticate(self, ctx: DeviceContext, staff: Staff, person: Person, *, now: datetime) -> SupervisorScanResult:
        session = self._sessions.find_by_device(ctx.device.id)
        if session is None:
            raise NotFoundError("no active session - start an activity first")

        with self._tx.transaction():
            self._sessions.lock_for_update(session.id)
            active_ids = [a.staff_id for a in self._supervisors.list_for_session(session.id)]
            newly_added = staff.id not in active_ids
            if newly_added:
                self._supervisors.replace_active_supervisors(session.id, active_ids + [staff.id], now=now)

        activity = self._activities.get_group(session.group_id)
        activity_name = activity.name if activity is not None else ""

        self._log.info(
            "[SUPERVISOR] staff %s on session %s via device %s (newly_added=%s)",
            staff.id,
            session.id,
            ctx.device.device_id,
            newly_added,
        )
        return SupervisorScanResult(
            staff_id=staff.id,
            staff_name=person.full_name,
            active_group_id=session.id,
            activity_name=activity_name,
            processed_at=now,
            message=f"Betreuer für {activity_name} angemeldet",
            newly_added=newly_added,
        )
