from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import is_at_or_after, parse_checkout_time
from ..core.constants import DEFAULT_DAILY_CHECKOUT_TIME
from ..core.enums import CheckinAction
from ..education.repository import EducationGroupRepository
from ..users.model import Student


class DailyCheckoutPolicy:
    """Decides when leaving a room means going home for the day.

    A checkout counts as a daily checkout when the student leaves the room of
    their home education group at or after the configured cutoff time.
    """

    def __init__(
        self,
        groups: EducationGroupRepository,
        *,
        cutoff: Optional[str] = DEFAULT_DAILY_CHECKOUT_TIME,
        logger: Optional[logging.Logger] = None,
    ):
        self._groups = groups
        self._log = logger or logging.getLogger(__name__)
        try:
            self._cutoff = parse_checkout_time(cutoff if cutoff is not None else DEFAULT_DAILY_CHECKOUT_TIME)
        except ValueError as e:
            self._log.warning("[CHECKIN] daily checkout disabled: %s", e)
            self._cutoff = None

    @property
    def enabled(self) -> bool:
        return self._cutoff is not None

    def cutoff_reached(self, now: datetime) -> bool:
        return self._cutoff is not None and is_at_or_after(now, self._cutoff)

    def _home_room_id(self, student: Student) -> Optional[int]:
        if student.group_id is None:
            return None
        try:
            group = self._groups.get_by_id(student.group_id)
        except Exception as e:
            self._log.warning("[CHECKIN] education group %s lookup failed: %s", student.group_id, e)
            return None
        return group.room_id if group is not None else None

    def qualifies(self, student: Student, room_id: Optional[int], now: datetime) -> bool:
        """True when ``room_id`` is the student's home room and the cutoff has passed."""
        if room_id is None or not self.cutoff_reached(now):
            return False
        home_room_id = self._home_room_id(student)
        return home_room_id is not None and home_room_id == room_id

    def is_pending(self, student: Student, current_room_id: Optional[int], now: datetime) -> bool:
        return self.qualifies(student, current_room_id, now)

    def should_escalate(self, action: CheckinAction, student: Student, left_room_id: Optional[int], now: datetime) -> bool:
        if action != CheckinAction.CHECKED_OUT:
            return False
        return self.qualifies(student, left_room_id, now)

    def is_available(self, student: Student, now: datetime) -> bool:
        if student.group_id is None or not self.cutoff_reached(now):
            return False
        try:
            return self._groups.get_by_id(student.group_id) is not None
        except Exception as e:
            self._log.warning("[CHECKIN] education group %s lookup failed: %s", student.group_id, e)
            return False
