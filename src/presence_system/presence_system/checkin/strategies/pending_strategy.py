from __future__ import annotations

from ...core.enums import CheckinAction
from ..model import ScanOutcome
from .base import ActionStrategy


class PendingDailyCheckoutStrategy(ActionStrategy):
    """Nothing is written yet; the device asks the student to confirm going home."""

    action = CheckinAction.PENDING_DAILY_CHECKOUT

    def message(self, outcome: ScanOutcome) -> str:
        return "Gehst du nach Hause?"


class NoActionStrategy(ActionStrategy):
    action = CheckinAction.NO_ACTION

    def message(self, outcome: ScanOutcome) -> str:
        return "Keine Aktion durchgeführt"
