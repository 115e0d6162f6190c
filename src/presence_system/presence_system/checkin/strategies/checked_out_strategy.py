from __future__ import annotations

from ...core.enums import CheckinAction
from ..model import ScanOutcome
from .base import ActionStrategy


class CheckedOutStrategy(ActionStrategy):
    action = CheckinAction.CHECKED_OUT

    def message(self, outcome: ScanOutcome) -> str:
        return f"Tschüss {outcome.first_name}!"


class DailyCheckoutStrategy(CheckedOutStrategy):
    """Checkout from the home room after the cutoff: the student goes home."""

    action = CheckinAction.CHECKED_OUT_DAILY
