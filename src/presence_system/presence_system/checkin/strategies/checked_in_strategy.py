from __future__ import annotations

from ...core.enums import CheckinAction
from ..model import ScanOutcome
from .base import ActionStrategy


class CheckedInStrategy(ActionStrategy):
    action = CheckinAction.CHECKED_IN

    def message(self, outcome: ScanOutcome) -> str:
        return f"Hallo {outcome.first_name}!"
