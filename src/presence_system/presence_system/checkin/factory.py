from __future__ import annotations

from typing import Dict, Iterable

from ..core.enums import CheckinAction
from ..core.exceptions import InternalServerError
from .model import ActionDecision, ScanOutcome
from .strategies.base import ActionStrategy
from .strategies.checked_in_strategy import CheckedInStrategy
from .strategies.checked_out_strategy import CheckedOutStrategy, DailyCheckoutStrategy
from .strategies.pending_strategy import NoActionStrategy, PendingDailyCheckoutStrategy
from .strategies.transferred_strategy import TransferredStrategy


class CheckinActionRegistry:
    """Factory Pattern: map a scan outcome to the strategy that answers it."""

    def __init__(self, strategies: Iterable[ActionStrategy]):
        self._by_action: Dict[CheckinAction, ActionStrategy] = {s.action: s for s in strategies}

    @classmethod
    def default(cls) -> "CheckinActionRegistry":
        return cls(
            [
                CheckedInStrategy(),
                CheckedOutStrategy(),
                TransferredStrategy(),
                DailyCheckoutStrategy(),
                PendingDailyCheckoutStrategy(),
                NoActionStrategy(),
            ]
        )

    def classify(self, outcome: ScanOutcome) -> CheckinAction:
        if outcome.checked_out and outcome.checked_in:
            # Compare ids; room names are only for display.
            if outcome.previous_room_id is not None and outcome.previous_room_id != outcome.room_id:
                return CheckinAction.TRANSFERRED
            return CheckinAction.CHECKED_IN
        if outcome.checked_out:
            return CheckinAction.CHECKED_OUT
        if outcome.checked_in:
            return CheckinAction.CHECKED_IN
        return CheckinAction.NO_ACTION

    def get(self, action: CheckinAction) -> ActionStrategy:
        strategy = self._by_action.get(action)
        if strategy is None:
            raise InternalServerError(f"no strategy registered for action {action.value}")
        return strategy

    def decide(self, outcome: ScanOutcome) -> ActionDecision:
        return self.get(self.classify(outcome)).decide(outcome)
