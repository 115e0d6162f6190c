from __future__ import annotations

from abc import ABC, abstractmethod

from ...core.enums import CheckinAction
from ..model import ActionDecision, ScanOutcome


class ActionStrategy(ABC):
    """Strategy Pattern: encapsulate the response of one scan outcome."""

    action: CheckinAction

    @abstractmethod
    def message(self, outcome: ScanOutcome) -> str:
        raise NotImplementedError

    def decide(self, outcome: ScanOutcome) -> ActionDecision:
        return ActionDecision(action=self.action, message=self.message(outcome))
