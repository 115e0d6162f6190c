from __future__ import annotations

from ...core.enums import CheckinAction
from ..model import ScanOutcome
from .base import ActionStrategy


class TransferredStrategy(ActionStrategy):
    action = CheckinAction.TRANSFERRED

    def message(self, outcome: ScanOutcome) -> str:
        return f"Gewechselt von {outcome.previous_room_name} zu {outcome.room_name}!"
