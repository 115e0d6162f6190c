from src.presence_system.presence_system.checkin.factory import CheckinActionRegistry
from src.presence_system.presence_system.checkin.model import ScanOutcome
from src.presence_system.presence_system.checkin.strategies.checked_out_strategy import DailyCheckoutStrategy
from src.presence_system.presence_system.core.enums import CheckinAction


def test_out_and_in_to_other_room_is_transfer():
    registry = CheckinActionRegistry.default()
    outcome = ScanOutcome(
        first_name="Mia",
        checked_out=True,
        checked_in=True,
        previous_room_id=1,
        previous_room_name="A",
        room_id=2,
        room_name="B",
    )

    decision = registry.decide(outcome)

    assert decision.action == CheckinAction.TRANSFERRED
    assert decision.message == "Gewechselt von A zu B!"


def test_out_and_in_without_known_previous_room_is_checkin():
    registry = CheckinActionRegistry.default()
    outcome = ScanOutcome(first_name="Mia", checked_out=True, checked_in=True, room_id=2, room_name="B")

    assert registry.classify(outcome) == CheckinAction.CHECKED_IN


def test_single_moves():
    registry = CheckinActionRegistry.default()

    assert registry.classify(ScanOutcome(first_name="Mia", checked_out=True)) == CheckinAction.CHECKED_OUT
    assert registry.classify(ScanOutcome(first_name="Mia", checked_in=True)) == CheckinAction.CHECKED_IN


def test_nothing_happened_is_no_action():
    registry = CheckinActionRegistry.default()

    decision = registry.decide(ScanOutcome(first_name="Mia"))

    assert decision.action == CheckinAction.NO_ACTION
    assert decision.message == "Keine Aktion durchgeführt"


def test_daily_checkout_strategy_says_goodbye():
    registry = CheckinActionRegistry.default()

    strategy = registry.get(CheckinAction.CHECKED_OUT_DAILY)

    assert isinstance(strategy, DailyCheckoutStrategy)
    assert strategy.decide(ScanOutcome(first_name="Mia")).message == "Tschüss Mia!"
