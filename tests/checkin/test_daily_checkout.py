from __future__ import annotations

import pytest

from src.presence_system.presence_system.checkin.model import CheckinRequest, DailyCheckoutRequest
from src.presence_system.presence_system.checkin.policy import DailyCheckoutPolicy
from src.presence_system.presence_system.core.enums import CheckinAction, DailyCheckoutDestination
from src.presence_system.presence_system.core.exceptions import NotFoundError


@pytest.fixture
def afternoon(fixed_now):
    return fixed_now.replace(hour=15, minute=30)


@pytest.fixture
def home(world):
    """Student Mia checked into her home group room at 14:00."""
    room = world.add_room("Gruppenraum Igel")
    world.start_session(room, device_id=world.device.id)
    group = world.add_home_group(room)
    student = world.add_student("Mia", "TAG-MIA", group_id=group.id)
    world.service.process_scan(world.ctx, CheckinRequest("TAG-MIA", room_id=room.id), now=world.now.replace(hour=14))
    return room, student


def test_policy_requires_cutoff_and_home_room(world, fixed_now):
    room = world.add_room("A")
    other = world.add_room("B")
    group = world.add_home_group(room)
    student = world.add_student("Mia", "TAG-MIA", group_id=group.id)
    policy = DailyCheckoutPolicy(world.repos.groups, cutoff="15:00")

    assert policy.qualifies(student, room.id, fixed_now.replace(hour=15, minute=0)) is True
    assert policy.qualifies(student, room.id, fixed_now.replace(hour=14, minute=59)) is False
    assert policy.qualifies(student, other.id, fixed_now.replace(hour=16)) is False
    assert policy.should_escalate(CheckinAction.CHECKED_IN, student, room.id, fixed_now.replace(hour=16)) is False


def test_policy_without_home_group_never_qualifies(world, fixed_now):
    room = world.add_room("A")
    student = world.add_student("Mia", "TAG-MIA")
    policy = DailyCheckoutPolicy(world.repos.groups, cutoff="15:00")

    assert policy.qualifies(student, room.id, fixed_now.replace(hour=17)) is False
    assert policy.is_available(student, fixed_now.replace(hour=17)) is False


def test_invalid_cutoff_disables_daily_checkout(world, fixed_now):
    room = world.add_room("A")
    group = world.add_home_group(room)
    student = world.add_student("Mia", "TAG-MIA", group_id=group.id)
    policy = DailyCheckoutPolicy(world.repos.groups, cutoff="25:00")

    assert policy.enabled is False
    assert policy.qualifies(student, room.id, fixed_now.replace(hour=23)) is False


def test_scan_in_home_room_after_cutoff_asks_for_confirmation(world, home, afternoon):
    room, student = home

    result = world.service.process_scan(world.ctx, CheckinRequest("TAG-MIA"), now=afternoon)

    assert result.action == CheckinAction.PENDING_DAILY_CHECKOUT
    assert result.message == "Gehst du nach Hause?"
    assert result.room_name == room.name
    assert result.daily_checkout_available is True
    assert len(world.repos.visits.open_visits(student.id)) == 1


def test_escalates_to_daily_checkout_without_confirmation(world, home, afternoon):
    room, student = home
    world.build(confirmation_enabled=False)

    result = world.service.process_scan(world.ctx, CheckinRequest("TAG-MIA"), now=afternoon)

    assert result.action == CheckinAction.CHECKED_OUT_DAILY
    assert result.message == "Tschüss Mia!"
    assert world.repos.visits.synced == [result.visit_id]
    assert world.repos.visits.open_visits(student.id) == []


def test_checkout_before_cutoff_is_plain(world, home, fixed_now):
    _room, _student = home
    world.build(confirmation_enabled=False)

    result = world.service.process_scan(world.ctx, CheckinRequest("TAG-MIA"), now=fixed_now.replace(hour=14, minute=30))

    assert result.action == CheckinAction.CHECKED_OUT
    assert world.repos.visits.synced == []


def test_transfer_out_of_home_room_is_not_a_daily_checkout(world, home, afternoon):
    _room, _student = home
    world.build(confirmation_enabled=False)
    yard = world.add_room("Schulhof")

    result = world.service.process_scan(world.ctx, CheckinRequest("TAG-MIA", room_id=yard.id), now=afternoon)

    assert result.action == CheckinAction.TRANSFERRED
    assert world.repos.visits.synced == []


def test_confirm_going_home_syncs_attendance(world, home, afternoon):
    room, student = home

    result = world.service.confirm_daily_checkout(
        world.ctx,
        DailyCheckoutRequest("TAG-MIA", DailyCheckoutDestination.HOME),
        now=afternoon,
    )

    assert result.action == CheckinAction.CHECKED_OUT_DAILY
    assert result.message == "Tschüss Mia!"
    assert result.room_name == room.name
    assert world.repos.visits.synced == [result.visit_id]
    assert world.repos.visits.open_visits(student.id) == []


def test_confirm_on_the_way_is_plain_checkout(world, home, afternoon):
    _room, student = home

    result = world.service.confirm_daily_checkout(
        world.ctx,
        DailyCheckoutRequest("TAG-MIA", DailyCheckoutDestination.ON_THE_WAY),
        now=afternoon,
    )

    assert result.action == CheckinAction.CHECKED_OUT
    assert result.message == "Viel Spaß!"
    assert world.repos.visits.synced == []
    assert world.repos.visits.open_visits(student.id) == []


def test_confirm_without_open_visit_is_not_found(world, afternoon):
    world.add_student("Ben", "TAG-BEN")

    with pytest.raises(NotFoundError, match="no active visit"):
        world.service.confirm_daily_checkout(
            world.ctx, DailyCheckoutRequest("TAG-BEN", DailyCheckoutDestination.HOME), now=afternoon
        )


def test_confirm_rejects_staff_tags(world, afternoon):
    world.add_staff("Jonas", "TAG-JONAS")

    with pytest.raises(NotFoundError, match="not assigned to a student"):
        world.service.confirm_daily_checkout(
            world.ctx, DailyCheckoutRequest("TAG-JONAS", DailyCheckoutDestination.HOME), now=afternoon
        )


def test_confirm_after_visit_closed_elsewhere_is_not_found(world, home, afternoon, monkeypatch):
    monkeypatch.setattr(world.repos.visits, "end_visit", lambda *_a, **_kw: False)

    with pytest.raises(NotFoundError, match="no active visit"):
        world.service.confirm_daily_checkout(
            world.ctx, DailyCheckoutRequest("TAG-MIA", DailyCheckoutDestination.HOME), now=afternoon
        )

    assert world.repos.visits.synced == []
