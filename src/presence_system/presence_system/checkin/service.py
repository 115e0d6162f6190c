from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Tuple, Union

from ..active.model import Visit
from ..active.repository import LiveSessionRepository
from ..common.datetime_utils import now_local
from ..core.enums import CheckinAction, DailyCheckoutDestination
from ..core.exceptions import DomainError, InternalServerError, InvalidRequestError, NotFoundError
from ..database.transaction import TransactionManager
from ..devices.model import DeviceContext
from ..facilities.model import Room
from ..facilities.repository import RoomRepository
from ..users.model import Person, Student
from ..users.service import IdentityService
from .capacity import CapacityGuard
from .factory import CheckinActionRegistry
from .model import (
    ActionDecision,
    CheckinRequest,
    CheckinResult,
    CurrentVisit,
    DailyCheckoutRequest,
    ScanOutcome,
    SupervisorScanResult,
)
from .policy import DailyCheckoutPolicy
from .provisioning import SessionProvisioner
from .supervisors import SupervisorAuthenticator
from .visits import VisitTracker

ON_THE_WAY_MESSAGE = "Viel Spaß!"


class CheckinService:
    """Use case: process one RFID scan from a device.

    A scan ends in exactly one outcome: check-in, check-out, room transfer,
    daily checkout, a pending daily checkout prompt, or supervisor
    authentication for staff tags.
    """

    def __init__(
        self,
        identity: IdentityService,
        tracker: VisitTracker,
        capacity: CapacityGuard,
        provisioner: SessionProvisioner,
        supervisors: SupervisorAuthenticator,
        policy: DailyCheckoutPolicy,
        sessions: LiveSessionRepository,
        rooms: RoomRepository,
        tx: TransactionManager,
        *,
        registry: Optional[CheckinActionRegistry] = None,
        confirmation_enabled: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        self._identity = identity
        self._tracker = tracker
        self._capacity = capacity
        self._provisioner = provisioner
        self._supervisors = supervisors
        self._policy = policy
        self._sessions = sessions
        self._rooms = rooms
        self._tx = tx
        self._registry = registry or CheckinActionRegistry.default()
        self._confirmation_enabled = bool(confirmation_enabled)
        self._log = logger or logging.getLogger(__name__)

    def process_scan(
        self,
        ctx: DeviceContext,
        request: CheckinRequest,
        *,
        now: Optional[datetime] = None,
    ) -> Union[CheckinResult, SupervisorScanResult]:
        now = now or now_local()
        try:
            identity = self._identity.resolve_tag(request.student_rfid)
            if not identity.is_student:
                return self._supervisors.authenticate(ctx, identity.staff, identity.person, now=now)
            return self._process_student(ctx, request, identity.person, identity.student, now)
        except DomainError:
            raise
        except Exception as e:
            self._log.exception(
                "[CHECKIN] scan failed device=%s rfid=%s room=%s",
                ctx.device.device_id,
                request.student_rfid,
                request.room_id,
            )
            raise InternalServerError("internal error while processing scan") from e

    def confirm_daily_checkout(
        self,
        ctx: DeviceContext,
        request: DailyCheckoutRequest,
        *,
        now: Optional[datetime] = None,
    ) -> CheckinResult:
        """Second step of the daily checkout: the student answered the "going home?" prompt."""
        now = now or now_local()
        try:
            identity = self._identity.resolve_tag(request.student_rfid)
            if not identity.is_student:
                raise NotFoundError("RFID tag not assigned to a student")
            student, person = identity.student, identity.person

            current = self._tracker.current_visit(student.id)
            if current is None:
                raise NotFoundError("student has no active visit")

            outcome = ScanOutcome(
                first_name=person.first_name,
                checked_out=True,
                previous_room_id=current.room_id,
                previous_room_name=current.room_name,
            )
            home = request.destination == DailyCheckoutDestination.HOME
            if not self._tracker.checkout(current, now=now, sync_attendance=home):
                raise NotFoundError("student has no active visit")
            if home:
                decision = self._registry.get(CheckinAction.CHECKED_OUT_DAILY).decide(outcome)
            else:
                decision = ActionDecision(action=CheckinAction.CHECKED_OUT, message=ON_THE_WAY_MESSAGE)

            self._log.info(
                "[CHECKIN] daily checkout confirmed student=%s destination=%s device=%s",
                student.id,
                request.destination.value,
                ctx.device.device_id,
            )
            return CheckinResult(
                student_id=student.id,
                student_name=person.full_name,
                action=decision.action,
                visit_id=current.visit.id,
                room_name=current.room_name,
                processed_at=now,
                message=decision.message,
                daily_checkout_available=self._policy.is_available(student, now),
                active_students=self._count_active_students(current.room_id, ctx.device.id),
            )
        except DomainError:
            raise
        except Exception as e:
            self._log.exception(
                "[CHECKIN] daily checkout failed device=%s rfid=%s", ctx.device.device_id, request.student_rfid
            )
            raise InternalServerError("internal error while processing daily checkout") from e

    def _process_student(
        self,
        ctx: DeviceContext,
        request: CheckinRequest,
        person: Person,
        student: Student,
        now: datetime,
    ) -> CheckinResult:
        current = self._tracker.current_visit(student.id)

        if current is not None and self._confirmation_enabled and self._policy.is_pending(student, current.room_id, now):
            return self._pending(ctx, person, student, current, now)

        if current is None and request.room_id is None:
            raise InvalidRequestError("room_id is required for check-in")

        skip_checkin = (
            current is not None and request.room_id is not None and request.room_id == current.room_id
        )
        will_check_in = request.room_id is not None and not skip_checkin
        # Only a plain checkout (no check-in follows) can become a daily checkout.
        escalate = (
            current is not None
            and not will_check_in
            and self._policy.should_escalate(CheckinAction.CHECKED_OUT, student, current.room_id, now)
        )

        checked_out = current is not None and self._tracker.checkout(current, now=now, sync_attendance=escalate)

        new_visit: Optional[Visit] = None
        room_name = ""
        if will_check_in:
            new_visit, room = self._check_in(ctx, student, request.room_id, now)
            room_name = room.name
        elif skip_checkin:
            self._log.info("[CHECKIN] student %s rescanned in room %s, not checking in again", student.id, request.room_id)
            room_name = current.room_name or self._room_name(request.room_id)

        outcome = ScanOutcome(
            first_name=person.first_name,
            checked_out=checked_out,
            checked_in=new_visit is not None,
            previous_room_id=current.room_id if checked_out else None,
            previous_room_name=current.room_name if checked_out else "",
            room_id=request.room_id if new_visit is not None else None,
            room_name=room_name,
        )
        decision = self._registry.decide(outcome)
        if decision.action == CheckinAction.NO_ACTION:
            self._log.warning("[CHECKIN] no action determined for student %s", student.id)
        if decision.action == CheckinAction.CHECKED_OUT and escalate:
            decision = self._registry.get(CheckinAction.CHECKED_OUT_DAILY).decide(outcome)

        if request.room_id is not None:
            self._refresh_session_activity(request.room_id, ctx.device.id, now)

        if new_visit is not None:
            visit_id = new_visit.id
        else:
            visit_id = current.visit.id if current is not None else None

        if not room_name and current is not None:
            room_name = current.room_name

        relevant_room_id = request.room_id if request.room_id is not None else (current.room_id if current else None)

        self._log.info(
            "[CHECKIN] device=%s student=%s action=%s visit=%s room=%s",
            ctx.device.device_id,
            student.id,
            decision.action.value,
            visit_id,
            room_name,
        )
        return CheckinResult(
            student_id=student.id,
            student_name=person.full_name,
            action=decision.action,
            visit_id=visit_id,
            room_name=room_name,
            processed_at=now,
            message=decision.message,
            daily_checkout_available=self._policy.is_available(student, now),
            previous_room=outcome.previous_room_name if decision.action == CheckinAction.TRANSFERRED else None,
            active_students=self._count_active_students(relevant_room_id, ctx.device.id),
        )

    def _pending(
        self,
        ctx: DeviceContext,
        person: Person,
        student: Student,
        current: CurrentVisit,
        now: datetime,
    ) -> CheckinResult:
        self._log.info(
            "[CHECKIN] pending daily checkout for student %s in room %s (device %s)",
            student.id,
            current.room_id,
            ctx.device.device_id,
        )
        outcome = ScanOutcome(
            first_name=person.first_name,
            previous_room_id=current.room_id,
            previous_room_name=current.room_name,
        )
        decision = self._registry.get(CheckinAction.PENDING_DAILY_CHECKOUT).decide(outcome)
        return CheckinResult(
            student_id=student.id,
            student_name=person.full_name,
            action=decision.action,
            visit_id=current.visit.id,
            room_name=current.room_name,
            processed_at=now,
            message=decision.message,
            daily_checkout_available=True,
        )

    def _check_in(self, ctx: DeviceContext, student: Student, room_id: int, now: datetime) -> Tuple[Visit, Room]:
        # Lock order is room, then student. The room lock serializes check-ins into the
        # same room, the student lock serializes two scans of the same tag.
        with self._tx.transaction():
            room = self._rooms.lock_for_update(room_id)
            if room is None:
                raise NotFoundError("room not found")
            self._tracker.ensure_no_open_visit(student.id)
            self._capacity.check_room(room)
            session = self._provisioner.resolve_session(
                room_id,
                staff=ctx.staff,
                device_id=ctx.device.id,
                now=now,
                room=room,
            )
            self._capacity.check_activity(session)
            visit = self._tracker.checkin(student.id, session, now=now)
        return visit, room

    def _room_name(self, room_id: int) -> str:
        room = self._rooms.get_by_id(room_id)
        return room.name if room is not None else ""

    def _refresh_session_activity(self, room_id: int, device_pk: int, now: datetime) -> None:
        try:
            for session in self._sessions.find_by_room(room_id):
                if session.device_id == device_pk:
                    self._sessions.update_last_activity(session.id, now)
                    return
        except Exception as e:
            self._log.warning("[CHECKIN] could not refresh session activity room=%s device=%s: %s", room_id, device_pk, e)

    def _count_active_students(self, room_id: Optional[int], device_pk: int) -> Optional[int]:
        if room_id is None:
            return None
        try:
            sessions = list(self._sessions.find_by_room(room_id))
            for session in sessions:
                if session.device_id == device_pk:
                    return self._capacity.activity_occupancy(session.id)
            return sum(self._capacity.activity_occupancy(s.id) for s in sessions)
        except Exception as e:
            self._log.warning("[CHECKIN] could not count active students in room %s: %s", room_id, e)
            return None
