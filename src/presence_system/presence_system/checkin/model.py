from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..active.model import LiveSession, Visit
from ..common.validators import optional_choice, optional_int, require_non_empty
from ..core.enums import CheckinAction, DailyCheckoutDestination, ScanAction
from ..core.exceptions import InvalidRequestError
from ..facilities.model import Room


def _require_object(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise InvalidRequestError("invalid JSON body")
    return payload


@dataclass(frozen=True)
class CheckinRequest:
    """Validated body of ``POST /api/iot/checkin``."""

    student_rfid: str
    action: Optional[ScanAction] = None
    room_id: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Any) -> "CheckinRequest":
        data = _require_object(payload)
        rfid = require_non_empty(data.get("student_rfid"), "student_rfid")
        action = optional_choice(data.get("action"), "action", {a.value for a in ScanAction})
        room_id = optional_int(data.get("room_id"), "room_id")
        return cls(
            student_rfid=rfid,
            action=ScanAction(action) if action else None,
            room_id=room_id,
        )


@dataclass(frozen=True)
class DailyCheckoutRequest:
    student_rfid: str
    destination: DailyCheckoutDestination

    @classmethod
    def from_payload(cls, payload: Any) -> "DailyCheckoutRequest":
        data = _require_object(payload)
        rfid = require_non_empty(data.get("student_rfid"), "student_rfid")
        destination = data.get("destination")
        if not destination:
            raise InvalidRequestError("destination is required")
        try:
            return cls(student_rfid=rfid, destination=DailyCheckoutDestination(destination))
        except ValueError:
            raise InvalidRequestError("destination must be 'zuhause' or 'unterwegs'") from None


@dataclass(frozen=True)
class CurrentVisit:
    """An open visit with its live session and room attached (either may be missing)."""

    visit: Visit
    session: Optional[LiveSession] = None
    room: Optional[Room] = None

    @property
    def room_id(self) -> Optional[int]:
        if self.session is not None:
            return self.session.room_id
        return self.room.id if self.room is not None else None

    @property
    def room_name(self) -> str:
        return self.room.name if self.room is not None else ""


@dataclass(frozen=True)
class ScanOutcome:
    """What happened to the visits during one scan; input of the action registry."""

    first_name: str
    checked_out: bool = False
    checked_in: bool = False
    previous_room_id: Optional[int] = None
    previous_room_name: str = ""
    room_id: Optional[int] = None
    room_name: str = ""


@dataclass(frozen=True)
class ActionDecision:
    action: CheckinAction
    message: str


@dataclass(frozen=True)
class CheckinResult:
    student_id: int
    student_name: str
    action: CheckinAction
    visit_id: Optional[int]
    room_name: str
    processed_at: datetime
    message: str
    daily_checkout_available: bool = False
    previous_room: Optional[str] = None
    active_students: Optional[int] = None

    def to_dict(self) -> dict:
        out = {
            "student_id": self.student_id,
            "student_name": self.student_name,
            "action": self.action.value,
            "visit_id": self.visit_id,
            "room_name": self.room_name,
            "processed_at": self.processed_at.isoformat(),
            "message": self.message,
            "status": "success",
            "daily_checkout_available": self.daily_checkout_available,
        }
        if self.action == CheckinAction.TRANSFERRED and self.previous_room is not None:
            out["previous_room"] = self.previous_room
        if self.active_students is not None:
            out["active_students"] = self.active_students
        return out


@dataclass(frozen=True)
class SupervisorScanResult:
    staff_id: int
    staff_name: str
    active_group_id: int
    activity_name: str
    processed_at: datetime
    message: str
    newly_added: bool = False
    action: CheckinAction = CheckinAction.SUPERVISOR_AUTHENTICATED

    def to_dict(self) -> dict:
        return {
            "staff_id": self.staff_id,
            "staff_name": self.staff_name,
            "action": self.action.value,
            "active_group_id": self.active_group_id,
            "activity_name": self.activity_name,
            "processed_at": self.processed_at.isoformat(),
            "message": self.message,
            "status": "success",
        }
