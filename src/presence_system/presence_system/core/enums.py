from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Error taxonomy shared by services; the HTTP layer maps each kind to a status once."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    INTERNAL = "INTERNAL"


class ScanAction(str, Enum):
    """Action sent by the device. Kept for API compatibility, the engine decides the outcome itself."""

    CHECKIN = "checkin"
    CHECKOUT = "checkout"


class CheckinAction(str, Enum):
    """Outcome of one processed scan."""

    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    TRANSFERRED = "transferred"
    CHECKED_OUT_DAILY = "checked_out_daily"
    PENDING_DAILY_CHECKOUT = "pending_daily_checkout"
    SUPERVISOR_AUTHENTICATED = "supervisor_authenticated"
    NO_ACTION = "no_action"


class DailyCheckoutDestination(str, Enum):
    """Answer to the "going home?" prompt on the device."""

    HOME = "zuhause"
    ON_THE_WAY = "unterwegs"


class DeviceStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"
    OFFLINE = "offline"


class CapacityKind(str, Enum):
    ROOM = "room"
    ACTIVITY = "activity"
