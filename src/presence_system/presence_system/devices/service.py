from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional

from werkzeug.security import check_password_hash

from ..active.repository import LiveSessionRepository
from ..common.datetime_utils import now_local, to_iso
from ..core.constants import DEFAULT_DEVICE_ONLINE_MINUTES
from ..core.exceptions import DeviceUnauthorizedError
from ..users.repository import StaffRepository
from .model import Device, DeviceContext, PingResult
from .repository import DeviceRepository


class DeviceService:
    """Use case: authenticate RFID readers and report their liveness."""

    def __init__(
        self,
        devices: DeviceRepository,
        sessions: LiveSessionRepository,
        staff: StaffRepository,
        *,
        online_minutes: int = DEFAULT_DEVICE_ONLINE_MINUTES,
        logger: Optional[logging.Logger] = None,
    ):
        self._devices = devices
        self._sessions = sessions
        self._staff = staff
        self._online_minutes = int(online_minutes)
        self._log = logger or logging.getLogger(__name__)

    def authenticate(self, device_id: str, api_key: str, *, staff_id: Optional[str] = None) -> DeviceContext:
        if not device_id or not api_key:
            raise DeviceUnauthorizedError("device authentication required")

        device = self._devices.get_by_device_id(device_id)
        if not device or not check_password_hash(device.api_key_hash, api_key):
            self._log.warning("[DEVICE] rejected credentials for device %s", device_id)
            raise DeviceUnauthorizedError("invalid device credentials")
        if not device.is_active:
            raise DeviceUnauthorizedError("device is not active")

        staff = None
        if staff_id:
            try:
                staff_pk = int(staff_id)
            except ValueError:
                raise DeviceUnauthorizedError("invalid staff id") from None
            staff = self._staff.get_by_id(staff_pk)
            if staff is None:
                raise DeviceUnauthorizedError("staff not found")

        return DeviceContext(device=device, staff=staff)

    def ping(self, device: Device, *, now: Optional[datetime] = None) -> PingResult:
        now = now or now_local()
        self._devices.update_last_seen(device.id, now)
        device = replace(device, last_seen=now)

        session_active = False
        session = self._sessions.find_by_device(device.id)
        if session is not None:
            session_active = True
            try:
                self._sessions.update_last_activity(session.id, now)
            except Exception as e:
                self._log.warning(
                    "[DEVICE] failed to refresh session %s for device %s: %s", session.id, device.device_id, e
                )

        return PingResult(
            device_id=device.device_id,
            device_name=device.name,
            status=device.status,
            last_seen=now,
            is_online=device.is_online(now, self._online_minutes),
            ping_time=now,
            session_active=session_active,
        )

    def status(self, device: Device, *, now: Optional[datetime] = None) -> dict:
        now = now or now_local()
        return {
            "device": {
                "id": device.id,
                "device_id": device.device_id,
                "device_type": device.device_type,
                "name": device.name,
                "status": device.status.value,
                "last_seen": to_iso(device.last_seen),
                "is_online": device.is_online(now, self._online_minutes),
                "is_active": device.is_active,
            },
            "authenticated_at": now.isoformat(),
        }
