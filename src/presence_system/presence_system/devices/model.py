from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.enums import DeviceStatus
from ..users.model import Staff


@dataclass(frozen=True)
class Device:
    """An RFID reader registered with the system."""

    id: int
    device_id: str
    device_type: str
    name: Optional[str]
    status: DeviceStatus
    api_key_hash: str
    last_seen: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == DeviceStatus.ACTIVE

    def is_online(self, now: datetime, minutes: int) -> bool:
        if self.last_seen is None:
            return False
        return now - self.last_seen <= timedelta(minutes=minutes)


@dataclass(frozen=True)
class DeviceContext:
    """Authenticated device plus the staff member supervising it, if any."""

    device: Device
    staff: Optional[Staff] = None


@dataclass(frozen=True)
class PingResult:
    device_id: str
    device_name: Optional[str]
    status: DeviceStatus
    last_seen: datetime
    is_online: bool
    ping_time: datetime
    session_active: bool

    def to_dict(self) -> dict:
        return {
            "device_id": self.device_id,
            "device_name": self.device_name,
            "status": self.status.value,
            "last_seen": self.last_seen.isoformat(),
            "is_online": self.is_online,
            "ping_time": self.ping_time.isoformat(),
            "session_active": self.session_active,
        }
