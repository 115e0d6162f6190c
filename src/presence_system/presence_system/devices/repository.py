from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import Device


class DeviceRepository(Protocol):
    def get_by_device_id(self, device_id: str) -> Optional[Device]:
        raise NotImplementedError

    def update_last_seen(self, device_pk: int, when: datetime) -> bool:
        raise NotImplementedError
