from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import DeviceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Device
from .repository import DeviceRepository


class MySQLDeviceRepository(DeviceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_device_id(self, device_id: str) -> Optional[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, device_id, device_type, name, status, api_key_hash, last_seen
                FROM devices
                WHERE device_id=%s
                """,
                (device_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Device(
                id=int(row["id"]),
                device_id=row["device_id"],
                device_type=row["device_type"],
                name=row.get("name"),
                status=DeviceStatus(row["status"]),
                api_key_hash=row["api_key_hash"],
                last_seen=row.get("last_seen"),
            )

    def update_last_seen(self, device_pk: int, when: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE devices SET last_seen=%s WHERE id=%s", (when, device_pk))
            return cur.rowcount > 0
