from __future__ import annotations

from typing import Optional, Protocol

from .model import Room


class RoomRepository(Protocol):
    def get_by_id(self, room_id: int) -> Optional[Room]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Room]:
        raise NotImplementedError

    def lock_for_update(self, room_id: int) -> Optional[Room]:
        """Load the room and hold its row lock until the surrounding transaction ends."""
        raise NotImplementedError

    def get_or_create(self, *, name: str, capacity: Optional[int], category: Optional[str], color: Optional[str]) -> Room:
        raise NotImplementedError
