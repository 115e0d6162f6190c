from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ActivityCategory, ActivityGroup


class ActivityRepository(Protocol):
    def get_group(self, group_id: int) -> Optional[ActivityGroup]:
        raise NotImplementedError

    def find_groups_by_name(self, name: str) -> Sequence[ActivityGroup]:
        raise NotImplementedError

    def get_or_create_category(self, *, name: str, description: Optional[str], color: Optional[str]) -> ActivityCategory:
        raise NotImplementedError

    def get_or_create_group(
        self,
        *,
        name: str,
        category_id: int,
        max_participants: int,
        planned_room_id: Optional[int],
        created_by: Optional[int],
    ) -> ActivityGroup:
        raise NotImplementedError
