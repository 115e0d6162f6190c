from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ActivityCategory:
    id: int
    name: str
    description: Optional[str] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class ActivityGroup:
    """An activity definition; live sessions of it run in rooms."""

    id: int
    name: str
    category_id: int
    max_participants: int
    is_open: bool = True
    planned_room_id: Optional[int] = None
    created_by: Optional[int] = None
