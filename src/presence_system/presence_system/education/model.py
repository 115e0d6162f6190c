from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EducationGroup:
    """A student's home group; ``room_id`` is the home room."""

    id: int
    name: str
    room_id: Optional[int] = None
