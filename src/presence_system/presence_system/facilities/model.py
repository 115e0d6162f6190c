from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Room:
    """Physical room. ``capacity`` None means unlimited."""

    id: int
    name: str
    capacity: Optional[int] = None
    category: Optional[str] = None
    color: Optional[str] = None
