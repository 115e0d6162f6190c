from __future__ import annotations

from datetime import datetime, time
from typing import Optional


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_checkout_time(value: Optional[str]) -> time:
    """Parse an ``H:M`` / ``HH:MM`` cutoff such as ``"15:00"``.

    Raises ValueError when the value is not two integer parts within
    0-23 hours and 0-59 minutes.
    """
    raw = (value or "").strip()
    parts = raw.split(":")
    if len(parts) != 2:
        raise ValueError(f"invalid checkout time format: {value!r}")

    try:
        hour = int(parts[0])
        minute = int(parts[1])
    except ValueError:
        raise ValueError(f"invalid checkout time: {value!r}") from None

    if not 0 <= hour <= 23:
        raise ValueError(f"invalid hour in checkout time: {value!r}")
    if not 0 <= minute <= 59:
        raise ValueError(f"invalid minute in checkout time: {value!r}")
    return time(hour=hour, minute=minute)


def is_at_or_after(now: datetime, cutoff: time) -> bool:
    return now >= datetime.combine(now.date(), cutoff)


def to_iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None
