from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import InvalidRequestError


def require_non_empty(value: Any, field_name: str) -> str:
    """Require a non-empty string.

    Whitespace is kept: a blank tag is a lookup miss, not a malformed request.
    """
    if not isinstance(value, str) or value == "":
        raise InvalidRequestError(f"{field_name} is required")
    return value


def optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None:
        return None
    # bool is an int subclass; JSON true/false is not an id
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRequestError(f"{field_name} must be an integer")
    return value


def optional_choice(value: Any, field_name: str, choices) -> Optional[str]:
    if value is None or value == "":
        return None
    if value not in choices:
        raise InvalidRequestError(f"{field_name} must be one of: {', '.join(sorted(choices))}")
    return value
