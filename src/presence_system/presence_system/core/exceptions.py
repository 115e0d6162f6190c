from __future__ import annotations

from typing import Any, Dict, Optional

from .enums import CapacityKind, ErrorKind


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries an ``ErrorKind`` so the web layer can translate it
    into a status code in one place.
    """

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def details(self) -> Optional[Dict[str, Any]]:
        return None


class InvalidRequestError(DomainError):
    """Raised when input data is missing or malformed (user-fixable)."""

    kind = ErrorKind.INVALID_REQUEST


class DeviceUnauthorizedError(DomainError):
    """Raised when a request carries no valid device credentials."""

    kind = ErrorKind.UNAUTHORIZED


class NotFoundError(DomainError):
    """Raised when a tag, person, room or live session cannot be resolved."""

    kind = ErrorKind.NOT_FOUND


class CapacityExceededError(DomainError):
    """Raised when a room or activity is full."""

    kind = ErrorKind.CONFLICT

    def __init__(self, *, capacity_kind: CapacityKind, resource_id: int, name: str, current: int, limit: int):
        super().__init__(f"{capacity_kind.value} capacity exceeded ({current}/{limit})")
        self.capacity_kind = capacity_kind
        self.resource_id = resource_id
        self.name = name
        self.current = current
        self.limit = limit

    def details(self) -> Optional[Dict[str, Any]]:
        return {
            "kind": self.capacity_kind.value,
            "id": self.resource_id,
            "name": self.name,
            "current": self.current,
            "limit": self.limit,
        }


class InternalServerError(DomainError):
    """Raised for persistence failures and configuration errors."""

    kind = ErrorKind.INTERNAL


class ActiveVisitError(DomainError):
    """Raised when a student already has an open visit at check-in time."""

    kind = ErrorKind.CONFLICT
