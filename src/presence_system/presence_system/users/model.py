from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Person:
    """Domain entity: Person.

    Note: Plain data object, no DB access code here.
    """

    id: int
    first_name: str
    last_name: str
    tag_id: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class Student:
    id: int
    person_id: int
    school_class: str = ""
    # home education group
    group_id: Optional[int] = None


@dataclass(frozen=True)
class Staff:
    id: int
    person_id: int


@dataclass(frozen=True)
class ResolvedIdentity:
    """Result of resolving a scanned tag: the person plus exactly one role."""

    person: Person
    student: Optional[Student] = None
    staff: Optional[Staff] = None

    @property
    def is_student(self) -> bool:
        return self.student is not None
