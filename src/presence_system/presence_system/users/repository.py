from __future__ import annotations

from typing import Optional, Protocol

from .model import Person, Staff, Student


class PersonRepository(Protocol):
    """Repository interface for Person.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_tag(self, tag_id: str) -> Optional[Person]:
        raise NotImplementedError


class StudentRepository(Protocol):
    def get_by_person_id(self, person_id: int) -> Optional[Student]:
        raise NotImplementedError


class StaffRepository(Protocol):
    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        raise NotImplementedError

    def get_by_person_id(self, person_id: int) -> Optional[Staff]:
        raise NotImplementedError
