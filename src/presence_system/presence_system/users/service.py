from __future__ import annotations

import logging
from typing import Optional

from ..core.exceptions import NotFoundError
from .model import ResolvedIdentity
from .repository import PersonRepository, StaffRepository, StudentRepository


class IdentityService:
    """Use case: turn a scanned RFID tag into a student or a staff member."""

    def __init__(
        self,
        persons: PersonRepository,
        students: StudentRepository,
        staff: StaffRepository,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._persons = persons
        self._students = students
        self._staff = staff
        self._log = logger or logging.getLogger(__name__)

    def resolve_tag(self, tag: str) -> ResolvedIdentity:
        tag = (tag or "").strip()

        person = self._persons.get_by_tag(tag) if tag else None
        if person is None:
            raise NotFoundError("RFID tag not found")
        if person.tag_id is None or person.tag_id != tag:
            raise NotFoundError("RFID tag not assigned to any person")

        try:
            student = self._students.get_by_person_id(person.id)
        except Exception as e:
            self._log.debug("[CHECKIN] student lookup failed for person %s: %s", person.id, e)
            student = None
        if student is not None:
            return ResolvedIdentity(person=person, student=student)

        staff = self._staff.get_by_person_id(person.id)
        if staff is not None:
            return ResolvedIdentity(person=person, staff=staff)

        raise NotFoundError("RFID tag not assigned to student or staff")
