from __future__ import annotations

import os
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from src.presence_system.presence_system.active.model import LiveSession, SupervisorAssignment, Visit
from src.presence_system.presence_system.activities.model import ActivityCategory, ActivityGroup
from src.presence_system.presence_system.container import Container, Repositories, build_services
from src.presence_system.presence_system.core.enums import DeviceStatus
from src.presence_system.presence_system.devices.model import Device, DeviceContext
from src.presence_system.presence_system.education.model import EducationGroup
from src.presence_system.presence_system.facilities.model import Room
from src.presence_system.presence_system.users.model import Person, Staff, Student

os.environ.setdefault("APP_ENV", "testing")

DEVICE_KEY = "reader-secret"


class InMemoryPersons:
    def __init__(self):
        self.by_id: dict[int, Person] = {}

    def get_by_tag(self, tag_id: str) -> Optional[Person]:
        for p in self.by_id.values():
            if p.tag_id == tag_id:
                return p
        return None


class InMemoryStudents:
    def __init__(self):
        self.by_person: dict[int, Student] = {}
        self.fail = False

    def get_by_person_id(self, person_id: int) -> Optional[Student]:
        if self.fail:
            raise RuntimeError("students table unavailable")
        return self.by_person.get(person_id)


class InMemoryStaff:
    def __init__(self):
        self.by_id: dict[int, Staff] = {}

    def get_by_id(self, staff_id: int) -> Optional[Staff]:
        return self.by_id.get(staff_id)

    def get_by_person_id(self, person_id: int) -> Optional[Staff]:
        for s in self.by_id.values():
            if s.person_id == person_id:
                return s
        return None


class InMemoryGroups:
    def __init__(self):
        self.by_id: dict[int, EducationGroup] = {}

    def get_by_id(self, group_id: int) -> Optional[EducationGroup]:
        return self.by_id.get(group_id)


class InMemoryRooms:
    def __init__(self):
        self.by_id: dict[int, Room] = {}
        self.locked: list[int] = []
        self._id = 0

    def add(self, name: str, capacity: Optional[int] = None) -> Room:
        self._id += 1
        room = Room(id=self._id, name=name, capacity=capacity)
        self.by_id[room.id] = room
        return room

    def get_by_id(self, room_id: int) -> Optional[Room]:
        return self.by_id.get(room_id)

    def get_by_name(self, name: str) -> Optional[Room]:
        for r in self.by_id.values():
            if r.name == name:
                return r
        return None

    def lock_for_update(self, room_id: int) -> Optional[Room]:
        self.locked.append(room_id)
        return self.by_id.get(room_id)

    def get_or_create(self, *, name, capacity, category, color) -> Room:
        existing = self.get_by_name(name)
        if existing:
            return existing
        self._id += 1
        room = Room(id=self._id, name=name, capacity=capacity, category=category, color=color)
        self.by_id[room.id] = room
        return room


class InMemoryActivities:
    def __init__(self):
        self.categories: dict[int, ActivityCategory] = {}
        self.groups: dict[int, ActivityGroup] = {}
        self._id = 0

    def add_group(self, name: str, max_participants: int = 30) -> ActivityGroup:
        self._id += 1
        group = ActivityGroup(id=self._id, name=name, category_id=0, max_participants=max_participants)
        self.groups[group.id] = group
        return group

    def get_group(self, group_id: int) -> Optional[ActivityGroup]:
        return self.groups.get(group_id)

    def find_groups_by_name(self, name: str):
        return [g for g in self.groups.values() if g.name == name]

    def get_or_create_category(self, *, name, description, color) -> ActivityCategory:
        for c in self.categories.values():
            if c.name == name:
                return c
        self._id += 1
        category = ActivityCategory(id=self._id, name=name, description=description, color=color)
        self.categories[category.id] = category
        return category

    def get_or_create_group(self, *, name, category_id, max_participants, planned_room_id, created_by) -> ActivityGroup:
        found = self.find_groups_by_name(name)
        if found:
            return found[0]
        self._id += 1
        group = ActivityGroup(
            id=self._id,
            name=name,
            category_id=category_id,
            max_participants=max_participants,
            planned_room_id=planned_room_id,
            created_by=created_by,
        )
        self.groups[group.id] = group
        return group


class InMemorySessions:
    def __init__(self):
        self.by_id: dict[int, LiveSession] = {}
        self.locked: list[int] = []
        self._id = 0

    def add(self, *, group_id: int, room_id: int, start_time: datetime, device_id: Optional[int] = None) -> LiveSession:
        self._id += 1
        session = LiveSession(
            id=self._id,
            group_id=group_id,
            room_id=room_id,
            device_id=device_id,
            start_time=start_time,
            last_activity=start_time,
        )
        self.by_id[session.id] = session
        return session

    def find_by_room(self, room_id: int):
        live = [s for s in self.by_id.values() if s.room_id == room_id and s.end_time is None]
        return sorted(live, key=lambda s: (s.start_time, s.id), reverse=True)

    def find_by_device(self, device_id: int) -> Optional[LiveSession]:
        live = [s for s in self.by_id.values() if s.device_id == device_id and s.end_time is None]
        live.sort(key=lambda s: (s.start_time, s.id), reverse=True)
        return live[0] if live else None

    def get_by_id(self, session_id: int) -> Optional[LiveSession]:
        return self.by_id.get(session_id)

    def lock_for_update(self, session_id: int) -> Optional[LiveSession]:
        self.locked.append(session_id)
        return self.by_id.get(session_id)

    def create(self, *, group_id, room_id, device_id, start_time, created_by) -> LiveSession:
        session = self.add(group_id=group_id, room_id=room_id, start_time=start_time, device_id=device_id)
        session = replace(session, created_by=created_by)
        self.by_id[session.id] = session
        return session

    def update_last_activity(self, session_id: int, when: datetime) -> bool:
        session = self.by_id.get(session_id)
        if not session:
            return False
        self.by_id[session_id] = replace(session, last_activity=when)
        return True


class InMemoryVisits:
    def __init__(self):
        self.by_id: dict[int, Visit] = {}
        self.synced: list[int] = []
        self.locked_students: list[int] = []
        self._id = 0

    def get_current_for_student(self, student_id: int) -> Optional[Visit]:
        for v in self.by_id.values():
            if v.student_id == student_id and v.exit_time is None:
                return v
        return None

    def lock_open_for_student(self, student_id: int):
        self.locked_students.append(student_id)
        return self.open_visits(student_id)

    def count_open_for_session(self, session_id: int) -> int:
        return sum(1 for v in self.by_id.values() if v.active_group_id == session_id and v.exit_time is None)

    def create(self, *, student_id: int, active_group_id: int, entry_time: datetime) -> Visit:
        self._id += 1
        visit = Visit(id=self._id, student_id=student_id, active_group_id=active_group_id, entry_time=entry_time)
        self.by_id[visit.id] = visit
        return visit

    def end_visit(self, visit_id: int, *, exit_time: datetime, sync_attendance: bool = False) -> bool:
        visit = self.by_id.get(visit_id)
        if not visit or visit.exit_time is not None:
            return False
        self.by_id[visit_id] = replace(visit, exit_time=exit_time)
        if sync_attendance:
            self.synced.append(visit_id)
        return True

    def open_visits(self, student_id: Optional[int] = None):
        return [
            v for v in self.by_id.values()
            if v.exit_time is None and (student_id is None or v.student_id == student_id)
        ]


class InMemorySupervisors:
    def __init__(self):
        self.assignments: list[SupervisorAssignment] = []
        self.writes = 0

    def list_for_session(self, session_id: int):
        return [a for a in self.assignments if a.active_group_id == session_id and a.end_date is None]

    def replace_active_supervisors(self, session_id: int, staff_ids, *, now: datetime) -> None:
        self.writes += 1
        active = {a.staff_id for a in self.list_for_session(session_id)}
        for staff_id in staff_ids:
            if staff_id not in active:
                self.assignments.append(
                    SupervisorAssignment(
                        id=len(self.assignments) + 1,
                        staff_id=staff_id,
                        active_group_id=session_id,
                        start_date=now,
                    )
                )


class InMemoryDevices:
    def __init__(self):
        self.by_device_id: dict[str, Device] = {}

    def get_by_device_id(self, device_id: str) -> Optional[Device]:
        return self.by_device_id.get(device_id)

    def update_last_seen(self, device_pk: int, when: datetime) -> bool:
        for key, d in self.by_device_id.items():
            if d.id == device_pk:
                self.by_device_id[key] = replace(d, last_seen=when)
                return True
        return False


class FakeTransactions:
    def __init__(self):
        self.opened = 0
        self.depth = 0

    @contextmanager
    def transaction(self):
        self.opened += 1
        self.depth += 1
        try:
            yield
        finally:
            self.depth -= 1


@dataclass
class World:
    """In-memory setup of rooms, people and one authenticated device."""

    repos: Repositories
    tx: FakeTransactions
    device: Device
    supervisor: Staff
    now: datetime
    container: Optional[Container] = None
    _person_id: int = field(default=0)

    def build(self, **settings) -> Container:
        self.container = build_services(self.repos, tx=self.tx, **settings)
        return self.container

    @property
    def service(self):
        return self.container.checkin_service

    @property
    def ctx(self) -> DeviceContext:
        return DeviceContext(device=self.device, staff=self.supervisor)

    def _add_person(self, first: str, last: str, tag: Optional[str]) -> Person:
        self._person_id += 1
        person = Person(id=self._person_id, first_name=first, last_name=last, tag_id=tag)
        self.repos.persons.by_id[person.id] = person
        return person

    def add_student(self, first: str, tag: str, *, group_id: Optional[int] = None) -> Student:
        person = self._add_person(first, "Schmidt", tag)
        student = Student(id=100 + person.id, person_id=person.id, school_class="2b", group_id=group_id)
        self.repos.students.by_person[person.id] = student
        return student

    def add_staff(self, first: str, tag: Optional[str]) -> Staff:
        person = self._add_person(first, "Lehmann", tag)
        staff = Staff(id=500 + person.id, person_id=person.id)
        self.repos.staff.by_id[staff.id] = staff
        return staff

    def add_room(self, name: str, capacity: Optional[int] = None) -> Room:
        return self.repos.rooms.add(name, capacity)

    def add_home_group(self, room: Room) -> EducationGroup:
        group = EducationGroup(id=len(self.repos.groups.by_id) + 1, name=f"Gruppe {room.name}", room_id=room.id)
        self.repos.groups.by_id[group.id] = group
        return group

    def start_session(
        self,
        room: Room,
        *,
        name: str = "Basteln",
        max_participants: int = 30,
        device_id: Optional[int] = None,
        start_time: Optional[datetime] = None,
    ) -> LiveSession:
        activity = self.repos.activities.add_group(name, max_participants)
        return self.repos.sessions.add(
            group_id=activity.id,
            room_id=room.id,
            device_id=device_id,
            start_time=start_time or self.now.replace(hour=8),
        )


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 10, 10, 0, 0)


@pytest.fixture
def world(fixed_now) -> World:
    repos = Repositories(
        persons=InMemoryPersons(),
        students=InMemoryStudents(),
        staff=InMemoryStaff(),
        groups=InMemoryGroups(),
        rooms=InMemoryRooms(),
        activities=InMemoryActivities(),
        sessions=InMemorySessions(),
        visits=InMemoryVisits(),
        supervisors=InMemorySupervisors(),
        devices=InMemoryDevices(),
    )
    device = Device(
        id=7,
        device_id="reader-1",
        device_type="rfid_reader",
        name="Eingang OGS",
        status=DeviceStatus.ACTIVE,
        api_key_hash=generate_password_hash(DEVICE_KEY),
    )
    repos.devices.by_device_id[device.device_id] = device

    w = World(repos=repos, tx=FakeTransactions(), device=device, supervisor=None, now=fixed_now)
    w.supervisor = w.add_staff("Petra", None)
    w.build()
    return w


@pytest.fixture
def device_headers(world) -> dict:
    return {
        "X-Device-ID": world.device.device_id,
        "Authorization": f"Bearer {DEVICE_KEY}",
        "X-Staff-ID": str(world.supervisor.id),
    }


@pytest.fixture
def client(world):
    from src.presence_system.presence_system.main import create_app

    app = create_app(container=world.container)
    return app.test_client()


@pytest.fixture
def device_key() -> str:
    return DEVICE_KEY
