from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .active.mysql_live_session_repository import MySQLLiveSessionRepository
from .active.mysql_supervisor_repository import MySQLSupervisorRepository
from .active.mysql_visit_repository import MySQLVisitRepository
from .active.repository import LiveSessionRepository, SupervisorRepository, VisitRepository
from .activities.mysql_activity_repository import MySQLActivityRepository
from .activities.repository import ActivityRepository
from .checkin.capacity import CapacityGuard
from .checkin.factory import CheckinActionRegistry
from .checkin.policy import DailyCheckoutPolicy
from .checkin.provisioning import SessionProvisioner
from .checkin.service import CheckinService
from .checkin.supervisors import SupervisorAuthenticator
from .checkin.visits import VisitTracker
from .core.constants import DEFAULT_DAILY_CHECKOUT_TIME, DEFAULT_DEVICE_ONLINE_MINUTES
from .database.connection import DatabaseConnection, as_db_config
from .database.transaction import TransactionManager
from .devices.mysql_device_repository import MySQLDeviceRepository
from .devices.repository import DeviceRepository
from .devices.service import DeviceService
from .education.mysql_education_group_repository import MySQLEducationGroupRepository
from .education.repository import EducationGroupRepository
from .facilities.mysql_room_repository import MySQLRoomRepository
from .facilities.repository import RoomRepository
from .users.mysql_person_repository import MySQLPersonRepository
from .users.mysql_staff_repository import MySQLStaffRepository
from .users.mysql_student_repository import MySQLStudentRepository
from .users.repository import PersonRepository, StaffRepository, StudentRepository
from .users.service import IdentityService


@dataclass(frozen=True)
class Repositories:
    persons: PersonRepository
    students: StudentRepository
    staff: StaffRepository
    groups: EducationGroupRepository
    rooms: RoomRepository
    activities: ActivityRepository
    sessions: LiveSessionRepository
    visits: VisitRepository
    supervisors: SupervisorRepository
    devices: DeviceRepository


@dataclass(frozen=True)
class Container:
    tx: TransactionManager
    repos: Repositories

    identity_service: IdentityService
    device_service: DeviceService
    checkin_service: CheckinService


def build_services(
    repos: Repositories,
    *,
    tx: TransactionManager,
    daily_checkout_time: Optional[str] = DEFAULT_DAILY_CHECKOUT_TIME,
    confirmation_enabled: bool = True,
    device_online_minutes: int = DEFAULT_DEVICE_ONLINE_MINUTES,
    registry: Optional[CheckinActionRegistry] = None,
) -> Container:
    checkin_log = logging.getLogger("presence_system.checkin")

    identity_service = IdentityService(repos.persons, repos.students, repos.staff, logger=checkin_log)
    device_service = DeviceService(
        repos.devices,
        repos.sessions,
        repos.staff,
        online_minutes=device_online_minutes,
        logger=logging.getLogger("presence_system.devices"),
    )

    tracker = VisitTracker(repos.visits, repos.sessions, repos.rooms, logger=checkin_log)
    capacity = CapacityGuard(repos.visits, repos.sessions, repos.activities)
    provisioner = SessionProvisioner(
        repos.sessions,
        repos.rooms,
        repos.activities,
        logger=logging.getLogger("presence_system.schulhof"),
    )
    supervisors = SupervisorAuthenticator(
        repos.sessions,
        repos.supervisors,
        repos.activities,
        tx,
        logger=logging.getLogger("presence_system.supervisors"),
    )
    policy = DailyCheckoutPolicy(repos.groups, cutoff=daily_checkout_time, logger=checkin_log)

    checkin_service = CheckinService(
        identity_service,
        tracker,
        capacity,
        provisioner,
        supervisors,
        policy,
        repos.sessions,
        repos.rooms,
        tx,
        registry=registry or CheckinActionRegistry.default(),
        confirmation_enabled=confirmation_enabled,
        logger=checkin_log,
    )

    return Container(
        tx=tx,
        repos=repos,
        identity_service=identity_service,
        device_service=device_service,
        checkin_service=checkin_service,
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    conn = DatabaseConnection(as_db_config(db_config))

    repos = Repositories(
        persons=MySQLPersonRepository(conn),
        students=MySQLStudentRepository(conn),
        staff=MySQLStaffRepository(conn),
        groups=MySQLEducationGroupRepository(conn),
        rooms=MySQLRoomRepository(conn),
        activities=MySQLActivityRepository(conn),
        sessions=MySQLLiveSessionRepository(conn),
        visits=MySQLVisitRepository(conn),
        supervisors=MySQLSupervisorRepository(conn),
        devices=MySQLDeviceRepository(conn),
    )

    return build_services(
        repos,
        tx=conn,
        daily_checkout_time=getattr(settings, "STUDENT_DAILY_CHECKOUT_TIME", DEFAULT_DAILY_CHECKOUT_TIME),
        confirmation_enabled=bool(getattr(settings, "DAILY_CHECKOUT_CONFIRMATION", True)),
        device_online_minutes=int(getattr(settings, "DEVICE_ONLINE_MINUTES", DEFAULT_DEVICE_ONLINE_MINUTES)),
    )
