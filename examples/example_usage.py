"""Example: drive the check-in engine through the service layer (without Flask).

Controllers are thin; the workflow lives in CheckinService. Run
``python scripts/seed_db.py`` first so the demo device and tags exist.
"""

from config import load_settings

from src.presence_system.presence_system.checkin.model import CheckinRequest
from src.presence_system.presence_system.container import build_container


def main():
    settings = load_settings()
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    ctx = container.device_service.authenticate("demo-reader-1", "demo-device-key", staff_id="1")
    room = container.repos.rooms.get_by_name("Gruppenraum 1")

    first = container.checkin_service.process_scan(ctx, CheckinRequest(student_rfid="STUDENT-0001", room_id=room.id))
    print(first.to_dict())

    second = container.checkin_service.process_scan(ctx, CheckinRequest(student_rfid="STUDENT-0001"))
    print(second.to_dict())


if __name__ == "__main__":
    main()
