from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings

from src.presence_system.presence_system.database.bootstrap import apply_schema, ensure_demo_data


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed a demo RFID reader, supervisor, student and rooms.")
    parser.add_argument("--api-key", default="demo-device-key", help="API key for the demo device")
    args = parser.parse_args()

    db_config = dict(load_settings().DB_CONFIG)

    apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    demo = ensure_demo_data(db_config, device_api_key=args.api_key)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )
    print(
        f"    device={demo['device_id']} key={demo['api_key']} "
        f"staff_id={demo['staff_id']} room_id={demo['room_id']} student_tag=STUDENT-0001"
    )


if __name__ == "__main__":
    main()
