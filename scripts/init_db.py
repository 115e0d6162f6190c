from __future__ import annotations

import argparse
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings

from src.presence_system.presence_system.database.bootstrap import apply_schema, list_tables

# Tables the scan engine reads or writes on every request.
ENGINE_TABLES = (
    "persons",
    "students",
    "staff",
    "rooms",
    "education_groups",
    "activity_categories",
    "activity_groups",
    "devices",
    "active_groups",
    "visits",
    "group_supervisors",
    "attendance",
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create the presence database and apply the schema.")
    parser.add_argument("--schema", type=Path, default=REPO_ROOT / "database" / "schema.sql")
    parser.add_argument("--check-only", action="store_true", help="only verify that the engine tables exist")
    args = parser.parse_args()

    db_config = dict(load_settings().DB_CONFIG)
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"

    if not args.check_only:
        apply_schema(db_config, schema_path=args.schema)

    missing = sorted(set(ENGINE_TABLES) - set(list_tables(db_config)))
    if missing:
        print(f"FAIL: {target} is missing tables: {', '.join(missing)}")
        return 1
    print(f"OK: {target} has all {len(ENGINE_TABLES)} engine tables")
    return 0


if __name__ == "__main__":
    sys.exit(main())
