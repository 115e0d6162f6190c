from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.constants import SCHULHOF_COLOR, SCHULHOF_ROOM_CAPACITY, SCHULHOF_ROOM_NAME
from .connection import DBConfig, as_db_config


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = as_db_config(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)

    sql = Path(schema_path).read_text(encoding="utf-8")
    sql = _strip_line_comments(_strip_create_db_and_use(sql))

    conn = _connect(as_db_config(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_demo_data(db_config: dict, *, device_api_key: str = "demo-device-key") -> dict:
    """Upsert a small demo setup: one device, one supervisor, one student, two rooms.

    Returns the identifiers a tester needs to drive the IoT endpoints.
    """
    conn = _connect(as_db_config(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        def upsert(sql: str, params: tuple) -> int:
            cur.execute(sql, params)
            return int(cur.lastrowid)

        room_id = upsert(
            """
            INSERT INTO rooms (name, capacity, category, color) VALUES (%s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id)
            """,
            ("Gruppenraum 1", 20, "Gruppenraum", "#4A90E2"),
        )
        upsert(
            """
            INSERT INTO rooms (name, capacity, category, color) VALUES (%s, %s, %s, %s)
            ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id)
            """,
            (SCHULHOF_ROOM_NAME, SCHULHOF_ROOM_CAPACITY, SCHULHOF_ROOM_NAME, SCHULHOF_COLOR),
        )
        group_id = upsert(
            """
            INSERT INTO education_groups (name, room_id) VALUES (%s, %s)
            ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id), room_id = VALUES(room_id)
            """,
            ("Klasse 1a", room_id),
        )

        staff_person = upsert(
            """
            INSERT INTO persons (first_name, last_name, tag_id) VALUES (%s, %s, %s)
            ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id)
            """,
            ("Anna", "Betreuerin", "STAFF-0001"),
        )
        staff_id = upsert(
            "INSERT INTO staff (person_id) VALUES (%s) ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id)",
            (staff_person,),
        )

        student_person = upsert(
            """
            INSERT INTO persons (first_name, last_name, tag_id) VALUES (%s, %s, %s)
            ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id)
            """,
            ("Max", "Mustermann", "STUDENT-0001"),
        )
        upsert(
            """
            INSERT INTO students (person_id, school_class, group_id) VALUES (%s, %s, %s)
            ON DUPLICATE KEY UPDATE id = LAST_INSERT_ID(id), group_id = VALUES(group_id)
            """,
            (student_person, "1a", group_id),
        )

        cur.execute(
            """
            INSERT INTO devices (device_id, device_type, name, status, api_key_hash)
            VALUES (%s, %s, %s, 'active', %s)
            ON DUPLICATE KEY UPDATE api_key_hash = VALUES(api_key_hash), status = 'active'
            """,
            ("demo-reader-1", "rfid_reader", "Eingang Gruppenraum 1", generate_password_hash(device_api_key)),
        )

        conn.commit()
        return {"device_id": "demo-reader-1", "api_key": device_api_key, "staff_id": staff_id, "room_id": room_id}
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(as_db_config(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
