from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import mysql.connector


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """DB connection factory.

    Note: We create short-lived connections per operation. Inside
    ``transaction()`` every repository call on the same thread reuses the
    transaction's connection instead.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._local = threading.local()

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
        )

    def current_transaction(self):
        return getattr(self._local, "conn", None)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Run the enclosed repository calls as one READ COMMITTED transaction.

        Nested calls join the outer transaction.
        """
        if self.current_transaction() is not None:
            yield
            return

        conn = self.connect()
        conn.start_transaction(isolation_level="READ COMMITTED")
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            conn.close()


def as_db_config(db_config: dict) -> DBConfig:
    return DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
