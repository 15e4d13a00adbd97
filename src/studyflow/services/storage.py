from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Dict, Protocol


class StorageError(Exception):
    pass


class Storage(Protocol):
    """Durable key/value records, each value a whole serialized snapshot."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...

    def remove(self, key: str) -> None: ...


class SqliteStorage:
    def __init__(self, db_path: str = "data/studyflow.db") -> None:
        self.db_path = db_path
        try:
            if db_path != ":memory:":
                Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            self.conn = sqlite3.connect(db_path, check_same_thread=False)
            self._init_schema()
        except (OSError, sqlite3.Error) as exc:
            raise StorageError(f"Could not open storage at {db_path}: {exc}") from exc

    def _init_schema(self) -> None:
        self.conn.execute(
            """
            CREATE TABLE IF NOT EXISTS records (
              key TEXT PRIMARY KEY,
              value TEXT NOT NULL,
              updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
            )
            """
        )
        self.conn.commit()

    def read(self, key: str) -> str | None:
        try:
            cur = self.conn.cursor()
            cur.execute("SELECT value FROM records WHERE key=?", (key,))
            row = cur.fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Could not read {key}: {exc}") from exc
        return None if row is None else str(row[0])

    def write(self, key: str, value: str) -> None:
        try:
            self.conn.execute(
                """INSERT INTO records(key, value, updated_at) VALUES(?, ?, CURRENT_TIMESTAMP)
                   ON CONFLICT(key) DO UPDATE SET
                       value=excluded.value,
                       updated_at=excluded.updated_at""",
                (key, value),
            )
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Could not write {key}: {exc}") from exc

    def remove(self, key: str) -> None:
        try:
            self.conn.execute("DELETE FROM records WHERE key=?", (key,))
            self.conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Could not remove {key}: {exc}") from exc

    def close(self) -> None:
        self.conn.close()


class MemoryStorage:
    """In-process storage for tests and throwaway sessions."""

    def __init__(self, records: Dict[str, str] | None = None) -> None:
        self.records: Dict[str, str] = dict(records or {})

    def read(self, key: str) -> str | None:
        return self.records.get(key)

    def write(self, key: str, value: str) -> None:
        self.records[key] = value

    def remove(self, key: str) -> None:
        self.records.pop(key, None)
