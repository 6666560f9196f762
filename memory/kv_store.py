"""Key-value document stores backing the learned state."""
from __future__ import annotations

import json
import logging
import os
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from wear_app.logging_config import get_logger, log_event

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class StoreResult:
    """Outcome of a write; stores never raise on persistence failures."""

    ok: bool
    error: Optional[str] = None

    @classmethod
    def success(cls) -> "StoreResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str) -> "StoreResult":
        return cls(ok=False, error=error)


class KeyValueStore:
    """Interface for whole-document JSON persistence.

    ``get`` returns ``None`` for missing or unreadable values; ``set`` replaces
    the whole document for a key and reports failures through ``StoreResult``.
    """

    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> StoreResult:
        raise NotImplementedError

    def delete(self, key: str) -> StoreResult:
        raise NotImplementedError

    @staticmethod
    def _encode(key: str, value: Any) -> str | StoreResult:
        try:
            return json.dumps(value)
        except (TypeError, ValueError) as exc:
            log_event(LOGGER, logging.ERROR, "store_encode_failed", key=key, error=str(exc))
            return StoreResult.failure(f"not JSON serializable: {exc}")

    @staticmethod
    def _decode(key: str, raw: str | None) -> Optional[Any]:
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError) as exc:
            log_event(LOGGER, logging.WARNING, "store_read_failed", key=key, error=str(exc))
            return None


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store; values are serialized so JSON constraints still apply."""

    def __init__(self) -> None:
        self._documents: Dict[str, str] = {}

    def get(self, key: str) -> Optional[Any]:
        return self._decode(key, self._documents.get(key))

    def set(self, key: str, value: Any) -> StoreResult:
        encoded = self._encode(key, value)
        if isinstance(encoded, StoreResult):
            return encoded
        self._documents[key] = encoded
        return StoreResult.success()

    def delete(self, key: str) -> StoreResult:
        self._documents.pop(key, None)
        return StoreResult.success()


class JSONFileKeyValueStore(KeyValueStore):
    """One JSON file per key, replaced atomically on every write."""

    def __init__(self, base_dir: str | Path = "data/store") -> None:
        self.base_dir = Path(base_dir)
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.base_dir / f"{key}.json"

    def get(self, key: str) -> Optional[Any]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            raw = path.read_text()
        except OSError as exc:
            log_event(LOGGER, logging.WARNING, "store_read_failed", key=key, error=str(exc))
            return None
        return self._decode(key, raw)

    def set(self, key: str, value: Any) -> StoreResult:
        encoded = self._encode(key, value)
        if isinstance(encoded, StoreResult):
            return encoded
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        try:
            tmp_path.write_text(encoded)
            os.replace(tmp_path, path)
        except OSError as exc:
            log_event(LOGGER, logging.ERROR, "store_write_failed", key=key, error=str(exc))
            return StoreResult.failure(str(exc))
        return StoreResult.success()

    def delete(self, key: str) -> StoreResult:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as exc:
            return StoreResult.failure(str(exc))
        return StoreResult.success()


class SQLiteKeyValueStore(KeyValueStore):
    """SQLite-backed store for lightweight durability."""

    def __init__(self, db_path: str | Path = "data/weatherwear.db") -> None:
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_documents (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at REAL
                );
                """
            )

    def get(self, key: str) -> Optional[Any]:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT value FROM kv_documents WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            log_event(LOGGER, logging.WARNING, "store_read_failed", key=key, error=str(exc))
            return None
        return self._decode(key, row["value"]) if row else None

    def set(self, key: str, value: Any) -> StoreResult:
        encoded = self._encode(key, value)
        if isinstance(encoded, StoreResult):
            return encoded
        try:
            with self._connect() as conn:
                conn.execute(
                    "INSERT INTO kv_documents(key, value, updated_at) VALUES (?, ?, ?)\n"
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at",
                    (key, encoded, time.time()),
                )
        except sqlite3.Error as exc:
            log_event(LOGGER, logging.ERROR, "store_write_failed", key=key, error=str(exc))
            return StoreResult.failure(str(exc))
        return StoreResult.success()

    def delete(self, key: str) -> StoreResult:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM kv_documents WHERE key = ?", (key,))
        except sqlite3.Error as exc:
            return StoreResult.failure(str(exc))
        return StoreResult.success()


__all__ = [
    "StoreResult",
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "JSONFileKeyValueStore",
    "SQLiteKeyValueStore",
]
