"""
backend/storage.py

Asset storage backends.

- MemoryAssetStore: dict keyed by id, one lock around every mutation
- SqlAssetStore: SQLite (dev) or PostgreSQL (prod) through backend.db

Both hand out ids append-only: a deleted id is never reused. Every read
path returns assets newest first (created_at DESC, then id DESC).
"""

from __future__ import annotations

import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

try:
    from backend.config import STORAGE_BACKEND, DATABASE_URL, DATABASE_PATH, IS_DEV
    from backend.db import (
        commit,
        dispose_engine,
        execute_query,
        get_db_connection,
        insert_returning_id,
        is_postgres_url,
        row_to_dict,
    )
    from backend.migrate import run_migrations
    from backend.models import Asset
except ModuleNotFoundError:
    from config import STORAGE_BACKEND, DATABASE_URL, DATABASE_PATH, IS_DEV
    from db import (
        commit,
        dispose_engine,
        execute_query,
        get_db_connection,
        insert_returning_id,
        is_postgres_url,
        row_to_dict,
    )
    from migrate import run_migrations
    from models import Asset


# Fields a caller may set; id and created_at belong to the store
WRITABLE_FIELDS = tuple(name for name in Asset.model_fields if name not in ("id", "created_at"))

ASSET_COLUMNS = ", ".join(Asset.model_fields)

# SQLite INTEGER is signed 64-bit; larger ids cannot exist
MAX_ROW_ID = 2 ** 63 - 1

DB_ERRORS = (sqlite3.Error, SQLAlchemyError)


class StoreError(Exception):
    """The persistence medium failed (I/O, connection, constraint)."""


def now_iso() -> str:
    """Return current UTC timestamp in ISO format with millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _writable(fields: Mapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in fields.items() if key in WRITABLE_FIELDS}


def _newest_first(assets: List[Asset]) -> List[Asset]:
    return sorted(assets, key=lambda asset: (asset.created_at, asset.id), reverse=True)


def _matches(asset: Asset, needle: str) -> bool:
    if needle in asset.name.lower() or needle in asset.category.lower():
        return True
    return asset.notes is not None and needle in asset.notes.lower()


class AssetStore(ABC):
    """Keyed storage of Asset records with simple queries."""

    @abstractmethod
    def list(self) -> List[Asset]:
        """All assets, newest first."""

    @abstractmethod
    def get(self, asset_id: int) -> Optional[Asset]:
        """The asset with this id, or None."""

    @abstractmethod
    def create(self, fields: Mapping[str, Any]) -> Asset:
        """Store validated fields under a fresh id and created_at."""

    @abstractmethod
    def update(self, asset_id: int, patch: Mapping[str, Any]) -> Optional[Asset]:
        """Merge patch onto the asset; None if it does not exist."""

    @abstractmethod
    def delete(self, asset_id: int) -> bool:
        """Remove the asset; False if it did not exist."""

    @abstractmethod
    def search(self, substring: str) -> List[Asset]:
        """Case-insensitive match on name, category and notes."""

    @abstractmethod
    def by_category(self, category: str) -> List[Asset]:
        """Exact category match; "all" returns everything."""

    def close(self) -> None:
        """Release resources held by the store."""


class MemoryAssetStore(AssetStore):
    """In-process store. Contents are lost when the process exits."""

    def __init__(self) -> None:
        self._assets: Dict[int, Asset] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def _snapshot(self) -> List[Asset]:
        with self._lock:
            assets = [*self._assets.values()]
        return _newest_first(assets)

    def list(self) -> List[Asset]:
        return self._snapshot()

    def get(self, asset_id: int) -> Optional[Asset]:
        with self._lock:
            return self._assets.get(asset_id)

    def create(self, fields: Mapping[str, Any]) -> Asset:
        values = _writable(fields)
        with self._lock:
            asset_id = self._next_id
            self._next_id += 1
            asset = Asset(id=asset_id, created_at=now_iso(), **values)
            self._assets[asset_id] = asset
        return asset

    def update(self, asset_id: int, patch: Mapping[str, Any]) -> Optional[Asset]:
        values = _writable(patch)
        with self._lock:
            existing = self._assets.get(asset_id)
            if existing is None:
                return None
            updated = existing.model_copy(update=values)
            self._assets[asset_id] = updated
        return updated

    def delete(self, asset_id: int) -> bool:
        with self._lock:
            return self._assets.pop(asset_id, None) is not None

    def search(self, substring: str) -> List[Asset]:
        if not substring:
            return []
        needle = substring.lower()
        return [asset for asset in self._snapshot() if _matches(asset, needle)]

    def by_category(self, category: str) -> List[Asset]:
        if category == "all":
            return self.list()
        return [asset for asset in self._snapshot() if asset.category == category]


def _escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlAssetStore(AssetStore):
    """
    Relational store over the `assets` table.

    SQLite by default; PostgreSQL when database_url is a postgres URL.
    One connection per operation, so each mutation is a single atomic
    statement and concurrent writers resolve last-write-wins.
    """

    def __init__(
        self,
        database_url: str = DATABASE_URL,
        database_path: str = DATABASE_PATH,
        migrate: bool = True,
    ) -> None:
        self.database_url = database_url
        self.database_path = database_path
        if migrate:
            try:
                run_migrations(database_url, database_path)
            except DB_ERRORS as e:
                raise StoreError("Database migration failed") from e

    @contextmanager
    def _connect(self, action: str) -> Iterator[Any]:
        try:
            with get_db_connection(self.database_url, self.database_path) as conn:
                yield conn
        except DB_ERRORS as e:
            if IS_DEV:
                print(f"[STORE] DB error on {action}: {e}")
            raise StoreError(f"Database error on {action}") from e

    def _select(self, action: str, where: str = "", params: Optional[Dict[str, Any]] = None) -> List[Asset]:
        query = f"SELECT {ASSET_COLUMNS} FROM assets {where} ORDER BY created_at DESC, id DESC"
        with self._connect(action) as conn:
            rows = execute_query(conn, query, params).fetchall()
        return [Asset(**row_to_dict(row)) for row in rows]

    def _select_one(self, conn: Any, asset_id: int) -> Optional[Asset]:
        row = execute_query(
            conn,
            f"SELECT {ASSET_COLUMNS} FROM assets WHERE id = :id",
            {"id": asset_id},
        ).fetchone()
        if row is None:
            return None
        return Asset(**row_to_dict(row))

    def list(self) -> List[Asset]:
        return self._select("list")

    def get(self, asset_id: int) -> Optional[Asset]:
        if not 0 < asset_id <= MAX_ROW_ID:
            return None
        with self._connect("get") as conn:
            return self._select_one(conn, asset_id)

    def create(self, fields: Mapping[str, Any]) -> Asset:
        values: Dict[str, Any] = {name: None for name in WRITABLE_FIELDS}
        values.update(_writable(fields))
        if values["confidence"] is None:
            values["confidence"] = 0
        values["created_at"] = now_iso()

        columns = ", ".join(values)
        placeholders = ", ".join(f":{name}" for name in values)
        with self._connect("create") as conn:
            asset_id = insert_returning_id(
                conn,
                f"INSERT INTO assets ({columns}) VALUES ({placeholders})",
                values,
            )
            commit(conn)
        return Asset(id=asset_id, **values)

    def update(self, asset_id: int, patch: Mapping[str, Any]) -> Optional[Asset]:
        if not 0 < asset_id <= MAX_ROW_ID:
            return None
        values = _writable(patch)
        if not values:
            return self.get(asset_id)

        # Column names come from WRITABLE_FIELDS, never from the client
        assignments = ", ".join(f"{name} = :{name}" for name in values)
        with self._connect("update") as conn:
            cur = execute_query(
                conn,
                f"UPDATE assets SET {assignments} WHERE id = :id",
                {**values, "id": asset_id},
            )
            if cur.rowcount == 0:
                return None
            commit(conn)
            return self._select_one(conn, asset_id)

    def delete(self, asset_id: int) -> bool:
        if not 0 < asset_id <= MAX_ROW_ID:
            return False
        with self._connect("delete") as conn:
            cur = execute_query(conn, "DELETE FROM assets WHERE id = :id", {"id": asset_id})
            deleted = cur.rowcount > 0
            commit(conn)
        return deleted

    def search(self, substring: str) -> List[Asset]:
        if not substring:
            return []
        where = """
            WHERE LOWER(name) LIKE :pattern ESCAPE '\\'
               OR LOWER(category) LIKE :pattern ESCAPE '\\'
               OR LOWER(notes) LIKE :pattern ESCAPE '\\'
        """
        return self._select("search", where, {"pattern": f"%{_escape_like(substring.lower())}%"})

    def by_category(self, category: str) -> List[Asset]:
        if category == "all":
            return self.list()
        return self._select("by_category", "WHERE category = :category", {"category": category})

    def close(self) -> None:
        if is_postgres_url(self.database_url):
            dispose_engine(self.database_url)


def build_store(
    backend: str = STORAGE_BACKEND,
    database_url: str = DATABASE_URL,
    database_path: str = DATABASE_PATH,
) -> AssetStore:
    """Construct the store selected by configuration."""
    if backend == "memory":
        print("[STORE] Using in-memory asset store")
        return MemoryAssetStore()
    if backend == "sql":
        return SqlAssetStore(database_url, database_path)
    raise ValueError(f"Unknown STORAGE_BACKEND: {backend!r} (expected 'sql' or 'memory')")
