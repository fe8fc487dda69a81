# backend/db.py
# Database abstraction layer supporting PostgreSQL (production) and SQLite (dev)

import sqlite3
from contextlib import contextmanager
from pathlib import Path as FsPath
from typing import Any, Dict, Generator, Optional, Union
from urllib.parse import urlparse

from sqlalchemy import create_engine, text, pool
from sqlalchemy.engine import Engine, Connection

try:
    from backend.config import DATABASE_URL, DATABASE_PATH
except ModuleNotFoundError:
    from config import DATABASE_URL, DATABASE_PATH


# One SQLAlchemy engine per PostgreSQL URL
_engines: Dict[str, Engine] = {}


def is_postgres_url(database_url: str) -> bool:
    return (database_url or "").startswith(("postgres://", "postgresql://"))


def resolve_sqlite_path(database_path: str) -> str:
    """Relative SQLite paths resolve against the backend/ directory."""
    path = FsPath(database_path)
    if not path.is_absolute():
        path = FsPath(__file__).resolve().parent / path
    return str(path)


def init_engine(database_url: str) -> Engine:
    """Create (or reuse) the SQLAlchemy engine for a PostgreSQL URL."""
    engine = _engines.get(database_url)
    if engine is not None:
        return engine

    # Parse and validate URL
    parsed = urlparse(database_url)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Invalid DATABASE_URL: {database_url[:20]}...")

    # SQLAlchemy no longer accepts the "postgres://" alias
    sa_url = database_url
    if sa_url.startswith("postgres://"):
        sa_url = "postgresql://" + sa_url[len("postgres://"):]

    # Create engine with connection pooling
    engine = create_engine(
        sa_url,
        poolclass=pool.QueuePool,
        pool_size=5,
        max_overflow=10,
        pool_pre_ping=True,  # Verify connections before use
        echo=False,  # Set True for SQL debugging
    )
    _engines[database_url] = engine

    print(f"[DB] Using PostgreSQL ({parsed.hostname})")
    return engine


def dispose_engine(database_url: str) -> None:
    """Close pooled connections for a PostgreSQL URL (no-op for SQLite)."""
    engine = _engines.pop(database_url, None)
    if engine is not None:
        engine.dispose()
        print("[DB] PostgreSQL engine disposed")


@contextmanager
def get_db_connection(
    database_url: str = DATABASE_URL,
    database_path: str = DATABASE_PATH,
) -> Generator[Union[sqlite3.Connection, Connection], None, None]:
    """
    Context manager for database connections.
    Returns sqlite3.Connection for SQLite or sqlalchemy.Connection for Postgres.
    """
    if is_postgres_url(database_url):
        engine = init_engine(database_url)

        # SQLAlchemy connection
        with engine.connect() as conn:
            yield conn
    else:
        # SQLite connection
        conn = sqlite3.connect(resolve_sqlite_path(database_path), check_same_thread=False)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()


def execute_query(
    conn: Union[sqlite3.Connection, Connection],
    query: str,
    params: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Execute a query with named parameters.

    Both drivers understand the ``:name`` placeholder style, so queries are
    written once and run unchanged on SQLite and PostgreSQL.

    Returns:
        Cursor (SQLite) or Result (PostgreSQL); both support fetchone/fetchall/rowcount
    """
    if isinstance(conn, sqlite3.Connection):
        cur = conn.cursor()
        return cur.execute(query, params or {})
    return conn.execute(text(query), params or {})


def insert_returning_id(
    conn: Union[sqlite3.Connection, Connection],
    query: str,
    params: Dict[str, Any],
) -> int:
    """Run an INSERT and return the generated primary key."""
    if isinstance(conn, sqlite3.Connection):
        cur = conn.cursor()
        cur.execute(query, params)
        return int(cur.lastrowid)
    result = conn.execute(text(query + " RETURNING id"), params)
    return int(result.scalar_one())


def row_to_dict(row: Any) -> Dict[str, Any]:
    """
    Convert a sqlite3.Row or SQLAlchemy Row to a plain dict.

    Returns {} for None.
    """
    if row is None:
        return {}
    if isinstance(row, sqlite3.Row):
        return dict(row)
    return dict(row._mapping)


def commit(conn: Union[sqlite3.Connection, Connection]) -> None:
    """Commit transaction (same call for SQLite and Postgres)."""
    conn.commit()
