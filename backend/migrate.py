# backend/migrate.py
# Database migration module for PostgreSQL and SQLite
# Run: python -m backend.migrate

import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from backend.config import DATABASE_URL, DATABASE_PATH
from backend.db import is_postgres_url, get_db_connection, commit


def run_migrations(database_url: str = DATABASE_URL, database_path: str = DATABASE_PATH) -> None:
    """
    Run all database migrations (idempotent).
    Creates tables and indexes if missing.
    Safe to run multiple times.
    """
    print("[MIGRATE] Starting database migrations...")

    with get_db_connection(database_url, database_path) as conn:
        if is_postgres_url(database_url):
            _run_postgres_migrations(conn)
        else:
            _run_sqlite_migrations(conn)

        commit(conn)

    print("[MIGRATE] All migrations complete!")


def _run_postgres_migrations(conn) -> None:
    """PostgreSQL-specific migrations using SQLAlchemy."""
    from sqlalchemy import text

    print("[MIGRATE] Running PostgreSQL migrations...")

    # Users table (no routes use it yet)
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS users (
            id SERIAL PRIMARY KEY,
            username TEXT UNIQUE NOT NULL,
            password TEXT NOT NULL
        )
    """))

    # Assets table
    # SERIAL never hands out an id twice, even after deletes
    conn.execute(text("""
        CREATE TABLE IF NOT EXISTS assets (
            id SERIAL PRIMARY KEY,
            name TEXT NOT NULL,
            category TEXT NOT NULL,
            estimated_value INTEGER NOT NULL,
            confidence INTEGER NOT NULL DEFAULT 0,
            image_url TEXT NOT NULL,
            image_data TEXT,
            purchase_date TEXT,
            notes TEXT,
            created_at TEXT NOT NULL
        )
    """))
    conn.execute(text("CREATE INDEX IF NOT EXISTS idx_assets_created_at ON assets(created_at)"))
    conn.execute(text("CREATE INDEX IF NOT EXISTS idx_assets_category ON assets(category)"))

    print("[MIGRATE] ✅ PostgreSQL schema ready")


def _run_sqlite_migrations(conn) -> None:
    """SQLite-specific migrations using sqlite3."""
    print("[MIGRATE] Running SQLite migrations...")

    cur = conn.cursor()

    # Users table (no routes use it yet)
    cur.execute("""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT UNIQUE NOT NULL,
            password TEXT NOT NULL
        )
    """)

    # Assets table
    # AUTOINCREMENT keeps deleted ids out of circulation
    cur.execute("""
        CREATE TABLE IF NOT EXISTS assets (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            category TEXT NOT NULL,
            estimated_value INTEGER NOT NULL,
            confidence INTEGER NOT NULL DEFAULT 0,
            image_url TEXT NOT NULL,
            image_data TEXT,
            purchase_date TEXT,
            notes TEXT,
            created_at TEXT NOT NULL
        )
    """)

    cur.execute("CREATE INDEX IF NOT EXISTS idx_assets_created_at ON assets(created_at)")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_assets_category ON assets(category)")

    print("[MIGRATE] ✅ SQLite schema ready")


if __name__ == "__main__":
    run_migrations()
