# backend/config.py
# Environment-aware configuration for AssetSnap backend

import os
from typing import Literal

# Environment detection
ENV: Literal["dev", "staging", "prod"] = os.environ.get("ENV", "dev")  # type: ignore
IS_DEV = (ENV == "dev")
IS_STAGING = (ENV == "staging")
IS_PROD = (ENV == "prod")

# Storage configuration
# "sql" (default) persists via backend.db (SQLite or PostgreSQL); "memory" keeps assets in-process only
STORAGE_BACKEND: Literal["sql", "memory"] = os.environ.get("STORAGE_BACKEND", "sql").strip().lower()  # type: ignore

# DATABASE_URL takes precedence (postgres://... selects PostgreSQL)
# Falls back to SQLite for local development
DATABASE_URL = os.environ.get("DATABASE_URL", "").strip()
DATABASE_PATH = os.environ.get("DATABASE_PATH", "assetsnap.db")

# Uploads
MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))

# Mock analyzer display language ("en" or "ja")
ANALYZER_LOCALE = os.environ.get("ANALYZER_LOCALE", "en").strip().lower()

# CORS origins (expand for staging/prod)
CORS_ORIGINS = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

if IS_STAGING or IS_PROD:
    extra_origins = os.environ.get("CORS_ORIGINS", "")
    if extra_origins:
        CORS_ORIGINS.extend(o.strip() for o in extra_origins.split(",") if o.strip())

# Database type detection
IS_POSTGRES = DATABASE_URL.startswith(("postgres://", "postgresql://"))

print(f"[CONFIG] Environment: {ENV}")
if STORAGE_BACKEND == "memory":
    print("[CONFIG] Storage: in-memory (data is lost on restart)")
else:
    print(f"[CONFIG] Storage: {'PostgreSQL' if IS_POSTGRES else 'SQLite (local dev)'}")
print(f"[CONFIG] Max upload: {MAX_UPLOAD_BYTES} bytes")
