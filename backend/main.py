# ---------------------------------------------------------
# backend/main.py
# AssetSnap - Personal Asset Inventory Backend
#
# Run: uvicorn backend.main:app --reload (from repo root)
#
# - FastAPI + SQLite (PostgreSQL when DATABASE_URL is set)
# - /api/assets                : list (search / category / sort), create
# - /api/assets/{id}           : get, update, delete
# - /api/assets/analyze        : upload a photo, get a mocked suggestion
# - /api/assets/stats/summary  : totals for the dashboard
# ---------------------------------------------------------

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import local modules (robust fallback for different run contexts)
try:
    from backend.config import CORS_ORIGINS, IS_DEV, IS_PROD
    from backend.routes_assets import router as assets_router
    from backend.storage import AssetStore, build_store
except ModuleNotFoundError:
    from config import CORS_ORIGINS, IS_DEV, IS_PROD
    from routes_assets import router as assets_router
    from storage import AssetStore, build_store


# ---------------------------------------------------------
# Error helpers
# ---------------------------------------------------------
def format_validation_errors(errors: Any) -> str:
    """
    Turn pydantic error entries into one readable line.

    Example: "estimatedValue: Input should be greater than or equal to 0"
    """
    parts = []
    for err in errors:
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        field = ".".join(loc)
        msg = err.get("msg", "Invalid value")
        parts.append(f"{field}: {msg}" if field else msg)
    return "; ".join(parts) or "Invalid request"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Validation failures are client errors the caller must fix: 400, not 422
    detail = format_validation_errors(exc.errors())
    if IS_DEV:
        print(f"[API] 400 on {request.method} {request.url.path}: {detail}")
    return JSONResponse(status_code=400, content={"detail": detail})


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    print(f"[API] Unhandled {type(exc).__name__} on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# ---------------------------------------------------------
# App factory
# ---------------------------------------------------------
def create_app(store: Optional[AssetStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        store: Asset store to serve. When omitted, one is built from config
            at startup and closed at shutdown.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_store = getattr(app.state, "store", None) is None
        if owns_store:
            app.state.store = build_store()
            print(f"[STARTUP] Asset store ready: {type(app.state.store).__name__}")
        try:
            yield
        finally:
            if owns_store:
                app.state.store.close()
                app.state.store = None
                print("[SHUTDOWN] Asset store closed")

    app = FastAPI(title="AssetSnap Backend", version="0.1", lifespan=lifespan)

    if store is not None:
        app.state.store = store

    # CORS configuration from config module
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS if IS_PROD else ["*"],  # Restrict origins in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(assets_router)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
