"""
backend/dependencies.py

Reusable FastAPI dependencies.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

try:
    from backend.storage import AssetStore
except ModuleNotFoundError:
    from storage import AssetStore


def get_store(request: Request) -> AssetStore:
    """
    FastAPI dependency returning the application's asset store.

    The store is constructed once (create_app or the startup lifespan) and
    lives on ``app.state.store``. Tests swap it by building the app with
    their own store.

    Usage in routes:
        @router.get("")
        def list_assets(store: AssetStore = Depends(get_store)):
            ...

    Raises:
        HTTPException(503): If the store has not been initialized yet
    """
    store = getattr(request.app.state, "store", None)
    if store is None:
        print("[DEPS] Asset store requested before startup completed")
        raise HTTPException(status_code=503, detail="Service not ready")
    return store
