"""
backend/routes_assets.py

Asset inventory endpoints: CRUD, search/filter/sort, photo analysis and
summary statistics.

Guarantees:
- id and createdAt are assigned by the store, never taken from the client
- Input validation via Pydantic schemas (failures surface as 400)
- Missing ids are 404, store failures are 500 with a generic message
- Uploads are type- and size-checked before the analyzer runs
"""

from __future__ import annotations

import base64
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Path, Query, UploadFile

try:
    from backend.analyzer import analyze
    from backend.config import IS_DEV, MAX_UPLOAD_BYTES
    from backend.dependencies import get_store
    from backend.models import Asset
    from backend.schemas_assets import (
        AnalyzeResponse,
        AssetCreateRequest,
        AssetSort,
        AssetSummary,
        AssetUpdateRequest,
    )
    from backend.storage import AssetStore, StoreError
    from backend.summary import summarize
except ModuleNotFoundError:
    from analyzer import analyze
    from config import IS_DEV, MAX_UPLOAD_BYTES
    from dependencies import get_store
    from models import Asset
    from schemas_assets import (
        AnalyzeResponse,
        AssetCreateRequest,
        AssetSort,
        AssetSummary,
        AssetUpdateRequest,
    )
    from storage import AssetStore, StoreError
    from summary import summarize


router = APIRouter(
    prefix="/api/assets",
    tags=["assets"],
)


def sort_assets(assets: List[Asset], sort: AssetSort) -> List[Asset]:
    """Order assets for display. Ties keep the incoming (newest-first) order."""
    if sort == AssetSort.value_high:
        return sorted(assets, key=lambda a: a.estimated_value, reverse=True)
    if sort == AssetSort.value_low:
        return sorted(assets, key=lambda a: a.estimated_value)
    if sort == AssetSort.name:
        return sorted(assets, key=lambda a: a.name.casefold())
    if sort == AssetSort.date_new:
        return sorted(assets, key=lambda a: (a.created_at, a.id), reverse=True)
    return sorted(assets, key=lambda a: (a.created_at, a.id))


@router.get("", response_model=List[Asset])
def list_assets(
    search: Optional[str] = Query(None, description="Substring match on name/category/notes"),
    category: Optional[str] = Query(None, description="Exact category, or 'all'"),
    sort: Optional[AssetSort] = Query(None, description="value-high, value-low, name, date-new, date-old"),
    store: AssetStore = Depends(get_store),
) -> List[Asset]:
    """
    List assets, optionally searched, filtered and sorted.

    An empty search string is treated as no search. When both search and
    category are given, the search results are narrowed to the category.

    Args:
        search: Optional case-insensitive substring
        category: Optional exact category ("all" disables the filter)
        sort: Optional ordering; default is newest first
        store: Injected asset store

    Returns:
        List of assets

    Raises:
        HTTPException(400): Unknown sort option (handled by validation)
        HTTPException(500): Store error
    """
    try:
        if search:
            assets = store.search(search)
            if category and category != "all":
                assets = [asset for asset in assets if asset.category == category]
        elif category:
            assets = store.by_category(category)
        else:
            assets = store.list()
    except StoreError as e:
        print(f"[ASSETS] Store error on list: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch assets")

    if sort is not None:
        assets = sort_assets(assets, sort)

    if IS_DEV:
        print(f"[ASSETS] List: search={search!r}, category={category!r}, sort={sort and sort.value!r}, results={len(assets)}")

    return assets


@router.get("/stats/summary", response_model=AssetSummary)
def get_summary(store: AssetStore = Depends(get_store)) -> AssetSummary:
    """Totals over every asset: count, value sum, rounded average, distinct categories."""
    try:
        assets = store.list()
    except StoreError as e:
        print(f"[ASSETS] Store error on summary: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch statistics")
    return summarize(assets)


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze_photo(
    image: Optional[UploadFile] = File(None, description="Photo of the item (image/*, max 10MB)"),
) -> AnalyzeResponse:
    """
    Accept a photo and return a suggested name/category/value/confidence.

    Nothing is stored. The client shows the suggestion, lets the user edit
    it, then submits it to POST /api/assets together with imageUrl/imageData.

    Raises:
        HTTPException(400): No file, non-image content type, or file too large
    """
    if image is None:
        raise HTTPException(status_code=400, detail="No image file provided")

    content_type = image.content_type or ""
    if not content_type.startswith("image/"):
        if IS_DEV:
            print(f"[ASSETS] Rejected upload: content_type={content_type!r}")
        raise HTTPException(status_code=400, detail="Only image files are allowed")

    too_large = f"File too large (limit {MAX_UPLOAD_BYTES} bytes)"
    if image.size is not None and image.size > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail=too_large)

    # Read at most one byte past the limit
    content = image.file.read(MAX_UPLOAD_BYTES + 1)
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=400, detail=too_large)

    image_data = base64.b64encode(content).decode("ascii")
    analysis = analyze(image_data)

    if IS_DEV:
        print(f"[ASSETS] Analyzed upload: bytes={len(content)}, suggestion={analysis.name!r}/{analysis.category}")

    return AnalyzeResponse(
        image_url=f"data:{content_type};base64,{image_data}",
        image_data=image_data,
        analysis=analysis,
    )


@router.get("/{asset_id}", response_model=Asset)
def get_asset(
    asset_id: int = Path(..., description="Asset ID"),
    store: AssetStore = Depends(get_store),
) -> Asset:
    """
    Get a single asset by ID.

    Raises:
        HTTPException(404): Asset not found
        HTTPException(500): Store error
    """
    try:
        asset = store.get(asset_id)
    except StoreError as e:
        print(f"[ASSETS] Store error on get: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch asset")

    if asset is None:
        raise HTTPException(status_code=404, detail="Asset not found")
    return asset


@router.post("", response_model=Asset, status_code=201)
def create_asset(
    request: AssetCreateRequest,
    store: AssetStore = Depends(get_store),
) -> Asset:
    """
    Create a new asset.

    - id and createdAt are generated by the store
    - Input validated via Pydantic schema

    Args:
        request: AssetCreateRequest with name, category, estimatedValue, ...
        store: Injected asset store

    Returns:
        The created asset including id and createdAt

    Raises:
        HTTPException(400): Invalid input (handled by validation)
        HTTPException(500): Store error
    """
    try:
        asset = store.create(request.to_fields())
    except StoreError as e:
        print(f"[ASSETS] Store error on create: {e}")
        raise HTTPException(status_code=500, detail="Failed to create asset")

    if IS_DEV:
        print(f"[ASSETS] Created asset_id={asset.id}, category={asset.category}")
    return asset


@router.put("/{asset_id}", response_model=Asset)
def update_asset(
    request: AssetUpdateRequest,
    asset_id: int = Path(..., description="Asset ID to update"),
    store: AssetStore = Depends(get_store),
) -> Asset:
    """
    Partially update an asset. Keys absent from the body are left untouched.

    Raises:
        HTTPException(400): Invalid input (handled by validation)
        HTTPException(404): Asset not found
        HTTPException(500): Store error
    """
    patch = request.to_patch()
    try:
        asset = store.update(asset_id, patch)
    except StoreError as e:
        print(f"[ASSETS] Store error on update: {e}")
        raise HTTPException(status_code=500, detail="Failed to update asset")

    if asset is None:
        raise HTTPException(status_code=404, detail="Asset not found")

    if IS_DEV:
        print(f"[ASSETS] Updated asset_id={asset_id}, fields={sorted(patch)}")
    return asset


@router.delete("/{asset_id}", status_code=204)
def delete_asset(
    asset_id: int = Path(..., description="Asset ID to delete"),
    store: AssetStore = Depends(get_store),
) -> None:
    """
    Delete an asset. Its id is never handed out again.

    Raises:
        HTTPException(404): Asset not found
        HTTPException(500): Store error
    """
    try:
        deleted = store.delete(asset_id)
    except StoreError as e:
        print(f"[ASSETS] Store error on delete: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete asset")

    if not deleted:
        raise HTTPException(status_code=404, detail="Asset not found")

    if IS_DEV:
        print(f"[ASSETS] Deleted asset_id={asset_id}")
