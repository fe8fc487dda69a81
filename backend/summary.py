"""
backend/summary.py

Aggregate statistics over the asset collection, recomputed on every call.
"""

from __future__ import annotations

from typing import Iterable

try:
    from backend.models import Asset
    from backend.schemas_assets import AssetSummary
except ModuleNotFoundError:
    from models import Asset
    from schemas_assets import AssetSummary


def summarize(assets: Iterable[Asset]) -> AssetSummary:
    assets = list(assets)
    total_items = len(assets)
    total_value = sum(asset.estimated_value for asset in assets)

    # Round half up, matching Math.round for non-negative totals
    avg_value = (2 * total_value + total_items) // (2 * total_items) if total_items else 0

    return AssetSummary(
        total_items=total_items,
        total_value=total_value,
        avg_value=avg_value,
        categories=len({asset.category for asset in assets}),
    )
