"""
backend/test_summary.py

Run: pytest backend/test_summary.py -v
"""

from backend.models import Asset
from backend.summary import summarize


def make_asset(asset_id: int, value: int, category: str) -> Asset:
    return Asset(
        id=asset_id,
        name=f"Item {asset_id}",
        category=category,
        estimated_value=value,
        image_url="x",
        created_at=f"2024-01-0{asset_id}T00:00:00.000Z",
    )


def test_summary_of_three_assets_in_two_categories():
    assets = [
        make_asset(1, 100, "Electronics"),
        make_asset(2, 200, "Furniture"),
        make_asset(3, 300, "Electronics"),
    ]
    summary = summarize(assets)
    assert summary.total_items == 3
    assert summary.total_value == 600
    assert summary.avg_value == 200
    assert summary.categories == 2


def test_empty_collection_has_zero_average():
    summary = summarize([])
    assert summary.total_items == 0
    assert summary.total_value == 0
    assert summary.avg_value == 0
    assert summary.categories == 0


def test_average_rounds_half_up():
    """Math.round semantics: 2.5 -> 3, not banker's rounding to 2."""
    summary = summarize([make_asset(1, 2, "Other"), make_asset(2, 3, "Other")])
    assert summary.avg_value == 3


def test_average_rounds_down_below_half():
    summary = summarize([make_asset(1, 1, "Other"), make_asset(2, 1, "Other"), make_asset(3, 2, "Other")])
    assert summary.avg_value == 1


def test_json_keys_are_camel_case():
    dumped = summarize([make_asset(1, 100, "Jewelry")]).model_dump(by_alias=True)
    assert dumped == {"totalItems": 1, "totalValue": 100, "avgValue": 100, "categories": 1}
