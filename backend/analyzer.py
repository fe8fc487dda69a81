"""
backend/analyzer.py

Mock photo analyzer.

There is no image understanding here: a 32-bit rolling hash of the upload
picks an entry from a fixed catalog and nudges its value and confidence.
The same payload always yields the same suggestion, and the hash matches a
JavaScript ``charCodeAt`` loop bit-for-bit so results agree with older
clients.
"""

from __future__ import annotations

from typing import List, NamedTuple, Union

try:
    from backend.config import ANALYZER_LOCALE
    from backend.schemas_assets import AnalysisResult
except ModuleNotFoundError:
    from config import ANALYZER_LOCALE
    from schemas_assets import AnalysisResult


MIN_ESTIMATED_VALUE = 1000
MIN_CONFIDENCE = 70
MAX_CONFIDENCE = 100


class CatalogItem(NamedTuple):
    name: str
    name_ja: str
    category: str
    base_value: int
    base_confidence: int


# Order matters: the hash indexes into this list.
CATALOG: List[CatalogItem] = [
    CatalogItem("MacBook Pro", "MacBook Pro", "Electronics", 280000, 92),
    CatalogItem("iPhone", "iPhone", "Electronics", 120000, 95),
    CatalogItem("Digital Camera", "デジタルカメラ", "Electronics", 45000, 88),
    CatalogItem("Wristwatch", "腕時計", "Jewelry", 150000, 90),
    CatalogItem("Office Chair", "オフィスチェア", "Furniture", 80000, 85),
    CatalogItem("Handbag", "ハンドバッグ", "Fashion", 35000, 87),
    CatalogItem("Bicycle", "自転車", "Sports", 65000, 89),
    CatalogItem("Game Console", "ゲーム機", "Electronics", 55000, 93),
    CatalogItem("Table", "テーブル", "Furniture", 45000, 87),
    CatalogItem("Laptop", "ノートパソコン", "Electronics", 180000, 91),
    CatalogItem("Smartphone", "スマートフォン", "Electronics", 95000, 94),
    CatalogItem("Headphones", "ヘッドフォン", "Electronics", 25000, 89),
    CatalogItem("Bag", "バッグ", "Fashion", 28000, 86),
    CatalogItem("Shoes", "靴", "Fashion", 18000, 88),
    CatalogItem("Book", "本", "Other", 1500, 85),
]


def _code_units(payload: Union[bytes, str]) -> Union[bytes, List[int]]:
    if isinstance(payload, (bytes, bytearray)):
        return payload
    # UTF-16 code units, the same values JavaScript's charCodeAt returns
    raw = payload.encode("utf-16-le", "surrogatepass")
    return [int.from_bytes(raw[i:i + 2], "little") for i in range(0, len(raw), 2)]


def rolling_hash(payload: Union[bytes, str]) -> int:
    """
    Signed 32-bit polynomial hash: h = h * 31 + c, wrapped at every step.

    Args:
        payload: raw bytes (hashed per byte) or text (hashed per UTF-16 unit)

    Returns:
        int in [-2**31, 2**31 - 1]
    """
    h = 0
    for unit in _code_units(payload):
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


def analyze(payload: Union[bytes, str], locale: str = ANALYZER_LOCALE) -> AnalysisResult:
    """
    Suggest name/category/value/confidence for an uploaded image.

    Pure function of ``payload``; ``locale`` ("en" or "ja") only changes the
    display name.
    """
    magnitude = abs(rolling_hash(payload))
    item = CATALOG[magnitude % len(CATALOG)]

    variance = (magnitude % 20000) - 10000
    confidence_variance = (magnitude % 10) - 5

    return AnalysisResult(
        name=item.name_ja if locale == "ja" else item.name,
        category=item.category,
        estimated_value=max(MIN_ESTIMATED_VALUE, item.base_value + variance),
        confidence=max(MIN_CONFIDENCE, min(MAX_CONFIDENCE, item.base_confidence + confidence_variance)),
    )
