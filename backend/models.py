from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


# Enums
class Category(str, Enum):
    electronics = "Electronics"
    furniture = "Furniture"
    jewelry = "Jewelry"
    fashion = "Fashion"
    sports = "Sports"
    other = "Other"


# Models
class Asset(BaseModel):
    """A recorded inventory item.

    Attributes are snake_case; the JSON form (aliases) is camelCase.
    The store does not check ``category`` against Category; request schemas do.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: int
    name: str
    category: str
    estimated_value: int
    confidence: int = 0  # 0-100
    image_url: str
    image_data: Optional[str] = None  # base64 encoded image data
    purchase_date: Optional[str] = None
    notes: Optional[str] = None
    created_at: str  # ISO timestamp, set once by the store
