"""
backend/schemas_assets.py

Pydantic schemas for the asset inventory API.
All JSON payloads use camelCase keys (estimatedValue, imageUrl, ...);
Python attributes stay snake_case.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

try:
    from backend.models import Category
except ModuleNotFoundError:
    from models import Category

# Largest value a PostgreSQL INTEGER column holds
MAX_ESTIMATED_VALUE = 2 ** 31 - 1


# ========================================================================
# ASSETS SCHEMAS
# ========================================================================

class AssetCreateRequest(BaseModel):
    """Request schema for creating a new asset.

    - id and createdAt are assigned by the store; if a client sends them
      they are dropped with the other unknown keys
    - name is required and trimmed
    - category must be one of the Category values
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    name: str = Field(..., min_length=1, description="Display name (required)")
    category: Category = Field(..., description="Item category")
    estimated_value: int = Field(..., ge=0, le=MAX_ESTIMATED_VALUE, description="Estimated value, whole currency units")
    confidence: int = Field(0, ge=0, le=100, description="Analysis confidence 0-100")
    image_url: str = Field(..., description="Displayable image reference (may be a data URI)")
    image_data: Optional[str] = Field(None, description="Raw base64 image payload")
    purchase_date: Optional[str] = Field(None, description="Free-form purchase date")
    notes: Optional[str] = Field(None, description="Free-text notes")

    @field_validator("name", mode="before")
    @classmethod
    def trim_name(cls, v):
        """Trim whitespace from name."""
        if isinstance(v, str):
            return v.strip()
        return v

    def to_fields(self) -> Dict[str, Any]:
        return self.model_dump()


class AssetUpdateRequest(BaseModel):
    """Request schema for a partial asset update.

    Only keys present in the body are applied. Fields that are required on
    create may be omitted but not set to null.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="ignore",
    )

    name: Optional[str] = Field(None, min_length=1)
    category: Optional[Category] = None
    estimated_value: Optional[int] = Field(None, ge=0, le=MAX_ESTIMATED_VALUE)
    confidence: Optional[int] = Field(None, ge=0, le=100)
    image_url: Optional[str] = None
    image_data: Optional[str] = None
    purchase_date: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("name", mode="before")
    @classmethod
    def trim_name(cls, v):
        if v is None:
            raise ValueError("name must not be null")
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("category", "estimated_value", "confidence", "image_url", mode="before")
    @classmethod
    def reject_null(cls, v, info):
        if v is None:
            raise ValueError(f"{info.field_name} must not be null")
        return v

    def to_patch(self) -> Dict[str, Any]:
        """Fields the client actually sent."""
        return self.model_dump(exclude_unset=True)


class AssetSort(str, Enum):
    value_high = "value-high"
    value_low = "value-low"
    name = "name"
    date_new = "date-new"
    date_old = "date-old"


# ========================================================================
# ANALYSIS SCHEMAS
# ========================================================================

class AnalysisResult(BaseModel):
    """Suggested fields for a new asset, produced by the mock analyzer."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    name: str
    category: str
    estimated_value: int
    confidence: int


class AnalyzeResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_url: str = Field(..., description="data: URI of the uploaded image")
    image_data: str = Field(..., description="base64 payload of the uploaded image")
    analysis: AnalysisResult


# ========================================================================
# SUMMARY SCHEMAS
# ========================================================================

class AssetSummary(BaseModel):
    """Aggregate figures over every recorded asset."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_items: int = 0
    total_value: int = 0
    avg_value: int = 0
    categories: int = 0
