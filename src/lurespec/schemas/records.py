"""
Pydantic schemas for the persistence boundary.

Variants leave the engine as plain dataclasses; callers that store them map
each one onto a ``LureRow`` together with product-level metadata.
"""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..utils.slugs import slugify


class ProductInfo(BaseModel):
    """Static product metadata shared by every row of one product page."""
    name: str = Field(..., min_length=1, description="Product series name")
    slug: Optional[str] = Field(default=None, description="URL slug; derived from name when omitted")
    manufacturer: str = Field(..., min_length=1, description="Manufacturer display name")
    manufacturer_slug: str = Field(..., min_length=1, description="Manufacturer URL slug")
    type: str = Field(default="", description="Lure type as given by the caller")
    price: Optional[int] = Field(default=None, ge=0, description="Product-level price, tax included")
    description: Optional[str] = Field(default=None, description="Product description")
    source_url: Optional[str] = Field(default=None, description="Page the variants were read from")
    is_limited: bool = Field(default=False)
    is_discontinued: bool = Field(default=False)

    @model_validator(mode="after")
    def fill_slug(self) -> ProductInfo:
        if not self.slug:
            self.slug = slugify(self.name)
        return self


class LureRow(BaseModel):
    """One stored row: a product plus one variant."""
    name: str = Field(..., min_length=1)
    slug: str = Field(..., min_length=1)
    manufacturer: str
    manufacturer_slug: str
    type: str = ""
    price: Optional[int] = Field(default=None, ge=0, description="Tax-included price")
    description: Optional[str] = None
    images: Optional[List[str]] = Field(default=None, description="Uploaded image URLs for this color")
    color_name: Optional[str] = None
    weight: Optional[float] = Field(default=None, gt=0, description="Weight in grams")
    length: Optional[int] = Field(default=None, gt=0, description="Length in millimeters")
    source_url: Optional[str] = None
    is_limited: bool = False
    is_discontinued: bool = False

    @field_validator('images')
    @classmethod
    def drop_empty_images(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        images = [url for url in v if url]
        return images or None


class TrackingSummary(BaseModel):
    """Counts reported back to the tracking record after an insert run."""
    colors: int = Field(..., ge=0, description="Distinct color names")
    weights: int = Field(..., ge=0, description="Distinct weights")
    rows_inserted: int = Field(..., ge=0, description="Rows actually written")
    message: str = Field(..., description="Human-readable summary")
