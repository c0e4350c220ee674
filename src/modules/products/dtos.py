"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.  Which fields
  were actually supplied is read from ``model_fields_set``, so
  ``slug=None`` (clear the slug) differs from an absent ``slug``.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProductImageDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    alt: str = ""
    color: str = ""


class ProductVariantDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    options: List[str] = Field(default_factory=list)


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``name`` and ``description`` are non-empty.
    - ``price`` and ``stock`` are non-negative.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    price: Decimal
    slug: Optional[str] = None
    compare_price: Optional[Decimal] = None
    currency: str = "USD"
    category: str = ""
    subcategory: str = ""
    tags: List[str] = Field(default_factory=list)
    images: List[ProductImageDTO] = Field(default_factory=list)
    variants: List[ProductVariantDTO] = Field(default_factory=list)
    sku: Optional[str] = None
    stock: int = 0
    low_stock_threshold: int = 10
    track_inventory: bool = True
    featured: bool = False
    is_active: bool = True

    @field_validator("name", "description")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field must not be empty.")
        return v.strip()

    @field_validator("price", "compare_price")
    @classmethod
    def price_must_be_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock", "low_stock_threshold")
    @classmethod
    def count_must_be_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Value cannot be negative.")
        return v


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only fields present in ``model_fields_set``
    are applied.
    """

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    compare_price: Optional[Decimal] = None
    currency: Optional[str] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    tags: Optional[List[str]] = None
    images: Optional[List[ProductImageDTO]] = None
    variants: Optional[List[ProductVariantDTO]] = None
    sku: Optional[str] = None
    stock: Optional[int] = None
    low_stock_threshold: Optional[int] = None
    track_inventory: Optional[bool] = None
    featured: Optional[bool] = None
    is_active: Optional[bool] = None

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Name must not be empty.")
        return v.strip() if v is not None else v

    @field_validator("price", "compare_price")
    @classmethod
    def price_must_be_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v

    @field_validator("stock", "low_stock_threshold")
    @classmethod
    def count_must_be_non_negative(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 0:
            raise ValueError("Value cannot be negative.")
        return v

    def changes(self) -> Dict[str, Any]:
        """Supplied fields except ``slug``, as plain Python values."""
        data = self.model_dump(include=self.model_fields_set)
        data.pop("slug", None)
        return data
