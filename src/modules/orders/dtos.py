"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateOrderItemDTO``: input for a single order line item.
- ``CreateOrderDTO``: input for order creation (nested items, addresses,
  payment, optional coupon and pricing overrides).
- ``TrackingDTO``: input for tracking updates.
"""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.orders.constants import PaymentMethod, PaymentStatus

# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single order item in a creation request.

    The client sends ``product_id``, ``quantity`` and an optional variant.
    Name, image and price are resolved from the catalogue by the service.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int
    variant: str = ""

    @field_validator("quantity")
    @classmethod
    def quantity_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Quantity must be at least 1.")
        return v


class AddressDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    address: str = ""
    phone: str = ""


class PaymentDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: PaymentMethod
    transaction_id: str = ""
    status: PaymentStatus = PaymentStatus.PENDING


class CouponRefDTO(BaseModel):
    """Coupon as sent by the client; only ``code`` is checked for validity."""

    model_config = ConfigDict(frozen=True)

    code: str = ""
    discount: Optional[Decimal] = None


class PricingOverridesDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    shipping: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")

    @field_validator("shipping", "tax", "discount", mode="before")
    @classmethod
    def none_means_zero(cls, v):
        return Decimal("0") if v is None else v

    @field_validator("shipping", "tax", "discount")
    @classmethod
    def must_be_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Amount cannot be negative.")
        return v


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests.

    Validates:
    - ``items`` must contain at least one item.
    - Each item quantity must be positive.

    The same product may appear on several lines (e.g. different variants).
    """

    model_config = ConfigDict(frozen=True)

    items: List[CreateOrderItemDTO]
    shipping_address: AddressDTO
    billing_address: Optional[AddressDTO] = None
    payment: PaymentDTO
    coupon: Optional[CouponRefDTO] = None
    pricing: PricingOverridesDTO = Field(default_factory=PricingOverridesDTO)
    customer_note: str = ""

    @field_validator("items")
    @classmethod
    def items_must_not_be_empty(
        cls, v: List[CreateOrderItemDTO]
    ) -> List[CreateOrderItemDTO]:
        if not v:
            raise ValueError("Order must have at least one item.")
        return v

    @property
    def coupon_code(self) -> str:
        """Trimmed, upper-cased coupon code, or ``""``."""
        if not self.coupon:
            return ""
        return self.coupon.code.strip().upper()


class TrackingDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    carrier: str = ""
    tracking_number: str = ""
    tracking_url: str = ""
