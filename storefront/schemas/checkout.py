"""Checkout Pydantic schemas for API request/response models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


PHONE_PATTERN = r"^\+?[0-9]{7,15}$"


class ShippingAddressSchema(BaseModel):
    """Shipping address.

    The governorate is checked against the shipping rate table by the
    services, so an unknown one is reported as an invalid shipping address
    rather than a schema error.
    """

    model_config = ConfigDict(from_attributes=True)

    full_name: str = Field(min_length=3, max_length=100, description="Recipient name")
    phone: str = Field(pattern=PHONE_PATTERN, description="Recipient phone")
    another_phone: str | None = Field(default=None, pattern=PHONE_PATTERN, description="Alternate phone")
    address_line: str = Field(min_length=5, max_length=255, description="Street address")
    city: str = Field(min_length=2, max_length=100, description="City")
    governorate: str = Field(min_length=1, description="Shipping governorate")
    country: Literal["Egypt"] = Field(default="Egypt", description="Country")


class DiscountSchema(BaseModel):
    """Discount captured on an item snapshot."""

    model_config = ConfigDict(from_attributes=True)

    type: Literal["percentage", "fixed"] = Field(description="Discount kind")
    amount: float = Field(description="Percentage points or fixed amount")


class OrderItemSchema(BaseModel):
    """Priced snapshot of a cart line."""

    model_config = ConfigDict(from_attributes=True)

    product_id: str = Field(description="Product UUID")
    quantity: int = Field(ge=1, description="Units ordered")
    color: str = Field(description="Variant color")
    size: str = Field(description="Variant size")
    title: str = Field(description="Product title when priced")
    image: str = Field(default="", description="Product image when priced")
    original_price: float = Field(description="Undiscounted unit price")
    price_after_discount: float = Field(description="Discounted unit price")
    discount: DiscountSchema | None = Field(default=None, description="Discount applied")
    discount_per_unit: float = Field(description="Discount per unit")
    line_discount_total: float = Field(description="Discount for the whole line")
    line_total: float = Field(description="Discounted line total")
    line_original_total: float = Field(description="Undiscounted line total")


class CheckoutPreviewRequest(BaseModel):
    """Schema for POST /checkout/preview."""

    model_config = ConfigDict(from_attributes=True)

    shipping_address: ShippingAddressSchema = Field(description="Destination address")
    notes: str = Field(default="", max_length=1000, description="Order notes")


class CheckoutPreviewResponse(BaseModel):
    """Schema for a priced pending checkout."""

    model_config = ConfigDict(from_attributes=True)

    shipping_address: ShippingAddressSchema = Field(description="Destination address")
    notes: str = Field(default="", description="Order notes")
    items: list[OrderItemSchema] = Field(description="Priced items")
    sub_total: float = Field(description="Sum of undiscounted line totals")
    discount_total: float = Field(description="Sum of line discounts")
    shipping_fee: float = Field(description="Shipping fee for the governorate")
    final_total: float = Field(description="Amount due")
    updated_at: datetime | None = Field(default=None, description="When the preview was priced")
