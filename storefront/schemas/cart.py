"""Cart Pydantic schemas for API request/response models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CartItemAdd(BaseModel):
    """Schema for adding a variant to the cart via POST /cart/items."""

    model_config = ConfigDict(from_attributes=True)

    product_id: UUID = Field(description="Product UUID")
    color: str = Field(min_length=1, max_length=50, description="Variant color")
    size: str = Field(min_length=1, max_length=50, description="Variant size")
    quantity: int = Field(default=1, ge=1, description="Units to add")


class CartItemUpdate(BaseModel):
    """Schema for setting a cart line quantity. Zero removes the line."""

    model_config = ConfigDict(from_attributes=True)

    quantity: int = Field(ge=0, description="New line quantity")


class CartItemResponse(BaseModel):
    """A cart line priced at current catalog prices."""

    model_config = ConfigDict(from_attributes=True)

    product_id: str = Field(description="Product UUID")
    color: str = Field(description="Variant color")
    size: str = Field(description="Variant size")
    quantity: int = Field(description="Units on the line")
    title: str | None = Field(default=None, description="Current product title")
    image: str | None = Field(default=None, description="Current product image URL")
    original_price: float | None = Field(default=None, description="Current undiscounted unit price")
    unit_price: float = Field(description="Current discounted unit price")
    line_total: float = Field(description="Unit price times quantity")
    warning: str | None = Field(default=None, description="Set when the product no longer exists")


class CartResponse(BaseModel):
    """Schema for cart API responses."""

    model_config = ConfigDict(from_attributes=True)

    items: list[CartItemResponse] = Field(default_factory=list, description="Cart lines")
    sub_total: float = Field(description="Sum of line totals at current prices")
    updated_at: datetime | None = Field(default=None, description="Last cart change")
