"""Order Pydantic schemas for API request/response models."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from storefront.schemas.checkout import OrderItemSchema, ShippingAddressSchema


# Order status literal type for validation
OrderStatus = Literal["pending", "confirmed", "shipped", "delivered", "cancelled"]


class OrderCreateRequest(BaseModel):
    """Schema for POST /orders.

    Without a shipping address, the caller's pending checkout supplies the
    address and notes.
    """

    model_config = ConfigDict(from_attributes=True)

    shipping_address: ShippingAddressSchema | None = Field(default=None, description="Destination address")
    payment_method: Literal["cash", "card"] = Field(default="cash", description="Payment method")
    notes: str | None = Field(default=None, max_length=1000, description="Order notes")


class OrderStatusUpdate(BaseModel):
    """Schema for PATCH /orders/{order_id}/status."""

    model_config = ConfigDict(from_attributes=True)

    status: OrderStatus = Field(description="New order status")


class OrderResponse(BaseModel):
    """Schema for order API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID = Field(description="Order unique identifier")
    order_number: str = Field(description="Human-readable order number")
    user_id: UUID = Field(description="Order owner")
    items: list[OrderItemSchema] = Field(description="Item snapshots")
    sub_total: float = Field(description="Sum of undiscounted line totals")
    discount_total: float = Field(description="Sum of line discounts")
    shipping_fee: float = Field(description="Shipping fee")
    final_total: float = Field(description="Amount due")
    payment_method: str = Field(description="Payment method")
    shipping_address: ShippingAddressSchema = Field(description="Destination address")
    notes: str = Field(default="", description="Order notes")
    status: OrderStatus = Field(description="Order status")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime | None = Field(default=None, description="Last status change")


class OrderListResponse(BaseModel):
    """Schema for order list API responses."""

    model_config = ConfigDict(from_attributes=True)

    items: list[OrderResponse] = Field(description="List of orders")
