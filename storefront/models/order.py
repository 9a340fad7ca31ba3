"""Order model type definitions for database operations."""

from datetime import datetime
from typing import Literal, TypedDict

from storefront.models.product import Discount


# Order status enum values matching database enum
OrderStatus = Literal["pending", "confirmed", "shipped", "delivered", "cancelled"]

PaymentMethod = Literal["cash", "card"]


class ShippingAddress(TypedDict, total=False):
    """Shipping address stored on checkouts and orders."""

    full_name: str
    phone: str
    another_phone: str
    address_line: str
    city: str
    governorate: str
    country: str


class OrderItem(TypedDict):
    """Priced snapshot of a cart line.

    Stored as part of the items JSONB array and never re-derived from the
    product after it is written.
    """

    product_id: str
    quantity: int
    color: str
    size: str
    title: str
    image: str
    original_price: float
    price_after_discount: float
    discount: Discount | None
    discount_per_unit: float
    line_discount_total: float
    line_total: float
    line_original_total: float


class OrderCreate(TypedDict):
    """Data required to create a new order."""

    order_number: str
    user_id: str
    items: list[OrderItem]
    sub_total: float
    discount_total: float
    shipping_fee: float
    final_total: float
    payment_method: PaymentMethod
    shipping_address: ShippingAddress
    notes: str
    status: OrderStatus


class Order(OrderCreate):
    """Order table row representation."""

    id: str
    created_at: datetime | str
    updated_at: datetime | str
