"""Pending checkout model type definitions for database operations."""

from datetime import datetime
from typing import NotRequired, TypedDict

from storefront.models.order import OrderItem, ShippingAddress


class PendingCheckout(TypedDict):
    """Pending checkout table row representation.

    One row per user, replaced wholesale by every preview.
    """

    user_id: str
    shipping_address: ShippingAddress
    notes: str
    items: list[OrderItem]
    sub_total: float
    discount_total: float
    shipping_fee: float
    final_total: float
    updated_at: NotRequired[datetime | str]
