"""Cart model type definitions for database operations."""

from datetime import datetime
from typing import NotRequired, TypedDict


class CartLine(TypedDict):
    """A single cart line, identified by (product_id, color, size)."""

    product_id: str
    quantity: int
    color: str
    size: str


class Cart(TypedDict):
    """Cart table row representation.

    One row per user. Rows with no lines are deleted rather than stored.
    """

    user_id: str
    items: list[CartLine]
    created_at: NotRequired[datetime | str]
    updated_at: NotRequired[datetime | str]
