"""Product model type definitions for database operations."""

from typing import Literal, NotRequired, TypedDict


DiscountType = Literal["percentage", "fixed"]


class Discount(TypedDict):
    """Discount attached to a product."""

    type: DiscountType
    amount: float


class Variant(TypedDict):
    """A stock-tracked (color, size) sub-unit of a product."""

    color: str
    size: str
    quantity: int


class ProductImage(TypedDict):
    """Product image reference."""

    url: str


class Product(TypedDict):
    """Product row joined with its variants.

    The catalog is managed elsewhere; this service only reads products and
    adjusts variant quantities.
    """

    id: str
    title: str
    original_price: float
    discount: Discount | None
    variants: list[Variant]
    images: NotRequired[list[ProductImage]]
