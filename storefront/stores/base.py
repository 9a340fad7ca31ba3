"""Storage interfaces for the checkout pipeline.

Each store owns one kind of record. Single-record operations are atomic;
nothing here spans records, so multi-record sequences are coordinated by the
services.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass

from fastapi import status

from storefront.core.exceptions import NotFoundError, VariantNotFoundError
from storefront.models.cart import Cart, CartLine
from storefront.models.checkout import PendingCheckout
from storefront.models.notification import Notification, NotificationCreate
from storefront.models.order import Order, OrderCreate, OrderStatus
from storefront.models.product import Product, Variant


def find_variant(product: Product, color: str, size: str) -> Variant | None:
    """Return the product's variant matching (color, size), if any."""
    for variant in product.get("variants") or []:
        if variant["color"] == color and variant["size"] == size:
            return variant
    return None


class InventoryStore(ABC):
    """Per-product stock at (color, size) granularity."""

    @abstractmethod
    def get_product(self, product_id: str) -> Product | None:
        """Load a product with its variants."""

    @abstractmethod
    def decrement_if_available(self, product_id: str, color: str, size: str, quantity: int) -> int:
        """Subtract quantity only if the variant holds at least that much.

        Returns:
            int: The variant's remaining quantity.

        Raises:
            InsufficientStockError: If current quantity is below the request.
            VariantNotFoundError: If the variant does not exist.
        """

    @abstractmethod
    def restock(self, product_id: str, color: str, size: str, quantity: int) -> int:
        """Add quantity back to a variant. Returns the new quantity."""

    def resolve(self, product_id: str, color: str, size: str, in_cart: bool = False) -> tuple[Product, Variant]:
        """Resolve a variant selector against the product's current variants.

        A missing product is a 404, or a 400 with in_cart set for lines
        read from a stored cart.

        Raises:
            NotFoundError: If the product does not exist.
            VariantNotFoundError: If no variant matches (color, size).
        """
        product = self.get_product(product_id)
        if product is None:
            if in_cart:
                raise NotFoundError(
                    "Product not found in cart",
                    error_type="product_not_found",
                    status_code=status.HTTP_400_BAD_REQUEST,
                )
            raise NotFoundError("Product not found", error_type="product_not_found")
        variant = find_variant(product, color, size)
        if variant is None:
            raise VariantNotFoundError(
                f"Variant not found for product: {product['title']} ({color}, {size})"
            )
        return product, variant

    def get_variant(self, product_id: str, color: str, size: str) -> Variant:
        """Like resolve(), returning only the variant."""
        return self.resolve(product_id, color, size)[1]

    def check_connection(self) -> None:
        """Raise if the backing storage is unreachable."""


class CounterStore(ABC):
    """Named monotonic counters."""

    @abstractmethod
    def increment(self, name: str) -> int:
        """Atomically add one to the counter and return the new value."""


class CartStore(ABC):
    """One cart per user."""

    @abstractmethod
    def get(self, user_id: str) -> Cart | None:
        """Load the user's cart."""

    @abstractmethod
    def save(self, user_id: str, items: list[CartLine]) -> Cart:
        """Create or replace the user's cart lines."""

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        """Delete the user's cart. Returns whether one existed."""


class CheckoutStore(ABC):
    """One pending checkout snapshot per user."""

    @abstractmethod
    def get(self, user_id: str) -> PendingCheckout | None:
        """Load the user's pending checkout."""

    @abstractmethod
    def upsert(self, checkout: PendingCheckout) -> PendingCheckout:
        """Replace the user's pending checkout with this one."""

    @abstractmethod
    def delete(self, user_id: str) -> bool:
        """Delete the user's pending checkout. Returns whether one existed."""


class OrderStore(ABC):
    """Orders. Only status changes after creation."""

    @abstractmethod
    def create(self, data: OrderCreate) -> Order:
        """Persist a new order."""

    @abstractmethod
    def get(self, order_id: str) -> Order | None:
        """Load an order by id."""

    @abstractmethod
    def list_for_user(self, user_id: str) -> list[Order]:
        """List a user's orders, newest first."""

    @abstractmethod
    def set_status(self, order_id: str, status: OrderStatus, expected: OrderStatus | None = None) -> Order | None:
        """Overwrite an order's status.

        When expected is given the write only applies if the current status
        equals it; None is returned when the order is missing or the
        condition failed.
        """


class NotificationStore(ABC):
    """In-app notifications."""

    @abstractmethod
    def create_many(self, notifications: list[NotificationCreate]) -> list[Notification]:
        """Insert a batch of notifications."""


class UserDirectory(ABC):
    """Read-only view of user roles."""

    @abstractmethod
    def get_role(self, user_id: str) -> str | None:
        """Return the user's role, or None for unknown users."""

    @abstractmethod
    def list_admin_ids(self) -> list[str]:
        """Return the ids of all admin users."""


@dataclass
class Stores:
    """The full set of stores used by the services."""

    inventory: InventoryStore
    counters: CounterStore
    carts: CartStore
    checkouts: CheckoutStore
    orders: OrderStore
    notifications: NotificationStore
    users: UserDirectory
