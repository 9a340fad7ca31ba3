"""Thread-safe in-memory stores for local development and tests.

Every store guards its state with a lock and hands out deep copies, so a
caller holding a returned record can never mutate stored state.
"""

import copy
import logging
from collections import defaultdict
from datetime import datetime, timezone
from threading import Lock
from uuid import uuid4

from storefront.core.exceptions import InsufficientStockError, NotFoundError, VariantNotFoundError
from storefront.models.cart import Cart, CartLine
from storefront.models.checkout import PendingCheckout
from storefront.models.notification import Notification, NotificationCreate
from storefront.models.order import Order, OrderCreate, OrderStatus
from storefront.models.product import Product, Variant
from storefront.stores.base import (
    CartStore,
    CheckoutStore,
    CounterStore,
    InventoryStore,
    NotificationStore,
    OrderStore,
    Stores,
    UserDirectory,
    find_variant,
)

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class InMemoryInventoryStore(InventoryStore):
    """Products keyed by id; one lock serializes all stock changes."""

    def __init__(self) -> None:
        self._products: dict[str, Product] = {}
        self._lock = Lock()

    def put_product(self, product: Product) -> None:
        """Insert or replace a product (catalog seeding)."""
        with self._lock:
            self._products[product["id"]] = copy.deepcopy(product)

    def delete_product(self, product_id: str) -> None:
        with self._lock:
            self._products.pop(product_id, None)

    def get_product(self, product_id: str) -> Product | None:
        with self._lock:
            product = self._products.get(product_id)
            return copy.deepcopy(product) if product else None

    def _locked_variant(self, product_id: str, color: str, size: str) -> Variant:
        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError("Product not found", error_type="product_not_found")
        variant = find_variant(product, color, size)
        if variant is None:
            raise VariantNotFoundError(f"Selected color/size is not available: {color} / {size}")
        return variant

    def decrement_if_available(self, product_id: str, color: str, size: str, quantity: int) -> int:
        with self._lock:
            variant = self._locked_variant(product_id, color, size)
            if variant["quantity"] < quantity:
                raise InsufficientStockError(
                    f"Insufficient stock for {product_id} ({color}, {size})",
                    available=variant["quantity"],
                )
            variant["quantity"] -= quantity
            return variant["quantity"]

    def restock(self, product_id: str, color: str, size: str, quantity: int) -> int:
        with self._lock:
            variant = self._locked_variant(product_id, color, size)
            variant["quantity"] += quantity
            return variant["quantity"]


class InMemoryCounterStore(CounterStore):
    """Counters start at zero; the first increment returns 1."""

    def __init__(self) -> None:
        self._values: dict[str, int] = defaultdict(int)
        self._lock = Lock()

    def increment(self, name: str) -> int:
        with self._lock:
            self._values[name] += 1
            return self._values[name]


class InMemoryCartStore(CartStore):
    def __init__(self) -> None:
        self._carts: dict[str, Cart] = {}
        self._lock = Lock()

    def get(self, user_id: str) -> Cart | None:
        with self._lock:
            cart = self._carts.get(user_id)
            return copy.deepcopy(cart) if cart else None

    def save(self, user_id: str, items: list[CartLine]) -> Cart:
        with self._lock:
            now = _now()
            existing = self._carts.get(user_id)
            cart: Cart = {
                "user_id": user_id,
                "items": copy.deepcopy(items),
                "created_at": existing["created_at"] if existing else now,
                "updated_at": now,
            }
            self._carts[user_id] = cart
            return copy.deepcopy(cart)

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self._carts.pop(user_id, None) is not None


class InMemoryCheckoutStore(CheckoutStore):
    def __init__(self) -> None:
        self._checkouts: dict[str, PendingCheckout] = {}
        self._lock = Lock()

    def get(self, user_id: str) -> PendingCheckout | None:
        with self._lock:
            checkout = self._checkouts.get(user_id)
            return copy.deepcopy(checkout) if checkout else None

    def upsert(self, checkout: PendingCheckout) -> PendingCheckout:
        with self._lock:
            stored = copy.deepcopy(checkout)
            stored["updated_at"] = _now()
            self._checkouts[checkout["user_id"]] = stored
            return copy.deepcopy(stored)

    def delete(self, user_id: str) -> bool:
        with self._lock:
            return self._checkouts.pop(user_id, None) is not None


class InMemoryOrderStore(OrderStore):
    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = Lock()

    def create(self, data: OrderCreate) -> Order:
        with self._lock:
            now = _now()
            order: Order = {**copy.deepcopy(data), "id": str(uuid4()), "created_at": now, "updated_at": now}
            self._orders[order["id"]] = order
            return copy.deepcopy(order)

    def get(self, order_id: str) -> Order | None:
        with self._lock:
            order = self._orders.get(order_id)
            return copy.deepcopy(order) if order else None

    def list_for_user(self, user_id: str) -> list[Order]:
        with self._lock:
            # Insertion order is creation order
            orders = [o for o in self._orders.values() if o["user_id"] == user_id]
            return copy.deepcopy(list(reversed(orders)))

    def set_status(self, order_id: str, status: OrderStatus, expected: OrderStatus | None = None) -> Order | None:
        with self._lock:
            order = self._orders.get(order_id)
            if order is None:
                return None
            if expected is not None and order["status"] != expected:
                return None
            order["status"] = status
            order["updated_at"] = _now()
            return copy.deepcopy(order)


class InMemoryNotificationStore(NotificationStore):
    def __init__(self) -> None:
        self.notifications: list[Notification] = []
        self._lock = Lock()

    def create_many(self, notifications: list[NotificationCreate]) -> list[Notification]:
        with self._lock:
            created: list[Notification] = [
                {**n, "id": str(uuid4()), "is_read": False, "created_at": _now()} for n in notifications
            ]
            self.notifications.extend(created)
            return copy.deepcopy(created)


class InMemoryUserDirectory(UserDirectory):
    def __init__(self) -> None:
        self._roles: dict[str, str] = {}
        self._lock = Lock()

    def set_role(self, user_id: str, role: str) -> None:
        with self._lock:
            self._roles[user_id] = role

    def get_role(self, user_id: str) -> str | None:
        with self._lock:
            return self._roles.get(user_id)

    def list_admin_ids(self) -> list[str]:
        with self._lock:
            return [user_id for user_id, role in self._roles.items() if role == "admin"]


def create_memory_stores() -> Stores:
    """Build a fresh, empty set of in-memory stores."""
    logger.info("Using in-memory storage backend")
    return Stores(
        inventory=InMemoryInventoryStore(),
        counters=InMemoryCounterStore(),
        carts=InMemoryCartStore(),
        checkouts=InMemoryCheckoutStore(),
        orders=InMemoryOrderStore(),
        notifications=InMemoryNotificationStore(),
        users=InMemoryUserDirectory(),
    )
