"""Supabase-backed stores.

Plain reads and single-row writes go through PostgREST tables. Operations
that must be a single atomic check-and-set (stock decrement, counter
increment) are Postgres functions called over RPC; see
supabase/migrations for their definitions.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from supabase import Client

from storefront.core.exceptions import InsufficientStockError
from storefront.models.cart import Cart, CartLine
from storefront.models.checkout import PendingCheckout
from storefront.models.notification import Notification, NotificationCreate
from storefront.models.order import Order, OrderCreate, OrderStatus
from storefront.models.product import Product
from storefront.stores.base import (
    CartStore,
    CheckoutStore,
    CounterStore,
    InventoryStore,
    NotificationStore,
    OrderStore,
    Stores,
    UserDirectory,
)

logger = logging.getLogger(__name__)

PRODUCT_COLUMNS = "id, title, original_price, discount, images, variants:product_variants(color, size, quantity)"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _single(response: Any) -> dict[str, Any] | None:
    """Unwrap a maybe_single() response, which may itself be None."""
    return response.data if response and response.data else None


class SupabaseInventoryStore(InventoryStore):
    """Products in `products`, stock in `product_variants`."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def get_product(self, product_id: str) -> Product | None:
        response = (
            self.client.table("products")
            .select(PRODUCT_COLUMNS)
            .eq("id", product_id)
            .maybe_single()
            .execute()
        )
        return _single(response)

    def decrement_if_available(self, product_id: str, color: str, size: str, quantity: int) -> int:
        response = self.client.rpc(
            "decrement_variant_stock",
            {
                "p_product_id": product_id,
                "p_color": color,
                "p_size": size,
                "p_quantity": quantity,
            },
        ).execute()

        if response.data is None:
            # The conditional update matched no row: either the variant is
            # gone or it holds less than requested.
            variant = self.get_variant(product_id, color, size)
            raise InsufficientStockError(
                f"Insufficient stock for {product_id} ({color}, {size})",
                available=variant["quantity"],
            )
        return int(response.data)

    def restock(self, product_id: str, color: str, size: str, quantity: int) -> int:
        response = self.client.rpc(
            "restock_variant",
            {
                "p_product_id": product_id,
                "p_color": color,
                "p_size": size,
                "p_quantity": quantity,
            },
        ).execute()

        if response.data is None:
            # Raises the matching not-found error
            self.get_variant(product_id, color, size)
        return int(response.data)

    def check_connection(self) -> None:
        self.client.table("products").select("id").limit(1).execute()


class SupabaseCounterStore(CounterStore):
    def __init__(self, client: Client) -> None:
        self.client = client

    def increment(self, name: str) -> int:
        response = self.client.rpc("increment_counter", {"p_name": name}).execute()
        return int(response.data)


class SupabaseCartStore(CartStore):
    def __init__(self, client: Client) -> None:
        self.client = client

    def get(self, user_id: str) -> Cart | None:
        response = (
            self.client.table("carts")
            .select("*")
            .eq("user_id", user_id)
            .maybe_single()
            .execute()
        )
        return _single(response)

    def save(self, user_id: str, items: list[CartLine]) -> Cart:
        response = (
            self.client.table("carts")
            .upsert(
                {"user_id": user_id, "items": items, "updated_at": _now()},
                on_conflict="user_id",
            )
            .execute()
        )
        return response.data[0]

    def delete(self, user_id: str) -> bool:
        response = self.client.table("carts").delete().eq("user_id", user_id).execute()
        return bool(response.data)


class SupabaseCheckoutStore(CheckoutStore):
    def __init__(self, client: Client) -> None:
        self.client = client

    def get(self, user_id: str) -> PendingCheckout | None:
        response = (
            self.client.table("pending_checkouts")
            .select("*")
            .eq("user_id", user_id)
            .maybe_single()
            .execute()
        )
        return _single(response)

    def upsert(self, checkout: PendingCheckout) -> PendingCheckout:
        response = (
            self.client.table("pending_checkouts")
            .upsert({**checkout, "updated_at": _now()}, on_conflict="user_id")
            .execute()
        )
        return response.data[0]

    def delete(self, user_id: str) -> bool:
        response = self.client.table("pending_checkouts").delete().eq("user_id", user_id).execute()
        return bool(response.data)


class SupabaseOrderStore(OrderStore):
    def __init__(self, client: Client) -> None:
        self.client = client

    def create(self, data: OrderCreate) -> Order:
        response = self.client.table("orders").insert(dict(data)).execute()
        if not response.data:
            raise RuntimeError("Failed to create order")
        return response.data[0]

    def get(self, order_id: str) -> Order | None:
        response = (
            self.client.table("orders")
            .select("*")
            .eq("id", order_id)
            .maybe_single()
            .execute()
        )
        return _single(response)

    def list_for_user(self, user_id: str) -> list[Order]:
        response = (
            self.client.table("orders")
            .select("*")
            .eq("user_id", user_id)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    def set_status(self, order_id: str, status: OrderStatus, expected: OrderStatus | None = None) -> Order | None:
        query = (
            self.client.table("orders")
            .update({"status": status, "updated_at": _now()})
            .eq("id", order_id)
        )
        if expected is not None:
            query = query.eq("status", expected)
        response = query.execute()
        return response.data[0] if response.data else None


class SupabaseNotificationStore(NotificationStore):
    def __init__(self, client: Client) -> None:
        self.client = client

    def create_many(self, notifications: list[NotificationCreate]) -> list[Notification]:
        if not notifications:
            return []
        response = self.client.table("notifications").insert(notifications).execute()
        return response.data or []


class SupabaseUserDirectory(UserDirectory):
    """Roles come from the `profiles` table."""

    def __init__(self, client: Client) -> None:
        self.client = client

    def get_role(self, user_id: str) -> str | None:
        response = (
            self.client.table("profiles")
            .select("role")
            .eq("user_id", user_id)
            .maybe_single()
            .execute()
        )
        profile = _single(response)
        return profile.get("role") if profile else None

    def list_admin_ids(self) -> list[str]:
        response = self.client.table("profiles").select("user_id").eq("role", "admin").execute()
        return [row["user_id"] for row in response.data or []]


def create_supabase_stores(client: Client) -> Stores:
    """Build the Supabase-backed store set sharing one client."""
    return Stores(
        inventory=SupabaseInventoryStore(client),
        counters=SupabaseCounterStore(client),
        carts=SupabaseCartStore(client),
        checkouts=SupabaseCheckoutStore(client),
        orders=SupabaseOrderStore(client),
        notifications=SupabaseNotificationStore(client),
        users=SupabaseUserDirectory(client),
    )
