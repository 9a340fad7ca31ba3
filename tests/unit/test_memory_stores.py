"""Unit tests for the in-memory stores."""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from storefront.core.exceptions import InsufficientStockError, NotFoundError, VariantNotFoundError
from storefront.stores.memory import (
    InMemoryCartStore,
    InMemoryCheckoutStore,
    InMemoryCounterStore,
    InMemoryInventoryStore,
    InMemoryNotificationStore,
    InMemoryOrderStore,
    InMemoryUserDirectory,
)


@pytest.fixture
def inventory(product_factory) -> InMemoryInventoryStore:
    store = InMemoryInventoryStore()
    store.put_product(product_factory())
    return store


@pytest.fixture
def product_id(product_factory) -> str:
    return product_factory()["id"]


class TestInMemoryInventoryStore:
    """Tests for stock reads and conditional decrements."""

    def test_resolve_returns_product_and_variant(self, inventory, product_id) -> None:
        product, variant = inventory.resolve(product_id, "red", "M")

        assert product["title"] == "Linen Shirt"
        assert variant == {"color": "red", "size": "M", "quantity": 5}

    def test_resolve_missing_product(self, inventory) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            inventory.resolve("missing", "red", "M")

        assert exc_info.value.error_type == "product_not_found"
        assert exc_info.value.status_code == 404

    def test_resolve_missing_variant(self, inventory, product_id) -> None:
        with pytest.raises(VariantNotFoundError) as exc_info:
            inventory.get_variant(product_id, "green", "M")

        assert exc_info.value.status_code == 400
        assert "Linen Shirt" in exc_info.value.message

    def test_decrement_returns_remaining(self, inventory, product_id) -> None:
        assert inventory.decrement_if_available(product_id, "red", "M", 3) == 2
        assert inventory.get_variant(product_id, "red", "M")["quantity"] == 2

    def test_decrement_over_stock_leaves_quantity(self, inventory, product_id) -> None:
        with pytest.raises(InsufficientStockError) as exc_info:
            inventory.decrement_if_available(product_id, "blue", "L", 3)

        assert exc_info.value.available == 2
        assert inventory.get_variant(product_id, "blue", "L")["quantity"] == 2

    def test_decrement_to_zero(self, inventory, product_id) -> None:
        assert inventory.decrement_if_available(product_id, "blue", "L", 2) == 0

    def test_restock(self, inventory, product_id) -> None:
        inventory.decrement_if_available(product_id, "red", "M", 4)

        assert inventory.restock(product_id, "red", "M", 4) == 5

    def test_returned_products_are_copies(self, inventory, product_id) -> None:
        product = inventory.get_product(product_id)
        product["variants"][0]["quantity"] = 999

        assert inventory.get_variant(product_id, "red", "M")["quantity"] == 5

    def test_concurrent_decrements_never_go_negative(self, inventory, product_id) -> None:
        barrier = threading.Barrier(10)
        failures: list[Exception] = []

        def take_one() -> None:
            barrier.wait()
            try:
                inventory.decrement_if_available(product_id, "red", "M", 1)
            except InsufficientStockError as e:
                failures.append(e)

        threads = [threading.Thread(target=take_one) for _ in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert inventory.get_variant(product_id, "red", "M")["quantity"] == 0
        assert len(failures) == 5


class TestInMemoryCounterStore:
    """Tests for counters."""

    def test_first_increment_is_one(self) -> None:
        counters = InMemoryCounterStore()

        assert counters.increment("orderNumber") == 1
        assert counters.increment("orderNumber") == 2
        assert counters.increment("other") == 1

    def test_concurrent_increments_are_unique(self) -> None:
        counters = InMemoryCounterStore()

        with ThreadPoolExecutor(max_workers=16) as pool:
            values = list(pool.map(lambda _: counters.increment("orderNumber"), range(500)))

        assert len(set(values)) == 500
        assert max(values) == 500


class TestInMemoryCartStore:
    """Tests for carts."""

    def test_save_get_delete(self) -> None:
        carts = InMemoryCartStore()
        line = {"product_id": "p1", "quantity": 1, "color": "red", "size": "M"}

        saved = carts.save("u1", [line])

        assert saved["items"] == [line]
        assert carts.get("u1")["items"] == [line]
        assert carts.delete("u1") is True
        assert carts.get("u1") is None
        assert carts.delete("u1") is False

    def test_save_keeps_created_at(self) -> None:
        carts = InMemoryCartStore()
        first = carts.save("u1", [])
        second = carts.save("u1", [{"product_id": "p1", "quantity": 2, "color": "red", "size": "M"}])

        assert second["created_at"] == first["created_at"]


class TestInMemoryCheckoutStore:
    """Tests for pending checkouts."""

    def test_upsert_replaces(self) -> None:
        checkouts = InMemoryCheckoutStore()
        checkouts.upsert({"user_id": "u1", "notes": "first"})
        stored = checkouts.upsert({"user_id": "u1", "notes": "second"})

        assert stored["notes"] == "second"
        assert "updated_at" in stored
        assert checkouts.get("u1")["notes"] == "second"
        assert checkouts.delete("u1") is True
        assert checkouts.get("u1") is None


class TestInMemoryOrderStore:
    """Tests for orders."""

    def test_create_assigns_id_and_timestamps(self) -> None:
        orders = InMemoryOrderStore()

        order = orders.create({"user_id": "u1", "status": "pending", "order_number": "#000001"})

        assert order["id"]
        assert order["created_at"] == order["updated_at"]
        assert orders.get(order["id"]) == order

    def test_list_for_user_newest_first(self) -> None:
        orders = InMemoryOrderStore()
        first = orders.create({"user_id": "u1", "status": "pending", "order_number": "#000001"})
        orders.create({"user_id": "u2", "status": "pending", "order_number": "#000002"})
        third = orders.create({"user_id": "u1", "status": "pending", "order_number": "#000003"})

        assert [o["id"] for o in orders.list_for_user("u1")] == [third["id"], first["id"]]

    def test_set_status_with_expected(self) -> None:
        orders = InMemoryOrderStore()
        order = orders.create({"user_id": "u1", "status": "shipped", "order_number": "#000001"})

        assert orders.set_status(order["id"], "cancelled", expected="pending") is None
        assert orders.get(order["id"])["status"] == "shipped"

        updated = orders.set_status(order["id"], "delivered")
        assert updated["status"] == "delivered"

    def test_set_status_missing_order(self) -> None:
        assert InMemoryOrderStore().set_status("missing", "confirmed") is None


class TestInMemoryNotificationsAndUsers:
    """Tests for notifications and the user directory."""

    def test_create_many(self) -> None:
        store = InMemoryNotificationStore()

        created = store.create_many(
            [{"recipient_id": "a1", "title": "New order", "message": "m", "order_id": "o1"}]
        )

        assert created[0]["is_read"] is False
        assert len(store.notifications) == 1

    def test_user_directory(self) -> None:
        users = InMemoryUserDirectory()
        users.set_role("a1", "admin")
        users.set_role("u1", "user")

        assert users.get_role("a1") == "admin"
        assert users.get_role("nobody") is None
        assert users.list_admin_ids() == ["a1"]
