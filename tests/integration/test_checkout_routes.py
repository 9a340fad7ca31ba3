"""Integration tests for checkout preview endpoints."""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def filled_cart(client: TestClient, auth_headers, product) -> None:
    response = client.post(
        "/api/v1/cart/items",
        headers=auth_headers,
        json={"product_id": product["id"], "color": "red", "size": "M", "quantity": 2},
    )
    assert response.status_code == 200


class TestPreviewCheckout:
    """Tests for POST /api/v1/checkout/preview."""

    @pytest.mark.usefixtures("filled_cart")
    def test_preview_totals(self, client: TestClient, auth_headers, shipping_address) -> None:
        response = client.post(
            "/api/v1/checkout/preview",
            headers=auth_headers,
            json={"shipping_address": shipping_address, "notes": "Call first"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["sub_total"] == 200.0
        assert data["discount_total"] == 20.0
        assert data["shipping_fee"] == 70.0
        assert data["final_total"] == 250.0
        assert data["items"][0]["line_total"] == 180.0
        assert data["notes"] == "Call first"

    @pytest.mark.usefixtures("filled_cart")
    def test_preview_leaves_stock(self, client: TestClient, auth_headers, shipping_address, stores, product) -> None:
        client.post("/api/v1/checkout/preview", headers=auth_headers, json={"shipping_address": shipping_address})

        assert stores.inventory.get_variant(product["id"], "red", "M")["quantity"] == 5

    @pytest.mark.usefixtures("filled_cart")
    def test_unknown_governorate(self, client: TestClient, auth_headers, shipping_address) -> None:
        response = client.post(
            "/api/v1/checkout/preview",
            headers=auth_headers,
            json={"shipping_address": {**shipping_address, "governorate": "Atlantis"}},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_shipping_address"
        assert client.get("/api/v1/checkout/preview", headers=auth_headers).status_code == 404

    @pytest.mark.usefixtures("filled_cart")
    def test_product_deleted_since_added(
        self, client: TestClient, auth_headers, shipping_address, stores, product
    ) -> None:
        stores.inventory.delete_product(product["id"])

        response = client.post("/api/v1/checkout/preview", headers=auth_headers, json={"shipping_address": shipping_address})

        assert response.status_code == 400
        assert response.json()["error"] == "product_not_found"
        assert response.json()["message"] == "Product not found in cart"

    def test_empty_cart(self, client: TestClient, auth_headers, shipping_address) -> None:
        response = client.post(
            "/api/v1/checkout/preview",
            headers=auth_headers,
            json={"shipping_address": shipping_address},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "empty_cart"

    @pytest.mark.usefixtures("filled_cart")
    def test_invalid_phone_is_rejected_by_schema(self, client: TestClient, auth_headers, shipping_address) -> None:
        response = client.post(
            "/api/v1/checkout/preview",
            headers=auth_headers,
            json={"shipping_address": {**shipping_address, "phone": "call me"}},
        )

        assert response.status_code == 422


class TestGetCheckoutPreview:
    """Tests for GET /api/v1/checkout/preview."""

    def test_no_preview_yet(self, client: TestClient, auth_headers) -> None:
        response = client.get("/api/v1/checkout/preview", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "checkout_not_found"

    @pytest.mark.usefixtures("filled_cart")
    def test_returns_latest_preview(self, client: TestClient, auth_headers, shipping_address) -> None:
        client.post("/api/v1/checkout/preview", headers=auth_headers, json={"shipping_address": shipping_address})
        client.post(
            "/api/v1/checkout/preview",
            headers=auth_headers,
            json={"shipping_address": {**shipping_address, "governorate": "Giza"}},
        )

        response = client.get("/api/v1/checkout/preview", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["shipping_fee"] == 80.0
        assert response.json()["shipping_address"]["governorate"] == "Giza"
