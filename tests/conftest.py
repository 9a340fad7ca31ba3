"""Pytest configuration and fixtures."""

import os
import time
from collections.abc import Generator
from typing import Any
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from jose import jwt

# Set test environment variables before importing application modules
TEST_JWT_SECRET = "test-jwt-secret"

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("STORAGE_BACKEND", "memory")
os.environ.setdefault("JWT_SECRET", TEST_JWT_SECRET)
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")

from storefront.core.config import get_settings  # noqa: E402
from storefront.core.storage import get_stores  # noqa: E402
from storefront.stores.base import Stores  # noqa: E402

PRODUCT_ID = "11111111-1111-4111-8111-111111111111"
SECOND_PRODUCT_ID = "22222222-2222-4222-8222-222222222222"

CAIRO_ADDRESS = {
    "full_name": "Mona Adel",
    "phone": "01012345678",
    "address_line": "12 Nile Street, Apt 4",
    "city": "Cairo",
    "governorate": "Cairo",
    "country": "Egypt",
}


def create_test_token(
    sub: str,
    email: str | None = "test@example.com",
    exp_offset: int = 3600,
    secret: str = TEST_JWT_SECRET,
    algorithm: str = "HS256",
) -> str:
    """Create a signed test JWT.

    Args:
        sub: Subject (user ID).
        email: User email.
        exp_offset: Seconds from now for expiration (negative for expired).
        secret: JWT secret for signing.
        algorithm: Signing algorithm.

    Returns:
        str: Encoded JWT token.
    """
    now = int(time.time())
    payload = {"sub": sub, "email": email, "exp": now + exp_offset, "iat": now}
    return jwt.encode(payload, secret, algorithm=algorithm)


def make_product(
    product_id: str = PRODUCT_ID,
    title: str = "Linen Shirt",
    original_price: float = 100,
    discount: dict[str, Any] | None = None,
    variants: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Build a catalog product with (red, M) x5 and (blue, L) x2 by default."""
    return {
        "id": product_id,
        "title": title,
        "original_price": original_price,
        "discount": discount if discount is not None else {"type": "percentage", "amount": 10},
        "variants": variants
        if variants is not None
        else [
            {"color": "red", "size": "M", "quantity": 5},
            {"color": "blue", "size": "L", "quantity": 2},
        ],
        "images": [{"url": f"https://cdn.example.com/{product_id}.jpg"}],
    }


@pytest.fixture(autouse=True)
def reset_caches() -> Generator[None, None, None]:
    """Give every test fresh settings and a fresh in-memory store set."""
    get_settings.cache_clear()
    get_stores.cache_clear()
    yield
    get_settings.cache_clear()
    get_stores.cache_clear()


@pytest.fixture
def stores() -> Stores:
    """The in-memory stores the app and services resolve for this test."""
    return get_stores()


@pytest.fixture
def product(stores: Stores) -> dict[str, Any]:
    """Seed and return the default product."""
    data = make_product()
    stores.inventory.put_product(data)
    return data


@pytest.fixture
def user_id() -> str:
    return str(uuid4())


@pytest.fixture
def admin_id(stores: Stores) -> str:
    admin = str(uuid4())
    stores.users.set_role(admin, "admin")
    return admin


@pytest.fixture
def auth_headers(user_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_test_token(user_id)}"}


@pytest.fixture
def admin_headers(admin_id: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_test_token(admin_id)}"}


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Provide a test client for the FastAPI application.

    Yields:
        TestClient: FastAPI test client.
    """
    from storefront.main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def product_factory():
    """Return the make_product builder."""
    return make_product


@pytest.fixture
def token_factory():
    """Return the create_test_token builder."""
    return create_test_token


@pytest.fixture
def shipping_address() -> dict[str, Any]:
    """A valid Cairo shipping address."""
    return dict(CAIRO_ADDRESS)
