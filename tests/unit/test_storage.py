"""Unit tests for storage backend selection."""

from unittest.mock import MagicMock, patch

import pytest

from storefront.core.storage import check_storage_connection, get_stores
from storefront.stores.memory import InMemoryInventoryStore
from storefront.stores.supabase import SupabaseInventoryStore


class TestGetStores:
    """Tests for get_stores."""

    def test_memory_backend(self) -> None:
        stores = get_stores()

        assert isinstance(stores.inventory, InMemoryInventoryStore)
        assert get_stores() is stores

    def test_supabase_backend(self) -> None:
        settings = MagicMock(storage_backend="supabase")
        client = MagicMock()
        with patch("storefront.core.storage.get_settings", return_value=settings), patch(
            "storefront.core.supabase.get_supabase_client", return_value=client
        ):
            stores = get_stores()

        assert isinstance(stores.inventory, SupabaseInventoryStore)
        assert stores.inventory.client is client


class TestCheckStorageConnection:
    """Tests for check_storage_connection."""

    @pytest.mark.asyncio
    async def test_healthy(self) -> None:
        assert await check_storage_connection() == {"healthy": True}

    @pytest.mark.asyncio
    async def test_unhealthy(self) -> None:
        stores = get_stores()
        with patch.object(stores.inventory, "check_connection", side_effect=ConnectionError("refused")):
            result = await check_storage_connection()

        assert result == {"healthy": False, "error": "refused"}


class TestGetSupabaseClient:
    """Tests for the Supabase client factory."""

    def test_client_uses_configured_schema_and_timeout(self) -> None:
        from storefront.core.supabase import get_supabase_client

        get_supabase_client.cache_clear()
        with patch("storefront.core.supabase.create_client") as mock_create:
            client = get_supabase_client()

        get_supabase_client.cache_clear()
        assert client is mock_create.return_value
        url, key = mock_create.call_args.args
        options = mock_create.call_args.kwargs["options"]
        assert url == "https://test-project.supabase.co"
        assert key == "test-secret-key"
        assert options.schema == "public"
        assert options.postgrest_client_timeout == 10
        assert options.persist_session is False
