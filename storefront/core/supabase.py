"""Supabase client singleton for the Supabase storage backend."""

from functools import lru_cache

from supabase import Client, create_client
from supabase.lib.client_options import SyncClientOptions
from supabase_auth import SyncMemoryStorage

from storefront.core.config import get_settings


@lru_cache
def get_supabase_client() -> Client:
    """Get the cached Supabase client used by every Supabase store.

    Authenticates with the secret key, which bypasses RLS at the PostgREST
    level; ownership and admin checks happen in the services. The backend
    never signs users in, so session persistence and token refresh are off.

    Returns:
        Client: Supabase client instance.
    """
    settings = get_settings()
    options = SyncClientOptions(
        schema=settings.supabase_schema,
        postgrest_client_timeout=settings.supabase_timeout_seconds,
        storage=SyncMemoryStorage(),
        auto_refresh_token=False,
        persist_session=False,
    )
    return create_client(
        settings.supabase_url,
        settings.supabase_secret_key,
        options=options,
    )
