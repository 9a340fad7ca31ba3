"""Storage backend selection."""

import logging
from functools import lru_cache
from typing import Any

from storefront.core.config import get_settings
from storefront.stores.base import Stores

logger = logging.getLogger(__name__)


@lru_cache
def get_stores() -> Stores:
    """Get the cached store set for the configured backend.

    Returns:
        Stores: Stores backed by Supabase or by process memory.

    Note:
        Call get_stores.cache_clear() to rebuild, e.g. between tests.
    """
    settings = get_settings()
    if settings.storage_backend == "memory":
        from storefront.stores.memory import create_memory_stores

        return create_memory_stores()

    from storefront.core.supabase import get_supabase_client
    from storefront.stores.supabase import create_supabase_stores

    return create_supabase_stores(get_supabase_client())


async def check_storage_connection() -> dict[str, Any]:
    """Check if the storage backend is reachable.

    Returns:
        dict: Connection status with 'healthy' boolean and optional 'error' message.
    """
    try:
        get_stores().inventory.check_connection()
        return {"healthy": True}
    except Exception as e:
        logger.warning("Storage health check failed: %s", str(e))
        return {"healthy": False, "error": str(e)}
