"""
Database connection management.

Provides the Supabase client singleton for store operations.
"""

from supabase import create_client, Client
from functools import lru_cache
from typing import Optional
import structlog

from config.settings import settings
from exceptions import ConfigurationError, DatabaseConnectionError

logger = structlog.get_logger(__name__)


def _require_store_config() -> None:
    """Fail before any network access when the store is not configured."""
    if not settings.store_configured:
        raise ConfigurationError(
            "Supabase configuration missing",
            missing=settings.missing_store_fields
        )


@lru_cache()
def get_supabase_client() -> Client:
    """
    Get cached Supabase client instance.

    Uses lru_cache to ensure only one client is created.
    Call get_supabase_client.cache_clear() to reconnect.

    Returns:
        Client: Supabase client

    Raises:
        ConfigurationError: If SUPABASE_URL or SUPABASE_KEY is missing
        DatabaseConnectionError: If connection fails
    """
    _require_store_config()

    try:
        logger.info(
            "connecting_to_supabase",
            url=settings.supabase_url[:30] + "..."  # Log partial URL only
        )

        client = create_client(
            settings.supabase_url,
            settings.supabase_key
        )

        logger.info(
            "supabase_connected",
            status="success"
        )

        return client

    except Exception as e:
        logger.error(
            "supabase_connection_failed",
            error=str(e),
            error_type=type(e).__name__
        )
        raise DatabaseConnectionError(str(e)) from e


def create_auth_client() -> Client:
    """
    Create a fresh, uncached Supabase client.

    Auth calls store the signed-in session on the client, so each
    request that signs a user in or out gets its own client instead of
    sharing the cached one.
    """
    _require_store_config()

    try:
        return create_client(
            settings.supabase_url,
            settings.supabase_key
        )
    except Exception as e:
        logger.error(
            "auth_client_failed",
            error=str(e)
        )
        raise DatabaseConnectionError(str(e)) from e


def get_admin_client() -> Optional[Client]:
    """
    Get Supabase client with service role key (admin access).

    Only available if SUPABASE_SERVICE_KEY is configured. The seeding
    script prefers it so row-level security does not block the upsert.

    Returns:
        Client: Admin Supabase client, or None if not configured
    """
    if not settings.supabase_service_key or not settings.supabase_url:
        logger.warning("admin_client_not_configured")
        return None

    try:
        return create_client(
            settings.supabase_url,
            settings.supabase_service_key
        )
    except Exception as e:
        logger.error(
            "admin_client_failed",
            error=str(e)
        )
        return None


# ===================
# HELPER FUNCTIONS
# ===================

def check_connection() -> dict:
    """
    Check database connection health.

    Returns:
        dict: Connection status with details
    """
    try:
        client = get_supabase_client()

        products = (
            client.table(settings.products_table)
            .select("id", count="exact")
            .execute()
        )

        return {
            "status": "healthy",
            "products_count": products.count
        }

    except Exception as e:
        return {
            "status": "unhealthy",
            "error": str(e)
        }
