"""Supabase client (REST-based, no supabase-py).

Initialized at app startup from SUPABASE_URL and SUPABASE_SERVICE_KEY. One
shared httpx.AsyncClient serves both PostgREST and the GoTrue admin API.
"""

import logging

import httpx

from app.core.config import get_settings
from app.infrastructure.supabase._rest_client import SupabaseRESTClient

logger = logging.getLogger(__name__)

_supabase_client: SupabaseRESTClient | None = None


def init_supabase(http_client: httpx.AsyncClient | None = None) -> bool:
    """Initialize the Supabase REST client.

    Idempotent if already initialized. On any initialization error, logs the
    exception and returns False so the app can start (provisioning endpoints
    then answer 503).

    Args:
        http_client: Optional injected client (tests use an httpx.MockTransport).

    Returns:
        True if the client was initialized, False on error.
    """
    global _supabase_client
    if _supabase_client is not None:
        return True
    try:
        settings = get_settings()
        _supabase_client = SupabaseRESTClient(
            settings.supabase_url,
            settings.supabase_service_key.get_secret_value(),
            timeout=settings.http_timeout_seconds,
            http_client=http_client,
        )
        logger.info("Supabase REST client initialized for %s", settings.supabase_url)
        return True
    except Exception:
        logger.exception("Supabase initialization failed")
        return False


def get_supabase_client() -> SupabaseRESTClient | None:
    """Return the Supabase client, or None if not initialized."""
    return _supabase_client


async def close_supabase() -> None:
    """Close the client's HTTP connection pool. Call from app shutdown."""
    global _supabase_client
    if _supabase_client is not None:
        await _supabase_client.aclose()
        _supabase_client = None
        logger.info("Supabase HTTP client closed")
