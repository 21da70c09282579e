"""
Database Client Factory

Builds the SupabaseDatabaseClient from configuration.

SUPABASE_URL:      project endpoint, e.g. https://<ref>.supabase.co
SUPABASE_ANON_KEY: public (anon) API key

Missing or malformed configuration never raises: a placeholder client bound to
a sentinel URL is returned instead and a warning is logged.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
from urllib.parse import urlparse

from .supabase_adapter import SupabaseDatabaseClient

logger = logging.getLogger(__name__)

PLACEHOLDER_URL = "https://placeholder.supabase.co"
# JWT-shaped so supabase-py's key format check accepts it
PLACEHOLDER_KEY = "placeholder.placeholder.placeholder"

# Module-level singleton — created once on first use
_client: SupabaseDatabaseClient | None = None
_client_lock = asyncio.Lock()


def is_valid_url(url: str) -> bool:
    """True when ``url`` has an http(s) scheme and a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


async def create_db_client(url: str | None = None, key: str | None = None) -> SupabaseDatabaseClient:
    """
    Build a new SupabaseDatabaseClient.

    Args:
        url: Supabase project URL (defaults to SUPABASE_URL)
        key: anon API key (defaults to SUPABASE_ANON_KEY)

    Returns:
        A live client, or a placeholder client when configuration is unusable.
    """
    from supabase import acreate_client

    url = (url if url is not None else os.getenv("SUPABASE_URL", "")).strip()
    key = (key if key is not None else os.getenv("SUPABASE_ANON_KEY", "")).strip()

    if url and key and is_valid_url(url):
        try:
            native = await acreate_client(url, key)
        except Exception as e:
            logger.warning("Supabase rejected the configured credentials (%s); using placeholder client", e)
        else:
            match = re.match(r"https://([^.]+)\.supabase\.co", url)
            if match:
                logger.debug("Supabase client initialised (project=%s)", match.group(1))
            else:
                logger.debug("Supabase client initialised (self-hosted)")
            return SupabaseDatabaseClient(native)
    else:
        logger.warning(
            "Supabase credentials not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY "
            "in your environment; all queries will fail until then."
        )

    native = await acreate_client(PLACEHOLDER_URL, PLACEHOLDER_KEY)
    return SupabaseDatabaseClient(native, placeholder=True)


async def get_db_client() -> SupabaseDatabaseClient:
    """
    Returns the shared SupabaseDatabaseClient.

    Reads configuration on first call and builds the client.
    Subsequent calls return the cached instance.
    """
    global _client
    if _client is not None:
        return _client

    async with _client_lock:
        if _client is None:
            _client = await create_db_client()
            logger.info("DatabaseClient initialised (placeholder=%s)", _client.is_placeholder)
    return _client


def reset_db_client() -> None:
    """
    Reset the cached client (used in tests to re-initialise with different env).
    Not intended for production use.
    """
    global _client
    _client = None
