"""Shared async HTTP client.

A single ``httpx.AsyncClient`` is reused across GraphQL requests so the
connection pool is shared. The application lifespan warms it on startup and
closes it on shutdown.
"""

import logging
from typing import Optional

import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)

_client: Optional[httpx.AsyncClient] = None


def get_http_client() -> httpx.AsyncClient:
    """Return the shared client, creating it on first use."""
    global _client
    if _client is None or _client.is_closed:
        settings = get_settings()
        _client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.http_timeout),
            headers={"User-Agent": f"linear-node/{settings.app_version}"},
        )
        logger.debug("Created shared HTTP client (timeout=%ss)", settings.http_timeout)
    return _client


async def close_http_client():
    """Close the shared client if one is open."""
    global _client
    if _client is not None and not _client.is_closed:
        await _client.aclose()
        logger.debug("Closed shared HTTP client")
    _client = None
