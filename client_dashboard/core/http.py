"""
Shared async HTTP client module.

This module owns the single httpx.AsyncClient used for both outbound
integrations: the spreadsheet CSV fetch and the assistant webhook. Keeping one
client per process reuses connections and applies one timeout policy, so a
timeout on either integration surfaces as an ordinary httpx.HTTPError.

Key Components:
- Global client singleton (_client)
- init_http_client(): Create the client at application startup
- get_http_client(): Get the client (initializes if needed)
- close_http_client(): Close the client at application shutdown

Usage:
    # At application startup (in FastAPI lifespan)
    client = await init_http_client()

    # At application shutdown
    await close_http_client()
"""

from typing import Optional

import httpx

from client_dashboard.core.config import get_settings


# =============================================================================
# Global Client Singleton
# =============================================================================

# None until init_http_client() is called
_client: Optional[httpx.AsyncClient] = None


# =============================================================================
# Client Lifecycle Functions
# =============================================================================

def build_http_client(timeout_seconds: float) -> httpx.AsyncClient:
    """
    Build an AsyncClient with the dashboard's request defaults.

    Redirects are followed because Google Sheets CSV exports answer with a
    redirect to a content host.
    """
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_seconds),
        follow_redirects=True,
    )


async def init_http_client() -> httpx.AsyncClient:
    """
    Initialize the shared HTTP client.

    Idempotent: returns the existing client if one was already created.

    Returns:
        httpx.AsyncClient: The shared client.
    """
    global _client

    if _client is None:
        settings = get_settings()
        _client = build_http_client(settings.http_timeout_seconds)

    return _client


async def get_http_client() -> httpx.AsyncClient:
    """
    Get the shared HTTP client, initializing it on first use.

    Returns:
        httpx.AsyncClient: The shared client.
    """
    if _client is None:
        await init_http_client()

    assert _client is not None, "Client should be initialized after init_http_client()"

    return _client


async def close_http_client() -> None:
    """
    Close the shared HTTP client.

    Idempotent; a later get_http_client() creates a fresh client.
    """
    global _client

    if _client is not None:
        await _client.aclose()
        _client = None
