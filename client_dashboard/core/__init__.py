"""
Core infrastructure package for the dashboard backend.

Provides:
- Configuration management via pydantic-settings
- The shared httpx.AsyncClient lifecycle
- The pipeline error taxonomy

Re-exports the key components so other modules can write:

    from client_dashboard.core import get_settings, FetchError

FastAPI dependencies live in client_dashboard.core.dependencies and are
imported from there; they depend on the services package, which itself
imports from core.
"""

# =============================================================================
# Re-exports from client_dashboard.core.config
# =============================================================================
from client_dashboard.core.config import Settings, get_settings

# =============================================================================
# Re-exports from client_dashboard.core.http
# =============================================================================
from client_dashboard.core.http import (
    build_http_client,
    init_http_client,
    get_http_client,
    close_http_client,
)

# =============================================================================
# Re-exports from client_dashboard.core.exceptions
# =============================================================================
from client_dashboard.core.exceptions import (
    DashboardError,
    FetchError,
    ParseError,
    ValidationError,
)


__all__ = [
    # Configuration (config.py)
    'Settings',
    'get_settings',
    # HTTP client lifecycle (http.py)
    'build_http_client',
    'init_http_client',
    'get_http_client',
    'close_http_client',
    # Errors (exceptions.py)
    'DashboardError',
    'FetchError',
    'ParseError',
    'ValidationError',
]
