"""
FastAPI dependency injection module for the client dashboard backend.

The data source controller and the update channel are session objects created
in the application lifespan and stored on app.state. Route handlers receive
them through these dependencies, which tests replace with
app.dependency_overrides.

Key Dependencies Provided:
- get_settings_dependency / SettingsDep: cached Settings singleton
- get_data_source / DataSourceDep: the session's DataSourceController
- get_update_channel / UpdateChannelDep: the session's UpdateChannel

Usage Examples:
    @router.get("/metrics")
    async def get_metrics(data_source: DataSourceDep) -> Metrics:
        return data_source.get_metrics()
"""

from typing import Annotated

from fastapi import Depends, Request

from client_dashboard.core.config import Settings, get_settings
from client_dashboard.services.data_source import DataSourceController
from client_dashboard.services.update_channel import UpdateChannel


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """
    Return the Settings singleton instance.

    A thin wrapper around get_settings() so tests can override it:
        app.dependency_overrides[get_settings_dependency] = lambda: test_settings
    """
    return get_settings()


# =============================================================================
# Session Dependencies
# =============================================================================

def get_data_source(request: Request) -> DataSourceController:
    """Return the DataSourceController created by the application lifespan."""
    return request.app.state.data_source


def get_update_channel(request: Request) -> UpdateChannel:
    """Return the UpdateChannel created by the application lifespan."""
    return request.app.state.update_channel


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]

DataSourceDep = Annotated[DataSourceController, Depends(get_data_source)]

UpdateChannelDep = Annotated[UpdateChannel, Depends(get_update_channel)]
