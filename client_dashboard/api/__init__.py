"""
API package initialization.

Router modules:
- dashboard: snapshot reads and manual refresh
- chat: assistant chat log, send, notifications
"""

from fastapi import APIRouter

from client_dashboard.api.dashboard import router as dashboard_router
from client_dashboard.api.chat import router as chat_router

# Create main API router
api_router = APIRouter()

api_router.include_router(dashboard_router, tags=["dashboard"])
api_router.include_router(chat_router, tags=["chat"])

__all__ = [
    "api_router",
    "dashboard_router",
    "chat_router",
]
