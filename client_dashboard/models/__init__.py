"""
Package initialization file for dashboard models.

Re-exports the enumerations and Pydantic schemas so other modules can import
them from client_dashboard.models directly.

Usage:
    from client_dashboard.models import (
        ClientRecord,
        Metrics,
        StatusCategory,
        # ... etc
    )
"""

# =============================================================================
# Enums
# =============================================================================

from client_dashboard.models.enums import (
    DataSourceState,
    ExchangeState,
    MessageSender,
    NotificationKind,
    SnapshotOrigin,
    StatusCategory,
    TargetKind,
)


# =============================================================================
# Schemas
# =============================================================================

from client_dashboard.models.schemas import (
    # Source records
    SHEET_COLUMNS,
    REQUIRED_SHEET_COLUMNS,
    ClientRecord,
    ParseDiagnostics,
    # Derivations
    Metrics,
    StatusBreakdownEntry,
    RevenuePoint,
    RevenueSeries,
    DashboardSnapshot,
    DataSourceStatus,
    # Update channel
    ChatMessage,
    Notification,
    # API contracts
    RecordsPage,
    SendMessageRequest,
    SendMessageResponse,
    ChatLogResponse,
    NotificationsResponse,
)


__all__ = [
    # Enums
    "DataSourceState",
    "ExchangeState",
    "MessageSender",
    "NotificationKind",
    "SnapshotOrigin",
    "StatusCategory",
    "TargetKind",
    # Schemas
    "SHEET_COLUMNS",
    "REQUIRED_SHEET_COLUMNS",
    "ClientRecord",
    "ParseDiagnostics",
    "Metrics",
    "StatusBreakdownEntry",
    "RevenuePoint",
    "RevenueSeries",
    "DashboardSnapshot",
    "DataSourceStatus",
    "ChatMessage",
    "Notification",
    "RecordsPage",
    "SendMessageRequest",
    "SendMessageResponse",
    "ChatLogResponse",
    "NotificationsResponse",
]
