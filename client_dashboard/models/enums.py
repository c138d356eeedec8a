"""
Enumeration definitions for the client dashboard backend.

All enums inherit from both `str` and `Enum` so they serialize as plain
strings in Pydantic models and API responses.
"""

from enum import Enum


class StatusCategory(str, Enum):
    """
    Normalized client status.

    The sheet's Status column is free text; every value maps to exactly one
    of these categories (see services.status.classify).
    """
    ACTIVE = "Active"
    PENDING = "Pending"
    INACTIVE = "Inactive"
    OTHER = "Other"


class DataSourceState(str, Enum):
    """
    Lifecycle of the record set owned by the data source controller.

    - idle: No load attempted yet
    - loading: A fetch is in flight
    - ready: Last load or update committed successfully
    - error: Last load failed; the previous snapshot (if any) is still served
    """
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class SnapshotOrigin(str, Enum):
    """Which trigger produced a snapshot."""
    INITIAL = "initial"
    SOURCE = "source"
    EXTERNAL = "external"


class MessageSender(str, Enum):
    """Author of a chat message."""
    USER = "user"
    ASSISTANT = "assistant"


class ExchangeState(str, Enum):
    """
    State of one outbound chat exchange.

    composed -> sent -> answered | failed
    """
    COMPOSED = "composed"
    SENT = "sent"
    ANSWERED = "answered"
    FAILED = "failed"


class NotificationKind(str, Enum):
    """Side-channel notices raised by the update channel."""
    DATA_UPDATED = "data_updated"
    UPDATE_REJECTED = "update_rejected"
    CONNECTION_ERROR = "connection_error"


class TargetKind(str, Enum):
    """Provenance of a revenue target value."""
    SYNTHETIC = "synthetic"
