"""
Pydantic models for the client dashboard backend.

This module provides the domain records, derived aggregates and API contracts:
- ClientRecord: one spreadsheet row, raw text fields
- ParseDiagnostics: advisory counters from normalization
- Metrics, StatusBreakdownEntry, RevenuePoint, RevenueSeries: derivations
- DashboardSnapshot: records plus derivations, committed as one unit
- ChatMessage, Notification: update channel log entries
- Request/response models for the API routers

All models use Pydantic v2 syntax. Domain models are frozen so a committed
snapshot can be shared with readers as is.
"""

from datetime import datetime
from typing import Any, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

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
# Source Records
# =============================================================================

# Sheet header -> ClientRecord field. Headers are matched exactly.
SHEET_COLUMNS = {
    "Clients": "name",
    "No. of Headshots": "headshot_count",
    "Price": "price",
    "Status": "status",
    "Email": "email",
    "Date": "date",
}

REQUIRED_SHEET_COLUMNS: List[str] = ["Clients", "No. of Headshots", "Price", "Status", "Email"]


class ClientRecord(BaseModel):
    """
    One client row from the spreadsheet.

    Every field holds the raw cell text; numeric and currency coercion happens
    in the consumers. Records accept either the sheet headers or the field
    names as keys, so webhook payloads can use whichever the assistant emits.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "name": "Acme Studio",
                "headshot_count": "12",
                "price": "$1,200.50",
                "status": "Completed",
                "email": "hello@acme.example",
                "date": "2026-03-14",
            }
        },
    )

    name: str = Field(
        default="",
        validation_alias=AliasChoices("Clients", "name"),
        description="Client name; rows without one never reach a snapshot",
    )
    headshot_count: str = Field(
        default="",
        validation_alias=AliasChoices("No. of Headshots", "headshot_count", "headshotCount"),
        description="Raw headshot count text",
    )
    price: str = Field(
        default="",
        validation_alias=AliasChoices("Price", "price"),
        description="Raw price text, any currency formatting",
    )
    status: str = Field(
        default="",
        validation_alias=AliasChoices("Status", "status"),
        description="Free-text status",
    )
    email: str = Field(
        default="",
        validation_alias=AliasChoices("Email", "email"),
        description="Contact email",
    )
    date: str = Field(
        default="",
        validation_alias=AliasChoices("Date", "date"),
        description="Optional raw date text used for revenue bucketing",
    )

    @field_validator("*", mode="before")
    @classmethod
    def _raw_text(cls, value: Any) -> str:
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        return str(value)


class ParseDiagnostics(BaseModel):
    """Advisory counters produced while normalizing a source."""
    model_config = ConfigDict(frozen=True)

    rows_read: int = Field(default=0, ge=0, description="Data rows tokenized")
    rows_kept: int = Field(default=0, ge=0, description="Rows that became records")
    rows_dropped: int = Field(default=0, ge=0, description="Rows without a client name")
    missing_columns: List[str] = Field(
        default_factory=list,
        description="Expected sheet headers absent from the header row",
    )


# =============================================================================
# Derivations
# =============================================================================

class Metrics(BaseModel):
    """
    Summary statistics for the metric cards.

    average_price and active_percentage are None for an empty record set so
    the presentation layer never receives NaN or Infinity.
    """
    model_config = ConfigDict(frozen=True)

    total_clients: int = Field(default=0, ge=0)
    total_headshots: int = Field(default=0)
    total_revenue: float = Field(default=0.0)
    active_clients: int = Field(default=0, ge=0)
    average_price: Optional[float] = Field(default=None)
    active_percentage: Optional[float] = Field(default=None)


class StatusBreakdownEntry(BaseModel):
    """Count and share of one status category."""
    model_config = ConfigDict(frozen=True)

    category: StatusCategory
    count: int = Field(..., ge=0)
    percentage: float = Field(..., ge=0.0, le=100.0)


class RevenuePoint(BaseModel):
    """
    One period of the revenue chart.

    `actual` is measured from records; `target` is a synthetic straight line
    and is tagged with target_kind so the two are never confused.
    """
    model_config = ConfigDict(frozen=True)

    period: str
    actual: float = 0.0
    target: float = 0.0
    target_kind: TargetKind = TargetKind.SYNTHETIC


class RevenueSeries(BaseModel):
    """Revenue chart series plus how many records carried a usable date."""
    model_config = ConfigDict(frozen=True)

    points: List[RevenuePoint] = Field(default_factory=list)
    dated_records: int = Field(default=0, ge=0)
    undated_records: int = Field(default=0, ge=0)
    insufficient_data: bool = Field(
        default=True,
        description="True when no record has a usable date, so every record sits in the current period",
    )


class DashboardSnapshot(BaseModel):
    """
    Records and every derivation computed from them, committed as one unit.

    The controller replaces its snapshot reference in a single assignment,
    so a reader always sees metrics computed from the records beside them.
    """
    model_config = ConfigDict(frozen=True)

    version: int = Field(default=0, ge=0)
    origin: SnapshotOrigin = SnapshotOrigin.INITIAL
    committed_at: Optional[datetime] = None
    records: Tuple[ClientRecord, ...] = ()
    diagnostics: ParseDiagnostics = Field(default_factory=ParseDiagnostics)
    metrics: Metrics = Field(default_factory=Metrics)
    status_breakdown: List[StatusBreakdownEntry] = Field(default_factory=list)
    revenue_series: RevenueSeries = Field(default_factory=RevenueSeries)


class DataSourceStatus(BaseModel):
    """Controller state exposed to the presentation layer."""
    state: DataSourceState
    error: Optional[str] = None
    version: int = 0
    record_count: int = 0
    last_committed_at: Optional[datetime] = None
    origin: SnapshotOrigin = SnapshotOrigin.INITIAL
    diagnostics: ParseDiagnostics = Field(default_factory=ParseDiagnostics)


# =============================================================================
# Update Channel
# =============================================================================

class ChatMessage(BaseModel):
    """One entry of the append-only chat log."""
    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    sender: MessageSender
    timestamp: datetime
    reply_to: Optional[str] = Field(
        default=None,
        description="User message id this assistant message answers",
    )


class Notification(BaseModel):
    """Toast-style notice, separate from the chat log."""
    model_config = ConfigDict(frozen=True)

    kind: NotificationKind
    title: str
    description: str
    timestamp: datetime
    reply_to: Optional[str] = None


# =============================================================================
# API Contracts
# =============================================================================

class RecordsPage(BaseModel):
    """Paginated slice of the current records, in source order."""
    records: List[ClientRecord] = Field(default_factory=list)
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1)
    total: int = Field(..., ge=0)
    total_pages: int = Field(..., ge=0)
    version: int = Field(..., ge=0)


class SendMessageRequest(BaseModel):
    """Request body for posting a chat message."""
    message: str = Field(..., description="Text typed by the user")


class SendMessageResponse(BaseModel):
    """Assistant reply to one chat message."""
    reply: ChatMessage
    state: ExchangeState
    data_updated: bool = False


class ChatLogResponse(BaseModel):
    messages: List[ChatMessage] = Field(default_factory=list)


class NotificationsResponse(BaseModel):
    notifications: List[Notification] = Field(default_factory=list)
