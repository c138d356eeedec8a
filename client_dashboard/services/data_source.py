"""
Data Source Controller

Owns the dashboard's record set for one session and every derivation computed
from it.

State machine:
    idle -> loading -> ready | error
    ready -> loading      (refresh)
    error -> loading      (retry)

Guarantees:
- The record set lives in a DashboardSnapshot together with its Metrics,
  StatusBreakdown and RevenueSeries. Derivations are computed before the
  snapshot is published and the publish is one attribute assignment, so a
  reader never sees metrics from a different record set.
- A failed load keeps the previous snapshot and exposes the error message.
- refresh() while a fetch is in flight joins that fetch: one network round-trip,
  one resulting snapshot for every caller.
- Each fetch and each external update takes a request sequence number. A fetch
  that is no longer the latest request when it completes is discarded, so a
  slow stale response cannot overwrite a newer result.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Tuple

import httpx

from client_dashboard.core.config import Settings
from client_dashboard.core.exceptions import DashboardError, FetchError, ParseError, ValidationError
from client_dashboard.models import (
    ClientRecord,
    DashboardSnapshot,
    DataSourceState,
    DataSourceStatus,
    Metrics,
    ParseDiagnostics,
    RevenueSeries,
    SnapshotOrigin,
    StatusBreakdownEntry,
)
from client_dashboard.services.aggregation import aggregate
from client_dashboard.services.charts import project_revenue_series
from client_dashboard.services.normalizer import normalize, normalize_rows
from client_dashboard.services.status import breakdown

# Configure module logger
logger = logging.getLogger(__name__)

SnapshotListener = Callable[[DashboardSnapshot], None]

# Keys under which an update payload object may carry its rows
PAYLOAD_ROW_KEYS: Tuple[str, ...] = ("records", "rows", "data")


class DataSourceController:
    """
    Session-scoped owner of the dashboard snapshot.

    Args:
        client: Shared HTTP client used for the sheet fetch
        source_url: CSV export URL
        settings: Chart projection settings; module defaults when omitted
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        source_url: str,
        settings: Optional[Settings] = None,
    ) -> None:
        self._client = client
        self._source_url = source_url
        self._settings = settings
        self._state = DataSourceState.IDLE
        self._error: Optional[str] = None
        self._snapshot = DashboardSnapshot()
        self._request_seq = 0
        self._inflight: Optional["asyncio.Task[DashboardSnapshot]"] = None
        self._listeners: List[SnapshotListener] = []

    # =========================================================================
    # Read API (synchronous, last committed snapshot)
    # =========================================================================

    @property
    def source_url(self) -> str:
        return self._source_url

    @property
    def state(self) -> DataSourceState:
        return self._state

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def snapshot(self) -> DashboardSnapshot:
        return self._snapshot

    def get_records(self) -> Tuple[ClientRecord, ...]:
        return self._snapshot.records

    def get_metrics(self) -> Metrics:
        return self._snapshot.metrics

    def get_status_breakdown(self) -> List[StatusBreakdownEntry]:
        return self._snapshot.status_breakdown

    def get_revenue_series(self) -> RevenueSeries:
        return self._snapshot.revenue_series

    def status(self) -> DataSourceStatus:
        snapshot = self._snapshot
        return DataSourceStatus(
            state=self._state,
            error=self._error,
            version=snapshot.version,
            record_count=len(snapshot.records),
            last_committed_at=snapshot.committed_at,
            origin=snapshot.origin,
            diagnostics=snapshot.diagnostics,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register a callback invoked with every committed snapshot.

        Returns:
            A function that removes the listener.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # =========================================================================
    # Mutating Operations
    # =========================================================================

    async def load(self, source_url: Optional[str] = None) -> DashboardSnapshot:
        """
        Fetch and commit the sheet, superseding any fetch already in flight.

        Args:
            source_url: New CSV URL; the stored URL is reused when omitted

        Returns:
            The committed snapshot

        Raises:
            FetchError: Transport failure, timeout or non-2xx response
            ParseError: Response body is not tokenizable CSV
        """
        if source_url is not None:
            self._source_url = source_url

        self._request_seq += 1
        seq = self._request_seq
        self._state = DataSourceState.LOADING
        self._error = None

        task = asyncio.ensure_future(self._fetch_and_commit(seq, self._source_url))
        self._inflight = task
        return await asyncio.shield(task)

    async def refresh(self) -> DashboardSnapshot:
        """
        Re-load from the stored URL, joining a fetch that is already in flight.

        Returns:
            The snapshot produced by the (possibly shared) fetch
        """
        inflight = self._inflight
        if inflight is not None and not inflight.done():
            logger.info("Refresh requested while a fetch is in flight; joining it")
            return await asyncio.shield(inflight)
        return await self.load()

    def apply_external_update(self, payload: Any) -> DashboardSnapshot:
        """
        Replace the record set from an assistant update payload.

        Accepted payloads: a list of row objects, or an object carrying such a
        list under "records", "rows" or "data". Rows go through the same
        normalization as the sheet, then the snapshot is committed exactly as
        a load would commit it. Any fetch still in flight is superseded.

        Raises:
            ValidationError: Payload is None, not a structure, or has no usable rows list
        """
        rows = self._payload_rows(payload)
        records, diagnostics = normalize_rows(rows)

        self._request_seq += 1
        return self._commit(records, diagnostics, SnapshotOrigin.EXTERNAL)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _fetch_and_commit(self, seq: int, url: str) -> DashboardSnapshot:
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            reason = e.response.reason_phrase or "HTTP error"
            raise self._fail(seq, FetchError(
                f"Failed to fetch data: {status_code} {reason}",
                status_code=status_code,
            )) from e
        except httpx.HTTPError as e:
            raise self._fail(seq, FetchError(f"Failed to fetch data: {e!r}")) from e

        try:
            records, diagnostics = normalize(response.text)
        except ParseError as e:
            raise self._fail(seq, e) from e

        if seq != self._request_seq:
            logger.info(f"Discarding superseded sheet response (request {seq}, latest {self._request_seq})")
            return await self._latest_result()

        return self._commit(records, diagnostics, SnapshotOrigin.SOURCE)

    async def _latest_result(self) -> DashboardSnapshot:
        inflight = self._inflight
        current = asyncio.current_task()
        if inflight is not None and inflight is not current and not inflight.done():
            return await asyncio.shield(inflight)
        return self._snapshot

    def _fail(self, seq: int, error: DashboardError) -> DashboardError:
        if seq != self._request_seq:
            logger.info(f"Ignoring failure of superseded request {seq}: {error.message}")
            return error

        logger.error(f"Sheet load failed: {error.message}")
        self._state = DataSourceState.ERROR
        self._error = error.message
        return error

    def _commit(
        self,
        records: Tuple[ClientRecord, ...],
        diagnostics: ParseDiagnostics,
        origin: SnapshotOrigin,
    ) -> DashboardSnapshot:
        snapshot = DashboardSnapshot(
            version=self._snapshot.version + 1,
            origin=origin,
            committed_at=datetime.now(timezone.utc),
            records=records,
            diagnostics=diagnostics,
            metrics=aggregate(records),
            status_breakdown=breakdown(records),
            revenue_series=self._project_revenue(records),
        )

        self._snapshot = snapshot
        self._state = DataSourceState.READY
        self._error = None
        logger.info(f"Committed snapshot v{snapshot.version} ({origin.value}) with {len(records)} records")

        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")

        return snapshot

    def _project_revenue(self, records: Tuple[ClientRecord, ...]) -> RevenueSeries:
        settings = self._settings
        if settings is None:
            return project_revenue_series(records)
        return project_revenue_series(
            records,
            periods=settings.revenue_periods,
            freq=settings.revenue_period_freq,
            label_format=settings.revenue_period_label_format,
            baseline=settings.revenue_target_baseline,
            increment=settings.revenue_target_increment,
        )

    @staticmethod
    def _payload_rows(payload: Any) -> List[Any]:
        if payload is None:
            raise ValidationError("Update payload is empty")

        rows = payload
        if isinstance(payload, dict):
            rows = next(
                (payload[key] for key in PAYLOAD_ROW_KEYS if isinstance(payload.get(key), list)),
                None,
            )
            if rows is None:
                raise ValidationError(
                    f"Update payload has no row list under any of {list(PAYLOAD_ROW_KEYS)}"
                )

        if not isinstance(rows, list):
            raise ValidationError(f"Update payload must be a list or object, got {type(payload).__name__}")

        if not all(isinstance(row, dict) for row in rows):
            raise ValidationError("Every update row must be an object")

        return rows
