"""
FastAPI router module for dashboard data.

Implements the read API over the last committed snapshot plus the manual
refresh trigger:
- GET  /dashboard/status            controller state, error text, diagnostics
- GET  /dashboard/snapshot          records and every derivation in one payload
- GET  /dashboard/records           paginated records in source order
- GET  /dashboard/metrics           metric card values
- GET  /dashboard/status-breakdown  status distribution
- GET  /dashboard/revenue-series    revenue vs synthetic target
- POST /dashboard/refresh           re-fetch the sheet

Reads never wait on network activity. A refresh that fails answers 502 with
the error text; the previous snapshot keeps being served.
"""

import logging
import math
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from client_dashboard.core.dependencies import DataSourceDep, SettingsDep
from client_dashboard.core.exceptions import DashboardError
from client_dashboard.models import (
    DashboardSnapshot,
    DataSourceStatus,
    Metrics,
    RecordsPage,
    RevenueSeries,
    StatusBreakdownEntry,
)

# Configure logging
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard")


@router.get("/status", response_model=DataSourceStatus)
async def get_status(data_source: DataSourceDep) -> DataSourceStatus:
    """Controller state, last error and diagnostics of the current snapshot."""
    return data_source.status()


@router.get("/snapshot", response_model=DashboardSnapshot)
async def get_snapshot(data_source: DataSourceDep) -> DashboardSnapshot:
    return data_source.snapshot


@router.get("/records", response_model=RecordsPage)
async def get_records(
    data_source: DataSourceDep,
    settings: SettingsDep,
    page: int = Query(default=1, ge=1, description="1-based page number"),
    page_size: Optional[int] = Query(default=None, ge=1, le=500, description="Rows per page"),
) -> RecordsPage:
    """
    Return one page of records.

    Pages are cut from a single snapshot, so the rows and `total` always
    agree even if a refresh commits while the request is served.
    """
    snapshot = data_source.snapshot
    size = page_size or settings.records_page_size
    total = len(snapshot.records)
    start = (page - 1) * size

    return RecordsPage(
        records=list(snapshot.records[start:start + size]),
        page=page,
        page_size=size,
        total=total,
        total_pages=math.ceil(total / size),
        version=snapshot.version,
    )


@router.get("/metrics", response_model=Metrics)
async def get_metrics(data_source: DataSourceDep) -> Metrics:
    return data_source.get_metrics()


@router.get("/status-breakdown", response_model=List[StatusBreakdownEntry])
async def get_status_breakdown(data_source: DataSourceDep) -> List[StatusBreakdownEntry]:
    return data_source.get_status_breakdown()


@router.get("/revenue-series", response_model=RevenueSeries)
async def get_revenue_series(data_source: DataSourceDep) -> RevenueSeries:
    return data_source.get_revenue_series()


@router.post("/refresh", response_model=DataSourceStatus)
async def refresh(data_source: DataSourceDep) -> DataSourceStatus:
    """
    Re-fetch the sheet.

    Concurrent refreshes share one fetch.

    Raises:
        HTTPException(502): If the sheet cannot be fetched or parsed
    """
    try:
        await data_source.refresh()
    except DashboardError as e:
        logger.error(f"Refresh failed: {e.message}")
        raise HTTPException(status_code=502, detail=e.message)

    return data_source.status()
