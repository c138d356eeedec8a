"""
Chart Projection Service

Derives chart-ready series from a record set:
- project_revenue_series: revenue per trailing period with a synthetic target line
- project_status_series: status distribution (delegates to services.status)

Revenue bucketing:
- The window is the `periods` most recent periods of frequency `freq`
  (calendar months by default), ending at the period containing `now`
- A record with a parseable Date lands in its own period
- A record without a usable Date lands in the current period. This is a known
  simplification, reported through RevenueSeries.insufficient_data
- Dated records outside the window are not plotted
- Periods without revenue are zero-filled

Targets are baseline + index * increment. They are not derived from data and
every point carries target_kind="synthetic".
"""

import logging
from datetime import datetime, timezone
from typing import Iterable, List, Optional

import pandas as pd

from client_dashboard.models import (
    ClientRecord,
    RevenuePoint,
    RevenueSeries,
    StatusBreakdownEntry,
)
from client_dashboard.services.aggregation import coerce_number
from client_dashboard.services.normalizer import records_frame
from client_dashboard.services.status import breakdown

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_PERIODS = 6
DEFAULT_FREQ = 'M'
DEFAULT_LABEL_FORMAT = '%b'
DEFAULT_TARGET_BASELINE = 45000.0
DEFAULT_TARGET_INCREMENT = 2000.0


def _naive_timestamp(now: Optional[datetime]) -> pd.Timestamp:
    ts = pd.Timestamp(now or datetime.now(timezone.utc))
    if ts.tzinfo is not None:
        ts = ts.tz_convert(None)
    return ts


def period_window(
    now: Optional[datetime] = None,
    periods: int = DEFAULT_PERIODS,
    freq: str = DEFAULT_FREQ,
) -> pd.PeriodIndex:
    """Trailing periods ending at the period that contains `now`."""
    current = pd.Period(_naive_timestamp(now), freq=freq)
    return pd.period_range(end=current, periods=periods, freq=freq)


def target_for(index: int, baseline: float, increment: float) -> float:
    """Synthetic target for the period at `index` in the window."""
    return baseline + index * increment


def project_revenue_series(
    records: Iterable[ClientRecord],
    now: Optional[datetime] = None,
    periods: int = DEFAULT_PERIODS,
    freq: str = DEFAULT_FREQ,
    label_format: str = DEFAULT_LABEL_FORMAT,
    baseline: float = DEFAULT_TARGET_BASELINE,
    increment: float = DEFAULT_TARGET_INCREMENT,
) -> RevenueSeries:
    """
    Project record revenue onto the trailing period window.

    Args:
        records: Record set snapshot
        now: Reference time; defaults to the current UTC time
        periods: Number of periods in the window
        freq: pandas period frequency
        label_format: strftime format for period labels
        baseline: Target of the first (oldest) period
        increment: Target increase per period

    Returns:
        RevenueSeries with one point per period, oldest first
    """
    window = period_window(now, periods, freq)
    current = window[-1]
    frame = records_frame(records)

    totals = {period: 0.0 for period in window}
    dated_records = 0
    undated_records = 0

    if not frame.empty:
        prices = frame['price'].map(coerce_number).astype(float)
        dates = pd.to_datetime(frame['date'], errors='coerce', utc=True, format='mixed')
        record_periods = dates.dt.tz_convert(None).dt.to_period(freq)

        undated = record_periods.isna()
        undated_records = int(undated.sum())
        dated_records = len(frame) - undated_records

        buckets = record_periods.astype(object).where(~undated, current)
        in_window = buckets.isin(list(window))
        outside = int((~in_window).sum())
        if outside:
            logger.debug(f"{outside} dated records fall outside the revenue window")

        for period, amount in prices[in_window].groupby(buckets[in_window]).sum().items():
            totals[period] += float(amount)

    points: List[RevenuePoint] = [
        RevenuePoint(
            period=period.strftime(label_format),
            actual=totals[period],
            target=target_for(index, baseline, increment),
        )
        for index, period in enumerate(window)
    ]

    return RevenueSeries(
        points=points,
        dated_records=dated_records,
        undated_records=undated_records,
        insufficient_data=dated_records == 0,
    )


def project_status_series(records: Iterable[ClientRecord]) -> List[StatusBreakdownEntry]:
    """Status distribution for the pie chart."""
    return breakdown(records)
