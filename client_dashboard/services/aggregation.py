"""
Metric Aggregation Service

Computes the metric card values from a record set in one pass:
- total_clients: number of records
- total_headshots: sum of coerced headshot counts, each truncated toward zero
- total_revenue: sum of coerced prices
- active_clients: records whose status classifies as Active
- average_price: total_revenue / total_clients, None for an empty set
- active_percentage: active_clients / total_clients * 100, None for an empty set

Numeric coercion strips every character that is not a digit, sign or decimal
point before parsing. Anything still unparseable counts as 0 and stays in the
denominator.
"""

import math
import re
from typing import Any, Iterable, Optional

import numpy as np

from client_dashboard.models import ClientRecord, Metrics, StatusCategory
from client_dashboard.services.normalizer import records_frame
from client_dashboard.services.status import classify


NON_NUMERIC_PATTERN = re.compile(r'[^0-9.+\-]')


# =============================================================================
# Numeric Coercion
# =============================================================================


def coerce_number(value: Any) -> float:
    """
    Coerce raw cell text to a float.

    Examples:
        >>> coerce_number("$1,200.50")
        1200.5
        >>> coerce_number("1200.5")
        1200.5
        >>> coerce_number("N/A")
        0.0
    """
    if value is None:
        return 0.0
    cleaned = NON_NUMERIC_PATTERN.sub('', str(value))
    try:
        number = float(cleaned)
    except ValueError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def _share(part: float, whole: float) -> Optional[float]:
    return part / whole if whole > 0 else None


# =============================================================================
# Aggregation
# =============================================================================


def aggregate(records: Iterable[ClientRecord]) -> Metrics:
    """
    Compute summary metrics for a record set.

    Args:
        records: Record set snapshot

    Returns:
        Metrics; an empty record set yields zero totals and None ratios
    """
    frame = records_frame(records)
    total_clients = len(frame)
    if total_clients == 0:
        return Metrics()

    prices = frame['price'].map(coerce_number).astype(float)
    headshots = np.trunc(frame['headshot_count'].map(coerce_number).astype(float))
    # Boolean mask, not a column of enum values: pandas 3 stores those as str
    is_active = frame['status'].map(lambda status: classify(status) is StatusCategory.ACTIVE)
    active_clients = int(is_active.astype(bool).sum())

    total_revenue = float(prices.sum())
    active_share = _share(active_clients, total_clients)

    return Metrics(
        total_clients=total_clients,
        total_headshots=int(headshots.sum()),
        total_revenue=total_revenue,
        active_clients=active_clients,
        average_price=_share(total_revenue, total_clients),
        active_percentage=round(active_share * 100, 1) if active_share is not None else None,
    )
