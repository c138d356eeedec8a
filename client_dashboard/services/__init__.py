"""
Dashboard Services Module

Services:
- normalizer: CSV text / payload rows -> ClientRecord tuples with diagnostics
- status: free-text status classification and percentage breakdown
- aggregation: metric card values
- charts: revenue and status chart series
- data_source: session owner of the record set snapshot
- update_channel: chat exchange with the assistant webhook

The first four are pure functions over a record set. The last two hold the
session state and are consumed by the API layer (client_dashboard/api/).
"""

# =============================================================================
# Pure Derivations
# =============================================================================

from client_dashboard.services.normalizer import (
    normalize,
    normalize_rows,
    records_frame,
)
from client_dashboard.services.status import (
    classify,
    breakdown,
    CATEGORY_ORDER,
)
from client_dashboard.services.aggregation import (
    aggregate,
    coerce_number,
)
from client_dashboard.services.charts import (
    period_window,
    project_revenue_series,
    project_status_series,
)

# =============================================================================
# Session Services
# =============================================================================

from client_dashboard.services.data_source import DataSourceController
from client_dashboard.services.update_channel import UpdateChannel


__all__ = [
    "normalize",
    "normalize_rows",
    "records_frame",
    "classify",
    "breakdown",
    "CATEGORY_ORDER",
    "aggregate",
    "coerce_number",
    "period_window",
    "project_revenue_series",
    "project_status_series",
    "DataSourceController",
    "UpdateChannel",
]
