"""
Test Module for Metric Aggregation.

Validates:
- Numeric coercion of currency-formatted and unparseable cell text
- Metric totals, average and active share over the sample sheet
- Empty record sets producing zero totals and None ratios
"""

import math

import pytest

from client_dashboard.models import ClientRecord, Metrics
from client_dashboard.services.aggregation import aggregate, coerce_number
from client_dashboard.services.normalizer import normalize
from client_dashboard.tests.conftest import SAMPLE_TOTAL_HEADSHOTS, SAMPLE_TOTAL_REVENUE


# =============================================================================
# TEST CLASS: Numeric Coercion
# =============================================================================

class TestCoerceNumber:
    """Tests for coerce_number()."""

    @pytest.mark.parametrize("raw,expected", [
        ("$1,200.50", 1200.5),
        ("1200.5", 1200.5),
        ("1,100", 1100.0),
        ("USD 75", 75.0),
        ("-40", -40.0),
        ("15 shots", 15.0),
        ("0", 0.0),
        (42, 42.0),
    ])
    def test_parses_numeric_text(self, raw, expected):
        assert coerce_number(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["N/A", "", "   ", "--", "1.2.3", "TBD", None])
    def test_unparseable_is_zero(self, raw):
        assert coerce_number(raw) == 0.0

    def test_result_is_finite(self):
        """Digit runs long enough to overflow float still yield a finite number."""
        assert math.isfinite(coerce_number("9" * 400))


# =============================================================================
# TEST CLASS: aggregate()
# =============================================================================

class TestAggregate:
    """Tests for aggregate() over record sets."""

    def test_sample_sheet_metrics(self, sample_sheet_csv: str):
        records, _ = normalize(sample_sheet_csv)
        metrics = aggregate(records)

        assert metrics.total_clients == 12
        assert metrics.total_headshots == SAMPLE_TOTAL_HEADSHOTS
        assert metrics.total_revenue == pytest.approx(SAMPLE_TOTAL_REVENUE)
        assert metrics.active_clients == 5
        assert metrics.average_price == pytest.approx(SAMPLE_TOTAL_REVENUE / 12)
        assert metrics.active_percentage == 41.7

    def test_coerced_prices_sum(self):
        """'$1,200.50', '1200.5' and 'N/A' sum to 2401.0 with N/A counted as 0."""
        records = [
            ClientRecord(name="A", price="$1,200.50"),
            ClientRecord(name="B", price="1200.5"),
            ClientRecord(name="C", price="N/A"),
        ]
        metrics = aggregate(records)

        assert metrics.total_revenue == pytest.approx(2401.0)
        assert metrics.average_price == pytest.approx(2401.0 / 3)

    def test_fractional_headshots_truncate(self):
        records = [
            ClientRecord(name="A", headshot_count="2.9"),
            ClientRecord(name="B", headshot_count="3.1"),
            ClientRecord(name="C", headshot_count="-1.5"),
        ]

        assert aggregate(records).total_headshots == 4

    def test_empty_record_set(self):
        metrics = aggregate([])

        assert metrics == Metrics()
        assert metrics.total_clients == 0
        assert metrics.total_revenue == 0.0
        assert metrics.average_price is None
        assert metrics.active_percentage is None

    def test_active_count_uses_classifier(self):
        """'Completed' and 'Inactive' both classify as Active; 'Cancelled' does not."""
        records = [
            ClientRecord(name="A", status="Completed"),
            ClientRecord(name="B", status="Inactive"),
            ClientRecord(name="C", status="Cancelled"),
            ClientRecord(name="D", status=""),
        ]
        metrics = aggregate(records)

        assert metrics.active_clients == 2
        assert metrics.active_percentage == 50.0

    def test_every_record_active(self):
        """An all-Active set reports 100 percent regardless of the frame's string dtype."""
        records = [
            ClientRecord(name="A", status="Active"),
            ClientRecord(name="B", status="Completed"),
        ]
        metrics = aggregate(records)

        assert metrics.active_clients == 2
        assert metrics.active_percentage == 100.0
