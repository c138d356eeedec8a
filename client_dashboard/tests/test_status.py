"""
Test Module for Status Classification.

Validates:
- Category precedence for the free-text Status column
- Total classification (None, empty, unknown -> Other)
- Breakdown counts, percentages, category order and the per-entry rounding
"""

from typing import List

import pytest

from client_dashboard.models import ClientRecord, StatusCategory
from client_dashboard.services.status import CATEGORY_ORDER, breakdown, classify
from client_dashboard.services.normalizer import normalize


def _records(statuses: List[str]) -> List[ClientRecord]:
    return [ClientRecord(name=f"Client {i}", status=status) for i, status in enumerate(statuses)]


# =============================================================================
# TEST CLASS: classify()
# =============================================================================

class TestClassify:
    """Tests for first-match-wins status classification."""

    @pytest.mark.parametrize("status,expected", [
        ("Active", StatusCategory.ACTIVE),
        ("ACTIVE", StatusCategory.ACTIVE),
        ("Completed", StatusCategory.ACTIVE),
        ("completed - invoiced", StatusCategory.ACTIVE),
        ("Pending", StatusCategory.PENDING),
        ("In Progress", StatusCategory.PENDING),
        ("pending review", StatusCategory.PENDING),
        ("Cancelled", StatusCategory.INACTIVE),
        ("On hold", StatusCategory.OTHER),
        ("Awaiting deposit", StatusCategory.OTHER),
        ("", StatusCategory.OTHER),
        (None, StatusCategory.OTHER),
    ])
    def test_categories(self, status, expected):
        assert classify(status) == expected

    def test_inactive_is_claimed_by_active_rule(self):
        """'inactive' contains 'active', and the Active rule is evaluated first."""
        assert classify("Inactive") == StatusCategory.ACTIVE

    def test_active_rule_beats_pending_rule(self):
        assert classify("Active, payment pending") == StatusCategory.ACTIVE

    def test_pending_rule_beats_inactive_rule(self):
        assert classify("pending - cancelled?") == StatusCategory.PENDING


# =============================================================================
# TEST CLASS: breakdown()
# =============================================================================

class TestBreakdown:
    """Tests for the status distribution."""

    def test_sample_sheet_distribution(self, sample_sheet_csv: str):
        records, _ = normalize(sample_sheet_csv)
        entries = breakdown(records)

        assert [(e.category, e.count, e.percentage) for e in entries] == [
            (StatusCategory.ACTIVE, 5, 41.7),
            (StatusCategory.PENDING, 3, 25.0),
            (StatusCategory.INACTIVE, 1, 8.3),
            (StatusCategory.OTHER, 3, 25.0),
        ]

    def test_only_present_categories_in_fixed_order(self):
        entries = breakdown(_records(["On hold", "Pending", "Pending"]))

        assert [e.category for e in entries] == [StatusCategory.PENDING, StatusCategory.OTHER]
        assert [e.category for e in entries] == [c for c in CATEGORY_ORDER if c in {e.category for e in entries}]

    def test_empty_records(self):
        assert breakdown([]) == []

    def test_single_category_is_one_hundred_percent(self):
        entries = breakdown(_records(["Active"] * 7))

        assert len(entries) == 1
        assert entries[0].percentage == 100.0

    @pytest.mark.parametrize("statuses", [
        ["Active", "Pending", "Cancelled"],
        ["Active", "Active", "Pending", "Cancelled", "Other", "Other"],
        ["Active"] * 2 + ["Pending"] * 2 + ["Cancelled"] * 2 + ["x"],
        ["Active"] * 5 + ["Pending"] * 3 + ["Cancelled"] * 1 + ["x"] * 3,
    ])
    def test_percentages_sum_near_one_hundred(self, statuses: List[str]):
        entries = breakdown(_records(statuses))

        assert 99.9 <= round(sum(e.percentage for e in entries), 1) <= 100.1
        assert sum(e.count for e in entries) == len(statuses)

    def test_each_percentage_is_rounded_independently(self):
        """Three equal thirds are 33.3 each; the residual is not redistributed."""
        entries = breakdown(_records(["Active", "Pending", "Cancelled"]))

        assert [e.percentage for e in entries] == [33.3, 33.3, 33.3]

    def test_rounding_can_overshoot(self):
        """Two, two, two and one of seven round to 28.6 x3 and 14.3."""
        entries = breakdown(_records(["Active"] * 2 + ["Pending"] * 2 + ["Cancelled"] * 2 + ["x"]))

        assert [e.percentage for e in entries] == [28.6, 28.6, 28.6, 14.3]
