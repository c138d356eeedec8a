"""
Status Classification Service

Maps the sheet's free-text Status column onto a fixed set of categories and
computes the percentage breakdown shown on the status distribution chart.

Precedence (case-insensitive substring, first match wins):
1. "active" or "completed"   -> Active
2. "pending" or "progress"   -> Pending
3. "inactive" or "cancelled" -> Inactive
4. anything else             -> Other

Note that "inactive" contains "active", so rule 1 claims it before rule 3 is
reached; only "cancelled" text lands in Inactive. The metric aggregator uses
the same classify() so the Active card and the chart never disagree.
"""

from collections import Counter
from typing import Iterable, List, Optional, Tuple

from client_dashboard.models import ClientRecord, StatusBreakdownEntry, StatusCategory


# Evaluated top to bottom
CLASSIFICATION_RULES: List[Tuple[StatusCategory, Tuple[str, ...]]] = [
    (StatusCategory.ACTIVE, ("active", "completed")),
    (StatusCategory.PENDING, ("pending", "progress")),
    (StatusCategory.INACTIVE, ("inactive", "cancelled")),
]

CATEGORY_ORDER: List[StatusCategory] = [
    StatusCategory.ACTIVE,
    StatusCategory.PENDING,
    StatusCategory.INACTIVE,
    StatusCategory.OTHER,
]


def classify(status: Optional[str]) -> StatusCategory:
    """
    Classify one status string.

    Total and deterministic: None and the empty string map to Other.
    """
    text = (status or "").lower()
    for category, needles in CLASSIFICATION_RULES:
        if any(needle in text for needle in needles):
            return category
    return StatusCategory.OTHER


def breakdown(records: Iterable[ClientRecord]) -> List[StatusBreakdownEntry]:
    """
    Count records per category with percentage of total.

    Each percentage is round(count / total * 100, 1) on its own; the
    entries may miss 100.0 by the rounding residual. Only categories that occur are
    listed, in CATEGORY_ORDER.

    Args:
        records: Record set to classify

    Returns:
        Breakdown entries; empty when there are no records
    """
    counts = Counter(classify(record.status) for record in records)
    total = sum(counts.values())
    if total == 0:
        return []

    present = [category for category in CATEGORY_ORDER if counts[category] > 0]

    return [
        StatusBreakdownEntry(
            category=category,
            count=counts[category],
            percentage=round(counts[category] / total * 100, 1),
        )
        for category in present
    ]
