"""
Error taxonomy for the dashboard pipeline.

Row-level defects (a missing client name, an unparseable price) are never
raised; they are normalized away and reported through ParseDiagnostics.
The exceptions below describe whole-source or whole-payload failures, and
every one of them leaves the session in a state the caller can retry from.
"""

from typing import Optional


class DashboardError(Exception):
    """Base class for recoverable pipeline failures."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FetchError(DashboardError):
    """Transport or HTTP failure reaching the sheet or the assistant webhook."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(DashboardError):
    """Tabular text that cannot be tokenized at all."""


class ValidationError(DashboardError):
    """Well-formed but unusable update payload."""
