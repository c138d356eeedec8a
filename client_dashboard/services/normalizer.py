"""
Client Sheet Normalization Service

Turns the spreadsheet's CSV export into an ordered tuple of ClientRecord.

Rules:
- Header names map to record fields by exact, case-sensitive match (SHEET_COLUMNS)
- Columns absent from the header row yield empty strings
- Rows whose client name is missing or whitespace-only are dropped, not errors
- Every other value passes through as raw text; numeric coercion belongs to
  the aggregation and chart services
- Cells beyond the header width are ignored; the row itself is kept
- Text that cannot be tokenized at all raises ParseError

The same row rules back normalize_rows(), which applies them to rows that
arrive already structured (assistant webhook payloads).
"""

import io
import logging
import warnings
from typing import Any, Iterable, List, Mapping, Sequence, Tuple

import pandas as pd

from client_dashboard.core.exceptions import ParseError
from client_dashboard.models import (
    REQUIRED_SHEET_COLUMNS,
    SHEET_COLUMNS,
    ClientRecord,
    ParseDiagnostics,
)

# Configure module logger
logger = logging.getLogger(__name__)

RecordSet = Tuple[ClientRecord, ...]

RECORD_FIELDS: List[str] = list(SHEET_COLUMNS.values())


# =============================================================================
# HELPERS
# =============================================================================

def _missing_columns(present: Iterable[str]) -> List[str]:
    """Expected headers for which neither the header nor the field name is present."""
    keys = set(present)
    return [
        header for header in REQUIRED_SHEET_COLUMNS
        if header not in keys and SHEET_COLUMNS[header] not in keys
    ]


def _build_records(
    rows: Sequence[Mapping[str, Any]],
    missing_columns: List[str],
) -> Tuple[RecordSet, ParseDiagnostics]:
    records = []
    for row in rows:
        record = ClientRecord.model_validate(row)
        if record.name.strip():
            records.append(record)

    diagnostics = ParseDiagnostics(
        rows_read=len(rows),
        rows_kept=len(records),
        rows_dropped=len(rows) - len(records),
        missing_columns=missing_columns,
    )

    if missing_columns:
        logger.warning(f"Source is missing expected columns: {missing_columns}")
    if diagnostics.rows_dropped:
        logger.info(f"Dropped {diagnostics.rows_dropped} rows without a client name")

    return tuple(records), diagnostics


# =============================================================================
# NORMALIZATION FUNCTIONS
# =============================================================================

def normalize(raw_text: str) -> Tuple[RecordSet, ParseDiagnostics]:
    """
    Parse CSV text with a header row into client records.

    Args:
        raw_text: The CSV body returned by the sheet export

    Returns:
        Tuple of (records in source order, diagnostics)

    Raises:
        ParseError: If the text cannot be tokenized as CSV (e.g. unterminated quoting)
    """
    if not raw_text or not raw_text.strip():
        return (), ParseDiagnostics(missing_columns=list(REQUIRED_SHEET_COLUMNS))

    try:
        # The python engine with index_col=False keeps rows that carry more
        # fields than the header (an unquoted "$1,200") and drops the extra
        # cells, announcing it with a ParserWarning
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", pd.errors.ParserWarning)
            df = pd.read_csv(
                io.StringIO(raw_text),
                engine='python',
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                index_col=False,
            )
    except pd.errors.EmptyDataError:
        return (), ParseDiagnostics(missing_columns=list(REQUIRED_SHEET_COLUMNS))
    except pd.errors.ParserError as e:
        logger.error(f"Failed to tokenize sheet CSV: {e}")
        raise ParseError(f"Parse error: {e}") from e

    if any(issubclass(w.category, pd.errors.ParserWarning) for w in caught):
        logger.warning("Some sheet rows have more cells than the header; extra cells were ignored")

    logger.info(f"Parsed CSV with {len(df)} rows and {len(df.columns)} columns")

    missing = [header for header in REQUIRED_SHEET_COLUMNS if header not in df.columns]

    # Keep only known headers, in a fixed order; short rows leave NaN behind
    frame = df.reindex(columns=list(SHEET_COLUMNS)).fillna('')
    rows = frame.to_dict(orient='records')

    return _build_records(rows, missing)


def normalize_rows(rows: Sequence[Mapping[str, Any]]) -> Tuple[RecordSet, ParseDiagnostics]:
    """
    Apply the normalization rules to already-structured rows.

    Each row may be keyed by sheet headers ("Clients", "No. of Headshots", ...)
    or by field names ("name", "headshot_count", ...).

    Args:
        rows: Row mappings, typically from an update payload

    Returns:
        Tuple of (records in input order, diagnostics)
    """
    present = set()
    for row in rows:
        present.update(row.keys())

    return _build_records(list(rows), _missing_columns(present))


def records_frame(records: Iterable[ClientRecord]) -> pd.DataFrame:
    """
    Build a DataFrame with one column per record field, preserving order.

    Used by the aggregation and chart services for vectorized coercion.
    """
    return pd.DataFrame(
        [record.model_dump() for record in records],
        columns=RECORD_FIELDS,
        dtype=object,
    )
