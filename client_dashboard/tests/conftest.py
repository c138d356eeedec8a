"""
Pytest Configuration and Shared Fixtures for the Client Dashboard Tests.

Provides:
- Sample sheet rows matching the production spreadsheet layout
- CSV builders for normalizer and controller tests
- A scripted httpx.MockTransport handler standing in for the sheet export
  and the assistant webhook
- Settings and service fixtures wired to those fake transports

Dependencies:
- pytest
- pytest-asyncio
- pandas
- httpx
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

import httpx
import pandas as pd
import pytest

from client_dashboard.core.config import Settings
from client_dashboard.services.data_source import DataSourceController
from client_dashboard.services.update_channel import UpdateChannel


SHEET_URL = "https://sheets.example.test/export?format=csv"
WEBHOOK_URL = "http://assistant.example.test/webhook/Dashboard"

SHEET_HEADERS: List[str] = ["Clients", "No. of Headshots", "Price", "Status", "Email"]


# ============================================================
# SAMPLE DATA
# ============================================================

# Twelve well-formed clients. Expected aggregates:
#   total_headshots = 85, total_revenue = 12400.75
#   Active 5 (41.7%), Pending 3 (25.0%), Inactive 1 (8.3%), Other 3 (25.0%)
SAMPLE_CLIENT_ROWS: List[Dict[str, str]] = [
    {"Clients": "Acme Studio", "No. of Headshots": "12", "Price": "$1,200.50", "Status": "Completed", "Email": "acme@example.test"},
    {"Clients": "Birch & Co", "No. of Headshots": "8", "Price": "950", "Status": "Active", "Email": "birch@example.test"},
    {"Clients": "Cedar Labs", "No. of Headshots": "5", "Price": "$2,000", "Status": "In Progress", "Email": "cedar@example.test"},
    {"Clients": "Dune Media", "No. of Headshots": "0", "Price": "N/A", "Status": "Pending", "Email": "dune@example.test"},
    {"Clients": "Elm Partners", "No. of Headshots": "20", "Price": "$3,500.00", "Status": "Cancelled", "Email": "elm@example.test"},
    {"Clients": "Fjord Design", "No. of Headshots": "3", "Price": "$450", "Status": "On hold", "Email": "fjord@example.test"},
    {"Clients": "Grove Legal", "No. of Headshots": "10", "Price": "1,100", "Status": "completed", "Email": "grove@example.test"},
    {"Clients": "Harbor Dental", "No. of Headshots": "", "Price": "$800", "Status": "pending review", "Email": "harbor@example.test"},
    {"Clients": "Iris Realty", "No. of Headshots": "6", "Price": "$600.25", "Status": "ACTIVE", "Email": "iris@example.test"},
    {"Clients": "Juniper Tech", "No. of Headshots": "15 shots", "Price": "$1,500", "Status": "Inactive", "Email": "juniper@example.test"},
    {"Clients": "Kestrel Films", "No. of Headshots": "4", "Price": "", "Status": "", "Email": "kestrel@example.test"},
    {"Clients": "Lumen Bakery", "No. of Headshots": "2", "Price": "$300", "Status": "Awaiting deposit", "Email": "lumen@example.test"},
]

SAMPLE_TOTAL_HEADSHOTS = 85
SAMPLE_TOTAL_REVENUE = 12400.75


def create_csv_text(df: pd.DataFrame) -> str:
    """Render a DataFrame as sheet-export CSV text (no index column)."""
    return df.to_csv(index=False)


@pytest.fixture
def sample_client_df() -> pd.DataFrame:
    """The twelve sample clients as a DataFrame with the sheet headers."""
    return pd.DataFrame(SAMPLE_CLIENT_ROWS, columns=SHEET_HEADERS)


@pytest.fixture
def sample_sheet_csv(sample_client_df: pd.DataFrame) -> str:
    """
    Sheet CSV with the twelve sample clients plus one row with an empty name.

    The nameless row sits in the middle so order preservation is exercised.
    """
    nameless = pd.DataFrame(
        [{"Clients": "", "No. of Headshots": "99", "Price": "$9,999", "Status": "Active", "Email": "ghost@example.test"}],
        columns=SHEET_HEADERS,
    )
    df = pd.concat(
        [sample_client_df.iloc[:6], nameless, sample_client_df.iloc[6:]],
        ignore_index=True,
    )
    return create_csv_text(df)


@pytest.fixture
def small_sheet_csv() -> str:
    """Two-client sheet used as the "newer" source in replacement tests."""
    df = pd.DataFrame(
        [
            {"Clients": "Nova Yoga", "No. of Headshots": "3", "Price": "$250", "Status": "Active", "Email": "nova@example.test"},
            {"Clients": "Orbit Cafe", "No. of Headshots": "1", "Price": "$150", "Status": "Pending", "Email": "orbit@example.test"},
        ],
        columns=SHEET_HEADERS,
    )
    return create_csv_text(df)


# ============================================================
# FAKE HTTP TRANSPORT
# ============================================================

@dataclass
class Step:
    """
    One scripted HTTP response.

    Attributes:
        status_code: Response status
        text: Plain-text body (CSV for the sheet)
        json: JSON body (webhook replies); used when text is None
        error: Transport exception class raised instead of responding
        gate: Event the handler waits on before answering
    """
    status_code: int = 200
    text: Optional[str] = None
    json: Any = None
    error: Optional[Type[httpx.TransportError]] = None
    gate: Optional[asyncio.Event] = None


class ScriptedHandler:
    """
    MockTransport handler replaying Steps in request order.

    The last step repeats once the script is exhausted. Every request is
    recorded in `requests`.
    """

    def __init__(self, *steps: Step) -> None:
        self.steps: List[Step] = list(steps) or [Step(text="")]
        self.requests: List[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.steps.pop(0) if len(self.steps) > 1 else self.steps[0]

        if step.gate is not None:
            await step.gate.wait()
        if step.error is not None:
            raise step.error("scripted transport failure", request=request)
        if step.text is not None:
            return httpx.Response(step.status_code, text=step.text)
        return httpx.Response(step.status_code, json=step.json)


def make_client(handler: Callable[[httpx.Request], Any]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by `handler`."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


async def wait_for_requests(handler: ScriptedHandler, count: int) -> None:
    """Yield to the event loop until `handler` has seen `count` requests."""
    for _ in range(1000):
        if len(handler.requests) >= count:
            return
        await asyncio.sleep(0)
    raise AssertionError(f"expected {count} requests, saw {len(handler.requests)}")


# ============================================================
# SETTINGS AND SERVICE FIXTURES
# ============================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings independent of the process environment and any .env file."""
    return Settings(
        _env_file=None,
        sheet_csv_url=SHEET_URL,
        webhook_url=WEBHOOK_URL,
        http_timeout_seconds=1.0,
        records_page_size=5,
    )


@pytest.fixture
def make_controller(test_settings: Settings) -> Callable[[ScriptedHandler], DataSourceController]:
    """Factory building a DataSourceController over a scripted sheet handler."""

    def _make(handler: ScriptedHandler) -> DataSourceController:
        return DataSourceController(make_client(handler), SHEET_URL, test_settings)

    return _make


@pytest.fixture
def idle_controller(make_controller) -> DataSourceController:
    """Controller that has not loaded; the sheet would answer with an empty body."""
    return make_controller(ScriptedHandler(Step(text="")))


@pytest.fixture
def make_channel(idle_controller: DataSourceController) -> Callable[..., UpdateChannel]:
    """Factory building an UpdateChannel over a scripted webhook handler."""

    def _make(handler: Callable[[httpx.Request], Any], greeting: Optional[str] = None) -> UpdateChannel:
        return UpdateChannel(make_client(handler), WEBHOOK_URL, idle_controller, greeting=greeting)

    return _make
