"""
Pytest configuration and fixtures for sheet-records tests.
"""
import os
import pytest
from typing import Any, Mapping
from unittest.mock import MagicMock

# Set test environment variables before importing anything
os.environ.setdefault("GOOGLE_CREDENTIALS_JSON", '{"type": "service_account", "project_id": "test"}')
os.environ.setdefault("SPREADSHEET_ID", "1TestSpreadsheetIdAbcdefghijklmnop")

from core.sheet_client import SheetClient
from lib.errors import BackendRejectedError, WriteConflictError
from lib.row_cache import RowCache
from lib.types import RawRecord


DAILY_PROFITS_HEADERS = ["StoreName", "Date", "Profit"]

DAILY_PROFITS_ROWS = [
    {"StoreName": "Canberra", "Date": "08/08/25", "Profit": "18000"},
    {"StoreName": "Melbourne - 1", "Date": "09/08/25", "Profit": "25000"},
    {"StoreName": "Brisbane", "Date": "08/09/25", "Profit": "30000"},
    {"StoreName": "Test Store", "Date": "09/04/25", "Profit": "15000"},
    {"StoreName": "Test 1", "Date": "09/04/25", "Profit": "75000"},
]


# ========== Response Assertion Helpers ==========

class ResponseAssertions:
    """Helper class for asserting ApiResponse structures."""

    @staticmethod
    def assert_success(response: dict) -> None:
        """Assert response is successful."""
        assert response.get("success") is True, f"Expected success, got: {response}"
        assert "error" not in response

    @staticmethod
    def assert_error(response: dict, code: str) -> str:
        """Assert response is a failure with given code and return its message.

        Args:
            response: The response dict to check
            code: Expected error code

        Returns:
            The error message
        """
        assert response.get("success") is False, f"Expected error, got success: {response}"
        assert response.get("code") == code, \
            f"Expected error code {code}, got {response.get('code')}"
        assert response.get("error"), "failure must carry a message"
        return response["error"]


@pytest.fixture
def assertions():
    """Fixture providing response assertion helpers."""
    return ResponseAssertions()


# ========== Test Doubles ==========

class FakeClock:
    """Manually advanced clock for cache tests."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeBackend:
    """
    In-memory SheetBackend.

    Counts calls and can be told to reject writes (reject_with) or to
    fail every call like a dead transport (fail_with).
    """

    def __init__(self, rows: list[dict[str, str]], gid: int = 0) -> None:
        self.rows = [dict(r) for r in rows]
        self.gid = gid
        self.read_count = 0
        self.append_calls: list[dict[str, str]] = []
        self.write_calls: list[tuple[int, str, str, str | None]] = []
        self.reject_with: str | None = None
        self.fail_with: Exception | None = None

    def _check(self, writing: bool) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        if writing and self.reject_with is not None:
            raise BackendRejectedError(self.reject_with)

    async def read_all(self) -> list[RawRecord]:
        self._check(writing=False)
        self.read_count += 1
        return [
            RawRecord(key=f"{self.gid}:{pos + 1}", position=pos, cells=dict(r))
            for pos, r in enumerate(self.rows, 1)
        ]

    async def append(self, values: Mapping[str, str]) -> None:
        self._check(writing=True)
        self.append_calls.append(dict(values))
        self.rows.append(dict(values))

    async def write_field(
        self,
        position: int,
        field: str,
        value: str,
        expected: str | None = None,
    ) -> None:
        self._check(writing=True)
        self.write_calls.append((position, field, value, expected))
        row = self.rows[position - 1]
        current = row.get(field, "")
        if expected is not None and current != expected:
            raise WriteConflictError(field, expected, current)
        row[field] = value


@pytest.fixture
def fake_clock():
    """Clock starting at t=1000s."""
    return FakeClock()


@pytest.fixture
def fake_backend():
    """In-memory backend seeded with the Daily Profits rows."""
    return FakeBackend(DAILY_PROFITS_ROWS)


@pytest.fixture
def client(fake_backend, fake_clock):
    """SheetClient over the fake backend with a fake-clock cache."""
    return SheetClient(fake_backend, DAILY_PROFITS_HEADERS, RowCache(clock=fake_clock))


# ========== gspread-level fixtures ==========

@pytest.fixture
def sample_sheet_values():
    """Daily Profits worksheet as returned by get_all_values()"""
    return [DAILY_PROFITS_HEADERS] + [
        [r["StoreName"], r["Date"], r["Profit"]] for r in DAILY_PROFITS_ROWS
    ]


@pytest.fixture
def mock_sheets_client(sample_sheet_values):
    """
    Mock SheetsClient for backend unit tests.
    Returns a MagicMock that can be configured per test.
    """
    mock = MagicMock()
    mock.get_all_values.return_value = sample_sheet_values
    mock.get_row_values.return_value = list(DAILY_PROFITS_HEADERS)
    mock.get_worksheet_id.return_value = 0
    mock.get_cell.return_value = ""
    return mock


@pytest.fixture
def sample_rows() -> list[dict[str, Any]]:
    """Mapped Daily Profits rows, as fetch_all() returns them."""
    return [
        {**r, "_id": f"0:{i + 1}", "_rowIndex": i}
        for i, r in enumerate(DAILY_PROFITS_ROWS, 1)
    ]
