"""
gspread-backed implementation of the SheetBackend contract.

Provides:
- Lazy SheetsClient acquisition (construction never touches the network)
- Header-driven column mapping
- Row identity from worksheet gid + sheet row number
- Optional request throttling for the Sheets API quota
- Mapping of gspread APIError to BackendRejectedError
"""
from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Callable, Mapping

from gspread.exceptions import APIError

from config import DEFAULT_MIN_INTERVAL, DEFAULT_SHEET_NAME, HEADER_ROW
from lib.common import to_cell_str
from lib.errors import BackendRejectedError, WriteConflictError
from lib.sheet_utils import a1, column_index, header_map, is_blank_row, norm_header
from lib.types import RawRecord
from sheets_client import SheetsClient, get_sheets_client

logger = logging.getLogger(__name__)


def describe_api_error(e: APIError) -> str:
    """Human-readable message for a Sheets API error."""
    code = getattr(e, "code", None)
    if code is None and getattr(e, "response", None) is not None:
        code = e.response.status_code
    if code == 429:
        return f"Sheets API quota exceeded: {e}"
    if code == 403:
        return f"permission denied (share the sheet with the service account): {e}"
    return f"Sheets API error: {e}"


class GspreadBackend:
    """
    SheetBackend over one worksheet of a Google spreadsheet.

    The row at `header_row` holds the column names; every later row is
    a data row. Data row N lives on sheet row header_row + N, and its id
    is "<gid>:<sheet row>".
    """

    def __init__(
        self,
        spreadsheet_id: str,
        sheet_name: str = DEFAULT_SHEET_NAME,
        sheets_factory: Callable[[], SheetsClient] = get_sheets_client,
        header_row: int = HEADER_ROW,
        min_interval: float = DEFAULT_MIN_INTERVAL,
    ) -> None:
        """
        Initialize backend. No API call happens here.

        Args:
            spreadsheet_id: Target spreadsheet ID
            sheet_name: Worksheet name
            sheets_factory: Returns the SheetsClient; called on first use
            header_row: 1-based sheet row holding the headers
            min_interval: Minimum seconds between API requests (0 = off)
        """
        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.header_row = header_row
        self.min_interval = min_interval
        self._sheets_factory = sheets_factory
        self._sheets: SheetsClient | None = None
        self._worksheet_id: int | None = None
        self._headers: list[str] | None = None
        self._request_lock = asyncio.Lock()
        self._last_request = 0.0

    # === Plumbing ===

    @property
    def sheets(self) -> SheetsClient:
        """SheetsClient, created on first access."""
        if self._sheets is None:
            self._sheets = self._sheets_factory()
        return self._sheets

    async def _throttle(self) -> None:
        if self.min_interval <= 0:
            return
        async with self._request_lock:
            wait = self._last_request + self.min_interval - time.monotonic()
            if wait > 0:
                logger.debug(f"Throttling Sheets request for {wait:.2f}s")
                await asyncio.sleep(wait)
            self._last_request = time.monotonic()

    async def _call(self, fn: Callable[..., Any], *args: Any) -> Any:
        """Run a blocking gspread call off the event loop."""
        await self._throttle()
        try:
            return await asyncio.to_thread(fn, *args)
        except APIError as e:
            message = describe_api_error(e)
            logger.warning(f"{self.sheet_name}: {message}")
            raise BackendRejectedError(message) from e

    async def _read_header_row(self) -> list[str]:
        """Fresh read of the header row (also refreshes the cached headers)."""
        row = await self._call(
            self.sheets.get_row_values, self.spreadsheet_id, self.sheet_name, self.header_row
        )
        self._headers = [str(h) for h in row]
        return self._headers

    async def _load_headers(self) -> list[str]:
        if self._headers is None:
            await self.read_all()
        return self._headers or []

    # === SheetBackend ===

    async def read_all(self) -> list[RawRecord]:
        """Read the whole worksheet and return its data rows."""
        sheets = self.sheets
        if self._worksheet_id is None:
            self._worksheet_id = await self._call(
                sheets.get_worksheet_id, self.spreadsheet_id, self.sheet_name
            )
        values = await self._call(sheets.get_all_values, self.spreadsheet_id, self.sheet_name)
        logger.info(f"Read {len(values)} sheet rows from {self.sheet_name}")

        if len(values) < self.header_row:
            self._headers = []
            return []

        self._headers = [str(h) for h in values[self.header_row - 1]]
        records: list[RawRecord] = []
        for position, row in enumerate(values[self.header_row:], 1):
            if is_blank_row(row):
                continue
            cells = {
                h: row[i] if i < len(row) else ""
                for i, h in enumerate(self._headers)
                if h
            }
            records.append(RawRecord(
                key=f"{self._worksheet_id}:{self.header_row + position}",
                position=position,
                cells=cells,
            ))
        return records

    async def append(self, values: Mapping[str, str]) -> None:
        """Append one row laid out in the sheet's header order."""
        headers = await self._read_header_row()
        if not any(headers):
            raise BackendRejectedError(f"sheet '{self.sheet_name}' has no header row")

        norm_map = header_map(headers)
        unknown = [k for k in values if norm_header(k) not in norm_map]
        if unknown:
            raise BackendRejectedError(f"unknown column(s): {', '.join(unknown)}")

        new_row = [""] * len(headers)
        for k, v in values.items():
            new_row[norm_map[norm_header(k)]] = to_cell_str(v)

        await self._call(self.sheets.append_rows, self.spreadsheet_id, self.sheet_name, [new_row])
        logger.info(f"Appended row to {self.sheet_name}")

    async def write_field(
        self,
        position: int,
        field: str,
        value: str,
        expected: str | None = None,
    ) -> None:
        """Write one cell, checking its current value first when asked."""
        headers = await self._load_headers()
        ci = column_index(headers, field)
        if ci is None:
            raise BackendRejectedError(f"column '{field}' not found in '{self.sheet_name}'")
        if position < 1:
            raise BackendRejectedError(f"invalid row position: {position}")

        cell = a1(self.header_row + position, ci)
        if expected is not None:
            current = to_cell_str(await self._call(
                self.sheets.get_cell, self.spreadsheet_id, self.sheet_name, cell
            ))
            if current != expected:
                logger.warning(f"Conflict at {cell}: expected '{expected}', found '{current}'")
                raise WriteConflictError(field, expected, current)

        await self._call(self.sheets.update_cell, self.spreadsheet_id, self.sheet_name, cell, value)
        logger.info(f"Updated {self.sheet_name}!{cell}")
