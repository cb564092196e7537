"""
Google Sheets API client using gspread.
Provides Service Account authentication and the sheet operations the
row backend needs: read everything, read/write one cell, append rows.

Rows are never deleted through this client.
"""
import json
import logging
import gspread
from google.oauth2.service_account import Credentials
from typing import Any

from config import SCOPES

logger = logging.getLogger(__name__)


class SheetsClient:
    """Wrapper around gspread for Google Sheets API access."""

    def __init__(self, credentials_json: str | dict):
        """
        Initialize the client with Service Account credentials.

        Args:
            credentials_json: Either a JSON string or dict containing
                             the Service Account credentials.
        """
        if isinstance(credentials_json, str):
            credentials_json = json.loads(credentials_json)
        creds = Credentials.from_service_account_info(credentials_json, scopes=SCOPES)
        self.gc = gspread.authorize(creds)
        self._spreadsheet_cache: dict[str, gspread.Spreadsheet] = {}

    def open_by_id(self, spreadsheet_id: str) -> gspread.Spreadsheet:
        """Open a spreadsheet by ID with caching."""
        if spreadsheet_id not in self._spreadsheet_cache:
            logger.info(f"Opening spreadsheet {spreadsheet_id}")
            self._spreadsheet_cache[spreadsheet_id] = self.gc.open_by_key(spreadsheet_id)
        return self._spreadsheet_cache[spreadsheet_id]

    def get_worksheet(self, spreadsheet_id: str, sheet_name: str) -> gspread.Worksheet:
        """Get a worksheet by name from a spreadsheet."""
        ss = self.open_by_id(spreadsheet_id)
        return ss.worksheet(sheet_name)

    def get_worksheet_id(self, spreadsheet_id: str, sheet_name: str) -> int:
        """Get the numeric worksheet id (gid)."""
        return self.get_worksheet(spreadsheet_id, sheet_name).id

    def get_all_values(self, spreadsheet_id: str, sheet_name: str) -> list[list[str]]:
        """Get all values from a worksheet as a 2D list."""
        ws = self.get_worksheet(spreadsheet_id, sheet_name)
        return ws.get_all_values()

    def get_row_values(self, spreadsheet_id: str, sheet_name: str, row: int) -> list[str]:
        """Get the values of one sheet row (1-based), trailing blanks trimmed."""
        ws = self.get_worksheet(spreadsheet_id, sheet_name)
        return ws.row_values(row)

    def get_cell(self, spreadsheet_id: str, sheet_name: str, cell: str) -> Any:
        """Get a single cell value."""
        ws = self.get_worksheet(spreadsheet_id, sheet_name)
        return ws.acell(cell).value

    def update_cell(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        cell: str,
        value: Any,
        value_input_option: str = "RAW",
    ) -> None:
        """Update a single cell (A1 notation)."""
        ws = self.get_worksheet(spreadsheet_id, sheet_name)
        ws.update(values=[[value]], range_name=cell, value_input_option=value_input_option)

    def append_rows(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        rows: list[list[Any]],
        value_input_option: str = "RAW",
    ) -> None:
        """
        Append rows to the end of a worksheet.

        RAW keeps strings such as "08/08/25" from being parsed as dates.
        """
        ws = self.get_worksheet(spreadsheet_id, sheet_name)
        ws.append_rows(rows, value_input_option=value_input_option)


# Singleton instance for the application
_sheets_client: SheetsClient | None = None


def get_sheets_client() -> SheetsClient:
    """
    Get the global SheetsClient instance.
    Initializes from environment variables on first call.
    """
    global _sheets_client
    if _sheets_client is None:
        from env_loader import get_google_credentials
        credentials = get_google_credentials()
        _sheets_client = SheetsClient(credentials)
    return _sheets_client
