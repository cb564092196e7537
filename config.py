"""
Configuration constants for the sheet-records server.
Centralizes sheet names, the default column schema and cache timing.
"""
from typing import Final

# Google API scopes for the service account
SCOPES: Final[list[str]] = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive.readonly",
]

# Default worksheet and schema (ordered column names)
DEFAULT_SHEET_NAME: Final[str] = "Daily Profits"
DEFAULT_COLUMNS: Final[tuple[str, ...]] = ("StoreName", "Date", "Profit")

# 1-based sheet row holding the column headers; data starts on the next row
HEADER_ROW: Final[int] = 1

# Full-fetch cache window (seconds)
CACHE_TTL_SECONDS: Final[int] = 30

# Minimum spacing between backend requests (seconds); 0 disables throttling
DEFAULT_MIN_INTERVAL: Final[float] = 0.0

