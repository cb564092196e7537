"""
Environment variable loader for the sheet-records server.
Handles loading credentials and sheet settings from .env file or environment.
"""
import os
import json
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv

from config import (
    CACHE_TTL_SECONDS,
    DEFAULT_COLUMNS,
    DEFAULT_MIN_INTERVAL,
    DEFAULT_SHEET_NAME,
)
from lib.sheet_utils import extract_spreadsheet_id


# Find .env file (look in current dir and parent dirs)
def _find_env_file() -> Path | None:
    current = Path(__file__).parent
    for _ in range(3):  # Check up to 3 levels up
        env_path = current / ".env"
        if env_path.exists():
            return env_path
        current = current.parent
    return None

_env_file = _find_env_file()
if _env_file:
    load_dotenv(_env_file)


def get_google_credentials() -> dict:
    """
    Get Google Service Account credentials.

    Priority:
    1. GOOGLE_CREDENTIALS_FILE (path to JSON file)
    2. GOOGLE_CREDENTIALS_JSON (JSON string content)

    Returns:
        dict: Parsed credentials dictionary

    Raises:
        RuntimeError: If no credentials are configured
    """
    # Option 1: File path
    creds_file = os.environ.get("GOOGLE_CREDENTIALS_FILE")
    if creds_file:
        creds_path = Path(creds_file)
        if not creds_path.exists():
            raise RuntimeError(f"GOOGLE_CREDENTIALS_FILE not found: {creds_file}")
        with open(creds_path, "r") as f:
            return json.load(f)

    # Option 2: JSON content
    creds_json = os.environ.get("GOOGLE_CREDENTIALS_JSON")
    if creds_json:
        try:
            return json.loads(creds_json)
        except json.JSONDecodeError as e:
            raise RuntimeError(f"Invalid GOOGLE_CREDENTIALS_JSON: {e}")

    raise RuntimeError(
        "No Google credentials configured. "
        "Set GOOGLE_CREDENTIALS_FILE or GOOGLE_CREDENTIALS_JSON in .env"
    )


def get_spreadsheet_id() -> str:
    """
    Get the backing spreadsheet ID.

    SPREADSHEET_ID may hold either the raw ID or the sheet URL.

    Raises:
        RuntimeError: If SPREADSHEET_ID is not set or holds no ID
    """
    raw = os.environ.get("SPREADSHEET_ID", "").strip()
    if not raw:
        raise RuntimeError("SPREADSHEET_ID is not set")
    sid = extract_spreadsheet_id(raw)
    if not sid:
        raise RuntimeError(f"Invalid SPREADSHEET_ID: {raw}")
    return sid


def get_sheet_name() -> str:
    """Get worksheet name (defaults to the Daily Profits sheet)."""
    return os.environ.get("SHEET_NAME", "").strip() or DEFAULT_SHEET_NAME


def get_columns() -> tuple[str, ...]:
    """
    Get the ordered column schema.

    SHEET_COLUMNS is a comma-separated list, e.g. "StoreName,Date,Profit".
    Blank entries are dropped; an empty value falls back to the default schema.
    """
    raw = os.environ.get("SHEET_COLUMNS", "")
    columns = tuple(c.strip() for c in raw.split(",") if c.strip())
    return columns or DEFAULT_COLUMNS


def get_cache_ttl() -> float:
    """Get cache TTL in seconds."""
    raw = os.environ.get("CACHE_TTL_SECONDS")
    if not raw:
        return float(CACHE_TTL_SECONDS)
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"Invalid CACHE_TTL_SECONDS: {raw}")


def get_min_interval() -> float:
    """Get minimum spacing between backend requests in seconds."""
    raw = os.environ.get("SHEETS_MIN_INTERVAL")
    if not raw:
        return DEFAULT_MIN_INTERVAL
    try:
        return max(0.0, float(raw))
    except ValueError:
        raise RuntimeError(f"Invalid SHEETS_MIN_INTERVAL: {raw}")


def get_port() -> int:
    """Get server port from environment."""
    return int(os.environ.get("PORT", "8080"))


def get_log_level() -> str:
    """Get log level name (INFO by default)."""
    return os.environ.get("LOG_LEVEL", "INFO").upper()
