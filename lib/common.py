"""
Common utility functions.
"""
import unicodedata
from typing import Any

from lib.types import ApiResponse


def normalize(s: Any, strip: bool = True) -> str:
    """
    Normalize a string for case-insensitive comparison.
    - NFKC normalization
    - Lowercase
    - Strip whitespace (unless strip=False)
    """
    if s is None:
        return ""
    text = str(s).lower()
    if strip:
        text = text.strip()
    return unicodedata.normalize("NFKC", text)


def to_cell_str(val: Any) -> str:
    """Render a cell value as the string the row model stores ("" for None)."""
    if val is None:
        return ""
    return str(val)


def ok() -> ApiResponse:
    """Create a successful response."""
    return {"success": True}


def ng(code: str, message: str) -> ApiResponse:
    """Create an error response."""
    return {"success": False, "error": message, "code": code}
