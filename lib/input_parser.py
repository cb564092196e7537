"""
Input parsing and validation utilities.

Functions for parsing and normalizing MCP tool inputs,
handling various input formats (strings, dicts, JSON text).
"""
import json
from typing import Any


def strip_quotes(s: str) -> str:
    """
    Strip outer quotes from a string.

    Args:
        s: Input string

    Returns:
        String with leading/trailing quotes removed
    """
    s = s.strip()
    if (s.startswith('"') and s.endswith('"')) or (s.startswith("'") and s.endswith("'")):
        return s[1:-1]
    return s


def coerce_str(x: Any, keys: tuple[str, ...] = ()) -> str | None:
    """
    Extract a string from various input formats.

    Handles:
    - Direct string input
    - Dict with specified keys

    Args:
        x: Input value (string, dict, or other)
        keys: Tuple of keys to try in dict order

    Returns:
        Extracted string or None if not found
    """
    if isinstance(x, str):
        return strip_quotes(x)
    if isinstance(x, dict):
        for k in keys:
            v = x.get(k)
            if isinstance(v, str):
                return strip_quotes(v)
    return None


def coerce_bool(x: Any, keys: tuple[str, ...] = ()) -> bool | None:
    """
    Extract a boolean from various input formats.

    Args:
        x: Input value
        keys: Tuple of keys to try in dict order

    Returns:
        Extracted boolean or None if not found/invalid
    """
    if isinstance(x, bool):
        return x
    if isinstance(x, str):
        lower = x.lower().strip()
        if lower in ("true", "1", "yes"):
            return True
        if lower in ("false", "0", "no"):
            return False
        return None
    if isinstance(x, dict):
        for k in keys:
            v = x.get(k)
            result = coerce_bool(v, ())
            if result is not None:
                return result
    return None


def coerce_identifier(x: Any, keys: tuple[str, ...] = ("identifier", "id")) -> str | int | None:
    """
    Extract a row identifier (string id/field value or integer row index).

    Args:
        x: Input value
        keys: Tuple of keys to try in dict order

    Returns:
        The identifier, or None if not found
    """
    if isinstance(x, bool):
        return None
    if isinstance(x, int):
        return x
    if isinstance(x, dict):
        for k in keys:
            result = coerce_identifier(x.get(k), ())
            if result is not None:
                return result
        return None
    s = coerce_str(x)
    return s if s else None


def coerce_fields(x: Any) -> dict[str, str] | None:
    """
    Extract a field mapping from a dict or JSON object text.

    Values are rendered as strings; None becomes "".

    Returns:
        Mapping of field name -> string value, or None if not a mapping
    """
    if isinstance(x, str):
        try:
            x = json.loads(x)
        except json.JSONDecodeError:
            return None
    if not isinstance(x, dict):
        return None
    return {str(k): "" if v is None else str(v) for k, v in x.items()}
