"""
Worksheet helpers: header matching, A1 addressing, spreadsheet ids.
"""
import re
import unicodedata
from typing import Any, Sequence

_SHEET_URL = re.compile(r"/spreadsheets/d/([-\w]+)")
_RAW_ID = re.compile(r"^[-\w]{25,}$")


def norm_header(s: Any) -> str:
    """
    Header key used for column matching.

    "StoreName", "Store Name", "store_name" and " STORENAME " all map to
    "storename".
    """
    if s is None:
        return ""
    text = unicodedata.normalize("NFKC", str(s)).lower()
    return "".join(text.split()).replace("_", "")


def header_map(headers: Sequence[Any]) -> dict[str, int]:
    """Header key -> 0-based column index. Blank headers are skipped; the first duplicate wins."""
    positions: dict[str, int] = {}
    for i, h in enumerate(headers):
        key = norm_header(h)
        if key and key not in positions:
            positions[key] = i
    return positions


def column_index(headers: Sequence[Any], name: str) -> int | None:
    """0-based index of the column called `name`, or None."""
    return header_map(headers).get(norm_header(name))


def col_letter(index: int) -> str:
    """0 -> A, 25 -> Z, 26 -> AA."""
    letters = []
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters.append(chr(65 + rem))
    return "".join(reversed(letters))


def a1(row: int, col_index: int) -> str:
    """A1 notation for a 1-based row and 0-based column index."""
    return f"{col_letter(col_index)}{row}"


def is_blank_row(row: Sequence[Any]) -> bool:
    """True when every cell is empty or whitespace."""
    return all(c is None or not str(c).strip() for c in row)


def extract_spreadsheet_id(value: Any) -> str | None:
    """
    Spreadsheet id from a sheet URL or a bare id.

    Returns:
        The id, or None when `value` is neither a sheet URL nor an
        id-shaped string (25+ of [-A-Za-z0-9_])
    """
    if not value:
        return None
    text = str(value).strip()
    match = _SHEET_URL.search(text)
    if match:
        return match.group(1)
    return text if _RAW_ID.match(text) else None
