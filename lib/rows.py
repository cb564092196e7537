"""
Row model: turns backend records into Row dicts and resolves identifiers.

A Row holds one string value per declared column (in declared order)
plus two metadata keys:
- "_id": backend-derived identifier, unique within one fetch
- "_rowIndex": 1-based position among data rows at fetch time
"""
from __future__ import annotations

from typing import Any, Iterable, Sequence

from lib.common import normalize, to_cell_str
from lib.errors import MalformedResponseError
from lib.sheet_utils import norm_header
from lib.types import ID_KEY, ROW_INDEX_KEY, RawRecord, Row, SearchOperator, SearchQuery


def to_row(record: RawRecord, columns: Sequence[str]) -> Row:
    """
    Map one backend record onto the declared schema.

    Cells are matched to columns by normalized header, so "Store Name"
    in the sheet still fills "StoreName". Undeclared cells are dropped.
    """
    by_header = {norm_header(k): v for k, v in record.cells.items()}
    row: Row = {}
    for col in columns:
        row[col] = to_cell_str(by_header.get(norm_header(col)))
    row[ID_KEY] = str(record.key)
    row[ROW_INDEX_KEY] = int(record.position)
    return row


def to_rows(records: Iterable[RawRecord], columns: Sequence[str]) -> list[Row]:
    """
    Map a full fetch, preserving backend order.

    Raises:
        MalformedResponseError: If two records share a key
    """
    rows: list[Row] = []
    seen: set[str] = set()
    for record in records:
        key = str(record.key)
        if key in seen:
            raise MalformedResponseError(f"duplicate row id from backend: {key}")
        seen.add(key)
        rows.append(to_row(record, columns))
    return rows


def field_values(row: Row) -> list[str]:
    """Declared field values of a row (metadata excluded)."""
    return [v for k, v in row.items() if k not in (ID_KEY, ROW_INDEX_KEY)]


def _as_row_index(identifier: Any) -> int | None:
    if isinstance(identifier, bool):
        return None
    if isinstance(identifier, int):
        return identifier
    text = str(identifier).strip()
    if text.isdigit():
        return int(text)
    return None


def resolve_row(rows: Sequence[Row], identifier: Any) -> Row | None:
    """
    Resolve an identifier to a single row.

    Order is fixed:
    1. exact "_id" match
    2. exact "_rowIndex" match (int, or a string of digits)
    3. first row whose any field value equals the identifier

    A field value that collides with another row's "_id" or "_rowIndex"
    loses to the earlier rules.
    """
    if identifier is None:
        return None
    target = str(identifier)

    for row in rows:
        if row.get(ID_KEY) == target:
            return row

    index = _as_row_index(identifier)
    if index is not None:
        for row in rows:
            if row.get(ROW_INDEX_KEY) == index:
                return row

    for row in rows:
        if target in field_values(row):
            return row
    return None


def _compare(cell: str, value: str, op: SearchOperator) -> bool:
    if op is SearchOperator.EQUALS:
        return cell == value
    # The needle keeps its whitespace: " " searches for a space
    hay, needle = normalize(cell), normalize(value, strip=False)
    if op is SearchOperator.STARTS_WITH:
        return hay.startswith(needle)
    if op is SearchOperator.ENDS_WITH:
        return hay.endswith(needle)
    return needle in hay


def matches(row: Row, query: SearchQuery) -> bool:
    """Search predicate. A query without a value matches every row."""
    if query.value is None or query.value == "":
        return True
    if query.field:
        if query.field in (ID_KEY, ROW_INDEX_KEY) or query.field not in row:
            return False
        candidates = [row[query.field]]
    else:
        candidates = field_values(row)
    return any(_compare(str(c), query.value, query.operator) for c in candidates)
