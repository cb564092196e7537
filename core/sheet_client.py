"""
Row-oriented client over a spreadsheet backend.

Provides the five consumer operations:
- fetch_all: full row list, served from a 30 second cache when fresh
- add: append one row
- update_field: set one field of one row, optionally conditioned on its old value
- search: filter the full row list
- get_row_by_id: resolve one row by id, row index or field value

Mutations report expected failures as ApiResponse values and never raise
for them; transport failures propagate to the caller. Rows are never
deleted: the contract has no such operation.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from config import DEFAULT_COLUMNS
from core.backend import SheetBackend
from lib.common import ok
from lib.errors import (
    BackendRejectedError,
    WriteConflictError,
    bad_request,
    conflict,
    not_found,
    sheet_error,
)
from lib.row_cache import RowCache
from lib.rows import matches, resolve_row, to_rows
from lib.types import (
    META_KEYS,
    ROW_INDEX_KEY,
    ApiResponse,
    ConditionalWrite,
    Row,
    SearchQuery,
    UpdateOperation,
)

logger = logging.getLogger(__name__)


class SheetClient:
    """
    Record-store view of one worksheet.

    Construction performs no I/O and cannot fail on connectivity;
    authentication and transport problems surface from the operations.

    Example:
        client = SheetClient(GspreadBackend(spreadsheet_id))
        rows = await client.fetch_all()
        result = await client.update_field(
            UpdateOperation(identifier="Canberra", field="Profit", new_value="19000")
        )
    """

    def __init__(
        self,
        backend: SheetBackend,
        columns: Sequence[str] | None = None,
        cache: RowCache | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            backend: Durable store (see core.backend.SheetBackend)
            columns: Ordered column schema (default: StoreName, Date, Profit)
            cache: Row cache; a fresh 30 second cache when omitted
        """
        self.backend = backend
        self._columns: tuple[str, ...] = tuple(columns or DEFAULT_COLUMNS)
        self._cache = cache if cache is not None else RowCache()

    @property
    def columns(self) -> tuple[str, ...]:
        """Declared column schema, in order."""
        return self._columns

    @property
    def cache(self) -> RowCache:
        return self._cache

    # === Reads ===

    async def _read_backend(self) -> list[Row]:
        records = await self.backend.read_all()
        return to_rows(records, self._columns)

    async def fetch_all(self, force_refresh: bool = False) -> list[Row]:
        """
        Get every row.

        Args:
            force_refresh: Skip the cache read (the result is still cached)

        Returns:
            Rows in sheet order

        Raises:
            Whatever the backend raises; nothing is swallowed here.
        """
        if not force_refresh:
            cached = self._cache.get()
            if cached is not None:
                return cached

        generation = self._cache.generation
        rows = await self._read_backend()
        if self._cache.generation == generation:
            self._cache.put(rows)
        else:
            # A mutation landed while reading; these rows may predate it
            logger.debug("Skipping cache store: invalidated during read")
        logger.debug(f"Fetched {len(rows)} rows from backend")
        return [dict(r) for r in rows]

    async def search(self, query: SearchQuery | Mapping[str, Any]) -> list[Row]:
        """
        Filter rows.

        Args:
            query: SearchQuery or mapping with field / value / operator

        Returns:
            Matching rows in sheet order (possibly empty)

        Raises:
            ValueError: Unknown operator
        """
        if not isinstance(query, SearchQuery):
            query = SearchQuery.from_dict(query)
        rows = await self.fetch_all()
        return [r for r in rows if matches(r, query)]

    async def get_row_by_id(self, identifier: str | int) -> Row | None:
        """
        Get one row by "_id", then "_rowIndex", then any field value.

        Returns:
            The row, or None when nothing matches
        """
        rows = await self.fetch_all()
        return resolve_row(rows, identifier)

    # === Mutations ===

    async def add(self, fields: Mapping[str, Any]) -> ApiResponse:
        """
        Append a row. Declared columns missing from `fields` stay blank,
        but at least one value must be non-blank.

        Returns:
            {"success": True} or a failure response
        """
        if not isinstance(fields, Mapping):
            return bad_request("fields must be a mapping of column name to value")

        unknown = [k for k in fields if k not in self._columns]
        if unknown:
            return bad_request(f"unknown field(s): {', '.join(map(str, unknown))}")

        values = {
            col: "" if fields.get(col) is None else str(fields[col])
            for col in self._columns
        }
        if not any(v.strip() for v in values.values()):
            return bad_request("at least one field must have a non-blank value")
        try:
            await self.backend.append(values)
        except BackendRejectedError as e:
            logger.warning(f"add rejected: {e}")
            return sheet_error(str(e))

        self._cache.invalidate()
        logger.info("Row added")
        return ok()

    def _validate_update(self, op: UpdateOperation) -> ApiResponse | None:
        if op.identifier is None or str(op.identifier).strip() == "":
            return bad_request("identifier is required")
        if not op.field:
            return bad_request("field is required")
        if op.field in META_KEYS:
            return bad_request(f"'{op.field}' is not an editable field")
        if op.field not in self._columns:
            return bad_request(f"unknown field: {op.field}")
        if op.new_value is None:
            return bad_request("newValue is required")
        return None

    async def update_field(self, op: UpdateOperation | Mapping[str, Any]) -> ApiResponse:
        """
        Set one field of one row.

        The identifier is resolved against a fresh backend read so the
        written position is current. With old_value supplied the write
        only happens if the field still holds it.

        Returns:
            {"success": True} or a failure response
            (BAD_REQUEST / NOT_FOUND / CONFLICT / SHEET_ERROR)
        """
        if not isinstance(op, UpdateOperation):
            if not isinstance(op, Mapping):
                return bad_request("update must be an UpdateOperation or mapping")
            op = UpdateOperation.from_dict(op)

        error = self._validate_update(op)
        if error:
            return error

        rows = await self._read_backend()
        row = resolve_row(rows, op.identifier)
        if row is None:
            return not_found(f"no row matches '{op.identifier}'")

        mode = op.write_mode
        expected = mode.expected if isinstance(mode, ConditionalWrite) else None
        try:
            await self.backend.write_field(
                row[ROW_INDEX_KEY], op.field, str(op.new_value), expected=expected
            )
        except WriteConflictError as e:
            return conflict(str(e))
        except BackendRejectedError as e:
            logger.warning(f"update_field rejected: {e}")
            return sheet_error(str(e))

        self._cache.invalidate()
        logger.info(f"Updated '{op.field}' of row {row[ROW_INDEX_KEY]}")
        return ok()
