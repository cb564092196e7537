"""
Backend collaborator contract.

The sheet client only needs three things from durable storage:
read every data row, append one row, and set one field of one row
(optionally only if it still holds an expected value).
"""
from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable

from lib.types import RawRecord


@runtime_checkable
class SheetBackend(Protocol):
    """
    Protocol for the spreadsheet store behind SheetClient.

    Implementations raise:
    - BackendRejectedError when the store refuses a write
    - WriteConflictError when a conditional write finds another value
    Any other exception is a call failure and is left to propagate.
    """

    async def read_all(self) -> list[RawRecord]:
        """All data rows in sheet order, with position metadata."""
        ...

    async def append(self, values: Mapping[str, str]) -> None:
        """Append one row. Columns missing from `values` are left blank."""
        ...

    async def write_field(
        self,
        position: int,
        field: str,
        value: str,
        expected: str | None = None,
    ) -> None:
        """
        Set `field` of the data row at `position` (1-based) to `value`.

        When `expected` is given the write happens only if the current
        value equals it.
        """
        ...
