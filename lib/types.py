"""
Type definitions for the sheet-records client.
Provides the row shape, response shape and the request objects
accepted by SheetClient.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, TypedDict, Union

# Row: declared column -> string value, plus "_id" (str) and "_rowIndex" (int)
Row = dict[str, Any]

ID_KEY = "_id"
ROW_INDEX_KEY = "_rowIndex"
META_KEYS = (ID_KEY, ROW_INDEX_KEY)


class _ApiResponseBase(TypedDict):
    success: bool


class ApiResponse(_ApiResponseBase, total=False):
    """Result of a mutating call. Carries no row payload."""
    error: str
    code: str


class SearchOperator(str, Enum):
    """Comparison used by SheetClient.search."""
    CONTAINS = "contains"
    EQUALS = "equals"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"

    @classmethod
    def parse(cls, value: Any) -> SearchOperator:
        """
        Parse an operator name.

        Accepts the camelCase names and their snake_case spellings.
        None or "" selects CONTAINS.

        Raises:
            ValueError: If the name is not a known operator
        """
        if value is None or value == "":
            return cls.CONTAINS
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        aliases = {
            "contains": cls.CONTAINS,
            "equals": cls.EQUALS,
            "startswith": cls.STARTS_WITH,
            "starts_with": cls.STARTS_WITH,
            "endswith": cls.ENDS_WITH,
            "ends_with": cls.ENDS_WITH,
        }
        try:
            return aliases[text.lower()]
        except KeyError:
            raise ValueError(f"unknown search operator: {value!r}") from None


@dataclass(frozen=True)
class SearchQuery:
    """Search input. field=None searches all declared fields."""
    field: str | None = None
    value: str | None = None
    operator: SearchOperator = SearchOperator.CONTAINS

    def __post_init__(self) -> None:
        object.__setattr__(self, "operator", SearchOperator.parse(self.operator))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SearchQuery:
        value = data.get("value")
        return cls(
            field=data.get("field") or None,
            value=None if value is None else str(value),
            operator=data.get("operator"),
        )


@dataclass(frozen=True)
class UnconditionalWrite:
    """Write the new value regardless of the current one."""


@dataclass(frozen=True)
class ConditionalWrite:
    """Write only if the field currently equals `expected`."""
    expected: str


WriteMode = Union[UnconditionalWrite, ConditionalWrite]


@dataclass(frozen=True)
class UpdateOperation:
    """Single-field update request."""
    identifier: str | int | None
    field: str | None
    new_value: str | None
    old_value: str | None = None

    @property
    def write_mode(self) -> WriteMode:
        if self.old_value is None:
            return UnconditionalWrite()
        return ConditionalWrite(expected=str(self.old_value))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UpdateOperation:
        """Build from a mapping using camelCase or snake_case keys."""
        def pick(*keys: str) -> Any:
            for k in keys:
                if data.get(k) is not None:
                    return data[k]
            return None

        return cls(
            identifier=pick("identifier", "id"),
            field=pick("field"),
            new_value=pick("newValue", "new_value"),
            old_value=pick("oldValue", "old_value"),
        )


@dataclass(frozen=True)
class RawRecord:
    """
    One data row as reported by the backend.

    key: backend id metadata (stable within a fetch)
    position: 1-based position among data rows
    cells: header -> raw cell value
    """
    key: str
    position: int
    cells: Mapping[str, Any] = field(default_factory=dict)
