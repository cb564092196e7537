"""
Utility libraries for the sheet-records client.
Contains the row model, cache and pure helper functions.
"""
from .common import normalize, ok, ng
from .row_cache import RowCache
from .rows import to_row, to_rows, resolve_row, matches
from .sheet_utils import column_index, header_map, norm_header
from .types import (
    ApiResponse,
    Row,
    RawRecord,
    SearchOperator,
    SearchQuery,
    UpdateOperation,
    UnconditionalWrite,
    ConditionalWrite,
    WriteMode,
)

__all__ = [
    # Response / request types
    "ApiResponse",
    "Row",
    "RawRecord",
    "SearchOperator",
    "SearchQuery",
    "UpdateOperation",
    "UnconditionalWrite",
    "ConditionalWrite",
    "WriteMode",
    # Cache
    "RowCache",
    # Functions
    "normalize",
    "ok",
    "ng",
    "to_row",
    "to_rows",
    "resolve_row",
    "matches",
    "column_index",
    "header_map",
    "norm_header",
]
