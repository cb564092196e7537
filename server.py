"""
Sheet Records MCP Server

Exposes a spreadsheet (default: "Daily Profits") as a small record store:
list, add, update one field, search and get rows. Rows cannot be deleted.
"""
import logging
import sys
from typing import Any

from mcp.server.fastmcp import FastMCP

from core.gspread_backend import GspreadBackend
from core.sheet_client import SheetClient
from env_loader import (
    get_cache_ttl,
    get_columns,
    get_log_level,
    get_min_interval,
    get_port,
    get_sheet_name,
    get_spreadsheet_id,
)
from lib.errors import bad_request, sheet_error
from lib.input_parser import coerce_bool, coerce_fields, coerce_identifier, coerce_str
from lib.row_cache import RowCache
from lib.types import SearchQuery, UpdateOperation

mcp = FastMCP("sheet-records")
logger = logging.getLogger(__name__)


def log(*a):
    print(*a, file=sys.stderr, flush=True)


# Shared client so the row cache survives between tool calls
_client: SheetClient | None = None


def get_client() -> SheetClient:
    """
    Get the global SheetClient instance.
    Built from environment variables on first call.
    """
    global _client
    if _client is None:
        backend = GspreadBackend(
            get_spreadsheet_id(),
            get_sheet_name(),
            min_interval=get_min_interval(),
        )
        _client = SheetClient(backend, get_columns(), RowCache(ttl_seconds=get_cache_ttl()))
    return _client


def reset_client() -> None:
    """Reset the global client (useful for testing)."""
    global _client
    _client = None


def _call_failure(op: str, e: Exception) -> dict:
    logger.error(f"{op} failed: {e}", exc_info=True)
    return sheet_error(f"{op} failed: {e}")


# ===== Row Tools =====

@mcp.tool()
async def rows_list(refresh: Any = False) -> dict:
    """List every row of the sheet.

    Args:
    - refresh: true to bypass the 30 second cache.

    Returns:
    { success: true, rows: [{StoreName, Date, Profit, _id, _rowIndex}, ...], count }
    """
    try:
        rows = await get_client().fetch_all(force_refresh=bool(coerce_bool(refresh, ("refresh",))))
    except Exception as e:
        return _call_failure("rows.list", e)
    return {"success": True, "rows": rows, "count": len(rows)}


@mcp.tool()
async def rows_add(fields: Any) -> dict:
    """Append a row.

    Args:
    - fields: {column: value}. Omitted columns are left blank.

    Example:
    - rows_add({"StoreName": "Canberra", "Date": "08/08/25", "Profit": "18000"})
    """
    record = coerce_fields(fields)
    if record is None:
        return bad_request("fields must be an object of column -> value")
    try:
        return await get_client().add(record)
    except Exception as e:
        return _call_failure("rows.add", e)


@mcp.tool()
async def rows_update_field(
    identifier: Any,
    field: Any = None,
    new_value: Any = None,
    old_value: Any = None,
) -> dict:
    """Set one field of one row.

    Args:
    - identifier: row _id, _rowIndex, or any field value of the row.
    - field: column name.
    - new_value: value to write.
    - old_value: optional; the write only happens if the field still holds it.
    """
    op = UpdateOperation(
        identifier=coerce_identifier(identifier),
        field=coerce_str(field, ("field",)),
        new_value=None if new_value is None else str(new_value),
        old_value=None if old_value is None else str(old_value),
    )
    try:
        return await get_client().update_field(op)
    except Exception as e:
        return _call_failure("rows.update_field", e)


@mcp.tool()
async def rows_search(value: Any = None, field: Any = None, operator: Any = None) -> dict:
    """Search rows.

    Args:
    - value: text to look for.
    - field: column to compare; all columns when omitted.
    - operator: contains (default, case-insensitive) | equals | startsWith | endsWith.
    """
    try:
        query = SearchQuery(
            field=coerce_str(field, ("field",)),
            value=None if value is None else str(value),
            operator=coerce_str(operator, ("operator",)),
        )
    except ValueError as e:
        return bad_request(str(e))
    try:
        rows = await get_client().search(query)
    except Exception as e:
        return _call_failure("rows.search", e)
    return {"success": True, "rows": rows, "count": len(rows)}


@mcp.tool()
async def rows_get(identifier: Any) -> dict:
    """Get one row by _id, _rowIndex, or any field value.

    Returns:
    { success: true, row: {...} | null }
    """
    ident = coerce_identifier(identifier)
    if ident is None:
        return bad_request("identifier is required")
    try:
        row = await get_client().get_row_by_id(ident)
    except Exception as e:
        return _call_failure("rows.get", e)
    return {"success": True, "row": row}


# ===== Utility Tools =====

@mcp.tool()
async def tools_help() -> dict:
    """List the tools this server exposes."""
    tools = [
        {"name": "rows_list", "desc": "List all rows (cached 30s)", "args": {"refresh": "bool"}},
        {"name": "rows_add", "desc": "Append a row", "args": {"fields": "dict"}},
        {"name": "rows_update_field", "desc": "Update one field of one row",
         "args": {"identifier": "string|int", "field": "string", "new_value": "string", "old_value": "string"}},
        {"name": "rows_search", "desc": "Search rows",
         "args": {"value": "string", "field": "string", "operator": "contains|equals|startsWith|endsWith"}},
        {"name": "rows_get", "desc": "Get one row", "args": {"identifier": "string|int"}},
    ]
    return {
        "success": True,
        "tools": tools,
        "notes": ["Rows cannot be deleted."],
    }


# ===== Server Entry Point =====

if __name__ == "__main__":
    import uvicorn
    from contextlib import asynccontextmanager
    from starlette.applications import Starlette
    from starlette.routing import Route
    from starlette.responses import JSONResponse

    logging.basicConfig(
        stream=sys.stderr,
        level=get_log_level(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    async def healthz(request):
        return JSONResponse({"status": "ok"})

    async def root(request):
        return JSONResponse(
            {"error": "Use /mcp for the MCP endpoint or /healthz for health check"},
            status_code=406,
        )

    # Get MCP ASGI app
    mcp_app = mcp.streamable_http_app()

    @asynccontextmanager
    async def lifespan(app):
        async with mcp.session_manager.run():
            yield

    # Create Starlette app for non-MCP routes
    starlette_app = Starlette(
        routes=[
            Route("/", root),
            Route("/healthz", healthz),
        ],
        lifespan=lifespan,
    )

    # Combined ASGI app - MCP app handles /mcp path internally
    async def combined_app(scope, receive, send):
        path = scope.get("path", "/")
        if path.startswith("/mcp"):
            await mcp_app(scope, receive, send)
        else:
            await starlette_app(scope, receive, send)

    port = get_port()
    log(f"Starting server on port {port}")
    uvicorn.run(combined_app, host="0.0.0.0", port=port, lifespan="on")
