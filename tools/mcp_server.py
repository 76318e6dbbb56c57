# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server for Azure Table Storage
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes three read-only MCP tools over stdio:
#
#     query_table       rows matching an OData filter (5 by default)
#     get_table_schema  field names and the value types seen for each
#     list_tables       table names in the storage account
#
#   Each tool is a thin wrapper: it logs the call, hands the arguments to
#   core.table_store.TableStoreAdapter, and returns the payload as
#   pretty-printed JSON text.
#
# HOW IT WORKS (the flow):
#   1. The agent host discovers the tools (names, docstrings, arg schemas)
#   2. It calls e.g. query_table(tableName="Users", filter="...")
#   3. FastMCP validates the argument types and routes to the function below
#   4. The adapter validates the values, scans the table, truncates
#   5. The JSON text goes back as a single text content block
#
# ERRORS:
#   The adapter raises core.errors types (invalid argument, unknown tool,
#   store failure).  Each one reaches the client as a JSON-RPC error carrying
#   its code (-32602 / -32601 / -32603) and the original message:
#
#     - unknown tool names and bad arguments are rejected by
#       _call_tool_with_error_codes before FastMCP routes the call
#     - store failures are raised inside the tool as ToolError, remembered
#       per request in _failed_calls, and re-raised as McpError once
#       FastMCP hands its isError result back
#
# ARGUMENT NAMES:
#   tableName / filter / select / limit / prefix are the tool contract that
#   clients already send, so they stay camelCase here.
#
# RUNNING THIS SERVER:
#     python -m tools.mcp_server      (or the `tablestore-mcp` script)
#   Configuration comes from the environment (see core/config.py).
# =============================================================================

import json
import logging
import sys
from typing import Any, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp.server.lowlevel.server import request_ctx
from mcp.shared.exceptions import McpError
from mcp.types import CallToolRequest, CallToolResult, ErrorData, ServerResult

from core.config import load_config
from core.errors import INVALID_PARAMS, TableToolError
from core.models import DEFAULT_QUERY_LIMIT
from core.table_store import TableStoreAdapter, validate_call

# =============================================================================
# Logging Setup
# =============================================================================
# STDERR only: stdout is the MCP transport, and a stray log line there would
# corrupt the JSON-RPC stream.
#
#   CYAN    incoming tool calls
#   GREEN   responses
#   YELLOW  status / errors
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logging.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logging.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    """Log the response size in GREEN, then return it."""
    logging.info(f"{_GREEN}  ← {tool_name} response: {len(text)} chars{_RESET}")
    return text


# =============================================================================
# Server instance and adapter
# =============================================================================
mcp = FastMCP("tablestore")

_adapter: Optional[TableStoreAdapter] = None


def configure(adapter: TableStoreAdapter) -> None:
    """Install the adapter every tool call goes through."""
    global _adapter
    _adapter = adapter


def _current_adapter() -> TableStoreAdapter:
    # `fastmcp run tools/mcp_server.py` imports `mcp` without calling main()
    if _adapter is None:
        configure(TableStoreAdapter(load_config()))
    return _adapter


def _invoke(tool_name: str, **arguments: Any) -> str:
    """Run one tool through the adapter and render the JSON text response."""
    _log_request(tool_name, **arguments)
    # Optional arguments the caller left out are not forwarded.
    arguments = {key: value for key, value in arguments.items() if value is not None}
    try:
        payload = _current_adapter().call_tool(tool_name, arguments)
    except TableToolError as error:
        _log_status(f"{error.kind} ({error.code}): {error.message}")
        key = _request_key()
        if key is not None:
            _failed_calls[key] = error
        raise ToolError(error.message) from error

    return _log_response(tool_name, json.dumps(payload, indent=2, allow_nan=False))


# =============================================================================
# Error codes on the wire
# =============================================================================
# FastMCP turns any exception raised by a tool into an isError result, which
# loses the error kind.  The tools/call handler is wrapped so that:
#
#   1. unknown names and bad arguments fail fast with their own code
#   2. a TableToolError recorded by _invoke replaces the isError result
#   3. any other isError result came from FastMCP's own argument type
#      checks, so it is reported as invalid params
# =============================================================================
_failed_calls: dict[tuple[int, Any], TableToolError] = {}


def _request_key() -> Optional[tuple[int, Any]]:
    try:
        context = request_ctx.get()
    except LookupError:
        return None
    return id(context.session), context.request_id


def _protocol_error(error: TableToolError) -> McpError:
    return McpError(ErrorData(code=error.code, message=error.message, data={"kind": error.kind}))


def _call_tool_with_error_codes(handler):
    async def call_tool(request: CallToolRequest) -> ServerResult:
        try:
            validate_call(request.params.name, request.params.arguments)
        except TableToolError as error:
            _log_status(f"{request.params.name}: {error.kind} ({error.code}): {error.message}")
            raise _protocol_error(error) from error

        key = _request_key()
        try:
            result = await handler(request)
        finally:
            error = _failed_calls.pop(key, None)

        if error is not None:
            raise _protocol_error(error) from error
        if isinstance(result.root, CallToolResult) and result.root.isError:
            message = "\n".join(getattr(block, "text", "") for block in result.root.content)
            raise McpError(ErrorData(code=INVALID_PARAMS, message=message, data={"kind": "invalid_argument"}))
        return result

    return call_tool


# FastMCP keeps its low-level server private; the handler table is the only
# place a JSON-RPC error can still be raised for tools/call.
_lowlevel = mcp._mcp_server
_lowlevel.request_handlers[CallToolRequest] = _call_tool_with_error_codes(
    _lowlevel.request_handlers[CallToolRequest]
)


# =============================================================================
# TOOL 1: query_table
# =============================================================================
# The docstring is the tool description the LLM reads, so the limit warning
# comes first.
# =============================================================================
@mcp.tool()
def query_table(
    tableName: str,
    filter: Optional[str] = None,
    select: Optional[list[str]] = None,
    limit: int = DEFAULT_QUERY_LIMIT,
) -> str:
    """⚠️ WARNING: This tool returns a limited subset of results (default: 5 items) to protect the LLM's context window. DO NOT increase this limit unless explicitly confirmed by the user.

    Query data from an Azure Storage Table with optional filters.

    Supported OData Filter Examples:
    1. Simple equality:
       filter: "PartitionKey eq 'COURSE'"
       filter: "email eq 'user@example.com'"

    2. Compound conditions:
       filter: "PartitionKey eq 'USER' and email eq 'user@example.com'"
       filter: "PartitionKey eq 'COURSE' and title eq 'GDPR Training'"

    3. Numeric comparisons:
       filter: "age gt 25"
       filter: "costPrice le 100"

    4. Date comparisons (ISO 8601 format):
       filter: "createdDate gt datetime'2023-01-01T00:00:00Z'"
       filter: "Timestamp lt datetime'2024-12-31T23:59:59Z'"

    Supported Operators:
    - eq: Equal
    - ne: Not equal
    - gt: Greater than
    - ge: Greater than or equal
    - lt: Less than
    - le: Less than or equal
    - and: Logical and
    - or: Logical or
    - not: Logical not

    Args:
        tableName: Name of the table to query.
        filter: OData filter string. See examples above.
        select: Property names to return, e.g. ["email", "username", "createdDate"].
        limit: Maximum number of items to return (default: 5). The full query
            still runs so totalItems is the real match count.

    Returns:
        JSON with totalItems (all matching rows), limit, and items (at most
        `limit` rows).
    """
    return _invoke("query_table", tableName=tableName, filter=filter, select=select, limit=limit)


# =============================================================================
# TOOL 2: get_table_schema
# =============================================================================
@mcp.tool()
def get_table_schema(tableName: str) -> str:
    """Get property names and types from a table.

    Reads EVERY row of the table to find all properties, so it is slow on
    large tables.  A property whose type differs between rows lists every
    type seen (string, number, boolean, date, null).

    Args:
        tableName: Name of the table to analyze.

    Returns:
        JSON object mapping each property name to its list of types.
    """
    return _invoke("get_table_schema", tableName=tableName)


# =============================================================================
# TOOL 3: list_tables
# =============================================================================
@mcp.tool()
def list_tables(prefix: Optional[str] = None) -> str:
    """List all tables in the storage account.

    Args:
        prefix: Optional prefix to filter table names (case-sensitive).

    Returns:
        JSON array of table names.
    """
    return _invoke("list_tables", prefix=prefix)


# =============================================================================
# Server entry point
# =============================================================================
# Configuration is read once here and handed to the adapter.  Ctrl-C (SIGINT)
# stops the stdio transport and the process exits with status 0.
# =============================================================================
def main() -> None:
    config = load_config()
    logging.getLogger().setLevel(config.log_level)
    configure(TableStoreAdapter(config))

    if config.uses_development_storage:
        _log_status("No connection string set, using local development storage")
    logging.info("Table Storage MCP server running on stdio")
    try:
        mcp.run()
    except KeyboardInterrupt:
        logging.info("Interrupted, shutting down")


if __name__ == "__main__":
    main()
