# =============================================================================
# core/table_store.py  —  Bounded Query Adapter over Azure Table Storage
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Implements the three read-only operations behind the MCP tools:
#
#     query_table       filtered scan, truncated to `limit` rows, with the
#                       full match count reported alongside
#     get_table_schema  full scan, type tags collected per field
#     list_tables       table names, optionally narrowed by a prefix
#
#   plus call_tool(), which turns a raw {name, arguments} invocation into
#   one of those calls and reports every failure as a core.errors type.
#
# WHAT IT DELEGATES:
#   Everything about talking to Azure (auth, connection-string parsing,
#   paging, the OData filter language) belongs to azure-data-tables.  The
#   filter and select arguments go to the SDK exactly as received.
#
# SESSIONS:
#   Each operation opens its own TableServiceClient from the configured
#   connection string and closes it when done.  Nothing is cached between
#   calls.
#
# COST:
#   query_table materializes every matching row before truncating, and
#   get_table_schema reads the whole table.  Both are O(rows scanned); there
#   is no sampling.
# =============================================================================

import logging
from typing import Any, Callable, Mapping, Optional

from azure.data.tables import TableServiceClient

from core.config import StoreConfig
from core.errors import StoreError, TableToolError, ToolNotFoundError
from core.models import (
    QueryRequest,
    QueryResult,
    TableSchema,
    require_table_name,
    row_from_entity,
)
from core.schema import infer_schema

logger = logging.getLogger(__name__)

ServiceFactory = Callable[[str], TableServiceClient]

TOOL_NAMES = ("query_table", "get_table_schema", "list_tables")

_ARGUMENT_CHECKS: dict[str, Callable[[Mapping[str, Any]], Any]] = {
    "query_table": QueryRequest.from_arguments,
    "get_table_schema": require_table_name,
    "list_tables": lambda arguments: None,
}


def validate_call(name: str, arguments: Optional[Mapping[str, Any]] = None) -> None:
    """Reject an unknown tool name or bad arguments without touching the store.

    Raises:
        ToolNotFoundError: name is not one of TOOL_NAMES.
        InvalidArgumentError: a required argument is missing or malformed.
    """
    check = _ARGUMENT_CHECKS.get(name)
    if check is None:
        raise ToolNotFoundError(f"Unknown tool: {name}")
    check(arguments or {})


class TableStoreAdapter:
    """Read-only access to one storage account's tables."""

    def __init__(self, config: StoreConfig, service_factory: Optional[ServiceFactory] = None):
        self._config = config
        self._service_factory = service_factory or TableServiceClient.from_connection_string
        self._handlers: dict[str, Callable[[Mapping[str, Any]], Any]] = {
            "query_table": self._handle_query_table,
            "get_table_schema": self._handle_get_table_schema,
            "list_tables": self._handle_list_tables,
        }

    @property
    def config(self) -> StoreConfig:
        return self._config

    def _open_service(self) -> TableServiceClient:
        return self._service_factory(self._config.connection_string)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------
    def query_table(self, request: QueryRequest) -> QueryResult:
        """Run a filtered scan and keep the first `limit` rows.

        total_items is the number of rows the store matched, independent of
        the limit.
        """
        # The SDK moves Timestamp into entity.metadata even when it is selected.
        include_timestamp = request.select is None or "Timestamp" in request.select

        with self._open_service() as service:
            table = service.get_table_client(request.table_name)
            if request.filter:
                entities = table.query_entities(query_filter=request.filter, select=request.select)
            else:
                entities = table.list_entities(select=request.select)
            rows = [row_from_entity(entity, include_timestamp) for entity in entities]

        logger.debug("%s: %d rows matched, returning %d",
                     request.table_name, len(rows), min(len(rows), request.limit))
        return QueryResult(
            total_items=len(rows),
            limit=request.limit,
            items=rows[:request.limit],
        )

    def get_table_schema(self, table_name: str) -> TableSchema:
        """Infer field types from every row in the table (full scan)."""
        with self._open_service() as service:
            table = service.get_table_client(table_name)
            schema = infer_schema(row_from_entity(entity) for entity in table.list_entities())

        logger.debug("%s: inferred %d fields", table_name, len(schema.fields))
        return schema

    def list_tables(self, prefix: Optional[str] = None) -> list[str]:
        """Table names in the account, case-sensitively prefix-filtered."""
        with self._open_service() as service:
            return [
                table.name
                for table in service.list_tables()
                if table.name and (not prefix or table.name.startswith(prefix))
            ]

    # -------------------------------------------------------------------------
    # Tool dispatch
    # -------------------------------------------------------------------------
    def call_tool(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Any:
        """Validate and run one tool invocation, returning a JSON-ready payload.

        Raises:
            ToolNotFoundError: name is not one of TOOL_NAMES.
            InvalidArgumentError: a required argument is missing or malformed.
                Raised before any connection to the store is opened.
            StoreError: anything else, with the original message.
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise ToolNotFoundError(f"Unknown tool: {name}")

        try:
            return handler(arguments or {})
        except TableToolError:
            raise
        except Exception as exc:
            logger.debug("%s failed", name, exc_info=True)
            raise StoreError.from_exception(exc) from exc

    def _handle_query_table(self, arguments: Mapping[str, Any]) -> dict[str, Any]:
        request = QueryRequest.from_arguments(arguments)
        return self.query_table(request).to_payload()

    def _handle_get_table_schema(self, arguments: Mapping[str, Any]) -> dict[str, list[str]]:
        table_name = require_table_name(arguments)
        return self.get_table_schema(table_name).to_payload()

    def _handle_list_tables(self, arguments: Mapping[str, Any]) -> list[str]:
        prefix = arguments.get("prefix")
        if not isinstance(prefix, str):
            prefix = None
        return self.list_tables(prefix)
