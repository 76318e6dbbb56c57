# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# These dataclasses define the shape of everything that flows between the
# MCP tools and Azure Table Storage.  All of them are transient: built for
# one tool call, serialized, and thrown away.
#
# ROWS ARE OPEN-ENDED:
#   A table entity can carry any property names with any scalar types, and
#   two rows of the same table don't have to agree.  So a Row is an ordered
#   dict of field name → FieldValue, where FieldValue is a small tagged
#   union (kind + value).  The kind is what get_table_schema reports.
#
# CONTEXT BUDGET DISCIPLINE:
#   QueryRequest carries a limit (default 5).  The query still counts every
#   matching row, so the agent can see "25 matched, 5 shown" and decide
#   whether it needs more.
# =============================================================================

import base64
import math
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional, Union

from azure.data.tables import EntityProperty

from core.errors import InvalidArgumentError

DEFAULT_QUERY_LIMIT = 5


# -----------------------------------------------------------------------------
# ValueKind / FieldValue — one scalar cell of a row
# -----------------------------------------------------------------------------
class ValueKind(str, Enum):
    """Type tag of a scalar entity value."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    NULL = "null"


Scalar = Union[str, int, float, bool, datetime, None]


@dataclass(frozen=True)
class FieldValue:
    """A scalar entity value together with its type tag."""

    kind: ValueKind
    value: Scalar

    @classmethod
    def from_raw(cls, raw: Any) -> "FieldValue":
        """Classify a value as returned by azure-data-tables.

        The SDK hands back plain Python types for most EDM types, but wraps
        Int64 (and anything it can't map) in an EntityProperty tuple.
        """
        if isinstance(raw, EntityProperty):
            raw = raw.value

        if raw is None:
            return cls(ValueKind.NULL, None)
        # bool before int: True is an int in Python
        if isinstance(raw, bool):
            return cls(ValueKind.BOOLEAN, raw)
        if isinstance(raw, (int, float)):
            return cls(ValueKind.NUMBER, raw)
        if isinstance(raw, datetime):
            return cls(ValueKind.DATE, raw)
        if isinstance(raw, str):
            return cls(ValueKind.STRING, raw)
        if isinstance(raw, bytes):
            return cls(ValueKind.STRING, base64.b64encode(raw).decode("ascii"))
        if isinstance(raw, uuid.UUID):
            return cls(ValueKind.STRING, str(raw))
        return cls(ValueKind.STRING, str(raw))

    def to_json(self) -> Union[str, int, float, bool, None]:
        if self.kind is ValueKind.DATE:
            return self.value.isoformat()
        # Edm.Double may hold NaN or Infinity, which JSON cannot represent.
        if isinstance(self.value, float) and not math.isfinite(self.value):
            return None
        return self.value


Row = dict[str, FieldValue]


def row_from_entity(entity: Mapping[str, Any], include_timestamp: bool = True) -> Row:
    """Convert a TableEntity (or any mapping) into a Row.

    The service-maintained Timestamp lives in entity.metadata rather than in
    the mapping itself; it is copied in as a "Timestamp" field unless the
    caller asked for a projection that leaves it out.
    """
    row: Row = {key: FieldValue.from_raw(value) for key, value in entity.items()}

    if include_timestamp and "Timestamp" not in row:
        metadata = getattr(entity, "metadata", None) or {}
        timestamp = metadata.get("timestamp")
        if timestamp is not None:
            row["Timestamp"] = FieldValue.from_raw(timestamp)
    return row


def row_to_json(row: Row) -> dict[str, Any]:
    return {key: value.to_json() for key, value in row.items()}


# -----------------------------------------------------------------------------
# Argument validation helpers
# -----------------------------------------------------------------------------
def require_table_name(arguments: Mapping[str, Any]) -> str:
    """Return arguments["tableName"] or raise InvalidArgumentError."""
    table_name = arguments.get("tableName")
    if not isinstance(table_name, str) or not table_name:
        raise InvalidArgumentError("tableName is required and must be a string")
    return table_name


# -----------------------------------------------------------------------------
# QueryRequest — what query_table was asked to do
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class QueryRequest:
    """A bounded query against one table.

    filter and select are handed to Azure untouched; the OData predicate is
    never parsed here.
    """

    table_name: str
    filter: Optional[str] = None
    select: Optional[list[str]] = None
    limit: int = DEFAULT_QUERY_LIMIT

    def __post_init__(self):
        if not isinstance(self.table_name, str) or not self.table_name:
            raise InvalidArgumentError("tableName is required and must be a string")
        if self.limit < 1:
            raise InvalidArgumentError("limit must be a positive integer")

    @classmethod
    def from_arguments(cls, arguments: Optional[Mapping[str, Any]]) -> "QueryRequest":
        """Build a request from raw tool-call arguments.

        Optional arguments of the wrong type are ignored (the default
        applies); only tableName and an out-of-range limit are rejected.
        """
        arguments = arguments or {}
        table_name = require_table_name(arguments)

        query_filter = arguments.get("filter")
        if not isinstance(query_filter, str) or not query_filter:
            query_filter = None

        select = arguments.get("select")
        if isinstance(select, (list, tuple)) and select:
            select = [str(name) for name in select]
        else:
            select = None

        limit = arguments.get("limit")
        if isinstance(limit, bool) or not isinstance(limit, (int, float)):
            limit = DEFAULT_QUERY_LIMIT
        elif isinstance(limit, float) and not math.isfinite(limit):
            raise InvalidArgumentError("limit must be a positive integer")

        return cls(
            table_name=table_name,
            filter=query_filter,
            select=select,
            limit=int(limit),
        )


# -----------------------------------------------------------------------------
# QueryResult — the tool's output for query_table
# -----------------------------------------------------------------------------
@dataclass
class QueryResult:
    """A truncated sample of a query plus the true match count."""

    total_items: int                   # rows matched before truncation
    limit: int                         # the limit that was applied
    items: list[Row] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return {
            "totalItems": self.total_items,
            "limit": self.limit,
            "items": [row_to_json(row) for row in self.items],
        }


# -----------------------------------------------------------------------------
# TableSchema — the tool's output for get_table_schema
# -----------------------------------------------------------------------------
@dataclass
class TableSchema:
    """Field name → type tags seen for that field, in first-seen order."""

    fields: dict[str, list[str]] = field(default_factory=dict)

    def to_payload(self) -> dict[str, list[str]]:
        return {name: list(kinds) for name, kinds in self.fields.items()}
