# =============================================================================
# core/errors.py  —  Typed Tool Errors
# =============================================================================
#
# Every failed tool invocation ends with exactly ONE of these.  The codes are
# the standard JSON-RPC ones so the MCP layer can report them without any
# translation table.
#
#   InvalidArgumentError  →  bad/missing argument, detected before any
#                            network call
#   ToolNotFoundError     →  the tool name isn't registered
#   StoreError            →  anything that went wrong talking to Azure
#                            (table not found, malformed filter, auth...)
#
# core/ stays free of MCP, so these do NOT subclass any MCP exception.
# =============================================================================

from azure.core.exceptions import AzureError

INVALID_PARAMS = -32602
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


class TableToolError(Exception):
    """Base class for errors returned to the tool caller."""

    code = INTERNAL_ERROR
    kind = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidArgumentError(TableToolError):
    code = INVALID_PARAMS
    kind = "invalid_argument"


class ToolNotFoundError(TableToolError):
    code = METHOD_NOT_FOUND
    kind = "method_not_found"


class StoreError(TableToolError):
    """A failure from the table store, with its original message kept."""

    code = INTERNAL_ERROR
    kind = "internal_error"

    @classmethod
    def from_exception(cls, exc: Exception) -> "StoreError":
        # AzureError keeps the bare service message on .message; str() adds
        # the response dump on HttpResponseError.
        if isinstance(exc, AzureError):
            message = exc.message or str(exc)
        else:
            message = str(exc)
        return cls(message or "An unexpected error occurred")
