# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP server that publishes the table tools.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between MCP and core/.  It:
#     1. Declares each tool (name, docstring, typed parameters)
#     2. Passes the arguments to core.table_store.TableStoreAdapter
#     3. Serializes the payload as JSON text
#     4. Turns core.errors types into MCP tool errors
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT query Azure themselves (that's in core/)
#   - They do NOT know about Google ADK (any MCP host can use them)
#
# TOOL CONTRACT:
#   The docstrings are what the LLM reads.  query_table's description leads
#   with the result-limit warning and lists OData filter examples, because
#   the agent has to write the filter itself.
# =============================================================================
