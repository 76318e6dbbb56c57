# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the table-storage logic behind the MCP tools:
# configuration, row/value models, schema inference, and the adapter that
# talks to Azure.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP, Google ADK, or any other
#   orchestration framework.  The only third-party code it touches is the
#   Azure Tables SDK (and python-dotenv for configuration), so every module
#   here can be tested with a fake service client and no MCP server.
# =============================================================================
