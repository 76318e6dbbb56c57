# =============================================================================
# agent/__init__.py
# =============================================================================
# This package contains the Google ADK agent that consumes the table tools.
#
# ARCHITECTURAL ROLE:
#   The agent/ layer decides WHICH tool to call and interprets the results:
#     1. Receives a question ("How many active users signed up this year?")
#     2. Finds the table and its properties (list_tables, get_table_schema)
#     3. Writes an OData filter and runs query_table
#     4. Reports the answer, including how many rows matched in total
#
#   It does NOT talk to Azure, and it does NOT know how the tools work
#   internally; it only sees their MCP descriptions.
# =============================================================================
