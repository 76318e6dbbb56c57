# =============================================================================
# agent/table_agent.py  —  Google ADK Agent Configuration (with OpenAI LLM)
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Creates the Google ADK agent that answers questions about the data in an
#   Azure Storage account.  The agent has no storage access of its own; it
#   calls the three tools exposed by tools/mcp_server.py.
#
#   ┌──────────────────────────────┐        ┌──────────────────────────┐
#   │  Google ADK Agent            │  MCP   │  FastMCP Server          │
#   │  LiteLlm → OpenRouter model  │──────▶│  (tools/mcp_server)      │
#   │  TABLE_EXPLORER prompt       │ stdio  │  • list_tables           │
#   └──────────────────────────────┘        │  • get_table_schema      │
#                                           │  • query_table           │
#                                           └──────────────────────────┘
#                                                       │
#                                                       ▼
#                                           ┌──────────────────────────┐
#                                           │  core/ (Azure Tables SDK)│
#                                           └──────────────────────────┘
#
# MCP CONNECTION:
#   ADK starts the server as a subprocess and talks to it over
#   stdin/stdout.  The MCP stdio client only passes a minimal environment to
#   the subprocess, so we forward ours explicitly; otherwise
#   CONNECTION_STRING would never reach the server.
# =============================================================================

import os

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_table_explorer_prompt

DEFAULT_MODEL = "openrouter/openai/gpt-4o"


def create_agent() -> Agent:
    """Create the table explorer agent.

    The model string comes from AGENT_MODEL (default: GPT-4o via
    OpenRouter).  LiteLlm reads the provider key, e.g. OPENROUTER_API_KEY,
    from the environment.

    Returns:
        A configured Google ADK Agent instance.
    """
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    # "uv run" keeps the subprocess inside the project's .venv
    mcp_tools = MCPToolset(
        connection_params=StdioServerParameters(
            command="uv",
            args=["run", "python", "-m", "tools.mcp_server"],
            cwd=project_root,
            env=dict(os.environ),
        ),
    )

    agent = Agent(
        name="table_explorer",
        model=LiteLlm(model=os.getenv("AGENT_MODEL", DEFAULT_MODEL)),
        instruction=get_table_explorer_prompt(),
        tools=[mcp_tools],
    )

    return agent
