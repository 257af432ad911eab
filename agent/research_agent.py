# =============================================================================
# agent/research_agent.py - Google ADK Agent Configuration
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Builds a demo Google ADK agent that uses the Financial Datasets MCP
#   server as its only tool source.  It's a convenient way to exercise the
#   server end-to-end from a terminal (see main.py).
#
#   ┌────────────────────────┐   stdio (MCP)   ┌───────────────────────────┐
#   │ ADK Agent              │ ──────────────▶ │ tools/mcp_server.py       │
#   │  LiteLlm (OpenRouter)  │ ◀────────────── │  → core/ → financial API  │
#   └────────────────────────┘                 └───────────────────────────┘
#
#   ADK spawns the server as a subprocess.  MCP stdio subprocesses only
#   inherit a minimal environment, so the API key is passed explicitly.
# =============================================================================

import os
import sys

from google.adk.agents import Agent
from google.adk.models.lite_llm import LiteLlm
from google.adk.tools.mcp_tool import MCPToolset
from mcp import StdioServerParameters

from agent.prompt import get_research_prompt
from core.config import API_KEY_ENV

DEFAULT_MODEL = "openrouter/openai/gpt-4o"
MODEL_ENV = "FINANCIAL_AGENT_MODEL"


def create_toolset(api_key: str) -> MCPToolset:
    """MCP connection that launches ``python -m tools.mcp_server``.

    The current interpreter is reused so the subprocess sees the same
    installed packages; cwd is the project root so ``tools`` and ``core``
    resolve even without an editable install.
    """
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    return MCPToolset(
        connection_params=StdioServerParameters(
            command=sys.executable,
            args=["-m", "tools.mcp_server"],
            cwd=project_root,
            env={**os.environ, API_KEY_ENV: api_key},
        ),
    )


def create_agent(api_key: str) -> Agent:
    """Create the financial research agent.

    Args:
        api_key: Financial Datasets API key forwarded to the MCP server.

    Returns:
        A configured Google ADK Agent.  The model string can be overridden
        with FINANCIAL_AGENT_MODEL (any LiteLlm model id).
    """
    model = os.environ.get(MODEL_ENV, DEFAULT_MODEL)
    return Agent(
        name="financial_research_agent",
        model=LiteLlm(model=model),
        instruction=get_research_prompt(),
        tools=[create_toolset(api_key)],
    )
