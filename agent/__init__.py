# =============================================================================
# agent/__init__.py
# =============================================================================
# A demo Google ADK agent that talks to the Financial Datasets MCP server.
#
# ARCHITECTURAL ROLE:
#   The agent is a client of the server, not part of it.  It:
#     1. Receives a research question ("How profitable is AAPL?")
#     2. Decides which MCP tools to call
#     3. Summarises the tools' text output for the user
#
#   The server (tools/) and its logic (core/) never import this package.
#   The LLM (any LiteLlm model, GPT-4o via OpenRouter by default) only
#   ever sees the tool catalog and the tools' text output.
# =============================================================================
