# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP server that publishes the Financial
# Datasets tools.
#
# ARCHITECTURAL ROLE:
#   tools/ is the transport layer between an MCP client (an AI assistant)
#   and core/.  It:
#     1. Declares one typed FastMCP tool per catalog entry
#     2. Forwards every call to core.dispatcher.ToolDispatcher
#     3. Maps error-flagged results onto FastMCP's ToolError
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT talk to the Financial Datasets API (core/client.py does)
#   - They do NOT format responses (core/formatting.py does)
#   - They do NOT know about Google ADK
# =============================================================================
