# =============================================================================
# tools/mcp_server.py - FastMCP Tool Server
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Exposes the Financial Datasets tools over MCP.  Each tool below is a
#   thin typed wrapper: it hands its arguments to the core dispatcher and
#   turns the ToolResult into what FastMCP expects.
#
# HOW IT WORKS (the flow):
#   1. The assistant calls a tool by name via MCP (e.g. "get_stock_price")
#   2. FastMCP routes the call to the decorated function below
#   3. The function forwards to core.dispatcher.ToolDispatcher.call()
#   4. Success → the text block is returned
#      Failure → ToolError is raised, which FastMCP sends back as an
#                error-flagged result (isError=true) with the same text
#
#   Unknown tool names are caught by UnknownToolMiddleware before FastMCP
#   looks them up, so they get the dispatcher's "Unknown tool: <name>".
#
# RUNNING THIS SERVER:
#   a) Console script:  financialdatasets-mcp
#   b) Module:          python -m tools.mcp_server
#   Both serve over stdio and require FINANCIAL_DATASETS_API_KEY.
# =============================================================================

import json
import logging
import sys
from typing import Literal, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.middleware import Middleware, MiddlewareContext
from pydantic import BaseModel, Field

from core import registry
from core.client import FinancialDatasetsClient
from core.config import load_settings
from core.dispatcher import ToolDispatcher
from core.models import Err, ToolResult

SERVER_NAME = "financialdatasets-mcp"
SERVER_VERSION = "1.0.0"

# =============================================================================
# Logging Setup
# =============================================================================
# Logs go to STDERR: stdout carries the MCP JSON stream, and anything else
# written there would corrupt it.
#   - CYAN for incoming requests (tool name + parameters)
#   - GREEN for successful responses
#   - YELLOW for status messages
#   - RED for error results
# =============================================================================
_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

logger = logging.getLogger(__name__)


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [MCP] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, result: ToolResult) -> ToolResult:
    """Log the ToolResult as compact JSON, GREEN for success and RED for errors."""
    color = _RED if result.is_error else _GREEN
    payload = json.dumps(result.to_dict(), separators=(",", ":"))
    logger.info(f"{color}  ← {tool_name} response: {payload}{_RESET}")
    return result


# =============================================================================
# Server instance and dispatcher
# =============================================================================
mcp = FastMCP(SERVER_NAME)

# Set by main() once the API key has been validated.
_dispatcher: Optional[ToolDispatcher] = None


def configure(dispatcher: ToolDispatcher) -> None:
    global _dispatcher
    _dispatcher = dispatcher


def _dispatch(tool_name: str, **arguments) -> str:
    """Run one tool call through the dispatcher.

    Returns the result text, or raises ToolError so FastMCP flags the
    response as an error.
    """
    _log_request(tool_name, **arguments)
    if _dispatcher is None:
        raise ToolError("Error: server is not configured with an API key")
    result = _log_response(tool_name, _dispatcher.call(tool_name, arguments))
    if result.is_error:
        raise ToolError(result.first_text)
    return result.first_text


class UnknownToolMiddleware(Middleware):
    """Send calls to names outside the catalog through the dispatcher."""

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        name = context.message.name
        if registry.get_tool(name) is None:
            return _dispatch(name, **(context.message.arguments or {}))
        return await call_next(context)


mcp.add_middleware(UnknownToolMiddleware())


# =============================================================================
# Tool signatures
# =============================================================================
# The canonical schemas live in core/registry.py; the type hints below
# mirror them so FastMCP advertises the same names, enums and defaults.
# =============================================================================
Period = Literal["annual", "quarterly", "ttm"]
StatementType = Literal["all", "income", "balance", "cash-flow"]
Operator = Literal["eq", "gt", "gte", "lt", "lte"]


class SearchFilter(BaseModel):
    """One search condition, e.g. revenue gt 1e9."""

    field: str = Field(
        description=(
            "Financial metric to filter by (e.g., revenue, total_debt, "
            "net_income, capital_expenditure)"
        )
    )
    operator: Operator = Field(description="Comparison operator")
    value: float = Field(description="Value to compare against")


# =============================================================================
# TOOL 1: get_stock_price
# =============================================================================
@mcp.tool()
def get_stock_price(ticker: str) -> str:
    """Get current stock price and market data for a given ticker symbol.

    Args:
        ticker: Stock ticker symbol (e.g., AAPL, MSFT).

    Returns:
        Price, day change (absolute and percent), volume, market cap in
        billions and the time of the last update.
    """
    return _dispatch("get_stock_price", ticker=ticker)


# =============================================================================
# TOOL 2: get_financials
# =============================================================================
@mcp.tool()
def get_financials(
    ticker: str,
    statement_type: StatementType = "all",
    period: Period = "quarterly",
    limit: float = 4,
) -> str:
    """Get financial statements (income statement, balance sheet, cash flow) for a company.

    Args:
        ticker: Stock ticker symbol.
        statement_type: Type of financial statement ("all", "income",
            "balance" or "cash-flow").
        period: Time period for the data ("annual", "quarterly" or "ttm").
        limit: Number of periods to return.

    Returns:
        One block per reporting period with the Income Statement, Balance
        Sheet and Cash Flow sections the API returned, amounts in millions.
    """
    return _dispatch(
        "get_financials",
        ticker=ticker, statement_type=statement_type, period=period, limit=limit,
    )


# =============================================================================
# TOOL 3: search_companies
# =============================================================================
@mcp.tool()
def search_companies(
    filters: list[SearchFilter],
    period: Period = "ttm",
    limit: float = 10,
) -> str:
    """Search for companies by financial metrics using filters.

    You can filter by revenue, debt, cash flow, and 50+ other financial
    metrics.

    Args:
        filters: Array of filters to apply. Each filter has a field,
            operator (eq, gt, gte, lt, lte), and value.
        period: Time period for the data.
        limit: Maximum number of results to return.
    """
    return _dispatch(
        "search_companies",
        filters=[f.model_dump() for f in filters], period=period, limit=limit,
    )


# =============================================================================
# TOOL 4: get_earnings_releases
# =============================================================================
@mcp.tool()
def get_earnings_releases(ticker: str, limit: float = 5) -> str:
    """Get earnings press releases for a company.

    Returns recent earnings announcements with full text (a preview of the
    first 500 characters of each release).

    Args:
        ticker: Stock ticker symbol.
        limit: Number of press releases to return.
    """
    return _dispatch("get_earnings_releases", ticker=ticker, limit=limit)


# =============================================================================
# TOOL 5: get_financial_metrics
# =============================================================================
@mcp.tool()
def get_financial_metrics(ticker: str) -> str:
    """Get financial metrics and ratios for a company.

    Includes valuation ratios, profitability metrics, efficiency ratios,
    and more.

    Args:
        ticker: Stock ticker symbol.
    """
    return _dispatch("get_financial_metrics", ticker=ticker)


# =============================================================================
# TOOL 6: get_institutional_ownership
# =============================================================================
@mcp.tool()
def get_institutional_ownership(ticker: str, limit: float = 10) -> str:
    """Get institutional ownership data for a company.

    Shows which investment firms own shares and how much, with totals
    across all returned holders.

    Args:
        ticker: Stock ticker symbol.
        limit: Number of institutional owners to return.
    """
    return _dispatch("get_institutional_ownership", ticker=ticker, limit=limit)


# =============================================================================
# Server entry point
# =============================================================================
def main() -> None:
    """Validate configuration, then serve over stdio.

    A missing API key is the only startup check; it is reported on stderr
    and the process exits with status 1 before any tool is served.
    """
    configure_logging()

    settings = load_settings()
    if isinstance(settings, Err):
        logger.error(f"Error: {settings.message}")
        sys.exit(1)

    try:
        configure(ToolDispatcher(FinancialDatasetsClient(settings.value.api_key)))
        _log_status(f"{SERVER_NAME} {SERVER_VERSION} started")
        mcp.run()
    except Exception as exc:
        logger.error(f"Fatal error: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
