# =============================================================================
# core/registry.py - Tool Registry
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Declares the fixed catalog of tools the server exposes.  The catalog is
#   built once at import time and is read-only afterwards.
#
#   Each input_schema is advertised verbatim to the assistant, so it must
#   carry everything a caller needs to build a well-formed call without
#   knowing the upstream API: types, enums, defaults, required fields.
# =============================================================================

from typing import Any, Optional

from core.models import ToolDefinition

PERIODS = ["annual", "quarterly", "ttm"]
STATEMENT_TYPES = ["all", "income", "balance", "cash-flow"]
FILTER_OPERATORS = ["eq", "gt", "gte", "lt", "lte"]

_TICKER = {
    "type": "string",
    "description": "Stock ticker symbol",
}


def _schema(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="get_stock_price",
        description="Get current stock price and market data for a given ticker symbol",
        input_schema=_schema(
            {
                "ticker": {
                    "type": "string",
                    "description": "Stock ticker symbol (e.g., AAPL, MSFT)",
                },
            },
            ["ticker"],
        ),
    ),
    ToolDefinition(
        name="get_financials",
        description=(
            "Get financial statements (income statement, balance sheet, "
            "cash flow) for a company"
        ),
        input_schema=_schema(
            {
                "ticker": dict(_TICKER),
                "statement_type": {
                    "type": "string",
                    "description": "Type of financial statement",
                    "enum": STATEMENT_TYPES,
                    "default": "all",
                },
                "period": {
                    "type": "string",
                    "description": "Time period for the data",
                    "enum": PERIODS,
                    "default": "quarterly",
                },
                "limit": {
                    "type": "number",
                    "description": "Number of periods to return",
                    "default": 4,
                },
            },
            ["ticker"],
        ),
    ),
    ToolDefinition(
        name="search_companies",
        description=(
            "Search for companies by financial metrics using filters. You can "
            "filter by revenue, debt, cash flow, and 50+ other financial metrics."
        ),
        input_schema=_schema(
            {
                "filters": {
                    "type": "array",
                    "description": (
                        "Array of filters to apply. Each filter has a field, "
                        "operator (eq, gt, gte, lt, lte), and value"
                    ),
                    "items": {
                        "type": "object",
                        "properties": {
                            "field": {
                                "type": "string",
                                "description": (
                                    "Financial metric to filter by (e.g., revenue, "
                                    "total_debt, net_income, capital_expenditure)"
                                ),
                            },
                            "operator": {
                                "type": "string",
                                "enum": FILTER_OPERATORS,
                                "description": "Comparison operator",
                            },
                            "value": {
                                "type": "number",
                                "description": "Value to compare against",
                            },
                        },
                        "required": ["field", "operator", "value"],
                    },
                },
                "period": {
                    "type": "string",
                    "enum": PERIODS,
                    "description": "Time period for the data",
                    "default": "ttm",
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of results to return",
                    "default": 10,
                },
            },
            ["filters"],
        ),
    ),
    ToolDefinition(
        name="get_earnings_releases",
        description=(
            "Get earnings press releases for a company. Returns recent earnings "
            "announcements with full text."
        ),
        input_schema=_schema(
            {
                "ticker": dict(_TICKER),
                "limit": {
                    "type": "number",
                    "description": "Number of press releases to return",
                    "default": 5,
                },
            },
            ["ticker"],
        ),
    ),
    ToolDefinition(
        name="get_financial_metrics",
        description=(
            "Get financial metrics and ratios for a company. Includes valuation "
            "ratios, profitability metrics, efficiency ratios, and more."
        ),
        input_schema=_schema({"ticker": dict(_TICKER)}, ["ticker"]),
    ),
    ToolDefinition(
        name="get_institutional_ownership",
        description=(
            "Get institutional ownership data for a company. Shows which "
            "investment firms own shares and how much."
        ),
        input_schema=_schema(
            {
                "ticker": dict(_TICKER),
                "limit": {
                    "type": "number",
                    "description": "Number of institutional owners to return",
                    "default": 10,
                },
            },
            ["ticker"],
        ),
    ),
)


def _index_by_name(tools: tuple[ToolDefinition, ...]) -> dict[str, ToolDefinition]:
    index: dict[str, ToolDefinition] = {}
    for tool in tools:
        if tool.name in index:
            raise ValueError(f"Duplicate tool name in registry: {tool.name}")
        index[tool.name] = tool
    return index


_BY_NAME = _index_by_name(TOOLS)


def list_tools() -> list[ToolDefinition]:
    """All tool definitions, in registry order."""
    return list(TOOLS)


def get_tool(name: str) -> Optional[ToolDefinition]:
    return _BY_NAME.get(name)


def tool_catalog() -> list[dict[str, Any]]:
    """The catalog in wire form, as returned for a "list tools" request."""
    return [tool.to_dict() for tool in TOOLS]
