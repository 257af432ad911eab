# =============================================================================
# core/handlers.py - Per-Tool Handlers
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   One function per tool.  Every handler follows the same three steps:
#     1. Call the API once (core/client.py) with the tool's endpoint.
#     2. If the expected payload key is absent or empty, return a plain
#        informational message naming the queried entity.  An empty result
#        for a valid query is an expected outcome, NOT an error.
#     3. Otherwise render the payload with core/formatting.py.
#
#   Handlers return Ok(text) or Err(message).  Upstream errors, network
#   failures, undecodable JSON and incomplete payloads are turned into Err
#   by the @returns_result decorator; the dispatcher converts the Result
#   into a ToolResult exactly once.
# =============================================================================

import functools
import logging
from typing import Any, Callable

import requests

from core.client import ApiError, FinancialDatasetsClient
from core.formatting import (
    PayloadError,
    format_financial_metrics,
    format_institutional_ownership,
    format_press_releases,
    format_price_snapshot,
    format_search_results,
    format_statements,
)
from core.models import AuthMode, Err, ExternalEndpoint, Ok, Result

logger = logging.getLogger(__name__)

Handler = Callable[[FinancialDatasetsClient, dict[str, Any]], Result[str]]

# -----------------------------------------------------------------------------
# Endpoint table
# -----------------------------------------------------------------------------
PRICE_SNAPSHOT = ExternalEndpoint("/prices/snapshot")
FINANCIALS = ExternalEndpoint("/financials")
INCOME_STATEMENTS = ExternalEndpoint("/financials/income-statements")
BALANCE_SHEETS = ExternalEndpoint("/financials/balance-sheets")
CASH_FLOW_STATEMENTS = ExternalEndpoint("/financials/cash-flow-statements")
SEARCH = ExternalEndpoint("/financials/search", AuthMode.HEADER)
PRESS_RELEASES = ExternalEndpoint("/earnings/press-releases", AuthMode.HEADER)
METRICS_SNAPSHOT = ExternalEndpoint("/financial-metrics/snapshot")
INSTITUTIONAL_OWNERSHIP = ExternalEndpoint("/institutional-ownership")

STATEMENT_ENDPOINTS: dict[str, ExternalEndpoint] = {
    "all": FINANCIALS,
    "income": INCOME_STATEMENTS,
    "balance": BALANCE_SHEETS,
    "cash-flow": CASH_FLOW_STATEMENTS,
}

# Keys that may hold statement rows, checked in this order.
_STATEMENT_KEYS = ("income_statements", "balance_sheets", "cash_flow_statements", "financials")
_COMBINED_KEYS = ("income_statements", "balance_sheets", "cash_flow_statements")


def returns_result(func: Callable[..., str]) -> Handler:
    """Turn the expected failure kinds of a handler into Err."""

    @functools.wraps(func)
    def wrapper(client: FinancialDatasetsClient, args: dict[str, Any]) -> Result[str]:
        try:
            return Ok(func(client, args))
        except (ApiError, PayloadError, requests.RequestException) as exc:
            logger.warning("%s failed: %s", func.__name__, exc)
            return Err(str(exc))

    return wrapper


def _call(client: FinancialDatasetsClient, endpoint: ExternalEndpoint, params: dict[str, Any]) -> Any:
    return client.request(endpoint.path, params, endpoint.auth_mode)


def _section(payload: Any, key: str) -> Any:
    """``payload[key]`` when the payload is an object, else None."""
    if not isinstance(payload, dict):
        return None
    return payload.get(key)


# =============================================================================
# get_stock_price
# =============================================================================
@returns_result
def get_stock_price(client: FinancialDatasetsClient, args: dict[str, Any]) -> str:
    ticker = args["ticker"]
    response = _call(client, PRICE_SNAPSHOT, {"ticker": ticker})
    snapshot = _section(response, "snapshot")
    if not snapshot:
        return f"No price data found for ticker {ticker}"
    return format_price_snapshot(snapshot)


# =============================================================================
# get_financials
# =============================================================================
def merge_statements(financials: dict[str, Any]) -> list[dict[str, Any]]:
    """Combine the combined endpoint's three lists into one row per period.

    Rows are keyed by report_period; the first list to mention a period
    fixes its position in the output.  Rows without a report_period are
    keyed by their position in their list.
    """
    merged: dict[Any, dict[str, Any]] = {}
    for key in _COMBINED_KEYS:
        for position, row in enumerate(financials.get(key) or []):
            period = row.get("report_period")
            row_key = period if period is not None else ("position", position)
            merged.setdefault(row_key, {}).update(row)
    return list(merged.values())


def extract_statements(response: Any) -> list[dict[str, Any]]:
    for key in _STATEMENT_KEYS:
        rows = _section(response, key)
        if rows is None:
            continue
        if isinstance(rows, dict):
            return merge_statements(rows)
        return list(rows)
    return []


@returns_result
def get_financials(client: FinancialDatasetsClient, args: dict[str, Any]) -> str:
    ticker = args["ticker"]
    period = args["period"]
    limit = args["limit"]
    endpoint = STATEMENT_ENDPOINTS.get(args["statement_type"], FINANCIALS)

    response = _call(client, endpoint, {"ticker": ticker, "period": period, "limit": limit})
    statements = extract_statements(response)
    if not statements:
        return f"No financial data found for {ticker}"
    return format_statements(ticker, period, statements[:int(limit)])


# =============================================================================
# search_companies
# =============================================================================
@returns_result
def search_companies(client: FinancialDatasetsClient, args: dict[str, Any]) -> str:
    filters = args.get("filters")
    if not filters:
        return "Please provide at least one filter for the search"

    # Individual filters are sent as given; the API reports bad fields.
    body = {"period": args["period"], "limit": args["limit"], "filters": filters}
    response = client.request_json(SEARCH.path, body)
    results = _section(response, "search_results")
    if not results:
        return "No companies found matching your search criteria"
    return format_search_results(results)


# =============================================================================
# get_earnings_releases
# =============================================================================
@returns_result
def get_earnings_releases(client: FinancialDatasetsClient, args: dict[str, Any]) -> str:
    ticker = args["ticker"]
    limit = args["limit"]
    response = _call(client, PRESS_RELEASES, {"ticker": ticker, "limit": limit})
    releases = _section(response, "press_releases")
    if not releases:
        return f"No earnings press releases found for {ticker}"
    return format_press_releases(ticker, releases[:int(limit)])


# =============================================================================
# get_financial_metrics
# =============================================================================
@returns_result
def get_financial_metrics(client: FinancialDatasetsClient, args: dict[str, Any]) -> str:
    ticker = args["ticker"]
    response = _call(client, METRICS_SNAPSHOT, {"ticker": ticker})
    metrics = _section(response, "snapshot")
    if not metrics:
        return f"No financial metrics found for {ticker}"
    return format_financial_metrics(ticker, metrics)


# =============================================================================
# get_institutional_ownership
# =============================================================================
@returns_result
def get_institutional_ownership(client: FinancialDatasetsClient, args: dict[str, Any]) -> str:
    ticker = args["ticker"]
    response = _call(
        client, INSTITUTIONAL_OWNERSHIP, {"ticker": ticker, "limit": args["limit"]}
    )
    owners = _section(response, "institutional_ownership")
    if not owners:
        return f"No institutional ownership data found for {ticker}"
    return format_institutional_ownership(ticker, owners)


HANDLERS: dict[str, Handler] = {
    "get_stock_price": get_stock_price,
    "get_financials": get_financials,
    "search_companies": search_companies,
    "get_earnings_releases": get_earnings_releases,
    "get_financial_metrics": get_financial_metrics,
    "get_institutional_ownership": get_institutional_ownership,
}
