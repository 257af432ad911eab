# =============================================================================
# core/formatting.py - Response Formatting
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Turns upstream JSON payloads into deterministic, human-readable text
#   blocks for the assistant.  Two layers:
#
#     1. Number/date helpers (fixed-point rounding, millions/billions,
#        percent, ratio, grouped digits, localized timestamps).
#     2. One render function per tool.
#
# PAYLOAD SHAPE:
#   The API omits fields it has no data for, and which fields are present
#   decides what gets rendered (e.g. a statement with "revenue" gets an
#   Income Statement section).  Every branch below checks presence
#   explicitly.  Fields a renderer cannot do without go through require(),
#   which raises PayloadError instead of printing "None".
#
# ROUNDING:
#   fixed() rounds the exact binary value half away from zero, so
#   1_234_500_000 in millions is "1235" and 500_000 is "1".
# =============================================================================

from datetime import date, datetime, timezone, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Callable, Iterable, Optional

MILLION = 1_000_000
BILLION = 1_000_000_000
PREVIEW_CHARS = 500
NOT_AVAILABLE = "N/A"


class PayloadError(ValueError):
    """An upstream payload lacks a field the formatter needs."""


def require(row: dict[str, Any], key: str, context: str) -> Any:
    value = row.get(key)
    if value is None:
        raise PayloadError(f"{context} is missing required field '{key}'")
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# =============================================================================
# Number helpers
# =============================================================================
def fixed(value: float, places: int) -> str:
    """Render ``value`` with exactly ``places`` decimals."""
    quantum = Decimal(1).scaleb(-places)
    return format(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP), "f")


def plain_number(value: Any) -> str:
    """Shortest natural rendering of a number: 150.0 → "150", 1.5 → "1.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_signed(value: float) -> str:
    return f"{'+' if value >= 0 else ''}{plain_number(value)}"


def format_millions(value: float, places: int = 0) -> str:
    return fixed(value / MILLION, places)


def format_billions(value: float, places: int = 2) -> str:
    return fixed(value / BILLION, places)


def format_percent(value: Optional[float]) -> str:
    """0.1534 → "15.34%"."""
    if value is None:
        return NOT_AVAILABLE
    return fixed(value * 100, 2) + "%"


def format_ratio(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return fixed(value, 2)


def format_grouped(value: Optional[float]) -> str:
    """Digit grouping: 1234567 → "1,234,567" (up to 3 decimals kept)."""
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, int) or float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def _dollars_billions(value: Optional[float]) -> str:
    if value is None:
        return NOT_AVAILABLE
    return f"${format_billions(value)}B"


# =============================================================================
# Date helpers
# =============================================================================
def _parse_datetime(value: Any) -> Optional[datetime]:
    if _is_number(value):
        # Epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: Any, tz: Optional[tzinfo] = None) -> str:
    """Localized timestamp, e.g. "1/15/2025, 3:04:05 PM".

    Converted to ``tz`` (the machine's local zone when omitted).  Values
    that cannot be parsed are returned unchanged.
    """
    if value is None:
        return NOT_AVAILABLE
    parsed = _parse_datetime(value)
    if parsed is None:
        return str(value)
    local = parsed.astimezone(tz)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return (
        f"{local.month}/{local.day}/{local.year}, "
        f"{hour}:{local.minute:02d}:{local.second:02d} {meridiem}"
    )


def format_date(value: Any, tz: Optional[tzinfo] = None) -> str:
    """Localized date, e.g. "9/30/2024".

    A bare date ("2024-09-30") is rendered as-is; shifting it through a
    timezone would move it to the previous day west of UTC.
    """
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, str) and len(value.strip()) == 10:
        try:
            day = date.fromisoformat(value.strip())
        except ValueError:
            return value
        return f"{day.month}/{day.day}/{day.year}"
    parsed = _parse_datetime(value)
    if parsed is None:
        return str(value)
    local = parsed.astimezone(tz)
    return f"{local.month}/{local.day}/{local.year}"


# =============================================================================
# get_stock_price
# =============================================================================
def format_price_snapshot(snapshot: dict[str, Any]) -> str:
    context = "price snapshot"
    return "\n".join([
        f"{require(snapshot, 'ticker', context)}",
        f"Current Price: ${plain_number(require(snapshot, 'price', context))}",
        (
            f"Change: {format_signed(require(snapshot, 'day_change', context))} "
            f"({format_signed(require(snapshot, 'day_change_percent', context))}%)"
        ),
        f"Volume: {format_grouped(snapshot.get('volume'))}",
        f"Market Cap: {_dollars_billions(snapshot.get('market_cap'))}",
        f"Last Updated: {format_timestamp(require(snapshot, 'time', context))}",
    ])


# =============================================================================
# get_financials
# =============================================================================
def _millions(value: float) -> str:
    return f"${format_millions(value)}M"


def _raw_dollars(value: float) -> str:
    return f"${plain_number(value)}"


# (title, diagnostic field, diagnostic label, optional lines)
# A section is rendered only when its diagnostic field is present.  The
# optional lines are rendered only when their value is non-zero.
_Line = tuple[str, str, Callable[[float], str]]
_STATEMENT_SECTIONS: tuple[tuple[str, str, str, tuple[_Line, ...]], ...] = (
    ("Income Statement", "revenue", "Revenue", (
        ("gross_profit", "Gross Profit", _millions),
        ("operating_income", "Operating Income", _millions),
        ("net_income", "Net Income", _millions),
        ("earnings_per_share", "EPS", _raw_dollars),
    )),
    ("Balance Sheet", "total_assets", "Total Assets", (
        ("total_liabilities", "Total Liabilities", _millions),
        ("total_stockholders_equity", "Total Equity", _millions),
        ("cash_and_cash_equivalents", "Cash", _millions),
    )),
    ("Cash Flow", "net_cash_flow_from_operating_activities", "Operating Cash Flow", (
        ("net_cash_flow_from_investing_activities", "Investing Cash Flow", _millions),
        ("net_cash_flow_from_financing_activities", "Financing Cash Flow", _millions),
        ("free_cash_flow", "Free Cash Flow", _millions),
    )),
)


def format_statement(statement: dict[str, Any]) -> str:
    """One period's entry: header, up to three sections, separator."""
    report_period = statement.get("report_period")
    parts = [
        f"Period: {statement.get('fiscal_period') or report_period}\n",
        f"Report Date: {report_period}\n\n",
    ]
    for title, diagnostic, label, lines in _STATEMENT_SECTIONS:
        if statement.get(diagnostic) is None:
            continue
        parts.append(f"{title}:\n")
        parts.append(f"  {label}: {_millions(statement[diagnostic])}\n")
        for key, line_label, render in lines:
            value = statement.get(key)
            if value:
                parts.append(f"  {line_label}: {render(value)}\n")
        parts.append("\n")
    parts.append("---\n\n")
    return "".join(parts)


def format_statements(
    ticker: str, period: str, statements: Iterable[dict[str, Any]]
) -> str:
    header = f"Financial Statements for {ticker} ({period})\n\n"
    return header + "".join(format_statement(s) for s in statements)


# =============================================================================
# search_companies
# =============================================================================
_SEARCH_SKIP_KEYS = {"ticker", "report_period", "period", "currency"}


def format_search_results(results: list[dict[str, Any]]) -> str:
    parts = [f"Found {len(results)} companies matching your criteria:\n\n"]
    for row in results:
        parts.append(f"{require(row, 'ticker', 'search result')}\n")
        report_period = row.get("report_period") or NOT_AVAILABLE
        period = row.get("period") or NOT_AVAILABLE
        parts.append(f"  Report Period: {report_period} ({period})\n")
        for key, value in row.items():
            if key in _SEARCH_SKIP_KEYS or not _is_number(value):
                continue
            if abs(value) > MILLION:
                parts.append(f"  {key}: ${format_millions(value, 1)}M\n")
            else:
                parts.append(f"  {key}: {plain_number(value)}\n")
        parts.append("\n")
    return "".join(parts)


# =============================================================================
# get_earnings_releases
# =============================================================================
def preview(text: str, length: int = PREVIEW_CHARS) -> str:
    """First ``length`` characters plus "...", whether or not text was cut."""
    return f"{text[:length]}..."


def format_press_releases(ticker: str, releases: Iterable[dict[str, Any]]) -> str:
    parts = [f"Earnings Press Releases for {ticker}\n\n"]
    context = "press release"
    for release in releases:
        parts.append(f"Title: {require(release, 'title', context)}\n")
        parts.append(f"Date: {format_date(require(release, 'date', context))}\n")
        parts.append(f"URL: {release.get('url') or NOT_AVAILABLE}\n")
        parts.append(
            f"\nText (first {PREVIEW_CHARS} chars):\n"
            f"{preview(require(release, 'text', context))}\n"
        )
        parts.append("\n---\n\n")
    return "".join(parts)


# =============================================================================
# get_financial_metrics
# =============================================================================
def format_financial_metrics(ticker: str, metrics: dict[str, Any]) -> str:
    m = metrics.get
    return "".join([
        f"Financial Metrics for {ticker}\n\n",
        "Valuation Metrics:\n",
        f"  Market Cap: {_dollars_billions(m('market_cap'))}\n",
        f"  P/E Ratio: {format_ratio(m('price_to_earnings_ratio'))}\n",
        f"  P/B Ratio: {format_ratio(m('price_to_book_ratio'))}\n",
        f"  P/S Ratio: {format_ratio(m('price_to_sales_ratio'))}\n",
        f"  EV/EBITDA: {format_ratio(m('enterprise_value_to_ebitda_ratio'))}\n",
        f"  PEG Ratio: {format_ratio(m('peg_ratio'))}\n\n",
        "Profitability Metrics:\n",
        f"  Gross Margin: {format_percent(m('gross_margin'))}\n",
        f"  Operating Margin: {format_percent(m('operating_margin'))}\n",
        f"  Net Margin: {format_percent(m('net_margin'))}\n",
        f"  ROE: {format_percent(m('return_on_equity'))}\n",
        f"  ROA: {format_percent(m('return_on_assets'))}\n",
        f"  ROIC: {format_percent(m('return_on_invested_capital'))}\n\n",
        "Efficiency Metrics:\n",
        f"  Asset Turnover: {format_ratio(m('asset_turnover'))}\n",
        f"  Inventory Turnover: {format_ratio(m('inventory_turnover'))}\n",
        f"  Receivables Turnover: {format_ratio(m('receivables_turnover'))}\n",
        f"  FCF Yield: {format_percent(m('free_cash_flow_yield'))}\n",
    ])


# =============================================================================
# get_institutional_ownership
# =============================================================================
def format_institutional_ownership(ticker: str, owners: list[dict[str, Any]]) -> str:
    """Per-investor blocks followed by running totals across all rows."""
    parts = [f"Institutional Ownership for {ticker}\n\n"]
    total_shares = 0
    total_value = 0
    context = "institutional owner"

    for owner in owners:
        shares = require(owner, "shares", context)
        market_value = require(owner, "market_value", context)
        investor = str(require(owner, "investor", context)).replace("_", " ")
        parts.append(f"{investor}\n")
        parts.append(f"  Shares: {format_grouped(shares)}\n")
        parts.append(f"  Value: ${format_millions(market_value, 2)}M\n")
        price = owner.get("price")
        parts.append(f"  Avg Price: {NOT_AVAILABLE if price is None else _raw_dollars(price)}\n")
        parts.append(f"  Report Date: {format_date(owner.get('report_period'))}\n\n")
        total_shares += shares
        total_value += market_value

    parts.append("---\n")
    parts.append(f"Total Institutional Shares: {format_grouped(total_shares)}\n")
    parts.append(f"Total Institutional Value: ${format_billions(total_value)}B\n")
    return "".join(parts)
