"""Tests for number helpers and per-tool text rendering."""

from datetime import timezone

import pytest

from core.formatting import (
    PayloadError,
    fixed,
    format_date,
    format_financial_metrics,
    format_grouped,
    format_institutional_ownership,
    format_millions,
    format_percent,
    format_press_releases,
    format_price_snapshot,
    format_ratio,
    format_search_results,
    format_signed,
    format_statement,
    format_statements,
    format_timestamp,
    plain_number,
    preview,
    require,
)


# ---------------------------------------------------------------------------
# Number helpers
# ---------------------------------------------------------------------------

class TestRounding:
    @pytest.mark.parametrize("value, expected", [
        (1_234_500_000, "1235"),
        (500_000, "1"),
        (1_500_000, "2"),
        (2_500_000, "3"),
        (-1_500_000, "-2"),
        (0, "0"),
    ])
    def test_millions_round_half_away_from_zero(self, value, expected):
        assert format_millions(value) == expected

    def test_millions_with_places(self):
        assert format_millions(391_035_000_000, 1) == "391035.0"
        assert format_millions(1_000_000, 2) == "1.00"

    def test_fixed_pads_decimals(self):
        assert fixed(3, 2) == "3.00"
        assert fixed(0.006, 2) == "0.01"


class TestPercentAndRatio:
    def test_percent(self):
        assert format_percent(0.1534) == "15.34%"
        assert format_percent(0.4621) == "46.21%"
        assert format_percent(-0.05) == "-5.00%"

    def test_percent_absent(self):
        assert format_percent(None) == "N/A"

    def test_ratio(self):
        assert format_ratio(28.456) == "28.46"
        assert format_ratio(0) == "0.00"

    def test_ratio_absent(self):
        assert format_ratio(None) == "N/A"


class TestPlainNumbers:
    def test_integral_float_drops_fraction(self):
        assert plain_number(150.0) == "150"
        assert plain_number(150.25) == "150.25"
        assert plain_number(7) == "7"

    def test_signed(self):
        assert format_signed(1.5) == "+1.5"
        assert format_signed(0) == "+0"
        assert format_signed(-2.25) == "-2.25"

    def test_grouped(self):
        assert format_grouped(1_234_567) == "1,234,567"
        assert format_grouped(1234.5) == "1,234.5"
        assert format_grouped(600.0) == "600"
        assert format_grouped(None) == "N/A"


class TestDates:
    def test_timestamp_pm(self):
        assert format_timestamp("2025-01-15T15:04:05Z", tz=timezone.utc) == "1/15/2025, 3:04:05 PM"

    def test_timestamp_midnight(self):
        assert format_timestamp("2025-03-01T00:00:00+00:00", tz=timezone.utc) == "3/1/2025, 12:00:00 AM"

    def test_timestamp_epoch_millis(self):
        assert format_timestamp(1736953445000, tz=timezone.utc) == "1/15/2025, 3:04:05 PM"

    def test_unparseable_timestamp_is_returned_as_is(self):
        assert format_timestamp("yesterday") == "yesterday"

    def test_date_only_is_not_shifted(self):
        assert format_date("2024-09-30") == "9/30/2024"

    def test_date_from_timestamp(self):
        assert format_date("2024-10-31T20:30:00Z", tz=timezone.utc) == "10/31/2024"

    def test_missing_date(self):
        assert format_date(None) == "N/A"


def test_require_raises_on_missing_field():
    with pytest.raises(PayloadError, match="missing required field 'ticker'"):
        require({"price": 1}, "ticker", "price snapshot")


# ---------------------------------------------------------------------------
# get_stock_price
# ---------------------------------------------------------------------------

class TestPriceSnapshot:
    def test_renders_all_lines(self, sample_price_snapshot):
        lines = format_price_snapshot(sample_price_snapshot).split("\n")
        assert lines[:5] == [
            "AAPL",
            "Current Price: $150.25",
            "Change: -1.5 (-0.99%)",
            "Volume: 52,000,000",
            "Market Cap: $2300.00B",
        ]
        assert lines[5].startswith("Last Updated: ")
        assert len(lines) == 6

    def test_positive_change_gets_plus(self, sample_price_snapshot):
        sample_price_snapshot.update(day_change=2, day_change_percent=1.33)
        assert "Change: +2 (+1.33%)" in format_price_snapshot(sample_price_snapshot)

    def test_missing_volume_and_market_cap(self, sample_price_snapshot):
        del sample_price_snapshot["volume"]
        sample_price_snapshot["market_cap"] = None
        text = format_price_snapshot(sample_price_snapshot)
        assert "Volume: N/A" in text
        assert "Market Cap: N/A" in text

    def test_missing_price_raises(self, sample_price_snapshot):
        del sample_price_snapshot["price"]
        with pytest.raises(PayloadError):
            format_price_snapshot(sample_price_snapshot)


# ---------------------------------------------------------------------------
# get_financials
# ---------------------------------------------------------------------------

class TestStatements:
    def test_revenue_without_total_assets_renders_income_only(self):
        text = format_statement({
            "report_period": "2024-09-28",
            "fiscal_period": "2024-Q4",
            "revenue": 94_930_000_000,
            "net_income": 14_736_000_000,
        })
        assert text == (
            "Period: 2024-Q4\n"
            "Report Date: 2024-09-28\n\n"
            "Income Statement:\n"
            "  Revenue: $94930M\n"
            "  Net Income: $14736M\n\n"
            "---\n\n"
        )
        assert "Balance Sheet" not in text
        assert "Cash Flow" not in text

    def test_eps_is_raw(self, sample_income_statement):
        text = format_statement(sample_income_statement(earnings_per_share=1.64))
        assert "  EPS: $1.64\n" in text

    def test_zero_optional_lines_are_skipped(self, sample_income_statement):
        text = format_statement(sample_income_statement(gross_profit=0))
        assert "Gross Profit" not in text
        assert "Revenue: $94930M" in text

    def test_zero_revenue_still_renders_section(self, sample_income_statement):
        text = format_statement(sample_income_statement(revenue=0))
        assert "Income Statement:\n  Revenue: $0M\n" in text

    def test_balance_sheet_and_cash_flow(self):
        text = format_statement({
            "report_period": "2024-09-28",
            "total_assets": 364_980_000_000,
            "total_liabilities": 308_030_000_000,
            "total_stockholders_equity": 56_950_000_000,
            "net_cash_flow_from_operating_activities": 26_811_000_000,
            "free_cash_flow": 23_903_000_000,
        })
        assert "Period: 2024-09-28\n" in text
        assert "Balance Sheet:\n  Total Assets: $364980M\n" in text
        assert "  Total Liabilities: $308030M\n" in text
        assert "  Total Equity: $56950M\n" in text
        assert "Cash Flow:\n  Operating Cash Flow: $26811M\n" in text
        assert "  Free Cash Flow: $23903M\n" in text
        assert "Income Statement" not in text

    def test_header(self, sample_income_statement):
        text = format_statements("AAPL", "annual", [sample_income_statement()])
        assert text.startswith("Financial Statements for AAPL (annual)\n\n")


# ---------------------------------------------------------------------------
# search_companies
# ---------------------------------------------------------------------------

class TestSearchResults:
    def test_scales_large_numbers_and_skips_identity_keys(self):
        text = format_search_results([{
            "ticker": "AAPL",
            "report_period": "2024-09-28",
            "period": "ttm",
            "currency": "USD",
            "revenue": 391_035_000_000,
            "pe_ratio": 28.5,
            "is_active": True,
            "name": "Apple Inc.",
        }])
        assert text == (
            "Found 1 companies matching your criteria:\n\n"
            "AAPL\n"
            "  Report Period: 2024-09-28 (ttm)\n"
            "  revenue: $391035.0M\n"
            "  pe_ratio: 28.5\n"
            "\n"
        )

    def test_exactly_one_million_is_not_scaled(self):
        text = format_search_results([{"ticker": "X", "total_debt": 1_000_000}])
        assert "  total_debt: 1000000\n" in text

    def test_negative_large_number_is_scaled(self):
        text = format_search_results([{"ticker": "X", "free_cash_flow": -2_500_000}])
        assert "  free_cash_flow: $-2.5M\n" in text

    def test_missing_period_renders_not_available(self):
        text = format_search_results([{"ticker": "X", "report_period": None, "revenue": 5}])
        assert "  Report Period: N/A (N/A)\n" in text


# ---------------------------------------------------------------------------
# get_earnings_releases
# ---------------------------------------------------------------------------

class TestPressReleases:
    def test_preview_always_appends_ellipsis(self):
        assert preview("a" * 200) == "a" * 200 + "..."
        assert preview("b" * 800) == "b" * 500 + "..."

    def test_release_block(self):
        text = format_press_releases("AAPL", [{
            "title": "Apple reports Q4 results",
            "date": "2024-10-31",
            "url": "https://example.com/pr",
            "text": "x" * 200,
        }])
        assert text == (
            "Earnings Press Releases for AAPL\n\n"
            "Title: Apple reports Q4 results\n"
            "Date: 10/31/2024\n"
            "URL: https://example.com/pr\n"
            "\nText (first 500 chars):\n"
            + "x" * 200 + "...\n"
            "\n---\n\n"
        )

    def test_missing_text_raises(self):
        with pytest.raises(PayloadError, match="'text'"):
            format_press_releases("AAPL", [{"title": "t", "date": "2024-10-31"}])

    def test_missing_url_renders_not_available(self):
        text = format_press_releases("AAPL", [{"title": "t", "date": "2024-10-31", "text": "x"}])
        assert "URL: N/A\n" in text


# ---------------------------------------------------------------------------
# get_financial_metrics
# ---------------------------------------------------------------------------

class TestFinancialMetrics:
    def test_sections(self):
        text = format_financial_metrics("AAPL", {
            "market_cap": 3_500_000_000_000,
            "price_to_earnings_ratio": 37.456,
            "gross_margin": 0.4621,
            "return_on_equity": 1.6059,
            "asset_turnover": 1.07,
            "free_cash_flow_yield": 0.0321,
        })
        assert text.startswith("Financial Metrics for AAPL\n\nValuation Metrics:\n")
        assert "  Market Cap: $3500.00B\n" in text
        assert "  P/E Ratio: 37.46\n" in text
        assert "  PEG Ratio: N/A\n" in text
        assert "Profitability Metrics:\n  Gross Margin: 46.21%\n" in text
        assert "  ROE: 160.59%\n" in text
        assert "  Net Margin: N/A\n" in text
        assert "Efficiency Metrics:\n  Asset Turnover: 1.07\n" in text
        assert text.endswith("  FCF Yield: 3.21%\n")


# ---------------------------------------------------------------------------
# get_institutional_ownership
# ---------------------------------------------------------------------------

class TestInstitutionalOwnership:
    def test_totals_footer(self, sample_owners):
        text = format_institutional_ownership("AAPL", sample_owners)
        assert text.endswith(
            "---\n"
            "Total Institutional Shares: 600\n"
            "Total Institutional Value: $0.01B\n"
        )

    def test_owner_block(self, sample_owners):
        text = format_institutional_ownership("AAPL", sample_owners[:1])
        assert text.startswith(
            "Institutional Ownership for AAPL\n\n"
            "VANGUARD GROUP INC\n"
            "  Shares: 100\n"
            "  Value: $1.00M\n"
            "  Avg Price: $10\n"
            "  Report Date: 9/30/2024\n\n"
        )

    def test_large_share_counts_are_grouped(self):
        text = format_institutional_ownership("AAPL", [
            {"investor": "A", "shares": 1_300_000_000, "market_value": 300_000_000_000,
             "price": 230.5, "report_period": "2024-09-30"},
        ])
        assert "  Shares: 1,300,000,000\n" in text
        assert "Total Institutional Shares: 1,300,000,000\n" in text
        assert "Total Institutional Value: $300.00B\n" in text

    def test_missing_shares_raises(self):
        with pytest.raises(PayloadError):
            format_institutional_ownership("AAPL", [{"investor": "A", "market_value": 1}])
