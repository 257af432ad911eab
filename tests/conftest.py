"""Shared fixtures for the test suite."""

from unittest.mock import MagicMock

import pytest

from core.client import FinancialDatasetsClient
from core.dispatcher import ToolDispatcher


def make_response(status_code=200, json_data=None, text=""):
    """Mock of a requests.Response."""
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_data if json_data is not None else {}
    resp.text = text
    return resp


@pytest.fixture
def mock_response():
    """Factory for mock HTTP responses."""
    return make_response


@pytest.fixture
def session():
    """A mocked requests.Session; set .get/.post return values per test."""
    return MagicMock()


@pytest.fixture
def client(session):
    return FinancialDatasetsClient(api_key="test-key", session=session)


@pytest.fixture
def dispatcher(client):
    return ToolDispatcher(client)


@pytest.fixture
def sample_price_snapshot():
    return {
        "ticker": "AAPL",
        "price": 150.25,
        "day_change": -1.5,
        "day_change_percent": -0.99,
        "volume": 52_000_000,
        "market_cap": 2_300_000_000_000,
        "time": "2025-01-15T15:04:05Z",
    }


@pytest.fixture
def sample_income_statement():
    """Factory fixture; call with overrides to get an income statement row."""
    def _make(**overrides):
        row = {
            "ticker": "AAPL",
            "report_period": "2024-09-28",
            "fiscal_period": "2024-Q4",
            "period": "quarterly",
            "currency": "USD",
            "revenue": 94_930_000_000,
            "gross_profit": 43_879_000_000,
            "operating_income": 29_591_000_000,
            "net_income": 14_736_000_000,
            "earnings_per_share": 0.97,
        }
        row.update(overrides)
        return row
    return _make


@pytest.fixture
def sample_owners():
    return [
        {"investor": "VANGUARD_GROUP_INC", "shares": 100, "market_value": 1_000_000,
         "price": 10.0, "report_period": "2024-09-30"},
        {"investor": "BLACKROCK_INC", "shares": 200, "market_value": 2_000_000,
         "price": 10.0, "report_period": "2024-09-30"},
        {"investor": "STATE_STREET_CORP", "shares": 300, "market_value": 3_000_000,
         "price": 10.0, "report_period": "2024-09-30"},
    ]
