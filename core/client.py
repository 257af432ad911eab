# =============================================================================
# core/client.py - Financial Datasets HTTP Client
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Issues exactly one HTTP request per call against the Financial Datasets
#   REST API and returns the parsed JSON body.
#
#   Authentication is attached one of two ways, chosen per endpoint:
#     - AuthMode.QUERY   → ?api_key=<key>          (most endpoints)
#     - AuthMode.HEADER  → X-API-KEY: <key>        (earnings, search)
#
#   Any non-2xx response raises ApiError carrying the status code and the
#   raw body text.  There are no retries, no caching and no timeout beyond
#   whatever the transport does by default: every call hits the live API.
# =============================================================================

import logging
from typing import Any, Optional

import requests

from core.models import AuthMode

logger = logging.getLogger(__name__)

BASE_URL = "https://api.financialdatasets.ai"


class ApiError(Exception):
    """Raised when the upstream API answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"API Error: {status_code} - {body}")


def _query_value(value: Any) -> Any:
    # JSON numbers arrive as floats; 4.0 must go out as "4".
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


class FinancialDatasetsClient:
    """Thin client for https://api.financialdatasets.ai."""

    def __init__(
        self,
        api_key: str,
        base_url: str = BASE_URL,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()

    def request(
        self,
        endpoint: str,
        params: Optional[dict[str, Any]] = None,
        auth_mode: AuthMode = AuthMode.QUERY,
    ) -> Any:
        """GET ``endpoint`` and return the decoded JSON body.

        Args:
            endpoint: Path below the base URL, e.g. "/prices/snapshot".
            params: Query parameters; entries whose value is None are dropped.
            auth_mode: Where to put the API key.

        Raises:
            ApiError: On any non-2xx response.
            requests.RequestException: On network or JSON decoding failure.
        """
        query = {
            key: _query_value(value)
            for key, value in (params or {}).items()
            if value is not None
        }
        headers = {}
        if auth_mode is AuthMode.HEADER:
            headers["X-API-KEY"] = self.api_key
        else:
            query["api_key"] = self.api_key

        url = f"{self.base_url}{endpoint}"
        logger.debug("GET %s params=%s", url, sorted(k for k in query if k != "api_key"))
        response = self.session.get(url, params=query, headers=headers)
        return self._decode(response)

    def request_json(self, endpoint: str, body: dict[str, Any]) -> Any:
        """POST a JSON body with header authentication (used by search)."""
        url = f"{self.base_url}{endpoint}"
        headers = {
            "X-API-KEY": self.api_key,
            "Content-Type": "application/json",
        }
        logger.debug("POST %s keys=%s", url, sorted(body))
        response = self.session.post(url, json=body, headers=headers)
        return self._decode(response)

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if not 200 <= response.status_code < 300:
            raise ApiError(response.status_code, response.text)
        return response.json()
