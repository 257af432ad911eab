# =============================================================================
# core/__init__.py
# =============================================================================
# Everything the server does lives in this package: the tool catalog, the
# HTTP client for the Financial Datasets API, argument validation, and the
# response formatting.
#
# Nothing in this package imports FastMCP or Google ADK.  The only
# third-party imports are requests and python-dotenv, so every module here
# can be exercised in a plain test run with the network mocked out.
# =============================================================================
