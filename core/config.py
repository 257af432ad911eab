# =============================================================================
# core/config.py - Process Configuration
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Loads the Financial Datasets API key from the environment (a .env file
#   is honoured via python-dotenv).  This is the ONLY startup-time check:
#   the server refuses to start without a key.
#
#   load_settings() returns Ok(Settings) or Err(message) rather than
#   exiting.  The entry point (tools/mcp_server.py) decides to exit.
# =============================================================================

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from core.models import Err, Ok, Result

API_KEY_ENV = "FINANCIAL_DATASETS_API_KEY"


@dataclass(frozen=True)
class Settings:
    """Read-only process settings."""

    api_key: str

    def __repr__(self) -> str:
        # Never print the key itself in logs or tracebacks.
        return f"Settings(api_key='***{self.api_key[-4:]}')"


def load_settings(use_dotenv: bool = True) -> Result[Settings]:
    """Read settings from the environment.

    Args:
        use_dotenv: Load a ``.env`` file from the working directory first.
                    Existing environment variables are never overridden.

    Returns:
        ``Ok(Settings)`` when the API key is set, otherwise ``Err`` with a
        diagnostic suitable for printing before exiting.
    """
    if use_dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    api_key = os.environ.get(API_KEY_ENV, "").strip()
    if not api_key:
        return Err(f"{API_KEY_ENV} environment variable is required")
    return Ok(Settings(api_key=api_key))
