"""Configuration defaults and .env loading.

WHY: Every API call needs an endpoint base URL, timeouts, and credentials.
Keeping them as plain module-level values makes them easy to find and
override without touching the client code.

HOW: python-dotenv loads the .env file on import. Defaults are read from
the environment once; the credential loaders are functions so a missing
key fails at client construction, not at import.

RULES:
- The API key is loaded from OPENAI_API_KEY, never hardcoded
- The organization id is optional (OPENAI_ORG_ID)
- All defaults can be overridden via environment variables
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the working directory
load_dotenv()

# ---------------------------------------------------------------------------
# API configuration defaults
# ---------------------------------------------------------------------------

OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_TIMEOUT_S = float(os.getenv("OPENAI_TIMEOUT_S", "600"))
OPENAI_CONNECT_TIMEOUT_S = 30.0


def load_api_key() -> str:
    """Load the OpenAI API key from the environment.

    WHY: The key is required for every request. Reading it from the
    environment (populated by python-dotenv) keeps it out of source code.

    RULES:
    - Raises ValueError if the key is missing or empty
    - Never returns a default/placeholder value
    """
    key = os.getenv("OPENAI_API_KEY", "").strip()
    if not key:
        raise ValueError(
            "OpenAI API key not configured. "
            "Set OPENAI_API_KEY in the environment or the .env file."
        )
    return key


def load_organization_id() -> str | None:
    """Return OPENAI_ORG_ID, or None when it is not set."""
    org_id = os.getenv("OPENAI_ORG_ID", "").strip()
    return org_id or None
