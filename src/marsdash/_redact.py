"""Helpers for safe debug logging.

The proxy forwards requests carrying the upstream API key in the query
string. This module redacts such values before they reach the logs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from yarl import URL

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "api_key",
        "apikey",
        "key",
        "token",
        "authorization",
        "cookie",
    }
)


def redact_url(url: str | URL) -> str:
    """Return *url* as a string with sensitive query parameters masked."""
    parsed = URL(str(url))
    if not parsed.query:
        return str(parsed)
    query = [
        (name, "<redacted>" if name.lower() in _SENSITIVE_VALUE_KEYS else value)
        for name, value in parsed.query.items()
    ]
    return str(parsed.with_query(query))


def redact_params(params: Mapping[str, Any] | None) -> dict[str, str]:
    """Return query *params* as strings with sensitive values masked."""
    if not params:
        return {}
    return {
        str(name): "<redacted>" if str(name).lower() in _SENSITIVE_VALUE_KEYS else str(value)
        for name, value in params.items()
    }
