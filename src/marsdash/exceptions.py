"""Custom exception hierarchy for marsdash."""

from __future__ import annotations


class MarsDashError(Exception):
    """Base exception for all marsdash errors."""


class DashConfigError(MarsDashError):
    """Invalid or missing configuration."""


class GatewayError(MarsDashError):
    """HTTP-level failure talking to the data gateway (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class MalformedResponseError(MarsDashError):
    """Gateway answered with JSON that is missing expected fields."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)
