"""HTTP transport for JSON GET requests against the data gateway."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol
from urllib.parse import quote

import aiohttp

from marsdash._constants import USER_AGENT
from marsdash._redact import redact_params, redact_url
from marsdash.exceptions import GatewayError

_logger = logging.getLogger(__name__)


def path_segment(value: str) -> str:
    """Percent-encode *value* as a single URL path segment.

    Raises :class:`ValueError` for empty and dot segments, which would
    change the request path instead of naming a resource.
    """
    if value in ("", ".", ".."):
        raise ValueError(f"{value!r} cannot be used as a path segment")
    return quote(value, safe="")


def _preview(body: bytes) -> str:
    return body[:200].decode("utf-8", errors="replace")


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`JsonTransport`) concrete.
    """

    async def get_json(self, path: str, params: Mapping[str, str] | None = None) -> Any:
        ...


class JsonTransport:
    """GET requests against a base URL, decoding JSON bodies."""

    def __init__(
        self,
        base_url: str,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout) if timeout else None

    def url_for(self, path: str) -> str:
        return f"{self._base_url}{path}"

    async def get_json(self, path: str, params: Mapping[str, str] | None = None) -> Any:
        """GET ``base_url + path`` and return the decoded JSON body.

        Raises :class:`GatewayError` on connection failures, timeouts,
        non-200 answers and bodies that are not JSON in the declared charset.
        """
        url = self.url_for(path)
        headers = {"accept": "application/json", "user-agent": USER_AGENT}

        _logger.debug("GET %s params=%s", redact_url(url), redact_params(params))

        try:
            async with self._http.get(url, params=params, headers=headers, timeout=self._timeout) as resp:
                body = await resp.read()
                status = resp.status
                charset = resp.charset or "utf-8"
        except TimeoutError as exc:
            raise GatewayError(f"Request to {path} timed out", endpoint=path) from exc
        except aiohttp.ClientError as exc:
            raise GatewayError(f"Request to {path} failed: {exc}", endpoint=path) from exc

        if status != 200:
            raise GatewayError(
                f"HTTP {status} from {path}: {_preview(body)}",
                status_code=status,
                endpoint=path,
            )

        try:
            return json.loads(body.decode(charset))
        except (UnicodeDecodeError, LookupError) as exc:
            raise GatewayError(f"Undecodable {charset} body from {path}: {_preview(body)}", endpoint=path) from exc
        except json.JSONDecodeError as exc:
            raise GatewayError(f"Invalid JSON from {path}: {_preview(body)}", endpoint=path) from exc
