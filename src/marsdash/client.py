"""High-level async client for the rover data gateway."""

from __future__ import annotations

from typing import Any, Protocol

import aiohttp

from marsdash._api import rovers as _rovers_api
from marsdash._transport import JsonTransport
from marsdash.config import DashConfig
from marsdash.exceptions import MarsDashError
from marsdash.models.photo import Gallery
from marsdash.models.rover import Rover


class DataGateway(Protocol):
    """The two fetch operations the dashboard consumes."""

    async def list_rovers(self) -> list[Rover]:
        ...

    async def list_photos(self, rover_name: str, max_date: str) -> Gallery:
        ...


class RoverClient:
    """Async client for the dashboard proxy.

    Usage::

        async with RoverClient(config) as client:
            rovers = await client.list_rovers()
            gallery = await client.list_photos("Curiosity", rovers[0].max_date)
    """

    def __init__(
        self,
        config: DashConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: JsonTransport | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RoverClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = JsonTransport(
            self._config.api_server,
            self._http_session,
            timeout=self._config.request_timeout,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> JsonTransport:
        if self._transport is None:
            raise MarsDashError("Client not initialized. Use 'async with RoverClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Gateway operations
    # ------------------------------------------------------------------

    async def list_rovers(self) -> list[Rover]:
        """Fetch the rover list."""
        return await _rovers_api.fetch_rover_list(self._require_transport())

    async def list_photos(self, rover_name: str, max_date: str) -> Gallery:
        """Fetch photos for *rover_name* taken on *max_date*."""
        return await _rovers_api.fetch_rover_photos(self._require_transport(), rover_name, max_date)
