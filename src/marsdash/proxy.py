"""Pass-through proxy in front of the upstream rover API.

The proxy keeps the API key on the server: the dashboard calls
``/rovers`` (or the ``/api`` mount) and the proxy forwards to the
upstream API with ``api_key`` appended. Upstream JSON is returned as
received; any failure answers 500. Everything else is static file serving
with a catch-all that returns the bundled ``index.html``.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from pathlib import Path

import aiohttp
from aiohttp import web

from marsdash._constants import PROXY_ERROR_BODY
from marsdash._redact import redact_params
from marsdash._transport import JsonTransport, path_segment
from marsdash.config import DashConfig
from marsdash.exceptions import GatewayError

_logger = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("config", DashConfig)
UPSTREAM_KEY = web.AppKey("upstream", JsonTransport)


async def _upstream_ctx(app: web.Application) -> AsyncIterator[None]:
    config = app[CONFIG_KEY]
    async with aiohttp.ClientSession() as session:
        app[UPSTREAM_KEY] = JsonTransport(config.api_domain, session, timeout=config.request_timeout)
        yield


def _internal_error() -> web.Response:
    return web.Response(status=500, text=PROXY_ERROR_BODY)


async def handle_rover_list(request: web.Request) -> web.Response:
    """``GET /rovers`` -> upstream ``/rovers?api_key=...``."""
    config = request.app[CONFIG_KEY]
    upstream = request.app[UPSTREAM_KEY]
    params = {"api_key": config.api_key or ""}
    try:
        data = await upstream.get_json("/rovers", params)
    except GatewayError as exc:
        _logger.error("An error occurred while retrieving rover data: %s (params=%s)", exc, redact_params(params))
        return _internal_error()
    return web.json_response(data)


async def handle_rover_photos(request: web.Request) -> web.Response:
    """``GET /rovers/{name}?max_date=...`` -> upstream ``/rovers/{name}/photos?earth_date=...``."""
    config = request.app[CONFIG_KEY]
    upstream = request.app[UPSTREAM_KEY]
    name = request.match_info["name"]
    earth_date = request.query.get("max_date")
    if not earth_date:
        return web.Response(status=400, text="max_date is required")
    try:
        segment = path_segment(name)
    except ValueError:
        return web.Response(status=400, text="invalid rover name")
    params = {"earth_date": earth_date, "api_key": config.api_key or ""}
    try:
        data = await upstream.get_json(f"/rovers/{segment}/photos", params)
    except GatewayError as exc:
        _logger.error(
            "An error occurred while retrieving images from the rover %s: %s (params=%s)",
            name,
            exc,
            redact_params(params),
        )
        return _internal_error()
    return web.json_response(data)


def _resolve_under(root: Path | None, tail: str) -> Path | None:
    if root is None or not tail:
        return None
    base = root.resolve()
    candidate = (base / tail).resolve()
    if not candidate.is_relative_to(base) or not candidate.is_file():
        return None
    return candidate


async def handle_static(request: web.Request) -> web.StreamResponse:
    """Serve a static asset, falling back to the bundled ``index.html``."""
    config = request.app[CONFIG_KEY]
    tail = request.match_info.get("tail", "")
    for root in (config.static_dir, config.dist_dir):
        found = _resolve_under(root, tail)
        if found is not None:
            return web.FileResponse(found)
    index = _resolve_under(config.dist_dir, "index.html")
    if index is None:
        raise web.HTTPNotFound()
    return web.FileResponse(index)


def create_app(config: DashConfig) -> web.Application:
    """Build the proxy application.

    API routes are served both at the top level (``/rovers``) and under
    ``/api`` where the rover list sits at ``/api/`` so that
    ``API_SERVER=http://host:port/api`` works with the dashboard client.
    """
    app = web.Application()
    app[CONFIG_KEY] = config
    app.cleanup_ctx.append(_upstream_ctx)

    app.router.add_get("/rovers", handle_rover_list)
    app.router.add_get("/rovers/{name}", handle_rover_photos)
    app.router.add_get("/api/", handle_rover_list)
    app.router.add_get("/api/rovers/{name}", handle_rover_photos)
    app.router.add_get("/{tail:.*}", handle_static)
    return app


def run_proxy(config: DashConfig) -> None:
    """Serve the proxy until interrupted."""
    config.require_upstream()
    _logger.info("Proxy listening on %s:%d, upstream %s", config.host, config.port, config.api_domain)
    web.run_app(create_app(config), host=config.host, port=config.port, print=None)
