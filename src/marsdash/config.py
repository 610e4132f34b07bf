"""Dashboard and proxy configuration for marsdash."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from marsdash._constants import DEFAULT_API_DOMAIN, DEFAULT_API_SERVER, DEFAULT_PORT, DEFAULT_USER_NAME
from marsdash.exceptions import DashConfigError

_ENV_CONFIG_MAP: dict[str, str] = {
    "API_SERVER": "api_server",
    "API_DOMAIN": "api_domain",
    "API_KEY": "api_key",
    "MARSDASH_HOST": "host",
    "MARSDASH_USER_NAME": "user_name",
}


@dataclasses.dataclass(frozen=True)
class DashConfig:
    """Client and proxy configuration.

    Parameters
    ----------
    api_server : str
        Base URL the dashboard uses to reach the proxy (``API_SERVER``).
    api_domain : str
        Upstream rover API base URL the proxy forwards to (``API_DOMAIN``).
    api_key : str or None
        Upstream API key, only ever used server side (``API_KEY``).
    host : str
        Interface the proxy binds to.
    port : int
        Port the proxy listens on. Defaults to 3000.
    static_dir : Path or None
        Directory of static assets served at ``/``.
    dist_dir : Path or None
        Directory holding the bundled ``index.html`` returned by the
        catch-all route.
    request_timeout : float
        Total timeout in seconds for a single outbound HTTP request.
    user_name : str
        Name shown in the dashboard greeting.
    """

    api_server: str = DEFAULT_API_SERVER
    api_domain: str = DEFAULT_API_DOMAIN
    api_key: str | None = None
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    static_dir: Path | None = None
    dist_dir: Path | None = None
    request_timeout: float = 30.0
    user_name: str = DEFAULT_USER_NAME

    def require_upstream(self) -> None:
        """Raise :class:`DashConfigError` unless the proxy can reach upstream."""
        if not self.api_domain:
            raise DashConfigError("API_DOMAIN is not set")
        if not self.api_key:
            raise DashConfigError("API_KEY is not set")

    @classmethod
    def from_env(cls, **overrides: Any) -> DashConfig:
        """Create configuration from environment variables.

        Reads ``API_SERVER``, ``API_DOMAIN``, ``API_KEY`` and the optional
        ``MARSDASH_*`` variables. Explicit keyword arguments override
        environment values.
        """
        env = os.environ

        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        port_env = env.get("MARSDASH_PORT")
        if port_env is not None and "port" not in overrides:
            try:
                config_kwargs["port"] = int(port_env)
            except ValueError as exc:
                raise DashConfigError(f"MARSDASH_PORT must be an integer, got {port_env!r}") from exc

        timeout_env = env.get("MARSDASH_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise DashConfigError(
                    f"MARSDASH_REQUEST_TIMEOUT must be a number, got {timeout_env!r}"
                ) from exc

        for env_key, field_name in (("MARSDASH_STATIC_DIR", "static_dir"), ("MARSDASH_DIST_DIR", "dist_dir")):
            val = env.get(env_key)
            if val:
                config_kwargs[field_name] = Path(val)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
