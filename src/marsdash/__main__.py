"""Command line entry point.

Usage
-----
Serve the proxy (reads ``API_DOMAIN`` and ``API_KEY``)::

    python -m marsdash serve --port 3000

Render the dashboard once against a running proxy and write it to a file::

    export API_SERVER="http://localhost:3000/api"
    python -m marsdash snapshot --rover Curiosity --dark -o dashboard.html
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from marsdash.client import RoverClient
from marsdash.config import DashConfig
from marsdash.coordinator import UpdateCoordinator
from marsdash.exceptions import DashConfigError
from marsdash.proxy import run_proxy
from marsdash.render.target import FileTarget
from marsdash.state.store import initial_state

_logger = logging.getLogger("marsdash")


async def snapshot(config: DashConfig, output: Path, *, rover: str | None, dark: bool) -> int:
    target = FileTarget(output)
    async with RoverClient(config) as client, UpdateCoordinator(
        target, client, state=initial_state(config.user_name)
    ) as coordinator:
        await coordinator.start()
        if dark:
            coordinator.toggle_theme()
        if rover:
            if coordinator.select_rover(rover) is None:
                _logger.error("Rover %r is not in the rover list", rover)
                return 1
            await coordinator.wait_idle()
        if coordinator.state.get("error"):
            _logger.warning("%s", coordinator.state["error"])
    print(f"Dashboard written to {target.path}", file=sys.stderr)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="marsdash", description="Mars rover dashboard tools.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the API proxy and static file server")
    serve.add_argument("--host", help="Bind address (default: MARSDASH_HOST or 0.0.0.0)")
    serve.add_argument("--port", type=int, help="Port (default: MARSDASH_PORT or 3000)")
    serve.add_argument("--static-dir", type=Path, help="Directory of static assets")
    serve.add_argument("--dist-dir", type=Path, help="Directory holding the bundled index.html")

    snap = sub.add_parser("snapshot", help="Render the dashboard once and write it to an HTML file")
    snap.add_argument("--rover", help="Select this rover and include its gallery")
    snap.add_argument("--dark", action="store_true", help="Render in dark mode")
    snap.add_argument("--output", "-o", type=Path, default=Path("dashboard.html"), help="Output file")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    try:
        if args.command == "serve":
            overrides = {
                name: value
                for name, value in (
                    ("host", args.host),
                    ("port", args.port),
                    ("static_dir", args.static_dir),
                    ("dist_dir", args.dist_dir),
                )
                if value is not None
            }
            run_proxy(DashConfig.from_env(**overrides))
            return 0
        return asyncio.run(snapshot(DashConfig.from_env(), args.output, rover=args.rover, dark=args.dark))
    except DashConfigError as exc:
        _logger.error("Configuration error: %s", exc)
        return 2


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
