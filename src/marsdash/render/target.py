"""Render targets: the explicit root handle the coordinator renders into."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

_logger = logging.getLogger(__name__)

_DOCUMENT = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>Mars Rover Dashboard</title>
  <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css" />
</head>
<body>
  <div id="root">{markup}</div>
</body>
</html>
"""


class RenderTarget(Protocol):
    """Structural interface for the root element the dashboard is mounted in."""

    def mount(self, markup: str) -> None:
        ...

    def scroll_to(self, top: int) -> None:
        ...


class MemoryTarget:
    """Keeps the last mounted markup in memory."""

    def __init__(self) -> None:
        self.markup: str = ""
        self.render_count: int = 0
        self.scroll_top: int = 0

    def mount(self, markup: str) -> None:
        self.markup = markup
        self.render_count += 1

    def scroll_to(self, top: int) -> None:
        self.scroll_top = top


class FileTarget:
    """Writes every render as a standalone HTML document."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def mount(self, markup: str) -> None:
        self._path.write_text(_DOCUMENT.format(markup=markup), encoding="utf-8")
        _logger.debug("Wrote %d bytes to %s", len(markup), self._path)

    def scroll_to(self, top: int) -> None:
        # A static document always opens at the top.
        return None
