"""Selection policy for photo fetches.

Photo requests for a rover may resolve after the user has already picked
another rover. Each selection gets a token; a response is only applied
while its token is still the latest one issued and the state still
points at the same rover.
"""

from __future__ import annotations

import itertools
from collections.abc import Mapping
from dataclasses import dataclass

from marsdash.state.store import ApplicationState


@dataclass(frozen=True, slots=True)
class SelectionToken:
    """Identity of one rover selection."""

    serial: int
    rover_name: str


class SelectionTracker:
    """Issues selection tokens and answers whether one is still current."""

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._current: SelectionToken | None = None

    @property
    def current(self) -> SelectionToken | None:
        return self._current

    def issue(self, rover_name: str) -> SelectionToken:
        token = SelectionToken(serial=next(self._counter), rover_name=rover_name)
        self._current = token
        return token

    def is_current(self, token: SelectionToken, state: ApplicationState) -> bool:
        """Return ``True`` when *token* still owns the selection in *state*."""
        if self._current != token:
            return False
        return selected_rover_name(state) == token.rover_name


def selected_rover_name(state: ApplicationState) -> str | None:
    selected = state.get("selectedRover")
    if isinstance(selected, Mapping):
        name = selected.get("name")
        return name if isinstance(name, str) else None
    return None
