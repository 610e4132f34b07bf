"""Deterministic in-memory state store.

This is the only component allowed to merge patches into the application
state. Snapshots are read-only mappings; nested mappings are read-only too
and sequences are stored as tuples, so a snapshot handed to the renderer
can never change underneath it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from marsdash._constants import DEFAULT_USER_NAME

_logger = logging.getLogger(__name__)

ApplicationState = Mapping[str, Any]
"""A read-only snapshot of the whole dashboard state."""


def freeze(value: Any) -> Any:
    """Return a read-only deep copy of plain containers in *value*.

    Mappings become ``MappingProxyType`` views over fresh dicts, lists and
    tuples become tuples. Anything else (scalars, frozen models) is kept as is.
    """
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def merge(current: ApplicationState, patch: Any) -> ApplicationState:
    """Deep structural merge of *patch* into *current*.

    For every key in *patch*: when both sides are mappings the values are
    merged recursively, otherwise the patch value overwrites. Keys absent
    from *patch* are preserved. *current* is never mutated. A patch that is
    not a mapping is a no-op, as is any non-string key inside it.
    """
    if not isinstance(patch, Mapping):
        return freeze(current)

    result: dict[str, Any] = dict(current)
    for key, value in patch.items():
        if not isinstance(key, str):
            continue
        existing = result.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            result[key] = merge(existing, value)
        else:
            result[key] = freeze(value)
    return MappingProxyType({key: freeze(value) for key, value in result.items()})


def initial_state(user_name: str | None = DEFAULT_USER_NAME) -> ApplicationState:
    """State created once at page load: no rovers, no selection, light theme."""
    return freeze(
        {
            "user": {"name": user_name},
            "selectedRover": False,
            "selectedRoverGallery": False,
            "isDarkMode": False,
            "error": None,
        }
    )


class StateStore:
    """Holds the current snapshot and replaces it on every patch."""

    def __init__(self, state: ApplicationState | None = None) -> None:
        self._snapshot: ApplicationState = freeze(state) if state is not None else initial_state()

    @property
    def snapshot(self) -> ApplicationState:
        return self._snapshot

    def apply(self, patch: Mapping[str, Any]) -> ApplicationState:
        """Merge *patch* into the current snapshot and return the new snapshot."""
        self._snapshot = merge(self._snapshot, patch)
        if _logger.isEnabledFor(logging.DEBUG):
            keys = sorted(str(k) for k in patch) if isinstance(patch, Mapping) else []
            _logger.debug("Applied patch keys=%s", keys)
        return self._snapshot
