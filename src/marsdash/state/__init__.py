"""State/store layer.

This package is the single source of truth for how patches coming from
user actions and gateway responses are merged into the immutable
application state snapshot.
"""

from marsdash.state.policy import SelectionToken, SelectionTracker
from marsdash.state.store import ApplicationState, StateStore, freeze, initial_state, merge

__all__ = [
    "ApplicationState",
    "SelectionToken",
    "SelectionTracker",
    "StateStore",
    "freeze",
    "initial_state",
    "merge",
]
