"""Update coordinator: the single path through which state changes flow.

Every transition goes through :meth:`UpdateCoordinator.update`, which
merges a patch into the store, renders the new snapshot into the root
target and then runs the optional completion callback. Merge and render
happen without yielding to the event loop, so a render always sees one
fully formed snapshot.

Rover selection is a small state machine (idle -> loading -> loaded).
Each selection issues a :class:`SelectionToken`; a photo response is only
applied while its token is still current, and starting a new selection
cancels the previous in-flight fetch.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Mapping
from typing import Any

from marsdash.client import DataGateway
from marsdash.exceptions import GatewayError, MalformedResponseError
from marsdash.models.rover import Rover
from marsdash.render.inline import ActionRef, decode_inline
from marsdash.render.markup import SCROLL_TO_TOP, SELECT_ROVER, TOGGLE_THEME, render
from marsdash.render.target import RenderTarget
from marsdash.state.policy import SelectionToken, SelectionTracker
from marsdash.state.store import ApplicationState, StateStore, initial_state

_logger = logging.getLogger(__name__)

ROVER_LIST_ERROR = "Could not load the rover list. Please try again later."


def _photos_error(rover_name: str) -> str:
    return f"Could not load images for {rover_name}. Please try again."


class UpdateCoordinator:
    """Owns the state store and drives rendering into an explicit root target.

    Usage::

        async with RoverClient(config) as client:
            coordinator = UpdateCoordinator(MemoryTarget(), client)
            await coordinator.start()
            coordinator.dispatch("select-rover", "Curiosity")
            await coordinator.wait_idle()
    """

    def __init__(
        self,
        root: RenderTarget,
        gateway: DataGateway,
        *,
        state: ApplicationState | None = None,
    ) -> None:
        self._root = root
        self._gateway = gateway
        self._store = StateStore(state if state is not None else initial_state())
        self._selection = SelectionTracker()
        self._photo_task: asyncio.Task[None] | None = None
        self._tasks: set[asyncio.Future[Any]] = set()
        self._actions: dict[str, Callable[[str | None], asyncio.Task[None] | None]] = {
            TOGGLE_THEME: lambda _key: self.toggle_theme(),
            SELECT_ROVER: self._select_rover_action,
            SCROLL_TO_TOP: lambda _key: self.scroll_to_top(),
        }

    @property
    def state(self) -> ApplicationState:
        """The live snapshot."""
        return self._store.snapshot

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> UpdateCoordinator:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Core transition
    # ------------------------------------------------------------------

    def update(
        self,
        patch: Mapping[str, Any],
        on_complete: Callable[[ApplicationState], Any] | None = None,
    ) -> ApplicationState:
        """Merge *patch*, render the result, then call ``on_complete(new_state)``."""
        new_state = self._store.apply(patch)
        self._root.mount(render(new_state))
        if on_complete is not None:
            result = on_complete(new_state)
            if inspect.isawaitable(result):
                self._track(asyncio.ensure_future(result))
        return new_state

    async def start(self) -> ApplicationState:
        """Render the initial state, then load and render the rover list."""
        self._root.mount(render(self.state))
        try:
            rovers = await self._gateway.list_rovers()
        except (GatewayError, MalformedResponseError) as exc:
            _logger.error("Could not load rover list: %s", exc)
            # rovers stays absent, so the placeholder keeps showing.
            return self.update({"error": ROVER_LIST_ERROR})
        _logger.info("Loaded %d rovers", len(rovers))
        return self.update({"rovers": tuple(rovers), "error": None})

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def toggle_theme(self) -> None:
        """Flip ``isDarkMode`` on the live state."""
        self.update({"isDarkMode": not self.state.get("isDarkMode")})

    def scroll_to_top(self) -> None:
        self._root.scroll_to(0)

    def select_rover(self, rover_name: str) -> asyncio.Task[None] | None:
        """Mark *rover_name* loading and start fetching its photos.

        Returns the fetch task, or ``None`` when the rover is not in the
        current rover list. Must be called from a running event loop.
        """
        rover = self._find_rover(rover_name)
        if rover is None:
            _logger.warning("Ignoring selection of unknown rover %r", rover_name)
            return None

        if self._photo_task is not None and not self._photo_task.done():
            _logger.debug("Cancelling photo fetch for %s", self._selection.current)
            self._photo_task.cancel()

        token = self._selection.issue(rover.name)
        self.update(
            {
                "selectedRoverGallery": False,
                "selectedRover": rover.as_selection(loading=True),
                "error": None,
            }
        )

        task = asyncio.get_running_loop().create_task(
            self._load_photos(token, rover.max_date),
            name=f"marsdash-photos-{rover.name}-{token.serial}",
        )
        self._photo_task = task
        self._track(task)
        return task

    def dispatch(self, action: str, key: str | None = None) -> asyncio.Task[None] | None:
        """Run the handler registered for *action* against the live state."""
        handler = self._actions.get(action)
        if handler is None:
            _logger.warning("Ignoring unknown action %r", action)
            return None
        return handler(key)

    def dispatch_ref(self, ref: str) -> asyncio.Task[None] | None:
        """Dispatch the :class:`ActionRef` carried in a control's ``data-ref`` attribute."""
        action = decode_inline(ref, ActionRef)
        return self.dispatch(action.action, action.key)

    # ------------------------------------------------------------------
    # Background work
    # ------------------------------------------------------------------

    async def wait_idle(self) -> None:
        """Wait until no fetch or async callback is in flight."""
        while self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel in-flight fetches."""
        for task in list(self._tasks):
            task.cancel()
        await self.wait_idle()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _track(self, task: asyncio.Future[Any]) -> None:
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _select_rover_action(self, key: str | None) -> asyncio.Task[None] | None:
        if not key:
            _logger.warning("select-rover dispatched without a rover name")
            return None
        return self.select_rover(key)

    def _find_rover(self, rover_name: str) -> Rover | None:
        rovers = self.state.get("rovers")
        if not isinstance(rovers, tuple):
            return None
        for rover in rovers:
            if isinstance(rover, Rover) and rover.name == rover_name:
                return rover
        return None

    async def _load_photos(self, token: SelectionToken, max_date: str) -> None:
        try:
            gallery = await self._gateway.list_photos(token.rover_name, max_date)
        except (GatewayError, MalformedResponseError) as exc:
            if not self._selection.is_current(token, self.state):
                _logger.debug("Dropping stale failure for %s: %s", token.rover_name, exc)
                return
            _logger.warning("Photo fetch for %s failed: %s", token.rover_name, exc)
            self.update(
                {
                    "selectedRover": {"loading": False},
                    "error": _photos_error(token.rover_name),
                }
            )
            return

        if not self._selection.is_current(token, self.state):
            _logger.debug("Discarding stale photos for %s (selection #%d)", token.rover_name, token.serial)
            return

        self.update(
            {
                "selectedRoverGallery": gallery,
                "selectedRover": {"loading": False},
            }
        )
