from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass, field
from typing import Any

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from marsdash.client import RoverClient
from marsdash.config import DashConfig
from marsdash.coordinator import ROVER_LIST_ERROR, UpdateCoordinator
from marsdash.exceptions import GatewayError, MalformedResponseError
from marsdash.models.photo import Gallery, Photo
from marsdash.models.rover import Rover
from marsdash.render.target import MemoryTarget
from marsdash.state.store import initial_state


@dataclass
class FakeGateway:
    rovers: list[Rover]
    galleries: dict[str, Gallery] = field(default_factory=dict)
    gated: set[str] = field(default_factory=set)
    failing: set[str] = field(default_factory=set)
    rover_list_error: Exception | None = None
    photo_calls: list[tuple[str, str]] = field(default_factory=list)
    _gates: dict[str, asyncio.Event] = field(default_factory=dict)

    def release(self, rover_name: str) -> None:
        self._gates.setdefault(rover_name, asyncio.Event()).set()

    async def list_rovers(self) -> list[Rover]:
        if self.rover_list_error is not None:
            raise self.rover_list_error
        return list(self.rovers)

    async def list_photos(self, rover_name: str, max_date: str) -> Gallery:
        self.photo_calls.append((rover_name, max_date))
        if rover_name in self.gated:
            await self._gates.setdefault(rover_name, asyncio.Event()).wait()
        if rover_name in self.failing:
            raise GatewayError(f"HTTP 500 from /rovers/{rover_name}", status_code=500, endpoint=f"/rovers/{rover_name}")
        return self.galleries.get(rover_name, Gallery())


def _gallery(rover_name: str, count: int = 1) -> Gallery:
    return Gallery(
        photos=tuple(
            Photo(
                img_src=f"https://mars.example/{rover_name}/{i}.jpg",
                earth_date="2024-02-19",
                rover={"name": rover_name},
                camera={"full_name": "Mast Camera"},
            )
            for i in range(count)
        )
    )


@pytest.fixture
def gateway(rover_payloads: list[dict[str, Any]]) -> FakeGateway:
    return FakeGateway(
        rovers=[Rover.model_validate(p) for p in rover_payloads],
        galleries={"Curiosity": _gallery("Curiosity", 2), "Spirit": _gallery("Spirit", 3)},
    )


@pytest.mark.asyncio
async def test_start_renders_placeholder_then_rovers(gateway: FakeGateway) -> None:
    target = MemoryTarget()
    coordinator = UpdateCoordinator(target, gateway)

    state = await coordinator.start()

    assert target.render_count == 2
    assert [r.name for r in state["rovers"]] == ["Curiosity", "Spirit"]
    assert "View Latest Images" in target.markup


@pytest.mark.asyncio
async def test_rover_list_failure_keeps_placeholder_and_shows_error(gateway: FakeGateway) -> None:
    gateway.rover_list_error = MalformedResponseError("/ response has no 'rovers' list", endpoint="/")
    target = MemoryTarget()
    coordinator = UpdateCoordinator(target, gateway)

    state = await coordinator.start()

    assert "rovers" not in state
    assert state["error"] == ROVER_LIST_ERROR
    assert "spinner-border text-primary" in target.markup
    assert ROVER_LIST_ERROR.split(".")[0] in target.markup


def test_update_merges_renders_and_calls_back(gateway: FakeGateway) -> None:
    target = MemoryTarget()
    coordinator = UpdateCoordinator(target, gateway)
    seen: list[Any] = []

    new_state = coordinator.update({"isDarkMode": True}, seen.append)

    assert seen == [new_state]
    assert coordinator.state is new_state
    assert target.render_count == 1
    assert "dark-mode" in target.markup


@pytest.mark.asyncio
async def test_update_awaits_async_callback(gateway: FakeGateway) -> None:
    coordinator = UpdateCoordinator(MemoryTarget(), gateway)
    seen: list[Any] = []

    async def on_complete(state: Any) -> None:
        seen.append(state["isDarkMode"])

    coordinator.update({"isDarkMode": True}, on_complete)
    await coordinator.wait_idle()

    assert seen == [True]


def test_toggle_theme_from_initial_state(gateway: FakeGateway) -> None:
    target = MemoryTarget()
    coordinator = UpdateCoordinator(target, gateway, state=initial_state())

    coordinator.toggle_theme()

    assert coordinator.state["isDarkMode"] is True
    assert 'class="container py-5 dark-mode"' in target.markup

    coordinator.toggle_theme()

    assert coordinator.state["isDarkMode"] is False
    assert "dark-mode" not in target.markup


@pytest.mark.asyncio
async def test_select_rover_goes_loading_then_loaded(gateway: FakeGateway) -> None:
    target = MemoryTarget()
    coordinator = UpdateCoordinator(target, gateway)
    await coordinator.start()

    task = coordinator.select_rover("Curiosity")

    assert task is not None
    selected = coordinator.state["selectedRover"]
    assert selected["name"] == "Curiosity"
    assert selected["loading"] is True
    assert coordinator.state["selectedRoverGallery"] is False
    assert "Loading..." in target.markup

    await task

    assert gateway.photo_calls == [("Curiosity", "2024-02-19")]
    assert coordinator.state["selectedRover"]["loading"] is False
    assert coordinator.state["selectedRover"]["name"] == "Curiosity"
    assert coordinator.state["selectedRoverGallery"] == gateway.galleries["Curiosity"]
    assert target.markup.count("card border-secondary") == 2
    assert "spinner-border-sm" not in target.markup


@pytest.mark.asyncio
async def test_late_response_for_previous_selection_is_discarded(gateway: FakeGateway) -> None:
    gateway.gated.add("Spirit")
    target = MemoryTarget()
    coordinator = UpdateCoordinator(target, gateway)
    await coordinator.start()

    coordinator.select_rover("Spirit")
    await asyncio.sleep(0)
    task_b = coordinator.select_rover("Curiosity")
    assert task_b is not None
    await task_b

    gateway.release("Spirit")
    await coordinator.wait_idle()

    assert coordinator.state["selectedRover"]["name"] == "Curiosity"
    assert coordinator.state["selectedRoverGallery"] == gateway.galleries["Curiosity"]
    assert "Spirit/0.jpg" not in target.markup


@pytest.mark.asyncio
async def test_stale_token_is_ignored_even_without_cancellation(gateway: FakeGateway) -> None:
    target = MemoryTarget()
    coordinator = UpdateCoordinator(target, gateway)
    await coordinator.start()

    task_a = coordinator.select_rover("Spirit")
    stale = coordinator._selection.current  # noqa: SLF001
    assert task_a is not None and stale is not None
    task_a.cancel()
    task_b = coordinator.select_rover("Curiosity")
    assert task_b is not None
    await task_b

    # A response for the superseded selection that slipped past cancellation.
    await coordinator._load_photos(stale, "2010-03-21")  # noqa: SLF001

    assert coordinator.state["selectedRover"]["name"] == "Curiosity"
    assert coordinator.state["selectedRoverGallery"] == gateway.galleries["Curiosity"]


@pytest.mark.asyncio
async def test_photo_failure_clears_loading_and_shows_error(gateway: FakeGateway) -> None:
    gateway.failing.add("Spirit")
    target = MemoryTarget()
    coordinator = UpdateCoordinator(target, gateway)
    await coordinator.start()

    task = coordinator.select_rover("Spirit")
    assert task is not None
    await task

    assert coordinator.state["selectedRover"]["loading"] is False
    assert coordinator.state["selectedRoverGallery"] is False
    assert "Could not load images for Spirit" in target.markup
    assert "spinner-border-sm" not in target.markup


@pytest.mark.asyncio
async def test_new_selection_clears_previous_error(gateway: FakeGateway) -> None:
    gateway.failing.add("Spirit")
    coordinator = UpdateCoordinator(MemoryTarget(), gateway)
    await coordinator.start()

    await coordinator.select_rover("Spirit")  # type: ignore[misc]
    await coordinator.select_rover("Curiosity")  # type: ignore[misc]

    assert coordinator.state["error"] is None


@pytest.mark.asyncio
async def test_unknown_rover_is_ignored(gateway: FakeGateway) -> None:
    coordinator = UpdateCoordinator(MemoryTarget(), gateway)
    await coordinator.start()

    assert coordinator.select_rover("Sojourner") is None
    assert gateway.photo_calls == []
    assert coordinator.state["selectedRover"] is False


@pytest.mark.asyncio
async def test_dispatch_table_uses_live_state(gateway: FakeGateway) -> None:
    target = MemoryTarget()
    coordinator = UpdateCoordinator(target, gateway)
    await coordinator.start()
    target.scroll_top = 640

    coordinator.dispatch("toggle-theme")
    coordinator.dispatch("toggle-theme")
    coordinator.dispatch("toggle-theme")
    coordinator.dispatch("scroll-to-top")
    task = coordinator.dispatch("select-rover", "Spirit")
    assert task is not None
    await task

    assert coordinator.state["isDarkMode"] is True
    assert target.scroll_top == 0
    assert gateway.photo_calls == [("Spirit", "2010-03-21")]
    assert coordinator.dispatch("launch-rocket") is None
    assert coordinator.dispatch("select-rover") is None


@pytest.mark.asyncio
async def test_dispatch_ref_from_rendered_markup(gateway: FakeGateway) -> None:
    target = MemoryTarget()
    coordinator = UpdateCoordinator(target, gateway)
    await coordinator.start()

    match = re.search(r'data-ref="([^"]*)" data-key="Spirit"', target.markup)
    assert match is not None

    task = coordinator.dispatch_ref(match.group(1))
    assert task is not None
    await task

    assert coordinator.state["selectedRover"]["name"] == "Spirit"
    assert target.markup.count("card border-secondary") == 3


@pytest.mark.asyncio
async def test_aclose_cancels_in_flight_fetches(gateway: FakeGateway) -> None:
    gateway.gated.add("Spirit")
    coordinator = UpdateCoordinator(MemoryTarget(), gateway)
    await coordinator.start()

    task = coordinator.select_rover("Spirit")
    assert task is not None
    await asyncio.sleep(0)
    await coordinator.aclose()

    assert task.cancelled()
    assert coordinator.state["selectedRover"]["loading"] is True


@pytest.mark.asyncio
async def test_undecodable_photo_body_clears_loading(rover_payloads: list[dict[str, Any]]) -> None:
    async def rovers(_request: web.Request) -> web.Response:
        return web.json_response({"rovers": rover_payloads})

    async def photos(_request: web.Request) -> web.Response:
        return web.Response(body=b'{"photos": ["\xff\xfe"]}', content_type="application/json")

    app = web.Application()
    app.router.add_get("/", rovers)
    app.router.add_get("/rovers/{name}", photos)

    target = MemoryTarget()
    async with TestServer(app) as server:
        async with RoverClient(DashConfig(api_server=str(server.make_url("/")))) as client:
            async with UpdateCoordinator(target, client) as coordinator:
                await coordinator.start()
                task = coordinator.select_rover("Curiosity")
                await coordinator.wait_idle()

    assert task is not None and task.exception() is None
    assert coordinator.state["selectedRover"]["loading"] is False
    assert coordinator.state["error"] == "Could not load images for Curiosity. Please try again."
    assert 'aria-busy="true"' not in target.markup
