"""Rover endpoints: the rover list and per-rover photos.

Validates gateway JSON into :class:`Rover` and :class:`Photo` models. A
response missing its top-level collection is malformed; individual entries
that fail validation are dropped with a warning so one bad photo does not
hide a whole gallery.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from pydantic import ValidationError

from marsdash._constants import ROVER_LIST_PATH, ROVER_PHOTOS_PATH
from marsdash._transport import Transport, path_segment
from marsdash.exceptions import GatewayError, MalformedResponseError
from marsdash.models._base import DashBaseModel
from marsdash.models.photo import Gallery, Photo
from marsdash.models.rover import Rover

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=DashBaseModel)


def _require_list(payload: Any, key: str, endpoint: str) -> list[Any]:
    if not isinstance(payload, dict):
        raise MalformedResponseError(
            f"{endpoint} returned {type(payload).__name__}, expected an object",
            endpoint=endpoint,
        )
    items = payload.get(key)
    if not isinstance(items, list):
        raise MalformedResponseError(f"{endpoint} response has no '{key}' list", endpoint=endpoint)
    return items


def _parse_items(items: list[Any], model: type[M], endpoint: str) -> list[M]:
    parsed: list[M] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            _logger.warning("%s: skipping non-object entry #%d", endpoint, index)
            continue
        try:
            parsed.append(model.model_validate(item))
        except ValidationError as exc:
            _logger.warning("%s: skipping invalid %s #%d: %s", endpoint, model.__name__, index, exc.errors()[0]["msg"])
    return parsed


def parse_rover_list(payload: Any, *, endpoint: str = ROVER_LIST_PATH) -> list[Rover]:
    """Parse ``{"rovers": [...]}``."""
    return _parse_items(_require_list(payload, "rovers", endpoint), Rover, endpoint)


def parse_gallery(payload: Any, *, endpoint: str = ROVER_PHOTOS_PATH) -> Gallery:
    """Parse ``{"photos": [...]}``."""
    photos = _parse_items(_require_list(payload, "photos", endpoint), Photo, endpoint)
    return Gallery(photos=tuple(photos))


async def fetch_rover_list(transport: Transport) -> list[Rover]:
    """Fetch all rovers from the gateway."""
    payload = await transport.get_json(ROVER_LIST_PATH)
    rovers = parse_rover_list(payload)
    _logger.debug("Fetched %d rovers", len(rovers))
    return rovers


async def fetch_rover_photos(transport: Transport, rover_name: str, max_date: str) -> Gallery:
    """Fetch the photos *rover_name* took on *max_date*."""
    try:
        endpoint = ROVER_PHOTOS_PATH.format(name=path_segment(rover_name))
    except ValueError as exc:
        raise GatewayError(str(exc), endpoint=ROVER_PHOTOS_PATH) from exc
    payload = await transport.get_json(endpoint, {"max_date": max_date})
    gallery = parse_gallery(payload, endpoint=endpoint)
    _logger.debug("Fetched %d photos for %s on %s", len(gallery.photos), rover_name, max_date)
    return gallery
