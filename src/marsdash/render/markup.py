"""Pure rendering of an application state snapshot to markup.

:func:`render` never raises for a well-formed snapshot, including the
initial one before rovers or a gallery are loaded. Values that do not have
the expected shape are rendered as if absent.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from html import escape
from typing import Any

from pydantic import ValidationError

from marsdash.models.photo import Gallery, Photo
from marsdash.models.rover import Rover
from marsdash.render.inline import ActionRef, encode_inline
from marsdash.state.store import ApplicationState

_logger = logging.getLogger(__name__)

TOGGLE_THEME = "toggle-theme"
SELECT_ROVER = "select-rover"
SCROLL_TO_TOP = "scroll-to-top"


def _action_attrs(action: str, key: str | None = None) -> str:
    ref = encode_inline(ActionRef(action=action, key=key))
    attrs = f'data-action="{escape(action)}" data-ref="{ref}"'
    if key is not None:
        attrs += f' data-key="{escape(key)}"'
    return attrs


def _coerce_rovers(value: Any) -> list[Rover] | None:
    if not isinstance(value, Sequence) or isinstance(value, (str, bytes)):
        return None
    rovers: list[Rover] = []
    for item in value:
        if isinstance(item, Rover):
            rovers.append(item)
        elif isinstance(item, Mapping):
            try:
                rovers.append(Rover.model_validate(dict(item)))
            except ValidationError:
                _logger.debug("Skipping malformed rover entry")
    return rovers


def _coerce_photos(value: Any) -> list[Photo]:
    if isinstance(value, Gallery):
        return list(value.photos)
    if not isinstance(value, Mapping):
        return []
    raw_photos = value.get("photos")
    if not isinstance(raw_photos, Sequence) or isinstance(raw_photos, (str, bytes)):
        return []
    photos: list[Photo] = []
    for item in raw_photos:
        if isinstance(item, Photo):
            photos.append(item)
        elif isinstance(item, Mapping):
            try:
                photos.append(Photo.model_validate(dict(item)))
            except ValidationError:
                _logger.debug("Skipping malformed photo entry")
    return photos


def loading_spinner() -> str:
    return """
  <div class="d-flex justify-content-center my-4">
    <div class="spinner-border text-primary" style="width: 3rem; height: 3rem;" role="status">
      <span class="visually-hidden">Loading...</span>
    </div>
  </div>
"""


def greeting(name: Any) -> str:
    if isinstance(name, str) and name:
        return f'<h2 class="display-4">Welcome, {escape(name)}!</h2>'
    return '<h2 class="display-4">Hello!</h2>'


def error_alert(message: Any) -> str:
    if not isinstance(message, str) or not message:
        return ""
    return f'<div class="alert alert-danger" role="alert">{escape(message)}</div>'


def photo_card(photo: Photo) -> str:
    """Gallery card for one photo; missing fields use the ``Unknown ...`` labels."""
    camera = escape(photo.camera_label)
    date = escape(photo.date_label)
    rover = escape(photo.rover_label)

    description = (
        f"Captured by the {camera} camera on {date}.<br /><br />"
        f"This image shows the Martian landscape as seen by the {rover} rover."
    )

    return f"""
    <div class="col mb-4">
      <div class="card border-secondary shadow-sm">
        <img src="{escape(photo.img_src)}" class="card-img-top" alt="{camera}" style="height: 200px; object-fit: cover;" />
        <div class="card-body">
          <h5 class="card-title">{rover} - {camera}</h5>
          <p class="card-text">{description}</p>
        </div>
      </div>
    </div>
"""


def rover_card(state: ApplicationState, rover: Rover) -> str:
    """Card for one rover.

    The "view images" control turns into a busy indicator while this rover
    is the selected one and its photos are loading.
    """
    selected = state.get("selectedRover")
    is_loading = False
    if isinstance(selected, Mapping):
        is_loading = bool(selected.get("loading")) and selected.get("name") == rover.name

    if is_loading:
        label = '<span class="spinner-border spinner-border-sm" role="status" aria-hidden="true"></span> Loading...'
        busy = ' aria-busy="true"'
    else:
        label = "View Latest Images"
        busy = ""

    return f"""
    <div class="col mb-4">
      <div class="card border-primary shadow-sm">
        <div class="card-body">
          <h5 class="card-title">{escape(rover.name)}</h5>
          <p class="card-text">
            <strong>Launch Date:</strong> {escape(rover.launch_date)}<br />
            <strong>Landing Date:</strong> {escape(rover.landing_date)}<br />
            <strong>Status:</strong> {escape(rover.status)}
          </p>
          <button class="btn btn-primary" {_action_attrs(SELECT_ROVER, rover.name)}{busy}>
            {label}
          </button>
        </div>
      </div>
    </div>
"""


def render(state: ApplicationState) -> str:
    """Render the whole dashboard for one state snapshot."""
    user = state.get("user")
    user_name = user.get("name") if isinstance(user, Mapping) else None
    dark_mode = state.get("isDarkMode") is True

    rovers = _coerce_rovers(state.get("rovers"))
    if rovers is None:
        rover_cards = loading_spinner()
    else:
        rover_cards = "".join(rover_card(state, rover) for rover in rovers)

    gallery = "".join(photo_card(photo) for photo in _coerce_photos(state.get("selectedRoverGallery")))

    theme_class = "dark-mode" if dark_mode else "light-mode"
    theme = "dark" if dark_mode else "light"
    toggle_label = "Light Mode" if dark_mode else "Dark Mode"

    return f"""
<div class="app" data-bs-theme="{theme}">
  <header class="bg-dark text-light py-4 shadow-sm">
    <div class="container d-flex justify-content-between align-items-center">
      <h1 class="text-center">Mars Rover Dashboard</h1>
      <button class="btn btn-outline-light" {_action_attrs(TOGGLE_THEME)}>
        {toggle_label}
      </button>
    </div>
  </header>
  <main class="container py-5 {theme_class}">
    <div class="alert alert-primary">
      {greeting(user_name)}
      <p class="lead">Explore Mars rover images and information from the NASA API.</p>
    </div>
    {error_alert(state.get("error"))}
    <div class="row row-cols-1 row-cols-md-4 g-2 justify-content-center">
      {rover_cards}
    </div>
    <div class="row row-cols-1 row-cols-md-3 g-4 mt-4">
      {gallery}
    </div>
    <button id="scrollToTopBtn" title="Go to top" {_action_attrs(SCROLL_TO_TOP)}><i class="fa-solid fa-arrow-up"></i></button>
  </main>
  <footer class="py-3 text-center {theme_class}">
    <div class="container">
      <p class="mb-0">&copy; 2024 Mars Rover Dashboard</p>
    </div>
  </footer>
</div>
"""
