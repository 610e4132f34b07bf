"""Photo and gallery models."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar

from pydantic import Field, field_validator

from marsdash._constants import UNKNOWN_CAMERA, UNKNOWN_DATE, UNKNOWN_ROVER
from marsdash.models._base import DashBaseModel, safe_int


class Camera(DashBaseModel):
    """Camera that captured a photo."""

    name: str | None = None
    full_name: str | None = None


class PhotoRover(DashBaseModel):
    """Rover summary embedded in each photo."""

    name: str | None = None
    status: str | None = None


class Photo(DashBaseModel):
    """A single rover photo, sourced verbatim from the upstream API.

    Only ``img_src`` is required. Missing camera, date or rover fall back
    to the ``*_label`` defaults at render time.
    """

    img_src: str
    earth_date: str | None = None
    camera: Camera | None = None
    rover: PhotoRover | None = None
    id: int | None = None
    sol: int | None = None

    @field_validator("id", "sol", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("camera", "rover", mode="before")
    @classmethod
    def _drop_non_mapping(cls, value: Any) -> Any:
        # Upstream occasionally sends a bare string; treat it as absent.
        if value is None or isinstance(value, DashBaseModel):
            return value
        if isinstance(value, Mapping):
            return dict(value)
        return None

    @property
    def camera_label(self) -> str:
        if self.camera is not None and self.camera.full_name:
            return self.camera.full_name
        return UNKNOWN_CAMERA

    @property
    def date_label(self) -> str:
        return self.earth_date or UNKNOWN_DATE

    @property
    def rover_label(self) -> str:
        if self.rover is not None and self.rover.name:
            return self.rover.name
        return UNKNOWN_ROVER


class Gallery(DashBaseModel):
    """Photos returned for one rover and earth date."""

    _stash_raw: ClassVar[bool] = False

    photos: tuple[Photo, ...] = Field(default_factory=tuple)
