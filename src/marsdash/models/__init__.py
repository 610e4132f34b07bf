"""Typed models for rover API payloads."""

from marsdash.models._base import DashBaseModel
from marsdash.models.photo import Camera, Gallery, Photo, PhotoRover
from marsdash.models.rover import Rover

__all__ = [
    "Camera",
    "DashBaseModel",
    "Gallery",
    "Photo",
    "PhotoRover",
    "Rover",
]
