"""marsdash - Mars rover dashboard with an immutable, re-rendered state."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("marsdash")
except PackageNotFoundError:
    __version__ = "0+local"
from marsdash.client import DataGateway, RoverClient
from marsdash.config import DashConfig
from marsdash.coordinator import UpdateCoordinator
from marsdash.exceptions import DashConfigError, GatewayError, MalformedResponseError, MarsDashError
from marsdash.models import Camera, Gallery, Photo, PhotoRover, Rover
from marsdash.render.target import FileTarget, MemoryTarget, RenderTarget
from marsdash.state import ApplicationState, StateStore, initial_state, merge

__all__ = [
    "__version__",
    "ApplicationState",
    "Camera",
    "DashConfig",
    "DashConfigError",
    "DataGateway",
    "FileTarget",
    "Gallery",
    "GatewayError",
    "MalformedResponseError",
    "MarsDashError",
    "MemoryTarget",
    "Photo",
    "PhotoRover",
    "RenderTarget",
    "Rover",
    "RoverClient",
    "StateStore",
    "UpdateCoordinator",
    "initial_state",
    "merge",
]
