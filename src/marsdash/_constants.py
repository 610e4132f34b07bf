"""Internal constants shared across the library."""

USER_AGENT = "marsdash/0.1"
DEFAULT_API_SERVER = "http://localhost:3000/api"
DEFAULT_API_DOMAIN = "https://api.nasa.gov/mars-photos/api/v1"
DEFAULT_PORT = 3000
DEFAULT_USER_NAME = "Student"

ROVER_LIST_PATH = "/"
ROVER_PHOTOS_PATH = "/rovers/{name}"

# ------------------------------------------------------------------
# Fallback labels for optional photo fields
# ------------------------------------------------------------------

UNKNOWN_CAMERA = "Unknown Camera"
UNKNOWN_DATE = "Unknown Date"
UNKNOWN_ROVER = "Unknown Rover"

PROXY_ERROR_BODY = "Internal server error!!!"
