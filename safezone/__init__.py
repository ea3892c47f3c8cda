"""Public package API exports for safezone."""

from .api import ApiClient, TouristDetails
from .dashboard import Dashboard
from .evaluator import Classification, ContainmentPolicy, ZoneEvaluator, classify
from .exceptions import (
    ApiError,
    ConfigurationError,
    InvalidPointError,
    LocationError,
    SafeZoneError,
)
from .geo import Point, Position, haversine_distance
from .monitor import Monitor
from .tracker import Tracker
from .zone import SubjectStatus, Zone, ZoneType, load_zones, load_zones_file

__version__ = "0.1.0"

__all__ = [
    "ApiClient",
    "ApiError",
    "Classification",
    "ConfigurationError",
    "ContainmentPolicy",
    "Dashboard",
    "InvalidPointError",
    "LocationError",
    "Monitor",
    "Point",
    "Position",
    "SafeZoneError",
    "SubjectStatus",
    "TouristDetails",
    "Tracker",
    "Zone",
    "ZoneEvaluator",
    "ZoneType",
    "classify",
    "haversine_distance",
    "load_zones",
    "load_zones_file",
]
