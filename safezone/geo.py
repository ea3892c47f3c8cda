"""Geographic primitives: points, timestamped positions and distances."""

import datetime
import math
from dataclasses import dataclass, field
from typing import Any, Mapping

from .exceptions import InvalidPointError

# Mean Earth radius in meters.
EARTH_RADIUS_METERS = 6_371_000

_LATITUDE_KEYS = ("lat", "latitude")
_LONGITUDE_KEYS = ("lng", "lon", "longitude")


def _validate_coordinate(name: str, value: Any, limit: float) -> float:
    if value is None:
        raise InvalidPointError("{} is missing".format(name))
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidPointError(
            "{} must be a number, got {!r}".format(name, value)
        )
    if not math.isfinite(value):
        raise InvalidPointError("{} must be finite, got {!r}".format(name, value))
    if not -limit <= value <= limit:
        raise InvalidPointError(
            "{} must be between -{} and {} degrees, got {}".format(
                name, limit, limit, value
            )
        )
    return float(value)


@dataclass(frozen=True)
class Point:
    """
    A WGS-84 coordinate in decimal degrees.

    Both coordinates are validated on construction. There is no default
    value: a missing coordinate raises :py:class:`InvalidPointError` rather
    than silently becoming ``(0, 0)``, which is a real place.
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "latitude", _validate_coordinate("latitude", self.latitude, 90)
        )
        object.__setattr__(
            self,
            "longitude",
            _validate_coordinate("longitude", self.longitude, 180),
        )

    def __str__(self) -> str:
        return "{:.6f},{:.6f}".format(self.latitude, self.longitude)


@dataclass(frozen=True)
class Position:
    point: Point
    timestamp: datetime.datetime = field(default_factory=datetime.datetime.now)

    @property
    def latitude(self) -> float:
        return self.point.latitude

    @property
    def longitude(self) -> float:
        return self.point.longitude


def _lookup(value: Mapping[str, Any], keys: tuple[str, ...], name: str) -> Any:
    for key in keys:
        if key in value:
            return value[key]
    raise InvalidPointError("{} is missing (expected one of {})".format(
        name, ", ".join(keys)
    ))


def as_point(value: Any) -> Point:
    """
    Coerce ``value`` into a :py:class:`Point`.

    Accepts a Point, a ``(latitude, longitude)`` pair, or a mapping with
    ``lat``/``lng``, ``lat``/``lon`` or ``latitude``/``longitude`` keys.

    :raises InvalidPointError: when the value is missing or malformed
    """
    if isinstance(value, Point):
        return value
    if value is None:
        raise InvalidPointError("point is missing")
    if isinstance(value, Mapping):
        return Point(
            latitude=_lookup(value, _LATITUDE_KEYS, "latitude"),
            longitude=_lookup(value, _LONGITUDE_KEYS, "longitude"),
        )
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return Point(latitude=value[0], longitude=value[1])
    raise InvalidPointError("cannot interpret {!r} as a point".format(value))


def haversine_distance(a: Point, b: Point) -> float:
    """
    Great-circle distance between two points, in meters.

    Uses the haversine formula on a sphere of radius
    :py:data:`EARTH_RADIUS_METERS`. This is not geodesic-exact: compared to
    the WGS-84 ellipsoid the result can be off by up to about 0.5%, so a
    point within that margin of a zone boundary may be classified
    differently than a geodesic computation would.
    """
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    delta_lat = math.radians(b.latitude - a.latitude)
    delta_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(delta_lon / 2) ** 2
    )
    # Rounding can push h marginally past 1 for antipodal points.
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(max(0.0, 1 - h)))
    return EARTH_RADIUS_METERS * c
