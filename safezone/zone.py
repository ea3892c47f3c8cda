import functools
import json
import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

from .config import DEFAULT_ZONE_RECORDS
from .exceptions import ConfigurationError, InvalidPointError
from .geo import Point, as_point, haversine_distance

_LOGGER = logging.getLogger(__name__)


class SubjectStatus(Enum):
    SAFE = "safe"
    WARNING = "warning"
    EMERGENCY = "emergency"


@functools.total_ordering
class ZoneType(Enum):
    """Zone severity, ordered GREEN < YELLOW < RESTRICTED < RED."""

    GREEN = "green"
    YELLOW = "yellow"
    RESTRICTED = "restricted"
    RED = "red"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @property
    def status(self) -> SubjectStatus:
        if self == ZoneType.RED:
            return SubjectStatus.EMERGENCY
        if self == ZoneType.GREEN:
            return SubjectStatus.SAFE
        return SubjectStatus.WARNING

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ZoneType):
            return NotImplemented
        return self.severity < other.severity


_SEVERITY = {
    ZoneType.GREEN: 0,
    ZoneType.YELLOW: 1,
    ZoneType.RESTRICTED: 2,
    ZoneType.RED: 3,
}


@dataclass(frozen=True)
class Zone:
    """A named circular region; ``radius`` is in meters."""

    center: Point
    radius: float
    type: ZoneType = ZoneType.GREEN
    name: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.center, Point):
            raise ConfigurationError(
                "Zone center must be a Point, got {!r}".format(self.center)
            )
        if (
            isinstance(self.radius, bool)
            or not isinstance(self.radius, (int, float))
            or not math.isfinite(self.radius)
            or self.radius <= 0
        ):
            raise ConfigurationError(
                "Zone radius must be a positive number of meters, got {!r}".format(
                    self.radius
                )
            )
        if not isinstance(self.type, ZoneType):
            raise ConfigurationError(
                "Zone type must be a ZoneType, got {!r}".format(self.type)
            )

    def distance_to(self, point: Point) -> float:
        return haversine_distance(point, self.center)

    def contains(self, point: Point) -> bool:
        # Inclusive: a point exactly on the boundary is inside.
        return self.distance_to(point) <= self.radius

    def __str__(self) -> str:
        return "{} ({}, {}m around {})".format(
            self.name or "<unnamed>", self.type.value, self.radius, self.center
        )


def _parse_zone_type(value: Any) -> ZoneType:
    if value is None:
        return ZoneType.GREEN
    if isinstance(value, ZoneType):
        return value
    try:
        return ZoneType(str(value).lower())
    except ValueError:
        raise ConfigurationError(
            "Unknown zone type {!r}, expected one of: {}".format(
                value, ", ".join(t.value for t in ZoneType)
            )
        )


def _parse_zone(record: Mapping[str, Any]) -> Zone:
    if not isinstance(record, Mapping):
        raise ConfigurationError("expected a mapping, got {!r}".format(record))
    if "radius" not in record:
        raise ConfigurationError("radius is missing")

    try:
        center = as_point(record)
    except InvalidPointError as e:
        raise ConfigurationError("invalid center: {}".format(e)) from e

    return Zone(
        center=center,
        radius=record["radius"],
        type=_parse_zone_type(record.get("type")),
        name=record.get("name"),
    )


def load_zones(records: Iterable[Mapping[str, Any]]) -> tuple[Zone, ...]:
    """
    Build an immutable zone configuration from plain records.

    Record order is preserved. Any invalid record rejects the whole
    configuration with a :py:class:`ConfigurationError` naming its index.
    """
    zones = []
    for index, record in enumerate(records):
        try:
            zones.append(_parse_zone(record))
        except ConfigurationError as e:
            raise ConfigurationError("Zone #{}: {}".format(index, e)) from e

    _LOGGER.debug("Loaded %d zones", len(zones))
    return tuple(zones)


def load_zones_file(path: str) -> tuple[Zone, ...]:
    """Load zones from a JSON file containing an array of zone records."""
    try:
        with open(path) as f:
            records = json.load(f)
    except (OSError, ValueError) as e:
        raise ConfigurationError(
            "Failed to read zone configuration {}: {}".format(path, e)
        ) from e

    if not isinstance(records, list):
        raise ConfigurationError(
            "Zone configuration {} must contain a JSON array".format(path)
        )
    return load_zones(records)


def default_zones() -> tuple[Zone, ...]:
    return load_zones(DEFAULT_ZONE_RECORDS)
