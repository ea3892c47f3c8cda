import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

from .exceptions import ConfigurationError
from .geo import Point, as_point
from .zone import SubjectStatus, Zone, ZoneType

_LOGGER = logging.getLogger(__name__)


class ContainmentPolicy(Enum):
    # Earliest containing zone in configuration order wins.
    FIRST_MATCH = "first-match"
    # Most severe containing zone wins; ties go to the earliest.
    HIGHEST_SEVERITY = "highest-severity"


@dataclass(frozen=True)
class Classification:
    zone_type: ZoneType
    zone: Zone | None = None

    @classmethod
    def safe(cls) -> "Classification":
        return cls(zone_type=ZoneType.GREEN)

    @classmethod
    def for_zone(cls, zone: Zone) -> "Classification":
        return cls(zone_type=zone.type, zone=zone)

    @property
    def zone_name(self) -> str | None:
        return self.zone.name if self.zone is not None else None

    @property
    def status(self) -> SubjectStatus:
        return self.zone_type.status

    @property
    def is_safe(self) -> bool:
        return self.zone_type == ZoneType.GREEN


def _first_match(point: Point, zones: Iterable[Zone]) -> Zone | None:
    for zone in zones:
        if zone.contains(point):
            return zone
    return None


def _highest_severity(point: Point, zones: Iterable[Zone]) -> Zone | None:
    best: Zone | None = None
    for zone in zones:
        if not zone.contains(point):
            continue
        if best is None or best.type < zone.type:
            best = zone
    return best


def classify(
    point: Any,
    zones: Iterable[Zone],
    policy: ContainmentPolicy = ContainmentPolicy.FIRST_MATCH,
) -> Classification:
    """
    Classify ``point`` against ``zones``.

    Zones are scanned in the order given. Under
    :py:attr:`ContainmentPolicy.FIRST_MATCH` the first zone whose boundary
    contains the point decides the result, regardless of severity, so the
    order of overlapping zones determines the outcome. A point contained by
    no zone gets :py:meth:`Classification.safe`.

    :param point: A :py:class:`~safezone.geo.Point`, or anything
                  :py:func:`~safezone.geo.as_point` accepts
    :param zones: Zones in priority order
    :param policy: How to choose between overlapping zones
    :raises InvalidPointError: if the point is missing or invalid
    """
    point = as_point(point)

    if policy == ContainmentPolicy.FIRST_MATCH:
        zone = _first_match(point, zones)
    elif policy == ContainmentPolicy.HIGHEST_SEVERITY:
        zone = _highest_severity(point, zones)
    else:
        raise ValueError("Unknown containment policy: {}".format(policy))

    if zone is None:
        return Classification.safe()
    return Classification.for_zone(zone)


class ZoneEvaluator:
    """
    Classifies points against a fixed zone configuration.

    The zones are copied into a tuple on construction and never change
    afterwards.
    """

    def __init__(
        self,
        zones: Iterable[Zone],
        policy: ContainmentPolicy = ContainmentPolicy.FIRST_MATCH,
    ) -> None:
        zones = tuple(zones)
        for index, zone in enumerate(zones):
            if not isinstance(zone, Zone):
                raise ConfigurationError(
                    "Zone #{}: expected a Zone, got {!r}".format(index, zone)
                )

        self._zones = zones
        self._policy = ContainmentPolicy(policy)

    @property
    def zones(self) -> tuple[Zone, ...]:
        return self._zones

    @property
    def policy(self) -> ContainmentPolicy:
        return self._policy

    def classify(self, point: Any) -> Classification:
        result = classify(point, self._zones, self._policy)
        _LOGGER.debug(
            "Classified %s as %s (zone: %s)",
            point,
            result.zone_type.value,
            result.zone_name,
        )
        return result

    def matching_zones(self, point: Any) -> list[Zone]:
        point = as_point(point)
        return [zone for zone in self._zones if zone.contains(point)]
