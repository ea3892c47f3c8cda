import math

import pytest

from safezone.evaluator import (
    Classification,
    ContainmentPolicy,
    ZoneEvaluator,
    classify,
)
from safezone.exceptions import ConfigurationError, InvalidPointError
from safezone.geo import EARTH_RADIUS_METERS, Point
from safezone.zone import SubjectStatus, Zone, ZoneType

CENTER = Point(latitude=28.74996, longitude=77.117455)


def north_of(point: Point, meters: float) -> Point:
    return Point(
        latitude=point.latitude + math.degrees(meters / EARTH_RADIUS_METERS),
        longitude=point.longitude,
    )


def test_point_within_radius_gets_zone_type(zone):
    result = classify(north_of(CENTER, 50), [zone])
    assert result.zone_type == ZoneType.YELLOW
    assert result.zone is zone
    assert result.zone_name == "campus"


def test_point_far_outside_is_safe(zone):
    result = classify(north_of(CENTER, 5000), [zone])
    assert result == Classification.safe()
    assert result.zone is None
    assert result.is_safe


def test_no_zones_is_safe():
    assert classify(CENTER, []) == Classification.safe()


def test_outside_every_zone_is_safe():
    zones = [
        Zone(center=north_of(CENTER, 1000), radius=100, type=ZoneType.RED),
        Zone(center=north_of(CENTER, -1000), radius=100, type=ZoneType.YELLOW),
        Zone(center=CENTER, radius=10, type=ZoneType.RESTRICTED),
    ]
    for meters in (20, 150, 500, -500, 1200):
        assert classify(north_of(CENTER, meters), zones).is_safe


def test_boundary_is_inclusive():
    point = north_of(CENTER, 100)
    radius = Zone(center=CENTER, radius=1).distance_to(point)
    zone = Zone(center=CENTER, radius=radius, type=ZoneType.RED)
    assert classify(point, [zone]).zone_type == ZoneType.RED


def test_first_match_follows_list_order(overlapping):
    caution, danger = overlapping

    assert classify(CENTER, [caution, danger]).zone is caution
    assert classify(CENTER, [danger, caution]).zone is danger


def test_highest_severity_ignores_list_order(overlapping):
    caution, danger = overlapping
    policy = ContainmentPolicy.HIGHEST_SEVERITY

    assert classify(CENTER, [caution, danger], policy).zone is danger
    assert classify(CENTER, [danger, caution], policy).zone is danger


def test_highest_severity_tie_goes_to_earliest():
    first = Zone(center=CENTER, radius=100, type=ZoneType.RED, name="first")
    second = Zone(center=CENTER, radius=200, type=ZoneType.RED, name="second")
    result = classify(CENTER, [first, second], ContainmentPolicy.HIGHEST_SEVERITY)
    assert result.zone is first


def test_classify_is_idempotent(overlapping):
    zones = list(overlapping)
    point = north_of(CENTER, 30)
    assert classify(point, zones) == classify(point, zones)


def test_classify_accepts_coordinate_pairs(zone):
    result = classify((CENTER.latitude, CENTER.longitude), [zone])
    assert result.zone_type == ZoneType.YELLOW


@pytest.mark.parametrize(
    "point", [None, (None, None), {"lat": None, "lng": 77.1}, (95, 0)]
)
def test_missing_or_invalid_point_fails_fast(zone, point):
    with pytest.raises(InvalidPointError):
        classify(point, [zone])


def test_classification_status():
    assert Classification.safe().status == SubjectStatus.SAFE
    red = Zone(center=CENTER, radius=1, type=ZoneType.RED)
    assert Classification.for_zone(red).status == SubjectStatus.EMERGENCY


def test_evaluator_classify(overlapping):
    evaluator = ZoneEvaluator(overlapping)
    assert evaluator.policy == ContainmentPolicy.FIRST_MATCH
    assert evaluator.classify(CENTER).zone_type == ZoneType.YELLOW


def test_evaluator_policy_from_value(overlapping):
    evaluator = ZoneEvaluator(overlapping, policy="highest-severity")
    assert evaluator.classify(CENTER).zone_type == ZoneType.RED


def test_evaluator_zones_are_immutable(overlapping):
    zones = list(overlapping)
    evaluator = ZoneEvaluator(zones)
    zones.reverse()
    assert evaluator.zones == overlapping
    assert evaluator.classify(CENTER).zone_type == ZoneType.YELLOW


def test_evaluator_rejects_non_zones():
    with pytest.raises(ConfigurationError):
        ZoneEvaluator([{"lat": 1, "lng": 2, "radius": 3}])


def test_matching_zones(overlapping):
    caution, danger = overlapping
    evaluator = ZoneEvaluator([danger, caution])
    assert evaluator.matching_zones(CENTER) == [danger, caution]
    assert evaluator.matching_zones(north_of(CENTER, 300)) == [caution]
    assert evaluator.matching_zones(north_of(CENTER, 5000)) == []


@pytest.fixture
def zone() -> Zone:
    return Zone(center=CENTER, radius=100, type=ZoneType.YELLOW, name="campus")


@pytest.fixture
def overlapping() -> tuple[Zone, Zone]:
    caution = Zone(center=CENTER, radius=500, type=ZoneType.YELLOW, name="caution")
    danger = Zone(center=CENTER, radius=200, type=ZoneType.RED, name="danger")
    return caution, danger
