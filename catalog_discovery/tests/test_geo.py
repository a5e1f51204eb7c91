import math

import pytest

from catalog_discovery.engine.errors import InvalidCoordinate
from catalog_discovery.engine.geo import EARTH_RADIUS_KM, distance_km
from catalog_discovery.engine.models import GeoPoint

KIGALI = GeoPoint(-1.9441, 30.0619)
HUYE = GeoPoint(-2.5967, 29.7394)
RUBAVU = GeoPoint(-1.6792, 29.2583)

KM_PER_DEGREE = EARTH_RADIUS_KM * math.pi / 180


def test_distance_identity():
    assert distance_km(KIGALI, KIGALI) == 0.0
    assert distance_km(KIGALI, GeoPoint(-1.9441, 30.0619)) == 0.0


@pytest.mark.parametrize("a, b", [
    (KIGALI, HUYE),
    (KIGALI, RUBAVU),
    (HUYE, RUBAVU),
    (GeoPoint(89.9, -179.9), GeoPoint(-89.9, 179.9)),
])
def test_distance_symmetry(a, b):
    assert distance_km(a, b) == pytest.approx(distance_km(b, a), abs=1e-9)
    assert distance_km(a, b) > 0


def test_one_degree_of_latitude():
    a = GeoPoint(0.0, 30.0)
    b = GeoPoint(1.0, 30.0)
    assert distance_km(a, b) == pytest.approx(KM_PER_DEGREE, rel=1e-9)


def test_monotonic_with_separation():
    steps = [GeoPoint(KIGALI.lat + d / 10, KIGALI.lon) for d in range(1, 8)]
    distances = [distance_km(KIGALI, p) for p in steps]
    assert distances == sorted(distances)
    assert len(set(distances)) == len(distances)


@pytest.mark.parametrize("a, b", [
    (GeoPoint(0.0, 0.0), GeoPoint(0.0, 180.0)),
    (GeoPoint(90.0, 0.0), GeoPoint(-90.0, 0.0)),
    (GeoPoint(-1.9441, 30.0619), GeoPoint(1.9441, -149.9381)),
])
def test_antipodal_points_are_finite(a, b):
    d = distance_km(a, b)
    assert math.isfinite(d)
    assert d == pytest.approx(math.pi * EARTH_RADIUS_KM, rel=1e-6)


def test_nearly_identical_points_are_finite():
    a = GeoPoint(-1.9441, 30.0619)
    b = GeoPoint(-1.9441 + 1e-12, 30.0619 - 1e-12)
    d = distance_km(a, b)
    assert math.isfinite(d)
    assert 0.0 <= d < 1e-6


@pytest.mark.parametrize("lat, lon", [
    (90.5, 0.0),
    (-91.0, 0.0),
    (0.0, 180.01),
    (0.0, -181.0),
    (float("nan"), 0.0),
    (0.0, float("inf")),
])
def test_invalid_coordinates_are_rejected(lat, lon):
    with pytest.raises(InvalidCoordinate) as exc_info:
        GeoPoint(lat, lon)
    assert exc_info.value.code == 1001


def test_boundary_coordinates_are_valid():
    GeoPoint(90.0, 180.0)
    GeoPoint(-90.0, -180.0)
