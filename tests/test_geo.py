import pytest

from matching.exceptions import InvalidCoordinates
from matching.geo import (
    GeoPoint,
    bounding_box,
    distance_between,
    format_distance,
    haversine_miles,
    miles_to_meters,
    validate_point,
)


def test_identical_points_are_zero_miles_apart():
    assert haversine_miles(47.6062, -122.3321, 47.6062, -122.3321) == 0


def test_short_distance_in_seattle():
    miles = haversine_miles(47.6062, -122.3321, 47.61, -122.33)

    assert 0.25 < miles < 0.32
    assert format_distance(miles) == "0.3 miles away"


def test_long_distance_new_york_to_los_angeles():
    miles = haversine_miles(40.7128, -74.0060, 34.0522, -118.2437)

    assert 2440 < miles < 2450


def test_distance_is_symmetric():
    a = GeoPoint(51.5074, -0.1278)
    b = GeoPoint(48.8566, 2.3522)

    assert distance_between(a, b) == pytest.approx(distance_between(b, a))


@pytest.mark.parametrize("latitude, longitude", [
    (90.5, 0),
    (-91, 10),
    (10, 180.1),
    (10, -181),
    ("north", 10),
    (None, 10),
])
def test_invalid_coordinates_are_rejected(latitude, longitude):
    with pytest.raises(InvalidCoordinates):
        haversine_miles(latitude, longitude, 0, 0)


def test_validate_point_accepts_numeric_strings():
    assert validate_point("47.6", "-122.3") == GeoPoint(47.6, -122.3)


def test_miles_to_meters_uses_fixed_constant():
    assert miles_to_meters(10) == pytest.approx(16093.4)


def test_bounding_box_contains_points_on_the_radius():
    origin = GeoPoint(47.6062, -122.3321)
    min_lat, max_lat, min_lon, max_lon = bounding_box(origin, 10)

    # ~9.9 millas al norte y al este siguen dentro de la caja
    assert min_lat < origin.latitude + 0.143 < max_lat
    assert min_lon < origin.longitude + 0.21 < max_lon
    assert haversine_miles(origin.latitude, origin.longitude, origin.latitude, origin.longitude + 0.21) < 10


def test_bounding_box_drops_longitude_limits_across_antimeridian():
    _, _, min_lon, max_lon = bounding_box(GeoPoint(0, 179.99), 50)

    assert min_lon is None
    assert max_lon is None
