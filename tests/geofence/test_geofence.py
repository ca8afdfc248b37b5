from __future__ import annotations

import pytest

from src.staff_attendance.staff_attendance.core.exceptions import OutOfRangeError, ValidationError
from src.staff_attendance.staff_attendance.geofence.model import GeofenceConfig
from src.staff_attendance.staff_attendance.geofence.validator import haversine_distance, validate_location


def test_distance_is_zero_for_identical_points():
    assert haversine_distance(-6.2, 106.8, -6.2, 106.8) == 0


@pytest.mark.parametrize(
    "a, b",
    [
        ((-6.2, 106.816666), (-6.2005, 106.8171)),
        ((51.5007, -0.1246), (40.6892, -74.0445)),
        ((0.0, 179.9), (0.0, -179.9)),
    ],
)
def test_distance_is_symmetric(a, b):
    assert haversine_distance(*a, *b) == pytest.approx(haversine_distance(*b, *a))


def test_one_thousandth_degree_of_latitude_is_about_111_meters():
    assert haversine_distance(0.0, 0.0, 0.001, 0.0) == pytest.approx(111.195, abs=0.01)


def test_inside_radius_returns_distance():
    distance = validate_location(-6.2005, 106.816666, -6.2, 106.816666, 100)

    assert 55 < distance < 56


def test_outside_radius_raises_with_distance():
    with pytest.raises(OutOfRangeError) as exc:
        validate_location(-6.202, 106.816666, -6.2, 106.816666, 100)

    assert exc.value.radius_meters == 100
    assert round(exc.value.distance_meters) == 222
    assert str(exc.value) == "Location is 222m from residence center. Must be within 100m radius."


def test_point_on_boundary_is_accepted():
    distance = haversine_distance(0.001, 0.0, 0.0, 0.0)

    assert validate_location(0.001, 0.0, 0.0, 0.0, distance) == distance


def test_config_rejects_out_of_range_values():
    with pytest.raises(ValidationError):
        GeofenceConfig.checked(91, 0, 100)
    with pytest.raises(ValidationError):
        GeofenceConfig.checked(0, 181, 100)
    with pytest.raises(ValidationError):
        GeofenceConfig.checked(0, 0, 0)
    with pytest.raises(ValidationError):
        GeofenceConfig.checked(0, 0, 1001)


def test_config_validate_uses_its_center():
    config = GeofenceConfig.checked(-6.2, 106.816666, 50)

    with pytest.raises(OutOfRangeError):
        config.validate(-6.2005, 106.816666)
