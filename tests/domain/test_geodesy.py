# tests/domain/test_geodesy.py
import math

import numpy as np
import pytest

from roadnav.domain.mechanics.geodesy import (
    TransverseMercator,
    bearing_delta,
    haversine_mi,
    initial_bearing,
)


def test_haversine_known_distance():
    # Berkeley to Oakland city halls, roughly 4.5 miles
    d = haversine_mi(-122.2730, 37.8702, -122.2727, 37.8053)
    assert d == pytest.approx(4.48, abs=0.05)
    assert haversine_mi(-122.27, 37.87, -122.27, 37.87) == 0.0


def test_haversine_quarter_meridian():
    assert haversine_mi(0.0, 0.0, 0.0, 90.0) == pytest.approx(3963 * math.pi / 2)


@pytest.mark.parametrize(
    "lon2,lat2,expected",
    [(0.0, 1.0, 0.0), (1.0, 0.0, 90.0), (0.0, -1.0, 180.0), (-1.0, 0.0, -90.0)],
)
def test_initial_bearing_cardinal(lon2, lat2, expected):
    assert initial_bearing(0.0, 0.0, lon2, lat2) == pytest.approx(expected, abs=1e-9)


def test_bearing_delta_wraps():
    assert bearing_delta(170.0, -170.0) == pytest.approx(20.0)
    assert bearing_delta(-170.0, 170.0) == pytest.approx(-20.0)
    assert bearing_delta(0.0, 180.0) == pytest.approx(180.0)
    assert bearing_delta(45.0, 45.0) == 0.0


def test_projection_orientation_and_origin():
    tm = TransverseMercator(-122.25, 37.87)
    assert tm.project(-122.25, 37.87) == pytest.approx((0.0, 0.0), abs=1e-12)
    x_east, _ = tm.project(-122.24, 37.87)
    _, y_north = tm.project(-122.25, 37.88)
    assert x_east > 0 and y_north > 0


def test_projection_scalar_and_vector_agree():
    tm = TransverseMercator(-122.25, 37.87)
    rng = np.random.default_rng(0)
    lons = -122.3 + rng.uniform(0, 0.1, 50)
    lats = 37.82 + rng.uniform(0, 0.1, 50)
    xs, ys = tm.project_many(lons, lats)
    for lon, lat, x, y in zip(lons, lats, xs, ys):
        assert tm.project(lon, lat) == pytest.approx((x, y), rel=1e-12, abs=1e-15)


def test_projection_preserves_local_distances():
    # over a few km the plane is within a fraction of a percent of the sphere
    tm = TransverseMercator(-122.25, 37.87)
    a, b = (-122.27, 37.86), (-122.23, 37.89)
    (ax, ay), (bx, by) = tm.project(*a), tm.project(*b)
    planar_mi = math.hypot(bx - ax, by - ay) * 3963
    assert planar_mi == pytest.approx(haversine_mi(*a, *b), rel=1e-3)


def test_due_south_with_negative_zero_longitude_is_positive_180():
    # lon2 - lon1 == -0.0 makes atan2 return -180
    assert initial_bearing(0.0, 1.0, -0.0, 0.0) == 180.0
    assert initial_bearing(5.0, 1.0, 5.0, 0.0) == 180.0


@pytest.mark.filterwarnings("error")
def test_projection_stays_finite_on_the_singular_meridian():
    tm = TransverseMercator(0.0, 0.0)
    xs, ys = tm.project_many([90.0, -90.0, 89.0], [0.0, 0.0, 0.0])
    assert np.isfinite(xs).all() and np.isfinite(ys).all()
    assert xs[0] > xs[2] > 0 > xs[1]
