"""
Tests for the geometry kernel.
"""

from math import isnan

import pytest

from talon.errors import InvalidInputError
from talon.geometry import (
    TrackPoint,
    bearing,
    centroid,
    circular_mean,
    destination,
    distance,
    heading_difference,
    normalize_angle_delta,
    path_length,
)


@pytest.fixture
def sample_points():
    return [
        TrackPoint(49.3508, 8.1364),
        TrackPoint(52.5163, 13.3777),
        TrackPoint(-33.8688, 151.2093),
        TrackPoint(0.0, 179.9),
        TrackPoint(0.0, -179.9),
    ]


class TestTrackPoint:
    """Tests for TrackPoint."""

    def test_rejects_out_of_range_coordinates(self):
        with pytest.raises(InvalidInputError):
            TrackPoint(91.0, 0.0)
        with pytest.raises(InvalidInputError):
            TrackPoint(0.0, -180.5)

    @pytest.mark.parametrize("lat, lon", [(float("nan"), 0.0), (0.0, float("inf"))])
    def test_rejects_non_finite_coordinates(self, lat, lon):
        with pytest.raises(InvalidInputError):
            TrackPoint(lat, lon)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            TrackPoint(100.0, 200.0)

    def test_from_dict_accepts_short_keys(self):
        point = TrackPoint.from_dict(
            {"lat": 50.0, "lon": 10.0, "timestamp": 1700000000, "track": 90, "altitude": 25000}
        )
        assert point.latitude == 50.0
        assert point.longitude == 10.0
        assert point.heading == 90.0
        assert point.altitude == 25000.0

    def test_from_dict_missing_coordinate(self):
        with pytest.raises(InvalidInputError):
            TrackPoint.from_dict({"lat": 50.0})

    def test_to_dict(self):
        data = TrackPoint(50.0, 10.0, timestamp=1.0).to_dict()
        assert data["latitude"] == 50.0
        assert data["timestamp"] == 1.0
        assert data["heading"] is None


class TestDistance:
    """Tests for great-circle distance."""

    def test_one_degree_of_latitude(self):
        assert distance(TrackPoint(0, 0), TrackPoint(1, 0)) == pytest.approx(60.04, abs=0.01)

    def test_zero_for_same_point(self, sample_points):
        for p in sample_points:
            assert distance(p, p) == 0

    def test_symmetry(self, sample_points):
        for p1 in sample_points:
            for p2 in sample_points:
                assert distance(p1, p2) == pytest.approx(distance(p2, p1))

    def test_across_antimeridian(self):
        d = distance(TrackPoint(0.0, 179.9), TrackPoint(0.0, -179.9))
        assert d == pytest.approx(12.0, abs=0.05)

    def test_path_length(self):
        points = [TrackPoint(0, 0), TrackPoint(1, 0), TrackPoint(2, 0)]
        assert path_length(points) == pytest.approx(2 * 60.04, abs=0.02)
        assert path_length(points[:1]) == 0


class TestBearing:
    """Tests for initial bearing."""

    def test_cardinal_directions(self):
        origin = TrackPoint(0, 0)
        assert bearing(origin, TrackPoint(1, 0)) == pytest.approx(0.0)
        assert bearing(origin, TrackPoint(0, 1)) == pytest.approx(90.0)
        assert bearing(origin, TrackPoint(-1, 0)) == pytest.approx(180.0)
        assert bearing(origin, TrackPoint(0, -1)) == pytest.approx(270.0)

    def test_range_and_reciprocal(self, sample_points):
        for p1 in sample_points:
            for p2 in sample_points:
                if p1 == p2:
                    continue
                forward = bearing(p1, p2)
                backward = bearing(p2, p1)
                assert 0 <= forward < 360
                assert 0 <= backward < 360

        # Reciprocal holds for short legs where convergence is negligible
        p1, p2 = TrackPoint(50.0, 10.0), TrackPoint(50.1, 10.1)
        assert heading_difference(bearing(p1, p2), bearing(p2, p1)) == pytest.approx(180, abs=0.1)


class TestAngles:
    """Tests for angle helpers."""

    @pytest.mark.parametrize("delta,expected", [
        (0, 0), (90, 90), (270, -90), (-270, 90), (540, 180), (-190, 170), (720, 0),
    ])
    def test_normalize_angle_delta(self, delta, expected):
        assert normalize_angle_delta(delta) == pytest.approx(expected)

    @pytest.mark.parametrize("delta", [-1000.5, -360, -181, 0, 179.9, 360, 725.25])
    def test_normalize_is_idempotent(self, delta):
        once = normalize_angle_delta(delta)
        assert -180 <= once <= 180
        assert normalize_angle_delta(once) == once

    @pytest.mark.parametrize("delta", [1e18, -1e18, 3.6e300])
    def test_normalize_huge_delta(self, delta):
        assert -180 <= normalize_angle_delta(delta) <= 180

    def test_normalize_keeps_fraction(self):
        assert normalize_angle_delta(36000000.5) == pytest.approx(0.5)

    @pytest.mark.parametrize("delta", [float("inf"), float("-inf"), float("nan")])
    def test_normalize_non_finite(self, delta):
        assert isnan(normalize_angle_delta(delta))

    def test_heading_difference_wraps(self):
        assert heading_difference(350, 10) == pytest.approx(20)
        assert heading_difference(10, 350) == pytest.approx(20)
        assert heading_difference(90, 270) == pytest.approx(180)

    def test_circular_mean_across_north(self):
        assert heading_difference(circular_mean([350, 10]), 0) < 1e-9

    def test_circular_mean_empty(self):
        assert circular_mean([]) == 0.0


class TestCentroid:
    """Tests for the spherical centroid."""

    def test_single_point(self):
        c = centroid([TrackPoint(50.0, 10.0)])
        assert c.latitude == pytest.approx(50.0)
        assert c.longitude == pytest.approx(10.0)

    def test_across_antimeridian(self):
        c = centroid([TrackPoint(0.0, 179.0), TrackPoint(0.0, -179.0)])
        assert c.latitude == pytest.approx(0.0, abs=1e-9)
        assert abs(c.longitude) == pytest.approx(180.0)

    def test_empty_raises(self):
        with pytest.raises(InvalidInputError):
            centroid([])


class TestDestination:
    """Tests for great-circle projection."""

    def test_distance_and_bearing_round_trip(self):
        start = TrackPoint(50.0, 10.0)
        end = destination(start, 45.0, 20.0)
        assert distance(start, end) == pytest.approx(20.0, rel=1e-6)
        assert bearing(start, end) == pytest.approx(45.0, abs=1e-6)
