"""
Tests for the area confinement check.
"""

import pytest

from talon.geometry import TrackPoint
from talon.patterns.area import check_area_confinement


def square(side_deg, lat=0.0, lon=0.0):
    return [
        TrackPoint(lat, lon),
        TrackPoint(lat, lon + side_deg),
        TrackPoint(lat + side_deg, lon + side_deg),
        TrackPoint(lat + side_deg, lon),
    ]


class TestAreaConfinement:
    """Tests for check_area_confinement."""

    def test_small_box_is_confined(self):
        # 0.1° at the equator is about 6 nm a side
        result = check_area_confinement(square(0.1))

        assert result.confined
        assert result.bounding_box.width == pytest.approx(6.0, abs=0.05)
        assert result.bounding_box.height == pytest.approx(6.0, abs=0.05)
        assert result.area == pytest.approx(36.0, abs=0.5)

    def test_large_box_is_not_confined(self):
        result = check_area_confinement(square(1.0))

        assert not result.confined
        assert result.area > 3000

    def test_custom_limit(self):
        assert not check_area_confinement(square(0.1), max_area_nm2=30).confined

    def test_width_shrinks_with_latitude(self):
        equator = check_area_confinement(square(0.1))
        north = check_area_confinement(square(0.1, lat=60.0))
        assert north.bounding_box.width < equator.bounding_box.width
        assert north.bounding_box.height == pytest.approx(equator.bounding_box.height, rel=1e-6)

    @pytest.mark.parametrize("count", [0, 1])
    def test_too_few_points(self, count):
        result = check_area_confinement(square(0.1)[:count])

        assert not result.confined
        assert result.area == 0

    def test_to_dict(self):
        data = check_area_confinement(square(0.1)).to_dict()
        assert data["confined"] is True
        assert set(data["bounding_box"]) == {"width", "height"}
