"""
Tests for the flight pattern detection service.
"""

from dataclasses import replace

import pytest

from talon.config import Config
from talon.geometry import TrackPoint
from talon.patterns import PatternDetector
from talon.patterns.constants import (
    CLOCKWISE,
    PATTERN_HOLDING,
    PATTERN_ORBIT,
    PATTERN_RACETRACK,
    PATTERN_TANKER_TRACK,
)
from talon.patterns.detector import altitude_variation


@pytest.fixture
def detector():
    return PatternDetector(Config())


def pattern_types(result):
    return [p.pattern_type for p in result.patterns]


class TestPatternDetector:
    """Tests for PatternDetector class."""

    def test_short_track(self, detector, racetrack_track):
        result = detector.detect_patterns(racetrack_track[:5])

        assert not result.detected
        assert result.patterns == []
        assert result.primary_pattern is None

    def test_track_without_timestamps(self, detector, racetrack_track):
        points = [replace(p, timestamp=None) for p in racetrack_track]
        assert not detector.detect_patterns(points).detected

    def test_short_duration(self, detector, racetrack_track):
        # 58 positions one second apart
        points = [replace(p, timestamp=i) for i, p in enumerate(racetrack_track)]
        assert not detector.detect_patterns(points).detected

    def test_racetrack(self, detector, racetrack_track):
        result = detector.detect_patterns(racetrack_track)

        assert result.detected
        assert result.primary_pattern.pattern_type == PATTERN_RACETRACK
        assert result.primary_pattern.confidence == pytest.approx(1.0)
        assert result.primary_pattern.metadata["heading_leg1"] == 90
        assert result.primary_pattern.metadata["heading_leg2"] == 270
        assert result.primary_pattern.duration_minutes == pytest.approx(28.5)
        assert result.primary_pattern.metadata["num_legs"] == 3

    def test_racetrack_is_also_a_holding_pattern(self, detector, racetrack_track):
        result = detector.detect_patterns(racetrack_track)

        assert PATTERN_HOLDING in pattern_types(result)
        holding = next(p for p in result.patterns if p.pattern_type == PATTERN_HOLDING)
        assert holding.metadata["num_turns"] == 2
        assert holding.confidence == pytest.approx(0.8)

    def test_wide_racetrack_is_not_a_holding_pattern(self, detector, offset_racetrack_track):
        result = detector.detect_patterns(offset_racetrack_track)

        assert result.primary_pattern.pattern_type == PATTERN_RACETRACK
        assert PATTERN_HOLDING not in pattern_types(result)

    @pytest.mark.parametrize("mirror, direction", [(1, "right"), (-1, "left")])
    def test_holding_turn_direction(self, offset_racetrack_track, mirror, direction):
        config = Config()
        config.set("patterns.holding.max_area_nm2", 200)
        # Mirroring the track across the equator reverses every turn
        points = [replace(p, latitude=p.latitude * mirror) for p in offset_racetrack_track]

        result = PatternDetector(config).detect_patterns(points)

        holding = next(p for p in result.patterns if p.pattern_type == PATTERN_HOLDING)
        assert holding.metadata["num_turns"] == 2
        assert holding.metadata["turn_direction"] == direction

    def test_patterns_sorted_by_confidence(self, detector, racetrack_track):
        confidences = [p.confidence for p in detector.detect_patterns(racetrack_track).patterns]
        assert confidences == sorted(confidences, reverse=True)

    def test_orbit(self, detector, orbit_track):
        result = detector.detect_patterns(orbit_track)

        assert result.primary_pattern.pattern_type == PATTERN_ORBIT
        orbit = result.primary_pattern
        assert orbit.radius_nm == pytest.approx(5.0, rel=0.01)
        assert orbit.center_lat == pytest.approx(50.0, abs=0.01)
        assert orbit.center_lon == pytest.approx(10.0, abs=0.01)
        assert orbit.metadata["direction"] == CLOCKWISE
        assert orbit.confidence > 0.9

    def test_tanker_track(self, detector, tanker_track):
        result = detector.detect_patterns(tanker_track)

        assert pattern_types(result) == [PATTERN_TANKER_TRACK]
        tanker = result.primary_pattern
        assert tanker.confidence == pytest.approx(0.95)
        assert tanker.metadata["track_heading"] == 90
        assert tanker.metadata["altitude_fl"] == 251
        assert tanker.metadata["num_legs"] == 1

    def test_thresholds_come_from_config(self, racetrack_track):
        config = Config()
        config.set("patterns.general.min_positions", 100)

        assert not PatternDetector(config).detect_patterns(racetrack_track).detected

    def test_missing_setting_raises(self, racetrack_track):
        config = Config()
        config.set("patterns.general", {})

        with pytest.raises(KeyError):
            PatternDetector(config).detect_patterns(racetrack_track)

    def test_to_dict(self, detector, racetrack_track):
        data = detector.detect_patterns(racetrack_track).to_dict()

        assert data["detected"] is True
        assert data["primary_pattern"]["pattern_type"] == PATTERN_RACETRACK
        assert data["primary_pattern"]["start_time"].startswith("2023-11-14T22:13:20")


class TestAltitudeVariation:
    """Tests for altitude_variation."""

    def test_spread(self, tanker_track):
        assert altitude_variation(tanker_track) == 200

    def test_without_altitudes(self):
        assert altitude_variation([TrackPoint(0, 0), TrackPoint(0, 1)]) == 0.0
