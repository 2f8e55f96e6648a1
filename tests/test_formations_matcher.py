"""
Tests for formation scoring and matching.
"""

import pytest

from talon.config import Config
from talon.formations.candidate import AircraftState, FormationCandidate
from talon.formations.library import FORMATION_PATTERNS, get_formation_pattern
from talon.formations.matcher import (
    FormationMatcher,
    detect_formation_pattern,
    detect_formation_patterns,
    score_formation_match,
)


@pytest.fixture
def close_pair():
    """Two aircraft in close, level, matched flight with no type information."""
    return FormationCandidate(
        aircraft_count=2,
        avg_spacing_nm=0.3,
        max_altitude_diff=100,
        max_speed_diff=10,
        heading_variance=5,
    )


@pytest.fixture
def refuelling_pair():
    return [
        AircraftState("GOLD21", 50.0, 10.000, altitude=25000, ground_speed=300, track=90, type_code="KC135"),
        AircraftState("VIPER11", 50.0, 10.005, altitude=25100, ground_speed=305, track=92, type_code="F16C"),
    ]


class TestScoreFormationMatch:
    """Tests for score_formation_match."""

    def test_close_pair_against_tanker_receiver(self, close_pair):
        result = score_formation_match(get_formation_pattern("tanker_receiver"), close_pair)

        assert result.factors["spacing"] == 1.0
        assert result.factors["altitude"] == 1.0
        assert result.factors["speed"] == 1.0
        assert result.factors["heading"] == pytest.approx(1 - 5 / 90)
        assert result.factors["type_match"] == 0.0
        assert result.score == pytest.approx(0.7917, abs=1e-3)

    @pytest.mark.parametrize("count", [1, 5, 30])
    def test_aircraft_count_out_of_bounds_scores_zero(self, count):
        ideal = FormationCandidate(
            aircraft_count=count,
            avg_spacing_nm=0.5,
            max_altitude_diff=0,
            max_speed_diff=0,
            heading_variance=0,
            aircraft_types=("KC135", "F16"),
        )
        result = score_formation_match(get_formation_pattern("tanker_receiver"), ideal)

        assert result.score == 0
        assert result.factors == {"aircraft_count": 0.0}

    def test_score_decays_outside_range(self, close_pair):
        escort = get_formation_pattern("escort")
        result = score_formation_match(escort, close_pair)

        # 0.7 nm short of a 9 nm wide range
        assert result.factors["spacing"] == pytest.approx(1 - 0.7 / 9)

    def test_altitude_range_floor(self):
        # tanker_receiver's altitude range is 500 ft wide; the floor widens it to 1000
        candidate = FormationCandidate(2, 0.5, 1000, 0, 0)
        result = score_formation_match(get_formation_pattern("tanker_receiver"), candidate)
        assert result.factors["altitude"] == pytest.approx(0.5)

    def test_score_is_bounded(self):
        for pattern in FORMATION_PATTERNS:
            wild = FormationCandidate(4, 500, 90000, 2000, 400, ("ZZZ",))
            assert 0.0 <= score_formation_match(pattern, wild).score <= 1.0


class TestDetectFormationPattern:
    """Tests for detect_formation_pattern."""

    def test_close_pair_is_tanker_receiver(self, close_pair):
        match = detect_formation_pattern(close_pair)

        assert match.pattern.id == "tanker_receiver"
        assert match.score == pytest.approx(0.7917, abs=1e-3)
        assert match.all_scores[0][0] == "tanker_receiver"

    def test_all_scores_are_ranked(self, close_pair):
        match = detect_formation_pattern(close_pair)
        scores = [score for _, score in match.all_scores]

        assert len(match.all_scores) == len(FORMATION_PATTERNS)
        assert scores == sorted(scores, reverse=True)
        assert match.all_scores[-1] == ("strike_package", 0.0)

    def test_below_threshold(self, close_pair):
        match = detect_formation_pattern(close_pair, threshold=0.9)

        assert match.pattern is None
        assert match.score == pytest.approx(0.7917, abs=1e-3)
        assert len(match.all_scores) == len(FORMATION_PATTERNS)

    def test_no_template_fits(self):
        match = detect_formation_pattern(FormationCandidate(30, 1, 0, 0, 0))

        assert match.pattern is None
        assert match.score == 0.0
        assert match.factors == {}

    def test_first_template_wins_ties(self, close_pair):
        tanker = get_formation_pattern("tanker_receiver")
        match = detect_formation_pattern(close_pair, patterns=[tanker, tanker])
        assert match.pattern is tanker

    def test_to_dict(self, close_pair):
        data = detect_formation_pattern(close_pair).to_dict()

        assert data["pattern_id"] == "tanker_receiver"
        assert data["all_scores"][0]["pattern_id"] == "tanker_receiver"


class TestDetectFormationPatterns:
    """Tests for batch matching."""

    def test_preserves_order(self, close_pair):
        no_fit = FormationCandidate(30, 1, 0, 0, 0)
        matches = detect_formation_patterns([close_pair, no_fit, close_pair], max_workers=2)

        assert [m.pattern.id if m.pattern else None for m in matches] == [
            "tanker_receiver", None, "tanker_receiver",
        ]

    def test_empty_batch(self):
        assert detect_formation_patterns([]) == []


class TestFormationMatcher:
    """Tests for FormationMatcher class."""

    def test_match_group(self, refuelling_pair):
        assessment = FormationMatcher(Config()).match_group(refuelling_pair)

        assert assessment.pattern.id == "tanker_receiver"
        assert assessment.score > 0.95
        assert assessment.threat_level == "medium"
        assert assessment.candidate.aircraft_count == 2

    def test_single_aircraft(self, refuelling_pair):
        assert FormationMatcher(Config()).match_group(refuelling_pair[:1]) is None

    def test_threshold_from_config(self, refuelling_pair):
        config = Config()
        config.set("formations.match_threshold", 1.0)
        assert FormationMatcher(config).match_group(refuelling_pair) is None

    def test_match_groups(self, refuelling_pair):
        results = FormationMatcher(Config()).match_groups([refuelling_pair, refuelling_pair[:1]])

        assert results[0].pattern.id == "tanker_receiver"
        assert results[1] is None

    def test_match_candidates(self, close_pair):
        matches = FormationMatcher(Config()).match_candidates([close_pair])
        assert matches[0].pattern.id == "tanker_receiver"

    def test_assessment_to_dict(self, refuelling_pair):
        data = FormationMatcher(Config()).match_group(refuelling_pair).to_dict()

        assert data["pattern_name"] == "Tanker-Receiver"
        assert data["candidate"]["aircraft_types"] == ["KC135", "F16C"]
        assert "tactical_significance" in data

    def test_assessment_carries_geometry(self, refuelling_pair):
        geometry = FormationMatcher(Config()).match_group(refuelling_pair).geometry

        assert geometry.center_lat == pytest.approx(50.0, abs=1e-4)
        assert geometry.center_lon == pytest.approx(10.0025)
        assert geometry.spread_nm == pytest.approx(0.0965, abs=0.001)
        assert geometry.heading == pytest.approx(91.0)
        assert (geometry.altitude_band_low, geometry.altitude_band_high) == (25000, 25100)

    def test_geometry_in_dict(self, refuelling_pair):
        data = FormationMatcher(Config()).match_group(refuelling_pair).to_dict()
        assert data["geometry"]["spread_nm"] == pytest.approx(0.0965, abs=0.001)
