"""
Formation Matching

Scores a candidate group of aircraft against every template in the
formation library using a weighted multi-factor model:

1. Aircraft count must fall inside the template's bounds (hard gate)
2. Spacing, altitude and speed spread score 1.0 inside the declared range
   and decay linearly outside it
3. Heading agreement scores by the spread of simultaneous headings
4. Aircraft types score by fuzzy combination matching
5. The weighted mean of the factors is the template score; the best
   template above the match threshold is the detected formation
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..config import Config, Settings
from .candidate import (
    AircraftState,
    FormationCandidate,
    FormationGeometry,
    build_formation_candidate,
    calculate_formation_geometry,
)
from .library import FORMATION_PATTERNS, FormationPattern, Range, match_formation_types

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FormationScore:
    """Score of one candidate against one template."""

    score: float
    factors: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class FormationMatch:
    """Best template for a candidate plus every template's score."""

    pattern: Optional[FormationPattern]
    score: float
    factors: Dict[str, float]
    all_scores: List[Tuple[str, float]]

    def to_dict(self) -> Dict[str, Any]:
        """Convert match to dictionary for serialization."""
        return {
            "pattern_id": self.pattern.id if self.pattern else None,
            "pattern_name": self.pattern.name if self.pattern else None,
            "score": self.score,
            "factors": dict(self.factors),
            "all_scores": [
                {"pattern_id": pattern_id, "score": score}
                for pattern_id, score in self.all_scores
            ],
        }


@dataclass(frozen=True)
class FormationAssessment:
    """A matched formation with its tactical context."""

    pattern: FormationPattern
    score: float
    factors: Dict[str, float]
    candidate: FormationCandidate
    geometry: Optional[FormationGeometry] = None

    @property
    def threat_level(self) -> str:
        return self.pattern.threat_level

    @property
    def tactical_significance(self) -> str:
        return self.pattern.tactical_significance

    def to_dict(self) -> Dict[str, Any]:
        """Convert assessment to dictionary for serialization."""
        return {
            "pattern_id": self.pattern.id,
            "pattern_name": self.pattern.name,
            "score": self.score,
            "factors": dict(self.factors),
            "threat_level": self.threat_level,
            "tactical_significance": self.tactical_significance,
            "candidate": self.candidate.to_dict(),
            "geometry": self.geometry.to_dict() if self.geometry else None,
        }


def _range_score(value: float, bounds: Range, min_width: float = 0.0) -> float:
    """1.0 inside bounds, decaying to 0 as the deviation reaches the range width."""
    low, high = bounds
    if low <= value <= high:
        return 1.0

    deviation = low - value if value < low else value - high
    width = max(high - low, min_width)
    if width <= 0:
        return 0.0
    return max(0.0, 1 - deviation / width)


def score_formation_match(
    pattern: FormationPattern, candidate: FormationCandidate
) -> FormationScore:
    """
    Score a potential formation against a pattern.

    Args:
        pattern: Template from the formation library
        candidate: Group metrics

    Returns:
        FormationScore; exactly 0 when the aircraft count is out of bounds
    """
    if not pattern.min_aircraft <= candidate.aircraft_count <= pattern.max_aircraft:
        return FormationScore(score=0.0, factors={"aircraft_count": 0.0})

    factors: Dict[str, float] = {
        "spacing": _range_score(candidate.avg_spacing_nm, pattern.spacing_nm),
        "altitude": _range_score(
            candidate.max_altitude_diff,
            pattern.altitude_diff_ft,
            Settings.ALTITUDE_RANGE_FLOOR_FT,
        ),
        "speed": _range_score(
            candidate.max_speed_diff,
            pattern.speed_diff_kt,
            Settings.SPEED_RANGE_FLOOR_KT,
        ),
        "heading": max(
            0.0, 1 - candidate.heading_variance / Settings.HEADING_VARIANCE_LIMIT_DEG
        ),
        "type_match": match_formation_types(candidate.aircraft_types, pattern).confidence,
    }

    total_weight = 0.0
    weighted_sum = 0.0
    for name, weight in pattern.weights.items():
        if name in factors:
            weighted_sum += factors[name] * weight
            total_weight += weight

    score = weighted_sum / total_weight if total_weight > 0 else 0.0

    return FormationScore(score=max(0.0, min(1.0, score)), factors=factors)


def detect_formation_pattern(
    candidate: FormationCandidate,
    patterns: Sequence[FormationPattern] = FORMATION_PATTERNS,
    threshold: float = Settings.FORMATION_MATCH_THRESHOLD,
) -> FormationMatch:
    """
    Detect the best matching formation pattern for a group of aircraft.

    The first-listed template wins exact ties. ``all_scores`` always holds
    every template, ranked by score.

    Args:
        candidate: Group metrics
        patterns: Templates to score against (the library by default)
        threshold: Best score below this reports no pattern

    Returns:
        FormationMatch
    """
    best_pattern: Optional[FormationPattern] = None
    best_score = 0.0
    best_factors: Dict[str, float] = {}
    all_scores: List[Tuple[str, float]] = []

    for pattern in patterns:
        result = score_formation_match(pattern, candidate)
        all_scores.append((pattern.id, result.score))

        if result.score > best_score:
            best_score = result.score
            best_pattern = pattern
            best_factors = result.factors

    all_scores.sort(key=lambda item: item[1], reverse=True)

    if best_score < threshold:
        best_pattern = None

    return FormationMatch(
        pattern=best_pattern,
        score=best_score,
        factors=best_factors,
        all_scores=all_scores,
    )


def detect_formation_patterns(
    candidates: Sequence[FormationCandidate],
    threshold: float = Settings.FORMATION_MATCH_THRESHOLD,
    max_workers: Optional[int] = None,
) -> List[FormationMatch]:
    """
    Match many candidate groups in parallel.

    Args:
        candidates: Independent groups
        threshold: Match threshold passed to ``detect_formation_pattern``
        max_workers: Thread pool size (executor default if None)

    Returns:
        One FormationMatch per candidate, in input order
    """
    if not candidates:
        return []

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(
            executor.map(
                lambda candidate: detect_formation_pattern(candidate, threshold=threshold),
                candidates,
            )
        )


class FormationMatcher:
    """
    Matches observed aircraft groups against the formation library.

    Example:
        >>> matcher = FormationMatcher(Config())
        >>> assessment = matcher.match_group(aircraft_states)
        >>> if assessment:
        ...     print(assessment.pattern.name, assessment.threat_level)
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        """
        Initialize formation matcher.

        Args:
            config: Runtime configuration (defaults if None)
        """
        self.config = config or Config()

    def match_group(self, aircraft: Sequence[AircraftState]) -> Optional[FormationAssessment]:
        """
        Assess one group of aircraft.

        Args:
            aircraft: Aircraft observed together

        Returns:
            FormationAssessment, or None for fewer than two aircraft or no
            template above the match threshold
        """
        if len(aircraft) < 2:
            return None

        candidate = build_formation_candidate(aircraft)
        match = detect_formation_pattern(candidate, threshold=self.config.match_threshold)
        return self._assess(candidate, match, calculate_formation_geometry(aircraft))

    def match_candidates(
        self, candidates: Sequence[FormationCandidate]
    ) -> List[FormationMatch]:
        """Match precomputed candidates on a worker pool."""
        logger.debug("Scoring %d formation candidates", len(candidates))
        return detect_formation_patterns(
            candidates,
            threshold=self.config.match_threshold,
            max_workers=self.config.max_workers,
        )

    def match_groups(
        self, groups: Sequence[Sequence[AircraftState]]
    ) -> List[Optional[FormationAssessment]]:
        """Assess many groups on a worker pool, preserving order."""
        if not groups:
            return []

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            return list(executor.map(self.match_group, groups))

    def _assess(
        self,
        candidate: FormationCandidate,
        match: FormationMatch,
        geometry: Optional[FormationGeometry] = None,
    ) -> Optional[FormationAssessment]:
        if match.pattern is None:
            logger.debug(
                "No formation above threshold (best score %.2f)", match.score
            )
            return None

        logger.info(
            "Matched %s formation (score %.2f, threat %s)",
            match.pattern.id,
            match.score,
            match.pattern.threat_level,
        )
        return FormationAssessment(
            pattern=match.pattern,
            score=match.score,
            factors=match.factors,
            candidate=candidate,
            geometry=geometry,
        )
