"""
Racetrack Pattern Detection

A racetrack is a holding pattern of two parallel, opposite-direction legs
joined by turns. Detection composes the reversal analyzer and the area
check:

1. Find heading reversals along the track
2. Split the headings either side of each reversal into two clusters
   (same direction as the first leg, and roughly opposite to it)
3. Score how close to 180° apart the clusters are and how evenly spaced
   the reversals are
"""

from dataclasses import dataclass
from math import sqrt
from typing import Any, Dict, List, Optional, Sequence

from ..config import Settings
from ..geometry import TrackPoint, circular_mean, distance, heading_difference
from .area import check_area_confinement
from .turns import HeadingReversal, find_heading_reversals


@dataclass(frozen=True)
class RacetrackParams:
    """Geometry and confidence of a detected racetrack."""

    detected: bool
    leg_length: float  # nm, mean distance between consecutive reversals
    leg_width: float  # nm, smaller bounding-box dimension
    heading1: float
    heading2: float
    num_legs: int
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to dictionary for serialization."""
        return {
            "detected": self.detected,
            "leg_length_nm": self.leg_length,
            "leg_width_nm": self.leg_width,
            "heading1": self.heading1,
            "heading2": self.heading2,
            "num_legs": self.num_legs,
            "confidence": self.confidence,
        }


def _heading_confidence(heading_diff: float) -> float:
    low, high = Settings.RACETRACK_HEADING_BAND_DEG
    if low <= heading_diff <= high:
        return 1.0
    return max(0.0, 1 - abs(heading_diff - 180) / Settings.RACETRACK_HEADING_FALLOFF_DEG)


def _leg_consistency(leg_lengths: List[float]) -> float:
    mean = sum(leg_lengths) / len(leg_lengths)
    if mean <= 0:
        return 0.0
    variance = sum((length - mean) ** 2 for length in leg_lengths) / len(leg_lengths)
    return max(0.0, 1 - sqrt(variance) / mean)


def detect_racetrack_params(
    points: Sequence[TrackPoint],
    reversals: Optional[List[HeadingReversal]] = None,
) -> Optional[RacetrackParams]:
    """
    Detect racetrack pattern parameters.

    Args:
        points: Time-ordered track
        reversals: Precomputed reversals for ``points`` (computed if omitted)

    Returns:
        RacetrackParams, or None when the track has too few reversals or no
        opposite-direction leg
    """
    if reversals is None:
        reversals = find_heading_reversals(points)

    if len(reversals) < Settings.RACETRACK_MIN_REVERSALS:
        return None

    headings: List[float] = []
    for r in reversals:
        headings.append(r.heading_before)
        headings.append(r.heading_after)

    reference = reversals[0].heading_before
    same_leg = [
        h
        for h in headings
        if heading_difference(reference, h) < Settings.RACETRACK_SAME_LEG_TOLERANCE_DEG
    ]
    opposite_leg = [
        h
        for h in headings
        if heading_difference(reference, h) >= Settings.RACETRACK_OPPOSITE_LEG_MIN_DEG
    ]

    if len(opposite_leg) < Settings.RACETRACK_MIN_OPPOSITE_HEADINGS:
        return None

    heading1 = circular_mean(same_leg)
    heading2 = circular_mean(opposite_leg)

    leg_lengths = [
        distance(reversals[i - 1].point, reversals[i].point)
        for i in range(1, len(reversals))
    ]
    leg_length = sum(leg_lengths) / len(leg_lengths)

    box = check_area_confinement(points).bounding_box

    confidence = (
        Settings.RACETRACK_HEADING_WEIGHT
        * _heading_confidence(heading_difference(heading1, heading2))
        + Settings.RACETRACK_LEG_WEIGHT * _leg_consistency(leg_lengths)
    )

    return RacetrackParams(
        detected=confidence > Settings.RACETRACK_DETECTION_THRESHOLD,
        leg_length=leg_length,
        leg_width=min(box.width, box.height),
        heading1=heading1,
        heading2=heading2,
        num_legs=len(reversals) + 1,
        confidence=confidence,
    )
