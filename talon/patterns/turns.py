"""
Turn and Heading-Reversal Analysis

Derives heading behaviour from consecutive positions:

1. Heading reversals - places where the direction of travel swings by
   roughly 180°, measured between windowed mean headings so that a single
   noisy sample cannot register as a turn
2. Angular velocity - signed turn rate, dominant rotation direction and how
   uniform the turn rate is
"""

from dataclasses import dataclass
from math import sqrt
from typing import Any, Dict, List, Sequence

from ..config import Constants, Settings
from ..geometry import TrackPoint, bearing, circular_mean, normalize_angle_delta
from .constants import CLOCKWISE, COUNTERCLOCKWISE, INDETERMINATE


@dataclass(frozen=True)
class HeadingReversal:
    """A ~180° change in direction of travel."""

    index: int
    point: TrackPoint
    heading_before: float
    heading_after: float
    angle_delta: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert reversal to dictionary for serialization."""
        return {
            "index": self.index,
            "latitude": self.point.latitude,
            "longitude": self.point.longitude,
            "heading_before": self.heading_before,
            "heading_after": self.heading_after,
            "angle_delta": self.angle_delta,
        }


@dataclass(frozen=True)
class AngularVelocityResult:
    """Turn-rate summary of a track."""

    average_velocity: float  # degrees per minute, unsigned
    direction: str  # clockwise | counterclockwise | indeterminate
    consistency: float  # 0-1, 1 is a perfectly uniform turn rate

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "average_velocity": self.average_velocity,
            "direction": self.direction,
            "consistency": self.consistency,
        }


NO_ROTATION = AngularVelocityResult(
    average_velocity=0.0, direction=INDETERMINATE, consistency=0.0
)


def segment_bearings(points: Sequence[TrackPoint]) -> List[float]:
    """Bearing of each segment between consecutive points."""
    return [bearing(points[i], points[i + 1]) for i in range(len(points) - 1)]


def find_heading_reversals(
    points: Sequence[TrackPoint],
    min_angle: float = Settings.REVERSAL_MIN_ANGLE_DEG,
    max_angle: float = Settings.REVERSAL_MAX_ANGLE_DEG,
    window_size: int = Settings.REVERSAL_WINDOW_SIZE,
) -> List[HeadingReversal]:
    """
    Find heading reversals (180° turns) in a track.

    For every segment index i the mean heading of the ``window_size``
    segments before i is compared with the mean heading of the
    ``window_size`` segments starting at i. A sharp turn falls inside
    several neighbouring windows, so each run of adjacent hits is reported
    once, at its strongest index.

    Args:
        points: Time-ordered track
        min_angle: Smallest absolute change that counts as a reversal
        max_angle: Largest absolute change that counts as a reversal
        window_size: Segments averaged on each side

    Returns:
        Reversals in track order (possibly empty)
    """
    if len(points) < 2 * window_size + 1:
        return []

    headings = segment_bearings(points)
    hits: List[HeadingReversal] = []

    for i in range(window_size, len(headings) - window_size + 1):
        heading_before = circular_mean(headings[i - window_size : i])
        heading_after = circular_mean(headings[i : i + window_size])

        delta = abs(normalize_angle_delta(heading_after - heading_before))

        if min_angle <= delta <= max_angle:
            hits.append(
                HeadingReversal(
                    index=i,
                    point=points[i],
                    heading_before=heading_before,
                    heading_after=heading_after,
                    angle_delta=delta,
                )
            )

    return _strongest_per_turn(hits)


def _strongest_per_turn(hits: List[HeadingReversal]) -> List[HeadingReversal]:
    runs: List[List[HeadingReversal]] = []
    for hit in hits:
        if runs and hit.index == runs[-1][-1].index + 1:
            runs[-1].append(hit)
        else:
            runs.append([hit])

    reversals: List[HeadingReversal] = []
    for run in runs:
        middle = (run[0].index + run[-1].index) / 2
        # Equal deltas (to float noise) resolve to the index nearest the run's middle
        reversals.append(
            max(run, key=lambda r: (round(r.angle_delta, 6), -abs(r.index - middle)))
        )
    return reversals


def _rotation_direction(changes: Sequence[float], ratio: float) -> str:
    positive = sum(1 for c in changes if c > 0)
    negative = sum(1 for c in changes if c < 0)

    if positive > negative * ratio:
        return CLOCKWISE
    if negative > positive * ratio:
        return COUNTERCLOCKWISE
    return INDETERMINATE


def calculate_angular_velocity(
    points: Sequence[TrackPoint],
    dominance_ratio: float = Settings.DIRECTION_DOMINANCE_RATIO,
) -> AngularVelocityResult:
    """
    Calculate angular velocity (turn rate) from a position track.

    Each consecutive triple of points contributes the signed change between
    the bearing of its first and second segment, paired with the elapsed
    time of the second segment. Positive changes are clockwise turns.

    Args:
        points: Time-ordered track; every point needs a timestamp
        dominance_ratio: How many times more frequent one turn sign must be
                        than the other to decide a direction

    Returns:
        AngularVelocityResult; all zero and indeterminate when the track is
        too short or lacks timestamps
    """
    if len(points) < 3 or any(p.timestamp is None for p in points):
        return NO_ROTATION

    headings = segment_bearings(points)

    heading_changes: List[float] = []
    instant_velocities: List[float] = []
    total_time = 0.0

    for i in range(1, len(headings)):
        delta = normalize_angle_delta(headings[i] - headings[i - 1])
        heading_changes.append(delta)

        elapsed = (points[i + 1].timestamp - points[i].timestamp) / Constants.SECONDS_PER_MINUTE
        if elapsed > 0:
            total_time += elapsed
            instant_velocities.append(delta / elapsed)

    net_change = sum(heading_changes)
    average_velocity = abs(net_change / total_time) if total_time > 0 else 0.0
    direction = _rotation_direction(heading_changes, dominance_ratio)

    if len(instant_velocities) < 2:
        return AngularVelocityResult(average_velocity, direction, 0.0)

    mean = sum(instant_velocities) / len(instant_velocities)
    if mean == 0:
        return AngularVelocityResult(average_velocity, direction, 0.0)

    variance = sum((v - mean) ** 2 for v in instant_velocities) / len(instant_velocities)
    consistency = max(0.0, min(1.0, 1 - sqrt(variance) / abs(mean)))

    return AngularVelocityResult(average_velocity, direction, consistency)
