"""
Flight Pattern Detection Service
Labels a single aircraft's track as an orbit, racetrack, holding pattern or
tanker track.

Each pattern has its own detector built from the geometry primitives. All
detectors run on the same track; the results are ranked by confidence and
the strongest becomes the primary pattern.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from math import pi, sqrt
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..config import Config
from ..geometry import (
    TrackPoint,
    bearing,
    centroid,
    circular_mean,
    distance,
    normalize_angle_delta,
    path_length,
)
from . import constants as c
from .area import check_area_confinement
from .circle_fit import fit_circle
from .racetrack import detect_racetrack_params
from .turns import calculate_angular_velocity, find_heading_reversals

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternDetection:
    """One detected flight pattern."""

    pattern_type: str
    confidence: float
    center_lat: Optional[float]
    center_lon: Optional[float]
    radius_nm: Optional[float]
    duration_minutes: float
    start_time: datetime
    end_time: datetime
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert detection to dictionary for serialization."""
        return {
            "pattern_type": self.pattern_type,
            "confidence": self.confidence,
            "center_lat": self.center_lat,
            "center_lon": self.center_lon,
            "radius_nm": self.radius_nm,
            "duration_minutes": self.duration_minutes,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class PatternDetectionResult:
    """All patterns found in a track, strongest first."""

    detected: bool
    patterns: List[PatternDetection] = field(default_factory=list)
    primary_pattern: Optional[PatternDetection] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "detected": self.detected,
            "patterns": [p.to_dict() for p in self.patterns],
            "primary_pattern": (
                self.primary_pattern.to_dict() if self.primary_pattern else None
            ),
        }


NOTHING_DETECTED = PatternDetectionResult(detected=False)


@dataclass(frozen=True)
class _Window:
    """Timing shared by every detector for one track."""

    start_time: datetime
    end_time: datetime
    duration_minutes: float


class PatternDetector:
    """
    Detects single-aircraft flight patterns from a position track.

    Thresholds come from the ``patterns`` section of the runtime
    configuration, so they can be tuned per deployment without code changes.

    Example:
        >>> detector = PatternDetector(Config())
        >>> result = detector.detect_patterns(track)
        >>> if result.detected:
        ...     print(result.primary_pattern.pattern_type)
    """

    def __init__(self, config: Optional[Config] = None) -> None:
        """
        Initialize pattern detector.

        Args:
            config: Runtime configuration (defaults if None)
        """
        self.config = config or Config()

    def _setting(self, key: str) -> float:
        value = self.config.get(f"patterns.{key}")
        if value is None:
            raise KeyError(f"Missing pattern setting 'patterns.{key}'")
        return float(value)

    def detect_patterns(self, points: Sequence[TrackPoint]) -> PatternDetectionResult:
        """
        Analyze a track and detect all flight patterns.

        The track must already be in ascending time order and carry
        timestamps on its first and last point.

        Args:
            points: Time-ordered track

        Returns:
            PatternDetectionResult with patterns sorted by confidence
        """
        if len(points) < self._setting("general.min_positions"):
            return NOTHING_DETECTED

        first, last = points[0].timestamp, points[-1].timestamp
        if first is None or last is None:
            logger.debug("Track has no timestamps, skipping pattern detection")
            return NOTHING_DETECTED

        duration_minutes = (last - first) / 60.0
        if duration_minutes < self._setting("general.min_duration_minutes"):
            return NOTHING_DETECTED

        window = _Window(
            start_time=datetime.fromtimestamp(first, tz=timezone.utc),
            end_time=datetime.fromtimestamp(last, tz=timezone.utc),
            duration_minutes=duration_minutes,
        )

        detectors: Dict[str, Callable[..., Optional[PatternDetection]]] = {
            c.PATTERN_ORBIT: self._detect_orbit,
            c.PATTERN_RACETRACK: self._detect_racetrack,
            c.PATTERN_HOLDING: self._detect_holding,
            c.PATTERN_TANKER_TRACK: self._detect_tanker_track,
        }

        patterns: List[PatternDetection] = []
        for name, detect in detectors.items():
            try:
                detection = detect(points, window)
            except (ValueError, ArithmeticError) as e:
                logger.warning("%s detection failed: %s", name, e)
                continue
            if detection is not None:
                logger.debug("Detected %s (confidence %.2f)", name, detection.confidence)
                patterns.append(detection)

        patterns.sort(key=lambda p: p.confidence, reverse=True)

        return PatternDetectionResult(
            detected=bool(patterns),
            patterns=patterns,
            primary_pattern=patterns[0] if patterns else None,
        )

    def _detect_orbit(
        self, points: Sequence[TrackPoint], window: _Window
    ) -> Optional[PatternDetection]:
        """Detect a circular orbit."""
        if len(points) < self._setting("orbit.min_positions"):
            return None

        fit = fit_circle(points)
        if (
            fit.confidence < self._setting("orbit.min_confidence")
            or fit.radius < self._setting("orbit.min_radius_nm")
            or fit.radius > self._setting("orbit.max_radius_nm")
        ):
            return None

        rotation = calculate_angular_velocity(points)
        if (
            rotation.consistency < self._setting("orbit.min_consistency")
            or rotation.direction == c.INDETERMINATE
        ):
            return None

        revolutions = path_length(points) / (2 * pi * fit.radius)
        if revolutions < self._setting("orbit.min_revolutions"):
            return None

        boost = min(1.0, revolutions / c.ORBIT_FULL_BOOST_REVOLUTIONS) * c.ORBIT_REVOLUTION_BOOST
        confidence = min(1.0, fit.confidence + boost)

        return PatternDetection(
            pattern_type=c.PATTERN_ORBIT,
            confidence=confidence,
            center_lat=fit.center.latitude,
            center_lon=fit.center.longitude,
            radius_nm=fit.radius,
            duration_minutes=window.duration_minutes,
            start_time=window.start_time,
            end_time=window.end_time,
            metadata={
                "fitted_radius_nm": fit.radius,
                "angular_velocity_deg_per_min": rotation.average_velocity,
                "direction": rotation.direction,
                "num_revolutions": round(revolutions, 1),
                "center_precision": fit.confidence,
                "fit_error_nm": fit.error,
            },
        )

    def _detect_racetrack(
        self, points: Sequence[TrackPoint], window: _Window
    ) -> Optional[PatternDetection]:
        """Detect a racetrack (two opposite legs)."""
        if len(points) < self._setting("racetrack.min_positions"):
            return None

        params = detect_racetrack_params(points)
        if params is None or not params.detected:
            return None

        center = centroid(points)
        confinement = check_area_confinement(points)

        return PatternDetection(
            pattern_type=c.PATTERN_RACETRACK,
            confidence=params.confidence,
            center_lat=center.latitude,
            center_lon=center.longitude,
            radius_nm=params.leg_length / 2,
            duration_minutes=window.duration_minutes,
            start_time=window.start_time,
            end_time=window.end_time,
            metadata={
                "leg_length_nm": params.leg_length,
                "leg_width_nm": params.leg_width,
                "heading_leg1": round(params.heading1),
                "heading_leg2": round(params.heading2),
                "num_legs": params.num_legs,
                "bounding_box_area_nm2": confinement.area,
            },
        )

    def _detect_holding(
        self, points: Sequence[TrackPoint], window: _Window
    ) -> Optional[PatternDetection]:
        """Detect a holding pattern (confined area with repeated turns)."""
        if len(points) < self._setting("holding.min_positions"):
            return None

        max_area = self._setting("holding.max_area_nm2")
        confinement = check_area_confinement(points, max_area)
        if not confinement.confined:
            return None

        reversals = find_heading_reversals(points)
        if len(reversals) < 2:
            return None

        confinement_score = 1 - confinement.area / max_area if max_area > 0 else 0.0
        reversal_score = min(1.0, len(reversals) / c.HOLDING_FULL_CREDIT_REVERSALS)
        confidence = (
            confinement_score * c.HOLDING_CONFINEMENT_WEIGHT
            + reversal_score * c.HOLDING_REVERSAL_WEIGHT
        )

        if confidence < self._setting("holding.min_confidence"):
            return None

        center = centroid(points)
        inbound = circular_mean(r.heading_before for r in reversals)
        turn_deltas = [
            normalize_angle_delta(r.heading_after - r.heading_before) for r in reversals
        ]
        turn_direction = "right" if sum(turn_deltas) / len(turn_deltas) > 0 else "left"

        return PatternDetection(
            pattern_type=c.PATTERN_HOLDING,
            confidence=confidence,
            center_lat=center.latitude,
            center_lon=center.longitude,
            radius_nm=max(confinement.bounding_box.width, confinement.bounding_box.height) / 2,
            duration_minutes=window.duration_minutes,
            start_time=window.start_time,
            end_time=window.end_time,
            metadata={
                "hold_point": {"lat": center.latitude, "lon": center.longitude},
                "inbound_heading": round(inbound),
                "turn_direction": turn_direction,
                "num_turns": len(reversals),
                "area_nm2": confinement.area,
                "altitude_variation_ft": altitude_variation(points),
            },
        )

    def _detect_tanker_track(
        self, points: Sequence[TrackPoint], window: _Window
    ) -> Optional[PatternDetection]:
        """Detect a tanker track (long, level, mostly straight legs)."""
        if len(points) < self._setting("tanker_track.min_positions"):
            return None
        if window.duration_minutes < self._setting("tanker_track.min_duration_minutes"):
            return None

        altitudes = [p.altitude for p in points if p.altitude is not None]
        if len(altitudes) < c.TANKER_MIN_ALTITUDE_SAMPLES:
            return None

        avg_altitude = sum(altitudes) / len(altitudes)
        altitude_stddev = sqrt(
            sum((a - avg_altitude) ** 2 for a in altitudes) / len(altitudes)
        )

        if not (
            self._setting("tanker_track.min_altitude_ft")
            <= avg_altitude
            <= self._setting("tanker_track.max_altitude_ft")
        ):
            return None
        if altitude_stddev > self._setting("tanker_track.max_altitude_stddev_ft"):
            return None

        total_distance = path_length(points)
        if not (
            self._setting("tanker_track.min_length_nm")
            <= total_distance
            <= self._setting("tanker_track.max_length_nm")
        ):
            return None

        straightness = distance(points[0], points[-1]) / total_distance
        reversals = find_heading_reversals(points)
        has_end_reversals = len(reversals) >= 1

        confidence = 0.0
        if altitude_stddev < c.TANKER_STABLE_ALTITUDE_FT:
            confidence += 0.3
        elif altitude_stddev < c.TANKER_STEADY_ALTITUDE_FT:
            confidence += 0.2
        else:
            confidence += 0.1
        confidence += 0.2 if total_distance > c.TANKER_LONG_TRACK_NM else 0.1
        confidence += 0.2 if window.duration_minutes > c.TANKER_LONG_DURATION_MIN else 0.1
        if has_end_reversals:
            confidence += 0.2
        elif straightness > c.TANKER_STRAIGHTNESS:
            confidence += 0.15
        band_low, band_high = c.TANKER_REFUEL_BAND_FT
        if band_low <= avg_altitude <= band_high:
            confidence += 0.1
        confidence = min(1.0, confidence)

        if confidence < self._setting("tanker_track.min_confidence"):
            return None

        center = centroid(points)

        return PatternDetection(
            pattern_type=c.PATTERN_TANKER_TRACK,
            confidence=confidence,
            center_lat=center.latitude,
            center_lon=center.longitude,
            radius_nm=total_distance / 2,
            duration_minutes=window.duration_minutes,
            start_time=window.start_time,
            end_time=window.end_time,
            metadata={
                "track_heading": round(bearing(points[0], points[-1])),
                "track_length_nm": round(total_distance),
                "altitude_fl": round(avg_altitude / 100),
                "refueling_altitude_band": [
                    round((avg_altitude - altitude_stddev) / 100),
                    round((avg_altitude + altitude_stddev) / 100),
                ],
                "straightness": straightness,
                "num_legs": len(reversals) + 1 if has_end_reversals else 1,
            },
        )


def altitude_variation(points: Sequence[TrackPoint]) -> float:
    """Spread between the highest and lowest reported altitude, in feet."""
    altitudes = [p.altitude for p in points if p.altitude is not None]
    if len(altitudes) < 2:
        return 0.0
    return max(altitudes) - min(altitudes)
