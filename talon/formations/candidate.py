"""
Formation Candidates

Summarizes a group of simultaneously observed aircraft into the metrics the
formation matcher scores: spacing, altitude and speed spread, heading
agreement and the aircraft types present. Deciding which aircraft belong
together is left to the caller.
"""

from dataclasses import dataclass, field
from itertools import combinations
from math import sqrt
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..errors import InvalidInputError
from ..geometry import TrackPoint, centroid, circular_mean, distance, heading_difference


@dataclass(frozen=True)
class AircraftState:
    """Latest known state of one aircraft in a group."""

    aircraft_id: str
    latitude: float
    longitude: float
    altitude: Optional[float] = None  # feet
    ground_speed: Optional[float] = None  # knots
    track: Optional[float] = None  # degrees
    type_code: Optional[str] = None

    @property
    def position(self) -> TrackPoint:
        """Position as a TrackPoint."""
        return TrackPoint(
            latitude=self.latitude,
            longitude=self.longitude,
            heading=self.track,
            altitude=self.altitude,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AircraftState":
        """Build a state from a mapping (accepts ``lat``/``lon`` shorthands)."""
        try:
            aircraft_id = data.get("aircraft_id", data.get("id"))
            lat = data["latitude"] if "latitude" in data else data["lat"]
            lon = data["longitude"] if "longitude" in data else data["lon"]
        except KeyError as e:
            raise InvalidInputError(f"Aircraft state is missing {e}") from e

        def optional(key: str, *aliases: str) -> Optional[float]:
            for k in (key, *aliases):
                if data.get(k) is not None:
                    return float(data[k])
            return None

        return cls(
            aircraft_id=str(aircraft_id) if aircraft_id is not None else "",
            latitude=float(lat),
            longitude=float(lon),
            altitude=optional("altitude"),
            ground_speed=optional("ground_speed", "speed"),
            track=optional("track", "heading"),
            type_code=data.get("type_code") or data.get("type"),
        )


@dataclass(frozen=True)
class FormationCandidate:
    """Scoring input describing one group of aircraft."""

    aircraft_count: int
    avg_spacing_nm: float
    max_altitude_diff: float  # feet
    max_speed_diff: float  # knots
    heading_variance: float  # degrees
    aircraft_types: Tuple[str, ...] = field(default=())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FormationCandidate":
        """Build a candidate from precomputed metrics."""
        return cls(
            aircraft_count=int(data["aircraft_count"]),
            avg_spacing_nm=float(data["avg_spacing_nm"]),
            max_altitude_diff=float(data["max_altitude_diff"]),
            max_speed_diff=float(data["max_speed_diff"]),
            heading_variance=float(data["heading_variance"]),
            aircraft_types=tuple(data.get("aircraft_types") or ()),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert candidate to dictionary for serialization."""
        return {
            "aircraft_count": self.aircraft_count,
            "avg_spacing_nm": self.avg_spacing_nm,
            "max_altitude_diff": self.max_altitude_diff,
            "max_speed_diff": self.max_speed_diff,
            "heading_variance": self.heading_variance,
            "aircraft_types": list(self.aircraft_types),
        }


@dataclass(frozen=True)
class FormationGeometry:
    """Spatial summary of a group of aircraft."""

    center_lat: float
    center_lon: float
    spread_nm: float  # farthest aircraft from the center
    heading: Optional[float]
    altitude_band_low: Optional[float]
    altitude_band_high: Optional[float]

    def to_dict(self) -> Dict[str, Any]:
        """Convert geometry to dictionary for serialization."""
        return {
            "center_lat": self.center_lat,
            "center_lon": self.center_lon,
            "spread_nm": self.spread_nm,
            "heading": self.heading,
            "altitude_band_low": self.altitude_band_low,
            "altitude_band_high": self.altitude_band_high,
        }


def calculate_formation_geometry(aircraft: Sequence[AircraftState]) -> FormationGeometry:
    """
    Calculate formation geometry from aircraft positions.

    Raises:
        InvalidInputError: If aircraft is empty
    """
    positions = [a.position for a in aircraft]
    center = centroid(positions)
    spread = max(distance(center, p) for p in positions)

    headings = [a.track for a in aircraft if a.track is not None]
    altitudes = [a.altitude for a in aircraft if a.altitude is not None]

    return FormationGeometry(
        center_lat=center.latitude,
        center_lon=center.longitude,
        spread_nm=spread,
        heading=circular_mean(headings) if headings else None,
        altitude_band_low=min(altitudes) if altitudes else None,
        altitude_band_high=max(altitudes) if altitudes else None,
    )


def heading_spread(headings: Sequence[float]) -> float:
    """
    RMS angular deviation of headings from their circular mean.

    Returns:
        Spread in degrees; 0 for fewer than two headings
    """
    if len(headings) < 2:
        return 0.0
    mean = circular_mean(headings)
    return sqrt(sum(heading_difference(mean, h) ** 2 for h in headings) / len(headings))


def _max_difference(values: List[float]) -> float:
    return max(values) - min(values) if len(values) > 1 else 0.0


def build_formation_candidate(aircraft: Sequence[AircraftState]) -> FormationCandidate:
    """
    Summarize a group of aircraft for formation scoring.

    Args:
        aircraft: Aircraft observed together

    Returns:
        FormationCandidate with pairwise spacing, altitude/speed spread,
        heading variance and type codes
    """
    pairs = list(combinations(aircraft, 2))
    avg_spacing = (
        sum(distance(a.position, b.position) for a, b in pairs) / len(pairs)
        if pairs
        else 0.0
    )

    return FormationCandidate(
        aircraft_count=len(aircraft),
        avg_spacing_nm=avg_spacing,
        max_altitude_diff=_max_difference(
            [a.altitude for a in aircraft if a.altitude is not None]
        ),
        max_speed_diff=_max_difference(
            [a.ground_speed for a in aircraft if a.ground_speed is not None]
        ),
        heading_variance=heading_spread([a.track for a in aircraft if a.track is not None]),
        aircraft_types=tuple(a.type_code for a in aircraft if a.type_code),
    )
