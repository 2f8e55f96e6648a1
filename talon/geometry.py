"""
TALON Geometry Kernel

Spherical-earth geometry shared by every detector: great-circle distance,
initial bearing, angle normalization and centroids. All distances are in
nautical miles and derive from ``Constants.EARTH_RADIUS_NM``.
"""

from dataclasses import dataclass
from math import asin, atan2, cos, degrees, fmod, hypot, isfinite, radians, sin, sqrt
from typing import Any, Dict, Iterable, Optional, Sequence

from .config import Constants
from .errors import InvalidInputError
from .utils import validate_coordinates


@dataclass(frozen=True)
class TrackPoint:
    """
    A single aircraft position sample.

    Attributes:
        latitude: Degrees, -90..90
        longitude: Degrees, -180..180
        timestamp: Epoch seconds, if known
        heading: True track over ground in degrees, if reported
        altitude: Feet, if reported
    """

    latitude: float
    longitude: float
    timestamp: Optional[float] = None
    heading: Optional[float] = None
    altitude: Optional[float] = None

    def __post_init__(self) -> None:
        if not validate_coordinates(self.latitude, self.longitude):
            raise InvalidInputError(
                f"Invalid coordinates: ({self.latitude}, {self.longitude})"
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TrackPoint":
        """
        Build a point from a mapping.

        Accepts both the long (``latitude``/``longitude``) and short
        (``lat``/``lon``) key spellings; ``track`` is read as heading.
        """
        try:
            lat = data["latitude"] if "latitude" in data else data["lat"]
            lon = data["longitude"] if "longitude" in data else data["lon"]
        except KeyError as e:
            raise InvalidInputError(f"Position is missing coordinate {e}") from e

        heading = data.get("heading", data.get("track"))
        return cls(
            latitude=float(lat),
            longitude=float(lon),
            timestamp=_optional_float(data.get("timestamp")),
            heading=_optional_float(heading),
            altitude=_optional_float(data.get("altitude")),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert point to dictionary for serialization."""
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "timestamp": self.timestamp,
            "heading": self.heading,
            "altitude": self.altitude,
        }


def _optional_float(value: Any) -> Optional[float]:
    return None if value is None else float(value)


def distance(p1: TrackPoint, p2: TrackPoint) -> float:
    """
    Calculate great circle distance between two points using Haversine formula.

    Args:
        p1: First point
        p2: Second point

    Returns:
        Distance in nautical miles

    Example:
        >>> distance(TrackPoint(0, 0), TrackPoint(1, 0))
        60.04
    """
    lat1, lat2 = radians(p1.latitude), radians(p2.latitude)
    dlat = lat2 - lat1
    dlon = radians(p2.longitude - p1.longitude)

    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))

    return Constants.EARTH_RADIUS_NM * c


def bearing(p1: TrackPoint, p2: TrackPoint) -> float:
    """
    Calculate initial bearing (forward azimuth) from point 1 to point 2.

    Args:
        p1: Start point
        p2: End point

    Returns:
        Bearing in degrees (0-360, clockwise from true north)
    """
    lat1, lat2 = radians(p1.latitude), radians(p2.latitude)
    dlon = radians(p2.longitude - p1.longitude)

    x = sin(dlon) * cos(lat2)
    y = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)

    result = (degrees(atan2(x, y)) + 360) % 360
    # -1e-15 % 360 rounds up to 360.0
    return 0.0 if result >= 360 else result


def normalize_angle_delta(delta: float) -> float:
    """
    Normalize an angle difference to the range [-180, 180].

    Non-finite input has no direction and yields NaN.

    Example:
        >>> normalize_angle_delta(270)
        -90.0
    """
    if not isfinite(delta):
        return float("nan")

    delta = fmod(delta, 360.0)
    if delta > 180:
        delta -= 360
    elif delta < -180:
        delta += 360
    return float(delta)


def heading_difference(h1: float, h2: float) -> float:
    """Unsigned smallest difference between two headings (0-180°)."""
    return abs(normalize_angle_delta(h2 - h1))


def circular_mean(angles: Iterable[float]) -> float:
    """
    Mean direction of a set of angles in degrees.

    Averages unit vectors so that headings either side of north
    (e.g. 350° and 10°) average to 0° instead of 180°.

    Returns:
        Mean angle in degrees (0-360), or 0.0 for an empty input
    """
    sum_sin = 0.0
    sum_cos = 0.0
    for angle in angles:
        sum_sin += sin(radians(angle))
        sum_cos += cos(radians(angle))

    if abs(sum_sin) < 1e-12 and abs(sum_cos) < 1e-12:
        return 0.0

    result = (degrees(atan2(sum_sin, sum_cos)) + 360) % 360
    return 0.0 if result >= 360 else result


def centroid(points: Sequence[TrackPoint]) -> TrackPoint:
    """
    Calculate the centroid of a set of points on the sphere.

    Points are converted to Cartesian unit vectors, averaged and projected
    back, which avoids the distortion of averaging latitude and longitude
    directly near the poles or across the antimeridian.

    Args:
        points: At least one point

    Returns:
        Centroid as a TrackPoint (no timestamp, heading or altitude)

    Raises:
        InvalidInputError: If points is empty
    """
    if not points:
        raise InvalidInputError("Cannot calculate centroid of empty point set")

    x = y = z = 0.0
    for p in points:
        lat = radians(p.latitude)
        lon = radians(p.longitude)
        x += cos(lat) * cos(lon)
        y += cos(lat) * sin(lon)
        z += sin(lat)

    n = len(points)
    x /= n
    y /= n
    z /= n

    lon = atan2(y, x)
    lat = atan2(z, hypot(x, y))

    return TrackPoint(latitude=degrees(lat), longitude=degrees(lon))


def destination(start: TrackPoint, bearing_deg: float, distance_nm: float) -> TrackPoint:
    """
    Project a point along a great circle.

    Args:
        start: Origin point
        bearing_deg: Initial bearing in degrees
        distance_nm: Distance to travel in nautical miles

    Returns:
        Destination point (longitude wrapped to -180..180)
    """
    lat = radians(start.latitude)
    lon = radians(start.longitude)
    brg = radians(bearing_deg)
    angular = distance_nm / Constants.EARTH_RADIUS_NM

    dest_lat = asin(sin(lat) * cos(angular) + cos(lat) * sin(angular) * cos(brg))
    dest_lon = lon + atan2(
        sin(brg) * sin(angular) * cos(lat),
        cos(angular) - sin(lat) * sin(dest_lat),
    )

    lon_deg = (degrees(dest_lon) + 540) % 360 - 180
    return TrackPoint(latitude=degrees(dest_lat), longitude=lon_deg)


def path_length(points: Sequence[TrackPoint]) -> float:
    """Total distance flown along consecutive points, in nautical miles."""
    return sum(distance(points[i - 1], points[i]) for i in range(1, len(points)))
