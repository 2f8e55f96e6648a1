"""
Area Confinement Check
Recognizes a track loitering inside a small region.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Sequence

from ..config import Settings
from ..geometry import TrackPoint, distance


@dataclass(frozen=True)
class BoundingBox:
    """Dimensions of a lat/lon bounding box in nautical miles."""

    width: float = 0.0  # east-west, along the middle parallel
    height: float = 0.0  # north-south, along the middle meridian


@dataclass(frozen=True)
class AreaConfinement:
    """Result of an area confinement check."""

    confined: bool
    bounding_box: BoundingBox = field(default_factory=BoundingBox)
    area: float = 0.0  # nm²

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "confined": self.confined,
            "bounding_box": {
                "width": self.bounding_box.width,
                "height": self.bounding_box.height,
            },
            "area": self.area,
        }


def check_area_confinement(
    points: Sequence[TrackPoint],
    max_area_nm2: float = Settings.MAX_CONFINED_AREA_NM2,
) -> AreaConfinement:
    """
    Check if points stay within a confined area.

    Args:
        points: Track positions
        max_area_nm2: Largest bounding-box area still considered confined

    Returns:
        AreaConfinement; never confined for fewer than 2 points
    """
    if len(points) < 2:
        return AreaConfinement(confined=False)

    lats = [p.latitude for p in points]
    lons = [p.longitude for p in points]

    min_lat, max_lat = min(lats), max(lats)
    min_lon, max_lon = min(lons), max(lons)
    mid_lat = (min_lat + max_lat) / 2
    mid_lon = (min_lon + max_lon) / 2

    height = distance(TrackPoint(min_lat, mid_lon), TrackPoint(max_lat, mid_lon))
    width = distance(TrackPoint(mid_lat, min_lon), TrackPoint(mid_lat, max_lon))
    area = width * height

    return AreaConfinement(
        confined=area <= max_area_nm2,
        bounding_box=BoundingBox(width=width, height=height),
        area=area,
    )
