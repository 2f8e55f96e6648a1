"""
TALON Utility Functions
Common formatting and validation helpers for reports and the command line.
"""

from math import isfinite
from typing import Optional


def format_altitude(altitude_ft: Optional[float], flight_level: bool = False) -> str:
    """
    Format altitude in feet or as a flight level.

    Args:
        altitude_ft: Altitude in feet
        flight_level: Whether to render as a flight level (hundreds of feet)

    Returns:
        Formatted altitude string

    Example:
        >>> format_altitude(25000)
        '25000 ft'
        >>> format_altitude(25000, flight_level=True)
        'FL250'
    """
    if altitude_ft is None:
        return "N/A"

    if flight_level:
        return f"FL{round(altitude_ft / 100):03d}"

    return f"{altitude_ft:.0f} ft"


def format_duration(minutes: Optional[float]) -> str:
    """
    Format a pattern duration given in minutes.

    Example:
        >>> format_duration(42.4)
        '42 min'
        >>> format_duration(95)
        '1h 35min'
    """
    if minutes is None or minutes < 0:
        return "N/A"

    hours, mins = divmod(round(minutes), 60)
    if hours:
        return f"{hours}h {mins:02d}min"
    return f"{mins} min"


def format_coordinates(
    lat: Optional[float], lon: Optional[float], style: str = "decimal"
) -> str:
    """
    Format a position for display.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees
        style: 'decimal' or 'dms' (degrees, minutes, seconds)

    Returns:
        Formatted position string

    Example:
        >>> format_coordinates(49.35, 8.1364)
        '(49.3500, 8.1364)'
    """
    if lat is None or lon is None:
        return "N/A"

    if style == "dms":
        return f"{_to_dms(lat, 'N', 'S')} {_to_dms(lon, 'E', 'W')}"

    return f"({lat:.4f}, {lon:.4f})"


def _to_dms(value: float, positive: str, negative: str) -> str:
    hemisphere = positive if value >= 0 else negative
    total_seconds = round(abs(value) * 3600)
    degrees, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{degrees}°{minutes:02d}'{seconds:02d}\"{hemisphere}"


def validate_coordinates(lat: float, lon: float) -> bool:
    """
    Check that a position is a real point on the globe.

    NaN and infinite values are rejected along with out-of-range ones.

    Example:
        >>> validate_coordinates(49.3508, 8.1364)
        True
        >>> validate_coordinates(float('nan'), 0.0)
        False
    """
    if not (isfinite(lat) and isfinite(lon)):
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180
