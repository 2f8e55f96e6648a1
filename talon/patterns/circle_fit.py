"""
Circle Fitting
Estimates the best-fit circle through an ordered track of positions.

The fit is a small fixed-iteration gradient walk rather than a closed-form
algebraic solution. It starts from the spherical centroid and nudges the
center toward the points whose distance exceeds the mean radius, converting
the nautical-mile correction to degrees with a latitude-dependent longitude
scale so it stays usable away from the equator.
"""

from dataclasses import dataclass
from math import cos, radians, sin, sqrt
from typing import Any, Dict, Sequence

from ..config import Constants, Settings
from ..errors import InvalidInputError
from ..geometry import TrackPoint, bearing, centroid, distance


@dataclass(frozen=True)
class CircleFit:
    """Result of fitting a circle to a track."""

    center: TrackPoint
    radius: float  # nm
    error: float  # RMS radial residual, nm
    confidence: float  # 0-1, 1 is a perfect circle
    iterations: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert fit to dictionary for serialization."""
        return {
            "center_lat": self.center.latitude,
            "center_lon": self.center.longitude,
            "radius_nm": self.radius,
            "error_nm": self.error,
            "confidence": self.confidence,
            "iterations": self.iterations,
        }


def fit_circle(
    points: Sequence[TrackPoint],
    max_iterations: int = Settings.CIRCLE_FIT_MAX_ITERATIONS,
    convergence_deg: float = Settings.CIRCLE_FIT_CONVERGENCE_DEG,
    step_size: float = Settings.CIRCLE_FIT_STEP_SIZE,
) -> CircleFit:
    """
    Fit a circle to a set of points.

    Args:
        points: Track positions (at least 3)
        max_iterations: Upper bound on refinement steps
        convergence_deg: Stop once both center shifts fall below this
        step_size: Fraction of the mean residual applied per step

    Returns:
        CircleFit with center, radius, RMS error and confidence

    Raises:
        InvalidInputError: If fewer than 3 points are given

    Example:
        >>> fit = fit_circle(orbit_points)
        >>> print(f"{fit.radius:.1f} nm, confidence {fit.confidence:.2f}")
    """
    if len(points) < Settings.CIRCLE_FIT_MIN_POINTS:
        raise InvalidInputError(
            f"Need at least {Settings.CIRCLE_FIT_MIN_POINTS} points to fit a circle, "
            f"got {len(points)}"
        )

    start = centroid(points)
    center_lat = start.latitude
    center_lon = start.longitude
    n = len(points)
    iterations = 0

    for iterations in range(1, max_iterations + 1):
        center = TrackPoint(center_lat, center_lon)
        distances = [distance(center, p) for p in points]
        avg_radius = sum(distances) / n

        grad_lat = 0.0
        grad_lon = 0.0
        for p, d in zip(points, distances):
            residual = d - avg_radius
            brg = radians(bearing(center, p))
            grad_lat += residual * cos(brg) / n
            grad_lon += residual * sin(brg) / n

        # Points beyond the mean radius pull the center toward them
        lat_shift = grad_lat * step_size / Constants.NM_PER_DEGREE_LAT
        lon_scale = Constants.NM_PER_DEGREE_LAT * max(cos(radians(center_lat)), 1e-6)
        lon_shift = grad_lon * step_size / lon_scale

        if abs(lat_shift) < convergence_deg and abs(lon_shift) < convergence_deg:
            break

        center_lat = min(90.0, max(-90.0, center_lat + lat_shift))
        center_lon = (center_lon + lon_shift + 540) % 360 - 180

    final_center = TrackPoint(center_lat, center_lon)
    final_distances = [distance(final_center, p) for p in points]
    radius = sum(final_distances) / n

    mse = sum((d - radius) ** 2 for d in final_distances) / n
    rmse = sqrt(mse)

    if radius > 0:
        confidence = max(0.0, min(1.0, 1 - 2 * (rmse / radius)))
    else:
        confidence = 0.0

    return CircleFit(
        center=final_center,
        radius=radius,
        error=rmse,
        confidence=confidence,
        iterations=iterations,
    )
