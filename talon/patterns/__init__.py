"""
TALON Pattern Component

Single-aircraft flight-pattern analysis built on the geometry kernel.

Main Classes:
    - PatternDetector: Orbit, racetrack, holding and tanker-track detection

Functions:
    - fit_circle: Iterative best-fit circle with confidence
    - find_heading_reversals: Windowed ~180° turn detection
    - calculate_angular_velocity: Turn rate, direction and consistency
    - check_area_confinement: Bounding-box loiter test
    - detect_racetrack_params: Two-leg racetrack geometry

Example:
    >>> from talon.patterns import PatternDetector
    >>> result = PatternDetector().detect_patterns(track)
    >>> print(result.primary_pattern)
"""

from .circle_fit import CircleFit, fit_circle
from .turns import (
    AngularVelocityResult,
    HeadingReversal,
    calculate_angular_velocity,
    find_heading_reversals,
)
from .area import AreaConfinement, BoundingBox, check_area_confinement
from .racetrack import RacetrackParams, detect_racetrack_params
from .detector import PatternDetection, PatternDetectionResult, PatternDetector

from . import constants

__all__ = [
    # Main classes
    "PatternDetector",
    # Results
    "CircleFit",
    "HeadingReversal",
    "AngularVelocityResult",
    "AreaConfinement",
    "BoundingBox",
    "RacetrackParams",
    "PatternDetection",
    "PatternDetectionResult",
    # Functions
    "fit_circle",
    "find_heading_reversals",
    "calculate_angular_velocity",
    "check_area_confinement",
    "detect_racetrack_params",
    # Modules
    "constants",
]
