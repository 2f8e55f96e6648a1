"""
TALON - Tactical Loiter and Formation Observation Network

A geometric detection engine that recognizes flight patterns (orbits,
racetracks, holding patterns, tanker tracks) in single-aircraft position
tracks and matches groups of aircraft against a library of tactical
formation archetypes.

Components:
    - geometry: Great-circle primitives on latitude/longitude positions
    - patterns: Single-aircraft flight-pattern analysis
    - formations: Multi-aircraft formation recognition
    - analysis: Scenario analysis and report generation

Example:
    >>> from talon import FormationCandidate, detect_formation_pattern
    >>> match = detect_formation_pattern(FormationCandidate(2, 0.3, 100, 10, 5))
    >>> match.pattern.name
    'Tanker-Receiver'
"""

from . import analysis, config, formations, geometry, patterns, utils
from .config import Config
from .errors import InvalidInputError
from .formations import (
    FORMATION_PATTERNS,
    FormationCandidate,
    detect_formation_pattern,
    match_formation_types,
    score_formation_match,
)
from .geometry import TrackPoint, bearing, centroid, distance, normalize_angle_delta
from .patterns import (
    calculate_angular_velocity,
    check_area_confinement,
    detect_racetrack_params,
    find_heading_reversals,
    fit_circle,
)

TALON_VERSION = "v1.0.0"

__version__ = TALON_VERSION
__license__ = "MIT"

__all__ = [
    # Components
    "analysis",
    "config",
    "formations",
    "geometry",
    "patterns",
    "utils",
    # Core types
    "Config",
    "InvalidInputError",
    "TrackPoint",
    "FormationCandidate",
    "FORMATION_PATTERNS",
    # Geometry
    "distance",
    "bearing",
    "normalize_angle_delta",
    "centroid",
    # Patterns
    "fit_circle",
    "find_heading_reversals",
    "calculate_angular_velocity",
    "check_area_confinement",
    "detect_racetrack_params",
    # Formations
    "match_formation_types",
    "score_formation_match",
    "detect_formation_pattern",
]
