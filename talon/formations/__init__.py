"""
TALON Formation Component

Multi-aircraft formation recognition against a fixed library of tactical
archetypes.

Main Classes:
    - FormationMatcher: Assesses aircraft groups against the library
    - FormationPattern: Static catalog entry
    - FormationCandidate: Group metrics used for scoring

Example:
    >>> from talon.formations import FormationCandidate, detect_formation_pattern
    >>> candidate = FormationCandidate(2, 0.3, 100, 10, 5)
    >>> detect_formation_pattern(candidate).pattern.id
    'tanker_receiver'
"""

from .library import (
    CATALOG_VERSION,
    FORMATION_PATTERNS,
    FactorWeights,
    FormationPattern,
    TypeMatch,
    get_all_formation_patterns,
    get_formation_pattern,
    match_formation_types,
)
from .candidate import (
    AircraftState,
    FormationCandidate,
    FormationGeometry,
    build_formation_candidate,
    calculate_formation_geometry,
)
from .matcher import (
    FormationAssessment,
    FormationMatch,
    FormationMatcher,
    FormationScore,
    detect_formation_pattern,
    detect_formation_patterns,
    score_formation_match,
)

__all__ = [
    # Main classes
    "FormationMatcher",
    # Catalog
    "CATALOG_VERSION",
    "FORMATION_PATTERNS",
    "FactorWeights",
    "FormationPattern",
    "TypeMatch",
    "get_all_formation_patterns",
    "get_formation_pattern",
    "match_formation_types",
    # Candidates
    "AircraftState",
    "FormationCandidate",
    "FormationGeometry",
    "build_formation_candidate",
    "calculate_formation_geometry",
    # Scoring
    "FormationAssessment",
    "FormationMatch",
    "FormationScore",
    "detect_formation_pattern",
    "detect_formation_patterns",
    "score_formation_match",
]
