"""
Formation Template Library

Domain knowledge for military multi-aircraft formation detection. Each
archetype is a plain record of acceptable ranges and scoring weights; the
scoring logic in ``matcher`` is identical for all of them and only the
parameters differ.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from ..config import Settings

Range = Tuple[float, float]
TypeCombination = Tuple[str, ...]


@dataclass(frozen=True)
class FactorWeights:
    """Per-factor scoring weights; normalized at scoring time."""

    spacing: float = 0.0
    altitude: float = 0.0
    speed: float = 0.0
    heading: float = 0.0
    type_match: float = 0.0

    def items(self) -> Iterable[Tuple[str, float]]:
        """Factor name and weight pairs, in declaration order."""
        return (
            ("spacing", self.spacing),
            ("altitude", self.altitude),
            ("speed", self.speed),
            ("heading", self.heading),
            ("type_match", self.type_match),
        )


@dataclass(frozen=True)
class FormationPattern:
    """A known multi-aircraft formation archetype."""

    id: str
    name: str
    description: str
    min_aircraft: int
    max_aircraft: int
    spacing_nm: Range
    altitude_diff_ft: Range
    speed_diff_kt: Range
    weights: FactorWeights
    threat_level: str  # low | medium | high | critical
    tactical_significance: str
    duration_minutes: Range
    required_types: Tuple[TypeCombination, ...] = ()
    flight_patterns: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        """Convert pattern to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "min_aircraft": self.min_aircraft,
            "max_aircraft": self.max_aircraft,
            "spacing_nm": list(self.spacing_nm),
            "altitude_diff_ft": list(self.altitude_diff_ft),
            "speed_diff_kt": list(self.speed_diff_kt),
            "duration_minutes": list(self.duration_minutes),
            "required_types": [list(combo) for combo in self.required_types],
            "flight_patterns": list(self.flight_patterns),
            "weights": dict(self.weights.items()),
            "threat_level": self.threat_level,
            "tactical_significance": self.tactical_significance,
        }


@dataclass(frozen=True)
class TypeMatch:
    """How well observed aircraft types fit a pattern."""

    matches: bool
    confidence: float
    combination: TypeCombination = field(default=())


CATALOG_VERSION = "1.0"

FORMATION_PATTERNS: Tuple[FormationPattern, ...] = (
    FormationPattern(
        id="tanker_receiver",
        name="Tanker-Receiver",
        description="Aerial refueling operation with tanker and receiver aircraft",
        min_aircraft=2,
        max_aircraft=4,
        spacing_nm=(0.1, 1.0),
        altitude_diff_ft=(0, 500),
        speed_diff_kt=(0, 30),
        required_types=(
            ("KC135", "F15"), ("KC135", "F16"), ("KC135", "F18"), ("KC135", "F22"), ("KC135", "F35"),
            ("KC10", "F15"), ("KC10", "F16"), ("KC10", "F18"), ("KC10", "F22"), ("KC10", "F35"),
            ("KC46", "F15"), ("KC46", "F16"), ("KC46", "F22"), ("KC46", "F35"),
            ("A332", "F16"), ("A332", "F15"),  # NATO tankers
            ("KC30", "F35"), ("KC30", "F18"),
        ),
        duration_minutes=(15, 60),
        flight_patterns=("racetrack", "orbit"),
        weights=FactorWeights(spacing=0.25, altitude=0.2, speed=0.2, heading=0.15, type_match=0.2),
        threat_level="medium",
        tactical_significance="Indicates extended range operations, possible surge activity",
    ),
    FormationPattern(
        id="escort",
        name="Escort Formation",
        description="Fighter escort protecting high-value aircraft",
        min_aircraft=2,
        max_aircraft=6,
        spacing_nm=(1.0, 10.0),
        altitude_diff_ft=(0, 5000),
        speed_diff_kt=(0, 50),
        required_types=(
            ("E3TF", "F15"), ("E3TF", "F16"), ("E3TF", "F22"),
            ("E7WW", "F35"), ("E7WW", "F18"),
            ("RC135", "F15"), ("RC135", "F16"),
            ("EP3", "F18"),
            ("P8", "F18"), ("P8A", "F18"),
            ("C17", "F15"), ("C17", "F16"),
            ("C5M", "F15"),
        ),
        duration_minutes=(30, 240),
        weights=FactorWeights(spacing=0.2, altitude=0.15, speed=0.15, heading=0.2, type_match=0.3),
        threat_level="high",
        tactical_significance="High-value asset protection, indicates sensitive operations",
    ),
    FormationPattern(
        id="strike_package",
        name="Strike Package",
        description="Coordinated strike formation with multiple fighter aircraft",
        min_aircraft=4,
        max_aircraft=24,
        spacing_nm=(2.0, 20.0),
        altitude_diff_ft=(0, 10000),
        speed_diff_kt=(0, 100),
        required_types=(
            ("F15", "F15", "F15", "F15"),
            ("F16", "F16", "F16", "F16"),
            ("F35", "F35", "F35", "F35"),
            ("F18", "F18", "F18", "F18"),
            ("F15", "F16"),  # Mixed
            ("F22", "F15"),
        ),
        duration_minutes=(60, 180),
        flight_patterns=("straight",),
        weights=FactorWeights(spacing=0.15, altitude=0.15, speed=0.2, heading=0.3, type_match=0.2),
        threat_level="critical",
        tactical_significance="Potential offensive operation, highest priority alert",
    ),
    FormationPattern(
        id="cap",
        name="Combat Air Patrol",
        description="Defensive patrol pattern, typically 2-4 fighters",
        min_aircraft=2,
        max_aircraft=4,
        spacing_nm=(5.0, 30.0),
        altitude_diff_ft=(0, 5000),
        speed_diff_kt=(0, 50),
        required_types=(
            ("F15", "F15"),
            ("F16", "F16"),
            ("F22", "F22"),
            ("F35", "F35"),
            ("F18", "F18"),
        ),
        duration_minutes=(60, 240),
        flight_patterns=("racetrack", "orbit", "holding"),
        weights=FactorWeights(spacing=0.15, altitude=0.15, speed=0.15, heading=0.15, type_match=0.4),
        threat_level="medium",
        tactical_significance="Defensive posture, indicates elevated alert status",
    ),
    FormationPattern(
        id="isr_support",
        name="ISR with Support",
        description="Intelligence aircraft with fighter support",
        min_aircraft=2,
        max_aircraft=4,
        spacing_nm=(10.0, 50.0),
        altitude_diff_ft=(5000, 20000),
        speed_diff_kt=(50, 200),
        required_types=(
            ("RC135", "F15"), ("RC135", "F16"),
            ("RQ4", "F22"),
            ("U2", "F15"),
            ("EP3", "F18"),
            ("GLEX", "F16"),  # Special missions
        ),
        duration_minutes=(120, 480),
        flight_patterns=("racetrack", "orbit"),
        weights=FactorWeights(spacing=0.1, altitude=0.2, speed=0.1, heading=0.2, type_match=0.4),
        threat_level="high",
        tactical_significance="Active intelligence collection, possible precursor to operations",
    ),
    FormationPattern(
        id="transport_escort",
        name="Transport with Escort",
        description="Strategic transport with fighter escort",
        min_aircraft=2,
        max_aircraft=6,
        spacing_nm=(2.0, 15.0),
        altitude_diff_ft=(0, 5000),
        speed_diff_kt=(0, 100),
        required_types=(
            ("C17", "F15"), ("C17", "F16"),
            ("C5M", "F15"), ("C5M", "F16"),
            ("C130", "F16"),
            ("A400", "F16"),
        ),
        duration_minutes=(60, 300),
        weights=FactorWeights(spacing=0.15, altitude=0.15, speed=0.2, heading=0.2, type_match=0.3),
        threat_level="medium",
        tactical_significance="High-value cargo or personnel movement",
    ),
)

_PATTERNS_BY_ID: Dict[str, FormationPattern] = {p.id: p for p in FORMATION_PATTERNS}


def _types_match(observed: str, required: str) -> bool:
    # Either code may carry a sub-variant suffix (F16C vs F16)
    return observed.startswith(required) or required.startswith(observed)


def match_formation_types(
    aircraft_types: Iterable[str], pattern: FormationPattern
) -> TypeMatch:
    """
    Match aircraft types against a pattern's acceptable combinations.

    Matching is partial and prefix-tolerant: each required code counts if
    any observed code is a prefix of it or vice versa. A combination scores
    ``matched / max(len(combination), len(observed))`` and the best
    combination wins.

    Args:
        aircraft_types: Observed ICAO type codes
        pattern: Formation pattern to test against

    Returns:
        TypeMatch; type-agnostic patterns always return a neutral confidence

    Example:
        >>> match_formation_types(["KC135", "F16C"], get_formation_pattern("tanker_receiver"))
        TypeMatch(matches=True, confidence=1.0, combination=('F16', 'KC135'))
    """
    if not pattern.required_types:
        return TypeMatch(matches=True, confidence=Settings.TYPE_AGNOSTIC_CONFIDENCE)

    observed = sorted(t.upper() for t in aircraft_types if t)

    best_score = 0.0
    best_combination: TypeCombination = ()

    for requirement in pattern.required_types:
        required = sorted(requirement)

        match_count = sum(
            1 for req in required if any(_types_match(t, req) for t in observed)
        )
        score = match_count / max(len(required), len(observed))

        if score > best_score:
            best_score = score
            best_combination = tuple(required)

    return TypeMatch(
        matches=best_score > Settings.TYPE_MATCH_THRESHOLD,
        confidence=best_score,
        combination=best_combination,
    )


def get_formation_pattern(pattern_id: str) -> Optional[FormationPattern]:
    """Get formation pattern by ID."""
    return _PATTERNS_BY_ID.get(pattern_id)


def get_all_formation_patterns() -> Tuple[FormationPattern, ...]:
    """Get all formation patterns in catalog order."""
    return FORMATION_PATTERNS
