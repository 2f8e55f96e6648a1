"""
Main Surveillance Analyzer
Coordinates pattern and formation analysis over a recorded scenario.
"""

import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..config import Config
from ..formations import CATALOG_VERSION, AircraftState, FormationCandidate, FormationMatcher
from ..geometry import TrackPoint
from ..patterns import PatternDetector
from .reporter import ReportGenerator

logger = logging.getLogger(__name__)


@dataclass
class Scenario:
    """Position data for one analysis run."""

    tracks: Dict[str, List[TrackPoint]] = field(default_factory=dict)
    groups: Dict[str, List[AircraftState]] = field(default_factory=dict)
    candidates: Dict[str, FormationCandidate] = field(default_factory=dict)
    source: Optional[str] = None


def load_scenario(path: Union[str, Path]) -> Scenario:
    """
    Load a scenario from a JSON file.

    Expected layout::

        {
            "tracks": {"<aircraft>": [{"lat": .., "lon": .., "timestamp": ..}, ...]},
            "groups": [{"id": "<group>", "aircraft": [{"id": .., "lat": .., ...}]}],
            "candidates": [{"id": "<name>", "aircraft_count": .., ...}]
        }

    Every section is optional. Track points must already be time-ordered.

    Raises:
        ValueError: If the file is not a JSON object or a record is malformed
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"Scenario {path} must contain a JSON object")

    try:
        tracks = {
            str(track_id): [TrackPoint.from_dict(p) for p in points]
            for track_id, points in data.get("tracks", {}).items()
        }
        groups = {
            str(group.get("id", i)): [AircraftState.from_dict(a) for a in group["aircraft"]]
            for i, group in enumerate(data.get("groups", []))
        }
        candidates = {
            str(item.get("id", i)): FormationCandidate.from_dict(item)
            for i, item in enumerate(data.get("candidates", []))
        }
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Malformed scenario {path}: {e}") from e

    return Scenario(tracks=tracks, groups=groups, candidates=candidates, source=str(path))


class SurveillanceAnalyzer:
    """
    Main analyzer coordinating all analysis components.
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize surveillance analyzer.

        Args:
            config: Runtime configuration (defaults if None)
        """
        self.config = config or Config()

        # Initialize components
        self.pattern_detector = PatternDetector(self.config)
        self.formation_matcher = FormationMatcher(self.config)
        self.reporter = ReportGenerator()

    def analyze_all(
        self,
        scenario: Scenario,
        output_path: Optional[str] = None,
        report_format: str = "json",
    ) -> Dict[str, Any]:
        """
        Run complete analysis suite.

        Args:
            scenario: Tracks and aircraft groups to analyze
            output_path: Optional path to save report
            report_format: Report format ('json', 'txt', 'html')

        Returns:
            Complete analysis results
        """
        print("\n" + "=" * 70)
        print("🔬 TALON SURVEILLANCE ANALYSIS")
        print("=" * 70)

        results: Dict[str, Any] = {
            "metadata": {
                "analysis_date": datetime.now().isoformat(),
                "source": scenario.source,
                "catalog_version": CATALOG_VERSION,
            }
        }

        print(f"\n🔍 Detecting flight patterns in {len(scenario.tracks)} tracks...")
        results["patterns"] = self.analyze_patterns(scenario.tracks)

        print(f"\n✈️  Matching {len(scenario.groups) + len(scenario.candidates)} formation groups...")
        results["formations"] = self.analyze_formations(scenario.groups, scenario.candidates)

        # Generate report
        if output_path:
            self.reporter.generate_report(results, output_path, format=report_format)
            print(f"\n💾 Report saved to: {output_path}")

        return results

    def analyze_patterns(self, tracks: Dict[str, List[TrackPoint]]) -> Dict[str, Any]:
        """Run pattern detection on every track."""
        by_type: Counter = Counter()
        per_track: Dict[str, Any] = {}

        for track_id, points in tracks.items():
            result = self.pattern_detector.detect_patterns(points)
            per_track[track_id] = result.to_dict()
            if result.primary_pattern:
                by_type[result.primary_pattern.pattern_type] += 1
                logger.info(
                    "Track %s: %s (confidence %.2f)",
                    track_id,
                    result.primary_pattern.pattern_type,
                    result.primary_pattern.confidence,
                )

        return {
            "total_tracks": len(tracks),
            "tracks_with_patterns": sum(by_type.values()),
            "by_type": dict(by_type),
            "tracks": per_track,
        }

    def analyze_formations(
        self,
        groups: Dict[str, List[AircraftState]],
        candidates: Optional[Dict[str, FormationCandidate]] = None,
    ) -> Dict[str, Any]:
        """Run formation matching on every aircraft group and candidate."""
        group_ids = list(groups)
        assessments = self.formation_matcher.match_groups([groups[g] for g in group_ids])

        by_threat: Counter = Counter()
        per_group: Dict[str, Any] = {}
        for group_id, assessment in zip(group_ids, assessments):
            per_group[group_id] = assessment.to_dict() if assessment else None
            if assessment:
                by_threat[assessment.threat_level] += 1

        candidates = candidates or {}
        candidate_ids = list(candidates)
        matches = self.formation_matcher.match_candidates(
            [candidates[c] for c in candidate_ids]
        )

        return {
            "total_groups": len(groups),
            "matched_groups": sum(by_threat.values()),
            "by_threat_level": dict(by_threat),
            "groups": per_group,
            "candidates": {
                candidate_id: match.to_dict()
                for candidate_id, match in zip(candidate_ids, matches)
            },
        }
