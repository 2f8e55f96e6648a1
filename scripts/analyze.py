#!/usr/bin/env python3
"""
TALON Surveillance Analysis Script

Detects flight patterns and formations in a recorded scenario.

Usage:
    python scripts/analyze.py --input SCENARIO_FILE [--config CONFIG_FILE]
                              [--output REPORT_FILE] [--format {json,txt,html}]
"""

import sys
import argparse
from pathlib import Path
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from talon import Config
from talon.analysis import SurveillanceAnalyzer, load_scenario
from talon.utils import format_duration


def print_pattern_summary(patterns: dict):
    """Print the primary pattern of every track."""
    print(f"\n🛩️  Flight Patterns ({patterns['tracks_with_patterns']}/{patterns['total_tracks']} tracks)")
    print("=" * 70)
    for track_id, result in patterns['tracks'].items():
        primary = result['primary_pattern']
        if primary is None:
            print(f"  {track_id:12s} | no pattern")
            continue
        print(f"  {track_id:12s} | {primary['pattern_type']:12s} | "
              f"confidence {primary['confidence']:.2f} | "
              f"{format_duration(primary['duration_minutes'])}")


def print_formation_summary(formations: dict):
    """Print matched formations and candidate scores."""
    print(f"\n✈️  Formations ({formations['matched_groups']}/{formations['total_groups']} groups)")
    print("=" * 70)
    for group_id, assessment in formations['groups'].items():
        if assessment is None:
            print(f"  {group_id:12s} | no formation")
            continue
        print(f"  {group_id:12s} | {assessment['pattern_name']:22s} | "
              f"score {assessment['score']:.2f} | threat {assessment['threat_level']}")
    for candidate_id, match in formations['candidates'].items():
        name = match['pattern_name'] or 'no formation'
        print(f"  {candidate_id:12s} | {name:22s} | score {match['score']:.2f}")


def main():
    """Main entry point for analyzer."""
    parser = argparse.ArgumentParser(
        description='TALON Surveillance Analyzer - Flight pattern and formation detection'
    )
    parser.add_argument(
        '--input',
        type=str,
        required=True,
        help='Path to scenario JSON file'
    )
    parser.add_argument(
        '--config',
        type=str,
        help='Path to YAML configuration file (default: built-in settings)'
    )
    parser.add_argument(
        '--output',
        type=str,
        help='Output file for the report (optional)'
    )
    parser.add_argument(
        '--format',
        choices=['json', 'txt', 'html'],
        default='json',
        help='Report format (default: json)'
    )
    parser.add_argument(
        '--patterns-only',
        action='store_true',
        help='Run only flight pattern detection'
    )
    parser.add_argument(
        '--formations-only',
        action='store_true',
        help='Run only formation matching'
    )

    args = parser.parse_args()

    config = Config(args.config)
    config.configure_logging()

    try:
        scenario = load_scenario(args.input)
    except (OSError, ValueError) as e:
        print(f"❌ Error loading scenario: {e}")
        sys.exit(1)

    analyzer = SurveillanceAnalyzer(config)

    try:
        if args.patterns_only:
            print_pattern_summary(analyzer.analyze_patterns(scenario.tracks))
        elif args.formations_only:
            print_formation_summary(
                analyzer.analyze_formations(scenario.groups, scenario.candidates)
            )
        else:
            output_file = args.output or (
                f"talon_report_{datetime.now().strftime('%Y%m%d_%H%M%S')}.{args.format}"
            )
            results = analyzer.analyze_all(scenario, output_file, report_format=args.format)
            print_pattern_summary(results['patterns'])
            print_formation_summary(results['formations'])

        print("\n✅ Analysis complete!")

    except Exception as e:
        print(f"❌ Error during analysis: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
