"""
Report Generator
Creates surveillance analysis reports in various formats.
"""

import json
from html import escape
from typing import Any, Dict, Optional

from ..utils import format_altitude, format_coordinates, format_duration


class ReportGenerator:
    """
    Generates analysis reports in multiple formats.
    """

    def generate_report(self, analysis_results: Dict[str, Any],
                        output_path: str, format: str = 'json'):
        """
        Generate analysis report.

        Args:
            analysis_results: Complete analysis results
            output_path: Output file path
            format: Report format ('json', 'txt', 'html')
        """
        if format == 'json':
            self._generate_json_report(analysis_results, output_path)
        elif format == 'txt':
            self._generate_text_report(analysis_results, output_path)
        elif format == 'html':
            self._generate_html_report(analysis_results, output_path)
        else:
            raise ValueError(f"Unsupported format: {format}")

    def _generate_json_report(self, results: Dict[str, Any], output_path: str):
        """Generate JSON report."""
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(results, f, indent=2, default=str)

    def _generate_text_report(self, results: Dict[str, Any], output_path: str):
        """Generate text report."""
        patterns = results['patterns']
        formations = results['formations']

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write("=" * 70 + "\n")
            f.write("TALON SURVEILLANCE ANALYSIS REPORT\n")
            f.write("=" * 70 + "\n\n")

            f.write(f"Generated: {results['metadata']['analysis_date']}\n")
            f.write(f"Source: {results['metadata']['source']}\n")
            f.write(f"Formation Catalog: v{results['metadata']['catalog_version']}\n\n")

            # Flight patterns
            f.write("FLIGHT PATTERNS\n")
            f.write("-" * 70 + "\n")
            f.write(f"Tracks Analyzed: {patterns['total_tracks']:,}\n")
            f.write(f"Tracks With Patterns: {patterns['tracks_with_patterns']:,}\n")
            for track_id, primary in _primary_patterns(patterns):
                position = format_coordinates(primary['center_lat'], primary['center_lon'])
                f.write(f"  {track_id}: {primary['pattern_type']} "
                        f"({primary['confidence']:.0%}) at {position}, "
                        f"{format_duration(primary['duration_minutes'])}\n")
            f.write("\n")

            # Formations
            f.write("FORMATIONS\n")
            f.write("-" * 70 + "\n")
            f.write(f"Groups Analyzed: {formations['total_groups']:,}\n")
            f.write(f"Groups Matched: {formations['matched_groups']:,}\n")
            for group_id, assessment in formations['groups'].items():
                if assessment is None:
                    continue
                f.write(f"  {group_id}: {assessment['pattern_name']} "
                        f"({assessment['score']:.0%}, threat {assessment['threat_level']})\n")
                f.write(f"       {assessment['tactical_significance']}\n")
            for candidate_id, match in formations['candidates'].items():
                name = match['pattern_name'] or "no match"
                f.write(f"  {candidate_id}: {name} ({match['score']:.0%})\n")
            f.write("\n")

    def _generate_html_report(self, results: Dict[str, Any], output_path: str):
        """Generate HTML report."""
        patterns = results['patterns']
        formations = results['formations']

        html = f"""
<!DOCTYPE html>
<html>
<head>
    <title>TALON Surveillance Analysis Report</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 40px; }}
        h1 {{ color: #2c3e50; }}
        h2 {{ color: #34495e; border-bottom: 2px solid #3498db; padding-bottom: 10px; }}
        table {{ border-collapse: collapse; width: 100%; margin: 20px 0; }}
        th, td {{ border: 1px solid #ddd; padding: 12px; text-align: left; }}
        th {{ background-color: #3498db; color: white; }}
        tr:nth-child(even) {{ background-color: #f2f2f2; }}
        .stat {{ background: #ecf0f1; padding: 20px; margin: 10px 0; border-radius: 5px; }}
    </style>
</head>
<body>
    <h1>🛩️ TALON Surveillance Analysis Report</h1>
    <p>Generated: {escape(str(results['metadata']['analysis_date']))}</p>
    <p>Source: {escape(str(results['metadata']['source']))}</p>

    <h2>Overview</h2>
    <div class="stat">
        <p><strong>Tracks Analyzed:</strong> {patterns['total_tracks']:,}</p>
        <p><strong>Tracks With Patterns:</strong> {patterns['tracks_with_patterns']:,}</p>
        <p><strong>Groups Analyzed:</strong> {formations['total_groups']:,}</p>
        <p><strong>Groups Matched:</strong> {formations['matched_groups']:,}</p>
        <p><strong>Candidates Scored:</strong> {len(formations['candidates']):,}</p>
    </div>

    <h2>Flight Patterns</h2>
    <table>
        <tr>
            <th>Track</th>
            <th>Pattern</th>
            <th>Confidence</th>
            <th>Center</th>
            <th>Duration</th>
            <th>Altitude</th>
        </tr>
"""

        for track_id, primary in _primary_patterns(patterns):
            html += f"""
        <tr>
            <td>{escape(track_id)}</td>
            <td>{escape(primary['pattern_type'])}</td>
            <td>{primary['confidence']:.0%}</td>
            <td>{format_coordinates(primary['center_lat'], primary['center_lon'])}</td>
            <td>{format_duration(primary['duration_minutes'])}</td>
            <td>{_pattern_altitude(primary)}</td>
        </tr>
"""

        html += """
    </table>

    <h2>Formations</h2>
    <table>
        <tr>
            <th>Group</th>
            <th>Formation</th>
            <th>Score</th>
            <th>Threat Level</th>
            <th>Significance</th>
        </tr>
"""

        for group_id, assessment in formations['groups'].items():
            if assessment is None:
                continue
            html += f"""
        <tr>
            <td>{escape(group_id)}</td>
            <td>{escape(assessment['pattern_name'])}</td>
            <td>{assessment['score']:.0%}</td>
            <td>{escape(assessment['threat_level'])}</td>
            <td>{escape(assessment['tactical_significance'])}</td>
        </tr>
"""

        html += """
    </table>

    <h2>Formation Candidates</h2>
    <table>
        <tr>
            <th>Candidate</th>
            <th>Best Match</th>
            <th>Score</th>
            <th>Runner-up</th>
        </tr>
"""

        for candidate_id, match in formations['candidates'].items():
            runner_up = match['all_scores'][1] if len(match['all_scores']) > 1 else None
            html += f"""
        <tr>
            <td>{escape(candidate_id)}</td>
            <td>{escape(match['pattern_name'] or 'no match')}</td>
            <td>{match['score']:.0%}</td>
            <td>{_format_runner_up(runner_up)}</td>
        </tr>
"""

        html += """
    </table>
</body>
</html>
"""

        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(html)


def _primary_patterns(patterns: Dict[str, Any]):
    for track_id, result in patterns['tracks'].items():
        if result['primary_pattern']:
            yield track_id, result['primary_pattern']


def _pattern_altitude(primary: Dict[str, Any]) -> str:
    flight_level = primary.get('metadata', {}).get('altitude_fl')
    if flight_level is None:
        return format_altitude(None)
    return format_altitude(flight_level * 100, flight_level=True)


def _format_runner_up(entry: Optional[Dict[str, Any]]) -> str:
    if entry is None:
        return "N/A"
    return f"{escape(entry['pattern_id'])} ({entry['score']:.0%})"
