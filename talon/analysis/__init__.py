"""
TALON Analysis Component

Runs pattern detection and formation matching over a recorded scenario and
turns the results into reports.

Main Classes:
    - SurveillanceAnalyzer: Main coordinator for all analyses
    - ReportGenerator: Multi-format report generation

Example:
    >>> from talon.analysis import SurveillanceAnalyzer, load_scenario
    >>> analyzer = SurveillanceAnalyzer()
    >>> results = analyzer.analyze_all(load_scenario('scenario.json'), output_path='report.json')
"""

from .analyzer import Scenario, SurveillanceAnalyzer, load_scenario
from .reporter import ReportGenerator

__all__ = [
    # Main classes
    'SurveillanceAnalyzer',
    'ReportGenerator',

    # Input
    'Scenario',
    'load_scenario',
]
