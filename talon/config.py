"""
TALON Configuration Management

This module provides configuration management for the TALON detection engine.
It includes physical constants, algorithm settings, and runtime configuration
loaded from YAML files.
"""

import logging
import os
from typing import Any, Dict, Optional, Tuple

import yaml

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# =============================================================================
# Physical Constants
# =============================================================================


class Constants:
    """Physical constants representing real-world measurements."""

    EARTH_RADIUS_NM: float = 3440.065  # Shared by every distance computation
    NM_PER_DEGREE_LAT: float = 60.0  # One degree of latitude in nautical miles
    SECONDS_PER_MINUTE: float = 60.0


# =============================================================================
# Algorithm Settings
# =============================================================================


class Settings:
    """Configurable settings for the pattern and formation algorithms."""

    # --- Circle Fitting ---
    CIRCLE_FIT_MIN_POINTS: int = 3
    CIRCLE_FIT_MAX_ITERATIONS: int = 50
    CIRCLE_FIT_CONVERGENCE_DEG: float = 0.001  # Stop when both shifts fall below
    CIRCLE_FIT_STEP_SIZE: float = 0.1  # Center shift per iteration (nm scale)

    # --- Heading Reversals ---
    REVERSAL_MIN_ANGLE_DEG: float = 150.0
    REVERSAL_MAX_ANGLE_DEG: float = 210.0
    REVERSAL_WINDOW_SIZE: int = 3  # Segments averaged on each side of a turn

    # --- Angular Velocity ---
    DIRECTION_DOMINANCE_RATIO: float = 1.5  # Required majority for a turn direction

    # --- Area Confinement ---
    MAX_CONFINED_AREA_NM2: float = 100.0

    # --- Racetrack Detection ---
    RACETRACK_MIN_REVERSALS: int = 2
    RACETRACK_SAME_LEG_TOLERANCE_DEG: float = 30.0
    RACETRACK_OPPOSITE_LEG_MIN_DEG: float = 150.0
    RACETRACK_MIN_OPPOSITE_HEADINGS: int = 2
    RACETRACK_HEADING_BAND_DEG: Tuple[float, float] = (170.0, 190.0)
    RACETRACK_HEADING_FALLOFF_DEG: float = 30.0
    RACETRACK_HEADING_WEIGHT: float = 0.6
    RACETRACK_LEG_WEIGHT: float = 0.4
    RACETRACK_DETECTION_THRESHOLD: float = 0.5

    # --- Formation Matching ---
    FORMATION_MATCH_THRESHOLD: float = 0.5  # Best score below this is "no match"
    HEADING_VARIANCE_LIMIT_DEG: float = 90.0  # Zero heading credit at this spread
    ALTITUDE_RANGE_FLOOR_FT: float = 1000.0
    SPEED_RANGE_FLOOR_KT: float = 50.0
    TYPE_AGNOSTIC_CONFIDENCE: float = 0.5
    TYPE_MATCH_THRESHOLD: float = 0.5


# =============================================================================
# Runtime Configuration
# =============================================================================


class Config:
    """
    Runtime configuration manager for TALON.

    Loads settings from YAML files or uses sensible defaults.
    Provides property-based access to common settings.

    Example:
        >>> config = Config('config.yaml')
        >>> config.configure_logging()
        >>> print(f"Formation threshold: {config.match_threshold}")
    """

    def __init__(self, config_path: Optional[str] = None) -> None:
        """
        Initialize configuration.

        Args:
            config_path: Path to YAML configuration file. If None or missing,
                        uses default configuration.
        """
        self.config_path = config_path
        self._config: Dict[str, Any] = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration from YAML file or return defaults.

        Returns:
            Configuration dictionary
        """
        if self.config_path is None or not os.path.exists(self.config_path):
            return self._get_default_config()

        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logging.getLogger(__name__).warning(
                "Could not load config file %s: %s", self.config_path, e
            )
            return self._get_default_config()

        if not self._validate_config(config):
            logging.getLogger(__name__).warning(
                "Invalid config structure in %s, using defaults", self.config_path
            )
            return self._get_default_config()

        return self._merge_defaults(config)

    def _validate_config(self, config: Any) -> bool:
        """
        Validate configuration structure and value ranges.

        Only sections that are present are checked; missing sections are
        filled from the defaults afterwards.

        Args:
            config: Parsed YAML document

        Returns:
            True if valid, False otherwise
        """
        try:
            assert isinstance(config, dict)

            formations = config.get("formations", {})
            assert isinstance(formations, dict)
            if "match_threshold" in formations:
                threshold = formations["match_threshold"]
                assert isinstance(threshold, (float, int))
                assert 0 <= threshold <= 1
            if "max_workers" in formations and formations["max_workers"] is not None:
                assert isinstance(formations["max_workers"], int)
                assert formations["max_workers"] > 0

            patterns = config.get("patterns", {})
            assert isinstance(patterns, dict)
            for section in patterns.values():
                assert isinstance(section, dict)
                for value in section.values():
                    assert isinstance(value, (float, int))
                    assert value >= 0

            log_cfg = config.get("logging", {})
            assert isinstance(log_cfg, dict)
            if "level" in log_cfg:
                assert str(log_cfg["level"]).upper() in LOG_LEVELS

            return True
        except (AssertionError, AttributeError, TypeError):
            return False

    def _merge_defaults(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Overlay a loaded document onto the default configuration."""
        merged = self._get_default_config()
        for section, values in config.items():
            if isinstance(values, dict) and isinstance(merged.get(section), dict):
                for key, value in values.items():
                    if isinstance(value, dict) and isinstance(
                        merged[section].get(key), dict
                    ):
                        merged[section][key].update(value)
                    else:
                        merged[section][key] = value
            else:
                merged[section] = values
        return merged

    def _get_default_config(self) -> Dict[str, Any]:
        """
        Get default configuration.

        Returns:
            Default configuration dictionary
        """
        return {
            "patterns": {
                "general": {
                    "min_positions": 6,
                    "min_duration_minutes": 5,
                },
                "orbit": {
                    "min_positions": 10,
                    "min_confidence": 0.5,
                    "min_radius_nm": 2,
                    "max_radius_nm": 50,
                    "min_consistency": 0.3,
                    "min_revolutions": 0.5,
                },
                "racetrack": {
                    "min_positions": 8,
                },
                "holding": {
                    "min_positions": 6,
                    "max_area_nm2": 50,
                    "min_confidence": 0.5,
                },
                "tanker_track": {
                    "min_positions": 6,
                    "min_duration_minutes": 20,
                    "min_altitude_ft": 18000,
                    "max_altitude_ft": 40000,
                    "max_altitude_stddev_ft": 3000,
                    "min_length_nm": 30,
                    "max_length_nm": 200,
                    "min_confidence": 0.5,
                },
            },
            "formations": {
                "match_threshold": Settings.FORMATION_MATCH_THRESHOLD,
                "max_workers": 4,
            },
            "logging": {
                "level": "INFO",
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            },
        }

    def save_config(self) -> None:
        """
        Save current configuration to YAML file.

        Raises:
            ValueError: If config_path is not set
        """
        if self.config_path is None:
            raise ValueError("Cannot save config: no config_path specified")

        with open(self.config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self._config, f, default_flow_style=False)

    def configure_logging(self) -> None:
        """Apply the logging section to the root logger."""
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format=self.log_format,
        )

    # --- Property Accessors ---

    @property
    def match_threshold(self) -> float:
        """Get the minimum score for a formation match."""
        return float(self._config["formations"]["match_threshold"])

    @property
    def max_workers(self) -> Optional[int]:
        """Get the worker count for batch formation scoring."""
        workers = self._config["formations"].get("max_workers")
        return int(workers) if workers is not None else None

    @property
    def log_level(self) -> str:
        """Get logging level name."""
        return str(self._config["logging"].get("level", "INFO")).upper()

    @property
    def log_format(self) -> str:
        """Get logging format string."""
        return self._config["logging"].get(
            "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    # --- Generic Accessors ---

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value using dot notation.

        Args:
            key: Dot-separated key path (e.g., 'patterns.orbit.min_radius_nm')
            default: Default value if key not found

        Returns:
            Configuration value or default

        Example:
            >>> config.get('patterns.holding.max_area_nm2', 50)
            50
        """
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
                if value is None:
                    return default
            else:
                return default

        return value

    def set(self, key: str, value: Any) -> None:
        """
        Set configuration value using dot notation.

        Args:
            key: Dot-separated key path (e.g., 'formations.match_threshold')
            value: Value to set

        Example:
            >>> config.set('formations.max_workers', 8)
        """
        keys = key.split(".")
        config = self._config

        # Navigate to parent of target key
        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
