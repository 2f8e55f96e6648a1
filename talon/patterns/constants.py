"""
Pattern Detection Constants
"""

# Rotation directions
CLOCKWISE = "clockwise"
COUNTERCLOCKWISE = "counterclockwise"
INDETERMINATE = "indeterminate"

# Single-aircraft pattern labels
PATTERN_ORBIT = "orbit"
PATTERN_RACETRACK = "racetrack"
PATTERN_HOLDING = "holding"
PATTERN_TANKER_TRACK = "tanker_track"

# Holding pattern scoring
HOLDING_CONFINEMENT_WEIGHT = 0.6
HOLDING_REVERSAL_WEIGHT = 0.4
HOLDING_FULL_CREDIT_REVERSALS = 4

# Orbit confidence boost for completed revolutions
ORBIT_REVOLUTION_BOOST = 0.2
ORBIT_FULL_BOOST_REVOLUTIONS = 2.0

# Tanker track characteristics (feet / nautical miles / minutes)
TANKER_REFUEL_BAND_FT = (22000, 30000)
TANKER_STABLE_ALTITUDE_FT = 1000
TANKER_STEADY_ALTITUDE_FT = 2000
TANKER_LONG_TRACK_NM = 50
TANKER_LONG_DURATION_MIN = 30
TANKER_MIN_ALTITUDE_SAMPLES = 5
TANKER_STRAIGHTNESS = 0.7
