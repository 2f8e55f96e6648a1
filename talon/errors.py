"""
TALON Errors
"""


class InvalidInputError(ValueError):
    """
    Raised when an operation receives too little or malformed input.

    This is the only failure the detection engine signals. It is
    deterministic and correctable by the caller: fit a circle with at
    least three points, take a centroid of at least one point.
    """
