"""
Shared synthetic tracks for pattern tests.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from talon.geometry import TrackPoint, destination

START_TIME = 1_700_000_000


def make_racetrack(step_seconds=30):
    """
    Two straight 090°/270° legs along the equator joined by sharp turns.

    East 20 points, straight back west 19 points, east again 19 points.
    Each leg between the turns is 0.19° (about 11.4 nm) long.
    """
    coords = []
    coords += [(0.0, i * 0.01) for i in range(20)]
    coords += [(0.0, (18 - i) * 0.01) for i in range(19)]
    coords += [(0.0, (i + 1) * 0.01) for i in range(19)]
    return _timed(coords, step_seconds)


def make_offset_racetrack(step_seconds=30):
    """
    East along the equator, west 3 nm further south, east again.

    Each turn has a short southbound or northbound segment at the corner.
    """
    coords = []
    coords += [(0.0, i * 0.01) for i in range(20)]
    coords += [(-0.05, (19 - i) * 0.01) for i in range(20)]
    coords += [(0.0, i * 0.01) for i in range(20)]
    return _timed(coords, step_seconds)


def _timed(coords, step_seconds):
    return [
        TrackPoint(lat, lon, timestamp=START_TIME + i * step_seconds)
        for i, (lat, lon) in enumerate(coords)
    ]


def make_orbit(center=(50.0, 10.0), radius_nm=5.0, points_per_rev=24,
               revolutions=2, clockwise=True, step_seconds=30):
    """Evenly spaced positions on a circle, flown clockwise or counterclockwise."""
    origin = TrackPoint(*center)
    step = 360.0 / points_per_rev * (1 if clockwise else -1)
    track = []
    for i in range(points_per_rev * revolutions):
        p = destination(origin, (i * step) % 360, radius_nm)
        track.append(TrackPoint(p.latitude, p.longitude, timestamp=START_TIME + i * step_seconds))
    return track


@pytest.fixture
def racetrack_track():
    return make_racetrack()


@pytest.fixture
def orbit_track():
    return make_orbit()


@pytest.fixture
def tanker_track():
    """40 minutes due east at FL250, 1.5 nm per minute."""
    return [
        TrackPoint(0.0, i * 0.025, timestamp=START_TIME + i * 60,
                   altitude=25000 + (i % 3) * 100)
        for i in range(41)
    ]


@pytest.fixture
def offset_racetrack_track():
    return make_offset_racetrack()
