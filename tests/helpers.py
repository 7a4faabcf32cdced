"""Shared test helpers."""

from __future__ import annotations

import numpy as np

from ovaltrack.geometry.spherical import FloatArray, great_circle_distance
from ovaltrack.track import TrackDescription, TrackOnSphere, build_track_description

SCENARIO_CENTER = (-122.2585, 37.7944)
SCENARIO_ANGLE = -0.73
SCENARIO_SPHERE_RADIUS = 6_371_000.0


def scenario_description(lane_number: int = 1) -> TrackDescription:
    """Create the reference 400 m track description with 100 m straights.

    Args:
        lane_number: 1-indexed lane.

    Returns:
        Validated track description.
    """
    return build_track_description(
        center=SCENARIO_CENTER,
        angle=SCENARIO_ANGLE,
        straight_length=100.0,
        track_length=400.0,
        sphere_radius=SCENARIO_SPHERE_RADIUS,
        lane_width=1.07,
        lane_number=lane_number,
    )


def scenario_track(lane_number: int = 1) -> TrackOnSphere:
    """Create the reference track used across tests.

    Args:
        lane_number: 1-indexed lane.

    Returns:
        Track built from :func:`scenario_description`.
    """
    return TrackOnSphere(scenario_description(lane_number))


def distance_meters(a_deg: tuple[float, float], b_deg: tuple[float, float]) -> float:
    """Great-circle distance between two degree coordinates on the test sphere.

    Args:
        a_deg: First point ``(lon, lat)`` [deg].
        b_deg: Second point ``(lon, lat)`` [deg].

    Returns:
        Distance [m].
    """
    a = np.radians(np.asarray(a_deg, dtype=float))
    b = np.radians(np.asarray(b_deg, dtype=float))
    return float(great_circle_distance(a, b)) * SCENARIO_SPHERE_RADIUS


def noisy_trace(
    track: TrackOnSphere,
    laps: float,
    samples_per_lap: int,
    noise: float,
    seed: int = 3,
) -> FloatArray:
    """Sample positions around the track with Gaussian position noise.

    Args:
        track: Track to follow.
        laps: Laps covered by the trace.
        samples_per_lap: Samples per lap.
        noise: Standard deviation of the noise [m].
        seed: Random generator seed.

    Returns:
        Array of ``(lon, lat)`` rows [deg].
    """
    rng = np.random.default_rng(seed)
    proportions = np.linspace(0.0, laps, int(laps * samples_per_lap) + 1)
    clean = track.positions_at(proportions)
    offsets = np.degrees(rng.normal(0.0, noise, size=clean.shape) / SCENARIO_SPHERE_RADIUS)
    offsets[:, 0] /= np.cos(np.radians(clean[:, 1]))
    return clean + offsets
