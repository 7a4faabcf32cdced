"""Shared helpers for track fitting examples."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from ovaltrack.geometry.spherical import FloatArray
from ovaltrack.track import TrackOnSphere
from ovaltrack.utils.constants import EARTH_RADIUS

EXAMPLE_CENTER = (-122.25854118373765, 37.79438679073371)
EXAMPLE_ANGLE = -0.73


def example_output_root() -> Path:
    """Return the output directory for example artifacts.

    Returns:
        Directory below ``examples/output``.
    """
    return Path(__file__).resolve().parent / "output"


def synthetic_gps_trace(
    track: TrackOnSphere,
    laps: float = 2.0,
    samples_per_lap: int = 120,
    noise: float = 2.0,
    seed: int = 7,
) -> FloatArray:
    """Generate a noisy trace that runs around the track.

    Args:
        track: Track to follow.
        laps: Number of laps to run.
        samples_per_lap: Recording rate in samples per lap.
        noise: Standard deviation of position noise [m].
        seed: Random generator seed.

    Returns:
        Array of ``(lon, lat)`` rows [deg].
    """
    rng = np.random.default_rng(seed)
    proportions = np.linspace(0.0, laps, int(laps * samples_per_lap) + 1)
    clean = track.positions_at(proportions)
    noise_deg = np.degrees(rng.normal(0.0, noise, size=clean.shape) / EARTH_RADIUS)
    noise_deg[:, 0] /= np.cos(np.radians(clean[:, 1]))
    return clean + noise_deg
