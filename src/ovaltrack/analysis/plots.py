"""Static plots of the track outline and fitted positions."""

from __future__ import annotations

import math
from collections.abc import Sequence
from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from ovaltrack.geometry.adapters import as_coordinate_array
from ovaltrack.track.models import LapProgressPoint
from ovaltrack.track.oval import TrackOnSphere
from ovaltrack.utils.constants import DEFAULT_PRECISION_LEVEL

matplotlib.use("Agg")


def _save_dual_format(fig: Figure, out_base: Path) -> None:
    """Write a figure to PNG and PDF with a shared base path.

    Args:
        fig: Figure object to persist.
        out_base: Output path without suffix.
    """
    out_base.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(out_base.with_suffix(".png"), dpi=180, bbox_inches="tight")
    fig.savefig(out_base.with_suffix(".pdf"), bbox_inches="tight")


def plot_track_fit(
    track: TrackOnSphere,
    raw_coordinates: Sequence[Sequence[float]],
    fitted: Sequence[LapProgressPoint],
    out_base: str | Path,
    precision_level: int = DEFAULT_PRECISION_LEVEL,
) -> None:
    """Plot the track outline with raw and fitted positions.

    Args:
        track: Track whose outline is drawn.
        raw_coordinates: Recorded ``(lon, lat)`` positions [deg].
        fitted: Fitted points in the same order as ``raw_coordinates``.
        out_base: Output path without suffix.
        precision_level: Outline sampling level.
    """
    outline = track.path_coordinates(precision_level)
    raw = as_coordinate_array(raw_coordinates)
    snapped = as_coordinate_array(point.coordinate for point in fitted if point.error is None)

    fig, ax = plt.subplots(figsize=(7, 7))
    ax.plot(outline[:, 0], outline[:, 1], color="tab:red", lw=2.0, label="Track")
    if raw.size:
        ax.scatter(raw[:, 0], raw[:, 1], s=9, alpha=0.5, color="tab:gray", label="Recorded")
    if snapped.size:
        ax.scatter(snapped[:, 0], snapped[:, 1], s=9, alpha=0.8, color="tab:blue", label="Fitted")
    ax.set_xlabel("Longitude [deg]")
    ax.set_ylabel("Latitude [deg]")
    ax.set_title("Track Fit")
    ax.set_aspect(1.0 / max(math.cos(math.radians(float(np.mean(outline[:, 1])))), 1e-6))
    ax.grid(True, alpha=0.3)
    ax.legend()
    _save_dual_format(fig, Path(out_base))
    plt.close(fig)


def plot_lap_progress(fitted: Sequence[LapProgressPoint], out_base: str | Path) -> None:
    """Plot cumulative lap progress over sample index.

    Args:
        fitted: Fitted points in recording order.
        out_base: Output path without suffix.
    """
    progress = np.asarray([point.lap_progress for point in fitted], dtype=float)
    fig, ax = plt.subplots(figsize=(9, 4))
    ax.plot(np.arange(progress.size), progress, lw=2.0)
    ax.set_xlabel("Sample [-]")
    ax.set_ylabel("Lap progress [laps]")
    ax.set_title("Lap Progress")
    ax.grid(True, alpha=0.3)
    _save_dual_format(fig, Path(out_base))
    plt.close(fig)
