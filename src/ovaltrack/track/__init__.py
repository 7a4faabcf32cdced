"""Oval track model, point fitting and lap progress."""

from ovaltrack.track.layouts import build_standard_track
from ovaltrack.track.models import (
    FittedPoint,
    LapProgressPoint,
    Segment,
    TrackDescription,
    build_track_description,
)
from ovaltrack.track.oval import StraightSegment, TrackOnSphere
from ovaltrack.track.progress import (
    accumulate_lap_progress,
    completed_laps,
    proportion_step,
    reduce_fitted_path,
)

__all__ = [
    "FittedPoint",
    "LapProgressPoint",
    "Segment",
    "StraightSegment",
    "TrackDescription",
    "TrackOnSphere",
    "accumulate_lap_progress",
    "build_standard_track",
    "build_track_description",
    "completed_laps",
    "proportion_step",
    "reduce_fitted_path",
]
