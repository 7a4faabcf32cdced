"""Oval running tracks on a sphere and GPS lap fitting."""

from ovaltrack.track import (
    FittedPoint,
    LapProgressPoint,
    Segment,
    TrackDescription,
    TrackOnSphere,
    build_standard_track,
    build_track_description,
)

__all__ = [
    "FittedPoint",
    "LapProgressPoint",
    "Segment",
    "TrackDescription",
    "TrackOnSphere",
    "build_standard_track",
    "build_track_description",
]
