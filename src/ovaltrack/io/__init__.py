"""Track-point file formats."""

from ovaltrack.io.tcx import (
    TcxData,
    TrackPoint,
    apply_fit_to_track_points,
    load_tcx,
    parse_tcx,
    save_tcx,
    write_tcx,
)

__all__ = [
    "TcxData",
    "TrackPoint",
    "apply_fit_to_track_points",
    "load_tcx",
    "parse_tcx",
    "save_tcx",
    "write_tcx",
]
