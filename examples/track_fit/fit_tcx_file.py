"""Snap the positions of a TCX recording onto an oval track."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from ovaltrack.io import TcxData, apply_fit_to_track_points, load_tcx, save_tcx
from ovaltrack.track import TrackOnSphere, build_track_description
from ovaltrack.utils import configure_logging
from ovaltrack.utils.exceptions import OvalTrackError


def _parse_args() -> argparse.Namespace:
    """Parse command-line arguments for the TCX fitting example.

    Returns:
        Parsed CLI namespace.
    """
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("input", type=Path, help="Recorded TCX file.")
    parser.add_argument("output", type=Path, help="Destination TCX file.")
    parser.add_argument("--lon", type=float, required=True, help="Track center longitude [deg].")
    parser.add_argument("--lat", type=float, required=True, help="Track center latitude [deg].")
    parser.add_argument("--angle", type=float, default=0.0, help="Long-axis bearing [rad].")
    parser.add_argument("--straight", type=float, default=84.39, help="Straight length [m].")
    parser.add_argument("--length", type=float, default=400.0, help="Lane-1 lap length [m].")
    parser.add_argument("--lane", type=int, default=1, help="Lane number.")
    return parser.parse_args()


def main() -> None:
    """Load, fit and write a TCX recording."""
    args = _parse_args()
    configure_logging(logging.INFO)
    logger = logging.getLogger("tcx_fit_example")

    try:
        track = TrackOnSphere(
            build_track_description(
                center=(args.lon, args.lat),
                angle=args.angle,
                straight_length=args.straight,
                track_length=args.length,
                lane_number=args.lane,
            )
        )
        recording = load_tcx(args.input)
    except OvalTrackError as exc:
        logger.error("%s", exc)
        return

    fitted_points = apply_fit_to_track_points(track, recording.track_points)
    save_tcx(TcxData(track_points=fitted_points), args.output)

    logger.info("Fitted %d track points", len(fitted_points))
    if fitted_points and fitted_points[-1].distance is not None:
        logger.info("Track distance: %.1f m", fitted_points[-1].distance)


if __name__ == "__main__":
    main()
