"""Ready-made track layouts."""

from __future__ import annotations

from ovaltrack.track.models import build_track_description
from ovaltrack.track.oval import TrackOnSphere
from ovaltrack.utils.constants import (
    DEFAULT_LANE_WIDTH,
    EARTH_RADIUS,
    STANDARD_STRAIGHT_LENGTH,
    STANDARD_TRACK_LENGTH,
)


def build_standard_track(
    center: tuple[float, float],
    angle: float = 0.0,
    lane_number: int = 1,
    lane_width: float = DEFAULT_LANE_WIDTH,
    sphere_radius: float = EARTH_RADIUS,
) -> TrackOnSphere:
    """Build a standard 400 m athletics track.

    Args:
        center: Track center ``(lon, lat)`` [deg].
        angle: Bearing of the long axis at the center [rad].
        lane_number: 1-indexed lane.
        lane_width: Width of one lane [m].
        sphere_radius: Radius of the carrying sphere [m].

    Returns:
        Track with 84.39 m straights and a 400 m lane-1 lap.

    Raises:
        ovaltrack.utils.exceptions.InvalidTrackGeometry: If the parameters do
            not describe a valid track.
    """
    description = build_track_description(
        center=center,
        angle=angle,
        straight_length=STANDARD_STRAIGHT_LENGTH,
        track_length=STANDARD_TRACK_LENGTH,
        sphere_radius=sphere_radius,
        lane_width=lane_width,
        lane_number=lane_number,
    )
    return TrackOnSphere(description)
