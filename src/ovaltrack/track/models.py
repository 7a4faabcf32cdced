"""Track description and fitting result models."""

from __future__ import annotations

import dataclasses
import enum
import math
from dataclasses import dataclass

import numpy as np

from ovaltrack.utils.constants import (
    DEFAULT_LANE_WIDTH,
    EARTH_RADIUS,
    STANDARD_STRAIGHT_LENGTH,
    STANDARD_TRACK_LENGTH,
)
from ovaltrack.utils.exceptions import InvalidTrackGeometry

DEFAULT_LANE_NUMBER = 1
DEFAULT_ANGLE = 0.0


class Segment(enum.Enum):
    """Track segment a position is classified onto, in lap order."""

    POSITIVE_CURVE = "positive_curve"
    FRONT_STRAIGHT = "front_straight"
    NEGATIVE_CURVE = "negative_curve"
    BACK_STRAIGHT = "back_straight"

    @property
    def is_curve(self) -> bool:
        """Whether the segment is one of the two curves.

        Returns:
            ``True`` for curve segments.
        """
        return self in (Segment.POSITIVE_CURVE, Segment.NEGATIVE_CURVE)


@dataclass(frozen=True)
class TrackDescription:
    """Immutable description of an oval track on a sphere.

    Args:
        center: Track center ``(lon, lat)`` [deg].
        angle: Bearing of the long axis at the center [rad].
        straight_length: Length of one straight [m].
        track_length: Nominal lane-1 perimeter [m].
        sphere_radius: Radius of the sphere carrying the track [m].
        lane_width: Width of one lane [m].
        lane_number: 1-indexed lane, lane 1 is the innermost.
    """

    center: tuple[float, float]
    angle: float = DEFAULT_ANGLE
    straight_length: float = STANDARD_STRAIGHT_LENGTH
    track_length: float = STANDARD_TRACK_LENGTH
    sphere_radius: float = EARTH_RADIUS
    lane_width: float = DEFAULT_LANE_WIDTH
    lane_number: int = DEFAULT_LANE_NUMBER

    @property
    def effective_track_length(self) -> float:
        """Lane-adjusted lap length [m].

        Each outer lane adds ``pi * lane_width`` to half of the lap.

        Returns:
            Lap length of the selected lane [m].
        """
        return self.track_length + self.lane_width * (self.lane_number - 1) * math.pi

    def validate(self) -> None:
        """Validate that the description yields a closed oval.

        Raises:
            ovaltrack.utils.exceptions.InvalidTrackGeometry: If any parameter
                is non-finite or violates its geometric bound.
        """
        scalars = {
            "angle": self.angle,
            "straight_length": self.straight_length,
            "track_length": self.track_length,
            "sphere_radius": self.sphere_radius,
            "lane_width": self.lane_width,
        }
        for name, value in scalars.items():
            if not np.isfinite(value):
                msg = f"{name} must be finite, got {value!r}"
                raise InvalidTrackGeometry(msg)
        if len(self.center) != 2 or not all(np.isfinite(value) for value in self.center):
            msg = f"center must be a finite (lon, lat) pair, got {self.center!r}"
            raise InvalidTrackGeometry(msg)
        if not -90.0 < self.center[1] < 90.0:
            msg = f"center latitude must be within (-90, 90) deg, got {self.center[1]}"
            raise InvalidTrackGeometry(msg)
        if self.sphere_radius <= 0.0:
            msg = "sphere_radius must be positive"
            raise InvalidTrackGeometry(msg)
        if self.straight_length < 0.0:
            msg = "straight_length must not be negative"
            raise InvalidTrackGeometry(msg)
        if self.track_length <= 2.0 * self.straight_length:
            msg = (
                "track_length must exceed twice the straight_length, got "
                f"track_length={self.track_length} and straight_length={self.straight_length}"
            )
            raise InvalidTrackGeometry(msg)
        if self.lane_width < 0.0:
            msg = "lane_width must not be negative"
            raise InvalidTrackGeometry(msg)
        if (
            isinstance(self.lane_number, bool)
            or not isinstance(self.lane_number, (int, np.integer))
            or self.lane_number < 1
        ):
            msg = f"lane_number must be an integer of at least 1, got {self.lane_number!r}"
            raise InvalidTrackGeometry(msg)

        effective_angular_length = self.effective_track_length / self.sphere_radius
        if effective_angular_length >= 2.0 * math.pi:
            msg = "Track does not fit on the sphere: lap is longer than a great circle"
            raise InvalidTrackGeometry(msg)

        # Bearings are undefined at a pole, so the outline must stay clear of both.
        curve_radius = (self.effective_track_length / 2.0 - self.straight_length) / math.pi
        extent = (self.straight_length / 2.0 + curve_radius) / self.sphere_radius
        pole_distance = math.radians(90.0 - abs(float(self.center[1])))
        if pole_distance <= extent:
            msg = f"Track centered at latitude {self.center[1]} deg reaches a pole"
            raise InvalidTrackGeometry(msg)

    def replace(self, **changes: object) -> TrackDescription:
        """Return a validated copy with some fields replaced.

        Args:
            **changes: Field values to override.

        Returns:
            New validated description.

        Raises:
            ovaltrack.utils.exceptions.InvalidTrackGeometry: If the updated
                description is invalid.
        """
        updated = dataclasses.replace(self, **changes)
        updated.validate()
        return updated


def build_track_description(
    center: tuple[float, float],
    angle: float = DEFAULT_ANGLE,
    straight_length: float = STANDARD_STRAIGHT_LENGTH,
    track_length: float = STANDARD_TRACK_LENGTH,
    sphere_radius: float = EARTH_RADIUS,
    lane_width: float = DEFAULT_LANE_WIDTH,
    lane_number: int = DEFAULT_LANE_NUMBER,
) -> TrackDescription:
    """Build a validated track description.

    Args:
        center: Track center ``(lon, lat)`` [deg].
        angle: Bearing of the long axis at the center [rad].
        straight_length: Length of one straight [m].
        track_length: Nominal lane-1 perimeter [m].
        sphere_radius: Radius of the sphere carrying the track [m].
        lane_width: Width of one lane [m].
        lane_number: 1-indexed lane.

    Returns:
        Fully validated track description.

    Raises:
        ovaltrack.utils.exceptions.InvalidTrackGeometry: If the assembled
            description cannot produce a valid oval.
    """
    description = TrackDescription(
        center=(float(center[0]), float(center[1])),
        angle=float(angle),
        straight_length=float(straight_length),
        track_length=float(track_length),
        sphere_radius=float(sphere_radius),
        lane_width=float(lane_width),
        lane_number=lane_number,
    )
    description.validate()
    return description


@dataclass(frozen=True)
class FittedPoint:
    """Position projected onto the track.

    Args:
        coordinate: Projected ``(lon, lat)`` [deg], or the input when fitting
            failed.
        proportion: Fraction of one lap in ``[0, 1)``, NaN when fitting failed.
        segment: Segment the point was projected onto.
        error: Failure description for points that could not be projected.
    """

    coordinate: tuple[float, float]
    proportion: float
    segment: Segment | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """Whether the point was projected successfully.

        Returns:
            ``True`` when no error was recorded.
        """
        return self.error is None


@dataclass(frozen=True)
class LapProgressPoint:
    """Fitted position with cumulative lap progress.

    Args:
        coordinate: Projected ``(lon, lat)`` [deg].
        proportion: Fraction of one lap of this point.
        lap_progress: Cumulative laps travelled since the first point.
        segment: Segment the point was projected onto.
        error: Failure description for points that could not be projected.
    """

    coordinate: tuple[float, float]
    proportion: float
    lap_progress: float
    segment: Segment | None = None
    error: str | None = None
