"""Oval running track built from two small-circle curves and two straights."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

import numpy as np

from ovaltrack.geometry.adapters import degrees_to_radians, radians_to_degrees
from ovaltrack.geometry.circle import SmallCircleOnSphere
from ovaltrack.geometry.spherical import (
    FloatArray,
    angle_between,
    cross_product,
    destination_point,
    great_circle_bearing,
    great_circle_distance,
    lon_lat_to_unit_vector,
    project_onto_plane,
    slerp,
    unit_vector_to_lon_lat,
)
from ovaltrack.track.models import FittedPoint, LapProgressPoint, Segment, TrackDescription
from ovaltrack.track.progress import reduce_fitted_path
from ovaltrack.utils.constants import DEFAULT_PRECISION_LEVEL, SMALL_EPS, UNIT_SPHERE_RADIUS
from ovaltrack.utils.exceptions import InvalidTrackGeometry

logger = logging.getLogger(__name__)

HALF_PI = 0.5 * math.pi
# Rounding on the back straight end leaves the start line about 1e-12 short of 1.
PROPORTION_SEAM_TOLERANCE = 1e-9


@dataclass(frozen=True, eq=False)
class StraightSegment:
    """Great-circle segment between two curve end points.

    Args:
        start: Start point ``(lon, lat)`` [rad].
        end: End point ``(lon, lat)`` [rad].
    """

    start: tuple[float, float]
    end: tuple[float, float]
    start_vector: FloatArray = field(init=False)
    end_vector: FloatArray = field(init=False)
    normal: FloatArray = field(init=False)
    angular_length: float = field(init=False)

    def __post_init__(self) -> None:
        """Derive Cartesian end points, plane normal and length."""
        start_vector = lon_lat_to_unit_vector(self.start)
        end_vector = lon_lat_to_unit_vector(self.end)
        object.__setattr__(self, "start_vector", start_vector)
        object.__setattr__(self, "end_vector", end_vector)
        # Using the chord keeps the normal accurate for segments a few metres long.
        normal = cross_product(start_vector, end_vector - start_vector)
        object.__setattr__(self, "normal", normal)
        angular_length = float(great_circle_distance(self.start, self.end))
        object.__setattr__(self, "angular_length", angular_length)

    def project(self, point: tuple[float, float]) -> tuple[tuple[float, float], float]:
        """Project a point orthogonally onto the segment's great circle.

        Args:
            point: Point ``(lon, lat)`` [rad].

        Returns:
            Projected ``(lon, lat)`` [rad] and its central angle to ``point``
            [rad]. Both are NaN for a zero-length segment.
        """
        projected = project_onto_plane(lon_lat_to_unit_vector(point), self.normal)
        if not np.all(np.isfinite(projected)):
            nan_point = (math.nan, math.nan)
            return nan_point, math.nan
        projected_point = unit_vector_to_lon_lat(projected)
        return projected_point, float(great_circle_distance(projected_point, point))

    def point_at_fraction(self, fraction: float) -> tuple[float, float]:
        """Interpolate a point along the segment.

        Args:
            fraction: ``0`` at the start and ``1`` at the end.

        Returns:
            Point ``(lon, lat)`` [rad].
        """
        return unit_vector_to_lon_lat(slerp(self.start_vector, self.end_vector, fraction))


def _angle_to_center(
    curve_center: tuple[float, float], track_center: tuple[float, float], fallback: float
) -> float:
    """Bearing from a curve center back to the track center.

    Args:
        curve_center: Curve circle center ``(lon, lat)`` [rad].
        track_center: Track center ``(lon, lat)`` [rad].
        fallback: Bearing used when both centers coincide [rad].

    Returns:
        Bearing [rad].
    """
    if float(great_circle_distance(curve_center, track_center)) <= SMALL_EPS:
        return float(angle_between(0.0, fallback))
    return float(great_circle_bearing(curve_center, track_center))


def _path_steps(precision_level: int) -> int:
    """Number of sampling steps per half lap.

    Args:
        precision_level: Base-2 logarithm of samples per full sweep.

    Returns:
        Step count per curve.

    Raises:
        ovaltrack.utils.exceptions.InvalidTrackGeometry: If the precision
            level is below ``1``.
    """
    if int(precision_level) < 1:
        msg = f"precision_level must be at least 1, got {precision_level!r}"
        raise InvalidTrackGeometry(msg)
    return 2 ** int(precision_level) // 2


def _wrap_proportion(proportion: float) -> float:
    """Wrap a lap proportion into ``[0, 1)``.

    Values within :data:`PROPORTION_SEAM_TOLERANCE` below ``1`` belong to the
    start line and are reported as ``0``.

    Args:
        proportion: Raw lap proportion.

    Returns:
        Proportion in ``[0, 1)``.
    """
    wrapped = float(np.mod(proportion, 1.0))
    if wrapped > 1.0 - PROPORTION_SEAM_TOLERANCE:
        return 0.0
    return wrapped


@dataclass(frozen=True, eq=False)
class TrackOnSphere:
    """Closed oval track on a sphere.

    Derived geometry is expressed as central angles on a unit sphere. Instances
    are immutable; use :meth:`with_orientation`, :meth:`with_lane` or
    :meth:`with_description` to obtain an updated track.

    Straight end points and :meth:`position_at` use the axis bearing
    ``angle +- pi/2`` taken at the track center, while curve classification
    and curve proportions use each curve's own bearing back to the center.
    Meridians converge between the two centers, so the two conventions
    disagree by a small angle that grows with latitude. Near the poles fitted
    proportions drift by up to a few hundredths of a lap at 89.999 deg, while
    at mid latitudes the drift stays below ``1e-6``.

    Args:
        description: Validated track description.
    """

    description: TrackDescription
    center: tuple[float, float] = field(init=False)
    angle: float = field(init=False)
    effective_track_length: float = field(init=False)
    straight_length: float = field(init=False)
    curve_length: float = field(init=False)
    curve_linear_radius: float = field(init=False)
    positive_curve: SmallCircleOnSphere = field(init=False)
    negative_curve: SmallCircleOnSphere = field(init=False)
    positive_angle_to_center: float = field(init=False)
    negative_angle_to_center: float = field(init=False)
    front_straight: StraightSegment = field(init=False)
    back_straight: StraightSegment = field(init=False)

    def __post_init__(self) -> None:
        """Validate the description and derive all geometry at once.

        Raises:
            ovaltrack.utils.exceptions.InvalidTrackGeometry: If the description
                is invalid.
        """
        desc = self.description
        desc.validate()

        center = degrees_to_radians(desc.center)
        angle = float(desc.angle)
        effective_track_length = desc.effective_track_length / desc.sphere_radius
        straight_length = desc.straight_length / desc.sphere_radius
        curve_length = effective_track_length / 2.0 - straight_length
        curve_linear_radius = curve_length / math.pi

        half_straight = straight_length / 2.0
        positive_center = tuple(float(v) for v in destination_point(center, angle, half_straight))
        negative_center = tuple(float(v) for v in destination_point(center, angle, -half_straight))
        positive_curve = SmallCircleOnSphere(
            curve_linear_radius, positive_center, UNIT_SPHERE_RADIUS
        )
        negative_curve = SmallCircleOnSphere(
            curve_linear_radius, negative_center, UNIT_SPHERE_RADIUS
        )

        front_straight = StraightSegment(
            start=_as_point(positive_curve.point_at(angle - HALF_PI)),
            end=_as_point(negative_curve.point_at(angle - HALF_PI)),
        )
        back_straight = StraightSegment(
            start=_as_point(negative_curve.point_at(angle + HALF_PI)),
            end=_as_point(positive_curve.point_at(angle + HALF_PI)),
        )

        values = {
            "center": center,
            "angle": angle,
            "effective_track_length": effective_track_length,
            "straight_length": straight_length,
            "curve_length": curve_length,
            "curve_linear_radius": curve_linear_radius,
            "positive_curve": positive_curve,
            "negative_curve": negative_curve,
            "positive_angle_to_center": _angle_to_center(positive_center, center, angle + math.pi),
            "negative_angle_to_center": _angle_to_center(negative_center, center, angle),
            "front_straight": front_straight,
            "back_straight": back_straight,
        }
        for name, value in values.items():
            object.__setattr__(self, name, value)

        logger.debug(
            "Built track at %s, angle %.4f rad, lane %d: lap %.2f m, curve radius %.3f m",
            desc.center,
            angle,
            desc.lane_number,
            desc.effective_track_length,
            curve_linear_radius * desc.sphere_radius,
        )

    @property
    def lap_length(self) -> float:
        """Lane-adjusted lap length [m].

        Returns:
            Effective lap length of the configured lane [m].
        """
        return self.description.effective_track_length

    @property
    def curve_fraction(self) -> float:
        """Share of one lap covered by a single curve.

        Returns:
            ``curve_length / effective_track_length``.
        """
        return self.curve_length / self.effective_track_length

    @property
    def straight_fraction(self) -> float:
        """Share of one lap covered by a single straight.

        Returns:
            ``straight_length / effective_track_length``.
        """
        return self.straight_length / self.effective_track_length

    def recompute(self) -> TrackOnSphere:
        """Rebuild the track from its description.

        Returns:
            New track with bit-identical derived geometry.
        """
        return TrackOnSphere(self.description)

    def with_description(self, **changes: object) -> TrackOnSphere:
        """Build a new track from an updated description.

        Args:
            **changes: ``TrackDescription`` fields to override.

        Returns:
            New track.

        Raises:
            ovaltrack.utils.exceptions.InvalidTrackGeometry: If the updated
                description is invalid.
        """
        return TrackOnSphere(self.description.replace(**changes))

    def with_orientation(self, center: tuple[float, float], angle: float) -> TrackOnSphere:
        """Build a new track moved to another center and tilt.

        Args:
            center: New track center ``(lon, lat)`` [deg].
            angle: New long-axis bearing [rad].

        Returns:
            New track.
        """
        return self.with_description(
            center=(float(center[0]), float(center[1])), angle=float(angle)
        )

    def with_lane(self, lane_number: int) -> TrackOnSphere:
        """Build a new track for another lane.

        Args:
            lane_number: 1-indexed lane.

        Returns:
            New track.
        """
        return self.with_description(lane_number=lane_number)

    def _curves(self) -> tuple[tuple[Segment, SmallCircleOnSphere, float, float], ...]:
        """Curve segments in classification priority order.

        Returns:
            ``(segment, circle, angle_to_center, proportion_offset)`` tuples.
        """
        return (
            (Segment.POSITIVE_CURVE, self.positive_curve, self.positive_angle_to_center, 0.0),
            (Segment.NEGATIVE_CURVE, self.negative_curve, self.negative_angle_to_center, 0.5),
        )

    def _straights(self) -> tuple[tuple[Segment, StraightSegment, float], ...]:
        """Straight segments with their proportion offsets.

        Returns:
            ``(segment, straight, proportion_offset)`` tuples.
        """
        return (
            (Segment.FRONT_STRAIGHT, self.front_straight, self.curve_fraction),
            (Segment.BACK_STRAIGHT, self.back_straight, 0.5 + self.curve_fraction),
        )

    def classify(self, point: tuple[float, float]) -> Segment:
        """Classify a point onto the segment it is projected to.

        Curves are tested first, positive before negative: a point beyond the
        half-plane through a curve center perpendicular to the track axis
        belongs to that curve. Remaining points go to the closer straight.

        Args:
            point: Position ``(lon, lat)`` [rad].

        Returns:
            Segment the point belongs to.
        """
        for segment, circle, angle_to_center, _ in self._curves():
            bearing = great_circle_bearing(circle.center, point)
            if abs(float(angle_between(bearing, angle_to_center))) > HALF_PI:
                return segment

        _, front_distance = self.front_straight.project(point)
        _, back_distance = self.back_straight.project(point)
        if back_distance < front_distance:
            return Segment.BACK_STRAIGHT
        return Segment.FRONT_STRAIGHT

    def fit_to_track(self, coordinate: Sequence[float]) -> FittedPoint:
        """Project one position onto the track.

        Args:
            coordinate: Position ``(lon, lat)`` [deg].

        Returns:
            Projected position with its lap proportion. Failures are reported
            through ``FittedPoint.error`` instead of raising.
        """
        point = degrees_to_radians(coordinate)
        segment = self.classify(point)
        if segment.is_curve:
            return self._fit_curve(segment, point)
        return self._fit_straight(segment, point, coordinate)

    def _fit_curve(self, segment: Segment, point: tuple[float, float]) -> FittedPoint:
        """Snap a point radially onto a curve.

        Args:
            segment: Curve segment the point was classified onto.
            point: Position ``(lon, lat)`` [rad].

        Returns:
            Point on the curve with its lap proportion.
        """
        _, circle, angle_to_center, offset = next(
            item for item in self._curves() if item[0] is segment
        )
        bearing = float(great_circle_bearing(circle.center, point))
        along = float(angle_between(bearing, angle_to_center - HALF_PI)) / math.pi
        # The curve end sits on the -pi/pi seam of angle_between.
        if along < -0.5:
            along += 2.0
        along = min(max(along, 0.0), 1.0)
        return FittedPoint(
            coordinate=radians_to_degrees(circle.point_at(bearing)),
            proportion=_wrap_proportion(offset + along * self.curve_fraction),
            segment=segment,
        )

    def _fit_straight(
        self,
        segment: Segment,
        point: tuple[float, float],
        coordinate: Sequence[float],
    ) -> FittedPoint:
        """Project a point onto a straight.

        Args:
            segment: Straight segment the point was classified onto.
            point: Position ``(lon, lat)`` [rad].
            coordinate: Original position ``(lon, lat)`` [deg].

        Returns:
            Point on the straight with its lap proportion, or a failed fit.
        """
        _, straight, offset = next(item for item in self._straights() if item[0] is segment)
        failed_coordinate = (float(coordinate[0]), float(coordinate[1]))
        if straight.angular_length <= SMALL_EPS:
            return FittedPoint(
                coordinate=failed_coordinate,
                proportion=math.nan,
                error=f"{segment.value} has zero length",
            )

        projected, _ = straight.project(point)
        if not all(np.isfinite(projected)):
            return FittedPoint(
                coordinate=failed_coordinate,
                proportion=math.nan,
                error=f"projection onto {segment.value} is undefined",
            )

        along = float(great_circle_distance(straight.start, projected)) / straight.angular_length
        return FittedPoint(
            coordinate=radians_to_degrees(projected),
            proportion=_wrap_proportion(offset + along * self.straight_fraction),
            segment=segment,
        )

    def fit_path_to_track(self, coordinates: Iterable[Sequence[float]]) -> list[LapProgressPoint]:
        """Fit a position sequence and accumulate lap progress.

        Args:
            coordinates: Positions ``(lon, lat)`` [deg] in recording order.

        Returns:
            One lap-progress point per input position.
        """
        fitted = [self.fit_to_track(coordinate) for coordinate in coordinates]
        failed = sum(1 for point in fitted if not point.ok)
        if failed:
            logger.warning("%d of %d points could not be fitted to the track", failed, len(fitted))
        progress = reduce_fitted_path(fitted)
        if progress:
            logger.debug("Fitted %d points, %.3f laps", len(progress), progress[-1].lap_progress)
        return progress

    def position_at(self, proportion: float) -> tuple[float, float]:
        """Locate the track position at a lap proportion.

        Args:
            proportion: Lap proportion, wrapped into ``[0, 1)``.

        Returns:
            Position ``(lon, lat)`` [deg] on the track.
        """
        p = float(np.mod(proportion, 1.0))
        curve_fraction = self.curve_fraction
        straight_fraction = self.straight_fraction
        # Curves are swept like the outline so that proportion 0 is its first sample.
        sweep_starts = (self.angle + HALF_PI, self.angle - HALF_PI)
        for (_, circle, _, offset), sweep_start in zip(self._curves(), sweep_starts):
            if offset <= p < offset + curve_fraction:
                along = (p - offset) / curve_fraction
                return radians_to_degrees(circle.point_at(sweep_start - along * math.pi))

        _, straight, offset = self._straights()[0 if p < 0.5 else 1]
        along = (p - offset) / straight_fraction if straight_fraction > 0.0 else 0.0
        return radians_to_degrees(straight.point_at_fraction(along))

    def positions_at(self, proportions: Iterable[float]) -> FloatArray:
        """Locate track positions for several lap proportions.

        Args:
            proportions: Lap proportions, each wrapped into ``[0, 1)``.

        Returns:
            Array of ``(lon, lat)`` rows [deg].
        """
        rows = [self.position_at(p) for p in proportions]
        return np.asarray(rows, dtype=np.float64).reshape(-1, 2)

    def path_coordinates(self, precision_level: int = DEFAULT_PRECISION_LEVEL) -> FloatArray:
        """Sample the closed track outline.

        The positive curve is swept from ``angle + pi/2`` down to
        ``angle - pi/2`` (both ends included), the negative curve continues
        the sweep for ``steps`` samples and the first sample closes the loop,
        giving ``2 * steps + 2`` rows.

        Args:
            precision_level: Samples per full sweep as a power of two.

        Returns:
            Array of ``(lon, lat)`` rows [deg].

        Raises:
            ovaltrack.utils.exceptions.InvalidTrackGeometry: If
                ``precision_level`` is below ``1``.
        """
        steps = _path_steps(precision_level)
        step = math.pi / steps
        positive_bearings = self.angle + HALF_PI - np.arange(steps + 1, dtype=np.float64) * step
        negative_bearings = self.angle - HALF_PI - np.arange(steps, dtype=np.float64) * step

        positive = np.column_stack(self.positive_curve.point_at_degrees(positive_bearings))
        negative = np.column_stack(self.negative_curve.point_at_degrees(negative_bearings))
        return np.concatenate([positive, negative, positive[:1]])

    def iter_path_coordinates(
        self,
        precision_level: int = DEFAULT_PRECISION_LEVEL,
    ) -> Iterator[tuple[float, float]]:
        """Lazily yield the closed track outline.

        Args:
            precision_level: Samples per full sweep as a power of two.

        Returns:
            Iterator over ``(lon, lat)`` pairs [deg] in the order of
            :meth:`path_coordinates`.

        Raises:
            ovaltrack.utils.exceptions.InvalidTrackGeometry: If
                ``precision_level`` is below ``1``.
        """
        steps = _path_steps(precision_level)
        step = math.pi / steps
        first = _as_point(self.positive_curve.point_at_degrees(self.angle + HALF_PI))
        yield first
        for k in range(1, steps + 1):
            yield _as_point(self.positive_curve.point_at_degrees(self.angle + HALF_PI - k * step))
        for k in range(steps):
            yield _as_point(self.negative_curve.point_at_degrees(self.angle - HALF_PI - k * step))
        yield first


def _as_point(pair: Sequence[float]) -> tuple[float, float]:
    """Convert a numpy ``(lon, lat)`` pair to plain floats.

    Args:
        pair: Two-element coordinate.

    Returns:
        ``(lon, lat)`` as Python floats.
    """
    return float(pair[0]), float(pair[1])
