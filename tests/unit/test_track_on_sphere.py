"""Unit tests for the oval track model."""

from __future__ import annotations

import dataclasses
import math
import unittest

import numpy as np

from ovaltrack.geometry import angle_between, destination_point, radians_to_degrees
from ovaltrack.track import Segment, TrackOnSphere, build_standard_track, build_track_description
from ovaltrack.utils.exceptions import InvalidTrackGeometry
from tests.helpers import SCENARIO_CENTER, SCENARIO_SPHERE_RADIUS, distance_meters, scenario_track

CURVE_RADIUS = 100.0 / math.pi


class TrackConstructionTests(unittest.TestCase):
    """Validate derived track geometry."""

    def test_derived_lengths(self) -> None:
        """Derive curve length and radius from lap and straight length."""
        track = scenario_track()

        self.assertAlmostEqual(track.lap_length, 400.0)
        self.assertAlmostEqual(track.curve_fraction, 0.25, places=12)
        self.assertAlmostEqual(track.straight_fraction, 0.25, places=12)
        self.assertAlmostEqual(
            track.curve_linear_radius * SCENARIO_SPHERE_RADIUS, CURVE_RADIUS, places=9
        )

    def test_curve_centers_sit_half_a_straight_from_center(self) -> None:
        """Place both curve centers 50 m from the track center along the axis."""
        track = scenario_track()
        for circle in (track.positive_curve, track.negative_curve):
            center_deg = radians_to_degrees(circle.center)
            self.assertAlmostEqual(distance_meters(center_deg, SCENARIO_CENTER), 50.0, places=6)

        self.assertAlmostEqual(
            float(angle_between(track.positive_angle_to_center, track.angle + math.pi)),
            0.0,
            places=4,
        )
        self.assertAlmostEqual(
            float(angle_between(track.negative_angle_to_center, track.angle)), 0.0, places=4
        )

    def test_straights_have_requested_length(self) -> None:
        """Connect the curve ends with 100 m great-circle straights."""
        track = scenario_track()
        for straight in (track.front_straight, track.back_straight):
            self.assertAlmostEqual(
                straight.angular_length * SCENARIO_SPHERE_RADIUS, 100.0, delta=1e-3
            )

    def test_recompute_is_bit_identical(self) -> None:
        """Rebuild the same derived values from the same description."""
        track = scenario_track()
        rebuilt = track.recompute()

        self.assertIsNot(rebuilt, track)
        for name in (
            "center",
            "angle",
            "effective_track_length",
            "straight_length",
            "curve_length",
            "curve_linear_radius",
            "positive_angle_to_center",
            "negative_angle_to_center",
        ):
            self.assertEqual(getattr(rebuilt, name), getattr(track, name), name)
        self.assertEqual(rebuilt.positive_curve, track.positive_curve)
        self.assertEqual(rebuilt.negative_curve, track.negative_curve)
        self.assertEqual(rebuilt.front_straight.start, track.front_straight.start)
        self.assertEqual(rebuilt.back_straight.end, track.back_straight.end)

    def test_track_is_immutable(self) -> None:
        """Reject in-place updates of derived fields."""
        track = scenario_track()
        with self.assertRaises(dataclasses.FrozenInstanceError):
            track.angle = 0.0  # type: ignore[misc]

    def test_orientation_update_returns_new_track(self) -> None:
        """Build a moved track and leave the original untouched."""
        track = scenario_track()
        moved = track.with_orientation((-122.0, 37.5), 0.2)

        self.assertEqual(moved.description.center, (-122.0, 37.5))
        self.assertEqual(moved.angle, 0.2)
        self.assertEqual(track.description.center, SCENARIO_CENTER)
        self.assertEqual(track.angle, -0.73)

    def test_outer_lane_widens_curves(self) -> None:
        """Grow the curve radius by half a lane width per lane."""
        lane_two = scenario_track().with_lane(2)

        self.assertAlmostEqual(lane_two.lap_length, 400.0 + 1.07 * math.pi)
        self.assertAlmostEqual(
            lane_two.curve_linear_radius * SCENARIO_SPHERE_RADIUS,
            CURVE_RADIUS + 1.07 / 2.0,
            places=9,
        )

    def test_invalid_description_fails_at_construction(self) -> None:
        """Raise before any geometry is computed."""
        track = scenario_track()
        with self.assertRaises(InvalidTrackGeometry):
            track.with_description(straight_length=400.0)

    def test_standard_layout(self) -> None:
        """Build the 400 m standard track with 84.39 m straights."""
        track = build_standard_track(center=(13.4, 52.5), angle=0.3)

        self.assertAlmostEqual(track.lap_length, 400.0)
        expected_radius = (200.0 - 84.39) / math.pi
        self.assertAlmostEqual(
            track.curve_linear_radius * track.description.sphere_radius, expected_radius, places=9
        )


class TrackPathTests(unittest.TestCase):
    """Validate sampled track outlines."""

    def test_default_path_is_closed_with_expected_count(self) -> None:
        """Return 258 rows whose first and last coordinates are identical."""
        path = scenario_track().path_coordinates()

        self.assertEqual(path.shape, (258, 2))
        np.testing.assert_array_equal(path[0], path[-1])

    def test_sample_count_follows_precision_level(self) -> None:
        """Use ``2 * steps + 2`` rows with ``steps = 2**level / 2``."""
        track = scenario_track()
        for level in (1, 4, 6):
            steps = 2**level // 2
            path = track.path_coordinates(precision_level=level)
            with self.subTest(level=level):
                self.assertEqual(path.shape[0], 2 * steps + 2)
                np.testing.assert_array_equal(path[0], path[-1])

    def test_path_stays_within_track_extent(self) -> None:
        """Keep every sample within half a straight plus a curve radius."""
        track = scenario_track()
        path = track.path_coordinates()

        distances = np.array([distance_meters(tuple(row), SCENARIO_CENTER) for row in path])
        self.assertLessEqual(float(np.max(distances)), 50.0 + CURVE_RADIUS + 1e-3)
        self.assertAlmostEqual(float(np.max(distances)), 50.0 + CURVE_RADIUS, delta=0.05)
        self.assertGreater(float(np.min(distances)), CURVE_RADIUS - 1e-3)

    def test_curve_samples_lie_on_curve_circles(self) -> None:
        """Keep samples at the curve radius from their curve center."""
        track = scenario_track()
        path = track.path_coordinates()
        positive_center = radians_to_degrees(track.positive_curve.center)
        negative_center = radians_to_degrees(track.negative_curve.center)

        for row in path[:129]:
            self.assertAlmostEqual(
                distance_meters(tuple(row), positive_center), CURVE_RADIUS, places=4
            )
        for row in path[129:-1]:
            self.assertAlmostEqual(
                distance_meters(tuple(row), negative_center), CURVE_RADIUS, places=4
            )

    def test_first_sample_starts_the_lap(self) -> None:
        """Begin the outline at the zero-proportion point."""
        track = scenario_track()
        first = tuple(track.path_coordinates()[0])
        self.assertLess(distance_meters(first, track.position_at(0.0)), 0.01)

    def test_lazy_path_matches_array_and_restarts(self) -> None:
        """Yield the same rows lazily on every call."""
        track = scenario_track()
        path = track.path_coordinates(precision_level=5)
        first_pass = list(track.iter_path_coordinates(precision_level=5))
        second_pass = list(track.iter_path_coordinates(precision_level=5))

        self.assertEqual(first_pass, second_pass)
        np.testing.assert_allclose(np.asarray(first_pass), path, rtol=0.0, atol=1e-12)

    def test_rejects_zero_precision(self) -> None:
        """Refuse to sample without steps."""
        track = scenario_track()
        with self.assertRaises(InvalidTrackGeometry):
            track.path_coordinates(precision_level=0)
        with self.assertRaises(InvalidTrackGeometry):
            list(track.iter_path_coordinates(precision_level=0))


class TrackFittingTests(unittest.TestCase):
    """Validate classification and projection of single points."""

    def test_point_on_positive_curve_fits_onto_itself(self) -> None:
        """Return the same coordinate and the analytic curve proportion."""
        track = scenario_track()
        for offset in (0.0, 1.0, -1.2):
            bearing = track.positive_angle_to_center + math.pi + offset
            point = tuple(float(v) for v in track.positive_curve.point_at_degrees(bearing))
            fitted = track.fit_to_track(point)

            start_bearing = track.positive_angle_to_center - math.pi / 2.0
            expected = float(angle_between(bearing, start_bearing)) / math.pi
            with self.subTest(offset=offset):
                self.assertIs(fitted.segment, Segment.POSITIVE_CURVE)
                self.assertLess(distance_meters(fitted.coordinate, point), 1e-6)
                self.assertAlmostEqual(fitted.proportion, expected * track.curve_fraction, places=9)
                self.assertTrue(fitted.ok)

    def test_far_points_of_curves_sit_mid_curve(self) -> None:
        """Map the far point of each curve to the curve midpoint proportion."""
        track = scenario_track()
        positive = tuple(
            float(v)
            for v in track.positive_curve.point_at_degrees(track.positive_angle_to_center + math.pi)
        )
        negative = tuple(
            float(v)
            for v in track.negative_curve.point_at_degrees(track.negative_angle_to_center + math.pi)
        )

        self.assertAlmostEqual(track.fit_to_track(positive).proportion, 0.125, places=9)
        fitted_negative = track.fit_to_track(negative)
        self.assertIs(fitted_negative.segment, Segment.NEGATIVE_CURVE)
        self.assertAlmostEqual(fitted_negative.proportion, 0.625, places=9)

    def test_curve_fit_snaps_radially(self) -> None:
        """Project an outside point onto the curve at the same bearing."""
        track = scenario_track()
        bearing = track.positive_angle_to_center + math.pi + 0.4
        outside = radians_to_degrees(
            destination_point(
                track.positive_curve.center,
                bearing,
                track.positive_curve.angular_radius + 4.0 / SCENARIO_SPHERE_RADIUS,
            )
        )
        fitted = track.fit_to_track(outside)
        on_curve = tuple(float(v) for v in track.positive_curve.point_at_degrees(bearing))

        self.assertIs(fitted.segment, Segment.POSITIVE_CURVE)
        self.assertLess(distance_meters(fitted.coordinate, on_curve), 1e-6)
        self.assertAlmostEqual(distance_meters(fitted.coordinate, outside), 4.0, places=4)

    def test_straight_midpoints_fit_to_mid_straight(self) -> None:
        """Classify straight midpoints onto straights at mid-straight proportions."""
        track = scenario_track()
        cases = (
            (track.front_straight, Segment.FRONT_STRAIGHT, 0.375),
            (track.back_straight, Segment.BACK_STRAIGHT, 0.875),
        )
        for straight, segment, proportion in cases:
            midpoint = radians_to_degrees(straight.point_at_fraction(0.5))
            fitted = track.fit_to_track(midpoint)
            with self.subTest(segment=segment):
                self.assertIs(track.classify(straight.point_at_fraction(0.5)), segment)
                self.assertIs(fitted.segment, segment)
                self.assertAlmostEqual(fitted.proportion, proportion, places=6)
                self.assertLess(distance_meters(fitted.coordinate, midpoint), 1e-4)

    def test_offset_point_projects_orthogonally_onto_straight(self) -> None:
        """Drop a point beside the front straight back onto it."""
        track = scenario_track()
        midpoint = track.front_straight.point_at_fraction(0.5)
        outward = track.angle - math.pi / 2.0
        beside = radians_to_degrees(
            destination_point(midpoint, outward, 3.0 / SCENARIO_SPHERE_RADIUS)
        )
        fitted = track.fit_to_track(beside)

        self.assertIs(fitted.segment, Segment.FRONT_STRAIGHT)
        self.assertAlmostEqual(fitted.proportion, 0.375, places=4)
        self.assertLess(distance_meters(fitted.coordinate, radians_to_degrees(midpoint)), 0.01)

    def test_center_point_classifies_onto_a_straight(self) -> None:
        """Fit the track center onto one of the straights without failing."""
        track = scenario_track()
        fitted = track.fit_to_track(SCENARIO_CENTER)

        self.assertIn(fitted.segment, (Segment.FRONT_STRAIGHT, Segment.BACK_STRAIGHT))
        self.assertIn(track.classify(track.center), (Segment.FRONT_STRAIGHT, Segment.BACK_STRAIGHT))
        self.assertTrue(fitted.ok)
        self.assertTrue(0.0 <= fitted.proportion < 1.0)
        self.assertAlmostEqual(
            distance_meters(fitted.coordinate, SCENARIO_CENTER), CURVE_RADIUS, delta=0.01
        )

    def test_positions_round_trip_through_fit(self) -> None:
        """Recover lap proportions of positions generated on the track."""
        track = scenario_track()
        for proportion in (0.05, 0.2, 0.3, 0.45, 0.55, 0.7, 0.8, 0.95):
            fitted = track.fit_to_track(track.position_at(proportion))
            with self.subTest(proportion=proportion):
                self.assertAlmostEqual(fitted.proportion, proportion, delta=1e-6)

    def test_positions_at_wraps_proportions(self) -> None:
        """Treat proportions modulo one lap."""
        track = scenario_track()
        rows = track.positions_at([0.3, 1.3, -0.7])

        self.assertEqual(rows.shape, (3, 2))
        np.testing.assert_allclose(rows[1], rows[0], atol=1e-9)
        np.testing.assert_allclose(rows[2], rows[0], atol=1e-9)

    def test_non_finite_input_is_reported_per_point(self) -> None:
        """Report a failed fit instead of raising for a NaN position."""
        fitted = scenario_track().fit_to_track((math.nan, 37.79))

        self.assertFalse(fitted.ok)
        self.assertIsNone(fitted.segment)
        self.assertTrue(math.isnan(fitted.proportion))
        self.assertIsNotNone(fitted.error)

    def test_circular_track_without_straights_fits_curves(self) -> None:
        """Fit points of a straight-less track onto its curves."""
        description = build_track_description(
            center=(0.0, 0.0), angle=0.0, straight_length=0.0, track_length=200.0
        )
        track = TrackOnSphere(description)
        north = track.fit_to_track((0.0, 0.0001))
        south = track.fit_to_track((0.0, -0.0001))

        self.assertIs(north.segment, Segment.POSITIVE_CURVE)
        self.assertIs(south.segment, Segment.NEGATIVE_CURVE)
        self.assertAlmostEqual(north.proportion, 0.25, places=6)
        self.assertAlmostEqual(south.proportion, 0.75, places=6)

    def test_curve_ends_on_the_equator_keep_their_proportion(self) -> None:
        """Map straight end points to the curve boundary proportions."""
        description = build_track_description(
            center=(0.0, 0.0), angle=0.0, straight_length=100.0, track_length=400.0
        )
        track = TrackOnSphere(description)
        cases = (
            (track.front_straight.start, 0.25),
            (track.front_straight.end, 0.5),
            (track.back_straight.start, 0.75),
        )
        for point, proportion in cases:
            fitted = track.fit_to_track(radians_to_degrees(point))
            with self.subTest(proportion=proportion):
                self.assertAlmostEqual(fitted.proportion, proportion, places=9)

    def test_start_line_fits_to_zero_proportion(self) -> None:
        """Report the start of the lap as proportion zero rather than one."""
        tracks = (
            scenario_track(),
            TrackOnSphere(build_track_description(center=(0.0, 0.0), angle=0.5)),
        )
        for track in tracks:
            starts = (track.position_at(0.0), tuple(track.path_coordinates()[0]))
            for start in starts:
                fitted = track.fit_to_track(start)
                with self.subTest(center=track.description.center, start=start):
                    self.assertTrue(fitted.ok)
                    self.assertAlmostEqual(fitted.proportion, 0.0, delta=1e-6)

    def test_outline_proportions_stay_below_one(self) -> None:
        """Keep every fitted outline proportion within one lap."""
        track = TrackOnSphere(build_track_description(center=(0.0, 0.0), angle=0.5))
        proportions = np.array(
            [track.fit_to_track(row).proportion for row in track.path_coordinates(6)]
        )

        self.assertTrue(np.all(proportions >= 0.0))
        self.assertTrue(np.all(proportions < 1.0))

    def test_zero_length_straight_reports_failed_fit(self) -> None:
        """Fail per point when a point lands on a straight of a circular track."""
        description = build_track_description(
            center=(0.0, 0.0), angle=0.0, straight_length=0.0, track_length=200.0
        )
        track = TrackOnSphere(description)
        fitted = track.fit_to_track((0.0002, 0.0))

        self.assertFalse(fitted.ok)
        self.assertIsNone(fitted.segment)
        self.assertTrue(math.isnan(fitted.proportion))
        self.assertIn("has zero length", fitted.error)
        self.assertEqual(fitted.coordinate, (0.0002, 0.0))

        with self.assertLogs("ovaltrack.track.oval", level="WARNING") as captured:
            progress = track.fit_path_to_track([(0.0, 0.0001), (0.0002, 0.0)])
        self.assertIn("1 of 2 points", captured.output[0])
        self.assertIsNotNone(progress[1].error)


if __name__ == "__main__":
    unittest.main()
