"""Spherical trigonometry primitives on a unit sphere.

Coordinates are ``(lon, lat)`` pairs in radians. Scalar functions broadcast
over numpy arrays, so a single call can evaluate many bearings at once.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Union

import numpy as np
import numpy.typing as npt

FloatArray = npt.NDArray[np.float64]
ArrayLike = Union[float, FloatArray]
Coordinate = Sequence[ArrayLike]


def point_on_small_circle(
    bearing: ArrayLike,
    angular_radius: ArrayLike,
    center: Coordinate,
) -> tuple[ArrayLike, ArrayLike]:
    """Evaluate a point on a small circle around ``center``.

    Args:
        bearing: Bearing from the circle center to the point [rad].
        angular_radius: Central angle between center and circle [rad].
        center: Circle center as ``(lon, lat)`` [rad].

    Returns:
        Point ``(lon, lat)`` on the circle [rad].
    """
    lon_center, lat_center = center[0], center[1]
    sin_lat_center = np.sin(lat_center)
    cos_lat_center = np.cos(lat_center)
    sin_radius = np.sin(angular_radius)
    cos_radius = np.cos(angular_radius)

    lat = np.arcsin(
        np.clip(
            sin_lat_center * cos_radius + cos_lat_center * sin_radius * np.cos(bearing),
            -1.0,
            1.0,
        )
    )
    lon = lon_center + np.arctan2(
        np.sin(bearing) * sin_radius * cos_lat_center,
        cos_radius - sin_lat_center * np.sin(lat),
    )
    return lon, lat


def destination_point(
    origin: Coordinate,
    bearing: ArrayLike,
    angular_distance: ArrayLike,
) -> tuple[ArrayLike, ArrayLike]:
    """Move from ``origin`` along a great circle.

    Args:
        origin: Start point ``(lon, lat)`` [rad].
        bearing: Initial bearing [rad].
        angular_distance: Signed travelled central angle [rad]. Negative values
            travel in the opposite direction of ``bearing``.

    Returns:
        Destination point ``(lon, lat)`` [rad].
    """
    return point_on_small_circle(bearing, angular_distance, origin)


def great_circle_bearing(start: Coordinate, end: Coordinate) -> ArrayLike:
    """Compute the initial great-circle bearing from ``start`` to ``end``.

    Args:
        start: Start point ``(lon, lat)`` [rad].
        end: End point ``(lon, lat)`` [rad].

    Returns:
        Initial bearing in ``(-pi, pi]`` [rad].
    """
    lon1, lat1 = start[0], start[1]
    lon2, lat2 = end[0], end[1]
    delta_lon = lon2 - lon1
    y = np.sin(delta_lon) * np.cos(lat2)
    x = np.cos(lat1) * np.sin(lat2) - np.sin(lat1) * np.cos(lat2) * np.cos(delta_lon)
    return np.arctan2(y, x)


def angle_between(a: ArrayLike, b: ArrayLike) -> ArrayLike:
    """Compute the signed shortest difference ``b - a``.

    Args:
        a: Reference angle [rad].
        b: Target angle [rad].

    Returns:
        Difference normalized to ``[-pi, pi)`` [rad].
    """
    return np.mod(np.asarray(b) - np.asarray(a) + np.pi, 2.0 * np.pi) - np.pi


def great_circle_distance(start: Coordinate, end: Coordinate) -> ArrayLike:
    """Compute the central angle between two points with the haversine formula.

    Args:
        start: First point ``(lon, lat)`` [rad].
        end: Second point ``(lon, lat)`` [rad].

    Returns:
        Central angle between both points [rad].
    """
    lon1, lat1 = start[0], start[1]
    lon2, lat2 = end[0], end[1]
    sin_half_dlat = np.sin((lat2 - lat1) / 2.0)
    sin_half_dlon = np.sin((lon2 - lon1) / 2.0)
    h = sin_half_dlat * sin_half_dlat + np.cos(lat1) * np.cos(lat2) * sin_half_dlon * sin_half_dlon
    h = np.clip(h, 0.0, 1.0)
    return 2.0 * np.arctan2(np.sqrt(h), np.sqrt(1.0 - h))


def lon_lat_to_unit_vector(point: Coordinate) -> FloatArray:
    """Convert ``(lon, lat)`` to a Cartesian unit vector.

    Args:
        point: Point ``(lon, lat)`` [rad].

    Returns:
        Vector ``(x, y, z)`` on the unit sphere.
    """
    lon, lat = point[0], point[1]
    cos_lat = np.cos(lat)
    return np.array([cos_lat * np.cos(lon), cos_lat * np.sin(lon), np.sin(lat)], dtype=np.float64)


def unit_vector_to_lon_lat(vector: FloatArray) -> tuple[float, float]:
    """Convert a Cartesian vector back to ``(lon, lat)``.

    The vector does not need unit length; only its direction matters.

    Args:
        vector: Cartesian vector ``(x, y, z)``.

    Returns:
        Point ``(lon, lat)`` [rad].
    """
    x, y, z = (float(component) for component in vector)
    return float(np.arctan2(y, x)), float(np.arctan2(z, np.hypot(x, y)))


def cross_product(a: FloatArray, b: FloatArray) -> FloatArray:
    """Compute the cross product of two 3-vectors.

    Args:
        a: Left operand.
        b: Right operand.

    Returns:
        Vector ``a x b``.
    """
    return np.asarray(np.cross(a, b), dtype=np.float64)


def dot_product(a: FloatArray, b: FloatArray) -> float:
    """Compute the dot product of two 3-vectors.

    Args:
        a: Left operand.
        b: Right operand.

    Returns:
        Scalar ``a . b``.
    """
    return float(np.dot(a, b))


def project_onto_plane(point: FloatArray, plane_normal: FloatArray) -> FloatArray:
    """Project ``point`` orthogonally onto the plane through the origin.

    The result is not renormalized. A zero normal produces NaN components.

    Args:
        point: Cartesian vector to project.
        plane_normal: Plane normal, any non-zero length.

    Returns:
        Projected vector lying in the plane.
    """
    with np.errstate(invalid="ignore", divide="ignore"):
        unit_normal = plane_normal / np.linalg.norm(plane_normal)
    return np.asarray(point - dot_product(point, unit_normal) * unit_normal, dtype=np.float64)


def slerp(start: FloatArray, end: FloatArray, fraction: float) -> FloatArray:
    """Interpolate along the great circle between two unit vectors.

    Args:
        start: Start unit vector.
        end: End unit vector.
        fraction: Interpolation fraction, ``0`` at ``start`` and ``1`` at ``end``.

    Returns:
        Interpolated unit vector.
    """
    omega = float(np.arccos(np.clip(dot_product(start, end), -1.0, 1.0)))
    if omega == 0.0:
        return np.asarray(start, dtype=np.float64)
    sin_omega = np.sin(omega)
    return np.asarray(
        (np.sin((1.0 - fraction) * omega) * start + np.sin(fraction * omega) * end) / sin_omega,
        dtype=np.float64,
    )
