"""Conversions between caller coordinates and internal representations."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

import numpy as np

from ovaltrack.geometry.spherical import FloatArray


def degrees_to_radians(coordinate: Sequence[float]) -> tuple[float, float]:
    """Convert a ``(lon, lat)`` pair from degrees to radians.

    Args:
        coordinate: Point ``(lon, lat)`` [deg].

    Returns:
        Point ``(lon, lat)`` [rad].
    """
    return float(np.radians(coordinate[0])), float(np.radians(coordinate[1]))


def radians_to_degrees(coordinate: Sequence[float]) -> tuple[float, float]:
    """Convert a ``(lon, lat)`` pair from radians to degrees.

    Args:
        coordinate: Point ``(lon, lat)`` [rad].

    Returns:
        Point ``(lon, lat)`` [deg].
    """
    return float(np.degrees(coordinate[0])), float(np.degrees(coordinate[1]))


def as_coordinate_array(points: Iterable[Sequence[float]]) -> FloatArray:
    """Stack ``(lon, lat)`` pairs into an ``(N, 2)`` array.

    Args:
        points: Iterable of ``(lon, lat)`` pairs.

    Returns:
        Float array with one row per point.

    Raises:
        ValueError: If the input does not describe two values per point.
    """
    array = np.asarray([tuple(point) for point in points], dtype=np.float64)
    if array.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    if array.ndim != 2 or array.shape[1] != 2:
        msg = f"Expected (lon, lat) pairs, got array of shape {array.shape}"
        raise ValueError(msg)
    return array
