"""Cumulative lap progress from per-point lap proportions."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence

import numpy as np

from ovaltrack.geometry.spherical import FloatArray
from ovaltrack.track.models import FittedPoint, LapProgressPoint


def proportion_step(previous: float, current: float) -> float:
    """Distance travelled between two lap proportions.

    The shortest way around the loop is assumed, so the result lies in
    ``[0, 0.5]`` and carries no direction.

    Args:
        previous: Earlier lap proportion.
        current: Later lap proportion.

    Returns:
        Unsigned change in laps.
    """
    return abs(float(np.mod(current - previous + 0.5, 1.0)) - 0.5)


def accumulate_lap_progress(proportions: Iterable[float]) -> FloatArray:
    """Accumulate lap progress over a proportion sequence.

    Progress starts at the first valid proportion and grows by
    :func:`proportion_step` per point. NaN proportions add nothing, the next
    valid point is measured against the last valid one.

    Args:
        proportions: Lap proportions in recording order.

    Returns:
        Monotonically non-decreasing cumulative progress [laps].
    """
    values = np.asarray(list(proportions), dtype=np.float64)
    progress = np.zeros(values.shape[0], dtype=np.float64)
    previous: float | None = None
    total = 0.0
    for index, value in enumerate(values):
        if math.isfinite(value):
            total = value if previous is None else total + proportion_step(previous, value)
            previous = float(value)
        progress[index] = total
    return progress


def reduce_fitted_path(fitted: Sequence[FittedPoint]) -> list[LapProgressPoint]:
    """Attach cumulative lap progress to fitted points.

    Args:
        fitted: Fitted points in recording order.

    Returns:
        One lap-progress point per fitted point.
    """
    progress = accumulate_lap_progress(point.proportion for point in fitted)
    return [
        LapProgressPoint(
            coordinate=point.coordinate,
            proportion=point.proportion,
            lap_progress=float(lap_progress),
            segment=point.segment,
            error=point.error,
        )
        for point, lap_progress in zip(fitted, progress)
    ]


def completed_laps(progress: Sequence[LapProgressPoint]) -> int:
    """Count completed laps at the end of a path.

    Args:
        progress: Lap-progress points in recording order.

    Returns:
        Number of whole laps travelled.
    """
    if not progress:
        return 0
    return int(math.floor(progress[-1].lap_progress))
