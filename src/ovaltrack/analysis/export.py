"""Export helpers for fitted paths."""

from __future__ import annotations

import json
import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from pathlib import Path

from ovaltrack.track.models import LapProgressPoint
from ovaltrack.track.progress import completed_laps


@dataclass(frozen=True)
class FitSummary:
    """Aggregate view of a fitted path.

    Args:
        point_count: Number of input points.
        failed_count: Number of points that could not be fitted.
        lap_progress: Final cumulative progress [laps].
        completed_laps: Whole laps travelled.
        segment_counts: Number of points per segment name.
    """

    point_count: int
    failed_count: int
    lap_progress: float
    completed_laps: int
    segment_counts: dict[str, int] = field(default_factory=dict)


def summarize_fit(points: Sequence[LapProgressPoint]) -> FitSummary:
    """Summarize a fitted path.

    Args:
        points: Lap-progress points in recording order.

    Returns:
        Counts and final progress of the path.
    """
    counts = Counter(point.segment.value for point in points if point.segment is not None)
    return FitSummary(
        point_count=len(points),
        failed_count=sum(1 for point in points if point.error is not None),
        lap_progress=points[-1].lap_progress if points else 0.0,
        completed_laps=completed_laps(points),
        segment_counts=dict(sorted(counts.items())),
    )


def _finite_or_none(value: float) -> float | None:
    """Map non-finite numbers to JSON ``null``.

    Args:
        value: Number to convert.

    Returns:
        ``value`` or ``None`` for NaN and infinities.
    """
    return float(value) if math.isfinite(value) else None


def export_fitted_path_json(points: Sequence[LapProgressPoint], path: str | Path) -> None:
    """Persist a fitted path and its summary as JSON.

    Args:
        points: Lap-progress points in recording order.
        path: Output file path for the JSON document.
    """
    document = {
        "summary": asdict(summarize_fit(points)),
        "points": [
            {
                "lon": _finite_or_none(point.coordinate[0]),
                "lat": _finite_or_none(point.coordinate[1]),
                "proportion": _finite_or_none(point.proportion),
                "lap_progress": point.lap_progress,
                "segment": point.segment.value if point.segment is not None else None,
                "error": point.error,
            }
            for point in points
        ],
    }
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(document, indent=2), encoding="utf-8")
