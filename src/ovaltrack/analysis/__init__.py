"""Fit analysis, plotting and export tools."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ovaltrack.analysis.export import FitSummary, export_fitted_path_json, summarize_fit

if TYPE_CHECKING:
    from ovaltrack.analysis.plots import plot_lap_progress, plot_track_fit

__all__ = [
    "FitSummary",
    "export_fitted_path_json",
    "plot_lap_progress",
    "plot_track_fit",
    "summarize_fit",
]


def __getattr__(name: str) -> Any:
    """Resolve plotting helpers lazily.

    Args:
        name: Attribute name requested from the package namespace.

    Returns:
        Exported function matching ``name``.

    Raises:
        AttributeError: If ``name`` is not part of the public export surface.
    """
    if name == "plot_track_fit":
        from ovaltrack.analysis.plots import plot_track_fit

        return plot_track_fit
    if name == "plot_lap_progress":
        from ovaltrack.analysis.plots import plot_lap_progress

        return plot_lap_progress
    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
