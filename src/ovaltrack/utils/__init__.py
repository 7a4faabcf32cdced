"""Utility helpers."""

from ovaltrack.utils.constants import EARTH_RADIUS, SMALL_EPS
from ovaltrack.utils.logging import configure_logging

__all__ = ["EARTH_RADIUS", "SMALL_EPS", "configure_logging"]
