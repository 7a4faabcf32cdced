"""Small circles on a sphere."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from ovaltrack.geometry.spherical import ArrayLike, point_on_small_circle


@dataclass(frozen=True)
class SmallCircleOnSphere:
    """Circle of a given linear radius around a center on a sphere.

    The angular radius uses the chord relation ``2 * asin(chord / 2)``. It is
    NaN when ``linear_radius / sphere_radius`` exceeds ``2``; no bounds check
    is performed here.

    Args:
        linear_radius: Circle radius measured as a chord [m].
        center: Circle center ``(lon, lat)`` [rad].
        sphere_radius: Radius of the carrying sphere [m].
    """

    linear_radius: float
    center: tuple[float, float]
    sphere_radius: float
    angular_radius: float = field(init=False)

    def __post_init__(self) -> None:
        """Derive the angular radius from the linear radius."""
        with np.errstate(invalid="ignore"):
            ratio = self.linear_radius / self.sphere_radius
            angular_radius = float(np.arcsin(ratio / 2.0) * 2.0)
        object.__setattr__(self, "angular_radius", angular_radius)

    def point_at(self, bearing: ArrayLike) -> tuple[ArrayLike, ArrayLike]:
        """Evaluate the circle at a bearing from its center.

        Args:
            bearing: Bearing from the center [rad], scalar or array.

        Returns:
            Point ``(lon, lat)`` on the circle [rad].
        """
        return point_on_small_circle(bearing, self.angular_radius, self.center)

    def point_at_degrees(self, bearing: ArrayLike) -> tuple[ArrayLike, ArrayLike]:
        """Evaluate the circle at a bearing and return degrees.

        Args:
            bearing: Bearing from the center [rad], scalar or array.

        Returns:
            Point ``(lon, lat)`` on the circle [deg].
        """
        lon, lat = self.point_at(bearing)
        return np.degrees(lon), np.degrees(lat)
