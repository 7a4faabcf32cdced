"""Spherical geometry primitives, small circles and coordinate adapters."""

from ovaltrack.geometry.adapters import (
    as_coordinate_array,
    degrees_to_radians,
    radians_to_degrees,
)
from ovaltrack.geometry.circle import SmallCircleOnSphere
from ovaltrack.geometry.spherical import (
    angle_between,
    cross_product,
    destination_point,
    dot_product,
    great_circle_bearing,
    great_circle_distance,
    lon_lat_to_unit_vector,
    point_on_small_circle,
    project_onto_plane,
    unit_vector_to_lon_lat,
)

__all__ = [
    "SmallCircleOnSphere",
    "angle_between",
    "as_coordinate_array",
    "cross_product",
    "degrees_to_radians",
    "destination_point",
    "dot_product",
    "great_circle_bearing",
    "great_circle_distance",
    "lon_lat_to_unit_vector",
    "point_on_small_circle",
    "project_onto_plane",
    "radians_to_degrees",
    "unit_vector_to_lon_lat",
]
