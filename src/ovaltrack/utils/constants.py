"""Physical constants and defaults used across the library."""

EARTH_RADIUS: float = 6_371_008.8
SMALL_EPS: float = 1e-12
UNIT_SPHERE_RADIUS: float = 1.0
DEFAULT_PRECISION_LEVEL: int = 8
DEFAULT_LANE_WIDTH: float = 1.22
STANDARD_TRACK_LENGTH: float = 400.0
STANDARD_STRAIGHT_LENGTH: float = 84.39
