"""Custom exceptions for oval track modeling and fitting."""


class OvalTrackError(Exception):
    """Base exception for track modeling errors."""


class InvalidTrackGeometry(OvalTrackError):
    """Raised when a track description cannot produce a valid oval."""


class TrackFileError(OvalTrackError):
    """Raised when a track-point file cannot be read or parsed."""
