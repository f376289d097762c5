"""
errors.py
=========
Typed failures raised by the engine.

Every error derives from ``VedicEngineError`` (itself a ``ValueError``), so
callers can either branch on the specific kind or catch the whole family.
None of these are retryable: the computations are pure, the same input
fails the same way.
"""


class VedicEngineError(ValueError):
    """Base class for all engine errors."""


class InvalidCoordinate(VedicEngineError):
    """Latitude/longitude outside the physical range."""

    def __init__(self, latitude: float, longitude: float):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(
            f"Invalid coordinate: latitude={latitude!r} must be in [-90, 90], "
            f"longitude={longitude!r} must be in [-180, 180]"
        )


class PolarDayNightError(VedicEngineError):
    """The Sun does not cross the horizon on this date at this latitude."""

    def __init__(self, latitude: float, declination: float, cos_hour_angle: float):
        self.latitude = latitude
        self.declination = declination
        self.cos_hour_angle = cos_hour_angle
        kind = "polar day" if cos_hour_angle < -1.0 else "polar night"
        super().__init__(
            f"No sunrise/sunset ({kind}) at latitude {latitude:.4f}° "
            f"with solar declination {declination:.4f}°"
        )


class DateOutOfRange(VedicEngineError):
    """Instant outside the supported ephemeris range."""

    def __init__(self, year: int, min_year: int, max_year: int):
        self.year = year
        self.min_year = min_year
        self.max_year = max_year
        super().__init__(
            f"Year {year} is outside the supported range {min_year}–{max_year}"
        )


class MalformedPredictionText(VedicEngineError):
    """Narrative has no discernible section structure."""


class InvalidInterval(VedicEngineError):
    """Sunrise, sunset and next sunrise are not strictly increasing."""
