"""
solar.py
========
Sunrise, sunset and next-day sunrise as absolute (UTC) instants.

Source: Meeus Ch. 15 (rising, transit, setting). The hour angle of the
Sun at the horizon is

    cos H0 = (sin h0 - sin φ · sin δ) / (cos φ · cos δ)

which reduces to H0 = acos(-tan φ · tan δ) for h0 = 0. The default
h0 = -0.8333° accounts for refraction and the Sun's semi-diameter.

Each event is located by starting at local mean noon of the date and
correcting by the hour-angle residual, recomputing the Sun's position
at every pass.
"""

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..config import settings
from ..errors import InvalidCoordinate, PolarDayNightError
from .ephemeris import (
    DEG, SIDEREAL_RATE, DEFAULT_PROVIDER, PositionProvider,
    apparent_sidereal_time, check_supported, gregorian_to_jd, jd_to_datetime,
)

logger = logging.getLogger(__name__)

_ITERATIONS = 4


@dataclass(frozen=True)
class SolarEvents:
    sunrise:      datetime
    sunset:       datetime
    next_sunrise: datetime

    @property
    def day_length(self) -> timedelta:
        return self.sunset - self.sunrise

    @property
    def night_length(self) -> timedelta:
        return self.next_sunrise - self.sunset


def validate_coordinate(latitude: float, longitude: float) -> None:
    ok = (
        isinstance(latitude, (int, float)) and isinstance(longitude, (int, float))
        and math.isfinite(latitude) and math.isfinite(longitude)
        and -90.0 <= latitude <= 90.0 and -180.0 <= longitude <= 180.0
    )
    if not ok:
        raise InvalidCoordinate(latitude, longitude)


def _wrap180(x: float) -> float:
    return (x + 180.0) % 360.0 - 180.0


def sun_hour_angle(latitude: float, declination: float,
                   altitude: Optional[float] = None) -> float:
    """
    Hour angle (degrees) of the Sun at the given altitude.
    Raises PolarDayNightError where the Sun never crosses it.
    """
    h0 = settings.SUNRISE_ALTITUDE_DEG if altitude is None else altitude
    cos_H = ((math.sin(h0 * DEG) - math.sin(latitude * DEG) * math.sin(declination * DEG))
             / (math.cos(latitude * DEG) * math.cos(declination * DEG)))
    if not -1.0 <= cos_H <= 1.0:
        raise PolarDayNightError(latitude, declination, cos_H)
    return math.acos(cos_H) / DEG


def _solar_event(day: date, latitude: float, longitude: float,
                 rising: bool, provider: PositionProvider) -> datetime:
    jd0 = gregorian_to_jd(day.year, day.month, day.day)
    m = 0.5 - longitude / 360.0   # local mean noon, fraction of the UT day

    for _ in range(_ITERATIONS):
        jd = jd0 + m
        ra, dec = provider.sun_equatorial(jd)
        H0 = sun_hour_angle(latitude, dec)
        target = -H0 if rising else H0
        local_hour_angle = _wrap180(apparent_sidereal_time(jd) + longitude - ra)
        m += _wrap180(target - local_hour_angle) / SIDEREAL_RATE

    return jd_to_datetime(jd0 + m)


def solar_events(day: date, latitude: float, longitude: float,
                 provider: Optional[PositionProvider] = None) -> SolarEvents:
    """
    Sunrise and sunset for ``day`` at the given location, plus the sunrise of
    the following day.

    Args:
        day: calendar date (a datetime is reduced to its own wall-clock date)
        latitude: degrees, positive North, in [-90, 90]
        longitude: degrees, positive East, in [-180, 180]
        provider: solar coordinate source (defaults to the Meeus series)

    Returns:
        SolarEvents with timezone-aware UTC datetimes.
    """
    if isinstance(day, datetime):
        day = day.date()
    validate_coordinate(latitude, longitude)
    check_supported(datetime(day.year, day.month, day.day))
    provider = provider or DEFAULT_PROVIDER

    events = SolarEvents(
        sunrise=_solar_event(day, latitude, longitude, True, provider),
        sunset=_solar_event(day, latitude, longitude, False, provider),
        next_sunrise=_solar_event(day + timedelta(days=1), latitude, longitude, True, provider),
    )
    logger.debug("Solar events %s @ (%.4f, %.4f): rise=%s set=%s next=%s",
                 day.isoformat(), latitude, longitude,
                 events.sunrise.isoformat(), events.sunset.isoformat(),
                 events.next_sunrise.isoformat())
    return events
