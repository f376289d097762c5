"""
daily.py
========
Orchestration of the core calculators into the payloads the app needs.

  vedic_elements()    — snapshot of the sky at an instant and place
  birth_profile()     — Moon sign, nakshatra, dasha and ascendant at birth
  daily_choghadiya()  — the 16 periods of a day plus the one in force now

Usage:
    from datetime import datetime, timezone
    from vedic_engine.tools.daily import birth_profile

    profile = birth_profile(
        datetime(1990, 6, 15, 5, 0, tzinfo=timezone.utc),
        latitude=28.6139,           # Delhi
        longitude=77.2090,
    )
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from ..core.choghadiya import current_period, partition
from ..core.dasha import dasha
from ..core.ephemeris import (
    PositionProvider, ascendant_longitude, local_sidereal_time,
    nutation_and_obliquity, position, to_utc, tropical_to_sidereal,
)
from ..core.nakshatra import SIGNS, moon_sign, nakshatra
from ..core.solar import solar_events, validate_coordinate
from ..errors import PolarDayNightError

logger = logging.getLogger(__name__)


def _sign_from_longitude(lon: float) -> str:
    return SIGNS[int(lon / 30) % 12]


def vedic_elements(instant: datetime, latitude: float, longitude: float,
                   provider: Optional[PositionProvider] = None) -> dict:
    """
    Moon position, nakshatra, sidereal time and the day's sunrise/sunset.

    The sunrise and sunset are those of the local mean-time date at the
    given longitude, so 02:00 in Delhi reports that morning's sunrise.

    At polar latitudes where the Sun does not rise or set, sunrise and sunset
    are None and ``polar`` is True.
    """
    validate_coordinate(latitude, longitude)
    pos = position(instant, provider)
    nak = nakshatra(pos)

    try:
        local_day = (to_utc(instant) + timedelta(hours=longitude / 15.0)).date()
        events = solar_events(local_day, latitude, longitude, provider)
        sunrise, sunset, polar = events.sunrise.isoformat(), events.sunset.isoformat(), False
    except PolarDayNightError as e:
        logger.info("No solar events for snapshot: %s", e)
        sunrise, sunset, polar = None, None, True

    return {
        "nakshatra": nak.name,
        "nakshatra_index": nak.index,
        "moon_longitude": round(pos.moon_longitude_deg, 2),
        "moon_latitude": round(pos.moon_latitude_deg, 2),
        "sidereal_time": round(pos.sidereal_time_deg, 2),
        "sunrise": sunrise,
        "sunset": sunset,
        "polar": polar,
    }


def birth_profile(birth_instant: datetime, latitude: float, longitude: float,
                  now: Optional[datetime] = None, ayanamsa: Optional[str] = None,
                  provider: Optional[PositionProvider] = None) -> dict:
    """
    Natal summary used to personalise the daily prediction.

    Args:
        birth_instant: birth moment (naive = UTC)
        latitude, longitude: birth place, degrees (East positive)
        now: evaluation moment for the dasha (defaults to the current time)
        ayanamsa: optional sidereal zodiac ("lahiri", "raman", "kp", "fagan")
        provider: ephemeris (defaults to the Meeus series)
    """
    validate_coordinate(latitude, longitude)
    now = now or datetime.now(timezone.utc)

    pos = position(birth_instant, provider)
    nak = nakshatra(pos, ayanamsa)
    state = dasha(birth_instant, now, nak.index)

    _, _, obliquity = nutation_and_obliquity(pos.julian_centuries)
    lst = local_sidereal_time(pos.julian_day, longitude)
    asc = ascendant_longitude(lst, latitude, obliquity)
    if ayanamsa:
        asc = tropical_to_sidereal(asc, pos.julian_centuries, ayanamsa)

    return {
        "moon_sign": moon_sign(pos, ayanamsa),
        "nakshatra": nak.name,
        "nakshatra_index": nak.index,
        "dasha": state.to_dict(),
        "birth_chart": {
            "ascendant": _sign_from_longitude(asc),
            "ascendant_longitude": round(asc, 4),
            "moon_position": round(pos.moon_longitude_deg, 4),
            "sidereal_time": round(pos.sidereal_time_deg, 4),
        },
        "ayanamsa": ayanamsa,
    }


def daily_choghadiya(day: date, latitude: float, longitude: float,
                     now: Optional[datetime] = None,
                     provider: Optional[PositionProvider] = None) -> dict:
    """Solar events, the 16 Choghadiya periods and the current period (if any)."""
    events = solar_events(day, latitude, longitude, provider)
    periods = partition(events.sunrise, events.sunset, events.next_sunrise)
    active = current_period(now, periods) if now is not None else None

    return {
        "date": day.isoformat(),
        "latitude": latitude,
        "longitude": longitude,
        "sunrise": events.sunrise.isoformat(),
        "sunset": events.sunset.isoformat(),
        "next_sunrise": events.next_sunrise.isoformat(),
        "periods": [p.to_dict() for p in periods],
        "current": active.to_dict() if active else None,
    }
