"""
nakshatra.py
============
Lunar mansion (nakshatra) and Moon sign from a Position.

27 nakshatras of 13°20' each, starting at 0° (Ashwini). By default the
raw (tropical) ecliptic longitude of the Moon is used; pass an ayanamsa
name ("lahiri", "raman", "kp", "fagan") to work in the sidereal zodiac.
"""

import math
from dataclasses import dataclass
from typing import Optional

from .ephemeris import Position, tropical_to_sidereal

NAKSHATRAS = (
    "Ashwini", "Bharani", "Krittika", "Rohini", "Mrigashira", "Ardra",
    "Punarvasu", "Pushya", "Ashlesha", "Magha", "Purva Phalguni", "Uttara Phalguni",
    "Hasta", "Chitra", "Swati", "Vishakha", "Anuradha", "Jyeshtha",
    "Mula", "Purva Ashadha", "Uttara Ashadha", "Shravana", "Dhanishtha",
    "Shatabhisha", "Purva Bhadrapada", "Uttara Bhadrapada", "Revati",
)

SIGNS = (
    "Aries", "Taurus", "Gemini", "Cancer", "Leo", "Virgo",
    "Libra", "Scorpio", "Sagittarius", "Capricorn", "Aquarius", "Pisces",
)

NAKSHATRA_SPAN = 360.0 / 27.0   # 13°20'


@dataclass(frozen=True)
class NakshatraInfo:
    index: int      # 0-based
    name:  str


def moon_longitude_for(position: Position, ayanamsa: Optional[str] = None) -> float:
    lon = position.moon_longitude_deg
    if ayanamsa:
        lon = tropical_to_sidereal(lon, position.julian_centuries, ayanamsa)
    return lon


def nakshatra_index(longitude: float) -> int:
    # clamp guards 359.999... rounding up to 27
    index = math.floor(longitude * 27 / 360.0)
    return min(max(index, 0), 26)


def nakshatra(position: Position, ayanamsa: Optional[str] = None) -> NakshatraInfo:
    index = nakshatra_index(moon_longitude_for(position, ayanamsa))
    return NakshatraInfo(index=index, name=NAKSHATRAS[index])


def moon_sign(position: Position, ayanamsa: Optional[str] = None) -> str:
    index = min(max(math.floor(moon_longitude_for(position, ayanamsa) / 30.0), 0), 11)
    return SIGNS[index]
