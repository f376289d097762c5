"""
ephemeris.py  —  Lunar position, solar coordinates and sidereal time
====================================================================
Uses Jean Meeus "Astronomical Algorithms" 2nd ed.

  Julian Day        Meeus Ch. 7   (proleptic Gregorian calendar)
  Sidereal time     Meeus Ch. 12  (mean + equation of the equinoxes)
  Nutation          Meeus Ch. 22  (low-precision, ~0.5")
  Sun               Meeus Ch. 25  (low-precision, ~0.01°)
  Moon              Meeus Ch. 47  (Tables 47.A / 47.B, ~10" in longitude)

Accuracy is a few arc-seconds to an arc-minute between 1800 and 2200,
far inside a 13°20' nakshatra segment.

Downstream modules never call the series directly; they go through a
``PositionProvider`` so a higher-precision ephemeris (JPL kernels via
Skyfield, Swiss Ephemeris, ...) can be dropped in.

Validated against:
  Meeus Ex. 47.a  1992-04-12 0h TD   Moon λ = 133.162655°  β = -3.229126°
  Meeus Ex. 12.a  1987-04-10 0h UT   apparent θ0 = 13h10m46.1351s = 197.692229°
"""

import logging
import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

from ..config import settings
from ..errors import DateOutOfRange

logger = logging.getLogger(__name__)

# ── Constants ──────────────────────────────────────────────────
J2000   = 2451545.0
DEG     = math.pi / 180.0
RAD     = 180.0 / math.pi
ARCSEC  = 1.0 / 3600.0

SIDEREAL_RATE = 360.98564736629   # degrees of sidereal rotation per solar day

_J2000_DATETIME = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def _n(x):
    """Normalize angle to [0, 360)."""
    return x % 360.0

def _r(x):
    """Degrees to radians."""
    return x * DEG

def _d(x):
    """Radians to degrees."""
    return x * RAD


def julian_centuries(jd: float) -> float:
    return (jd - J2000) / 36525.0


# ── Time conversions ───────────────────────────────────────────

def to_utc(instant: datetime) -> datetime:
    """Return an aware UTC datetime. Naive datetimes are taken to be UTC."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def gregorian_to_jd(year: int, month: int, day: int, hour: float = 0.0) -> float:
    """Meeus Ch. 7."""
    if month <= 2:
        year -= 1; month += 12
    A = int(year / 100)
    B = 2 - A + int(A / 4)
    return int(365.25*(year+4716)) + int(30.6001*(month+1)) + day + B - 1524.5 + hour/24.0


def jd_to_gregorian(jd: float) -> Tuple[int, int, float]:
    """Meeus Ch. 7 inverse: (year, month, day), the day carrying the fraction."""
    Z = int(jd + 0.5)
    F = jd + 0.5 - Z
    if Z < 2299161:
        A = Z
    else:
        alpha = int((Z - 1867216.25) / 36524.25)
        A = Z + 1 + alpha - int(alpha / 4)
    B = A + 1524
    C = int((B - 122.1) / 365.25)
    D = int(365.25 * C)
    E = int((B - D) / 30.6001)
    day = B - D - int(30.6001 * E) + F
    month = E - 1 if E < 14 else E - 13
    year = C - 4716 if month > 2 else C - 4715
    return year, month, day


def datetime_to_jd(instant: datetime) -> float:
    utc = to_utc(instant)
    hour = (utc.hour + utc.minute / 60.0 + utc.second / 3600.0
            + utc.microsecond / 3_600_000_000.0)
    return gregorian_to_jd(utc.year, utc.month, utc.day, hour)


def jd_to_datetime(jd: float) -> datetime:
    """Aware UTC datetime for a Julian Day (microsecond resolution)."""
    return _J2000_DATETIME + timedelta(days=jd - J2000)


def check_supported(instant: datetime) -> datetime:
    """Validate the instant against the supported ephemeris range; returns it in UTC."""
    utc = to_utc(instant)
    if not settings.MIN_YEAR <= utc.year <= settings.MAX_YEAR:
        raise DateOutOfRange(utc.year, settings.MIN_YEAR, settings.MAX_YEAR)
    return utc


# ── Nutation & Obliquity (Meeus Ch. 22) ────────────────────────

def nutation_and_obliquity(T: float) -> Tuple[float, float, float]:
    """Returns (dpsi_arcsec, deps_arcsec, true_obliquity_deg)."""
    omega = _n(125.04452 - 1934.136261*T + 0.0020708*T*T)
    L0    = _n(280.4664567 + 360007.6982779*T)
    Lm    = _n(218.3165085 + 481267.8813398*T)

    dpsi = (-17.20*math.sin(_r(omega)) - 1.32*math.sin(_r(2*L0))
            - 0.23*math.sin(_r(2*Lm)) + 0.21*math.sin(_r(2*omega)))
    deps = (9.20*math.cos(_r(omega)) + 0.57*math.cos(_r(2*L0))
            + 0.10*math.cos(_r(2*Lm)) - 0.09*math.cos(_r(2*omega)))

    eps0 = 23.0 + 26.0/60 + (21.448 - 46.8150*T - 0.00059*T*T + 0.001813*T*T*T)/3600.0
    return dpsi, deps, eps0 + deps*ARCSEC


# ── Sun (Meeus Ch. 25) ─────────────────────────────────────────

def sun_longitude(T: float, dpsi: float) -> Tuple[float, float]:
    """Returns (apparent_longitude_deg, radius_AU)."""
    L0  = _n(280.46646  + 36000.76983*T + 0.0003032*T*T)
    M   = _n(357.52911  + 35999.05029*T - 0.0001537*T*T)
    M_r = _r(M)
    e   = 0.016708634 - 0.000042037*T - 0.0000001267*T*T

    C = ((1.914602 - 0.004817*T - 0.000014*T*T)*math.sin(M_r)
         + (0.019993 - 0.000101*T)*math.sin(2*M_r)
         + 0.000289*math.sin(3*M_r))

    true_lon = L0 + C
    R = (1.000001018*(1 - e*e)) / (1 + e*math.cos(_r(M + C)))

    # nutation + aberration
    return _n(true_lon + dpsi*ARCSEC - 20.4898*ARCSEC/R), R


def sun_equatorial(jd: float) -> Tuple[float, float]:
    """Apparent (right_ascension_deg, declination_deg) of the Sun."""
    T = julian_centuries(jd)
    dpsi, _, obliquity = nutation_and_obliquity(T)
    lam, _ = sun_longitude(T, dpsi)
    lam_r, eps_r = _r(lam), _r(obliquity)
    ra  = _n(_d(math.atan2(math.cos(eps_r)*math.sin(lam_r), math.cos(lam_r))))
    dec = _d(math.asin(math.sin(eps_r)*math.sin(lam_r)))
    return ra, dec


# ── Moon (Meeus Ch. 47) ────────────────────────────────────────
# Periodic terms: (D, M, M', F, coefficient in 1e-6 degrees).
# Terms containing M are scaled by E (|M| = 1) or E² (|M| = 2).

_MOON_LONGITUDE_TERMS = (
    (0, 0, 1, 0, 6288774),  (2, 0, -1, 0, 1274027), (2, 0, 0, 0, 658314),
    (0, 0, 2, 0, 213618),   (0, 1, 0, 0, -185116),  (0, 0, 0, 2, -114332),
    (2, 0, -2, 0, 58793),   (2, -1, -1, 0, 57066),  (2, 0, 1, 0, 53322),
    (2, -1, 0, 0, 45758),   (0, 1, -1, 0, -40923),  (1, 0, 0, 0, -34720),
    (0, 1, 1, 0, -30383),   (2, 0, 0, -2, 15327),   (0, 0, 1, 2, -12528),
    (0, 0, 1, -2, 10980),   (4, 0, -1, 0, 10675),   (0, 0, 3, 0, 10034),
    (4, 0, -2, 0, 8548),    (2, 1, -1, 0, -7888),   (2, 1, 0, 0, -6766),
    (1, 0, -1, 0, -5163),   (1, 1, 0, 0, 4987),     (2, -1, 1, 0, 4036),
    (2, 0, 2, 0, 3994),     (4, 0, 0, 0, 3861),     (2, 0, -3, 0, 3665),
    (0, 1, -2, 0, -2689),   (2, 0, -1, 2, -2602),   (2, -1, -2, 0, 2390),
    (1, 0, 1, 0, -2348),    (2, -2, 0, 0, 2236),    (0, 1, 2, 0, -2120),
    (0, 2, 0, 0, -2069),    (2, -2, -1, 0, 2048),   (2, 0, 1, -2, -1773),
    (2, 0, 0, 2, -1595),    (4, -1, -1, 0, 1215),   (0, 0, 2, 2, -1110),
    (3, 0, -1, 0, -892),    (2, 1, 1, 0, -810),     (4, -1, -2, 0, 759),
    (0, 2, -1, 0, -713),    (2, 2, -1, 0, -700),    (2, 1, -2, 0, 691),
    (2, -1, 0, -2, 596),    (4, 0, 1, 0, 549),      (0, 0, 4, 0, 537),
    (4, -1, 0, 0, 520),     (1, 0, -2, 0, -487),    (2, 1, 0, -2, -399),
    (0, 0, 2, -2, -381),    (1, 1, 1, 0, 351),      (3, 0, -2, 0, -340),
    (4, 0, -3, 0, 330),     (2, -1, 2, 0, 327),     (0, 2, 1, 0, -323),
    (1, 1, -1, 0, 299),     (2, 0, 3, 0, 294),
)

_MOON_LATITUDE_TERMS = (
    (0, 0, 0, 1, 5128122),  (0, 0, 1, 1, 280602),   (0, 0, 1, -1, 277693),
    (2, 0, 0, -1, 173237),  (2, 0, -1, 1, 55413),   (2, 0, -1, -1, 46271),
    (2, 0, 0, 1, 32573),    (0, 0, 2, 1, 17198),    (2, 0, 1, -1, 9266),
    (0, 0, 2, -1, 8822),    (2, -1, 0, -1, 8216),   (2, 0, -2, -1, 4324),
    (2, 0, 1, 1, 4200),     (2, 1, 0, -1, -3359),   (2, -1, -1, 1, 2463),
    (2, -1, 0, 1, 2211),    (2, -1, -1, -1, 2065),  (0, 1, -1, -1, -1870),
    (4, 0, -1, -1, 1828),   (0, 1, 0, 1, -1794),    (0, 0, 0, 3, -1749),
    (0, 1, -1, 1, -1565),   (1, 0, 0, 1, -1491),    (0, 1, 1, 1, -1475),
    (0, 1, 1, -1, -1410),   (0, 1, 0, -1, -1344),   (1, 0, 0, -1, -1335),
    (0, 0, 3, 1, 1107),     (4, 0, 0, -1, 1021),    (4, 0, -1, 1, 833),
    (0, 0, 1, -3, 777),     (4, 0, -2, 1, 671),     (2, 0, 0, -3, 607),
    (2, 0, 2, -1, 596),     (2, -1, 1, -1, 491),    (2, 0, -2, 1, -451),
    (0, 0, 3, -1, 439),     (2, 0, 2, 1, 422),      (2, 0, -3, -1, 421),
    (2, 1, -1, 1, -366),    (2, 1, 0, 1, -351),     (4, 0, 0, 1, 331),
    (2, -1, 1, 1, 315),     (2, -2, 0, -1, 302),    (0, 0, 1, 3, -283),
    (2, 1, 1, -1, -229),    (1, 1, 0, -1, 223),     (1, 1, 0, 1, 223),
    (0, 1, -2, -1, -220),   (2, 1, -1, -1, -220),   (1, 0, 1, 1, -185),
    (2, -1, -2, -1, 181),   (0, 1, 2, 1, -177),     (4, 0, -2, -1, 176),
    (4, -1, -1, -1, 166),   (1, 0, 1, -1, -164),    (4, 0, 1, -1, 132),
    (1, 0, -1, -1, -119),   (4, -1, 0, -1, 115),    (2, -2, 0, 1, 107),
)


def _sum_terms(terms, D, M, Mp, F, E, trig) -> float:
    total = 0.0
    for d, m, mp, f, coeff in terms:
        arg = _r(d*D + m*M + mp*Mp + f*F)
        total += coeff * trig(arg) * E**abs(m)
    return total


def moon_longitude(T: float) -> Tuple[float, float]:
    """Returns geocentric (longitude_deg, latitude_deg), mean equinox of date."""
    T2, T3, T4 = T*T, T*T*T, T*T*T*T
    Lp = _n(218.3164477 + 481267.88123421*T - 0.0015786*T2 + T3/538841.0 - T4/65194000.0)
    D  = _n(297.8501921 + 445267.1114034*T  - 0.0018819*T2 + T3/545868.0 - T4/113065000.0)
    M  = _n(357.5291092 + 35999.0502909*T   - 0.0001536*T2 + T3/24490000.0)
    Mp = _n(134.9633964 + 477198.8675055*T  + 0.0087414*T2 + T3/69699.0 - T4/14712000.0)
    F  = _n(93.2720950  + 483202.0175233*T  - 0.0036539*T2 - T3/3526000.0 + T4/863310000.0)

    A1 = _n(119.75 + 131.849*T)
    A2 = _n(53.09  + 479264.290*T)
    A3 = _n(313.45 + 481266.484*T)
    E  = 1.0 - 0.002516*T - 0.0000074*T2

    sl = _sum_terms(_MOON_LONGITUDE_TERMS, D, M, Mp, F, E, math.sin)
    sl += 3958*math.sin(_r(A1)) + 1962*math.sin(_r(Lp - F)) + 318*math.sin(_r(A2))

    sb = _sum_terms(_MOON_LATITUDE_TERMS, D, M, Mp, F, E, math.sin)
    sb += (-2235*math.sin(_r(Lp)) + 382*math.sin(_r(A3))
           + 175*math.sin(_r(A1 - F)) + 175*math.sin(_r(A1 + F))
           + 127*math.sin(_r(Lp - Mp)) - 115*math.sin(_r(Lp + Mp)))

    return _n(Lp + sl/1_000_000.0), sb/1_000_000.0


# ── Sidereal time (Meeus Ch. 12) ───────────────────────────────

def greenwich_mean_sidereal_time(jd: float) -> float:
    """GMST in degrees, Meeus Eq. 12.4."""
    T = julian_centuries(jd)
    theta = (280.46061837 + SIDEREAL_RATE*(jd - J2000)
             + 0.000387933*T*T - T*T*T/38710000.0)
    return _n(theta)


def apparent_sidereal_time(jd: float) -> float:
    """Greenwich apparent sidereal time in degrees (GMST + equation of the equinoxes)."""
    dpsi, _, obliquity = nutation_and_obliquity(julian_centuries(jd))
    return _n(greenwich_mean_sidereal_time(jd) + dpsi*math.cos(_r(obliquity))*ARCSEC)


def local_sidereal_time(jd: float, longitude_deg: float) -> float:
    """Local apparent sidereal time (degrees); longitude positive East."""
    return _n(apparent_sidereal_time(jd) + longitude_deg)


def ascendant_longitude(lst: float, latitude_deg: float, obliquity: float) -> float:
    """
    Tropical ecliptic longitude rising on the eastern horizon.
    lst: local sidereal time (= RAMC) in degrees.  Meeus Ch. 14.
    """
    theta = _r(lst)
    eps   = _r(obliquity)
    phi   = _r(latitude_deg)
    y = math.cos(theta)
    x = -(math.sin(theta)*math.cos(eps) + math.tan(phi)*math.sin(eps))
    return _n(_d(math.atan2(y, x)))


# ── Ayanamsa ────────────────────────────────────────────────────

AYANAMSA = {
    # value at J2000 (deg), precession rate (deg/yr)
    "lahiri": {"j2000": 23.85045, "rate": 50.2882 / 3600.0},
    "raman":  {"j2000": 22.46000, "rate": 50.2388 / 3600.0},
    "kp":     {"j2000": 23.86000, "rate": 50.2388 / 3600.0},
    "fagan":  {"j2000": 24.74000, "rate": 50.2388 / 3600.0},
}


def get_ayanamsa(T: float, system: str = "lahiri") -> float:
    try:
        p = AYANAMSA[system.lower()]
    except KeyError:
        raise ValueError(f"Unknown ayanamsa '{system}', expected one of {sorted(AYANAMSA)}")
    return p["j2000"] + p["rate"] * T * 100  # T is centuries


def tropical_to_sidereal(lon: float, T: float, ayanamsa: str = "lahiri") -> float:
    return _n(lon - get_ayanamsa(T, ayanamsa))


# ── Position provider ───────────────────────────────────────────

@dataclass(frozen=True)
class Position:
    julian_day:          float
    moon_longitude_deg:  float
    moon_latitude_deg:   float
    sidereal_time_deg:   float

    @property
    def julian_centuries(self) -> float:
        return julian_centuries(self.julian_day)


class PositionProvider(ABC):
    """Capability used by the solar, nakshatra and dasha calculators."""

    @abstractmethod
    def position(self, instant: datetime) -> Position:
        """Moon ecliptic coordinates and Greenwich apparent sidereal time at ``instant``."""

    @abstractmethod
    def sun_equatorial(self, jd: float) -> Tuple[float, float]:
        """Sun's apparent (right ascension, declination) in degrees at Julian Day ``jd``."""


class MeeusEphemeris(PositionProvider):
    """Low-precision analytic series, no external data files."""

    def position(self, instant: datetime) -> Position:
        utc = check_supported(instant)
        jd = datetime_to_jd(utc)
        lon, lat = moon_longitude(julian_centuries(jd))
        return Position(
            julian_day=jd,
            moon_longitude_deg=lon,
            moon_latitude_deg=lat,
            sidereal_time_deg=apparent_sidereal_time(jd),
        )

    def sun_equatorial(self, jd: float) -> Tuple[float, float]:
        return sun_equatorial(jd)


DEFAULT_PROVIDER: PositionProvider = MeeusEphemeris()


def position(instant: datetime, provider: Optional[PositionProvider] = None) -> Position:
    pos = (provider or DEFAULT_PROVIDER).position(instant)
    logger.debug("Position at JD %.5f: moon λ=%.4f° β=%.4f° θ=%.4f°",
                 pos.julian_day, pos.moon_longitude_deg,
                 pos.moon_latitude_deg, pos.sidereal_time_deg)
    return pos
