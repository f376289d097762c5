"""
dasha.py
========
Approximate Vimshottari Dasha state.

Vimshottari ("120 years") cycles through nine planetary lords:

    Ketu (7) → Venus (20) → Sun (6) → Moon (10) → Mars (7)
    → Rahu (18) → Jupiter (16) → Saturn (19) → Mercury (17)

The ruling lord is taken from the birth nakshatra (index mod 9). The
remaining time is that lord's period length minus the time elapsed since
birth, folded into the period length:

    remaining = L - (years_elapsed mod L)

This is a simplified model. The classical balance at birth depends on the
fraction of the nakshatra still to be traversed and the sequence moves on
to the next lord when a period ends; neither happens here.
"""

from dataclasses import dataclass
from datetime import datetime

from .ephemeris import to_utc

DASHA_ORDER = ("Ketu", "Venus", "Sun", "Moon", "Mars",
               "Rahu", "Jupiter", "Saturn", "Mercury")

DASHA_YEARS = (7, 20, 6, 10, 7, 18, 16, 19, 17)

TOTAL_YEARS = sum(DASHA_YEARS)   # 120

DAYS_PER_YEAR = 365.25
SECONDS_PER_YEAR = DAYS_PER_YEAR * 86400.0


@dataclass(frozen=True)
class DashaState:
    planet:             str
    cycle_length_years: int
    remaining_years:    float

    def describe(self) -> str:
        return f"{self.planet} ({self.remaining_years:.2f} years remaining)"

    def to_dict(self) -> dict:
        return {
            "planet": self.planet,
            "cycle_length_years": self.cycle_length_years,
            "remaining_years": round(self.remaining_years, 4),
            "description": self.describe(),
        }


def dasha(birth_instant: datetime, now_instant: datetime, nakshatra_index: int) -> DashaState:
    """
    Dasha lord and remaining years for a birth nakshatra.

    Args:
        birth_instant: birth moment (naive = UTC)
        now_instant: moment of evaluation (naive = UTC)
        nakshatra_index: 0-based birth nakshatra, 0–26

    Returns:
        DashaState with remaining_years in (0, cycle_length_years].
    """
    if not isinstance(nakshatra_index, int) or not 0 <= nakshatra_index <= 26:
        raise ValueError(f"nakshatra_index must be an integer in [0, 26], got {nakshatra_index!r}")

    k = nakshatra_index % len(DASHA_ORDER)
    length = DASHA_YEARS[k]

    elapsed = (to_utc(now_instant) - to_utc(birth_instant)).total_seconds() / SECONDS_PER_YEAR
    remaining = length - (elapsed % length)
    if remaining <= 0.0:
        remaining = float(length)

    return DashaState(planet=DASHA_ORDER[k], cycle_length_years=length,
                      remaining_years=remaining)
