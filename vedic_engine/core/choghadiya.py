"""
choghadiya.py
=============
Division of day and night into eight Choghadiya periods each.

    Day   : sunrise → sunset        in 8 equal parts
    Night : sunset  → next sunrise  in 8 equal parts

Labels come from a fixed 7-name cycle. The day starts at Udveg, so the
8th day period repeats Udveg. The night starts 4 places further on
(Kaal) for every weekday.

Classical panchangs start each day from the weekday lord's period and
shift the night start accordingly; this engine keeps one constant
sequence for all days. Results therefore differ from classical tables
on most weekdays.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from types import MappingProxyType
from typing import List, Optional, Sequence

from ..errors import InvalidInterval
from .ephemeris import PositionProvider, to_utc
from .solar import solar_events

logger = logging.getLogger(__name__)


class Nature(str, Enum):
    FAVORABLE   = "Favorable"
    UNFAVORABLE = "Unfavorable"
    MIXED       = "Mixed"


BASE_SEQUENCE = ("Udveg", "Chal", "Labh", "Amrit", "Kaal", "Shubh", "Rog")

NATURE = MappingProxyType({
    "Udveg": Nature.UNFAVORABLE,
    "Chal":  Nature.MIXED,
    "Labh":  Nature.FAVORABLE,
    "Amrit": Nature.FAVORABLE,
    "Kaal":  Nature.UNFAVORABLE,
    "Shubh": Nature.FAVORABLE,
    "Rog":   Nature.UNFAVORABLE,
})

PERIODS_PER_HALF = 8
NIGHT_OFFSET = 4


@dataclass(frozen=True)
class ChoghadiyaPeriod:
    name:       str
    nature:     Nature
    start_time: datetime
    end_time:   datetime      # exclusive
    is_day:     bool = True

    @property
    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    def contains(self, instant: datetime) -> bool:
        return self.start_time <= instant < self.end_time

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "nature": self.nature.value,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "is_day": self.is_day,
        }


def _half(start: datetime, end: datetime, offset: int, is_day: bool) -> List[ChoghadiyaPeriod]:
    span = end - start
    # span * i / 8 keeps shared boundaries identical and lands exactly on `end`
    bounds = [start + span * i / PERIODS_PER_HALF for i in range(PERIODS_PER_HALF + 1)]
    periods = []
    for i in range(PERIODS_PER_HALF):
        name = BASE_SEQUENCE[(i + offset) % len(BASE_SEQUENCE)]
        periods.append(ChoghadiyaPeriod(
            name=name,
            nature=NATURE[name],
            start_time=bounds[i],
            end_time=bounds[i + 1],
            is_day=is_day,
        ))
    return periods


def partition(sunrise: datetime, sunset: datetime,
              next_sunrise: datetime) -> List[ChoghadiyaPeriod]:
    """
    Split [sunrise, next_sunrise) into 16 contiguous Choghadiya periods.

    Naive datetimes are taken to be UTC; returned periods are in UTC.
    """
    sunrise, sunset, next_sunrise = to_utc(sunrise), to_utc(sunset), to_utc(next_sunrise)
    if not sunrise < sunset < next_sunrise:
        raise InvalidInterval(
            f"Expected sunrise < sunset < next_sunrise, got "
            f"{sunrise.isoformat()}, {sunset.isoformat()}, {next_sunrise.isoformat()}"
        )

    periods = (_half(sunrise, sunset, 0, True)
               + _half(sunset, next_sunrise, NIGHT_OFFSET, False))
    logger.debug("Partitioned %s → %s into %d periods",
                 sunrise.isoformat(), next_sunrise.isoformat(), len(periods))
    return periods


def current_period(now: datetime,
                   periods: Sequence[ChoghadiyaPeriod]) -> Optional[ChoghadiyaPeriod]:
    """First period with start <= now < end, or None outside the covered span."""
    now = to_utc(now)
    for period in periods:
        if period.contains(now):
            return period
    return None


def compute_choghadiya(day: date, latitude: float, longitude: float,
                       provider: Optional[PositionProvider] = None) -> List[ChoghadiyaPeriod]:
    events = solar_events(day, latitude, longitude, provider)
    return partition(events.sunrise, events.sunset, events.next_sunrise)
