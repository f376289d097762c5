"""
Vedic Engine
============
Deterministic time-partition and cycle calculations for a daily Vedic
astrology feed: sunrise/sunset, Choghadiya periods, Moon nakshatra,
Vimshottari dasha, and parsing of the generated prediction text.

Quick start:
    from datetime import date, datetime, timezone
    from vedic_engine import compute_choghadiya, current_period

    periods = compute_choghadiya(date(2024, 6, 21), latitude=28.6139, longitude=77.2090)
    now = current_period(datetime.now(timezone.utc), periods)
"""

from .core import (
    Position, PositionProvider, MeeusEphemeris, position,
    SolarEvents, solar_events,
    ChoghadiyaPeriod, Nature, partition, current_period, compute_choghadiya,
    NakshatraInfo, nakshatra, moon_sign,
    DashaState, dasha,
    ParsedPrediction, parse,
)
from .errors import (
    VedicEngineError, InvalidCoordinate, PolarDayNightError,
    DateOutOfRange, MalformedPredictionText, InvalidInterval,
)
from .tools.daily import vedic_elements, birth_profile, daily_choghadiya

__version__ = "1.0.0"
__all__ = [
    "Position", "PositionProvider", "MeeusEphemeris", "position",
    "SolarEvents", "solar_events",
    "ChoghadiyaPeriod", "Nature", "partition", "current_period", "compute_choghadiya",
    "NakshatraInfo", "nakshatra", "moon_sign",
    "DashaState", "dasha",
    "ParsedPrediction", "parse",
    "VedicEngineError", "InvalidCoordinate", "PolarDayNightError",
    "DateOutOfRange", "MalformedPredictionText", "InvalidInterval",
    "vedic_elements", "birth_profile", "daily_choghadiya",
]
