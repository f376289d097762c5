# Vedic Engine - Core modules
from .ephemeris import (
    Position, PositionProvider, MeeusEphemeris,
    position, gregorian_to_jd, jd_to_gregorian, datetime_to_jd,
)
from .solar import SolarEvents, solar_events
from .choghadiya import ChoghadiyaPeriod, Nature, partition, current_period, compute_choghadiya
from .nakshatra import NakshatraInfo, nakshatra, moon_sign
from .dasha import DashaState, dasha
from .prediction_parser import ParsedPrediction, parse

__all__ = [
    "Position", "PositionProvider", "MeeusEphemeris",
    "position", "gregorian_to_jd", "jd_to_gregorian", "datetime_to_jd",
    "SolarEvents", "solar_events",
    "ChoghadiyaPeriod", "Nature", "partition", "current_period", "compute_choghadiya",
    "NakshatraInfo", "nakshatra", "moon_sign",
    "DashaState", "dasha",
    "ParsedPrediction", "parse",
]
