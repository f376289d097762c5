"""
prediction_parser.py
====================
Structured extraction from a free-form daily prediction narrative.

The narrative is written by a language model, so its formatting drifts.
Parsing is a best-effort heuristic over an explicit grammar:

  1. Split the text into sections on blank lines.
  2. Each SectionRule owns the FIRST section whose text contains its
     marker word (case-insensitive).
  3. Inside a section, each FieldRule takes the first line matching any
     of its patterns (case-insensitive) and keeps what follows the first
     colon.

Missing sections or fields yield empty strings / empty lists. Only
non-string or blank text is rejected.

Example input:

    Panchang:
    Tithi: Shukla Panchami
    Nakshatra: Rohini

    Choghadiya:
    06:15 - Udveg (Unfavorable)
    07:44 - Chal (Mixed)
"""

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..errors import MalformedPredictionText
from .choghadiya import NATURE, Nature

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PanchangDetails:
    tithi:           str = ""
    nakshatra:       str = ""
    yoga:            str = ""
    karana:          str = ""
    rahu_kaal:       str = ""
    abhijit_muhurat: str = ""


@dataclass(frozen=True)
class ChoghadiyaRow:
    time:   str
    name:   str
    nature: Optional[Nature]


@dataclass(frozen=True)
class TradingWindow:
    asset:      str
    best_time:  str = ""
    worst_time: str = ""


@dataclass(frozen=True)
class DailyTips:
    color:     str = ""
    direction: str = ""
    mantra:    str = ""
    remedy:    str = ""


@dataclass(frozen=True)
class ParsedPrediction:
    panchang:     PanchangDetails = field(default_factory=PanchangDetails)
    choghadiya:   Tuple[ChoghadiyaRow, ...] = ()
    moon_transit: str = ""
    trading:      Tuple[TradingWindow, ...] = ()
    tips:         DailyTips = field(default_factory=DailyTips)
    spiritual:    str = ""

    def to_dict(self) -> dict:
        out = asdict(self)
        out["choghadiya"] = [
            {**row, "nature": row["nature"].value if row["nature"] else None}
            for row in out["choghadiya"]
        ]
        return out


# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class FieldRule:
    name:     str
    patterns: Tuple[str, ...]

    @property
    def regex(self) -> "re.Pattern":
        return re.compile("|".join(f"(?:{p})" for p in self.patterns), re.IGNORECASE)


@dataclass(frozen=True)
class SectionRule:
    key:    str
    marker: str
    fields: Tuple[FieldRule, ...] = ()

    def owns(self, section: str) -> bool:
        return self.marker.lower() in section.lower()


PANCHANG = SectionRule("panchang", "Panchang", (
    FieldRule("tithi",           ("Tithi",)),
    FieldRule("nakshatra",       ("Nakshatra",)),
    FieldRule("yoga",            ("Yoga",)),
    FieldRule("karana",          ("Karana",)),
    FieldRule("rahu_kaal",       ("Rahu Kaal", "Rahu Kalam", "Rahukaal")),
    FieldRule("abhijit_muhurat", ("Abhijit",)),
))

CHOGHADIYA = SectionRule("choghadiya", "Choghadiya")

TRADING = SectionRule("trading", "Trading")

TIPS = SectionRule("tips", "Daily Tips", (
    FieldRule("color",     ("Colou?r", "Lucky Colou?r")),
    FieldRule("direction", ("Direction", "Lucky Direction")),
    FieldRule("mantra",    ("Mantra",)),
    FieldRule("remedy",    ("Remedy", "Simple Remedy")),
))

MOON_TRANSIT = SectionRule("moon_transit", "Moon Transit")

SPIRITUAL = SectionRule("spiritual", "Spiritual")

GRAMMAR = (PANCHANG, CHOGHADIYA, TRADING, TIPS, MOON_TRANSIT, SPIRITUAL)

TRADING_ASSETS = ("Gold", "Crypto")


def _trading_rules(asset: str) -> Tuple[FieldRule, FieldRule]:
    a = re.escape(asset)
    best  = FieldRule("best_time",  (rf"{a}.*\bbest\b", rf"\bbest\b.*{a}"))
    worst = FieldRule("worst_time", (rf"{a}.*\b(?:avoid|worst)\b", rf"\b(?:avoid|worst)\b.*{a}"))
    return best, worst


# ---------------------------------------------------------------------------
# Extraction helpers
# ---------------------------------------------------------------------------

_BLANK_LINE = re.compile(r"\n[ \t]*\n")
_COLON = re.compile(r"[:：]")
_BULLET = " \t-*•"


def split_sections(text: str) -> List[str]:
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    return [s.strip("\n") for s in _BLANK_LINE.split(normalized) if s.strip()]


def _clean(value: str) -> str:
    return value.strip().strip("*_").strip()


def extract_value(lines: Sequence[str], rule: FieldRule) -> str:
    regex = rule.regex
    for line in lines:
        if regex.search(line):
            parts = _COLON.split(line, maxsplit=1)
            return _clean(parts[1]) if len(parts) == 2 else ""
    return ""


def parse_choghadiya_line(line: str) -> Optional[ChoghadiyaRow]:
    """Parse ``time - name (nature)``; None if the line has no such shape."""
    head, paren, tail = line.partition("(")
    time, hyphen, name = head.rpartition("-")
    if not hyphen:
        return None
    time = time.strip(_BULLET)
    name = _clean(name)
    if not time or not name:
        return None

    nature = None
    if paren:
        raw = tail.split(")", 1)[0].strip()
        nature = next((n for n in Nature if n.value.lower() == raw.lower()), None)
    if nature is None:
        nature = NATURE.get(name.capitalize())
    return ChoghadiyaRow(time=time, name=name, nature=nature)


def _body(section: Optional[str]) -> str:
    if section is None:
        return ""
    return "\n".join(section.split("\n")[1:]).strip()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def locate_sections(sections: Sequence[str]) -> Dict[str, str]:
    found = {}
    for rule in GRAMMAR:
        match = next((s for s in sections if rule.owns(s)), None)
        if match is not None:
            found[rule.key] = match
    return found


def parse(text: str) -> ParsedPrediction:
    """
    Parse a multi-section prediction narrative.

    Text whose sections carry no known marker yields an all-empty result.

    Raises:
        MalformedPredictionText: text is not a string or is blank.
    """
    if not isinstance(text, str):
        raise MalformedPredictionText(f"Expected prediction text as str, got {type(text).__name__}")

    sections = split_sections(text)
    if not sections:
        raise MalformedPredictionText("Prediction text is empty")

    found = locate_sections(sections)
    if not found:
        logger.warning("No recognisable section in %d block(s); expected one of: %s",
                       len(sections), ", ".join(rule.marker for rule in GRAMMAR))
    missing = [rule.key for rule in GRAMMAR if rule.key not in found]
    if missing:
        logger.debug("Prediction text is missing sections: %s", ", ".join(missing))

    panchang_lines = found.get("panchang", "").split("\n")
    panchang = PanchangDetails(**{
        rule.name: extract_value(panchang_lines, rule) for rule in PANCHANG.fields
    })

    rows = []
    for line in found.get("choghadiya", "").split("\n"):
        if CHOGHADIYA.owns(line) or "-" not in line:
            continue
        row = parse_choghadiya_line(line)
        if row is not None:
            rows.append(row)

    trading_lines = found.get("trading", "").split("\n")
    trading = []
    for asset in TRADING_ASSETS:
        best, worst = _trading_rules(asset)
        trading.append(TradingWindow(
            asset=asset,
            best_time=extract_value(trading_lines, best),
            worst_time=extract_value(trading_lines, worst),
        ))

    tips_lines = found.get("tips", "").split("\n")
    tips = DailyTips(**{rule.name: extract_value(tips_lines, rule) for rule in TIPS.fields})

    return ParsedPrediction(
        panchang=panchang,
        choghadiya=tuple(rows),
        moon_transit=_body(found.get("moon_transit")),
        trading=tuple(trading),
        tips=tips,
        spiritual=_body(found.get("spiritual")),
    )
