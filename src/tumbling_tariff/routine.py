"""
Routine boundary types: track / gender / league level enums, slots and passes.
Free-text metadata (Hebrew or English) is parsed once here so the rules never re-parse strings.
"""
import math
import re
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Iterable, List, Optional, Union

from loguru import logger

from .catalog import element_value


class Track(str, Enum):
    LEAGUE = "league"
    NATIONAL = "national"
    INTERNATIONAL = "international"


class Gender(str, Enum):
    FEMALE = "F"
    MALE = "M"


class LeagueLevel(IntEnum):
    A = 1
    B = 2
    C = 3
    D = 4


# Level options offered per track
LEVELS_BY_TRACK = {
    Track.LEAGUE: ["א", "ב", "ג", "ד"],
    Track.NATIONAL: ["1", "2", "3", "4", "5"],
    Track.INTERNATIONAL: ["Age 1", "Age 2", "Junior", "Age 3", "Senior"],
}

PASS_CAPACITY = 8
LEAGUE_PASS_CAPACITY = 5

TRACK_LABELS = {
    "he": {Track.LEAGUE: "ליגה", Track.NATIONAL: "לאומי", Track.INTERNATIONAL: "בינלאומי"},
    "en": {Track.LEAGUE: "League", Track.NATIONAL: "National", Track.INTERNATIONAL: "International"},
}


def parse_track(value: Any) -> Optional[Track]:
    if isinstance(value, Track):
        return value
    if value is None:
        return None
    s = str(value).strip().lower()
    if not s:
        return None
    for track in Track:
        if s == track.value:
            return track
    if "ליגה" in s:
        return Track.LEAGUE
    if s.startswith("לאומ"):
        return Track.NATIONAL
    if s.startswith("בינלאומ"):
        return Track.INTERNATIONAL
    logger.debug("Unrecognized track, bonuses disabled", track=s)
    return None


def parse_gender(value: Any) -> Optional[Gender]:
    if isinstance(value, Gender):
        return value
    if value is None:
        return None
    s = str(value).strip().lower()
    if s in ("f", "female", "נ", "נקבה"):
        return Gender.FEMALE
    if s in ("m", "male", "ז", "זכר"):
        return Gender.MALE
    return None


def parse_league_level(value: Any) -> LeagueLevel:
    """Map a league level (Hebrew letter, Latin letter or digit) onto A..D. Anything unrecognized is A."""
    if isinstance(value, LeagueLevel):
        return value
    if value is None:
        return LeagueLevel.A
    s = str(value).strip()
    if not s:
        return LeagueLevel.A
    if s.isdigit():
        return {4: LeagueLevel.D, 3: LeagueLevel.C, 2: LeagueLevel.B}.get(int(s), LeagueLevel.A)
    if "ד" in s:
        return LeagueLevel.D
    if "ג" in s:
        return LeagueLevel.C
    if "ב" in s:
        return LeagueLevel.B
    latin = {"d": LeagueLevel.D, "c": LeagueLevel.C, "b": LeagueLevel.B, "a": LeagueLevel.A}
    if s.lower() in latin:
        return latin[s.lower()]
    if "א" not in s:
        logger.debug("Unrecognized league level, using lowest tier", level=s)
    return LeagueLevel.A


_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)")


def number_prefix(value: Any) -> Optional[float]:
    """Leading number of a text value (comma decimals allowed), or None when there is none."""
    m = _NUMBER_RE.match(str(value).replace(",", ".").strip())
    return float(m.group(0)) if m else None


def parse_number(value: Any) -> float:
    """Lenient numeric parse: comma decimals allowed, leading number prefix used, anything else is 0."""
    if value is None or value == "" or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return 0.0 if math.isnan(value) else float(value)
    n = number_prefix(value)
    return 0.0 if n is None else n


def is_present(value: Any) -> bool:
    return value is not None and value != ""


@dataclass(frozen=True)
class RoutineMeta:
    track: Optional[Track] = None
    level: Optional[str] = None
    gender: Optional[Gender] = None

    @classmethod
    def from_raw(cls, track: Any = None, level: Any = None, gender: Any = None) -> "RoutineMeta":
        return cls(
            track=parse_track(track),
            level=None if level is None else str(level).strip() or None,
            gender=parse_gender(gender),
        )

    @property
    def league_level(self) -> LeagueLevel:
        return parse_league_level(self.level)


@dataclass(frozen=True)
class Slot:
    element_id: str
    difficulty_value: float = 0.0


SlotLike = Union[Slot, str, None]


def slot_id(slot: SlotLike) -> Optional[str]:
    """Element id held by a slot; None for empty slots. Accepts Slot objects or bare ids."""
    if slot is None:
        return None
    if isinstance(slot, Slot):
        return slot.element_id or None
    return str(slot) or None


def pass_capacity(track: Optional[Track]) -> int:
    return LEAGUE_PASS_CAPACITY if track == Track.LEAGUE else PASS_CAPACITY


def build_pass(items: Iterable[SlotLike], track: Optional[Track] = None) -> List[Optional[Slot]]:
    """
    Fixed-length pass for a track: items are truncated or padded with empty slots.
    Bare ids get their difficulty value from the catalog (0.0 when unknown).
    """
    capacity = pass_capacity(track)
    slots: List[Optional[Slot]] = []
    for item in list(items or ())[:capacity]:
        element_id = slot_id(item)
        if element_id is None:
            slots.append(None)
        elif isinstance(item, Slot):
            slots.append(item)
        else:
            slots.append(Slot(element_id, element_value(element_id)))
    slots.extend([None] * (capacity - len(slots)))
    return slots


def track_label(track: Optional[Track], lang: str = "he") -> str:
    if track is None:
        return ""
    labels = TRACK_LABELS["he" if lang == "he" else "en"]
    return labels[track]
