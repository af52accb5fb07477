"""
Tumbling element catalog: id, Hebrew/English names, symbol, difficulty value and direction.
Read-only lookup table shared by the legality rules, the tariff sheet, the CLI and the web API.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class Direction(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"
    UNKNOWN = "unknown"


class RepeatScope(str, Enum):
    INTRA_PASS = "intra_pass"
    CROSS_PASS = "cross_pass"


class UnknownElementError(KeyError):
    """Raised by strict lookups when an element id is not in the catalog."""


@dataclass(frozen=True)
class Element:
    id: str
    name_he: str
    name_en: str
    symbol: str
    value: float
    direction: Direction

    def name(self, lang: str = "he") -> str:
        return self.name_he if lang == "he" else self.name_en


# Connector elements with special repeat / transition handling
TEMPO_ID = "tempo"
BACK_HANDSPRING_ID = "back_handspring"
BACK_FULL_ID = "full"
ROUNDOFF_ID = "roundoff"

_F = Direction.FORWARD
_B = Direction.BACKWARD

ELEMENTS: tuple = (
    Element("front_handspring", "קפיצת ידיים", "Front Handspring", "H", 0.1, _F),
    Element("front_tuck", "סלטה קדימה בקירוס", "Front Tuck", ".O", 0.6, _F),
    Element("front_pike", "סלטה קדימה בקיפול", "Front Pike", ".<", 0.7, _F),
    Element("front_layout", "גוף ישר קדימה", "Front Layout", "./", 0.7, _F),
    Element("barani", "בראני", "Barani", ".1", 0.8, _F),
    Element("front_full", "בורג קדימה", "Front Full", ".2", 1.0, _F),
    Element(ROUNDOFF_ID, "ערבית", "Round Off", "(", 0.1, _B),
    Element(BACK_HANDSPRING_ID, "פליק פלאק", "Back Handspring", "F", 0.1, _B),
    Element(TEMPO_ID, "טמפו", "Whip", "^", 0.2, _B),
    Element("back_tuck", "סלטה אחורה בקירוס", "Back Tuck", "O", 0.5, _B),
    Element("back_pike", "סלטה אחורה בקיפול", "Back Pike", "<", 0.6, _B),
    Element("back_layout", "סלטה אחורה בגוף ישר", "Back Layout", "/", 0.6, _B),
    Element("half_twist", "חצי בורג", "Half Twist", "1", 0.7, _B),
    Element(BACK_FULL_ID, "בורג", "Full", "2", 0.9, _B),
    Element("one_and_half_twist", "בורג וחצי", "1.5 Twist", "3", 1.1, _B),
    Element("double_full", "דאבל בורג", "Double Full", "4", 1.3, _B),
    Element("double_back_tuck", "דאבל קירוס", "Double Tuck", "--O", 2.0, _B),
    Element("double_back_pike", "דאבל קיפול", "Double Pike", "--<", 2.2, _B),
    Element("double_back_layout", "דאבל גוף ישר", "Double Layout", "--/", 2.4, _B),
    Element("double_back_straddle", "דאבל בשפגאט", "Double Split", "--Y", 2.4, _B),
    Element("half_out_layout", "האף אאוט גוף ישר", "Half Out Layout", "-1/", 2.6, _B),
    Element("full_in_tuck", "פול אין קירוס", "Full In Tuck", "2-O", 2.4, _B),
    Element("full_out_tuck", "פול אאוט קירוס", "Full Out Tuck", "-2O", 2.4, _B),
    Element("full_in_pike", "פול אין קיפול", "Full In Pike", "2-<", 2.6, _B),
    Element("full_in_layout", "פול אין גוף ישר", "Full In Layout", "2-/", 2.8, _B),
    Element("full_out_layout", "פול אאוט גוף ישר", "Full Out Layout", "-2/", 2.8, _B),
    Element("full_full_tuck", "פול פול קירוס", "Full Full Tuck", "22O", 3.2, _B),
    Element("full_full_layout", "פול פול גוף ישר", "Full Full Layout", "22/", 3.6, _B),
    Element("full_full_half_tuck", "פול פול וחצי קירוס", "Full In 1.5 Twist Out Tuck", "23O", 3.8, _B),
    Element("full_full_half_layout", "פול פול וחצי גוף ישר", "Full In 1.5 Twist Out Layout", "23/", 4.2, _B),
    Element("miller_tuck", "מילר קירוס", "Miller Tuck", "24O", 4.4, _B),
    Element("miller_layout", "מילר גוף ישר", "Miller Layout", "24/", 4.8, _B),
    Element("killer", "קילר", "Killer", "44/", 6.4, _B),
    Element("triple_back_tuck", "טריפל קירוס", "Triple Tuck", "---O", 4.5, _B),
    Element("triple_back_pike", "טריפל קיפול", "Triple Pike", "---<", 5.1, _B),
    Element("triple_back_layout", "טריפל גוף ישר", "Triple Layout", "---/", 5.7, _B),
    Element("full_in_triple_tuck", "פול אין טריפל קירוס", "Full In Triple Tuck", "2--O", 6.3, _B),
    Element("full_in_triple_pike", "פול אין טריפל קיפול", "Full In Triple Pike", "2--<", 6.9, _B),
    Element("back_full_full_tuck", "באק פול פול קירוס", "Back Full Full Tuck", "-22O", 8.7, _B),
    Element("full_full_full_tuck", "פול פול פול", "Full Full Full", "222O", 11.1, _B),
)

_BY_ID: Dict[str, Element] = {e.id: e for e in ELEMENTS}

ALLOWED_INTRA_REPEAT = frozenset({TEMPO_ID, BACK_HANDSPRING_ID, BACK_FULL_ID})
ALLOWED_CROSS_REPEAT = ALLOWED_INTRA_REPEAT | {ROUNDOFF_ID}

SORT_KEYS = ("difficulty", "direction", "name")


def find_element(element_id: Optional[str]) -> Optional[Element]:
    if not element_id:
        return None
    return _BY_ID.get(element_id)


def get_element(element_id: str) -> Element:
    element = find_element(element_id)
    if element is None:
        raise UnknownElementError(element_id)
    return element


def get_element_direction(element_id: Optional[str]) -> Direction:
    """Direction of a catalog element; UNKNOWN for empty or unrecognized ids."""
    element = find_element(element_id)
    return element.direction if element else Direction.UNKNOWN


def element_value(element_id: Optional[str]) -> float:
    element = find_element(element_id)
    return element.value if element else 0.0


def element_name(element_id: Optional[str], lang: str = "he") -> str:
    """Localized display name, falling back to the raw id for unknown elements."""
    element = find_element(element_id)
    if element is None:
        return element_id or ""
    return element.name(lang)


def is_repeat_exempt(element_id: Optional[str], scope: RepeatScope) -> bool:
    if scope == RepeatScope.INTRA_PASS:
        return element_id in ALLOWED_INTRA_REPEAT
    return element_id in ALLOWED_CROSS_REPEAT


def elements_by_direction(direction: Direction) -> List[Element]:
    return [e for e in ELEMENTS if e.direction == direction]


def list_elements(sort_key: str = "difficulty", descending: bool = False, lang: str = "he") -> List[Element]:
    """Catalog copy ordered by difficulty, direction or localized name. Unknown keys keep catalog order."""
    items = list(ELEMENTS)
    if sort_key == "difficulty":
        items.sort(key=lambda e: e.value, reverse=descending)
    elif sort_key == "direction":
        items.sort(key=lambda e: e.direction.value, reverse=descending)
    elif sort_key == "name":
        items.sort(key=lambda e: e.name(lang).lower(), reverse=descending)
    return items
