"""
Shared pipeline: evaluate a two-pass routine into a tariff sheet (legality + bonuses + totals).
Used by both CLI and web app.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from loguru import logger

from .catalog import find_element
from .routine import (
    RoutineMeta,
    Slot,
    SlotLike,
    build_pass,
    number_prefix,
    parse_number,
    pass_capacity,
    track_label,
)
from .rules import BonusResult, RoutineLegality, compute_bonuses, validate


def format_score(value: Any) -> str:
    """Scores are always shown with one decimal ("0.0"); missing or non-finite values are blank."""
    if value is None or value == "":
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        n = float(value)
    else:
        n = number_prefix(value)
        if n is None:
            return ""
    if not math.isfinite(n):
        return ""
    return f"{n:.1f}"


def sum_values(values: Sequence[Any]) -> float:
    return sum(parse_number(v) for v in values)


@dataclass(frozen=True)
class PassSheet:
    number: int
    slots: Tuple[Optional[Slot], ...]
    bonus: BonusResult
    bad_indices: frozenset

    @property
    def values(self) -> List[Optional[float]]:
        return [s.difficulty_value if s else None for s in self.slots]

    @property
    def difficulty_total(self) -> float:
        return round(sum_values(self.values), 2)

    @property
    def bonus_total(self) -> float:
        return self.bonus.total

    @property
    def total_with_bonus(self) -> float:
        return round(self.difficulty_total + self.bonus_total, 2)

    def to_dict(self, lang: str = "he") -> Dict[str, Any]:
        rows = []
        for i, slot in enumerate(self.slots):
            element = find_element(slot.element_id) if slot else None
            rows.append({
                "index": i,
                "element_id": slot.element_id if slot else None,
                "name": element.name(lang) if element else (slot.element_id if slot else None),
                "symbol": element.symbol if element else None,
                "value": slot.difficulty_value if slot else None,
                "bonus": self.bonus.per_slot[i] if i < len(self.bonus.per_slot) else 0.0,
                "bad": i in self.bad_indices,
            })
        return {
            "pass": self.number,
            "slots": rows,
            "bonus": self.bonus.to_dict(),
            "difficulty_total": self.difficulty_total,
            "bonus_total": self.bonus_total,
            "total_with_bonus": self.total_with_bonus,
            "formatted": {
                "difficulty_total": format_score(self.difficulty_total),
                "bonus_total": format_score(self.bonus_total),
                "total_with_bonus": format_score(self.total_with_bonus),
            },
        }


@dataclass(frozen=True)
class TariffSheet:
    meta: RoutineMeta
    lang: str
    legality: RoutineLegality
    pass1: PassSheet
    pass2: PassSheet

    @property
    def grand_total(self) -> float:
        return round(self.pass1.total_with_bonus + self.pass2.total_with_bonus, 2)

    @property
    def is_legal(self) -> bool:
        return self.legality.is_legal

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lang": self.lang,
            "track": self.meta.track.value if self.meta.track else None,
            "track_label": track_label(self.meta.track, self.lang),
            "level": self.meta.level,
            "gender": self.meta.gender.value if self.meta.gender else None,
            "capacity": pass_capacity(self.meta.track),
            "passes": [self.pass1.to_dict(self.lang), self.pass2.to_dict(self.lang)],
            "legality": self.legality.to_dict(),
            "grand_total": self.grand_total,
            "is_legal": self.is_legal,
        }


def evaluate_tariff(
    pass1: Sequence[SlotLike],
    pass2: Sequence[SlotLike],
    meta: RoutineMeta,
    lang: str = "he",
    auto_bonus: bool = True,
) -> TariffSheet:
    """
    Fit both passes to the track's capacity, validate them and compute bonuses.
    Legality and bonuses are independent; with auto_bonus off every bonus is zero.
    """
    slots1 = build_pass(pass1, meta.track)
    slots2 = build_pass(pass2, meta.track)
    legality = validate(slots1, slots2, lang)

    sheets = []
    for number, slots, pass_legality in ((1, slots1, legality.pass1), (2, slots2, legality.pass2)):
        values = [s.difficulty_value if s else None for s in slots]
        bonus = compute_bonuses(values, meta) if auto_bonus else BonusResult()
        sheets.append(PassSheet(number, tuple(slots), bonus, pass_legality.bad_indices))

    sheet = TariffSheet(meta, lang, legality, sheets[0], sheets[1])
    logger.debug(
        "Tariff evaluated",
        track=meta.track,
        is_legal=sheet.is_legal,
        grand_total=sheet.grand_total,
    )
    return sheet
