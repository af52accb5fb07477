"""
Per-slot bonus credit for one pass, by competitive track.
League: flat bonus after a level-dependent slot index. National: fixed bonuses on slots 6-8.
International: flat bonus for every element at or above the gender threshold except the first.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from loguru import logger

from . import config
from ..routine import Gender, RoutineMeta, Track, is_present, parse_number


@dataclass(frozen=True)
class BonusResult:
    per_slot: Tuple[float, ...] = (0.0,) * config.BONUS_SLOTS
    total: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"per_slot": list(self.per_slot), "sum": self.total}


def _league_bonuses(bonuses: List[float], values: Sequence[Any], meta: RoutineMeta) -> None:
    min_index = config.LEAGUE_MIN_INDEX.get(meta.league_level.name)
    if min_index is None:
        return
    for i in range(min(len(values), config.BONUS_SLOTS)):
        if is_present(values[i]) and i > min_index:
            bonuses[i] = config.LEAGUE_BONUS


def _national_bonuses(bonuses: List[float], values: Sequence[Any], present_count: int) -> None:
    # Unlocked by how many slots are filled; paid only on a filled slot
    for index, amount in config.NATIONAL_BONUS_BY_INDEX.items():
        if present_count > index and index < len(values) and is_present(values[index]):
            bonuses[index] = amount


def _international_bonuses(bonuses: List[float], values: Sequence[Any], meta: RoutineMeta) -> None:
    gender = meta.gender.value if isinstance(meta.gender, Gender) else config.INTERNATIONAL_DEFAULT_GENDER
    threshold = config.INTERNATIONAL_THRESHOLD[gender]
    qualified_seen = 0
    for i in range(min(config.BONUS_SLOTS, len(values))):
        if not is_present(values[i]):
            continue
        v = parse_number(values[i])
        if math.isfinite(v) and v >= threshold:
            qualified_seen += 1
            # The first qualifying element is counted but earns nothing
            if qualified_seen >= 2:
                bonuses[i] = config.INTERNATIONAL_BONUS


def compute_bonuses(values: Sequence[Any], meta: RoutineMeta) -> BonusResult:
    """Bonus per slot (always 8 entries) and their sum. Unknown track means no bonus."""
    values = list(values or ())
    bonuses = [0.0] * config.BONUS_SLOTS
    present_count = sum(1 for v in values if is_present(v))

    if meta.track == Track.LEAGUE:
        _league_bonuses(bonuses, values, meta)
    elif meta.track == Track.NATIONAL:
        _national_bonuses(bonuses, values, present_count)
    elif meta.track == Track.INTERNATIONAL:
        _international_bonuses(bonuses, values, meta)

    total = round(sum(bonuses), 2)
    logger.debug("Pass bonuses computed", track=meta.track, present=present_count, total=total)
    return BonusResult(per_slot=tuple(bonuses), total=total)
