"""
Pass legality rules for a two-pass tumbling routine.

Each rule is a pure function returning RuleHit records (slots it implicates + the message key).
validate() runs every rule against both passes and folds the hits into per-pass bad-index and
message sets, so a slot can be implicated by several rules at once. Nothing here raises:
empty passes yield no hits and unknown ids only take part in the identity-based repeat rules.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from loguru import logger

from . import config
from ..catalog import (
    BACK_FULL_ID,
    BACK_HANDSPRING_ID,
    TEMPO_ID,
    Direction,
    RepeatScope,
    get_element_direction,
    is_repeat_exempt,
)
from ..routine import SlotLike, slot_id

Ids = Sequence[Optional[str]]

CONNECTOR_MESSAGE_KEYS = {
    BACK_HANDSPRING_ID: "back_handspring_into_forward",
    TEMPO_ID: "tempo_into_forward",
}


@dataclass(frozen=True)
class RuleHit:
    """One violation: the rule's message key and the (pass number, slot index) pairs it marks bad."""
    rule: str
    marks: FrozenSet[Tuple[int, int]]
    pass_number: Optional[int] = None  # None for violations spanning both passes

    @property
    def is_cross(self) -> bool:
        return self.pass_number is None


@dataclass(frozen=True)
class PassLegality:
    bad_indices: FrozenSet[int] = frozenset()
    messages: FrozenSet[str] = frozenset()

    def to_dict(self) -> Dict[str, Any]:
        return {"bad_indices": sorted(self.bad_indices), "messages": sorted(self.messages)}


@dataclass(frozen=True)
class RoutineLegality:
    pass1: PassLegality = PassLegality()
    pass2: PassLegality = PassLegality()
    cross_messages: FrozenSet[str] = frozenset()
    hits: Tuple[RuleHit, ...] = field(default=(), compare=False)

    @property
    def is_legal(self) -> bool:
        return not (self.pass1.bad_indices or self.pass2.bad_indices or self.cross_messages)

    @property
    def rules_fired(self) -> FrozenSet[str]:
        return frozenset(hit.rule for hit in self.hits)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pass1": self.pass1.to_dict(),
            "pass2": self.pass2.to_dict(),
            "cross_messages": sorted(self.cross_messages),
            "rules_fired": sorted(self.rules_fired),
            "is_legal": self.is_legal,
        }


def message_text(rule: str, lang: str = "he") -> str:
    texts = config.MESSAGES[rule]
    return texts["he"] if lang == "he" else texts["en"]


def index_map(ids: Ids) -> Dict[str, List[int]]:
    """Occupied slot indices grouped by element id, in slot order."""
    groups: Dict[str, List[int]] = defaultdict(list)
    for i, element_id in enumerate(ids):
        if element_id:
            groups[element_id].append(i)
    return dict(groups)


def last_occupied_index(ids: Ids) -> int:
    for i in range(len(ids) - 1, -1, -1):
        if ids[i]:
            return i
    return -1


def _adjacent_pairs(ids: Ids) -> Iterable[Tuple[int, str, str]]:
    for i in range(len(ids) - 1):
        if ids[i] and ids[i + 1]:
            yield i, ids[i], ids[i + 1]


def _marks(pass_number: int, indices: Iterable[int]) -> FrozenSet[Tuple[int, int]]:
    return frozenset((pass_number, i) for i in indices)


# ------------------------------
# Single-pass rules
# ------------------------------

def intra_repeat_rule(ids: Ids, pass_number: int) -> List[RuleHit]:
    """Any non-exempt element appearing more than once in a pass marks all its occurrences."""
    hits = []
    for element_id, indices in index_map(ids).items():
        if len(indices) > 1 and not is_repeat_exempt(element_id, RepeatScope.INTRA_PASS):
            hits.append(RuleHit("intra_repeat", _marks(pass_number, indices), pass_number))
    return hits


def back_full_cap_rule(ids: Ids, pass_number: int) -> List[RuleHit]:
    """Back fulls beyond the per-pass cap are marked; the first occurrences stay clean."""
    indices = index_map(ids).get(BACK_FULL_ID, [])
    extra = indices[config.MAX_BACK_FULLS_PER_PASS:]
    if not extra:
        return []
    return [RuleHit("back_full_cap", _marks(pass_number, extra), pass_number)]


def connector_into_forward_rule(ids: Ids, pass_number: int) -> List[RuleHit]:
    """Tempo or back handspring followed directly by a forward element."""
    hits = []
    for i, current, following in _adjacent_pairs(ids):
        rule = CONNECTOR_MESSAGE_KEYS.get(current)
        if rule and get_element_direction(following) == Direction.FORWARD:
            hits.append(RuleHit(rule, _marks(pass_number, (i, i + 1)), pass_number))
    return hits


def mid_pass_reversal_rule(ids: Ids, pass_number: int) -> List[RuleHit]:
    """Backward -> forward transition anywhere but into the pass's final element."""
    last = last_occupied_index(ids)
    hits = []
    for i, current, following in _adjacent_pairs(ids):
        if i + 1 == last:
            continue
        if get_element_direction(current) == Direction.BACKWARD and get_element_direction(following) == Direction.FORWARD:
            hits.append(RuleHit("mid_pass_direction_change", _marks(pass_number, (i, i + 1)), pass_number))
    return hits


# ------------------------------
# Cross-pass rules
# ------------------------------

def cross_repeat_rule(ids1: Ids, ids2: Ids) -> List[RuleHit]:
    """Non-exempt elements used in both passes mark every occurrence in each pass."""
    map1 = index_map(ids1)
    map2 = index_map(ids2)
    hits = []
    for element_id, indices1 in map1.items():
        indices2 = map2.get(element_id)
        if not indices2 or is_repeat_exempt(element_id, RepeatScope.CROSS_PASS):
            continue
        hits.append(RuleHit("cross_repeat", _marks(1, indices1) | _marks(2, indices2)))
    return hits


def double_back_full_ending_rule(ids1: Ids, ids2: Ids) -> List[RuleHit]:
    """Only one of the two passes may finish on a back full."""
    last1 = last_occupied_index(ids1)
    last2 = last_occupied_index(ids2)
    if last1 < 0 or last2 < 0:
        return []
    if ids1[last1] != BACK_FULL_ID or ids2[last2] != BACK_FULL_ID:
        return []
    return [RuleHit("double_back_full_ending", frozenset({(1, last1), (2, last2)}))]


PASS_RULES = (
    intra_repeat_rule,
    back_full_cap_rule,
    connector_into_forward_rule,
    mid_pass_reversal_rule,
)

ROUTINE_RULES = (
    cross_repeat_rule,
    double_back_full_ending_rule,
)


def collect_hits(ids1: Ids, ids2: Ids) -> List[RuleHit]:
    hits: List[RuleHit] = []
    for rule in PASS_RULES:
        hits.extend(rule(ids1, 1))
        hits.extend(rule(ids2, 2))
    for rule in ROUTINE_RULES:
        hits.extend(rule(ids1, ids2))
    return hits


def fold_hits(hits: Sequence[RuleHit], lang: str = "he") -> RoutineLegality:
    bad: Dict[int, set] = {1: set(), 2: set()}
    messages: Dict[int, set] = {1: set(), 2: set()}
    cross: set = set()
    for hit in hits:
        for pass_number, index in hit.marks:
            bad[pass_number].add(index)
        text = message_text(hit.rule, lang)
        if hit.is_cross:
            cross.add(text)
        else:
            messages[hit.pass_number].add(text)
    return RoutineLegality(
        pass1=PassLegality(frozenset(bad[1]), frozenset(messages[1])),
        pass2=PassLegality(frozenset(bad[2]), frozenset(messages[2])),
        cross_messages=frozenset(cross),
        hits=tuple(hits),
    )


def validate(
    pass1: Optional[Sequence[SlotLike]] = None,
    pass2: Optional[Sequence[SlotLike]] = None,
    lang: str = "he",
) -> RoutineLegality:
    """
    Check both passes of a routine against the repeat, ending and direction rules.
    Slots may be Slot objects, bare element ids or None.
    """
    ids1 = [slot_id(s) for s in (pass1 or ())]
    ids2 = [slot_id(s) for s in (pass2 or ())]
    hits = collect_hits(ids1, ids2)
    result = fold_hits(hits, lang)
    logger.debug(
        "Routine legality evaluated",
        rules_fired=sorted(result.rules_fired),
        pass1_bad=len(result.pass1.bad_indices),
        pass2_bad=len(result.pass2.bad_indices),
        is_legal=result.is_legal,
    )
    return result
