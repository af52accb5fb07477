"""Tests for pass legality rules.

Tests cover:
- Empty and missing passes
- Intra-pass repeats and the connector exemptions
- Back full repeat cap
- Cross-pass repeats and the larger cross-pass exemption set
- Double back-full pass endings
- Connector into forward element and mid-pass direction changes
- Overlapping violations on the same slots
"""

import pytest

from tumbling_tariff.routine import Slot
from tumbling_tariff.rules import validate
from tumbling_tariff.rules.legality import (
    RuleHit,
    back_full_cap_rule,
    cross_repeat_rule,
    index_map,
    intra_repeat_rule,
    last_occupied_index,
    mid_pass_reversal_rule,
)

EMPTY = [None] * 8


class TestEmptyInput:
    def test_two_empty_passes_are_legal(self):
        result = validate(EMPTY, EMPTY, "en")
        assert result.is_legal is True
        assert result.pass1.bad_indices == frozenset()
        assert result.pass2.messages == frozenset()
        assert result.cross_messages == frozenset()

    def test_missing_passes_are_legal(self):
        assert validate().is_legal is True
        assert validate(None, None).is_legal is True

    def test_full_length_varied_pass_is_legal(self):
        pass1 = ["roundoff", "back_handspring", "tempo", "back_tuck", "back_pike", "back_layout", "half_twist", "double_full"]
        assert validate(pass1, EMPTY, "en").is_legal is True


class TestIntraPassRepeat:
    def test_non_exempt_repeat_marks_every_occurrence(self):
        result = validate(["back_tuck", None, None, "back_tuck"], EMPTY, "en")
        assert result.pass1.bad_indices == {0, 3}
        assert result.pass1.messages == {"Element repeated in pass"}
        assert result.is_legal is False

    @pytest.mark.parametrize("element_id", ["tempo", "back_handspring", "full"])
    def test_exempt_repeat_is_allowed(self, element_id):
        result = validate([element_id, None, None, element_id], EMPTY, "en")
        assert result.is_legal is True

    def test_roundoff_is_only_cross_exempt(self):
        result = validate(["roundoff", "back_handspring", "roundoff"], EMPTY, "en")
        assert result.pass1.bad_indices == {0, 2}
        assert result.rules_fired == {"intra_repeat"}

    def test_rule_function_returns_hit_per_element(self):
        hits = intra_repeat_rule(["back_tuck", "back_pike", "back_tuck", "back_pike"], 2)
        assert len(hits) == 2
        assert all(hit.pass_number == 2 for hit in hits)
        assert RuleHit("intra_repeat", frozenset({(2, 0), (2, 2)}), 2) in hits


class TestBackFullCap:
    def test_fourth_back_full_is_bad(self):
        result = validate(["full", "full", "full", "full"], EMPTY, "en")
        assert result.pass1.bad_indices == {3}
        assert result.pass1.messages == {"Max 3 back fulls per pass"}

    def test_three_back_fulls_are_allowed(self):
        assert validate(["full", "full", "full"], EMPTY, "en").is_legal is True

    def test_every_occurrence_after_cap(self):
        hits = back_full_cap_rule(["full"] * 5, 1)
        assert len(hits) == 1
        assert hits[0].marks == {(1, 3), (1, 4)}


class TestCrossPassRepeat:
    def test_shared_element_marks_both_passes(self):
        result = validate(["back_tuck"], ["roundoff", "back_tuck"], "en")
        assert result.pass1.bad_indices == {0}
        assert result.pass2.bad_indices == {1}
        assert result.cross_messages == {"Element repeated across passes"}
        assert result.pass1.messages == frozenset()

    def test_cross_exempt_elements(self):
        result = validate(["roundoff", "back_tuck"], ["roundoff", "back_pike"], "en")
        assert result.is_legal is True

    def test_single_message_for_several_shared_elements(self):
        result = validate(["back_tuck", "back_pike"], ["back_pike", "back_tuck"], "en")
        assert result.cross_messages == {"Element repeated across passes"}
        assert len(cross_repeat_rule(["back_tuck", "back_pike"], ["back_pike", "back_tuck"])) == 2

    def test_intra_and_cross_on_same_slots(self):
        result = validate(["back_tuck", "back_tuck"], ["back_tuck"], "en")
        assert result.pass1.bad_indices == {0, 1}
        assert result.pass1.messages == {"Element repeated in pass"}
        assert result.pass2.bad_indices == {0}
        assert result.pass2.messages == frozenset()
        assert result.cross_messages == {"Element repeated across passes"}


class TestDoubleBackFullEnding:
    def test_both_passes_ending_with_back_full(self):
        result = validate(["roundoff", "back_handspring", "full"], ["roundoff", "tempo", "full"], "en")
        assert result.pass1.bad_indices == {2}
        assert result.pass2.bad_indices == {2}
        assert result.cross_messages == {"Only one pass may end with Back Full"}
        assert result.rules_fired == {"double_back_full_ending"}

    def test_trailing_empty_slots_are_skipped(self):
        result = validate(["roundoff", "full", None, None], ["tempo", "full", None], "en")
        assert result.pass1.bad_indices == {1}
        assert result.pass2.bad_indices == {1}

    def test_one_pass_ending_with_back_full_is_legal(self):
        result = validate(["roundoff", "back_handspring", "full"], ["roundoff", "full", "back_tuck"], "en")
        assert result.is_legal is True


class TestDirectionRules:
    def test_back_handspring_into_forward_element(self):
        result = validate(["roundoff", "back_handspring", "front_tuck"], EMPTY, "en")
        assert result.pass1.bad_indices == {1, 2}
        assert result.pass1.messages == {"Flick/Back Handspring into forward element"}

    def test_tempo_into_forward_element(self):
        result = validate(["roundoff", "tempo", "front_tuck"], EMPTY, "en")
        assert result.pass1.messages == {"Tempo/Whip into forward element"}

    def test_reversal_into_last_element_is_legal(self):
        result = validate(["roundoff", "back_tuck", "front_tuck"], EMPTY, "en")
        assert result.is_legal is True

    def test_reversal_with_element_after_is_illegal(self):
        result = validate(["roundoff", "back_tuck", "front_tuck", "front_pike"], EMPTY, "en")
        assert result.pass1.bad_indices == {1, 2}
        assert result.pass1.messages == {"Change of movement direction in middle of pass"}

    def test_connector_and_reversal_overlap(self):
        result = validate(["tempo", "front_tuck", "front_pike"], EMPTY, "en")
        assert result.pass1.bad_indices == {0, 1}
        assert result.pass1.messages == {
            "Tempo/Whip into forward element",
            "Change of movement direction in middle of pass",
        }
        assert result.rules_fired == {"tempo_into_forward", "mid_pass_direction_change"}

    def test_gap_breaks_adjacency(self):
        assert validate(["tempo", None, "front_tuck"], EMPTY, "en").is_legal is True

    def test_reversal_rule_uses_last_occupied_slot(self):
        ids = ["back_tuck", "front_tuck", None, None]
        assert last_occupied_index(ids) == 1
        assert mid_pass_reversal_rule(ids, 1) == []


class TestUnknownElements:
    def test_unknown_ids_skip_direction_rules(self):
        assert validate(["mystery", "front_tuck", "other"], EMPTY, "en").is_legal is True

    def test_unknown_ids_still_repeat(self):
        result = validate(["mystery", None, "mystery"], ["mystery"], "en")
        assert result.pass1.bad_indices == {0, 2}
        assert result.pass2.bad_indices == {0}
        assert result.cross_messages == {"Element repeated across passes"}


class TestMessagesAndInputs:
    def test_hebrew_is_default_language(self):
        result = validate(["back_tuck", "back_tuck"], [])
        assert result.pass1.messages == {"חזרה על אלמנט בתוך הפס"}

    def test_other_languages_fall_back_to_english(self):
        result = validate(["back_tuck", "back_tuck"], [], "fr")
        assert result.pass1.messages == {"Element repeated in pass"}

    def test_slot_objects_are_accepted(self):
        result = validate([Slot("back_tuck", 0.5), None, Slot("back_tuck", 0.5)], [], "en")
        assert result.pass1.bad_indices == {0, 2}

    def test_repeated_calls_are_identical(self):
        args = (["tempo", "front_tuck", "front_pike", "tempo"], ["back_tuck", "full"], "en")
        assert validate(*args) == validate(*args)
        assert validate(*args).to_dict() == validate(*args).to_dict()

    def test_index_map_ignores_empty_slots(self):
        assert index_map(["a", None, "", "a", "b"]) == {"a": [0, 3], "b": [4]}

    def test_to_dict_is_sorted(self):
        data = validate(["back_tuck", None, None, "back_tuck"], ["back_tuck"], "en").to_dict()
        assert data["pass1"]["bad_indices"] == [0, 3]
        assert data["is_legal"] is False
        assert data["rules_fired"] == ["cross_repeat", "intra_repeat"]
