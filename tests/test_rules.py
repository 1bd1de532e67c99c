from verixilac.game.cards import ResultType
from verixilac.game.rules import (
    DEFAULT_RULE_ID,
    DEFAULT_RULES,
    RULE_LIST_TEXT,
    SORTED_RULE_IDS,
    PlayerType,
    get_rule,
)


def test_get_rule_known():
    assert get_rule("1").name == "Default"
    assert get_rule("2").name == "Hai Dinh"


def test_get_rule_unknown_falls_back_to_default():
    assert get_rule("nope") == DEFAULT_RULES[DEFAULT_RULE_ID]
    assert get_rule("") == get_rule(DEFAULT_RULE_ID)


def test_rule_ids_match_keys():
    for rule_id, rule in DEFAULT_RULES.items():
        assert rule.id == rule_id


def test_sorted_rule_ids():
    assert [get_rule(rule_id).id for rule_id in SORTED_RULE_IDS] == ["1", "2"]


def test_multiplier_listed():
    rule = get_rule("2")
    assert rule.multiplier(PlayerType.PARTICIPANT, ResultType.DOUBLE_BLACK_JACK) == 3
    assert rule.multiplier(PlayerType.DEALER, ResultType.HIGH_FIVE) == 2


def test_multiplier_unlisted_defaults_to_one():
    rule = get_rule("1")
    assert rule.multiplier(PlayerType.DEALER, ResultType.DOUBLE_BLACK_JACK) == 1
    assert rule.multiplier(PlayerType.PARTICIPANT, ResultType.NORMAL) == 1


def test_rule_one_participant_double_black_jack():
    rule = get_rule("1")
    assert rule.multiplier(PlayerType.PARTICIPANT, ResultType.DOUBLE_BLACK_JACK) == 2


def test_rule_list_text_mentions_every_rule_in_order():
    assert RULE_LIST_TEXT.startswith("Danh sách rules:")
    positions = [RULE_LIST_TEXT.index(f"ID: {rule_id}") for rule_id in SORTED_RULE_IDS]
    assert positions == sorted(positions)
    assert "Hai Dinh" in RULE_LIST_TEXT