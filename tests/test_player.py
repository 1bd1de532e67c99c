from verixilac.game.player import Player
from verixilac.game.rules import DEFAULT_RULE_ID, DEFAULT_RULES


def test_icon_name_without_icon():
    p = Player("1", "An")
    assert p.icon_name() == "An"


def test_icon_name_with_icon():
    p = Player("1", "An", icon="🚀")
    assert p.icon_name() == "🚀" + "An"


def test_add_balance_accumulates_and_allows_negative():
    p = Player("1", "An", balance=10)
    assert p.add_balance(-25) == -15
    assert p.balance == -15
    p.add_balance(15)
    assert p.balance == 0


def test_default_rule():
    p = Player("1", "An")
    assert p.rule() == DEFAULT_RULES[DEFAULT_RULE_ID]


def test_chosen_rule():
    p = Player("1", "An", rule_id="1")
    assert p.rule().id == "1"


def test_unknown_rule_falls_back():
    p = Player("1", "An", rule_id="zzz")
    assert p.rule().id == DEFAULT_RULE_ID


def test_new_player_has_no_room_or_game():
    p = Player("1", "An")
    assert p.current_room is None
    assert p.current_game is None
    assert p.is_admin is False