from verixilac.game.player import Player
from verixilac.game.player_in_game import PlayerInGame
from verixilac.telegram.recipients import (
    filter_in_game_players,
    filter_players,
    to_chat_id,
    to_chat_ids,
)


def test_to_chat_id_parses_decimal():
    assert to_chat_id("123456") == 123456
    assert to_chat_id("-100") == -100


def test_to_chat_id_invalid_is_zero():
    assert to_chat_id("abc") == 0
    assert to_chat_id("") == 0
    assert to_chat_id(" 12") == 0
    assert to_chat_id("--5") == 0
    assert to_chat_id("9" * 30) == 0


def test_to_chat_id_octal_prefix():
    assert to_chat_id("010") == 8


def test_to_chat_ids_keeps_order():
    assert to_chat_ids("3", "1", "x") == [3, 1, 0]
    assert to_chat_ids() == []


def test_filter_players_excludes_ids():
    players = [Player("1", "a"), Player("2", "b"), Player("3", "c")]
    kept = filter_players(players, "2", "9")
    assert [p.id for p in kept] == ["1", "3"]
    assert filter_players(players) == players
    assert filter_players([], "1") == []


def test_filter_in_game_players_returns_players():
    a, b = Player("1", "a"), Player("2", "b")
    seats = [PlayerInGame(a), PlayerInGame(b, 0, True)]
    kept = filter_in_game_players(seats, "1")
    assert kept == [b]
    assert filter_in_game_players(seats) == [a, b]