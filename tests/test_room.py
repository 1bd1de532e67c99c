import pytest

from verixilac.game.errors import PlayerAlreadyInRoom
from verixilac.game.player import Player
from verixilac.game.room import Room, generate_room_id


def test_room_id():
    r = Room("123")
    assert r.id == "123"


def test_generate_room_id_length():
    for _ in range(10):
        got = generate_room_id()
        assert len(got) == 2
        assert got.isdigit()


def test_empty_id_is_generated():
    r = Room("")
    assert len(r.id) == 2


def test_initial_players():
    a = Player("1", "A")
    r = Room("5", [a])
    assert r.players == [a]


def test_join_player_twice_raises():
    r = Room("1")
    p = Player("1", "A")
    r.join_player(p)
    with pytest.raises(PlayerAlreadyInRoom):
        r.join_player(Player("1", "Other"))
    assert r.players == [p]


def test_remove_player():
    a, b = Player("1", "A"), Player("2", "B")
    r = Room("1", [a, b])
    r.remove_player(a)
    assert r.players == [b]
    r.remove_player(a)
    assert r.players == [b]


def test_info_sorted_by_balance():
    poor = Player("1", "Poor", balance=-5)
    rich = Player("2", "Rich", balance=50)
    r = Room("42", [poor, rich])
    text = r.info()
    assert text.startswith("Phòng hiện tại: 42")
    assert text.index("Rich") < text.index("Poor")
    assert "\\+50🌷" in text
    assert "\\-5🌷" in text