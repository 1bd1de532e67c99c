import pytest

from verixilac.game.cards import new_cards
from verixilac.game.game import Game
from verixilac.game.player import Player
from verixilac.game.room import Room
from verixilac.game.rules import get_rule
from verixilac.telegram.buttons import (
    InlineButton,
    buttons_equal,
    make_bet_buttons,
    make_dealer_dashboard_buttons,
    make_dealer_playing_buttons,
    make_dealer_prepare_buttons,
    make_newly_created_room_buttons,
    make_player_buttons,
    make_result_buttons,
    to_inline_keyboard,
)


def _game(*names):
    game = Game(Player("d", "Dealer"), Room("11"), get_rule("2"), 200, 60.0)
    for i, name in enumerate(names):
        game.player_bet(Player(f"p{i}", name), 10)
    return game


@pytest.mark.parametrize(
    "a,b,want",
    [
        (None, None, True),
        ([], [], True),
        ([InlineButton("A", "A")], [], False),
        ([InlineButton("A", "A", 0)], [InlineButton("A", "A", 0)], True),
        ([InlineButton("A", "A")], [InlineButton("B", "A")], False),
        ([InlineButton("A", "A")], [InlineButton("A", "B")], False),
        ([InlineButton("A", "A", 0)], [InlineButton("A", "A", 1)], False),
    ],
)
def test_buttons_equal(a, b, want):
    assert buttons_equal(a, b) is want


def test_to_inline_keyboard_groups_rows_and_defaults_data():
    keyboard = to_inline_keyboard(
        [InlineButton("x"), InlineButton("y", "/y", 2), InlineButton("z", "/z")]
    )
    assert len(keyboard) == 3
    assert keyboard[0] == [
        {"text": "x", "callback_data": "x"},
        {"text": "z", "callback_data": "/z"},
    ]
    assert keyboard[1] == []
    assert keyboard[2] == [{"text": "y", "callback_data": "/y"}]


def test_to_inline_keyboard_empty_has_one_row():
    assert to_inline_keyboard([]) == [[]]


def test_to_inline_keyboard_rejects_negative_row():
    with pytest.raises(ValueError):
        to_inline_keyboard([InlineButton("x", row=-1)])


def test_bet_buttons():
    game = _game()
    buttons = make_bet_buttons(game)
    assert [b.text for b in buttons] == ["10k", "20k", "50k", "100k", "200k", "Rút lui"]
    assert buttons[0].data == f"/bet {game.id} 10"
    assert buttons[-1].data == f"/bet {game.id} 0"
    assert [b.row for b in buttons] == [0, 0, 0, 1, 1, 1]


def test_prepare_result_and_room_buttons():
    game = _game()
    prepare = make_dealer_prepare_buttons(game)
    assert [b.data for b in prepare] == [f"/deal {game.id}", f"/cancel {game.id}"]
    assert make_result_buttons(game) == [InlineButton("Tạo ván mới", "/newgame")]
    assert make_newly_created_room_buttons(Room("12")) == [
        InlineButton("Tạo ván mới", "/newgame")
    ]


def test_dealer_playing_buttons():
    game = _game("An")
    pg = game.players[0]
    assert make_dealer_playing_buttons(game, pg) == [
        InlineButton("Lật bài của An", f"/compare {game.id} p0")
    ]


def test_player_buttons_too_low_can_only_hit():
    game = _game("An")
    pg = game.players[0]
    pg.cards.extend(new_cards(1, 2))
    assert make_player_buttons(game, pg, False) == [
        InlineButton("Rút thêm", f"/hit {game.id}")
    ]
    assert make_player_buttons(game, pg, True) == [
        InlineButton("Rút thêm", f"/hit {game.id} force")
    ]


def test_player_buttons_normal_hand():
    game = _game("An")
    pg = game.players[0]
    pg.cards.extend(new_cards(7, 8))
    assert [b.data for b in make_player_buttons(game, pg, False)] == [
        f"/hit {game.id}",
        f"/stand {game.id}",
    ]
    game.dealer.cards.extend(new_cards(7, 8))
    assert make_player_buttons(game, game.dealer, False)[-1].data == f"/endgame {game.id}"


def test_dealer_dashboard_buttons_layout():
    game = _game("An", "Binh", "Chi", "Dung")
    game.players[1].done(0)
    game.dealer.cards.extend(new_cards(7, 8))
    buttons = make_dealer_dashboard_buttons(game, game.dealer)
    assert [(b.text, b.row) for b in buttons] == [
        ("Mở An", 0),
        ("Mở Chi", 0),
        ("Mở Dung", 1),
        ("Rút bài", 2),
        ("Dằn (Xét tất cả)", 2),
    ]
    assert buttons[0].data == f"/compare {game.id} p0"