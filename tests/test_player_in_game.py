import pytest

from verixilac.game.cards import ResultType, new_cards
from verixilac.game.errors import TooLow, YouArePlayed, YouNotPlaying
from verixilac.game.player import Player
from verixilac.game.player_in_game import PlayerInGame, PlayerInGameStatus, to_players
from verixilac.game.rules import PlayerType


def make(ids=(), dealer=False, bet=0):
    return PlayerInGame(Player("7", "Binh"), bet, dealer, new_cards(*ids))


def test_delegates_identity():
    pg = make()
    assert pg.id == "7"
    assert pg.name == "Binh"
    assert pg.icon_name() == pg.player.icon_name()


def test_play_sets_playing_and_last_hit():
    pg = make((9, 8))
    pg.play()
    assert pg.status is PlayerInGameStatus.PLAYING
    assert pg.last_hit > 0


def test_play_twice_raises():
    pg = make((9, 8))
    pg.play()
    with pytest.raises(YouArePlayed):
        pg.play()


def test_stand_before_play_raises():
    with pytest.raises(YouNotPlaying):
        make((9, 8)).stand()


def test_stand_too_low_raises():
    pg = make((1, 2))
    pg.play()
    with pytest.raises(TooLow):
        pg.stand()
    assert pg.status is PlayerInGameStatus.PLAYING


def test_stand_ok():
    pg = make((9, 8))
    pg.play()
    pg.stand()
    assert pg.status is PlayerInGameStatus.STOOD
    assert not pg.is_done()


def test_done_sets_reward():
    pg = make((9, 8))
    pg.done(-20)
    assert pg.is_done()
    assert pg.reward == -20
    assert pg.add_reward(5) == -15


def test_add_bet_and_card():
    pg = make((9,), bet=10)
    assert pg.add_bet(20) == 30
    pg.add_card(new_cards(8)[0])
    assert pg.cards == new_cards(9, 8)


def test_dealer_threshold_changes_can_stand():
    assert make((5, 8), dealer=True).can_stand() is True
    assert make((5, 8), dealer=False).can_stand() is False


def test_can_hit():
    assert make((1, 2)).can_hit() is True
    assert make((9, 8)).can_hit() is True
    assert make((0, 9)).can_hit() is False
    assert make((9, 10, 1)).can_hit() is False


def test_result_type_and_player_type():
    assert make((0, 0)).result_type() is ResultType.DOUBLE_BLACK_JACK
    assert make(dealer=True).player_type() is PlayerType.DEALER
    assert make().player_type() is PlayerType.PARTICIPANT


def test_cards_string_participant_hidden_until_done():
    pg = make((9, 8))
    assert pg.cards_string() == pg.cards.render(True)
    pg.done(0)
    assert pg.cards_string() == pg.cards.render(False)


def test_cards_string_dealer_visible_once_playing():
    pg = make((9, 8), dealer=True)
    assert pg.cards_string() == pg.cards.render(True, True)
    pg.play()
    assert pg.cards_string() == pg.cards.render(False, True)


def test_list_cards_are_converted():
    pg = PlayerInGame(Player("1", "A"), cards=list(new_cards(0, 9)))
    assert pg.cards.is_black_jack()


def test_to_players():
    a, b = make(), PlayerInGame(Player("8", "Chi"))
    assert to_players([a, b]) == [a.player, b.player]