"""Inline keyboard buttons shown under bot messages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable, Sequence

if TYPE_CHECKING:
    from verixilac.game.game import Game
    from verixilac.game.player_in_game import PlayerInGame
    from verixilac.game.room import Room


@dataclass(frozen=True)
class InlineButton:
    """A callback button; ``data`` falls back to ``text`` when empty."""

    text: str
    data: str = ""
    row: int = 0


def buttons_equal(
    a: Sequence[InlineButton] | None, b: Sequence[InlineButton] | None
) -> bool:
    """True when both button lists hold the same buttons in the same order."""
    return list(a or ()) == list(b or ())


def to_inline_keyboard(buttons: Iterable[InlineButton]) -> list[list[dict[str, Any]]]:
    """Group buttons into keyboard rows in the Telegram API layout."""
    buttons = list(buttons)
    for b in buttons:
        if b.row < 0:
            raise ValueError(f"button row must not be negative: {b.row}")
    last_row = max((b.row for b in buttons), default=0)
    keyboard: list[list[dict[str, Any]]] = [[] for _ in range(last_row + 1)]
    for b in buttons:
        keyboard[b.row].append({"text": b.text, "callback_data": b.data or b.text})
    return keyboard


def make_bet_buttons(game: Game) -> list[InlineButton]:
    prefix = f"/bet {game.id} "
    return [
        InlineButton("10k", prefix + "10"),
        InlineButton("20k", prefix + "20"),
        InlineButton("50k", prefix + "50"),
        InlineButton("100k", prefix + "100", 1),
        InlineButton("200k", prefix + "200", 1),
        InlineButton("Rút lui", prefix + "0", 1),
    ]


def make_dealer_prepare_buttons(game: Game) -> list[InlineButton]:
    return [
        InlineButton("Chia bài", f"/deal {game.id}"),
        InlineButton("Huỷ", f"/cancel {game.id}"),
    ]


def make_dealer_playing_buttons(game: Game, pg: PlayerInGame) -> list[InlineButton]:
    return [InlineButton("Lật bài của " + pg.name, f"/compare {game.id} {pg.id}")]


def make_player_buttons(game: Game, pg: PlayerInGame, force: bool) -> list[InlineButton]:
    """Hit and stand buttons for whoever's turn it is."""
    buttons = []
    if pg.can_hit():
        suffix = " force" if force else ""
        buttons.append(InlineButton("Rút thêm", f"/hit {game.id}{suffix}"))
    if pg.can_stand():
        command = "/endgame" if pg.is_dealer else "/stand"
        buttons.append(InlineButton("Thôi", f"{command} {game.id}"))
    return buttons


def make_result_buttons(game: Game) -> list[InlineButton]:
    return [InlineButton("Tạo ván mới", "/newgame")]


def make_newly_created_room_buttons(room: Room) -> list[InlineButton]:
    return [InlineButton("Tạo ván mới", "/newgame")]


def make_dealer_dashboard_buttons(game: Game, dealer: PlayerInGame) -> list[InlineButton]:
    """Reveal buttons two per row for unsettled players, then the dealer's actions."""
    buttons = []
    row = 0
    col = 0
    for p in list(game.players):
        if p.is_done():
            continue
        buttons.append(InlineButton("Mở " + p.name, f"/compare {game.id} {p.id}", row))
        col += 1
        if col == 2:
            row += 1
            col = 0
    if col > 0:
        row += 1

    if dealer.can_hit():
        buttons.append(InlineButton("Rút bài", f"/hit {game.id}", row))
    if dealer.can_stand():
        buttons.append(InlineButton("Dằn (Xét tất cả)", f"/endgame {game.id}", row))
    return buttons