"""Chat ids and recipient lists."""

from __future__ import annotations

from typing import Iterable

from verixilac.game.player import Player
from verixilac.game.player_in_game import PlayerInGame

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def to_chat_id(player_id: str) -> int:
    """Parse a player id as a chat id; anything unparsable gives 0."""
    text = str(player_id)
    negative = False
    body = text
    if body and body[0] in "+-":
        negative = body[0] == "-"
        body = body[1:]
    if not body or body != body.strip() or body[0] in "+-":
        return 0
    try:
        if len(body) > 1 and body[0] == "0" and body[1] not in "xXoObB":
            value = int(body[1:], 8)
        else:
            value = int(body, 0)
    except ValueError:
        return 0
    if negative:
        value = -value
    if not _INT64_MIN <= value <= _INT64_MAX:
        return 0
    return value


def to_chat_ids(*args: str) -> list[int]:
    return [to_chat_id(player_id) for player_id in args]


def filter_players(players: Iterable[Player], *args: str) -> list[Player]:
    """Players whose id is not among ``args``."""
    excluded = set(args)
    return [p for p in players if p.id not in excluded]


def filter_in_game_players(players: Iterable[PlayerInGame], *args: str) -> list[Player]:
    """Underlying players of the seats whose id is not among ``args``."""
    excluded = set(args)
    return [pg.player for pg in players if pg.id not in excluded]