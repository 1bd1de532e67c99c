"""Rooms that players gather in."""

from __future__ import annotations

import secrets
import threading
from typing import Any, Iterable

from verixilac.game.errors import PlayerAlreadyInRoom
from verixilac.game.player import Player
from verixilac.stringer import escape_markdown_v2


def generate_room_id() -> str:
    """A random two-digit room id."""
    return f"{secrets.randbelow(100):02d}"


class Room:
    """A group of players that play games together."""

    def __init__(self, room_id: str = "", players: Iterable[Player] = ()) -> None:
        self.id = room_id or generate_room_id()
        self.players: list[Player] = list(players)
        self.current_game: Any = None
        self.last_game_players: list[str] = []
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return f"Room(id={self.id!r}, players={len(self.players)})"

    def join_player(self, player: Player) -> None:
        """Add ``player``; raises if a player with the same id is present."""
        with self._lock:
            if any(p.id == player.id for p in self.players):
                raise PlayerAlreadyInRoom()
            self.players.append(player)

    def remove_player(self, player: Player) -> None:
        """Remove the player with ``player``'s id, if present."""
        with self._lock:
            self.players = [p for p in self.players if p.id != player.id]

    def info(self) -> str:
        """MarkdownV2 summary of the room, members sorted by balance."""
        with self._lock:
            members = list(self.players)
        members.sort(key=lambda p: p.balance, reverse=True)
        lines = [
            "Phòng hiện tại: " + escape_markdown_v2(self.id),
            "\nThành viên:\n",
        ]
        for p in members:
            lines.append(
                f" \\- {escape_markdown_v2(p.icon_name())}: "
                f"{escape_markdown_v2(f'{p.balance:+d}')}🌷\n"
            )
        return "".join(lines)