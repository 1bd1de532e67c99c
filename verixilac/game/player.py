"""Registered players."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from verixilac.game.rules import Rule, get_rule

if TYPE_CHECKING:
    from verixilac.game.room import Room


@dataclass(eq=False)
class Player:
    """A user known to the bot, with a balance and a current room and game."""

    id: str
    name: str
    balance: int = 0
    icon: str = ""
    is_admin: bool = False
    rule_id: str = ""
    current_room: Room | None = None
    current_game: Any = None
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def icon_name(self) -> str:
        """Name prefixed with the player's icon, if any."""
        return self.icon + self.name if self.icon else self.name

    def add_balance(self, amount: int) -> int:
        """Add ``amount`` (may be negative) and return the new balance."""
        with self._lock:
            self.balance += amount
            return self.balance

    def rule(self) -> Rule:
        """The player's chosen rule, or the default one."""
        return get_rule(self.rule_id)