"""A player's seat in one game."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable

from verixilac.game.cards import Card, Cards, ResultType
from verixilac.game.errors import TooLow, YouArePlayed, YouNotPlaying
from verixilac.game.player import Player
from verixilac.game.rules import PlayerType


class PlayerInGameStatus(IntEnum):
    WAITING = 0
    PLAYING = 1
    STOOD = 2
    DONE = 3


@dataclass(eq=False)
class PlayerInGame:
    """Hand, bet and turn state of a player (or the dealer) in a game."""

    player: Player
    bet_amount: int = 0
    is_dealer: bool = False
    cards: Cards = field(default_factory=Cards)
    status: PlayerInGameStatus = PlayerInGameStatus.WAITING
    reward: int = 0
    last_hit: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.cards, Cards):
            self.cards = Cards(self.cards)

    @property
    def id(self) -> str:
        return self.player.id

    @property
    def name(self) -> str:
        return self.player.name

    @property
    def balance(self) -> int:
        return self.player.balance

    def icon_name(self) -> str:
        return self.player.icon_name()

    def is_done(self) -> bool:
        return self.status >= PlayerInGameStatus.DONE

    def add_bet(self, amount: int) -> int:
        with self._lock:
            self.bet_amount += amount
            return self.bet_amount

    def add_card(self, card: Card) -> None:
        with self._lock:
            self.cards.append(card)

    def cards_string(self) -> str:
        """The hand as shown to others: hidden until it may be revealed."""
        if self.is_dealer:
            censor = self.status < PlayerInGameStatus.PLAYING
        else:
            censor = self.status != PlayerInGameStatus.DONE
        return self.cards.render(censor, self.is_dealer)

    def play(self) -> None:
        """Begin this player's turn."""
        if self.status != PlayerInGameStatus.WAITING:
            raise YouArePlayed()
        self.status = PlayerInGameStatus.PLAYING
        self.last_hit = int(time.time())

    def stand(self) -> None:
        """End this player's turn; the hand must not be too low."""
        if self.status != PlayerInGameStatus.PLAYING:
            raise YouNotPlaying()
        if self.cards.result_type(self.is_dealer) is ResultType.TOO_LOW:
            raise TooLow()
        self.status = PlayerInGameStatus.STOOD

    def done(self, reward: int) -> None:
        self.reward = reward
        self.status = PlayerInGameStatus.DONE

    def add_reward(self, reward: int) -> int:
        with self._lock:
            self.reward += reward
            return self.reward

    def can_hit(self) -> bool:
        kind = self.result_type()
        return kind is ResultType.TOO_LOW or (
            kind is ResultType.NORMAL and self.cards.value() < 21
        )

    def can_stand(self) -> bool:
        return self.result_type() is not ResultType.TOO_LOW

    def result_type(self) -> ResultType:
        return self.cards.result_type(self.is_dealer)

    def player_type(self) -> PlayerType:
        return PlayerType.DEALER if self.is_dealer else PlayerType.PARTICIPANT


def to_players(players_in_game: Iterable[PlayerInGame]) -> list[Player]:
    """The underlying players of the given seats."""
    return [pg.player for pg in players_in_game]