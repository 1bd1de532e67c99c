"""One round of play: betting, dealing, turns and payouts."""

from __future__ import annotations

import secrets
import threading
import time
from enum import IntEnum
from typing import Any, Callable

from verixilac.game.cards import Card, ResultType
from verixilac.game.errors import (
    BetTooHigh,
    EmptyGame,
    GameAlreadyStarted,
    NotTimeout,
    PlayerIsDone,
    PlayerNotFound,
    PlayerNotStandYet,
    YouNotPlaying,
)
from verixilac.game.player import Player
from verixilac.game.player_in_game import PlayerInGame, PlayerInGameStatus
from verixilac.game.rules import PlayerType, Rule
from verixilac.stringer import escape_markdown_v2 as esc

DECK_SIZE = 52


class Status(IntEnum):
    BETTING = 0
    PLAYING = 1
    DEALER_PLAYING = 2
    FINISHED = 3


class Result(IntEnum):
    """Outcome seen from the first side of a comparison."""

    WIN = 0
    DRAW = 1
    LOSE = 2

    def __str__(self) -> str:
        return {Result.WIN: "Win", Result.DRAW: "Draw"}.get(self, "Lose")


_NO_SCORE_TYPES = (ResultType.TOO_HIGH, ResultType.BUSTED, ResultType.TOO_LOW)


def _compare_score(a: int, b: int) -> Result:
    if a < b:
        return Result.LOSE
    if a > b:
        return Result.WIN
    return Result.DRAW


def reverse_result(result: Result) -> Result:
    """Swap win and lose; a draw stays a draw."""
    return Result(2 - result)


def compare(a: PlayerInGame, b: PlayerInGame) -> Result:
    """Compare two hands from ``a``'s point of view."""
    rta = a.result_type()
    rtb = b.result_type()
    if rta < rtb:
        return Result.WIN
    if rta > rtb:
        return Result.LOSE
    if rta in _NO_SCORE_TYPES:
        return Result.DRAW
    res = _compare_score(a.cards.value(), b.cards.value())
    if rta is ResultType.HIGH_FIVE:
        res = reverse_result(res)
    return res


def get_reward(rule: Rule, dealer: PlayerInGame, participant: PlayerInGame) -> int:
    """Amount the dealer wins from ``participant`` (negative when the dealer pays)."""
    cp = compare(dealer, participant)
    if cp is Result.DRAW:
        return 0
    bet = participant.bet_amount
    if cp is Result.WIN:
        rt_dealer = dealer.cards.result_type(True)
        return bet * rule.multiplier(PlayerType.DEALER, rt_dealer)
    rt_participant = participant.cards.result_type(False)
    return -bet * rule.multiplier(PlayerType.PARTICIPANT, rt_participant)


def reward_icon(reward: int) -> str:
    if reward > 0:
        return "🤑"
    if reward < 0:
        return "🔻"
    return "🟰"


class Game:
    """A single game in a room, run by one dealer against the participants."""

    def __init__(
        self,
        dealer: Player,
        room: Any,
        rule: Rule,
        max_bet: int,
        timeout: float,
    ) -> None:
        self.id = secrets.token_hex(10)
        self.room = room
        self.dealer = PlayerInGame(dealer, 0, True)
        self.rule = rule
        self.max_bet = max_bet
        self.timeout = timeout
        self.players: list[PlayerInGame] = []
        self.table: list[Card] = []
        self.status = Status.BETTING
        self.bet_status_version = 0
        self.current_idx = -1
        self._done_count = 0
        self._on_player_play: Callable[[PlayerInGame], None] | None = None
        self._lock = threading.RLock()

    def __repr__(self) -> str:
        return f"Game(id={self.id!r}, status={self.status.name}, players={len(self.players)})"

    @property
    def playing(self) -> bool:
        return self.status is Status.PLAYING

    @property
    def finished(self) -> bool:
        return self.status is Status.FINISHED

    def deal(self) -> None:
        """Shuffle a fresh deck and give two cards to everyone."""
        with self._lock:
            if self.status is not Status.BETTING:
                raise GameAlreadyStarted()
            if not self.players:
                raise EmptyGame()

            table = [Card(i) for i in range(DECK_SIZE)]
            for i in range(DECK_SIZE - 1, 0, -1):
                j = secrets.randbelow(i)
                table[i], table[j] = table[j], table[i]

            n = len(self.players)
            self.dealer.add_card(table[0])
            self.dealer.add_card(table[n + 1])
            for i, pg in enumerate(self.players):
                pg.add_card(table[i + 1])
                pg.add_card(table[i + n + 2])
            self.table = table[2 * n + 2 :]
            self._done_count = n
            self.status = Status.PLAYING

    def player_bet(self, player: Player, amount: int) -> PlayerInGame:
        """Add ``amount`` to ``player``'s stake, seating them if needed."""
        if self.status is not Status.BETTING:
            raise GameAlreadyStarted()
        if amount > self.max_bet:
            raise BetTooHigh(self.max_bet)

        with self._lock:
            pg = self._find_player(player.id)
            if pg is None:
                pg = PlayerInGame(player, 0, False)
                self.players.append(pg)
            if pg.bet_amount + amount > self.max_bet:
                raise BetTooHigh(self.max_bet)
            pg.add_bet(amount)
            self.bet_status_version += 1
        return pg

    def total_bet_amount(self) -> int:
        return sum(p.bet_amount for p in list(self.players))

    def preparing_board_markdown_v2(self) -> str:
        with self._lock:
            players = list(self.players)
        parts = [
            "🎲 *Sòng Xì Lác* 🎲\n\n",
            f"👑 *Nhà cái*: {esc(self.dealer.icon_name())} \\(Rule: {esc(self.rule.name)}\\)\n",
            self._players_header(players),
        ]
        if not players:
            parts.append("\n_\\(chưa có ai\\)_")
        else:
            for p in players:
                parts.append(f"\n  • {esc(p.icon_name())}: {esc(str(p.bet_amount))}🌷")

        last_ids = self.room.last_game_players if self.room is not None else []
        if last_ids:
            in_game = {self.dealer.id} | {p.id for p in players}
            room_players = {rp.id: rp for rp in self.room.players}
            not_joined = [
                room_players[pid]
                for pid in last_ids
                if pid not in in_game and pid in room_players
            ]
            if not_joined:
                parts.append("\n\n> ⏳ *Chưa vào*:")
                for p in not_joined:
                    parts.append(f"\n>  • {esc(p.icon_name())}")
        return "".join(parts)

    def current_board_markdown_v2(self) -> str:
        with self._lock:
            players = list(self.players)
        parts = [
            f"👑 *Nhà cái*: {self.dealer.cards_string()}\n",
            self._players_header(players),
        ]
        if not players:
            parts.append("\n_\\(chưa có ai\\)_")
        else:
            for p in players:
                parts.append(f"\n  • {esc(p.icon_name())}: {p.cards_string()}")
        return "".join(parts)

    def result_board_markdown_v2(self) -> str:
        with self._lock:
            players = list(self.players)
        dealer = self.dealer
        parts = [
            f"👑 *Nhà cái*: {dealer.cards.render(False, True)}\n",
            self._players_header(players),
        ]
        for p in players:
            parts.append(f"\n  • {esc(p.icon_name())}: {p.cards.render(False, False)}")

        parts.append("\n\n💰 *TIỀN THƯỞNG* 💰\n\n")
        d_reward = dealer.reward
        parts.append(
            f"{reward_icon(d_reward)} *Nhà cái* \\({esc(dealer.icon_name())}\\): "
            f"{esc(f'{d_reward:+d}')}🌷 \\(Bal: {esc(str(dealer.balance))}🌷\\)\n"
        )
        parts.append("*Người chơi*:")
        for p in players:
            reward = p.reward
            parts.append(
                f"\n  {reward_icon(reward)} {esc(p.icon_name())}: "
                f"{esc(f'{reward:+d}')}🌷 \\(Bal: {esc(str(p.balance))}🌷\\)"
            )
        return "".join(parts)

    def _players_header(self, players: list[PlayerInGame]) -> str:
        total = sum(p.bet_amount for p in players)
        return f"👥 *Người chơi* \\({len(players)} \\- {esc(str(total))}🌷\\):"

    def find_player(self, player_id: str) -> PlayerInGame | None:
        """The seat of ``player_id``, dealer included, or None."""
        with self._lock:
            return self._find_player(player_id)

    def _find_player(self, player_id: str) -> PlayerInGame | None:
        if self.dealer.id == player_id:
            return self.dealer
        return next((p for p in self.players if p.id == player_id), None)

    def remove_player(self, player_id: str) -> None:
        """Withdraw a participant while bets are still open."""
        with self._lock:
            if self.status is not Status.BETTING:
                raise GameAlreadyStarted()
            for i, p in enumerate(self.players):
                if p.id == player_id:
                    del self.players[i]
                    self.bet_status_version += 1
                    return
            raise PlayerNotFound()

    def remove_card(self) -> Card:
        """Draw the top card of the table."""
        with self._lock:
            return self.table.pop(0)

    def player_stand(self, pg: PlayerInGame) -> None:
        """End ``pg``'s turn if it is theirs."""
        with self._lock:
            if self.current_idx < 0:
                raise PlayerNotFound()
            if self.current_idx >= len(self.players):
                if pg.id != self.dealer.id:
                    raise YouNotPlaying()
                self.dealer.stand()
            else:
                current = self.players[self.current_idx]
                if pg.id != current.id:
                    raise YouNotPlaying()
                current.stand()

    def player_next(self) -> PlayerInGame:
        """Move the turn to the next player still in play, then to the dealer."""
        with self._lock:
            while True:
                self.current_idx += 1
                if self.current_idx < len(self.players):
                    candidate = self.players[self.current_idx]
                    if candidate.is_done():
                        continue
                    candidate.play()
                    playing = candidate
                else:
                    self.status = Status.DEALER_PLAYING
                    self.dealer.play()
                    playing = self.dealer
                break
            callback = self._on_player_play
        if callback is not None:
            callback(playing)
        return playing

    def done(self, pg: PlayerInGame, force: bool = False) -> int:
        """Settle ``pg`` against the dealer and return the dealer's gain."""
        if pg.is_done():
            return pg.reward if pg.is_dealer else -pg.reward

        if not force and pg.status != PlayerInGameStatus.STOOD:
            if pg.status < PlayerInGameStatus.STOOD:
                raise PlayerNotStandYet()
            raise PlayerIsDone()

        reward = get_reward(self.rule, self.dealer, pg)
        with self._lock:
            self.dealer.add_reward(reward)
            self._done_count -= 1
            pg.done(-reward)
            if self._done_count == 0:
                self.status = Status.FINISHED
        return reward

    def on_player_play(self, func: Callable[[PlayerInGame], None] | None) -> None:
        """Call ``func`` each time a player's turn begins."""
        with self._lock:
            self._on_player_play = func

    def all_players(self) -> list[PlayerInGame]:
        """Participants followed by the dealer."""
        with self._lock:
            return [*self.players, self.dealer]

    def current_playing(self) -> PlayerInGame | None:
        with self._lock:
            if self.current_idx < 0:
                return None
            if self.current_idx < len(self.players):
                return self.players[self.current_idx]
            return self.dealer

    def pass_turn(self, pg: PlayerInGame, now: int | None = None) -> None:
        """Skip ``pg``'s turn once they have been idle past the timeout."""
        if now is None:
            now = int(time.time())
        passed = now - pg.last_hit
        need = self.timeout * 5 if pg.is_dealer else self.timeout
        if passed < need:
            raise NotTimeout()
        pg.status = PlayerInGameStatus.STOOD
        if pg.is_dealer:
            self.status = Status.FINISHED
            return
        self.player_next()