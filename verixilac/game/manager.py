"""Registry of players, rooms and games, and the flow of a round."""

from __future__ import annotations

import json
import logging
import threading
import time
from pathlib import Path
from typing import Any, Callable

from verixilac.game.cards import ResultType
from verixilac.game.errors import (
    GameAlreadyStarted,
    GameError,
    GameIsExisted,
    NotInRoom,
    PlayerAlreadyInRoom,
    PlayerNotFound,
    ServerMaintenance,
    YouAlreadyInAnotherRoom,
    YouAlreadyInGame,
    YouAlreadyInRoom,
    YouCannotHit,
    YouCannotStand,
)
from verixilac.game.game import Game, Result, Status, compare
from verixilac.game.player import Player
from verixilac.game.player_in_game import PlayerInGame
from verixilac.game.room import Room, generate_room_id
from verixilac.stats.records import (
    MATCH_DRAW,
    MATCH_P1_WIN,
    MATCH_P2_WIN,
    RESULT_DRAW,
    RESULT_LOSE,
    RESULT_WIN,
    ROLE_BANKER,
    ROLE_PLAYER,
    MatchResult,
    RoundData,
    RoundPlayerResult,
)
from verixilac.stats.tracker import DEFAULT_STATS_FILE, StatsTracker

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_FILE = "data/data.json"

_HAND_TYPE_NAMES = {
    ResultType.DOUBLE_BLACK_JACK: "xiban",
    ResultType.BLACK_JACK: "xilac",
    ResultType.HIGH_FIVE: "ngulinh",
    ResultType.BUSTED: "chay",
    ResultType.NORMAL: "thuong",
}


def _hand_type(pg: PlayerInGame) -> str:
    return _HAND_TYPE_NAMES.get(pg.result_type(), "thuong")


def _result_of(reward: int) -> str:
    if reward > 0:
        return RESULT_WIN
    if reward < 0:
        return RESULT_LOSE
    return RESULT_DRAW


def _round_result(pg: PlayerInGame, role: str) -> RoundPlayerResult:
    return RoundPlayerResult(
        player_id=pg.id,
        role=role,
        result=_result_of(pg.reward),
        amount=pg.reward,
        hand_type=_hand_type(pg),
        score=pg.cards.value(),
        card_count=len(pg.cards),
    )


def to_stats_round_data(game: Game) -> RoundData:
    """Statistics contribution of a finished game."""
    dealer = game.dealer
    data = RoundData()
    data.stats.append(_round_result(dealer, ROLE_BANKER))
    for p in list(game.players):
        data.stats.append(_round_result(p, ROLE_PLAYER))
        cmp = compare(dealer, p)
        if cmp is Result.WIN:
            outcome = MATCH_P1_WIN
        elif cmp is Result.LOSE:
            outcome = MATCH_P2_WIN
        else:
            outcome = MATCH_DRAW
        data.matches.append(MatchResult(dealer.id, p.id, outcome))
    return data


class GameManager:
    """Keeps every player, room and game, and drives rounds from start to payout."""

    def __init__(
        self,
        max_bet: int,
        min_deal: int,
        timeout: float,
        *,
        storage_file: str | Path = DEFAULT_STORAGE_FILE,
        stats_file: str | Path = DEFAULT_STATS_FILE,
    ) -> None:
        self.max_bet = max_bet
        self.min_deal = min_deal
        self.timeout = timeout
        self.can_create_game = True
        self.storage_file = Path(storage_file)
        self.stats = StatsTracker(stats_file)
        self._players: dict[str, Player] = {}
        self._rooms: dict[str, Room] = {}
        self._games: dict[str, Game] = {}
        self._callbacks: dict[str, Callable[..., Any] | None] = {}
        self._lock = threading.RLock()

    def _emit(self, event: str, *args: Any) -> None:
        with self._lock:
            func = self._callbacks.get(event)
        if func is not None:
            func(*args)

    # players and rooms

    def player_register(self, player_id: str, name: str) -> Player:
        """The player with ``player_id``, registered on first sight."""
        with self._lock:
            player = self._players.get(player_id)
            if player is None:
                player = Player(player_id, name, 0)
                self._players[player_id] = player
                logger.debug("player %s start using bot", player_id)
            return player

    def new_room(self, player: Player) -> Room:
        """Create a room with ``player`` as its first member."""
        if player.current_room is not None:
            raise YouAlreadyInAnotherRoom()
        with self._lock:
            room_id = generate_room_id()
            while room_id in self._rooms:
                room_id = generate_room_id()
            room = Room(room_id, [player])
            self._rooms[room.id] = room
        player.current_room = room
        logger.debug("room %s created", room.id)
        self._emit("new_room", room, player)
        return room

    def find_player(self, player_id: str) -> Player | None:
        with self._lock:
            return self._players.get(player_id)

    def find_room(self, room_id: str) -> Room | None:
        with self._lock:
            return self._rooms.get(room_id)

    def players(self) -> list[Player]:
        with self._lock:
            return list(self._players.values())

    def rooms(self) -> list[Room]:
        with self._lock:
            return list(self._rooms.values())

    def join_room(self, player: Player, room: Room) -> None:
        current = player.current_room
        if current is not None:
            if current.id == room.id:
                raise YouAlreadyInRoom()
            raise YouAlreadyInAnotherRoom()
        room.join_player(player)
        player.current_room = room
        self._emit("player_join_room", room, player)
        logger.debug("player %s joined room %s", player.id, room.id)

    def leave_room(self, player: Player) -> Room:
        """Take ``player`` out of their room; an emptied room is dropped."""
        if player.current_game is not None:
            raise YouAlreadyInGame()
        room = player.current_room
        if room is None:
            raise NotInRoom()
        room.remove_player(player)
        if not room.players:
            with self._lock:
                self._rooms.pop(room.id, None)
        player.current_room = None
        logger.debug("player %s left room %s", player.id, room.id)
        return room

    # event hooks

    def on_new_room(self, func: Callable[[Room, Player], Any] | None) -> None:
        with self._lock:
            self._callbacks["new_room"] = func

    def on_new_game(self, func: Callable[[Room, Game], Any] | None) -> None:
        with self._lock:
            self._callbacks["new_game"] = func

    def on_player_join_room(self, func: Callable[[Room, Player], Any] | None) -> None:
        with self._lock:
            self._callbacks["player_join_room"] = func

    def on_player_bet(self, func: Callable[[Game, PlayerInGame | None], Any] | None) -> None:
        with self._lock:
            self._callbacks["player_bet"] = func

    def on_player_stand(self, func: Callable[[Game, PlayerInGame], Any] | None) -> None:
        with self._lock:
            self._callbacks["player_stand"] = func

    def on_player_hit(self, func: Callable[[Game, PlayerInGame], Any] | None) -> None:
        with self._lock:
            self._callbacks["player_hit"] = func

    def on_game_finish(self, func: Callable[[Game], Any] | None) -> None:
        with self._lock:
            self._callbacks["game_finish"] = func

    def on_player_play(self, func: Callable[[Game, PlayerInGame], Any] | None) -> None:
        with self._lock:
            self._callbacks["player_play"] = func

    # games

    def new_game(self, room: Room, dealer: Player) -> Game:
        """Open a new game in ``room`` with ``dealer`` as the dealer."""
        if room.current_game is not None:
            raise GameIsExisted()
        if not self.can_create_game:
            raise ServerMaintenance()
        game = Game(dealer, room, dealer.rule(), self.max_bet, self.timeout)
        dealer.current_game = game
        room.current_game = game
        with self._lock:
            self._games[game.id] = game
        self._emit("new_game", room, game)
        return game

    def find_game(self, game_id: str) -> Game | None:
        with self._lock:
            return self._games.get(game_id)

    def player_bet(self, game: Game, player: Player, amount: int) -> None:
        """Place a bet; an amount of zero withdraws the player."""
        pg: PlayerInGame | None = None
        if amount == 0:
            game.remove_player(player.id)
        else:
            pg = game.player_bet(player, amount)
            player.current_game = game
        self._emit("player_bet", game, pg)

    def player_stand(self, game: Game, pg: PlayerInGame) -> None:
        if pg.is_done():
            return
        if not pg.can_stand():
            raise YouCannotStand()
        try:
            game.player_stand(pg)
        except GameError:
            logger.error("player %s stand failed with %s", pg.id, pg.cards.render(False))
            raise
        self._emit("player_stand", game, pg)
        game.player_next()

    def player_hit(self, game: Game, pg: PlayerInGame) -> None:
        if not pg.can_hit():
            raise YouCannotHit()
        pg.add_card(game.remove_card())
        pg.last_hit = int(time.time())
        self._emit("player_hit", game, pg)

    def check_if_finish(self, game: Game) -> bool:
        """Settle ``game`` if every participant is done; True when it was settled."""
        if not game.finished:
            return False
        try:
            self.finish_game(game, False)
        except GameError:
            return False
        return True

    def deal(self, game: Game) -> None:
        game.on_player_play(lambda pg: self._emit("player_play", game, pg))
        game.deal()

    def start(self, game: Game) -> None:
        """Settle early blackjacks, then hand the turn to the first player."""
        early = (ResultType.DOUBLE_BLACK_JACK, ResultType.BLACK_JACK)
        if game.dealer.result_type() in early:
            self.finish_game(game, True)
            return

        players = list(game.players)
        count = 0
        for p in players:
            if p.result_type() in early:
                try:
                    game.done(p, True)
                except GameError:
                    pass
                count += 1
        if count == len(players):
            self.finish_game(game, True)
            return
        game.player_next()

    def finish_game(self, game: Game, force: bool) -> None:
        """Settle every participant, pay out and close the game."""
        players = list(game.players)
        for pg in players:
            game.done(pg, force)

        dealer = game.dealer
        dealer.player.current_game = None
        for p in players:
            p.player.add_balance(p.reward)
            p.player.current_game = None
        dealer.player.add_balance(dealer.reward)
        with self._lock:
            self._games.pop(game.id, None)
        room = game.room
        room.current_game = None
        room.last_game_players = [p.id for p in game.all_players()]

        self._emit("game_finish", game)
        self.stats.update(to_stats_round_data(game))

    def cancel_game(self, game: Game) -> None:
        if game.status is not Status.BETTING:
            raise GameAlreadyStarted()
        game.dealer.player.current_game = None
        for pg in list(game.players):
            pg.player.current_game = None
        game.room.current_game = None
        with self._lock:
            self._games.pop(game.id, None)

    def set_max_bet(self, max_bet: int) -> int:
        self.max_bet = max_bet
        return max_bet

    def player_pass(self, game: Game) -> PlayerInGame:
        """Skip the idle player whose turn it is."""
        pg = game.current_playing()
        if pg is None:
            raise PlayerNotFound()
        game.pass_turn(pg)
        self.check_if_finish(game)
        return pg

    def pause(self) -> None:
        self.can_create_game = False

    def resume(self) -> None:
        self.can_create_game = True

    def deposit(self, player_id: str, amount: int) -> Player:
        player = self.find_player(player_id)
        if player is None:
            raise PlayerNotFound()
        player.add_balance(amount)
        return player

    # persistence

    def load_from_storage(self) -> None:
        """Restore rooms and players from the storage file, then the statistics."""
        data = json.loads(self.storage_file.read_bytes())
        with self._lock:
            for st_room in (data.get("rooms") or {}).values():
                room = Room(st_room.get("id") or "")
                self._rooms[room.id] = room
            for st in (data.get("players") or {}).values():
                player = Player(
                    str(st.get("id") or ""),
                    str(st.get("name") or ""),
                    int(st.get("balance") or 0),
                )
                player.is_admin = bool(st.get("isAdmin"))
                player.rule_id = str(st.get("ruleId") or "")
                player.icon = str(st.get("icon") or "")
                self._players[player.id] = player
                room_id = st.get("roomId") or ""
                if not room_id:
                    continue
                room = self._rooms.get(room_id)
                if room is None:
                    continue
                try:
                    room.join_player(player)
                except PlayerAlreadyInRoom:
                    continue
                player.current_room = room
        self.stats.load()

    def save_to_storage(self) -> None:
        """Write rooms and players to the storage file."""
        with self._lock:
            rooms = {room.id: {"id": room.id} for room in self._rooms.values()}
            players: dict[str, dict[str, Any]] = {}
            for p in self._players.values():
                entry: dict[str, Any] = {"id": p.id, "name": p.name}
                if p.icon:
                    entry["icon"] = p.icon
                entry["balance"] = p.balance
                if p.current_room is not None:
                    entry["roomId"] = p.current_room.id
                entry["isAdmin"] = p.is_admin
                rule_id = p.rule().id
                if rule_id:
                    entry["ruleId"] = rule_id
                players[p.id] = entry
        document = {
            "rooms": dict(sorted(rooms.items())),
            "players": dict(sorted(players.items())),
        }
        text = json.dumps(document, indent=2, ensure_ascii=False)
        self.storage_file.write_text(text, encoding="utf-8")