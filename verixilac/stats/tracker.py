"""Statistics kept in a JSON file and updated after each round."""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import replace
from pathlib import Path

from verixilac.stats.records import (
    MATCH_P1_WIN,
    MATCH_P2_WIN,
    RESULT_DRAW,
    RESULT_LOSE,
    RESULT_WIN,
    ROLE_BANKER,
    GlobalStats,
    PairwiseStat,
    PlayerStats,
    RoundData,
    StatsData,
)

logger = logging.getLogger(__name__)

DEFAULT_STATS_FILE = "data/stats.json"


class StatsTracker:
    """Accumulates round results and persists them to ``file_path``."""

    def __init__(self, file_path: str | Path = DEFAULT_STATS_FILE) -> None:
        self.file_path = Path(file_path)
        self.data = StatsData()
        self._lock = threading.RLock()

    def load(self) -> None:
        """Read the file; a missing file is created empty."""
        with self._lock:
            try:
                raw = self.file_path.read_bytes()
            except FileNotFoundError:
                self.data = StatsData()
                self._save()
                return
            if not raw:
                self.data = StatsData()
                return
            self.data = StatsData.from_dict(json.loads(raw))

    def save(self) -> None:
        with self._lock:
            self._save()

    def _save(self) -> None:
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        text = json.dumps(self.data.to_dict(), indent=2, ensure_ascii=False)
        self.file_path.write_text(text, encoding="utf-8")

    def update(self, round_data: RoundData) -> None:
        """Add one round's results and save."""
        with self._lock:
            data = self.data
            data.global_stats.total_games += 1

            for res in round_data.stats:
                player_stats = data.players.get(res.player_id)
                if player_stats is None:
                    player_stats = PlayerStats(res.player_id)
                    data.players[res.player_id] = player_stats
                is_banker = res.role == ROLE_BANKER
                role = player_stats.banker if is_banker else player_stats.player

                role.total_games += 1
                if res.result == RESULT_WIN:
                    role.wins += 1
                    if is_banker:
                        data.global_stats.banker_wins += 1
                    else:
                        data.global_stats.player_wins += 1
                elif res.result == RESULT_LOSE:
                    role.losses += 1
                elif res.result == RESULT_DRAW:
                    role.draws += 1
                    data.global_stats.draws += 1

                role.total_money += res.amount
                role.hand_type_stat(res.hand_type).add(res.result, res.amount)
                role.score_stat(res.score).add(res.result, res.amount)
                role.card_count_stat(res.card_count).add(res.result, res.amount)

            for match in round_data.matches:
                stat = data.pairwise(match.player1_id, match.player2_id)
                stat.total_games += 1
                if match.result == MATCH_P1_WIN:
                    stat.player1_wins += 1
                elif match.result == MATCH_P2_WIN:
                    stat.player2_wins += 1
                else:
                    stat.draws += 1

            try:
                self._save()
            except OSError:
                logger.exception("failed to save stats")

    def player_stats(self, player_id: str) -> PlayerStats:
        """Stats of ``player_id``; an empty record when unknown."""
        with self._lock:
            return self.data.players.get(player_id) or PlayerStats(player_id)

    def global_stats(self) -> GlobalStats:
        with self._lock:
            return replace(self.data.global_stats)

    def pairwise_stats(self, p1: str, p2: str) -> PairwiseStat:
        """Head-to-head record; its ``player1_id`` is the smaller id."""
        with self._lock:
            return self.data.pairwise(p1, p2)