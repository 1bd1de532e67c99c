"""Statistics records kept across games."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

RESULT_WIN = "win"
RESULT_LOSE = "lose"
RESULT_DRAW = "draw"

ROLE_BANKER = "banker"
ROLE_PLAYER = "player"

MATCH_P1_WIN = "p1_win"
MATCH_P2_WIN = "p2_win"
MATCH_DRAW = "draw"


def _esc(text: str) -> str:
    from verixilac.stringer import escape_markdown_v2

    return escape_markdown_v2(text)


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _scalars_to_dict(obj: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in fields(obj):
        value = getattr(obj, f.name)
        if isinstance(value, (int, str)):
            out[_camel(f.name)] = value
    return out


def _scalars_from_dict(cls: type, data: Mapping[str, Any] | None) -> dict[str, Any]:
    kwargs: dict[str, Any] = {}
    if not data:
        return kwargs
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object for {cls.__name__}, got {type(data).__name__}")
    for f in fields(cls):
        value = data.get(_camel(f.name))
        if value is None:
            continue
        if f.type == "int":
            kwargs[f.name] = int(value)
        elif f.type == "str":
            kwargs[f.name] = str(value)
    return kwargs


@dataclass
class GlobalStats:
    """System-wide counters."""

    total_games: int = 0
    banker_wins: int = 0
    player_wins: int = 0
    draws: int = 0


@dataclass
class PairwiseStat:
    """Head-to-head record of two players; ``player1_id`` sorts first."""

    player1_id: str = ""
    player2_id: str = ""
    total_games: int = 0
    player1_wins: int = 0
    player2_wins: int = 0
    draws: int = 0

    def render(self, p1_name: str, p2_name: str) -> str:
        """MarkdownV2 summary using the given display names."""
        return (
            f"📊 Đối đầu: {_esc(p1_name)} vs {_esc(p2_name)}\n"
            f"\\- Tổng số ván: {self.total_games}\n"
            f"\\- {_esc(p1_name)} thắng: {self.player1_wins}\n"
            f"\\- {_esc(p2_name)} thắng: {self.player2_wins}\n"
            f"\\- Hoà: {self.draws}\n"
        )


@dataclass
class DetailStat:
    """Outcomes for one category such as a score or a hand type."""

    occurrences: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    total_money: int = 0

    def add(self, result: str, amount: int) -> None:
        self.occurrences += 1
        self.total_money += amount
        if result == RESULT_WIN:
            self.wins += 1
        elif result == RESULT_LOSE:
            self.losses += 1
        elif result == RESULT_DRAW:
            self.draws += 1


def _detail_map_to_dict(stats: Mapping[str, DetailStat]) -> dict[str, Any]:
    return {key: _scalars_to_dict(stats[key]) for key in sorted(stats)}


def _detail_map_from_dict(data: Mapping[str, Any] | None) -> dict[str, DetailStat]:
    if not data:
        return {}
    return {key: DetailStat(**_scalars_from_dict(DetailStat, value)) for key, value in data.items()}


def _render_details(title: str, stats: Mapping[str, DetailStat], suffix: str) -> str:
    parts = [f"  \\- {title}:\n"]
    shown = False
    for key in sorted(stats):
        s = stats[key]
        if s.occurrences > 0:
            parts.append(
                f"    \\+ {key}{suffix}: {s.occurrences} \\({_esc(f'{s.total_money:+d}')}🌷\\)\n"
            )
            shown = True
    if not shown:
        parts.append("    \\(Chưa có\\)\n")
    return "".join(parts)


@dataclass
class RoleStats:
    """Statistics of one player in one role (banker or player)."""

    total_games: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    total_money: int = 0
    hand_type_stats: dict[str, DetailStat] = field(default_factory=dict)
    score_stats: dict[str, DetailStat] = field(default_factory=dict)
    card_count_stats: dict[str, DetailStat] = field(default_factory=dict)

    def hand_type_stat(self, key: str) -> DetailStat:
        return self.hand_type_stats.setdefault(key, DetailStat())

    def score_stat(self, score: int) -> DetailStat:
        return self.score_stats.setdefault(str(score), DetailStat())

    def card_count_stat(self, count: int) -> DetailStat:
        return self.card_count_stats.setdefault(str(count), DetailStat())

    def render(self) -> str:
        """MarkdownV2 summary of this role's record."""
        win_rate = self.wins / self.total_games * 100 if self.total_games > 0 else 0.0
        parts = [
            f"  \\- Tổng ván: {self.total_games} \\(Thắng: {self.wins} \\| "
            f"Thua: {self.losses} \\| Hoà: {self.draws}\\)\n",
            f"  \\- Tổng tiền: {_esc(f'{self.total_money:+d}')}🌷\n",
            f"  \\- Tỷ lệ thắng: {_esc(f'{win_rate:.2f}')}%\n",
            _render_details("Chi tiết bài", self.hand_type_stats, ""),
            _render_details("Số lượng lá", self.card_count_stats, " lá"),
        ]
        return "".join(parts)


def _role_to_dict(role: RoleStats) -> dict[str, Any]:
    out = _scalars_to_dict(role)
    out["handTypeStats"] = _detail_map_to_dict(role.hand_type_stats)
    out["scoreStats"] = _detail_map_to_dict(role.score_stats)
    out["cardCountStats"] = _detail_map_to_dict(role.card_count_stats)
    return out


def _role_from_dict(data: Mapping[str, Any] | None) -> RoleStats:
    if not data:
        return RoleStats()
    return RoleStats(
        **_scalars_from_dict(RoleStats, data),
        hand_type_stats=_detail_map_from_dict(data.get("handTypeStats")),
        score_stats=_detail_map_from_dict(data.get("scoreStats")),
        card_count_stats=_detail_map_from_dict(data.get("cardCountStats")),
    )


@dataclass
class PlayerStats:
    """All statistics of one player."""

    player_id: str = ""
    banker: RoleStats = field(default_factory=RoleStats)
    player: RoleStats = field(default_factory=RoleStats)

    def render(self) -> str:
        return (
            f"📊 Thống kê: {_esc(self.player_id)}\n"
            "\n🅰️ Vai trò CÁI \\(Banker\\):\n"
            + self.banker.render()
            + "\n🅱️ Vai trò CON \\(Player\\):\n"
            + self.player.render()
        )


@dataclass
class StatsData:
    """Root of the statistics file."""

    global_stats: GlobalStats = field(default_factory=GlobalStats)
    players: dict[str, PlayerStats] = field(default_factory=dict)
    pairwise_stats: dict[str, PairwiseStat] = field(default_factory=dict)

    def pairwise(self, p1: str, p2: str) -> PairwiseStat:
        """Head-to-head record of two players, created if missing."""
        if p1 > p2:
            p1, p2 = p2, p1
        key = f"{p1}_{p2}"
        stat = self.pairwise_stats.get(key)
        if stat is None:
            stat = PairwiseStat(player1_id=p1, player2_id=p2)
            self.pairwise_stats[key] = stat
        return stat

    def to_dict(self) -> dict[str, Any]:
        return {
            "global": _scalars_to_dict(self.global_stats),
            "players": {
                key: {
                    "playerId": ps.player_id,
                    "banker": _role_to_dict(ps.banker),
                    "player": _role_to_dict(ps.player),
                }
                for key, ps in sorted(self.players.items(), key=lambda kv: kv[0])
            },
            "pairwise": {
                key: _scalars_to_dict(stat)
                for key, stat in sorted(self.pairwise_stats.items(), key=lambda kv: kv[0])
            },
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> StatsData:
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        players: dict[str, PlayerStats] = {}
        for key, value in (data.get("players") or {}).items():
            value = value or {}
            players[key] = PlayerStats(
                player_id=str(value.get("playerId") or ""),
                banker=_role_from_dict(value.get("banker")),
                player=_role_from_dict(value.get("player")),
            )
        pairwise = {
            key: PairwiseStat(**_scalars_from_dict(PairwiseStat, value))
            for key, value in (data.get("pairwise") or {}).items()
        }
        return cls(
            global_stats=GlobalStats(**_scalars_from_dict(GlobalStats, data.get("global"))),
            players=players,
            pairwise_stats=pairwise,
        )


@dataclass
class RoundPlayerResult:
    """Outcome of one participant (or the banker) in a finished round."""

    player_id: str
    role: str = ""
    result: str = ""
    amount: int = 0
    hand_type: str = ""
    score: int = 0
    card_count: int = 0


@dataclass
class MatchResult:
    """Outcome of one banker-versus-player comparison."""

    player1_id: str
    player2_id: str
    result: str = ""


@dataclass
class RoundData:
    """Everything a finished round contributes to the statistics."""

    stats: list[RoundPlayerResult] = field(default_factory=list)
    matches: list[MatchResult] = field(default_factory=list)