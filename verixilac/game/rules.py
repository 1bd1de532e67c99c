"""Payout rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Mapping

from verixilac.game.cards import ResultType
from verixilac.stringer import escape_markdown_v2


class PlayerType(IntEnum):
    DEALER = 0
    PARTICIPANT = 1


@dataclass(frozen=True)
class Rule:
    """A named payout table: winning side and hand type map to a multiplier."""

    id: str
    name: str
    description: str
    multipliers: Mapping[PlayerType, Mapping[ResultType, int]] = field(
        default_factory=dict
    )

    def multiplier(self, player_type: PlayerType, result_type: ResultType) -> int:
        """Payout multiplier for a win by ``player_type`` with ``result_type``; 1 if unlisted."""
        return self.multipliers.get(player_type, {}).get(result_type, 1)


DEFAULT_RULE_ID = "2"

_SPECIAL_X2_X3 = {
    ResultType.DOUBLE_BLACK_JACK: 3,
    ResultType.HIGH_FIVE: 2,
    ResultType.BLACK_JACK: 2,
}

DEFAULT_RULES: dict[str, Rule] = {
    "1": Rule(
        id="1",
        name="Default",
        description="Xì bàn: con x2, cái x1",
        multipliers={PlayerType.PARTICIPANT: {ResultType.DOUBLE_BLACK_JACK: 2}},
    ),
    "2": Rule(
        id="2",
        name="Hai Dinh",
        description="Xì lác, ngũ linh: x2. Xì bàn: x3. Con cái như nhau.",
        multipliers={
            PlayerType.DEALER: dict(_SPECIAL_X2_X3),
            PlayerType.PARTICIPANT: dict(_SPECIAL_X2_X3),
        },
    ),
}

SORTED_RULE_IDS: list[str] = sorted(DEFAULT_RULES)


def _rule_list_text() -> str:
    lines = ["Danh sách rules:"]
    for rule_id in SORTED_RULE_IDS:
        rule = DEFAULT_RULES[rule_id]
        lines.append(
            f"\n\n \\- Rule: {escape_markdown_v2(rule.name)}, ID: {escape_markdown_v2(rule_id)}"
        )
        lines.append(f"\n{escape_markdown_v2(rule.description)}")
    return "".join(lines)


RULE_LIST_TEXT = _rule_list_text()


def get_rule(rule_id: str) -> Rule:
    """Return the rule with ``rule_id``, or the default rule when unknown."""
    return DEFAULT_RULES.get(rule_id, DEFAULT_RULES[DEFAULT_RULE_ID])