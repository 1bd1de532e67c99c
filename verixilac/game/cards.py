"""Playing cards and hand evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

CARD_VALUE_NAMES = "A23456789_JQK"
CARD_KIND_NAMES = "♥♦♣♠"


class ResultType(IntEnum):
    """Hand categories, strongest first."""

    DOUBLE_BLACK_JACK = 0
    BLACK_JACK = 1
    HIGH_FIVE = 2
    NORMAL = 3
    BUSTED = 4
    TOO_HIGH = 5
    TOO_LOW = 6


@dataclass(frozen=True)
class Card:
    """One card of a 52-card deck, identified by 0..51."""

    id: int

    def value(self) -> int:
        """Point value: ace is 1, face cards count as 10."""
        return min(self.id % 13, 9) + 1

    def __str__(self) -> str:
        v = self.id % 13
        face = "10" if v == 9 else CARD_VALUE_NAMES[v]
        return face + CARD_KIND_NAMES[self.id // 13]


class Cards(list):
    """A hand of cards."""

    def is_black_jack(self) -> bool:
        if len(self) != 2:
            return False
        values = {self[0].value(), self[1].value()}
        return values == {1, 10}

    def is_double_black_jack(self) -> bool:
        return len(self) == 2 and self[0].value() == 1 and self[1].value() == 1

    def is_high_five(self) -> bool:
        return len(self) == 5 and self.value() <= 21

    def value(self) -> int:
        """Best score of the hand, counting aces as 1, 10 or 11."""
        aces = sum(1 for c in self if c.value() == 1)
        total = sum(c.value() for c in self if c.value() != 1)
        if aces == 0:
            return total
        if total >= 12 or len(self) >= 4:
            return total + aces
        if total + 11 + (aces - 1) <= 21:
            return total + 11 + (aces - 1)
        if total + 10 + (aces - 1) <= 21:
            return total + 10 + (aces - 1)
        return total + aces

    def render(self, censor: bool, is_dealer: bool = False) -> str:
        """MarkdownV2 text for the hand, hidden when ``censor`` is set."""
        if censor:
            n = len(self)
            return "\\*\\*, " * max(n - 1, 0) + " \\*\\* \\(" + str(n) + " lá\\)"
        shown = ", ".join(str(c) for c in self)
        return shown + " \\(" + self.type_string(is_dealer) + "\\)"

    def result_type(self, is_dealer: bool = False) -> ResultType:
        if self.is_double_black_jack():
            return ResultType.DOUBLE_BLACK_JACK
        if self.is_black_jack():
            return ResultType.BLACK_JACK
        if self.is_high_five():
            return ResultType.HIGH_FIVE
        val = self.value()
        minimum = 15 if is_dealer else 16
        if val < minimum:
            return ResultType.TOO_LOW
        if val >= 28:
            return ResultType.TOO_HIGH
        if val > 21:
            return ResultType.BUSTED
        return ResultType.NORMAL

    def type_string(self, is_dealer: bool = False) -> str:
        kind = self.result_type(is_dealer)
        val = self.value()
        if kind is ResultType.HIGH_FIVE:
            return f"🖐️ *Ngũ Linh*: {val} điểm"
        if kind is ResultType.BUSTED:
            return f"💥 *Quắc*: {val} điểm"
        if kind is ResultType.BLACK_JACK:
            return "✨ *Xì Lác* ✨"
        if kind is ResultType.DOUBLE_BLACK_JACK:
            return "👑 *Xì Bàn* 👑"
        if kind is ResultType.TOO_LOW:
            return f"👶 *Non*: {val} điểm"
        if kind is ResultType.TOO_HIGH:
            return f"💸 *Đền*: {val} điểm"
        return f"{val} điểm"


def new_cards(*args: int) -> Cards:
    """Build a hand from card ids."""
    return Cards(Card(card_id) for card_id in args)