"""
Guandan levels: 2 through King, then three Ace stages.

The order is fixed and comparisons go by position, never by the label
text ("10" sorts after "9", "A1" after "K").
"""

from __future__ import annotations

from enum import StrEnum


class Level(StrEnum):
    """A partnership's level; the value is the display label."""

    TWO = "2"
    THREE = "3"
    FOUR = "4"
    FIVE = "5"
    SIX = "6"
    SEVEN = "7"
    EIGHT = "8"
    NINE = "9"
    TEN = "10"
    JACK = "J"
    QUEEN = "Q"
    KING = "K"
    A1 = "A1"
    A2 = "A2"
    A3 = "A3"

    @property
    def rank(self) -> int:
        """Position in the fixed order, 0 for "2" through 14 for A3."""
        return _LEVEL_INDEX[self]

    @property
    def is_ace_stage(self) -> bool:
        return self in ACE_STAGES

    def next(self) -> Level | None:
        """One step forward, or None at A3."""
        if self is Level.A3:
            return None
        return LEVEL_ORDER[self.rank + 1]

    def advance(self, steps: int) -> Level:
        """
        Move forward up to ``steps`` levels.

        Below the Ace stages the result is capped at A1, so a side at King or
        lower can never skip into A2/A3 in a single jump. From A1 or A2 the
        advance continues normally, never past A3.
        """
        if steps <= 0:
            return self
        cap = Level.A3 if self.is_ace_stage else ACE_CAP
        return LEVEL_ORDER[min(self.rank + steps, cap.rank)]

    def _other_rank(self, other: object) -> int | None:
        if isinstance(other, Level):
            return other.rank
        # a plain str would otherwise fall back to comparing labels
        if isinstance(other, str):
            raise TypeError(f"cannot order Level against str {other!r}; convert it with Level(...) first")
        return None

    def __lt__(self, other: object) -> bool:
        rank = self._other_rank(other)
        return NotImplemented if rank is None else self.rank < rank

    def __le__(self, other: object) -> bool:
        rank = self._other_rank(other)
        return NotImplemented if rank is None else self.rank <= rank

    def __gt__(self, other: object) -> bool:
        rank = self._other_rank(other)
        return NotImplemented if rank is None else self.rank > rank

    def __ge__(self, other: object) -> bool:
        rank = self._other_rank(other)
        return NotImplemented if rank is None else self.rank >= rank


LEVEL_ORDER: tuple[Level, ...] = tuple(Level)
_LEVEL_INDEX: dict[Level, int] = {level: i for i, level in enumerate(LEVEL_ORDER)}

ACE_STAGES = frozenset({Level.A1, Level.A2, Level.A3})

# highest level reachable by an advance that starts below the Ace stages
ACE_CAP = Level.A1


def advance(level: Level, steps: int) -> Level:
    """Capped advance; see ``Level.advance``."""
    return level.advance(steps)


def next_level(level: Level) -> Level | None:
    return level.next()


def is_ace_stage(level: Level) -> bool:
    return level.is_ace_stage
