"""
String enum definitions for Guandan scorekeeping concepts.
"""

from enum import StrEnum


class MatchAction(StrEnum):
    """Actions a partnership can request against the current match."""

    DOUBLE_CONTRIBUTE = "double_contribute"  # 双贡: opponents advance three levels
    SINGLE_CONTRIBUTE = "single_contribute"  # 单贡: opponents advance two levels
    SELF_CONTRIBUTE = "self_contribute"  # 自贡: acting side advances one level
    DECLARE_VICTORY = "declare_victory"


class RoundAction(StrEnum):
    """Action recorded on a round, as shown in the match history."""

    DOUBLE_CONTRIBUTE = "double_contribute"
    SINGLE_CONTRIBUTE = "single_contribute"
    SELF_CONTRIBUTE = "self_contribute"
    WIN = "win"


class MatchPhase(StrEnum):
    """Phase of a Guandan match."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
