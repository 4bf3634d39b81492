"""
Round history navigation for undo/redo.

The authoritative round sequence is append-only. Viewing an earlier point
builds a derived match from a prefix of the rounds; the only operation that
shortens history for good is ``remove_last_round``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scorer.logic.state_utils import reset_partnership

if TYPE_CHECKING:
    from collections.abc import Sequence

    from scorer.logic.state import Match, RoundRecord

logger = structlog.get_logger()


def _rebuild(match: Match, rounds: Sequence[RoundRecord]) -> Match:
    """
    Return the match as it stood after the last of ``rounds``.

    With no rounds left both sides go back to level 2 without a winner, and
    the side that dealt first holds the deal again (team A when the match
    does not record one).
    """
    if not rounds:
        a_deals = match.first_dealer_id in (None, match.team_a.id)
        return match.model_copy(
            update={
                "team_a": reset_partnership(match.team_a, is_dealer=a_deals),
                "team_b": reset_partnership(match.team_b, is_dealer=not a_deals),
                "rounds": (),
                "is_completed": False,
                "end_time": None,
            },
        )
    last = rounds[-1]
    decided = last.winner is not None
    return match.model_copy(
        update={
            "team_a": last.team_a,
            "team_b": last.team_b,
            "rounds": tuple(rounds),
            "is_completed": decided,
            "end_time": last.timestamp if decided else None,
        },
    )


def state_at_step(match: Match, steps_back: int) -> Match:
    """
    Return the match as it existed ``steps_back`` rounds ago.

    ``steps_back == 0`` (or less) returns the match itself. Larger values are
    clamped to the start of the match. The input match is never modified.
    """
    if steps_back <= 0:
        return match
    keep = max(0, len(match.rounds) - steps_back)
    return _rebuild(match, match.rounds[:keep])


def remove_last_round(match: Match) -> Match:
    """Drop the most recent round and recompute both partnerships from what remains."""
    if not match.rounds:
        return match
    removed = match.rounds[-1]
    logger.info(
        "round removed",
        match_id=match.id,
        action=removed.action,
        team=removed.acting_team_name,
        remaining=len(match.rounds) - 1,
    )
    return _rebuild(match, match.rounds[:-1])
