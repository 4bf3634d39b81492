"""
Immutable state update utilities using Pydantic model_copy.

These helpers never mutate the input match; they always return a new
Match with the requested change applied.
"""

from scorer.logic.levels import Level
from scorer.logic.state import Match, PartnershipState, RoundRecord

_PARTNERSHIP_FIELDS = set(PartnershipState.model_fields) - {"id"}


def update_partnership(
    match: Match,
    partnership_id: str,
    **updates: object,
) -> Match:
    """
    Return new match with the given partnership's fields updated.

    Args:
        match: Current match
        partnership_id: Id of team_a or team_b
        **updates: Fields to update on the partnership

    Returns:
        New Match with the updated partnership

    Raises:
        UnknownPartnershipError: If the id belongs to neither side
        ValueError: If update fields are invalid

    """
    invalid_fields = set(updates) - _PARTNERSHIP_FIELDS
    if invalid_fields:
        raise ValueError(f"Invalid partnership fields: {invalid_fields}")
    partnership = match.partnership(partnership_id)
    updated = partnership.model_copy(update=updates)
    side = "team_a" if partnership_id == match.team_a.id else "team_b"
    return match.model_copy(update={side: updated})


def give_deal_to(match: Match, partnership_id: str) -> Match:
    """Return new match where only the given partnership holds the deal."""
    opponent = match.opponent_of(partnership_id)
    match = update_partnership(match, partnership_id, is_dealer=True)
    return update_partnership(match, opponent.id, is_dealer=False)


def append_round(match: Match, record: RoundRecord) -> Match:
    return match.model_copy(update={"rounds": (*match.rounds, record)})


def reset_partnership(partnership: PartnershipState, *, is_dealer: bool) -> PartnershipState:
    """Return the partnership as it stands before any round is played."""
    return partnership.model_copy(
        update={"current_level": Level.TWO, "is_dealer": is_dealer, "is_winner": False},
    )
