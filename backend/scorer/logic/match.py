"""
Match state machine for Guandan scorekeeping.

``apply`` is the single transition function: it takes a match, a requested
action and the acting partnership, and returns a new match with the updated
partnership states and exactly one appended round record. Actions that are
not legal in the current state (anything on a completed match, a victory
declaration without qualifying) return the input match unchanged.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import structlog

from scorer.logic.enums import MatchAction, RoundAction
from scorer.logic.exceptions import UnknownPartnershipError
from scorer.logic.settings import MatchRules, validate_rules
from scorer.logic.state import Match, PartnershipState, RoundRecord
from scorer.logic.state_utils import append_round, give_deal_to, reset_partnership, update_partnership

if TYPE_CHECKING:
    from collections.abc import Callable

    from scorer.logic.levels import Level

    ActionHandler = Callable[[Match, str, MatchRules, datetime], Match]

logger = structlog.get_logger()


def _now() -> datetime:
    return datetime.now(tz=UTC)


def create_match(
    team_a: PartnershipState,
    team_b: PartnershipState,
    *,
    now: datetime | None = None,
) -> Match:
    """
    Start a match between two partnerships.

    Both sides start at level 2 with no winner. Exactly one side holds the
    deal: team B only when it alone was flagged as dealer, team A otherwise.
    """
    a_deals = team_a.is_dealer or not team_b.is_dealer
    match = Match(
        team_a=reset_partnership(team_a, is_dealer=a_deals),
        team_b=reset_partnership(team_b, is_dealer=not a_deals),
        start_time=now or _now(),
        first_dealer_id=team_a.id if a_deals else team_b.id,
    )
    logger.info(
        "match created",
        match_id=match.id,
        team_a=match.team_a.display_name,
        team_b=match.team_b.display_name,
        dealer=match.team_a.display_name if a_deals else match.team_b.display_name,
    )
    return match


def complete_match(match: Match, *, now: datetime | None = None) -> Match:
    """Close a match by hand without declaring a winner."""
    if match.is_completed:
        return match
    logger.info("match ended manually", match_id=match.id, rounds=len(match.rounds))
    return match.model_copy(update={"is_completed": True, "end_time": now or _now()})


def _record_round(
    match: Match,
    action: RoundAction,
    acting: PartnershipState,
    level: Level,
    timestamp: datetime,
    *,
    dealer_id: str | None = None,
) -> Match:
    """Append a snapshot of both sides; ``dealer_id`` defaults to the side holding the deal."""
    if dealer_id is None:
        dealer = match.dealer
        dealer_id = dealer.id if dealer is not None else None
    record = RoundRecord(
        team_a=match.team_a,
        team_b=match.team_b,
        action=action,
        acting_team_name=acting.display_name,
        level=level,
        dealer_team_id=dealer_id,
        timestamp=timestamp,
    )
    return append_round(match, record)


def _finish(match: Match, winner_id: str, timestamp: datetime) -> Match:
    match = update_partnership(match, winner_id, is_winner=True)
    logger.info(
        "match completed",
        match_id=match.id,
        winner=match.partnership(winner_id).display_name,
        rounds=len(match.rounds) + 1,
    )
    return match.model_copy(update={"is_completed": True, "end_time": timestamp})


def _contribute(
    match: Match,
    acting_id: str,
    action: RoundAction,
    steps: int,
    timestamp: datetime,
) -> Match:
    acting = match.partnership(acting_id)
    opponent = match.opponent_of(acting_id)

    # an opponent already on an Ace stage converts the contribution into a win;
    # the deal flags stay put but the record names the winning side as dealer
    if opponent.current_level.is_ace_stage:
        match = _finish(match, opponent.id, timestamp)
        return _record_round(match, action, acting, opponent.current_level, timestamp, dealer_id=opponent.id)

    reached = opponent.current_level.advance(steps)
    match = update_partnership(match, opponent.id, current_level=reached)
    if acting.is_dealer:
        match = give_deal_to(match, opponent.id)
    return _record_round(match, action, acting, reached, timestamp)


def _double_contribute(match: Match, acting_id: str, rules: MatchRules, timestamp: datetime) -> Match:
    return _contribute(
        match,
        acting_id,
        RoundAction.DOUBLE_CONTRIBUTE,
        rules.double_contribute_steps,
        timestamp,
    )


def _single_contribute(match: Match, acting_id: str, rules: MatchRules, timestamp: datetime) -> Match:
    return _contribute(
        match,
        acting_id,
        RoundAction.SINGLE_CONTRIBUTE,
        rules.single_contribute_steps,
        timestamp,
    )


def _self_contribute(match: Match, acting_id: str, _rules: MatchRules, timestamp: datetime) -> Match:
    acting = match.partnership(acting_id)
    reached = acting.current_level.next()

    # no level past A3: failing to close out there loses the match
    if reached is None:
        match = _finish(match, match.opponent_of(acting_id).id, timestamp)
        return _record_round(match, RoundAction.SELF_CONTRIBUTE, acting, acting.current_level, timestamp)

    match = update_partnership(match, acting_id, current_level=reached)
    match = give_deal_to(match, acting_id)
    return _record_round(match, RoundAction.SELF_CONTRIBUTE, acting, reached, timestamp)


def _declare_victory(match: Match, acting_id: str, _rules: MatchRules, timestamp: datetime) -> Match:
    acting = match.partnership(acting_id)
    if not (acting.is_dealer and acting.current_level.is_ace_stage):
        logger.debug(
            "victory declaration rejected",
            match_id=match.id,
            team=acting.display_name,
            level=acting.current_level,
            is_dealer=acting.is_dealer,
        )
        return match
    match = _finish(match, acting_id, timestamp)
    return _record_round(match, RoundAction.WIN, acting, acting.current_level, timestamp)


_ACTION_HANDLERS: dict[MatchAction, ActionHandler] = {
    MatchAction.DOUBLE_CONTRIBUTE: _double_contribute,
    MatchAction.SINGLE_CONTRIBUTE: _single_contribute,
    MatchAction.SELF_CONTRIBUTE: _self_contribute,
    MatchAction.DECLARE_VICTORY: _declare_victory,
}


def apply(
    match: Match,
    action: MatchAction,
    acting_id: str,
    *,
    rules: MatchRules | None = None,
    now: datetime | None = None,
) -> Match:
    """
    Apply one action on behalf of ``acting_id`` and return the next match.

    A completed match is returned as-is for any action and any id. On an
    in-progress match the acting id must be one of the two partnerships.

    Raises:
        UnknownPartnershipError: acting_id belongs to neither side
        ValueError: action is not a MatchAction value
        UnsupportedRulesError: rules cannot be applied

    """
    if match.is_completed:
        logger.debug("action ignored on completed match", match_id=match.id, action=action)
        return match
    if not match.has_partnership(acting_id):
        raise UnknownPartnershipError(match_id=match.id, partnership_id=acting_id)

    match_rules = rules or MatchRules()
    validate_rules(match_rules)
    handler = _ACTION_HANDLERS[MatchAction(action)]
    result = handler(match, acting_id, match_rules, now or _now())

    if result is not match:
        record = result.rounds[-1]
        logger.info(
            "round recorded",
            match_id=result.id,
            action=record.action,
            team=record.acting_team_name,
            level=record.level,
            team_a_level=result.team_a.current_level,
            team_b_level=result.team_b.current_level,
        )
    return result


def available_actions(match: Match, acting_id: str) -> frozenset[MatchAction]:
    """Actions a presentation layer should offer to ``acting_id`` right now."""
    if match.is_completed:
        return frozenset()
    acting = match.partnership(acting_id)
    actions = {
        MatchAction.DOUBLE_CONTRIBUTE,
        MatchAction.SINGLE_CONTRIBUTE,
        MatchAction.SELF_CONTRIBUTE,
    }
    if acting.is_dealer and acting.current_level.is_ace_stage:
        actions.add(MatchAction.DECLARE_VICTORY)
    return frozenset(actions)
