"""Match repository: the match list, the current match and its history cursor."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from scorer.logic.history import remove_last_round, state_at_step
from scorer.logic.match import apply, complete_match, create_match
from scorer.logic.settings import MatchRules, validate_rules
from scorer.logic.state import NewMatchSetup
from scorer.logic.stats import partnership_stats

if TYPE_CHECKING:
    from scorer.logic.enums import MatchAction
    from scorer.logic.state import Match, PartnershipState
    from scorer.logic.stats import PartnershipStats
    from scorer.session.match_store import MatchStore

logger = structlog.get_logger()


class MatchRepository:
    """
    Single source of truth for matches during a session.

    Constructed once at startup and handed to whatever needs it. Every
    mutation is written through the match store before it becomes visible;
    if saving fails the in-memory list is left as it was and the error
    propagates.

    The history cursor counts rounds back from the latest state of the
    current match (0 = latest). Selecting a match or changing it resets
    the cursor.
    """

    def __init__(self, store: MatchStore, rules: MatchRules | None = None) -> None:
        self._store = store
        self._rules = rules or MatchRules()
        validate_rules(self._rules)
        self._matches: list[Match] = []
        self._current_id: str | None = None
        self._history_index = 0

    @property
    def rules(self) -> MatchRules:
        return self._rules

    @property
    def matches(self) -> tuple[Match, ...]:
        return tuple(self._matches)

    @property
    def current(self) -> Match | None:
        if self._current_id is None:
            return None
        return self.get(self._current_id)

    @property
    def history_index(self) -> int:
        return self._history_index

    @property
    def viewed(self) -> Match | None:
        """The current match as seen at the history cursor."""
        current = self.current
        if current is None:
            return None
        return state_at_step(current, self._history_index)

    @property
    def can_step_back(self) -> bool:
        current = self.current
        return current is not None and self._history_index < len(current.rounds)

    @property
    def can_step_forward(self) -> bool:
        return self.current is not None and self._history_index > 0

    def get(self, match_id: str) -> Match | None:
        return next((m for m in self._matches if m.id == match_id), None)

    def load(self) -> list[Match]:
        """Replace the in-memory list with what the store holds."""
        self._matches = list(self._store.load_all())
        if self._current_id is not None and self.get(self._current_id) is None:
            self._set_current(None)
        self._history_index = 0
        logger.info("matches loaded", count=len(self._matches))
        return list(self._matches)

    def _commit(self, matches: list[Match]) -> None:
        self._store.save_all(matches)
        self._matches = matches
        self._history_index = 0

    def _replaced(self, match: Match) -> list[Match] | None:
        for i, existing in enumerate(self._matches):
            if existing.id == match.id:
                return [*self._matches[:i], match, *self._matches[i + 1 :]]
        return None

    def _set_current(self, match_id: str | None) -> None:
        """Change the current match; later log lines carry its id."""
        self._current_id = match_id
        if match_id is None:
            structlog.contextvars.unbind_contextvars("match_id")
        else:
            structlog.contextvars.bind_contextvars(match_id=match_id)

    def create_match(self, team_a: PartnershipState, team_b: PartnershipState) -> Match:
        """Start a match, make it current and persist it."""
        match = create_match(team_a, team_b)
        self._commit([*self._matches, match])
        self._set_current(match.id)
        return match

    def create_from_setup(self, setup: NewMatchSetup) -> Match:
        team_a, team_b = setup.to_partnerships()
        return self.create_match(team_a, team_b)

    def select(self, match_id: str) -> Match | None:
        match = self.get(match_id)
        if match is None:
            logger.warning("cannot select unknown match", match_id=match_id)
            return None
        self._set_current(match_id)
        self._history_index = 0
        return match

    def update_match(self, match: Match) -> Match | None:
        """Store a new value of a known match and make it current."""
        matches = self._replaced(match)
        if matches is None:
            logger.warning("update ignored for unknown match", match_id=match.id)
            return None
        self._commit(matches)
        self._set_current(match.id)
        return match

    def perform(self, action: MatchAction, acting_id: str) -> Match | None:
        """
        Apply an action to the latest state of the current match.

        Returns the resulting match (the unchanged match when the action was
        rejected), or None when no match is current.
        """
        current = self.current
        if current is None:
            logger.warning("action ignored without a current match", action=action)
            return None
        updated = apply(current, action, acting_id, rules=self._rules)
        if updated is current:
            return current
        return self.update_match(updated)

    def complete_match(self, match_id: str) -> Match | None:
        match = self.get(match_id)
        if match is None:
            logger.warning("cannot complete unknown match", match_id=match_id)
            return None
        completed = complete_match(match)
        if completed is match:
            return match
        matches = self._replaced(completed)
        if matches is not None:
            self._commit(matches)
        return completed

    def delete_match(self, match_id: str) -> bool:
        if self.get(match_id) is None:
            return False
        self._commit([m for m in self._matches if m.id != match_id])
        if self._current_id == match_id:
            self._set_current(None)
        logger.info("match deleted", match_id=match_id)
        return True

    def step_back(self) -> Match | None:
        """Move the cursor one round earlier; None when already at the start."""
        if not self.can_step_back:
            return None
        self._history_index += 1
        return self.viewed

    def step_forward(self) -> Match | None:
        """Move the cursor one round later; None when already at the latest state."""
        if not self.can_step_forward:
            return None
        self._history_index -= 1
        return self.viewed

    def remove_last_round(self) -> Match | None:
        """
        Permanently drop the latest round of the current match.

        Only allowed while viewing the latest state; otherwise, or when there
        is nothing to remove, returns None without changing anything.
        """
        current = self.current
        if current is None or not current.rounds:
            return None
        if self._history_index != 0:
            logger.debug(
                "round removal rejected while viewing history",
                match_id=current.id,
                history_index=self._history_index,
            )
            return None
        return self.update_match(remove_last_round(current))

    def filter_matches(self, search_text: str) -> list[Match]:
        """Matches where any player name contains ``search_text``."""
        needle = search_text.strip()
        if not needle:
            return list(self._matches)
        return [
            m
            for m in self._matches
            if any(needle in name for name in (m.team_a.player1, m.team_a.player2, m.team_b.player1, m.team_b.player2))
        ]

    def prepare_rematch(self, match_id: str) -> NewMatchSetup | None:
        match = self.get(match_id)
        if match is None:
            return None
        return NewMatchSetup.from_match(match)

    def stats(self) -> list[PartnershipStats]:
        return partnership_stats(self._matches)
