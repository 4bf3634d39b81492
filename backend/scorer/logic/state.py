"""
Match state models for Guandan scorekeeping.

All models are frozen; transitions build new values with ``model_copy``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Self
from uuid import uuid4

from pydantic import BaseModel, Field, StringConstraints, model_validator

from scorer.logic.enums import MatchPhase, RoundAction
from scorer.logic.exceptions import UnknownPartnershipError
from scorer.logic.levels import Level

PlayerName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def new_id() -> str:
    return uuid4().hex


class PartnershipState(BaseModel, frozen=True):
    """
    One partnership's level and deal status.

    Identity is the ``id``: two snapshots of the same partnership at
    different levels compare equal, and two partnerships that happen to
    share a level do not.
    """

    id: str = Field(default_factory=new_id)
    player1: PlayerName
    player2: PlayerName
    current_level: Level = Level.TWO
    is_dealer: bool = False
    is_winner: bool = False

    @property
    def display_name(self) -> str:
        return f"{self.player1} & {self.player2}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PartnershipState):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


class RoundRecord(BaseModel, frozen=True):
    """Snapshot of both partnerships after one action."""

    id: str = Field(default_factory=new_id)
    team_a: PartnershipState
    team_b: PartnershipState
    action: RoundAction
    acting_team_name: str
    level: Level  # level reached by the side the action moved
    dealer_team_id: str | None = None  # partnership holding the deal afterwards
    timestamp: datetime
    notes: str = ""

    @property
    def winner(self) -> PartnershipState | None:
        if self.team_a.is_winner:
            return self.team_a
        if self.team_b.is_winner:
            return self.team_b
        return None


class Match(BaseModel, frozen=True):
    """A match between two partnerships and its append-only round history."""

    id: str = Field(default_factory=new_id)
    team_a: PartnershipState
    team_b: PartnershipState
    rounds: tuple[RoundRecord, ...] = ()
    start_time: datetime
    end_time: datetime | None = None
    is_completed: bool = False
    first_dealer_id: str | None = None  # side dealing before the first round

    @model_validator(mode="after")
    def _validate_partnerships(self) -> Self:
        if self.team_a.id == self.team_b.id:
            raise ValueError("team_a and team_b must be different partnerships")
        if self.first_dealer_id is not None and not self.has_partnership(self.first_dealer_id):
            raise ValueError(f"first_dealer_id {self.first_dealer_id!r} is not one of the partnerships")
        return self

    @property
    def phase(self) -> MatchPhase:
        return MatchPhase.COMPLETED if self.is_completed else MatchPhase.IN_PROGRESS

    @property
    def current_round(self) -> RoundRecord | None:
        return self.rounds[-1] if self.rounds else None

    @property
    def dealer(self) -> PartnershipState | None:
        if self.team_a.is_dealer:
            return self.team_a
        if self.team_b.is_dealer:
            return self.team_b
        return None

    @property
    def winner(self) -> PartnershipState | None:
        if self.team_a.is_winner:
            return self.team_a
        if self.team_b.is_winner:
            return self.team_b
        return None

    @property
    def display_result(self) -> str:
        """Score line such as ``"A2 (won) : K"``, or ``"5 : 3"`` while undecided."""
        winner = self.winner
        if winner is None:
            return f"{self.team_a.current_level} : {self.team_b.current_level}"
        loser = self.team_b if winner.id == self.team_a.id else self.team_a
        return f"{winner.current_level} (won) : {loser.current_level}"

    def has_partnership(self, partnership_id: str) -> bool:
        return partnership_id in (self.team_a.id, self.team_b.id)

    def partnership(self, partnership_id: str) -> PartnershipState:
        if partnership_id == self.team_a.id:
            return self.team_a
        if partnership_id == self.team_b.id:
            return self.team_b
        raise UnknownPartnershipError(match_id=self.id, partnership_id=partnership_id)

    def opponent_of(self, partnership_id: str) -> PartnershipState:
        if partnership_id == self.team_a.id:
            return self.team_b
        if partnership_id == self.team_b.id:
            return self.team_a
        raise UnknownPartnershipError(match_id=self.id, partnership_id=partnership_id)


class NewMatchSetup(BaseModel, frozen=True):
    """Player names for starting a match, e.g. a rematch of an earlier one."""

    team_a_player1: PlayerName
    team_a_player2: PlayerName
    team_b_player1: PlayerName
    team_b_player2: PlayerName

    @classmethod
    def from_match(cls, match: Match) -> NewMatchSetup:
        return cls(
            team_a_player1=match.team_a.player1,
            team_a_player2=match.team_a.player2,
            team_b_player1=match.team_b.player1,
            team_b_player2=match.team_b.player2,
        )

    def to_partnerships(self) -> tuple[PartnershipState, PartnershipState]:
        """Fresh partnerships with team A holding the first deal."""
        team_a = PartnershipState(player1=self.team_a_player1, player2=self.team_a_player2, is_dealer=True)
        team_b = PartnershipState(player1=self.team_b_player1, player2=self.team_b_player2)
        return team_a, team_b
