from __future__ import annotations

from datetime import UTC, datetime

import pytest

from scorer.logic.levels import Level
from scorer.logic.state import Match, PartnershipState, RoundRecord
from scorer.tests.mocks import InMemoryMatchStore

START_TIME = datetime(2025, 5, 1, 19, 30, tzinfo=UTC)
ROUND_TIME = datetime(2025, 5, 1, 20, 0, tzinfo=UTC)

# ============================================================================
# Test State Builder Helpers
# ============================================================================


def create_partnership(
    player1: str = "张三",
    player2: str = "李四",
    *,
    partnership_id: str | None = None,
    level: Level = Level.TWO,
    is_dealer: bool = False,
    is_winner: bool = False,
) -> PartnershipState:
    kwargs: dict[str, object] = {}
    if partnership_id is not None:
        kwargs["id"] = partnership_id
    return PartnershipState(
        player1=player1,
        player2=player2,
        current_level=level,
        is_dealer=is_dealer,
        is_winner=is_winner,
        **kwargs,
    )


def create_match_state(
    *,
    a_level: Level = Level.TWO,
    b_level: Level = Level.TWO,
    dealer: str = "a",
    rounds: tuple[RoundRecord, ...] = (),
    is_completed: bool = False,
    team_a_names: tuple[str, str] = ("张三", "李四"),
    team_b_names: tuple[str, str] = ("王五", "赵六"),
) -> Match:
    """Build a match directly in a given position, bypassing play."""
    team_a = create_partnership(*team_a_names, partnership_id="team-a", level=a_level, is_dealer=dealer == "a")
    team_b = create_partnership(*team_b_names, partnership_id="team-b", level=b_level, is_dealer=dealer == "b")
    return Match(
        id="match-1",
        team_a=team_a,
        team_b=team_b,
        rounds=rounds,
        start_time=START_TIME,
        is_completed=is_completed,
    )


def partnership_snapshot(match: Match) -> dict[str, object]:
    """Full field values of both sides; PartnershipState equality only compares ids."""
    return {
        "team_a": match.team_a.model_dump(),
        "team_b": match.team_b.model_dump(),
    }


def without_timestamps(match: Match) -> dict[str, object]:
    """Match dump with per-round ids and times removed, for replay comparisons."""
    data = match.model_dump(exclude={"end_time"})
    for record in data["rounds"]:
        record.pop("timestamp")
        record.pop("id")
    return data


@pytest.fixture
def match_store() -> InMemoryMatchStore:
    return InMemoryMatchStore()
