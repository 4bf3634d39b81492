"""Win-rate statistics over completed matches."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel

if TYPE_CHECKING:
    from collections.abc import Iterable

    from scorer.logic.state import Match, PartnershipState


class PartnershipStats(BaseModel):
    """Record of one pairing of players across matches."""

    team_name: str
    wins: int = 0
    total_matches: int = 0

    @property
    def win_rate(self) -> float:
        return self.wins / self.total_matches if self.total_matches > 0 else 0.0


def partnership_stats(matches: Iterable[Match]) -> list[PartnershipStats]:
    """
    Tally wins per partnership over completed matches.

    Partnerships are grouped by display name, so the same two players
    recorded in separate matches count as one pairing. Matches ended by
    hand without a winner still count towards the total. Sorted by win
    rate, best first; ties keep first-seen order.
    """
    tally: dict[str, PartnershipStats] = {}

    def _count(team: PartnershipState) -> None:
        stat = tally.setdefault(team.display_name, PartnershipStats(team_name=team.display_name))
        stat.total_matches += 1
        if team.is_winner:
            stat.wins += 1

    for match in matches:
        if not match.is_completed:
            continue
        _count(match.team_a)
        _count(match.team_b)

    return sorted(tally.values(), key=lambda s: s.win_rate, reverse=True)
