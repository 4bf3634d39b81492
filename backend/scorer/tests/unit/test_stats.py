from scorer.logic.enums import MatchAction
from scorer.logic.levels import Level
from scorer.logic.match import apply, complete_match
from scorer.logic.stats import PartnershipStats, partnership_stats
from scorer.tests.conftest import create_match_state


def _won_by_team_a(**names):
    match = create_match_state(a_level=Level.A1, dealer="a", **names)
    return apply(match, MatchAction.DECLARE_VICTORY, "team-a")


def _won_by_team_b(**names):
    match = create_match_state(b_level=Level.A3, dealer="b", **names)
    return apply(match, MatchAction.DECLARE_VICTORY, "team-b")


class TestPartnershipStats:
    def test_win_rate_with_no_matches_is_zero(self):
        assert PartnershipStats(team_name="x").win_rate == 0.0

    def test_win_rate(self):
        assert PartnershipStats(team_name="x", wins=1, total_matches=4).win_rate == 0.25


class TestPartnershipStatsTally:
    def test_empty(self):
        assert partnership_stats([]) == []

    def test_ignores_matches_in_progress(self):
        assert partnership_stats([create_match_state()]) == []

    def test_counts_wins_and_totals_by_pairing(self):
        matches = [_won_by_team_a(), _won_by_team_a(), _won_by_team_b()]

        stats = {s.team_name: s for s in partnership_stats(matches)}

        assert stats["张三 & 李四"].wins == 2
        assert stats["张三 & 李四"].total_matches == 3
        assert stats["王五 & 赵六"].wins == 1
        assert stats["王五 & 赵六"].total_matches == 3

    def test_sorted_by_win_rate(self):
        matches = [
            _won_by_team_b(),
            _won_by_team_a(team_a_names=("Ann", "Bo"), team_b_names=("Cy", "Di")),
        ]

        names = [s.team_name for s in partnership_stats(matches)]

        assert names[:2] == ["王五 & 赵六", "Ann & Bo"]
        assert set(names[2:]) == {"张三 & 李四", "Cy & Di"}

    def test_manual_end_counts_as_played_without_win(self):
        stats = partnership_stats([complete_match(create_match_state())])

        assert [(s.wins, s.total_matches) for s in stats] == [(0, 1), (0, 1)]
