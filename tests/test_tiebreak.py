"""
Tests for the tie-break cascade, in particular the head-to-head early exit.
"""

from __future__ import annotations

import unittest

from tourneykit.groups.point_rules import award_points, resolve_point_rule
from tourneykit.groups.standings import StandingsEntry, calculate_standings
from tourneykit.groups.tiebreak import compare_entries, head_to_head_winner
from tourneykit.models import Group, Match, PointRule, TournamentSettings


def played(mid: str, p1: str, p2: str, s1: int, s2: int) -> Match:
    return Match(id=mid, player1_id=p1, player2_id=p2, score1=s1, score2=s2, status="completed")


WIN_ANY = [PointRule(min_diff=1, max_diff=99, winner_points=3, loser_points=0)]


def h2h_group() -> Group:
    """
    a and b finish on 4 points; b has the far better goal difference but
    lost the direct encounter.  c and d finish on 1 point and never met.
    """
    return Group(
        id="g",
        name="G",
        player_ids=["a", "b", "c", "d"],
        matches=[
            played("m1", "a", "b", 1, 0),
            played("m2", "b", "c", 9, 0),
            played("m3", "a", "c", 0, 0),
            played("m4", "b", "d", 0, 0),
        ],
    )


def order(group: Group, tie_breakers) -> list[str]:
    settings = TournamentSettings(point_rules=WIN_ANY, points_per_draw=1, tie_breakers=tie_breakers)
    return [e.player_id for e in calculate_standings(group, [], settings)]


class TestHeadToHead(unittest.TestCase):
    def test_head_to_head_overrides_goal_difference(self):
        self.assertEqual(order(h2h_group(), ["head_to_head", "goal_difference"])[:2], ["a", "b"])

    def test_goal_difference_first_keeps_head_to_head_from_deciding(self):
        self.assertEqual(order(h2h_group(), ["goal_difference", "head_to_head"])[:2], ["b", "a"])

    def test_no_encounter_falls_through_to_next_tie_breaker(self):
        # c (GD -9) and d (GD 0) never played each other
        self.assertEqual(order(h2h_group(), ["head_to_head", "goal_difference"])[2:], ["d", "c"])

    def test_drawn_encounter_falls_through(self):
        group = Group(
            id="g", name="G", player_ids=["a", "b", "c"],
            matches=[played("m1", "a", "b", 2, 2), played("m2", "b", "c", 3, 0), played("m3", "a", "c", 1, 0)],
        )
        # a and b: 4 points each, drew each other; b has the better goal difference
        self.assertEqual(order(group, ["head_to_head", "goal_difference"])[:2], ["b", "a"])

    def test_head_to_head_winner_either_orientation(self):
        matches = [played("m1", "x", "y", 0, 2)]
        self.assertEqual(head_to_head_winner(matches, "x", "y"), "y")
        self.assertEqual(head_to_head_winner(matches, "y", "x"), "y")

    def test_only_first_completed_encounter_counts(self):
        matches = [played("m1", "x", "y", 1, 1), played("m2", "x", "y", 3, 0)]
        self.assertIsNone(head_to_head_winner(matches, "x", "y"))

    def test_unfinished_encounter_ignored(self):
        matches = [
            Match(id="m1", player1_id="x", player2_id="y", score1=5, score2=0, status="scheduled"),
            played("m2", "x", "y", 0, 1),
        ]
        self.assertEqual(head_to_head_winner(matches, "x", "y"), "y")

    def test_completed_encounter_without_scores_has_no_winner(self):
        matches = [Match(id="m1", player1_id="x", player2_id="y", status="completed")]
        self.assertIsNone(head_to_head_winner(matches, "x", "y"))


class TestCompareEntries:
    def test_points_dominate_every_tie_breaker(self):
        a = StandingsEntry(player_id="a", points=3, wins=0)
        b = StandingsEntry(player_id="b", points=2, wins=5)
        assert compare_entries(a, b, ["wins"], []) < 0
        assert compare_entries(b, a, ["wins"], []) > 0

    def test_cascade_uses_first_non_zero_criterion(self):
        a = StandingsEntry(player_id="a", points=3, wins=1, goal_difference=2, goals_for=9)
        b = StandingsEntry(player_id="b", points=3, wins=1, goal_difference=2, goals_for=4)
        assert compare_entries(a, b, ["wins", "goal_difference", "goals_for"], []) < 0

    def test_all_equal_returns_zero(self):
        a = StandingsEntry(player_id="a", points=3, wins=1)
        b = StandingsEntry(player_id="b", points=3, wins=1)
        assert compare_entries(a, b, ["wins", "goal_difference", "goals_for", "head_to_head"], []) == 0

    def test_empty_tie_breakers_returns_zero(self):
        a = StandingsEntry(player_id="a", points=3, wins=3)
        b = StandingsEntry(player_id="b", points=3, wins=0)
        assert compare_entries(a, b, [], []) == 0

    def test_unknown_tie_breaker_is_ignored(self):
        a = StandingsEntry(player_id="a", points=3, wins=0)
        b = StandingsEntry(player_id="b", points=3, wins=2)
        assert compare_entries(a, b, ["coin_toss", "wins"], []) > 0


class TestPointRuleResolver:
    def test_resolves_first_covering_rule(self):
        rules = [
            PointRule(id="r1", min_diff=1, max_diff=2, winner_points=2, loser_points=1),
            PointRule(id="r2", min_diff=2, max_diff=99, winner_points=3, loser_points=0),
        ]
        assert resolve_point_rule(rules, 2).id == "r1"
        assert resolve_point_rule(rules, 3).id == "r2"
        assert resolve_point_rule(rules, 0) is None

    def test_award_points(self):
        assert award_points(PointRule(min_diff=1, max_diff=1, winner_points=4, loser_points=1)) == (4, 1)
        assert award_points(None) == (0, 0)
