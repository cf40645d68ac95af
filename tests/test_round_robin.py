from __future__ import annotations

import unittest

from tourneykit.groups.round_robin import generate_round_robin, remove_players
from tourneykit.ids import CounterIds
from tourneykit.models import Group, Match


class RoundRobinTests(unittest.TestCase):
    def test_one_match_per_pair_in_insertion_order(self):
        group = Group(id="g", name="G", player_ids=["a", "b", "c", "d"])
        matches = generate_round_robin(group, CounterIds())
        pairs = [(m.player1_id, m.player2_id) for m in matches]
        self.assertEqual(
            pairs,
            [("a", "b"), ("a", "c"), ("a", "d"), ("b", "c"), ("b", "d"), ("c", "d")],
        )
        self.assertEqual([m.id for m in matches], [f"m-{i}" for i in range(6)])
        self.assertTrue(all(m.status == "pending" and m.score1 is None for m in matches))

    def test_existing_pairs_not_duplicated(self):
        group = Group(
            id="g", name="G", player_ids=["a", "b", "c"],
            matches=[Match(id="old", player1_id="b", player2_id="a")],
        )
        pairs = {(m.player1_id, m.player2_id) for m in generate_round_robin(group)}
        self.assertEqual(pairs, {("a", "c"), ("b", "c")})

    def test_duplicate_player_ids_collapse(self):
        group = Group(id="g", name="G", player_ids=["a", "b", "a"])
        self.assertEqual(len(generate_round_robin(group)), 1)

    def test_fewer_than_two_players(self):
        self.assertEqual(generate_round_robin(Group(id="g", name="G", player_ids=["a"])), [])

    def test_group_not_mutated(self):
        group = Group(id="g", name="G", player_ids=["a", "b"])
        generate_round_robin(group)
        self.assertEqual(group.matches, [])


class RemovePlayersTests(unittest.TestCase):
    def test_removes_players_and_their_matches(self):
        group = Group(
            id="g", name="G", player_ids=["a", "b", "c"],
            matches=[
                Match(id="m1", player1_id="a", player2_id="b"),
                Match(id="m2", player1_id="a", player2_id="c"),
                Match(id="m3", player1_id="b", player2_id="c"),
            ],
        )
        trimmed = remove_players(group, ["c"])
        self.assertEqual(trimmed.player_ids, ["a", "b"])
        self.assertEqual([m.id for m in trimmed.matches], ["m1"])
        # original untouched
        self.assertEqual(len(group.matches), 3)
