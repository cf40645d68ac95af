"""
Tests for bracket generation — sizing, seeding validation, bye walkovers
and bronze-final wiring.
"""

from __future__ import annotations

import unittest

import pytest

from tourneykit.errors import ValidationError
from tourneykit.ids import CounterIds
from tourneykit.models import BYE
from tourneykit.playoffs.builder import bracket_size, build_bracket
from tourneykit.playoffs.qualifiers import Qualifier


# --------------------------------------------------------------------------- #
# Helpers                                                                      #
# --------------------------------------------------------------------------- #

def make_qualifiers(*ids: str) -> list[Qualifier]:
    return [Qualifier(player_id=pid, rank=i + 1, group_id="g", group_name="G") for i, pid in enumerate(ids)]


def build(qualifier_ids, seeds, has_bronze_final=True):
    return build_bracket(
        make_qualifiers(*qualifier_ids), seeds,
        has_bronze_final=has_bronze_final, ids=CounterIds(),
    )


# --------------------------------------------------------------------------- #
# Sizing                                                                       #
# --------------------------------------------------------------------------- #

class TestBracketSize(unittest.TestCase):
    def test_powers_of_two(self):
        cases = {0: 0, 1: 0, 2: 2, 3: 4, 4: 4, 5: 8, 8: 8, 9: 16, 16: 16, 17: 32}
        for n, expected in cases.items():
            with self.subTest(n=n):
                self.assertEqual(bracket_size(n), expected)


# --------------------------------------------------------------------------- #
# Structure                                                                    #
# --------------------------------------------------------------------------- #

class TestFourPlayerBracket:
    def setup_method(self):
        self.bracket = build(["a", "b", "c", "d"], ["a", "d", "b", "c"])

    def test_match_counts(self):
        regular = [m for m in self.bracket.matches if not m.is_bronze_final]
        assert len(regular) == 3
        assert len(self.bracket.matches) == 4
        assert self.bracket.is_generated

    def test_links(self):
        by_id = {m.id: m for m in self.bracket.matches}
        assert by_id["plm-0"].next_match_id == "plm-2"
        assert by_id["plm-1"].next_match_id == "plm-2"
        assert by_id["plm-2"].next_match_id is None
        assert self.bracket.final_id == "plm-2"
        assert self.bracket.bronze_final_id == "plm-3"

    def test_bronze_final_shape(self):
        bronze = self.bracket.get("plm-3")
        assert bronze.is_bronze_final
        assert bronze.round == 2
        assert bronze.next_match_id is None
        assert bronze.player1_id is None and bronze.player2_id is None

    def test_semifinals_feed_bronze(self):
        assert self.bracket.get("plm-0").loser_goes_to_bronze_final
        assert self.bracket.get("plm-1").loser_goes_to_bronze_final
        assert not self.bracket.get("plm-2").loser_goes_to_bronze_final

    def test_first_round_follows_seeding(self):
        first = self.bracket.round_matches(1)
        assert [(m.player1_id, m.player2_id) for m in first] == [("a", "d"), ("b", "c")]
        assert all(m.state == "ready" for m in first)
        assert self.bracket.get("plm-2").state == "unfilled"

    def test_match_indexes_unique(self):
        indexes = [m.match_index for m in self.bracket.matches]
        assert len(set(indexes)) == len(indexes)


class TestBronzeFinalToggle:
    def test_disabled(self):
        bracket = build(["a", "b", "c", "d"], ["a", "b", "c", "d"], has_bronze_final=False)
        assert bracket.bronze_final_id is None
        assert not any(m.is_bronze_final for m in bracket.matches)

    def test_two_player_bracket_has_no_bronze(self):
        bracket = build(["a", "b"], ["a", "b"])
        assert len(bracket.matches) == 1
        assert bracket.final_id == "plm-0"
        assert bracket.bronze_final_id is None
        assert not bracket.get("plm-0").loser_goes_to_bronze_final


# --------------------------------------------------------------------------- #
# Byes                                                                         #
# --------------------------------------------------------------------------- #

class TestByes:
    def setup_method(self):
        self.bracket = build(
            ["a", "b", "c", "d", "e"],
            ["a", BYE, "b", "c", "d", BYE, "e", BYE],
        )

    def test_shape(self):
        assert len(self.bracket.round_matches(1)) == 4
        assert len(self.bracket.round_matches(2)) == 2
        assert len(self.bracket.round_matches(3)) == 1
        assert self.bracket.final_id == "plm-6"
        assert self.bracket.bronze_final_id == "plm-7"

    def test_walkovers_decided_immediately(self):
        assert self.bracket.get("plm-0").winner_id == "a"
        assert self.bracket.get("plm-0").player2_id is None
        assert self.bracket.get("plm-2").winner_id == "d"
        assert self.bracket.get("plm-3").winner_id == "e"
        assert self.bracket.get("plm-1").state == "ready"

    def test_walkover_winners_placed_by_parity(self):
        sf1 = self.bracket.get("plm-4")
        sf2 = self.bracket.get("plm-5")
        assert (sf1.player1_id, sf1.player2_id) == ("a", None)
        assert (sf2.player1_id, sf2.player2_id) == ("d", "e")
        assert sf2.state == "ready"

    def test_bye_in_first_slot(self):
        bracket = build(["a", "b", "c"], [BYE, "a", "b", "c"])
        first = bracket.get("plm-0")
        assert first.player1_id is None
        assert first.winner_id == "a"
        assert bracket.get("plm-2").player1_id == "a"


# --------------------------------------------------------------------------- #
# Seeding validation                                                           #
# --------------------------------------------------------------------------- #

class TestSeedingValidation:
    def test_too_few_qualifiers(self):
        with pytest.raises(ValidationError):
            build(["a"], ["a", BYE])
        with pytest.raises(ValidationError):
            build([], [])

    def test_wrong_length(self):
        with pytest.raises(ValidationError, match="4 slots"):
            build(["a", "b", "c"], ["a", "b", "c"])

    def test_unfilled_slot(self):
        with pytest.raises(ValidationError, match="Unfilled"):
            build(["a", "b", "c"], ["a", "b", "c", None])

    def test_non_qualifier(self):
        with pytest.raises(ValidationError, match="not a qualifier"):
            build(["a", "b", "c"], ["a", "b", "c", "zed"])

    def test_duplicate_placement(self):
        with pytest.raises(ValidationError, match="more than one"):
            build(["a", "b", "c"], ["a", "b", "c", "a"])

    def test_qualifier_not_placed(self):
        with pytest.raises(ValidationError, match="not placed"):
            build(["a", "b", "c", "d"], ["a", "b", "c", BYE])

    def test_double_bye(self):
        with pytest.raises(ValidationError, match="both sides"):
            build(["a", "b", "c", "d", "e"], ["a", "b", "c", "d", "e", BYE, BYE, BYE])
