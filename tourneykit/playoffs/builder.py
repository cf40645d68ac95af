"""
Single-elimination bracket generation from a manual first-round seeding.

Rules:
- Bracket size is the next power of two ≥ the number of qualifiers; with
  fewer than 2 qualifiers there is no bracket.
- The organizer fills every first-round slot with a qualifier or BYE.
- A first-round match against a BYE is decided on the spot and its winner
  is placed in the next round.
- Semifinal losers feed the bronze final when one is enabled.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

from tourneykit.errors import ValidationError
from tourneykit.ids import CounterIds, IdGenerator
from tourneykit.models import BYE, PlayoffBracket, PlayoffMatch
from tourneykit.playoffs.qualifiers import Qualifier

logger = logging.getLogger(__name__)

SeedSlot = str | None   # qualifier player id, BYE, or None (unfilled)


def bracket_size(num_qualifiers: int) -> int:
    if num_qualifiers < 2:
        return 0
    return 1 << math.ceil(math.log2(num_qualifiers))


def build_bracket(
    qualifiers: Sequence[Qualifier],
    seed_assignment: Sequence[SeedSlot],
    has_bronze_final: bool = True,
    ids: IdGenerator | None = None,
) -> PlayoffBracket:
    """
    Build the full bracket skeleton and auto-resolve first-round byes.

    Raises:
        ValidationError: too few qualifiers, or a seeding that is not a
            complete placement of every qualifier (see _validate_seeding).
    """
    size = bracket_size(len(qualifiers))
    _validate_seeding(qualifiers, seed_assignment, size)
    ids = ids or CounterIds()

    num_rounds = int(math.log2(size))
    rounds: list[list[PlayoffMatch]] = []
    match_index = 0
    for round_num in range(1, num_rounds + 1):
        round_matches = []
        for _ in range(size // 2 ** round_num):
            round_matches.append(
                PlayoffMatch(
                    id=ids("plm"),
                    round=round_num,
                    match_index=match_index,
                    loser_goes_to_bronze_final=round_num == num_rounds - 1,
                )
            )
            match_index += 1
        rounds.append(round_matches)

    for current, following in zip(rounds, rounds[1:]):
        for i, match in enumerate(current):
            match.next_match_id = following[i // 2].id

    matches = [m for round_matches in rounds for m in round_matches]
    by_id = {m.id: m for m in matches}

    bronze_final_id = None
    if size > 2 and has_bronze_final:
        bronze = PlayoffMatch(
            id=ids("plm"),
            round=num_rounds,
            match_index=match_index,
            is_bronze_final=True,
        )
        matches.append(bronze)
        bronze_final_id = bronze.id

    for i, match in enumerate(rounds[0]):
        slot1, slot2 = seed_assignment[2 * i], seed_assignment[2 * i + 1]
        match.player1_id = None if slot1 == BYE else slot1
        match.player2_id = None if slot2 == BYE else slot2

        # Double byes were rejected above, so a single None means a walkover.
        if match.player2_id is None:
            walkover = match.player1_id
        elif match.player1_id is None:
            walkover = match.player2_id
        else:
            continue
        match.winner_id = walkover
        _place_in_next(by_id.get(match.next_match_id), walkover, i)
        logger.debug("Bye in %s: %s advances", match.id, walkover)

    bracket = PlayoffBracket(
        matches=matches,
        is_generated=True,
        final_id=rounds[-1][0].id,
        bronze_final_id=bronze_final_id,
    )
    logger.info(
        "Bracket generated: %d qualifiers, size %d, %d rounds, bronze final %s",
        len(qualifiers), size, num_rounds, "on" if bronze_final_id else "off",
    )
    return bracket


def _place_in_next(next_match: PlayoffMatch | None, player_id: str, index_in_round: int) -> None:
    """Even in-round index feeds the first slot of the next match, odd the second."""
    if next_match is None:
        return
    if index_in_round % 2 == 0:
        next_match.player1_id = player_id
    else:
        next_match.player2_id = player_id


def _validate_seeding(
    qualifiers: Sequence[Qualifier],
    seed_assignment: Sequence[SeedSlot],
    size: int,
) -> None:
    if size == 0:
        raise ValidationError(
            f"A bracket requires at least 2 qualifiers, got {len(qualifiers)}."
        )
    if len(seed_assignment) != size:
        raise ValidationError(
            f"Seed assignment must have {size} slots, got {len(seed_assignment)}."
        )

    unfilled = [i + 1 for i, slot in enumerate(seed_assignment) if slot is None]
    if unfilled:
        raise ValidationError(f"Unfilled first-round slot(s): {unfilled}")

    qualifier_ids = {q.player_id for q in qualifiers}
    placed: set[str] = set()
    for slot in seed_assignment:
        if slot == BYE:
            continue
        if slot not in qualifier_ids:
            raise ValidationError(f"{slot!r} is not a qualifier for this bracket.")
        if slot in placed:
            raise ValidationError(f"{slot!r} is placed in more than one slot.")
        placed.add(slot)

    missing = [q.player_id for q in qualifiers if q.player_id not in placed]
    if missing:
        raise ValidationError(f"Qualifier(s) not placed in the bracket: {missing}")

    for i in range(0, size, 2):
        if seed_assignment[i] == BYE and seed_assignment[i + 1] == BYE:
            raise ValidationError(f"First-round match {i // 2 + 1} has a bye on both sides.")
