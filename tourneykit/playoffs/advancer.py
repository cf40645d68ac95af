"""
Recording elimination results and moving players through the bracket.

A PlayoffMatch goes unfilled → ready → decided.  Decided is final: the
only way back is reset_bracket(), which throws the whole bracket away.
"""

from __future__ import annotations

import logging

from tourneykit.errors import ConflictError, NotFoundError, ValidationError
from tourneykit.models import PlayoffBracket, PlayoffMatch

logger = logging.getLogger(__name__)


def record_result(
    bracket: PlayoffBracket,
    match_id: str,
    score1: int,
    score2: int,
    has_bronze_final: bool = True,
) -> PlayoffBracket:
    """
    Decide `match_id`, advance the winner and route a semifinal loser to the
    bronze final.  The bracket is updated in place and returned.

    Raises:
        NotFoundError:   no such match in the bracket.
        ConflictError:   the match already has a winner.
        ValidationError: bracket not generated, match not ready, negative
                         scores, or a tie (elimination matches need a winner).
    """
    match = _check_recordable(bracket, match_id, score1, score2)

    match.score1 = score1
    match.score2 = score2
    match.winner_id = match.player1_id if score1 > score2 else match.player2_id
    loser_id = match.loser_id

    next_match = bracket.get(match.next_match_id)
    if next_match is not None:
        if bracket.index_in_round(match) % 2 == 0:
            next_match.player1_id = match.winner_id
        else:
            next_match.player2_id = match.winner_id

    bronze = bracket.get(bracket.bronze_final_id)
    if match.loser_goes_to_bronze_final and bronze is not None and has_bronze_final:
        if bronze.player1_id is None:
            bronze.player1_id = loser_id
        elif bronze.player2_id is None:
            bronze.player2_id = loser_id

    logger.info(
        "Match %s decided %d-%d: %s advances%s",
        match.id, score1, score2, match.winner_id,
        f" to {next_match.id}" if next_match else "",
    )
    return bracket


def reset_bracket(bracket: PlayoffBracket) -> PlayoffBracket:
    """Discard every match and return the bracket to the ungenerated state."""
    discarded = len(bracket.matches)
    bracket.reset()
    logger.info("Bracket reset, %d matches discarded", discarded)
    return bracket


def _check_recordable(
    bracket: PlayoffBracket,
    match_id: str,
    score1: int,
    score2: int,
) -> PlayoffMatch:
    if not bracket.is_generated:
        raise ValidationError("The bracket has not been generated yet.")
    match = bracket.get(match_id)
    if match is None:
        raise NotFoundError(f"Unknown bracket match: {match_id!r}")
    if match.state == "decided":
        logger.warning("Rejected result for already decided match %s", match_id)
        raise ConflictError(
            f"Match {match_id!r} is already decided (winner {match.winner_id!r})."
        )
    if match.state != "ready":
        raise ValidationError(f"Match {match_id!r} is still waiting for its players.")
    if score1 < 0 or score2 < 0:
        raise ValidationError("Scores cannot be negative.")
    if score1 == score2:
        raise ValidationError("Elimination matches cannot end in a draw.")
    return match
