"""
Tie-break cascade for group standings.

compare_entries() follows the cmp() convention: negative ranks `a` above
`b`, positive ranks `b` above `a`, zero leaves the input order alone
(Python's sort is stable).
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, Callable, Sequence

from tourneykit.models import Match, TieBreaker

if TYPE_CHECKING:
    from tourneykit.groups.standings import StandingsEntry


def head_to_head_winner(matches: Sequence[Match], a: str, b: str) -> str | None:
    """
    Winner of the first completed match between `a` and `b`.

    Only the first completed encounter counts.  If it carries no scores or
    was drawn there is no head-to-head winner, even when a later encounter
    had one.
    """
    match = next(
        (
            m for m in matches
            if m.status == "completed"
            and {m.player1_id, m.player2_id} == {a, b}
        ),
        None,
    )
    if match is None or match.score1 is None or match.score2 is None:
        return None
    if match.score1 == match.score2:
        return None
    return match.player1_id if match.score1 > match.score2 else match.player2_id


def compare_entries(
    a: StandingsEntry,
    b: StandingsEntry,
    tie_breakers: Sequence[TieBreaker],
    matches: Sequence[Match],
) -> int:
    if a.points != b.points:
        return b.points - a.points

    for tie_breaker in tie_breakers:
        comparison = 0
        match tie_breaker:
            case "head_to_head":
                # A decided encounter settles this pair outright; the
                # remaining tie-breakers are not consulted.
                winner = head_to_head_winner(matches, a.player_id, b.player_id)
                if winner == a.player_id:
                    return -1
                if winner == b.player_id:
                    return 1
            case "wins":
                comparison = b.wins - a.wins
            case "goal_difference":
                comparison = b.goal_difference - a.goal_difference
            case "goals_for":
                comparison = b.goals_for - a.goals_for
        if comparison != 0:
            return comparison
    return 0


def standings_sort_key(
    tie_breakers: Sequence[TieBreaker],
    matches: Sequence[Match],
) -> Callable[[StandingsEntry], object]:
    """Key function for sorted() built from compare_entries()."""
    return functools.cmp_to_key(
        lambda a, b: compare_entries(a, b, tie_breakers, matches)
    )
