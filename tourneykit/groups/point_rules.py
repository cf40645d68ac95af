"""Score differential → points awarded to winner and loser."""

from __future__ import annotations

from typing import Sequence

from tourneykit.models import PointRule


def resolve_point_rule(rules: Sequence[PointRule], diff: int) -> PointRule | None:
    """
    Return the first rule in list order whose range covers `diff`.

    Rules are neither sorted nor checked for overlap; an earlier rule
    shadows a later one.  None means no rule applies and the match awards
    no points at all.
    """
    return next((r for r in rules if r.covers(diff)), None)


def award_points(rule: PointRule | None) -> tuple[int, int]:
    """(winner_points, loser_points) for a resolved rule, (0, 0) for none."""
    if rule is None:
        return 0, 0
    return rule.winner_points, rule.loser_points
