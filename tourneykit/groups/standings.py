"""
Round-robin group standings.

calculate_standings() is recomputed on every read and never mutates its
inputs.  Two data problems are tolerated on purpose rather than raised:

  - a completed match that references a player who is no longer in the
    group is skipped;
  - a win whose score differential no PointRule covers awards no points.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from tourneykit.groups.point_rules import award_points, resolve_point_rule
from tourneykit.groups.tiebreak import standings_sort_key
from tourneykit.models import Group, Player, TournamentSettings

logger = logging.getLogger(__name__)


@dataclass
class StandingsEntry:
    """Running tally for one player across the group's completed matches."""

    player_id: str
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    points: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    player_name: str | None = None   # None when the id no longer resolves

    def add_goals(self, scored: int, conceded: int) -> None:
        self.goals_for += scored
        self.goals_against += conceded
        self.goal_difference = self.goals_for - self.goals_against


def calculate_standings(
    group: Group,
    players: Iterable[Player],
    settings: TournamentSettings,
) -> list[StandingsEntry]:
    """
    Rank every distinct player id of `group`.

    Points first, then settings.tie_breakers in order.  Players who remain
    tied on every criterion keep their group insertion order.
    """
    names = {p.id: p.name for p in players}
    table: dict[str, StandingsEntry] = {}
    for player_id in group.player_ids:
        if player_id not in table:
            table[player_id] = StandingsEntry(player_id=player_id, player_name=names.get(player_id))

    for match in group.matches:
        if not match.is_completed:
            continue
        stats1 = table.get(match.player1_id)
        stats2 = table.get(match.player2_id)
        if stats1 is None or stats2 is None:
            logger.debug("Skipping match %s: player no longer in group %s", match.id, group.id)
            continue

        score1, score2 = match.score1, match.score2
        stats1.played += 1
        stats2.played += 1
        stats1.add_goals(score1, score2)
        stats2.add_goals(score2, score1)

        if score1 == score2:
            stats1.draws += 1
            stats2.draws += 1
            stats1.points += settings.points_per_draw
            stats2.points += settings.points_per_draw
            continue

        winner, loser = (stats1, stats2) if score1 > score2 else (stats2, stats1)
        winner.wins += 1
        loser.losses += 1
        rule = resolve_point_rule(settings.point_rules, abs(score1 - score2))
        if rule is None:
            logger.debug("Match %s: no point rule for diff %d", match.id, abs(score1 - score2))
        winner_points, loser_points = award_points(rule)
        winner.points += winner_points
        loser.points += loser_points

    return sorted(
        table.values(),
        key=standings_sort_key(settings.tie_breakers, group.matches),
    )
