"""
Round-robin groups: standings, point rules, tie-breaks and scheduling.
"""

from __future__ import annotations

from tourneykit.groups.point_rules import award_points, resolve_point_rule
from tourneykit.groups.round_robin import generate_round_robin, remove_players
from tourneykit.groups.standings import StandingsEntry, calculate_standings
from tourneykit.groups.tiebreak import compare_entries, head_to_head_winner, standings_sort_key

__all__ = [
    "StandingsEntry",
    "calculate_standings",
    "resolve_point_rule",
    "award_points",
    "compare_entries",
    "head_to_head_winner",
    "standings_sort_key",
    "generate_round_robin",
    "remove_players",
]
