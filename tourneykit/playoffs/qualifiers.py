"""
Group standings → players entering the playoff / consolation brackets.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from tourneykit.groups.standings import calculate_standings
from tourneykit.models import BracketKind, Player, Tournament


@dataclass(frozen=True)
class Qualifier:
    player_id: str
    rank: int          # 1-based position in the source group's standings
    group_id: str
    group_name: str


def select_playoff_qualifiers(
    tournament: Tournament,
    players: Iterable[Player],
) -> list[Qualifier]:
    """Top `num_qualifiers` of every group that has a playoff setting > 0."""
    players = list(players)
    qualifiers: list[Qualifier] = []
    for group in tournament.groups:
        setting = tournament.settings.playoff_setting_for(group.id)
        if setting is None or setting.num_qualifiers <= 0:
            continue
        standings = calculate_standings(group, players, tournament.settings)
        qualifiers.extend(
            Qualifier(
                player_id=entry.player_id,
                rank=rank,
                group_id=group.id,
                group_name=group.name,
            )
            for rank, entry in enumerate(standings[: setting.num_qualifiers], 1)
        )
    return qualifiers


def select_consolation_qualifiers(
    tournament: Tournament,
    players: Iterable[Player],
) -> list[Qualifier]:
    """
    Players ranked start_rank..end_rank (inclusive) in every group with a
    consolation setting.  A (0, 0) range is unset and contributes nothing;
    ranks past the end of a group are simply absent.
    """
    players = list(players)
    qualifiers: list[Qualifier] = []
    for group in tournament.groups:
        setting = tournament.settings.consolation_setting_for(group.id)
        if setting is None or setting.is_unset:
            continue
        start = max(setting.start_rank, 1)
        if setting.end_rank < start:
            continue
        standings = calculate_standings(group, players, tournament.settings)
        qualifiers.extend(
            Qualifier(
                player_id=entry.player_id,
                rank=rank,
                group_id=group.id,
                group_name=group.name,
            )
            for rank, entry in enumerate(standings[start - 1 : setting.end_rank], start)
        )
    return qualifiers


def select_qualifiers(
    kind: BracketKind,
    tournament: Tournament,
    players: Iterable[Player],
) -> list[Qualifier]:
    if kind == "playoffs":
        return select_playoff_qualifiers(tournament, players)
    return select_consolation_qualifiers(tournament, players)
