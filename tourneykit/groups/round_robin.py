"""Round-robin match generation and group membership changes."""

from __future__ import annotations

import itertools
import logging
from dataclasses import replace
from typing import Iterable

from tourneykit.ids import CounterIds, IdGenerator
from tourneykit.models import Group, Match

logger = logging.getLogger(__name__)


def generate_round_robin(group: Group, ids: IdGenerator | None = None) -> list[Match]:
    """
    Return one pending match per unordered pair of distinct players that
    does not already have a match in the group.

    Pairs follow player insertion order: (p1, p2), (p1, p3), …, (p2, p3), …
    The caller appends the result to group.matches.
    """
    ids = ids or CounterIds()
    existing = {frozenset((m.player1_id, m.player2_id)) for m in group.matches}
    player_ids = list(dict.fromkeys(group.player_ids))

    matches = [
        Match(id=ids("m"), player1_id=a, player2_id=b)
        for a, b in itertools.combinations(player_ids, 2)
        if frozenset((a, b)) not in existing
    ]
    logger.debug("Generated %d round-robin matches for group %s", len(matches), group.id)
    return matches


def remove_players(group: Group, player_ids: Iterable[str]) -> Group:
    """Copy of `group` without the given players and every match they were in."""
    removed = set(player_ids)
    return replace(
        group,
        player_ids=[p for p in group.player_ids if p not in removed],
        matches=[
            m for m in group.matches
            if m.player1_id not in removed and m.player2_id not in removed
        ],
    )
