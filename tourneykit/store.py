"""
In-memory event store with narrow, atomic update operations.

Every mutation runs under one lock on a deep copy of the event and is
committed only if it completes without raising, so a rejected operation
never leaves a half-applied change behind.  Readers always get copies.

Slot booking is a check-and-set under that same lock: at most one match
holds a given time slot at a time, and a losing concurrent booking is
rejected with ConflictError (there is no retry).
"""

from __future__ import annotations

import copy
import json
import logging
import os
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator, Sequence

from tourneykit.errors import ConflictError, NotFoundError, ValidationError
from tourneykit.groups.round_robin import generate_round_robin
from tourneykit.ids import IdGenerator, UuidIds
from tourneykit.models import (
    BracketKind,
    Event,
    Group,
    Match,
    PlayoffBracket,
    Schedule,
    Tournament,
)
from tourneykit.playoffs.advancer import record_result, reset_bracket
from tourneykit.playoffs.builder import SeedSlot, build_bracket
from tourneykit.playoffs.qualifiers import select_qualifiers
from tourneykit.serialization import event_from_dict, to_json, to_json_dict

logger = logging.getLogger(__name__)


class EventStore:
    def __init__(self, events: Iterable[Event] = (), ids: IdGenerator | None = None) -> None:
        self._events: dict[str, Event] = {e.id: e for e in events}
        self._lock = threading.RLock()
        self._ids = ids or UuidIds()

    # ------------------------------------------------------------------ #
    # Reads                                                                #
    # ------------------------------------------------------------------ #

    def event_ids(self) -> list[str]:
        with self._lock:
            return list(self._events)

    def get_event(self, event_id: str) -> Event:
        with self._lock:
            return copy.deepcopy(self._require_event(event_id))

    def get_tournament(self, event_id: str, tournament_id: str) -> Tournament:
        with self._lock:
            return copy.deepcopy(_require_tournament(self._require_event(event_id), tournament_id))

    def add_event(self, event: Event) -> None:
        with self._lock:
            if event.id in self._events:
                raise ConflictError(f"Event {event.id!r} already exists.")
            self._events[event.id] = copy.deepcopy(event)

    # ------------------------------------------------------------------ #
    # Groups                                                               #
    # ------------------------------------------------------------------ #

    def update_group(self, event_id: str, tournament_id: str, group: Group) -> Group:
        """Replace one group of a tournament, matched by id."""
        with self._edit(event_id) as event:
            tournament = _require_tournament(event, tournament_id)
            for i, existing in enumerate(tournament.groups):
                if existing.id == group.id:
                    tournament.groups[i] = copy.deepcopy(group)
                    break
            else:
                raise NotFoundError(f"Unknown group: {group.id!r}")
            _release_orphaned_slots(event)
        return copy.deepcopy(group)

    def schedule_round_robin(self, event_id: str, tournament_id: str, group_id: str) -> list[Match]:
        """Add the missing round-robin matches to a group and return them."""
        with self._edit(event_id) as event:
            group = _require_group(_require_tournament(event, tournament_id), group_id)
            new_matches = generate_round_robin(group, self._ids)
            group.matches.extend(new_matches)
        logger.info("Scheduled %d matches in group %s", len(new_matches), group_id)
        return copy.deepcopy(new_matches)

    def record_group_result(
        self,
        event_id: str,
        tournament_id: str,
        group_id: str,
        match_id: str,
        score1: int,
        score2: int,
    ) -> Match:
        """Store a group match score.  Group results may be corrected later."""
        if score1 < 0 or score2 < 0:
            raise ValidationError("Scores cannot be negative.")
        with self._edit(event_id) as event:
            group = _require_group(_require_tournament(event, tournament_id), group_id)
            match = _require_match(group, match_id)
            match.score1 = score1
            match.score2 = score2
            match.status = "completed"
        logger.info("Group match %s recorded %d-%d", match_id, score1, score2)
        return copy.deepcopy(match)

    # ------------------------------------------------------------------ #
    # Slot booking                                                         #
    # ------------------------------------------------------------------ #

    def book_slot(
        self,
        event_id: str,
        tournament_id: str,
        group_id: str,
        match_id: str,
        slot_id: str,
    ) -> Match:
        """
        Atomically assign a free time slot to a pending match.

        Raises:
            NotFoundError: unknown tournament, group, match or slot.
            ConflictError: the slot is already held, or the match is no
                longer pending.
        """
        with self._edit(event_id) as event:
            group = _require_group(_require_tournament(event, tournament_id), group_id)
            match = _require_match(group, match_id)
            slot = event.slot(slot_id)
            if slot is None:
                raise NotFoundError(f"Unknown time slot: {slot_id!r}")

            holder = _slot_holder(event, slot_id)
            if holder is not None:
                logger.warning("Slot %s already held by match %s; booking of %s rejected",
                               slot_id, holder, match_id)
                raise ConflictError(f"Time slot {slot_id!r} is already booked.")
            if match.status != "pending":
                logger.warning("Match %s is %s; booking rejected", match_id, match.status)
                raise ConflictError(f"Match {match_id!r} is no longer pending ({match.status}).")

            match.status = "scheduled"
            match.schedule = Schedule(slot_id=slot.id, time=slot.time, location=slot.location)
            slot.match_id = match.id
        logger.info("Match %s booked into slot %s", match_id, slot_id)
        return copy.deepcopy(match)

    def cancel_booking(
        self,
        event_id: str,
        tournament_id: str,
        group_id: str,
        match_id: str,
    ) -> Match:
        """Release the slot of a scheduled match and put it back to pending."""
        with self._edit(event_id) as event:
            group = _require_group(_require_tournament(event, tournament_id), group_id)
            match = _require_match(group, match_id)
            if match.status != "scheduled" or match.schedule is None:
                raise ValidationError(f"Match {match_id!r} has no booking to cancel.")
            slot = event.slot(match.schedule.slot_id)
            if slot is not None and slot.match_id == match.id:
                slot.match_id = None
            match.status = "pending"
            match.schedule = None
        logger.info("Booking of match %s cancelled", match_id)
        return copy.deepcopy(match)

    # ------------------------------------------------------------------ #
    # Brackets                                                             #
    # ------------------------------------------------------------------ #

    def update_bracket(
        self,
        event_id: str,
        tournament_id: str,
        kind: BracketKind,
        bracket: PlayoffBracket | None,
    ) -> None:
        with self._edit(event_id) as event:
            _require_tournament(event, tournament_id).set_bracket(kind, copy.deepcopy(bracket))

    def generate_bracket(
        self,
        event_id: str,
        tournament_id: str,
        kind: BracketKind,
        seed_assignment: Sequence[SeedSlot],
    ) -> PlayoffBracket:
        """
        Build a bracket from the current standings and a manual seeding.

        Raises:
            ConflictError:   a generated bracket already exists (reset it first).
            ValidationError: see playoffs.builder.build_bracket().
        """
        with self._edit(event_id) as event:
            tournament = _require_tournament(event, tournament_id)
            existing = tournament.bracket(kind)
            if existing is not None and existing.is_generated:
                raise ConflictError(f"The {kind} bracket is already generated.")
            qualifiers = select_qualifiers(kind, tournament, event.players)
            bracket = build_bracket(
                qualifiers,
                seed_assignment,
                has_bronze_final=tournament.settings.has_bronze_final,
                ids=self._ids,
            )
            tournament.set_bracket(kind, bracket)
        return copy.deepcopy(bracket)

    def record_bracket_result(
        self,
        event_id: str,
        tournament_id: str,
        kind: BracketKind,
        match_id: str,
        score1: int,
        score2: int,
    ) -> PlayoffBracket:
        with self._edit(event_id) as event:
            tournament = _require_tournament(event, tournament_id)
            bracket = _require_bracket(tournament, kind)
            record_result(
                bracket, match_id, score1, score2,
                has_bronze_final=tournament.settings.has_bronze_final,
            )
        return copy.deepcopy(bracket)

    def reset_bracket(self, event_id: str, tournament_id: str, kind: BracketKind) -> PlayoffBracket:
        with self._edit(event_id) as event:
            bracket = _require_bracket(_require_tournament(event, tournament_id), kind)
            reset_bracket(bracket)
        return copy.deepcopy(bracket)

    # ------------------------------------------------------------------ #
    # Persistence                                                          #
    # ------------------------------------------------------------------ #

    def save(self, path: str | Path) -> None:
        """
        Write a JSON snapshot of every event.

        The snapshot is taken and written under the store lock, through a
        temporary file that replaces the target, so the file on disk always
        holds the latest committed state in full.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(target.name + ".tmp")
        with self._lock:
            data = {"events": [to_json_dict(e) for e in self._events.values()]}
            tmp.write_text(to_json(data), encoding="utf-8")
            os.replace(tmp, target)
        logger.debug("Saved %d events to %s", len(data["events"]), target)

    @classmethod
    def load(cls, path: str | Path, ids: IdGenerator | None = None) -> EventStore:
        """Read a snapshot written by save().  A missing file gives an empty store."""
        source = Path(path)
        if not source.exists():
            return cls(ids=ids)
        try:
            raw = json.loads(source.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid event store file {source}: {exc}") from exc
        return cls((event_from_dict(e) for e in raw.get("events", [])), ids=ids)

    # ------------------------------------------------------------------ #
    # Internal                                                             #
    # ------------------------------------------------------------------ #

    def _require_event(self, event_id: str) -> Event:
        event = self._events.get(event_id)
        if event is None:
            raise NotFoundError(f"Unknown event: {event_id!r}")
        return event

    @contextmanager
    def _edit(self, event_id: str) -> Iterator[Event]:
        """Yield a draft of the event; commit it only if the block succeeds."""
        with self._lock:
            draft = copy.deepcopy(self._require_event(event_id))
            yield draft
            self._events[event_id] = draft


def _require_tournament(event: Event, tournament_id: str) -> Tournament:
    tournament = event.tournament(tournament_id)
    if tournament is None:
        raise NotFoundError(f"Unknown tournament: {tournament_id!r}")
    return tournament


def _require_group(tournament: Tournament, group_id: str) -> Group:
    group = tournament.group(group_id)
    if group is None:
        raise NotFoundError(f"Unknown group: {group_id!r}")
    return group


def _require_match(group: Group, match_id: str) -> Match:
    match = group.match(match_id)
    if match is None:
        raise NotFoundError(f"Unknown match: {match_id!r}")
    return match


def _require_bracket(tournament: Tournament, kind: BracketKind) -> PlayoffBracket:
    bracket = tournament.bracket(kind)
    if bracket is None or not bracket.is_generated:
        raise ValidationError(f"The {kind} bracket has not been generated yet.")
    return bracket


def _slot_holder(event: Event, slot_id: str) -> str | None:
    """Id of the live scheduled or completed match booked into `slot_id`."""
    return next(
        (
            m.id for m in event.all_matches()
            if m.schedule is not None
            and m.schedule.slot_id == slot_id
            and m.status in ("scheduled", "completed")
        ),
        None,
    )


def _release_orphaned_slots(event: Event) -> None:
    """Clear slot back-pointers whose match no longer holds the slot."""
    for slot in event.time_slots:
        if slot.match_id is not None and _slot_holder(event, slot.id) != slot.match_id:
            logger.info("Slot %s released: match %s no longer holds it", slot.id, slot.match_id)
            slot.match_id = None
