"""
Event documents ↔ model dataclasses.

to_json_dict() relies on dataclasses.asdict(); the *_from_dict() loaders
build the typed dataclasses back from plain dicts (parsed JSON or YAML),
filling defaults for absent keys the same way config.py does.
"""

from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any

import yaml

from tourneykit.models import (
    TIE_BREAKERS,
    ConsolationSetting,
    Event,
    Group,
    Match,
    Player,
    PlayoffBracket,
    PlayoffMatch,
    PlayoffSetting,
    PointRule,
    Schedule,
    TimeSlot,
    Tournament,
    TournamentSettings,
)


def to_json_dict(obj: Any) -> Any:
    """Convert a model dataclass (or a list of them) to JSON-safe values."""
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    if isinstance(obj, (list, tuple)):
        return [to_json_dict(item) for item in obj]
    return obj


def to_json(data: Any) -> str:
    """Pretty-printed JSON text for a model dataclass, a list of them, or a plain dict."""
    return json.dumps(to_json_dict(data), indent=2)


# --------------------------------------------------------------------------- #
# Loaders                                                                      #
# --------------------------------------------------------------------------- #

def load_event(path: str | Path) -> Event:
    """
    Load one event from a YAML or JSON file.

    Raises:
        FileNotFoundError: the file is missing.
        ValueError: the document does not describe a valid event.
    """
    event_path = Path(path)
    if not event_path.exists():
        raise FileNotFoundError(f"Event file not found: {event_path.resolve()}")

    try:
        with event_path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {event_path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid event structure: {event_path} does not hold a mapping")
    return event_from_dict(raw)


def event_from_dict(raw: dict) -> Event:
    try:
        return Event(
            id=str(raw["id"]),
            name=str(raw.get("name", "")),
            players=[player_from_dict(p) for p in raw.get("players") or []],
            tournaments=[tournament_from_dict(t) for t in raw.get("tournaments") or []],
            invitation_code=str(raw.get("invitation_code", "")),
            time_slots=[
                TimeSlot(
                    id=str(s["id"]),
                    time=str(s.get("time", "")),
                    location=str(s.get("location", "")),
                    match_id=s.get("match_id"),
                )
                for s in raw.get("time_slots") or []
            ],
        )
    except (KeyError, TypeError, AttributeError) as exc:
        raise ValueError(f"Invalid event structure: {exc}") from exc


def player_from_dict(raw: dict) -> Player:
    status = raw.get("status", "pending")
    if status not in ("pending", "confirmed"):
        raise ValueError(f"player.status must be 'pending' or 'confirmed', got {status!r}")
    return Player(
        id=str(raw["id"]),
        name=str(raw.get("name", "")),
        phone=str(raw.get("phone", "")),
        avatar=str(raw.get("avatar", "")),
        status=status,
    )


def tournament_from_dict(raw: dict) -> Tournament:
    playoffs = raw.get("playoffs")
    consolation = raw.get("consolation_bracket")
    return Tournament(
        id=str(raw["id"]),
        name=str(raw.get("name", "")),
        groups=[group_from_dict(g) for g in raw.get("groups") or []],
        settings=settings_from_dict(raw.get("settings") or {}),
        playoffs=bracket_from_dict(playoffs) if playoffs is not None else None,
        consolation_bracket=bracket_from_dict(consolation) if consolation is not None else None,
    )


def group_from_dict(raw: dict) -> Group:
    return Group(
        id=str(raw["id"]),
        name=str(raw.get("name", "")),
        player_ids=[str(p) for p in raw.get("player_ids") or []],
        matches=[match_from_dict(m) for m in raw.get("matches") or []],
    )


def match_from_dict(raw: dict) -> Match:
    status = raw.get("status", "pending")
    if status not in ("pending", "scheduled", "completed"):
        raise ValueError(f"match.status must be pending/scheduled/completed, got {status!r}")
    schedule = raw.get("schedule")
    return Match(
        id=str(raw["id"]),
        player1_id=str(raw["player1_id"]),
        player2_id=str(raw["player2_id"]),
        score1=_optional_int(raw.get("score1")),
        score2=_optional_int(raw.get("score2")),
        status=status,
        schedule=Schedule(
            slot_id=str(schedule["slot_id"]),
            time=str(schedule.get("time", "")),
            location=str(schedule.get("location", "")),
        ) if schedule else None,
    )


def settings_from_dict(raw: dict) -> TournamentSettings:
    defaults = TournamentSettings()
    tie_breakers = list(raw.get("tie_breakers", defaults.tie_breakers))
    unknown = [t for t in tie_breakers if t not in TIE_BREAKERS]
    if unknown:
        raise ValueError(
            f"settings.tie_breakers must be drawn from {TIE_BREAKERS}, got {unknown}"
        )

    point_rules = defaults.point_rules
    if "point_rules" in raw:
        point_rules = [
            PointRule(
                id=str(r.get("id", "")),
                min_diff=int(r["min_diff"]),
                max_diff=int(r["max_diff"]),
                winner_points=int(r["winner_points"]),
                loser_points=int(r["loser_points"]),
            )
            for r in raw["point_rules"] or []
        ]

    return TournamentSettings(
        points_per_draw=int(raw.get("points_per_draw", defaults.points_per_draw)),
        point_rules=point_rules,
        tie_breakers=tie_breakers,
        playoff_settings=[
            PlayoffSetting(group_id=str(s["group_id"]), num_qualifiers=int(s.get("num_qualifiers", 0)))
            for s in raw.get("playoff_settings") or []
        ],
        consolation_settings=[
            ConsolationSetting(
                group_id=str(s["group_id"]),
                start_rank=int(s.get("start_rank", 0)),
                end_rank=int(s.get("end_rank", 0)),
            )
            for s in raw.get("consolation_settings") or []
        ],
        has_bronze_final=bool(raw.get("has_bronze_final", defaults.has_bronze_final)),
    )


def bracket_from_dict(raw: dict) -> PlayoffBracket:
    return PlayoffBracket(
        matches=[
            PlayoffMatch(
                id=str(m["id"]),
                round=int(m["round"]),
                match_index=int(m["match_index"]),
                player1_id=m.get("player1_id"),
                player2_id=m.get("player2_id"),
                score1=_optional_int(m.get("score1")),
                score2=_optional_int(m.get("score2")),
                winner_id=m.get("winner_id"),
                next_match_id=m.get("next_match_id"),
                is_bronze_final=bool(m.get("is_bronze_final", False)),
                loser_goes_to_bronze_final=bool(m.get("loser_goes_to_bronze_final", False)),
            )
            for m in raw.get("matches") or []
        ],
        is_generated=bool(raw.get("is_generated", False)),
        final_id=raw.get("final_id"),
        bronze_final_id=raw.get("bronze_final_id"),
    )


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)
