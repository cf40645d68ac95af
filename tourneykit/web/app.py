"""
FastAPI application — JSON API over an EventStore.

Exposes:
  GET    /api/events                                                  Event ids
  GET    /api/events/{e}                                              Event snapshot
  GET    /api/events/{e}/tournaments/{t}/groups/{g}/standings         Group standings
  POST   /api/events/{e}/tournaments/{t}/groups/{g}/schedule          Add round-robin matches
  POST   /api/events/{e}/tournaments/{t}/groups/{g}/matches/{m}/result
  POST   /api/events/{e}/tournaments/{t}/groups/{g}/matches/{m}/booking
  DELETE /api/events/{e}/tournaments/{t}/groups/{g}/matches/{m}/booking
  GET    /api/events/{e}/tournaments/{t}/brackets/{kind}              Bracket
  GET    /api/events/{e}/tournaments/{t}/brackets/{kind}/qualifiers
  POST   /api/events/{e}/tournaments/{t}/brackets/{kind}/generate
  POST   /api/events/{e}/tournaments/{t}/brackets/{kind}/matches/{m}/result
  POST   /api/events/{e}/tournaments/{t}/brackets/{kind}/reset

{kind} is "playoffs" or "consolation".  Engine errors map to HTTP status
codes: NotFoundError → 404, ValidationError → 400, ConflictError → 409.

Run with web_main.py (uvicorn, factory mode).
"""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from tourneykit.config import Config, load_config
from tourneykit.errors import ConflictError, NotFoundError, ValidationError
from tourneykit.groups.standings import calculate_standings
from tourneykit.ids import create_id_generator
from tourneykit.models import BRACKET_KINDS, BYE, BracketKind
from tourneykit.playoffs.builder import bracket_size
from tourneykit.playoffs.qualifiers import select_qualifiers
from tourneykit.serialization import to_json_dict
from tourneykit.store import EventStore

logger = logging.getLogger("tourneykit")

_PREFIX = "/api/events/{event_id}/tournaments/{tournament_id}"


def create_app(config: Config | None = None, store: EventStore | None = None) -> FastAPI:
    """
    Build the API.

    Without an explicit store, events are loaded from config.app.data_file
    and written back there after every successful change.
    """
    if config is None:
        config = load_config() if Path("config.yaml").exists() else Config()

    persist_path: Path | None = None
    if store is None:
        persist_path = config.app.data_file_path
        store = EventStore.load(persist_path, ids=create_id_generator(config.app.id_strategy))
        logger.info("Loaded %d events from %s", len(store.event_ids()), persist_path)

    app = FastAPI(title="tourneykit")
    app.state.store = store

    def _persist() -> None:
        if persist_path is not None:
            store.save(persist_path)

    # ------------------------------------------------------------------ #
    # Error mapping                                                        #
    # ------------------------------------------------------------------ #

    @app.exception_handler(NotFoundError)
    async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ValidationError)
    async def _invalid(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ConflictError)
    async def _conflict(request: Request, exc: ConflictError) -> JSONResponse:
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    # ------------------------------------------------------------------ #
    # Events & groups                                                      #
    # ------------------------------------------------------------------ #

    @app.get("/api/events")
    def list_events():
        return {"events": store.event_ids()}

    @app.get("/api/events/{event_id}")
    def get_event(event_id: str):
        return to_json_dict(store.get_event(event_id))

    @app.get(_PREFIX + "/groups/{group_id}/standings")
    def get_standings(event_id: str, tournament_id: str, group_id: str):
        event = store.get_event(event_id)
        tournament = event.tournament(tournament_id)
        if tournament is None:
            raise NotFoundError(f"Unknown tournament: {tournament_id!r}")
        group = tournament.group(group_id)
        if group is None:
            raise NotFoundError(f"Unknown group: {group_id!r}")
        standings = calculate_standings(group, event.players, tournament.settings)
        return {"group_id": group.id, "standings": to_json_dict(standings)}

    @app.post(_PREFIX + "/groups/{group_id}/schedule")
    def schedule_group(event_id: str, tournament_id: str, group_id: str):
        matches = store.schedule_round_robin(event_id, tournament_id, group_id)
        _persist()
        return {"matches": to_json_dict(matches)}

    @app.post(_PREFIX + "/groups/{group_id}/matches/{match_id}/result")
    def record_group_result(event_id: str, tournament_id: str, group_id: str, match_id: str, payload: dict):
        score1, score2 = _scores(payload)
        match = store.record_group_result(event_id, tournament_id, group_id, match_id, score1, score2)
        _persist()
        return to_json_dict(match)

    @app.post(_PREFIX + "/groups/{group_id}/matches/{match_id}/booking")
    def book_slot(event_id: str, tournament_id: str, group_id: str, match_id: str, payload: dict):
        slot_id = str(payload.get("slot_id", "")).strip()
        if not slot_id:
            raise HTTPException(status_code=400, detail="slot_id is required")
        match = store.book_slot(event_id, tournament_id, group_id, match_id, slot_id)
        _persist()
        return to_json_dict(match)

    @app.delete(_PREFIX + "/groups/{group_id}/matches/{match_id}/booking")
    def cancel_booking(event_id: str, tournament_id: str, group_id: str, match_id: str):
        match = store.cancel_booking(event_id, tournament_id, group_id, match_id)
        _persist()
        return to_json_dict(match)

    # ------------------------------------------------------------------ #
    # Brackets                                                             #
    # ------------------------------------------------------------------ #

    @app.get(_PREFIX + "/brackets/{kind}")
    def get_bracket(event_id: str, tournament_id: str, kind: str):
        tournament = store.get_tournament(event_id, tournament_id)
        return {"kind": kind, "bracket": to_json_dict(tournament.bracket(_kind(kind)))}

    @app.get(_PREFIX + "/brackets/{kind}/qualifiers")
    def get_qualifiers(event_id: str, tournament_id: str, kind: str):
        event = store.get_event(event_id)
        tournament = event.tournament(tournament_id)
        if tournament is None:
            raise NotFoundError(f"Unknown tournament: {tournament_id!r}")
        qualifiers = select_qualifiers(_kind(kind), tournament, event.players)
        size = bracket_size(len(qualifiers))
        return {
            "qualifiers": to_json_dict(qualifiers),
            "bracket_size": size,
            "byes": size - len(qualifiers) if size else 0,
        }

    @app.post(_PREFIX + "/brackets/{kind}/generate")
    def generate_bracket(event_id: str, tournament_id: str, kind: str, payload: dict):
        seeds = payload.get("seed_assignment")
        if not isinstance(seeds, list):
            raise HTTPException(status_code=400, detail="seed_assignment must be a list")
        seeds = [None if s is None else (BYE if s == BYE else str(s)) for s in seeds]
        bracket = store.generate_bracket(event_id, tournament_id, _kind(kind), seeds)
        _persist()
        return to_json_dict(bracket)

    @app.post(_PREFIX + "/brackets/{kind}/matches/{match_id}/result")
    def record_bracket_result(event_id: str, tournament_id: str, kind: str, match_id: str, payload: dict):
        score1, score2 = _scores(payload)
        bracket = store.record_bracket_result(event_id, tournament_id, _kind(kind), match_id, score1, score2)
        _persist()
        return to_json_dict(bracket)

    @app.post(_PREFIX + "/brackets/{kind}/reset")
    def reset_bracket(event_id: str, tournament_id: str, kind: str):
        bracket = store.reset_bracket(event_id, tournament_id, _kind(kind))
        _persist()
        return to_json_dict(bracket)

    return app


# --------------------------------------------------------------------------- #
# Payload helpers                                                              #
# --------------------------------------------------------------------------- #

def _kind(kind: str) -> BracketKind:
    if kind not in BRACKET_KINDS:
        raise HTTPException(status_code=404, detail=f"Unknown bracket kind: {kind}")
    return kind  # type: ignore[return-value]


def _scores(payload: dict) -> tuple[int, int]:
    scores = payload.get("score1"), payload.get("score2")
    # bool is an int subclass; true/false are not scores
    if not all(isinstance(s, int) and not isinstance(s, bool) for s in scores):
        raise HTTPException(status_code=400, detail="score1 and score2 must be integers")
    return scores
