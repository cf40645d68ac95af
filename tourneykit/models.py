"""
Event aggregate — players, groups, settings, brackets and time slots.

Everything is a plain dataclass so the host can persist the structures
verbatim (see serialization.py).  Relationships are ids within a single
Event; nothing here enforces referential integrity, and every lookup
helper returns None for an id it cannot resolve instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

PlayerStatus = Literal["pending", "confirmed"]
MatchStatus = Literal["pending", "scheduled", "completed"]
TieBreaker = Literal["head_to_head", "wins", "goal_difference", "goals_for"]
BracketKind = Literal["playoffs", "consolation"]
PlayoffMatchState = Literal["unfilled", "ready", "decided"]

TIE_BREAKERS: tuple[TieBreaker, ...] = ("head_to_head", "wins", "goal_difference", "goals_for")
BRACKET_KINDS: tuple[BracketKind, ...] = ("playoffs", "consolation")

# First-round seed slot that intentionally stays empty.
BYE = "BYE"


@dataclass
class Player:
    id: str
    name: str
    phone: str = ""
    avatar: str = ""
    status: PlayerStatus = "pending"


@dataclass
class Schedule:
    """Where and when a booked match is played.  Copied from a TimeSlot."""

    slot_id: str
    time: str        # ISO-8601, as stored on the slot
    location: str


@dataclass
class Match:
    """A round-robin group match."""

    id: str
    player1_id: str
    player2_id: str
    score1: int | None = None
    score2: int | None = None
    status: MatchStatus = "pending"
    schedule: Schedule | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == "completed" and self.score1 is not None and self.score2 is not None

    def involves(self, player_id: str) -> bool:
        return player_id in (self.player1_id, self.player2_id)


@dataclass
class Group:
    id: str
    name: str
    player_ids: list[str] = field(default_factory=list)
    matches: list[Match] = field(default_factory=list)

    def match(self, match_id: str) -> Match | None:
        return next((m for m in self.matches if m.id == match_id), None)


@dataclass
class PointRule:
    """Points awarded for a win whose score differential is in [min_diff, max_diff]."""

    min_diff: int
    max_diff: int
    winner_points: int
    loser_points: int
    id: str = ""

    def covers(self, diff: int) -> bool:
        return self.min_diff <= diff <= self.max_diff


@dataclass
class PlayoffSetting:
    group_id: str
    num_qualifiers: int = 0


@dataclass
class ConsolationSetting:
    group_id: str
    start_rank: int = 0   # 1-based, inclusive
    end_rank: int = 0     # 1-based, inclusive

    @property
    def is_unset(self) -> bool:
        return self.start_rank == 0 and self.end_rank == 0


def _default_point_rules() -> list[PointRule]:
    return [
        PointRule(id="pr1", min_diff=1, max_diff=2, winner_points=2, loser_points=1),
        PointRule(id="pr2", min_diff=3, max_diff=99, winner_points=3, loser_points=0),
    ]


def _default_tie_breakers() -> list[TieBreaker]:
    return ["goal_difference", "goals_for", "wins", "head_to_head"]


@dataclass
class TournamentSettings:
    points_per_draw: int = 1
    point_rules: list[PointRule] = field(default_factory=_default_point_rules)
    tie_breakers: list[TieBreaker] = field(default_factory=_default_tie_breakers)
    playoff_settings: list[PlayoffSetting] = field(default_factory=list)
    consolation_settings: list[ConsolationSetting] = field(default_factory=list)
    has_bronze_final: bool = True

    def playoff_setting_for(self, group_id: str) -> PlayoffSetting | None:
        return next((s for s in self.playoff_settings if s.group_id == group_id), None)

    def consolation_setting_for(self, group_id: str) -> ConsolationSetting | None:
        return next((s for s in self.consolation_settings if s.group_id == group_id), None)


@dataclass
class PlayoffMatch:
    """
    One node of an elimination bracket.

    player1_id / player2_id are None while the slot is unfilled (or when a
    first-round slot was a bye).  next_match_id is None for the final and
    for the bronze final.
    """

    id: str
    round: int          # 1 = first round
    match_index: int    # unique within the bracket, round-major
    player1_id: str | None = None
    player2_id: str | None = None
    score1: int | None = None
    score2: int | None = None
    winner_id: str | None = None
    next_match_id: str | None = None
    is_bronze_final: bool = False
    loser_goes_to_bronze_final: bool = False

    @property
    def state(self) -> PlayoffMatchState:
        if self.winner_id is not None:
            return "decided"
        if self.player1_id is not None and self.player2_id is not None:
            return "ready"
        return "unfilled"

    @property
    def loser_id(self) -> str | None:
        if self.winner_id is None:
            return None
        return self.player2_id if self.winner_id == self.player1_id else self.player1_id


@dataclass
class PlayoffBracket:
    """
    Arena of PlayoffMatch objects.  Forward links (next_match_id,
    final_id, bronze_final_id) are ids into `matches`, never nested objects.
    """

    matches: list[PlayoffMatch] = field(default_factory=list)
    is_generated: bool = False
    final_id: str | None = None
    bronze_final_id: str | None = None

    def get(self, match_id: str | None) -> PlayoffMatch | None:
        if match_id is None:
            return None
        return next((m for m in self.matches if m.id == match_id), None)

    @property
    def num_rounds(self) -> int:
        return max((m.round for m in self.matches if not m.is_bronze_final), default=0)

    def round_matches(self, round_num: int) -> list[PlayoffMatch]:
        """Non-bronze matches of one round, in bracket order."""
        return sorted(
            (m for m in self.matches if m.round == round_num and not m.is_bronze_final),
            key=lambda m: m.match_index,
        )

    def index_in_round(self, match: PlayoffMatch) -> int:
        return [m.id for m in self.round_matches(match.round)].index(match.id)

    @property
    def champion_id(self) -> str | None:
        final = self.get(self.final_id)
        return final.winner_id if final else None

    def reset(self) -> None:
        self.matches = []
        self.is_generated = False
        self.final_id = None
        self.bronze_final_id = None


@dataclass
class TimeSlot:
    id: str
    time: str
    location: str
    match_id: str | None = None


@dataclass
class Tournament:
    id: str
    name: str
    groups: list[Group] = field(default_factory=list)
    settings: TournamentSettings = field(default_factory=TournamentSettings)
    playoffs: PlayoffBracket | None = None
    consolation_bracket: PlayoffBracket | None = None

    def group(self, group_id: str) -> Group | None:
        return next((g for g in self.groups if g.id == group_id), None)

    def bracket(self, kind: BracketKind) -> PlayoffBracket | None:
        return self.playoffs if kind == "playoffs" else self.consolation_bracket

    def set_bracket(self, kind: BracketKind, bracket: PlayoffBracket | None) -> None:
        if kind == "playoffs":
            self.playoffs = bracket
        else:
            self.consolation_bracket = bracket


@dataclass
class Event:
    id: str
    name: str
    players: list[Player] = field(default_factory=list)
    tournaments: list[Tournament] = field(default_factory=list)
    invitation_code: str = ""
    time_slots: list[TimeSlot] = field(default_factory=list)

    def player(self, player_id: str | None) -> Player | None:
        if player_id is None:
            return None
        return next((p for p in self.players if p.id == player_id), None)

    def tournament(self, tournament_id: str) -> Tournament | None:
        return next((t for t in self.tournaments if t.id == tournament_id), None)

    def slot(self, slot_id: str) -> TimeSlot | None:
        return next((s for s in self.time_slots if s.id == slot_id), None)

    def all_matches(self) -> list[Match]:
        return [m for t in self.tournaments for g in t.groups for m in g.matches]
