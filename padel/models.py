from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional, Tuple

from padel.exceptions import InvalidTeamError


Team = Literal["A", "B"]
TEAMS: Tuple[Team, Team] = ("A", "B")

FinishReason = Literal["sets", "points"]
SituationKind = Literal["set-point", "match-point"]


def check_team(team) -> Team:
    if team not in TEAMS:
        raise InvalidTeamError(f"Invalid team: {team!r}")
    return team


def other_team(team: Team) -> Team:
    return "B" if team == "A" else "A"


@dataclass(frozen=True)
class TeamPair:
    """
    Immutable per-team counter.
    """
    a: int = 0
    b: int = 0

    def for_team(self, team: Team) -> int:
        return self.a if team == "A" else self.b

    def add(self, team: Team, n: int = 1) -> "TeamPair":
        if team == "A":
            return replace(self, a=self.a + n)
        return replace(self, b=self.b + n)

    @property
    def total(self) -> int:
        return self.a + self.b


@dataclass(frozen=True)
class TiebreakScore:
    points: TeamPair
    opening_server: Team


@dataclass(frozen=True)
class SetRecord:
    games: TeamPair = TeamPair()
    tiebreak: Optional[TiebreakScore] = None
    completed: bool = False
    winner: Optional[Team] = None


@dataclass(frozen=True)
class GameCounters:
    points: TeamPair = TeamPair()
    in_tiebreak: bool = False
    deuce_count: int = 0


@dataclass(frozen=True)
class RawPointsState:
    points: TeamPair = TeamPair()
    serves_this_turn: int = 0
    total_serves: int = 0


@dataclass(frozen=True)
class Streak:
    team: Optional[Team] = None
    length: int = 0


@dataclass(frozen=True)
class MatchStats:
    started_at: float
    total_points: int = 0
    points_won: TeamPair = TeamPair()
    service_points_won: TeamPair = TeamPair()
    breaks: TeamPair = TeamPair()
    longest_streak: Streak = Streak()
    current_streak: Streak = Streak()
    point_history: Tuple[Team, ...] = ()


@dataclass(frozen=True)
class MatchResult:
    winner: Team
    reason: FinishReason


@dataclass(frozen=True)
class MatchState:
    """
    Everything needed to resume or redisplay a match.

    Never mutated: the engine returns a new value for every point, so
    any earlier value can be kept as an undo snapshot as-is.
    """
    sets: Tuple[SetRecord, ...]
    current_game: GameCounters
    server: Team
    stats: MatchStats
    finished: Optional[MatchResult] = None
    raw_points: Optional[RawPointsState] = None

    @property
    def current_set(self) -> SetRecord:
        return self.sets[-1]

    @property
    def is_finished(self) -> bool:
        return self.finished is not None

    def sets_won(self) -> TeamPair:
        a_sets = sum(1 for s in self.sets if s.completed and s.winner == "A")
        b_sets = sum(1 for s in self.sets if s.completed and s.winner == "B")
        return TeamPair(a_sets, b_sets)


# --- VIEW TYPES ---

@dataclass(frozen=True)
class PointSituation:
    kind: SituationKind
    team: Team


@dataclass(frozen=True)
class DisplayModel:
    points_a: str
    points_b: str
    games_a: int
    games_b: int
    sets_a: int
    sets_b: int
    server: Team
    tiebreak: bool = False
    deuce: bool = False
    advantage: Optional[Team] = None
    raw_points: bool = False
    situation: Optional[PointSituation] = None
    status: Optional[str] = None
    serves_remaining: Optional[int] = None
    change_ends: bool = False
    winner: Optional[Team] = None


@dataclass
class RallyEvent:
    team: Team
    timestamp: float


@dataclass
class MatchSnapshot:
    timestamp: float
    point_number: int
    set_number: int
    points_a: str
    points_b: str
    games_a: int
    games_b: int
    sets_a: int
    sets_b: int
    server: Team
    is_finished: bool
    winner: Optional[Team]
    status: Optional[str] = None
