import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from padel.config import CLUB_SCHEMA_VERSION, SCHEMA_VERSION
from padel.exceptions import MatchFormatError, RuleConfigurationError
from padel.models import (
    GameCounters,
    MatchResult,
    MatchState,
    MatchStats,
    RawPointsState,
    SetRecord,
    Streak,
    TeamPair,
    TiebreakScore,
    check_team,
)
from padel.rules import MatchRules, RawPointsRules, rules_from_dict, rules_to_dict

logger = logging.getLogger(__name__)


# =========================================================
# STATE <-> DICT
# =========================================================

def state_to_dict(state: MatchState) -> Dict[str, Any]:
    data = asdict(state)
    data["stats"]["point_history"] = list(state.stats.point_history)
    data["sets"] = list(data["sets"])
    return data


def _pair(d: Dict[str, Any]) -> TeamPair:
    return TeamPair(a=int(d["a"]), b=int(d["b"]))


def _streak(d: Dict[str, Any]) -> Streak:
    team = d.get("team")
    return Streak(team=check_team(team) if team is not None else None, length=int(d["length"]))


def _set_record(d: Dict[str, Any]) -> SetRecord:
    tiebreak = None
    if d.get("tiebreak"):
        tiebreak = TiebreakScore(
            points=_pair(d["tiebreak"]["points"]),
            opening_server=check_team(d["tiebreak"]["opening_server"]),
        )
    winner = d.get("winner")
    return SetRecord(
        games=_pair(d["games"]),
        tiebreak=tiebreak,
        completed=bool(d.get("completed", False)),
        winner=check_team(winner) if winner is not None else None,
    )


def _result(d: Dict[str, Any]) -> MatchResult:
    if d["reason"] not in ("sets", "points"):
        raise ValueError(f"Unknown finish reason: {d['reason']!r}")
    return MatchResult(winner=check_team(d["winner"]), reason=d["reason"])


def state_from_dict(data: Dict[str, Any]) -> MatchState:
    try:
        stats = data["stats"]
        game = data["current_game"]
        finished = data.get("finished")
        raw = data.get("raw_points")

        return MatchState(
            sets=tuple(_set_record(s) for s in data["sets"]),
            current_game=GameCounters(
                points=_pair(game["points"]),
                in_tiebreak=bool(game["in_tiebreak"]),
                deuce_count=int(game["deuce_count"]),
            ),
            server=check_team(data["server"]),
            stats=MatchStats(
                started_at=float(stats["started_at"]),
                total_points=int(stats["total_points"]),
                points_won=_pair(stats["points_won"]),
                service_points_won=_pair(stats["service_points_won"]),
                breaks=_pair(stats["breaks"]),
                longest_streak=_streak(stats["longest_streak"]),
                current_streak=_streak(stats["current_streak"]),
                point_history=tuple(check_team(t) for t in stats["point_history"]),
            ),
            finished=_result(finished) if finished else None,
            raw_points=RawPointsState(
                points=_pair(raw["points"]),
                serves_this_turn=int(raw["serves_this_turn"]),
                total_serves=int(raw["total_serves"]),
            ) if raw else None,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise MatchFormatError(f"Malformed match state: {e}") from e


# =========================================================
# FILES
# =========================================================

def save_match(path: Path, state: MatchState, rules: MatchRules):
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump({
            "schema_version": SCHEMA_VERSION,
            "rules": rules_to_dict(rules),
            "state": state_to_dict(state),
        }, f, indent=4)

    logger.info("Saved match to %s", path)


def load_match(path: Path) -> Tuple[MatchState, MatchRules]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise MatchFormatError(f"Match file is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MatchFormatError("Match file must contain a JSON object")
    if data.get("schema_version") != SCHEMA_VERSION:
        raise MatchFormatError("Unsupported schema_version")
    if "rules" not in data or "state" not in data:
        raise MatchFormatError("Match file must contain rules and state")

    rules = rules_from_dict(data["rules"], enforce_bounds=False)
    return state_from_dict(data["state"]), rules


# =========================================================
# MATCH SUMMARY
# =========================================================

def _iso(ts: float) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


def _set_label(s: SetRecord) -> str:
    label = f"{s.games.a}-{s.games.b}"
    if s.tiebreak is not None and s.completed:
        label += f" ({s.tiebreak.points.a}-{s.tiebreak.points.b})"
    return label


def match_summary(
    state: MatchState,
    rules: MatchRules,
    ended_at: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Record for the remote match store.

    Scores are sets won in standard play and raw points in Americano.
    """
    ended_at = time.time() if ended_at is None else ended_at

    if isinstance(rules, RawPointsRules):
        scores = state.raw_points.points
        sets = []
    else:
        scores = state.sets_won()
        sets = [_set_label(s) for s in state.sets if s.completed]

    return {
        "mode": rules.scoring_system,
        "team1_score": scores.a,
        "team2_score": scores.b,
        "duration_seconds": max(0, int(ended_at - state.stats.started_at)),
        "started_at": _iso(state.stats.started_at),
        "ended_at": _iso(ended_at),
        "winner": state.finished.winner if state.finished else None,
        "sets": sets,
        "raw_data": state_to_dict(state),
    }


# =========================================================
# CLUB CONFIG
# =========================================================

@dataclass(frozen=True)
class ClubConfig:
    schema_version: str
    club_id: str
    court_id: str
    club_name: str
    theme_id: str
    quick_play_rules: MatchRules
    americano_rules: MatchRules


_CLUB_FIELDS = (
    "schemaVersion",
    "clubId",
    "courtId",
    "clubName",
    "themeId",
    "quickPlayRules",
    "americanoRules",
)


def load_club_config(path: Path) -> ClubConfig:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    missing = [k for k in _CLUB_FIELDS if k not in data]
    if missing:
        raise RuleConfigurationError(f"Missing club config field(s): {missing}")

    if data["schemaVersion"] != CLUB_SCHEMA_VERSION:
        raise RuleConfigurationError("Unsupported club config schemaVersion")

    return ClubConfig(
        schema_version=data["schemaVersion"],
        club_id=str(data["clubId"]),
        court_id=str(data["courtId"]),
        club_name=str(data["clubName"]),
        theme_id=str(data["themeId"]),
        quick_play_rules=rules_from_dict(data["quickPlayRules"]),
        americano_rules=rules_from_dict(data["americanoRules"]),
    )
