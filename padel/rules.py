from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, Union

from padel.config import VALIDATION_BOUNDS
from padel.exceptions import RuleConfigurationError
from padel.models import Team, TEAMS


DeuceRule = Literal["advantage", "golden-point", "silver-point"]
SetTieRule = Literal["tiebreak", "play-on"]
FirstServer = Literal["A", "B", "random"]

DEUCE_RULES = ("advantage", "golden-point", "silver-point")
SET_TIE_RULES = ("tiebreak", "play-on")
FIRST_SERVERS = ("A", "B", "random")


@dataclass(frozen=True)
class StandardRules:
    deuce_rule: DeuceRule
    set_tie_rule: SetTieRule
    sets_target: int
    first_server: FirstServer = "A"

    scoring_system = "standard"


@dataclass(frozen=True)
class RawPointsRules:
    """
    Americano: single running point count, first to ``target_points``.
    """
    target_points: int
    serves_per_turn: int
    side_swap_every_serves: int
    first_server: FirstServer = "A"

    scoring_system = "americano"


MatchRules = Union[StandardRules, RawPointsRules]


QUICK_PLAY = StandardRules(
    deuce_rule="advantage",
    set_tie_rule="tiebreak",
    sets_target=1,
    first_server="random",
)

AMERICANO = RawPointsRules(
    target_points=50,
    serves_per_turn=4,
    side_swap_every_serves=16,
    first_server="random",
)


# =========================================================
# VALIDATION
# =========================================================

def _check_positive(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise RuleConfigurationError(f"{name} must be a positive integer, got {value!r}")


def validate_rules(rules) -> MatchRules:
    """
    Reject anything that is not a well-formed rule configuration.
    Returns the rules unchanged so callers can validate inline.
    """
    if isinstance(rules, StandardRules):
        if rules.deuce_rule not in DEUCE_RULES:
            raise RuleConfigurationError(f"Unknown deuce rule: {rules.deuce_rule!r}")
        if rules.set_tie_rule not in SET_TIE_RULES:
            raise RuleConfigurationError(f"Unknown set tie rule: {rules.set_tie_rule!r}")
        _check_positive("sets_target", rules.sets_target)
    elif isinstance(rules, RawPointsRules):
        _check_positive("target_points", rules.target_points)
        _check_positive("serves_per_turn", rules.serves_per_turn)
        _check_positive("side_swap_every_serves", rules.side_swap_every_serves)
    else:
        raise RuleConfigurationError(f"Unsupported rules shape: {type(rules).__name__}")

    if rules.first_server not in FIRST_SERVERS:
        raise RuleConfigurationError(f"Invalid first server: {rules.first_server!r}")

    return rules


def resolve_first_server(rules: MatchRules, rng: Optional[random.Random] = None) -> Team:
    if rules.first_server == "random":
        return (rng or random).choice(TEAMS)
    return rules.first_server


# =========================================================
# DICT FORM (club configuration / persisted matches)
# =========================================================

_STANDARD_FIELDS = ("deuceRule", "setTieRule", "setsTarget", "firstServer")
_AMERICANO_FIELDS = ("targetPoints", "servesPerTurn", "sideSwapEveryServes", "firstServer")


def _check_bounds(data: Dict[str, Any]) -> None:
    for key, (low, high) in VALIDATION_BOUNDS.items():
        value = data[key]
        if not low <= value <= high:
            raise RuleConfigurationError(f"{key} must be between {low} and {high}")


def rules_from_dict(data: Dict[str, Any], enforce_bounds: bool = True) -> MatchRules:
    if not isinstance(data, dict):
        raise RuleConfigurationError("rules must be a mapping")

    system = data.get("scoringSystem")

    if system == "standard":
        missing = [k for k in _STANDARD_FIELDS if data.get(k) is None]
        if missing:
            raise RuleConfigurationError(f"Missing field(s) for standard padel: {missing}")
        rules = StandardRules(
            deuce_rule=data["deuceRule"],
            set_tie_rule=data["setTieRule"],
            sets_target=data["setsTarget"],
            first_server=data["firstServer"],
        )
    elif system == "americano":
        missing = [k for k in _AMERICANO_FIELDS if data.get(k) is None]
        if missing:
            raise RuleConfigurationError(f"Missing field(s) for americano: {missing}")
        rules = RawPointsRules(
            target_points=data["targetPoints"],
            serves_per_turn=data["servesPerTurn"],
            side_swap_every_serves=data["sideSwapEveryServes"],
            first_server=data["firstServer"],
        )
    else:
        raise RuleConfigurationError(f"Unknown scoring system: {system!r}")

    validate_rules(rules)
    if enforce_bounds and isinstance(rules, RawPointsRules):
        _check_bounds(data)
    return rules


def rules_to_dict(rules: MatchRules) -> Dict[str, Any]:
    if isinstance(rules, StandardRules):
        return {
            "scoringSystem": "standard",
            "deuceRule": rules.deuce_rule,
            "setTieRule": rules.set_tie_rule,
            "setsTarget": rules.sets_target,
            "firstServer": rules.first_server,
        }
    if isinstance(rules, RawPointsRules):
        return {
            "scoringSystem": "americano",
            "targetPoints": rules.target_points,
            "servesPerTurn": rules.serves_per_turn,
            "sideSwapEveryServes": rules.side_swap_every_serves,
            "firstServer": rules.first_server,
        }
    raise RuleConfigurationError(f"Unsupported rules shape: {type(rules).__name__}")
