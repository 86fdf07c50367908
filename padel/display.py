from __future__ import annotations

from typing import Optional, Tuple

from padel.config import POINT_LABELS, TIEBREAK_CHANGE_ENDS_EVERY, TIEBREAK_TO
from padel.exceptions import RuleConfigurationError
from padel.models import DisplayModel, GameCounters, MatchState, PointSituation, Team
from padel.rules import MatchRules, RawPointsRules, StandardRules
from padel.situation import point_situation


def team_name(team: Team) -> str:
    return f"Team {team}"


def project(state: MatchState, rules: MatchRules) -> DisplayModel:
    """
    Presentation-ready view of ``state``. Read-only.
    """
    winner = state.finished.winner if state.finished else None
    change_ends = change_ends_due(state, rules)

    if isinstance(rules, RawPointsRules):
        raw = state.raw_points
        return DisplayModel(
            points_a=str(raw.points.a),
            points_b=str(raw.points.b),
            games_a=0,
            games_b=0,
            sets_a=0,
            sets_b=0,
            server=state.server,
            raw_points=True,
            status=_status(winner, None, tiebreak=False, deuce_text=None),
            serves_remaining=rules.serves_per_turn - raw.serves_this_turn,
            change_ends=change_ends,
            winner=winner,
        )

    if not isinstance(rules, StandardRules):
        raise RuleConfigurationError(f"Unsupported rules shape: {type(rules).__name__}")

    current_set = state.current_set
    sets_won = state.sets_won()
    situation = point_situation(state, rules)

    if state.current_game.in_tiebreak:
        tb_points = current_set.tiebreak.points
        points_a, points_b = str(tb_points.a), str(tb_points.b)
        deuce, advantage = False, None
    else:
        points_a, points_b, deuce, advantage = _game_labels(state.current_game)

    return DisplayModel(
        points_a=points_a,
        points_b=points_b,
        games_a=current_set.games.a,
        games_b=current_set.games.b,
        sets_a=sets_won.a,
        sets_b=sets_won.b,
        server=state.server,
        tiebreak=state.current_game.in_tiebreak,
        deuce=deuce,
        advantage=advantage,
        situation=situation,
        status=_status(
            winner,
            situation,
            tiebreak=state.current_game.in_tiebreak,
            deuce_text=_deuce_text(state.current_game, rules) if deuce else None,
        ),
        change_ends=change_ends,
        winner=winner,
    )


def _game_labels(game: GameCounters) -> Tuple[str, str, bool, Optional[Team]]:
    a, b = game.points.a, game.points.b

    if a >= 3 and b >= 3:
        if a == b:
            return "40", "40", True, None
        if a > b:
            return "Ad", "40", False, "A"
        return "40", "Ad", False, "B"

    return POINT_LABELS[min(a, 3)], POINT_LABELS[min(b, 3)], False, None


def _deuce_text(game: GameCounters, rules: StandardRules) -> str:
    if rules.deuce_rule == "golden-point":
        return "Golden Point"
    if rules.deuce_rule == "silver-point" and game.deuce_count >= 2:
        return "Silver Point (Sudden Death)"
    return "Deuce"


def _status(
    winner: Optional[Team],
    situation: Optional[PointSituation],
    tiebreak: bool,
    deuce_text: Optional[str],
) -> Optional[str]:
    if winner is not None:
        return f"Match won by {team_name(winner)}"
    if situation is not None:
        label = "Match Point" if situation.kind == "match-point" else "Set Point"
        return f"{label} {team_name(situation.team)}"
    if tiebreak:
        return f"Tiebreak to {TIEBREAK_TO} (win by 2)"
    return deuce_text


# =========================================================
# CHANGE OF ENDS
# =========================================================

def change_ends_due(state: MatchState, rules: MatchRules) -> bool:
    """
    True when the teams should swap sides before the next point.
    """
    if state.finished is not None:
        return False

    if isinstance(rules, RawPointsRules):
        served = state.raw_points.total_serves
        return served > 0 and served % rules.side_swap_every_serves == 0

    game = state.current_game

    if game.in_tiebreak:
        played = state.current_set.tiebreak.points.total
        return played > 0 and played % TIEBREAK_CHANGE_ENDS_EVERY == 0

    if game.points.total > 0:
        return False

    games_played = state.current_set.games.total
    if games_played == 0 and len(state.sets) > 1:
        # First game of a new set follows on from the previous set's count
        games_played = state.sets[-2].games.total

    return games_played % 2 == 1
