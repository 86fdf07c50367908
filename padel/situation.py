from __future__ import annotations

from typing import Optional

from padel.config import GAMES_PER_SET, TIEBREAK_TO
from padel.exceptions import RuleConfigurationError
from padel.models import MatchState, PointSituation, Team, TEAMS, other_team
from padel.rules import MatchRules, StandardRules


def point_situation(state: MatchState, rules: MatchRules) -> Optional[PointSituation]:
    """
    Set point / match point for the next point, if any.

    Looks ahead without scoring: a team is on set point when winning the
    next point would win the current game and that game would win the
    set. When that set would also reach ``sets_target`` it is a match
    point instead, so a one-set match never reports a set point.
    """
    if state.finished is not None or not isinstance(rules, StandardRules):
        return None

    sets_won = state.sets_won()

    for team in TEAMS:
        if not _can_win_game(state, rules, team):
            continue
        if not state.current_game.in_tiebreak and not _game_wins_set(state, team):
            continue
        if sets_won.for_team(team) + 1 >= rules.sets_target:
            return PointSituation("match-point", team)
        return PointSituation("set-point", team)

    return None


def _can_win_game(state: MatchState, rules: StandardRules, team: Team) -> bool:
    game = state.current_game

    if game.in_tiebreak:
        points = state.current_set.tiebreak.points
        own, opp = points.for_team(team), points.for_team(other_team(team))
        return own >= TIEBREAK_TO - 1 and own - opp >= 1

    own = game.points.for_team(team)
    opp = game.points.for_team(other_team(team))
    at_deuce = own >= 3 and opp >= 3 and own == opp
    ahead = own >= 3 and own - opp >= 1

    if rules.deuce_rule == "golden-point":
        return at_deuce or ahead
    if rules.deuce_rule == "silver-point":
        return (at_deuce and game.deuce_count >= 2) or ahead
    if rules.deuce_rule == "advantage":
        return ahead
    raise RuleConfigurationError(f"Unknown deuce rule: {rules.deuce_rule!r}")


def _game_wins_set(state: MatchState, team: Team) -> bool:
    games = state.current_set.games
    own = games.for_team(team) + 1
    opp = games.for_team(other_team(team))
    return own >= GAMES_PER_SET and own - opp >= 2
