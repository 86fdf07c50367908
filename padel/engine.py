from __future__ import annotations

import logging
import random
import time
from dataclasses import replace
from typing import Optional

from padel.config import GAMES_PER_SET, TIEBREAK_TO
from padel.exceptions import RuleConfigurationError
from padel.models import (
    GameCounters,
    MatchResult,
    MatchState,
    MatchStats,
    RawPointsState,
    SetRecord,
    Streak,
    Team,
    TeamPair,
    TiebreakScore,
    check_team,
    other_team,
)
from padel.rules import MatchRules, RawPointsRules, StandardRules, resolve_first_server, validate_rules

logger = logging.getLogger(__name__)


# =========================================================
# PUBLIC API
# =========================================================

def init_state(
    rules: MatchRules,
    starting_server: Optional[Team] = None,
    started_at: Optional[float] = None,
    rng: Optional[random.Random] = None,
) -> MatchState:
    """
    Fresh match state for ``rules``.

    ``starting_server`` overrides ``rules.first_server``; a "random"
    first server is drawn from ``rng``.
    """
    validate_rules(rules)

    if starting_server is None:
        server = resolve_first_server(rules, rng)
    else:
        server = check_team(starting_server)

    return MatchState(
        sets=(SetRecord(),),
        current_game=GameCounters(),
        server=server,
        stats=MatchStats(started_at=time.time() if started_at is None else started_at),
        raw_points=RawPointsState() if isinstance(rules, RawPointsRules) else None,
    )


def score_point(state: MatchState, rules: MatchRules, team: Team) -> MatchState:
    """
    Award one point to ``team`` and return the resulting state.

    The input is never modified. Once the match is finished the same
    state object is returned.
    """
    check_team(team)

    if state.finished is not None:
        return state

    state = replace(state, stats=_update_stats(state.stats, state.server, team))

    if isinstance(rules, RawPointsRules):
        return _score_raw_point(state, rules, team)
    if isinstance(rules, StandardRules):
        if state.current_game.in_tiebreak:
            return _score_tiebreak_point(state, rules, team)
        return _score_game_point(state, rules, team)

    raise RuleConfigurationError(f"Unsupported rules shape: {type(rules).__name__}")


# =========================================================
# STATS
# =========================================================

def _update_stats(stats: MatchStats, server: Team, team: Team) -> MatchStats:
    if stats.current_streak.team == team:
        current = Streak(team, stats.current_streak.length + 1)
    else:
        current = Streak(team, 1)

    longest = stats.longest_streak
    if current.length > longest.length:
        longest = current

    service_points = stats.service_points_won
    if server == team:
        service_points = service_points.add(team)

    return replace(
        stats,
        total_points=stats.total_points + 1,
        points_won=stats.points_won.add(team),
        service_points_won=service_points,
        current_streak=current,
        longest_streak=longest,
        point_history=stats.point_history + (team,),
    )


def _record_break(state: MatchState, winner: Team) -> MatchState:
    if winner == state.server:
        return state
    return replace(state, stats=replace(state.stats, breaks=state.stats.breaks.add(winner)))


# =========================================================
# AMERICANO
# =========================================================

def _score_raw_point(state: MatchState, rules: RawPointsRules, team: Team) -> MatchState:
    raw = state.raw_points or RawPointsState()

    points = raw.points.add(team)
    serves_this_turn = raw.serves_this_turn + 1
    server = state.server

    if serves_this_turn >= rules.serves_per_turn:
        server = other_team(server)
        serves_this_turn = 0

    finished = None
    if points.for_team(team) >= rules.target_points:
        finished = MatchResult(team, "points")
        logger.info("Match won by %s on points (%d-%d)", team, points.a, points.b)

    return replace(
        state,
        server=server,
        finished=finished,
        raw_points=RawPointsState(
            points=points,
            serves_this_turn=serves_this_turn,
            total_serves=raw.total_serves + 1,
        ),
    )


# =========================================================
# TIEBREAK
# =========================================================

def tiebreak_server(opening_server: Team, points_played: int) -> Team:
    """
    Server of the next tiebreak point: the opening server takes the
    first point, then service changes every two points.
    """
    if points_played == 0:
        return opening_server
    pair_index = (points_played - 1) // 2
    return opening_server if pair_index % 2 == 1 else other_team(opening_server)


def _score_tiebreak_point(state: MatchState, rules: StandardRules, team: Team) -> MatchState:
    current_set = state.current_set
    tiebreak = current_set.tiebreak

    points = tiebreak.points.add(team)
    tiebreak = replace(tiebreak, points=points)
    current_set = replace(current_set, tiebreak=tiebreak)

    winner = _lead_winner(points, TIEBREAK_TO)

    if winner is None:
        return replace(
            _with_current_set(state, current_set),
            server=tiebreak_server(tiebreak.opening_server, points.total),
        )

    logger.debug("Tiebreak won by %s (%d-%d)", winner, points.a, points.b)

    state = _record_break(_with_current_set(state, current_set), winner)
    current_set = replace(current_set, games=current_set.games.add(winner))

    # Winning the tiebreak always wins the set
    return _complete_set(_with_current_set(state, current_set), rules, winner)


# =========================================================
# REGULAR GAME
# =========================================================

def _at_deuce(points: TeamPair) -> bool:
    return points.a >= 3 and points.b >= 3 and points.a == points.b


def _lead_winner(points: TeamPair, minimum: int) -> Optional[Team]:
    if points.a >= minimum and points.a - points.b >= 2:
        return "A"
    if points.b >= minimum and points.b - points.a >= 2:
        return "B"
    return None


def _score_game_point(state: MatchState, rules: StandardRules, team: Team) -> MatchState:
    game = state.current_game
    was_deuce = _at_deuce(game.points)

    points = game.points.add(team)
    deuce_count = game.deuce_count
    if not was_deuce and _at_deuce(points):
        deuce_count += 1

    game = replace(game, points=points, deuce_count=deuce_count)

    if rules.deuce_rule == "golden-point":
        winner = team if was_deuce else _lead_winner(points, 4)
    elif rules.deuce_rule == "silver-point":
        if was_deuce and deuce_count >= 2:
            winner = team
        else:
            winner = _lead_winner(points, 4)
    elif rules.deuce_rule == "advantage":
        winner = _lead_winner(points, 4)
    else:
        raise RuleConfigurationError(f"Unknown deuce rule: {rules.deuce_rule!r}")

    if winner is None:
        return replace(state, current_game=game)

    return _win_game(state, rules, winner)


def _win_game(state: MatchState, rules: StandardRules, winner: Team) -> MatchState:
    state = _record_break(state, winner)

    current_set = state.current_set
    games = current_set.games.add(winner)
    current_set = replace(current_set, games=games)
    state = _with_current_set(state, current_set)

    logger.debug("Game won by %s, games %d-%d", winner, games.a, games.b)

    if games.a == GAMES_PER_SET and games.b == GAMES_PER_SET:
        if rules.set_tie_rule == "tiebreak":
            return _open_tiebreak(state)
        elif rules.set_tie_rule != "play-on":
            raise RuleConfigurationError(f"Unknown set tie rule: {rules.set_tie_rule!r}")

    set_winner = _lead_winner(games, GAMES_PER_SET)
    if set_winner is not None:
        return _complete_set(state, rules, set_winner)

    return replace(state, server=other_team(state.server), current_game=GameCounters())


def _open_tiebreak(state: MatchState) -> MatchState:
    # The team that would have served the next game opens the tiebreak
    opening_server = other_team(state.server)
    current_set = replace(
        state.current_set,
        tiebreak=TiebreakScore(points=TeamPair(), opening_server=opening_server),
    )

    logger.debug("Tiebreak started, %s to serve", opening_server)

    return replace(
        _with_current_set(state, current_set),
        server=opening_server,
        current_game=GameCounters(in_tiebreak=True),
    )


# =========================================================
# SET / MATCH
# =========================================================

def _with_current_set(state: MatchState, current_set: SetRecord) -> MatchState:
    return replace(state, sets=state.sets[:-1] + (current_set,))


def _complete_set(state: MatchState, rules: StandardRules, winner: Team) -> MatchState:
    current_set = replace(state.current_set, completed=True, winner=winner)
    state = replace(_with_current_set(state, current_set), current_game=GameCounters())

    sets_won = state.sets_won()

    logger.debug(
        "Set %d won by %s (%d-%d)",
        len(state.sets), winner, current_set.games.a, current_set.games.b,
    )

    if sets_won.for_team(winner) >= rules.sets_target:
        logger.info("Match won by %s on sets (%d-%d)", winner, sets_won.a, sets_won.b)
        return replace(state, finished=MatchResult(winner, "sets"))

    return replace(
        state,
        sets=state.sets + (SetRecord(),),
        server=other_team(state.server),
    )
