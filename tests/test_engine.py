import pytest

from padel.engine import init_state, score_point
from padel.exceptions import InvalidTeamError
from padel.rules import StandardRules


RULES = StandardRules(
    deuce_rule="advantage",
    set_tie_rule="tiebreak",
    sets_target=1,
)


def create_state(rules=RULES, server="A"):
    return init_state(rules, server, started_at=0.0)


def play(state, sequence, rules=RULES):
    for team in sequence:
        state = score_point(state, rules, team)
    return state


def win_game(state, team, rules=RULES):
    return play(state, team * 4, rules)


def reach_six_all(state, rules=RULES):
    for _ in range(6):
        state = win_game(state, "A", rules)
        state = win_game(state, "B", rules)
    return state


# ---------- INITIAL STATE ----------

def test_initial_state():
    state = create_state()

    assert len(state.sets) == 1
    assert state.current_set.games.a == 0
    assert state.current_set.games.b == 0
    assert state.current_set.completed is False
    assert state.current_game.points.total == 0
    assert state.server == "A"
    assert state.finished is None
    assert state.raw_points is None
    assert state.stats.total_points == 0
    assert state.stats.point_history == ()


# ---------- GAMES ----------

def test_four_straight_points_win_game():
    state = win_game(create_state(), "A")

    assert state.current_set.games.a == 1
    assert state.current_set.games.b == 0
    assert state.current_game.points.a == 0
    assert state.current_game.points.b == 0
    assert state.sets_won().a == 0
    assert state.server == "B"


def test_advantage_then_game():
    state = play(create_state(), "AAABBB")
    assert state.current_game.points.a == 3
    assert state.current_game.points.b == 3

    state = play(state, "A")
    assert state.current_set.games.a == 0
    assert state.current_game.points.a == 4

    state = play(state, "A")
    assert state.current_set.games.a == 1
    assert state.current_game.points.total == 0


def test_multiple_deuce_cycles_do_not_end_game():
    state = play(create_state(), "AAABBB" + "AB" * 5)

    assert state.current_set.games.total == 0
    assert state.current_game.points.a == 8
    assert state.current_game.points.b == 8
    assert state.current_game.deuce_count == 6


def test_server_never_changes_mid_game():
    state = create_state()

    for team in "ABABAB":
        state = score_point(state, RULES, team)
        assert state.server == "A"


# ---------- SETS ----------

def test_six_straight_games_win_set_and_match():
    state = create_state()
    for _ in range(6):
        state = win_game(state, "A")

    assert state.finished is not None
    assert state.finished.winner == "A"
    assert state.finished.reason == "sets"
    assert state.sets_won().a == 1
    assert state.current_set.completed is True
    assert state.current_game.points.total == 0
    assert len(state.sets) == 1


def test_set_won_seven_five():
    state = create_state()
    for _ in range(5):
        state = win_game(state, "A")
        state = win_game(state, "B")

    state = win_game(state, "A")
    assert state.finished is None

    state = win_game(state, "A")
    assert state.finished.winner == "A"
    assert state.current_set.games.a == 7
    assert state.current_set.games.b == 5
    assert state.current_set.tiebreak is None


def test_new_set_opened_when_match_continues():
    rules = StandardRules(deuce_rule="advantage", set_tie_rule="tiebreak", sets_target=2)
    state = create_state(rules)

    for _ in range(6):
        state = win_game(state, "A", rules)

    assert state.finished is None
    assert len(state.sets) == 2
    assert state.sets[0].completed is True
    assert state.sets[0].winner == "A"
    assert state.sets[1].completed is False
    assert state.current_set.games.total == 0
    # Six games served A, B, A, B, A, B: A serves first in the next set
    assert state.server == "A"


# ---------- TIEBREAK ----------

def test_six_all_opens_tiebreak():
    state = reach_six_all(create_state())

    assert state.current_game.in_tiebreak is True
    assert state.current_game.points.total == 0
    assert state.current_set.tiebreak is not None
    assert state.current_set.tiebreak.points.total == 0
    # B served the twelfth game, so A opens the tiebreak
    assert state.current_set.tiebreak.opening_server == "A"
    assert state.server == "A"


def test_tiebreak_won_seven_five():
    state = reach_six_all(create_state())
    state = play(state, "AABBABABABAA")

    assert state.finished.winner == "A"
    assert state.current_set.completed is True
    assert state.current_set.games.a == 7
    assert state.current_set.games.b == 6
    assert state.current_set.tiebreak.points.a == 7
    assert state.current_set.tiebreak.points.b == 5
    assert state.current_game.in_tiebreak is False


def test_tiebreak_needs_two_point_lead():
    state = reach_six_all(create_state())
    state = play(state, "AB" * 6)

    state = play(state, "A")
    assert state.finished is None
    state = play(state, "B")
    assert state.finished is None
    state = play(state, "A")
    assert state.finished is None

    state = play(state, "A")
    assert state.finished.winner == "A"
    assert state.current_set.tiebreak.points.a == 9
    assert state.current_set.tiebreak.points.b == 7


# ---------- LOCK AFTER FINISH ----------

def test_scoring_after_finish_is_noop():
    state = create_state()
    for _ in range(6):
        state = win_game(state, "A")

    assert score_point(state, RULES, "B") is state
    assert score_point(state, RULES, "A") is state


# ---------- INVALID INPUT ----------

@pytest.mark.parametrize("team", ["C", "a", None, 1, "team-1"])
def test_invalid_team_rejected(team):
    state = create_state()

    with pytest.raises(InvalidTeamError):
        score_point(state, RULES, team)


def test_invalid_team_rejected_even_after_finish():
    state = create_state()
    for _ in range(6):
        state = win_game(state, "A")

    with pytest.raises(ValueError):
        score_point(state, RULES, "C")


def test_invalid_starting_server():
    with pytest.raises(InvalidTeamError):
        init_state(RULES, "C")
