import pytest

from padel.engine import init_state, score_point
from padel.exceptions import InvalidTeamError, RuleConfigurationError
from padel.match_session import MatchSession
from padel.rules import AMERICANO, StandardRules


RULES = StandardRules(deuce_rule="advantage", set_tie_rule="tiebreak", sets_target=2)


# ---------------------------------------------------------
# Helpers
# ---------------------------------------------------------

def make_session(rules=RULES, **kwargs):
    return MatchSession(rules, starting_server="A", **kwargs)


def make_events(sequence):
    """
    sequence = "ABAA..."
    """
    return [
        {"timestamp": i + 1, "team": t}
        for i, t in enumerate(sequence)
    ]


def score(session, sequence):
    for team in sequence:
        session.score_point(team)


# ---------------------------------------------------------
# Undo
# ---------------------------------------------------------

def test_undo_restores_previous_state():
    session = make_session()
    score(session, "AAB")

    before = session.state
    session.score_point("A")
    assert session.state != before

    assert session.undo() is True
    assert session.state == before
    assert session.state is before


def test_undo_across_set_boundary():
    session = make_session()
    score(session, "A" * 20 + "AAA")  # 5-0, 40-0

    at_set_point = session.state
    session.score_point("A")
    assert session.view().sets_a == 1

    session.undo()

    assert session.state == at_set_point
    view = session.view()
    assert view.sets_a == 0
    assert view.games_a == 5
    assert view.points_a == "40"


def test_undo_until_empty_then_noop():
    session = make_session()
    initial = session.state
    score(session, "ABAB")

    for _ in range(4):
        assert session.undo() is True

    assert session.state == initial
    assert session.can_undo is False
    assert session.undo() is False
    assert session.state == initial


def test_snapshots_are_independent_of_later_points():
    session = make_session()
    score(session, "AB")
    snapshot = session.state
    expected = init_state(RULES, "A", started_at=snapshot.stats.started_at)
    expected = score_point(score_point(expected, RULES, "A"), RULES, "B")

    score(session, "AAAA" * 3)
    for _ in range(12):
        session.undo()

    assert session.state == expected
    assert snapshot == expected


def test_history_is_bounded():
    session = make_session(history_limit=5)
    score(session, "AB" * 5)

    assert session.history_depth == 5

    for _ in range(5):
        assert session.undo() is True
    assert session.undo() is False
    # back to the fifth point: 40-30
    assert session.view().points_a == "40"
    assert session.view().points_b == "30"


def test_default_history_limit():
    session = make_session()
    score(session, "AB" * 40)

    assert session.history_depth == 50


def test_history_limit_must_be_positive():
    with pytest.raises(ValueError):
        make_session(history_limit=0)


# ---------------------------------------------------------
# Finished match
# ---------------------------------------------------------

def test_points_after_finish_are_not_recorded():
    session = make_session()
    score(session, "A" * 48)  # two 6-0 sets

    assert session.state.is_finished
    depth = session.history_depth
    finished = session.state

    view = session.score_point("B")

    assert session.state is finished
    assert session.history_depth == depth
    assert view.winner == "A"
    assert len(session.export_events()) == 48


def test_invalid_team_rejected():
    session = make_session()

    with pytest.raises(InvalidTeamError):
        session.score_point("C")

    assert session.history_depth == 0


# ---------------------------------------------------------
# Reset / rules change
# ---------------------------------------------------------

def test_reset_clears_ledger():
    session = make_session()
    score(session, "AAB")

    session.reset()

    assert session.can_undo is False
    assert session.view().points_a == "0"
    assert session.state.server == "A"
    assert session.export_events() == []

    session.reset(starting_server="B")
    assert session.state.server == "B"


def test_change_rules_reinitialises():
    session = make_session()
    score(session, "AAB")

    session.change_rules(AMERICANO, starting_server="B")

    assert session.rules is AMERICANO
    assert session.can_undo is False
    view = session.view()
    assert view.raw_points is True
    assert view.server == "B"
    assert view.serves_remaining == 4


def test_change_rules_rejects_bad_config():
    session = make_session()
    score(session, "A")

    with pytest.raises(RuleConfigurationError):
        session.change_rules(StandardRules(deuce_rule="nope", set_tie_rule="tiebreak", sets_target=1))

    assert session.rules is RULES
    assert session.history_depth == 1


# ---------------------------------------------------------
# Bulk replay
# ---------------------------------------------------------

def test_events_must_be_list():
    session = make_session()

    with pytest.raises(ValueError):
        session.load_events("not_a_list")


def test_invalid_event_format_missing_key():
    session = make_session()

    with pytest.raises(ValueError):
        session.load_events([{"timestamp": 1}])


def test_invalid_team_atomic():
    session = make_session()
    score(session, "AA")
    before = session.state

    with pytest.raises(ValueError):
        session.load_events([
            {"timestamp": 1, "team": "A"},
            {"timestamp": 2, "team": "wrong"},
        ])

    assert session.state is before
    assert session.history_depth == 2


def test_load_events_replays_and_supports_undo():
    session = make_session()

    view = session.load_events(make_events("AAAA" + "BB"))

    assert view.games_a == 1
    assert view.points_b == "30"
    assert session.history_depth == 6

    session.undo()
    assert session.view().points_b == "15"


def test_load_events_sorts_by_timestamp():
    session = make_session()
    events = [
        {"timestamp": 3, "team": "B"},
        {"timestamp": 1, "team": "A"},
        {"timestamp": 2, "team": "A"},
    ]

    session.load_events(events)

    assert [e["team"] for e in session.export_events()] == ["A", "A", "B"]


def test_load_events_ignores_points_after_match_end():
    session = make_session()

    view = session.load_events(make_events("A" * 48 + "BBBB"))

    assert view.winner == "A"
    assert len(session.export_events()) == 48


def test_export_events_roundtrip():
    session = make_session()
    events = make_events("ABA")

    session.load_events(events)

    assert session.export_events() == events


def test_live_points_are_exported():
    session = make_session()
    session.score_point("A", timestamp=10)
    session.score_point("B", timestamp=12)
    session.undo()

    assert session.export_events() == [{"timestamp": 10.0, "team": "A"}]


# ---------------------------------------------------------
# Summary
# ---------------------------------------------------------

def test_session_summary():
    session = make_session()
    session.load_events(make_events("A" * 48))

    summary = session.summary(ended_at=100.0)

    assert summary["winner"] == "A"
    assert summary["sets"] == ["6-0", "6-0"]
    assert summary["duration_seconds"] == 99
