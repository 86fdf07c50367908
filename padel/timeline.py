from typing import Iterable, List, Optional

from padel.display import project
from padel.engine import init_state, score_point
from padel.models import MatchSnapshot, MatchState, RallyEvent, Team
from padel.rules import MatchRules


def snapshot_of(state: MatchState, rules: MatchRules, timestamp: float) -> MatchSnapshot:
    view = project(state, rules)

    return MatchSnapshot(
        timestamp=timestamp,
        point_number=state.stats.total_points,
        set_number=len(state.sets),
        points_a=view.points_a,
        points_b=view.points_b,
        games_a=view.games_a,
        games_b=view.games_b,
        sets_a=view.sets_a,
        sets_b=view.sets_b,
        server=view.server,
        is_finished=state.is_finished,
        winner=view.winner,
        status=view.status,
    )


def build_match_timeline(
    rules: MatchRules,
    events: Iterable[RallyEvent],
    starting_server: Optional[Team] = None,
) -> List[MatchSnapshot]:
    """
    Replays a match from scratch using rally events.
    Returns one snapshot after each point, stopping at match end.
    Does NOT mutate external state.
    """
    events = list(events)

    state = init_state(
        rules,
        starting_server,
        started_at=events[0].timestamp if events else None,
    )

    timeline: List[MatchSnapshot] = []
    last_timestamp = None

    for event in events:

        if last_timestamp is not None and event.timestamp < last_timestamp:
            raise ValueError("Event timestamp must be non-decreasing")
        last_timestamp = event.timestamp

        state = score_point(state, rules, event.team)

        timeline.append(snapshot_of(state, rules, event.timestamp))

        if state.is_finished:
            break

    return timeline
