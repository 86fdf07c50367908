import logging
import random
import time
from collections import deque
from typing import Deque, Dict, List, Optional

from padel.config import UNDO_LIMIT
from padel.display import project
from padel.engine import init_state, score_point
from padel.models import DisplayModel, MatchState, PointSituation, RallyEvent, Team, check_team
from padel.rules import MatchRules, resolve_first_server, validate_rules
from padel.situation import point_situation
from padel.storage import match_summary

logger = logging.getLogger(__name__)


class MatchSession:
    """
    Single live match on one court.

    Responsibilities:
    - Own the live MatchState and its rules
    - Keep a bounded undo ledger of prior states
    - Bulk replay rally events (atomic)
    - Export the awarded points
    """

    def __init__(
        self,
        rules: MatchRules,
        starting_server: Optional[Team] = None,
        history_limit: int = UNDO_LIMIT,
        rng: Optional[random.Random] = None,
    ):
        if history_limit <= 0:
            raise ValueError("history_limit must be positive")

        self._rules = validate_rules(rules)
        self._rng = rng
        self._history_limit = history_limit
        self._starting_server = self._pick_server(starting_server)
        self._state = init_state(self._rules, self._starting_server)
        self._history: Deque[MatchState] = deque(maxlen=history_limit)
        self._events: List[RallyEvent] = []

    # ---------------------------------------------------------
    # Core API
    # ---------------------------------------------------------

    @property
    def rules(self) -> MatchRules:
        return self._rules

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def history_depth(self) -> int:
        return len(self._history)

    @property
    def can_undo(self) -> bool:
        return bool(self._history)

    def score_point(self, team: Team, timestamp: Optional[float] = None) -> DisplayModel:
        check_team(team)

        previous = self._state
        current = score_point(previous, self._rules, team)

        # Points after the match is over change nothing and are not recorded
        if current is not previous:
            self._history.append(previous)
            self._state = current
            self._events.append(
                RallyEvent(team=team, timestamp=self._event_time(timestamp))
            )

        return self.view()

    def undo(self) -> bool:
        if not self._history:
            return False

        self._state = self._history.pop()
        if self._events:
            self._events.pop()

        logger.info("Point undone, %d snapshot(s) left", len(self._history))
        return True

    def view(self) -> DisplayModel:
        return project(self._state, self._rules)

    def situation(self) -> Optional[PointSituation]:
        return point_situation(self._state, self._rules)

    def summary(self, ended_at: Optional[float] = None) -> Dict:
        return match_summary(self._state, self._rules, ended_at=ended_at)

    # ---------------------------------------------------------
    # Re-initialisation
    # ---------------------------------------------------------

    def reset(self, starting_server: Optional[Team] = None):
        if starting_server is not None:
            self._starting_server = check_team(starting_server)
        self._state = init_state(self._rules, self._starting_server)
        self._history.clear()
        self._events = []
        logger.info("Match reset, %s to serve", self._starting_server)

    def change_rules(self, rules: MatchRules, starting_server: Optional[Team] = None):
        self._rules = validate_rules(rules)
        self._starting_server = self._pick_server(starting_server)
        self.reset()

    # ---------------------------------------------------------
    # Bulk replay
    # ---------------------------------------------------------

    def load_events(self, events: List[Dict]) -> DisplayModel:
        """
        Replace the match with a replay of ``events``.
        Atomic: if any event fails -> no state mutation.
        """
        if not isinstance(events, list):
            raise ValueError("events must be a list")

        rally_events = []
        for e in events:
            if not isinstance(e, dict) or "timestamp" not in e or "team" not in e:
                raise ValueError("invalid event format")

            rally_events.append(
                RallyEvent(team=check_team(e["team"]), timestamp=float(e["timestamp"]))
            )

        rally_events.sort(key=lambda x: x.timestamp)

        state = init_state(
            self._rules,
            self._starting_server,
            started_at=rally_events[0].timestamp if rally_events else None,
        )
        history: Deque[MatchState] = deque(maxlen=self._history_limit)
        applied: List[RallyEvent] = []

        for event in rally_events:
            next_state = score_point(state, self._rules, event.team)
            if next_state is state:
                break
            history.append(state)
            applied.append(event)
            state = next_state

        # Everything succeeded -> commit
        self._state = state
        self._history = history
        self._events = applied

        return self.view()

    def export_events(self) -> List[Dict]:
        return [
            {"timestamp": e.timestamp, "team": e.team}
            for e in self._events
        ]

    # ---------------------------------------------------------
    # Helpers
    # ---------------------------------------------------------

    def _pick_server(self, starting_server: Optional[Team]) -> Team:
        if starting_server is not None:
            return check_team(starting_server)
        return resolve_first_server(self._rules, self._rng)

    def _event_time(self, timestamp: Optional[float]) -> float:
        return time.time() if timestamp is None else float(timestamp)
