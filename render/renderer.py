import cv2
import numpy as np
from typing import List, Union

from padel.display import team_name
from padel.models import DisplayModel, MatchSnapshot


SCOREBOARD_WIDTH = 340
SCOREBOARD_HEIGHT = 110
MARGIN = 20

WHITE = (255, 255, 255)
YELLOW = (0, 215, 255)
GREEN = (0, 255, 0)


class ScoreboardRenderer:

    def __init__(self, input_path: str, output_path: str, timeline: List[MatchSnapshot]):
        self.input_path = input_path
        self.output_path = output_path
        self.timeline = timeline

        if not self.timeline:
            raise ValueError("Timeline cannot be empty")

    def render(self):

        cap = cv2.VideoCapture(self.input_path)

        if not cap.isOpened():
            raise RuntimeError("Cannot open input video")

        fps = cap.get(cv2.CAP_PROP_FPS)
        width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

        fourcc = cv2.VideoWriter_fourcc(*"mp4v")
        out = cv2.VideoWriter(self.output_path, fourcc, fps, (width, height))

        frame_count = 0

        try:
            while True:
                ret, frame = cap.read()
                if not ret:
                    break

                current_state = self.snapshot_at(frame_count / fps)
                draw_scoreboard(frame, current_state)

                out.write(frame)
                frame_count += 1
        finally:
            cap.release()
            out.release()

        return frame_count

    def snapshot_at(self, current_time: float) -> MatchSnapshot:
        """
        Latest snapshot whose timestamp is not after ``current_time``.
        Before the first point the first snapshot is shown.
        """
        state_index = 0
        while (
            state_index + 1 < len(self.timeline)
            and current_time >= self.timeline[state_index + 1].timestamp
        ):
            state_index += 1
        return self.timeline[state_index]


# ----------------------------------------------------
# DRAWING
# ----------------------------------------------------

def draw_scoreboard(frame: np.ndarray, state: Union[DisplayModel, MatchSnapshot]) -> np.ndarray:
    """
    Paint the scoreboard box in the bottom-right corner of ``frame``
    (in place) and return the frame.
    """
    height, width = frame.shape[:2]

    x1 = max(0, width - SCOREBOARD_WIDTH - MARGIN)
    y1 = max(0, height - SCOREBOARD_HEIGHT - MARGIN)
    x2 = width - MARGIN
    y2 = height - MARGIN

    # background box
    overlay = frame.copy()
    cv2.rectangle(overlay, (x1, y1), (x2, y2), (0, 0, 0), -1)
    alpha = 0.6
    cv2.addWeighted(overlay, alpha, frame, 1 - alpha, 0, frame)

    font = cv2.FONT_HERSHEY_SIMPLEX

    rows = (
        ("A", y1 + 30, state.sets_a, state.games_a, state.points_a),
        ("B", y1 + 60, state.sets_b, state.games_b, state.points_b),
    )

    for team, y, sets, games, points in rows:
        # serve marker
        if state.server == team and state.winner is None:
            cv2.circle(frame, (x1 + 12, y - 6), 5, YELLOW, -1)

        cv2.putText(frame, team_name(team).upper(), (x1 + 25, y), font, 0.6, WHITE, 2)
        cv2.putText(frame, str(sets), (x2 - 150, y), font, 0.7, WHITE, 2)
        cv2.putText(frame, str(games), (x2 - 110, y), font, 0.7, WHITE, 2)
        cv2.putText(frame, str(points), (x2 - 60, y), font, 0.9, WHITE, 2)

    if state.status:
        cv2.putText(frame, state.status, (x1 + 15, y1 + 90), font, 0.55, WHITE, 2)

    if state.winner is not None:
        winner_text = f"Winner: {team_name(state.winner)}"
        cv2.putText(frame, winner_text, (x1 + 15, max(15, y1 - 10)), font, 0.7, GREEN, 2)

    return frame
