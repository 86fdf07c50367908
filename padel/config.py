import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
MATCHES_DIR = Path(os.getenv("PADEL_MATCHES_DIR") or PROJECT_ROOT / "matches")

SCHEMA_VERSION = 1
CLUB_SCHEMA_VERSION = "1.0"

GAMES_PER_SET = 6
TIEBREAK_TO = 7
TIEBREAK_CHANGE_ENDS_EVERY = 6
POINT_LABELS = ("0", "15", "30", "40")

DEFAULT_UNDO_LIMIT = 50


def _undo_limit_from_env(value):
    if not value:
        return DEFAULT_UNDO_LIMIT
    try:
        limit = int(value)
    except ValueError:
        limit = 0
    if limit < 1:
        logger.warning(
            "Ignoring PADEL_UNDO_LIMIT=%r, using %d", value, DEFAULT_UNDO_LIMIT
        )
        return DEFAULT_UNDO_LIMIT
    return limit


UNDO_LIMIT = _undo_limit_from_env(os.getenv("PADEL_UNDO_LIMIT"))

# Product limits for Americano setups entered on the court display
VALIDATION_BOUNDS = {
    "servesPerTurn": (2, 6),
    "sideSwapEveryServes": (8, 32),
    "targetPoints": (10, 100),
}
