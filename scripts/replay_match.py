from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from padel.config import MATCHES_DIR
from padel.match_session import MatchSession
from padel.rules import QUICK_PLAY, rules_from_dict
from padel.storage import save_match


def main():
    ap = argparse.ArgumentParser(description="Replay a recorded padel match and print its summary")
    ap.add_argument("points", type=str, help="JSON file: {\"rules\": {...}, \"events\": [{\"team\", \"timestamp\"}]}")
    ap.add_argument("--server", type=str, choices=["A", "B"], default=None)
    ap.add_argument("--save", type=str, default="", help=f"Save the final state (relative paths go under {MATCHES_DIR})")
    ap.add_argument("--debug", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)

    with open(args.points, "r", encoding="utf-8") as f:
        data = json.load(f)

    rules = rules_from_dict(data["rules"]) if "rules" in data else QUICK_PLAY
    session = MatchSession(rules, starting_server=args.server)

    view = session.load_events(data.get("events", []))
    events = session.export_events()
    summary = session.summary(ended_at=events[-1]["timestamp"] if events else None)

    print(f"Mode: {summary['mode']}")
    print(f"Score: {summary['team1_score']} - {summary['team2_score']}")
    for i, s in enumerate(summary["sets"], 1):
        print(f"Set {i}: {s}")
    print(f"Points: {view.points_a} - {view.points_b}")
    if view.status:
        print(view.status)

    if args.save:
        out_path = Path(args.save)
        if not out_path.is_absolute():
            out_path = MATCHES_DIR / out_path
        save_match(out_path, session.state, session.rules)
        print(f"Saved: {out_path}")


if __name__ == "__main__":
    main()
