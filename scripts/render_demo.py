from padel.models import RallyEvent
from padel.rules import StandardRules
from padel.timeline import build_match_timeline
from render.renderer import ScoreboardRenderer


def main():

    rules = StandardRules(
        deuce_rule="golden-point",
        set_tie_rule="tiebreak",
        sets_target=1,
    )

    events = [
        RallyEvent("A", 3.0),
        RallyEvent("B", 7.0),
        RallyEvent("A", 11.0),
        RallyEvent("A", 15.0),
    ]

    timeline = build_match_timeline(rules, events, starting_server="A")

    renderer = ScoreboardRenderer(
        input_path="input.mp4",
        output_path="output.mp4",
        timeline=timeline
    )

    renderer.render()


if __name__ == "__main__":
    main()
