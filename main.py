from padel.engine import init_state, score_point
from padel.display import project
from padel.rules import StandardRules

rules = StandardRules(
    deuce_rule="silver-point",
    set_tie_rule="tiebreak",
    sets_target=1,
)

state = init_state(rules, starting_server="A")

# A holds: 4 straight points
for _ in range(4):
    state = score_point(state, rules, "A")

# B game: deuce, advantage A, back to deuce -> sudden death
for team in "BBBAAAAB":
    state = score_point(state, rules, team)

print("At second deuce:")
print(project(state, rules))

state = score_point(state, rules, "B")

print("\nAfter silver point:")
print(project(state, rules))

# Run the set out for A
while not state.is_finished:
    state = score_point(state, rules, "A")

print("\nFinal:")
print(project(state, rules))
print(state.finished)

print("\nScoring after match end is a no-op:")
print(score_point(state, rules, "B") is state)
