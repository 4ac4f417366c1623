"""
Main entry point for the Island Empire game engine.
Demonstrates core functionality with a seeded game: map generation, moves,
timed production, and the opponent playing a few turns.
"""

from backend.engine import AI, HUMAN
from backend.engine.actions import end_turn, move_unit, set_default_production, start_production
from backend.engine.queries import get_game_summary, get_unit_move_targets
from backend.engine.reducer import apply_action
from backend.engine.rng import SeededRandom
from backend.engine.utils import count_cities, generate_initial_game_state, print_game_state

DEMO_SEED = "test"
DEMO_TURNS = 10


def print_events(events):
    for e in events:
        print(f"  - {e}")


def main():
    print("Island Empire Turn-Based Strategy Game Engine")
    print("=" * 60)

    state = generate_initial_game_state(seed=DEMO_SEED)
    # Combat coin flips share one seeded stream so the demo replays identically
    rng = SeededRandom(DEMO_SEED)

    print("\n[INITIAL STATE]")
    print_game_state(state, show_fog=False, verbose=True)

    # ===== SCENARIO 1: Timed production with a default =====
    print("\n[SCENARIO 1: Timed Production]")
    home = next(c for c in state.cities if c.owner == HUMAN)
    result = apply_action(state, start_production(home.id, "army"), rng)
    print(f"Start army in {home.id}: success={result.success} error={result.error}")
    state = result.state
    state = apply_action(state, set_default_production(home.id, "army"), rng).state
    print(f"{home.id} will keep building armies by default")

    # ===== SCENARIO 2: Play turns, moving the starting army =====
    print("\n[SCENARIO 2: Moves + End Turn]")
    for _ in range(DEMO_TURNS):
        if state.game_over:
            break
        for unit in [u for u in state.units if u.owner == HUMAN]:
            targets = get_unit_move_targets(state, unit.id)
            if not targets:
                continue
            # Prefer attacks, then the first legal step
            target = next((t for t in targets if t["attack"]), targets[0])
            result = apply_action(state, move_unit(unit.id, target["x"], target["y"]), rng)
            if result.success:
                state = result.state
                print_events(result.events)

        print(f"\nEnding turn {state.turn}...")
        result = apply_action(state, end_turn(), rng)
        state = result.state
        print_events(result.events)

    print("\n[FINAL STATE]")
    print_game_state(state, show_fog=False, verbose=True)

    # ===== Summary =====
    summary = get_game_summary(state)
    print("=" * 60)
    print(f"Turn {summary['turn']}: human cities={count_cities(state, HUMAN)} "
          f"ai cities={count_cities(state, AI)} game_over={summary['game_over']} "
          f"winner={summary['winner']}")
    print("=" * 60)


if __name__ == "__main__":
    main()
