#!/usr/bin/env python3
"""
Interactive CLI for testing the Island Empire engine.
Run: python test/play_cli.py [seed]
"""

import sys

from backend.engine import HUMAN
from backend.engine.actions import (
    add_to_queue,
    end_turn,
    move_unit,
    produce_unit,
    remove_from_queue,
    set_default_production,
    start_production,
)
from backend.engine.definitions import UNIT_DEFS
from backend.engine.queries import (
    get_game_summary,
    get_movable_units,
    get_producible_unit_types,
    get_unit_move_targets,
)
from backend.engine.reducer import apply_action
from backend.engine.state import GameState
from backend.engine.utils import generate_initial_game_state, get_city, render_map


def clear_screen():
    print("\n" * 2)


def print_header(state):
    """Print game status header."""
    summary = get_game_summary(state)
    players = summary["players"]
    print("=" * 60)
    print(f"  TURN {state.turn} | seed={state.seed}")
    print(f"  Cities: human {players['human']['cities']} | ai {players['ai']['cities']} "
          f"| neutral {players['neutral']['cities']} (of {summary['total_cities']})")
    if state.game_over:
        print(f"  *** GAME OVER - {state.winner.upper()} WINS ***")
    print("=" * 60)


def print_cities(state):
    print("\n--- Your cities ---")
    for city in state.cities:
        if city.owner != HUMAN:
            continue
        if city.current_production:
            required = UNIT_DEFS[city.current_production].production_time
            current = f"{city.current_production} {city.production_progress}/{required}"
        else:
            current = "idle"
        print(f"  {city.id} ({city.x},{city.y}): {current} "
              f"queue={city.production_queue} default={city.default_production}")


def choose(options, prompt):
    """Numbered menu. Returns the chosen option or None."""
    if not options:
        return None
    for i, option in enumerate(options):
        print(f"  {i+1}. {option}")
    print("  0. Cancel")
    try:
        idx = int(input(prompt).strip() or "0") - 1
    except ValueError:
        print("Invalid input")
        return None
    if not (0 <= idx < len(options)):
        return None
    return options[idx]


def prompt_move(state):
    """Handle move action."""
    movable = get_movable_units(state, HUMAN)
    if not movable:
        print("No units can move.")
        return None
    print("\n--- Move Unit ---")
    labels = [f"{u['id']} at ({u['x']},{u['y']}) mv={u['moves']}" for u in movable]
    label = choose(labels, "Select unit #: ")
    if label is None:
        return None
    unit = movable[labels.index(label)]

    targets = get_unit_move_targets(state, unit["id"])
    if not targets:
        print("No legal destinations.")
        return None
    target_labels = [f"({t['x']},{t['y']})" + (" ATTACK" if t["attack"] else "") for t in targets]
    target_label = choose(target_labels, "Select destination #: ")
    if target_label is None:
        return None
    target = targets[target_labels.index(target_label)]
    return move_unit(unit["id"], target["x"], target["y"])


def prompt_city(state):
    city_ids = [c.id for c in state.cities if c.owner == HUMAN]
    return choose(city_ids, "Select city #: ")


def prompt_unit_type(state):
    return choose(get_producible_unit_types(state, HUMAN), "Select unit type #: ")


def prompt_production(state, instant):
    city_id = prompt_city(state)
    if city_id is None:
        return None
    unit_type = prompt_unit_type(state)
    if unit_type is None:
        return None
    return produce_unit(city_id, unit_type) if instant else start_production(city_id, unit_type)


def prompt_queue(state):
    """Handle queue and default production edits."""
    city_id = prompt_city(state)
    if city_id is None:
        return None
    city = get_city(state, city_id)
    op = choose(["add to queue", "remove from queue", "set default", "clear default"], "Select #: ")
    if op == "add to queue":
        unit_type = prompt_unit_type(state)
        return add_to_queue(city_id, unit_type) if unit_type else None
    if op == "remove from queue":
        entry = choose([f"{i}: {t}" for i, t in enumerate(city.production_queue)], "Select entry #: ")
        return remove_from_queue(city_id, int(entry.split(":")[0])) if entry else None
    if op == "set default":
        unit_type = prompt_unit_type(state)
        return set_default_production(city_id, unit_type) if unit_type else None
    if op == "clear default":
        return set_default_production(city_id, None)
    return None


def main_loop(seed=None):
    """Main game loop."""
    print("\n" + "=" * 60)
    print("  ISLAND EMPIRE")
    print("  CLI Test Interface")
    print("=" * 60)

    state = generate_initial_game_state(seed=seed)
    show_fog = True

    while True:
        clear_screen()
        print_header(state)
        print(render_map(state, show_fog=show_fog))
        print_cities(state)

        if state.game_over:
            print("\nGame over! Press Enter to exit.")
            input()
            break

        print("\n--- Actions ---")
        menu = [
            ("m", "Move unit"),
            ("p", "Start production"),
            ("n", "Produce now"),
            ("u", "Queue / default production"),
            ("t", "End turn"),
            ("f", "Toggle fog"),
            ("s", "Save game"),
            ("l", "Load game"),
            ("q", "Quit game"),
        ]
        for key, desc in menu:
            print(f"  [{key}] {desc}")

        choice = input("\nAction: ").strip().lower()
        action = None

        if choice == "q":
            print("Thanks for playing!")
            break
        elif choice == "f":
            show_fog = not show_fog
            continue
        elif choice == "s":
            filename = input("Save filename (default: save.json): ").strip() or "save.json"
            state.save(filename)
            print(f"Game saved to {filename}")
            input("Press Enter to continue...")
            continue
        elif choice == "l":
            filename = input("Load filename (default: save.json): ").strip() or "save.json"
            try:
                state = GameState.load(filename)
            except (OSError, ValueError) as ex:
                print(f"Could not load {filename}: {ex}")
                input("Press Enter to continue...")
            continue
        elif choice == "m":
            action = prompt_move(state)
        elif choice == "p":
            action = prompt_production(state, instant=False)
        elif choice == "n":
            action = prompt_production(state, instant=True)
        elif choice == "u":
            action = prompt_queue(state)
        elif choice == "t":
            action = end_turn()

        if action is None:
            continue

        result = apply_action(state, action)
        if not result.success:
            print(f"\nInvalid action: {result.error}")
            input("Press Enter to continue...")
            continue

        state = result.state
        if result.events:
            print("\n--- Events ---")
            for e in result.events:
                print(f"  {e}")
            input("\nPress Enter to continue...")


if __name__ == "__main__":
    try:
        main_loop(sys.argv[1] if len(sys.argv) > 1 else None)
    except KeyboardInterrupt:
        print("\n\nGame interrupted. Goodbye!")
        sys.exit(0)
