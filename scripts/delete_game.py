#!/usr/bin/env python3
"""
Delete a stored game by id.
Usage: python scripts/delete_game.py <game_id>
From repo root with PYTHONPATH=. (uses DATABASE_URL like the API).
"""
import sys
import os

# Allow running from repo root or scripts/
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from backend.api.storage import SqlGameStore


def main() -> None:
    if len(sys.argv) < 2:
        print("Usage: python scripts/delete_game.py <game_id>", file=sys.stderr)
        sys.exit(1)
    game_id = sys.argv[1].strip()
    if not game_id:
        print("Error: provide a game id.", file=sys.stderr)
        sys.exit(1)

    store = SqlGameStore()
    if store.delete(game_id):
        print(f"Deleted game {game_id}.")
    else:
        print(f"No game found with id: {game_id!r}")


if __name__ == "__main__":
    main()
