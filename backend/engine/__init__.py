"""
Island Empire Turn-Based Strategy Game Engine
Core engine without web framework, database, or UI
"""

# Players. Cities may also be neutral; units never are.
HUMAN = "human"
AI = "ai"
NEUTRAL = "neutral"
PLAYERS = (HUMAN, AI)

# Tile kinds
WATER = "water"
LAND = "land"

# Classic 50/50 combat: unit combat strength is display-only.
COMBAT_WIN_CHANCE = 0.5

# Share of all cities a player must hold to win outright.
VICTORY_CITY_SHARE = 0.75
