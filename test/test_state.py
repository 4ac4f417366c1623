"""
State serialization and unit ids.
"""

from backend.engine import HUMAN
from backend.engine.events import GameEvent, unit_moved
from backend.engine.state import City, GameState, ProductionOrder
from backend.engine.utils import generate_initial_game_state, render_map


def test_json_round_trip_preserves_state():
    state = generate_initial_game_state(width=20, height=15, target_cities=8, seed="test")
    home = state.cities[0]
    home.production_order = ProductionOrder("army", 0)
    home.production_queue = ["transport", "army"]
    home.default_production = "army"

    restored = GameState.from_json(state.to_json())

    assert restored.to_dict() == state.to_dict()
    assert restored.cities[0].production_order == ProductionOrder("army", 0)


def test_city_serializes_flat_production_fields():
    city = City(id="c1", x=1, y=2, owner=HUMAN, production_order=ProductionOrder("army", 1))
    data = city.to_dict()
    assert data["current_production"] == "army"
    assert data["production_progress"] == 1
    assert data["production_queue"] == []

    idle = City.from_dict({"id": "c2", "x": 0, "y": 0, "owner": "neutral"})
    assert idle.is_idle
    assert idle.production_queue == []
    assert idle.production_progress == 0


def test_save_and_load(tmp_path):
    state = generate_initial_game_state(width=12, height=10, target_cities=4, seed=7)
    path = tmp_path / "save.json"
    state.save(str(path))
    assert GameState.load(str(path)).to_dict() == state.to_dict()


def test_copy_does_not_alias():
    state = generate_initial_game_state(width=12, height=10, target_cities=4, seed="copy")
    clone = state.copy()
    clone.units[0].x += 1
    clone.fog[0][0] = False
    clone.cities[0].production_queue.append("army")
    assert state.units[0].x != clone.units[0].x
    assert state.cities[0].production_queue == []


def test_unit_ids_are_sequential_per_owner(make_state):
    state = make_state(["..."])
    assert state.generate_unit_id("human", "army") == "human_army_001"
    assert state.generate_unit_id("human", "transport") == "human_transport_002"
    assert state.generate_unit_id("ai", "army") == "ai_army_001"


def test_event_messages_and_round_trip():
    event = unit_moved(3, "human_army_001", "army", HUMAN, (1, 1), (1, 2))
    assert str(event).startswith("Turn 3: ")
    assert GameEvent.from_dict(event.to_dict()) == event


def test_render_map_marks_units_and_fog(make_state):
    state = make_state(["..~"], units=[(HUMAN, "army", 0, 0)], cities=[("c1", 1, 0, "ai")])
    lines = render_map(state, show_fog=False).splitlines()
    assert lines[1] == " 0 AX~"
    assert render_map(state).splitlines()[1] == " 0 ???"
