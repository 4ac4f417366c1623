"""
FastAPI backend for Island Empire.
Provides REST API endpoints for game state management and actions.
"""

from dataclasses import asdict
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .storage import GameStore, create_store

from backend.config import (
    DEFAULT_MAP_HEIGHT,
    DEFAULT_MAP_WIDTH,
    DEFAULT_TARGET_CITIES,
    GAME_STORE,
    MAX_MAP_SIDE,
)
from backend.engine.actions import (
    Action,
    add_to_queue,
    end_turn,
    move_unit,
    produce_unit,
    remove_from_queue,
    set_default_production,
    start_production,
)
from backend.engine.definitions import UNIT_DEFS
from backend.engine.movement import ERR_UNIT_NOT_FOUND
from backend.engine.production import ERR_CITY_NOT_FOUND
from backend.engine.queries import get_available_actions, get_player_stats
from backend.engine.reducer import apply_action
from backend.engine.rng import SeededRandom
from backend.engine.state import GameState
from backend.engine.utils import generate_initial_game_state

app = FastAPI(
    title="Island Empire API",
    description="Backend API for Island Empire - a turn-based island conquest game",
    version="1.0.0",
)

# CORS configuration for frontend
CORS_ORIGINS = ["http://localhost:5173", "http://localhost:5174", "http://localhost:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

# Engine errors that mean "no such thing" rather than "not allowed"
NOT_FOUND_ERRORS = {ERR_UNIT_NOT_FOUND, ERR_CITY_NOT_FOUND}


@app.middleware("http")
async def log_requests(request, call_next):
    """Log method and path so 500s can be traced to the failing endpoint."""
    method = getattr(request, "method", "?")
    url = getattr(request, "url", None)
    path = url.path if url else "?"
    try:
        response = await call_next(request)
        if response.status_code >= 500:
            print(f"[500] {method} {path}", flush=True)
        return response
    except Exception:
        print(f"[500] {method} {path} (exception)", flush=True)
        raise


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    """Return 500 with CORS headers and full traceback so the frontend can read the error."""
    import traceback
    tb = traceback.format_exc()
    traceback.print_exc()
    origin = request.headers.get("origin")
    allow_origin = origin if origin in CORS_ORIGINS else CORS_ORIGINS[0]
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "traceback": tb},
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true",
        },
    )


# ===== Pydantic Models =====

class CreateGameRequest(BaseModel):
    width: int = DEFAULT_MAP_WIDTH
    height: int = DEFAULT_MAP_HEIGHT
    target_cities: int = DEFAULT_TARGET_CITIES
    """Same seed, same map. Omitted = random seed (returned in state.seed)."""
    seed: str | int | None = None


class MoveRequest(BaseModel):
    unit_id: str
    target_x: int
    target_y: int


class ProduceRequest(BaseModel):
    city_id: str
    unit_type: str


class DefaultProductionRequest(BaseModel):
    city_id: str
    unit_type: str | None = None


class RemoveFromQueueRequest(BaseModel):
    city_id: str
    index: int


# ===== Helper Functions =====

def get_store(request: Request) -> GameStore:
    """Dependency: the store built at startup (tests may install their own on app.state)."""
    return request.app.state.store


def load_game(store: GameStore, game_id: str) -> GameState:
    """Get game state from the store; raise 404 if not found."""
    state = store.get(game_id)
    if state is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return state


def state_for_response(state: GameState) -> dict[str, Any]:
    """State dict including computed player_stats for the UI."""
    out = state.to_dict()
    out["player_stats"] = get_player_stats(state)
    return out


def _apply_and_save(store: GameStore, game_id: str, action: Action) -> dict[str, Any]:
    """
    Load, apply, and save under the game's lock.
    Rule violations become 400 (404 for a missing unit or city); nothing is saved.
    """
    with store.lock(game_id):
        state = load_game(store, game_id)
        result = apply_action(state, action, SeededRandom())
        if not result.success:
            status = 404 if result.error in NOT_FOUND_ERRORS else 400
            raise HTTPException(status_code=status, detail=result.error)
        store.put(game_id, result.state)
    return {
        "state": state_for_response(result.state),
        "combat": result.combat.to_dict() if result.combat else None,
        "events": [e.to_dict() for e in result.events],
    }


@app.on_event("startup")
def on_startup():
    if getattr(app.state, "store", None) is None:
        app.state.store = create_store(GAME_STORE)


# ===== API Endpoints =====

@app.get("/")
def root():
    return {"message": "Island Empire API", "version": "1.0.0"}


@app.get("/unit-types")
def get_unit_types():
    """Unit table: cost (cities required), movement, combat, production_time, category."""
    return {unit_id: asdict(unit_def) for unit_id, unit_def in UNIT_DEFS.items()}


@app.post("/games")
def create_game(request: CreateGameRequest, store: GameStore = Depends(get_store)):
    """Generate a new map and store it."""
    if request.width < 1 or request.height < 1:
        raise HTTPException(status_code=400, detail="Map width and height must be positive")
    if request.width > MAX_MAP_SIDE or request.height > MAX_MAP_SIDE:
        raise HTTPException(status_code=400, detail=f"Map width and height must not exceed {MAX_MAP_SIDE}")
    if request.target_cities < 0:
        raise HTTPException(status_code=400, detail="target_cities must not be negative")
    state = generate_initial_game_state(
        width=request.width,
        height=request.height,
        target_cities=request.target_cities,
        seed=request.seed,
    )
    game_id = store.create(state)
    return {"game_id": game_id, "state": state_for_response(state)}


@app.get("/games/{game_id}")
def get_game_state(game_id: str, store: GameStore = Depends(get_store)):
    state = load_game(store, game_id)
    return {"game_id": game_id, "state": state_for_response(state)}


@app.delete("/games/{game_id}")
def delete_game(game_id: str, store: GameStore = Depends(get_store)):
    with store.lock(game_id):
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="Game not found")
    return {"message": f"Game {game_id} deleted"}


@app.get("/games/{game_id}/available-actions")
def get_game_available_actions(game_id: str, store: GameStore = Depends(get_store)):
    """Movable units with their legal targets, and production options per human city."""
    state = load_game(store, game_id)
    return get_available_actions(state)


@app.post("/games/{game_id}/move")
def do_move(game_id: str, request: MoveRequest, store: GameStore = Depends(get_store)):
    """Move a unit one tile; moving onto an enemy unit attacks it."""
    return _apply_and_save(store, game_id, move_unit(request.unit_id, request.target_x, request.target_y))


@app.post("/games/{game_id}/produce")
def do_start_production(game_id: str, request: ProduceRequest, store: GameStore = Depends(get_store)):
    """Start timed production in an idle city."""
    return _apply_and_save(store, game_id, start_production(request.city_id, request.unit_type))


@app.post("/games/{game_id}/produce-now")
def do_produce_now(game_id: str, request: ProduceRequest, store: GameStore = Depends(get_store)):
    """Instant production: the unit is placed immediately."""
    return _apply_and_save(store, game_id, produce_unit(request.city_id, request.unit_type))


@app.post("/games/{game_id}/set-default-production")
def do_set_default_production(
    game_id: str,
    request: DefaultProductionRequest,
    store: GameStore = Depends(get_store),
):
    return _apply_and_save(store, game_id, set_default_production(request.city_id, request.unit_type))


@app.post("/games/{game_id}/add-to-queue")
def do_add_to_queue(game_id: str, request: ProduceRequest, store: GameStore = Depends(get_store)):
    return _apply_and_save(store, game_id, add_to_queue(request.city_id, request.unit_type))


@app.post("/games/{game_id}/remove-from-queue")
def do_remove_from_queue(
    game_id: str,
    request: RemoveFromQueueRequest,
    store: GameStore = Depends(get_store),
):
    return _apply_and_save(store, game_id, remove_from_queue(request.city_id, request.index))


@app.post("/games/{game_id}/end-turn")
def do_end_turn(game_id: str, store: GameStore = Depends(get_store)):
    """End the human turn: production tick, opponent turn, victory check."""
    return _apply_and_save(store, game_id, end_turn())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
