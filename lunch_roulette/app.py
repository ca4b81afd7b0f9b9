from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import Callable

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool
from starlette.middleware.sessions import SessionMiddleware

from .activation.dependencies import (
    get_session_id,
    is_unlocked,
    require_activator,
    require_unlocked,
)
from .activation.gate import activate, is_activator
from .config import DEFAULT_ROULETTE_CONFIG, setup_logging
from .errors import IncorrectCode, RouletteError, ValidationError
from .restaurants.models import (
    ActivationRequest,
    ActivationResponse,
    AddRestaurantRequest,
    CooldownRequest,
    EligibleResponse,
    SessionInfo,
    SuggestionResponse,
)
from .restaurants.operations import (
    add_restaurant,
    delete_all,
    remove_restaurant,
    reset_all,
    reset_blacklist,
    reset_cooldown,
    set_cooldown_weeks,
    toggle_blacklist,
)
from .selection.engine import MIN_OPTIONS, now_ms, select_eligible, spin
from .state.merge import merge_partial
from .state.models import ServerState
from .state.store import StateStore, get_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    setup_logging()
    logger.info("Lunch Roulette state file: %s", DEFAULT_ROULETTE_CONFIG.state_path)
    yield


app = FastAPI(title="Lunch Roulette API", version="1.0.0", lifespan=lifespan)
app.add_middleware(SessionMiddleware, secret_key=DEFAULT_ROULETTE_CONFIG.session_secret)

_STATE_RESPONSE = {"response_model": ServerState, "response_model_exclude_none": True}


@app.exception_handler(RouletteError)
async def roulette_error_handler(request: Request, exc: RouletteError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def _mutate(store: StateStore, change: Callable[[ServerState], ServerState]) -> ServerState:
    """Read the whole document, apply *change*, write the whole document back."""
    return store.write(change(store.read()))


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/state", **_STATE_RESPONSE)
def get_state(store: StateStore = Depends(get_store)) -> ServerState:
    return store.read()


@app.put("/state", **_STATE_RESPONSE)
async def put_state(request: Request, store: StateStore = Depends(get_store)) -> ServerState:
    # Unguarded by design: any client may overwrite any field.
    try:
        body = json.loads(await request.body())
    except ValueError as exc:
        raise ValidationError(f"Malformed JSON: {exc}") from exc
    return await run_in_threadpool(_mutate, store, lambda s: merge_partial(s, body))


@app.get("/restaurants/eligible", response_model=EligibleResponse, response_model_exclude_none=True)
def eligible(store: StateStore = Depends(get_store)) -> EligibleResponse:
    state = store.read()
    restaurants = select_eligible(state.restaurants, state.cooldown_weeks, now_ms())
    return EligibleResponse(
        restaurants=restaurants,
        count=len(restaurants),
        can_spin=len(restaurants) >= MIN_OPTIONS,
    )


# ── Activation ───────────────────────────────────────────────────────────


@app.get("/session", response_model=SessionInfo)
def session_info(
    request: Request,
    session_id: str = Depends(get_session_id),
    store: StateStore = Depends(get_store),
) -> SessionInfo:
    state = store.read()
    return SessionInfo(
        session_id=session_id,
        unlocked=is_unlocked(request, state, session_id),
        is_activator=is_activator(state, session_id),
    )


@app.post("/activate", response_model=ActivationResponse)
def activate_session(
    body: ActivationRequest,
    request: Request,
    session_id: str = Depends(get_session_id),
    store: StateStore = Depends(get_store),
) -> ActivationResponse:
    ok, state = activate(body.code, session_id, store.read())
    if not ok:
        raise IncorrectCode()
    store.write(state)
    request.session["unlocked"] = True
    return ActivationResponse(activated=True, activated_by=session_id)


@app.post("/suggestion", response_model=SuggestionResponse, response_model_exclude_none=True)
def suggestion(
    session_id: str = Depends(require_unlocked),
    store: StateStore = Depends(get_store),
) -> SuggestionResponse:
    chosen, state = spin(store.read())
    state = store.write(state)
    logger.info("Session %s spun %r", session_id, chosen.name)
    return SuggestionResponse(restaurant=chosen, state=state)


# ── Activator endpoints ──────────────────────────────────────────────────


@app.post("/restaurants", status_code=201, **_STATE_RESPONSE)
def create_restaurant(
    body: AddRestaurantRequest,
    _session_id: str = Depends(require_activator),
    store: StateStore = Depends(get_store),
) -> ServerState:
    return _mutate(store, lambda s: add_restaurant(s, body.name)[1])


@app.delete("/restaurants", **_STATE_RESPONSE)
def delete_restaurants(
    _session_id: str = Depends(require_activator),
    store: StateStore = Depends(get_store),
) -> ServerState:
    return _mutate(store, delete_all)


@app.post("/restaurants/reset", **_STATE_RESPONSE)
def reset_restaurants(
    _session_id: str = Depends(require_activator),
    store: StateStore = Depends(get_store),
) -> ServerState:
    return _mutate(store, reset_all)


@app.post("/restaurants/blacklist/reset", **_STATE_RESPONSE)
def reset_restaurant_blacklist(
    _session_id: str = Depends(require_activator),
    store: StateStore = Depends(get_store),
) -> ServerState:
    return _mutate(store, reset_blacklist)


@app.delete("/restaurants/{restaurant_id}", **_STATE_RESPONSE)
def delete_restaurant(
    restaurant_id: str,
    _session_id: str = Depends(require_activator),
    store: StateStore = Depends(get_store),
) -> ServerState:
    return _mutate(store, lambda s: remove_restaurant(s, restaurant_id))


@app.post("/restaurants/{restaurant_id}/blacklist", **_STATE_RESPONSE)
def toggle_restaurant_blacklist(
    restaurant_id: str,
    _session_id: str = Depends(require_activator),
    store: StateStore = Depends(get_store),
) -> ServerState:
    return _mutate(store, lambda s: toggle_blacklist(s, restaurant_id))


@app.post("/restaurants/{restaurant_id}/cooldown/reset", **_STATE_RESPONSE)
def reset_restaurant_cooldown(
    restaurant_id: str,
    _session_id: str = Depends(require_activator),
    store: StateStore = Depends(get_store),
) -> ServerState:
    return _mutate(store, lambda s: reset_cooldown(s, restaurant_id))


@app.put("/settings/cooldown", **_STATE_RESPONSE)
def update_cooldown(
    body: CooldownRequest,
    _session_id: str = Depends(require_activator),
    store: StateStore = Depends(get_store),
) -> ServerState:
    return _mutate(store, lambda s: set_cooldown_weeks(s, body.cooldown_weeks))
