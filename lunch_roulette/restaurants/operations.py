from __future__ import annotations

import uuid

from ..errors import RestaurantNotFound, ValidationError
from ..state.models import Restaurant, ServerState
from ..state.normalize import is_finite_number

MAX_NAME_LENGTH = 50


def _index_of(restaurants: list[Restaurant], restaurant_id: str) -> int:
    for i, r in enumerate(restaurants):
        if r.id == restaurant_id:
            return i
    raise RestaurantNotFound(f"No restaurant with id {restaurant_id!r}")


def _replace(state: ServerState, restaurants: list[Restaurant]) -> ServerState:
    return state.model_copy(update={"restaurants": restaurants})


def add_restaurant(state: ServerState, name: str) -> tuple[Restaurant, ServerState]:
    """Append a new, active restaurant with a fresh id."""
    name = name.strip()
    if not name:
        raise ValidationError("Please enter a restaurant name.")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError("Name is too long.")
    restaurant = Restaurant(id=str(uuid.uuid4()), name=name, blacklisted=False)
    return restaurant, _replace(state, [*state.restaurants, restaurant])


def remove_restaurant(state: ServerState, restaurant_id: str) -> ServerState:
    _index_of(state.restaurants, restaurant_id)
    return _replace(state, [r for r in state.restaurants if r.id != restaurant_id])


def toggle_blacklist(state: ServerState, restaurant_id: str) -> ServerState:
    restaurants = list(state.restaurants)
    i = _index_of(restaurants, restaurant_id)
    restaurants[i] = restaurants[i].model_copy(update={"blacklisted": not restaurants[i].blacklisted})
    return _replace(state, restaurants)


def reset_cooldown(state: ServerState, restaurant_id: str) -> ServerState:
    restaurants = list(state.restaurants)
    i = _index_of(restaurants, restaurant_id)
    restaurants[i] = restaurants[i].model_copy(update={"last_selected_date": None})
    return _replace(state, restaurants)


def reset_blacklist(state: ServerState) -> ServerState:
    """Bring every excluded restaurant back."""
    return _replace(state, [r.model_copy(update={"blacklisted": False}) for r in state.restaurants])


def reset_all(state: ServerState) -> ServerState:
    """Unblacklist every restaurant and clear every cooldown."""
    return _replace(state, [
        r.model_copy(update={"blacklisted": False, "last_selected_date": None})
        for r in state.restaurants
    ])


def delete_all(state: ServerState) -> ServerState:
    return _replace(state, [])


def set_cooldown_weeks(state: ServerState, cooldown_weeks: float) -> ServerState:
    """Change the cooldown window; existing stamps are measured against the new value."""
    if not is_finite_number(cooldown_weeks) or cooldown_weeks <= 0:
        raise ValidationError("Cooldown must be a positive number of weeks.")
    return state.model_copy(update={"cooldown_weeks": cooldown_weeks})
