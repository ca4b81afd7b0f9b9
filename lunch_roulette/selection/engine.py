"""
Selection Engine
================

A restaurant is **eligible** when it is not blacklisted and it is not inside
its cooldown window::

    last_selected_date is None  or  now - last_selected_date > cooldown_weeks * WEEK_MS

The comparison is strict, so the exact instant the window ends still counts
as cooldown.  The window is always derived from the *current*
``cooldown_weeks``; changing the setting moves every existing stamp's window
with it.

A pick needs at least two eligible restaurants so there is always an
element of chance.  All times are millisecond epochs.
"""

from __future__ import annotations

import math
import random
import time

from ..errors import InsufficientOptions
from ..state.models import Restaurant, ServerState

WEEK_MS = 7 * 24 * 60 * 60 * 1000
MIN_OPTIONS = 2


def now_ms() -> int:
    return int(time.time() * 1000)


def cooldown_window_ms(cooldown_weeks: float) -> float:
    return cooldown_weeks * WEEK_MS


def _cooled_down(restaurant: Restaurant, cooldown_weeks: float, now: float) -> bool:
    last = restaurant.last_selected_date
    return last is None or now - last > cooldown_window_ms(cooldown_weeks)


def select_eligible(
    restaurants: list[Restaurant], cooldown_weeks: float, now: float,
) -> list[Restaurant]:
    """Return the eligible restaurants, in list order."""
    return [
        r for r in restaurants
        if not r.blacklisted and _cooled_down(r, cooldown_weeks, now)
    ]


def is_on_cooldown(restaurant: Restaurant, cooldown_weeks: float, now: float) -> bool:
    return not _cooled_down(restaurant, cooldown_weeks, now)


def cooldown_ends_at(restaurant: Restaurant, cooldown_weeks: float) -> float | None:
    """Millisecond epoch at which the restaurant's cooldown window closes."""
    if restaurant.last_selected_date is None:
        return None
    return restaurant.last_selected_date + cooldown_window_ms(cooldown_weeks)


def pick(eligible: list[Restaurant]) -> Restaurant:
    """Choose one restaurant uniformly at random.

    Raises ``InsufficientOptions`` with fewer than two candidates.
    """
    if len(eligible) < MIN_OPTIONS:
        raise InsufficientOptions()
    index = math.floor(random.random() * len(eligible))
    return eligible[index]


def stamp_selection(
    restaurants: list[Restaurant], restaurant_id: str, now: float,
) -> list[Restaurant]:
    return [
        r.model_copy(update={"last_selected_date": now}) if r.id == restaurant_id else r
        for r in restaurants
    ]


def spin(state: ServerState, now: float | None = None) -> tuple[Restaurant, ServerState]:
    """Pick an eligible restaurant and return it with the updated document.

    *state* itself is never modified; the caller persists the returned one.
    """
    if now is None:
        now = now_ms()
    chosen = pick(select_eligible(state.restaurants, state.cooldown_weeks, now))
    restaurants = stamp_selection(state.restaurants, chosen.id, now)
    stamped = next(r for r in restaurants if r.id == chosen.id)
    return stamped, state.model_copy(update={"restaurants": restaurants})
