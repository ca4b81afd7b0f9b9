from __future__ import annotations

import math
from typing import Any

from ..config import DEFAULT_COOLDOWN_WEEKS
from .models import Restaurant, ServerState


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_finite_number(value: Any) -> bool:
    """True for an int or float (not bool) that fits in a finite float."""
    if not _is_number(value):
        return False
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def _coerce_number(value: Any) -> float:
    """Loose numeric coercion: bools count as 1/0, numeric strings are parsed.

    Anything else that cannot be read as a number becomes NaN.
    """
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if _is_number(value):
        return value
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return math.nan
    return math.nan


def _normalize_cooldown(value: Any) -> int | float:
    weeks = _coerce_number(value)
    if not is_finite_number(weeks) or weeks <= 0:
        return DEFAULT_COOLDOWN_WEEKS
    # Keep whole numbers as ints so the document reads {"cooldownWeeks": 2}
    if isinstance(weeks, float) and weeks.is_integer():
        return int(weeks)
    return weeks


def _normalize_restaurant(raw: Any) -> Restaurant | None:
    if not isinstance(raw, dict):
        return None
    rid = raw.get("id")
    name = raw.get("name")
    if not isinstance(rid, str) or not isinstance(name, str):
        return None

    last = raw.get("lastSelectedDate")
    if not is_finite_number(last):
        last = None

    return Restaurant(
        id=rid,
        name=name,
        blacklisted=bool(raw.get("blacklisted", False)),
        last_selected_date=last,
    )


def normalize_state(raw: Any) -> ServerState:
    """
    Sanitize an arbitrary JSON-shaped value into a valid ``ServerState``.

    - Non-list ``restaurants`` becomes an empty list.
    - Entries without a string ``id`` and ``name`` are dropped, as are later
      entries repeating an id already seen.
    - ``blacklisted`` is coerced to bool, ``lastSelectedDate`` is kept only if
      it is a finite number.
    - ``cooldownWeeks`` falls back to 2 unless it coerces to a positive,
      finite number.
    - ``activatedBy`` is kept only if it is a string.

    Unknown fields are dropped. Normalizing an already-normalized document
    returns an equal document.
    """
    if isinstance(raw, ServerState):
        raw = raw.to_document()
    if not isinstance(raw, dict):
        raw = {}

    restaurants: list[Restaurant] = []
    seen: set[str] = set()
    raw_restaurants = raw.get("restaurants")
    if isinstance(raw_restaurants, list):
        for item in raw_restaurants:
            restaurant = _normalize_restaurant(item)
            if restaurant is None or restaurant.id in seen:
                continue
            seen.add(restaurant.id)
            restaurants.append(restaurant)

    activated_by = raw.get("activatedBy")
    if not isinstance(activated_by, str):
        activated_by = None

    return ServerState(
        restaurants=restaurants,
        cooldown_weeks=_normalize_cooldown(raw.get("cooldownWeeks")),
        activated_by=activated_by,
    )
