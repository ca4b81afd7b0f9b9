from __future__ import annotations

from typing import Any

from .models import ServerState
from .normalize import is_finite_number, normalize_state


def merge_partial(current: ServerState, body: Any) -> ServerState:
    """
    Shallow field-level merge of a partial document over *current*.

    Each of ``restaurants``, ``cooldownWeeks`` and ``activatedBy`` is taken
    from *body* only when it is valid there (a list, a positive finite number,
    a string); otherwise the current value is kept. A body that is not an
    object changes nothing.
    """
    if not isinstance(body, dict):
        body = {}
    document = current.to_document()

    restaurants = body.get("restaurants")
    if isinstance(restaurants, list):
        document["restaurants"] = restaurants

    weeks = body.get("cooldownWeeks")
    if is_finite_number(weeks) and weeks > 0:
        document["cooldownWeeks"] = weeks

    activated_by = body.get("activatedBy")
    if isinstance(activated_by, str):
        document["activatedBy"] = activated_by

    return normalize_state(document)
