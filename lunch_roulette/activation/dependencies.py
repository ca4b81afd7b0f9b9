from __future__ import annotations

import uuid

from fastapi import Depends, Request

from ..errors import NotActivator, NotUnlocked
from ..state.models import ServerState
from ..state.store import StateStore, get_store
from .gate import is_activator

SESSION_HEADER = "X-Session-Id"


def get_session_id(request: Request) -> str:
    """Return the caller's claimed session id.

    An explicit ``X-Session-Id`` header wins; otherwise an id is kept in the
    signed session cookie, created on first use.
    """
    claimed = request.headers.get(SESSION_HEADER)
    if claimed:
        return claimed
    session_id = request.session.get("session_id")
    if not session_id:
        session_id = str(uuid.uuid4())
        request.session["session_id"] = session_id
    return session_id


def is_unlocked(request: Request, state: ServerState, session_id: str) -> bool:
    return bool(request.session.get("unlocked")) or is_activator(state, session_id)


def require_activator(
    session_id: str = Depends(get_session_id),
    store: StateStore = Depends(get_store),
) -> str:
    """Raise 403 unless the caller is the current activator."""
    if not is_activator(store.read(), session_id):
        raise NotActivator()
    return session_id


def require_unlocked(
    request: Request,
    session_id: str = Depends(get_session_id),
    store: StateStore = Depends(get_store),
) -> str:
    """Raise 403 unless the caller has unlocked the roulette."""
    if not is_unlocked(request, store.read(), session_id):
        raise NotUnlocked()
    return session_id
