from __future__ import annotations

import logging

import bcrypt

from ..config import DEFAULT_ROULETTE_CONFIG
from ..errors import ValidationError
from ..state.models import ServerState

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a secret
_BCRYPT_MAX_BYTES = 72

_secret_hash: bytes | None = None


def set_secret(code: str) -> None:
    """Replace the shared secret that unlocks the roulette."""
    global _secret_hash
    raw = code.encode()
    if not raw or len(raw) > _BCRYPT_MAX_BYTES:
        raise ValueError(f"Secret code must be 1-{_BCRYPT_MAX_BYTES} bytes long")
    _secret_hash = bcrypt.hashpw(raw, bcrypt.gensalt())


def verify_secret(attempt: str) -> bool:
    """Exact, case-sensitive match against the shared secret."""
    if _secret_hash is None or not isinstance(attempt, str):
        return False
    raw = attempt.encode()
    if not raw or len(raw) > _BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(raw, _secret_hash)


def is_activator(state: ServerState, session_id: str | None) -> bool:
    return bool(session_id) and state.activated_by == session_id


def activate(attempt: str, session_id: str, state: ServerState) -> tuple[bool, ServerState]:
    """Try to unlock the roulette for *session_id*.

    On success the returned document names *session_id* as the activator,
    replacing whoever held it before. On failure *state* comes back as is.
    """
    if not session_id:
        raise ValidationError("A session id is required to activate")
    if not verify_secret(attempt):
        logger.info("Rejected activation attempt from session %s", session_id)
        return False, state
    logger.info("Session %s activated the roulette", session_id)
    return True, state.model_copy(update={"activated_by": session_id})


set_secret(DEFAULT_ROULETTE_CONFIG.secret_code)
