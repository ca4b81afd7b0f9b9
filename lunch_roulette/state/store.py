from __future__ import annotations

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from ..config import DEFAULT_ROULETTE_CONFIG
from ..errors import StoreUnavailable
from .models import ServerState, default_state
from .normalize import normalize_state

logger = logging.getLogger(__name__)


class StateStore(ABC):
    """A single shared document. Every write replaces the whole thing."""

    def read(self) -> ServerState:
        """Return the current document, or the default one if it cannot be read."""
        try:
            raw = self._load()
            if raw is None:
                return default_state()
            return normalize_state(raw)
        except Exception:
            logger.warning("State read failed, falling back to the default document", exc_info=True)
            return default_state()

    def write(self, state: ServerState | dict[str, Any]) -> ServerState:
        """Normalize and persist *state*; raises ``StoreUnavailable`` on failure."""
        normalized = normalize_state(state)
        try:
            self._save(normalized.to_document())
        except Exception as exc:
            logger.error("State write failed: %s", exc)
            raise StoreUnavailable(f"Database write failed: {exc}") from exc
        return normalized

    @abstractmethod
    def _load(self) -> Any | None:
        """Return the raw stored document, or ``None`` when nothing is stored yet."""

    @abstractmethod
    def _save(self, document: dict[str, Any]) -> None:
        ...


class MemoryStore(StateStore):
    def __init__(self, document: dict[str, Any] | None = None) -> None:
        self._document = document

    def _load(self) -> Any | None:
        return self._document

    def _save(self, document: dict[str, Any]) -> None:
        self._document = document


class JsonFileStore(StateStore):
    """Flat-file variant: one JSON object in one file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def _load(self) -> Any | None:
        if not self.path.exists():
            return None
        return json.loads(self.path.read_text(encoding="utf-8"))

    def _save(self, document: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Replace atomically so a concurrent reader never sees a partial file
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=self.path.name, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


_store: StateStore | None = None


def get_store() -> StateStore:
    """Return the process-wide store, creating the file store on first call."""
    global _store
    if _store is None:
        _store = JsonFileStore(DEFAULT_ROULETTE_CONFIG.state_path)
    return _store
