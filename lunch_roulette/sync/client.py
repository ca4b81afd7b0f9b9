"""HTTP client that keeps a local copy of the shared document in step with the server."""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable

import httpx

from ..activation.dependencies import SESSION_HEADER
from ..activation.gate import is_activator
from ..errors import (
    IncorrectCode,
    InsufficientOptions,
    NotActivator,
    NotUnlocked,
    RestaurantNotFound,
    RouletteError,
    StoreUnavailable,
    ValidationError,
)
from ..restaurants import operations
from ..selection.engine import now_ms, select_eligible, spin
from ..state.models import Restaurant, ServerState
from ..state.normalize import normalize_state

logger = logging.getLogger(__name__)

_STATUS_ERRORS: dict[int, type[RouletteError]] = {
    401: IncorrectCode,
    403: NotActivator,
    404: RestaurantNotFound,
    409: InsufficientOptions,
}


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Server error: {response.status_code}"
    if isinstance(body, dict):
        return str(body.get("error") or body.get("detail") or f"Server error: {response.status_code}")
    return f"Server error: {response.status_code}"


class StateSyncClient:
    """Thin wrapper over ``GET /state`` and ``PUT /state``."""

    def __init__(self, http: httpx.Client) -> None:
        self.http = http

    @classmethod
    def from_url(cls, base_url: str, timeout: float = 10.0) -> StateSyncClient:
        return cls(httpx.Client(base_url=base_url, timeout=timeout))

    def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send a request and turn failures into roulette errors. Nothing is retried."""
        try:
            response = self.http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("Request %s %s failed: %s", method, path, exc)
            raise StoreUnavailable(f"Network error: {exc}") from exc

        if response.status_code >= 500:
            raise StoreUnavailable(_error_message(response))
        if response.status_code >= 400:
            error_cls = _STATUS_ERRORS.get(response.status_code, ValidationError)
            raise error_cls(_error_message(response))
        return response

    def fetch(self) -> ServerState:
        return normalize_state(self.request("GET", "/state").json())

    def push(self, state: ServerState) -> ServerState:
        """Send the whole local document; the server's merged result comes back."""
        response = self.request("PUT", "/state", json=state.to_document())
        return normalize_state(response.json())

    def close(self) -> None:
        self.http.close()


class RouletteSession:
    """
    One client's view of the roulette.

    Every mutation is applied to the local copy and the full result is pushed
    straight away; the local copy only changes once the push succeeds.
    Concurrent sessions overwrite each other (last writer wins).
    """

    def __init__(self, client: StateSyncClient, session_id: str | None = None) -> None:
        self.client = client
        self.session_id = session_id or str(uuid.uuid4())
        self.state = ServerState()
        self.unlocked = False

    @property
    def is_activator(self) -> bool:
        return is_activator(self.state, self.session_id)

    def refresh(self) -> ServerState:
        self.state = self.client.fetch()
        if self.is_activator:
            self.unlocked = True
        return self.state

    def activate(self, code: str) -> bool:
        try:
            self.client.request(
                "POST", "/activate", json={"code": code}, headers={SESSION_HEADER: self.session_id},
            )
        except IncorrectCode:
            return False
        self.unlocked = True
        self.refresh()
        return True

    def eligible(self, now: float | None = None) -> list[Restaurant]:
        return select_eligible(
            self.state.restaurants, self.state.cooldown_weeks, now_ms() if now is None else now,
        )

    def _commit(self, next_state: ServerState) -> ServerState:
        self.state = self.client.push(next_state)
        return self.state

    def _mutate(self, change: Callable[[ServerState], ServerState]) -> ServerState:
        if not self.is_activator:
            raise NotActivator()
        return self._commit(change(self.state))

    def add(self, name: str) -> ServerState:
        return self._mutate(lambda s: operations.add_restaurant(s, name)[1])

    def remove(self, restaurant_id: str) -> ServerState:
        return self._mutate(lambda s: operations.remove_restaurant(s, restaurant_id))

    def toggle_blacklist(self, restaurant_id: str) -> ServerState:
        return self._mutate(lambda s: operations.toggle_blacklist(s, restaurant_id))

    def reset_cooldown(self, restaurant_id: str) -> ServerState:
        return self._mutate(lambda s: operations.reset_cooldown(s, restaurant_id))

    def reset_blacklist(self) -> ServerState:
        return self._mutate(operations.reset_blacklist)

    def reset_all(self) -> ServerState:
        return self._mutate(operations.reset_all)

    def delete_all(self) -> ServerState:
        return self._mutate(operations.delete_all)

    def set_cooldown_weeks(self, cooldown_weeks: float) -> ServerState:
        return self._mutate(lambda s: operations.set_cooldown_weeks(s, cooldown_weeks))

    def suggest(self, now: float | None = None) -> Restaurant:
        """Spin locally and push the stamped list."""
        if not self.unlocked:
            raise NotUnlocked()
        chosen, next_state = spin(self.state, now)
        self._commit(next_state)
        return chosen
