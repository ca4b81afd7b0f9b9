from __future__ import annotations

from pydantic import ConfigDict, Field

from ..state.models import CamelModel, Restaurant, ServerState
from .operations import MAX_NAME_LENGTH


class AddRestaurantRequest(CamelModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)


class CooldownRequest(CamelModel):
    cooldown_weeks: float = Field(..., gt=0, allow_inf_nan=False)


class ActivationRequest(CamelModel):
    code: str


class ActivationResponse(CamelModel):
    activated: bool
    activated_by: str


class SessionInfo(CamelModel):
    session_id: str
    unlocked: bool
    is_activator: bool


class EligibleResponse(CamelModel):
    restaurants: list[Restaurant]
    count: int
    can_spin: bool


class SuggestionResponse(CamelModel):
    restaurant: Restaurant
    state: ServerState
