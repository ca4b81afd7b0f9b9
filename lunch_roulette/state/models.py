from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from ..config import DEFAULT_COOLDOWN_WEEKS


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Restaurant(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    blacklisted: bool = False
    last_selected_date: int | float | None = Field(
        default=None, description="Millisecond epoch of the last time this restaurant was picked"
    )


class ServerState(CamelModel):
    model_config = ConfigDict(frozen=True)

    restaurants: list[Restaurant] = Field(default_factory=list)
    cooldown_weeks: int | float = DEFAULT_COOLDOWN_WEEKS
    activated_by: str | None = Field(
        default=None, description="Session id of whoever last supplied the secret code"
    )

    @field_validator("cooldown_weeks")
    @classmethod
    def _positive_weeks(cls, value: int | float) -> int | float:
        if not value > 0:
            raise ValueError("cooldownWeeks must be positive")
        return value

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready document; absent optional fields are omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def default_state() -> ServerState:
    return ServerState()
