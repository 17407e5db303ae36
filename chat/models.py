from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class Message(BaseModel):
    """One chat bubble. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., description="Per-session increasing key, stable across renders")
    text: str
    is_user: bool


class RelayRequest(BaseModel):
    prompt: StrictStr = Field(..., description="User's question")


class RelayResponse(BaseModel):
    text: StrictStr = Field(..., description="Model reply or user-facing error text")
