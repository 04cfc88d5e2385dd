"""Schemas for save slot writes and loads."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class SaveRequest(BaseModel):
    slot: int = Field(..., description="Save slot: 1, 2 or 3")
    data: dict[str, Any] = Field(..., description="Opaque game state")


class SaveSlot(BaseModel):
    """One slot; data and saved_at are null until the slot is first written."""

    slot: int
    data: dict[str, Any] | None = None
    saved_at: datetime | None = None


class LoadResponse(BaseModel):
    slots: list[SaveSlot]
