"""Chat log models for a trip planning session."""

import uuid
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field

from backend.trip_planner.models.common import TripStage

ChatRole = Literal["user", "assistant", "system"]
ChatAction = Literal["select_destination", "select_plan", "modify_timeline"]


class ChatMessageMetadata(BaseModel):
    """Context attached to a chat entry."""

    stage: TripStage | None = None
    action: ChatAction | None = None
    data: dict[str, Any] | None = None


class ChatMessage(BaseModel):
    """Single entry in the append-only session conversation."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    role: ChatRole
    content: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    metadata: ChatMessageMetadata | None = None
