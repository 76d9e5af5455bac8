"""Event schema and wire format emitted by the SDK.

Batches are POSTed as ``{"events": [...]}`` with camelCase keys::

    {"events": [{"eventName": "signup",
                 "eventData": {"plan": "premium"},
                 "userId": "user123",
                 "timestamp": "2025-01-06T10:43:51.473000+00:00"}]}
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TrackedEvent(BaseModel):
    """A single event captured by ``track()``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event_name: str = Field(alias="eventName")
    event_data: dict[str, Any] = Field(default_factory=dict, alias="eventData")
    user_id: Optional[str] = Field(default=None, alias="userId")
    timestamp: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )


class EventBatch(BaseModel):
    """Request body for one flush."""

    events: list[TrackedEvent] = []

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
