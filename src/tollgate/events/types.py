"""Event types and payloads for Tollgate."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tollgate.models.decision import Decision
from tollgate.models.resource import Resource


class EventType(StrEnum):
    DECISION_ALLOWED = "decision.allowed"
    DECISION_DENIED = "decision.denied"


class DecisionEvent(BaseModel):
    """A freshly computed decision, published for auditing."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    resource: Resource
    action: str
    decision: Decision
    occurred_at: str = Field(default_factory=lambda: datetime.now(UTC).isoformat())

    @property
    def type(self) -> EventType:
        return EventType.DECISION_ALLOWED if self.decision.allowed else EventType.DECISION_DENIED

    def to_response(self) -> dict[str, Any]:
        return {
            "_v": "1.0",
            "type": self.type,
            "user_id": self.user_id,
            "resource": self.resource.to_response(),
            "action": self.action,
            "decision": self.decision.to_response(),
            "occurred_at": self.occurred_at,
        }
