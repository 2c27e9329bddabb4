"""Resource model for permission checks."""

from __future__ import annotations

from pydantic import BaseModel


class Resource(BaseModel):
    """The target of a permission check, scoped to a workspace."""

    id: str
    type: str
    workspace_id: str

    def to_response(self) -> dict:
        return {
            "_v": "1.0",
            "id": self.id,
            "type": self.type,
            "workspace_id": self.workspace_id,
        }


class CheckRequest(BaseModel):
    """One entry of a batch check."""

    resource: Resource
    action: str

    @property
    def batch_key(self) -> str:
        return f"{self.resource.type}:{self.action}"
