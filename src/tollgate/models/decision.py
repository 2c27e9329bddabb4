"""Decision and override models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tollgate.auth.roles import Role


class DenialCode(StrEnum):
    NOT_A_MEMBER = "not_a_member"
    EXPLICIT_DENY = "explicit_deny"
    ROLE_INSUFFICIENT = "role_insufficient"


class Decision(BaseModel):
    """Outcome of a permission check."""

    # cached decisions are shared between callers
    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: str = ""
    code: DenialCode | None = None
    required_role: Role | None = None

    @classmethod
    def allow(cls) -> Decision:
        return cls(allowed=True)

    @classmethod
    def deny(cls, code: DenialCode, reason: str, *, required_role: Role | None = None) -> Decision:
        return cls(allowed=False, reason=reason, code=code, required_role=required_role)

    def to_response(self) -> dict[str, Any]:
        data: dict[str, Any] = {"_v": "1.0", "allowed": self.allowed}
        if not self.allowed:
            data["reason"] = self.reason
            data["code"] = self.code
            if self.required_role is not None:
                data["required_role"] = self.required_role
        return data


class ResourceOverride(BaseModel):
    """Explicit grants and revocations of one user on one resource."""

    resource_id: str
    user_id: str
    granted: set[str] = Field(default_factory=set)
    revoked: set[str] = Field(default_factory=set)

    def to_response(self) -> dict[str, Any]:
        return {
            "_v": "1.0",
            "resource_id": self.resource_id,
            "user_id": self.user_id,
            "granted": sorted(self.granted),
            "revoked": sorted(self.revoked),
        }
