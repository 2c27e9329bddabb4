"""Membership resolver interface consumed by the permission engine."""

from __future__ import annotations

from abc import ABC, abstractmethod


class MembershipResolver(ABC):
    """Answers who owns a workspace and which role a user holds in it."""

    @abstractmethod
    async def resolve_owner(self, workspace_id: str) -> str | None:
        """Return the owner's user ID, or None if the workspace is unknown."""

    @abstractmethod
    async def resolve_member(self, workspace_id: str, user_id: str) -> str | None:
        """Return the user's recorded role, or None if not a member."""
