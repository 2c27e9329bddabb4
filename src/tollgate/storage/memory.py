"""In-memory workspace registry implementing MembershipResolver."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime

from tollgate.auth.roles import Role
from tollgate.storage.base import MembershipResolver

logger = logging.getLogger(__name__)


@dataclass
class Workspace:
    workspace_id: str
    name: str
    owner_id: str
    members: dict[str, str] = field(default_factory=dict)
    created_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())


class InMemoryMembershipResolver(MembershipResolver):
    """Workspace owners and members kept in process memory."""

    def __init__(self) -> None:
        self._workspaces: dict[str, Workspace] = {}

    async def create_workspace(
        self, name: str, owner_id: str, *, workspace_id: str | None = None
    ) -> Workspace:
        """Register a workspace. The owner needs no membership record."""
        workspace = Workspace(
            workspace_id=workspace_id or str(uuid.uuid4())[:8],
            name=name,
            owner_id=owner_id,
        )
        self._workspaces[workspace.workspace_id] = workspace
        logger.info("Created workspace: %s (id=%s)", name, workspace.workspace_id)
        return workspace

    async def add_member(self, workspace_id: str, user_id: str, role: str = Role.VIEWER) -> None:
        """Add or update a member's role.

        Raises:
            KeyError: If the workspace does not exist
        """
        workspace = self._get(workspace_id)
        workspace.members[user_id] = str(role)

    async def remove_member(self, workspace_id: str, user_id: str) -> bool:
        workspace = self._get(workspace_id)
        return workspace.members.pop(user_id, None) is not None

    async def resolve_owner(self, workspace_id: str) -> str | None:
        workspace = self._workspaces.get(workspace_id)
        return workspace.owner_id if workspace else None

    async def resolve_member(self, workspace_id: str, user_id: str) -> str | None:
        workspace = self._workspaces.get(workspace_id)
        if workspace is None:
            return None
        return workspace.members.get(user_id)

    def clear(self) -> None:
        self._workspaces.clear()

    def _get(self, workspace_id: str) -> Workspace:
        try:
            return self._workspaces[workspace_id]
        except KeyError:
            raise KeyError(f"Workspace not found: {workspace_id}") from None
