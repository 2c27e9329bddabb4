"""SQLite-backed workspace registry implementing MembershipResolver."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import aiosqlite

from tollgate.storage.base import MembershipResolver

logger = logging.getLogger(__name__)


class SQLiteMembershipResolver(MembershipResolver):
    """Workspace owners and members persisted with aiosqlite."""

    def __init__(self, db_path: Path, *, wal_mode: bool = True) -> None:
        self.db_path = db_path
        self.wal_mode = wal_mode
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        """Create database and apply schema."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(str(self.db_path))
        self._db.row_factory = aiosqlite.Row

        if self.wal_mode:
            await self._db.execute("PRAGMA journal_mode=WAL")
        await self._db.execute("PRAGMA foreign_keys=ON")

        await self._db.executescript(_load_sql("membership.sql"))
        await self._db.commit()
        logger.info("Initialized membership store at %s", self.db_path)

    async def close(self) -> None:
        """Close database connection."""
        if self._db:
            await self._db.close()
            self._db = None

    @property
    def db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("Store not initialized. Call initialize() first.")
        return self._db

    async def create_workspace(self, workspace_id: str, name: str, owner_id: str) -> dict[str, Any]:
        now = datetime.now(UTC).isoformat()
        await self.db.execute(
            """INSERT INTO workspaces (workspace_id, name, owner_id, created_at)
               VALUES (?, ?, ?, ?)""",
            (workspace_id, name, owner_id, now),
        )
        await self.db.commit()
        logger.info("Created workspace: %s (id=%s)", name, workspace_id)
        return {
            "workspace_id": workspace_id,
            "name": name,
            "owner_id": owner_id,
            "created_at": now,
        }

    async def get_workspace(self, workspace_id: str) -> dict[str, Any] | None:
        cursor = await self.db.execute(
            "SELECT * FROM workspaces WHERE workspace_id = ?", (workspace_id,)
        )
        row = await cursor.fetchone()
        return dict(row) if row else None

    async def add_member(self, workspace_id: str, user_id: str, role: str) -> dict[str, Any]:
        """Add a member, replacing the role if the user is already a member."""
        now = datetime.now(UTC).isoformat()
        await self.db.execute(
            """INSERT INTO workspace_members (workspace_id, user_id, role, joined_at)
               VALUES (?, ?, ?, ?)
               ON CONFLICT(workspace_id, user_id) DO UPDATE SET role = excluded.role""",
            (workspace_id, user_id, str(role), now),
        )
        await self.db.commit()
        return {
            "workspace_id": workspace_id,
            "user_id": user_id,
            "role": str(role),
            "joined_at": now,
        }

    async def remove_member(self, workspace_id: str, user_id: str) -> bool:
        cursor = await self.db.execute(
            "DELETE FROM workspace_members WHERE workspace_id = ? AND user_id = ?",
            (workspace_id, user_id),
        )
        await self.db.commit()
        return cursor.rowcount > 0

    async def get_members(self, workspace_id: str) -> list[dict[str, Any]]:
        cursor = await self.db.execute(
            "SELECT * FROM workspace_members WHERE workspace_id = ? ORDER BY joined_at",
            (workspace_id,),
        )
        rows = await cursor.fetchall()
        return [dict(row) for row in rows]

    async def resolve_owner(self, workspace_id: str) -> str | None:
        cursor = await self.db.execute(
            "SELECT owner_id FROM workspaces WHERE workspace_id = ?", (workspace_id,)
        )
        row = await cursor.fetchone()
        return row["owner_id"] if row else None

    async def resolve_member(self, workspace_id: str, user_id: str) -> str | None:
        cursor = await self.db.execute(
            "SELECT role FROM workspace_members WHERE workspace_id = ? AND user_id = ?",
            (workspace_id, user_id),
        )
        row = await cursor.fetchone()
        return row["role"] if row else None


def _load_sql(filename: str) -> str:
    """Load SQL file from the schema package."""
    schema_dir = Path(__file__).parent.parent / "schema"
    return (schema_dir / filename).read_text()
