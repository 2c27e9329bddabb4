"""Shared test fixtures for Tollgate."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from tollgate.config import Config
from tollgate.core.engine import PermissionEngine
from tollgate.events.bus import EventBus
from tollgate.models.resource import Resource
from tollgate.storage.memory import InMemoryMembershipResolver
from tollgate.storage.sqlite_store import SQLiteMembershipResolver


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def resolver() -> InMemoryMembershipResolver:
    return InMemoryMembershipResolver()


@pytest.fixture
async def workspace_id(resolver: InMemoryMembershipResolver) -> str:
    workspace = await resolver.create_workspace("Test Workspace", "owner1", workspace_id="ws-1")
    return workspace.workspace_id


@pytest.fixture
def resource(workspace_id: str) -> Resource:
    return Resource(id="resource1", type="test", workspace_id=workspace_id)


@pytest.fixture
def bus() -> EventBus:
    return EventBus()


@pytest.fixture
def engine(resolver: InMemoryMembershipResolver, bus: EventBus) -> PermissionEngine:
    return PermissionEngine(resolver, event_bus=bus)


@pytest.fixture
async def sqlite_resolver(tmp_path: Path) -> AsyncGenerator[SQLiteMembershipResolver, None]:
    store = SQLiteMembershipResolver(tmp_path / "membership.db")
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture
def config(tmp_path: Path) -> Config:
    return Config(home_path=tmp_path)
