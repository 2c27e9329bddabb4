"""Walkthrough of tollgate's role defaults, overrides, and decision cache."""

import asyncio
import json

from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table

from tollgate.core.engine import PermissionEngine
from tollgate.events.bus import EventBus
from tollgate.events.types import DecisionEvent
from tollgate.models.resource import CheckRequest, Resource
from tollgate.storage.memory import InMemoryMembershipResolver

console = Console()


def step_header(num: int, title: str) -> None:
    console.print()
    console.print(
        Panel(
            f"[bold cyan]Step {num}:[/bold cyan] [yellow]{title}[/yellow]",
            border_style="cyan",
        )
    )


def decision_table(title: str, results: dict) -> Table:
    table = Table(title=title)
    table.add_column("Check", style="cyan")
    table.add_column("Allowed")
    table.add_column("Reason")
    for key, decision in results.items():
        mark = "[green]yes[/green]" if decision.allowed else "[red]no[/red]"
        table.add_row(key, mark, decision.reason)
    return table


async def demo() -> None:
    resolver = InMemoryMembershipResolver()
    bus = EventBus()
    engine = PermissionEngine(resolver, event_bus=bus)
    audit: list[dict] = []

    async def record(event: DecisionEvent) -> None:
        audit.append({"event": str(event.type), "user": event.user_id, "action": event.action})

    bus.on_all(record)

    step_header(1, "Create a workspace and members")
    workspace = await resolver.create_workspace("Design Docs", "alice")
    await resolver.add_member(workspace.workspace_id, "bob", "editor")
    await resolver.add_member(workspace.workspace_id, "carol", "viewer")
    doc = Resource(id="roadmap-42", type="doc", workspace_id=workspace.workspace_id)
    console.print(f"Workspace {workspace.workspace_id}: alice (owner), bob (editor), carol (viewer)")

    step_header(2, "Role defaults")
    actions = ["view", "edit", "delete"]
    for user in ("alice", "bob", "carol", "mallory"):
        results = await engine.check_batch(
            user, [CheckRequest(resource=doc, action=a) for a in actions]
        )
        console.print(decision_table(user, results))

    step_header(3, "Grant carol edit, revoke bob edit")
    engine.grant_resource_permission(doc.id, "carol", "edit")
    engine.revoke_resource_permission(doc.id, "bob", "edit")
    for user in ("bob", "carol"):
        results = {"doc:edit": await engine.check(user, doc, "edit")}
        console.print(decision_table(user, results))

    step_header(4, "Cache and audit trail")
    console.print(f"Cached decisions: {engine.get_cache_size()}")
    console.print(Panel(JSON(json.dumps(audit[-4:], indent=2)), title="Last audit events"))
    engine.clear_cache()
    console.print(f"After clear_cache(): {engine.get_cache_size()}")


if __name__ == "__main__":
    asyncio.run(demo())
