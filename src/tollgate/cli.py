"""CLI: init, workspace, member, roles, check."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
import uuid
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tollgate.auth.roles import Role, get_role_hierarchy, get_role_permissions
from tollgate.config import Config
from tollgate.core.engine import PermissionEngine
from tollgate.models.resource import Resource
from tollgate.storage.sqlite_store import SQLiteMembershipResolver

EXIT_DENIED = 2


def _load_config(home: str | None) -> Config:
    config = Config.load(Path(home).expanduser().resolve() if home else None)
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return config


@click.group()
@click.version_option(package_name="tollgate-authz")
@click.option("--home", envvar="TOLLGATE_HOME", default=None, help="Tollgate home directory")
@click.pass_context
def main(ctx: click.Context, home: str | None) -> None:
    """Tollgate: workspace permission decisions."""
    ctx.obj = _load_config(home)


@main.command()
@click.pass_obj
def init(config: Config) -> None:
    """Create the membership database and default config."""

    async def _init() -> None:
        store = SQLiteMembershipResolver(config.membership_db_path, wal_mode=config.wal_mode)
        await store.initialize()
        await store.close()
        config.save()

    asyncio.run(_init())
    click.echo(f"Initialized tollgate at {config.home_path}")
    click.echo(f"Database: {config.membership_db_path}")


@main.group()
def workspace() -> None:
    """Manage workspaces."""


@workspace.command("create")
@click.argument("name")
@click.option("--owner", required=True, help="Owner user ID")
@click.option("--id", "workspace_id", default=None, help="Workspace ID (generated if omitted)")
@click.pass_obj
def workspace_create(config: Config, name: str, owner: str, workspace_id: str | None) -> None:
    """Create a workspace owned by a user."""
    workspace_id = workspace_id or str(uuid.uuid4())[:8]

    async def _create() -> None:
        store = await _open_store(config)
        try:
            await store.create_workspace(workspace_id, name, owner)
        finally:
            await store.close()

    _run(_create())
    Console().print(
        Panel(
            f"[green]✓[/green] Workspace created: {name}\nID: {workspace_id}\nOwner: {owner}",
            title="Workspace Created",
        )
    )


@main.group()
def member() -> None:
    """Manage workspace members."""


@member.command("add")
@click.argument("workspace_id")
@click.argument("user_id")
@click.option(
    "--role",
    type=click.Choice([r.value for r in get_role_hierarchy()]),
    default=Role.VIEWER.value,
    show_default=True,
)
@click.pass_obj
def member_add(config: Config, workspace_id: str, user_id: str, role: str) -> None:
    """Add a user to a workspace with a role."""

    async def _add() -> None:
        store = await _open_store(config)
        try:
            if await store.get_workspace(workspace_id) is None:
                raise click.ClickException(f"Workspace {workspace_id} not found")
            await store.add_member(workspace_id, user_id, role)
        finally:
            await store.close()

    _run(_add())
    click.echo(f"Added {user_id} to {workspace_id} as {role}")


@member.command("remove")
@click.argument("workspace_id")
@click.argument("user_id")
@click.pass_obj
def member_remove(config: Config, workspace_id: str, user_id: str) -> None:
    """Remove a user from a workspace."""

    async def _remove() -> bool:
        store = await _open_store(config)
        try:
            return await store.remove_member(workspace_id, user_id)
        finally:
            await store.close()

    if not _run(_remove()):
        click.echo(f"Error: {user_id} is not a member of {workspace_id}", err=True)
        sys.exit(1)
    click.echo(f"Removed {user_id} from {workspace_id}")


@member.command("list")
@click.argument("workspace_id")
@click.pass_obj
def member_list(config: Config, workspace_id: str) -> None:
    """List the owner and members of a workspace."""

    async def _list() -> tuple[dict, list[dict]]:
        store = await _open_store(config)
        try:
            workspace_data = await store.get_workspace(workspace_id)
            if workspace_data is None:
                raise click.ClickException(f"Workspace {workspace_id} not found")
            return workspace_data, await store.get_members(workspace_id)
        finally:
            await store.close()

    workspace_data, members = _run(_list())
    table = Table(title=f"Members of {workspace_data['name']}")
    table.add_column("User", style="cyan")
    table.add_column("Role")
    table.add_column("Joined")
    table.add_row(workspace_data["owner_id"], Role.OWNER.value, workspace_data["created_at"])
    for m in members:
        table.add_row(m["user_id"], m["role"], m["joined_at"])
    Console().print(table)


@main.command()
def roles() -> None:
    """Show the default permissions of every role."""
    table = Table(title="Role Permissions")
    table.add_column("Rank", justify="right")
    table.add_column("Role", style="cyan")
    table.add_column("Actions")
    for role in get_role_hierarchy():
        table.add_row(str(role.rank), role.value, ", ".join(sorted(get_role_permissions(role))))
    Console().print(table)


@main.command()
@click.argument("user_id")
@click.argument("workspace_id")
@click.argument("resource_type")
@click.argument("resource_id")
@click.argument("action")
@click.option("--json", "as_json", is_flag=True, help="Print the decision as JSON")
@click.pass_obj
def check(
    config: Config,
    user_id: str,
    workspace_id: str,
    resource_type: str,
    resource_id: str,
    action: str,
    as_json: bool,
) -> None:
    """Decide whether USER_ID may perform ACTION on a resource.

    Exits 0 when allowed and 2 when denied.
    """
    resource = Resource(id=resource_id, type=resource_type, workspace_id=workspace_id)

    async def _check():
        store = await _open_store(config)
        try:
            engine = PermissionEngine.from_config(store, config)
            return await engine.check(user_id, resource, action)
        finally:
            await store.close()

    decision = _run(_check())
    if as_json:
        click.echo(json.dumps(decision.to_response(), indent=2))
    elif decision.allowed:
        Console().print(f"[green]allowed[/green] {user_id} {action} {resource_type}:{resource_id}")
    else:
        Console().print(f"[red]denied[/red] ({decision.code}) {decision.reason}")

    if not decision.allowed:
        sys.exit(EXIT_DENIED)


async def _open_store(config: Config) -> SQLiteMembershipResolver:
    db_path = config.membership_db_path
    if not db_path.exists():
        raise click.ClickException(f"No database at {db_path}. Run 'tollgate init' first.")
    store = SQLiteMembershipResolver(db_path, wal_mode=config.wal_mode)
    await store.initialize()
    return store


def _run(coro):
    try:
        return asyncio.run(coro)
    except click.ClickException:
        raise
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
