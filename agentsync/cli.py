"""Click-based CLI for agentsync - plugin content sync for AI-assistant clients."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click

from agentsync import __version__
from agentsync.config import (
    ALL_CLIENTS,
    Scope,
    add_disabled_skill,
    add_plugin,
    ensure_user_workspace,
    get_config_path,
    get_user_config_path,
    get_user_root,
    init_workspace,
    load_workspace_config,
    remove_disabled_skill,
    remove_plugin,
)
from agentsync.config.loader import is_user_config_path
from agentsync.errors import ConfigError, GitError
from agentsync.output import Console
from agentsync.plugins.marketplace import add_marketplace, list_marketplaces, remove_marketplace
from agentsync.sync.clients import get_client_mappings
from agentsync.sync.engine import SyncOptions, get_workspace_status, sync_user_workspace, sync_workspace
from agentsync.sync.inventory import SkillInfo, find_skill, list_workspace_skills


def _workspace_config_path(user: bool) -> Path:
    return get_user_config_path() if user else get_config_path(Path.cwd())


def _skills_scope(user: bool) -> tuple[Path, Scope]:
    root = get_user_root() if user else Path.cwd()
    return root, Scope.USER if user or is_user_config_path(root) else Scope.PROJECT


def _pick_skill(console: Console, root: Path, scope: Scope, skill: str, plugin_name: Optional[str]) -> SkillInfo:
    try:
        skills, _ = list_workspace_skills(root, scope=scope)
        return find_skill(skills, skill, plugin_name)
    except (FileNotFoundError, ConfigError, LookupError) as e:
        console.print_error(str(e))
        sys.exit(1)


def _sync_after_edit(console: Console, root: Path, scope: Scope) -> None:
    console.print("[dim]Syncing workspace...[/dim]")
    result = sync_user_workspace() if scope == Scope.USER else sync_workspace(root)
    console.print_sync_result(result)
    if not result.success:
        sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="agentsync")
def cli() -> None:
    """agentsync - distribute plugin skills, commands, hooks and agents.

    Reads .agentsync/workspace.yaml and places plugin content where each
    configured AI client expects it.

    \b
    Symlink mode: one copy under .agents/, linked into client directories
    Copy mode:    an independent copy per client
    """
    pass


@cli.command()
@click.option("--dry-run", "-n", is_flag=True, help="Preview changes without applying")
@click.option("--offline", is_flag=True, help="Use cached remote plugins without fetching")
@click.option(
    "--client",
    "-c",
    "clients",
    multiple=True,
    type=click.Choice(ALL_CLIENTS),
    help="Only sync this client (repeatable)",
)
@click.option("--user", "-u", is_flag=True, help="Sync the user workspace into the home directory")
@click.option("--json", "json_output", is_flag=True, help="Print the result as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output")
def sync(
    dry_run: bool,
    offline: bool,
    clients: tuple[str, ...],
    user: bool,
    json_output: bool,
    verbose: bool,
) -> None:
    """Synchronize plugin content into client directories.

    Only paths created by earlier syncs are ever removed.
    """
    console = Console(verbose=verbose, json_output=json_output)
    options = SyncOptions(offline=offline, dry_run=dry_run, clients=list(clients) or None)

    if dry_run:
        console.print_info("Dry run: no files will be changed")

    result = sync_user_workspace(options) if user else sync_workspace(Path.cwd(), options)
    console.print_sync_result(result)

    if not result.success:
        sys.exit(1)


@cli.command()
@click.option("--user", "-u", is_flag=True, help="Show the user workspace")
@click.option("--json", "json_output", is_flag=True, help="Print the status as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Show resolution errors")
def status(user: bool, json_output: bool, verbose: bool) -> None:
    """Show configured plugins and whether they are available."""
    console = Console(verbose=verbose, json_output=json_output)
    scope = Scope.USER if user else Scope.PROJECT
    workspace_status = get_workspace_status(None if user else Path.cwd(), scope=scope)
    console.print_status(workspace_status)

    if not workspace_status.success:
        sys.exit(1)


@cli.command()
@click.argument("path", required=False, type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--client",
    "-c",
    "clients",
    multiple=True,
    type=click.Choice(ALL_CLIENTS),
    help="Client to target (repeatable, default: claude)",
)
@click.option("--plugin", "-p", "plugins", multiple=True, help="Plugin source to add (repeatable)")
def init(path: Optional[Path], clients: tuple[str, ...], plugins: tuple[str, ...]) -> None:
    """Create .agentsync/workspace.yaml in PATH (default: current directory)."""
    console = Console()
    root = path or Path.cwd()

    try:
        config_path, created = init_workspace(root, clients=list(clients) or None, plugins=list(plugins) or None)
    except (ConfigError, OSError) as e:
        console.print_error(str(e))
        sys.exit(1)

    if created:
        console.print_success(f"Created {config_path}")
        console.print("[dim]Add plugins and run 'agentsync sync'[/dim]")
    else:
        console.print_warning(f"Workspace already initialized: {config_path}")


@cli.group()
def plugin() -> None:
    """Manage the plugins of a workspace."""
    pass


@plugin.command("add")
@click.argument("source")
@click.option("--user", "-u", is_flag=True, help="Add to the user workspace")
def plugin_add(source: str, user: bool) -> None:
    """Add SOURCE (path, GitHub reference or plugin@marketplace)."""
    console = Console()
    if user:
        ensure_user_workspace()

    try:
        add_plugin(_workspace_config_path(user), source)
    except (FileNotFoundError, ConfigError, ValueError) as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_success(f"Added plugin: {source}")
    console.print(f"[dim]Run 'agentsync sync{' --user' if user else ''}' to apply[/dim]")


@plugin.command("remove")
@click.argument("source")
@click.option("--user", "-u", is_flag=True, help="Remove from the user workspace")
def plugin_remove(source: str, user: bool) -> None:
    """Remove SOURCE from the workspace."""
    console = Console()
    try:
        remove_plugin(_workspace_config_path(user), source)
    except KeyError as e:
        console.print_error(e.args[0])
        sys.exit(1)
    except (FileNotFoundError, ConfigError) as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_success(f"Removed plugin: {source}")
    console.print(f"[dim]Run 'agentsync sync{' --user' if user else ''}' to purge its content[/dim]")


@plugin.group("skills")
def plugin_skills() -> None:
    """Enable or disable single skills of the configured plugins."""
    pass


@plugin_skills.command("list")
@click.option("--user", "-u", is_flag=True, help="List skills of the user workspace")
@click.option("--json", "json_output", is_flag=True, help="Print the skills as JSON")
def skills_list(user: bool, json_output: bool) -> None:
    """List skills per plugin and whether they are disabled.

    Remote plugins are read from the cache; run 'agentsync sync' first.
    """
    console = Console(json_output=json_output)
    root, scope = _skills_scope(user)
    try:
        skills, warnings = list_workspace_skills(root, scope=scope)
    except (FileNotFoundError, ConfigError) as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_skills(skills, scope=scope, warnings=warnings)


@plugin_skills.command("remove")
@click.argument("skill")
@click.option("--plugin", "-p", "plugin_name", help="Plugin name, when several plugins ship SKILL")
@click.option("--user", "-u", is_flag=True, help="Edit the user workspace")
@click.option("--no-sync", is_flag=True, help="Only edit workspace.yaml")
def skills_remove(skill: str, plugin_name: Optional[str], user: bool, no_sync: bool) -> None:
    """Disable SKILL so syncs leave it out and purge it."""
    console = Console()
    root, scope = _skills_scope(user)
    target = _pick_skill(console, root, scope, skill, plugin_name)
    if target.disabled:
        console.print_warning(f"Skill '{skill}' is already disabled")
        return

    try:
        add_disabled_skill(get_config_path(root), target.key)
    except (FileNotFoundError, ConfigError, ValueError) as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_success(f"Disabled skill: {skill} ({target.plugin_name})")
    if not no_sync:
        _sync_after_edit(console, root, scope)


@plugin_skills.command("add")
@click.argument("skill")
@click.option("--plugin", "-p", "plugin_name", help="Plugin name, when several plugins ship SKILL")
@click.option("--user", "-u", is_flag=True, help="Edit the user workspace")
@click.option("--no-sync", is_flag=True, help="Only edit workspace.yaml")
def skills_add(skill: str, plugin_name: Optional[str], user: bool, no_sync: bool) -> None:
    """Re-enable a disabled SKILL."""
    console = Console()
    root, scope = _skills_scope(user)
    target = _pick_skill(console, root, scope, skill, plugin_name)
    if not target.disabled:
        console.print_warning(f"Skill '{skill}' is already enabled")
        return

    try:
        remove_disabled_skill(get_config_path(root), target.key)
    except KeyError as e:
        console.print_error(e.args[0])
        sys.exit(1)
    except (FileNotFoundError, ConfigError) as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_success(f"Enabled skill: {skill} ({target.plugin_name})")
    if not no_sync:
        _sync_after_edit(console, root, scope)


@cli.group()
def marketplace() -> None:
    """Register marketplaces for plugin@marketplace sources."""
    pass


@marketplace.command("add")
@click.argument("source")
@click.option("--name", "-n", help="Registry name (default: repository or directory name)")
def marketplace_add(source: str, name: Optional[str]) -> None:
    """Register SOURCE (GitHub URL, owner/repo or local directory)."""
    console = Console()
    try:
        entry = add_marketplace(source, name=name, base_dir=Path.cwd())
    except (ValueError, GitError, OSError) as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_success(f"Registered marketplace: {entry.name}")
    console.print(f"[dim]Add its plugins as 'plugin@{entry.name}'[/dim]")


@marketplace.command("list")
@click.option("--json", "json_output", is_flag=True, help="Print the registry as JSON")
def marketplace_list(json_output: bool) -> None:
    """List registered marketplaces."""
    console = Console(json_output=json_output)
    console.print_marketplaces(list_marketplaces())


@marketplace.command("remove")
@click.argument("name")
def marketplace_remove(name: str) -> None:
    """Unregister marketplace NAME and delete its clone."""
    console = Console()
    try:
        remove_marketplace(name)
    except KeyError as e:
        console.print_error(e.args[0])
        sys.exit(1)
    except OSError as e:
        console.print_error(str(e))
        sys.exit(1)

    console.print_success(f"Removed marketplace: {name}")


@cli.command()
@click.option("--user", "-u", is_flag=True, help="Show user-scope paths")
@click.option("--json", "json_output", is_flag=True, help="Print the mapping as JSON")
def clients(user: bool, json_output: bool) -> None:
    """Show where each client reads plugin content from."""
    console = Console(json_output=json_output)
    configured: list[str] = []
    try:
        config = load_workspace_config(_workspace_config_path(user))
        configured = [c.value for c in config.clients]
    except (FileNotFoundError, ConfigError):
        # No usable workspace here; show the table without highlights
        configured = []

    console.print_clients(get_client_mappings(Scope.USER if user else Scope.PROJECT), configured=configured)


if __name__ == "__main__":
    cli()
