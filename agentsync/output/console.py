# agentsync Console Output
# Rich-based console output, or JSON documents for scripting

import json
from typing import Any, Optional

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from agentsync.config.schema import ContentCategory, Scope
from agentsync.plugins.marketplace import MarketplaceEntry
from agentsync.sync.actions import ActionType, CopyResult
from agentsync.sync.clients import ClientMapping
from agentsync.sync.engine import PluginResult, SyncResult, WorkspaceStatus
from agentsync.sync.inventory import SkillInfo


class Console:
    """
    Console output manager using Rich.

    With json_output set, results are written as a single JSON document
    and plain messages go nowhere except errors, which become JSON too.
    """

    def __init__(self, *, verbose: bool = False, colored: bool = True, json_output: bool = False):
        """
        Initialize console.

        Args:
            verbose: Enable verbose output.
            colored: Enable colored output.
            json_output: Emit JSON documents instead of formatted text.
        """
        self.verbose = verbose
        self.json_output = json_output
        self._console = RichConsole(force_terminal=colored, no_color=not colored)

    def print(self, *args, **kwargs) -> None:
        """Print to console."""
        if self.json_output:
            return
        self._console.print(*args, **kwargs)

    def print_json(self, data: dict[str, Any]) -> None:
        """Write a JSON document without markup or highlighting."""
        self._console.out(json.dumps(data, indent=2), highlight=False)

    def print_error(self, message: str) -> None:
        """Print error message."""
        if self.json_output:
            self.print_json({"success": False, "error": message})
            return
        self._console.print(f"[red]Error:[/red] {escape(message)}")

    def print_warning(self, message: str) -> None:
        """Print warning message."""
        self.print(f"[yellow]Warning:[/yellow] {escape(message)}")

    def print_success(self, message: str) -> None:
        """Print success message."""
        self.print(f"[green]{escape(message)}[/green]")

    def print_info(self, message: str) -> None:
        """Print info message."""
        self.print(f"[blue]{escape(message)}[/blue]")

    def _get_action_icon(self, action: ActionType) -> str:
        """Get icon for action type."""
        icons = {
            ActionType.COPIED: "[green]✓[/green]",
            ActionType.GENERATED: "[cyan]→[/cyan]",
            ActionType.SKIPPED: "[dim]○[/dim]",
            ActionType.FAILED: "[red]✗[/red]",
        }
        return icons.get(action, "?")

    def print_sync_result(self, result: SyncResult) -> None:
        """
        Print sync result summary.

        Args:
            result: Sync result to display.
        """
        if self.json_output:
            self.print_json(result.to_dict())
            return

        if result.error:
            self.print_error(result.error)
            return

        self._console.print()
        for plugin_result in result.plugin_results:
            self._print_plugin_result(plugin_result)

        if result.purged_paths:
            verb = "Would purge" if result.dry_run else "Purged"
            self._console.print(f"\n[bold]{verb} {len(result.purged_paths)} stale path(s)[/bold]")
            if self.verbose or result.dry_run:
                for path in result.purged_paths:
                    self._console.print(f"    [red]×[/red] {escape(str(path))}")

        for warning in result.warnings:
            self.print_warning(warning)

        self._console.print()
        status_text = "Dry run completed" if result.dry_run else "Sync completed"
        counts = (
            f"Copied: {result.total_copied}, Linked: {result.total_generated}, "
            f"Skipped: {result.total_skipped}, Failed: {result.total_failed}"
        )
        if result.success:
            self._console.print(
                Panel(
                    f"[green]{status_text}[/green]\n"
                    f"Plugins: {len(result.plugin_results)}\n"
                    f"{counts}",
                    title="Summary",
                    border_style="green" if not result.has_issues else "yellow",
                )
            )
        else:
            self._console.print(
                Panel(
                    f"[red]{status_text} with errors[/red]\n" f"{counts}",
                    title="Summary",
                    border_style="red",
                )
            )

    def _print_plugin_result(self, result: PluginResult) -> None:
        """Print result for a single plugin."""
        name = escape(result.plugin_name or result.plugin)
        if result.error:
            self._console.print(f"[red]✗[/red] [bold]{name}[/bold] - {escape(result.error)}")
            return

        failed = [r for r in result.copy_results if r.action == ActionType.FAILED]
        marker = "[green]✓[/green]" if result.success else "[red]✗[/red]"
        self._console.print(f"{marker} [bold]{name}[/bold] - {len(result.copy_results)} target(s)")

        if self.verbose or failed:
            for copy_result in result.copy_results:
                if copy_result.action != ActionType.FAILED and not self.verbose:
                    continue
                self._print_copy_result(copy_result)

    def _print_copy_result(self, result: CopyResult) -> None:
        icon = self._get_action_icon(result.action)
        client = f" [dim]({result.client.value})[/dim]" if result.client else ""
        line = f"    {icon} {escape(str(result.path))}{client}"
        if result.error:
            line += f": {escape(result.error)}"
        self._console.print(line)

    def print_status(self, status: WorkspaceStatus) -> None:
        """Print workspace status."""
        if self.json_output:
            self.print_json(status.to_dict())
            return

        if status.error:
            self.print_error(status.error)
            return

        clients = ", ".join(c.value for c in status.clients) or "(none)"
        self._console.print(
            Panel(
                f"Root: {escape(str(status.scope_root))}\n"
                f"Scope: {status.scope.value}\n"
                f"Clients: {clients}\n"
                f"Last sync: {status.last_sync or 'never'}",
                title="agentsync Workspace",
                border_style="blue",
            )
        )

        if not status.plugins:
            self._console.print("[dim]No plugins configured[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Plugin")
        table.add_column("Kind", style="dim")
        table.add_column("Status")
        table.add_column("Name", style="dim")

        for plugin in status.plugins:
            state = "[green]available[/green]" if plugin.available else "[red]unavailable[/red]"
            table.add_row(escape(plugin.source), plugin.kind or "invalid", state, escape(plugin.plugin_name or ""))
        self._console.print(table)

        if self.verbose:
            for plugin in status.plugins:
                if plugin.error:
                    self._console.print(f"  [dim]{escape(plugin.source)}: {escape(plugin.error)}[/dim]")

    def print_skills(self, skills: list[SkillInfo], *, scope: Scope, warnings: Optional[list[str]] = None) -> None:
        """
        Print the skills of every configured plugin, grouped by plugin.

        Args:
            skills: Inventory to display.
            scope: Scope the inventory belongs to.
            warnings: Problems met while listing.
        """
        if self.json_output:
            self.print_json(
                {
                    "success": True,
                    "scope": scope.value,
                    "skills": [skill.to_dict() for skill in skills],
                    "warnings": list(warnings or []),
                }
            )
            return

        if not skills:
            self._console.print("[dim]No skills found. Add a plugin with 'agentsync plugin add'[/dim]")

        grouped: dict[tuple[str, str], list[SkillInfo]] = {}
        for skill in skills:
            grouped.setdefault((skill.plugin_name, skill.plugin_source), []).append(skill)

        for (plugin_name, source), plugin_skills in grouped.items():
            self._console.print(f"\n[bold]{escape(plugin_name)}[/bold] [dim]({escape(source)})[/dim]")
            for skill in plugin_skills:
                if skill.disabled:
                    self._console.print(f"  [red]✗[/red] {escape(skill.name)} [dim](disabled)[/dim]")
                else:
                    self._console.print(f"  [green]✓[/green] {escape(skill.name)}")

        for warning in warnings or []:
            self.print_warning(warning)

    def print_marketplaces(self, entries: list[MarketplaceEntry]) -> None:
        """Print registered marketplaces."""
        if self.json_output:
            self.print_json(
                {
                    "success": True,
                    "marketplaces": [entry.model_dump(mode="json", by_alias=True) for entry in entries],
                }
            )
            return

        if not entries:
            self._console.print("[dim]No marketplaces registered[/dim]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("Name")
        table.add_column("Kind", style="dim")
        table.add_column("Location")
        table.add_column("Path", style="dim")
        for entry in entries:
            table.add_row(escape(entry.name), entry.kind, escape(entry.location), escape(str(entry.path)))
        self._console.print(table)

    def print_clients(self, mappings: dict, *, configured: Optional[list[str]] = None) -> None:
        """
        Print the client mapping table.

        Args:
            mappings: Dict of ClientId to ClientMapping.
            configured: Client names configured in the workspace, highlighted.
        """
        if self.json_output:
            self.print_json({client.value: self._mapping_dict(mapping) for client, mapping in mappings.items()})
            return

        configured = configured or []
        table = Table(show_header=True, header_style="bold")
        table.add_column("Client")
        table.add_column("Universal")
        for category in ContentCategory:
            table.add_column(category.dir_name.capitalize(), style="dim")

        for client, mapping in mappings.items():
            name = f"[green]{client.value}[/green]" if client.value in configured else client.value
            universal = "yes" if mapping.is_universal else ""
            paths = [mapping.path_for(category) or "-" for category in ContentCategory]
            table.add_row(name, universal, *paths)

        self._console.print(table)

    @staticmethod
    def _mapping_dict(mapping: ClientMapping) -> dict[str, Any]:
        data: dict[str, Any] = {category.dir_name: mapping.path_for(category) for category in ContentCategory}
        data["universal"] = mapping.is_universal
        return data


def create_console(*, verbose: bool = False, colored: bool = True, json_output: bool = False) -> Console:
    """
    Create a console instance.

    Args:
        verbose: Enable verbose output.
        colored: Enable colored output.
        json_output: Emit JSON documents instead of formatted text.

    Returns:
        Console instance.
    """
    return Console(verbose=verbose, colored=colored, json_output=json_output)
