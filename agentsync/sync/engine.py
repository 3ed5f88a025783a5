# agentsync Sync Engine
# Resolve plugins, place their content for every client, purge stale paths

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from agentsync.config.loader import get_config_path, get_user_root, is_user_config_path, load_workspace_config
from agentsync.config.schema import ClientId, Scope, WorkspaceConfig
from agentsync.errors import ConfigError
from agentsync.plugins.resolver import PluginResolver
from agentsync.plugins.source import parse_plugin_source
from agentsync.sync.actions import ActionType, CopyResult, execute_target, purge_stale_paths
from agentsync.sync.item import ContentItem, ResolvedPlugin, scan_plugin_content
from agentsync.sync.naming import resolve_names
from agentsync.sync.planner import PlacementPlan, plan_placement
from agentsync.sync.state import StateManager, SyncState
from agentsync.utils.links import LinkBackend


@dataclass
class SyncOptions:
    """Per-run sync options."""

    offline: bool = False
    dry_run: bool = False
    # Restrict the run to these configured clients
    clients: Optional[list[str]] = None


@dataclass
class PluginResult:
    """Result of syncing one plugin."""

    plugin: str
    success: bool
    plugin_name: Optional[str] = None
    path: Optional[Path] = None
    error: Optional[str] = None
    copy_results: list[CopyResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "plugin": self.plugin,
            "success": self.success,
            "copyResults": [r.to_dict() for r in self.copy_results],
        }
        if self.plugin_name:
            data["pluginName"] = self.plugin_name
        if self.error:
            data["error"] = self.error
        return data


@dataclass
class SyncResult:
    """Result of a complete sync operation."""

    success: bool
    total_copied: int = 0
    total_generated: int = 0
    total_failed: int = 0
    total_skipped: int = 0
    plugin_results: list[PluginResult] = field(default_factory=list)
    purged_paths: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    error: Optional[str] = None
    dry_run: bool = False

    @property
    def has_issues(self) -> bool:
        """Check if there are any warnings or failures."""
        return bool(self.warnings) or self.total_failed > 0 or self.error is not None

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data: dict[str, Any] = {
            "success": self.success,
            "dryRun": self.dry_run,
            "totalCopied": self.total_copied,
            "totalGenerated": self.total_generated,
            "totalFailed": self.total_failed,
            "totalSkipped": self.total_skipped,
            "pluginResults": [r.to_dict() for r in self.plugin_results],
            "purgedPaths": [str(p) for p in self.purged_paths],
            "warnings": list(self.warnings),
        }
        if self.error:
            data["error"] = self.error
        return data


class SyncEngine:
    """
    Main synchronization engine for one scope.

    All plugins are resolved and scanned before any name is decided, so a
    failing plugin never changes the names of another plugin's content.
    """

    def __init__(
        self,
        scope_root: Path,
        config: WorkspaceConfig,
        *,
        scope: Scope = Scope.PROJECT,
        resolver: Optional[PluginResolver] = None,
        state_manager: Optional[StateManager] = None,
        link_backend: Optional[LinkBackend] = None,
    ):
        """
        Initialize sync engine.

        Args:
            scope_root: Project directory, or home directory for user scope.
            config: Workspace configuration.
            scope: Selects the client mapping table.
            resolver: Plugin resolver (creates one for scope_root if not provided).
            state_manager: State manager (creates one for scope_root if not provided).
            link_backend: Override for the platform link backend.
        """
        self.scope_root = Path(scope_root).resolve()
        self.config = config
        self.scope = scope
        self.resolver = resolver or PluginResolver(self.scope_root)
        self.state_manager = state_manager or StateManager(self.scope_root)
        self.link_backend = link_backend

    def select_clients(self, requested: Optional[list[str]]) -> list[ClientId]:
        """
        Clients to sync this run.

        Raises:
            ConfigError: If a requested client is not configured.
        """
        if requested is None:
            return list(self.config.clients)

        configured = [c.value for c in self.config.clients]
        unknown = [name for name in requested if name not in configured]
        if unknown:
            raise ConfigError(
                f"Client(s) not configured in workspace.yaml: {', '.join(unknown)}\n"
                f"  Configured clients: {', '.join(configured) or '(none)'}"
            )
        return [c for c in self.config.clients if c.value in requested]

    def collect_content(self, offline: bool = False) -> tuple[list[PluginResult], list[ContentItem], list[str]]:
        """
        Resolve and scan every configured plugin.

        Resolution failures only produce a warning. Scan failures produce a
        failed PluginResult and a warning. Both name the plugin source, as
        does the warning for a source listed twice.

        Returns:
            Tuple of (plugin_results, items, warnings).
        """
        plugin_results: list[PluginResult] = []
        items: list[ContentItem] = []
        warnings: list[str] = []
        disabled = self.config.disabled_set()
        seen: set[str] = set()

        for source in self.config.plugins:
            if source in seen:
                warnings.append(f"Plugin '{source}' is listed more than once; ignoring the duplicate")
                continue
            seen.add(source)

            resolved = self.resolver.resolve(source, offline=offline)
            if not resolved.success:
                warnings.append(f"Plugin '{source}' could not be resolved: {resolved.error}")
                continue

            plugin = ResolvedPlugin(source=source, local_path=resolved.path, plugin_name=resolved.plugin_name)
            try:
                found, scan_warnings = scan_plugin_content(plugin, disabled)
            except Exception as e:
                warnings.append(f"Plugin '{source}' could not be scanned: {e}")
                plugin_results.append(
                    PluginResult(
                        plugin=source,
                        success=False,
                        plugin_name=plugin.plugin_name,
                        path=plugin.local_path,
                        error=str(e),
                    )
                )
                continue

            items.extend(found)
            warnings.extend(scan_warnings)
            plugin_results.append(
                PluginResult(plugin=source, success=True, plugin_name=plugin.plugin_name, path=plugin.local_path)
            )

        return plugin_results, items, warnings

    def plan(self, items: list[ContentItem], clients: list[ClientId]) -> PlacementPlan:
        """Resolve names and plan placement for the given clients."""
        return plan_placement(
            resolve_names(items),
            clients,
            scope_root=self.scope_root,
            scope=self.scope,
            mode=self.config.sync_mode,
        )

    def execute(self, plan: PlacementPlan, plugin_results: list[PluginResult], *, dry_run: bool = False) -> None:
        """Materialize the plan, attaching copy results to their plugins."""
        by_source = {result.plugin: result for result in plugin_results}

        # Canonical copies first; links and reused paths depend on them
        for target in plan.canonical_targets + plan.client_targets:
            copy_result = execute_target(target, dry_run=dry_run, link_backend=self.link_backend)
            plugin_result = by_source.get(target.plugin_source)
            if plugin_result is None:
                continue
            plugin_result.copy_results.append(copy_result)
            if copy_result.action == ActionType.FAILED:
                plugin_result.success = False

    def sync(self, options: Optional[SyncOptions] = None) -> SyncResult:
        """
        Run a full sync.

        Args:
            options: Run options.

        Returns:
            SyncResult with per-plugin results, totals and purged paths.
        """
        options = options or SyncOptions()
        dry_run = options.dry_run

        try:
            clients = self.select_clients(options.clients)
        except ConfigError as e:
            return SyncResult(success=False, error=str(e), dry_run=dry_run)

        plugin_results, items, warnings = self.collect_content(offline=options.offline)

        synced = [result for result in plugin_results if result.error is None]
        if self.config.plugins and not synced:
            # Nothing usable: leave the workspace and its state untouched
            return SyncResult(success=False, plugin_results=plugin_results, warnings=warnings, dry_run=dry_run)

        plan = self.plan(items, clients)
        warnings.extend(plan.warnings)
        self.execute(plan, plugin_results, dry_run=dry_run)

        previous = self.state_manager.load()
        new_files = plan.tracked_paths()
        carried, stale = self._diff_state(previous, new_files, partial=options.clients is not None)
        keep = {path for paths in new_files.values() for path in paths}
        keep.update(path for paths in carried.values() for path in paths)

        purge = purge_stale_paths(sorted(stale - keep), keep, self.scope_root, dry_run=dry_run)
        warnings.extend(purge.warnings)

        if not dry_run:
            self.state_manager.save(
                {**carried, **new_files},
                mcp_servers=previous.mcp_servers if previous else None,
            )

        # At least one plugin must have placed everything it planned
        result = SyncResult(
            success=not self.config.plugins or any(r.success for r in plugin_results),
            plugin_results=plugin_results,
            purged_paths=purge.purged,
            warnings=warnings,
            dry_run=dry_run,
        )
        for plugin_result in plugin_results:
            for copy_result in plugin_result.copy_results:
                if copy_result.action == ActionType.COPIED:
                    result.total_copied += 1
                elif copy_result.action == ActionType.GENERATED:
                    result.total_generated += 1
                elif copy_result.action == ActionType.SKIPPED:
                    result.total_skipped += 1
                else:
                    result.total_failed += 1
        return result

    @staticmethod
    def _diff_state(
        previous: Optional[SyncState],
        new_files: dict[str, list[str]],
        *,
        partial: bool,
    ) -> tuple[dict[str, list[str]], set[str]]:
        """
        Split the previous state into carried-over entries and purge candidates.

        A partial sync carries over every client it does not target. A full
        sync carries nothing, so clients dropped from the config are purged.

        Returns:
            Tuple of (carried files per client, previously tracked paths to check).
        """
        if previous is None:
            return {}, set()

        carried: dict[str, list[str]] = {}
        candidates: set[str] = set()
        for client, paths in previous.files.items():
            if partial and client.value not in new_files:
                carried[client.value] = list(paths)
            else:
                candidates.update(paths)
        return carried, candidates


def sync_workspace(scope_root: Optional[Path] = None, options: Optional[SyncOptions] = None) -> SyncResult:
    """
    Sync a project workspace.

    When scope_root is the user root, the run uses the user scope.

    Args:
        scope_root: Workspace directory (defaults to the current directory).
        options: Run options.

    Returns:
        SyncResult. Configuration problems are reported in its error field.
    """
    scope_root = Path(scope_root or Path.cwd())
    scope = Scope.USER if is_user_config_path(scope_root) else Scope.PROJECT
    return _sync_scope(scope_root, scope, options)


def sync_user_workspace(options: Optional[SyncOptions] = None) -> SyncResult:
    """Sync the user-level workspace into the home directory layouts."""
    return _sync_scope(get_user_root(), Scope.USER, options)


def _sync_scope(scope_root: Path, scope: Scope, options: Optional[SyncOptions]) -> SyncResult:
    options = options or SyncOptions()
    try:
        config = load_workspace_config(get_config_path(scope_root))
    except (FileNotFoundError, ConfigError) as e:
        return SyncResult(success=False, error=str(e), dry_run=options.dry_run)

    return SyncEngine(scope_root, config, scope=scope).sync(options)


@dataclass
class PluginStatus:
    """Availability of one configured plugin."""

    source: str
    kind: Optional[str]
    available: bool
    plugin_name: Optional[str] = None
    path: Optional[Path] = None
    error: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "kind": self.kind,
            "available": self.available,
            "pluginName": self.plugin_name,
            "path": str(self.path) if self.path else None,
            "error": self.error,
        }


@dataclass
class WorkspaceStatus:
    """Overview of a workspace without syncing it."""

    scope_root: Path
    scope: Scope
    clients: list[ClientId] = field(default_factory=list)
    plugins: list[PluginStatus] = field(default_factory=list)
    last_sync: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "scope": self.scope.value,
            "root": str(self.scope_root),
            "clients": [c.value for c in self.clients],
            "plugins": [p.to_dict() for p in self.plugins],
            "lastSync": self.last_sync,
        }
        if self.error:
            data["error"] = self.error
        return data


def get_workspace_status(scope_root: Optional[Path] = None, *, scope: Scope = Scope.PROJECT) -> WorkspaceStatus:
    """
    Report configured plugins and clients without touching the network.

    Args:
        scope_root: Workspace directory (defaults to the current directory,
            or the user root for user scope).
        scope: Project or user scope.

    Returns:
        WorkspaceStatus. Configuration problems are reported in its error field.
    """
    if scope_root is None:
        scope_root = get_user_root() if scope == Scope.USER else Path.cwd()
    scope_root = Path(scope_root).resolve()
    status = WorkspaceStatus(scope_root=scope_root, scope=scope)

    try:
        config = load_workspace_config(get_config_path(scope_root))
    except (FileNotFoundError, ConfigError) as e:
        status.error = str(e)
        return status

    status.clients = list(config.clients)
    previous = StateManager(scope_root).load()
    status.last_sync = previous.last_sync if previous else None

    resolver = PluginResolver(scope_root)
    for source in config.plugins:
        try:
            kind: Optional[str] = parse_plugin_source(source, scope_root).kind.value
        except ValueError:
            kind = None
        resolved = resolver.resolve(source, offline=True)
        status.plugins.append(
            PluginStatus(
                source=source,
                kind=kind,
                available=resolved.success,
                plugin_name=resolved.plugin_name,
                path=resolved.path,
                error=resolved.error,
            )
        )
    return status
