# agentsync Plugin Resolver
# Turn plugin source strings into local plugin directories

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from agentsync.config.defaults import CONFIG_DIR
from agentsync.config.loader import get_user_root
from agentsync.errors import GitError, PluginResolutionError
from agentsync.git.operations import GIT_TIMEOUT, clone_repo, github_url, is_git_repo, pull_repo
from agentsync.plugins.marketplace import find_marketplace_dir, get_marketplaces_dir, get_registry_path
from agentsync.plugins.source import PluginSourceInfo, SourceKind, get_plugin_name, parse_plugin_source


@dataclass
class ResolveResult:
    """Outcome of resolving one plugin source."""

    success: bool
    source: str
    path: Optional[Path] = None
    plugin_name: Optional[str] = None
    error: Optional[str] = None
    # "local", "cached", "cloned", "updated"
    action: Optional[str] = None


def get_plugins_cache_dir() -> Path:
    """Directory holding cloned GitHub plugins."""
    return get_user_root() / CONFIG_DIR / "plugins" / "github"


class PluginResolver:
    """
    Resolves plugin sources for one scope.

    Local paths are resolved against the scope root, GitHub sources are
    cloned into a per-user cache and marketplace specs are looked up in
    registered marketplace directories.
    """

    def __init__(
        self,
        base_dir: Path,
        *,
        cache_dir: Optional[Path] = None,
        marketplaces_dir: Optional[Path] = None,
        registry_path: Optional[Path] = None,
        git_timeout: float = GIT_TIMEOUT,
    ):
        """
        Initialize resolver.

        Args:
            base_dir: Directory relative local sources are resolved against.
            cache_dir: Override for the GitHub clone cache.
            marketplaces_dir: Override for the marketplace directory.
            registry_path: Override for the marketplace registry file.
            git_timeout: Seconds allowed per clone or pull.
        """
        self.base_dir = Path(base_dir)
        self.cache_dir = cache_dir or get_plugins_cache_dir()
        self.marketplaces_dir = marketplaces_dir or get_marketplaces_dir()
        self.registry_path = registry_path or get_registry_path()
        self.git_timeout = git_timeout

    def resolve(self, source: str, *, offline: bool = False) -> ResolveResult:
        """
        Resolve a plugin source to a local directory. Never raises.

        Args:
            source: Plugin source string.
            offline: Serve remote plugins from the cache only.

        Returns:
            ResolveResult with the plugin path and name, or an error.
        """
        try:
            info = parse_plugin_source(source, self.base_dir)
            if info.kind == SourceKind.GITHUB:
                path, action = self._resolve_github(info, offline=offline)
            elif info.kind == SourceKind.MARKETPLACE:
                path, action = self._resolve_marketplace(info), "local"
            else:
                path, action = self._resolve_local(info), "local"
        except (ValueError, OSError, PluginResolutionError) as e:
            return ResolveResult(success=False, source=source, error=str(e))

        return ResolveResult(
            success=True,
            source=source,
            path=path,
            plugin_name=get_plugin_name(path),
            action=action,
        )

    def _resolve_local(self, info: PluginSourceInfo) -> Path:
        path = info.local_path
        if path is None or not path.is_dir():
            raise PluginResolutionError(f"Plugin directory not found: {path}")
        return path

    def _resolve_marketplace(self, info: PluginSourceInfo) -> Path:
        marketplace_dir = find_marketplace_dir(
            info.marketplace,
            registry_path=self.registry_path,
            marketplaces_dir=self.marketplaces_dir,
        )
        if marketplace_dir is None:
            raise PluginResolutionError(
                f"Marketplace '{info.marketplace}' is not registered or its directory is missing"
            )

        for candidate in (marketplace_dir / "plugins" / info.plugin, marketplace_dir / info.plugin):
            if candidate.is_dir():
                return candidate.resolve()
        raise PluginResolutionError(f"Plugin '{info.plugin}' not found in marketplace '{info.marketplace}'")

    def _resolve_github(self, info: PluginSourceInfo, *, offline: bool) -> tuple[Path, str]:
        checkout = self.cache_dir / info.cache_key
        cached = checkout.is_dir() and is_git_repo(checkout)

        if offline:
            if not cached:
                raise PluginResolutionError(f"{info.original} is not cached and offline mode is on")
            action = "cached"
        elif cached:
            try:
                pull_repo(checkout, timeout=self.git_timeout)
                action = "updated"
            except GitError:
                # Stale cache beats no plugin
                action = "cached"
        else:
            if checkout.exists():
                shutil.rmtree(checkout)
            url = github_url(info.owner, info.repo)
            try:
                clone_repo(url, checkout, branch=info.branch, timeout=self.git_timeout)
            except GitError as e:
                detail = f": {e.stderr}" if e.stderr else ""
                raise PluginResolutionError(f"Failed to fetch {info.original}: {e.message}{detail}") from e
            action = "cloned"

        path = checkout / info.subpath if info.subpath else checkout
        if not path.is_dir():
            raise PluginResolutionError(f"Path '{info.subpath}' not found in {info.owner}/{info.repo}")
        return path, action
