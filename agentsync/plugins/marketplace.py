# agentsync Marketplaces
# Registry of plugin marketplaces behind plugin@marketplace sources

import json
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from agentsync.config.defaults import CONFIG_DIR, MARKETPLACE_REGISTRY_FILE
from agentsync.config.loader import get_user_root
from agentsync.git.operations import GIT_TIMEOUT, clone_repo, github_url
from agentsync.plugins.source import is_github_source, parse_plugin_source
from agentsync.utils.paths import expand_path, remove_path
from agentsync.utils.validation import parse_model

# Names must survive the plugin@marketplace syntax
_MARKETPLACE_NAME = re.compile(r"^[A-Za-z0-9][\w.-]*$")
_OWNER_REPO = re.compile(r"^(?P<owner>[A-Za-z0-9][\w.-]*)/(?P<repo>[\w.-]+?)(?:\.git)?$")


class MarketplaceEntry(BaseModel):
    """One registered marketplace."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    kind: Literal["local", "github"]
    location: str
    path: Path
    last_updated: str = Field(alias="lastUpdated")


class MarketplaceRegistry(BaseModel):
    """Contents of marketplaces.json."""

    version: Literal[1] = 1
    marketplaces: dict[str, MarketplaceEntry] = Field(default_factory=dict)


@dataclass(frozen=True)
class MarketplaceSource:
    """A classified marketplace source string."""

    kind: str
    location: str
    name: str
    owner: Optional[str] = None
    repo: Optional[str] = None
    branch: Optional[str] = None


def get_marketplaces_dir() -> Path:
    """Directory holding cloned marketplaces."""
    return get_user_root() / CONFIG_DIR / "marketplaces"


def get_registry_path() -> Path:
    """Path of the marketplace registry file."""
    return get_user_root() / CONFIG_DIR / MARKETPLACE_REGISTRY_FILE


def load_registry(registry_path: Optional[Path] = None) -> MarketplaceRegistry:
    """
    Load the marketplace registry.

    A missing, unreadable or invalid file reads as an empty registry.
    """
    registry_path = registry_path or get_registry_path()
    if not registry_path.exists():
        return MarketplaceRegistry()

    try:
        with open(registry_path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return MarketplaceRegistry()

    result = parse_model(MarketplaceRegistry, data)
    return result.value if result.ok else MarketplaceRegistry()


def save_registry(registry: MarketplaceRegistry, registry_path: Optional[Path] = None) -> Path:
    """Write the whole registry back to disk."""
    registry_path = registry_path or get_registry_path()
    registry_path.parent.mkdir(parents=True, exist_ok=True)
    data = registry.model_dump(mode="json", by_alias=True)
    with open(registry_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
        f.write("\n")
    return registry_path


def parse_marketplace_source(source: str, base_dir: Optional[Path] = None) -> MarketplaceSource:
    """
    Classify a marketplace source.

    Accepts GitHub URLs, gh:owner/repo, plain owner/repo and local paths
    starting with ".", "/" or "~".

    Raises:
        ValueError: If the source matches none of these forms.
    """
    source = source.strip()
    if not source:
        raise ValueError("Marketplace source cannot be empty")

    if is_github_source(source):
        info = parse_plugin_source(source)
        return MarketplaceSource(
            kind="github",
            location=f"{info.owner}/{info.repo}",
            name=info.repo,
            owner=info.owner,
            repo=info.repo,
            branch=info.branch,
        )

    if source.startswith((".", "/", "~")):
        path = expand_path(source)
        if not path.is_absolute():
            path = (base_dir or Path.cwd()) / path
        path = path.resolve()
        return MarketplaceSource(kind="local", location=str(path), name=path.name)

    match = _OWNER_REPO.match(source)
    if match:
        owner, repo = match.group("owner"), match.group("repo")
        return MarketplaceSource(kind="github", location=f"{owner}/{repo}", name=repo, owner=owner, repo=repo)

    raise ValueError(f"Invalid marketplace source: {source}\n  Use a GitHub URL, owner/repo or a local path")


def add_marketplace(
    source: str,
    *,
    name: Optional[str] = None,
    base_dir: Optional[Path] = None,
    registry_path: Optional[Path] = None,
    marketplaces_dir: Optional[Path] = None,
    timeout: float = GIT_TIMEOUT,
) -> MarketplaceEntry:
    """
    Register a marketplace, cloning it first when it lives on GitHub.

    Args:
        source: GitHub reference or local directory.
        name: Registry name (defaults to the repository or directory name).
        base_dir: Directory relative local paths are resolved against.
        registry_path: Override for the registry file.
        marketplaces_dir: Override for the clone directory.
        timeout: Seconds allowed for the clone.

    Returns:
        The new registry entry.

    Raises:
        ValueError: If the source or name is invalid or already registered.
        FileNotFoundError: If a local marketplace directory doesn't exist.
        GitError: If cloning fails.
    """
    parsed = parse_marketplace_source(source, base_dir)
    name = name or parsed.name
    if not _MARKETPLACE_NAME.match(name):
        raise ValueError(f"Invalid marketplace name '{name}': use letters, digits, '.', '_' and '-'")

    registry = load_registry(registry_path)
    if name in registry.marketplaces:
        raise ValueError(f"Marketplace '{name}' is already registered")

    if parsed.kind == "github":
        path = (marketplaces_dir or get_marketplaces_dir()) / name
        # A leftover checkout from an interrupted registration is reused
        if not path.exists():
            clone_repo(github_url(parsed.owner, parsed.repo), path, branch=parsed.branch, timeout=timeout)
    else:
        path = Path(parsed.location)
        if not path.is_dir():
            raise FileNotFoundError(f"Local directory not found: {path}")

    entry = MarketplaceEntry(
        name=name,
        kind=parsed.kind,
        location=parsed.location,
        path=path,
        last_updated=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
    registry.marketplaces[name] = entry
    save_registry(registry, registry_path)
    return entry


def remove_marketplace(
    name: str,
    *,
    registry_path: Optional[Path] = None,
    marketplaces_dir: Optional[Path] = None,
) -> MarketplaceEntry:
    """
    Unregister a marketplace.

    Clones agentsync made are deleted; local directories are left alone.

    Raises:
        KeyError: If no marketplace has that name.
    """
    registry = load_registry(registry_path)
    entry = registry.marketplaces.pop(name, None)
    if entry is None:
        raise KeyError(f"Marketplace '{name}' is not registered")

    save_registry(registry, registry_path)

    clones = (marketplaces_dir or get_marketplaces_dir()).resolve()
    if entry.kind == "github" and clones in entry.path.resolve().parents:
        remove_path(entry.path)
    return entry


def list_marketplaces(registry_path: Optional[Path] = None) -> list[MarketplaceEntry]:
    """Registered marketplaces sorted by name."""
    return sorted(load_registry(registry_path).marketplaces.values(), key=lambda entry: entry.name)


def find_marketplace_dir(
    name: str,
    *,
    registry_path: Optional[Path] = None,
    marketplaces_dir: Optional[Path] = None,
) -> Optional[Path]:
    """
    Directory of a marketplace.

    Registered entries win; an unregistered directory under the clone
    directory still counts so hand-placed checkouts keep working.
    """
    entry = load_registry(registry_path).marketplaces.get(name)
    if entry is not None:
        return entry.path if entry.path.is_dir() else None
    candidate = (marketplaces_dir or get_marketplaces_dir()) / name
    return candidate if candidate.is_dir() else None
