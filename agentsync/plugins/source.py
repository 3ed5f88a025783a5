# agentsync Plugin Sources
# Classify plugin source strings and read plugin manifests

import json
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from agentsync.config.defaults import PLUGIN_MANIFEST_FILE
from agentsync.utils.paths import expand_path, is_safe_component
from agentsync.utils.validation import ParseResult, parse_model


class SourceKind(str, Enum):
    """Where a plugin comes from."""

    LOCAL = "local"
    GITHUB = "github"
    MARKETPLACE = "marketplace"


@dataclass(frozen=True)
class PluginSourceInfo:
    """A classified plugin source string."""

    original: str
    kind: SourceKind
    local_path: Optional[Path] = None
    owner: Optional[str] = None
    repo: Optional[str] = None
    branch: Optional[str] = None
    subpath: Optional[str] = None
    plugin: Optional[str] = None
    marketplace: Optional[str] = None

    @property
    def cache_key(self) -> Optional[str]:
        """Cache directory name of a GitHub source."""
        if self.kind != SourceKind.GITHUB:
            return None
        key = f"{self.owner}-{self.repo}"
        if self.branch:
            key += f"@{self.branch.replace('/', '-')}"
        return key


class PluginManifest(BaseModel):
    """Contents of plugin.json."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    version: Optional[str] = None
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def single_path_component(cls, v: str) -> str:
        # The name ends up in target directory names
        if not is_safe_component(v):
            raise ValueError("must not contain path separators or be '.' or '..'")
        return v


_GITHUB_URL = re.compile(
    r"^(?:https?://)?(?:www\.)?github\.com/(?P<owner>[^/\s]+)/(?P<repo>[^/\s#]+?)(?:\.git)?"
    r"(?:/tree/(?P<branch>[^/\s]+)(?:/(?P<subpath>.+?))?)?/?(?:#(?P<ref>[^\s]+))?$"
)
_GITHUB_SHORTHAND = re.compile(
    r"^(?:gh|github):(?P<owner>[^/\s]+)/(?P<repo>[^/\s#]+?)(?:\.git)?(?:/(?P<subpath>[^#\s]+?))?/?(?:#(?P<ref>[^\s]+))?$"
)
_MARKETPLACE_SPEC = re.compile(r"^(?P<plugin>[A-Za-z0-9][\w.-]*)@(?P<marketplace>[A-Za-z0-9][\w.-]*)$")


def is_github_source(source: str) -> bool:
    """Check if source names a GitHub repository."""
    return bool(
        re.match(r"^(?:https?://)?(?:www\.)?github\.com/", source) or re.match(r"^(?:gh|github):", source)
    )


def parse_plugin_source(source: str, base_dir: Optional[Path] = None) -> PluginSourceInfo:
    """
    Classify a plugin source string.

    Args:
        source: Source reference from workspace.yaml.
        base_dir: Directory relative local paths are resolved against.

    Returns:
        PluginSourceInfo describing the source.

    Raises:
        ValueError: If the source is empty or a malformed GitHub reference.
    """
    source = source.strip()
    if not source:
        raise ValueError("Plugin source cannot be empty")

    if is_github_source(source):
        match = _GITHUB_URL.match(source) or _GITHUB_SHORTHAND.match(source)
        if not match:
            raise ValueError(f"Invalid GitHub reference '{source}'. Expected owner/repo, e.g. gh:owner/repo")
        groups = match.groupdict()
        return PluginSourceInfo(
            original=source,
            kind=SourceKind.GITHUB,
            owner=groups["owner"],
            repo=groups["repo"],
            branch=groups.get("ref") or groups.get("branch"),
            subpath=(groups.get("subpath") or "").strip("/") or None,
        )

    match = _MARKETPLACE_SPEC.match(source)
    if match:
        return PluginSourceInfo(
            original=source,
            kind=SourceKind.MARKETPLACE,
            plugin=match.group("plugin"),
            marketplace=match.group("marketplace"),
        )

    path = expand_path(source)
    if not path.is_absolute():
        path = (base_dir or Path.cwd()) / path
    return PluginSourceInfo(original=source, kind=SourceKind.LOCAL, local_path=path.resolve())


def read_plugin_manifest(plugin_dir: Path) -> ParseResult[PluginManifest]:
    """
    Read and validate plugin.json from a plugin directory.

    Args:
        plugin_dir: Plugin root.

    Returns:
        ParseResult holding the manifest or the problems found.
    """
    manifest_path = plugin_dir / PLUGIN_MANIFEST_FILE
    if not manifest_path.is_file():
        return ParseResult.failure(f"{PLUGIN_MANIFEST_FILE} not found")
    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return ParseResult.failure(f"cannot read {PLUGIN_MANIFEST_FILE}: {e}")
    if not isinstance(data, dict):
        return ParseResult.failure(f"{PLUGIN_MANIFEST_FILE} must contain an object")
    return parse_model(PluginManifest, data)


def get_plugin_name(plugin_dir: Path) -> str:
    """
    Name a plugin identifies itself by.

    Args:
        plugin_dir: Plugin root.

    Returns:
        The manifest name if plugin.json is valid, else the directory name.
    """
    result = read_plugin_manifest(plugin_dir)
    if result.ok:
        return result.value.name
    return Path(plugin_dir).name
