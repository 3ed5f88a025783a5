# agentsync Skill Inventory
# List the skills a workspace's plugins ship and pick one by name

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from agentsync.config.loader import get_config_path, load_workspace_config
from agentsync.config.schema import ContentCategory, Scope
from agentsync.plugins.resolver import PluginResolver
from agentsync.sync.engine import SyncEngine


@dataclass(frozen=True)
class SkillInfo:
    """A skill shipped by one configured plugin."""

    name: str
    plugin_name: str
    plugin_source: str
    disabled: bool = False

    @property
    def key(self) -> str:
        """Entry used in the workspace disabledSkills list."""
        return f"{self.plugin_name}:{self.name}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "plugin": self.plugin_name,
            "source": self.plugin_source,
            "disabled": self.disabled,
        }


def list_workspace_skills(
    scope_root: Path,
    *,
    scope: Scope = Scope.PROJECT,
    resolver: Optional[PluginResolver] = None,
) -> tuple[list[SkillInfo], list[str]]:
    """
    List every valid skill of the configured plugins, disabled ones included.

    Remote plugins are served from the cache; nothing is fetched.

    Args:
        scope_root: Workspace directory, or the user root for user scope.
        scope: Project or user scope.
        resolver: Plugin resolver (creates one for scope_root if not provided).

    Returns:
        Tuple of (skills in plugin order, warnings).

    Raises:
        FileNotFoundError: If the workspace has no workspace.yaml.
        ConfigError: If workspace.yaml is invalid.
    """
    config = load_workspace_config(get_config_path(scope_root))
    engine = SyncEngine(scope_root, config, scope=scope, resolver=resolver)
    _, items, warnings = engine.collect_content(offline=True)

    skills = [
        SkillInfo(
            name=item.raw_name,
            plugin_name=item.plugin_name,
            plugin_source=item.plugin_source,
            disabled=item.disabled,
        )
        for item in items
        if item.category == ContentCategory.SKILL
    ]
    return skills, warnings


def find_skill(skills: list[SkillInfo], name: str, plugin: Optional[str] = None) -> SkillInfo:
    """
    Pick one skill by name.

    Args:
        skills: Inventory from list_workspace_skills().
        name: Skill directory name.
        plugin: Plugin name, needed when several plugins ship the skill.

    Returns:
        The matching skill.

    Raises:
        LookupError: If no plugin ships the skill, or it is ambiguous
            without a plugin, or the given plugin doesn't ship it.
    """
    matches = [skill for skill in skills if skill.name == name]
    if not matches:
        available = ", ".join(sorted({skill.name for skill in skills})) or "none"
        raise LookupError(f"Skill '{name}' not found in any configured plugin\n  Available skills: {available}")

    if plugin is not None:
        for skill in matches:
            if skill.plugin_name == plugin:
                return skill
        shipped_by = ", ".join(skill.plugin_name for skill in matches)
        raise LookupError(f"Plugin '{plugin}' does not ship skill '{name}'\n  Shipped by: {shipped_by}")

    if len(matches) > 1:
        plugins = "\n".join(f"  - {skill.plugin_name} ({skill.plugin_source})" for skill in matches)
        raise LookupError(f"'{name}' exists in multiple plugins:\n{plugins}\n  Use --plugin to pick one")

    return matches[0]
