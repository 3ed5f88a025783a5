# agentsync Content Items
# Enumerate the skills, commands, hooks and agents a plugin ships

from dataclasses import dataclass
from pathlib import Path

from agentsync.config.schema import ContentCategory
from agentsync.skill import validate_skill


@dataclass(frozen=True)
class ResolvedPlugin:
    """A plugin source that was turned into a local directory for this run."""

    source: str
    local_path: Path
    plugin_name: str


@dataclass(frozen=True)
class ContentItem:
    """
    One piece of content shipped by a plugin.

    Skills are directories; commands, hooks and agents may be files or
    directories. The raw name is the entry name inside the plugin's
    category directory.
    """

    category: ContentCategory
    raw_name: str
    plugin_name: str
    plugin_source: str
    source_path: Path
    disabled: bool = False

    @property
    def disabled_key(self) -> str:
        """Key used by the workspace disabledSkills list."""
        return f"{self.plugin_name}:{self.raw_name}"


def _iter_entries(category_dir: Path) -> list[Path]:
    """Visible immediate entries of a category directory, sorted by name."""
    if not category_dir.is_dir():
        return []
    return sorted((entry for entry in category_dir.iterdir() if not entry.name.startswith(".")), key=lambda p: p.name)


def scan_category(
    plugin: ResolvedPlugin,
    category: ContentCategory,
    disabled: set[str] | None = None,
) -> tuple[list[ContentItem], list[str]]:
    """
    Scan one category directory of a plugin.

    Args:
        plugin: The resolved plugin.
        category: Category to scan.
        disabled: Workspace set of "pluginName:skillName" keys.

    Returns:
        Tuple of (items, warnings). Skills without valid metadata are
        left out and reported as warnings.
    """
    disabled = disabled or set()
    items: list[ContentItem] = []
    warnings: list[str] = []

    for entry in _iter_entries(plugin.local_path / category.dir_name):
        if category == ContentCategory.SKILL:
            if not entry.is_dir():
                continue
            result = validate_skill(entry)
            if not result.ok:
                warnings.append(f"Skipping skill '{entry.name}' from {plugin.source}: {result.error}")
                continue
        elif category == ContentCategory.COMMAND and not (entry.is_file() and entry.suffix == ".md"):
            # Commands are single markdown files
            continue

        is_disabled = category == ContentCategory.SKILL and f"{plugin.plugin_name}:{entry.name}" in disabled
        items.append(
            ContentItem(
                category=category,
                raw_name=entry.name,
                plugin_name=plugin.plugin_name,
                plugin_source=plugin.source,
                source_path=entry,
                disabled=is_disabled,
            )
        )

    return items, warnings


def scan_plugin_content(
    plugin: ResolvedPlugin,
    disabled: set[str] | None = None,
) -> tuple[list[ContentItem], list[str]]:
    """
    Enumerate every content item of a plugin.

    Missing category directories simply contribute nothing.

    Args:
        plugin: The resolved plugin.
        disabled: Workspace set of "pluginName:skillName" keys.

    Returns:
        Tuple of (items in category order, warnings).
    """
    items: list[ContentItem] = []
    warnings: list[str] = []
    for category in ContentCategory:
        found, category_warnings = scan_category(plugin, category, disabled)
        items.extend(found)
        warnings.extend(category_warnings)
    return items, warnings
