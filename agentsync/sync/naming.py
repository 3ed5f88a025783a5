# agentsync Name Resolution
# Collision-free names for content shipped by different plugins

from collections import Counter, defaultdict
from dataclasses import dataclass

from agentsync.config.schema import ContentCategory
from agentsync.sync.item import ContentItem
from agentsync.utils.hashing import short_id


@dataclass(frozen=True)
class ResolvedItem:
    """A content item together with the name it is placed under."""

    item: ContentItem
    final_name: str

    @property
    def category(self) -> ContentCategory:
        return self.item.category

    @property
    def renamed(self) -> bool:
        return self.final_name != self.item.raw_name


def _qualified_name(item: ContentItem) -> str:
    return f"{short_id(item.plugin_source)}_{item.plugin_name}_{item.raw_name}"


def resolve_category_names(items: list[ContentItem]) -> list[ResolvedItem]:
    """
    Compute final names for the items of one category.

    Items whose raw name is unique keep it. Colliding items are prefixed
    with their plugin name, and when several colliding items also share a
    plugin name each of them is further prefixed with a short id of its
    plugin source. A prefixed name that still collides with another final
    name gets the short id prefix too. The result depends only on the set
    of items, never on their order or on earlier runs.

    Args:
        items: Every item of one category across the workspace.

    Returns:
        ResolvedItems in the same order as items.
    """
    groups: dict[str, list[ContentItem]] = defaultdict(list)
    for item in items:
        groups[item.raw_name].append(item)

    names: list[str] = []
    for item in items:
        group = groups[item.raw_name]
        if len(group) == 1:
            names.append(item.raw_name)
            continue
        plugin_counts = Counter(member.plugin_name for member in group)
        if plugin_counts[item.plugin_name] == 1:
            names.append(f"{item.plugin_name}_{item.raw_name}")
        else:
            names.append(_qualified_name(item))

    # "alpha" + "common" can meet a raw "alpha_common" from another plugin
    while True:
        counts = Counter(names)
        widened = False
        for index, item in enumerate(items):
            qualified = _qualified_name(item)
            if counts[names[index]] > 1 and names[index] != qualified:
                names[index] = qualified
                widened = True
        if not widened:
            break

    return [ResolvedItem(item=item, final_name=name) for item, name in zip(items, names)]


def resolve_names(items: list[ContentItem]) -> list[ResolvedItem]:
    """
    Resolve names across all categories.

    Names only need to be unique within a category, so each category is
    resolved on its own.

    Args:
        items: Every scanned item of the workspace.

    Returns:
        ResolvedItems grouped by category, in scan order within a category.
    """
    by_category: dict[ContentCategory, list[ContentItem]] = defaultdict(list)
    for item in items:
        by_category[item.category].append(item)

    resolved: list[ResolvedItem] = []
    for category in ContentCategory:
        resolved.extend(resolve_category_names(by_category.get(category, [])))
    return resolved
