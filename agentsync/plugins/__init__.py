# agentsync Plugins Module
# Plugin source classification and resolution

from agentsync.plugins.marketplace import (
    MarketplaceEntry,
    add_marketplace,
    find_marketplace_dir,
    list_marketplaces,
    remove_marketplace,
)
from agentsync.plugins.resolver import PluginResolver, ResolveResult
from agentsync.plugins.source import (
    PluginManifest,
    PluginSourceInfo,
    SourceKind,
    get_plugin_name,
    parse_plugin_source,
    read_plugin_manifest,
)

__all__ = [
    "MarketplaceEntry",
    "add_marketplace",
    "find_marketplace_dir",
    "list_marketplaces",
    "remove_marketplace",
    "PluginResolver",
    "ResolveResult",
    "PluginManifest",
    "PluginSourceInfo",
    "SourceKind",
    "get_plugin_name",
    "parse_plugin_source",
    "read_plugin_manifest",
]
