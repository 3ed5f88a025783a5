# agentsync Default Configuration
# Well-known file names and the default workspace.yaml

from typing import Any, Optional

import yaml

from agentsync.config.schema import ClientId, SyncMode

CONFIG_DIR = ".agentsync"
WORKSPACE_CONFIG_FILE = "workspace.yaml"
SYNC_STATE_FILE = "sync-state.json"
PLUGIN_MANIFEST_FILE = "plugin.json"
MARKETPLACE_REGISTRY_FILE = "marketplaces.json"
SKILL_FILE = "SKILL.md"

# Canonical store directory (symlink mode), relative to the scope root
CANONICAL_DIR = ".agents"

ALL_CLIENTS: list[str] = [client.value for client in ClientId]

DEFAULT_CONFIG: dict[str, Any] = {
    "repositories": [],
    "plugins": [],
    "clients": ["claude"],
    "syncMode": SyncMode.SYMLINK.value,
    "disabledSkills": [],
}


def get_default_config(
    clients: Optional[list[str]] = None,
    plugins: Optional[list[str]] = None,
) -> dict[str, Any]:
    """Get a fresh default workspace config with optional overrides."""
    config = {key: (list(value) if isinstance(value, list) else value) for key, value in DEFAULT_CONFIG.items()}
    if clients:
        config["clients"] = list(clients)
    if plugins:
        config["plugins"] = list(plugins)
    return config


def generate_default_config(
    clients: Optional[list[str]] = None,
    plugins: Optional[list[str]] = None,
) -> str:
    """Generate default workspace.yaml as YAML string with comments."""
    header = f"""# agentsync workspace configuration
#
# plugins:        local paths, GitHub references (owner/repo, gh:owner/repo,
#                 https://github.com/owner/repo) or plugin@marketplace specs
# clients:        {", ".join(ALL_CLIENTS)}
# syncMode:       symlink (shared {CANONICAL_DIR}/ store + links) or copy
# disabledSkills: entries of the form pluginName:skillName

"""
    data = get_default_config(clients=clients, plugins=plugins)
    return header + yaml.dump(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
