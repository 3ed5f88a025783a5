# agentsync Configuration Module
# Handles workspace.yaml loading, validation, and defaults

from agentsync.config.defaults import (
    ALL_CLIENTS,
    CANONICAL_DIR,
    CONFIG_DIR,
    SYNC_STATE_FILE,
    WORKSPACE_CONFIG_FILE,
    generate_default_config,
)
from agentsync.config.loader import (
    add_disabled_skill,
    add_plugin,
    ensure_user_workspace,
    get_config_dir,
    get_config_path,
    get_user_config_path,
    get_user_root,
    init_workspace,
    load_workspace_config,
    parse_workspace_config,
    remove_disabled_skill,
    remove_plugin,
    save_workspace_config,
    validate_config_file,
)
from agentsync.config.schema import (
    ClientId,
    ContentCategory,
    Repository,
    Scope,
    SyncMode,
    VscodeConfig,
    WorkspaceConfig,
)

__all__ = [
    # Schema
    "WorkspaceConfig",
    "Repository",
    "VscodeConfig",
    "ClientId",
    "ContentCategory",
    "Scope",
    "SyncMode",
    # Loader
    "load_workspace_config",
    "parse_workspace_config",
    "save_workspace_config",
    "validate_config_file",
    "init_workspace",
    "ensure_user_workspace",
    "add_plugin",
    "remove_plugin",
    "add_disabled_skill",
    "remove_disabled_skill",
    "get_config_dir",
    "get_config_path",
    "get_user_config_path",
    "get_user_root",
    # Defaults
    "ALL_CLIENTS",
    "CANONICAL_DIR",
    "CONFIG_DIR",
    "SYNC_STATE_FILE",
    "WORKSPACE_CONFIG_FILE",
    "generate_default_config",
]
