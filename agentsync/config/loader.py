# agentsync Configuration Loader
# Load, save, and manage workspace.yaml files

import os
from pathlib import Path
from typing import Any, Optional

import yaml

from agentsync.config.defaults import (
    ALL_CLIENTS,
    CONFIG_DIR,
    WORKSPACE_CONFIG_FILE,
    generate_default_config,
)
from agentsync.config.schema import WorkspaceConfig
from agentsync.errors import ConfigError
from agentsync.utils.validation import ParseResult, parse_model


def get_user_root() -> Path:
    """Get the user-scope root directory (home, or AGENTSYNC_HOME if set)."""
    env_home = os.environ.get("AGENTSYNC_HOME")
    if env_home:
        return Path(env_home).expanduser()
    return Path.home()


def get_config_dir(scope_root: Path) -> Path:
    """Get the .agentsync directory under a scope root."""
    return Path(scope_root) / CONFIG_DIR


def get_config_path(scope_root: Path) -> Path:
    """Get the path to workspace.yaml under a scope root."""
    return get_config_dir(scope_root) / WORKSPACE_CONFIG_FILE


def get_user_config_path() -> Path:
    """Get the path to the user-level workspace.yaml."""
    return get_config_path(get_user_root())


def is_user_config_path(scope_root: Path) -> bool:
    """Check whether a project root's config is actually the user config."""
    return get_config_path(scope_root).resolve() == get_user_config_path().resolve()


def parse_workspace_config(data: Any) -> ParseResult[WorkspaceConfig]:
    """
    Validate raw workspace data without raising.

    Args:
        data: Parsed YAML document.

    Returns:
        ParseResult with the WorkspaceConfig or a list of issues.
    """
    if data is not None and not isinstance(data, dict):
        return ParseResult.failure("workspace.yaml must contain a mapping at the top level")
    return parse_model(WorkspaceConfig, data)


def load_workspace_config(config_path: Path) -> WorkspaceConfig:
    """
    Load workspace configuration from YAML file.

    Args:
        config_path: Path to workspace.yaml.

    Returns:
        WorkspaceConfig: Validated configuration object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ConfigError: If the file is not valid YAML or fails validation.
    """
    if not config_path.exists():
        raise FileNotFoundError(
            f"Workspace configuration not found: {config_path}\nRun 'agentsync init' to create one."
        )

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path.name}: {e}") from e

    result = parse_workspace_config(data)
    if not result.ok:
        raise ConfigError(f"{config_path.name} validation failed:", result.issues)
    return result.value


def save_workspace_config(config: WorkspaceConfig, config_path: Path) -> Path:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration object to save.
        config_path: Target path.

    Returns:
        Path: Path where config was saved.
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # by_alias keeps the camelCase keys users write by hand
    data = config.model_dump(exclude_none=True, mode="json", by_alias=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    return config_path


def validate_config_file(config_path: Path) -> tuple[bool, list[str]]:
    """
    Validate a configuration file without loading it into the system.

    Args:
        config_path: Path to workspace.yaml.

    Returns:
        Tuple of (is_valid, error_messages).
    """
    if not config_path.exists():
        return False, [f"Configuration file not found: {config_path}"]

    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"Invalid YAML syntax: {e}"]

    result = parse_workspace_config(data)
    return result.ok, result.issues


def init_workspace(
    scope_root: Path,
    *,
    clients: Optional[list[str]] = None,
    plugins: Optional[list[str]] = None,
) -> tuple[Path, bool]:
    """
    Create a workspace.yaml under scope_root unless one exists.

    Returns:
        Tuple of (config_path, was_created).
    """
    config_path = get_config_path(scope_root)
    if config_path.exists():
        return config_path, False

    content = generate_default_config(clients=clients, plugins=plugins)
    result = parse_workspace_config(yaml.safe_load(content))
    if not result.ok:
        raise ConfigError("Invalid workspace settings:", result.issues)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(content, encoding="utf-8")
    return config_path, True


def ensure_user_workspace() -> tuple[Path, bool]:
    """Ensure the user-level workspace.yaml exists, targeting all clients."""
    return init_workspace(get_user_root(), clients=ALL_CLIENTS)


def add_plugin(config_path: Path, source: str) -> WorkspaceConfig:
    """
    Add a plugin source to a workspace config and save.

    Raises:
        ValueError: If the plugin is already listed.
    """
    config = load_workspace_config(config_path)
    source = source.strip()
    if source in config.plugins:
        raise ValueError(f"Plugin already in workspace: {source}")
    config.plugins.append(source)
    save_workspace_config(config, config_path)
    return config


def remove_plugin(config_path: Path, source: str) -> WorkspaceConfig:
    """
    Remove a plugin source from a workspace config and save.

    Raises:
        KeyError: If the plugin isn't listed.
    """
    config = load_workspace_config(config_path)
    source = source.strip()
    if source not in config.plugins:
        raise KeyError(f"Plugin '{source}' not found in workspace")
    config.plugins.remove(source)
    save_workspace_config(config, config_path)
    return config


def add_disabled_skill(config_path: Path, key: str) -> WorkspaceConfig:
    """
    Disable a skill by its "pluginName:skillName" key and save.

    Raises:
        ValueError: If the key is malformed or already disabled.
    """
    config = load_workspace_config(config_path)
    if key in config.disabled_skills:
        raise ValueError(f"Skill '{key}' is already disabled")
    updated = parse_workspace_config(
        {**config.model_dump(mode="json", by_alias=True), "disabledSkills": [*config.disabled_skills, key]}
    )
    if not updated.ok:
        raise ValueError(updated.error)
    save_workspace_config(updated.value, config_path)
    return updated.value


def remove_disabled_skill(config_path: Path, key: str) -> WorkspaceConfig:
    """
    Re-enable a skill by removing its key from disabledSkills and save.

    Raises:
        KeyError: If the key isn't disabled.
    """
    config = load_workspace_config(config_path)
    if key not in config.disabled_skills:
        raise KeyError(f"Skill '{key}' is not disabled")
    config.disabled_skills.remove(key)
    save_workspace_config(config, config_path)
    return config
