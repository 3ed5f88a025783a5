# agentsync Sync Module
# Scanning, naming, placement, execution and state for plugin content

from agentsync.sync.actions import ActionType, CopyResult, execute_target, purge_stale_paths
from agentsync.sync.clients import ClientMapping, get_client_mapping, get_client_mappings
from agentsync.sync.engine import (
    PluginResult,
    SyncEngine,
    SyncOptions,
    SyncResult,
    WorkspaceStatus,
    get_workspace_status,
    sync_user_workspace,
    sync_workspace,
)
from agentsync.sync.inventory import SkillInfo, find_skill, list_workspace_skills
from agentsync.sync.item import ContentItem, ResolvedPlugin, scan_plugin_content
from agentsync.sync.naming import ResolvedItem, resolve_names
from agentsync.sync.planner import PlacementPlan, PlannedTarget, TargetKind, plan_placement
from agentsync.sync.state import StateManager, SyncState

__all__ = [
    # Clients
    "ClientMapping",
    "get_client_mapping",
    "get_client_mappings",
    # Item
    "ContentItem",
    "ResolvedPlugin",
    "scan_plugin_content",
    # Inventory
    "SkillInfo",
    "find_skill",
    "list_workspace_skills",
    # Naming
    "ResolvedItem",
    "resolve_names",
    # Planner
    "PlacementPlan",
    "PlannedTarget",
    "TargetKind",
    "plan_placement",
    # Actions
    "ActionType",
    "CopyResult",
    "execute_target",
    "purge_stale_paths",
    # State
    "SyncState",
    "StateManager",
    # Engine
    "SyncEngine",
    "SyncOptions",
    "SyncResult",
    "PluginResult",
    "WorkspaceStatus",
    "get_workspace_status",
    "sync_workspace",
    "sync_user_workspace",
]
