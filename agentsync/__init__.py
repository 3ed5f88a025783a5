"""agentsync - distribute plugin content to AI-assistant clients.

Syncs skills, commands, hooks and agent definitions declared in a workspace
configuration into the directory layouts expected by Claude, Copilot, Codex,
Cursor and other clients, without touching files it did not create.
"""

__version__ = "0.4.0"

__all__ = [
    "__version__",
    "SyncEngine",
    "SyncOptions",
    "SyncResult",
    "PluginResult",
    "sync_workspace",
    "sync_user_workspace",
    "WorkspaceConfig",
    "ClientId",
    "SyncMode",
]


def __getattr__(name: str):
    """Lazy import to avoid loading dependencies during setup."""
    if name in ("SyncEngine", "SyncOptions", "SyncResult", "PluginResult", "sync_workspace", "sync_user_workspace"):
        from agentsync.sync import engine

        return getattr(engine, name)
    if name in ("WorkspaceConfig", "ClientId", "SyncMode"):
        from agentsync.config import schema

        return getattr(schema, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
