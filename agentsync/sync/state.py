# agentsync Sync State
# Persist which paths the last sync created, for safe purging

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from agentsync.config.defaults import SYNC_STATE_FILE
from agentsync.config.loader import get_config_dir
from agentsync.config.schema import ClientId
from agentsync.utils.validation import ParseResult, parse_model


class SyncState(BaseModel):
    """
    Snapshot of paths created by the previous sync.

    Paths are relative to the scope root and use forward slashes.
    """

    model_config = ConfigDict(populate_by_name=True)

    version: Literal[1] = 1
    last_sync: str = Field(alias="lastSync")
    files: dict[ClientId, list[str]] = Field(default_factory=dict)
    mcp_servers: Optional[dict[str, list[str]]] = Field(default=None, alias="mcpServers")

    def files_for(self, client: ClientId | str) -> list[str]:
        """Tracked paths of one client, empty if none."""
        return list(self.files.get(ClientId(client), []))

    def all_files(self) -> set[str]:
        """Tracked paths across all clients."""
        return {path for paths in self.files.values() for path in paths}


def get_state_path(scope_root: Path) -> Path:
    """Get the path of the sync state file for a scope root."""
    return get_config_dir(scope_root) / SYNC_STATE_FILE


def parse_sync_state(data: object) -> ParseResult[SyncState]:
    """Validate raw state data without raising."""
    if not isinstance(data, dict):
        return ParseResult.failure("sync state must be a JSON object")
    return parse_model(SyncState, data)


class StateManager:
    """
    Loads and saves the sync state of one scope.

    The file is always rewritten as a whole; there is no locking, so two
    concurrent syncs of the same workspace end with the last writer's state.
    """

    def __init__(self, scope_root: Path, state_path: Optional[Path] = None):
        """
        Initialize state manager.

        Args:
            scope_root: Project directory or home directory.
            state_path: Override for the state file location.
        """
        self.scope_root = Path(scope_root)
        self.state_path = state_path or get_state_path(self.scope_root)

    def load(self) -> Optional[SyncState]:
        """
        Load state from file.

        Returns:
            The state, or None when the file is missing, unreadable or invalid.
        """
        if not self.state_path.exists():
            return None

        try:
            with open(self.state_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError):
            return None

        result = parse_sync_state(data)
        return result.value if result.ok else None

    def save(
        self,
        files: dict[str, list[str]],
        mcp_servers: Optional[dict[str, list[str]]] = None,
    ) -> SyncState:
        """
        Overwrite the state file with a complete snapshot.

        Args:
            files: Tracked paths per client.
            mcp_servers: MCP server names per scope, if any.

        Returns:
            The state that was written.
        """
        state = SyncState(
            last_sync=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            files={ClientId(client): sorted(set(paths)) for client, paths in files.items()},
            mcp_servers=mcp_servers,
        )

        self.state_path.parent.mkdir(parents=True, exist_ok=True)
        data = state.model_dump(mode="json", by_alias=True, exclude_none=True)
        with open(self.state_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        return state
