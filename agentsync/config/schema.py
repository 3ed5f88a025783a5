# agentsync Configuration Schema
# Pydantic models for workspace.yaml validation

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClientId(str, Enum):
    """Supported AI-assistant clients."""

    CLAUDE = "claude"
    COPILOT = "copilot"
    CODEX = "codex"
    CURSOR = "cursor"
    OPENCODE = "opencode"
    GEMINI = "gemini"
    FACTORY = "factory"
    AMPCODE = "ampcode"


class SyncMode(str, Enum):
    """How content reaches non-universal clients."""

    SYMLINK = "symlink"
    COPY = "copy"


class Scope(str, Enum):
    """Sync target scope."""

    PROJECT = "project"
    USER = "user"


class ContentCategory(str, Enum):
    """Kind of content shipped by a plugin."""

    SKILL = "skill"
    COMMAND = "command"
    HOOK = "hook"
    AGENT = "agent"

    @property
    def dir_name(self) -> str:
        """Directory name used inside plugins and the canonical store."""
        return f"{self.value}s"


class Repository(BaseModel):
    """Repository entry listed in the workspace."""

    path: str = Field(description="Path to the repository, relative to the workspace")
    owner: Optional[str] = Field(default=None, description="Repository owner")
    repo: Optional[str] = Field(default=None, description="Repository name")
    description: str = Field(default="", description="Human-readable description")


class VscodeConfig(BaseModel):
    """VSCode workspace generation settings (consumed elsewhere)."""

    output: Optional[str] = Field(default=None, description="Output path of the .code-workspace file")


class WorkspaceConfig(BaseModel):
    """Root model of .agentsync/workspace.yaml."""

    model_config = ConfigDict(populate_by_name=True)

    repositories: list[Repository] = Field(default_factory=list, description="Repositories in this workspace")
    plugins: list[str] = Field(default_factory=list, description="Plugin source references")
    clients: list[ClientId] = Field(default_factory=list, description="Clients to sync content to")
    sync_mode: SyncMode = Field(default=SyncMode.SYMLINK, alias="syncMode", description="symlink or copy")
    disabled_skills: list[str] = Field(
        default_factory=list,
        alias="disabledSkills",
        description="Skills to leave out, as 'pluginName:skillName'",
    )
    vscode: Optional[VscodeConfig] = Field(default=None, description="VSCode workspace settings")

    @field_validator("plugins")
    @classmethod
    def strip_plugins(cls, v: list[str]) -> list[str]:
        """Drop surrounding whitespace and empty entries."""
        return [p.strip() for p in v if p and p.strip()]

    @field_validator("clients")
    @classmethod
    def dedupe_clients(cls, v: list[ClientId]) -> list[ClientId]:
        """Keep the first occurrence of each client."""
        seen: list[ClientId] = []
        for client in v:
            if client not in seen:
                seen.append(client)
        return seen

    @field_validator("disabled_skills")
    @classmethod
    def check_disabled_keys(cls, v: list[str]) -> list[str]:
        """Disabled entries must look like 'plugin:skill'."""
        for key in v:
            plugin, sep, skill = key.partition(":")
            if not sep or not plugin or not skill:
                raise ValueError(f"'{key}' must have the form 'pluginName:skillName'")
        return v

    def disabled_set(self) -> set[str]:
        """Disabled keys as a set for lookups."""
        return set(self.disabled_skills)
