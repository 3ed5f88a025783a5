# agentsync Client Mappings
# Where each client expects content, per scope

from dataclasses import dataclass
from typing import Optional

from agentsync.config.schema import ClientId, ContentCategory, Scope


@dataclass(frozen=True)
class ClientMapping:
    """
    Directory layout of one client in one scope.

    Paths are relative to the scope root (project directory or home).
    Universal clients read skills straight from the canonical store in
    symlink mode, so they never need a link.
    """

    client: ClientId
    skills_path: str
    commands_path: Optional[str] = None
    hooks_path: Optional[str] = None
    agents_path: Optional[str] = None
    is_universal: bool = False

    def path_for(self, category: ContentCategory) -> Optional[str]:
        """Relative directory for a category, or None if unsupported."""
        return {
            ContentCategory.SKILL: self.skills_path,
            ContentCategory.COMMAND: self.commands_path,
            ContentCategory.HOOK: self.hooks_path,
            ContentCategory.AGENT: self.agents_path,
        }[category]

    def supports(self, category: ContentCategory) -> bool:
        """Check whether the client has a directory for a category."""
        return bool(self.path_for(category))

    @property
    def paths(self) -> list[str]:
        """All configured content directories."""
        return [p for p in (self.skills_path, self.commands_path, self.hooks_path, self.agents_path) if p]


PROJECT_CLIENT_MAPPINGS: dict[ClientId, ClientMapping] = {
    ClientId.CLAUDE: ClientMapping(
        client=ClientId.CLAUDE,
        skills_path=".claude/skills",
        commands_path=".claude/commands",
        hooks_path=".claude/hooks",
        agents_path=".claude/agents",
    ),
    ClientId.COPILOT: ClientMapping(client=ClientId.COPILOT, skills_path=".github/skills", is_universal=True),
    ClientId.CODEX: ClientMapping(client=ClientId.CODEX, skills_path=".codex/skills", is_universal=True),
    ClientId.CURSOR: ClientMapping(client=ClientId.CURSOR, skills_path=".cursor/skills"),
    ClientId.OPENCODE: ClientMapping(client=ClientId.OPENCODE, skills_path=".opencode/skills", is_universal=True),
    ClientId.GEMINI: ClientMapping(client=ClientId.GEMINI, skills_path=".gemini/skills", is_universal=True),
    ClientId.FACTORY: ClientMapping(
        client=ClientId.FACTORY,
        skills_path=".factory/skills",
        hooks_path=".factory/hooks",
    ),
    # Amp reads project skills from the canonical store itself
    ClientId.AMPCODE: ClientMapping(client=ClientId.AMPCODE, skills_path=".agents/skills", is_universal=True),
}

USER_CLIENT_MAPPINGS: dict[ClientId, ClientMapping] = {
    ClientId.CLAUDE: ClientMapping(
        client=ClientId.CLAUDE,
        skills_path=".claude/skills",
        commands_path=".claude/commands",
        hooks_path=".claude/hooks",
        agents_path=".claude/agents",
    ),
    ClientId.COPILOT: ClientMapping(client=ClientId.COPILOT, skills_path=".copilot/skills", is_universal=True),
    ClientId.CODEX: ClientMapping(client=ClientId.CODEX, skills_path=".codex/skills", is_universal=True),
    ClientId.CURSOR: ClientMapping(client=ClientId.CURSOR, skills_path=".cursor/skills"),
    ClientId.OPENCODE: ClientMapping(
        client=ClientId.OPENCODE,
        skills_path=".config/opencode/skills",
        is_universal=True,
    ),
    ClientId.GEMINI: ClientMapping(client=ClientId.GEMINI, skills_path=".gemini/skills", is_universal=True),
    ClientId.FACTORY: ClientMapping(
        client=ClientId.FACTORY,
        skills_path=".factory/skills",
        hooks_path=".factory/hooks",
    ),
    ClientId.AMPCODE: ClientMapping(client=ClientId.AMPCODE, skills_path=".config/amp/skills", is_universal=True),
}


def get_client_mappings(scope: Scope) -> dict[ClientId, ClientMapping]:
    """Get the mapping table for a scope."""
    return USER_CLIENT_MAPPINGS if scope == Scope.USER else PROJECT_CLIENT_MAPPINGS


def get_client_mapping(client: ClientId | str, scope: Scope = Scope.PROJECT) -> ClientMapping:
    """
    Get the mapping for one client in a scope.

    Raises:
        ValueError: If the client is unknown.
    """
    return get_client_mappings(scope)[ClientId(client)]
