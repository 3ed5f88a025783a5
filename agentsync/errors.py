# agentsync Errors
# Exception hierarchy shared across modules


class AgentSyncError(Exception):
    """Base class for agentsync errors."""


class ConfigError(AgentSyncError):
    """Raised when a workspace configuration file cannot be used."""

    def __init__(self, message: str, issues: list[str] | None = None):
        self.message = message
        self.issues = issues or []
        super().__init__(message)

    def __str__(self) -> str:
        if not self.issues:
            return self.message
        details = "\n".join(f"  - {issue}" for issue in self.issues)
        return f"{self.message}\n{details}"


class PluginResolutionError(AgentSyncError):
    """Raised when a plugin source cannot be turned into a local directory."""


class GitError(PluginResolutionError):
    """Exception raised for git operation errors."""

    def __init__(self, message: str, returncode: int = 1, stderr: str = ""):
        self.message = message
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message)
