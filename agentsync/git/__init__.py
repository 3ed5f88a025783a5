# agentsync Git Module
# Git operations for fetching remote plugins

from agentsync.git.operations import (
    GIT_TIMEOUT,
    clone_repo,
    github_url,
    is_git_repo,
    pull_repo,
)

__all__ = [
    "GIT_TIMEOUT",
    "clone_repo",
    "github_url",
    "is_git_repo",
    "pull_repo",
]
