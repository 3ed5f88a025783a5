# agentsync Git Operations
# Shallow clone and pull of remote plugin repositories

import subprocess
from pathlib import Path
from typing import Optional

from agentsync.errors import GitError

# Seconds before a clone or pull is abandoned
GIT_TIMEOUT = 60


def _run_git(
    *args: str,
    cwd: Optional[Path] = None,
    check: bool = True,
    timeout: float = GIT_TIMEOUT,
) -> subprocess.CompletedProcess[str]:
    """
    Run a git command.

    Args:
        *args: Git command arguments.
        cwd: Working directory.
        check: Whether to raise on non-zero exit.
        timeout: Seconds before the command is killed.

    Returns:
        CompletedProcess with result.

    Raises:
        GitError: If command fails and check is True, times out, or git is missing.
    """
    cmd = ["git", *args]
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError:
        raise GitError("git command not found. Is git installed?")
    except subprocess.TimeoutExpired:
        raise GitError(f"Git command timed out after {timeout:g}s: {' '.join(cmd)}")

    if check and result.returncode != 0:
        raise GitError(
            f"Git command failed: {' '.join(cmd)}",
            returncode=result.returncode,
            stderr=result.stderr.strip() if result.stderr else "",
        )
    return result


def github_url(owner: str, repo: str) -> str:
    """Build an HTTPS clone URL for a GitHub repository."""
    return f"https://github.com/{owner}/{repo}.git"


def is_git_repo(path: Path) -> bool:
    """
    Check if path is the root of a git checkout.

    Args:
        path: Directory to check.

    Returns:
        True if path contains a .git entry.
    """
    return (path / ".git").exists()


def clone_repo(
    url: str,
    dest: Path,
    *,
    branch: Optional[str] = None,
    depth: int = 1,
    timeout: float = GIT_TIMEOUT,
) -> Path:
    """
    Shallow-clone a repository into dest.

    Args:
        url: Remote URL.
        dest: Target directory (must not exist yet).
        branch: Branch or tag to check out.
        depth: Clone depth.
        timeout: Seconds before the clone is abandoned.

    Returns:
        The destination path.

    Raises:
        GitError: If the clone fails.
    """
    dest.parent.mkdir(parents=True, exist_ok=True)
    args = ["clone", "--depth", str(depth)]
    if branch:
        args.extend(["--branch", branch])
    args.extend([url, str(dest)])
    _run_git(*args, timeout=timeout)
    return dest


def pull_repo(path: Path, *, timeout: float = GIT_TIMEOUT) -> str:
    """
    Fast-forward an existing checkout.

    Args:
        path: Repository path.
        timeout: Seconds before the pull is abandoned.

    Returns:
        Pull output.

    Raises:
        GitError: If the pull fails.
    """
    result = _run_git("pull", "--ff-only", cwd=path, timeout=timeout)
    return result.stdout.strip()
