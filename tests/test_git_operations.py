# Tests for agentsync.git.operations
# Git command execution for remote plugins

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from agentsync.errors import GitError, PluginResolutionError
from agentsync.git.operations import (
    GIT_TIMEOUT,
    _run_git,
    clone_repo,
    github_url,
    is_git_repo,
    pull_repo,
)


class TestGitError:
    """Tests for GitError exception."""

    def test_basic_error(self):
        err = GitError("test message")
        assert err.message == "test message"
        assert err.returncode == 1
        assert err.stderr == ""
        assert str(err) == "test message"

    def test_is_resolution_error(self):
        assert isinstance(GitError("x"), PluginResolutionError)


class TestRunGit:
    """Tests for _run_git helper."""

    @patch("agentsync.git.operations.subprocess.run")
    def test_successful_command(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=["git", "status"], returncode=0, stdout="clean", stderr=""
        )
        result = _run_git("status")
        assert result.stdout == "clean"

    @patch("agentsync.git.operations.subprocess.run")
    def test_failed_command_raises(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(
            args=["git", "bad"], returncode=128, stdout="", stderr="fatal: nope\n"
        )
        with pytest.raises(GitError) as exc_info:
            _run_git("bad")
        assert exc_info.value.returncode == 128
        assert exc_info.value.stderr == "fatal: nope"

    @patch("agentsync.git.operations.subprocess.run")
    def test_failed_command_no_check(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(args=["git", "bad"], returncode=1, stdout="", stderr="")
        assert _run_git("bad", check=False).returncode == 1

    @patch("agentsync.git.operations.subprocess.run", side_effect=FileNotFoundError)
    def test_git_not_found(self, mock_run):
        with pytest.raises(GitError, match="git command not found"):
            _run_git("status")

    @patch(
        "agentsync.git.operations.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd=["git", "clone"], timeout=5),
    )
    def test_timeout(self, mock_run):
        with pytest.raises(GitError, match="timed out"):
            _run_git("clone", timeout=5)

    @patch("agentsync.git.operations.subprocess.run")
    def test_timeout_passed(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(args=["git", "status"], returncode=0, stdout="", stderr="")
        _run_git("status", cwd=Path("/tmp"))
        mock_run.assert_called_once_with(
            ["git", "status"], cwd=Path("/tmp"), check=False, capture_output=True, text=True, timeout=GIT_TIMEOUT
        )


class TestCloneAndPull:
    """Tests for clone_repo and pull_repo."""

    @patch("agentsync.git.operations._run_git")
    def test_shallow_clone_with_branch(self, mock_git, temp_dir):
        dest = temp_dir / "cache" / "owner-repo"
        assert clone_repo("https://github.com/o/r.git", dest, branch="dev", timeout=10) == dest
        mock_git.assert_called_once_with(
            "clone", "--depth", "1", "--branch", "dev", "https://github.com/o/r.git", str(dest), timeout=10
        )
        assert dest.parent.is_dir()

    @patch("agentsync.git.operations._run_git")
    def test_clone_default_branch(self, mock_git, temp_dir):
        clone_repo("url", temp_dir / "x")
        assert "--branch" not in mock_git.call_args.args

    @patch("agentsync.git.operations._run_git")
    def test_pull(self, mock_git, temp_dir):
        mock_git.return_value = subprocess.CompletedProcess(args=[], returncode=0, stdout="Already up to date.\n")
        assert pull_repo(temp_dir) == "Already up to date."
        mock_git.assert_called_once_with("pull", "--ff-only", cwd=temp_dir, timeout=GIT_TIMEOUT)


class TestHelpers:
    """Tests for small git helpers."""

    def test_github_url(self):
        assert github_url("owner", "repo") == "https://github.com/owner/repo.git"

    def test_is_git_repo(self, temp_dir):
        assert is_git_repo(temp_dir) is False
        (temp_dir / ".git").mkdir()
        assert is_git_repo(temp_dir) is True
