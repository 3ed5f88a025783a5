# Tests for agentsync.sync.engine
# End-to-end sync behaviour on real temporary workspaces

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from agentsync.config.loader import load_workspace_config
from agentsync.sync.actions import ActionType
from agentsync.sync.engine import SyncEngine, SyncOptions, get_workspace_status, sync_user_workspace, sync_workspace
from agentsync.sync.state import get_state_path
from agentsync.utils.hashing import short_id

pytestmark = pytest.mark.skipif(os.name == "nt", reason="uses POSIX symlinks")


def _skills(root: Path, base: str = ".claude/skills") -> set[str]:
    path = root / base
    if not path.exists():
        return set()
    return {p.name for p in path.iterdir()}


class TestConflictResolution:
    """Name collisions across plugins."""

    def test_unique_names_kept(self, workspace, make_plugin, write_config):
        alpha = make_plugin("alpha", skills=["one"])
        beta = make_plugin("beta", skills=["two"])
        write_config([alpha, beta])

        result = sync_workspace(workspace)
        assert result.success
        assert _skills(workspace) == {"one", "two"}

    def test_shared_name_prefixed_with_plugin(self, workspace, make_plugin, write_config):
        alpha = make_plugin("alpha", skills=["common", "unique-a"])
        beta = make_plugin("beta", skills=["common", "unique-b"])
        write_config([alpha, beta])

        sync_workspace(workspace)
        assert _skills(workspace) == {"alpha_common", "beta_common", "unique-a", "unique-b"}
        assert _skills(workspace, ".agents/skills") == {"alpha_common", "beta_common", "unique-a", "unique-b"}

    def test_same_plugin_name_prefixed_with_source_id(self, workspace, make_plugin, write_config):
        path_a = make_plugin("my-plugin", skills=["build"], manifest_name="my-plugin", parent="checkout-a")
        path_b = make_plugin("my-plugin", skills=["build"], manifest_name="my-plugin", parent="checkout-b")
        write_config([path_a, path_b])

        sync_workspace(workspace)
        assert _skills(workspace) == {
            f"{short_id(str(path_a))}_my-plugin_build",
            f"{short_id(str(path_b))}_my-plugin_build",
        }

    def test_directory_name_used_without_manifest(self, workspace, make_plugin, write_config):
        first = make_plugin("tools", skills=["lint"], parent="one")
        second = make_plugin("helpers", skills=["lint"], parent="two")
        write_config([first, second])

        sync_workspace(workspace)
        assert _skills(workspace) == {"tools_lint", "helpers_lint"}

    def test_unsafe_manifest_name_stays_inside_workspace(self, temp_dir, workspace, make_plugin, write_config):
        alpha = make_plugin("alpha", skills=["common"], manifest_name="../../../escape")
        beta = make_plugin("beta", skills=["common"])
        write_config([alpha, beta])

        result = sync_workspace(workspace)
        assert result.success
        assert _skills(workspace) == {"alpha_common", "beta_common"}
        for root in (workspace, workspace / ".agents", temp_dir):
            assert not os.path.lexists(root / "escape_common")

    def test_name_reverts_after_conflict_removed(self, workspace, make_plugin, write_config):
        plugin_a = make_plugin("plugin-a", skills=["coding"])
        plugin_b = make_plugin("plugin-b", skills=["coding"])
        write_config([plugin_a, plugin_b])
        sync_workspace(workspace)
        assert "plugin-a_coding" in _skills(workspace)

        write_config([plugin_a])
        result = sync_workspace(workspace)
        assert result.success
        assert _skills(workspace) == {"coding"}
        assert _skills(workspace, ".agents/skills") == {"coding"}


class TestResilience:
    """Failures stay isolated to their plugin."""

    def test_one_unresolvable_plugin(self, workspace, make_plugin, write_config):
        good = make_plugin("good", skills=["one"])
        bad = "/nonexistent/plugin-path"
        write_config([good, bad])

        result = sync_workspace(workspace)
        assert result.success is True
        assert any(bad in warning for warning in result.warnings)
        assert len(result.plugin_results) == 1
        assert result.plugin_results[0].plugin == str(good)
        assert result.total_copied > 0

    def test_all_plugins_unresolvable(self, workspace, write_config):
        write_config(["/nonexistent/a", "/nonexistent/b"])

        result = sync_workspace(workspace)
        assert result.success is False
        assert len(result.warnings) == 2
        assert not get_state_path(workspace).exists()

    def test_all_failing_leaves_workspace_untouched(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["one"])
        write_config([plugin])
        sync_workspace(workspace)
        state_before = get_state_path(workspace).read_text(encoding="utf-8")

        write_config(["/nonexistent/a"])
        result = sync_workspace(workspace)
        assert result.success is False
        assert _skills(workspace) == {"one"}
        assert get_state_path(workspace).read_text(encoding="utf-8") == state_before

    def test_scan_failure_becomes_plugin_result(self, workspace, make_plugin, write_config):
        alpha = make_plugin("alpha", skills=["one"])
        beta = make_plugin("beta", skills=["two"])
        write_config([alpha, beta])

        from agentsync.sync import engine

        real_scan = engine.scan_plugin_content

        def flaky_scan(plugin, disabled=None):
            if plugin.plugin_name == "beta":
                raise OSError("permission denied")
            return real_scan(plugin, disabled)

        with patch("agentsync.sync.engine.scan_plugin_content", side_effect=flaky_scan):
            result = sync_workspace(workspace)

        assert result.success is True
        failed = [r for r in result.plugin_results if not r.success]
        assert [r.plugin for r in failed] == [str(beta)]
        assert "permission denied" in failed[0].error
        assert any(str(beta) in warning for warning in result.warnings)
        assert _skills(workspace) == {"one"}

    def test_duplicate_source_warns(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["one"])
        write_config([plugin, plugin])

        result = sync_workspace(workspace)
        assert result.success
        assert len(result.plugin_results) == 1
        assert any(str(plugin) in w and "more than once" in w for w in result.warnings)
        assert _skills(workspace) == {"one"}

    def test_every_copy_failing_is_not_success(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["one"])
        write_config([plugin], sync_mode="copy")

        with patch("agentsync.sync.actions.safe_copy", side_effect=OSError("disk full")):
            result = sync_workspace(workspace)

        assert result.success is False
        assert result.total_failed == 1
        assert result.total_copied == 0
        assert not result.plugin_results[0].success

    def test_one_plugin_placed_is_success(self, workspace, make_plugin, write_config):
        alpha = make_plugin("alpha", skills=["one"])
        beta = make_plugin("beta", skills=["two"])
        write_config([alpha, beta], sync_mode="copy")

        from agentsync.sync import actions

        real_copy = actions.safe_copy

        def failing_for_beta(source, dest, **kwargs):
            if "beta" in source.parts:
                raise OSError("disk full")
            return real_copy(source, dest, **kwargs)

        with patch("agentsync.sync.actions.safe_copy", side_effect=failing_for_beta):
            result = sync_workspace(workspace)

        assert result.success is True
        assert result.total_failed == 1
        assert [r.success for r in result.plugin_results] == [True, False]

    def test_invalid_skill_is_warning(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["good"])
        (plugin / "skills" / "broken").mkdir()
        write_config([plugin])

        result = sync_workspace(workspace)
        assert result.success
        assert _skills(workspace) == {"good"}
        assert any("broken" in warning for warning in result.warnings)

    def test_missing_config(self, workspace):
        result = sync_workspace(workspace)
        assert result.success is False
        assert "not found" in result.error


class TestSymlinkMode:
    """Canonical store with links for provider-specific clients."""

    def test_claude_and_copilot(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["claude", "copilot"])

        result = sync_workspace(workspace)
        canonical = workspace / ".agents" / "skills" / "tool"
        claude = workspace / ".claude" / "skills" / "tool"

        assert canonical.is_dir() and not canonical.is_symlink()
        assert claude.is_symlink()
        assert claude.resolve() == canonical.resolve()
        assert not (workspace / ".github" / "skills" / "tool").exists()

        actions = [r.action for r in result.plugin_results[0].copy_results]
        assert actions == [ActionType.COPIED, ActionType.GENERATED, ActionType.SKIPPED]
        assert (result.total_copied, result.total_generated, result.total_skipped) == (1, 1, 1)

    def test_commands_and_agents(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", commands=["review.md"], agents=["helper.md"])
        write_config([plugin], ["claude"])

        sync_workspace(workspace)
        command = workspace / ".claude" / "commands" / "review.md"
        assert command.is_symlink()
        assert command.read_text(encoding="utf-8") == "# review.md\n"
        assert (workspace / ".claude" / "agents" / "helper.md").is_symlink()

    def test_unsupported_category_creates_no_canonical_dir(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"], commands=["review.md"])
        write_config([plugin], ["cursor"])

        sync_workspace(workspace)
        assert (workspace / ".agents" / "skills" / "tool").is_dir()
        assert not (workspace / ".agents" / "commands").exists()

    def test_second_sync_keeps_links(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["claude"])
        sync_workspace(workspace)
        link = workspace / ".claude" / "skills" / "tool"
        inode = os.lstat(link).st_ino

        result = sync_workspace(workspace)
        assert result.success
        assert result.purged_paths == []
        assert os.lstat(link).st_ino == inode

    def test_content_refreshed(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["claude"])
        sync_workspace(workspace)

        (plugin / "skills" / "tool" / "extra.md").write_text("new", encoding="utf-8")
        sync_workspace(workspace)
        assert (workspace / ".claude" / "skills" / "tool" / "extra.md").read_text(encoding="utf-8") == "new"

    def test_link_failure_falls_back_to_copy(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        config_path = write_config([plugin], ["claude"])

        def no_links(_target, _link):
            raise OSError("links not supported")

        engine = SyncEngine(workspace, load_workspace_config(config_path), link_backend=no_links)
        result = engine.sync()

        claude = workspace / ".claude" / "skills" / "tool"
        assert result.success
        assert claude.is_dir() and not claude.is_symlink()
        assert (claude / "SKILL.md").exists()
        assert result.total_failed == 0
        assert result.total_copied == 2


class TestCopyMode:
    """Independent copies per client."""

    def test_no_canonical_store(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["claude", "copilot"], sync_mode="copy")

        result = sync_workspace(workspace)
        assert result.success
        assert not (workspace / ".agents").exists()
        for base in (".claude/skills", ".github/skills"):
            path = workspace / base / "tool"
            assert path.is_dir() and not path.is_symlink()
        assert result.total_copied == 2

    def test_switch_from_symlink_to_copy(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["claude"])
        sync_workspace(workspace)

        write_config([plugin], ["claude"], sync_mode="copy")
        result = sync_workspace(workspace)

        claude = workspace / ".claude" / "skills" / "tool"
        assert claude.is_dir() and not claude.is_symlink()
        assert not (workspace / ".agents").exists()
        assert workspace / ".agents" / "skills" / "tool" in result.purged_paths


class TestPurge:
    """Only previously tracked paths are removed."""

    def test_removed_plugin_purged_user_files_kept(self, workspace, make_plugin, write_config):
        alpha = make_plugin("alpha", skills=["one"])
        beta = make_plugin("beta", skills=["two"])
        write_config([alpha, beta])
        sync_workspace(workspace)

        own = workspace / ".claude" / "skills" / "my-own"
        own.mkdir()
        (own / "SKILL.md").write_text("mine", encoding="utf-8")

        write_config([alpha])
        result = sync_workspace(workspace)

        assert _skills(workspace) == {"one", "my-own"}
        assert (own / "SKILL.md").read_text(encoding="utf-8") == "mine"
        assert set(result.purged_paths) == {
            workspace / ".agents" / "skills" / "two",
            workspace / ".claude" / "skills" / "two",
        }

    def test_empty_parents_cleaned(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["one"])
        write_config([plugin])
        sync_workspace(workspace)

        write_config([])
        result = sync_workspace(workspace)
        assert result.success
        assert not (workspace / ".claude").exists()
        assert not (workspace / ".agents").exists()
        assert (workspace / ".agentsync").is_dir()

    def test_disabled_skill_removed(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["keep", "drop"])
        write_config([plugin])
        sync_workspace(workspace)

        write_config([plugin], disabled=["alpha:drop"])
        sync_workspace(workspace)
        assert _skills(workspace) == {"keep"}

    def test_removed_client_purged(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["claude", "cursor"])
        sync_workspace(workspace)
        assert (workspace / ".cursor" / "skills" / "tool").is_symlink()

        write_config([plugin], ["claude"])
        sync_workspace(workspace)
        assert not (workspace / ".cursor").exists()
        assert (workspace / ".claude" / "skills" / "tool").is_symlink()

    def test_shared_canonical_kept_for_remaining_client(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["claude", "codex"])
        sync_workspace(workspace)

        write_config([plugin], ["codex"])
        sync_workspace(workspace)
        assert not os.path.lexists(workspace / ".claude" / "skills" / "tool")
        assert (workspace / ".agents" / "skills" / "tool").is_dir()

    def test_untracked_path_survives(self, workspace, make_plugin, write_config):
        existing = workspace / ".claude" / "skills" / "handmade"
        existing.mkdir(parents=True)
        plugin = make_plugin("alpha", skills=["one"])
        write_config([plugin])

        sync_workspace(workspace)
        write_config([])
        sync_workspace(workspace)
        assert existing.is_dir()


class TestStateTracking:
    """State written after a sync."""

    def test_state_contents(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["claude", "copilot"])
        sync_workspace(workspace)

        data = json.loads(get_state_path(workspace).read_text(encoding="utf-8"))
        assert data["version"] == 1
        assert data["files"] == {
            "claude": [".agents/skills/tool", ".claude/skills/tool"],
            "copilot": [".agents/skills/tool"],
        }

    def test_mcp_servers_preserved(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin])
        state_path = get_state_path(workspace)
        state_path.parent.mkdir(parents=True, exist_ok=True)
        state_path.write_text(
            json.dumps({"version": 1, "lastSync": "2026-01-01T00:00:00Z", "files": {}, "mcpServers": {"vscode": ["db"]}}),
            encoding="utf-8",
        )

        sync_workspace(workspace)
        data = json.loads(state_path.read_text(encoding="utf-8"))
        assert data["mcpServers"] == {"vscode": ["db"]}

    def test_corrupt_state_does_not_block(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin])
        state_path = get_state_path(workspace)
        state_path.parent.mkdir(parents=True, exist_ok=True)
        state_path.write_text("garbage", encoding="utf-8")

        result = sync_workspace(workspace)
        assert result.success
        assert json.loads(state_path.read_text(encoding="utf-8"))["version"] == 1


class TestOptions:
    """Dry run and client subsets."""

    def test_dry_run_writes_nothing(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["claude"])

        result = sync_workspace(workspace, SyncOptions(dry_run=True))
        assert result.success
        assert result.dry_run
        assert result.total_copied == 1
        assert result.total_generated == 1
        assert not (workspace / ".agents").exists()
        assert not (workspace / ".claude").exists()
        assert not get_state_path(workspace).exists()

    def test_dry_run_reports_purge(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["claude"])
        sync_workspace(workspace)

        write_config([])
        result = sync_workspace(workspace, SyncOptions(dry_run=True))
        assert workspace / ".claude" / "skills" / "tool" in result.purged_paths
        assert (workspace / ".claude" / "skills" / "tool").is_symlink()

    def test_client_subset(self, workspace, make_plugin, write_config):
        alpha = make_plugin("alpha", skills=["one"])
        write_config([alpha], ["claude", "cursor"])
        sync_workspace(workspace)

        write_config([], ["claude", "cursor"])
        result = sync_workspace(workspace, SyncOptions(clients=["claude"]))
        assert result.success
        assert not os.path.lexists(workspace / ".claude" / "skills" / "one")
        assert (workspace / ".cursor" / "skills" / "one").is_symlink()
        # cursor still depends on the canonical copy
        assert (workspace / ".agents" / "skills" / "one").is_dir()

        data = json.loads(get_state_path(workspace).read_text(encoding="utf-8"))
        assert data["files"]["cursor"] == [".agents/skills/one", ".cursor/skills/one"]
        assert data["files"]["claude"] == []

    def test_unknown_client(self, workspace, make_plugin, write_config):
        write_config([make_plugin("alpha", skills=["one"])], ["claude"])
        result = sync_workspace(workspace, SyncOptions(clients=["cursor"]))
        assert result.success is False
        assert "cursor" in result.error


class TestUserScope:
    """User-level sync into the home directory."""

    def test_user_sync(self, temp_home, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["claude", "opencode"], root=temp_home, sync_mode="copy")

        result = sync_user_workspace()
        assert result.success
        assert (temp_home / ".claude" / "skills" / "tool").is_dir()
        assert (temp_home / ".config" / "opencode" / "skills" / "tool").is_dir()
        assert get_state_path(temp_home).exists()

    def test_home_as_project_uses_user_layout(self, temp_home, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin], ["copilot"], root=temp_home, sync_mode="copy")

        sync_workspace(temp_home)
        assert (temp_home / ".copilot" / "skills" / "tool").is_dir()


class TestWorkspaceStatus:
    """Tests for get_workspace_status()."""

    def test_status(self, workspace, make_plugin, write_config):
        plugin = make_plugin("alpha", skills=["tool"])
        write_config([plugin, "/nonexistent/x", "gh:owner/repo"], ["claude"])

        status = get_workspace_status(workspace)
        assert status.success
        assert [c.value for c in status.clients] == ["claude"]
        by_source = {p.source: p for p in status.plugins}
        assert by_source[str(plugin)].available is True
        assert by_source[str(plugin)].plugin_name == "alpha"
        assert by_source["/nonexistent/x"].available is False
        assert by_source["gh:owner/repo"].kind == "github"
        assert by_source["gh:owner/repo"].available is False
        assert status.last_sync is None

    def test_status_without_config(self, workspace):
        status = get_workspace_status(workspace)
        assert not status.success
        assert "not found" in status.error
