# agentsync Test Fixtures
# Pytest fixtures for agentsync tests

import json
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Optional

import pytest
import yaml


def write_skill(skill_dir: Path, name: Optional[str] = None, description: str = "A test skill") -> Path:
    """Create a skill directory with a valid SKILL.md."""
    skill_dir.mkdir(parents=True, exist_ok=True)
    (skill_dir / "SKILL.md").write_text(
        f"""---
name: {name or skill_dir.name}
description: {description}
---

# {name or skill_dir.name}

Instructions.
""",
        encoding="utf-8",
    )
    return skill_dir


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def temp_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a temporary home directory used as the user root."""
    home = temp_dir / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("AGENTSYNC_HOME", str(home))
    return home


@pytest.fixture
def make_plugin(temp_dir: Path) -> Callable[..., Path]:
    """
    Factory for plugin directories.

    make_plugin("alpha", skills=["common"], manifest_name="my-plugin",
                commands=["review.md"], parent="checkout-a")
    """

    def _make(
        dir_name: str,
        *,
        skills: tuple[str, ...] | list[str] = (),
        commands: tuple[str, ...] | list[str] = (),
        agents: tuple[str, ...] | list[str] = (),
        hooks: tuple[str, ...] | list[str] = (),
        manifest_name: Optional[str] = None,
        parent: str = "plugins",
    ) -> Path:
        plugin_dir = temp_dir / parent / dir_name
        plugin_dir.mkdir(parents=True, exist_ok=True)
        if manifest_name:
            (plugin_dir / "plugin.json").write_text(
                json.dumps({"name": manifest_name, "version": "1.0.0"}), encoding="utf-8"
            )
        for skill in skills:
            write_skill(plugin_dir / "skills" / skill)
        for category, names in (("commands", commands), ("agents", agents), ("hooks", hooks)):
            for name in names:
                path = plugin_dir / category / name
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(f"# {name}\n", encoding="utf-8")
        return plugin_dir

    return _make


@pytest.fixture
def workspace(temp_dir: Path, temp_home: Path) -> Path:
    """An empty workspace directory."""
    path = temp_dir / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def write_config(workspace: Path) -> Callable[..., Path]:
    """Factory writing .agentsync/workspace.yaml into the workspace."""

    def _write(
        plugins: list[str],
        clients: tuple[str, ...] | list[str] = ("claude",),
        *,
        sync_mode: str = "symlink",
        disabled: Optional[list[str]] = None,
        root: Optional[Path] = None,
    ) -> Path:
        config_path = (root or workspace) / ".agentsync" / "workspace.yaml"
        config_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "plugins": [str(p) for p in plugins],
            "clients": list(clients),
            "syncMode": sync_mode,
            "disabledSkills": disabled or [],
        }
        config_path.write_text(yaml.dump(data, sort_keys=False), encoding="utf-8")
        return config_path

    return _write
