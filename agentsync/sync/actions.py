# agentsync Sync Actions
# Materialize planned targets and purge stale ones

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from agentsync.config.schema import ClientId
from agentsync.sync.planner import PlannedTarget, TargetKind
from agentsync.utils.links import LinkBackend, create_link
from agentsync.utils.paths import cleanup_empty_parents, lexists, real_parent_path, remove_path, safe_copy


class ActionType(str, Enum):
    """What happened to one target."""

    COPIED = "copied"  # physical copy written
    GENERATED = "generated"  # link created or already correct
    SKIPPED = "skipped"  # client reads content placed by another target
    FAILED = "failed"


@dataclass
class CopyResult:
    """Outcome of materializing one target."""

    path: Path
    action: ActionType
    client: Optional[ClientId] = None
    source: Optional[Path] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.action != ActionType.FAILED

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        data: dict[str, Any] = {"path": str(self.path), "action": self.action.value}
        if self.client is not None:
            data["client"] = self.client.value
        if self.error:
            data["error"] = self.error
        return data


def _copy(target: PlannedTarget, source: Path, *, dry_run: bool) -> CopyResult:
    if not dry_run:
        safe_copy(source, target.path)
    return CopyResult(path=target.path, action=ActionType.COPIED, client=target.client, source=source)


def execute_target(
    target: PlannedTarget,
    *,
    dry_run: bool = False,
    link_backend: Optional[LinkBackend] = None,
) -> CopyResult:
    """
    Materialize one planned target.

    Links that cannot be created fall back to a physical copy of the
    item. Filesystem errors are returned as failed results, never raised.

    Args:
        target: Target to materialize.
        dry_run: Report what would happen without touching the filesystem.
        link_backend: Override for the platform link backend.

    Returns:
        CopyResult describing the outcome.
    """
    item_source = target.resolved.item.source_path

    try:
        if target.kind == TargetKind.REUSE:
            return CopyResult(path=target.path, action=ActionType.SKIPPED, client=target.client, source=target.source)

        if target.kind in (TargetKind.CANONICAL, TargetKind.COPY):
            return _copy(target, target.source, dry_run=dry_run)

        # Link to the canonical copy, or copy the item if that is impossible
        if dry_run:
            return CopyResult(path=target.path, action=ActionType.GENERATED, client=target.client, source=target.source)
        if target.source.exists() and create_link(target.source, target.path, backend=link_backend):
            return CopyResult(path=target.path, action=ActionType.GENERATED, client=target.client, source=target.source)
        return _copy(target, item_source, dry_run=dry_run)
    except OSError as e:
        return CopyResult(
            path=target.path,
            action=ActionType.FAILED,
            client=target.client,
            source=target.source,
            error=str(e),
        )


def resolve_tracked_path(scope_root: Path, relative: str) -> Optional[Path]:
    """
    Turn a tracked relative path into an absolute one.

    Returns None for entries that would escape the scope root.
    """
    root = Path(os.path.abspath(scope_root))
    path = Path(os.path.abspath(root / relative))
    if path == root or root not in path.parents:
        return None
    return path


@dataclass
class PurgeResult:
    """Outcome of purging stale paths."""

    purged: list[Path]
    warnings: list[str]


def purge_stale_paths(
    stale: list[str],
    keep: set[str],
    scope_root: Path,
    *,
    dry_run: bool = False,
) -> PurgeResult:
    """
    Delete previously tracked paths that the current run no longer needs.

    Links are unlinked rather than followed. A stale path that physically
    coincides with a kept path (through a linked parent directory) is left
    alone. Empty parent directories are pruned up to the scope root.

    Args:
        stale: Relative paths tracked last run but not this run.
        keep: Relative paths tracked this run.
        scope_root: Directory paths are relative to.
        dry_run: Only report what would be removed.

    Returns:
        PurgeResult with removed paths and warnings for failures.
    """
    purged: list[Path] = []
    warnings: list[str] = []

    keep_physical = set()
    for relative in keep:
        kept = resolve_tracked_path(scope_root, relative)
        if kept is not None:
            keep_physical.add(real_parent_path(kept))

    for relative in sorted(stale):
        path = resolve_tracked_path(scope_root, relative)
        if path is None:
            warnings.append(f"Ignoring tracked path outside {scope_root}: {relative}")
            continue
        if not lexists(path) or real_parent_path(path) in keep_physical:
            continue

        if dry_run:
            purged.append(path)
            continue

        try:
            remove_path(path)
        except OSError as e:
            warnings.append(f"Failed to remove {relative}: {e}")
            continue
        purged.append(path)
        cleanup_empty_parents(path, scope_root)

    return PurgeResult(purged=purged, warnings=warnings)
