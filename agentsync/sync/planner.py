# agentsync Placement Planner
# Decide where every resolved item lands for each configured client

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from agentsync.config.defaults import CANONICAL_DIR
from agentsync.config.schema import ClientId, ContentCategory, Scope, SyncMode
from agentsync.sync.clients import ClientMapping, get_client_mappings
from agentsync.sync.naming import ResolvedItem
from agentsync.utils.paths import is_safe_component, relative_posix


class TargetKind(str, Enum):
    """How a target path gets its content."""

    CANONICAL = "canonical"  # physical copy in the shared store
    COPY = "copy"  # physical copy at a client path
    LINK = "link"  # link at a client path pointing at the canonical copy
    REUSE = "reuse"  # client reads a path another target already fills


@dataclass(frozen=True)
class PlannedTarget:
    """One filesystem target of the plan."""

    kind: TargetKind
    path: Path
    source: Path
    resolved: ResolvedItem
    client: Optional[ClientId] = None

    @property
    def plugin_source(self) -> str:
        return self.resolved.item.plugin_source


@dataclass
class PlacementPlan:
    """
    Complete set of targets for one sync run.

    Canonical targets must be materialized before client targets, since
    links and reused paths depend on them.
    """

    scope_root: Path
    mode: SyncMode
    clients: list[ClientId]
    canonical_targets: list[PlannedTarget] = field(default_factory=list)
    client_targets: list[PlannedTarget] = field(default_factory=list)
    # Items left out because their name would leave the category directory
    warnings: list[str] = field(default_factory=list)

    @property
    def targets(self) -> list[PlannedTarget]:
        return self.canonical_targets + self.client_targets

    def targets_for_plugin(self, source: str) -> list[PlannedTarget]:
        """Targets created for one plugin, canonical ones first."""
        return [t for t in self.targets if t.plugin_source == source]

    def tracked_paths(self) -> dict[str, list[str]]:
        """
        Paths each client depends on, relative to the scope root.

        A canonical path is listed under every client that reads it,
        directly or through a link.
        """
        tracked: dict[str, list[str]] = {client.value: [] for client in self.clients}
        canonical_by_path = {t.path: t for t in self.canonical_targets}

        for target in self.client_targets:
            paths = tracked[target.client.value]
            rel = relative_posix(target.path, self.scope_root)
            if rel not in paths:
                paths.append(rel)
            if target.kind == TargetKind.LINK and target.source in canonical_by_path:
                canonical_rel = relative_posix(target.source, self.scope_root)
                if canonical_rel not in paths:
                    paths.append(canonical_rel)

        return {client: sorted(paths) for client, paths in tracked.items()}


def get_canonical_path(scope_root: Path, category: ContentCategory, final_name: str) -> Path:
    """Location of an item inside the canonical store."""
    return scope_root / CANONICAL_DIR / category.dir_name / final_name


def plan_placement(
    resolved_items: list[ResolvedItem],
    clients: list[ClientId],
    *,
    scope_root: Path,
    scope: Scope = Scope.PROJECT,
    mode: SyncMode = SyncMode.SYMLINK,
) -> PlacementPlan:
    """
    Plan canonical and per-client targets.

    In copy mode every client gets its own physical copy. In symlink mode
    each item is copied once into the canonical store; universal clients
    read it there and the others get a link to it. Disabled items and
    categories no configured client supports produce no targets. Items
    whose final name is not a single path component are skipped with a
    warning, so no target ever leaves its category directory.

    Args:
        resolved_items: Items with their final names.
        clients: Clients to place content for.
        scope_root: Project directory or home directory.
        scope: Which mapping table to use.
        mode: symlink or copy.

    Returns:
        The placement plan.
    """
    mappings = get_client_mappings(scope)
    plan = PlacementPlan(scope_root=scope_root, mode=mode, clients=list(clients))
    claimed: set[Path] = set()

    for resolved in resolved_items:
        if resolved.item.disabled:
            continue
        if not is_safe_component(resolved.final_name):
            plan.warnings.append(
                f"Skipping {resolved.category.value} '{resolved.final_name}' from {resolved.item.plugin_source}: "
                "name is not a single path component"
            )
            continue

        category = resolved.category
        supporting: list[ClientMapping] = [mappings[c] for c in clients if mappings[c].supports(category)]
        if not supporting:
            continue

        canonical: Optional[Path] = None
        if mode == SyncMode.SYMLINK:
            canonical = get_canonical_path(scope_root, category, resolved.final_name)
            plan.canonical_targets.append(
                PlannedTarget(
                    kind=TargetKind.CANONICAL,
                    path=canonical,
                    source=resolved.item.source_path,
                    resolved=resolved,
                )
            )
            claimed.add(canonical)

        for mapping in supporting:
            client_path = scope_root / mapping.path_for(category) / resolved.final_name

            if canonical is not None and mapping.is_universal:
                kind, path, source = TargetKind.REUSE, canonical, canonical
            elif client_path in claimed:
                kind, path, source = TargetKind.REUSE, client_path, client_path
            elif canonical is not None:
                kind, path, source = TargetKind.LINK, client_path, canonical
            else:
                kind, path, source = TargetKind.COPY, client_path, resolved.item.source_path

            claimed.add(path)
            plan.client_targets.append(
                PlannedTarget(kind=kind, path=path, source=source, resolved=resolved, client=mapping.client)
            )

    return plan
