# agentsync Link Utilities
# Cross-platform directory links (symlinks on POSIX, junctions on Windows)

import os
from collections.abc import Callable
from pathlib import Path
from typing import Optional

from agentsync.utils.paths import ensure_dir, is_link, lexists, real_parent_path, remove_path
from agentsync.utils.platform import get_current_platform

# A backend creates link_path pointing at target or raises OSError
LinkBackend = Callable[[Path, Path], None]


def _relative_target(target: Path, link_path: Path) -> str:
    """Target expressed relative to the link's real (symlink-resolved) parent."""
    real_link_dir = os.path.realpath(link_path.parent)
    return os.path.relpath(os.path.abspath(target), real_link_dir)


def symlink_backend(target: Path, link_path: Path) -> None:
    """Create a relative symlink."""
    os.symlink(_relative_target(target, link_path), link_path, target_is_directory=target.is_dir())


def junction_backend(target: Path, link_path: Path) -> None:
    """Create a directory junction, which needs no symlink privilege."""
    if not target.is_dir():
        # Junctions only cover directories; files still need a real symlink
        symlink_backend(target, link_path)
        return

    import _winapi

    _winapi.CreateJunction(os.path.abspath(target), os.path.abspath(link_path))


def select_backend(platform_name: Optional[str] = None) -> LinkBackend:
    """
    Pick the link backend for a platform.

    Args:
        platform_name: "windows", "macos", "linux"... Defaults to the current one.

    Returns:
        The backend callable.
    """
    if (platform_name or get_current_platform()) == "windows":
        return junction_backend
    return symlink_backend


_BACKEND: LinkBackend = select_backend()


def link_points_to(link_path: Path, target: Path) -> bool:
    """Check if link_path is a link that resolves to target."""
    if not is_link(link_path):
        return False
    return os.path.realpath(link_path) == os.path.realpath(target)


def create_link(target: Path, link_path: Path, *, backend: Optional[LinkBackend] = None) -> bool:
    """
    Make link_path a link to target.

    A link that already resolves to target is left alone. A wrong link, or
    a plain file or directory sitting at link_path, is replaced.

    Args:
        target: Canonical location the link should point at.
        link_path: Where the link lives.
        backend: Override for the platform backend.

    Returns:
        True if link_path now leads to target, False if the link could not be
        created (callers fall back to copying).
    """
    target = Path(target)
    link_path = Path(link_path)

    try:
        if os.path.abspath(target) == os.path.abspath(link_path):
            return True

        # A linked ancestor can make both paths the same physical location
        if real_parent_path(target) == real_parent_path(link_path):
            return True

        if is_link(link_path):
            if link_points_to(link_path, target):
                return True
            remove_path(link_path)
        elif lexists(link_path):
            remove_path(link_path)

        ensure_dir(link_path.parent)
        (backend or _BACKEND)(target, link_path)
        return True
    except OSError:
        return False
