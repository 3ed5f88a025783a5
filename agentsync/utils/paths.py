# agentsync Path Utilities
# Safe file operations that never follow links they remove

import os
import shutil
from pathlib import Path


def expand_path(path: str | Path) -> Path:
    """
    Expand ~ and environment variables in path.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded Path object.
    """
    path_str = str(path)
    # Expand ~ first, then environment variables
    path_str = os.path.expanduser(path_str)
    path_str = os.path.expandvars(path_str)
    return Path(path_str)


def ensure_dir(path: Path) -> Path:
    """
    Ensure directory exists, creating if necessary.

    Args:
        path: Directory path.

    Returns:
        The path that was ensured.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def is_link(path: Path) -> bool:
    """Check if path is a symlink or a Windows directory junction."""
    if path.is_symlink():
        return True
    is_junction = getattr(path, "is_junction", None)
    return bool(is_junction and is_junction())


def lexists(path: Path) -> bool:
    """Check if anything (including a dangling link) occupies path."""
    return os.path.lexists(path)


def remove_path(path: Path) -> bool:
    """
    Remove a file, directory or link.

    Links are unlinked, never followed, so shared content behind a link
    survives.

    Args:
        path: Path to remove.

    Returns:
        True if something was removed, False if nothing was there.
    """
    if not lexists(path):
        return False

    if is_link(path):
        try:
            path.unlink()
        except (IsADirectoryError, PermissionError):
            # Windows junctions are removed like empty directories
            os.rmdir(path)
    elif path.is_dir():
        shutil.rmtree(path)
    else:
        path.unlink()
    return True


def safe_copy(source: Path, dest: Path, *, preserve_metadata: bool = True) -> None:
    """
    Atomically copy file or directory, replacing whatever is at dest.

    Uses a temporary sibling and rename so a failed copy never leaves a
    half-written destination.

    Args:
        source: Source path.
        dest: Destination path.
        preserve_metadata: Whether to preserve file metadata (default True).

    Raises:
        FileNotFoundError: If source doesn't exist.
    """
    if not source.exists():
        raise FileNotFoundError(f"Source does not exist: {source}")

    # Ensure parent directory exists
    ensure_dir(dest.parent)

    # Create temp destination in same directory for atomic rename
    temp_dest = dest.parent / f".{dest.name}.tmp.{os.getpid()}"
    remove_path(temp_dest)

    try:
        if source.is_dir():
            shutil.copytree(source, temp_dest, symlinks=True)
        elif preserve_metadata:
            shutil.copy2(source, temp_dest)
        else:
            shutil.copy(source, temp_dest)
        # Replace existing destination (file, directory or stale link)
        remove_path(dest)
        temp_dest.rename(dest)
    except OSError:
        # Cleanup on failure
        remove_path(temp_dest)
        raise


def is_safe_component(name: str) -> bool:
    """Check that name is a single, non-special path component."""
    return bool(name) and name not in (".", "..") and "/" not in name and "\\" not in name


def real_parent_path(path: Path) -> Path:
    """
    Resolve symlinks in the parent of path, keeping the final component.

    When the parent doesn't exist yet the absolute path is returned unchanged.
    """
    absolute = Path(os.path.abspath(path))
    parent = absolute.parent
    if not parent.exists():
        return absolute
    return Path(os.path.realpath(parent)) / absolute.name


def relative_posix(path: Path, base: Path) -> str:
    """
    Path relative to base using forward slashes.

    Raises:
        ValueError: If path is not below base.
    """
    rel = Path(os.path.abspath(path)).relative_to(Path(os.path.abspath(base)))
    return rel.as_posix()


def cleanup_empty_parents(path: Path, stop_at: Path) -> list[Path]:
    """
    Remove empty directories above path, up to but excluding stop_at.

    Args:
        path: Path whose parents should be pruned.
        stop_at: Directory that is never removed.

    Returns:
        Directories that were removed.
    """
    removed: list[Path] = []
    stop = Path(os.path.abspath(stop_at))
    current = Path(os.path.abspath(path)).parent

    while current != stop and stop in current.parents:
        if not current.exists():
            current = current.parent
            continue
        try:
            current.rmdir()
        except OSError:
            # Not empty
            break
        removed.append(current)
        current = current.parent

    return removed
