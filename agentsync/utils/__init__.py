# agentsync Utilities Module
# Helper functions for paths, links, hashing and validation

from agentsync.utils.hashing import content_hash, short_id
from agentsync.utils.links import create_link, link_points_to, select_backend
from agentsync.utils.paths import (
    cleanup_empty_parents,
    ensure_dir,
    expand_path,
    is_link,
    is_safe_component,
    real_parent_path,
    relative_posix,
    remove_path,
    safe_copy,
)
from agentsync.utils.platform import get_current_platform, is_windows
from agentsync.utils.validation import ParseResult, format_validation_error, parse_model

__all__ = [
    # Platform
    "get_current_platform",
    "is_windows",
    # Paths
    "expand_path",
    "ensure_dir",
    "is_link",
    "is_safe_component",
    "remove_path",
    "safe_copy",
    "real_parent_path",
    "relative_posix",
    "cleanup_empty_parents",
    # Links
    "create_link",
    "link_points_to",
    "select_backend",
    # Hashing
    "content_hash",
    "short_id",
    # Validation
    "ParseResult",
    "format_validation_error",
    "parse_model",
]
