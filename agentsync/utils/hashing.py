# agentsync Hashing Utilities
# Short deterministic identifiers for disambiguating plugin sources

import hashlib

SHORT_ID_LENGTH = 6


def content_hash(content: str | bytes, *, algorithm: str = "sha256") -> str:
    """
    Calculate hash of content.

    Args:
        content: String or bytes content.
        algorithm: Hash algorithm (default sha256).

    Returns:
        Hex digest of hash.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")

    hasher = hashlib.new(algorithm)
    hasher.update(content)
    return hasher.hexdigest()


def short_id(source: str, *, length: int = SHORT_ID_LENGTH) -> str:
    """
    Derive a short, stable identifier from a plugin source string.

    The same source always yields the same id; it cannot be turned back
    into the source.

    Args:
        source: Plugin source reference (path, URL or spec).
        length: Number of hex characters to keep.

    Returns:
        Lowercase hex prefix of the source's sha256 digest.
    """
    return content_hash(source)[:length]
