"""Materialized path helpers.

Folder paths are segment names joined by a single separator, e.g. "A/B/C".
Every function here is pure. Precondition violations raise
PathContractError, which signals a caller bug rather than a runtime fault.
"""

from docspace.settings import PATH_SEPARATOR

SEP = PATH_SEPARATOR

_RESERVED_SEGMENTS = {".", ".."}


class PathContractError(ValueError):
    """Raised when a path function is called outside its contract."""


def segments(path: str) -> list[str]:
    """Split a path into its segments."""
    if not path:
        raise PathContractError("Empty path has no segments")
    parts = path.split(SEP)
    if any(not part for part in parts):
        raise PathContractError(f"Malformed path: {path!r}")
    return parts


def join(parent_path: str | None, name: str) -> str:
    """Join a parent path and a segment.

    Returns name unchanged for a root folder (parent absent or empty).
    """
    if not name or SEP in name:
        raise PathContractError(f"Invalid segment: {name!r}")
    if not parent_path:
        return name
    return f"{parent_path}{SEP}{name}"


def parent_of(path: str) -> str | None:
    """All segments but the last, or None for a single-segment path."""
    parts = segments(path)
    if len(parts) == 1:
        return None
    return SEP.join(parts[:-1])


def name_of(path: str) -> str:
    """Last segment of a path."""
    return segments(path)[-1]


def depth_of(path: str) -> int:
    """Number of segments in a path."""
    return len(segments(path))


def is_descendant(candidate: str, ancestor: str, inclusive: bool = False) -> bool:
    """Check whether candidate lies under ancestor.

    Args:
        candidate: Path to test
        ancestor: Prospective ancestor path
        inclusive: Also accept candidate == ancestor

    Returns:
        True if candidate starts with ancestor + SEP (or equals it when
        inclusive)
    """
    if not candidate or not ancestor:
        return False
    if candidate == ancestor:
        return inclusive
    return candidate.startswith(ancestor + SEP)


def rewrite_prefix(path: str, old_prefix: str, new_prefix: str) -> str:
    """Replace the leading old_prefix of path with new_prefix.

    Raises:
        PathContractError: If path is not old_prefix or below it
    """
    if not is_descendant(path, old_prefix, inclusive=True):
        raise PathContractError(f"{path!r} is not under {old_prefix!r}")
    return new_prefix + path[len(old_prefix):]


def validate_segment(name: str | None, max_length: int = 255) -> str:
    """Normalize and validate a folder or file name.

    Returns:
        The stripped name

    Raises:
        PathContractError: If the name is empty, too long, contains the
            separator or is a reserved segment
    """
    if name is None:
        raise PathContractError("Name is required")
    cleaned = name.strip()
    if not cleaned:
        raise PathContractError("Name must not be empty")
    if len(cleaned) > max_length:
        raise PathContractError(f"Name longer than {max_length} characters")
    if SEP in cleaned:
        raise PathContractError(f"Name must not contain {SEP!r}")
    if cleaned in _RESERVED_SEGMENTS:
        raise PathContractError(f"Reserved name: {cleaned!r}")
    return cleaned
