"""Name normalization for tree entries.

A raw token typed by the user (``docs``, ``/docs/``, ``a//b``) is reduced
to a canonical component before it is stored or compared.
"""

from typing import List, Tuple

from treefs.vfs.errors import InvalidNameError

SEPARATOR = "/"
ROOT_NAME = "/"
MAX_NAME_LENGTH = 64  # bytes, UTF-8 encoded


def normalize_name(raw: str) -> str:
    """Reduce a raw name or path token to its canonical form.

    Leading separators are dropped, runs of separators collapse to one
    and trailing separators are dropped. The root name ``/`` is returned
    unchanged.

    Args:
        raw: Raw token

    Returns:
        Canonical name

    Raises:
        InvalidNameError: If the result is empty or too long
    """
    if raw == ROOT_NAME:
        return ROOT_NAME

    parts = [part for part in raw.split(SEPARATOR) if part]
    name = SEPARATOR.join(parts)

    if not name:
        raise InvalidNameError(f"Invalid name: {raw!r} (empty after normalization)")
    if len(name.encode("utf-8")) > MAX_NAME_LENGTH:
        raise InvalidNameError(
            f"Invalid name: {raw!r} (longer than {MAX_NAME_LENGTH} bytes after normalization)"
        )
    return name


def split_path(path: str) -> Tuple[bool, List[str]]:
    """Split a path into its non-empty segments.

    Args:
        path: Path like ``/a//b/`` or ``a/b``

    Returns:
        Tuple of (is_absolute, segments)
    """
    return path.startswith(SEPARATOR), [part for part in path.split(SEPARATOR) if part]
