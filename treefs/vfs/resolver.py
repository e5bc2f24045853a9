"""Path resolution for the tree.

Handles path parsing and navigation (cd, tree, mkdir/rm targets).
"""

import logging
from typing import List, Optional, Tuple

from treefs.vfs.base import DirectoryNode
from treefs.vfs.errors import InvalidNameError, NotFoundError
from treefs.vfs.names import ROOT_NAME, split_path

logger = logging.getLogger(__name__)

PARENT_SEGMENT = ".."


class PathResolver:
    """Resolves '/'-delimited paths against a tree.

    Only directories are traversed: every segment must name a directory
    child of the current resolution point. It handles:
    - Absolute paths: /docs/drafts
    - Relative paths: docs/drafts
    - Redundant separators: docs//drafts/
    - Parent segments (``..``) when ``follow_parent`` is set
    """

    def __init__(self, root: DirectoryNode):
        """Initialize path resolver.

        Args:
            root: Root node of the tree
        """
        self.root = root

    def resolve(
        self,
        path: str,
        start: DirectoryNode,
        follow_parent: bool = False,
    ) -> Optional[DirectoryNode]:
        """Resolve a path to a directory node.

        Args:
            path: Path to resolve (absolute or relative)
            start: Directory relative paths start from
            follow_parent: Treat ``..`` as a move to the parent directory

        Returns:
            Resolved directory or None if any segment is missing or a file
        """
        node, _ = self._walk(path, start, follow_parent)
        return node

    def resolve_or_raise(
        self,
        path: str,
        start: DirectoryNode,
        follow_parent: bool = False,
    ) -> DirectoryNode:
        """Resolve a path to a directory node.

        Raises:
            NotFoundError: Naming the first segment that could not be followed
        """
        node, failed = self._walk(path, start, follow_parent)
        if node is None:
            raise NotFoundError(f"No such directory: {failed}.")
        return node

    def resolve_parent(self, path: str, start: DirectoryNode) -> Tuple[DirectoryNode, str]:
        """Split a path into its containing directory and final component.

        ``docs/drafts/todo`` resolves ``docs/drafts`` and returns it together
        with ``todo``. A bare name returns ``start`` unchanged.

        Args:
            path: Path naming an entry to create or remove
            start: Directory relative paths start from

        Returns:
            Tuple of (parent directory, leaf name)

        Raises:
            InvalidNameError: If the path has no final component
            NotFoundError: If the containing directory does not exist
        """
        if path == ROOT_NAME:
            return self.root, ROOT_NAME

        is_absolute, segments = split_path(path)
        if not segments:
            raise InvalidNameError(f"Invalid name: {path!r} (empty after normalization)")

        leaf = segments[-1]
        if len(segments) == 1 and not is_absolute:
            return start, leaf

        prefix = "/".join(segments[:-1])
        if is_absolute:
            prefix = "/" + prefix
        return self.resolve_or_raise(prefix, start), leaf

    def complete_path(self, partial: str, start: DirectoryNode) -> List[str]:
        """Get completion candidates for a partial path.

        Used for tab completion.

        Args:
            partial: Partial path to complete
            start: Current working directory

        Returns:
            List of completion candidates, directories with a trailing slash
        """
        if "/" in partial:
            dir_part, name_part = partial.rsplit("/", 1)
            if partial.startswith("/"):
                dir_part = dir_part or "/"
        else:
            dir_part = ""
            name_part = partial

        dir_node = self.resolve(dir_part, start, follow_parent=True) if dir_part else start
        if dir_node is None:
            return []

        candidates = []
        for child in dir_node.list_children():
            if not child.name.startswith(name_part):
                continue
            if dir_part == "/":
                candidate = f"/{child.name}"
            elif dir_part:
                candidate = f"{dir_part}/{child.name}"
            else:
                candidate = child.name
            if child.is_directory:
                candidate += "/"
            candidates.append(candidate)

        return candidates

    def _walk(
        self,
        path: str,
        start: DirectoryNode,
        follow_parent: bool,
    ) -> Tuple[Optional[DirectoryNode], Optional[str]]:
        """Walk the segments of ``path``.

        Returns:
            Tuple of (resolved directory or None, failing segment or None)
        """
        if not path:
            return start, None

        is_absolute, segments = split_path(path)
        node = self.root if is_absolute else start

        for segment in segments:
            if follow_parent and segment == PARENT_SEGMENT:
                if node.parent is not None:
                    node = node.parent
                continue

            child = node.get_child(segment)
            if not isinstance(child, DirectoryNode):
                logger.debug(f"Resolution of {path!r} stopped at {segment!r}")
                return None, segment
            node = child

        return node, None
