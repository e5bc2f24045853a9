"""Node classes for the in-memory tree.

The tree is a directory/file hierarchy navigated with shell commands
(cd, ls, mkdir, ...).

Architecture:
    - Node: Base class for all tree entries
    - DirectoryNode: Owns an ordered list of children (cd into them)
    - FileNode: Empty leaf marker
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from treefs.vfs.errors import (
    AlreadyExistsError,
    InvalidNameError,
    IsCurrentDirectoryError,
    IsRootError,
    NotADirectoryError,
    NotAFileError,
    NotEmptyError,
    NotFoundError,
)
from treefs.vfs.names import ROOT_NAME, SEPARATOR, normalize_name

logger = logging.getLogger(__name__)

# Would shadow the "." and ".." path segments
RESERVED_NAMES = (".", "..")


class NodeType(Enum):
    """Type of tree node."""
    DIRECTORY = "directory"
    FILE = "file"


class Node(ABC):
    """Base class for all tree nodes.

    Attributes:
        name: Canonical name of this node (``/`` for the root)
        parent: Containing directory (None for root). The parent owns
            this node; the reference back is only a relation.
        node_type: Type of node (directory or file)
    """

    def __init__(
        self,
        name: str,
        parent: Optional['DirectoryNode'] = None,
        node_type: NodeType = NodeType.FILE,
    ):
        self.name = name
        self.parent = parent
        self.node_type = node_type

    @property
    def is_directory(self) -> bool:
        return self.node_type is NodeType.DIRECTORY

    @abstractmethod
    def get_info(self) -> Dict[str, Any]:
        """Get metadata about this node for display.

        Returns:
            Dict with keys like: type, name, path
        """
        pass

    def get_path(self) -> str:
        """Get absolute path to this node.

        Returns:
            Path like /docs/notes
        """
        if self.parent is None:
            return "/"

        parts = []
        node = self
        while node.parent is not None:
            parts.append(node.name)
            node = node.parent

        return "/" + "/".join(reversed(parts))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', path='{self.get_path()}')"


class DirectoryNode(Node):
    """A directory node that owns an ordered list of children.

    Children keep insertion order; new entries are appended at the tail
    and removal leaves the order of the remaining siblings untouched.
    """

    def __init__(self, name: str, parent: Optional['DirectoryNode'] = None):
        super().__init__(name, parent, NodeType.DIRECTORY)
        self._children: List[Node] = []

    @classmethod
    def create_root(cls) -> 'DirectoryNode':
        """Create a fresh root directory named ``/``."""
        return cls(ROOT_NAME)

    def list_children(self) -> List[Node]:
        """List all children of this directory.

        Returns:
            Snapshot of child nodes in insertion order
        """
        return list(self._children)

    def list_entries(self) -> List[Tuple[str, bool]]:
        """List children as ``(name, is_directory)`` pairs."""
        return [(child.name, child.is_directory) for child in self._children]

    def is_empty(self) -> bool:
        return not self._children

    def get_child(self, name: str) -> Optional[Node]:
        """Get a child node by exact canonical name.

        Args:
            name: Name of child node

        Returns:
            Child node or None if not found
        """
        logger.debug(f"Looking for {name} in children of {self.name}")
        for child in self._children:
            if child.name == name:
                logger.debug(f"Found {name}")
                return child
        logger.debug(f"{name} not found in {self.name}")
        return None

    def find_child(self, name: str) -> Node:
        """Get a child node by name, raising if it does not exist.

        Raises:
            NotFoundError: If there is no such child
        """
        child = self.get_child(name)
        if child is None:
            raise NotFoundError(f"No such file or directory: {name}")
        return child

    def create_child(self, name: str, is_directory: bool) -> Node:
        """Create a new child and append it to this directory.

        Args:
            name: Raw name, normalized before use
            is_directory: Whether to create a directory or a file

        Returns:
            The new node

        Raises:
            InvalidNameError: If the name does not normalize to a single component
                or is "." or ".."
            AlreadyExistsError: If a sibling with that name exists
        """
        canonical = normalize_name(name)
        if canonical == ROOT_NAME or SEPARATOR in canonical:
            raise InvalidNameError(f"Invalid name: {name!r} (must be a single path component)")
        if canonical in RESERVED_NAMES:
            raise InvalidNameError(f"Invalid name: {name!r} (reserved)")

        if self.get_child(canonical) is not None:
            kind = "Directory" if is_directory else "File"
            logger.debug(f"{canonical} already exists in {self.name}")
            raise AlreadyExistsError(f"{kind} already exists.")

        node: Node
        if is_directory:
            node = DirectoryNode(canonical, parent=self)
        else:
            node = FileNode(canonical, parent=self)

        self._children.append(node)
        logger.debug(f"Inserted {canonical} as child of {self.name}")
        return node

    def remove_child(
        self,
        name: str,
        expect_directory: bool,
        current: Optional['DirectoryNode'] = None,
    ) -> None:
        """Unlink a child and dispose of it.

        Args:
            name: Raw name of the child
            expect_directory: True for rmdir semantics, False for rm
            current: Directory that must not be removed (the session cwd)

        Raises:
            IsRootError: If asked to remove ``/``
            NotFoundError: If there is no such child
            NotADirectoryError: If a directory was expected but a file found
            NotAFileError: If a file was expected but a directory found
            NotEmptyError: If the directory still has children
            IsCurrentDirectoryError: If the target is ``current``
        """
        if name == ROOT_NAME:
            raise IsRootError("Cannot remove root directory.")

        canonical = normalize_name(name)
        child = self.get_child(canonical)
        if child is None:
            if expect_directory:
                raise NotFoundError(f"No such directory: {canonical}")
            raise NotFoundError(f"No such file: {canonical}")

        if expect_directory and not child.is_directory:
            raise NotADirectoryError(f"{canonical} is not a directory.")
        if not expect_directory and child.is_directory:
            raise NotAFileError(f"{canonical} is a directory.")

        if isinstance(child, DirectoryNode):
            if not child.is_empty():
                raise NotEmptyError(f"Directory {canonical} is not empty.")
            if child is current:
                raise IsCurrentDirectoryError("Cannot remove current working directory.")

        self._children.remove(child)
        dispose_subtree(child)
        logger.debug(f"Removed {canonical} from {self.name}")

    def walk(self) -> Iterator[Tuple[Node, int]]:
        """Pre-order traversal of this subtree.

        Yields:
            ``(node, depth)`` pairs, this directory first at depth 0,
            then each child followed by its own descendants
        """
        stack: List[Tuple[Node, int]] = [(self, 0)]
        while stack:
            node, depth = stack.pop()
            yield node, depth
            if isinstance(node, DirectoryNode):
                for child in reversed(node._children):
                    stack.append((child, depth + 1))

    def get_info(self) -> Dict[str, Any]:
        """Get directory metadata.

        Returns:
            Dict with directory information
        """
        return {
            "type": "directory",
            "name": self.name,
            "children_count": len(self._children),
            "path": self.get_path(),
        }


class FileNode(Node):
    """A file node.

    Files are empty leaf markers: they have no content and no children.
    """

    def __init__(self, name: str, parent: Optional[DirectoryNode] = None):
        super().__init__(name, parent, NodeType.FILE)

    def get_info(self) -> Dict[str, Any]:
        """Get file metadata.

        Returns:
            Dict with file information
        """
        return {
            "type": "file",
            "name": self.name,
            "path": self.get_path(),
        }


def dispose_subtree(node: Node) -> None:
    """Detach a node and every descendant.

    Child lists are cleared and parent references dropped, so nothing
    outside the subtree can reach it afterwards. Used when a whole tree
    is replaced or torn down and by ``remove_child``.
    """
    stack: List[Node] = [node]
    count = 0
    while stack:
        current = stack.pop()
        if isinstance(current, DirectoryNode):
            stack.extend(current._children)
            current._children = []
        current.parent = None
        count += 1
    logger.debug(f"Disposed {count} node(s)")
