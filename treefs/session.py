"""Main Session class - holds the tree and the current directory."""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

from treefs.vfs.base import DirectoryNode, Node, dispose_subtree
from treefs.vfs.errors import LoadError, NotFoundError, StorageError
from treefs.vfs.resolver import PathResolver
from treefs.vfs import serializer
from treefs.vfs.serializer import LoadResult

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "treefs"


class Session:
    """State of one interactive session over a tree.

    The session owns exactly one root and a current working directory
    that always points into that root's tree. Every command goes through
    a session method; failures raise ``TreeError`` subclasses and leave
    the tree unchanged.

    Usage:
        >>> session = Session()
        >>> session.mkdir("docs")
        >>> session.cd("docs")
        >>> session.create("notes")
        >>> session.pwd()
        '/docs'
        >>> session.save("tree.txt")
    """

    def __init__(self, root: Optional[DirectoryNode] = None, verbose: bool = False):
        """Initialize a session.

        Args:
            root: Existing tree to work on (a fresh ``/`` if omitted)
            verbose: Enable diagnostic output
        """
        self.root = root if root is not None else DirectoryNode.create_root()
        self.cwd = self.root
        self.resolver = PathResolver(self.root)
        self._verbose = False
        self.verbose = verbose

    @property
    def verbose(self) -> bool:
        return self._verbose

    @verbose.setter
    def verbose(self, value: bool) -> None:
        self._verbose = value
        logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if value else logging.INFO)

    # Navigation

    def pwd(self) -> str:
        """Get current working directory path."""
        return self.cwd.get_path()

    def cd(self, path: str = "") -> DirectoryNode:
        """Change current directory.

        An empty path goes to the root; ``..`` segments move to the parent.

        Args:
            path: Path to navigate to

        Returns:
            The new current directory

        Raises:
            NotFoundError: If a segment is missing or names a file
        """
        if not path:
            target = self.root
        else:
            target = self.resolver.resolve_or_raise(path, self.cwd, follow_parent=True)
        logger.debug(f"Changed directory to {target.get_path()}")
        self.cwd = target
        return target

    def ls(self, path: str = "") -> List[Tuple[str, bool]]:
        """List the children of a directory.

        Args:
            path: Directory to list (default: current directory)

        Returns:
            ``(name, is_directory)`` pairs in insertion order
        """
        return self._directory_at(path).list_entries()

    def tree(self, path: str = "") -> DirectoryNode:
        """Find the directory a tree display starts from.

        Unlike ``ls``, a relative path is taken from the root, so
        ``tree docs`` shows ``/docs`` wherever the session is.

        Args:
            path: Start directory (default: current directory)

        Raises:
            NotFoundError: If the path does not resolve
        """
        if not path:
            return self.cwd
        return self._directory_at(path, start=self.root)

    # Mutation

    def mkdir(self, path: str) -> Node:
        """Create a directory.

        Raises:
            InvalidNameError, AlreadyExistsError, NotFoundError
        """
        parent, name = self.resolver.resolve_parent(path, self.cwd)
        node = parent.create_child(name, is_directory=True)
        logger.debug(f"Created directory: {node.get_path()}")
        return node

    def create(self, path: str) -> Node:
        """Create an empty file.

        Raises:
            InvalidNameError, AlreadyExistsError, NotFoundError
        """
        parent, name = self.resolver.resolve_parent(path, self.cwd)
        node = parent.create_child(name, is_directory=False)
        logger.debug(f"Created file: {node.get_path()}")
        return node

    def rmdir(self, path: str) -> None:
        """Remove an empty directory.

        Raises:
            IsRootError, NotFoundError, NotADirectoryError, NotEmptyError,
            IsCurrentDirectoryError
        """
        parent, name = self.resolver.resolve_parent(path, self.cwd)
        parent.remove_child(name, expect_directory=True, current=self.cwd)

    def rm(self, path: str) -> None:
        """Remove a file.

        Raises:
            NotFoundError, NotAFileError
        """
        parent, name = self.resolver.resolve_parent(path, self.cwd)
        parent.remove_child(name, expect_directory=False, current=self.cwd)

    # Persistence

    def save(self, filename: str) -> None:
        """Write the whole tree to a file.

        Raises:
            StorageError: If the filename is empty or the file cannot be written
        """
        if not filename:
            raise StorageError("Filename is empty.")
        serializer.dump(self.root, filename)

    def reload(self, filename: str) -> LoadResult:
        """Replace the tree with the one stored in a file.

        If the file cannot be opened the current tree is kept. On a
        structural error the session falls back to a fresh ``/`` tree
        before the error propagates. On success the old tree is disposed
        and the current directory moves to the new root.

        Raises:
            StorageError: If the filename is empty or the file cannot be read
            LoadError: On a fatal structural error
        """
        if not filename:
            raise StorageError("Filename is empty.")

        try:
            result = serializer.load(filename)
        except LoadError:
            self.reset()
            raise

        self._install(result.root)
        if result.entries == 0:
            logger.debug("No valid entries found, using default /")
        else:
            logger.debug(f"Reloaded {result.entries} entries from {filename}")
        return result

    def rmsave(self, filename: str) -> None:
        """Delete a saved file from disk.

        Raises:
            StorageError: If the file does not exist or cannot be removed
        """
        if not filename:
            raise StorageError("Filename is empty.")
        path = Path(filename)
        if not path.is_file():
            raise StorageError(f"File {filename} does not exist.")
        try:
            path.unlink()
        except OSError as e:
            raise StorageError(f"Could not remove file {filename}.") from e
        logger.debug(f"Removed saved file: {filename}")

    # Lifecycle

    def reset(self) -> None:
        """Replace the tree with a fresh root-only tree."""
        self._install(DirectoryNode.create_root())

    def close(self) -> None:
        """Dispose of the tree at shutdown."""
        dispose_subtree(self.root)

    def _install(self, root: DirectoryNode) -> None:
        old_root = self.root
        self.root = root
        self.cwd = root
        self.resolver = PathResolver(root)
        if old_root is not root:
            dispose_subtree(old_root)

    def _directory_at(self, path: str, start: Optional[DirectoryNode] = None) -> DirectoryNode:
        if not path:
            return self.cwd
        node = self.resolver.resolve(path, start if start is not None else self.cwd)
        if node is None:
            raise NotFoundError(f"No such directory: {path}.")
        return node
