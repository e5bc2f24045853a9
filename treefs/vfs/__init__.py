"""In-memory tree of directories and files.

The tree models a filesystem-like hierarchy that can be navigated and
changed with familiar shell commands and saved to a flat text file.

Architecture:

    ```
    /                    # Root (DirectoryNode named "/")
    ├── docs/            # DirectoryNode
    │   └── notes        # FileNode (empty leaf marker)
    └── tmp/
    ```

Node Types:

    - Node: Base class for all entries
    - DirectoryNode: Owns an ordered list of children (cd into them)
    - FileNode: Leaf entry without content

Path Resolution:

    The PathResolver handles navigation:
    - Absolute paths: /docs/drafts
    - Relative paths: docs/drafts
    - Redundant separators are ignored: docs//drafts/
    - Parent segments (..) for cd

Persistence:

    The serializer writes one ``<indent><name> <0|1>`` line per entry in
    pre-order and rebuilds the tree with an explicit ancestor stack.

Usage Example:

    ```python
    from treefs.vfs import DirectoryNode, PathResolver, dumps, loads

    root = DirectoryNode.create_root()
    docs = root.create_child("docs", is_directory=True)
    docs.create_child("notes", is_directory=False)

    resolver = PathResolver(root)
    assert resolver.resolve("/docs", root) is docs

    text = dumps(root)
    copy = loads(text).root
    ```
"""

from treefs.vfs.base import (
    Node,
    DirectoryNode,
    FileNode,
    NodeType,
    dispose_subtree,
)
from treefs.vfs.errors import (
    TreeError,
    InvalidNameError,
    AlreadyExistsError,
    NotFoundError,
    NotADirectoryError,
    NotAFileError,
    NotEmptyError,
    IsCurrentDirectoryError,
    IsRootError,
    StorageError,
    LoadError,
    InvalidIndentationError,
    InvalidLineFormatError,
    StackOverflowError,
    FirstEntryNotDirectoryError,
)
from treefs.vfs.names import normalize_name, split_path, MAX_NAME_LENGTH
from treefs.vfs.resolver import PathResolver
from treefs.vfs.serializer import LoadResult, dump, dumps, load, loads, MAX_DEPTH

__all__ = [
    # Core classes
    "Node",
    "DirectoryNode",
    "FileNode",
    "NodeType",
    "dispose_subtree",
    # Names and paths
    "normalize_name",
    "split_path",
    "MAX_NAME_LENGTH",
    "PathResolver",
    # Persistence
    "LoadResult",
    "dump",
    "dumps",
    "load",
    "loads",
    "MAX_DEPTH",
    # Errors
    "TreeError",
    "InvalidNameError",
    "AlreadyExistsError",
    "NotFoundError",
    "NotADirectoryError",
    "NotAFileError",
    "NotEmptyError",
    "IsCurrentDirectoryError",
    "IsRootError",
    "StorageError",
    "LoadError",
    "InvalidIndentationError",
    "InvalidLineFormatError",
    "StackOverflowError",
    "FirstEntryNotDirectoryError",
]
