"""Plain-text rendering of listings and trees for the shell."""

from typing import List, Tuple

from treefs.vfs.base import DirectoryNode, Node

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "│   "
SPACE_PREFIX = "    "


def entry_label(name: str, is_directory: bool) -> str:
    """Display name of an entry, directories with a trailing slash."""
    return f"{name}/" if is_directory else name


def render_listing(entries: List[Tuple[str, bool]]) -> List[str]:
    """Format ``ls`` output, one entry per line."""
    return [entry_label(name, is_directory) for name, is_directory in entries]


def render_tree(start: DirectoryNode) -> List[str]:
    """Draw a subtree with box-drawing connectors.

    The root is drawn as ``.``. Any other start directory is drawn as a
    single last entry so its children line up the same way.

    Example for a root holding ``docs/notes``::

        .
        └── docs/
            └── notes

    Args:
        start: Directory to draw from

    Returns:
        Output lines
    """
    lines: List[str] = []
    # (node, prefix used for its own line, is_last)
    stack: List[Tuple[Node, str, bool]] = []

    if start.parent is None:
        lines.append(".")
        _push_children(stack, start, "")
    else:
        stack.append((start, "", True))

    while stack:
        node, prefix, is_last = stack.pop()
        connector = LAST_BRANCH if is_last else BRANCH
        lines.append(prefix + connector + entry_label(node.name, node.is_directory))
        if isinstance(node, DirectoryNode):
            _push_children(stack, node, prefix + (SPACE_PREFIX if is_last else PIPE_PREFIX))

    return lines


def _push_children(stack: List[Tuple[Node, str, bool]], node: DirectoryNode, prefix: str) -> None:
    children = node.list_children()
    # Reversed so the first child is popped first
    for index in range(len(children) - 1, -1, -1):
        stack.append((children[index], prefix, index == len(children) - 1))
