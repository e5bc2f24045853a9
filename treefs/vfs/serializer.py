"""Save and load trees in the indented text format.

Each entry is one line, written in pre-order::

    / 1
      docs 1
        notes 0
      readme 0

Two spaces of indentation per level, then the name, a space and a flag
(``1`` for a directory, ``0`` for a file). Names are not escaped, so a
name containing whitespace cannot be read back.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from treefs.vfs.base import DirectoryNode, Node, dispose_subtree
from treefs.vfs.errors import (
    FirstEntryNotDirectoryError,
    InvalidIndentationError,
    InvalidLineFormatError,
    StackOverflowError,
    StorageError,
    TreeError,
)
from treefs.vfs.names import ROOT_NAME, normalize_name

logger = logging.getLogger(__name__)

INDENT = "  "
MAX_DEPTH = 1024
DIRECTORY_FLAG = "1"
FILE_FLAG = "0"


@dataclass
class LoadResult:
    """Outcome of a successful load.

    Attributes:
        root: Root of the rebuilt tree (a bare ``/`` if nothing was read)
        entries: Number of valid entries read, root included
        errors: Per-line errors for lines that were skipped
    """
    root: DirectoryNode
    entries: int = 0
    errors: List[InvalidLineFormatError] = field(default_factory=list)


def format_entry(node: Node, depth: int) -> str:
    """Format a single entry line (without newline)."""
    flag = DIRECTORY_FLAG if node.is_directory else FILE_FLAG
    return f"{INDENT * depth}{node.name} {flag}"


def dumps(root: DirectoryNode) -> str:
    """Serialize a tree to text.

    Args:
        root: Directory to write out; it is written at depth 0

    Returns:
        Text with one line per entry
    """
    return "".join(format_entry(node, depth) + "\n" for node, depth in root.walk())


def dump(root: DirectoryNode, path: Union[str, Path]) -> None:
    """Write a tree to a file.

    Raises:
        StorageError: If the file cannot be written
    """
    text = dumps(root)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
    except OSError as e:
        raise StorageError(f"Could not open file {path}.") from e
    logger.debug(f"Wrote {len(text.splitlines())} entries to {path}")


def loads(text: str) -> LoadResult:
    """Rebuild a tree from text.

    Malformed lines are skipped and recorded in ``LoadResult.errors``;
    the lines after them are placed by their indentation as usual. An
    entry that parses but cannot be placed (a duplicate sibling, a child
    of a file, a second top-level entry) is skipped together with the
    lines nested below it. Structural errors abort the load; the
    partially built tree is disposed before raising.

    Args:
        text: Serialized tree

    Returns:
        LoadResult with the new root

    Raises:
        InvalidIndentationError: If a line has an odd number of leading spaces
        FirstEntryNotDirectoryError: If the first valid entry is a file
        StackOverflowError: If nesting exceeds MAX_DEPTH
    """
    root: Optional[DirectoryNode] = None
    stack: List[Node] = []
    errors: List[InvalidLineFormatError] = []
    entries = 0
    # Level of the last entry that could not be placed in the tree
    # (duplicate, nested under a file, second top-level); deeper lines
    # belong to it and are skipped too
    skip_level: Optional[int] = None

    try:
        for line_number, line in enumerate(text.splitlines(), start=1):
            stripped = line.strip()
            if not stripped:
                continue
            logger.debug(f"Processing line {line_number}: '{stripped}'")

            depth = len(line) - len(line.lstrip(" "))
            if depth % 2 != 0:
                raise InvalidIndentationError(
                    f"Invalid indentation: '{stripped}'", line_number
                )
            level = depth // 2

            if skip_level is not None:
                if level > skip_level:
                    errors.append(InvalidLineFormatError(
                        f"Parent entry was skipped: '{stripped}'", line_number
                    ))
                    continue
                skip_level = None

            try:
                name, is_directory = _parse_entry(stripped, line_number)
            except InvalidLineFormatError as e:
                # Leaves the ancestor stack as is; later lines attach normally
                errors.append(e)
                continue

            if root is None:
                if not is_directory:
                    raise FirstEntryNotDirectoryError(
                        f"First entry must be a directory: '{stripped}'", line_number
                    )
                if name != ROOT_NAME:
                    logger.warning(f"Root entry is named '{name}', using '{ROOT_NAME}'")
                root = DirectoryNode.create_root()
                stack.append(root)
                entries += 1
                logger.debug(f"Set new root (stack depth {len(stack)})")
                continue

            if level == 0:
                errors.append(InvalidLineFormatError(
                    f"Only one top-level entry is allowed: '{stripped}'", line_number
                ))
                skip_level = level
                continue

            while len(stack) > level:
                stack.pop()
            if len(stack) >= MAX_DEPTH:
                raise StackOverflowError("Stack overflow.", line_number)

            parent = stack[-1]
            if not isinstance(parent, DirectoryNode):
                errors.append(InvalidLineFormatError(
                    f"Entry nested under file '{parent.name}': '{stripped}'", line_number
                ))
                skip_level = level
                continue

            try:
                node = parent.create_child(name, is_directory)
            except TreeError as e:
                errors.append(InvalidLineFormatError(str(e), line_number))
                skip_level = level
                continue

            entries += 1
            logger.debug(
                f"Adding {name} (directory={is_directory}) at level {level}, parent={parent.name}"
            )
            stack.append(node)
    except TreeError:
        if root is not None:
            dispose_subtree(root)
        raise

    for error in errors:
        logger.debug(f"Skipped: {error}")

    if root is None:
        return LoadResult(root=DirectoryNode.create_root(), entries=0, errors=errors)
    return LoadResult(root=root, entries=entries, errors=errors)


def load(path: Union[str, Path]) -> LoadResult:
    """Read and rebuild a tree from a file.

    Raises:
        StorageError: If the file cannot be opened or read
        LoadError: On a structural error (see ``loads``)
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise StorageError(f"Could not open file {path}.") from e
    except UnicodeDecodeError as e:
        raise StorageError(f"Could not read file {path}: {e}") from e
    return loads(text)


def _parse_entry(stripped: str, line_number: int) -> Tuple[str, bool]:
    """Split an entry line into a canonical name and a directory flag.

    Raises:
        InvalidLineFormatError: If the line is not '<name> <0|1>'
    """
    fields = stripped.split()
    if len(fields) != 2 or fields[1] not in (DIRECTORY_FLAG, FILE_FLAG):
        raise InvalidLineFormatError(f"Invalid line format: '{stripped}'", line_number)

    raw_name, flag = fields
    try:
        name = normalize_name(raw_name)
    except TreeError as e:
        raise InvalidLineFormatError(f"{e}", line_number) from e
    return name, flag == DIRECTORY_FLAG
