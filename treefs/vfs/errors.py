"""Exceptions raised by tree, resolver and serializer operations."""

from typing import Optional


class TreeError(Exception):
    """Base class for all tree errors."""
    pass


class InvalidNameError(TreeError):
    """Name is empty, too long, or not a single component."""
    pass


class AlreadyExistsError(TreeError):
    """A sibling with the same name already exists."""
    pass


class NotFoundError(TreeError):
    """Path or child does not exist."""
    pass


class NotADirectoryError(TreeError):
    """Expected a directory but found a file."""
    pass


class NotAFileError(TreeError):
    """Expected a file but found a directory."""
    pass


class NotEmptyError(TreeError):
    """Attempted to remove a directory that still has children."""
    pass


class IsCurrentDirectoryError(TreeError):
    """Attempted to remove the current working directory."""
    pass


class IsRootError(TreeError):
    """Attempted to remove the root directory."""
    pass


class StorageError(TreeError):
    """Saved file could not be opened, read, written or removed."""
    pass


class LoadError(TreeError):
    """Structural error while loading a saved tree.

    Attributes:
        line_number: 1-based line number in the input (None if unknown)
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"Error at line {line_number}: {message}"
        super().__init__(message)


class InvalidIndentationError(LoadError):
    """Leading space count is odd. Fatal for the whole load."""
    pass


class InvalidLineFormatError(LoadError):
    """Line is not '<name> <0|1>'. The line is skipped."""
    pass


class StackOverflowError(LoadError):
    """Nesting exceeds the maximum depth. Fatal for the whole load."""
    pass


class FirstEntryNotDirectoryError(LoadError):
    """First entry describes a file. Fatal for the whole load."""
    pass
