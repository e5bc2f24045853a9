"""REPL shell for interactive tree navigation.

This module provides an interactive shell for navigating and changing
the in-memory tree with familiar commands (cd, ls, mkdir, rm, ...).
"""

from treefs.repl.shell import TreeShell

__all__ = ["TreeShell"]
