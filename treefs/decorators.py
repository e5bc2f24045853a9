"""Decorators for treefs CLI commands."""

import functools
import logging
from typing import Any, Callable

import typer
from rich.console import Console
from rich.markup import escape

from treefs.vfs.errors import LoadError, StorageError, TreeError

logger = logging.getLogger(__name__)
console = Console()


def handle_tree_errors(func: Callable) -> Callable:
    """
    Decorator to handle common tree operation errors.

    Centralizes error handling for CLI commands:
    - StorageError: Saved file missing or unreadable
    - LoadError: Saved file is structurally broken
    - TreeError: Any other tree operation failure
    - General exceptions: Unexpected errors
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except StorageError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)
        except LoadError as e:
            console.print(f"[bold red]Invalid saved tree:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)
        except TreeError as e:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(code=130)
        except typer.Exit:
            raise
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            console.print(f"[bold red]Unexpected error:[/bold red] {escape(str(e))}")
            raise typer.Exit(code=1)

    return wrapper
