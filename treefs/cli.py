import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .decorators import handle_tree_errors

# Initialize Rich Console
console = Console()

# Configure logging to use Rich's RichHandler
logging.basicConfig(
    level=logging.INFO,  # Set to INFO by default, DEBUG if verbose
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True)]
)
logger = logging.getLogger(__name__)

# Main app
app = typer.Typer(help="In-memory directory tree simulator with save/reload.")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
):
    """
    treefs - navigate and edit an in-memory directory tree.

    Build a tree with mkdir/create, move around with cd, and save it to
    an indented text file that can be reloaded later.
    """
    ctx.obj = {"verbose": verbose}
    if verbose:
        logging.getLogger("treefs").setLevel(logging.DEBUG)
        console.print("[bold green]Verbose mode enabled.[/bold green]")


def _make_shell(ctx: typer.Context, load: Optional[Path], interactive: bool):
    """Create a shell configured from the user config and global options."""
    from .config import load_config
    from .repl import TreeShell
    from .session import Session

    config = load_config()
    verbose = config.shell.verbose or bool(ctx.obj and ctx.obj.get("verbose"))

    try:
        session = Session(verbose=verbose)
    except Exception as e:
        console.print(f"[red]Failed to initialize file system: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    shell = TreeShell(
        session=session,
        console=console,
        history_file=config.history_path() if interactive else None,
        prompt_style=config.shell.prompt_style,
        confirm_on_exit=interactive,
        default_save_path=config.storage.default_save_path,
    )

    if load is None and interactive and config.storage.default_save_path:
        default = Path(config.storage.default_save_path).expanduser()
        if default.is_file():
            load = default

    if load is not None:
        shell.execute(f"reload {load}")

    return shell


@app.command()
def shell(
    ctx: typer.Context,
    load: Optional[Path] = typer.Option(None, "--load", "-l", help="Saved tree to load at startup"),
):
    """
    Launch the interactive shell.

    Commands:
        mkdir, create      - Add directories and files
        rmdir, rm          - Remove them
        cd, pwd, ls, tree  - Navigate
        save, reload       - Persist the tree
        menu               - Show all commands

    Example:
        treefs shell --load tree.txt
    """
    tree_shell = _make_shell(ctx, load, interactive=True)
    code = tree_shell.run()
    raise typer.Exit(code=code)


@app.command()
@handle_tree_errors
def run(
    ctx: typer.Context,
    script: Path = typer.Argument(..., help="File with one shell command per line"),
    load: Optional[Path] = typer.Option(None, "--load", "-l", help="Saved tree to load first"),
):
    """
    Run shell commands from a file without prompting.

    Example:
        treefs run build.txt
    """
    try:
        lines = script.read_text(encoding="utf-8").splitlines()
    except OSError as e:
        console.print(f"[red]Error: Could not read script {escape(str(script))}: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    tree_shell = _make_shell(ctx, load, interactive=False)
    code = tree_shell.run_lines(lines)
    raise typer.Exit(code=code)


@app.command()
@handle_tree_errors
def show(
    saved_file: Path = typer.Argument(..., help="Saved tree file"),
    path: str = typer.Argument("", help="Directory to start from"),
):
    """
    Print the tree stored in a saved file.

    Example:
        treefs show tree.txt /docs
    """
    from .repl.render import render_tree
    from .session import Session
    from .vfs import load

    result = load(saved_file)
    for error in result.errors:
        console.print(f"[yellow]{escape(str(error))}[/yellow]")

    session = Session(root=result.root)
    for line in render_tree(session.tree(path)):
        console.print(line, markup=False, highlight=False, soft_wrap=True)
    session.close()


@app.command()
@handle_tree_errors
def check(
    saved_file: Path = typer.Argument(..., help="Saved tree file"),
):
    """
    Validate a saved tree file.

    Reports the number of entries and any lines that would be skipped on
    reload. Exits with code 1 if the file cannot be loaded at all.

    Example:
        treefs check tree.txt
    """
    from .vfs import dispose_subtree, load

    result = load(saved_file)

    directories = 0
    files = 0
    if result.entries:
        for node, _ in result.root.walk():
            if node.is_directory:
                directories += 1
            else:
                files += 1
    dispose_subtree(result.root)

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Entries", style="cyan")
    table.add_column("Directories", style="green")
    table.add_column("Files", style="white")
    table.add_column("Skipped lines", style="yellow")
    table.add_row(str(result.entries), str(directories), str(files), str(len(result.errors)))
    console.print(table)

    for error in result.errors:
        console.print(f"[yellow]{escape(str(error))}[/yellow]")

    if result.entries == 0:
        console.print("[yellow]No valid entries found; reload would give an empty root.[/yellow]")
    elif not result.errors:
        console.print(f"[green]✓ {escape(str(saved_file))} is valid[/green]")


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    init: bool = typer.Option(False, "--init", help="Initialize config file with defaults"),
    set_verbose: Optional[bool] = typer.Option(None, "--verbose/--no-verbose", help="Start the shell in verbose mode"),
    set_history: Optional[bool] = typer.Option(None, "--history/--no-history", help="Keep shell history on disk"),
    set_history_file: Optional[str] = typer.Option(None, "--history-file", help="Set shell history file"),
    set_prompt_style: Optional[str] = typer.Option(None, "--prompt-style", help="Set prompt style (prompt_toolkit syntax)"),
    set_default_save: Optional[str] = typer.Option(None, "--default-save", help="Set default save file"),
):
    """
    View or edit treefs configuration.

    Configuration is stored at ~/.config/treefs/config.json (or
    ~/.treefs/config.json, or $TREEFS_CONFIG).

    Examples:
        # Show current configuration
        treefs config --show

        # Initialize config file with defaults
        treefs config --init

        # Load and offer to save tree.txt by default
        treefs config --default-save ~/tree.txt
    """
    from .config import ensure_config_exists, get_config_path, load_config, update_config

    if init:
        config_path = ensure_config_exists()
        console.print(f"[green]Configuration initialized at {escape(str(config_path))}[/green]")
        return

    has_settings = any([
        set_verbose is not None, set_history is not None, set_history_file,
        set_prompt_style, set_default_save,
    ])

    if has_settings:
        update_config(
            shell_verbose=set_verbose,
            shell_history=set_history,
            shell_history_file=set_history_file,
            shell_prompt_style=set_prompt_style,
            storage_default_save_path=set_default_save,
        )
        console.print(f"[green]Configuration saved to {escape(str(get_config_path()))}[/green]")
        if not show:
            return

    current = load_config()
    console.print("\n[bold]treefs Configuration[/bold]")
    console.print(f"[dim]Location: {escape(str(get_config_path()))}[/dim]\n")

    console.print("[bold cyan]Shell Settings:[/bold cyan]")
    console.print(f"  Verbose:      {current.shell.verbose}")
    console.print(f"  History:      {current.shell.history}")
    history = current.history_path()
    console.print(f"  History File: {escape(str(history)) if history else '[dim]disabled[/dim]'}")
    console.print(f"  Prompt Style: {escape(current.shell.prompt_style)}")

    console.print("\n[bold cyan]Storage Settings:[/bold cyan]")
    if current.storage.default_save_path:
        console.print(f"  Default Save: {escape(current.storage.default_save_path)}")
    else:
        console.print("  Default Save: [dim]not set[/dim]")


if __name__ == "__main__":
    app()
