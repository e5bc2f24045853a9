"""Interactive REPL shell for navigating and editing the tree."""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.history import FileHistory, InMemoryHistory
from prompt_toolkit.styles import Style
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from treefs.repl.render import render_listing, render_tree
from treefs.session import Session
from treefs.vfs.errors import (
    AlreadyExistsError,
    InvalidNameError,
    LoadError,
    NotFoundError,
    TreeError,
)

logger = logging.getLogger(__name__)

# Printed without the "Error: " prefix
BARE_ERRORS = (AlreadyExistsError, InvalidNameError, NotFoundError, LoadError)

# (usage, description) pairs shown by `menu`
MENU = [
    ("menu", "print out all commands"),
    ("verbose [on|off]", "turn on/off verbose mode"),
    ("mkdir pathname", "create an empty directory"),
    ("rmdir pathname", "remove an empty directory"),
    ("cd [pathname]", "change directory"),
    ("ls", "list files and directories in the working directory"),
    ("tree [pathname]", "print out the file system tree from the specified path or current directory"),
    ("pwd", "print working directory"),
    ("create pathname", "create a file"),
    ("rm pathname", "remove a file"),
    ("save pathname", "save the file system structure into a file"),
    ("reload pathname", "reload the file system structure from a file"),
    ("rmsave pathname", "remove a saved file system file"),
    ("quit", "exit the program (prompts to save file system)"),
]


class PathCompleter(Completer):
    """Tab completion for command names and tree paths."""

    def __init__(self, shell: "TreeShell"):
        self.shell = shell

    def get_completions(self, document, complete_event):
        """Get completion candidates."""
        text = document.text_before_cursor
        words = text.split()

        # Still typing the command itself
        if not text.endswith(" ") and len(words) <= 1:
            partial = words[0] if words else ""
            for name in sorted(self.shell.commands):
                if name.startswith(partial):
                    yield Completion(name, start_position=-len(partial))
            return

        partial = "" if text.endswith(" ") else words[-1]
        session = self.shell.session
        for candidate in session.resolver.complete_path(partial, session.cwd):
            yield Completion(candidate, start_position=-len(partial))


class TreeShell:
    """Interactive shell over a ``Session``.

    Each input line is split into a command name (the first word) and a
    single argument string (the rest of the line). Commands:
    - menu: list commands
    - verbose on|off: toggle diagnostic output
    - pwd, cd, ls, tree: navigate
    - mkdir, rmdir, create, rm: change the tree
    - save, reload, rmsave: persist the tree
    - quit, exit: offer to save, then leave
    """

    def __init__(
        self,
        session: Optional[Session] = None,
        console: Optional[Console] = None,
        history_file: Optional[Path] = None,
        prompt_style: str = "ansicyan bold",
        ask: Optional[Callable[[str], str]] = None,
        confirm_on_exit: bool = True,
        default_save_path: Optional[str] = None,
    ):
        """Initialize the REPL shell.

        Args:
            session: Session to operate on (a fresh one if omitted)
            console: Console for output
            history_file: File for prompt history (in-memory if None)
            prompt_style: prompt_toolkit style for the prompt
            ask: Function used to ask the user a question; defaults to the
                interactive prompt
            confirm_on_exit: Offer to save the tree on quit
            default_save_path: Filename offered by the save prompt on quit
        """
        self.session = session if session is not None else Session()
        self.console = console or Console()
        self.running = True
        self.history_file = history_file
        self.prompt_style = prompt_style
        self.confirm_on_exit = confirm_on_exit
        self.default_save_path = default_save_path
        self._ask = ask
        self._prompt_session: Optional[PromptSession] = None

        # Command registry
        self.commands: Dict[str, Callable[[str], Optional[str]]] = {
            "menu": self.cmd_menu,
            "help": self.cmd_menu,
            "?": self.cmd_menu,
            "verbose": self.cmd_verbose,
            "pwd": self.cmd_pwd,
            "mkdir": self.cmd_mkdir,
            "rmdir": self.cmd_rmdir,
            "create": self.cmd_create,
            "rm": self.cmd_rm,
            "ls": self.cmd_ls,
            "cd": self.cmd_cd,
            "tree": self.cmd_tree,
            "save": self.cmd_save,
            "reload": self.cmd_reload,
            "rmsave": self.cmd_rmsave,
            "quit": self.cmd_quit,
            "exit": self.cmd_quit,
        }

    @property
    def prompt_session(self) -> PromptSession:
        """Prompt session, created on first interactive use."""
        if self._prompt_session is None:
            if self.history_file:
                self.history_file.parent.mkdir(parents=True, exist_ok=True)
                history = FileHistory(str(self.history_file))
            else:
                history = InMemoryHistory()
            self._prompt_session = PromptSession(
                history=history,
                completer=PathCompleter(self),
                style=Style.from_dict({"prompt": self.prompt_style}),
            )
        return self._prompt_session

    def get_prompt(self) -> str:
        """Generate prompt showing current path.

        Returns:
            Prompt string like "/docs$ "
        """
        return f"{self.session.pwd()}$ "

    def run(self) -> int:
        """Run the shell main loop.

        Returns:
            Exit code (0 on quit or end of input)
        """
        self.console.print("[bold cyan]treefs shell[/bold cyan] - in-memory directory tree")
        self.console.print("Type 'menu' for available commands, 'quit' to exit.\n")

        while self.running:
            try:
                line = self.prompt_session.prompt(self.get_prompt())
            except KeyboardInterrupt:
                self.console.print("\nUse 'quit' or 'exit' to exit the shell.")
                continue
            except EOFError:
                break

            self.execute(line)

        self.cleanup()
        return 0

    def run_lines(self, lines: Iterable[str]) -> int:
        """Execute commands from an iterable of lines until quit.

        Returns:
            Exit code (always 0)
        """
        for line in lines:
            if not self.running:
                break
            self.execute(line)
        self.cleanup()
        return 0

    def execute(self, line: str) -> Optional[str]:
        """Parse and execute a command line.

        Args:
            line: Command line to execute

        Returns:
            Command output, if the command produces any
        """
        line = line.strip()
        if not line:
            return None

        parts = line.split(None, 1)
        cmd = parts[0]
        arg = parts[1].strip() if len(parts) > 1 else ""

        if self.session.verbose and cmd != "verbose":
            self._note(f"Executing command: {cmd} {arg}")

        handler = self.commands.get(cmd)
        if handler is None:
            self.console.print(f"[red]Unknown command:[/red] {escape(cmd)}")
            return None

        try:
            return handler(arg)
        except TreeError as e:
            logger.debug(f"{cmd} failed: {type(e).__name__}: {e}")
            self._failure(e)
            return None

    # Command implementations

    def cmd_menu(self, arg: str = "") -> Optional[str]:
        """Show available commands.

        Usage: menu
        """
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Command", style="cyan")
        table.add_column("Description", style="white")
        for usage, description in MENU:
            table.add_row(escape(usage), description)
        self.console.print(table)
        return None

    def cmd_verbose(self, arg: str = "") -> Optional[str]:
        """Turn diagnostic output on or off.

        Usage: verbose on|off
        """
        if not arg:
            self._error("Specify 'on' or 'off'.")
        elif arg == "on":
            self.session.verbose = True
            self.console.print("Verbose mode enabled.")
        elif arg == "off":
            self.session.verbose = False
            self.console.print("Verbose mode disabled.")
        else:
            self._error("Invalid argument. Use 'on' or 'off'.")
        return None

    def cmd_pwd(self, arg: str = "") -> Optional[str]:
        """Print working directory.

        Usage: pwd
        """
        path = self.session.pwd()
        if self.session.verbose:
            self._note("Current directory:")
        self._plain(path)
        return path

    def cmd_mkdir(self, arg: str = "") -> Optional[str]:
        """Create a directory.

        Usage: mkdir <path>
        """
        if not arg:
            self._error("Directory name is empty.")
            return None
        node = self.session.mkdir(arg)
        if self.session.verbose:
            self._note(f"Created directory: {node.get_path()}")
        return None

    def cmd_rmdir(self, arg: str = "") -> Optional[str]:
        """Remove an empty directory.

        Usage: rmdir <path>
        """
        if not arg:
            self._error("Directory name is empty.")
            return None
        self.session.rmdir(arg)
        if self.session.verbose:
            self._note(f"Removed directory: {arg}")
        return None

    def cmd_create(self, arg: str = "") -> Optional[str]:
        """Create an empty file.

        Usage: create <path>
        """
        if not arg:
            self._error("File name is empty.")
            return None
        node = self.session.create(arg)
        if self.session.verbose:
            self._note(f"Created file: {node.get_path()}")
        return None

    def cmd_rm(self, arg: str = "") -> Optional[str]:
        """Remove a file.

        Usage: rm <path>
        """
        if not arg:
            self._error("File name is empty.")
            return None
        self.session.rm(arg)
        if self.session.verbose:
            self._note(f"Removed file: {arg}")
        return None

    def cmd_ls(self, arg: str = "") -> Optional[str]:
        """List the current directory.

        Usage: ls
        """
        entries = self.session.ls()
        if not entries:
            if self.session.verbose:
                self._note("Directory is empty.")
            return ""

        if self.session.verbose:
            self._note("Listing contents of current directory:")
        lines = render_listing(entries)
        for line in lines:
            self._plain(line)
        return "\n".join(lines)

    def cmd_cd(self, arg: str = "") -> Optional[str]:
        """Change directory.

        Usage: cd [path]

        With no path, go to the root. ``..`` goes to the parent.
        """
        target = self.session.cd(arg)
        if self.session.verbose:
            self._note(f"Changed to directory: {target.get_path()}")
        return None

    def cmd_tree(self, arg: str = "") -> Optional[str]:
        """Print the tree below a directory.

        Usage: tree [path]
        """
        start = self.session.tree(arg)
        if self.session.verbose:
            self._note("Displaying file system tree:")
        lines = render_tree(start)
        for line in lines:
            self._plain(line)
        return "\n".join(lines)

    def cmd_save(self, arg: str = "") -> Optional[str]:
        """Save the tree to a file.

        Usage: save <file>
        """
        self.session.save(arg)
        if self.session.verbose:
            self._note(f"Saved file system to: {arg}")
        else:
            self.console.print(f"File system saved to {escape(arg)}.")
        return None

    def cmd_reload(self, arg: str = "") -> Optional[str]:
        """Replace the tree with one loaded from a file.

        Usage: reload <file>

        On a structural error the tree is reset to an empty root.
        """
        try:
            result = self.session.reload(arg)
        except LoadError as e:
            self._failure(e)
            if self.session.verbose:
                self._note("File system reset to /")
            return None

        for error in result.errors:
            self.console.print(f"[yellow]{escape(str(error))}[/yellow]")

        # Zero entries reports success unless verbose
        if self.session.verbose:
            if result.entries == 0:
                self._note("reload: No valid entries found, using default /")
            else:
                self._note(f"Reloaded file system from: {arg}")
        else:
            self.console.print(f"File system reloaded from {escape(arg)}.")
        return None

    def cmd_rmsave(self, arg: str = "") -> Optional[str]:
        """Delete a saved file.

        Usage: rmsave <file>
        """
        self.session.rmsave(arg)
        if self.session.verbose:
            self._note(f"Removed saved file: {arg}")
        else:
            self.console.print(f"File {escape(arg)} removed.")
        return None

    def cmd_quit(self, arg: str = "") -> Optional[str]:
        """Offer to save, then exit the shell.

        Usage: quit
        """
        if self.session.verbose:
            self._note("Preparing to exit.")
        if self.confirm_on_exit:
            self.ask_to_save()
        if self.session.verbose:
            self._note("Exiting program.")
        self.running = False
        return None

    def ask_to_save(self) -> bool:
        """Ask whether to save before exiting and save if requested.

        Returns:
            True if the tree was saved
        """
        while True:
            try:
                response = self.ask("Would you like to save the file system before exiting? (y/n): ")
            except (EOFError, KeyboardInterrupt):
                self._error("Invalid input. Exiting without saving.")
                return False

            response = response.strip()
            if not response:
                self._error("Empty input. Exiting without saving.")
                return False

            choice = response[0].lower()
            if choice == "n":
                if self.session.verbose:
                    self._note("Exiting without saving.")
                return False
            if choice != "y":
                self._error("Invalid input. Please enter 'y' or 'n'.")
                continue

            question = "Enter filename to save: "
            if self.default_save_path:
                question = f"Enter filename to save [{self.default_save_path}]: "
            try:
                filename = self.ask(question).strip() or (self.default_save_path or "")
            except (EOFError, KeyboardInterrupt):
                self._error("Invalid filename. Exiting without saving.")
                return False
            if not filename:
                self._error("Empty filename. Exiting without saving.")
                return False

            try:
                self.cmd_save(filename)
            except TreeError as e:
                self._failure(e)
                return False
            return True

    def ask(self, message: str) -> str:
        """Ask the user a question and return the raw answer."""
        if self._ask is not None:
            return self._ask(message)
        return self.prompt_session.prompt(message)

    def cleanup(self):
        """Release the tree."""
        self.session.close()

    # Output helpers

    def _plain(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def _note(self, text: str) -> None:
        self.console.print(f"[dim]{escape(text)}[/dim]")

    def _error(self, text: str) -> None:
        self.console.print(f"[red]Error: {escape(text)}[/red]")

    def _failure(self, error: TreeError) -> None:
        if isinstance(error, BARE_ERRORS):
            self.console.print(f"[red]{escape(str(error))}[/red]")
        else:
            self._error(str(error))
