"""
FILE: tickoff/cli/main.py
PURPOSE: Typer-based CLI for one-shot task commands
EXPORTS:
  - app (Typer application)
  - main() (entry point)
  - open_app(ctx) (context manager: loaded TodoApp, flushed on exit)
  - add() / ls() / done() / undone() / edit() / rm() - Task commands
  - filter() / path() / version() / repl() - View and system commands
DEPENDENCIES:
  - typer (CLI framework)
  - rich (formatted output)
  - tickoff.config (load_settings)
  - tickoff.runtime (create_app)
  - tickoff.core.exceptions (error handling)
  - tickoff.repl (interactive mode)
NOTES:
  - Running with no command launches the REPL
  - Every command loads the snapshot, dispatches controller events and
    waits for the autosave to land before exiting
  - Error messages go to stderr
  - Exit codes: 0=success, 1=error
"""

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

# Fix Windows console encoding for Unicode characters
if sys.platform == "win32":
    import io
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

import typer
from rich.console import Console

from ..config import load_settings
from ..core.exceptions import LoadErrorKind, TickoffError
from ..i18n import init_localization
from ..logging_setup import setup_logging
from ..runtime import TodoApp, create_app

# Typer app setup
app = typer.Typer(
    name="tickoff",
    help="Terminal to-do list that saves as you go",
    add_completion=False,
)

# Rich console for formatted output
console = Console()
error_console = Console(stderr=True)


@app.callback(invoke_without_command=True)
def default_command(
    ctx: typer.Context,
    backend: Optional[str] = typer.Option(
        None, "--backend", "-b", help="Storage backend: json or sqlite (env: TICKOFF_BACKEND)"
    ),
    data_dir: Optional[Path] = typer.Option(
        None, "--data-dir", help="Directory holding todos.json / todos.db (env: TICKOFF_DATA_DIR)"
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Console log level (env: TICKOFF_LOG_LEVEL)"
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="No completion sound"),
):
    """
    Load settings, then run the subcommand - or the REPL if there is none.
    """
    try:
        settings = load_settings(
            backend=backend,
            data_dir=data_dir,
            log_level=log_level,
            sound=False if quiet else None,
        )
    except TickoffError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    setup_logging(settings.log_level)
    init_localization()
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        from ..repl.main import run_repl
        try:
            run_repl(settings)
        except TickoffError as e:
            error_console.print(f"[red]Error starting REPL:[/red] {e}")
            raise typer.Exit(1)


@contextmanager
def open_app(ctx: typer.Context) -> Iterator[TodoApp]:
    """
    Loaded TodoApp for one command.

    On exit waits for pending saves, then fails the command (exit 1) if the
    last save didn't make it to disk.
    """
    settings = ctx.obj
    todo_app = create_app(settings)
    todo_app.start()
    todo_app.wait_loaded()

    error = todo_app.last_load_error
    if error is not None and error.kind is not LoadErrorKind.NOT_FOUND:
        error_console.print(f"[yellow]Warning:[/yellow] {error} - starting with an empty list")

    try:
        yield todo_app
    finally:
        todo_app.close()

    if todo_app.last_save_error is not None:
        error_console.print(f"[red]Error:[/red] {todo_app.last_save_error}")
        raise typer.Exit(1)


# Import command modules to register commands with app
# Commands are decorated with @app.command() in their modules
from .commands import (
    # Task commands
    add,
    ls,
    done,
    undone,
    edit,
    rm,
    # System commands
    filter,
    path,
    version,
    repl,
)


def main():
    """Main entry point for CLI."""
    app()
