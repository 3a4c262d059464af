"""
FILE: tickoff/cli/commands/system.py
PURPOSE: View and system commands (filter, path, version, repl)
"""

from typing import Optional

import typer

from ..main import app, console, error_console, open_app
from ... import __version__
from ...core.controller import FilterChanged
from ...core.exceptions import TickoffError
from ...core.models import Filter
from ...core.persistence import store_path
from ...formatting import FILTER_LABEL_KEYS
from ...i18n import get_localizer


@app.command()
def filter(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="all, active or completed"),
):
    """
    Show or change which tasks 'ls' lists. The choice is saved.

    Example:
        tickoff filter
        tickoff filter active
    """
    try:
        chosen = None
        if name is not None:
            try:
                chosen = Filter.parse(name)
            except ValueError as e:
                raise typer.BadParameter(str(e))

        with open_app(ctx) as todo_app:
            if chosen is not None and chosen is not todo_app.state.filter:
                todo_app.dispatch(FilterChanged(chosen))
            state = todo_app.state

        label = get_localizer().translate(FILTER_LABEL_KEYS[state.filter], state.language)
        console.print(f"Filter: [bold]{label}[/bold]")

    except TickoffError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def path(ctx: typer.Context):
    """Print the location of the data file."""
    settings = ctx.obj
    typer.echo(str(store_path(settings.backend, settings.data_dir)))


@app.command()
def version():
    """Show version information."""
    console.print(f"tickoff v{__version__}")


@app.command()
def repl(ctx: typer.Context):
    """
    Launch interactive REPL mode.

    Example:
        tickoff repl
    """
    from ...repl.main import run_repl
    try:
        run_repl(ctx.obj)
    except TickoffError as e:
        error_console.print(f"[red]Error starting REPL:[/red] {e}")
        raise typer.Exit(1)
