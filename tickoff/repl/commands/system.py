"""
FILE: tickoff/repl/commands/system.py
PURPOSE: View and session command handlers for REPL (filter, lang, status, help, clear)
"""

from rich.markup import escape

from ..main import console, repl_context
from ..parser import ParseResult
from ...core.controller import FilterChanged, LanguageChanged
from ...core.models import Filter
from ...formatting import window_title
from ...i18n import Language


def handle_filter_command(result: ParseResult) -> None:
    """
    Handle 'filter' command - choose which tasks are listed.

    Usage:
        filter              # Show current filter
        filter active       # Only tasks still to do
        filter completed    # Only finished tasks
        filter all          # Everything
    """
    app = repl_context.app
    localizer = repl_context.localizer

    if not result.args:
        label = localizer.translate(f"filter-{app.state.filter.name.lower()}", app.state.language)
        console.print(f"Current filter: [cyan]{escape(label)}[/cyan]")
        return

    try:
        new_filter = Filter.parse(result.args[0])
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid filter '{escape(result.args[0])}'")
        console.print("[dim]Valid filters: all, active, completed[/dim]")
        return

    app.dispatch(FilterChanged(new_filter))
    label = localizer.translate(f"filter-{new_filter.name.lower()}", app.state.language)
    console.print(f"✓ Showing [cyan]{escape(label)}[/cyan] tasks")


def handle_lang_command(result: ParseResult) -> None:
    """
    Handle 'lang' command - switch display language.

    Usage:
        lang            # Toggle between English and Korean
        lang ko         # Korean
        lang en         # English
    """
    app = repl_context.app

    if result.args:
        try:
            language = Language.parse(result.args[0])
        except ValueError:
            console.print(f"[red]Error:[/red] Unsupported language '{escape(result.args[0])}'")
            console.print("[dim]Valid languages: en, ko[/dim]")
            return
    else:
        language = app.state.language.other()

    app.dispatch(LanguageChanged(language))
    console.print(f"✓ {escape(window_title(app.state, repl_context.localizer))} [dim]({language.value})[/dim]")


def handle_status_command(result: ParseResult) -> None:
    """Handle 'status' command - show where tasks are stored and whether they're saved."""
    app = repl_context.app
    app.pump()
    state = app.state

    console.print(f"Data file: [cyan]{escape(str(app.store.path))}[/cyan]")
    if state.saving:
        console.print("Saving: [yellow]in progress[/yellow]")
    elif state.dirty:
        console.print("Saving: [yellow]unsaved changes[/yellow]")
    else:
        console.print("Saving: [green]up to date[/green]")

    if app.last_save_error is not None:
        console.print(f"[red]Last save failed:[/red] {escape(str(app.last_save_error))}")
    if app.last_load_error is not None:
        console.print(f"[dim]Started empty: {escape(str(app.last_load_error))}[/dim]")


def handle_help_command(result: ParseResult) -> None:
    """Handle 'help' command - show available commands."""
    console.print("\n[bold cyan]tickoff REPL[/bold cyan] - Available Commands\n")

    commands = [
        ("add <text>", "Create a new task"),
        ("draft [text]", "Show or set the new-task draft (--clear to empty it)"),
        ("submit", "Turn the draft into a task"),
        ("ls [--json]", "List tasks under the current filter"),
        ("done <n>[,<n>]", "Mark task(s) completed"),
        ("undone <n>[,<n>]", "Mark task(s) not completed"),
        ("edit <n> [text]", "Change a task's description"),
        ("rm <n>[,<n>]", "Delete task(s)"),
        ("filter [name]", "all, active or completed"),
        ("lang [en|ko]", "Switch display language"),
        ("status", "Show data file and save status"),
        ("clear", "Clear the screen"),
        ("help", "Show this help message"),
        ("exit, quit", "Exit REPL (or Ctrl+D)"),
    ]

    for cmd, desc in commands:
        console.print(f"  [green]{escape(cmd):18}[/green] {desc}")

    console.print("\n[dim]<n> is the row number shown by 'ls', or the start of a task id[/dim]")


def handle_clear_command(result: ParseResult) -> None:
    """Handle 'clear' command - clear the screen."""
    console.clear()
