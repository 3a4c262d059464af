"""
FILE: tickoff/repl/main.py
PURPOSE: Interactive REPL for task management with prompt-toolkit
EXPORTS:
  - REPLContext (dataclass)
  - repl_context (session-wide context)
  - run_repl() - Main REPL loop
DEPENDENCIES:
  - prompt_toolkit (REPL interface, history, completion)
  - rich (formatted output)
  - tickoff.runtime (TodoApp, create_app)
  - tickoff.config (load_settings)
  - tickoff.i18n (init_localization)
  - tickoff.repl.parser (command parsing)
  - tickoff.repl.completer (autocomplete)
NOTES:
  - The REPL is the presentation layer: it turns input into controller
    events and renders AppState, it never edits state directly
  - Completed saves are applied (app.pump()) before every prompt
  - Bottom toolbar shows the title ("..." while unsaved) and tasks left
  - Ctrl+D or "exit"/"quit" to exit; pending changes are flushed on exit
"""

import logging
import sys
from dataclasses import dataclass
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import InMemoryHistory
from rich.console import Console

from ..config import Settings, load_settings
from ..core.controller import Command, FocusNewTaskInput, FocusTaskEditor
from ..core.exceptions import TickoffError
from ..formatting import TaskFormatter, window_title
from ..i18n import Localizer, init_localization
from ..runtime import TodoApp, create_app
from .completer import create_completer
from .parser import ParseResult, parse_command

logger = logging.getLogger(__name__)

# Rich console for formatted output
console = Console()

# --- REPL Context (Session State) ---

@dataclass
class REPLContext:
    """
    Everything a command handler needs for the current session.

    Attributes:
        app: Runtime owning the AppState
        localizer: Display string lookup
        session: prompt_toolkit session (None in simple input mode)
        focus_task_id: Task whose editor the controller asked to focus
        focus_new_task: Controller asked to focus the new-task input
    """
    app: Optional[TodoApp] = None
    localizer: Optional[Localizer] = None
    session: Optional[PromptSession] = None
    focus_task_id: Optional[str] = None
    focus_new_task: bool = False

    @property
    def formatter(self) -> TaskFormatter:
        return TaskFormatter(self.localizer)

    def handle_command(self, command: Command) -> None:
        """on_command callback for the runtime: remember what to focus."""
        if isinstance(command, FocusTaskEditor):
            self.focus_task_id = command.task_id
        elif isinstance(command, FocusNewTaskInput):
            self.focus_new_task = True

# Global REPL context (persists during session, resets on restart)
repl_context = REPLContext()

def ask(message: str, default: str = "") -> str:
    """
    Read one line, pre-filled with default when prompt_toolkit is available.

    Raises:
        EOFError, KeyboardInterrupt: Passed through to the caller
    """
    if repl_context.session is not None:
        return repl_context.session.prompt(message, default=default)
    return input(message)

def get_prompt_text() -> str:
    state = repl_context.app.state
    placeholder = repl_context.localizer.translate("add-task-placeholder", state.language)
    if state.input_value:
        return f"tickoff [draft: {state.input_value}]> "
    return f"tickoff ({placeholder})> "

def format_prompt() -> HTML:
    """Prompt with the pending draft (if any) highlighted."""
    state = repl_context.app.state
    if state.input_value:
        draft = state.input_value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        return HTML(f"<b>tickoff</b> [<cyan>{draft}</cyan>]<b>&gt; </b>")
    return HTML("<b>tickoff&gt; </b>")

def get_bottom_toolbar() -> HTML:
    """Title (with the unsaved-changes suffix) and tasks left."""
    try:
        state = repl_context.app.state
        title = window_title(state, repl_context.localizer)
        left = repl_context.localizer.tasks_left(state.tasks_left(), state.language)
        filter_label = repl_context.localizer.translate(
            f"filter-{state.filter.name.lower()}", state.language
        )
        text = f" {title} | {left} | {filter_label} "
        text = text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        return HTML(f"<style bg='#444444' fg='#ffffff'>{text}</style>")
    except Exception:
        return HTML("<style bg='#444444' fg='#ffffff'> tickoff </style>")

# Import command handlers from command modules
from .commands import (
    handle_add_command,
    handle_draft_command,
    handle_submit_command,
    handle_ls_command,
    handle_done_command,
    handle_undone_command,
    handle_edit_command,
    handle_rm_command,
    handle_filter_command,
    handle_lang_command,
    handle_status_command,
    handle_help_command,
    handle_clear_command,
)

def execute_command(result: ParseResult) -> bool:
    """
    Execute a parsed command.

    Returns:
        True to continue REPL loop, False to exit
    """
    command = result.command.lower()

    if command in ("exit", "quit"):
        console.print("[dim]Goodbye![/dim]")
        return False

    if not command:
        return True

    handlers = {
        "add": handle_add_command,
        "draft": handle_draft_command,
        "submit": handle_submit_command,
        "ls": handle_ls_command,
        "done": handle_done_command,
        "undone": handle_undone_command,
        "edit": handle_edit_command,
        "rm": handle_rm_command,
        "filter": handle_filter_command,
        "lang": handle_lang_command,
        "status": handle_status_command,
        "help": handle_help_command,
        "clear": handle_clear_command,
    }

    handler = handlers.get(command)
    if handler:
        try:
            handler(result)
        except TickoffError as e:
            console.print(f"[red]Error:[/red] {e}")
        console.print()
    else:
        console.print(f"[red]Unknown command:[/red] {command}")
        console.print("[dim]Type 'help' for available commands[/dim]")
        console.print()

    return True

def run_repl(settings: Optional[Settings] = None) -> None:
    """
    Main REPL loop.

    Loads the task list, then reads commands until:
    - Ctrl+D (EOFError)
    - "exit" or "quit" commands
    Ctrl+C cancels the current line only.
    """
    settings = settings or load_settings()
    repl_context.localizer = init_localization()
    repl_context.app = create_app(settings, on_command=repl_context.handle_command)
    app = repl_context.app

    has_tty = sys.stdin.isatty() and sys.stdout.isatty()
    if has_tty:
        try:
            repl_context.session = PromptSession(
                history=InMemoryHistory(),
                completer=create_completer(lambda: app.state),
                complete_while_typing=True,
                bottom_toolbar=get_bottom_toolbar,
            )
        except Exception as e:
            console.print(f"[yellow]Warning:[/yellow] Running in simple input mode: {e}")
            repl_context.session = None

    app.start()
    with console.status(repl_context.localizer.translate("loading", app.state.language)):
        app.wait_loaded()

    if app.last_load_error is not None:
        logger.info("Starting empty: %s", app.last_load_error)

    console.print("[bold cyan]tickoff REPL[/bold cyan] - Type 'help' for commands, 'exit' to quit")
    if repl_context.session is None:
        console.print("[dim](Running in simple mode - no autocomplete)[/dim]")
    console.print()

    # Loading finished: show the list once, then hand over to the prompt
    if repl_context.focus_new_task:
        repl_context.focus_new_task = False
        handle_ls_command(ParseResult(command="ls"))
        console.print()

    try:
        while True:
            try:
                app.pump()
                if repl_context.session is not None:
                    user_input = repl_context.session.prompt(format_prompt())
                else:
                    user_input = input(get_prompt_text())

                if not execute_command(parse_command(user_input)):
                    break

            except KeyboardInterrupt:
                console.print("[dim]^C (Press Ctrl+D or type 'exit' to quit)[/dim]")
                continue
            except EOFError:
                console.print()
                console.print("[dim]Goodbye![/dim]")
                break
    finally:
        app.close()
        if app.last_save_error is not None:
            console.print(f"[yellow]Warning:[/yellow] {app.last_save_error}")
