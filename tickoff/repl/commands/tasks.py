"""
FILE: tickoff/repl/commands/tasks.py
PURPOSE: Task command handlers for REPL (add, draft, submit, ls, done, undone, edit, rm)
"""

from typing import List

from rich.markup import escape

from ..main import console, repl_context, ask
from ..parser import ParseResult
from ...core.controller import (
    BeginEdit,
    Delete,
    DescriptionChanged,
    DraftChanged,
    FinishEdit,
    SubmitNewTask,
    TaskEvent,
    ToggleCompleted,
)
from ...core.exceptions import InvalidInputError
from ...core.models import Task


def resolve_refs(arg: str) -> List[Task]:
    """
    Resolve "2", "2,4" or "4f1c" to tasks.

    All refs are resolved before anything changes, so row numbers keep
    meaning what `ls` showed even if the first change hides a row.

    Raises:
        TaskNotFoundError, InvalidInputError: From AppState.resolve_task
    """
    state = repl_context.app.state
    refs = [ref for ref in arg.split(",") if ref.strip()]
    if not refs:
        raise InvalidInputError("Task number required")
    tasks = []
    for ref in refs:
        task = state.resolve_task(ref)
        if all(existing.id != task.id for existing in tasks):
            tasks.append(task)
    return tasks


def handle_add_command(result: ParseResult) -> None:
    """
    Handle 'add' command - create new task.

    Usage:
        add Buy groceries
        add "Task with spaces"
    """
    text = result.text()
    if not text:
        console.print("[red]Error:[/red] Task description required")
        console.print("[dim]Usage: add <description>[/dim]")
        return

    task = repl_context.app.add_task(text)
    number = _row_number(task)
    label = f"#{number}" if number else task.id[:8]
    console.print(f"[green]✓ Created task [bold]{label}[/bold]:[/green] {escape(task.description)}")


def handle_draft_command(result: ParseResult) -> None:
    """
    Handle 'draft' command - show or change the new-task draft.

    Usage:
        draft                 # Show the draft
        draft Call the bank   # Replace the draft
        draft --clear         # Empty the draft
    """
    app = repl_context.app
    if result.flags.get("clear"):
        app.dispatch(DraftChanged(""))
        console.print("✓ Draft cleared")
        return

    text = result.text()
    if not text:
        if app.state.input_value:
            console.print(f"Draft: [cyan]{escape(app.state.input_value)}[/cyan]")
        else:
            placeholder = repl_context.localizer.translate("add-task-placeholder", app.state.language)
            console.print(f"[dim]{escape(placeholder)}[/dim]")
        return

    app.dispatch(DraftChanged(text))
    console.print(f"✓ Draft: [cyan]{escape(text)}[/cyan] [dim](type 'submit' to add it)[/dim]")


def handle_submit_command(result: ParseResult) -> None:
    """Handle 'submit' command - turn the draft into a task."""
    app = repl_context.app
    if not app.state.input_value:
        console.print("[dim]Draft is empty - nothing to submit[/dim]")
        return

    app.dispatch(SubmitNewTask())
    task = app.state.tasks[-1]
    console.print(f"[green]✓ Created task:[/green] {escape(task.description)}")


def handle_ls_command(result: ParseResult) -> None:
    """
    Handle 'ls' command - list tasks under the current filter.

    Usage:
        ls
        ls --json
    """
    state = repl_context.app.state
    formatter = repl_context.formatter

    if result.flags.get("json"):
        console.print_json(formatter.to_json(state))
        return

    if state.visible_tasks():
        console.print(formatter.create_table(state))
    else:
        console.print(f"[dim]{escape(formatter.empty_message(state))}[/dim]")
    console.print(formatter.controls_line(state))


def _set_completed(result: ParseResult, completed: bool) -> None:
    if not result.args:
        verb = "done" if completed else "undone"
        console.print("[red]Error:[/red] Task number required")
        console.print(f"[dim]Usage: {verb} <number>[,<number>...][/dim]")
        return

    tasks = resolve_refs(result.args[0])
    for task in tasks:
        repl_context.app.dispatch(TaskEvent(task.id, ToggleCompleted(completed)))

    mark = "[green]✓ Completed[/green]" if completed else "[yellow]○ Reopened[/yellow]"
    for task in tasks:
        console.print(f"{mark} {escape(task.description)}")


def handle_done_command(result: ParseResult) -> None:
    """
    Handle 'done' command - mark task(s) completed.

    Usage:
        done 2
        done 1,3
    """
    _set_completed(result, True)


def handle_undone_command(result: ParseResult) -> None:
    """Handle 'undone' command - mark task(s) not completed."""
    _set_completed(result, False)


def handle_edit_command(result: ParseResult) -> None:
    """
    Handle 'edit' command - change a task's description.

    Usage:
        edit 2 New description     # Replace directly
        edit 2                     # Edit in place (pre-filled prompt)

    Notes:
        - An empty description can't be committed; the task stays in
          editing mode until a non-empty one is given
        - Ctrl+C while editing puts the old description back
    """
    if not result.args:
        console.print("[red]Error:[/red] Task number required")
        console.print("[dim]Usage: edit <number> [description][/dim]")
        return

    app = repl_context.app
    task = app.state.resolve_task(result.args[0])
    original = task.description

    repl_context.focus_task_id = None
    app.dispatch(TaskEvent(task.id, BeginEdit()))

    if len(result.args) > 1:
        _commit_description(task.id, " ".join(result.args[1:]))
    elif repl_context.focus_task_id == task.id:
        _edit_interactively(task.id, original)

    edited = app.state.find_task(task.id)
    if edited is None:
        return
    if edited.editing:
        console.print("[yellow]Description can't be empty - task is still being edited[/yellow]")
        console.print(f"[dim]Use 'edit {result.args[0]} <description>' to finish[/dim]")
    else:
        console.print(f"[green]✓ Updated:[/green] {escape(edited.description)}")


def _commit_description(task_id: str, text: str) -> None:
    app = repl_context.app
    app.dispatch(TaskEvent(task_id, DescriptionChanged(text)))
    app.dispatch(TaskEvent(task_id, FinishEdit()))


def _edit_interactively(task_id: str, original: str) -> None:
    """Prompt pre-filled with the description until a non-empty one is entered."""
    app = repl_context.app
    repl_context.focus_task_id = None
    message = repl_context.localizer.translate("describe-task-placeholder", app.state.language)

    while True:
        current = app.state.find_task(task_id)
        if current is None or not current.editing:
            return
        try:
            text = ask(f"{message} ", default=current.description)
        except (KeyboardInterrupt, EOFError):
            _commit_description(task_id, original)
            console.print("[dim]Edit cancelled[/dim]")
            return

        _commit_description(task_id, text.strip())
        if app.state.find_task(task_id).editing:
            console.print("[yellow]Description can't be empty[/yellow]")


def handle_rm_command(result: ParseResult) -> None:
    """
    Handle 'rm' command - delete task(s).

    Usage:
        rm 2
        rm 1,3
    """
    if not result.args:
        console.print("[red]Error:[/red] Task number required")
        console.print("[dim]Usage: rm <number>[,<number>...][/dim]")
        return

    tasks = resolve_refs(result.args[0])
    for task in tasks:
        repl_context.app.dispatch(TaskEvent(task.id, Delete()))
        console.print(f"[red]✗ Deleted:[/red] {escape(task.description)}")


def _row_number(task: Task) -> int:
    """Row number of task under the current filter (0 if hidden)."""
    for number, visible in enumerate(repl_context.app.state.visible_tasks(), start=1):
        if visible.id == task.id:
            return number
    return 0
