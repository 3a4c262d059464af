"""
FILE: tickoff/cli/commands/tasks.py
PURPOSE: Task management commands (add, ls, done, undone, edit, rm)
"""

from typing import List

import typer
from rich.markup import escape

from ..main import app, console, error_console, open_app
from ...core.controller import (
    BeginEdit,
    Delete,
    DescriptionChanged,
    FinishEdit,
    TaskEvent,
    ToggleCompleted,
)
from ...core.exceptions import InvalidInputError, TickoffError
from ...core.models import Task
from ...formatting import TaskFormatter
from ...i18n import get_localizer
from ...runtime import TodoApp


def _resolve(todo_app: TodoApp, refs: List[str]) -> List[Task]:
    """Resolve every ref (row numbers, id prefixes, "1,3") before changing anything."""
    tasks: List[Task] = []
    for arg in refs:
        for ref in arg.split(","):
            if not ref.strip():
                continue
            task = todo_app.state.resolve_task(ref)
            if all(existing.id != task.id for existing in tasks):
                tasks.append(task)
    if not tasks:
        raise InvalidInputError("Task number required")
    return tasks


@app.command()
def add(
    ctx: typer.Context,
    words: List[str] = typer.Argument(..., help="Task description"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    Create a new task.

    Example:
        tickoff add Buy milk
        tickoff add "Call the plumber"
    """
    description = " ".join(words).strip()
    try:
        if not description:
            raise InvalidInputError("Task description cannot be empty")

        with open_app(ctx) as todo_app:
            task = todo_app.add_task(description)

        if json_output:
            typer.echo(task.to_json())
        elif raw:
            typer.echo(f"{task.id}: {task.description}")
        else:
            console.print(f"[green]✓ Created task:[/green] {escape(task.description)} [dim]({task.id[:8]})[/dim]")

    except TickoffError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def ls(
    ctx: typer.Context,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    raw: bool = typer.Option(False, "--raw", help="Plain text output (no colors)"),
):
    """
    List tasks under the saved filter (see 'tickoff filter').

    Example:
        tickoff ls
        tickoff ls --json
    """
    try:
        with open_app(ctx) as todo_app:
            state = todo_app.state
        formatter = TaskFormatter(get_localizer())

        if json_output:
            typer.echo(formatter.to_json(state))
        elif raw:
            for line in formatter.raw_lines(state):
                typer.echo(line)
        else:
            if state.visible_tasks():
                console.print(formatter.create_table(state))
            else:
                console.print(f"[dim]{escape(formatter.empty_message(state))}[/dim]")
            console.print(formatter.controls_line(state))

    except TickoffError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _set_completed(ctx: typer.Context, refs: List[str], completed: bool) -> None:
    try:
        with open_app(ctx) as todo_app:
            tasks = _resolve(todo_app, refs)
            for task in tasks:
                todo_app.dispatch(TaskEvent(task.id, ToggleCompleted(completed)))

        mark = "[green]✓ Completed[/green]" if completed else "[yellow]○ Reopened[/yellow]"
        for task in tasks:
            console.print(f"{mark} {escape(task.description)}")

    except TickoffError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def done(
    ctx: typer.Context,
    refs: List[str] = typer.Argument(..., help="Row number(s) from 'ls' or id prefix(es)"),
):
    """
    Mark task(s) completed.

    Example:
        tickoff done 2
        tickoff done 1,3
    """
    _set_completed(ctx, refs, True)


@app.command()
def undone(
    ctx: typer.Context,
    refs: List[str] = typer.Argument(..., help="Row number(s) from 'ls' or id prefix(es)"),
):
    """Mark task(s) not completed."""
    _set_completed(ctx, refs, False)


@app.command()
def edit(
    ctx: typer.Context,
    ref: str = typer.Argument(..., help="Row number from 'ls' or id prefix"),
    words: List[str] = typer.Argument(..., help="New description"),
):
    """
    Change a task's description.

    Example:
        tickoff edit 2 Buy oat milk
    """
    description = " ".join(words).strip()
    try:
        if not description:
            raise InvalidInputError("Task description cannot be empty")

        with open_app(ctx) as todo_app:
            task = todo_app.state.resolve_task(ref)
            todo_app.dispatch(TaskEvent(task.id, BeginEdit()))
            todo_app.dispatch(TaskEvent(task.id, DescriptionChanged(description)))
            todo_app.dispatch(TaskEvent(task.id, FinishEdit()))

        console.print(f"[green]✓ Updated:[/green] {escape(description)}")

    except TickoffError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def rm(
    ctx: typer.Context,
    refs: List[str] = typer.Argument(..., help="Row number(s) from 'ls' or id prefix(es)"),
):
    """
    Delete task(s).

    Example:
        tickoff rm 2
        tickoff rm 1,3
    """
    try:
        with open_app(ctx) as todo_app:
            tasks = _resolve(todo_app, refs)
            for task in tasks:
                todo_app.dispatch(TaskEvent(task.id, Delete()))

        for task in tasks:
            console.print(f"[red]✗ Deleted:[/red] {escape(task.description)}")

    except TickoffError as e:
        error_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
