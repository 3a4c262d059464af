"""
FILE: tickoff/formatting.py
PURPOSE: Shared formatting utilities for CLI and REPL output
EXPORTS:
  - TaskFormatter: Class for rendering AppState as tables, text and JSON
  - window_title(state, localizer) -> str
DEPENDENCIES:
  - rich (for table formatting)
  - json (for JSON serialization)
  - tickoff.core.state (AppState)
  - tickoff.i18n (Localizer)
NOTES:
  - Row numbers are 1-based positions under the current filter; they are
    what `done 2` / `rm 2` refer to
  - The title gets a "..." suffix while there are unsaved changes
  - Used by both CLI and REPL
"""

import json
from typing import List

from rich.table import Table
from rich.text import Text

from .core.constants import MODIFIED_SUFFIX
from .core.models import Filter, Task
from .core.state import AppState
from .i18n import Localizer


EMPTY_MESSAGE_KEYS = {
    Filter.ALL: "empty-no-tasks",
    Filter.ACTIVE: "empty-all-done",
    Filter.COMPLETED: "empty-no-completed",
}

FILTER_LABEL_KEYS = {
    Filter.ALL: "filter-all",
    Filter.ACTIVE: "filter-active",
    Filter.COMPLETED: "filter-completed",
}


def window_title(state: AppState, localizer: Localizer) -> str:
    """App title, with the modified indicator while dirty."""
    title = localizer.translate("app-title", state.language)
    return f"{title}{MODIFIED_SUFFIX}" if state.dirty else title


class TaskFormatter:
    """Centralized task display formatting."""

    def __init__(self, localizer: Localizer):
        self.localizer = localizer

    def create_table(self, state: AppState) -> Table:
        """
        Create Rich table for the tasks visible under the current filter.

        Returns:
            Rich Table object ready for display
        """
        table = Table(
            title=window_title(state, self.localizer),
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("#", style="cyan", width=4, no_wrap=True)
        table.add_column("", width=2, no_wrap=True)
        table.add_column("Task", style="white")
        table.add_column("ID", style="dim", width=8, no_wrap=True)

        for number, task in enumerate(state.visible_tasks(), start=1):
            table.add_row(
                str(number),
                "[green]✓[/green]" if task.completed else "[yellow]○[/yellow]",
                self._description_cell(task),
                task.id[:8],
            )

        return table

    @staticmethod
    def _description_cell(task: Task) -> Text:
        if task.editing:
            text = Text(task.description or "", style="italic")
            text.append(" (editing)", style="yellow")
            return text
        if task.completed:
            return Text(task.description, style="strike dim")
        return Text(task.description)

    def empty_message(self, state: AppState) -> str:
        """Placeholder text shown instead of an empty table."""
        return self.localizer.translate(EMPTY_MESSAGE_KEYS[state.filter], state.language)

    def controls_line(self, state: AppState) -> str:
        """'3 tasks left   [All] Active Completed' with the active filter highlighted."""
        labels = []
        for item in Filter:
            label = self.localizer.translate(FILTER_LABEL_KEYS[item], state.language)
            labels.append(f"[bold reverse] {label} [/bold reverse]" if item is state.filter else f" {label} ")
        left = self.localizer.tasks_left(state.tasks_left(), state.language)
        return f"[dim]{left}[/dim]   " + "".join(labels)

    @staticmethod
    def raw_lines(state: AppState) -> List[str]:
        """Plain text, one visible task per line: '2: [x] Buy milk'."""
        return [
            f"{number}: [{'x' if task.completed else ' '}] {task.description}"
            for number, task in enumerate(state.visible_tasks(), start=1)
        ]

    @staticmethod
    def to_json(state: AppState) -> str:
        """Visible tasks as a JSON array (for scripting)."""
        return json.dumps(
            [task.to_dict() for task in state.visible_tasks()],
            indent=2,
            ensure_ascii=False,
        )
