"""
FILE: tickoff/core/state.py
PURPOSE: In-memory application state and its autosave bookkeeping
EXPORTS:
  - Phase (enum)
  - AppState (dataclass)
DEPENDENCIES:
  - dataclasses (stdlib)
  - tickoff.core.models (Task, Filter, SavedSnapshot)
  - tickoff.core.exceptions (TaskNotFoundError, InvalidInputError)
  - tickoff.i18n (Language)
NOTES:
  - AppState is owned by one runtime; the controller returns modified copies
  - dirty: there are changes the last save didn't include
  - saving: a save is in flight (at most one at a time)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..i18n import Language, default_language
from .exceptions import InvalidInputError, TaskNotFoundError
from .models import Filter, SavedSnapshot, Task


class Phase(Enum):
    LOADING = "loading"
    LOADED = "loaded"


@dataclass
class AppState:
    """Filter, task list, new-task draft and autosave flags."""

    phase: Phase = Phase.LOADING
    input_value: str = ""
    filter: Filter = Filter.ALL
    tasks: List[Task] = field(default_factory=list)
    dirty: bool = False
    saving: bool = False
    language: Language = field(default_factory=default_language)

    @property
    def loaded(self) -> bool:
        return self.phase is Phase.LOADED

    @classmethod
    def from_snapshot(cls, snapshot: SavedSnapshot, language: Optional[Language] = None) -> "AppState":
        """Loaded state built from a snapshot (edit modes reset, flags clear)."""
        tasks = [
            Task(description=t.description, completed=t.completed, id=t.id)
            for t in snapshot.tasks
        ]
        state = cls(
            phase=Phase.LOADED,
            input_value=snapshot.input_value,
            filter=snapshot.filter,
            tasks=tasks,
        )
        if language is not None:
            state.language = language
        return state

    def snapshot(self) -> SavedSnapshot:
        """Persisted projection of the current state (copies, never aliases)."""
        return SavedSnapshot(
            input_value=self.input_value,
            filter=self.filter,
            tasks=[
                Task(description=t.description, completed=t.completed, id=t.id)
                for t in self.tasks
            ],
        )

    def find_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def resolve_task(self, ref: str) -> Task:
        """
        Find a task by the row number shown in listings or by an id prefix.

        Args:
            ref: "3" (third visible task under the current filter) or a
                prefix of the task id ("4f1c")

        Raises:
            TaskNotFoundError: If nothing matches
            InvalidInputError: If an id prefix matches more than one task
        """
        ref = ref.strip()
        if ref.isdigit():
            visible = self.visible_tasks()
            index = int(ref) - 1
            if 0 <= index < len(visible):
                return visible[index]
            raise TaskNotFoundError(ref)

        matches = [t for t in self.tasks if ref and t.id.startswith(ref.lower())]
        if not matches:
            raise TaskNotFoundError(ref)
        if len(matches) > 1:
            raise InvalidInputError(f"Task id prefix '{ref}' is ambiguous ({len(matches)} matches)")
        return matches[0]

    def remove_task(self, task_id: str) -> bool:
        """Remove the task with this id. Returns False if there was none."""
        for index, task in enumerate(self.tasks):
            if task.id == task_id:
                del self.tasks[index]
                return True
        return False

    def visible_tasks(self) -> List[Task]:
        """Tasks selected by the current filter, in display order."""
        return [t for t in self.tasks if self.filter.matches(t)]

    def tasks_left(self) -> int:
        return sum(1 for t in self.tasks if not t.completed)
