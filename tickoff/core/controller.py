"""
FILE: tickoff/core/controller.py
PURPOSE: Pure update loop: (AppState, Event) -> (AppState, [Command])
EXPORTS:
  - Events: DraftChanged, SubmitNewTask, FilterChanged, LanguageChanged,
    TaskEvent, LoadCompleted, SaveCompleted
  - Task actions: ToggleCompleted, BeginEdit, DescriptionChanged, FinishEdit, Delete
  - Commands: SaveSnapshot, NotifyTaskCompleted, FocusTaskEditor, FocusNewTaskInput
  - update(state, event) -> (AppState, List[Command])
  - autosave(state) -> (AppState, List[Command])
DEPENDENCIES:
  - copy, dataclasses (stdlib)
  - tickoff.core.state (AppState, Phase)
  - tickoff.core.models (Task, Filter, SavedSnapshot)
  - tickoff.core.exceptions (LoadError, SaveError)
NOTES:
  - update() never mutates the state it's given
  - Every user event marks the state dirty; Load/SaveCompleted never do
  - Autosave runs last on every transition: at most one save in flight,
    edits made meanwhile coalesce into the next save
  - No I/O happens here; the runtime executes the returned commands
"""

import copy
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from ..i18n import Language
from .exceptions import LoadError, SaveError
from .models import Filter, SavedSnapshot, Task
from .state import AppState, Phase


# --- Task actions ---


@dataclass(frozen=True)
class ToggleCompleted:
    completed: bool


@dataclass(frozen=True)
class BeginEdit:
    pass


@dataclass(frozen=True)
class DescriptionChanged:
    text: str


@dataclass(frozen=True)
class FinishEdit:
    pass


@dataclass(frozen=True)
class Delete:
    pass


TaskAction = Union[ToggleCompleted, BeginEdit, DescriptionChanged, FinishEdit, Delete]


# --- Events ---


@dataclass(frozen=True)
class DraftChanged:
    text: str


@dataclass(frozen=True)
class SubmitNewTask:
    pass


@dataclass(frozen=True)
class FilterChanged:
    filter: Filter


@dataclass(frozen=True)
class LanguageChanged:
    language: Language


@dataclass(frozen=True)
class TaskEvent:
    task_id: str
    action: TaskAction


@dataclass(frozen=True)
class LoadCompleted:
    """Result of the startup load: a snapshot, or the error that replaced it."""

    snapshot: Optional[SavedSnapshot] = None
    error: Optional[LoadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.snapshot is not None


@dataclass(frozen=True)
class SaveCompleted:
    error: Optional[SaveError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


Event = Union[
    DraftChanged,
    SubmitNewTask,
    FilterChanged,
    LanguageChanged,
    TaskEvent,
    LoadCompleted,
    SaveCompleted,
]


# --- Commands ---


@dataclass(frozen=True)
class SaveSnapshot:
    snapshot: SavedSnapshot


@dataclass(frozen=True)
class NotifyTaskCompleted:
    task_id: str


@dataclass(frozen=True)
class FocusTaskEditor:
    """Presentation should focus the task's edit field and select its text."""

    task_id: str


@dataclass(frozen=True)
class FocusNewTaskInput:
    pass


Command = Union[SaveSnapshot, NotifyTaskCompleted, FocusTaskEditor, FocusNewTaskInput]


def update(state: AppState, event: Event) -> Tuple[AppState, List[Command]]:
    """
    Apply one event to the state.

    Args:
        state: Current state (left untouched)
        event: Incoming event

    Returns:
        Tuple of (new state, follow-up commands)

    Raises:
        TypeError: If event isn't one of the known event types
    """
    if state.phase is Phase.LOADING:
        return _update_loading(state, event)

    # Late or duplicate load results are ignored once loaded
    if isinstance(event, LoadCompleted):
        return state, []

    # Submitting an empty draft does nothing at all
    if isinstance(event, SubmitNewTask) and not state.input_value:
        return state, []

    state = copy.deepcopy(state)
    commands: List[Command] = []
    saved = False

    if isinstance(event, DraftChanged):
        state.input_value = event.text
    elif isinstance(event, SubmitNewTask):
        state.tasks.append(Task.create(state.input_value))
        state.input_value = ""
    elif isinstance(event, FilterChanged):
        state.filter = event.filter
    elif isinstance(event, LanguageChanged):
        state.language = event.language
    elif isinstance(event, TaskEvent):
        commands.extend(_apply_task_event(state, event))
    elif isinstance(event, SaveCompleted):
        # Failures are not retried and don't re-arm dirty
        state.saving = False
        saved = True
    else:
        raise TypeError(f"Unknown event: {event!r}")

    if not saved:
        state.dirty = True

    commands.extend(_autosave_in_place(state))
    return state, commands


def autosave(state: AppState) -> Tuple[AppState, List[Command]]:
    """
    Run the autosave check on its own.

    If the state is dirty and no save is in flight, returns a copy with
    dirty cleared and saving set, plus one SaveSnapshot command. Otherwise
    returns the state unchanged and no commands.
    """
    if not (state.dirty and not state.saving):
        return state, []
    state = copy.deepcopy(state)
    return state, _autosave_in_place(state)


def _autosave_in_place(state: AppState) -> List[Command]:
    if state.dirty and not state.saving:
        state.dirty = False
        state.saving = True
        return [SaveSnapshot(state.snapshot())]
    return []


def _update_loading(state: AppState, event: Event) -> Tuple[AppState, List[Command]]:
    """Only the load result matters while loading; anything else is dropped."""
    if not isinstance(event, LoadCompleted):
        return state, []

    if event.ok:
        new_state = AppState.from_snapshot(event.snapshot, language=state.language)
    else:
        new_state = AppState(phase=Phase.LOADED, language=state.language)

    return new_state, [FocusNewTaskInput()]


def _apply_task_event(state: AppState, event: TaskEvent) -> List[Command]:
    action = event.action

    if isinstance(action, Delete):
        state.remove_task(event.task_id)
        return []

    task = state.find_task(event.task_id)
    if task is None:
        return []

    if isinstance(action, ToggleCompleted):
        task.set_completed(action.completed)
        if action.completed:
            return [NotifyTaskCompleted(task.id)]
    elif isinstance(action, BeginEdit):
        task.begin_edit()
        return [FocusTaskEditor(task.id)]
    elif isinstance(action, DescriptionChanged):
        task.set_description(action.text)
    elif isinstance(action, FinishEdit):
        task.finish_edit()
    else:
        raise TypeError(f"Unknown task action: {action!r}")

    return []
