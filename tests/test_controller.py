"""
Tests for the controller update loop.

Covers:
- Loading phase (events dropped, load success and failure)
- Every user event and task action
- Autosave: dirty/saving flags, single save in flight, coalescing
- update() never mutating its input
"""

import pytest

from tickoff.core.controller import (
    BeginEdit,
    Delete,
    DescriptionChanged,
    DraftChanged,
    FilterChanged,
    FinishEdit,
    FocusNewTaskInput,
    FocusTaskEditor,
    LanguageChanged,
    LoadCompleted,
    NotifyTaskCompleted,
    SaveCompleted,
    SaveSnapshot,
    SubmitNewTask,
    TaskEvent,
    ToggleCompleted,
    autosave,
    update,
)
from tickoff.core.exceptions import LoadError, LoadErrorKind, SaveError, SaveErrorKind
from tickoff.core.models import EditMode, Filter, SavedSnapshot, Task
from tickoff.core.state import AppState, Phase
from tickoff.i18n import Language


def loaded_state(*descriptions, **kwargs):
    tasks = [Task(description=d) for d in descriptions]
    return AppState(phase=Phase.LOADED, tasks=tasks, language=Language.ENGLISH, **kwargs)


def run(state, *events):
    """Feed events in order, collecting every command."""
    commands = []
    for event in events:
        state, produced = update(state, event)
        commands.extend(produced)
    return state, commands


def saves(commands):
    return [c for c in commands if isinstance(c, SaveSnapshot)]


# --- Loading ---


def test_events_while_loading_are_dropped():
    """Nothing but LoadCompleted changes a loading state."""
    state = AppState(language=Language.ENGLISH)
    for event in (DraftChanged("x"), SubmitNewTask(), FilterChanged(Filter.ACTIVE), SaveCompleted()):
        new_state, commands = update(state, event)
        assert new_state is state
        assert commands == []
    assert state.phase is Phase.LOADING
    print("✓ Events during loading ignored")


def test_load_success_builds_loaded_state(sample_snapshot):
    state = AppState(language=Language.KOREAN)
    state, commands = update(state, LoadCompleted(snapshot=sample_snapshot))

    assert state.phase is Phase.LOADED
    assert state.input_value == "Call the bank"
    assert state.filter is Filter.ACTIVE
    assert [t.description for t in state.tasks] == ["Buy milk", "Water plants", "Write report"]
    assert [t.id for t in state.tasks] == [t.id for t in sample_snapshot.tasks]
    assert all(t.edit_mode is EditMode.IDLE for t in state.tasks)
    assert not state.dirty and not state.saving
    assert state.language is Language.KOREAN
    assert commands == [FocusNewTaskInput()]


@pytest.mark.parametrize("kind", list(LoadErrorKind))
def test_load_failure_gives_empty_state(kind):
    state, commands = update(AppState(), LoadCompleted(error=LoadError(kind)))

    assert state.phase is Phase.LOADED
    assert state.tasks == []
    assert state.input_value == ""
    assert state.filter is Filter.ALL
    assert not state.dirty
    assert commands == [FocusNewTaskInput()]


def test_load_result_after_loading_is_ignored(sample_snapshot):
    state = loaded_state("Keep me")
    new_state, commands = update(state, LoadCompleted(snapshot=sample_snapshot))
    assert new_state is state
    assert commands == []


# --- Draft and submit ---


def test_draft_change_triggers_save():
    state, commands = update(loaded_state(), DraftChanged("Buy bread"))

    assert state.input_value == "Buy bread"
    assert state.saving is True
    assert state.dirty is False
    assert len(commands) == 1
    assert commands[0].snapshot.input_value == "Buy bread"


def test_submit_appends_task_and_clears_draft():
    state, commands = run(loaded_state("First"), DraftChanged("Second"), SubmitNewTask())

    assert [t.description for t in state.tasks] == ["First", "Second"]
    assert state.tasks[-1].completed is False
    assert state.tasks[-1].edit_mode is EditMode.IDLE
    assert state.input_value == ""
    # First save still in flight, so the submit is waiting for the next one
    assert state.dirty is True
    assert len(saves(commands)) == 1


def test_submit_with_empty_draft_does_nothing():
    state = loaded_state("Only")
    new_state, commands = update(state, SubmitNewTask())

    assert new_state is state
    assert commands == []
    assert new_state.dirty is False
    assert len(new_state.tasks) == 1


def test_submitted_ids_are_unique():
    state = loaded_state()
    for text in ("a", "b", "c"):
        state, _ = run(state, DraftChanged(text), SubmitNewTask())
    assert len({t.id for t in state.tasks}) == 3


# --- Filter and language ---


def test_filter_change_is_persisted():
    state, commands = update(loaded_state("x"), FilterChanged(Filter.COMPLETED))
    assert state.filter is Filter.COMPLETED
    assert saves(commands)[0].snapshot.filter is Filter.COMPLETED


def test_language_change_marks_dirty():
    state, commands = update(loaded_state(), LanguageChanged(Language.KOREAN))
    assert state.language is Language.KOREAN
    assert len(saves(commands)) == 1


# --- Task actions ---


def test_complete_emits_notification_and_save():
    state = loaded_state("Buy milk")
    task_id = state.tasks[0].id

    state, commands = update(state, TaskEvent(task_id, ToggleCompleted(True)))

    assert state.tasks[0].completed is True
    assert NotifyTaskCompleted(task_id) in commands
    assert len(saves(commands)) == 1


def test_uncomplete_does_not_notify():
    state = loaded_state("Buy milk")
    state.tasks[0].completed = True
    task_id = state.tasks[0].id

    state, commands = update(state, TaskEvent(task_id, ToggleCompleted(False)))

    assert state.tasks[0].completed is False
    assert not any(isinstance(c, NotifyTaskCompleted) for c in commands)


def test_completing_twice_notifies_twice():
    state = loaded_state("Buy milk")
    task_id = state.tasks[0].id
    _, commands = run(
        state,
        TaskEvent(task_id, ToggleCompleted(True)),
        TaskEvent(task_id, ToggleCompleted(True)),
    )
    assert commands.count(NotifyTaskCompleted(task_id)) == 2


def test_edit_cycle():
    state = loaded_state("Old")
    task_id = state.tasks[0].id

    state, commands = update(state, TaskEvent(task_id, BeginEdit()))
    assert state.tasks[0].edit_mode is EditMode.EDITING
    assert FocusTaskEditor(task_id) in commands

    state, _ = run(state, TaskEvent(task_id, DescriptionChanged("New")), TaskEvent(task_id, FinishEdit()))
    assert state.tasks[0].description == "New"
    assert state.tasks[0].edit_mode is EditMode.IDLE


def test_empty_description_cannot_be_committed():
    state = loaded_state("Old")
    task_id = state.tasks[0].id

    state, _ = run(
        state,
        TaskEvent(task_id, BeginEdit()),
        TaskEvent(task_id, DescriptionChanged("")),
        TaskEvent(task_id, FinishEdit()),
    )
    assert state.tasks[0].description == ""
    assert state.tasks[0].edit_mode is EditMode.EDITING

    state, _ = run(state, TaskEvent(task_id, DescriptionChanged("Fixed")), TaskEvent(task_id, FinishEdit()))
    assert state.tasks[0].edit_mode is EditMode.IDLE


def test_delete_removes_only_that_task():
    state = loaded_state("a", "b", "c")
    middle = state.tasks[1].id

    state, commands = update(state, TaskEvent(middle, Delete()))

    assert [t.description for t in state.tasks] == ["a", "c"]
    assert [t.description for t in saves(commands)[0].snapshot.tasks] == ["a", "c"]


def test_unknown_task_id_is_a_noop_but_still_dirty():
    state = loaded_state("a")
    before = [t.to_dict() for t in state.tasks]

    state, commands = update(state, TaskEvent("no-such-task", ToggleCompleted(True)))

    assert [t.to_dict() for t in state.tasks] == before
    assert not any(isinstance(c, NotifyTaskCompleted) for c in commands)
    assert len(saves(commands)) == 1


# --- Autosave ---


def test_single_save_in_flight_and_coalescing():
    """Edits during a save pile up into exactly one follow-up save."""
    state, commands = update(loaded_state(), DraftChanged("a"))
    assert len(saves(commands)) == 1

    state, commands = run(state, DraftChanged("ab"), DraftChanged("abc"))
    assert saves(commands) == []
    assert state.saving is True
    assert state.dirty is True

    state, commands = update(state, SaveCompleted())
    assert len(saves(commands)) == 1
    assert saves(commands)[0].snapshot.input_value == "abc"
    assert state.saving is True
    assert state.dirty is False

    state, commands = update(state, SaveCompleted())
    assert commands == []
    assert not state.saving and not state.dirty
    print("✓ Single-flight autosave coalesces edits")


def test_failed_save_is_not_retried():
    state, _ = update(loaded_state(), DraftChanged("a"))
    state, commands = update(state, SaveCompleted(error=SaveError(SaveErrorKind.WRITE_FAILURE, "disk full")))

    assert commands == []
    assert state.saving is False
    assert state.dirty is False


def test_save_completed_never_marks_dirty():
    state = loaded_state()
    state, commands = update(state, SaveCompleted())
    assert state.dirty is False
    assert commands == []


def test_autosave_is_pure():
    clean = loaded_state()
    assert autosave(clean) == (clean, [])

    busy = loaded_state(dirty=True, saving=True)
    assert autosave(busy) == (busy, [])

    dirty = loaded_state("x", dirty=True)
    new_state, commands = autosave(dirty)
    assert new_state is not dirty
    assert dirty.dirty is True and dirty.saving is False
    assert new_state.dirty is False and new_state.saving is True
    assert len(commands) == 1


def test_update_does_not_mutate_input():
    state = loaded_state("a", "b")
    task_id = state.tasks[0].id
    before = (state.input_value, [t.to_dict() for t in state.tasks], state.dirty, state.saving)

    update(state, DraftChanged("draft"))
    update(state, TaskEvent(task_id, ToggleCompleted(True)))
    update(state, TaskEvent(task_id, Delete()))

    assert (state.input_value, [t.to_dict() for t in state.tasks], state.dirty, state.saving) == before


def test_saved_snapshot_does_not_alias_state():
    state, commands = update(loaded_state("a"), DraftChanged("x"))
    snapshot = saves(commands)[0].snapshot

    state.tasks[0].description = "changed later"
    assert snapshot.tasks[0].description == "a"


def test_unknown_event_raises():
    with pytest.raises(TypeError):
        update(loaded_state(), object())


# --- Scenario ---


def test_add_complete_filter_scenario():
    state, _ = update(AppState(), LoadCompleted(snapshot=SavedSnapshot()))
    for text in ("Buy milk", "Water plants", "Write report"):
        state, _ = run(state, DraftChanged(text), SubmitNewTask())

    state, commands = run(
        state,
        TaskEvent(state.tasks[1].id, ToggleCompleted(True)),
        FilterChanged(Filter.ACTIVE),
    )

    assert [t.description for t in state.visible_tasks()] == ["Buy milk", "Write report"]
    assert state.tasks_left() == 2
    assert sum(isinstance(c, NotifyTaskCompleted) for c in commands) == 1
