"""Test of completer functionality."""

# Path setup handled by conftest.py
from prompt_toolkit.document import Document

from tickoff.core.models import Task
from tickoff.core.state import AppState, Phase
from tickoff.repl.completer import create_completer


def completions(completer, text):
    return [c.text for c in completer.get_completions(Document(text, cursor_position=len(text)), None)]


def test_command_completion():
    """Test that commands are suggested from their prefix."""
    completer = create_completer()

    assert completions(completer, "fi") == ["filter"]
    assert "undone" in completions(completer, "u")
    assert "done" in completions(completer, "D")
    print("✓ Command completion works")


def test_filter_and_language_values():
    completer = create_completer()

    assert completions(completer, "filter ") == ["all", "active", "completed"]
    assert completions(completer, "filter a") == ["all", "active"]
    assert completions(completer, "lang k") == ["ko"]


def test_task_numbers_follow_visible_rows():
    state = AppState(
        phase=Phase.LOADED,
        tasks=[Task(description="a"), Task(description="b", completed=True), Task(description="c")],
    )
    completer = create_completer(lambda: state)

    assert completions(completer, "done ") == ["1", "2", "3"]

    state.filter = state.filter.parse("active")
    assert completions(completer, "rm ") == ["1", "2"]

    # Only the first argument is a task number
    assert completions(completer, "edit 1 ") == []


def test_task_numbers_without_state():
    assert completions(create_completer(), "done ") == []


def test_flag_completion():
    """Test that --json is offered after ls."""
    completer = create_completer()

    assert completions(completer, "ls --") == ["--json"]
    assert completions(completer, "add --") == []
