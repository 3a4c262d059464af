"""
FILE: tickoff/repl/completer.py
PURPOSE: Autocomplete logic for REPL commands and arguments
EXPORTS:
  - TickoffCompleter (Completer for command/arg completion)
  - create_completer(state_getter) -> TickoffCompleter
DEPENDENCIES:
  - prompt_toolkit.completion (Completer, Completion)
  - tickoff.core.state (AppState, for row numbers)
NOTES:
  - Suggests command names when at start of line
  - Suggests row numbers (with the task text as meta) for done/undone/edit/rm
  - Suggests filter names after "filter" and languages after "lang"
  - Suggests flags after commands that take them
  - Case-insensitive matching
"""

from typing import Callable, Iterable, Optional

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from ..core.state import AppState


class TickoffCompleter(Completer):
    """
    Custom completer for the tickoff REPL.

    Args:
        state_getter: Returns the current AppState (None while unavailable)
    """

    COMMANDS = [
        "add", "draft", "submit", "ls", "done", "undone", "edit", "rm",
        "filter", "lang", "status", "help", "clear", "exit", "quit",
    ]

    COMMAND_DESCRIPTIONS = {
        "add": "Create a new task",
        "draft": "Show or set the new-task draft",
        "submit": "Turn the draft into a task",
        "ls": "List tasks under the current filter",
        "done": "Mark task as completed",
        "undone": "Mark task as not completed",
        "edit": "Change a task's description",
        "rm": "Delete task",
        "filter": "Show all, active or completed tasks",
        "lang": "Switch display language",
        "status": "Show save status and data file",
        "help": "Show available commands",
        "clear": "Clear the screen",
        "exit": "Exit REPL",
        "quit": "Exit REPL",
    }

    TASK_REF_COMMANDS = ("done", "undone", "edit", "rm")

    FILTER_VALUES = {
        "all": "Every task",
        "active": "Tasks still to do",
        "completed": "Finished tasks",
    }

    LANGUAGE_VALUES = {
        "en": "English",
        "ko": "Korean",
    }

    COMMAND_FLAGS = {
        "ls": ["--json"],
    }

    def __init__(self, state_getter: Optional[Callable[[], Optional[AppState]]] = None):
        self._state_getter = state_getter

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on current input.

        Logic:
            1. Start of input -> commands
            2. First argument of a task command -> row numbers
            3. First argument of filter/lang -> their values
            4. "--" prefix -> flags for the command
        """
        text_before_cursor = document.text_before_cursor
        words = text_before_cursor.split()
        at_new_word = text_before_cursor.endswith(" ")

        if not words or (not at_new_word and len(words) == 1):
            yield from self._complete_commands(words[0] if words else "")
            return

        command = words[0].lower()
        typing_first_arg = (len(words) == 1 and at_new_word) or (len(words) == 2 and not at_new_word)
        current = "" if at_new_word else words[-1]

        if current.startswith("--"):
            yield from self._complete_flags(command, current)
            return

        if not typing_first_arg:
            return

        if command in self.TASK_REF_COMMANDS:
            yield from self._complete_task_refs(current)
        elif command == "filter":
            yield from self._complete_values(self.FILTER_VALUES, current)
        elif command == "lang":
            yield from self._complete_values(self.LANGUAGE_VALUES, current)

    def _complete_commands(self, word: str) -> Iterable[Completion]:
        word_lower = word.lower()
        for command in self.COMMANDS:
            if command.startswith(word_lower):
                yield Completion(
                    command,
                    start_position=-len(word),
                    display=command,
                    display_meta=self.COMMAND_DESCRIPTIONS.get(command, ""),
                )

    def _complete_flags(self, command: str, word: str) -> Iterable[Completion]:
        for flag in self.COMMAND_FLAGS.get(command, []):
            if flag.startswith(word):
                yield Completion(flag, start_position=-len(word), display=flag)

    @staticmethod
    def _complete_values(values: dict, word: str) -> Iterable[Completion]:
        word_lower = word.lower()
        for value, description in values.items():
            if value.startswith(word_lower):
                yield Completion(
                    value,
                    start_position=-len(word),
                    display=value,
                    display_meta=description,
                )

    def _complete_task_refs(self, word: str) -> Iterable[Completion]:
        """Row numbers of visible tasks, labelled with their description."""
        state = self._state_getter() if self._state_getter else None
        if state is None:
            return

        for number, task in enumerate(state.visible_tasks()[:200], start=1):
            ref = str(number)
            if ref.startswith(word):
                description = task.description.strip()
                if len(description) > 40:
                    description = description[:37] + "..."
                mark = "✓" if task.completed else "○"
                yield Completion(
                    ref,
                    start_position=-len(word),
                    display=ref,
                    display_meta=f"{mark} {description}",
                )


def create_completer(
    state_getter: Optional[Callable[[], Optional[AppState]]] = None,
) -> TickoffCompleter:
    """
    Create and return a TickoffCompleter instance.

    Usage:
        completer = create_completer(lambda: app.state)
        session = PromptSession(completer=completer)
    """
    return TickoffCompleter(state_getter)
