"""
FILE: tickoff/runtime.py
PURPOSE: Single owner of AppState: runs events through the controller and executes commands
EXPORTS:
  - TodoApp (class)
  - create_app(settings, on_command) -> TodoApp
DEPENDENCIES:
  - concurrent.futures, queue, time (stdlib)
  - tickoff.core.controller (update, events, commands)
  - tickoff.core.persistence (PersistenceStore, open_store)
  - tickoff.notify (CompletionNotifier, NullNotifier)
NOTES:
  - All state transitions happen on the thread that calls dispatch()/pump()
  - Store I/O runs on one worker thread; its results come back through a
    queue as LoadCompleted/SaveCompleted events
  - At most one save is in flight (the controller's saving flag); edits made
    meanwhile are flushed by the next save
  - No timeouts on I/O: a stuck save only delays the next save
"""

import logging
import queue
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from .core.controller import (
    Command,
    DraftChanged,
    Event,
    FocusNewTaskInput,
    FocusTaskEditor,
    LoadCompleted,
    NotifyTaskCompleted,
    SaveCompleted,
    SaveSnapshot,
    SubmitNewTask,
    update,
)
from .core.exceptions import LoadError, LoadErrorKind, SaveError, SaveErrorKind
from .core.models import SavedSnapshot, Task
from .core.persistence import PersistenceStore, open_store
from .core.state import AppState
from .notify import CompletionNotifier, NullNotifier

logger = logging.getLogger(__name__)


class TodoApp:
    """
    Drives the controller for one session.

    Args:
        store: Where snapshots are loaded from and saved to
        notifier: Receives NotifyTaskCompleted (default: silent)
        on_command: Presentation callback for focus commands
    """

    def __init__(
        self,
        store: PersistenceStore,
        notifier=None,
        on_command: Optional[Callable[[Command], None]] = None,
    ):
        self.store = store
        self.notifier = notifier or NullNotifier()
        self.on_command = on_command
        self.state = AppState()
        self.last_save_error: Optional[SaveError] = None
        self.last_load_error: Optional[LoadError] = None
        self._completions: "queue.Queue[Event]" = queue.Queue()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tickoff-io")
        self._started = False

    # --- lifecycle ---

    def start(self) -> None:
        """Begin the startup load (once)."""
        if self._started:
            return
        self._started = True
        logger.info("Loading tasks from %s", self.store.path)
        self._executor.submit(self._run_load)

    def close(self, timeout: Optional[float] = None) -> None:
        """Flush pending changes, wait for the in-flight save, stop the workers."""
        if self._started:
            self.wait_idle(timeout)
        self._executor.shutdown(wait=True)
        self.notifier.close(timeout)

    # --- event processing ---

    def dispatch(self, event: Event) -> List[Command]:
        """
        Apply completed I/O first, then event. Returns the commands it produced.
        """
        self.pump()
        return self._apply(event)

    def pump(self) -> int:
        """Apply any I/O completions that have arrived. Returns how many."""
        count = 0
        while True:
            try:
                event = self._completions.get_nowait()
            except queue.Empty:
                return count
            self._apply(event)
            count += 1

    def add_task(self, description: str) -> Optional[Task]:
        """
        Submit description as a new task without losing the pending draft.

        Goes through the same DraftChanged/SubmitNewTask path as typing in
        the new-task field, then puts back whatever draft was there before.
        Returns the new task, or None if nothing was added.
        """
        previous = self.state.input_value
        count = len(self.state.tasks)

        self.dispatch(DraftChanged(description))
        self.dispatch(SubmitNewTask())
        added = len(self.state.tasks) > count

        if self.state.input_value != previous:
            self.dispatch(DraftChanged(previous))

        return self.state.tasks[-1] if added else None

    def wait_loaded(self, timeout: Optional[float] = None) -> bool:
        """Block until the startup load has been applied."""
        return self._wait_until(lambda: self.state.loaded, timeout)

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until loaded, no save in flight and nothing left unsaved."""
        return self._wait_until(
            lambda: self.state.loaded and not self.state.saving and not self.state.dirty,
            timeout,
        )

    def _wait_until(self, predicate: Callable[[], bool], timeout: Optional[float]) -> bool:
        deadline = None if timeout is None else time.monotonic() + timeout
        self.pump()
        while not predicate():
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                return False
            try:
                event = self._completions.get(timeout=remaining)
            except queue.Empty:
                return predicate()
            self._apply(event)
        return True

    def _apply(self, event: Event) -> List[Command]:
        self.state, commands = update(self.state, event)
        for command in commands:
            self._execute(command)
        return commands

    def _execute(self, command: Command) -> None:
        if isinstance(command, SaveSnapshot):
            self._executor.submit(self._run_save, command.snapshot)
        elif isinstance(command, NotifyTaskCompleted):
            self.notifier.notify(command.task_id)
        elif isinstance(command, (FocusTaskEditor, FocusNewTaskInput)):
            if self.on_command is not None:
                self.on_command(command)
        else:
            raise TypeError(f"Unknown command: {command!r}")

    # --- worker thread ---

    def _run_load(self) -> None:
        try:
            snapshot = self.store.load()
        except LoadError as e:
            self.last_load_error = e
            logger.warning("%s; starting with an empty list", e)
            self._completions.put(LoadCompleted(error=e))
        except Exception as e:
            logger.exception("Unexpected error loading from %s", self.store.path)
            error = LoadError(LoadErrorKind.UNREADABLE, str(e))
            self.last_load_error = error
            self._completions.put(LoadCompleted(error=error))
        else:
            logger.info("Loaded %d task(s)", len(snapshot.tasks))
            self._completions.put(LoadCompleted(snapshot=snapshot))

    def _run_save(self, snapshot: SavedSnapshot) -> None:
        try:
            self.store.save(snapshot)
        except SaveError as e:
            self.last_save_error = e
            logger.warning("%s", e)
            self._completions.put(SaveCompleted(error=e))
        except Exception as e:
            logger.exception("Unexpected error saving to %s", self.store.path)
            error = SaveError(SaveErrorKind.WRITE_FAILURE, str(e))
            self.last_save_error = error
            self._completions.put(SaveCompleted(error=error))
        else:
            self.last_save_error = None
            self._completions.put(SaveCompleted())


def create_app(settings, on_command: Optional[Callable[[Command], None]] = None) -> TodoApp:
    """Build a TodoApp from Settings (store backend, data dir, sound)."""
    store = open_store(settings.backend, settings.data_dir)
    notifier = CompletionNotifier() if settings.sound else NullNotifier()
    return TodoApp(store, notifier=notifier, on_command=on_command)
