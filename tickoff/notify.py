"""
FILE: tickoff/notify.py
PURPOSE: "Task completed" sound, played off the main thread
EXPORTS:
  - NullNotifier (does nothing)
  - CompletionNotifier (worker-thread notifier)
  - terminal_bell() -> None (default sound)
DEPENDENCIES:
  - rich (Console.bell for the default sound)
  - threading, queue (stdlib)
NOTES:
  - notify() returns immediately; playback happens on a dedicated daemon thread
  - Errors from the sound callable are logged and dropped, never re-raised
  - Used for NotifyTaskCompleted commands emitted by the controller
"""

import logging
import queue
import threading
from typing import Callable, Optional

from rich.console import Console

logger = logging.getLogger(__name__)

_bell_console = Console(stderr=True)

_STOP = object()


def terminal_bell() -> None:
    """Ring the terminal bell."""
    _bell_console.bell()


class NullNotifier:
    """Notifier used when sound is switched off."""

    def notify(self, task_id: str) -> None:
        pass

    def close(self, timeout: Optional[float] = None) -> None:
        pass


class CompletionNotifier:
    """
    Plays a sound each time a task is marked completed.

    Attributes:
        sound: Zero-argument callable that plays one completion sound
    """

    def __init__(self, sound: Optional[Callable[[], None]] = None):
        self.sound = sound or terminal_bell
        self._queue: "queue.Queue" = queue.Queue()
        self._worker = threading.Thread(
            target=self._run, name="tickoff-notifier", daemon=True
        )
        self._worker.start()

    def notify(self, task_id: str) -> None:
        """Queue one completion sound for task_id (fire-and-forget)."""
        self._queue.put(task_id)

    def close(self, timeout: Optional[float] = None) -> None:
        """Let queued sounds finish, then stop the worker."""
        self._queue.put(_STOP)
        self._worker.join(timeout)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            try:
                self.sound()
            except Exception:
                logger.warning("Completion sound failed for task %s", item, exc_info=True)
