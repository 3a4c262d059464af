"""Shared pytest configuration and fixtures for tests."""

import sys
import io
import threading
from pathlib import Path

import pytest

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout = io.TextIOWrapper(sys.stdout.buffer, encoding='utf-8')
    sys.stderr = io.TextIOWrapper(sys.stderr.buffer, encoding='utf-8')

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from tickoff.core.exceptions import LoadError, LoadErrorKind
from tickoff.core.models import SavedSnapshot, Task, Filter
from tickoff.core.persistence import PersistenceStore


class MemoryStore(PersistenceStore):
    """
    PersistenceStore kept in memory.

    Attributes:
        snapshot: What load() returns (None -> NOT_FOUND)
        load_error / save_error: Raised by load() / save() when set
        saved: Every snapshot save() accepted, in order
        gate: When set, save() blocks until the event is set
        save_started: Set as soon as any save() begins
    """

    def __init__(self, snapshot=None, load_error=None):
        self.path = Path("memory")
        self.snapshot = snapshot
        self.load_error = load_error
        self.save_error = None
        self.saved = []
        self.gate = None
        self.save_started = threading.Event()

    def load(self):
        if self.load_error is not None:
            raise self.load_error
        if self.snapshot is None:
            raise LoadError(LoadErrorKind.NOT_FOUND, "memory")
        return self.snapshot

    def save(self, snapshot):
        self.save_started.set()
        if self.gate is not None:
            assert self.gate.wait(5), "save gate never opened"
        if self.save_error is not None:
            raise self.save_error
        self.saved.append(snapshot)
        self.snapshot = snapshot


class RecordingNotifier:
    """Notifier that remembers which tasks it was told about."""

    def __init__(self):
        self.notified = []
        self.closed = False

    def notify(self, task_id):
        self.notified.append(task_id)

    def close(self, timeout=None):
        self.closed = True


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def sample_snapshot():
    """Three tasks, the middle one done, draft pending, Active filter."""
    return SavedSnapshot(
        input_value="Call the bank",
        filter=Filter.ACTIVE,
        tasks=[
            Task(description="Buy milk"),
            Task(description="Water plants", completed=True),
            Task(description="Write report"),
        ],
    )


@pytest.fixture
def clean_env(monkeypatch):
    """No TICKOFF_* settings leaking in from the developer's shell."""
    for name in ("TICKOFF_BACKEND", "TICKOFF_DATA_DIR", "TICKOFF_LOG_LEVEL", "TICKOFF_SOUND"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
