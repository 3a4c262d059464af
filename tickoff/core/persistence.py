"""
FILE: tickoff/core/persistence.py
PURPOSE: Store interface, JSON document backend and backend selection
EXPORTS:
  - PersistenceStore (base class)
  - JsonFileStore (todos.json backend)
  - store_path(backend, data_dir) -> Path
  - open_store(backend, data_dir) -> PersistenceStore
DEPENDENCIES:
  - json, os, tempfile (stdlib)
  - pathlib (stdlib)
  - tickoff.core.models (SavedSnapshot)
  - tickoff.core.exceptions (LoadError, SaveError, ConfigError)
  - tickoff.core.repository (SqliteStore, imported lazily)
NOTES:
  - load() raises LoadError, save() raises SaveError; nothing else escapes
  - Stores assume at most one concurrent load and one concurrent save
    (the controller's saving flag guarantees it)
  - JSON saves write a temp file in the same directory, fsync, then
    os.replace() it over the target: a crash leaves old or new, never half
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Union

from .constants import (
    BACKEND_JSON,
    BACKEND_SQLITE,
    VALID_BACKENDS,
    JSON_FILENAME,
    DB_FILENAME,
)
from .exceptions import ConfigError, LoadError, LoadErrorKind, SaveError, SaveErrorKind
from .models import SavedSnapshot

logger = logging.getLogger(__name__)


class PersistenceStore:
    """Durable read/write of the full SavedSnapshot."""

    path: Path

    def load(self) -> SavedSnapshot:
        """
        Read the stored snapshot.

        Raises:
            LoadError: NOT_FOUND/UNREADABLE if the medium is missing or
                inaccessible, MALFORMED if it can't be decoded
        """
        raise NotImplementedError

    def save(self, snapshot: SavedSnapshot) -> None:
        """
        Replace the stored snapshot.

        Raises:
            SaveError: If the snapshot couldn't be written in full
        """
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.path)!r})"


class JsonFileStore(PersistenceStore):
    """Snapshot stored as one pretty-printed JSON document."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> SavedSnapshot:
        try:
            contents = self.path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise LoadError(LoadErrorKind.NOT_FOUND, str(self.path)) from e
        except (OSError, UnicodeDecodeError) as e:
            raise LoadError(LoadErrorKind.UNREADABLE, str(e)) from e

        try:
            snapshot = SavedSnapshot.from_dict(json.loads(contents))
        except (ValueError, KeyError, TypeError, RecursionError) as e:
            # json.JSONDecodeError is a ValueError; absurdly deep nesting is a RecursionError
            raise LoadError(LoadErrorKind.MALFORMED, str(e)) from e

        logger.debug("Loaded %d task(s) from %s", len(snapshot.tasks), self.path)
        return snapshot

    def save(self, snapshot: SavedSnapshot) -> None:
        try:
            document = snapshot.to_json()
        except (TypeError, ValueError) as e:
            raise SaveError(SaveErrorKind.WRITE_FAILURE, f"could not serialize snapshot: {e}") from e

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._replace_atomically(document)
        except OSError as e:
            raise SaveError(SaveErrorKind.WRITE_FAILURE, str(e)) from e

        logger.debug("Saved %d task(s) to %s", len(snapshot.tasks), self.path)

    def _replace_atomically(self, document: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(document)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise


def store_path(backend: str, data_dir: Union[str, Path]) -> Path:
    """File a backend would use inside data_dir."""
    name = DB_FILENAME if backend == BACKEND_SQLITE else JSON_FILENAME
    return Path(data_dir) / name


def open_store(backend: str, data_dir: Union[str, Path]) -> PersistenceStore:
    """
    Create the store for a backend name.

    Args:
        backend: "json" or "sqlite"
        data_dir: Directory holding the store file (created on first save)

    Raises:
        ConfigError: If backend isn't a known backend name
    """
    if backend not in VALID_BACKENDS:
        raise ConfigError(
            f"Invalid backend '{backend}'. Must be one of: {', '.join(VALID_BACKENDS)}"
        )

    path = store_path(backend, data_dir)
    if backend == BACKEND_JSON:
        return JsonFileStore(path)

    # Imported here so the JSON backend never touches sqlite3
    from .repository import SqliteStore

    return SqliteStore(path)
