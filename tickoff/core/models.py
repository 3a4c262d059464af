"""
FILE: tickoff/core/models.py
PURPOSE: Domain models for tasks, view filters and saved snapshots
EXPORTS:
  - EditMode (enum)
  - Filter (enum)
  - Task (dataclass)
  - SavedSnapshot (dataclass)
DEPENDENCIES:
  - dataclasses (stdlib)
  - enum (stdlib)
  - json (stdlib)
  - uuid (stdlib)
NOTES:
  - Task ids are UUID4 values, stored as their canonical string form
  - edit_mode is transient: never serialized, always IDLE after loading
  - All models have from_dict()/to_dict() for the JSON document
  - Task has from_row() for SQLite row conversion
"""

import json
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from .constants import (
    FILTER_ALL,
    FILTER_ACTIVE,
    FILTER_COMPLETED,
    FILTER_CODES,
    JSON_INDENT,
)


class EditMode(Enum):
    IDLE = "idle"
    EDITING = "editing"


class Filter(Enum):
    """Which tasks are visible. The value is the tag stored in todos.json."""

    ALL = FILTER_ALL
    ACTIVE = FILTER_ACTIVE
    COMPLETED = FILTER_COMPLETED

    def matches(self, task: "Task") -> bool:
        if self is Filter.ACTIVE:
            return not task.completed
        if self is Filter.COMPLETED:
            return task.completed
        return True

    @property
    def code(self) -> int:
        """Integer code used by the SQLite app_state table."""
        return FILTER_CODES[self.value]

    @classmethod
    def from_code(cls, code: int) -> "Filter":
        """Map a stored integer code back to a Filter (unknown codes -> ALL)."""
        for item in cls:
            if item.code == code:
                return item
        return cls.ALL

    @classmethod
    def parse(cls, value) -> "Filter":
        """
        Parse a filter from a tag ("Active"), a name ("active") or a code (1).

        Raises:
            ValueError: If the value names no filter
        """
        if isinstance(value, Filter):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid filter: {value!r}")
        if isinstance(value, int):
            if value not in FILTER_CODES.values():
                raise ValueError(f"Invalid filter code: {value}")
            return cls.from_code(value)
        if isinstance(value, str):
            for item in cls:
                if value.lower() in (item.value.lower(), item.name.lower()):
                    return item
        raise ValueError(f"Invalid filter: {value!r}")


@dataclass
class Task:
    """One to-do item. Identity is stable for the task's lifetime."""

    description: str
    completed: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    edit_mode: EditMode = EditMode.IDLE

    @classmethod
    def create(cls, description: str) -> "Task":
        """New task with a fresh id, not completed, not being edited."""
        return cls(description=description)

    @property
    def editing(self) -> bool:
        return self.edit_mode is EditMode.EDITING

    def set_completed(self, completed: bool) -> None:
        self.completed = completed

    def begin_edit(self) -> None:
        self.edit_mode = EditMode.EDITING

    def set_description(self, text: str) -> None:
        # Empty text is allowed while editing; finish_edit() refuses to commit it
        self.description = text

    def finish_edit(self) -> None:
        if self.description:
            self.edit_mode = EditMode.IDLE

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """
        Build a task from its JSON form.

        Snapshots written before ids existed have no "id" field; those
        tasks get a fresh one.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        if not isinstance(data, dict):
            raise ValueError("Task entry must be an object")

        description = data["description"]
        completed = data["completed"]
        if not isinstance(description, str):
            raise ValueError("Task description must be a string")
        if not isinstance(completed, bool):
            raise ValueError("Task completed flag must be a boolean")

        task_id = data.get("id")
        if task_id is None:
            task_id = str(uuid.uuid4())
        else:
            task_id = str(uuid.UUID(str(task_id)))

        return cls(description=description, completed=completed, id=task_id)

    @classmethod
    def from_row(cls, row) -> "Task":
        """
        Convert SQLite row to Task object.

        Raises:
            ValueError: If the stored id is not a UUID
        """
        return cls(
            id=str(uuid.UUID(row["id"])),
            description=row["description"],
            completed=bool(row["completed"]),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "completed": self.completed,
        }

    def to_json(self) -> str:
        """Serialize task to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


@dataclass
class SavedSnapshot:
    """The persisted projection of AppState: the exact unit a store reads and writes."""

    input_value: str = ""
    filter: Filter = Filter.ALL
    tasks: List[Task] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "SavedSnapshot":
        """
        Decode the JSON document.

        Raises:
            ValueError: If the document doesn't describe a snapshot, or two
                tasks share an id
            KeyError: If a required field is missing
        """
        if not isinstance(data, dict):
            raise ValueError("Snapshot must be an object")

        input_value = data["input_value"]
        if not isinstance(input_value, str):
            raise ValueError("input_value must be a string")

        raw_tasks = data["tasks"]
        if not isinstance(raw_tasks, list):
            raise ValueError("tasks must be a list")

        tasks = [Task.from_dict(entry) for entry in raw_tasks]
        seen = set()
        for task in tasks:
            if task.id in seen:
                raise ValueError(f"Duplicate task id {task.id}")
            seen.add(task.id)

        return cls(
            input_value=input_value,
            filter=Filter.parse(data["filter"]),
            tasks=tasks,
        )

    def to_dict(self) -> dict:
        return {
            "input_value": self.input_value,
            "filter": self.filter.value,
            "tasks": [task.to_dict() for task in self.tasks],
        }

    def to_json(self) -> str:
        """Pretty-printed document as written to todos.json."""
        return json.dumps(self.to_dict(), indent=JSON_INDENT, ensure_ascii=False)
