"""
FILE: tickoff/cli/commands/__init__.py
PURPOSE: CLI command modules, imported by tickoff.cli.main to register them
"""

from .tasks import add, ls, done, undone, edit, rm
from .system import filter, path, version, repl

__all__ = [
    "add", "ls", "done", "undone", "edit", "rm",
    "filter", "path", "version", "repl",
]
