"""
FILE: tickoff/repl/__init__.py
PURPOSE: REPL package: the interactive presentation layer
EXPORTS:
  - run_repl() (from repl.main)
DEPENDENCIES:
  - prompt_toolkit (REPL interface)
  - rich (formatted output)
  - tickoff.runtime (TodoApp)
NOTES:
  - Entry point for interactive mode
  - Provides autocomplete and command history
"""

from .main import run_repl

__all__ = ["run_repl"]
