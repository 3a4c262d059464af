"""
FILE: tickoff/cli/__init__.py
PURPOSE: Typer command-line interface
"""

from .main import app, main

__all__ = ["app", "main"]
