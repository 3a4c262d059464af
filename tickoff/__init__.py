"""
FILE: tickoff/__init__.py
PURPOSE: Terminal-native single-user task list with autosaving persistence
"""

__version__ = "0.4.0"
