"""
FILE: tickoff/core/__init__.py
PURPOSE: Task model, application state machine and persistence backends
"""
