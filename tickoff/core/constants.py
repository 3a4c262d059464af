"""
FILE: tickoff/core/constants.py
PURPOSE: Constants used throughout the application
EXPORTS:
  - APP_NAME: Name used for the per-platform data directory
  - JSON_FILENAME / DB_FILENAME: Store file names
  - BACKEND_JSON / BACKEND_SQLITE / VALID_BACKENDS: Persistence backend names
  - FILTER_CODES: Filter tag -> integer code used by the SQLite schema
DEPENDENCIES:
  - None (stdlib only)
NOTES:
  - Centralized constants to avoid magic strings
  - Filter codes are part of the on-disk format, never renumber them
"""

APP_NAME = "tickoff"

# Store file names
JSON_FILENAME = "todos.json"
DB_FILENAME = "todos.db"

# Persistence backends
BACKEND_JSON = "json"
BACKEND_SQLITE = "sqlite"
VALID_BACKENDS = (BACKEND_JSON, BACKEND_SQLITE)
DEFAULT_BACKEND = BACKEND_JSON

# Filter tags and their integer codes in the app_state table
FILTER_ALL = "All"
FILTER_ACTIVE = "Active"
FILTER_COMPLETED = "Completed"
FILTER_CODES = {
    FILTER_ALL: 0,
    FILTER_ACTIVE: 1,
    FILTER_COMPLETED: 2,
}

# JSON document indentation
JSON_INDENT = 4

# Title suffix shown while there are unsaved changes
MODIFIED_SUFFIX = "..."
