"""
FILE: tickoff/logging_setup.py
PURPOSE: Logging configuration for the CLI and REPL
EXPORTS:
  - setup_logging(level, log_dir) -> None
DEPENDENCIES:
  - logging (stdlib)
NOTES:
  - Console handler writes to stderr so it never mixes with --json output
  - Third-party records reach the console only at ERROR+
  - Call once, early, before the first logger.info
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union


LOG_FILENAME = "tickoff.log"


class _ConsoleNoiseFilter(logging.Filter):
    """Keep tickoff logs; let other libraries through only at ERROR+."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "tickoff" or record.name.startswith("tickoff."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    level: int = logging.WARNING,
    log_dir: Optional[Union[str, Path]] = None,
) -> None:
    """
    Configure logging with:
    - Console handler: stderr, at `level`, filtered
    - File handler (when log_dir is given): everything at DEBUG in tickoff.log
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_dir else level)

    # Remove any pre-existing handlers to avoid duplicates
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    if log_dir:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(log_dir / LOG_FILENAME), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    logging.captureWarnings(True)
