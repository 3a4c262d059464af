"""Allow ``python -m tickoff``."""

from .cli.main import main

main()
