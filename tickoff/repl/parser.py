"""
FILE: tickoff/repl/parser.py
PURPOSE: Parse user input into commands and arguments for REPL
EXPORTS:
  - ParseResult (dataclass for parsed commands)
  - parse_command(input_str) -> ParseResult
DEPENDENCIES:
  - shlex (for shell-like parsing with quotes)
  - dataclasses (for ParseResult)
NOTES:
  - Handles quoted strings: add "buy milk and eggs"
  - Flags: --json (boolean) and --key=value; "--" ends flag parsing
  - Unquoted words stay separate args; task text handlers re-join them
  - Case-insensitive command names
"""

import shlex
from dataclasses import dataclass, field
from typing import Dict, List, Union


@dataclass
class ParseResult:
    """
    Result of parsing a REPL command.

    Attributes:
        command: The command name (e.g., "add", "ls", "done")
        args: Positional arguments (e.g., ["buy", "milk"])
        flags: Flag arguments as dict (e.g., {"json": True, "lang": "ko"})
        raw_input: Original input string
    """
    command: str
    args: List[str] = field(default_factory=list)
    flags: Dict[str, Union[str, bool]] = field(default_factory=dict)
    raw_input: str = ""

    def text(self) -> str:
        """Positional args joined back into free text (for task descriptions)."""
        return " ".join(self.args)


def _tokenize(input_str: str) -> List[str]:
    try:
        return shlex.split(input_str)
    except ValueError:
        # Unclosed quote: an apostrophe in "don't forget" shouldn't kill the command
        return input_str.split()


def parse_command(input_str: str) -> ParseResult:
    """
    Parse REPL input into command, args, and flags.

    Examples:
        >>> parse_command("add Buy milk")
        ParseResult(command="add", args=["Buy", "milk"], flags={})

        >>> parse_command('edit 2 "Call the plumber"')
        ParseResult(command="edit", args=["2", "Call the plumber"], flags={})

        >>> parse_command("ls --json")
        ParseResult(command="ls", args=[], flags={"json": True})

        >>> parse_command("add -- --not-a-flag")
        ParseResult(command="add", args=["--not-a-flag"], flags={})

    Args:
        input_str: Raw user input from REPL prompt

    Returns:
        ParseResult with command, args, and flags extracted
    """
    input_str = input_str.strip()
    tokens = _tokenize(input_str) if input_str else []
    if not tokens:
        return ParseResult(command="", raw_input=input_str)

    command = tokens[0].lower()
    args: List[str] = []
    flags: Dict[str, Union[str, bool]] = {}
    flags_done = False

    for token in tokens[1:]:
        if flags_done or not token.startswith("--"):
            args.append(token)
        elif token == "--":
            flags_done = True
        elif "=" in token:
            name, value = token[2:].split("=", 1)
            flags[name.lower()] = value
        else:
            flags[token[2:].lower()] = True

    return ParseResult(command=command, args=args, flags=flags, raw_input=input_str)
