"""Tests for REPL input parsing."""

from tickoff.repl.parser import parse_command


def test_simple_command():
    result = parse_command("add Buy milk")
    assert result.command == "add"
    assert result.args == ["Buy", "milk"]
    assert result.text() == "Buy milk"
    assert result.flags == {}


def test_quoted_argument():
    result = parse_command('edit 2 "Call the plumber"')
    assert result.args == ["2", "Call the plumber"]


def test_flags():
    result = parse_command("LS --json --lang=ko")
    assert result.command == "ls"
    assert result.flags == {"json": True, "lang": "ko"}


def test_double_dash_ends_flags():
    result = parse_command("add -- --not-a-flag")
    assert result.args == ["--not-a-flag"]
    assert result.flags == {}


def test_unbalanced_quote_falls_back_to_split():
    result = parse_command("add don't forget")
    assert result.command == "add"
    assert result.text() == "don't forget"


def test_empty_input():
    assert parse_command("   ").command == ""
