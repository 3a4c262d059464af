"""Tests for settings and logging setup."""

import logging
from pathlib import Path

import pytest

from tickoff.config import load_settings
from tickoff.core.exceptions import ConfigError
from tickoff.logging_setup import LOG_FILENAME, setup_logging


def test_defaults(clean_env):
    settings = load_settings()

    assert settings.backend == "json"
    assert settings.data_dir.name == "tickoff"
    assert settings.log_level == logging.WARNING
    assert settings.sound is True


def test_environment(clean_env, tmp_path):
    clean_env.setenv("TICKOFF_BACKEND", "SQLite")
    clean_env.setenv("TICKOFF_DATA_DIR", str(tmp_path))
    clean_env.setenv("TICKOFF_LOG_LEVEL", "debug")
    clean_env.setenv("TICKOFF_SOUND", "off")

    settings = load_settings()

    assert settings.backend == "sqlite"
    assert settings.data_dir == tmp_path
    assert settings.log_level == logging.DEBUG
    assert settings.sound is False


def test_explicit_values_win(clean_env, tmp_path):
    clean_env.setenv("TICKOFF_BACKEND", "sqlite")
    clean_env.setenv("TICKOFF_SOUND", "yes")

    settings = load_settings(backend="json", data_dir=tmp_path / "x", log_level="INFO", sound=False)

    assert settings.backend == "json"
    assert settings.data_dir == Path(tmp_path / "x")
    assert settings.log_level == logging.INFO
    assert settings.sound is False


@pytest.mark.parametrize("name, value", [
    ("TICKOFF_BACKEND", "yaml"),
    ("TICKOFF_LOG_LEVEL", "chatty"),
    ("TICKOFF_SOUND", "loud"),
])
def test_invalid_values(clean_env, name, value):
    clean_env.setenv(name, value)
    with pytest.raises(ConfigError):
        load_settings()


def test_setup_logging_writes_file(tmp_path):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging(logging.WARNING, log_dir=tmp_path)
        logging.getLogger("tickoff.test").debug("debug line for the file")
        for handler in root.handlers:
            handler.flush()

        assert "debug line for the file" in (tmp_path / LOG_FILENAME).read_text(encoding="utf-8")
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
        logging.captureWarnings(False)
