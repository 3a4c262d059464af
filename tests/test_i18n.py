"""Tests for display-string lookup."""

import pytest

from tickoff import i18n
from tickoff.i18n import Language, Localizer, default_language, get_localizer, init_localization


@pytest.fixture
def localizer():
    return Localizer()


def test_translate_both_languages(localizer):
    assert localizer.translate("app-title", Language.ENGLISH) == "Todos"
    assert localizer.translate("app-title", Language.KOREAN) == "할 일"
    assert localizer.translate("filter-active", Language.ENGLISH) == "Active"


def test_language_toggle_names_the_other_language(localizer):
    assert localizer.translate("language-toggle", Language.ENGLISH) == "Ko"
    assert localizer.translate("language-toggle", Language.KOREAN) == "En"


def test_fallbacks():
    partial = Localizer({
        Language.ENGLISH: {"only-english": "English text"},
        Language.KOREAN: {},
    })
    assert partial.translate("only-english", Language.KOREAN) == "English text"
    assert partial.translate("no-such-key", Language.KOREAN) == "no-such-key"


@pytest.mark.parametrize("count, expected", [
    (0, "0 tasks left"),
    (1, "1 task left"),
    (2, "2 tasks left"),
])
def test_tasks_left(localizer, count, expected):
    assert localizer.tasks_left(count, Language.ENGLISH) == expected


def test_tasks_left_korean(localizer):
    assert localizer.tasks_left(3, Language.KOREAN) == "남은 할 일 3개"


@pytest.mark.parametrize("env, expected", [
    ({"LANG": "ko_KR.UTF-8"}, Language.KOREAN),
    ({"LANG": "en_US.UTF-8"}, Language.ENGLISH),
    ({"LC_ALL": "en_GB.UTF-8", "LANG": "ko_KR.UTF-8"}, Language.ENGLISH),
    ({"LC_MESSAGES": "ko_KR.UTF-8"}, Language.KOREAN),
    ({}, Language.ENGLISH),
])
def test_default_language(monkeypatch, env, expected):
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        monkeypatch.delenv(var, raising=False)
    for var, value in env.items():
        monkeypatch.setenv(var, value)

    assert default_language() is expected


def test_language_parse():
    assert Language.parse("KO") is Language.KOREAN
    assert Language.parse("english") is Language.ENGLISH
    with pytest.raises(ValueError):
        Language.parse("fr")


def test_get_localizer_requires_init(monkeypatch):
    monkeypatch.setattr(i18n, "_localizer", None)
    with pytest.raises(RuntimeError):
        get_localizer()

    first = init_localization()
    assert init_localization() is first
    assert get_localizer() is first
