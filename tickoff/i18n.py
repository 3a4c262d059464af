"""
FILE: tickoff/i18n.py
PURPOSE: Display strings for the REPL and CLI in the supported languages
EXPORTS:
  - Language (enum)
  - default_language() -> Language
  - Localizer (class)
  - init_localization() -> Localizer
  - get_localizer() -> Localizer
DEPENDENCIES:
  - os (locale environment variables)
NOTES:
  - The core never resolves strings; it only carries the active Language
  - init_localization() must run before get_localizer(), once per process
  - No teardown: the process-wide Localizer lives until exit
"""

import os
from enum import Enum
from typing import Dict, Optional


class Language(Enum):
    ENGLISH = "en"
    KOREAN = "ko"

    @property
    def short_label(self) -> str:
        return "En" if self is Language.ENGLISH else "Ko"

    def other(self) -> "Language":
        return Language.KOREAN if self is Language.ENGLISH else Language.ENGLISH

    @classmethod
    def parse(cls, value: str) -> "Language":
        """
        Parse "en", "ko", "english", "korean" (case-insensitive).

        Raises:
            ValueError: If the value names no supported language
        """
        lowered = value.strip().lower()
        for item in cls:
            if lowered in (item.value, item.name.lower()):
                return item
        raise ValueError(f"Unsupported language: {value!r}")


def default_language() -> Language:
    """Desktop locale: Korean if the first set locale variable starts with 'ko'."""
    for var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(var)
        if value:
            return Language.KOREAN if value.lower().startswith("ko") else Language.ENGLISH
    return Language.ENGLISH


CATALOGS: Dict[Language, Dict[str, str]] = {
    Language.ENGLISH: {
        "app-title": "Todos",
        "loading": "Loading...",
        "add-task-placeholder": "What needs to be done?",
        "describe-task-placeholder": "Describe your task...",
        "filter-all": "All",
        "filter-active": "Active",
        "filter-completed": "Completed",
        "empty-no-tasks": "You have not created a task yet...",
        "empty-all-done": "All your tasks are done! :D",
        "empty-no-completed": "You have not completed a task yet...",
        "tasks-left-one": "{count} task left",
        "tasks-left-other": "{count} tasks left",
    },
    Language.KOREAN: {
        "app-title": "할 일",
        "loading": "불러오는 중...",
        "add-task-placeholder": "무엇을 해야 하나요?",
        "describe-task-placeholder": "할 일을 설명하세요...",
        "filter-all": "전체",
        "filter-active": "진행 중",
        "filter-completed": "완료됨",
        "empty-no-tasks": "아직 만든 할 일이 없습니다...",
        "empty-all-done": "모든 할 일을 끝냈습니다! :D",
        "empty-no-completed": "아직 완료한 할 일이 없습니다...",
        "tasks-left-one": "남은 할 일 {count}개",
        "tasks-left-other": "남은 할 일 {count}개",
    },
}


class Localizer:
    """Looks up display strings by key for a given Language."""

    def __init__(self, catalogs: Optional[Dict[Language, Dict[str, str]]] = None):
        self._catalogs = catalogs if catalogs is not None else CATALOGS

    def translate(self, key: str, language: Language) -> str:
        """
        Display string for key in language.

        Notes:
            - "language-toggle" is the label of the language you'd switch TO
            - Unknown keys fall back to English, then to the key itself
        """
        if key == "language-toggle":
            return language.other().short_label

        catalog = self._catalogs.get(language, {})
        if key in catalog:
            return catalog[key]
        return self._catalogs.get(Language.ENGLISH, {}).get(key, key)

    def tasks_left(self, count: int, language: Language) -> str:
        key = "tasks-left-one" if count == 1 else "tasks-left-other"
        return self.translate(key, language).format(count=count)


_localizer: Optional[Localizer] = None


def init_localization() -> Localizer:
    """Create the process-wide Localizer (idempotent)."""
    global _localizer
    if _localizer is None:
        _localizer = Localizer()
    return _localizer


def get_localizer() -> Localizer:
    """
    Return the process-wide Localizer.

    Raises:
        RuntimeError: If init_localization() hasn't been called yet
    """
    if _localizer is None:
        raise RuntimeError("init_localization() must be called before get_localizer()")
    return _localizer
