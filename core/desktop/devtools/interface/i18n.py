"""Interface strings: language resolution and lookup in LANG_PACK."""

import os
from typing import Optional, Tuple

from config import get_user_lang
from core.desktop.devtools.interface.constants import LANG_PACK

DEFAULT_LANG = "en"


def _backfill(base_lang: str = DEFAULT_LANG) -> None:
    """Every pack carries every key; gaps are filled from the base language."""
    base = LANG_PACK[base_lang]
    for lang, strings in LANG_PACK.items():
        if lang != base_lang:
            for key, text in base.items():
                strings.setdefault(key, text)


_backfill()


def supported_languages() -> Tuple[str, ...]:
    return tuple(LANG_PACK)


def normalize_lang(value: Optional[str]) -> str:
    """Map "ru", "RU" or "ru_RU.UTF-8" to a pack code; unknown values become ""."""
    code = (value or "").strip().lower().replace("-", "_").split(".")[0].split("_")[0]
    return code if code in LANG_PACK else ""


def effective_lang(preferred: Optional[str] = None) -> str:
    """TASK_DASHBOARD_LANG wins, tests run in English, then the caller's choice, then config."""
    forced = normalize_lang(os.getenv("TASK_DASHBOARD_LANG"))
    if forced:
        return forced
    if os.getenv("PYTEST_CURRENT_TEST"):
        return DEFAULT_LANG
    return normalize_lang(preferred) or normalize_lang(get_user_lang()) or DEFAULT_LANG


def translate(key: str, lang: Optional[str] = None, **kwargs) -> str:
    strings = LANG_PACK.get(effective_lang(lang), LANG_PACK[DEFAULT_LANG])
    template = strings.get(key) or LANG_PACK[DEFAULT_LANG].get(key, key)
    if not kwargs:
        return template
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return template


__all__ = ["DEFAULT_LANG", "effective_lang", "normalize_lang", "supported_languages", "translate"]
