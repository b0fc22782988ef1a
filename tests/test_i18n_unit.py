from core.desktop.devtools.interface.constants import LANG_PACK
from core.desktop.devtools.interface.i18n import effective_lang, normalize_lang, supported_languages, translate


def test_english_forced_under_pytest(monkeypatch):
    monkeypatch.delenv("TASK_DASHBOARD_LANG", raising=False)
    assert effective_lang("ru") == "en"
    assert translate("WORKFLOW_CANCELLED", operation="Delete") == "Delete Cancelled"


def test_env_override(monkeypatch):
    monkeypatch.setenv("TASK_DASHBOARD_LANG", "ru")
    assert effective_lang() == "ru"
    assert translate("BTN_CANCEL") == "Отмена"


def test_unsupported_env_value_is_ignored(monkeypatch):
    monkeypatch.setenv("TASK_DASHBOARD_LANG", "de")
    assert effective_lang("ru") == "en"


def test_missing_keys_fall_back():
    assert set(LANG_PACK["en"]) <= set(LANG_PACK["ru"])
    assert translate("NO_SUCH_KEY") == "NO_SUCH_KEY"


def test_bad_format_arguments_return_template():
    assert translate("STATUS_TASKS_COUNT") == "Tasks: {count}"
    assert translate("STATUS_TASKS_COUNT", total=3) == "Tasks: {count}"
    assert translate("STATUS_TASKS_COUNT", count=3) == "Tasks: 3"


def test_normalize_locale_strings():
    assert normalize_lang("ru_RU.UTF-8") == "ru"
    assert normalize_lang("EN-us") == "en"
    assert normalize_lang("de") == ""
    assert normalize_lang(None) == ""
    assert supported_languages() == ("en", "ru")
