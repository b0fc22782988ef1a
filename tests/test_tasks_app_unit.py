import logging

import pytest

from core.desktop.devtools.interface import tasks_app
from core.desktop.devtools.interface.constants import APP_NAME


def test_parser_defaults():
    args = tasks_app.build_parser().parse_args([])
    assert args.project == "."
    assert args.watch is None
    assert args.view is None
    assert args.log_level == "INFO"


def test_parser_flags():
    args = tasks_app.build_parser().parse_args(["-p", "/tmp/x", "--no-watch", "--view", "list", "--theme", "dark-contrast"])
    assert args.project == "/tmp/x"
    assert args.watch is False
    assert args.view == "list"
    assert args.theme == "dark-contrast"


def test_parser_rejects_unknown_theme():
    with pytest.raises(SystemExit):
        tasks_app.build_parser().parse_args(["--theme", "neon"])


def test_version_short_circuits(monkeypatch, capsys):
    monkeypatch.setattr(tasks_app, "cmd_tui", lambda args: pytest.fail("tui must not start"))
    assert tasks_app.main(["--version"]) == 0
    assert capsys.readouterr().out.strip()


def test_main_fills_defaults_from_config(tmp_path, monkeypatch):
    config = tmp_path / "config.yaml"
    config.write_text("watch: false\nview_mode: list\n", encoding="utf-8")
    monkeypatch.setenv("TASK_DASHBOARD_CONFIG", str(config))
    captured = {}
    monkeypatch.setattr(tasks_app, "configure_logging", lambda *a: None)

    def fake_cmd_tui(args):
        captured["args"] = args
        return 0

    monkeypatch.setattr(tasks_app, "cmd_tui", fake_cmd_tui)
    assert tasks_app.main(["-p", str(tmp_path)]) == 0
    args = captured["args"]
    assert args.watch is False
    assert args.view == "list"


def test_configure_logging_to_file(tmp_path):
    log_file = tmp_path / "dash.log"
    tasks_app.configure_logging(str(log_file), "DEBUG")
    logger = logging.getLogger("task_dashboard")
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    logging.getLogger("task_dashboard.service").debug("hello")
    for handler in logger.handlers:
        handler.flush()
    assert "hello" in log_file.read_text(encoding="utf-8")
    tasks_app.configure_logging(None)
    assert [type(h) for h in logger.handlers] == [logging.NullHandler]


def test_app_name():
    assert APP_NAME == "task-dashboard"
