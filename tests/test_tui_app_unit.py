#!/usr/bin/env python3
"""Unit tests for tui_app - TaskDashboardTUI wiring and cmd_tui."""

from types import SimpleNamespace

from prompt_toolkit.keys import Keys

from application.task_service import TaskService
from core.desktop.devtools.interface import tui_app
from core.desktop.devtools.interface.tui_app import TaskDashboardTUI, cmd_tui
from core.desktop.devtools.interface.tui_projection import ViewMode


def _keys(binding):
    return tuple(k.value if isinstance(k, Keys) else k for k in binding.keys)


def test_program_doubles_as_scheduler(tmp_path):
    tui = TaskDashboardTUI(TaskService(tmp_path), watch=False)
    assert tui.scheduler is tui.program
    assert tui.watch is False
    assert tui.style is not None


def test_workflow_keys_are_bound(tmp_path):
    tui = TaskDashboardTUI(TaskService(tmp_path), watch=False)
    bound = {_keys(b) for b in tui.app.key_bindings.bindings}
    for key in ("a", "i", "E", "x", "u", "s", "n", "/", "q"):
        assert (key,) in bound, key


def test_list_height_without_render_info(tmp_path, monkeypatch):
    tui = TaskDashboardTUI(TaskService(tmp_path), watch=False)
    monkeypatch.setattr(TaskDashboardTUI, "get_terminal_height", staticmethod(lambda: 30))
    tui.state.show_log_panel = False
    assert tui._list_height() == 28
    tui.state.show_log_panel = True
    assert tui._list_height() == 28 - tui_app.LOG_PANEL_HEIGHT - 1


def test_cmd_tui_applies_arguments(tmp_path, monkeypatch):
    monkeypatch.setenv("TASK_DASHBOARD_CONFIG", str(tmp_path / "config.yaml"))
    seen = {}

    def fake_run(self):
        seen["tui"] = self

    monkeypatch.setattr(TaskDashboardTUI, "run", fake_run)
    args = SimpleNamespace(project=str(tmp_path), tag="", theme=None, lang=None, watch=False, view="list")
    assert cmd_tui(args) == 0
    tui = seen["tui"]
    assert tui.state.view_mode == ViewMode.LIST
    assert tui.service.project_root == tmp_path.resolve()
    assert tui.watch is False
