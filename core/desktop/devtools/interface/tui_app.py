#!/usr/bin/env python3
"""TUI application - TaskDashboardTUI class and cmd_tui command."""

import asyncio
import logging
import os
from pathlib import Path
from typing import Iterable, Optional

from prompt_toolkit.application import Application
from prompt_toolkit.filters import Condition
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.keys import Keys
from prompt_toolkit.layout import HSplit, Layout, VSplit, Window
from prompt_toolkit.layout.containers import ConditionalContainer, Float, FloatContainer
from prompt_toolkit.layout.controls import FormattedTextControl
from prompt_toolkit.layout.dimension import Dimension
from prompt_toolkit.widgets import Frame

from application.task_service import TaskService
from config import get_undo_ttl, get_user_theme
from infrastructure.ui_state_store import UIStateStore, ui_state_path

from . import tui_navigation as nav
from .tui_controller import DashboardController
from .tui_footer import build_footer_text
from .tui_messages import Command
from .tui_projection import ViewMode, set_view_mode
from .tui_render import render_details, render_dialog, render_log, render_task_list
from .tui_runtime import Program
from .tui_status import build_status_text
from .tui_themes import DEFAULT_THEME, build_style

logger = logging.getLogger("task_dashboard.app")

LOG_PANEL_HEIGHT = 8
DIALOG_KEYS = ("up", "down", "left", "right", "tab", "s-tab", "enter", "escape", "backspace", "space", "pageup", "pagedown")


class TaskDashboardTUI(DashboardController):
    def __init__(
        self,
        service: TaskService,
        *,
        theme: str = DEFAULT_THEME,
        ui_store: Optional[UIStateStore] = None,
        language: Optional[str] = None,
        watch: bool = True,
    ):
        super().__init__(service, ui_store=ui_store, language=language)
        self.watch = watch
        self.program = Program(self.update, on_change=self.force_render)
        self.scheduler = self.program
        self.style = build_style(theme)

        kb = KeyBindings()
        kb.timeout = 0
        dialog_active = Condition(lambda: self.dialogs.active)
        search_active = ~dialog_active & Condition(lambda: self.search_mode)
        browsing = ~dialog_active & ~search_active

        # Dialogs are modal: every key goes to the topmost one.
        for key in DIALOG_KEYS:
            kb.add(key, filter=dialog_active, eager=key == "escape")(self._dialog_key_handler(key))

        @kb.add(Keys.Any, filter=dialog_active)
        def _(event):
            if event.data and event.data.isprintable():
                self._run(self.handle_dialog_key(event.data))

        for key in ("enter", "escape", "backspace", "space"):
            kb.add(key, filter=search_active, eager=key == "escape")(self._search_key_handler(key))

        @kb.add(Keys.Any, filter=search_active)
        def _(event):
            if event.data and event.data.isprintable():
                self.search_key(event.data)

        @kb.add("q", filter=browsing)
        @kb.add("й", filter=browsing)
        @kb.add("c-c")
        def _(event):
            event.app.exit()

        @kb.add("down", filter=browsing)
        @kb.add("j", filter=browsing)
        @kb.add("о", filter=browsing)
        def _(event):
            nav.select_next(self.state)

        @kb.add("up", filter=browsing)
        @kb.add("k", filter=browsing)
        @kb.add("л", filter=browsing)
        def _(event):
            nav.select_previous(self.state)

        @kb.add("pagedown", filter=browsing)
        def _(event):
            nav.page_down(self.state, self._list_height())

        @kb.add("pageup", filter=browsing)
        def _(event):
            nav.page_up(self.state, self._list_height())

        @kb.add("home", filter=browsing)
        @kb.add("g", filter=browsing)
        @kb.add("п", filter=browsing)
        def _(event):
            nav.select_first(self.state)

        @kb.add("end", filter=browsing)
        @kb.add("G", filter=browsing)
        @kb.add("П", filter=browsing)
        def _(event):
            nav.select_last(self.state)

        @kb.add("left", filter=browsing)
        @kb.add("h", filter=browsing)
        @kb.add("р", filter=browsing)
        def _(event):
            nav.collapse_or_ascend(self.state)

        @kb.add("right", filter=browsing)
        @kb.add("l", filter=browsing)
        @kb.add("д", filter=browsing)
        def _(event):
            nav.expand_or_descend(self.state)

        @kb.add("enter", filter=browsing)
        def _(event):
            nav.toggle_expand(self.state)

        @kb.add("+", filter=browsing)
        def _(event):
            nav.expand_all(self.state)

        @kb.add("-", filter=browsing)
        def _(event):
            nav.collapse_all(self.state)

        @kb.add("space", filter=browsing)
        def _(event):
            nav.toggle_multi_select(self.state)
            nav.select_next(self.state)

        @kb.add("escape", filter=browsing, eager=True)
        def _(event):
            if self.state.multi_selected:
                nav.clear_multi_select(self.state)
            elif self.state.search_query:
                self.search_key("escape")

        @kb.add("/", filter=browsing)
        def _(event):
            self.begin_search()

        self._bind_action(kb, browsing, ("r", "к"), self.action_refresh)
        self._bind_action(kb, browsing, ("f", "а"), self.action_cycle_filter)
        self._bind_action(kb, browsing, ("v", "м"), self.action_toggle_view)
        self._bind_action(kb, browsing, ("d", "в"), self.action_toggle_details)
        self._bind_action(kb, browsing, ("L", "Д"), self.action_toggle_log)
        self._bind_action(kb, browsing, ("s", "ы"), self.action_cycle_status)
        self._bind_action(kb, browsing, ("n", "т"), self.action_next_task)
        self._bind_action(kb, browsing, ("a", "ф"), self.action_complexity)
        self._bind_action(kb, browsing, ("i", "ш"), self.action_import)
        self._bind_action(kb, browsing, ("E", "У"), self.action_expand)
        self._bind_action(kb, browsing, ("x", "ч", "delete"), self.action_delete)
        self._bind_action(kb, browsing, ("u", "г"), self.action_undo)

        self.status_bar = Window(content=FormattedTextControl(self.get_status_text), height=1, always_hide_cursor=True)
        self.task_list = Window(
            content=FormattedTextControl(self.get_task_list_text),
            always_hide_cursor=True,
            wrap_lines=False,
            width=Dimension(weight=3),
        )
        self.details_view = Window(
            content=FormattedTextControl(self.get_details_text),
            always_hide_cursor=True,
            wrap_lines=True,
            width=Dimension(weight=2),
        )
        self.log_view = Window(
            content=FormattedTextControl(self.get_log_text),
            always_hide_cursor=True,
            wrap_lines=False,
            height=LOG_PANEL_HEIGHT,
        )
        self.footer = Window(content=FormattedTextControl(self.get_footer_text), height=1, always_hide_cursor=True)
        self.dialog_window = Window(
            content=FormattedTextControl(self.get_dialog_text),
            always_hide_cursor=True,
            wrap_lines=True,
            width=Dimension(min=40, preferred=72, max=96),
            style="class:dialog",
        )

        body = VSplit(
            [
                self.task_list,
                ConditionalContainer(
                    VSplit([Window(width=1, char="│", style="class:border"), self.details_view]),
                    filter=Condition(lambda: self.state.show_details_panel),
                ),
            ]
        )
        main = HSplit(
            [
                self.status_bar,
                body,
                ConditionalContainer(
                    HSplit([Window(height=1, char="─", style="class:border"), self.log_view]),
                    filter=Condition(lambda: self.state.show_log_panel),
                ),
                self.footer,
            ]
        )
        root = FloatContainer(
            content=main,
            floats=[
                Float(
                    content=ConditionalContainer(
                        Frame(self.dialog_window, style="class:dialog.border"),
                        filter=dialog_active,
                    )
                )
            ],
        )

        self.app = Application(
            layout=Layout(root),
            key_bindings=kb,
            style=self.style,
            full_screen=True,
            mouse_support=True,
            refresh_interval=1.0,
        )
        try:
            self.app.ttimeoutlen = max(0.0, float(os.getenv("TASK_DASHBOARD_TUI_TTIMEOUTLEN", "0.05")))
        except ValueError:
            self.app.ttimeoutlen = 0.05

    # ------------------------------------------------------------------ key plumbing

    def _run(self, commands: Iterable[Command]) -> None:
        self.program.start(commands)
        self.force_render()

    def _dialog_key_handler(self, key: str):
        def handler(event):
            self._run(self.handle_dialog_key(key))

        return handler

    def _search_key_handler(self, key: str):
        def handler(event):
            self.search_key(key)

        return handler

    def _bind_action(self, kb: KeyBindings, flt, keys, action) -> None:
        for key in keys:
            kb.add(key, filter=flt)(lambda event, act=action: self._run(act()))

    # ------------------------------------------------------------------ rendering

    def force_render(self) -> None:
        app = getattr(self, "app", None)
        if app:
            app.invalidate()

    def _list_height(self) -> int:
        info = self.task_list.render_info
        if info is not None:
            return max(1, info.window_height)
        reserved = 2 + (LOG_PANEL_HEIGHT + 1 if self.state.show_log_panel else 0)
        return max(1, self.get_terminal_height() - reserved)

    def _list_width(self) -> int:
        info = self.task_list.render_info
        if info is not None:
            return max(20, info.window_width)
        width = self.get_terminal_width()
        return max(20, width * 3 // 5 if self.state.show_details_panel else width)

    def get_status_text(self):
        return build_status_text(self)

    def get_task_list_text(self):
        return render_task_list(self, self._list_height(), self._list_width())

    def get_details_text(self):
        info = self.details_view.render_info
        width = info.window_width if info is not None else self.get_terminal_width() * 2 // 5
        return render_details(self, width)

    def get_log_text(self):
        return render_log(self, LOG_PANEL_HEIGHT)

    def get_footer_text(self):
        return build_footer_text(self)

    def get_dialog_text(self):
        return render_dialog(self)

    # ------------------------------------------------------------------ lifecycle

    def _pre_run(self) -> None:
        self.program.attach(asyncio.get_running_loop())
        self.program.start(self.init_commands())

    def run(self) -> None:
        if self.watch:
            self.service.start_watcher()
        try:
            self.app.run(pre_run=self._pre_run)
        finally:
            self.shutdown()
            self.program.stop()


def cmd_tui(args) -> int:
    project_root = Path(getattr(args, "project", None) or ".").resolve()
    service = TaskService(project_root, tag=getattr(args, "tag", None) or "", undo_ttl=get_undo_ttl())
    theme = getattr(args, "theme", None) or get_user_theme() or DEFAULT_THEME
    tui = TaskDashboardTUI(
        service,
        theme=theme,
        ui_store=UIStateStore(ui_state_path(project_root)),
        language=getattr(args, "lang", None),
        watch=bool(getattr(args, "watch", True)),
    )
    view = getattr(args, "view", None)
    if view:
        set_view_mode(tui.state, ViewMode.from_string(view))
    logger.info("starting dashboard for %s", project_root)
    tui.run()
    return 0


__all__ = ["TaskDashboardTUI", "cmd_tui"]
