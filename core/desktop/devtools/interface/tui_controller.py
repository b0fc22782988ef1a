"""Dashboard controller: state, dialogs, workflows and the message dispatch table.

Everything here runs on the UI thread. ``update`` is the single entry point
for messages; it returns the commands to run next. The prompt_toolkit layer in
tui_app only turns keys into calls on this class and draws its state.
"""

import itertools
import logging
import os
import time
from typing import Callable, Dict, List, NamedTuple, Optional

from application.ports import DashboardService
from core.errors import AppError, as_app_error, operation_error
from core.status import TaskStatus
from infrastructure.ui_state_store import UIStateStore

from . import tui_complexity, tui_delete, tui_expand, tui_import, tui_undo
from .i18n import effective_lang, translate
from .tui_dialogs import DialogAction, DialogStack, ErrorDialog, NotificationDialog, ProgressDialog
from .tui_messages import (
    MESSAGE_TYPES,
    Command,
    CompletedMsg,
    HoldElapsedMsg,
    NotificationTimeoutMsg,
    Outcome,
    ProgressMsg,
    StreamClosedMsg,
    TasksLoadedMsg,
    TasksReloadedMsg,
    UndoCompletedMsg,
    UndoExpiredMsg,
    UndoTickMsg,
    WorkflowKind,
)
from .tui_navigation import select_by_id, selected_task
from .tui_projection import cycle_status_filter, set_search_query, toggle_view_mode
from .tui_runtime import TimerHandle
from .tui_state import DashboardState, apply_ui_state, log_activity, replace_tasks, snapshot_ui_state
from .tui_workflows import WorkflowOrchestrator

logger = logging.getLogger("task_dashboard.controller")

NOTIFICATION_DURATION = 3.0
STATUS_CYCLE = (TaskStatus.PENDING, TaskStatus.IN_PROGRESS, TaskStatus.DONE)


class WorkflowHooks(NamedTuple):
    progress: Callable
    success: Callable


WORKFLOW_HOOKS: Dict[WorkflowKind, WorkflowHooks] = {
    WorkflowKind.COMPLEXITY: WorkflowHooks(tui_complexity.handle_progress, tui_complexity.handle_success),
    WorkflowKind.IMPORT: WorkflowHooks(tui_import.handle_progress, tui_import.handle_success),
    WorkflowKind.EXPAND: WorkflowHooks(tui_expand.handle_progress, tui_expand.handle_success),
    WorkflowKind.DELETE: WorkflowHooks(tui_delete.handle_progress, tui_delete.handle_success),
}


class NullScheduler:
    """Scheduler used before the event loop exists; timers never fire."""

    def call_later(self, delay: float, msg: object) -> TimerHandle:
        return TimerHandle()


class DashboardController:
    def __init__(
        self,
        service: DashboardService,
        *,
        scheduler=None,
        ui_store: Optional[UIStateStore] = None,
        orchestrator: Optional[WorkflowOrchestrator] = None,
        clock: Callable[[], float] = time.time,
        language: Optional[str] = None,
    ):
        self.service = service
        self.scheduler = scheduler or NullScheduler()
        self.ui_store = ui_store
        self.workflows = orchestrator or WorkflowOrchestrator()
        self.clock = clock
        self.language = effective_lang(language)
        self.state = DashboardState()
        self.dialogs = DialogStack()
        self.progress_dialogs: Dict[WorkflowKind, ProgressDialog] = {}
        self.undo_session: Optional[tui_undo.UndoSession] = None
        self.undo_ids = itertools.count(1)
        self.last_document_path = ""
        self.status_message = ""
        self.status_message_expires = 0.0
        self.pending_select_id = ""
        self.search_mode = False
        self.list_offset = 0
        self._handlers = build_dispatch_table()
        if ui_store is not None:
            saved = ui_store.load()
            apply_ui_state(self.state, saved)
            self.last_document_path = saved.last_document_path
            self.pending_select_id = saved.selected_id

    # ------------------------------------------------------------------ basics

    def _t(self, key: str, **kwargs) -> str:
        return translate(key, lang=self.language, **kwargs)

    def force_render(self) -> None:
        """Hook for the UI layer; the bare controller has nothing to redraw."""

    @staticmethod
    def get_terminal_width() -> int:
        """Get current terminal width, default to 100 if unavailable."""
        try:
            return os.get_terminal_size().columns
        except (AttributeError, ValueError, OSError):
            return 100

    @staticmethod
    def get_terminal_height() -> int:
        try:
            return os.get_terminal_size().lines
        except (AttributeError, ValueError, OSError):
            return 40

    def set_status_message(self, message: str, ttl: float = 4.0) -> None:
        self.status_message = message
        self.status_message_expires = time.time() + ttl

    def log(self, message: str, level: str = "info") -> None:
        log_activity(self.state, message, level)

    def notify(self, title: str, message: str, level: str = "info", duration: float = NOTIFICATION_DURATION) -> NotificationDialog:
        dialog = NotificationDialog(title, message, level=level, duration=duration)
        self.dialogs.push(dialog)
        self.scheduler.call_later(duration, NotificationTimeoutMsg(dialog.id))
        return dialog

    def show_error(self, error: AppError) -> ErrorDialog:
        self.log(f"{error.title}: {error.message}", "error")
        dialog = ErrorDialog(error)
        self.dialogs.push(dialog)
        return dialog

    # ------------------------------------------------------------------ message loop

    def update(self, msg: object) -> List[Command]:
        handler = self._handlers.get(type(msg))
        if handler is None:
            logger.warning("no handler for message %r", msg)
            return []
        commands = handler(self, msg) or []
        self.force_render()
        return [command for command in commands if command is not None]

    def init_commands(self) -> List[Command]:
        self.state.loading = True
        return [self.load_command(from_disk=True), self.reload_wait_command()]

    def load_command(self, from_disk: bool = True) -> Command:
        service = self.service

        def load_tasks():
            try:
                if from_disk:
                    service.load_tasks()
                tasks, tags = service.get_tasks()
                warnings = service.validation_warnings()
            except Exception as exc:
                return TasksLoadedMsg(error=exc)
            return TasksLoadedMsg(tuple(tasks), tuple(tags), tuple(warnings))

        return load_tasks

    def reload_wait_command(self) -> Optional[Command]:
        channel = self.service.reload_events()

        def wait_for_reload():
            _, ok = channel.receive()
            return TasksReloadedMsg() if ok else None

        return wait_for_reload

    # ------------------------------------------------------------------ workflows

    def begin_workflow(self, kind: WorkflowKind, work, *, title: str, label: str = "", scope=None) -> List[Command]:
        self._close_progress(kind)
        dialog = ProgressDialog(title, label)
        self.progress_dialogs[kind] = dialog
        self.dialogs.push(
            dialog,
            on_result=lambda result, k=kind: self.cancel_workflow(k) if result.action == DialogAction.CANCEL else [],
        )
        self.log(self._t("WORKFLOW_STARTED", operation=kind.label))
        return [self.workflows.start(kind, work, scope)]

    def cancel_workflow(self, kind: WorkflowKind) -> List[Command]:
        run = self.workflows.cancel(kind)
        if run is None:
            return []
        self.log(self._t("WORKFLOW_CANCELLING", operation=kind.label))
        self.set_status_message(self._t("WORKFLOW_CANCELLING", operation=kind.label))
        if run.held is not None:
            self._close_progress(kind)
            self._notify_cancelled(kind)
        return []

    def _close_progress(self, kind: WorkflowKind) -> None:
        dialog = self.progress_dialogs.pop(kind, None)
        if dialog is not None:
            self.dialogs.remove(dialog)

    def _notify_cancelled(self, kind: WorkflowKind) -> None:
        title = self._t("WORKFLOW_CANCELLED", operation=kind.label)
        self.log(title)
        self.notify(title, self._t("WORKFLOW_CANCELLED_BODY"), level="cancelled")

    # ------------------------------------------------------------------ persistence

    def save_ui_state(self) -> bool:
        if self.ui_store is None:
            return False
        return self.ui_store.save(snapshot_ui_state(self.state, self.last_document_path))

    def shutdown(self) -> None:
        self.workflows.shutdown()
        tui_undo.teardown_undo_session(self, discard=False)
        self.save_ui_state()
        stop = getattr(self.service, "stop_watcher", None)
        if callable(stop):
            stop()

    # ------------------------------------------------------------------ actions

    def handle_dialog_key(self, key: str) -> List[Command]:
        commands = self.dialogs.handle_key(key)
        self.force_render()
        return commands

    def begin_search(self) -> None:
        self.search_mode = True

    def search_key(self, key: str) -> None:
        """Edit the live search query; enter keeps it, escape clears it."""
        query = self.state.search_query
        if key == "enter":
            self.search_mode = False
            return
        if key == "escape":
            self.search_mode = False
            set_search_query(self.state, "")
            return
        if key == "backspace":
            query = query[:-1]
        elif key == "space":
            query += " "
        elif len(key) == 1 and key.isprintable():
            query += key
        else:
            return
        set_search_query(self.state, query)

    def action_cycle_filter(self) -> List[Command]:
        cycle_status_filter(self.state)
        return []

    def action_toggle_view(self) -> List[Command]:
        toggle_view_mode(self.state)
        return []

    def action_toggle_details(self) -> List[Command]:
        self.state.show_details_panel = not self.state.show_details_panel
        return []

    def action_toggle_log(self) -> List[Command]:
        self.state.show_log_panel = not self.state.show_log_panel
        return []

    def action_refresh(self) -> List[Command]:
        self.state.stale = False
        self.state.loading = True
        self.set_status_message(self._t("STATUS_REFRESHING"), ttl=2)
        return [self.load_command(from_disk=True)]

    def action_complexity(self) -> List[Command]:
        tui_complexity.open_scope_dialog(self)
        return []

    def action_import(self) -> List[Command]:
        tui_import.open_path_dialog(self)
        return []

    def action_expand(self) -> List[Command]:
        tui_expand.open_scope_dialog(self)
        return []

    def action_delete(self) -> List[Command]:
        return tui_delete.open_delete_workflow(self)

    def action_undo(self) -> List[Command]:
        return tui_undo.trigger_undo(self)

    def action_next_task(self) -> List[Command]:
        task = self.service.next_task()
        if task is None:
            self.set_status_message(self._t("STATUS_NO_NEXT_TASK"))
        elif select_by_id(self.state, task.id):
            self.set_status_message(self._t("STATUS_NEXT_TASK", task_id=task.id, title=task.title))
        return []

    def action_cycle_status(self) -> List[Command]:
        task = selected_task(self.state)
        if task is None:
            return []
        try:
            pos = STATUS_CYCLE.index(task.status)
        except ValueError:
            pos = -1
        new_status = STATUS_CYCLE[(pos + 1) % len(STATUS_CYCLE)]
        try:
            self.service.set_task_status(task.id, new_status)
        except AppError as exc:
            self.show_error(exc)
            return []
        self.log(self._t("STATUS_CHANGED", task_id=task.id, status=new_status.code))
        return [self.load_command(from_disk=False)]


# ---------------------------------------------------------------------- handlers


def _on_progress(tui: DashboardController, msg: ProgressMsg) -> List[Command]:
    if not tui.workflows.accept_progress(msg):
        return []
    dialog = tui.progress_dialogs.get(msg.kind)
    if dialog is not None:
        WORKFLOW_HOOKS[msg.kind].progress(tui, dialog, msg.state)
    return [tui.workflows.wait(msg.kind)]


def _on_completed(tui: DashboardController, msg: CompletedMsg) -> List[Command]:
    completed = tui.workflows.accept_completion(msg)
    if completed is None:
        return []
    kind = completed.kind
    if completed.outcome == Outcome.SUCCEEDED:
        run = tui.workflows.active(kind)
        if run.cancel_requested:
            tui.log(tui._t("WORKFLOW_CANCEL_TOO_LATE", operation=kind.label), "warning")
        dialog = tui.progress_dialogs.get(kind)
        if dialog is not None:
            dialog.update(1.0, label=tui._t("WORKFLOW_COMPLETE"), detail="")
            dialog.cancellable = False
        tui.scheduler.call_later(tui.workflows.hold_delay(run), tui.workflows.hold_message(completed))
        return []
    tui._close_progress(kind)
    if completed.outcome == Outcome.CANCELLED:
        tui._notify_cancelled(kind)
    else:
        tui.show_error(as_app_error(completed.error, tui._t("WORKFLOW_FAILED", operation=kind.label)))
    return []


def _on_stream_closed(tui: DashboardController, msg: StreamClosedMsg) -> List[Command]:
    run = tui.workflows.stream_closed(msg)
    if run is None:
        return []
    tui._close_progress(msg.kind)
    if run.cancel_requested:
        tui._notify_cancelled(msg.kind)
    else:
        tui.show_error(
            operation_error(
                tui._t("WORKFLOW_FAILED", operation=msg.kind.label),
                tui._t("WORKFLOW_NO_RESULT"),
            )
        )
    return []


def _on_hold_elapsed(tui: DashboardController, msg: HoldElapsedMsg) -> List[Command]:
    completed = tui.workflows.release(msg)
    if completed is None:
        return []
    tui._close_progress(msg.kind)
    tui.log(tui._t("WORKFLOW_DONE", operation=msg.kind.label), "success")
    return WORKFLOW_HOOKS[msg.kind].success(tui, completed.result)


def _on_tasks_loaded(tui: DashboardController, msg: TasksLoadedMsg) -> List[Command]:
    tui.state.loading = False
    if msg.error is not None:
        error = as_app_error(msg.error, tui._t("LOAD_FAILED"))
        tui.state.load_error = error
        tui.show_error(error)
        return []
    replace_tasks(tui.state, list(msg.tasks), list(msg.tags))
    if tui.pending_select_id:
        select_by_id(tui.state, tui.pending_select_id)
        tui.pending_select_id = ""
    for warning in msg.warnings:
        logger.warning("%s", warning)
    if msg.warnings:
        tui.log(tui._t("VALIDATION_WARNINGS", count=len(msg.warnings)), "warning")
    return []


def _on_tasks_reloaded(tui: DashboardController, msg: TasksReloadedMsg) -> List[Command]:
    tui.log(tui._t("STATUS_FILE_CHANGED"))
    tui.set_status_message(tui._t("STATUS_FILE_CHANGED"), ttl=3)
    return [tui.load_command(from_disk=False), tui.reload_wait_command()]


def _on_notification_timeout(tui: DashboardController, msg: NotificationTimeoutMsg) -> List[Command]:
    dialog = tui.dialogs.find_by_id(msg.dialog_id)
    if dialog is not None:
        tui.dialogs.remove(dialog)
    return []


def _on_undo_tick(tui: DashboardController, msg: UndoTickMsg) -> List[Command]:
    return tui_undo.handle_undo_tick(tui, msg)


def _on_undo_expired(tui: DashboardController, msg: UndoExpiredMsg) -> List[Command]:
    return tui_undo.handle_undo_expired(tui, msg)


def _on_undo_completed(tui: DashboardController, msg: UndoCompletedMsg) -> List[Command]:
    return tui_undo.handle_undo_completed(tui, msg)


def build_dispatch_table() -> Dict[type, Callable]:
    table = {
        ProgressMsg: _on_progress,
        CompletedMsg: _on_completed,
        StreamClosedMsg: _on_stream_closed,
        HoldElapsedMsg: _on_hold_elapsed,
        TasksLoadedMsg: _on_tasks_loaded,
        TasksReloadedMsg: _on_tasks_reloaded,
        UndoTickMsg: _on_undo_tick,
        UndoExpiredMsg: _on_undo_expired,
        UndoCompletedMsg: _on_undo_completed,
        NotificationTimeoutMsg: _on_notification_timeout,
    }
    missing = [t.__name__ for t in MESSAGE_TYPES if t not in table]
    if missing:
        raise RuntimeError(f"unhandled message types: {', '.join(missing)}")
    return table


__all__ = [
    "DashboardController",
    "NullScheduler",
    "WORKFLOW_HOOKS",
    "NOTIFICATION_DURATION",
    "build_dispatch_table",
]
