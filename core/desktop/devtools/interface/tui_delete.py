"""Delete workflow: Confirm → Options → ImpactReview → Execute.

The impact review is a read-only analysis run on the UI thread; only Execute
goes to the background. A blocked review can only lead back to Options.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from application.deletion import DeleteImpact, DeleteOptions, DeleteResult
from core.errors import AppError

from .tui_dialogs import (
    Button,
    CheckboxField,
    ConfirmDialog,
    DialogAction,
    DialogResult,
    FormDialog,
    ProgressDialog,
)
from .tui_messages import Command, WorkflowKind
from .tui_navigation import clear_multi_select, selected_tasks
from .tui_undo import start_undo_session
from .tui_workflows import Committed

KIND = WorkflowKind.DELETE


class DeleteStage(Enum):
    CONFIRM = "confirm"
    OPTIONS = "options"
    IMPACT_REVIEW = "impact_review"
    EXECUTE = "execute"
    CLOSED = "closed"


@dataclass
class DeleteFlow:
    task_ids: List[str]
    options: DeleteOptions = field(default_factory=DeleteOptions)
    stage: DeleteStage = DeleteStage.CONFIRM
    impact: Optional[DeleteImpact] = None

    def after_confirm(self, result: DialogResult) -> DeleteStage:
        self.stage = DeleteStage.OPTIONS if result.action == DialogAction.CONFIRM else DeleteStage.CLOSED
        return self.stage

    def after_options(self, result: DialogResult) -> DeleteStage:
        if result.action != DialogAction.CONFIRM:
            self.stage = DeleteStage.CLOSED
            return self.stage
        values = result.value or {}
        self.options = DeleteOptions(recursive=bool(values.get("recursive")), force=bool(values.get("force")))
        self.impact = None
        self.stage = DeleteStage.IMPACT_REVIEW
        return self.stage

    def after_review(self, result: DialogResult) -> DeleteStage:
        if result.action != DialogAction.CONFIRM:
            self.stage = DeleteStage.CLOSED
        elif self.impact is None or self.impact.blocked or result.button == "adjust":
            self.stage = DeleteStage.OPTIONS
        else:
            self.stage = DeleteStage.EXECUTE
        return self.stage


def open_delete_workflow(tui) -> List[Command]:
    targets = selected_tasks(tui.state)
    if not targets:
        tui.set_status_message(tui._t("DELETE_NOTHING"))
        return []
    flow = DeleteFlow([task.id for task in targets])
    _show_confirm(tui, flow)
    return []


def _advance(tui, flow: DeleteFlow, stage: DeleteStage) -> List[Command]:
    if stage == DeleteStage.OPTIONS:
        _show_options(tui, flow)
    elif stage == DeleteStage.IMPACT_REVIEW:
        _show_review(tui, flow)
    elif stage == DeleteStage.EXECUTE:
        return execute(tui, flow)
    return []


def _show_confirm(tui, flow: DeleteFlow) -> None:
    dialog = ConfirmDialog(
        tui._t("DELETE_TITLE"),
        [tui._t("DELETE_CONFIRM", count=len(flow.task_ids))],
        [
            Button(tui._t("BTN_CONTINUE"), DialogAction.CONFIRM, "continue"),
            Button(tui._t("BTN_CANCEL"), DialogAction.CANCEL, "cancel"),
        ],
    )
    tui.dialogs.push(dialog, on_result=lambda result: _advance(tui, flow, flow.after_confirm(result)))


def _show_options(tui, flow: DeleteFlow) -> None:
    dialog = FormDialog(
        tui._t("DELETE_OPTIONS_TITLE"),
        [
            CheckboxField("recursive", tui._t("DELETE_RECURSIVE"), flow.options.recursive),
            CheckboxField("force", tui._t("DELETE_FORCE"), flow.options.force),
        ],
        buttons=[
            Button(tui._t("BTN_REVIEW_IMPACT"), DialogAction.CONFIRM, "review"),
            Button(tui._t("BTN_CANCEL"), DialogAction.CANCEL, "cancel"),
        ],
    )
    tui.dialogs.push(dialog, on_result=lambda result: _advance(tui, flow, flow.after_options(result)))


def review_lines(tui, impact: DeleteImpact) -> List[str]:
    lines = [tui._t("DELETE_TOTAL", count=impact.total_delete_count)]
    if impact.blocked:
        lines.append(tui._t("DELETE_BLOCKING", reason=impact.blocking_reason))
    lines.extend(f"- {warning}" for warning in impact.warnings)
    return lines


def _show_review(tui, flow: DeleteFlow) -> None:
    try:
        flow.impact = tui.service.analyze_delete_impact(flow.task_ids, flow.options)
    except AppError as exc:
        flow.stage = DeleteStage.CLOSED
        tui.show_error(exc)
        return
    if flow.impact.blocked:
        buttons = [
            Button(tui._t("BTN_ADJUST_OPTIONS"), DialogAction.CONFIRM, "adjust"),
            Button(tui._t("BTN_CANCEL"), DialogAction.CANCEL, "cancel"),
        ]
    else:
        buttons = [
            Button(tui._t("BTN_DELETE"), DialogAction.CONFIRM, "delete"),
            Button(tui._t("BTN_CANCEL"), DialogAction.CANCEL, "cancel"),
        ]
    dialog = ConfirmDialog(tui._t("DELETE_REVIEW_TITLE"), review_lines(tui, flow.impact), buttons)
    tui.dialogs.push(dialog, on_result=lambda result: _advance(tui, flow, flow.after_review(result)))


def execute(tui, flow: DeleteFlow) -> List[Command]:
    service = tui.service
    task_ids = list(flow.task_ids)
    options = flow.options

    def work(cancel, on_progress):
        on_progress(0.1)
        return Committed(service.delete_tasks(cancel, task_ids, options))

    return tui.begin_workflow(
        KIND,
        work,
        title=tui._t("DELETE_PROGRESS_TITLE"),
        label=tui._t("DELETE_PROGRESS", count=len(task_ids)),
        scope=flow,
    )


def handle_progress(tui, dialog: ProgressDialog, fraction: float) -> None:
    dialog.update(fraction)


def handle_success(tui, result: DeleteResult) -> List[Command]:
    for warning in result.warnings:
        tui.log(warning, "warning")
    tui.log(tui._t("DELETE_DONE", count=result.deleted_count), "success")
    clear_multi_select(tui.state)
    if result.undo_token is not None:
        start_undo_session(tui, result.undo_token)
    else:
        tui.set_status_message(tui._t("DELETE_DONE", count=result.deleted_count))
    return [tui.load_command(from_disk=False)]


__all__ = [
    "KIND",
    "DeleteStage",
    "DeleteFlow",
    "open_delete_workflow",
    "review_lines",
    "execute",
    "handle_progress",
    "handle_success",
]
