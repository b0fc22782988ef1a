"""Task expansion workflow: scope form, draft preview, progress, summary notification."""

from typing import Any, Dict, List, Tuple

from application.task_service import ExpandResult
from core.expansion import ExpandOptions, ExpandProgress, count_drafts, expand_task_drafts, format_drafts_as_prompt
from core.status import TaskStatus

from .tui_dialogs import (
    Button,
    CheckboxField,
    DialogAction,
    DialogResult,
    FormDialog,
    ListDialog,
    ListRow,
    NumberField,
    ProgressDialog,
    RadioField,
)
from .tui_messages import Command, WorkflowKind
from .tui_navigation import selected_tasks
from .tui_workflows import Committed

KIND = WorkflowKind.EXPAND
MAX_DEPTH = 3
MAX_SUBTASKS = 20


def resolve_targets(state, scope: str, force: bool) -> List[str]:
    """Ids to expand; pending scope skips tasks that already have subtasks unless forced."""
    if scope == "pending":
        return [
            task.id
            for task in state.index
            if task.status == TaskStatus.PENDING and (force or not task.subtasks)
        ]
    return [task.id for task in selected_tasks(state)]


def _validate(tui, values: Dict[str, Any]) -> str:
    if not resolve_targets(tui.state, values["scope"], bool(values["force"])):
        return tui._t("EXPAND_NOTHING")
    return ""


def open_scope_dialog(tui) -> None:
    count = len(selected_tasks(tui.state))
    dialog = FormDialog(
        tui._t("EXPAND_TITLE"),
        [
            RadioField(
                "scope",
                tui._t("EXPAND_SCOPE"),
                [
                    ("selected", tui._t("EXPAND_SCOPE_SELECTED", count=count)),
                    ("pending", tui._t("EXPAND_SCOPE_PENDING")),
                ],
            ),
            NumberField("depth", tui._t("EXPAND_DEPTH"), 1, minimum=1, maximum=MAX_DEPTH),
            NumberField("count", tui._t("EXPAND_COUNT"), 0, minimum=0, maximum=MAX_SUBTASKS),
            CheckboxField("force", tui._t("EXPAND_FORCE")),
        ],
        buttons=[
            Button(tui._t("BTN_EXPAND"), DialogAction.CONFIRM, "expand"),
            Button(tui._t("BTN_CANCEL"), DialogAction.CANCEL, "cancel"),
        ],
        validate=lambda values: _validate(tui, values),
    )
    tui.dialogs.push(dialog, on_result=lambda result: _on_scope_result(tui, result))


def _on_scope_result(tui, result: DialogResult) -> List[Command]:
    if result.action != DialogAction.CONFIRM:
        return []
    values = result.value
    options = ExpandOptions(depth=int(values["depth"]), num_subtasks=int(values["count"]), force=bool(values["force"]))
    show_preview(tui, resolve_targets(tui.state, values["scope"], options.force), options)
    return []


def preview_rows(tui, task_ids: List[str], options: ExpandOptions) -> Tuple[List[ListRow], int]:
    """Draft outline per target and the number of subtasks it would create."""
    rows: List[ListRow] = []
    total = 0
    for task_id in task_ids:
        task = tui.state.index.get(task_id)
        if task is None:
            continue
        drafts = expand_task_drafts(task, options)
        total += count_drafts(drafts)
        rows.append(ListRow(value=task_id, text=f"{task_id} {task.title}", style="class:header"))
        for line in format_drafts_as_prompt(drafts).split("\n"):
            rows.append(ListRow(value=task_id, text=f"  {line}", style="class:text.dim"))
    return rows, total


def show_preview(tui, task_ids: List[str], options: ExpandOptions) -> ListDialog:
    rows, total = preview_rows(tui, task_ids, options)
    dialog = ListDialog(
        tui._t("EXPAND_PREVIEW_TITLE"),
        rows,
        header=[tui._t("EXPAND_PREVIEW_SUMMARY", subtasks=total, tasks=len(task_ids)), ""],
        shortcuts={"c": "continue", "с": "continue"},
        hint=tui._t("EXPAND_PREVIEW_HINT"),
    )
    tui.dialogs.push(dialog, on_result=lambda result: _on_preview_result(tui, task_ids, options, result))
    return dialog


def _on_preview_result(tui, task_ids: List[str], options: ExpandOptions, result: DialogResult) -> List[Command]:
    if result.action != DialogAction.CONFIRM:
        return []
    return start_expand(tui, task_ids, options)


def start_expand(tui, task_ids: List[str], options: ExpandOptions) -> List[Command]:
    service = tui.service

    def work(cancel, on_progress):
        return Committed(service.expand_with_progress(cancel, task_ids, options, on_progress))

    return tui.begin_workflow(
        KIND,
        work,
        title=tui._t("EXPAND_PROGRESS_TITLE"),
        label=tui._t("EXPAND_PREPARING", count=len(task_ids)),
        scope=list(task_ids),
    )


def handle_progress(tui, dialog: ProgressDialog, progress: ExpandProgress) -> None:
    if progress.task_id:
        label = tui._t("EXPAND_PROGRESS", task_id=progress.task_id)
    else:
        label = progress.stage.capitalize()
    dialog.update(progress.fraction, label=label)


def handle_success(tui, result: ExpandResult) -> List[Command]:
    for warning in result.warnings:
        tui.log(warning, "warning")
    if not result.expanded_ids:
        detail = result.warnings[0] if result.warnings else ""
        tui.notify(tui._t("EXPAND_TITLE"), "\n".join(filter(None, [tui._t("EXPAND_NONE"), detail])), "warning")
        return []
    tui.state.expanded_ids.update(result.expanded_ids)
    message = tui._t("EXPAND_DONE", tasks=len(result.expanded_ids), subtasks=len(result.created_ids))
    tui.log(message, "success")
    tui.notify(tui._t("EXPAND_TITLE"), message, "success")
    return [tui.load_command(from_disk=False)]


__all__ = [
    "KIND",
    "resolve_targets",
    "open_scope_dialog",
    "preview_rows",
    "show_preview",
    "start_expand",
    "handle_progress",
    "handle_success",
]
