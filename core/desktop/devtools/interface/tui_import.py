"""Document import workflow: path form → options form → progress → results."""

from typing import List

from application.task_service import ImportProgress, ImportResult

from .tui_dialogs import (
    Button,
    DialogAction,
    DialogResult,
    FormDialog,
    ListDialog,
    ListRow,
    ProgressDialog,
    RadioField,
    TextField,
)
from .tui_messages import Command, WorkflowKind
from .tui_navigation import select_by_id
from .tui_workflows import Committed

KIND = WorkflowKind.IMPORT


def open_path_dialog(tui, path: str = "") -> None:
    dialog = FormDialog(
        tui._t("IMPORT_TITLE"),
        [TextField("path", tui._t("IMPORT_PATH"), path or tui.last_document_path)],
        lines=[tui._t("IMPORT_PATH_HINT")],
        buttons=[
            Button(tui._t("BTN_NEXT"), DialogAction.CONFIRM, "next"),
            Button(tui._t("BTN_CANCEL"), DialogAction.CANCEL, "cancel"),
        ],
        validate=lambda values: "" if values["path"].strip() else tui._t("IMPORT_PATH_REQUIRED"),
    )
    tui.dialogs.push(dialog, on_result=lambda result: _on_path_result(tui, result))


def _on_path_result(tui, result: DialogResult) -> List[Command]:
    if result.action == DialogAction.CONFIRM:
        open_options_dialog(tui, result.value["path"].strip())
    return []


def open_options_dialog(tui, path: str) -> None:
    dialog = FormDialog(
        tui._t("IMPORT_OPTIONS_TITLE"),
        [
            RadioField(
                "mode",
                tui._t("IMPORT_MODE"),
                [("append", tui._t("IMPORT_MODE_APPEND")), ("replace", tui._t("IMPORT_MODE_REPLACE"))],
            )
        ],
        lines=[tui._t("IMPORT_SOURCE", path=path)],
        buttons=[
            Button(tui._t("BTN_IMPORT"), DialogAction.CONFIRM, "import"),
            Button(tui._t("BTN_BACK"), DialogAction.CANCEL, "back"),
            Button(tui._t("BTN_CANCEL"), DialogAction.CANCEL, "cancel"),
        ],
    )
    tui.dialogs.push(dialog, on_result=lambda result: _on_options_result(tui, path, result))


def _on_options_result(tui, path: str, result: DialogResult) -> List[Command]:
    if result.action == DialogAction.CONFIRM:
        return start_import(tui, path, result.value["mode"])
    if result.button == "back":
        open_path_dialog(tui, path)
    return []


def start_import(tui, path: str, mode: str) -> List[Command]:
    service = tui.service

    def work(cancel, on_progress):
        return Committed(service.parse_document_with_progress(cancel, path, mode, on_progress))

    return tui.begin_workflow(
        KIND,
        work,
        title=tui._t("IMPORT_PROGRESS_TITLE"),
        label=tui._t("IMPORT_STARTING"),
        scope=mode,
    )


def handle_progress(tui, dialog: ProgressDialog, progress: ImportProgress) -> None:
    dialog.update(progress.fraction, label=progress.message or progress.stage.capitalize())


def result_rows(result: ImportResult) -> List[ListRow]:
    rows: List[ListRow] = []
    for task_id, summary in zip(result.task_ids, result.summaries):
        text = f"{task_id:<6} {summary.title}"
        if summary.subtask_count:
            text += f" ({summary.subtask_count} subtasks)"
        if summary.description:
            text += f" · {summary.description}"
        rows.append(ListRow(value=task_id, text=text))
    return rows


def handle_success(tui, result: ImportResult) -> List[Command]:
    tui.last_document_path = result.path
    tui.save_ui_state()
    message = tui._t("IMPORT_DONE", count=len(result.task_ids), path=result.path)
    tui.log(message, "success")
    dialog = ListDialog(
        tui._t("IMPORT_RESULTS_TITLE"),
        result_rows(result),
        header=[message, ""],
        hint=tui._t("LIST_HINT"),
    )
    tui.dialogs.push(dialog, on_result=lambda res: _on_results_result(tui, res))
    return [tui.load_command(from_disk=False)]


def _on_results_result(tui, result: DialogResult) -> List[Command]:
    if result.action == DialogAction.CONFIRM and result.value:
        if not select_by_id(tui.state, result.value):
            tui.set_status_message(tui._t("STATUS_TASK_NOT_FOUND", task_id=result.value))
    return []


__all__ = [
    "KIND",
    "open_path_dialog",
    "open_options_dialog",
    "start_import",
    "handle_progress",
    "result_rows",
    "handle_success",
]
