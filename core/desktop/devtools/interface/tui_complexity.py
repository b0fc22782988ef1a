"""Complexity analysis workflow: scope form, progress, report list."""

import re
from typing import Any, Dict, List, Optional, Sequence

from core.complexity import ComplexityLevel, ComplexityProgress, ComplexityReport
from core.errors import AppError

from .tui_dialogs import (
    Button,
    CheckboxField,
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
from .tui_navigation import select_by_id, selected_task
from .tui_workflows import Committed

KIND = WorkflowKind.COMPLEXITY


def parse_tags(raw: str) -> List[str]:
    tags: List[str] = []
    for part in re.split(r"[,\s]+", raw or ""):
        part = part.strip()
        if part and part not in tags:
            tags.append(part)
    return tags


def _validate_scope(tui, values: Dict[str, Any]) -> str:
    scope = values.get("scope")
    if scope == "selected" and selected_task(tui.state) is None:
        return tui._t("COMPLEXITY_NEED_SELECTION")
    if scope == "tag" and not parse_tags(values.get("tags", "")):
        return tui._t("COMPLEXITY_NEED_TAGS")
    return ""


def open_scope_dialog(tui) -> None:
    dialog = FormDialog(
        tui._t("COMPLEXITY_TITLE"),
        [
            RadioField(
                "scope",
                tui._t("COMPLEXITY_SCOPE"),
                [
                    ("all", tui._t("COMPLEXITY_SCOPE_ALL")),
                    ("selected", tui._t("COMPLEXITY_SCOPE_SELECTED")),
                    ("tag", tui._t("COMPLEXITY_SCOPE_TAG")),
                ],
            ),
            TextField("tags", tui._t("COMPLEXITY_TAGS"), ", ".join(tui.state.tags[:1])),
        ],
        buttons=[
            Button(tui._t("BTN_ANALYZE"), DialogAction.CONFIRM, "analyze"),
            Button(tui._t("BTN_CANCEL"), DialogAction.CANCEL, "cancel"),
        ],
        validate=lambda values: _validate_scope(tui, values),
    )
    tui.dialogs.push(dialog, on_result=lambda result: _on_scope_result(tui, result))


def _on_scope_result(tui, result: DialogResult) -> List[Command]:
    if result.action != DialogAction.CONFIRM:
        return []
    values = result.value or {}
    return start_analysis(tui, values.get("scope", "all"), parse_tags(values.get("tags", "")))


def start_analysis(tui, scope: str, tags: List[str]) -> List[Command]:
    task = selected_task(tui.state)
    task_id = task.id if (task is not None and scope == "selected") else ""
    tags = tags if scope == "tag" else []
    service = tui.service

    def work(cancel, on_progress):
        return Committed(service.analyze_complexity_with_progress(cancel, scope, task_id, tags, on_progress))

    return tui.begin_workflow(
        KIND,
        work,
        title=tui._t("COMPLEXITY_PROGRESS_TITLE"),
        label=tui._t("COMPLEXITY_PREPARING"),
        scope=scope,
    )


def handle_progress(tui, dialog: ProgressDialog, progress: ComplexityProgress) -> None:
    detail = tui._t("COMPLEXITY_CURRENT", task_id=progress.current_task_id) if progress.current_task_id else ""
    dialog.update(
        progress.fraction,
        label=tui._t("COMPLEXITY_PROGRESS", analyzed=progress.analyzed, total=progress.total),
        detail=detail,
    )


def report_rows(report: ComplexityReport) -> List[ListRow]:
    return [
        ListRow(
            value=item.task_id,
            text=f"{item.task_id:<8} {item.level.label:<10} {item.score:>4}  {item.title}",
            style=f"class:{item.level.style}",
        )
        for item in report.tasks
    ]


def _active_levels(levels: Optional[Sequence[ComplexityLevel]]) -> List[ComplexityLevel]:
    """Selected levels in display order; an empty or complete selection means no filter."""
    wanted = set(levels or ())
    chosen = [level for level in ComplexityLevel if level in wanted]
    return [] if len(chosen) == len(ComplexityLevel) else chosen


def show_report(tui, report: ComplexityReport, levels: Optional[Sequence[ComplexityLevel]] = None) -> ListDialog:
    levels = _active_levels(levels)
    shown = report.filter_by_level(levels)
    header = [report.summary()]
    if levels:
        header.append(
            tui._t(
                "COMPLEXITY_FILTERED",
                shown=len(shown.tasks),
                total=len(report.tasks),
                levels=", ".join(level.label for level in levels),
            )
        )
    dialog = ListDialog(
        tui._t("COMPLEXITY_REPORT_TITLE"),
        report_rows(shown),
        header=header + [""],
        shortcuts={"f": "filter", "e": "export-json", "c": "export-csv"},
        hint=tui._t("COMPLEXITY_REPORT_HINT"),
    )
    tui.dialogs.push(dialog, on_result=lambda result: _on_report_result(tui, report, levels, result))
    return dialog


def open_level_filter(tui, report: ComplexityReport, levels: Sequence[ComplexityLevel] = ()) -> FormDialog:
    current = set(levels) or set(ComplexityLevel)
    dialog = FormDialog(
        tui._t("COMPLEXITY_FILTER_TITLE"),
        [CheckboxField(level.code, level.label, level in current) for level in ComplexityLevel],
        buttons=[
            Button(tui._t("BTN_APPLY"), DialogAction.CONFIRM, "apply"),
            Button(tui._t("BTN_CANCEL"), DialogAction.CANCEL, "cancel"),
        ],
        validate=lambda values: "" if any(values.values()) else tui._t("COMPLEXITY_FILTER_NONE"),
    )
    tui.dialogs.push(dialog, on_result=lambda result: _on_filter_result(tui, report, levels, result))
    return dialog


def _on_filter_result(
    tui, report: ComplexityReport, levels: Sequence[ComplexityLevel], result: DialogResult
) -> List[Command]:
    if result.action == DialogAction.CONFIRM:
        levels = [level for level in ComplexityLevel if result.value.get(level.code)]
    show_report(tui, report, levels)
    return []


def _on_report_result(
    tui, report: ComplexityReport, levels: Sequence[ComplexityLevel], result: DialogResult
) -> List[Command]:
    if result.action != DialogAction.CONFIRM:
        return []
    if result.button == "filter":
        open_level_filter(tui, report, levels)
        return []
    if result.button.startswith("export"):
        fmt = result.button.split("-", 1)[1]
        show_report(tui, report, levels)
        try:
            path = tui.service.export_complexity_report(fmt)
        except AppError as exc:
            tui.show_error(exc)
            return []
        tui.log(tui._t("COMPLEXITY_EXPORTED", path=path), "success")
        tui.notify(tui._t("COMPLEXITY_REPORT_TITLE"), tui._t("COMPLEXITY_EXPORTED", path=path), "success")
        return []
    if not select_by_id(tui.state, result.value):
        tui.set_status_message(tui._t("STATUS_TASK_NOT_FOUND", task_id=result.value))
    return []


def handle_success(tui, report: ComplexityReport) -> List[Command]:
    tui.log(report.summary(), "success")
    if not report.tasks:
        tui.notify(tui._t("COMPLEXITY_TITLE"), tui._t("COMPLEXITY_EMPTY"))
        return []
    show_report(tui, report)
    return [tui.load_command(from_disk=False)]


__all__ = [
    "KIND",
    "parse_tags",
    "open_scope_dialog",
    "start_analysis",
    "handle_progress",
    "report_rows",
    "show_report",
    "open_level_filter",
    "handle_success",
]
