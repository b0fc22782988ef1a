"""Rendering helpers for the dashboard to keep the app class slim."""

import time
from typing import List, Optional, Tuple

from prompt_toolkit.formatted_text import FormattedText

from core.task import Task

from .constants import LOG_TIME_FORMAT
from .tui_display import display_width, pad_display, trim_display, wrap_display
from .tui_navigation import selected_task
from .tui_projection import ViewMode, visible_child_count

Fragments = List[Tuple[str, str]]

MIN_TITLE_WIDTH = 12


def scroll_offset(cursor: int, offset: int, height: int, count: int) -> int:
    """Smallest viewport move that keeps the cursor row on screen."""
    if height <= 0 or count <= 0:
        return 0
    offset = max(0, min(offset, max(0, count - height)))
    if cursor < 0:
        return offset
    if cursor < offset:
        return cursor
    if cursor >= offset + height:
        return cursor - height + 1
    return offset


def _merge_style(selected_style: Optional[str], fragment_style: str) -> str:
    if not selected_style:
        return fragment_style
    return f"{fragment_style} {selected_style}".strip()


def _tree_prefix(task: Task, mode: ViewMode, expanded: bool, children: int) -> str:
    if mode != ViewMode.TREE:
        return ""
    indent = "  " * task.depth
    if children:
        return f"{indent}{'▾' if expanded else '▸'} "
    return f"{indent}  "


def _task_row(tui, task: Task, width: int, selected: bool) -> Fragments:
    state = tui.state
    sel = "class:selected" if selected else None
    mark = "◆" if task.id in state.multi_selected else " "
    # filtered views show every kept child
    expanded = task.id in state.expanded_ids or bool(state.visible_children)
    prefix = _tree_prefix(task, state.view_mode, expanded, visible_child_count(state, task))
    meta_parts = []
    if task.priority:
        meta_parts.append(task.priority)
    if task.complexity:
        meta_parts.append(f"C{task.complexity}")
    if task.dependencies:
        meta_parts.append(f"→{','.join(task.dependencies)}")
    meta = " ".join(meta_parts)
    head = f"{mark}{prefix}{task.status.glyph} {task.id} "
    title_width = max(MIN_TITLE_WIDTH, width - display_width(head) - display_width(meta) - 1)
    title = pad_display(trim_display(task.title, title_width, "…"), title_width)
    priority_style = f"class:priority.{task.priority}" if task.priority else "class:text.dim"
    return [
        (_merge_style(sel, "class:marked"), mark),
        (_merge_style(sel, "class:tree.guide"), prefix),
        (_merge_style(sel, f"class:{task.status.style}"), f"{task.status.glyph} "),
        (_merge_style(sel, "class:text.dim"), f"{task.id} "),
        (_merge_style(sel, "class:text"), title),
        (_merge_style(sel, priority_style), f" {meta}" if meta else " "),
        ("", "\n"),
    ]


def render_task_list(tui, height: int, width: int) -> FormattedText:
    state = tui.state
    if state.loading and not state.tasks:
        return FormattedText([("class:text.dim", tui._t("STATUS_LOADING"))])
    if not state.visible:
        key = "STATUS_NO_MATCHES" if state.tasks else "STATUS_NO_TASKS"
        return FormattedText([("class:text.dim", tui._t(key))])
    tui.list_offset = scroll_offset(state.cursor, tui.list_offset, height, len(state.visible))
    window = state.visible[tui.list_offset:tui.list_offset + max(1, height)]
    parts: Fragments = []
    for pos, task in enumerate(window, start=tui.list_offset):
        parts.extend(_task_row(tui, task, width, pos == state.cursor))
    return FormattedText(parts)


def _section(parts: Fragments, label: str, text: str, width: int) -> None:
    if not text:
        return
    parts.append(("class:header", f"\n{label}\n"))
    for line in wrap_display(text, width):
        parts.append(("class:text", f"{line}\n"))


def render_details(tui, width: int) -> FormattedText:
    task = selected_task(tui.state)
    if task is None:
        return FormattedText([("class:text.dim", tui._t("DETAIL_NONE"))])
    width = max(10, width)
    parts: Fragments = [
        ("class:header", trim_display(f"{task.id} {task.title}", width, "…")),
        ("", "\n"),
        ("class:text.dim", f"{tui._t('DETAIL_STATUS')}: "),
        (f"class:{task.status.style}", f"{task.status.glyph} {task.status.code}\n"),
    ]
    meta = [
        (tui._t("DETAIL_PRIORITY"), task.priority),
        (tui._t("DETAIL_COMPLEXITY"), str(task.complexity) if task.complexity else ""),
        (tui._t("DETAIL_DEPENDENCIES"), ", ".join(task.dependencies)),
        (tui._t("DETAIL_TAGS"), ", ".join(task.tags)),
        (tui._t("DETAIL_SUBTASKS"), str(len(task.subtasks)) if task.subtasks else ""),
    ]
    for label, value in meta:
        if value:
            parts.append(("class:text.dim", f"{label}: "))
            parts.append(("class:text", f"{value}\n"))
    _section(parts, tui._t("DETAIL_DESCRIPTION"), task.description, width)
    _section(parts, tui._t("DETAIL_DETAILS"), task.details, width)
    _section(parts, tui._t("DETAIL_TEST_STRATEGY"), task.test_strategy, width)
    return FormattedText(parts)


def render_log(tui, height: int) -> FormattedText:
    entries = list(tui.state.activity)[-max(1, height):]
    parts: Fragments = []
    for ts, level, message in entries:
        parts.append(("class:log.time", time.strftime(LOG_TIME_FORMAT, time.localtime(ts)) + " "))
        parts.append((f"class:log.{level}", f"{message}\n"))
    if not parts:
        parts.append(("class:text.dim", tui._t("LOG_EMPTY")))
    return FormattedText(parts)


def render_dialog(tui) -> FormattedText:
    top = tui.dialogs.top
    if top is None:
        return FormattedText([])
    return top.render()


__all__ = [
    "scroll_offset",
    "render_task_list",
    "render_details",
    "render_log",
    "render_dialog",
]
