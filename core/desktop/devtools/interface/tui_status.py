"""Status bar builder for the task dashboard."""

import time
from typing import List, Tuple

from prompt_toolkit.formatted_text import FormattedText

from core.status import TaskStatus

from .constants import SPINNER_FRAMES
from .tui_display import display_width, trim_display

SPINNER_INTERVAL = 0.1


def spinner_frame(now: float) -> str:
    return SPINNER_FRAMES[int(now / SPINNER_INTERVAL) % len(SPINNER_FRAMES)]


def _counts(tui) -> Tuple[int, int, int, int]:
    total = done = active = pending = 0
    for task in tui.state.index:
        total += 1
        if task.status == TaskStatus.DONE:
            done += 1
        elif task.status == TaskStatus.IN_PROGRESS:
            active += 1
        elif task.status == TaskStatus.PENDING:
            pending += 1
    return total, done, active, pending


def filter_label(tui) -> str:
    status = tui.state.status_filter
    if status is None:
        return tui._t("FILTER_ALL")
    return f"{status.glyph} {status.code}"


def build_status_text(tui) -> FormattedText:
    state = tui.state
    now = time.time()
    total, done, active, pending = _counts(tui)
    parts: List[Tuple[str, str]] = [
        ("class:statusbar", f" {tui._t('STATUS_TASKS_COUNT', count=total)} "),
        ("class:statusbar.key", f"{done}"),
        ("class:statusbar", "✓ "),
        ("class:statusbar.key", f"{active}"),
        ("class:statusbar", "● "),
        ("class:statusbar.key", f"{pending}"),
        ("class:statusbar", "○ | "),
        ("class:statusbar", f"{tui._t('STATUS_FILTER')}: "),
        ("class:statusbar.key", filter_label(tui)),
        ("class:statusbar", f" | {tui._t('STATUS_VIEW_' + state.view_mode.name)}"),
    ]
    query = state.search_query.strip()
    if query or getattr(tui, "search_mode", False):
        cursor = "▏" if getattr(tui, "search_mode", False) else ""
        parts.append(("class:statusbar", " | ⌕ "))
        parts.append(("class:statusbar.key", f"{trim_display(query, 24, '…')}{cursor}"))
    if state.multi_selected:
        parts.append(("class:statusbar", f" | {tui._t('STATUS_MARKED', count=len(state.multi_selected))}"))
    runs = tui.workflows.runs()
    if runs or state.loading:
        labels = [kind.label for kind in runs] or [tui._t("STATUS_LOADING")]
        parts.append(("class:statusbar", " | "))
        parts.append(("class:statusbar.spinner", f"{spinner_frame(now)} {', '.join(labels)}"))
    if state.stale:
        parts.append(("class:statusbar", " | "))
        parts.append(("class:statusbar.stale", tui._t("STATUS_STALE")))
    if state.load_error is not None:
        parts.append(("class:statusbar", " | "))
        parts.append(("class:statusbar.stale", trim_display(state.load_error.title, 40, "…")))
    if tui.status_message and now < tui.status_message_expires:
        parts.append(("class:statusbar", " | "))
        parts.append(("class:statusbar.key", trim_display(tui.status_message, 80, "…")))
    elif tui.status_message:
        tui.status_message = ""
    used = sum(display_width(text) for _, text in parts)
    width = tui.get_terminal_width()
    if used < width:
        parts.append(("class:statusbar", " " * (width - used)))
    return FormattedText(parts)


__all__ = ["build_status_text", "filter_label", "spinner_frame"]
