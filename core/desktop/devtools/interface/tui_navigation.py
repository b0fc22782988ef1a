"""Cursor, expand/collapse and multi-select operations over DashboardState."""

import logging
from typing import List, Optional

from core.task import Task, ancestor_ids, parent_id

from .tui_projection import rebuild, visible_position

logger = logging.getLogger("task_dashboard.navigation")

DEFAULT_PAGE = 10


def select_index(state, index: int) -> None:
    """Move the cursor to index, clamped to the visible rows."""
    if not state.visible:
        state.cursor = -1
        return
    state.cursor = max(0, min(index, len(state.visible) - 1))
    state.selected_id = state.visible[state.cursor].id


def select_next(state) -> None:
    select_index(state, state.cursor + 1)


def select_previous(state) -> None:
    select_index(state, state.cursor - 1 if state.cursor > 0 else 0)


def page_down(state, page: int = DEFAULT_PAGE) -> None:
    select_index(state, state.cursor + max(1, page))


def page_up(state, page: int = DEFAULT_PAGE) -> None:
    select_index(state, state.cursor - max(1, page))


def select_first(state) -> None:
    select_index(state, 0)


def select_last(state) -> None:
    select_index(state, len(state.visible) - 1)


def select_by_id(state, task_id: str) -> bool:
    """Reveal task_id by expanding its ancestors, then move the cursor onto it."""
    if not task_id or task_id not in state.index:
        return False
    state.expanded_ids.update(ancestor_ids(task_id))
    rebuild(state)
    pos = visible_position(state, task_id)
    if pos < 0:
        return False
    state.cursor = pos
    state.selected_id = task_id
    return True


def selected_task(state) -> Optional[Task]:
    """Canonical task under the cursor.

    Falls back to the row object when the id no longer resolves and flags the
    view as stale so the status bar can ask for a refresh.
    """
    if state.cursor < 0 or not state.visible:
        return None
    task, found = state.index.resolve(state.selected_id)
    if found:
        return task
    if state.cursor < len(state.visible):
        if not state.stale:
            logger.warning("selected task %s is missing from the index; view is out of date", state.selected_id)
        state.stale = True
        return state.visible[state.cursor]
    return None


def _refind(state, task_id: str) -> None:
    rebuild(state)
    pos = visible_position(state, task_id)
    if pos >= 0:
        state.cursor = pos
        state.selected_id = task_id


def toggle_expand(state) -> bool:
    task = selected_task(state)
    if task is None or not task.subtasks:
        return False
    if task.id in state.expanded_ids:
        state.expanded_ids.discard(task.id)
    else:
        state.expanded_ids.add(task.id)
    _refind(state, task.id)
    return True


def expand(state) -> bool:
    task = selected_task(state)
    if task is None or not task.subtasks or task.id in state.expanded_ids:
        return False
    state.expanded_ids.add(task.id)
    _refind(state, task.id)
    return True


def collapse(state) -> bool:
    task = selected_task(state)
    if task is None or not task.subtasks or task.id not in state.expanded_ids:
        return False
    state.expanded_ids.discard(task.id)
    _refind(state, task.id)
    return True


def collapse_or_ascend(state) -> bool:
    """Collapse the selected node, or move to its parent when there is nothing to collapse."""
    if collapse(state):
        return True
    task = selected_task(state)
    if task is None:
        return False
    parent = parent_id(task.id)
    return bool(parent) and select_by_id(state, parent)


def expand_or_descend(state) -> bool:
    """Expand the selected node, or step onto its first child when already expanded."""
    if expand(state):
        return True
    task = selected_task(state)
    if task is None or not task.subtasks:
        return False
    return select_by_id(state, task.subtasks[0].id)


def expand_all(state) -> None:
    state.expanded_ids = {task.id for task in state.index if task.subtasks}
    _refind(state, state.selected_id)


def collapse_all(state) -> None:
    state.expanded_ids = set()
    rebuild(state)


def toggle_multi_select(state) -> bool:
    task = selected_task(state)
    if task is None:
        return False
    if task.id in state.multi_selected:
        state.multi_selected.discard(task.id)
    else:
        state.multi_selected.add(task.id)
    return True


def clear_multi_select(state) -> None:
    state.multi_selected = set()


def selected_tasks(state) -> List[Task]:
    """Multi-selection in tree order, or just the cursor task when nothing is marked."""
    if state.multi_selected:
        return [task for task in state.index if task.id in state.multi_selected]
    task = selected_task(state)
    return [task] if task is not None else []


__all__ = [
    "DEFAULT_PAGE",
    "select_index",
    "select_next",
    "select_previous",
    "page_down",
    "page_up",
    "select_first",
    "select_last",
    "select_by_id",
    "selected_task",
    "toggle_expand",
    "expand",
    "collapse",
    "collapse_or_ascend",
    "expand_or_descend",
    "expand_all",
    "collapse_all",
    "toggle_multi_select",
    "clear_multi_select",
    "selected_tasks",
]
