"""Visible-row projection of the task tree.

``project`` turns the canonical tree into the flat list the task pane shows.
Rows are always canonical task objects looked up through the index, so the
cursor can be re-found by id after every rebuild.
"""

import dataclasses
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from core.status import TaskStatus, next_status_filter
from core.task import Task, ancestor_ids
from core.task_index import TaskIndex


class ViewMode(Enum):
    TREE = "tree"
    LIST = "list"

    @classmethod
    def from_string(cls, value: str) -> "ViewMode":
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.TREE


def matches_search(task: Task, query: str) -> bool:
    needle = (query or "").strip().lower()
    if not needle:
        return True
    return needle in task.id.lower() or needle in task.title.lower() or needle in task.description.lower()


def _matches(task: Task, status_filter: Optional[TaskStatus], query: str) -> bool:
    if status_filter is not None and task.status != status_filter:
        return False
    return matches_search(task, query)


def filter_tree(tasks: Iterable[Task], status_filter: Optional[TaskStatus] = None, query: str = "") -> List[Task]:
    """Keep tasks that match or have a matching descendant.

    Kept tasks are shallow copies whose subtasks hold only the kept children.
    """
    kept: List[Task] = []
    for task in tasks:
        children = filter_tree(task.subtasks, status_filter, query)
        if children or _matches(task, status_filter, query):
            kept.append(dataclasses.replace(task, subtasks=children))
    return kept


def flatten(tasks: Iterable[Task], mode: ViewMode, expanded_ids: Set[str], expand_everything: bool = False) -> List[Task]:
    rows: List[Task] = []
    for task in tasks:
        rows.append(task)
        if mode == ViewMode.LIST or expand_everything or task.id in expanded_ids:
            rows.extend(flatten(task.subtasks, mode, expanded_ids, expand_everything))
    return rows


def _is_filtering(status_filter: Optional[TaskStatus], search_query: str) -> bool:
    return status_filter is not None or bool((search_query or "").strip())


def _rows(
    roots: List[Task], mode: ViewMode, expanded_ids: Set[str], filtering: bool, index: Optional[TaskIndex]
) -> List[Task]:
    rows = flatten(roots, mode, expanded_ids, expand_everything=filtering)
    if index is None:
        return rows
    return [index.get(row.id) or row for row in rows]


def project(
    tasks: List[Task],
    mode: ViewMode,
    expanded_ids: Set[str],
    status_filter: Optional[TaskStatus] = None,
    search_query: str = "",
    index: Optional[TaskIndex] = None,
) -> List[Task]:
    filtering = _is_filtering(status_filter, search_query)
    roots = filter_tree(tasks, status_filter, search_query) if filtering else tasks
    return _rows(roots, mode, expanded_ids, filtering, index)


def count_children(tasks: Iterable[Task]) -> Dict[str, int]:
    """Direct child count per id over a (possibly filtered) tree."""
    counts: Dict[str, int] = {}
    for task in tasks:
        counts[task.id] = len(task.subtasks)
        counts.update(count_children(task.subtasks))
    return counts


def visible_child_count(state, task: Task) -> int:
    """Children the task pane can show under task; a filtered view counts only kept children."""
    return state.visible_children.get(task.id, len(task.subtasks))


def visible_position(state, task_id: str) -> int:
    for pos, task in enumerate(state.visible):
        if task.id == task_id:
            return pos
    return -1


def clamp_cursor(state) -> None:
    """Keep the cursor on the selected id when it is still visible, else clamp by position."""
    if not state.visible:
        state.cursor = -1
        return
    if state.selected_id:
        pos = visible_position(state, state.selected_id)
        if pos < 0:
            for ancestor in reversed(ancestor_ids(state.selected_id)):
                pos = visible_position(state, ancestor)
                if pos >= 0:
                    break
        if pos >= 0:
            state.cursor = pos
            state.selected_id = state.visible[pos].id
            return
    if state.cursor < 0:
        state.cursor = 0
    state.cursor = min(state.cursor, len(state.visible) - 1)
    state.selected_id = state.visible[state.cursor].id


def rebuild(state) -> List[Task]:
    filtering = _is_filtering(state.status_filter, state.search_query)
    roots = filter_tree(state.tasks, state.status_filter, state.search_query) if filtering else state.tasks
    state.visible = _rows(roots, state.view_mode, state.expanded_ids, filtering, state.index)
    state.visible_children = count_children(roots) if filtering else {}
    clamp_cursor(state)
    return state.visible


def cycle_status_filter(state) -> Optional[TaskStatus]:
    state.status_filter = next_status_filter(state.status_filter)
    rebuild(state)
    return state.status_filter


def set_search_query(state, query: str) -> None:
    state.search_query = query or ""
    rebuild(state)


def set_view_mode(state, mode: ViewMode) -> None:
    state.view_mode = mode
    rebuild(state)


def toggle_view_mode(state) -> ViewMode:
    set_view_mode(state, ViewMode.LIST if state.view_mode == ViewMode.TREE else ViewMode.TREE)
    return state.view_mode


__all__ = [
    "ViewMode",
    "matches_search",
    "filter_tree",
    "flatten",
    "project",
    "count_children",
    "visible_child_count",
    "visible_position",
    "clamp_cursor",
    "rebuild",
    "cycle_status_filter",
    "set_search_query",
    "set_view_mode",
    "toggle_view_mode",
]
