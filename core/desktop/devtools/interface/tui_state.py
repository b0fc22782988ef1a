"""Dashboard view state and the helpers that replace or persist it."""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Optional, Set, Tuple

from core.errors import AppError
from core.status import TaskStatus
from core.task import Task
from core.task_index import TaskIndex
from infrastructure.ui_state_store import UIState

from .tui_projection import ViewMode, rebuild

logger = logging.getLogger("task_dashboard.state")

ACTIVITY_LIMIT = 200
_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass
class DashboardState:
    tasks: List[Task] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    index: TaskIndex = field(default_factory=TaskIndex)
    visible: List[Task] = field(default_factory=list)
    visible_children: Dict[str, int] = field(default_factory=dict)
    view_mode: ViewMode = ViewMode.TREE
    expanded_ids: Set[str] = field(default_factory=set)
    status_filter: Optional[TaskStatus] = None
    search_query: str = ""
    cursor: int = -1
    selected_id: str = ""
    multi_selected: Set[str] = field(default_factory=set)
    stale: bool = False
    loading: bool = False
    load_error: Optional[AppError] = None
    show_details_panel: bool = True
    show_log_panel: bool = False
    activity: Deque[Tuple[float, str, str]] = field(default_factory=lambda: deque(maxlen=ACTIVITY_LIMIT))


def replace_tasks(state: DashboardState, tasks: List[Task], tags: Optional[List[str]] = None) -> None:
    """Install a freshly loaded tree and rebuild everything derived from it."""
    state.tasks = tasks
    if tags is not None:
        state.tags = list(tags)
    state.index = TaskIndex.build(tasks)
    state.expanded_ids = {task_id for task_id in state.expanded_ids if task_id in state.index}
    state.multi_selected = {task_id for task_id in state.multi_selected if task_id in state.index}
    state.stale = False
    state.load_error = None
    rebuild(state)


def log_activity(state: DashboardState, message: str, level: str = "info") -> None:
    state.activity.append((time.time(), level, message))
    logger.log(_LOG_LEVELS.get(level, logging.INFO), message)


def apply_ui_state(state: DashboardState, saved: UIState) -> None:
    state.expanded_ids = set(saved.expanded_ids)
    state.selected_id = saved.selected_id
    state.view_mode = ViewMode.from_string(saved.view_mode)
    state.show_details_panel = saved.show_details_panel
    state.show_log_panel = saved.show_log_panel
    if saved.status_filter:
        try:
            state.status_filter = TaskStatus.from_string(saved.status_filter)
        except ValueError:
            state.status_filter = None


def snapshot_ui_state(state: DashboardState, last_document_path: str = "") -> UIState:
    return UIState(
        expanded_ids=sorted(state.expanded_ids),
        selected_id=state.selected_id,
        view_mode=state.view_mode.value,
        status_filter=state.status_filter.code if state.status_filter else "",
        show_details_panel=state.show_details_panel,
        show_log_panel=state.show_log_panel,
        last_document_path=last_document_path,
    )


__all__ = [
    "DashboardState",
    "ACTIVITY_LIMIT",
    "replace_tasks",
    "log_activity",
    "apply_ui_state",
    "snapshot_ui_state",
]
