"""Delete impact analysis and tree pruning.

Pure functions over a task tree and its index; the service applies the result
and persists it.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set, Tuple

from core.errors import operation_error, validation_error
from core.task import Task
from core.task_index import TaskIndex
from core.validation import build_dependents_map

MAX_LISTED = 4


@dataclass
class DeleteOptions:
    recursive: bool = False
    force: bool = False


@dataclass(frozen=True)
class TaskSummary:
    id: str
    title: str
    status: str


@dataclass
class DeleteImpact:
    selected: List[TaskSummary] = field(default_factory=list)
    descendants: List[TaskSummary] = field(default_factory=list)
    dependents: List[TaskSummary] = field(default_factory=list)
    total_delete_count: int = 0
    blocking_reason: str = ""
    warnings: List[str] = field(default_factory=list)

    @property
    def blocked(self) -> bool:
        return bool(self.blocking_reason)


@dataclass
class DeleteResult:
    deleted_count: int
    deleted_ids: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    undo_token: Optional[object] = None


def _summary(task: Task) -> TaskSummary:
    return TaskSummary(task.id, task.title, task.status.code)


def _sorted(tasks: Dict[str, Task]) -> List[TaskSummary]:
    return sorted((_summary(t) for t in tasks.values()), key=lambda s: (_id_key(s.id), s.title))


def _id_key(task_id: str):
    return [(0, int(part), "") if part.isdigit() else (1, 0, part) for part in task_id.split(".")]


def summarize_list(items: List[TaskSummary]) -> str:
    parts = [f"{item.id} ({item.title})" for item in items[:MAX_LISTED]]
    if len(items) > MAX_LISTED:
        parts.append(f"…+{len(items) - MAX_LISTED}")
    return ", ".join(parts)


def analyze_delete_impact(index: TaskIndex, task_ids: List[str], options: DeleteOptions) -> DeleteImpact:
    if not task_ids:
        raise validation_error("Nothing To Delete", "no tasks provided")
    impact = DeleteImpact()
    selected: Dict[str, Task] = {}
    for task_id in task_ids:
        task, found = index.resolve(task_id)
        if not found:
            if options.force:
                impact.warnings.append(f"Task {task_id} not found and will be skipped")
                continue
            raise validation_error("Task Not Found", f"task {task_id} not found")
        selected[task_id] = task
    impact.selected = _sorted(selected)

    descendants: Dict[str, Task] = {}
    for task_id in selected:
        for sub in index.descendants_of(task_id):
            descendants.setdefault(sub.id, sub)

    dependents_map = build_dependents_map(index)
    dependents: Dict[str, Task] = {}
    queue: deque = deque()
    for task_id in selected:
        for dep_id in dependents_map.get(task_id, []):
            if dep_id in selected:
                continue
            dependents[dep_id] = index.get(dep_id)
            queue.append(dep_id)
    if options.recursive:
        seen: Set[str] = set()
        while queue:
            current = queue.popleft()
            if current in seen:
                continue
            seen.add(current)
            for dep_id in dependents_map.get(current, []):
                if dep_id in selected:
                    continue
                dependents[dep_id] = index.get(dep_id)
                queue.append(dep_id)
    for task_id in list(dependents):
        if task_id in selected or task_id in descendants:
            del dependents[task_id]

    impact.descendants = _sorted(descendants)
    impact.dependents = _sorted(dependents)
    impact.total_delete_count = len(selected)
    if options.recursive:
        impact.total_delete_count += len(descendants) + len(dependents)
    else:
        if impact.descendants:
            impact.blocking_reason = f"{len(impact.descendants)} subtasks detected"
        elif impact.dependents:
            impact.blocking_reason = f"{len(impact.dependents)} dependent tasks detected"

    if impact.descendants:
        impact.warnings.append(
            f"{len(impact.descendants)} subtasks will be removed: {summarize_list(impact.descendants)}"
        )
    if impact.dependents:
        impact.warnings.append(
            f"{len(impact.dependents)} dependent tasks will be removed: {summarize_list(impact.dependents)}"
        )
    return impact


def collect_delete_set(
    index: TaskIndex,
    task_ids: List[str],
    options: DeleteOptions,
    check_cancelled: Callable[[], None] = lambda: None,
) -> Tuple[Set[str], List[str]]:
    """Breadth-first closure of ids to remove; raises when not recursive and something depends on a target."""
    dependents_map = build_dependents_map(index)
    requested = set(task_ids)
    delete_set: Set[str] = set()
    warnings: List[str] = []
    queue = deque(task_ids)
    while queue:
        check_cancelled()
        task_id = queue.popleft()
        if task_id in delete_set:
            continue
        if task_id not in index:
            if options.force:
                warnings.append(f"Task {task_id} not found and was skipped")
                continue
            raise validation_error("Task Not Found", f"task {task_id} not found")
        children = index.children_of(task_id)
        if not options.recursive:
            if children:
                raise operation_error(
                    "Delete Blocked",
                    f"task {task_id} has {len(children)} subtasks; enable recursive deletion",
                )
            deps = [d for d in dependents_map.get(task_id, []) if d not in requested]
            if deps:
                raise operation_error(
                    "Delete Blocked",
                    f"task {task_id} has {len(deps)} dependent tasks; enable recursive deletion",
                )
        delete_set.add(task_id)
        if options.recursive:
            queue.extend(sub.id for sub in children)
            queue.extend(dependents_map.get(task_id, []))
    return delete_set, warnings


def prune_tasks(tasks: List[Task], delete_set: Set[str]) -> List[Task]:
    """Copy-free filter: drops every task whose id is in delete_set, recursively."""
    kept: List[Task] = []
    for task in tasks:
        if task.id in delete_set:
            continue
        task.subtasks = prune_tasks(task.subtasks, delete_set)
        kept.append(task)
    return kept


__all__ = [
    "DeleteOptions",
    "TaskSummary",
    "DeleteImpact",
    "DeleteResult",
    "summarize_list",
    "analyze_delete_impact",
    "collect_delete_set",
    "prune_tasks",
]
