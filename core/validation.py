"""Task collection validation with cycle detection.

Pure domain logic: receives the task tree and its index, performs no I/O.
Everything reported here is a warning; loading never fails on it.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from .status import is_valid_priority
from .task import Task
from .task_index import TaskIndex


@dataclass(frozen=True)
class ValidationWarning:
    """A non-fatal problem found in the loaded tasks."""

    task_id: str
    message: str

    def __str__(self) -> str:
        return f"Task {self.task_id}: {self.message}"


def build_dependency_graph(index: TaskIndex) -> Dict[str, List[str]]:
    """Map task id -> ids it depends on."""
    return {task.id: list(task.dependencies) for task in index}


def build_dependents_map(index: TaskIndex) -> Dict[str, List[str]]:
    """Reverse of the dependency graph: task id -> ids that depend on it."""
    dependents: Dict[str, List[str]] = {}
    for task in index:
        for dep in task.dependencies:
            dependents.setdefault(dep, []).append(task.id)
    return dependents


def _validate_task(task: Task, index: TaskIndex) -> List[ValidationWarning]:
    warnings: List[ValidationWarning] = []
    if task.raw_status:
        warnings.append(ValidationWarning(task.id, f"Invalid status: {task.raw_status}"))
    if not is_valid_priority(task.priority):
        warnings.append(ValidationWarning(task.id, f"Invalid priority: {task.priority}"))
    for dep_id in task.dependencies:
        if dep_id == task.id:
            warnings.append(ValidationWarning(task.id, "Task cannot depend on itself"))
        elif dep_id not in index:
            warnings.append(ValidationWarning(task.id, f"Dependency not found: {dep_id}"))
    for sub in task.subtasks:
        warnings.extend(_validate_task(sub, index))
    return warnings


def detect_cycles(graph: Dict[str, List[str]]) -> List[List[str]]:
    """Find dependency cycles with DFS; each cycle is reported once."""
    visited: Set[str] = set()
    rec_stack: Set[str] = set()
    path: List[str] = []
    cycles: List[List[str]] = []

    def dfs(node: str) -> None:
        visited.add(node)
        rec_stack.add(node)
        path.append(node)
        for neighbor in graph.get(node, []):
            if neighbor == node:
                continue
            if neighbor not in visited:
                dfs(neighbor)
            elif neighbor in rec_stack:
                cycle_start = path.index(neighbor)
                cycles.append(path[cycle_start:] + [neighbor])
        path.pop()
        rec_stack.remove(node)

    for node in graph:
        if node not in visited:
            dfs(node)
    return cycles


def validate_tasks(tasks: List[Task], index: Optional[TaskIndex] = None) -> List[ValidationWarning]:
    index = index if index is not None else TaskIndex.build(tasks)
    warnings: List[ValidationWarning] = []
    for task in tasks:
        warnings.extend(_validate_task(task, index))
    for cycle in detect_cycles(build_dependency_graph(index)):
        warnings.append(ValidationWarning(cycle[0], f"Circular dependency: {' -> '.join(cycle)}"))
    return warnings


__all__ = [
    "ValidationWarning",
    "build_dependency_graph",
    "build_dependents_map",
    "detect_cycles",
    "validate_tasks",
]
