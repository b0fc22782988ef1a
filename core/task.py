"""Task tree model shared by the dashboard, services and storage."""

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from .status import TaskStatus

_KNOWN_KEYS = frozenset(
    {
        "id",
        "title",
        "description",
        "details",
        "testStrategy",
        "status",
        "priority",
        "complexity",
        "dependencies",
        "subtasks",
        "tags",
    }
)


def parent_id(task_id: str) -> str:
    """Return the parent id ("2.3.1" -> "2.3"), or "" for a root id."""
    if "." not in task_id:
        return ""
    return task_id.rsplit(".", 1)[0]


def ancestor_ids(task_id: str) -> List[str]:
    """Progressive dotted prefixes of task_id, root first, excluding task_id itself."""
    parts = task_id.split(".")
    return [".".join(parts[:i]) for i in range(1, len(parts))]


def _id_to_str(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if value is None:
        return ""
    return str(value)


@dataclass
class Task:
    id: str
    title: str
    description: str = ""
    details: str = ""
    test_strategy: str = ""
    status: TaskStatus = TaskStatus.PENDING
    priority: str = ""
    complexity: int = 0
    dependencies: List[str] = field(default_factory=list)
    subtasks: List["Task"] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    # Unrecognized status token from storage; kept so saving does not rewrite it.
    raw_status: Optional[str] = field(default=None, repr=False, compare=False)
    extra: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def has_subtasks(self) -> bool:
        return bool(self.subtasks)

    @property
    def depth(self) -> int:
        return self.id.count(".")

    @property
    def parent_id(self) -> str:
        return parent_id(self.id)

    def walk(self) -> Iterator["Task"]:
        """Pre-order traversal of this task and all of its descendants."""
        yield self
        for sub in self.subtasks:
            yield from sub.walk()

    def clone(self) -> "Task":
        return copy.deepcopy(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], parent: str = "") -> "Task":
        raw_id = _id_to_str(data.get("id"))
        task_id = raw_id
        if parent and raw_id and not raw_id.startswith(parent + "."):
            # Task Master stores subtask ids relative to their parent.
            task_id = f"{parent}.{raw_id}"
        status_token = str(data.get("status") or "pending")
        raw_status = None
        try:
            status = TaskStatus.from_string(status_token)
        except ValueError:
            status = TaskStatus.PENDING
            raw_status = status_token
        try:
            complexity = max(0, int(data.get("complexity") or 0))
        except (TypeError, ValueError):
            complexity = 0
        task = cls(
            id=task_id,
            title=str(data.get("title") or ""),
            description=str(data.get("description") or ""),
            details=str(data.get("details") or ""),
            test_strategy=str(data.get("testStrategy") or ""),
            status=status,
            priority=str(data.get("priority") or "").strip().lower(),
            complexity=complexity,
            dependencies=[_dependency_id(dep, parent) for dep in (data.get("dependencies") or []) if dep is not None],
            tags=[str(tag) for tag in (data.get("tags") or [])],
            raw_status=raw_status,
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )
        task.subtasks = [cls.from_dict(sub, parent=task_id) for sub in (data.get("subtasks") or [])]
        return task

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = dict(self.extra)
        data.update(
            {
                "id": _storage_id(self.id),
                "title": self.title,
                "description": self.description,
                "details": self.details,
                "testStrategy": self.test_strategy,
                "status": self.raw_status or self.status.code,
                "priority": self.priority,
                "dependencies": [_storage_dependency(dep, self.parent_id) for dep in self.dependencies],
                "subtasks": [sub.to_dict() for sub in self.subtasks],
            }
        )
        if self.complexity:
            data["complexity"] = self.complexity
        if self.tags:
            data["tags"] = list(self.tags)
        return data

    def set_status(self, value: str) -> None:
        self.status = TaskStatus.from_string(value)
        self.raw_status = None


def _storage_id(task_id: str) -> Any:
    """Subtasks are written with their relative numeric id, roots keep numeric ids as ints."""
    last = task_id.rsplit(".", 1)[-1]
    return int(last) if last.isdigit() else last


def walk_tasks(tasks: List[Task]) -> Iterator[Task]:
    for task in tasks:
        yield from task.walk()


def clone_tasks(tasks: List[Task]) -> List[Task]:
    return copy.deepcopy(tasks)


def _dependency_id(value: Any, parent: str) -> str:
    """Subtask dependencies given as bare numbers point at siblings."""
    dep = _id_to_str(value)
    if parent and isinstance(value, (int, float)):
        return f"{parent}.{dep}"
    return dep


def _storage_dependency(dep: str, parent: str) -> Any:
    if parent and dep.startswith(parent + ".") and dep[len(parent) + 1 :].isdigit():
        return int(dep[len(parent) + 1 :])
    if parent:
        return dep
    return int(dep) if dep.isdigit() else dep
