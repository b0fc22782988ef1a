"""Flat id → task index over the canonical task tree.

The index holds references into the collection it was built from, never copies.
Anything that needs a task by id goes through ``resolve`` so identity survives
rebuilds of the visible list.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .task import Task

logger = logging.getLogger("task_dashboard.index")


class TaskIndex:
    def __init__(self) -> None:
        self._by_id: Dict[str, Task] = {}
        self._order: List[str] = []
        self.duplicates: List[str] = []

    @classmethod
    def build(cls, tasks: Iterable[Task]) -> "TaskIndex":
        index = cls()
        for task in tasks:
            index._add(task)
        return index

    def _add(self, task: Task) -> None:
        if task.id in self._by_id:
            logger.warning("duplicate task id %s; keeping the first occurrence", task.id)
            self.duplicates.append(task.id)
        else:
            self._by_id[task.id] = task
            self._order.append(task.id)
        for sub in task.subtasks:
            self._add(sub)

    def resolve(self, task_id: Optional[str]) -> Tuple[Optional[Task], bool]:
        if not task_id:
            return None, False
        task = self._by_id.get(task_id)
        return task, task is not None

    def get(self, task_id: str) -> Optional[Task]:
        return self._by_id.get(task_id)

    def ids(self) -> List[str]:
        """All ids in pre-order."""
        return list(self._order)

    def children_of(self, task_id: str) -> List[Task]:
        task = self._by_id.get(task_id)
        return list(task.subtasks) if task else []

    def descendants_of(self, task_id: str) -> List[Task]:
        task = self._by_id.get(task_id)
        if not task:
            return []
        return [t for t in task.walk() if t.id != task_id]

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Task]:
        for task_id in self._order:
            yield self._by_id[task_id]


__all__ = ["TaskIndex"]
