from pathlib import Path
from threading import Event
from typing import Callable, List, Optional, Protocol, Tuple

from core import Task, TaskStatus, ValidationWarning
from core.complexity import ComplexityProgress, ComplexityReport
from core.expansion import ExpandOptions, ExpandProgress
from application.deletion import DeleteImpact, DeleteOptions, DeleteResult
from util.channel import Channel


class TaskDataSource(Protocol):
    def get_tasks(self) -> Tuple[List[Task], List[str]]:
        ...

    def load_tasks(self, cancel: Optional[Event] = None) -> None:
        ...

    def reload_events(self) -> Channel:
        ...


class ComplexityService(Protocol):
    def analyze_complexity_with_progress(
        self,
        cancel: Event,
        scope: str,
        task_id: str,
        tags: List[str],
        on_progress: Callable[[ComplexityProgress], None],
    ) -> ComplexityReport:
        ...


class DocumentImportService(Protocol):
    def parse_document_with_progress(self, cancel: Event, path: str, mode: str, on_progress: Callable) -> object:
        ...


class ExpansionService(Protocol):
    def expand_with_progress(
        self,
        cancel: Event,
        task_ids: List[str],
        options: ExpandOptions,
        on_progress: Callable[[ExpandProgress], None],
    ) -> object:
        ...


class DeleteService(Protocol):
    def analyze_delete_impact(self, task_ids: List[str], options: DeleteOptions) -> DeleteImpact:
        ...

    def delete_tasks(self, cancel: Event, task_ids: List[str], options: DeleteOptions) -> DeleteResult:
        ...

    def undo(self, cancel: Optional[Event], token_id: str) -> None:
        ...

    def discard_undo(self, token_id: str) -> None:
        ...


class DashboardService(TaskDataSource, ComplexityService, DocumentImportService, ExpansionService, DeleteService, Protocol):
    """Everything the dashboard controller calls on its task backend."""

    def next_task(self) -> Optional[Task]:
        ...

    def set_task_status(self, task_id: str, status: TaskStatus) -> None:
        ...

    def validation_warnings(self) -> List[ValidationWarning]:
        ...

    def export_complexity_report(self, fmt: str = "json", output_path: Optional[Path] = None) -> Path:
        ...

    def start_watcher(self) -> None:
        ...
