"""Task data source and the long-running operations the dashboard delegates.

The service owns its own copy of the task tree behind a lock. Callers only
ever receive deep copies, so the UI's canonical collection is never shared
with a background thread. Every ``*_with_progress`` method runs on the
caller's thread, polls the given cancel event, and reports through the
``on_progress`` callback.
"""

import csv
import json
import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from core.complexity import ComplexityProgress, ComplexityReport, score_task, sort_by_score
from core.errors import (
    AppError,
    dependency_error,
    io_error,
    operation_error,
    parsing_error,
    raise_if_cancelled,
    validation_error,
)
from core.expansion import (
    ExpandOptions,
    ExpandProgress,
    SubtaskDraft,
    apply_subtask_drafts,
    count_drafts,
    expand_task_drafts,
)
from core.status import TaskStatus
from core.task import Task, clone_tasks
from core.task_index import TaskIndex
from core.validation import ValidationWarning, validate_tasks
from application.deletion import (
    DeleteImpact,
    DeleteOptions,
    DeleteResult,
    analyze_delete_impact,
    collect_delete_set,
    prune_tasks,
)
from application.undo import DEFAULT_UNDO_TTL, UndoExpiredError, UndoManager, UndoNotFoundError
from infrastructure.document_parser import DocumentParseError, DocumentParser, DocumentSummary, build_tasks, summarize
from infrastructure.tasks_file import TASKMASTER_DIRNAME, TasksDocument, TasksFileRepository
from util.channel import Channel

logger = logging.getLogger("task_dashboard.service")

WATCH_INTERVAL = 0.3
IMPORT_MODES = ("append", "replace")
COMPLEXITY_SCOPES = ("all", "selected", "tag")
REPORT_FORMATS = ("json", "csv")


@dataclass
class ImportProgress:
    stage: str
    fraction: float
    message: str = ""


@dataclass
class ImportResult:
    path: str
    mode: str
    summaries: List[DocumentSummary] = field(default_factory=list)
    task_ids: List[str] = field(default_factory=list)


@dataclass
class ExpandResult:
    expanded_ids: List[str] = field(default_factory=list)
    created_ids: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


class TaskService:
    def __init__(
        self,
        project_root: Path,
        *,
        tag: str = "",
        undo_ttl: float = DEFAULT_UNDO_TTL,
        clock: Callable[[], float] = time.time,
    ):
        self.project_root = Path(project_root)
        self.repository = TasksFileRepository(self.project_root, tag=tag)
        self.undo_manager = UndoManager(clock=clock)
        self.undo_ttl = undo_ttl
        self.latest_report: Optional[ComplexityReport] = None
        self._lock = threading.RLock()
        self._document: Optional[TasksDocument] = None
        self._tasks: List[Task] = []
        self._index = TaskIndex()
        self._warnings: List[ValidationWarning] = []
        self._available = False
        self._reload_events = Channel(capacity=1)
        self._watch_stop: Optional[threading.Event] = None
        self._watch_thread: Optional[threading.Thread] = None
        self._last_signature = 0

    # ------------------------------------------------------------------ data source

    def is_available(self) -> bool:
        with self._lock:
            return self._available

    def load_tasks(self, cancel: Optional[threading.Event] = None) -> None:
        document = self.repository.load()
        raise_if_cancelled(cancel)
        with self._lock:
            self._document = document
            self._replace_locked(document.tasks)
            self._available = True
            self._last_signature = self.repository.compute_signature()
        if self._index.duplicates:
            logger.warning("tasks file has duplicate ids: %s", ", ".join(self._index.duplicates))

    def get_tasks(self) -> Tuple[List[Task], List[str]]:
        with self._lock:
            tags = list(self._document.tags) if self._document else []
            return clone_tasks(self._tasks), tags

    def get_task(self, task_id: str) -> Optional[Task]:
        with self._lock:
            task = self._index.get(task_id)
            return task.clone() if task else None

    def next_task(self) -> Optional[Task]:
        """First open task, in document order, whose dependencies are all done."""
        with self._lock:
            for task in self._index:
                if task.status not in (TaskStatus.PENDING, TaskStatus.IN_PROGRESS):
                    continue
                if task.subtasks and any(s.status != TaskStatus.DONE for s in task.subtasks):
                    continue
                deps = [self._index.get(dep) for dep in task.dependencies]
                if all(dep is None or dep.status == TaskStatus.DONE for dep in deps):
                    return task.clone()
        return None

    def task_counts(self) -> Dict[str, int]:
        counts = {status.code: 0 for status in TaskStatus}
        with self._lock:
            for task in self._index:
                counts[task.status.code] += 1
        return counts

    def validation_warnings(self) -> List[ValidationWarning]:
        with self._lock:
            return list(self._warnings)

    def set_task_status(self, task_id: str, status: TaskStatus) -> None:
        with self._lock:
            self._require_available()
            task = self._index.get(task_id)
            if task is None:
                raise validation_error("Task Not Found", f"task {task_id} not found")
            task.status = status
            task.raw_status = None
            self._persist_locked()

    def _require_available(self) -> None:
        if not self._available:
            raise dependency_error(
                "Task Service Unavailable",
                "Task service unavailable. Ensure a Task Master project is loaded.",
            )

    def _replace_locked(self, tasks: List[Task]) -> None:
        self._tasks = tasks
        self._index = TaskIndex.build(tasks)
        self._warnings = validate_tasks(tasks, self._index)

    def _persist_locked(self) -> None:
        if self._document is None:
            self._document = TasksDocument(tasks=self._tasks)
        self._document.tasks = self._tasks
        self.repository.save(self._document)
        self._last_signature = self.repository.compute_signature()

    def _commit_locked(self, tasks: List[Task]) -> None:
        """Swap in a new tree and persist it; the previous tree is restored if saving fails."""
        previous = self._tasks
        self._replace_locked(tasks)
        try:
            self._persist_locked()
        except AppError:
            self._replace_locked(previous)
            raise

    def _next_root_id(self) -> int:
        highest = 0
        for task in self._tasks:
            if task.id.isdigit():
                highest = max(highest, int(task.id))
        return highest + 1

    # ------------------------------------------------------------------ watcher

    def reload_events(self) -> Channel:
        return self._reload_events

    def start_watcher(self, interval: float = WATCH_INTERVAL) -> None:
        if self._watch_thread and self._watch_thread.is_alive():
            return
        stop = threading.Event()
        self._watch_stop = stop
        self._watch_thread = threading.Thread(target=self._watch_loop, args=(stop, interval), daemon=True)
        self._watch_thread.start()

    def stop_watcher(self) -> None:
        if self._watch_stop:
            self._watch_stop.set()
        self._watch_stop = None
        self._watch_thread = None
        self._reload_events.close()

    def _watch_loop(self, stop: threading.Event, interval: float) -> None:
        while not stop.wait(interval):
            signature = self.repository.compute_signature()
            with self._lock:
                if signature == self._last_signature:
                    continue
            # Debounce: wait for the file to stop changing before reloading.
            if stop.wait(interval):
                return
            if self.repository.compute_signature() != signature:
                continue
            try:
                self.load_tasks()
            except AppError as exc:
                logger.warning("reload after external change failed: %s", exc)
                with self._lock:
                    self._last_signature = signature
                continue
            self._reload_events.try_send(True)

    # ------------------------------------------------------------------ complexity

    def _complexity_targets(self, scope: str, task_id: str, tags: List[str]) -> List[Task]:
        if scope == "selected":
            task = self._index.get(task_id)
            if task is None:
                raise validation_error("Task Not Found", f"task {task_id} not found")
            return [t.clone() for t in task.walk()]
        if scope == "tag":
            wanted = {t.strip() for t in tags if t.strip()}
            if not wanted:
                raise validation_error("Invalid Scope", "tag scope requires at least one tag")
            return [t.clone() for t in self._index if wanted.intersection(t.tags)]
        return [t.clone() for t in self._index]

    def analyze_complexity_with_progress(
        self,
        cancel: threading.Event,
        scope: str,
        task_id: str,
        tags: List[str],
        on_progress: Callable[[ComplexityProgress], None],
    ) -> ComplexityReport:
        if scope not in COMPLEXITY_SCOPES:
            raise validation_error("Invalid Scope", f"unknown complexity scope: {scope}")
        with self._lock:
            self._require_available()
            targets = self._complexity_targets(scope, task_id, tags)
        total = len(targets)
        on_progress(ComplexityProgress(analyzed=0, total=total))
        items = []
        for idx, task in enumerate(targets, start=1):
            raise_if_cancelled(cancel)
            items.append(score_task(task))
            on_progress(ComplexityProgress(analyzed=idx, total=total, current_task_id=task.id))
        raise_if_cancelled(cancel)
        report = ComplexityReport(tasks=sort_by_score(items), scope=scope, tags=list(tags))
        if items:
            with self._lock:
                changed = False
                for item in items:
                    task = self._index.get(item.task_id)
                    if task is not None and task.complexity != item.score:
                        task.complexity = item.score
                        changed = True
                if changed:
                    self._persist_locked()
        self.latest_report = report
        return report

    def export_complexity_report(self, fmt: str = "json", output_path: Optional[Path] = None) -> Path:
        report = self.latest_report
        if report is None:
            raise operation_error("Nothing To Export", "run a complexity analysis first")
        fmt = fmt.lower()
        if fmt not in REPORT_FORMATS:
            raise validation_error("Unsupported Format", f"unsupported report format: {fmt}")
        if output_path is None:
            output_path = self.project_root / TASKMASTER_DIRNAME / "reports" / f"task-complexity-report.{fmt}"
        output_path = Path(output_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            if fmt == "json":
                output_path.write_text(json.dumps(report.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8")
            else:
                with output_path.open("w", encoding="utf-8", newline="") as handle:
                    writer = csv.writer(handle)
                    writer.writerow(["task_id", "title", "score", "level"])
                    for item in report.tasks:
                        writer.writerow([item.task_id, item.title, item.score, item.level.code])
        except OSError as exc:
            raise io_error("Export Failed", f"Failed to write {output_path}", exc) from exc
        return output_path

    # ------------------------------------------------------------------ document import

    def parse_document_with_progress(
        self,
        cancel: threading.Event,
        path: str,
        mode: str,
        on_progress: Callable[[ImportProgress], None],
    ) -> ImportResult:
        if mode not in IMPORT_MODES:
            raise validation_error("Invalid Import Mode", f"unknown import mode: {mode}")
        with self._lock:
            self._require_available()
        source = Path(path).expanduser()
        on_progress(ImportProgress("reading", 0.1, f"Reading {source.name}"))
        try:
            content = source.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise io_error("Import Failed", f"File not found: {source}", exc) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise io_error("Import Failed", f"Could not read {source}", exc) from exc
        raise_if_cancelled(cancel)

        on_progress(ImportProgress("parsing", 0.35, "Parsing document"))
        try:
            nodes = DocumentParser.parse(content)
        except DocumentParseError as exc:
            raise parsing_error("Import Failed", str(exc), exc).with_details(
                "The file may be malformed or unsupported."
            ).with_recovery_hints(
                "Use headings (#) or bullet lists (-, *, 1.) to describe tasks",
                "Check the file encoding is UTF-8",
                "Try a different file",
            ) from exc
        raise_if_cancelled(cancel)

        on_progress(ImportProgress("building", 0.6, f"Building {len(nodes)} task(s)"))
        with self._lock:
            start_id = self._next_root_id() if mode == "append" else 1
            new_tasks = build_tasks(nodes, start_id)
            raise_if_cancelled(cancel)
            on_progress(ImportProgress("saving", 0.85, "Saving tasks"))
            merged = clone_tasks(self._tasks) + new_tasks if mode == "append" else new_tasks
            self._commit_locked(merged)
        on_progress(ImportProgress("done", 1.0, "Import complete"))
        return ImportResult(
            path=str(source),
            mode=mode,
            summaries=summarize(nodes),
            task_ids=[task.id for task in new_tasks],
        )

    # ------------------------------------------------------------------ expansion

    def expand_with_progress(
        self,
        cancel: threading.Event,
        task_ids: List[str],
        options: ExpandOptions,
        on_progress: Callable[[ExpandProgress], None],
    ) -> ExpandResult:
        if not task_ids:
            raise validation_error("Nothing To Expand", "no tasks provided")
        with self._lock:
            self._require_available()
            sources = {task_id: self._index.get(task_id) for task_id in task_ids}
            sources = {task_id: task.clone() for task_id, task in sources.items() if task is not None}
        result = ExpandResult()
        planned: List[Tuple[str, List[SubtaskDraft]]] = []
        total = len(task_ids)
        for pos, task_id in enumerate(task_ids, start=1):
            raise_if_cancelled(cancel)
            task = sources.get(task_id)
            if task is None:
                result.warnings.append(f"Task {task_id} not found and was skipped")
                continue
            if not self._can_expand(task, options, result):
                continue
            drafts = expand_task_drafts(task, options)
            planned.append((task_id, drafts))
            on_progress(ExpandProgress("expanding", _clamp(pos / total * 0.9), task_id))
            logger.debug("drafted %d subtask(s) for %s", count_drafts(drafts), task_id)
        raise_if_cancelled(cancel)
        if planned:
            on_progress(ExpandProgress("saving", 0.95))
            with self._lock:
                raise_if_cancelled(cancel)
                # drafts apply to the live tree, not the snapshot they were built from
                working = clone_tasks(self._tasks)
                index = TaskIndex.build(working)
                for task_id, drafts in planned:
                    task = index.get(task_id)
                    if task is None:
                        result.warnings.append(f"Task {task_id} was removed while expanding and was skipped")
                        continue
                    if not self._can_expand(task, options, result):
                        continue
                    if options.force:
                        task.subtasks = []
                    apply_subtask_drafts(task, drafts)
                    result.expanded_ids.append(task_id)
                    result.created_ids.extend(t.id for t in index.descendants_of(task_id))
                if result.expanded_ids:
                    self._commit_locked(working)
        on_progress(ExpandProgress("done", 1.0))
        return result

    @staticmethod
    def _can_expand(task: Task, options: ExpandOptions, result: ExpandResult) -> bool:
        if task.subtasks and not options.force:
            result.warnings.append(f"Task {task.id} already has subtasks; enable force to replace them")
            return False
        return True

    # ------------------------------------------------------------------ delete / undo

    def analyze_delete_impact(self, task_ids: List[str], options: DeleteOptions) -> DeleteImpact:
        with self._lock:
            self._require_available()
            return analyze_delete_impact(self._index, task_ids, options)

    def delete_tasks(self, cancel: threading.Event, task_ids: List[str], options: DeleteOptions) -> DeleteResult:
        if not task_ids:
            raise validation_error("Nothing To Delete", "no tasks provided")
        with self._lock:
            self._require_available()
            delete_set, warnings = collect_delete_set(
                self._index, task_ids, options, check_cancelled=lambda: raise_if_cancelled(cancel)
            )
            if not delete_set:
                raise operation_error("Nothing Deleted", "no tasks deleted")
            raise_if_cancelled(cancel)
            snapshot = clone_tasks(self._tasks)
            self._commit_locked(prune_tasks(clone_tasks(self._tasks), delete_set))
        action = self.undo_manager.new_delete_action(snapshot, len(delete_set), self.undo_ttl)
        token = self.undo_manager.push(action)
        return DeleteResult(
            deleted_count=len(delete_set),
            deleted_ids=sorted(delete_set),
            warnings=warnings,
            undo_token=token,
        )

    def discard_undo(self, token_id: str) -> None:
        self.undo_manager.discard(token_id)

    def undo(self, cancel: Optional[threading.Event], token_id: str) -> None:
        try:
            action = self.undo_manager.consume(token_id)
        except (UndoNotFoundError, UndoExpiredError) as exc:
            raise operation_error("Undo Unavailable", "Undo action is no longer available.", exc) from exc
        raise_if_cancelled(cancel)
        with self._lock:
            self._commit_locked(clone_tasks(action.payload))


__all__ = [
    "TaskService",
    "ImportProgress",
    "ImportResult",
    "ExpandResult",
    "IMPORT_MODES",
    "COMPLEXITY_SCOPES",
    "WATCH_INTERVAL",
]
