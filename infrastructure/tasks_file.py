import json
import os
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.errors import dependency_error, io_error, parsing_error
from core.task import Task

TASKMASTER_DIRNAME = ".taskmaster"
DEFAULT_TAG = "master"

FORMAT_TAGGED = "tagged"
FORMAT_TASKS_KEY = "tasks"
FORMAT_LIST = "list"


def tasks_file_path(project_root: Path) -> Path:
    return Path(project_root) / TASKMASTER_DIRNAME / "tasks" / "tasks.json"


@dataclass
class TasksDocument:
    """Parsed tasks.json plus what is needed to write it back in the same shape."""

    tasks: List[Task]
    tags: List[str] = field(default_factory=list)
    active_tag: str = DEFAULT_TAG
    layout: str = FORMAT_TAGGED
    raw: Any = None


class TasksFileRepository:
    def __init__(self, project_root: Path, tag: str = ""):
        self.project_root = Path(project_root)
        self.path = tasks_file_path(self.project_root)
        self.tag = tag

    def project_detected(self) -> bool:
        return (self.project_root / TASKMASTER_DIRNAME).is_dir()

    def exists(self) -> bool:
        return self.path.exists()

    def compute_signature(self) -> int:
        """Cheap change marker: mtime and size, 0 when the file is absent."""
        try:
            stat = self.path.stat()
        except OSError:
            return 0
        return int(stat.st_mtime_ns) ^ (int(stat.st_size) << 1)

    def load(self) -> TasksDocument:
        if not self.project_detected():
            raise dependency_error(
                "Project Not Found",
                f"Task Master project not detected in {self.project_root}",
            ).with_details("Run the dashboard from a directory containing .taskmaster/")
        if not self.path.exists():
            return TasksDocument(tasks=[], tags=[self.tag or DEFAULT_TAG], active_tag=self.tag or DEFAULT_TAG)
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise io_error("Load Failed", f"Failed to read {self.path}", exc) from exc
        try:
            raw = json.loads(text) if text.strip() else {}
        except json.JSONDecodeError as exc:
            raise parsing_error("Invalid Tasks File", f"Failed to parse {self.path.name}", exc).with_details(
                f"line {exc.lineno}, column {exc.colno}: {exc.msg}"
            ) from exc
        return self._decode(raw)

    def _decode(self, raw: Any) -> TasksDocument:
        if isinstance(raw, list):
            return TasksDocument(tasks=_tasks_from(raw), tags=[], active_tag="", layout=FORMAT_LIST, raw=raw)
        if not isinstance(raw, dict):
            raise parsing_error("Invalid Tasks File", "unrecognized tasks.json format")
        if not raw:
            return TasksDocument(tasks=[], tags=[self.tag or DEFAULT_TAG], active_tag=self.tag or DEFAULT_TAG, raw=raw)
        if isinstance(raw.get("tasks"), list):
            return TasksDocument(tasks=_tasks_from(raw["tasks"]), tags=[], active_tag="", layout=FORMAT_TASKS_KEY, raw=raw)
        tags = [key for key, value in raw.items() if isinstance(value, dict) and isinstance(value.get("tasks"), list)]
        if not tags:
            raise parsing_error("Invalid Tasks File", "unrecognized tasks.json format")
        active = self.tag if self.tag in tags else (DEFAULT_TAG if DEFAULT_TAG in tags else tags[0])
        return TasksDocument(tasks=_tasks_from(raw[active]["tasks"]), tags=tags, active_tag=active, layout=FORMAT_TAGGED, raw=raw)

    def save(self, document: TasksDocument) -> None:
        payload_tasks = [task.to_dict() for task in document.tasks]
        if document.layout == FORMAT_LIST:
            payload: Any = payload_tasks
        elif document.layout == FORMAT_TASKS_KEY:
            payload = dict(document.raw or {})
            payload["tasks"] = payload_tasks
        else:
            payload = dict(document.raw or {})
            tag = document.active_tag or DEFAULT_TAG
            section = dict(payload.get(tag) or {})
            section["tasks"] = payload_tasks
            payload[tag] = section
        document.raw = payload
        self._write_atomic(json.dumps(payload, indent=2, ensure_ascii=False) + "\n")

    def _write_atomic(self, text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path: Optional[Path] = None
        try:
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                delete=False,
                dir=str(self.path.parent),
                prefix=".tasks.",
                suffix=".tmp",
            ) as tmp:
                tmp.write(text)
                tmp.flush()
                os.fsync(tmp.fileno())
                tmp_path = Path(tmp.name)
            os.replace(str(tmp_path), str(self.path))
        except OSError as exc:
            raise io_error("Save Failed", f"Failed to write {self.path}", exc) from exc
        finally:
            if tmp_path and tmp_path.exists():
                tmp_path.unlink()


def _tasks_from(items: List[Dict[str, Any]]) -> List[Task]:
    return [Task.from_dict(item) for item in items if isinstance(item, dict)]


__all__ = [
    "TASKMASTER_DIRNAME",
    "DEFAULT_TAG",
    "TasksDocument",
    "TasksFileRepository",
    "tasks_file_path",
]
