"""Persistence of dashboard view state between sessions.

Loading and saving never raise: a broken or missing file only costs the user
their previous layout.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from infrastructure.tasks_file import TASKMASTER_DIRNAME

logger = logging.getLogger("task_dashboard.ui_state")

UI_STATE_FILENAME = ".tui-state.json"


@dataclass
class UIState:
    expanded_ids: List[str] = field(default_factory=list)
    selected_id: str = ""
    view_mode: str = "tree"
    status_filter: str = ""
    show_details_panel: bool = True
    show_log_panel: bool = False
    last_document_path: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UIState":
        state = cls()
        expanded = data.get("expanded_ids")
        if isinstance(expanded, list):
            state.expanded_ids = [str(item) for item in expanded]
        state.selected_id = str(data.get("selected_id") or "")
        view_mode = str(data.get("view_mode") or "tree")
        state.view_mode = view_mode if view_mode in ("tree", "list") else "tree"
        state.status_filter = str(data.get("status_filter") or "")
        state.show_details_panel = bool(data.get("show_details_panel", True))
        state.show_log_panel = bool(data.get("show_log_panel", False))
        state.last_document_path = str(data.get("last_document_path") or "")
        return state


def ui_state_path(project_root: Path) -> Path:
    return Path(project_root) / TASKMASTER_DIRNAME / UI_STATE_FILENAME


class UIStateStore:
    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> UIState:
        if not self.path.exists():
            return UIState()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("ignoring unreadable UI state %s: %s", self.path, exc)
            return UIState()
        if not isinstance(data, dict):
            logger.warning("ignoring malformed UI state %s", self.path)
            return UIState()
        return UIState.from_dict(data)

    def save(self, state: UIState) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(asdict(state), indent=2), encoding="utf-8")
        except OSError as exc:
            logger.warning("failed to save UI state %s: %s", self.path, exc)
            return False
        return True

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("failed to clear UI state %s: %s", self.path, exc)


__all__ = ["UIState", "UIStateStore", "ui_state_path"]
