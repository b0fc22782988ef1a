from enum import Enum
from typing import Dict, Final, Optional, Tuple


class TaskStatus(Enum):
    PENDING = ("pending", "status.pending", "○")
    IN_PROGRESS = ("in-progress", "status.active", "●")
    DONE = ("done", "status.done", "✓")
    BLOCKED = ("blocked", "status.blocked", "■")
    DEFERRED = ("deferred", "status.deferred", "◌")
    CANCELLED = ("cancelled", "status.cancelled", "✗")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def style(self) -> str:
        return self.value[1]

    @property
    def glyph(self) -> str:
        return self.value[2]

    @classmethod
    def from_string(cls, value: str) -> "TaskStatus":
        code = normalize_task_status(value)
        for status in cls:
            if status.code == code:
                return status
        raise ValueError(f"Invalid task status: {value!r}")  # pragma: no cover - normalize raises first


_CANONICAL_CODES: Final[frozenset] = frozenset(status.code for status in TaskStatus)

_ALIASES: Final[Dict[str, str]] = {
    "todo": "pending",
    "open": "pending",
    "active": "in-progress",
    "in_progress": "in-progress",
    "inprogress": "in-progress",
    "doing": "in-progress",
    "completed": "done",
    "complete": "done",
    "canceled": "cancelled",
    "postponed": "deferred",
}

# Order used by the status filter key: None means "all".
STATUS_FILTER_CYCLE: Tuple[Optional[TaskStatus], ...] = (
    None,
    TaskStatus.PENDING,
    TaskStatus.IN_PROGRESS,
    TaskStatus.DONE,
    TaskStatus.BLOCKED,
    TaskStatus.DEFERRED,
    TaskStatus.CANCELLED,
)

PRIORITIES: Tuple[str, ...] = ("critical", "high", "medium", "low")


def normalize_task_status(value: str, *, allow_unknown: bool = False) -> str:
    """Normalize task status input to its canonical code.

    Canonical statuses: pending, in-progress, done, blocked, deferred, cancelled.

    When allow_unknown=True, returns the normalized token (lowercased, spaces→dashes)
    even if it is not a known status.
    """
    token = (value or "").strip().lower().replace(" ", "-")
    if not token:
        return token
    token = _ALIASES.get(token, token)
    if token in _CANONICAL_CODES:
        return token
    if allow_unknown:
        return token
    raise ValueError(f"Invalid task status: {value!r}")


def is_valid_priority(value: str) -> bool:
    return (value or "") in PRIORITIES or not value


def next_status_filter(current: Optional[TaskStatus]) -> Optional[TaskStatus]:
    """Advance the status filter one step through STATUS_FILTER_CYCLE."""
    try:
        idx = STATUS_FILTER_CYCLE.index(current)
    except ValueError:
        return None
    return STATUS_FILTER_CYCLE[(idx + 1) % len(STATUS_FILTER_CYCLE)]
