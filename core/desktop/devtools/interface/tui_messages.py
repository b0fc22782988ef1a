"""Closed set of messages the dashboard event loop understands.

Every message is an immutable value. Background workers and timers only ever
talk to the UI by producing one of these; the controller routes each type
through an explicit handler table.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple


class WorkflowKind(Enum):
    COMPLEXITY = "complexity"
    IMPORT = "import"
    EXPAND = "expand"
    DELETE = "delete"

    @property
    def label(self) -> str:
        return _KIND_LABELS[self]


_KIND_LABELS = {
    WorkflowKind.COMPLEXITY: "Complexity Analysis",
    WorkflowKind.IMPORT: "Document Import",
    WorkflowKind.EXPAND: "Task Expansion",
    WorkflowKind.DELETE: "Delete",
}


class Outcome(Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class ProgressMsg:
    kind: WorkflowKind
    run_id: int
    state: Any = None


@dataclass(frozen=True)
class CompletedMsg:
    kind: WorkflowKind
    run_id: int
    outcome: Outcome
    result: Any = None
    error: Optional[BaseException] = None
    committed: bool = False


@dataclass(frozen=True)
class StreamClosedMsg:
    kind: WorkflowKind
    run_id: int


@dataclass(frozen=True)
class HoldElapsedMsg:
    kind: WorkflowKind
    run_id: int


@dataclass(frozen=True)
class TasksLoadedMsg:
    tasks: Tuple[Any, ...] = ()
    tags: Tuple[str, ...] = ()
    warnings: Tuple[Any, ...] = ()
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class TasksReloadedMsg:
    pass


@dataclass(frozen=True)
class UndoTickMsg:
    session_id: int


@dataclass(frozen=True)
class UndoExpiredMsg:
    session_id: int


@dataclass(frozen=True)
class UndoCompletedMsg:
    session_id: int
    error: Optional[BaseException] = None


@dataclass(frozen=True)
class NotificationTimeoutMsg:
    dialog_id: int


MESSAGE_TYPES = (
    ProgressMsg,
    CompletedMsg,
    StreamClosedMsg,
    HoldElapsedMsg,
    TasksLoadedMsg,
    TasksReloadedMsg,
    UndoTickMsg,
    UndoExpiredMsg,
    UndoCompletedMsg,
    NotificationTimeoutMsg,
)

# A command runs off the UI thread and yields at most one message.
Command = Callable[[], Optional[object]]


__all__ = [
    "WorkflowKind",
    "Outcome",
    "ProgressMsg",
    "CompletedMsg",
    "StreamClosedMsg",
    "HoldElapsedMsg",
    "TasksLoadedMsg",
    "TasksReloadedMsg",
    "UndoTickMsg",
    "UndoExpiredMsg",
    "UndoCompletedMsg",
    "NotificationTimeoutMsg",
    "MESSAGE_TYPES",
    "Command",
]
