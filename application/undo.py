"""Single-slot undo store for destructive task operations."""

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

UNDO_ACTION_DELETE = "delete_tasks"
DEFAULT_UNDO_TTL = 20.0


class UndoNotFoundError(LookupError):
    pass


class UndoExpiredError(LookupError):
    pass


@dataclass(frozen=True)
class UndoToken:
    """What the UI is allowed to know about a pending undo."""

    id: str
    summary: str
    expires_at: float
    duration: float
    action_type: str = UNDO_ACTION_DELETE

    def remaining(self, now: float) -> float:
        return max(0.0, self.expires_at - now)


@dataclass
class UndoAction:
    id: str
    action_type: str
    summary: str
    expires_at: float
    payload: Any = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def token(self, now: float) -> UndoToken:
        return UndoToken(
            id=self.id,
            summary=self.summary,
            expires_at=self.expires_at,
            duration=max(0.0, self.expires_at - now),
            action_type=self.action_type,
        )


class UndoManager:
    """Holds at most one reversible action; a newer push replaces the older one."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._lock = threading.Lock()
        self._action: Optional[UndoAction] = None

    def push(self, action: UndoAction) -> UndoToken:
        with self._lock:
            self._action = action
            return action.token(self._clock())

    def peek(self) -> Optional[UndoAction]:
        with self._lock:
            if self._action is None:
                return None
            if self._clock() >= self._action.expires_at:
                self._action = None
                return None
            return self._action

    def consume(self, action_id: str) -> UndoAction:
        with self._lock:
            if self._action is None:
                raise UndoNotFoundError("undo action not found")
            if self._action.id != action_id:
                raise UndoNotFoundError(f"undo action not found: {action_id}")
            if self._clock() >= self._action.expires_at:
                self._action = None
                raise UndoExpiredError("undo action expired")
            action, self._action = self._action, None
            return action

    def discard(self, action_id: str = "") -> None:
        with self._lock:
            if self._action is not None and (not action_id or self._action.id == action_id):
                self._action = None

    def new_delete_action(self, payload: Any, deleted_count: int, ttl: float = DEFAULT_UNDO_TTL) -> UndoAction:
        if ttl <= 0:
            ttl = DEFAULT_UNDO_TTL
        now = self._clock()
        return UndoAction(
            id=f"undo-{time.time_ns()}",
            action_type=UNDO_ACTION_DELETE,
            summary=f"Deleted {deleted_count} task(s)",
            expires_at=now + ttl,
            payload=payload,
            metadata={"deletedCount": str(deleted_count)},
        )


__all__ = [
    "UNDO_ACTION_DELETE",
    "DEFAULT_UNDO_TTL",
    "UndoNotFoundError",
    "UndoExpiredError",
    "UndoToken",
    "UndoAction",
    "UndoManager",
]
