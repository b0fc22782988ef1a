"""Background workflow runs: one cancellable worker and one message stream per kind.

A run moves Idle → Scoping → Running → {Completed | Failed | Cancelled} → Idle.
Scoping happens in dialogs before ``start``; everything from Running on is
tracked here. The worker thread owns the sending side of the run's channel and
always closes it; the UI thread is the only reader.
"""

import itertools
import logging
import threading
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, Optional

from core.errors import is_cancellation
from util.channel import DEFAULT_CAPACITY, Channel

from .tui_messages import (
    Command,
    CompletedMsg,
    HoldElapsedMsg,
    Outcome,
    ProgressMsg,
    StreamClosedMsg,
    WorkflowKind,
)

logger = logging.getLogger("task_dashboard.workflows")

MIN_DISPLAY = 1.0
COMPLETE_HOLD = 0.5

Work = Callable[[threading.Event, Callable[[Any], None]], Any]


@dataclass(frozen=True)
class Committed:
    """Work result that was already persisted; a cancel arriving later no longer applies."""

    value: Any


def _spawn_daemon(target: Callable[[], None], name: str) -> None:
    threading.Thread(target=target, name=name, daemon=True).start()


@dataclass
class WorkflowRun:
    kind: WorkflowKind
    run_id: int
    scope: Any
    cancel_event: threading.Event
    channel: Channel
    started_at: float
    cancel_requested: bool = False
    completion_seen: bool = False
    held: Optional[CompletedMsg] = field(default=None, repr=False)

    def cancel(self) -> None:
        self.cancel_requested = True
        self.cancel_event.set()


class WorkflowOrchestrator:
    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        capacity: int = DEFAULT_CAPACITY,
        spawn: Callable[[Callable[[], None], str], None] = _spawn_daemon,
        min_display: float = MIN_DISPLAY,
        complete_hold: float = COMPLETE_HOLD,
    ):
        self._clock = clock
        self._capacity = capacity
        self._spawn = spawn
        self.min_display = min_display
        self.complete_hold = complete_hold
        self._runs: Dict[WorkflowKind, WorkflowRun] = {}
        self._ids = itertools.count(1)

    # ------------------------------------------------------------------ lifecycle

    def active(self, kind: WorkflowKind) -> Optional[WorkflowRun]:
        return self._runs.get(kind)

    def is_running(self, kind: WorkflowKind) -> bool:
        return kind in self._runs

    def runs(self) -> Dict[WorkflowKind, WorkflowRun]:
        return dict(self._runs)

    def start(self, kind: WorkflowKind, work: Work, scope: Any = None) -> Command:
        """Replace any run of the same kind and return the first wait command."""
        prior = self._runs.pop(kind, None)
        if prior is not None:
            logger.info("%s: superseding run %d", kind.value, prior.run_id)
            prior.cancel()
            prior.channel.close()
        run = WorkflowRun(
            kind=kind,
            run_id=next(self._ids),
            scope=scope,
            cancel_event=threading.Event(),
            channel=Channel(self._capacity),
            started_at=self._clock(),
        )
        self._runs[kind] = run
        self._spawn(lambda: self._work(run, work), f"workflow-{kind.value}-{run.run_id}")
        return self.wait(kind)

    def _work(self, run: WorkflowRun, work: Work) -> None:
        def on_progress(state: Any) -> None:
            run.channel.send(ProgressMsg(run.kind, run.run_id, state), run.cancel_event)

        result = None
        error: Optional[BaseException] = None
        try:
            result = work(run.cancel_event, on_progress)
        except Exception as exc:
            error = exc
        try:
            if error is None and isinstance(result, Committed):
                completed = CompletedMsg(run.kind, run.run_id, Outcome.SUCCEEDED, result=result.value, committed=True)
            elif run.cancel_event.is_set() or is_cancellation(error):
                completed = CompletedMsg(run.kind, run.run_id, Outcome.CANCELLED)
            elif error is not None:
                logger.info("%s run %d failed: %s", run.kind.value, run.run_id, error)
                completed = CompletedMsg(run.kind, run.run_id, Outcome.FAILED, error=error)
            else:
                completed = CompletedMsg(run.kind, run.run_id, Outcome.SUCCEEDED, result=result)
            run.channel.send(completed)
        finally:
            run.channel.close()

    def wait(self, kind: WorkflowKind) -> Optional[Command]:
        """Command that blocks for the run's next message."""
        run = self._runs.get(kind)
        if run is None:
            return None
        channel, run_id = run.channel, run.run_id

        def wait_for_message():
            item, ok = channel.receive()
            if not ok:
                return StreamClosedMsg(kind, run_id)
            return item

        return wait_for_message

    def cancel(self, kind: WorkflowKind) -> Optional[WorkflowRun]:
        """Request cancellation; a run parked in its completion hold is dropped at once.

        Returns None when there is nothing left to cancel, including a held run
        whose result is already committed.
        """
        run = self._runs.get(kind)
        if run is None or (run.held is not None and run.held.committed):
            return None
        run.cancel()
        if run.held is not None:
            del self._runs[kind]
        return run

    def shutdown(self) -> None:
        for run in self._runs.values():
            run.cancel()
            run.channel.close()
        self._runs.clear()

    # ------------------------------------------------------------------ consumer side

    def _current(self, kind: WorkflowKind, run_id: int) -> Optional[WorkflowRun]:
        run = self._runs.get(kind)
        if run is None or run.run_id != run_id:
            return None
        return run

    def accept_progress(self, msg: ProgressMsg) -> bool:
        run = self._current(msg.kind, msg.run_id)
        return run is not None and run.held is None and not run.completion_seen

    def accept_completion(self, msg: CompletedMsg) -> Optional[CompletedMsg]:
        """Filter stale completions and apply cancel-wins to uncommitted results."""
        run = self._current(msg.kind, msg.run_id)
        if run is None or run.completion_seen:
            return None
        run.completion_seen = True
        if run.cancel_requested and msg.outcome == Outcome.SUCCEEDED and not msg.committed:
            msg = replace(msg, outcome=Outcome.CANCELLED, result=None)
        if msg.outcome == Outcome.SUCCEEDED:
            run.held = msg
        else:
            del self._runs[msg.kind]
        return msg

    def hold_delay(self, run: WorkflowRun, now: Optional[float] = None) -> float:
        now = self._clock() if now is None else now
        elapsed = max(0.0, now - run.started_at)
        return self.complete_hold + max(0.0, self.min_display - elapsed)

    def hold_message(self, msg: CompletedMsg) -> HoldElapsedMsg:
        return HoldElapsedMsg(msg.kind, msg.run_id)

    def release(self, msg: HoldElapsedMsg) -> Optional[CompletedMsg]:
        run = self._current(msg.kind, msg.run_id)
        if run is None or run.held is None:
            return None
        del self._runs[msg.kind]
        return run.held

    def stream_closed(self, msg: StreamClosedMsg) -> Optional[WorkflowRun]:
        """Clear a run whose stream ended without a completion being consumed."""
        run = self._current(msg.kind, msg.run_id)
        if run is None or run.completion_seen:
            return None
        del self._runs[msg.kind]
        return run


__all__ = [
    "Committed",
    "WorkflowRun",
    "WorkflowOrchestrator",
    "MIN_DISPLAY",
    "COMPLETE_HOLD",
]
