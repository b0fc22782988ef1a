"""Message loop glue between the controller and the prompt_toolkit event loop.

Commands run on the loop's executor; whatever message they return is handed
back to ``update`` on the loop thread, one message at a time.
"""

import asyncio
import logging
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional

from .tui_messages import Command

logger = logging.getLogger("task_dashboard.runtime")

MAX_WORKERS = 8


class TimerHandle:
    """Cancellable handle returned by ``call_later``."""

    def __init__(self) -> None:
        self._handle: Optional[asyncio.TimerHandle] = None
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _bind(self, handle: asyncio.TimerHandle) -> None:
        if self._cancelled:
            handle.cancel()
        else:
            self._handle = handle

    def cancel(self) -> None:
        self._cancelled = True
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None


class Program:
    def __init__(
        self,
        update: Callable[[object], Optional[Iterable[Command]]],
        *,
        executor: Optional[Executor] = None,
        on_change: Optional[Callable[[], None]] = None,
    ):
        self._update = update
        self._executor = executor or ThreadPoolExecutor(max_workers=MAX_WORKERS, thread_name_prefix="task-dashboard")
        self._on_change = on_change
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._loop_thread: Optional[int] = None
        self._backlog: List[object] = []
        self._lock = threading.Lock()
        self._stopped = False

    def attach(self, loop: asyncio.AbstractEventLoop) -> None:
        """Bind to the running loop and flush anything sent before it existed."""
        with self._lock:
            self._loop = loop
            self._loop_thread = threading.get_ident()
            backlog, self._backlog = self._backlog, []
        for msg in backlog:
            loop.call_soon(self._dispatch, msg)

    def start(self, commands: Iterable[Command]) -> None:
        for command in commands:
            self.run(command)

    def send(self, msg: object) -> None:
        """Thread-safe: queue msg for processing on the loop thread."""
        with self._lock:
            loop = self._loop
            if loop is None:
                self._backlog.append(msg)
                return
        if self._stopped or loop.is_closed():
            return
        loop.call_soon_threadsafe(self._dispatch, msg)

    def run(self, command: Optional[Command]) -> None:
        if command is None or self._stopped:
            return
        loop = self._loop
        if loop is None or loop.is_closed():
            logger.debug("dropping command %r: loop not attached", command)
            return
        future = loop.run_in_executor(self._executor, command)
        future.add_done_callback(self._on_command_done)

    def call_later(self, delay: float, msg: object) -> TimerHandle:
        handle = TimerHandle()
        loop = self._loop
        if loop is None or self._stopped:
            return handle
        if threading.get_ident() == self._loop_thread:
            handle._bind(loop.call_later(max(0.0, delay), self._dispatch, msg))
        else:
            loop.call_soon_threadsafe(lambda: handle._bind(loop.call_later(max(0.0, delay), self._dispatch, msg)))
        return handle

    def stop(self) -> None:
        self._stopped = True
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _on_command_done(self, future: "asyncio.Future") -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error("background command failed", exc_info=exc)
            return
        msg = future.result()
        if msg is not None:
            self._dispatch(msg)

    def _dispatch(self, msg: object) -> None:
        if self._stopped:
            return
        commands = self._update(msg) or ()
        for command in commands:
            self.run(command)
        if self._on_change:
            self._on_change()


__all__ = ["Program", "TimerHandle", "MAX_WORKERS"]
