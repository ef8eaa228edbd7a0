"""
pledge/core/scheduler.py

Deferred-execution primitives.

A Scheduler enqueues a zero-argument callable to run on a LATER turn:
strictly after the synchronous call that scheduled it has returned,
and before coarser deferred work (timers, I/O callbacks).

Cells never run observers themselves. Every notification goes through
the scheduler the cell was built with, which is what makes observer
delivery testable: a DeferredQueue only runs work when the test drains it.

Schedulers:
    DeferredQueue      explicit FIFO microtask queue, drained on demand
    AsyncioScheduler   hands work to an asyncio event loop's ready queue
"""

import asyncio
import threading
from collections import deque
from typing import Any, Callable, Deque, Optional

from pledge.core.exceptions import SchedulerError


Callback = Callable[[], Any]


class Scheduler:
    """
    Base class for deferred-execution collaborators.

    Subclasses implement call_soon(). Implementations MUST NOT run the
    callback before call_soon() returns.
    """

    def call_soon(self, callback: Callback) -> None:
        """Enqueue callback for execution on a later turn."""
        raise NotImplementedError


class DeferredQueue(Scheduler):
    """
    FIFO microtask queue drained explicitly with run_until_idle().

    Work enqueued while draining runs in the same drain, after everything
    that was already queued. A callback that raises stops the drain; the
    exception propagates and the remaining callbacks stay queued.

    Thread-safe via internal lock. Only one drain may run at a time.
    """

    def __init__(self) -> None:
        self._lock:     threading.Lock   = threading.Lock()
        self._queue:    Deque[Callback]  = deque()
        self._draining: bool             = False

    # ── Public API ────────────────────────────────────────────

    def call_soon(self, callback: Callback) -> None:
        if not callable(callback):
            raise SchedulerError(
                "call_soon() requires a callable",
                {"got": type(callback).__name__},
            )
        with self._lock:
            self._queue.append(callback)

    def run_until_idle(self) -> int:
        """
        Run queued callbacks in FIFO order until the queue is empty.

        Returns:
            Number of callbacks executed.

        Raises:
            SchedulerError if a drain is already in progress.
        """
        with self._lock:
            if self._draining:
                raise SchedulerError(
                    "DeferredQueue is already draining; "
                    "run_until_idle() cannot be called from a queued callback"
                )
            self._draining = True

        executed = 0
        try:
            while True:
                with self._lock:
                    if not self._queue:
                        break
                    callback = self._queue.popleft()
                callback()
                executed += 1
        finally:
            with self._lock:
                self._draining = False

        return executed

    @property
    def pending(self) -> int:
        """Number of callbacks waiting to run."""
        with self._lock:
            return len(self._queue)

    def __repr__(self) -> str:
        return f"DeferredQueue(pending={self.pending})"


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by an asyncio event loop.

    Callbacks go to the loop's ready queue via call_soon(), which the loop
    processes before any timer that is due later. Calls made from a thread
    other than the loop's own use call_soon_threadsafe().

    If no loop is given, the running loop is bound on first use.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            try:
                self._loop = asyncio.get_running_loop()
            except RuntimeError as exc:
                raise SchedulerError(
                    "AsyncioScheduler has no loop: pass one explicitly "
                    "or create the scheduler inside a running event loop"
                ) from exc
        return self._loop

    def call_soon(self, callback: Callback) -> None:
        if not callable(callback):
            raise SchedulerError(
                "call_soon() requires a callable",
                {"got": type(callback).__name__},
            )
        loop = self.loop
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is loop:
            loop.call_soon(callback)
        else:
            loop.call_soon_threadsafe(callback)


# ── Process-wide Default ──────────────────────────────────────

_default_scheduler: Optional[Scheduler] = None
_default_lock = threading.Lock()


def get_default_scheduler() -> Scheduler:
    """
    Return the process-wide default scheduler.
    Lazily creates a DeferredQueue if none was installed.
    """
    global _default_scheduler
    with _default_lock:
        if _default_scheduler is None:
            _default_scheduler = DeferredQueue()
        return _default_scheduler


def set_default_scheduler(scheduler: Scheduler) -> Optional[Scheduler]:
    """
    Install scheduler as the process-wide default.
    Only affects cells constructed afterwards. Returns the previous default.
    """
    global _default_scheduler
    if not isinstance(scheduler, Scheduler):
        raise SchedulerError(
            "set_default_scheduler() requires a Scheduler",
            {"got": type(scheduler).__name__},
        )
    with _default_lock:
        previous = _default_scheduler
        _default_scheduler = scheduler
        return previous


def reset_default_scheduler() -> None:
    """Drop the installed default; the next lookup creates a fresh DeferredQueue."""
    global _default_scheduler
    with _default_lock:
        _default_scheduler = None
