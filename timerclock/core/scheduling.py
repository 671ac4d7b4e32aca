"""Timer primitives and the single owner context all state changes run on.

Engines never start threads of their own. They schedule callbacks on a
``TkAfterScheduler`` (a Tk widget, ``ManualScheduler`` or ``WorkerScheduler``)
whose callbacks all run on one owner thread, so ticks and commands are
strictly ordered and never interleave.
"""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Protocol, Tuple

from timerclock.helpers.logging_helper import log_debug, log_exception, log_module_import

log_module_import(__name__)


class TkAfterScheduler(Protocol):
    def after(self, delay_ms: int, callback: Callable[[], None]) -> str: ...

    def after_cancel(self, after_id: str) -> None: ...


class PeriodicTimer:
    """Repeating ``after`` chain owned by exactly one engine.

    Every scheduled callback carries the generation it was scheduled in.
    ``stop()`` cancels the pending id and bumps the generation, so a callback
    the scheduler already dequeued is dropped instead of ticking late.
    """

    def __init__(self, scheduler: TkAfterScheduler, interval_ms: int, callback: Callable[[], None]) -> None:
        self._scheduler = scheduler
        self._interval_ms = max(1, int(interval_ms))
        self._callback: Optional[Callable[[], None]] = callback
        self._after_id: Optional[str] = None
        self._generation = 0
        self._running = False
        self._disposed = False

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def start(self, interval_ms: Optional[int] = None) -> None:
        if self._disposed:
            return
        if interval_ms is not None:
            interval_ms = max(1, int(interval_ms))
            if self._running and interval_ms != self._interval_ms:
                self.stop()
            self._interval_ms = interval_ms
        if self._running:
            return
        self._running = True
        self._schedule_next()

    def stop(self) -> None:
        self._generation += 1
        self._running = False
        if self._after_id is not None:
            after_id, self._after_id = self._after_id, None
            self._scheduler.after_cancel(after_id)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._callback = None
        self.stop()
        self._disposed = True

    def _schedule_next(self) -> None:
        generation = self._generation
        self._after_id = self._scheduler.after(self._interval_ms, lambda: self._fire(generation))

    def _fire(self, generation: int) -> None:
        if generation != self._generation or not self._running:
            return
        self._after_id = None
        # Reschedule first: a callback that stops the timer cancels this one.
        self._schedule_next()
        callback = self._callback
        if callback is not None:
            callback()


class OwnerDispatcher:
    """Routes work onto the scheduler's owner thread."""

    def __init__(self, scheduler: TkAfterScheduler, owner_thread: Optional[threading.Thread] = None) -> None:
        self._scheduler = scheduler
        self._owner = owner_thread or getattr(scheduler, "owner_thread", None) or threading.current_thread()

    @property
    def owner_thread(self) -> threading.Thread:
        return self._owner

    def is_owner(self) -> bool:
        return threading.current_thread() is self._owner

    def post(self, func: Callable[[], Any]) -> None:
        self._scheduler.after(0, func)

    def call(self, func: Callable[[], Any]) -> Any:
        """Run ``func`` now when already on the owner, otherwise queue it."""
        if self.is_owner():
            return func()
        log_debug(
            f"Posting {getattr(func, '__name__', func)!r} from {threading.current_thread().name}",
            func_name="OwnerDispatcher.call",
        )
        self.post(func)
        return None


class ManualScheduler:
    """Virtual-time scheduler driven explicitly with ``advance``.

    Callbacks run on whichever thread calls ``advance``/``run_pending``, in
    due-time order and, for equal due times, in the order they were scheduled.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._now_ms = 0
        self._queue: List[Tuple[int, int, str]] = []
        self._callbacks: Dict[str, Callable[[], None]] = {}
        self._seq = itertools.count()
        self.owner_thread = threading.current_thread()

    @property
    def now_ms(self) -> int:
        return self._now_ms

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._callbacks)

    def after(self, delay_ms: int, callback: Callable[[], None]) -> str:
        with self._lock:
            seq = next(self._seq)
            after_id = f"after#{seq}"
            heapq.heappush(self._queue, (self._now_ms + max(0, int(delay_ms)), seq, after_id))
            self._callbacks[after_id] = callback
        return after_id

    def after_cancel(self, after_id: str) -> None:
        with self._lock:
            self._callbacks.pop(after_id, None)

    def advance(self, delay_ms: int) -> int:
        """Move virtual time forward, running every callback that falls due."""
        target = self._now_ms + max(0, int(delay_ms))
        ran = 0
        while True:
            with self._lock:
                if not self._queue or self._queue[0][0] > target:
                    break
                due, _seq, after_id = heapq.heappop(self._queue)
                callback = self._callbacks.pop(after_id, None)
                self._now_ms = max(self._now_ms, due)
            if callback is None:
                continue
            callback()
            ran += 1
        self._now_ms = target
        return ran

    def run_pending(self) -> int:
        return self.advance(0)


class WorkerScheduler:
    """Single-worker task queue: one daemon thread runs every callback.

    ``after`` and ``after_cancel`` may be called from any thread. Once
    ``shutdown`` has been called, ``after`` drops the callback.
    """

    def __init__(self, name: str = "timerclock-owner") -> None:
        self._cond = threading.Condition()
        self._queue: List[Tuple[float, int, str]] = []
        self._callbacks: Dict[str, Callable[[], None]] = {}
        self._seq = itertools.count()
        self._started = False
        self._stopping = False
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)

    @property
    def owner_thread(self) -> threading.Thread:
        return self._thread

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    @property
    def pending_count(self) -> int:
        with self._cond:
            return len(self._callbacks)

    def start(self) -> None:
        with self._cond:
            if self._started or self._stopping:
                return
            self._started = True
        self._thread.start()

    def after(self, delay_ms: int, callback: Callable[[], None]) -> str:
        with self._cond:
            seq = next(self._seq)
            after_id = f"after#{seq}"
            if self._stopping:
                return after_id
            due = time.monotonic() + max(0, int(delay_ms)) / 1000.0
            heapq.heappush(self._queue, (due, seq, after_id))
            self._callbacks[after_id] = callback
            self._cond.notify()
        return after_id

    def after_cancel(self, after_id: str) -> None:
        with self._cond:
            self._callbacks.pop(after_id, None)

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        with self._cond:
            already_stopping = self._stopping
            self._stopping = True
            self._queue.clear()
            self._callbacks.clear()
            self._cond.notify_all()
        if already_stopping:
            return
        if wait and self._started and self._thread is not threading.current_thread():
            self._thread.join(timeout)

    def _next_callback(self) -> Optional[Callable[[], None]]:
        with self._cond:
            while True:
                if self._stopping:
                    return None
                if not self._queue:
                    self._cond.wait()
                    continue
                due, _seq, after_id = self._queue[0]
                remaining = due - time.monotonic()
                if remaining > 0:
                    self._cond.wait(remaining)
                    continue
                heapq.heappop(self._queue)
                callback = self._callbacks.pop(after_id, None)
                if callback is not None:
                    return callback

    def _run(self) -> None:
        while True:
            callback = self._next_callback()
            if callback is None:
                return
            try:
                callback()
            except Exception:
                log_exception("Scheduled callback failed", func_name="WorkerScheduler._run")
