from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from timerclock.core.models import ClockState
from timerclock.core.observable import ChangeNotifier
from timerclock.core.scheduling import PeriodicTimer, TkAfterScheduler
from timerclock.helpers.logging_helper import log_debug, log_module_import

log_module_import(__name__)

REFRESH_MS = 1000


class ClockEngine(ChangeNotifier):
    """Wall-clock time refreshed every second from construction until disposal."""

    def __init__(self, scheduler: TkAfterScheduler, now: Optional[Callable[[], datetime]] = None) -> None:
        super().__init__()
        self._now_fn = now or datetime.now
        self._now = self._now_fn()
        self._disposed = False
        self._ticker = PeriodicTimer(scheduler, REFRESH_MS, self._refresh)
        self._ticker.start()

    @property
    def now(self) -> datetime:
        return self._now

    @property
    def state(self) -> ClockState:
        return ClockState(now=self._now)

    @property
    def is_ticking(self) -> bool:
        return self._ticker.is_running

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._clear_subscribers()
        self._ticker.dispose()
        log_debug("Clock disposed", func_name="ClockEngine.dispose")

    def _refresh(self) -> None:
        self._now = self._now_fn()
        self._notify_changed("now")
