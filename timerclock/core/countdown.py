from __future__ import annotations

from timerclock.core.models import CountdownState
from timerclock.core.observable import ChangeNotifier
from timerclock.core.scheduling import PeriodicTimer, TkAfterScheduler
from timerclock.core.settings import SettingsProvider
from timerclock.helpers.logging_helper import log_debug, log_module_import

log_module_import(__name__)

TICK_MS = 1000


class CountdownEngine(ChangeNotifier):
    """Remaining time plus running/paused flags, ticking once per second.

    Remaining time keeps decreasing past zero until the timer is stopped or
    reset. ``remaining`` is announced on every change; the other properties
    only when their value flips.
    """

    def __init__(self, scheduler: TkAfterScheduler, settings: SettingsProvider) -> None:
        super().__init__()
        self._settings = settings
        self._ticker = PeriodicTimer(scheduler, TICK_MS, self._tick)
        self._remaining = 0
        self._running = False
        self._paused = False
        self._is_negative = False
        self._is_warning = False
        self._disposed = False
        self._set_remaining(0)

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def running(self) -> bool:
        return self._running

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def is_negative(self) -> bool:
        return self._is_negative

    @property
    def is_warning(self) -> bool:
        return self._is_warning

    @property
    def is_ticking(self) -> bool:
        return self._ticker.is_running

    @property
    def state(self) -> CountdownState:
        return CountdownState(
            remaining=self._remaining,
            running=self._running,
            paused=self._paused,
            is_negative=self._is_negative,
            is_warning=self._is_warning,
        )

    def start(self, minutes: int) -> None:
        if self._disposed:
            log_debug("Ignored start on disposed countdown", func_name="CountdownEngine.start")
            return
        self._ticker.stop()
        self._set_remaining(int(minutes) * 60)
        self._ticker.start()
        self._set_running(True)
        self._set_paused(False)

    def pause(self) -> None:
        if not self._running:
            log_debug("Ignored pause while not running", func_name="CountdownEngine.pause")
            return
        self._ticker.stop()
        self._set_paused(True)

    def resume(self) -> None:
        if not (self._running and self._paused):
            log_debug("Ignored resume while not paused", func_name="CountdownEngine.resume")
            return
        self._ticker.start()
        self._set_paused(False)

    def stop(self) -> None:
        self._ticker.stop()
        self._set_running(False)
        self._set_paused(False)

    def reset(self, minutes: int) -> None:
        if self._disposed:
            log_debug("Ignored reset on disposed countdown", func_name="CountdownEngine.reset")
            return
        self.stop()
        self._set_remaining(int(minutes) * 60)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._clear_subscribers()
        self._ticker.dispose()
        self._running = False
        self._paused = False
        log_debug("Countdown disposed", func_name="CountdownEngine.dispose")

    def _tick(self) -> None:
        if not self._running or self._paused:
            return
        self._set_remaining(self._remaining - 1)

    def _set_remaining(self, seconds: int) -> None:
        self._remaining = seconds
        is_negative = seconds < 0
        is_warning = not is_negative and seconds <= self._settings.warning_seconds
        if is_negative != self._is_negative:
            self._is_negative = is_negative
            self._notify_changed("is_negative")
        if is_warning != self._is_warning:
            self._is_warning = is_warning
            self._notify_changed("is_warning")
        self._notify_changed("remaining")

    def _set_running(self, value: bool) -> None:
        if value != self._running:
            self._running = value
            self._notify_changed("running")

    def _set_paused(self, value: bool) -> None:
        if value != self._paused:
            self._paused = value
            self._notify_changed("paused")
