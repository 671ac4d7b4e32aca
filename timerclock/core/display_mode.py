from __future__ import annotations

from timerclock.core.models import DisplayMode
from timerclock.core.observable import ChangeNotifier
from timerclock.core.scheduling import PeriodicTimer, TkAfterScheduler
from timerclock.core.settings import SettingsProvider
from timerclock.helpers.logging_helper import log_debug, log_module_import

log_module_import(__name__)


class DisplayModeSelector(ChangeNotifier):
    """Chooses between the countdown and the clock.

    Timer and Clock pin ``showing_clock``. Auto flips it every
    ``auto_switch_seconds`` and starts from whatever was visible before,
    so entering Auto never changes what is on screen.
    """

    def __init__(
        self,
        scheduler: TkAfterScheduler,
        settings: SettingsProvider,
        initial_mode: DisplayMode = DisplayMode.TIMER,
    ) -> None:
        super().__init__()
        self._settings = settings
        self._mode = DisplayMode(initial_mode)
        self._showing_clock = self._mode == DisplayMode.CLOCK
        self._disposed = False
        self._alternation = PeriodicTimer(scheduler, self._interval_ms(), self._alternate)
        if self._mode == DisplayMode.AUTO:
            self._alternation.start()

    @property
    def mode(self) -> DisplayMode:
        return self._mode

    @property
    def showing_clock(self) -> bool:
        return self._showing_clock

    @property
    def is_alternating(self) -> bool:
        return self._alternation.is_running

    def set_mode(self, mode: DisplayMode) -> None:
        mode = DisplayMode(mode)
        if self._disposed or mode == self._mode:
            return
        previous = self._showing_clock
        self._mode = mode
        if mode == DisplayMode.AUTO:
            self._alternation.start(self._interval_ms())
        else:
            self._alternation.stop()
            self._showing_clock = mode == DisplayMode.CLOCK
        # mode and showing_clock are both settled before either notification.
        self._notify_changed("mode")
        if self._showing_clock != previous:
            self._notify_changed("showing_clock")
        log_debug(f"Display mode is now {mode.value}", func_name="DisplayModeSelector.set_mode")

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._clear_subscribers()
        self._alternation.dispose()
        log_debug("Display mode selector disposed", func_name="DisplayModeSelector.dispose")

    def _interval_ms(self) -> int:
        return int(self._settings.auto_switch_seconds) * 1000

    def _alternate(self) -> None:
        if self._mode != DisplayMode.AUTO:
            return
        self._set_showing_clock(not self._showing_clock)

    def _set_showing_clock(self, value: bool) -> None:
        if value != self._showing_clock:
            self._showing_clock = value
            self._notify_changed("showing_clock")
