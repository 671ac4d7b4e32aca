from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from functools import partial
from typing import Any, Callable, Iterator, List, Optional

from timerclock.core.clock import ClockEngine
from timerclock.core.countdown import CountdownEngine
from timerclock.core.display_mode import DisplayModeSelector
from timerclock.core.models import DisplayMode, PresentationState, VisualState
from timerclock.core.scheduling import OwnerDispatcher, TkAfterScheduler
from timerclock.core.settings import DEFAULT_TIMER_MINUTES, SettingsProvider
from timerclock.core.time_format import format_clock, format_countdown, validate_timer_minutes
from timerclock.helpers.logging_helper import (
    log_debug,
    log_exception,
    log_info,
    log_module_import,
    log_warning,
)

log_module_import(__name__)

PresentationSubscriber = Callable[[PresentationState], None]


class Coordinator:
    """Single command surface and single event stream over the three engines.

    The coordinator is the only subscriber of each engine. Every engine
    notification re-derives a ``PresentationState``; subscribers only hear
    about it when the derived state actually differs from the last one.
    Commands called off the owner thread are posted to it instead of running
    inline.
    """

    def __init__(
        self,
        scheduler: TkAfterScheduler,
        settings: SettingsProvider,
        now: Optional[Callable[[], datetime]] = None,
        initial_mode: DisplayMode = DisplayMode.CLOCK,
        dispatcher: Optional[OwnerDispatcher] = None,
    ) -> None:
        self._settings = settings
        self._dispatcher = dispatcher or OwnerDispatcher(scheduler)
        self._countdown = CountdownEngine(scheduler, settings)
        self._clock = ClockEngine(scheduler, now=now)
        self._selector = DisplayModeSelector(scheduler, settings)
        self._subscribers: List[PresentationSubscriber] = []
        self._timer_minutes = validate_timer_minutes(settings.last_timer_minutes) or DEFAULT_TIMER_MINUTES
        self._batch_depth = 0
        self._disposed = False
        self._state = self._derive_state()

        self._countdown.subscribe(self._on_countdown_changed)
        self._clock.subscribe(self._on_clock_changed)
        self._selector.subscribe(self._on_selector_changed)

        with self._batch():
            self._selector.set_mode(initial_mode)

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def state(self) -> PresentationState:
        return self._state

    @property
    def countdown(self) -> CountdownEngine:
        return self._countdown

    @property
    def clock(self) -> ClockEngine:
        return self._clock

    @property
    def selector(self) -> DisplayModeSelector:
        return self._selector

    @property
    def mode(self) -> DisplayMode:
        return self._selector.mode

    @property
    def timer_minutes(self) -> int:
        return self._timer_minutes

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def subscribe(self, callback: PresentationSubscriber) -> None:
        if not self._dispatcher.is_owner():
            self._dispatcher.post(partial(self.subscribe, callback))
            return
        if self._disposed or callback in self._subscribers:
            return
        self._subscribers.append(callback)
        self._deliver(callback, self._state)

    def unsubscribe(self, callback: PresentationSubscriber) -> None:
        if not self._dispatcher.is_owner():
            self._dispatcher.post(partial(self.unsubscribe, callback))
            return
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def start_timer(self, minutes: Any = None) -> None:
        if not self._dispatcher.is_owner():
            self._dispatcher.post(partial(self.start_timer, minutes))
            return
        if self._disposed:
            log_debug("Ignored start after dispose", func_name="Coordinator.start_timer")
            return
        value = self._resolve_minutes(minutes)
        if value is None:
            log_warning(f"Rejected timer duration {minutes!r}", func_name="Coordinator.start_timer")
            return
        if self._countdown.running:
            log_debug("Timer already running; start ignored", func_name="Coordinator.start_timer")
            return

        with self._batch():
            self._countdown.start(value)
            self._timer_minutes = value
        log_info(f"Timer started for {value} min", func_name="Coordinator.start_timer")

        try:
            self._settings.save_last_timer_minutes(value)
        except OSError:
            # A settings write failure must not stop a running timer.
            log_exception("Could not persist last timer duration", func_name="Coordinator.start_timer")

    def toggle_play_pause(self) -> None:
        if not self._dispatcher.is_owner():
            self._dispatcher.post(self.toggle_play_pause)
            return
        if self._disposed:
            return
        with self._batch():
            if self._countdown.paused:
                self._countdown.resume()
            else:
                self._countdown.pause()

    def reset_timer(self, minutes: Any = None) -> None:
        if not self._dispatcher.is_owner():
            self._dispatcher.post(partial(self.reset_timer, minutes))
            return
        if self._disposed:
            log_debug("Ignored reset after dispose", func_name="Coordinator.reset_timer")
            return
        value = self._resolve_minutes(minutes)
        if value is None:
            log_warning(f"Rejected timer duration {minutes!r}", func_name="Coordinator.reset_timer")
            return

        with self._batch():
            if self._selector.mode == DisplayMode.AUTO:
                self._selector.set_mode(DisplayMode.CLOCK)
            self._countdown.reset(value)
            self._timer_minutes = value
        log_info(f"Timer reset to {value} min", func_name="Coordinator.reset_timer")

    def set_mode(self, mode: Any) -> None:
        if not self._dispatcher.is_owner():
            self._dispatcher.post(partial(self.set_mode, mode))
            return
        if self._disposed:
            return
        try:
            target = DisplayMode(mode)
        except ValueError:
            log_warning(f"Unknown display mode {mode!r}", func_name="Coordinator.set_mode")
            return
        if target == self._selector.mode:
            return
        with self._batch():
            self._selector.set_mode(target)
        log_info(f"Display mode set to {target.value}", func_name="Coordinator.set_mode")

    def set_timer_minutes(self, minutes: Any) -> None:
        if not self._dispatcher.is_owner():
            self._dispatcher.post(partial(self.set_timer_minutes, minutes))
            return
        if self._disposed:
            return
        value = validate_timer_minutes(minutes)
        if value is None:
            log_warning(f"Rejected timer duration {minutes!r}", func_name="Coordinator.set_timer_minutes")
            return
        with self._batch():
            self._timer_minutes = value

    def dispose(self) -> None:
        """Stop every engine and drop all subscribers.

        On the owner thread no tick or publication happens after this returns.
        From any other thread the disposal is only posted; the owner may still
        run ticks until it picks it up, so check ``is_disposed`` there.
        """
        if not self._dispatcher.is_owner():
            self._dispatcher.post(self.dispose)
            return
        if self._disposed:
            return
        self._disposed = True
        self._countdown.unsubscribe(self._on_countdown_changed)
        self._clock.unsubscribe(self._on_clock_changed)
        self._selector.unsubscribe(self._on_selector_changed)
        self._countdown.dispose()
        self._clock.dispose()
        self._selector.dispose()
        self._subscribers.clear()
        log_debug("Coordinator disposed", func_name="Coordinator.dispose")

    # ------------------------------------------------------------------
    # Engine notifications
    # ------------------------------------------------------------------
    def _on_countdown_changed(self, _property_name: str) -> None:
        self._recompute()

    def _on_clock_changed(self, _property_name: str) -> None:
        if self._selector.showing_clock:
            self._recompute()

    def _on_selector_changed(self, _property_name: str) -> None:
        self._recompute()

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------
    def _resolve_minutes(self, minutes: Any) -> Optional[int]:
        if minutes is None:
            return self._timer_minutes
        return validate_timer_minutes(minutes)

    @contextmanager
    def _batch(self) -> Iterator[None]:
        """Hold back publication until the outermost command finishes."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0:
                self._recompute()

    def _derive_state(self) -> PresentationState:
        showing_clock = self._selector.showing_clock
        running = self._countdown.running
        paused = self._countdown.paused

        if showing_clock:
            text = format_clock(self._clock.now)
        else:
            text = format_countdown(self._countdown.remaining)

        visual_state = VisualState.NORMAL
        if not showing_clock and running and not paused:
            if self._countdown.is_negative:
                visual_state = VisualState.NEGATIVE
            elif self._countdown.is_warning:
                visual_state = VisualState.WARNING

        return PresentationState(
            text=text,
            visual_state=visual_state,
            showing_clock=showing_clock,
            mode=self._selector.mode,
            running=running,
            paused=paused,
            timer_minutes=self._timer_minutes,
        )

    def _recompute(self) -> None:
        if self._batch_depth or self._disposed:
            return
        state = self._derive_state()
        if state == self._state:
            return
        self._state = state
        for callback in list(self._subscribers):
            self._deliver(callback, state)

    def _deliver(self, callback: PresentationSubscriber, state: PresentationState) -> None:
        try:
            callback(state)
        except Exception:
            log_exception("Presentation subscriber failed", func_name="Coordinator._deliver")
