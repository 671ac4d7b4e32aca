from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from timerclock.core.time_format import MAX_TIMER_MINUTES, MIN_TIMER_MINUTES
from timerclock.helpers.config_helper import ConfigHelper
from timerclock.helpers.logging_helper import log_info, log_module_import

log_module_import(__name__)

SETTINGS_SECTION = "TimerClock"

DEFAULT_WARNING_SECONDS = 30
MIN_WARNING_SECONDS = 10
MAX_WARNING_SECONDS = 300

DEFAULT_AUTO_SWITCH_SECONDS = 10
MIN_AUTO_SWITCH_SECONDS = 5
MAX_AUTO_SWITCH_SECONDS = 60

DEFAULT_TIMER_MINUTES = 5


class SettingsProvider(Protocol):
    @property
    def warning_seconds(self) -> int: ...

    @property
    def auto_switch_seconds(self) -> int: ...

    @property
    def last_timer_minutes(self) -> int: ...

    def save_last_timer_minutes(self, minutes: int) -> None: ...


@dataclass
class TimerClockSettings:
    """In-memory settings, handy for embedding and tests."""

    warning_seconds: int = DEFAULT_WARNING_SECONDS
    auto_switch_seconds: int = DEFAULT_AUTO_SWITCH_SECONDS
    last_timer_minutes: int = DEFAULT_TIMER_MINUTES

    def save_last_timer_minutes(self, minutes: int) -> None:
        self.last_timer_minutes = int(minutes)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class ConfigSettings:
    """Settings backed by the ``[TimerClock]`` section of the INI config.

    Every property reads through ``ConfigHelper`` so edits made while the
    overlay runs take effect on the next read.
    """

    def __init__(self, section: str = SETTINGS_SECTION) -> None:
        self._section = section

    def _read_int(self, key: str, default: int, low: int, high: int) -> int:
        value = ConfigHelper.getint(self._section, key, fallback=default)
        if value is None:
            value = default
        return _clamp(value, low, high)

    @property
    def warning_seconds(self) -> int:
        return self._read_int("warning_time", DEFAULT_WARNING_SECONDS, MIN_WARNING_SECONDS, MAX_WARNING_SECONDS)

    @property
    def auto_switch_seconds(self) -> int:
        return self._read_int(
            "auto_switch_interval",
            DEFAULT_AUTO_SWITCH_SECONDS,
            MIN_AUTO_SWITCH_SECONDS,
            MAX_AUTO_SWITCH_SECONDS,
        )

    @property
    def last_timer_minutes(self) -> int:
        return self._read_int("last_timer_minutes", DEFAULT_TIMER_MINUTES, MIN_TIMER_MINUTES, MAX_TIMER_MINUTES)

    def save_last_timer_minutes(self, minutes: int) -> None:
        minutes = _clamp(int(minutes), MIN_TIMER_MINUTES, MAX_TIMER_MINUTES)
        ConfigHelper.set(self._section, "last_timer_minutes", minutes)
        log_info(f"Saved last timer duration: {minutes} min", func_name="ConfigSettings.save_last_timer_minutes")
