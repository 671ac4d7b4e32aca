from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from timerclock.core.coordinator import Coordinator
from timerclock.core.models import DisplayMode, PresentationState, VisualState
from timerclock.core.scheduling import ManualScheduler, TkAfterScheduler, WorkerScheduler
from timerclock.core.settings import ConfigSettings, SettingsProvider, TimerClockSettings
from timerclock.helpers.logging_helper import log_function


@log_function
def create_coordinator(
    scheduler: TkAfterScheduler,
    settings: Optional[SettingsProvider] = None,
    now: Optional[Callable[[], datetime]] = None,
) -> Coordinator:
    """Build the engines and their coordinator on ``scheduler``.

    Call this on the scheduler's owner thread (the Tk main thread), or before
    a ``WorkerScheduler`` is started.
    """
    return Coordinator(scheduler, settings or ConfigSettings(), now=now)


__all__ = [
    "ConfigSettings",
    "Coordinator",
    "DisplayMode",
    "ManualScheduler",
    "PresentationState",
    "SettingsProvider",
    "TimerClockSettings",
    "VisualState",
    "WorkerScheduler",
    "create_coordinator",
]
