from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict


class DisplayMode(str, Enum):
    TIMER = "Timer"
    CLOCK = "Clock"
    AUTO = "Auto"


class VisualState(str, Enum):
    NORMAL = "Normal"
    WARNING = "Warning"
    NEGATIVE = "Negative"


@dataclass(frozen=True)
class CountdownState:
    remaining: int = 0
    running: bool = False
    paused: bool = False
    is_negative: bool = False
    is_warning: bool = False


@dataclass(frozen=True)
class ClockState:
    now: datetime


@dataclass(frozen=True)
class PresentationState:
    """Everything a display or control surface needs to draw itself."""

    text: str
    visual_state: VisualState = VisualState.NORMAL
    showing_clock: bool = False
    mode: DisplayMode = DisplayMode.TIMER
    running: bool = False
    paused: bool = False
    timer_minutes: int = 5

    @property
    def play_pause_enabled(self) -> bool:
        return self.running

    @property
    def play_pause_label(self) -> str:
        return "Play" if self.paused else "Pause"

    @property
    def auto_mode_enabled(self) -> bool:
        return self.running

    def is_mode_active(self, mode: DisplayMode) -> bool:
        return self.mode == mode

    def to_dict(self) -> Dict[str, Any]:
        return {
            "text": self.text,
            "visual_state": self.visual_state.value,
            "showing_clock": self.showing_clock,
            "mode": self.mode.value,
            "running": self.running,
            "paused": self.paused,
            "timer_minutes": self.timer_minutes,
        }
