from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

MIN_TIMER_MINUTES = 1
MAX_TIMER_MINUTES = 200


def validate_timer_minutes(value: Any) -> Optional[int]:
    """Return ``value`` as whole minutes if it is a usable timer duration.

    Accepts ints and plain digit strings between 1 and 200 inclusive.
    Anything else yields ``None`` so callers can drop the command.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        minutes = value
    elif isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            return None
        minutes = int(text)
    else:
        return None
    if minutes < MIN_TIMER_MINUTES or minutes > MAX_TIMER_MINUTES:
        return None
    return minutes


def format_countdown(seconds: int) -> str:
    total = abs(int(seconds))
    minutes, sec = divmod(total, 60)
    sign = "-" if seconds < 0 else ""
    return f"{sign}{minutes}:{sec:02d}"


def format_clock(moment: datetime) -> str:
    return moment.strftime("%H:%M:%S")
