"""Display helpers for schedule windows."""

from datetime import time
from typing import Iterable, Optional, Union

TimeValue = Union[str, time, None]

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
DAY_SHORT_NAMES = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]
ALL_DAYS = frozenset(range(7))

DOES_NOT_RUN = "Does Not Run"
DISABLED_LABEL = "----"

# legacy placeholder window written by older clients to switch a daypart off
DISABLED_WINDOW = ("03:00", "03:01")


def _as_text(value: TimeValue) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    return str(value)


def format_time(value: TimeValue) -> str:
    """24h "HH:MM[:SS]" to "H:MM AM/PM". Minutes are passed through verbatim."""
    text = _as_text(value)
    if not text:
        return ""
    hours, minutes = text.split(":")[:2]
    hour = int(hours)
    suffix = "PM" if hour >= 12 else "AM"
    if hour == 0:
        display_hour = 12
    elif hour > 12:
        display_hour = hour - 12
    else:
        display_hour = hour
    return f"{display_hour}:{minutes} {suffix}"


def is_disabled_window(start: TimeValue, end: TimeValue) -> bool:
    start_text, end_text = _as_text(start), _as_text(end)
    if not start_text or not end_text:
        return False
    return (start_text[:5], end_text[:5]) == DISABLED_WINDOW


def format_schedule_time(start: TimeValue, end: TimeValue = None, runs_on_days: Optional[bool] = True) -> str:
    if runs_on_days is False:
        return DOES_NOT_RUN
    if is_disabled_window(start, end):
        return DISABLED_LABEL
    if _as_text(end) is None:
        return f"Starts at {format_time(start)}"
    return f"{format_time(start)} - {format_time(end)}"


def format_days_list(days: Iterable[int]) -> str:
    unique = sorted(set(days))
    if len(unique) == 7:
        return "Every day"
    if not unique:
        return "No days"
    return ", ".join(DAY_SHORT_NAMES[d] for d in unique)


def day_names(days: Iterable[int]) -> str:
    return ", ".join(DAY_NAMES[d] for d in sorted(set(days)))
