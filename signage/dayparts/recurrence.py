"""Event/holiday recurrence rules.

recurrence_config keys by type:
    annual_date        month, day_of_month
    monthly_date       day_of_month
    annual_relative    month, position (first..fourth|last), weekday (0=sunday)
    annual_date_range  range_start_date, range_end_date (ISO dates)
"""

import calendar
from datetime import date
from typing import Any, Dict, List, Optional

from signage.dayparts.formatting import DAY_NAMES

PRIORITY_REGULAR = 10
PRIORITY_DATE_RANGE = 50
PRIORITY_SINGLE_DAY = 100

POSITIONS = {"first": 1, "second": 2, "third": 3, "fourth": 4}
POSITION_LABELS = {"first": "First", "second": "Second", "third": "Third", "fourth": "Fourth", "last": "Last"}


def priority_for(recurrence_type: Optional[str]) -> int:
    if not recurrence_type:
        return PRIORITY_REGULAR
    if recurrence_type == "annual_date_range":
        return PRIORITY_DATE_RANGE
    return PRIORITY_SINGLE_DAY


def _config_int(config: Dict[str, Any], key: str, low: int, high: int) -> Optional[int]:
    value = config.get(key)
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    if number < low or number > high:
        return None
    return number


def _parse_date(value) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def recurrence_config_error(recurrence_type: Optional[str], config: Optional[Dict[str, Any]]) -> Optional[str]:
    """Message describing why a recurrence config cannot be evaluated, None when it can."""
    config = config or {}

    if recurrence_type == "annual_relative":
        if config.get("position") not in POSITION_LABELS or _config_int(config, "weekday", 0, 6) is None:
            return "Relative recurrence needs a position (first..fourth or last) and a weekday 0-6"
        if _config_int(config, "month", 1, 12) is None:
            return "Recurrence needs a month between 1 and 12"

    if recurrence_type == "annual_date" and _config_int(config, "month", 1, 12) is None:
        return "Recurrence needs a month between 1 and 12"

    if recurrence_type in ("annual_date", "monthly_date") and _config_int(config, "day_of_month", 1, 31) is None:
        return "Recurrence needs a day_of_month between 1 and 31"

    if recurrence_type == "annual_date_range":
        start = _parse_date(config.get("range_start_date"))
        end = _parse_date(config.get("range_end_date"))
        if start is None or end is None:
            return "Date range recurrence needs ISO range_start_date and range_end_date"

    return None


def _sunday_weekday(d: date) -> int:
    # python: monday=0; schedules: sunday=0
    return (d.weekday() + 1) % 7


def relative_date(year: int, month: int, position: str, weekday: int) -> date:
    """Nth (or last) given weekday of a month; weekday uses 0=sunday."""
    if position == "last":
        day = calendar.monthrange(year, month)[1]
        while _sunday_weekday(date(year, month, day)) != weekday:
            day -= 1
        return date(year, month, day)

    wanted = POSITIONS[position]
    seen = 0
    for day in range(1, calendar.monthrange(year, month)[1] + 1):
        current = date(year, month, day)
        if _sunday_weekday(current) == weekday:
            seen += 1
            if seen == wanted:
                return current
    return date(year, month, 1)


def _clamped(year: int, month: int, day: int) -> date:
    return date(year, month, min(day, calendar.monthrange(year, month)[1]))


def _occurrence_in_year(year: int, recurrence_type: str, config: Dict[str, Any]) -> Optional[date]:
    # malformed configs yield None so one bad row never breaks a whole schedule read
    if recurrence_config_error(recurrence_type, config):
        return None

    if recurrence_type == "annual_date":
        return _clamped(year, int(config["month"]), int(config["day_of_month"]))

    if recurrence_type == "annual_relative":
        return relative_date(year, int(config["month"]), config["position"], int(config["weekday"]))

    if recurrence_type == "annual_date_range":
        start = _parse_date(config.get("range_start_date"))
        return _clamped(year, start.month, start.day)

    return None


def _add_months(value: date, months: int, day_of_month: int) -> date:
    index = value.month - 1 + months
    return _clamped(value.year + index // 12, index % 12 + 1, day_of_month)


def next_occurrence(
    recurrence_type: Optional[str],
    config: Optional[Dict[str, Any]] = None,
    event_date=None,
    today: Optional[date] = None,
) -> Optional[date]:
    if not recurrence_type:
        return None
    config = config or {}
    today = today or date.today()

    if recurrence_type == "none":
        return _parse_date(event_date)

    if recurrence_type == "monthly_date":
        day_of_month = _config_int(config, "day_of_month", 1, 31)
        if day_of_month is None:
            return None
        this_month = _clamped(today.year, today.month, day_of_month)
        if this_month >= today:
            return this_month
        return _add_months(today, 1, day_of_month)

    this_year = _occurrence_in_year(today.year, recurrence_type, config)
    if this_year is None:
        return None
    if this_year >= today:
        return this_year
    return _occurrence_in_year(today.year + 1, recurrence_type, config)


def next_occurrences(
    recurrence_type: Optional[str],
    config: Optional[Dict[str, Any]] = None,
    event_date=None,
    count: int = 3,
    today: Optional[date] = None,
) -> List[date]:
    first = next_occurrence(recurrence_type, config, event_date, today=today)
    if first is None:
        return []
    if recurrence_type == "none":
        return [first]

    config = config or {}
    occurrences = [first]
    for step in range(1, count):
        if recurrence_type == "monthly_date":
            occurrences.append(_add_months(first, step, _config_int(config, "day_of_month", 1, 31)))
            continue
        following = _occurrence_in_year(first.year + step, recurrence_type, config)
        if following:
            occurrences.append(following)
    return occurrences


def _ordinal(day: int) -> str:
    if 11 <= day <= 13:
        return f"{day}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def describe_recurrence(
    recurrence_type: Optional[str],
    config: Optional[Dict[str, Any]] = None,
    event_date=None,
) -> str:
    if not recurrence_type:
        return ""
    config = config or {}
    valid = recurrence_config_error(recurrence_type, config) is None

    if recurrence_type == "none":
        parsed = _parse_date(event_date)
        if parsed:
            return f"{calendar.month_name[parsed.month]} {parsed.day}, {parsed.year}"
        return "One-time event"

    if recurrence_type == "annual_date":
        if valid:
            return f"Every {calendar.month_name[int(config['month'])]} {int(config['day_of_month'])}"
        return "Annual event"

    if recurrence_type == "monthly_date":
        if valid:
            return f"The {_ordinal(int(config['day_of_month']))} of every month"
        return "Monthly event"

    if recurrence_type == "annual_relative":
        if valid:
            return "{} {} of {} each year".format(
                POSITION_LABELS[config["position"]],
                DAY_NAMES[int(config["weekday"])],
                calendar.month_name[int(config["month"])],
            )
        return "Annual relative event"

    if recurrence_type == "annual_date_range":
        if valid:
            start = _parse_date(config.get("range_start_date"))
            end = _parse_date(config.get("range_end_date"))
            return (
                f"{calendar.month_name[start.month]} {start.day} - "
                f"{calendar.month_name[end.month]} {end.day} annually"
            )
        return "Annual date range"

    return ""
