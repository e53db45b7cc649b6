"""Day-of-week assignment checks for regular schedules.

A weekday maps to at most one regular window per daypart at a placement.
"""

from typing import Iterable, List, Optional

from sqlmodel import SQLModel

from signage.dayparts.formatting import ALL_DAYS, day_names
from signage.dayparts.merge import is_event


class CollisionResult(SQLModel):
    has_collision: bool = False
    message: Optional[str] = None
    conflicting_days: List[int] = []


class DayUsage(SQLModel):
    day: int
    used_by_same_daypart: bool = False
    used_by_other_dayparts: List[str] = []


def _siblings(schedules: Iterable, editing_id: Optional[int]):
    for schedule in schedules:
        if editing_id is not None and getattr(schedule, "id", None) == editing_id:
            continue
        if is_event(schedule):
            continue
        yield schedule


def detect_collision(
    schedules: Iterable,
    daypart_name: str,
    selected_days: Iterable[int],
    editing_id: Optional[int] = None,
) -> CollisionResult:
    selected = set(selected_days)
    if not daypart_name or not selected:
        return CollisionResult()

    conflicting = set()
    for schedule in _siblings(schedules, editing_id):
        if schedule.daypart_name != daypart_name:
            continue
        conflicting.update(selected.intersection(schedule.days_of_week or []))

    if not conflicting:
        return CollisionResult()

    return CollisionResult(
        has_collision=True,
        message=f"This daypart already has a schedule for: {day_names(conflicting)}",
        conflicting_days=sorted(conflicting),
    )


def day_usage(
    schedules: Iterable,
    daypart_name: str,
    day: int,
    editing_id: Optional[int] = None,
) -> DayUsage:
    same = False
    others: List[str] = []
    for schedule in _siblings(schedules, editing_id):
        if day not in (schedule.days_of_week or []):
            continue
        if schedule.daypart_name == daypart_name:
            same = True
        elif schedule.daypart_name not in others:
            others.append(schedule.daypart_name)
    return DayUsage(day=day, used_by_same_daypart=same, used_by_other_dayparts=others)


def scheduled_days(schedules: Iterable) -> List[int]:
    days = set()
    for schedule in schedules:
        days.update(schedule.days_of_week or [])
    return sorted(days)


def remaining_days(schedules: Iterable) -> List[int]:
    """{0..6} minus the union of every schedule's days_of_week."""
    return sorted(ALL_DAYS.difference(scheduled_days(schedules)))
