"""Store default / placement override merge.

A placement override and a store default describe the same logical schedule
when they share daypart name, schedule type, event date and schedule name.
Once a placement customises anything for a (daypart, type, event date)
combination, every store default for that combination stops being
inherited, whatever its schedule name.
"""

import logging
from datetime import date
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence

from sqlmodel import SQLModel

from signage.dayparts.formatting import format_days_list, format_schedule_time
from signage.dayparts.recurrence import describe_recurrence, next_occurrence
from signage.models.daypart_definition import EffectiveDaypartDefinition
from signage.models.daypart_schedule import (
    SCHEDULE_EVENT_HOLIDAY,
    SCHEDULE_REGULAR,
    DaypartSchedule,
    PlacementDaypartOverride,
    PlacementOverrideCreate,
    ScheduleBase,
)

logger = logging.getLogger(__name__)

SOURCE_STORE = "store"
SOURCE_PLACEMENT = "placement"


class DaypartKey(NamedTuple):
    daypart_name: str
    schedule_type: str
    event_date: str


class ScheduleKey(NamedTuple):
    daypart_name: str
    schedule_type: str
    event_date: str
    schedule_name: str


def normalize_schedule_type(value: Optional[str]) -> str:
    return value or SCHEDULE_REGULAR


def is_event(record) -> bool:
    return normalize_schedule_type(record.schedule_type) == SCHEDULE_EVENT_HOLIDAY


def _date_text(value) -> str:
    if not value:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def daypart_key(daypart_name: str, record) -> DaypartKey:
    return DaypartKey(
        daypart_name,
        normalize_schedule_type(record.schedule_type),
        _date_text(record.event_date),
    )


def exact_key(daypart_name: str, record) -> ScheduleKey:
    return ScheduleKey(*daypart_key(daypart_name, record), record.schedule_name or "")


class DaypartInfo(SQLModel):
    id: Optional[int] = None
    daypart_name: str
    display_label: str
    color: Optional[str] = None
    icon: Optional[str] = None
    sort_order: int = 0


class EffectiveSchedule(ScheduleBase):
    """A schedule window in force for a placement group. Never persisted."""

    id: Optional[int] = None
    source: str
    is_inherited: bool
    daypart_name: str
    daypart_definition_id: Optional[int] = None
    placement_group_id: Optional[int] = None
    daypart: Optional[DaypartInfo] = None

    time_label: str = ""
    days_label: str = ""
    recurrence_text: str = ""
    # events only; computed against today
    next_event_date: Optional[date] = None


def _daypart_info(definition: Optional[EffectiveDaypartDefinition]) -> Optional[DaypartInfo]:
    if definition is None:
        return None
    return DaypartInfo(
        id=definition.id,
        daypart_name=definition.daypart_name,
        display_label=definition.display_label,
        color=definition.color,
        icon=definition.icon,
        sort_order=definition.sort_order,
    )


def _schedule_fields(record) -> dict:
    next_event_date = None
    if is_event(record):
        next_event_date = next_occurrence(record.recurrence_type or "none", record.recurrence_config, record.event_date)
    return dict(
        days_of_week=sorted(set(record.days_of_week or [])),
        start_time=record.start_time,
        end_time=record.end_time,
        runs_on_days=record.runs_on_days is not False,
        schedule_type=normalize_schedule_type(record.schedule_type),
        event_name=record.event_name,
        event_date=record.event_date,
        recurrence_type=record.recurrence_type,
        recurrence_config=dict(record.recurrence_config) if record.recurrence_config else None,
        priority_level=record.priority_level,
        schedule_name=record.schedule_name,
        time_label=format_schedule_time(record.start_time, record.end_time, record.runs_on_days),
        days_label=format_days_list(record.days_of_week or []),
        recurrence_text=describe_recurrence(record.recurrence_type, record.recurrence_config, record.event_date),
        next_event_date=next_event_date,
    )


def _from_placement(
    record: PlacementDaypartOverride,
    definition: Optional[EffectiveDaypartDefinition],
) -> EffectiveSchedule:
    return EffectiveSchedule(
        id=record.id,
        source=SOURCE_PLACEMENT,
        is_inherited=False,
        daypart_name=record.daypart_name,
        daypart_definition_id=definition.id if definition else None,
        placement_group_id=record.placement_group_id,
        daypart=_daypart_info(definition),
        **_schedule_fields(record),
    )


def _from_store(
    record: DaypartSchedule,
    definition: EffectiveDaypartDefinition,
    placement_group_id: Optional[int],
) -> EffectiveSchedule:
    return EffectiveSchedule(
        id=record.id,
        source=SOURCE_STORE,
        is_inherited=True,
        daypart_name=definition.daypart_name,
        daypart_definition_id=record.daypart_definition_id,
        placement_group_id=placement_group_id,
        daypart=_daypart_info(definition),
        **_schedule_fields(record),
    )


def _sort_key(schedule: EffectiveSchedule, positions: Dict[str, int]):
    return (
        schedule.is_inherited,
        positions.get(schedule.daypart_name, len(positions)),
        schedule.daypart_name,
        schedule.schedule_type == SCHEDULE_EVENT_HOLIDAY,
        _date_text(schedule.event_date),
        str(schedule.start_time),
        schedule.id or 0,
    )


def merge_effective(
    store_schedules: Iterable[DaypartSchedule],
    placement_schedules: Iterable[PlacementDaypartOverride],
    definitions: Sequence[EffectiveDaypartDefinition],
    placement_group_id: Optional[int] = None,
) -> List[EffectiveSchedule]:
    """Return the placement's own schedules followed by the inherited store defaults."""
    definitions_by_id = {d.id: d for d in definitions}
    definitions_by_name = {d.daypart_name: d for d in definitions}
    positions = {d.daypart_name: index for index, d in enumerate(definitions)}

    placement_schedules = list(placement_schedules)
    exact_keys = set()
    customized_keys = set()
    for record in placement_schedules:
        exact_keys.add(exact_key(record.daypart_name, record))
        customized_keys.add(daypart_key(record.daypart_name, record))

    effective = [
        _from_placement(record, definitions_by_name.get(record.daypart_name))
        for record in placement_schedules
    ]

    for record in store_schedules:
        definition = definitions_by_id.get(record.daypart_definition_id)
        if definition is None:
            continue

        if exact_key(definition.daypart_name, record) in exact_keys:
            logger.debug("store schedule %s overridden by exact match", record.id)
            continue
        if daypart_key(definition.daypart_name, record) in customized_keys:
            logger.debug(
                "store schedule %s suppressed, %s is customized at placement level",
                record.id,
                definition.daypart_name,
            )
            continue

        effective.append(_from_store(record, definition, placement_group_id))

    effective.sort(key=lambda s: _sort_key(s, positions))
    return effective


def clone_for_override(schedule: EffectiveSchedule) -> PlacementOverrideCreate:
    """Unsaved placement-level copy of an inherited schedule (no id)."""
    return PlacementOverrideCreate(
        daypart_name=schedule.daypart_name,
        days_of_week=list(schedule.days_of_week),
        start_time=schedule.start_time,
        end_time=schedule.end_time,
        runs_on_days=schedule.runs_on_days,
        schedule_type=normalize_schedule_type(schedule.schedule_type),
        event_name=schedule.event_name,
        event_date=schedule.event_date,
        recurrence_type=schedule.recurrence_type,
        recurrence_config=dict(schedule.recurrence_config) if schedule.recurrence_config else None,
        priority_level=schedule.priority_level,
        schedule_name=schedule.schedule_name,
    )
