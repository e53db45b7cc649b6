"""Per-daypart grouping of a placement's effective schedules."""

from typing import Dict, List, Optional, Sequence

from sqlmodel import SQLModel

from signage.dayparts.conflicts import remaining_days, scheduled_days
from signage.dayparts.merge import EffectiveSchedule, is_event
from signage.models.daypart_definition import EffectiveDaypartDefinition
from signage.models.daypart_schedule import PlacementOverrideCreate

UNASSIGNED_LABEL = "Unassigned"


class DaypartScheduleGroup(SQLModel):
    daypart_name: str
    display_label: str
    color: Optional[str] = None
    icon: Optional[str] = None
    sort_order: Optional[int] = None

    regular: List[EffectiveSchedule] = []
    events: List[EffectiveSchedule] = []
    inherited_regular: List[EffectiveSchedule] = []
    inherited_events: List[EffectiveSchedule] = []

    is_customized: bool = False
    scheduled_days: int = 0
    unscheduled_days: List[int] = []


class PlacementScheduleView(SQLModel):
    placement_group_id: int
    store_id: int
    dayparts: List[DaypartScheduleGroup] = []


def _by_start(schedules: List[EffectiveSchedule]) -> List[EffectiveSchedule]:
    return sorted(schedules, key=lambda s: str(s.start_time))


def _group_for(definition: Optional[EffectiveDaypartDefinition], daypart_name: str) -> DaypartScheduleGroup:
    if definition is None:
        return DaypartScheduleGroup(daypart_name=daypart_name, display_label=UNASSIGNED_LABEL)
    return DaypartScheduleGroup(
        daypart_name=definition.daypart_name,
        display_label=definition.display_label,
        color=definition.color,
        icon=definition.icon,
        sort_order=definition.sort_order,
    )


def build_schedule_view(
    placement_group_id: int,
    store_id: int,
    effective: Sequence[EffectiveSchedule],
    definitions: Sequence[EffectiveDaypartDefinition],
) -> PlacementScheduleView:
    """Group effective schedules by daypart, in definition resolution order.

    Dayparts without any schedule are left out. Overrides whose daypart no
    longer resolves for the store trail the list under "Unassigned".
    """
    groups: Dict[str, DaypartScheduleGroup] = {}
    for definition in definitions:
        groups[definition.daypart_name] = _group_for(definition, definition.daypart_name)

    buckets: Dict[str, Dict[str, List[EffectiveSchedule]]] = {}
    for schedule in effective:
        if schedule.daypart_name not in groups:
            groups[schedule.daypart_name] = _group_for(None, schedule.daypart_name)
        bucket = buckets.setdefault(
            schedule.daypart_name,
            {"regular": [], "events": [], "inherited_regular": [], "inherited_events": []},
        )
        name = "events" if is_event(schedule) else "regular"
        if schedule.is_inherited:
            name = f"inherited_{name}"
        bucket[name].append(schedule)

    dayparts = []
    for daypart_name, group in groups.items():
        bucket = buckets.get(daypart_name)
        if not bucket:
            continue
        group.regular = _by_start(bucket["regular"])
        group.events = _by_start(bucket["events"])
        group.inherited_regular = _by_start(bucket["inherited_regular"])
        group.inherited_events = _by_start(bucket["inherited_events"])
        group.is_customized = bool(group.regular)

        coverage_source = group.regular or group.inherited_regular
        group.scheduled_days = len(scheduled_days(coverage_source))
        # "schedule remaining days" is only offered once the placement owns the daypart
        group.unscheduled_days = remaining_days(group.regular) if group.regular else []
        dayparts.append(group)

    return PlacementScheduleView(
        placement_group_id=placement_group_id,
        store_id=store_id,
        dayparts=dayparts,
    )


def remaining_days_draft(
    daypart_name: str,
    placement_schedules: Sequence,
) -> Optional[PlacementOverrideCreate]:
    """Pre-filled override covering the days no own regular schedule claims yet.

    None when the placement has no regular schedule for the daypart or every
    day is already covered.
    """
    own = [s for s in placement_schedules if s.daypart_name == daypart_name and not is_event(s)]
    if not own:
        return None

    days = remaining_days(own)
    if not days:
        return None

    template = sorted(own, key=lambda s: str(s.start_time))[0]
    return PlacementOverrideCreate(
        daypart_name=daypart_name,
        days_of_week=days,
        start_time=template.start_time,
        end_time=template.end_time,
        runs_on_days=True,
        schedule_name=template.schedule_name,
    )
