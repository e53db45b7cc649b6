import logging
from dataclasses import dataclass, field
from typing import List

from sqlmodel import Session, col, select

from signage.core.errors import PlacementGroupNotFound, StoreNotFound
from signage.dayparts.merge import is_event
from signage.dayparts.resolver import resolve_dayparts
from signage.models.daypart_definition import EffectiveDaypartDefinition
from signage.models.daypart_schedule import DaypartSchedule, PlacementDaypartOverride
from signage.models.placement_group import PlacementGroup
from signage.models.store import Store

logger = logging.getLogger(__name__)


@dataclass
class ScheduleAggregate:
    placement_group: PlacementGroup
    store_id: int
    definitions: List[EffectiveDaypartDefinition] = field(default_factory=list)
    placement_schedules: List[PlacementDaypartOverride] = field(default_factory=list)
    store_schedules: List[DaypartSchedule] = field(default_factory=list)

    @property
    def placement_regular(self) -> List[PlacementDaypartOverride]:
        return [s for s in self.placement_schedules if not is_event(s)]

    @property
    def placement_events(self) -> List[PlacementDaypartOverride]:
        return [s for s in self.placement_schedules if is_event(s)]

    @property
    def store_regular(self) -> List[DaypartSchedule]:
        return [s for s in self.store_schedules if not is_event(s)]

    @property
    def store_events(self) -> List[DaypartSchedule]:
        return [s for s in self.store_schedules if is_event(s)]


def get_placement_group(session: Session, placement_group_id: int) -> PlacementGroup:
    group = session.get(PlacementGroup, placement_group_id)
    if not group:
        logger.warning("placement group %s not found", placement_group_id)
        raise PlacementGroupNotFound(placement_group_id)
    return group


def store_id_for_placement(session: Session, placement_group_id: int) -> int:
    group = get_placement_group(session, placement_group_id)
    if group.store_id is None or not session.get(Store, group.store_id):
        logger.warning("placement group %s has no resolvable store (%s)", placement_group_id, group.store_id)
        raise StoreNotFound(group.store_id, placement_group_id=placement_group_id)
    return group.store_id


def list_placement_overrides(session: Session, placement_group_id: int) -> List[PlacementDaypartOverride]:
    return list(
        session.exec(
            select(PlacementDaypartOverride)
            .where(PlacementDaypartOverride.placement_group_id == placement_group_id)
            .order_by(PlacementDaypartOverride.id)
        ).all()
    )


def list_store_schedules(session: Session, definition_ids: List[int]) -> List[DaypartSchedule]:
    if not definition_ids:
        return []
    return list(
        session.exec(
            select(DaypartSchedule)
            .where(col(DaypartSchedule.daypart_definition_id).in_(definition_ids))
            .order_by(DaypartSchedule.id)
        ).all()
    )


def aggregate_schedules(session: Session, placement_group_id: int) -> ScheduleAggregate:
    """Load everything the merge needs for one placement group.

    Raises PlacementGroupNotFound / StoreNotFound instead of returning empty
    sets, so callers can tell a failed resolution from an empty schedule.
    """
    store_id = store_id_for_placement(session, placement_group_id)
    definitions = resolve_dayparts(session, store_id)

    aggregate = ScheduleAggregate(
        placement_group=session.get(PlacementGroup, placement_group_id),
        store_id=store_id,
        definitions=definitions,
        placement_schedules=list_placement_overrides(session, placement_group_id),
        store_schedules=list_store_schedules(session, [d.id for d in definitions]),
    )
    logger.debug(
        "placement %s: %d overrides, %d store schedules",
        placement_group_id,
        len(aggregate.placement_schedules),
        len(aggregate.store_schedules),
    )
    return aggregate
