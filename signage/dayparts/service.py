"""Reads and keyed writes for daypart schedules.

Nothing effective is persisted: every read aggregates the raw tables and
merges them again. Writes only touch placement_daypart_overrides (and
daypart_schedules for store defaults).
"""

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from signage.core.errors import (
    PartialUpdateError,
    PersistenceError,
    ScheduleConflictError,
    ScheduleNotFound,
    ScheduleValidationError,
)
from signage.dayparts.aggregator import ScheduleAggregate, aggregate_schedules, list_store_schedules
from signage.dayparts.conflicts import CollisionResult, detect_collision, scheduled_days
from signage.dayparts.formatting import day_names
from signage.dayparts.merge import (
    EffectiveSchedule,
    clone_for_override,
    daypart_key,
    is_event,
    merge_effective,
)
from signage.dayparts.recurrence import PRIORITY_REGULAR, priority_for, recurrence_config_error
from signage.dayparts.resolver import resolve_dayparts
from signage.dayparts.view import PlacementScheduleView, build_schedule_view, remaining_days_draft
from signage.models.daypart_definition import EffectiveDaypartDefinition
from signage.models.daypart_schedule import (
    RECURRENCE_TYPES,
    SCHEDULE_EVENT_HOLIDAY,
    SCHEDULE_REGULAR,
    SCHEDULE_TYPES,
    DaypartSchedule,
    PlacementDaypartOverride,
    PlacementOverrideCreate,
    PlacementOverrideUpdate,
    StoreScheduleCreate,
    utc_now,
)

logger = logging.getLogger(__name__)


def _commit(session: Session, action: str) -> None:
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("%s failed: %s", action, exc)
        raise PersistenceError(f"Could not {action}") from exc


# =========================
# READS
# =========================

def get_effective_schedules(session: Session, placement_group_id: int) -> Tuple[ScheduleAggregate, List[EffectiveSchedule]]:
    aggregate = aggregate_schedules(session, placement_group_id)
    effective = merge_effective(
        aggregate.store_schedules,
        aggregate.placement_schedules,
        aggregate.definitions,
        placement_group_id=placement_group_id,
    )
    return aggregate, effective


def get_schedule_view(session: Session, placement_group_id: int) -> PlacementScheduleView:
    aggregate, effective = get_effective_schedules(session, placement_group_id)
    return build_schedule_view(placement_group_id, aggregate.store_id, effective, aggregate.definitions)


def check_collision(
    session: Session,
    placement_group_id: int,
    daypart_name: str,
    days_of_week: Iterable[int],
    editing_id: Optional[int] = None,
) -> CollisionResult:
    aggregate = aggregate_schedules(session, placement_group_id)
    return detect_collision(aggregate.placement_schedules, daypart_name, days_of_week, editing_id)


def remaining_days_for(session: Session, placement_group_id: int, daypart_name: str) -> Optional[PlacementOverrideCreate]:
    aggregate = aggregate_schedules(session, placement_group_id)
    return remaining_days_draft(daypart_name, aggregate.placement_schedules)


def _find_inherited(effective: Sequence[EffectiveSchedule], schedule_id: int) -> EffectiveSchedule:
    for schedule in effective:
        if schedule.is_inherited and schedule.id == schedule_id:
            return schedule
    raise ScheduleNotFound(schedule_id, kind="inherited schedule")


def inherited_draft(session: Session, placement_group_id: int, schedule_id: int) -> PlacementOverrideCreate:
    _, effective = get_effective_schedules(session, placement_group_id)
    return clone_for_override(_find_inherited(effective, schedule_id))


# =========================
# VALIDATION
# =========================

def _apply_changes(base: dict, changes: PlacementOverrideUpdate) -> PlacementOverrideCreate:
    try:
        return PlacementOverrideCreate.model_validate({**base, **changes.model_dump(exclude_unset=True)})
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise ScheduleValidationError(f"{field}: {error['msg']}") from exc


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_schedule(draft, definitions: Optional[Sequence[EffectiveDaypartDefinition]] = None):
    """Validated copy of a schedule draft; raises ScheduleValidationError."""
    daypart_name = getattr(draft, "daypart_name", None)
    if definitions is not None and daypart_name not in {d.daypart_name for d in definitions}:
        raise ScheduleValidationError(f"Daypart '{daypart_name}' is not configured for this store")

    schedule_type = draft.schedule_type or SCHEDULE_REGULAR
    if schedule_type not in SCHEDULE_TYPES:
        raise ScheduleValidationError(f"Unknown schedule type '{schedule_type}'")

    days = sorted(set(draft.days_of_week or []))
    if any(day < 0 or day > 6 for day in days):
        raise ScheduleValidationError("days_of_week must be between 0 (Sunday) and 6 (Saturday)")
    if schedule_type == SCHEDULE_REGULAR and not days:
        raise ScheduleValidationError("Please select at least one day")

    if draft.runs_on_days is not False and draft.end_time is not None and draft.end_time <= draft.start_time:
        raise ScheduleValidationError("End time must be after start time")

    if draft.recurrence_type is not None and draft.recurrence_type not in RECURRENCE_TYPES:
        raise ScheduleValidationError(f"Unknown recurrence type '{draft.recurrence_type}'")
    config_error = recurrence_config_error(draft.recurrence_type, draft.recurrence_config)
    if config_error:
        raise ScheduleValidationError(config_error)

    event_name = _blank_to_none(draft.event_name)
    priority_level = draft.priority_level
    if schedule_type == SCHEDULE_EVENT_HOLIDAY:
        if not event_name:
            raise ScheduleValidationError("Event name is required")
        if draft.recurrence_type in (None, "none") and draft.event_date is None:
            raise ScheduleValidationError("Event date is required for one-time events")
        if priority_level is None:
            priority_level = priority_for(draft.recurrence_type)
    elif priority_level is None:
        priority_level = PRIORITY_REGULAR

    return draft.model_copy(
        update={
            "schedule_type": schedule_type,
            "days_of_week": days,
            "event_name": event_name,
            "schedule_name": _blank_to_none(draft.schedule_name),
            "priority_level": priority_level,
        }
    )


def _ensure_no_collision(draft, siblings: Iterable, editing_id: Optional[int] = None) -> None:
    if is_event(draft):
        return
    collision = detect_collision(siblings, draft.daypart_name, draft.days_of_week, editing_id)
    if collision.has_collision:
        raise ScheduleConflictError(collision.message, collision.conflicting_days)


def _validated_batch(
    drafts: Iterable[PlacementOverrideCreate],
    definitions: Sequence[EffectiveDaypartDefinition],
    existing: Iterable[PlacementDaypartOverride],
) -> List[PlacementOverrideCreate]:
    accepted: List[PlacementOverrideCreate] = []
    existing = list(existing)
    for draft in drafts:
        normalized = normalize_schedule(draft, definitions)
        _ensure_no_collision(normalized, existing + accepted)
        accepted.append(normalized)
    return accepted


def _new_override(placement_group_id: int, draft: PlacementOverrideCreate) -> PlacementDaypartOverride:
    return PlacementDaypartOverride.model_validate({**draft.model_dump(), "placement_group_id": placement_group_id})


# =========================
# PLACEMENT OVERRIDE WRITES
# =========================

def _insert_overrides(
    session: Session,
    aggregate: ScheduleAggregate,
    drafts: Sequence[PlacementOverrideCreate],
) -> List[PlacementDaypartOverride]:
    placement_group_id = aggregate.placement_group.id
    accepted = _validated_batch(drafts, aggregate.definitions, aggregate.placement_schedules)

    rows = [_new_override(placement_group_id, draft) for draft in accepted]
    session.add_all(rows)
    _commit(session, f"create schedules for placement group {placement_group_id}")
    for row in rows:
        session.refresh(row)

    logger.info(
        "placement group %s: created %d override(s) for %s",
        placement_group_id,
        len(rows),
        ", ".join(sorted({row.daypart_name for row in rows})),
    )
    return rows


def create_override(session: Session, placement_group_id: int, payload: PlacementOverrideCreate) -> PlacementDaypartOverride:
    aggregate = aggregate_schedules(session, placement_group_id)
    return _insert_overrides(session, aggregate, [payload])[0]


def get_override(session: Session, placement_group_id: int, override_id: int) -> PlacementDaypartOverride:
    override = session.get(PlacementDaypartOverride, override_id)
    if not override or override.placement_group_id != placement_group_id:
        raise ScheduleNotFound(override_id, kind="placement schedule")
    return override


def update_override(
    session: Session,
    placement_group_id: int,
    override_id: int,
    changes: PlacementOverrideUpdate,
) -> PlacementDaypartOverride:
    aggregate = aggregate_schedules(session, placement_group_id)
    override = get_override(session, placement_group_id, override_id)

    current = PlacementOverrideCreate.model_validate(override.model_dump(include=set(PlacementOverrideCreate.model_fields)))
    merged = _apply_changes(current.model_dump(), changes)
    normalized = normalize_schedule(merged, aggregate.definitions)
    _ensure_no_collision(normalized, aggregate.placement_schedules, editing_id=override_id)

    for name, value in normalized.model_dump().items():
        setattr(override, name, value)
    override.updated_at = utc_now()

    session.add(override)
    _commit(session, f"update placement schedule {override_id}")
    session.refresh(override)
    logger.info("placement group %s: updated override %s", placement_group_id, override_id)
    return override


def delete_override(session: Session, placement_group_id: int, override_id: int) -> None:
    override = get_override(session, placement_group_id, override_id)
    session.delete(override)
    _commit(session, f"delete placement schedule {override_id}")
    logger.info("placement group %s: deleted override %s", placement_group_id, override_id)


def customize_inherited(
    session: Session,
    placement_group_id: int,
    schedule_id: int,
    changes: Optional[PlacementOverrideUpdate] = None,
    include_siblings: bool = False,
) -> List[PlacementDaypartOverride]:
    """Save an edited copy of an inherited store schedule as a placement override.

    The new override suppresses every store default sharing its daypart,
    schedule type and event date. With include_siblings those other defaults
    are copied to the placement in the same transaction instead of being
    dropped from the effective set.
    """
    aggregate = aggregate_schedules(session, placement_group_id)
    effective = merge_effective(
        aggregate.store_schedules,
        aggregate.placement_schedules,
        aggregate.definitions,
        placement_group_id=placement_group_id,
    )
    inherited = _find_inherited(effective, schedule_id)

    draft = clone_for_override(inherited)
    if changes is not None:
        draft = _apply_changes(draft.model_dump(), changes)

    drafts = [draft]
    if include_siblings:
        key = daypart_key(inherited.daypart_name, inherited)
        for schedule in effective:
            if schedule.is_inherited and schedule.id != schedule_id and daypart_key(schedule.daypart_name, schedule) == key:
                drafts.append(clone_for_override(schedule))

    return _insert_overrides(session, aggregate, drafts)


def find_mergeable(session: Session, placement_group_id: int, override_id: int) -> List[PlacementDaypartOverride]:
    """Other regular overrides of the same daypart with identical start/end times."""
    target = get_override(session, placement_group_id, override_id)
    if is_event(target):
        return []
    aggregate = aggregate_schedules(session, placement_group_id)
    return [
        schedule
        for schedule in aggregate.placement_regular
        if schedule.id != target.id
        and schedule.daypart_name == target.daypart_name
        and schedule.start_time == target.start_time
        and schedule.end_time == target.end_time
    ]


def merge_schedules(session: Session, placement_group_id: int, override_id: int) -> PlacementDaypartOverride:
    """Fold mergeable siblings into one override: union of days, name cleared, one transaction."""
    target = get_override(session, placement_group_id, override_id)
    if is_event(target):
        raise ScheduleValidationError("Only regular schedules can be merged")

    others = find_mergeable(session, placement_group_id, override_id)
    if not others:
        return target

    days = set(target.days_of_week or [])
    for schedule in others:
        days.update(schedule.days_of_week or [])

    try:
        for schedule in others:
            session.delete(schedule)
        # siblings go first so the widened day set never overlaps them
        session.flush()
        target.days_of_week = sorted(days)
        target.schedule_name = None
        target.updated_at = utc_now()
        session.add(target)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("merging schedules into %s failed: %s", override_id, exc)
        raise PersistenceError("Could not merge schedules") from exc

    session.refresh(target)
    logger.info(
        "placement group %s: merged %d schedule(s) into %s",
        placement_group_id,
        len(others),
        override_id,
    )
    return target


def replace_placement_overrides(
    session: Session,
    placement_group_id: int,
    payloads: Sequence[PlacementOverrideCreate],
) -> List[PlacementDaypartOverride]:
    """Swap a placement's whole override collection in a single transaction."""
    aggregate = aggregate_schedules(session, placement_group_id)
    accepted = _validated_batch(payloads, aggregate.definitions, [])

    try:
        for schedule in aggregate.placement_schedules:
            session.delete(schedule)
        session.flush()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("clearing overrides of placement group %s failed: %s", placement_group_id, exc)
        raise PersistenceError(f"Could not clear schedules for placement group {placement_group_id}") from exc

    try:
        rows = [_new_override(placement_group_id, draft) for draft in accepted]
        session.add_all(rows)
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("inserting overrides of placement group %s failed: %s", placement_group_id, exc)
        raise PartialUpdateError(
            f"Replacing schedules for placement group {placement_group_id} failed after the existing "
            "schedules were removed; the change was rolled back"
        ) from exc

    for row in rows:
        session.refresh(row)
    logger.info("placement group %s: replaced overrides with %d row(s)", placement_group_id, len(rows))
    return rows


# =========================
# STORE DEFAULTS
# =========================

def list_store_defaults(session: Session, store_id: int) -> List[DaypartSchedule]:
    definitions = resolve_dayparts(session, store_id)
    return list_store_schedules(session, [d.id for d in definitions])


def create_store_default(session: Session, store_id: int, payload: StoreScheduleCreate) -> DaypartSchedule:
    definitions = resolve_dayparts(session, store_id)
    definition = next((d for d in definitions if d.id == payload.daypart_definition_id), None)
    if definition is None:
        raise ScheduleValidationError(
            f"Daypart definition {payload.daypart_definition_id} does not apply to store {store_id}"
        )

    normalized = normalize_schedule(payload)
    if not is_event(normalized):
        siblings = [s for s in list_store_schedules(session, [definition.id]) if not is_event(s)]
        overlap = sorted(set(scheduled_days(siblings)).intersection(normalized.days_of_week))
        if overlap:
            raise ScheduleConflictError(f"This daypart already has a schedule for: {day_names(overlap)}", overlap)

    row = DaypartSchedule.model_validate(normalized.model_dump())
    session.add(row)
    _commit(session, f"create store schedule for store {store_id}")
    session.refresh(row)
    logger.info("store %s: created default schedule %s for %s", store_id, row.id, definition.daypart_name)
    return row


def delete_store_default(session: Session, store_id: int, schedule_id: int) -> None:
    schedule = next((s for s in list_store_defaults(session, store_id) if s.id == schedule_id), None)
    if schedule is None:
        raise ScheduleNotFound(schedule_id, kind="store schedule")
    session.delete(schedule)
    _commit(session, f"delete store schedule {schedule_id}")
    logger.info("store %s: deleted default schedule %s", store_id, schedule_id)
