"""Row builders shared by the database-backed tests."""

from datetime import time
from typing import List, Optional

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from signage.models.daypart_definition import DaypartDefinition
from signage.models.daypart_schedule import DaypartSchedule, PlacementDaypartOverride
from signage.models.placement_group import PlacementGroup
from signage.models.store import Company, Concept, Store


def make_engine():
    # one shared in-memory connection so every session sees the same tables
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    return engine


def _save(session: Session, row):
    session.add(row)
    session.commit()
    session.refresh(row)
    return row


def make_store(session: Session, concept_name: str = "Demo Burgers", store_name: str = "Store #001"):
    concept = _save(session, Concept(name=concept_name))
    company = _save(session, Company(name=f"{concept_name} Co", concept_id=concept.id))
    store = _save(session, Store(name=store_name, company_id=company.id))
    return concept, company, store


def make_placement_group(session: Session, store_id: Optional[int], name: str = "Drive-Thru") -> PlacementGroup:
    return _save(session, PlacementGroup(name=name, store_id=store_id))


def make_definition(
    session: Session,
    daypart_name: str,
    sort_order: int = 0,
    concept_id: Optional[int] = None,
    store_id: Optional[int] = None,
    display_label: Optional[str] = None,
    is_active: bool = True,
) -> DaypartDefinition:
    return _save(
        session,
        DaypartDefinition(
            daypart_name=daypart_name,
            display_label=display_label or daypart_name.replace("_", " ").title(),
            sort_order=sort_order,
            concept_id=concept_id,
            store_id=store_id,
            is_active=is_active,
        ),
    )


def make_store_schedule(
    session: Session,
    definition: DaypartDefinition,
    days: List[int],
    start: time,
    end: Optional[time] = None,
    **extra,
) -> DaypartSchedule:
    return _save(
        session,
        DaypartSchedule(
            daypart_definition_id=definition.id,
            days_of_week=days,
            start_time=start,
            end_time=end,
            **extra,
        ),
    )


def make_override(
    session: Session,
    placement_group: PlacementGroup,
    daypart_name: str,
    days: List[int],
    start: time,
    end: Optional[time] = None,
    **extra,
) -> PlacementDaypartOverride:
    return _save(
        session,
        PlacementDaypartOverride(
            placement_group_id=placement_group.id,
            daypart_name=daypart_name,
            days_of_week=days,
            start_time=start,
            end_time=end,
            **extra,
        ),
    )


WEEKDAYS = [1, 2, 3, 4, 5]
WEEKEND = [0, 6]
EVERY_DAY = [0, 1, 2, 3, 4, 5, 6]
