import logging
from datetime import time

from sqlmodel import Session, select

from signage.core.logging import configure_logging
from signage.database import create_db_and_tables, engine
from signage.models.daypart_definition import DaypartDefinition
from signage.models.daypart_schedule import DaypartSchedule
from signage.models.placement_group import PlacementGroup
from signage.models.store import Company, Concept, Store

logger = logging.getLogger(__name__)

CONCEPT_NAME = "Demo Burgers"

DAYPARTS = [
    dict(daypart_name="breakfast", display_label="Breakfast", icon="Sunrise", sort_order=1,
         color="bg-amber-100 text-amber-800 border-amber-300"),
    dict(daypart_name="lunch", display_label="Lunch", icon="Sun", sort_order=2,
         color="bg-green-100 text-green-800 border-green-300"),
    dict(daypart_name="dinner", display_label="Dinner", icon="Sunset", sort_order=3,
         color="bg-orange-100 text-orange-800 border-orange-300"),
    dict(daypart_name="late_night", display_label="Late Night", icon="MoonStar", sort_order=4,
         color="bg-indigo-100 text-indigo-800 border-indigo-300"),
]

# weekday defaults, sunday brunch runs breakfast longer
DEFAULT_WINDOWS = {
    "breakfast": [
        dict(days_of_week=[1, 2, 3, 4, 5, 6], start_time=time(6, 0), end_time=time(10, 30)),
        dict(days_of_week=[0], start_time=time(7, 0), end_time=time(12, 0), schedule_name="Sunday Brunch"),
    ],
    "lunch": [dict(days_of_week=[0, 1, 2, 3, 4, 5, 6], start_time=time(10, 30), end_time=time(16, 0))],
    "dinner": [dict(days_of_week=[0, 1, 2, 3, 4, 5, 6], start_time=time(16, 0), end_time=time(22, 0))],
    "late_night": [dict(days_of_week=[5, 6], start_time=time(22, 0), end_time=None)],
}


def _get_or_create(session: Session, model, **filters):
    row = session.exec(select(model).filter_by(**filters)).first()
    if row:
        return row, False
    row = model(**filters)
    session.add(row)
    session.flush()
    return row, True


def main():
    configure_logging()
    create_db_and_tables()

    with Session(engine) as session:
        # 1) hierarchy: concept -> company -> store -> placement groups
        concept, _ = _get_or_create(session, Concept, name=CONCEPT_NAME)
        company, _ = _get_or_create(session, Company, name="Demo Franchise Co", concept_id=concept.id)
        store, _ = _get_or_create(session, Store, name="Store #001", company_id=company.id)
        drive_thru, _ = _get_or_create(session, PlacementGroup, name="Drive-Thru Displays", store_id=store.id)
        _get_or_create(session, PlacementGroup, name="Lobby Menu Boards", store_id=store.id)

        # 2) concept-level daypart definitions
        for entry in DAYPARTS:
            definition = session.exec(
                select(DaypartDefinition).where(
                    DaypartDefinition.concept_id == concept.id,
                    DaypartDefinition.daypart_name == entry["daypart_name"],
                )
            ).first()
            if not definition:
                definition = DaypartDefinition(concept_id=concept.id, **entry)
                session.add(definition)
                session.flush()

            # 3) store defaults, only if the daypart has none yet
            existing = session.exec(
                select(DaypartSchedule).where(DaypartSchedule.daypart_definition_id == definition.id)
            ).first()
            if not existing:
                for window in DEFAULT_WINDOWS[entry["daypart_name"]]:
                    session.add(DaypartSchedule(daypart_definition_id=definition.id, **window))

        session.commit()

        logger.info("seed complete")
        logger.info("store %s (%s), placement group %s (%s)", store.id, store.name, drive_thru.id, drive_thru.name)
        logger.info("dayparts: %s", ", ".join(d["display_label"] for d in DAYPARTS))


if __name__ == "__main__":
    main()
