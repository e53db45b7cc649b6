import unittest
from datetime import date, time, timezone
from types import SimpleNamespace

from signage.dayparts.merge import (
    SOURCE_PLACEMENT,
    SOURCE_STORE,
    DaypartKey,
    ScheduleKey,
    clone_for_override,
    daypart_key,
    exact_key,
    merge_effective,
)
from signage.models.daypart_definition import EffectiveDaypartDefinition
from signage.models.daypart_schedule import DaypartSchedule, PlacementDaypartOverride

BREAKFAST = EffectiveDaypartDefinition(
    id=1, daypart_name="breakfast", display_label="Breakfast", sort_order=1, source_level="concept"
)
LUNCH = EffectiveDaypartDefinition(
    id=2, daypart_name="lunch", display_label="Lunch", sort_order=2, source_level="global"
)
DEFINITIONS = [BREAKFAST, LUNCH]


def store_rows():
    return [
        DaypartSchedule(
            id=1, daypart_definition_id=1, days_of_week=[5, 1, 2, 3, 4], start_time=time(6, 0), end_time=time(10, 30)
        ),
        DaypartSchedule(
            id=2, daypart_definition_id=1, days_of_week=[0, 6], start_time=time(7, 0), end_time=time(11, 0),
            schedule_name="Weekend",
        ),
        DaypartSchedule(
            id=3, daypart_definition_id=2, days_of_week=[0, 1, 2, 3, 4, 5, 6], start_time=time(11, 0),
            end_time=time(15, 0),
        ),
        DaypartSchedule(
            id=4, daypart_definition_id=1, days_of_week=[], start_time=time(0, 0), runs_on_days=False,
            schedule_type="event_holiday", event_name="Christmas", event_date=date(2025, 12, 25),
            recurrence_type="none",
        ),
    ]


def override(id, daypart_name="breakfast", days=None, start=time(7, 0), end=time(10, 0), **extra):
    return PlacementDaypartOverride(
        id=id,
        placement_group_id=9,
        daypart_name=daypart_name,
        days_of_week=days if days is not None else [1, 2, 3, 4, 5],
        start_time=start,
        end_time=end,
        **extra,
    )


class KeyTests(unittest.TestCase):
    def test_missing_type_counts_as_regular(self) -> None:
        record = SimpleNamespace(schedule_type=None, event_date=None, schedule_name=None)
        self.assertEqual(daypart_key("lunch", record), DaypartKey("lunch", "regular", ""))
        self.assertEqual(exact_key("lunch", record), ScheduleKey("lunch", "regular", "", ""))

    def test_event_date_is_part_of_the_key(self) -> None:
        record = SimpleNamespace(schedule_type="event_holiday", event_date=date(2025, 12, 25), schedule_name="Xmas")
        self.assertEqual(exact_key("lunch", record), ScheduleKey("lunch", "event_holiday", "2025-12-25", "Xmas"))


class MergeEffectiveTests(unittest.TestCase):
    def test_no_overrides_inherits_everything(self) -> None:
        effective = merge_effective(store_rows(), [], DEFINITIONS, placement_group_id=9)

        self.assertEqual(len(effective), 4)
        self.assertTrue(all(s.is_inherited and s.source == SOURCE_STORE for s in effective))
        self.assertTrue(all(s.placement_group_id == 9 for s in effective))
        # definition order first, regular before events inside a daypart
        self.assertEqual([s.id for s in effective], [1, 2, 4, 3])

    def test_customized_daypart_suppresses_all_regular_store_rows(self) -> None:
        effective = merge_effective(store_rows(), [override(10)], DEFINITIONS, placement_group_id=9)

        self.assertEqual([(s.id, s.source) for s in effective], [
            (10, SOURCE_PLACEMENT),
            (4, SOURCE_STORE),
            (3, SOURCE_STORE),
        ])
        own = effective[0]
        self.assertFalse(own.is_inherited)
        self.assertEqual(own.daypart_definition_id, BREAKFAST.id)
        self.assertEqual(own.daypart.display_label, "Breakfast")

    def test_own_schedules_come_before_inherited(self) -> None:
        effective = merge_effective(store_rows(), [override(10, daypart_name="lunch", days=[1])], DEFINITIONS)

        flags = [s.is_inherited for s in effective]
        self.assertEqual(flags, sorted(flags))
        self.assertEqual(effective[0].id, 10)

    def test_events_only_suppress_same_date(self) -> None:
        other_day = override(
            11, days=[], start=time(0, 0), end=None, runs_on_days=False,
            schedule_type="event_holiday", event_name="Christmas Eve", event_date=date(2025, 12, 24),
        )
        effective = merge_effective(store_rows(), [other_day], DEFINITIONS)
        self.assertIn(4, [s.id for s in effective if s.is_inherited])

        same_day = override(
            12, days=[], start=time(0, 0), end=None, runs_on_days=False,
            schedule_type="event_holiday", event_name="Christmas", event_date=date(2025, 12, 25),
        )
        effective = merge_effective(store_rows(), [same_day], DEFINITIONS)
        self.assertNotIn(4, [s.id for s in effective if s.is_inherited])
        # regular breakfast rows are a different key and still flow through
        self.assertIn(1, [s.id for s in effective if s.is_inherited])

    def test_unresolved_definition_is_dropped(self) -> None:
        stray = DaypartSchedule(id=50, daypart_definition_id=77, days_of_week=[1], start_time=time(5, 0))
        effective = merge_effective(store_rows() + [stray], [], DEFINITIONS)
        self.assertNotIn(50, [s.id for s in effective])

    def test_override_for_unknown_daypart_is_kept(self) -> None:
        effective = merge_effective([], [override(13, daypart_name="happy_hour", days=[5])], DEFINITIONS)

        self.assertEqual(len(effective), 1)
        self.assertIsNone(effective[0].daypart)
        self.assertIsNone(effective[0].daypart_definition_id)

    def test_labels_and_sorted_days(self) -> None:
        effective = merge_effective(store_rows(), [], DEFINITIONS)
        weekday = next(s for s in effective if s.id == 1)
        christmas = next(s for s in effective if s.id == 4)

        self.assertEqual(weekday.days_of_week, [1, 2, 3, 4, 5])
        self.assertEqual(weekday.time_label, "6:00 AM - 10:30 AM")
        self.assertEqual(weekday.days_label, "Mon, Tue, Wed, Thu, Fri")
        self.assertEqual(christmas.time_label, "Does Not Run")
        self.assertEqual(christmas.recurrence_text, "December 25, 2025")
        self.assertEqual(christmas.next_event_date, date(2025, 12, 25))
        self.assertIsNone(weekday.next_event_date)


class MalformedRecurrenceTests(unittest.TestCase):
    def test_bad_stored_config_still_merges(self) -> None:
        broken = [
            DaypartSchedule(
                id=20, daypart_definition_id=2, days_of_week=[], start_time=time(0, 0), runs_on_days=False,
                schedule_type="event_holiday", event_name="Inventory", recurrence_type="monthly_date",
                recurrence_config={"day_of_month": "abc"},
            ),
            DaypartSchedule(
                id=21, daypart_definition_id=2, days_of_week=[], start_time=time(0, 0), runs_on_days=False,
                schedule_type="event_holiday", event_name="New Year", recurrence_type="annual_date",
                recurrence_config={"month": 13, "day_of_month": 1},
            ),
        ]
        effective = merge_effective(store_rows() + broken, [], DEFINITIONS)
        events = {s.id: s for s in effective if s.id in (20, 21)}

        self.assertEqual(sorted(events), [20, 21])
        self.assertIsNone(events[20].next_event_date)
        self.assertEqual(events[20].recurrence_text, "Monthly event")
        self.assertEqual(events[21].recurrence_text, "Annual event")


class TimestampTests(unittest.TestCase):
    def test_defaults_are_utc_aware(self) -> None:
        row = override(30)
        self.assertEqual(row.created_at.tzinfo, timezone.utc)
        self.assertEqual(store_rows()[0].updated_at.tzinfo, timezone.utc)


class CloneTests(unittest.TestCase):
    def test_clone_has_no_identity(self) -> None:
        inherited = merge_effective(store_rows(), [], DEFINITIONS)[1]
        draft = clone_for_override(inherited)

        self.assertFalse(hasattr(draft, "id"))
        self.assertEqual(draft.daypart_name, "breakfast")
        self.assertEqual(draft.days_of_week, [0, 6])
        self.assertEqual(draft.start_time, time(7, 0))
        self.assertEqual(draft.schedule_name, "Weekend")


if __name__ == "__main__":
    unittest.main()
