import unittest
from datetime import time

from signage.dayparts.formatting import (
    day_names,
    format_days_list,
    format_schedule_time,
    format_time,
    is_disabled_window,
)


class FormatTimeTests(unittest.TestCase):
    def test_midnight_and_noon(self) -> None:
        self.assertEqual(format_time("00:00:00"), "12:00 AM")
        self.assertEqual(format_time("12:00:00"), "12:00 PM")

    def test_afternoon_keeps_minutes(self) -> None:
        self.assertEqual(format_time("13:05:00"), "1:05 PM")
        self.assertEqual(format_time("23:59"), "11:59 PM")

    def test_accepts_time_objects(self) -> None:
        self.assertEqual(format_time(time(9, 30)), "9:30 AM")

    def test_empty_value(self) -> None:
        self.assertEqual(format_time(None), "")
        self.assertEqual(format_time(""), "")


class FormatScheduleTimeTests(unittest.TestCase):
    def test_window(self) -> None:
        self.assertEqual(format_schedule_time("06:00:00", "10:30:00"), "6:00 AM - 10:30 AM")

    def test_open_ended(self) -> None:
        self.assertEqual(format_schedule_time(time(22, 0), None), "Starts at 10:00 PM")

    def test_does_not_run_wins(self) -> None:
        self.assertEqual(format_schedule_time("03:00:00", "03:01:00", runs_on_days=False), "Does Not Run")
        self.assertEqual(format_schedule_time("06:00", "10:00", runs_on_days=False), "Does Not Run")

    def test_disabled_placeholder_window(self) -> None:
        self.assertTrue(is_disabled_window(time(3, 0), time(3, 1)))
        self.assertEqual(format_schedule_time("03:00:00", "03:01:00"), "----")
        self.assertFalse(is_disabled_window("03:00", None))


class DayFormattingTests(unittest.TestCase):
    def test_days_list(self) -> None:
        self.assertEqual(format_days_list(range(7)), "Every day")
        self.assertEqual(format_days_list([]), "No days")
        self.assertEqual(format_days_list([3, 1, 1]), "Mon, Wed")

    def test_day_names(self) -> None:
        self.assertEqual(day_names([6, 0]), "Sunday, Saturday")


if __name__ == "__main__":
    unittest.main()
