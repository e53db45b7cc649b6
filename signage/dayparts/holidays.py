from datetime import time
from typing import Any, Dict, List, Optional

from sqlmodel import SQLModel

from signage.dayparts.recurrence import priority_for
from signage.models.daypart_schedule import SCHEDULE_EVENT_HOLIDAY, PlacementOverrideCreate


class HolidayTemplate(SQLModel):
    id: str
    name: str
    category: str  # federal | seasonal | custom
    recurrence_type: str
    recurrence_config: Dict[str, Any]
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_closed: bool = False
    description: str = ""


HOLIDAY_TEMPLATES: List[HolidayTemplate] = [
    HolidayTemplate(
        id="new-years-day", name="New Year's Day", category="federal",
        recurrence_type="annual_date", recurrence_config={"month": 1, "day_of_month": 1},
        is_closed=True, description="January 1st - Typically closed",
    ),
    HolidayTemplate(
        id="mlk-day", name="Martin Luther King Jr. Day", category="federal",
        recurrence_type="annual_relative", recurrence_config={"month": 1, "position": "third", "weekday": 1},
        start_time=time(10, 0), end_time=time(18, 0), description="Third Monday of January",
    ),
    HolidayTemplate(
        id="presidents-day", name="Presidents' Day", category="federal",
        recurrence_type="annual_relative", recurrence_config={"month": 2, "position": "third", "weekday": 1},
        start_time=time(10, 0), end_time=time(18, 0), description="Third Monday of February",
    ),
    HolidayTemplate(
        id="memorial-day", name="Memorial Day", category="federal",
        recurrence_type="annual_relative", recurrence_config={"month": 5, "position": "last", "weekday": 1},
        start_time=time(10, 0), end_time=time(18, 0), description="Last Monday of May",
    ),
    HolidayTemplate(
        id="independence-day", name="Independence Day", category="federal",
        recurrence_type="annual_date", recurrence_config={"month": 7, "day_of_month": 4},
        is_closed=True, description="July 4th - Typically closed",
    ),
    HolidayTemplate(
        id="labor-day", name="Labor Day", category="federal",
        recurrence_type="annual_relative", recurrence_config={"month": 9, "position": "first", "weekday": 1},
        start_time=time(10, 0), end_time=time(18, 0), description="First Monday of September",
    ),
    HolidayTemplate(
        id="thanksgiving", name="Thanksgiving", category="federal",
        recurrence_type="annual_relative", recurrence_config={"month": 11, "position": "fourth", "weekday": 4},
        is_closed=True, description="Fourth Thursday of November - Typically closed",
    ),
    HolidayTemplate(
        id="black-friday", name="Black Friday", category="custom",
        recurrence_type="annual_relative", recurrence_config={"month": 11, "position": "fourth", "weekday": 5},
        start_time=time(6, 0), end_time=time(23, 0), description="Day after Thanksgiving - Extended hours",
    ),
    HolidayTemplate(
        id="christmas-eve", name="Christmas Eve", category="federal",
        recurrence_type="annual_date", recurrence_config={"month": 12, "day_of_month": 24},
        start_time=time(8, 0), end_time=time(17, 0), description="December 24th - Reduced hours",
    ),
    HolidayTemplate(
        id="christmas", name="Christmas Day", category="federal",
        recurrence_type="annual_date", recurrence_config={"month": 12, "day_of_month": 25},
        is_closed=True, description="December 25th - Typically closed",
    ),
    HolidayTemplate(
        id="new-years-eve", name="New Year's Eve", category="federal",
        recurrence_type="annual_date", recurrence_config={"month": 12, "day_of_month": 31},
        start_time=time(8, 0), end_time=time(17, 0), description="December 31st - Reduced hours",
    ),
    HolidayTemplate(
        id="valentines-day", name="Valentine's Day", category="custom",
        recurrence_type="annual_date", recurrence_config={"month": 2, "day_of_month": 14},
        start_time=time(11, 0), end_time=time(22, 0), description="February 14th - Extended dinner hours",
    ),
]

TEMPLATES_BY_ID = {template.id: template for template in HOLIDAY_TEMPLATES}

# closed holidays still need a start time on the row
CLOSED_PLACEHOLDER_START = time(0, 0)


def get_template(template_id: str) -> Optional[HolidayTemplate]:
    return TEMPLATES_BY_ID.get(template_id)


def event_from_template(template: HolidayTemplate, daypart_name: str) -> PlacementOverrideCreate:
    """Event/holiday override draft for a daypart; closed holidays become "does not run"."""
    return PlacementOverrideCreate(
        daypart_name=daypart_name,
        days_of_week=[],
        start_time=template.start_time or CLOSED_PLACEHOLDER_START,
        end_time=template.end_time,
        runs_on_days=not template.is_closed,
        schedule_type=SCHEDULE_EVENT_HOLIDAY,
        event_name=template.name,
        recurrence_type=template.recurrence_type,
        recurrence_config=dict(template.recurrence_config),
        priority_level=priority_for(template.recurrence_type),
    )
