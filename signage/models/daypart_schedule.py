from typing import Any, Dict, List, Optional
from datetime import date, datetime, time, timezone
from sqlalchemy import JSON
from sqlmodel import SQLModel, Field


SCHEDULE_REGULAR = "regular"
SCHEDULE_EVENT_HOLIDAY = "event_holiday"
SCHEDULE_TYPES = (SCHEDULE_REGULAR, SCHEDULE_EVENT_HOLIDAY)

RECURRENCE_TYPES = ("none", "annual_date", "monthly_date", "annual_relative", "annual_date_range")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ScheduleBase(SQLModel):
    # 0=sunday ... 6=saturday; empty = not assigned to any day yet
    days_of_week: List[int] = Field(default_factory=list, sa_type=JSON)

    start_time: time
    # null = open-ended until the next window
    end_time: Optional[time] = None

    # false = explicitly does not run on days_of_week
    runs_on_days: bool = True

    schedule_type: str = Field(default=SCHEDULE_REGULAR, index=True)
    # regular | event_holiday

    event_name: Optional[str] = None
    event_date: Optional[date] = None
    recurrence_type: Optional[str] = None
    # none | annual_date | monthly_date | annual_relative | annual_date_range
    recurrence_config: Optional[Dict[str, Any]] = Field(default=None, sa_type=JSON)
    priority_level: Optional[int] = None

    schedule_name: Optional[str] = None


# =========================
# STORE DEFAULTS
# =========================

class StoreScheduleCreate(ScheduleBase):
    daypart_definition_id: int


class DaypartSchedule(ScheduleBase, table=True):
    __tablename__ = "daypart_schedules"

    id: Optional[int] = Field(default=None, primary_key=True)

    daypart_definition_id: int = Field(foreign_key="daypart_definitions.id", index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


# =========================
# PLACEMENT OVERRIDES
# =========================

class PlacementOverrideCreate(ScheduleBase):
    daypart_name: str


class PlacementOverrideUpdate(SQLModel):
    daypart_name: Optional[str] = None
    days_of_week: Optional[List[int]] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    runs_on_days: Optional[bool] = None
    schedule_type: Optional[str] = None
    event_name: Optional[str] = None
    event_date: Optional[date] = None
    recurrence_type: Optional[str] = None
    recurrence_config: Optional[Dict[str, Any]] = None
    priority_level: Optional[int] = None
    schedule_name: Optional[str] = None


class PlacementDaypartOverride(ScheduleBase, table=True):
    __tablename__ = "placement_daypart_overrides"

    id: Optional[int] = Field(default=None, primary_key=True)

    placement_group_id: int = Field(foreign_key="placement_groups.id", index=True)
    daypart_name: str = Field(index=True)

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
