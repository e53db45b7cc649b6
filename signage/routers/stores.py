from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from signage.core.errors import SignageError, http_error
from signage.database import get_session
from signage.dayparts import service
from signage.dayparts.resolver import resolve_dayparts
from signage.models.daypart_definition import EffectiveDaypartDefinition
from signage.models.daypart_schedule import DaypartSchedule, StoreScheduleCreate


router = APIRouter(prefix="/stores/{store_id}", tags=["stores"])


@router.get("/dayparts", response_model=List[EffectiveDaypartDefinition])
def list_store_dayparts(
    store_id: int,
    session: Session = Depends(get_session),
):
    try:
        return resolve_dayparts(session, store_id)
    except SignageError as exc:
        raise http_error(exc)


@router.get("/schedules", response_model=List[DaypartSchedule])
def list_store_schedules(
    store_id: int,
    session: Session = Depends(get_session),
):
    try:
        return service.list_store_defaults(session, store_id)
    except SignageError as exc:
        raise http_error(exc)


@router.post("/schedules", status_code=status.HTTP_201_CREATED, response_model=DaypartSchedule)
def create_store_schedule(
    store_id: int,
    payload: StoreScheduleCreate,
    session: Session = Depends(get_session),
):
    try:
        return service.create_store_default(session, store_id, payload)
    except SignageError as exc:
        raise http_error(exc)


@router.delete("/schedules/{schedule_id}")
def delete_store_schedule(
    store_id: int,
    schedule_id: int,
    session: Session = Depends(get_session),
):
    try:
        service.delete_store_default(session, store_id, schedule_id)
    except SignageError as exc:
        raise http_error(exc)
    return {"message": "Store schedule removed"}
