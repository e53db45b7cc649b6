from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, SQLModel

from signage.core.errors import SignageError, http_error
from signage.database import get_session
from signage.dayparts import service
from signage.dayparts.conflicts import CollisionResult
from signage.dayparts.merge import EffectiveSchedule
from signage.dayparts.view import PlacementScheduleView
from signage.models.daypart_schedule import (
    PlacementDaypartOverride,
    PlacementOverrideCreate,
    PlacementOverrideUpdate,
)


router = APIRouter(prefix="/placement-groups/{placement_group_id}/schedules", tags=["placement-schedules"])


class CollisionCheck(SQLModel):
    daypart_name: str
    days_of_week: List[int]
    editing_id: Optional[int] = None


class CustomizeRequest(SQLModel):
    changes: Optional[PlacementOverrideUpdate] = None
    include_siblings: bool = False


# =========================
# EFFECTIVE SCHEDULES
# =========================
@router.get("/", response_model=PlacementScheduleView)
def get_schedule_view(
    placement_group_id: int,
    session: Session = Depends(get_session),
):
    try:
        return service.get_schedule_view(session, placement_group_id)
    except SignageError as exc:
        raise http_error(exc)


@router.get("/effective", response_model=List[EffectiveSchedule])
def list_effective_schedules(
    placement_group_id: int,
    session: Session = Depends(get_session),
):
    try:
        _, effective = service.get_effective_schedules(session, placement_group_id)
    except SignageError as exc:
        raise http_error(exc)
    return effective


# =========================
# OVERRIDES (CRUD)
# =========================
@router.post("/", status_code=status.HTTP_201_CREATED, response_model=PlacementDaypartOverride)
def create_schedule(
    placement_group_id: int,
    payload: PlacementOverrideCreate,
    session: Session = Depends(get_session),
):
    try:
        return service.create_override(session, placement_group_id, payload)
    except SignageError as exc:
        raise http_error(exc)


@router.put("/", response_model=List[PlacementDaypartOverride])
def replace_schedules(
    placement_group_id: int,
    payload: List[PlacementOverrideCreate],
    session: Session = Depends(get_session),
):
    """Replace every override of the placement; all-or-nothing."""
    try:
        return service.replace_placement_overrides(session, placement_group_id, payload)
    except SignageError as exc:
        raise http_error(exc)


@router.patch("/{override_id}", response_model=PlacementDaypartOverride)
def update_schedule(
    placement_group_id: int,
    override_id: int,
    payload: PlacementOverrideUpdate,
    session: Session = Depends(get_session),
):
    try:
        return service.update_override(session, placement_group_id, override_id, payload)
    except SignageError as exc:
        raise http_error(exc)


@router.delete("/{override_id}")
def delete_schedule(
    placement_group_id: int,
    override_id: int,
    session: Session = Depends(get_session),
):
    try:
        service.delete_override(session, placement_group_id, override_id)
    except SignageError as exc:
        raise http_error(exc)
    return {"message": "Customization removed; the daypart reverts to the store schedule"}


# =========================
# FORM HELPERS
# =========================
@router.post("/collisions", response_model=CollisionResult)
def check_collision(
    placement_group_id: int,
    payload: CollisionCheck,
    session: Session = Depends(get_session),
):
    try:
        return service.check_collision(
            session,
            placement_group_id,
            payload.daypart_name,
            payload.days_of_week,
            payload.editing_id,
        )
    except SignageError as exc:
        raise http_error(exc)


@router.get("/remaining-days/{daypart_name}", response_model=PlacementOverrideCreate)
def get_remaining_days_draft(
    placement_group_id: int,
    daypart_name: str,
    session: Session = Depends(get_session),
):
    try:
        draft = service.remaining_days_for(session, placement_group_id, daypart_name)
    except SignageError as exc:
        raise http_error(exc)

    if draft is None:
        raise HTTPException(status_code=404, detail=f"No unscheduled days for daypart '{daypart_name}'")
    return draft


# =========================
# INHERITED -> CUSTOMIZED
# =========================
@router.get("/inherited/{schedule_id}/draft", response_model=PlacementOverrideCreate)
def get_inherited_draft(
    placement_group_id: int,
    schedule_id: int,
    session: Session = Depends(get_session),
):
    try:
        return service.inherited_draft(session, placement_group_id, schedule_id)
    except SignageError as exc:
        raise http_error(exc)


@router.post(
    "/inherited/{schedule_id}/customize",
    status_code=status.HTTP_201_CREATED,
    response_model=List[PlacementDaypartOverride],
)
def customize_inherited_schedule(
    placement_group_id: int,
    schedule_id: int,
    payload: CustomizeRequest,
    session: Session = Depends(get_session),
):
    try:
        return service.customize_inherited(
            session,
            placement_group_id,
            schedule_id,
            changes=payload.changes,
            include_siblings=payload.include_siblings,
        )
    except SignageError as exc:
        raise http_error(exc)


# =========================
# MERGE
# =========================
@router.get("/{override_id}/mergeable", response_model=List[PlacementDaypartOverride])
def list_mergeable(
    placement_group_id: int,
    override_id: int,
    session: Session = Depends(get_session),
):
    try:
        return service.find_mergeable(session, placement_group_id, override_id)
    except SignageError as exc:
        raise http_error(exc)


@router.post("/{override_id}/merge", response_model=PlacementDaypartOverride)
def merge_schedules(
    placement_group_id: int,
    override_id: int,
    session: Session = Depends(get_session),
):
    try:
        return service.merge_schedules(session, placement_group_id, override_id)
    except SignageError as exc:
        raise http_error(exc)
