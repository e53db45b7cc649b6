from typing import List, Optional

from fastapi import HTTPException


class SignageError(Exception):
    """Base class for every error raised by the daypart scheduling layer."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# =========================
# NOT FOUND
# =========================

class ResolutionError(SignageError):
    """A referenced row does not resolve; distinct from a legitimately empty result."""

    status_code = 404


class PlacementGroupNotFound(ResolutionError):
    def __init__(self, placement_group_id: int):
        super().__init__(f"Placement group {placement_group_id} not found")
        self.placement_group_id = placement_group_id


class StoreNotFound(ResolutionError):
    def __init__(self, store_id: Optional[int], placement_group_id: Optional[int] = None):
        if placement_group_id is not None:
            message = f"Placement group {placement_group_id} has no resolvable store (store_id={store_id})"
        else:
            message = f"Store {store_id} not found"
        super().__init__(message)
        self.store_id = store_id
        self.placement_group_id = placement_group_id


class ScheduleNotFound(ResolutionError):
    def __init__(self, schedule_id: int, kind: str = "schedule"):
        super().__init__(f"{kind.capitalize()} {schedule_id} not found")
        self.schedule_id = schedule_id


# =========================
# VALIDATION
# =========================

class ScheduleValidationError(SignageError):
    status_code = 400


class ScheduleConflictError(ScheduleValidationError):
    status_code = 409

    def __init__(self, message: str, conflicting_days: List[int]):
        super().__init__(message)
        self.conflicting_days = conflicting_days


# =========================
# PERSISTENCE
# =========================

class PersistenceError(SignageError):
    status_code = 500


class PartialUpdateError(PersistenceError):
    """The insert half of a replace failed after the delete half ran.

    Both halves share one transaction, so the rollback leaves the original
    collection in place.
    """

    def __init__(self, message: str, rolled_back: bool = True):
        super().__init__(message)
        self.rolled_back = rolled_back


def http_error(exc: SignageError) -> HTTPException:
    if isinstance(exc, ScheduleConflictError):
        return HTTPException(
            status_code=exc.status_code,
            detail={"message": exc.message, "conflicting_days": exc.conflicting_days},
        )
    return HTTPException(status_code=exc.status_code, detail=exc.message)
