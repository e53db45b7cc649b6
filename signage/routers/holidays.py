from typing import List, Optional

from fastapi import APIRouter, HTTPException

from signage.dayparts.holidays import HOLIDAY_TEMPLATES, HolidayTemplate, event_from_template, get_template
from signage.models.daypart_schedule import PlacementOverrideCreate

router = APIRouter(prefix="/holiday-templates", tags=["holiday-templates"])


@router.get("/", response_model=List[HolidayTemplate])
def list_holiday_templates(category: Optional[str] = None):
    if category:
        return [t for t in HOLIDAY_TEMPLATES if t.category == category]
    return HOLIDAY_TEMPLATES


@router.get("/{template_id}/draft", response_model=PlacementOverrideCreate)
def get_holiday_draft(template_id: str, daypart_name: str):
    """Event override draft for a daypart, ready to POST to a placement."""
    template = get_template(template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Holiday template not found")
    return event_from_template(template, daypart_name)
