from typing import Optional
from sqlmodel import SQLModel, Field


class PlacementGroup(SQLModel, table=True):
    __tablename__ = "placement_groups"

    id: Optional[int] = Field(default=None, primary_key=True)

    name: str

    # nullable so an orphaned group can be represented and reported
    store_id: Optional[int] = Field(default=None, foreign_key="store.id", index=True)

    # only the store level is consulted for inheritance, never this parent
    parent_id: Optional[int] = Field(default=None, foreign_key="placement_groups.id")
