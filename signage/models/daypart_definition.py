from typing import Optional
from sqlmodel import SQLModel, Field


SCOPE_GLOBAL = "global"
SCOPE_CONCEPT = "concept"
SCOPE_STORE = "store"


class DaypartDefinitionBase(SQLModel):
    daypart_name: str = Field(index=True)
    display_label: str
    description: Optional[str] = None

    # tailwind-style token, e.g. "bg-green-100 text-green-800 border-green-300"
    color: str = "bg-blue-100 text-blue-800 border-blue-300"
    icon: Optional[str] = None

    sort_order: int = 0


class DaypartDefinition(DaypartDefinitionBase, table=True):
    __tablename__ = "daypart_definitions"

    id: Optional[int] = Field(default=None, primary_key=True)

    is_active: bool = True

    # both null = global definition
    concept_id: Optional[int] = Field(default=None, foreign_key="concept.id", index=True)
    store_id: Optional[int] = Field(default=None, foreign_key="store.id", index=True)

    @property
    def scope(self) -> str:
        if self.store_id is not None:
            return SCOPE_STORE
        if self.concept_id is not None:
            return SCOPE_CONCEPT
        return SCOPE_GLOBAL


class EffectiveDaypartDefinition(DaypartDefinitionBase):
    """A definition as it applies to one store."""

    id: int
    source_level: str
    is_customized: bool = False
    concept_id: Optional[int] = None
    store_id: Optional[int] = None
