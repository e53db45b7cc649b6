from typing import Optional
from sqlmodel import SQLModel, Field


class Concept(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str


class Company(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str
    concept_id: Optional[int] = Field(default=None, foreign_key="concept.id", index=True)


class Store(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    name: str
    company_id: Optional[int] = Field(default=None, foreign_key="company.id", index=True)
