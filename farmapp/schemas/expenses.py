"""Schemas for farm expenses."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from farmapp.schemas.common import non_nullable

ExpenseType = Literal[
    "feed",
    "labor",
    "electricity",
    "medicine",
    "transport",
    "vaccine",
    "other",
    "feed_expense",
    "construction_material",
    "construction_labor",
]


class ExpenseItem(BaseModel):
    """One line of an itemized expense (e.g. a feed ingredient)."""

    name: str = Field(..., min_length=1, max_length=255)
    quantity: float = Field(default=0, ge=0)
    rate: float = Field(default=0, ge=0)
    total: float = Field(default=0, ge=0)


class ExpenseCreate(BaseModel):
    type: ExpenseType
    amount: float = Field(..., ge=0)
    description: str = Field(..., min_length=1, max_length=2000)
    date: datetime | None = Field(default=None, description="Defaults to now")
    category: str | None = Field(default=None, max_length=255)
    items: list[ExpenseItem] = Field(default_factory=list)
    farm_id: int


class ExpenseUpdate(BaseModel):
    type: ExpenseType | None = None
    amount: float | None = Field(default=None, ge=0)
    description: str | None = Field(default=None, min_length=1, max_length=2000)
    date: datetime | None = None
    category: str | None = Field(default=None, max_length=255)
    items: list[ExpenseItem] | None = None

    check_not_null = non_nullable("type", "amount", "description", "date", "items")


class ExpenseRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    type: str
    amount: float
    description: str
    date: datetime
    category: str | None = None
    items: list[ExpenseItem] = Field(default_factory=list)
    farm_id: int
    created_by: int | None = None
    updated_by: int | None = None
