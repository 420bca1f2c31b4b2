"""Schemas for egg sales. eggs and total_amount are computed server-side."""

from datetime import datetime

from pydantic import BaseModel, Field

from farmapp.schemas.common import non_nullable


class SaleCreate(BaseModel):
    client_id: int
    trays: int = Field(..., ge=0)
    date: datetime | None = Field(default=None, description="Defaults to now")
    farm_id: int


class SaleUpdate(BaseModel):
    client_id: int | None = None
    trays: int | None = Field(default=None, ge=0)
    date: datetime | None = None

    check_not_null = non_nullable("client_id", "trays", "date")


class SaleRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    client_id: int
    client_name: str
    trays: int
    eggs: int
    total_amount: float
    amount_paid: float = 0.0
    amount_due: float = 0.0
    date: datetime
    farm_id: int
    created_by: int | None = None
    updated_by: int | None = None
