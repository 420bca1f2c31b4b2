"""Schemas for bird batches."""

from datetime import date

from pydantic import BaseModel, Field

from farmapp.schemas.common import non_nullable


class BatchCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    quantity: int = Field(..., ge=0)
    hatch_date: date
    breed: str = Field(..., min_length=1, max_length=255)
    farm_id: int


class BatchUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    quantity: int | None = Field(default=None, ge=0)
    hatch_date: date | None = None
    breed: str | None = Field(default=None, min_length=1, max_length=255)

    check_not_null = non_nullable("name", "quantity", "hatch_date", "breed")


class BatchRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    quantity: int
    hatch_date: date
    breed: str
    farm_id: int
    created_by: int | None = None
    updated_by: int | None = None
