"""Schemas for payments against sales."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from farmapp.schemas.common import non_nullable

PaymentMethod = Literal["cash", "upi"]


class PaymentCreate(BaseModel):
    """Client, client name, sale date and farm are taken from the sale."""

    sale_id: int
    amount: float = Field(..., gt=0)
    method: PaymentMethod
    utr: str | None = Field(default=None, min_length=10, max_length=20)
    date: datetime | None = Field(default=None, description="Defaults to now")

    @field_validator("utr")
    @classmethod
    def normalize_utr(cls, v: str | None) -> str | None:
        return v.strip().upper() if v is not None else None


class PaymentUpdate(BaseModel):
    amount: float | None = Field(default=None, gt=0)
    method: PaymentMethod | None = None
    utr: str | None = Field(default=None, min_length=10, max_length=20)
    date: datetime | None = None

    check_not_null = non_nullable("amount", "method", "date")

    @field_validator("utr")
    @classmethod
    def normalize_utr(cls, v: str | None) -> str | None:
        return v.strip().upper() if v is not None else None


class PaymentRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    sale_id: int
    client_id: int
    client_name: str
    sale_date: datetime
    amount: float
    method: PaymentMethod
    utr: str | None = None
    date: datetime
    farm_id: int
    created_by: int | None = None
    updated_by: int | None = None
