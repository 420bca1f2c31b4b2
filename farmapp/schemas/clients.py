"""Schemas for clients (egg buyers)."""

from datetime import datetime

from pydantic import BaseModel, Field

from farmapp.schemas.common import non_nullable


class ClientCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=32)
    rate_per_tray: float = Field(..., ge=0, description="Price of one tray for this client")
    farm_id: int


class ClientUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, min_length=1, max_length=32)
    rate_per_tray: float | None = Field(default=None, ge=0)

    check_not_null = non_nullable("name", "phone", "rate_per_tray")


class ClientRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    phone: str
    rate_per_tray: float
    farm_id: int
    created_by: int | None = None
    updated_by: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
