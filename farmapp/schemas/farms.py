"""Schemas for farms."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from farmapp.schemas.common import non_nullable

BusinessType = Literal["sole_proprietorship", "partnership", "corporation", "llc"]


class FarmCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    location: str = Field(..., min_length=1, max_length=255)
    owner_name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=32)
    email: EmailStr | None = None
    business_type: BusinessType = "sole_proprietorship"
    size_acres: float | None = Field(default=None, ge=0)
    capacity: int | None = Field(default=None, ge=0, description="Number of birds")
    is_active: bool = True


class FarmUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    location: str | None = Field(default=None, min_length=1, max_length=255)
    owner_name: str | None = Field(default=None, min_length=1, max_length=255)
    phone: str | None = Field(default=None, min_length=1, max_length=32)
    email: EmailStr | None = None
    business_type: BusinessType | None = None
    size_acres: float | None = Field(default=None, ge=0)
    capacity: int | None = Field(default=None, ge=0)
    is_active: bool | None = None

    check_not_null = non_nullable(
        "name", "location", "owner_name", "phone", "business_type", "is_active"
    )


class FarmRead(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    name: str
    location: str
    owner_name: str
    phone: str
    email: str | None = None
    business_type: str
    size_acres: float | None = None
    capacity: int | None = None
    is_active: bool
    created_at: datetime | None = None
