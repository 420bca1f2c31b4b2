"""Schemas for user management (owner/manager screens)."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from farmapp.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from farmapp.schemas.auth import RoleName
from farmapp.schemas.common import non_nullable


class UserRead(BaseModel):
    """User entry without password hash."""

    model_config = {"from_attributes": True}

    id: int
    username: str
    email: str
    role: RoleName
    is_active: bool
    last_login: datetime | None = None
    created_at: datetime | None = None


class UserCreate(BaseModel):
    username: str = Field(..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)
    role: RoleName = "staff"
    is_active: bool = True


class UserUpdate(BaseModel):
    """Partial update; password is changed through the change-password endpoint only."""

    model_config = {"extra": "ignore"}

    username: str | None = Field(default=None, min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN)
    email: EmailStr | None = None
    role: RoleName | None = None
    is_active: bool | None = None

    check_not_null = non_nullable("username", "email", "role", "is_active")


class PasswordChange(BaseModel):
    current_password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)
    new_password: str = Field(..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN)


class MessageResponse(BaseModel):
    """Plain confirmation message (deletes, password change)."""

    message: str
