"""Request/response schemas for auth endpoints."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field

RoleName = Literal["owner", "manager", "staff", "auditor"]


class LoginRequest(BaseModel):
    """Credentials for login; email accepts either the email address or the username."""

    email: str = Field(..., min_length=1, max_length=255, description="Email or username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class CurrentUser(BaseModel):
    """Authenticated user as freshly loaded by the role resolver."""

    model_config = {"from_attributes": True}

    id: int
    username: str
    email: str
    role: RoleName
    is_active: bool


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    message: str = Field(default="Login successful")
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: CurrentUser


class ProfileUpdate(BaseModel):
    """Fields a user may change on their own profile."""

    username: str | None = Field(default=None, min_length=3, max_length=64)
    email: EmailStr | None = None
