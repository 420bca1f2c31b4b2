"""User management: owners administer accounts, everyone may read and edit themselves."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from farmapp.api.v1.auth import get_current_user, owner_only, owner_or_manager
from farmapp.core.authz import OWNER_OR_MANAGER, Role, has_permission
from farmapp.core.database import get_db
from farmapp.core.security import hash_password, verify_password
from farmapp.models import User
from farmapp.schemas.auth import CurrentUser
from farmapp.schemas.users import (
    MessageResponse,
    PasswordChange,
    UserCreate,
    UserRead,
    UserUpdate,
)

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_user_or_404(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


@router.get("", response_model=list[UserRead])
def list_users(
    _manager: Annotated[CurrentUser, Depends(owner_or_manager)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserRead]:
    """List all users, newest first (owner or manager)."""
    users = db.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return [UserRead.model_validate(u) for u in users]


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Owners and managers can read anyone; other roles only themselves."""
    if current_user.role not in OWNER_OR_MANAGER and current_user.id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return UserRead.model_validate(_get_user_or_404(db, user_id))


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    owner: Annotated[CurrentUser, Depends(owner_only)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Create an account (owner only). Username and email must be unused."""
    email = body.email.lower()
    existing = (
        db.query(User)
        .filter(or_(User.username == body.username, User.email == email))
        .first()
    )
    if existing is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username or email already exists. Please use different credentials.",
        )
    user = User(
        username=body.username,
        email=email,
        password_hash=hash_password(body.password),
        role=body.role,
        is_active=body.is_active,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(
        "User created",
        extra={"user_id": user.id, "role": user.role, "created_by": owner.id},
    )
    return UserRead.model_validate(user)


@router.put("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    body: UserUpdate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """
    Owners may update anyone; other users only themselves. Only holders of
    manage_users may change roles, and nobody may deactivate their own account.
    """
    is_self = current_user.id == user_id
    if current_user.role != Role.OWNER.value and not is_self:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    user = _get_user_or_404(db, user_id)
    if body.role is not None and not has_permission(current_user.role, "manage_users"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only owners can change user roles",
        )
    if is_self and body.is_active is False:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot deactivate your own account",
        )

    changes = body.model_dump(exclude_unset=True)
    if "email" in changes:
        changes["email"] = changes["email"].lower()
    clauses = []
    if "username" in changes:
        clauses.append(User.username == changes["username"])
    if "email" in changes:
        clauses.append(User.email == changes["email"])
    if clauses and db.query(User).filter(or_(*clauses), User.id != user.id).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Username or email already exists. Please use different credentials.",
        )
    for key, value in changes.items():
        setattr(user, key, value)
    db.commit()
    db.refresh(user)
    logger.info(
        "User updated",
        extra={"user_id": user.id, "fields": sorted(changes), "updated_by": current_user.id},
    )
    return UserRead.model_validate(user)


@router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    owner: Annotated[CurrentUser, Depends(owner_only)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete an account (owner only); owners cannot delete themselves."""
    if owner.id == user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot delete your own account",
        )
    user = _get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    logger.info("User deleted", extra={"user_id": user_id, "deleted_by": owner.id})
    return MessageResponse(message="User deleted successfully")


@router.put("/{user_id}/change-password", response_model=MessageResponse)
def change_password(
    user_id: int,
    body: PasswordChange,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Change the caller's own password; the current password must match."""
    if current_user.id != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    user = _get_user_or_404(db, user_id)
    if not verify_password(body.current_password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )
    user.password_hash = hash_password(body.new_password)
    db.commit()
    return MessageResponse(message="Password changed successfully")
