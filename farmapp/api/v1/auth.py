"""JWT login, profile routes and the authorization dependencies used by every router."""

import logging
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import or_
from sqlalchemy.orm import Session

from farmapp.core.authz import (
    ANY_ROLE,
    OWNER_MANAGER_STAFF,
    OWNER_ONLY,
    OWNER_OR_AUDITOR,
    OWNER_OR_MANAGER,
    Guard,
    RequestContext,
    UserLoader,
    permission_checker,
    role_resolver,
    run_guards,
    token_verifier,
    user_resolver,
)
from farmapp.core.config import Settings, get_settings
from farmapp.core.database import get_db
from farmapp.core.security import (
    create_access_token,
    hash_password,
    needs_rehash,
    verify_password,
)
from farmapp.models import User
from farmapp.schemas.auth import CurrentUser, LoginRequest, ProfileUpdate, TokenResponse

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)

Credentials = Annotated[HTTPAuthorizationCredentials | None, Depends(security)]


def _user_loader(db: Session) -> UserLoader:
    return lambda user_id: db.get(User, user_id)


def _authorize(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    guards: Iterable[Guard],
) -> CurrentUser:
    """Run the guard chain for this request and return the resolved user; raises AuthError on rejection."""
    context = RequestContext(
        token=credentials.credentials if credentials is not None else None,
        route=f"{request.method} {request.url.path}",
    )
    context = run_guards(context, guards).unwrap()
    return CurrentUser.model_validate(context.user)


def require_roles(
    allowed_roles: Iterable[str],
    feature_flag: Callable[[Settings], bool] | None = None,
) -> Callable[..., CurrentUser]:
    """
    Dependency factory: verify the bearer token, then re-load the user and
    require an active account whose role is in allowed_roles.

    feature_flag, when given, reads the setting that gates the whole route group.
    """
    allowed = tuple(allowed_roles)

    def dependency(
        request: Request,
        credentials: Credentials,
        db: Annotated[Session, Depends(get_db)],
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> CurrentUser:
        enabled = feature_flag(settings) if feature_flag is not None else True
        return _authorize(
            request,
            credentials,
            [
                token_verifier(
                    settings.JWT_SECRET.get_secret_value(),
                    settings.JWT_ALGORITHM,
                    feature_enabled=enabled,
                ),
                role_resolver(_user_loader(db), allowed),
            ],
        )

    return dependency


def require_permission(
    permission: str,
    feature_flag: Callable[[Settings], bool] | None = None,
) -> Callable[..., CurrentUser]:
    """
    Dependency factory: token, fresh user load (must exist and be active), then
    the static permission table. The permission check always sees the role
    just read from the database, never the token's role claim, and a stored
    role missing from the table is rejected as unknown.
    """

    def dependency(
        request: Request,
        credentials: Credentials,
        db: Annotated[Session, Depends(get_db)],
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> CurrentUser:
        enabled = feature_flag(settings) if feature_flag is not None else True
        return _authorize(
            request,
            credentials,
            [
                token_verifier(
                    settings.JWT_SECRET.get_secret_value(),
                    settings.JWT_ALGORITHM,
                    feature_enabled=enabled,
                ),
                user_resolver(_user_loader(db)),
                permission_checker(permission),
            ],
        )

    return dependency


def _ai_features_enabled(settings: Settings) -> bool:
    return settings.AI_FEATURES_ENABLED


get_current_user = require_roles(ANY_ROLE)
owner_only = require_roles(OWNER_ONLY)
owner_or_manager = require_roles(OWNER_OR_MANAGER)
owner_or_auditor = require_roles(OWNER_OR_AUDITOR)
ai_profit_viewer = require_permission("view_all_data", feature_flag=_ai_features_enabled)
ai_operator = require_roles(OWNER_MANAGER_STAFF, feature_flag=_ai_features_enabled)


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with email (or username) and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    identifier = body.email.strip()
    user = (
        db.query(User)
        .filter(or_(User.email == identifier.lower(), User.username == identifier))
        .first()
    )
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Account is deactivated",
        )
    if not verify_password(body.password, user.password_hash):
        logger.info("Login failed: user_id=%s", user.id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials",
        )
    if needs_rehash(user.password_hash):
        user.password_hash = hash_password(body.password)
    user.last_login = datetime.now(UTC)
    db.commit()
    db.refresh(user)
    logger.info("Login succeeded", extra={"user_id": user.id, "role": user.role})
    token = create_access_token(sub=user.id, role=user.role, username=user.username)
    return TokenResponse(
        access_token=token,
        token_type="bearer",
        user=CurrentUser.model_validate(user),
    )


@router.get("/profile", response_model=CurrentUser)
def get_profile(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
) -> CurrentUser:
    """Return the authenticated user as currently stored."""
    return current_user


@router.put("/profile", response_model=CurrentUser)
def update_profile(
    body: ProfileUpdate,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> CurrentUser:
    """Change own username and/or email; both must stay unique across users."""
    user = db.get(User, current_user.id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    email = body.email.lower() if body.email is not None else None
    clauses = []
    if body.username is not None:
        clauses.append(User.username == body.username)
    if email is not None:
        clauses.append(User.email == email)
    if clauses:
        taken = db.query(User).filter(or_(*clauses), User.id != user.id).first()
        if taken is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email or username already taken",
            )
    if body.username is not None:
        user.username = body.username
    if email is not None:
        user.email = email
    db.commit()
    db.refresh(user)
    return CurrentUser.model_validate(user)
