"""
Authorization guard chain: token verification, role resolution and permission checks.

A request is described by a RequestContext. A guard takes a context and either
returns an updated context or raises an AuthError subclass; run_guards applies
guards in order and stops at the first rejection. The FastAPI dependencies in
farmapp.api.v1.auth build their chains from the factories below.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

import jwt

from farmapp.core.security import decode_access_token

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """User roles, ordered from most to least privileged (auditor is read-only)."""

    OWNER = "owner"
    MANAGER = "manager"
    STAFF = "staff"
    AUDITOR = "auditor"


ROLE_VALUES: tuple[str, ...] = tuple(r.value for r in Role)

# Fixed at import time; there is no runtime mutation path.
ROLE_PERMISSIONS: Mapping[str, frozenset[str]] = MappingProxyType(
    {
        Role.OWNER.value: frozenset(
            {
                "manage_users",
                "view_all_data",
                "manage_finances",
                "manage_settings",
                "view_audit_trail",
                "generate_reports",
                "manage_inventory",
                "manage_clients",
                "manage_sales",
                "manage_expenses",
            }
        ),
        Role.MANAGER.value: frozenset(
            {
                "view_all_data",
                "manage_finances",
                "view_audit_trail",
                "generate_reports",
                "manage_inventory",
                "manage_clients",
                "manage_sales",
                "manage_expenses",
            }
        ),
        Role.STAFF.value: frozenset(
            {
                "view_assigned_data",
                "manage_clients",
                "manage_sales",
                "manage_expenses",
            }
        ),
        Role.AUDITOR.value: frozenset(
            {
                "view_all_data",
                "view_audit_trail",
                "generate_reports",
            }
        ),
    }
)

# Allow-lists for the role resolver.
OWNER_ONLY: tuple[str, ...] = (Role.OWNER.value,)
OWNER_OR_MANAGER: tuple[str, ...] = (Role.OWNER.value, Role.MANAGER.value)
OWNER_MANAGER_STAFF: tuple[str, ...] = (
    Role.OWNER.value,
    Role.MANAGER.value,
    Role.STAFF.value,
)
OWNER_OR_AUDITOR: tuple[str, ...] = (Role.OWNER.value, Role.AUDITOR.value)
ANY_ROLE: tuple[str, ...] = ROLE_VALUES


def has_permission(role: str | None, permission: str) -> bool:
    """True when the role exists and its permission set contains permission."""
    if role is None:
        return False
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


class AuthError(Exception):
    """Base for every authorization rejection; carries the HTTP status and a stable code."""

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "Server error while checking permissions"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class FeatureDisabled(AuthError):
    status_code = 403
    code = "feature_disabled"
    default_message = "This feature is not enabled on this server"


class Unauthenticated(AuthError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Access denied. No token provided."


class InvalidToken(AuthError):
    status_code = 400
    code = "invalid_token"
    default_message = "Invalid token"


class UserNotFound(AuthError):
    status_code = 404
    code = "user_not_found"
    default_message = "User not found"


class AccountDeactivated(AuthError):
    status_code = 403
    code = "account_deactivated"
    default_message = "User account is deactivated"


class RoleNotPermitted(AuthError):
    status_code = 403
    code = "role_not_permitted"

    def __init__(self, allowed_roles: Iterable[str], actual_role: str | None) -> None:
        self.allowed_roles = list(allowed_roles)
        self.actual_role = actual_role
        super().__init__(
            f"Access denied. Required role(s): {', '.join(self.allowed_roles)}. "
            f"Your role: {actual_role}"
        )


class RoleUnknown(AuthError):
    status_code = 403
    code = "role_unknown"

    def __init__(self, role: Any) -> None:
        self.role = role
        super().__init__(f"Access denied. Unknown role: {role}")


class PermissionDenied(AuthError):
    status_code = 403
    code = "permission_denied"

    def __init__(self, permission: str) -> None:
        self.permission = permission
        super().__init__(f"Access denied. Required permission: {permission}")


class InternalError(AuthError):
    """Unexpected failure; the message never includes the underlying exception."""


@dataclass(frozen=True)
class RequestContext:
    """
    What the guard chain knows about a request.

    token: raw bearer token (None when the header is missing).
    claims: decoded token payload, set by the token verifier.
    user: authoritative user record, set by the role resolver.
    route: route label for logging only.
    """

    token: str | None = None
    claims: Mapping[str, Any] | None = None
    user: Any = None
    route: str = ""

    @property
    def user_id(self) -> int | None:
        if self.user is not None:
            return self.user.id
        if self.claims is None:
            return None
        return int(self.claims["sub"])

    @property
    def role(self) -> str | None:
        """Role of the resolved user, else the (possibly stale) role claim."""
        if self.user is not None:
            return self.user.role
        if self.claims is None:
            return None
        return self.claims.get("role")


@dataclass(frozen=True)
class GuardResult:
    """Outcome of run_guards: the last context reached and the rejection, if any."""

    context: RequestContext
    error: AuthError | None = None

    @property
    def allowed(self) -> bool:
        return self.error is None

    def unwrap(self) -> RequestContext:
        """Return the context, or raise the rejection."""
        if self.error is not None:
            raise self.error
        return self.context


Guard = Callable[[RequestContext], RequestContext]
UserLoader = Callable[[int], Any]


def token_verifier(
    secret: str,
    algorithm: str = "HS256",
    feature_enabled: bool = True,
) -> Guard:
    """
    Build a guard that verifies the bearer token and attaches its claims.

    The feature flag is checked first, so a disabled feature rejects even
    requests that carry no token.
    """

    def verify_token(context: RequestContext) -> RequestContext:
        if not feature_enabled:
            raise FeatureDisabled()
        if not context.token:
            raise Unauthenticated()
        try:
            claims = decode_access_token(context.token, secret=secret, algorithm=algorithm)
        except jwt.PyJWTError as e:
            raise InvalidToken() from e
        try:
            int(claims["sub"])
        except (TypeError, ValueError):
            raise InvalidToken("Invalid token payload") from None
        return replace(context, claims=claims)

    return verify_token


def _load_active_user(load_user: UserLoader, context: RequestContext) -> Any:
    user_id = context.user_id
    if user_id is None:
        raise Unauthenticated()
    try:
        user = load_user(user_id)
    except Exception as e:
        logger.exception("User lookup failed during authorization: user_id=%s", user_id)
        raise InternalError() from e
    if user is None:
        raise UserNotFound()
    if not user.is_active:
        raise AccountDeactivated()
    return user


def user_resolver(load_user: UserLoader) -> Guard:
    """
    Build a guard that re-reads the user by the claimed id and requires an
    active account, without looking at the role. Used in front of
    permission_checker, which then rejects roles missing from the table.
    """

    def resolve_user(context: RequestContext) -> RequestContext:
        return replace(context, user=_load_active_user(load_user, context))

    return resolve_user


def role_resolver(load_user: UserLoader, allowed_roles: Iterable[str]) -> Guard:
    """
    Build a guard that re-reads the user by the claimed id and checks its role.

    The token's role claim is ignored: the role and active flag always come
    from the record returned by load_user, which replaces context.user.
    """
    allowed = tuple(allowed_roles)

    def resolve_role(context: RequestContext) -> RequestContext:
        user = _load_active_user(load_user, context)
        if user.role not in allowed:
            raise RoleNotPermitted(allowed, user.role)
        return replace(context, user=user)

    return resolve_role


def permission_checker(permission: str) -> Guard:
    """
    Build a guard that requires permission for the role already on the context.

    No I/O: the role is trusted as attached by an earlier guard.
    """

    def check_permission(context: RequestContext) -> RequestContext:
        try:
            role = context.role
            granted = ROLE_PERMISSIONS.get(role) if role is not None else None
        except Exception as e:
            logger.exception("Reading role from request context failed")
            raise InternalError() from e
        if granted is None:
            raise RoleUnknown(role)
        if permission not in granted:
            raise PermissionDenied(permission)
        return context

    return check_permission


def run_guards(context: RequestContext, guards: Iterable[Guard]) -> GuardResult:
    """Apply guards in order; stop at the first AuthError and return it as the result."""
    for guard in guards:
        try:
            context = guard(context)
        except AuthError as e:
            logger.info(
                "Authorization denied",
                extra={
                    "route": context.route,
                    "denial_code": e.code,
                    "status_code": e.status_code,
                    "user_id": context.user.id if context.user is not None else None,
                },
            )
            return GuardResult(context=context, error=e)
    return GuardResult(context=context)
