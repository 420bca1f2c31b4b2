"""Unit tests for farmapp.core.authz: token verifier, role resolver, permission checker, guard driver."""

import unittest
from types import SimpleNamespace
from unittest.mock import MagicMock, PropertyMock

from farmapp.core.authz import (
    ANY_ROLE,
    OWNER_MANAGER_STAFF,
    OWNER_ONLY,
    OWNER_OR_AUDITOR,
    OWNER_OR_MANAGER,
    ROLE_PERMISSIONS,
    AccountDeactivated,
    FeatureDisabled,
    InternalError,
    InvalidToken,
    PermissionDenied,
    RequestContext,
    RoleNotPermitted,
    RoleUnknown,
    Unauthenticated,
    UserNotFound,
    has_permission,
    permission_checker,
    role_resolver,
    run_guards,
    token_verifier,
    user_resolver,
)
from farmapp.core.config import settings
from farmapp.core.security import create_access_token

SECRET = settings.JWT_SECRET.get_secret_value()
ALGORITHM = settings.JWT_ALGORITHM
ALL_PERMISSIONS = sorted(set().union(*ROLE_PERMISSIONS.values()))


def _user(user_id: int = 1, role: str = "staff", is_active: bool = True) -> SimpleNamespace:
    return SimpleNamespace(id=user_id, role=role, is_active=is_active)


def _verified(user_id: int = 1, role: str = "staff") -> RequestContext:
    """Context as left by the token verifier."""
    return RequestContext(claims={"sub": str(user_id), "role": role})


class TestTokenVerifier(unittest.TestCase):
    def setUp(self) -> None:
        self.verify = token_verifier(SECRET, ALGORITHM)

    def test_feature_disabled_rejects_before_looking_at_token(self) -> None:
        verify = token_verifier(SECRET, ALGORITHM, feature_enabled=False)
        with self.assertRaises(FeatureDisabled) as cm:
            verify(RequestContext(token=None))
        self.assertEqual(cm.exception.status_code, 403)
        token = create_access_token(sub=1, role="owner")
        with self.assertRaises(FeatureDisabled):
            verify(RequestContext(token=token))

    def test_missing_token_is_unauthenticated(self) -> None:
        for token in (None, ""):
            with self.assertRaises(Unauthenticated) as cm:
                self.verify(RequestContext(token=token))
            self.assertEqual(cm.exception.status_code, 401)

    def test_garbage_token_is_invalid(self) -> None:
        with self.assertRaises(InvalidToken) as cm:
            self.verify(RequestContext(token="not-a-jwt"))
        self.assertEqual(cm.exception.status_code, 400)

    def test_wrong_secret_is_invalid(self) -> None:
        token = create_access_token(sub=1, role="owner")
        with self.assertRaises(InvalidToken):
            token_verifier("some-other-secret", ALGORITHM)(RequestContext(token=token))

    def test_expired_token_is_invalid(self) -> None:
        token = create_access_token(sub=1, role="owner", expires_minutes=-5)
        with self.assertRaises(InvalidToken):
            self.verify(RequestContext(token=token))

    def test_non_numeric_subject_is_invalid(self) -> None:
        token = create_access_token(sub="alice", role="owner")
        with self.assertRaises(InvalidToken) as cm:
            self.verify(RequestContext(token=token))
        self.assertEqual(cm.exception.message, "Invalid token payload")

    def test_valid_token_attaches_claims(self) -> None:
        token = create_access_token(sub=42, role="manager", username="meena")
        context = self.verify(RequestContext(token=token, route="GET /x"))
        self.assertEqual(context.claims["sub"], "42")
        self.assertEqual(context.claims["username"], "meena")
        self.assertEqual(context.user_id, 42)
        self.assertEqual(context.route, "GET /x")
        self.assertIsNone(context.user)


class TestRoleResolver(unittest.TestCase):
    def test_missing_user_is_not_found(self) -> None:
        loader = MagicMock(return_value=None)
        with self.assertRaises(UserNotFound) as cm:
            role_resolver(loader, ANY_ROLE)(_verified(user_id=7))
        self.assertEqual(cm.exception.status_code, 404)
        loader.assert_called_once_with(7)

    def test_inactive_user_rejected_for_every_role(self) -> None:
        for role in ANY_ROLE:
            with self.subTest(role=role):
                loader = MagicMock(return_value=_user(role=role, is_active=False))
                with self.assertRaises(AccountDeactivated) as cm:
                    role_resolver(loader, ANY_ROLE)(_verified(role=role))
                self.assertEqual(cm.exception.status_code, 403)

    def test_lookup_failure_is_internal_error_without_detail(self) -> None:
        loader = MagicMock(side_effect=RuntimeError("connection reset by db-7"))
        with self.assertLogs("farmapp.core.authz", level="ERROR"):
            with self.assertRaises(InternalError) as cm:
                role_resolver(loader, ANY_ROLE)(_verified())
        self.assertEqual(cm.exception.status_code, 500)
        self.assertNotIn("db-7", cm.exception.message)

    def test_allow_matrix_for_the_four_configurations(self) -> None:
        configurations = {
            "owner_only": (OWNER_ONLY, {"owner"}),
            "owner_or_manager": (OWNER_OR_MANAGER, {"owner", "manager"}),
            "owner_manager_staff": (OWNER_MANAGER_STAFF, {"owner", "manager", "staff"}),
            "owner_or_auditor": (OWNER_OR_AUDITOR, {"owner", "auditor"}),
        }
        for name, (allowed, expected) in configurations.items():
            for role in ("owner", "manager", "staff", "auditor"):
                with self.subTest(configuration=name, role=role):
                    loader = MagicMock(return_value=_user(role=role))
                    result = run_guards(_verified(role=role), [role_resolver(loader, allowed)])
                    self.assertEqual(result.allowed, role in expected)
                    if not result.allowed:
                        self.assertIsInstance(result.error, RoleNotPermitted)

    def test_staff_on_owner_or_manager_route_names_roles(self) -> None:
        loader = MagicMock(return_value=_user(user_id=1, role="staff"))
        with self.assertRaises(RoleNotPermitted) as cm:
            role_resolver(loader, OWNER_OR_MANAGER)(_verified(user_id=1, role="staff"))
        err = cm.exception
        self.assertEqual(err.status_code, 403)
        self.assertEqual(err.allowed_roles, ["owner", "manager"])
        self.assertEqual(err.actual_role, "staff")
        self.assertEqual(
            err.message, "Access denied. Required role(s): owner, manager. Your role: staff"
        )

    def test_stale_role_claim_is_ignored(self) -> None:
        # token still says owner, but the user was demoted since it was issued
        loader = MagicMock(return_value=_user(role="staff"))
        with self.assertRaises(RoleNotPermitted):
            role_resolver(loader, OWNER_ONLY)(_verified(role="owner"))

    def test_success_replaces_identity_with_fresh_record(self) -> None:
        record = _user(user_id=3, role="manager")
        context = role_resolver(MagicMock(return_value=record), OWNER_OR_MANAGER)(
            _verified(user_id=3, role="staff")
        )
        self.assertIs(context.user, record)
        self.assertEqual(context.role, "manager")

    def test_without_claims_is_unauthenticated(self) -> None:
        loader = MagicMock()
        with self.assertRaises(Unauthenticated):
            role_resolver(loader, ANY_ROLE)(RequestContext())
        loader.assert_not_called()


class TestUserResolver(unittest.TestCase):
    def test_attaches_record_whatever_its_role(self) -> None:
        record = _user(role="guest")
        context = user_resolver(MagicMock(return_value=record))(_verified(role="owner"))
        self.assertIs(context.user, record)
        self.assertEqual(context.role, "guest")

    def test_missing_and_inactive_users_rejected(self) -> None:
        with self.assertRaises(UserNotFound):
            user_resolver(MagicMock(return_value=None))(_verified())
        with self.assertRaises(AccountDeactivated):
            user_resolver(MagicMock(return_value=_user(is_active=False)))(_verified())

    def test_stored_role_outside_table_reaches_permission_checker(self) -> None:
        token = create_access_token(sub=3, role="staff")
        result = run_guards(
            RequestContext(token=token),
            [
                token_verifier(SECRET, ALGORITHM),
                user_resolver(MagicMock(return_value=_user(user_id=3, role="guest"))),
                permission_checker("manage_clients"),
            ],
        )
        self.assertIsInstance(result.error, RoleUnknown)
        self.assertEqual(result.error.status_code, 403)
        self.assertEqual(str(result.error), "Access denied. Unknown role: guest")


class TestPermissionTable(unittest.TestCase):
    def test_table_has_exactly_the_four_roles(self) -> None:
        self.assertEqual(set(ROLE_PERMISSIONS), {"owner", "manager", "staff", "auditor"})

    def test_superset_relationships(self) -> None:
        owner = ROLE_PERMISSIONS["owner"]
        manager = ROLE_PERMISSIONS["manager"]
        staff = ROLE_PERMISSIONS["staff"]
        auditor = ROLE_PERMISSIONS["auditor"]
        self.assertTrue(owner >= manager)
        self.assertTrue(manager >= staff & auditor)
        self.assertTrue(manager >= auditor)
        self.assertEqual(owner - manager, {"manage_users", "manage_settings"})
        self.assertIn("view_assigned_data", staff)
        self.assertNotIn("manage_sales", auditor)

    def test_table_is_read_only(self) -> None:
        with self.assertRaises(TypeError):
            ROLE_PERMISSIONS["guest"] = frozenset()  # type: ignore[index]
        self.assertIsInstance(ROLE_PERMISSIONS["owner"], frozenset)


class TestPermissionChecker(unittest.TestCase):
    def test_permits_iff_permission_in_role_set(self) -> None:
        for role, granted in ROLE_PERMISSIONS.items():
            for permission in ALL_PERMISSIONS:
                with self.subTest(role=role, permission=permission):
                    context = RequestContext(user=_user(role=role))
                    result = run_guards(context, [permission_checker(permission)])
                    self.assertEqual(result.allowed, permission in granted)
                    self.assertEqual(has_permission(role, permission), permission in granted)

    def test_auditor_cannot_manage_sales(self) -> None:
        with self.assertRaises(PermissionDenied) as cm:
            permission_checker("manage_sales")(RequestContext(user=_user(role="auditor")))
        self.assertEqual(cm.exception.status_code, 403)
        self.assertEqual(cm.exception.permission, "manage_sales")
        self.assertIn("manage_sales", cm.exception.message)

    def test_unknown_role(self) -> None:
        for context in (
            RequestContext(user=_user(role="guest")),
            RequestContext(claims={"sub": "1"}),
            RequestContext(),
        ):
            with self.subTest(context=context):
                with self.assertRaises(RoleUnknown) as cm:
                    permission_checker("view_all_data")(context)
                self.assertEqual(cm.exception.status_code, 403)

    def test_uses_claim_role_when_no_user_resolved(self) -> None:
        context = _verified(role="manager")
        self.assertIs(permission_checker("generate_reports")(context), context)

    def test_error_reading_context_is_internal_error(self) -> None:
        user = MagicMock()
        type(user).role = PropertyMock(side_effect=RuntimeError("boom"))
        with self.assertLogs("farmapp.core.authz", level="ERROR"):
            with self.assertRaises(InternalError) as cm:
                permission_checker("view_all_data")(RequestContext(user=user))
        self.assertNotIn("boom", cm.exception.message)


class TestRunGuards(unittest.TestCase):
    def test_missing_header_rejected_before_persistence(self) -> None:
        loader = MagicMock()
        result = run_guards(
            RequestContext(token=None),
            [token_verifier(SECRET, ALGORITHM), role_resolver(loader, ANY_ROLE)],
        )
        self.assertIsInstance(result.error, Unauthenticated)
        loader.assert_not_called()

    def test_stops_at_first_rejection(self) -> None:
        later = MagicMock()
        loader = MagicMock(return_value=None)
        token = create_access_token(sub=9, role="owner")
        result = run_guards(
            RequestContext(token=token),
            [token_verifier(SECRET, ALGORITHM), role_resolver(loader, ANY_ROLE), later],
        )
        self.assertFalse(result.allowed)
        self.assertIsInstance(result.error, UserNotFound)
        later.assert_not_called()
        with self.assertRaises(UserNotFound):
            result.unwrap()

    def test_full_chain_success(self) -> None:
        record = _user(user_id=5, role="manager")
        token = create_access_token(sub=5, role="manager")
        result = run_guards(
            RequestContext(token=token),
            [
                token_verifier(SECRET, ALGORITHM),
                role_resolver(MagicMock(return_value=record), ANY_ROLE),
                permission_checker("manage_inventory"),
            ],
        )
        self.assertTrue(result.allowed)
        self.assertIs(result.unwrap().user, record)

    def test_same_request_twice_gives_same_decision(self) -> None:
        token = create_access_token(sub=1, role="staff")
        loader = MagicMock(return_value=_user(role="staff"))
        guards = [token_verifier(SECRET, ALGORITHM), role_resolver(loader, OWNER_OR_MANAGER)]
        first = run_guards(RequestContext(token=token), guards)
        second = run_guards(RequestContext(token=token), guards)
        self.assertEqual(type(first.error), type(second.error))
        self.assertEqual(first.error.message, second.error.message)
        self.assertEqual(loader.call_count, 2)

    def test_rejection_is_logged(self) -> None:
        with self.assertLogs("farmapp.core.authz", level="INFO") as logs:
            run_guards(RequestContext(route="GET /users"), [token_verifier(SECRET, ALGORITHM)])
        self.assertIn("Authorization denied", logs.output[0])


if __name__ == "__main__":
    unittest.main()
