"""Tests for authentication service and account store."""

from unittest.mock import patch

import pytest

from internova.auth.models import Role, User, parse_role
from internova.auth.service import AuthService, ensure_admin_account, normalize_email
from internova.auth.store import UserStore
from internova.config import Settings
from internova.errors import AuthenticationError, ConflictError, ValidationError


def _count_users(db) -> int:
    return db.query(User).count()


class TestParseRole:
    @pytest.mark.parametrize("value", ["Student", "student", " STUDENT "])
    def test_case_insensitive(self, value):
        assert parse_role(value) is Role.STUDENT

    def test_unknown_role(self):
        assert parse_role("Employer") is None
        assert parse_role("") is None


class TestNormalizeEmail:
    def test_trims_and_lowercases(self):
        assert normalize_email("  Jane@Example.COM ") == "jane@example.com"


class TestRegister:
    def test_creates_account(self, db_session, auth_service, hasher):
        user_id = auth_service.register("Jane Doe", "Jane@Example.com", "secret1", "Student")
        user = db_session.get(User, user_id)
        assert user.email == "jane@example.com"
        assert user.full_name == "Jane Doe"
        assert user.role == "Student"
        assert user.password_hash != "secret1"
        assert hasher.verify(user.password_hash, "secret1")
        assert user.created_at is not None

    def test_company_role_case_insensitive(self, db_session, auth_service):
        user_id = auth_service.register("Acme", "hr@acme.example.com", "secret1", "company")
        assert db_session.get(User, user_id).role == "Company"

    @pytest.mark.parametrize("role", ["Admin", "admin", "Employer", ""])
    def test_rejects_non_registrable_roles(self, db_session, auth_service, role):
        with pytest.raises(ValidationError):
            auth_service.register("Jane", "jane@example.com", "secret1", role)
        assert _count_users(db_session) == 0

    def test_rejects_short_password(self, db_session, auth_service):
        with pytest.raises(ValidationError):
            auth_service.register("Jane", "jane@example.com", "12345", "Student")
        assert _count_users(db_session) == 0

    def test_rejects_password_over_bcrypt_limit(self, auth_service):
        with pytest.raises(ValidationError):
            auth_service.register("Jane", "jane@example.com", "x" * 73, "Student")

    @pytest.mark.parametrize("email", ["not-an-email", "jane@", "@example.com", "", "a" * 310 + "@example.com"])
    def test_rejects_bad_email(self, auth_service, email):
        with pytest.raises(ValidationError):
            auth_service.register("Jane", email, "secret1", "Student")

    @pytest.mark.parametrize("name", ["", "   ", "x" * 201])
    def test_rejects_bad_full_name(self, auth_service, name):
        with pytest.raises(ValidationError):
            auth_service.register(name, "jane@example.com", "secret1", "Student")

    def test_duplicate_email_conflicts(self, db_session, auth_service):
        auth_service.register("Jane Doe", "Jane@Example.com", "secret1", "Student")
        with pytest.raises(ConflictError):
            auth_service.register("Other Jane", " jane@example.COM ", "another1", "Company")
        assert _count_users(db_session) == 1

    def test_race_after_precheck_maps_to_conflict(self, db_session, auth_service):
        """A concurrent insert that slips past the pre-check is caught by the unique index."""
        auth_service.register("Jane Doe", "jane@example.com", "secret1", "Student")
        with patch.object(UserStore, "get_by_email", return_value=None):
            with pytest.raises(ConflictError):
                auth_service.register("Jane Again", "jane@example.com", "secret1", "Student")
        assert _count_users(db_session) == 1


class TestLogin:
    def test_register_then_login(self, auth_service, token_issuer):
        user_id = auth_service.register("Jane Doe", "Jane@Example.com", "secret1", "Student")
        result = auth_service.login("jane@example.com", "secret1")
        assert result.user_id == user_id
        assert result.email == "jane@example.com"
        assert result.role == "Student"
        claims = token_issuer.verify(result.token)
        assert claims["sub"] == str(user_id)
        assert claims["role"] == "Student"

    def test_login_normalizes_email(self, auth_service):
        auth_service.register("Jane Doe", "jane@example.com", "secret1", "Student")
        assert auth_service.login("  JANE@example.com ", "secret1").email == "jane@example.com"

    def test_unknown_email_and_wrong_password_are_indistinguishable(self, auth_service):
        auth_service.register("Jane Doe", "jane@example.com", "secret1", "Student")
        with pytest.raises(AuthenticationError) as unknown:
            auth_service.login("nobody@example.com", "secret1")
        with pytest.raises(AuthenticationError) as wrong:
            auth_service.login("jane@example.com", "wrong-password")
        assert type(unknown.value) is type(wrong.value)
        assert unknown.value.message == wrong.value.message

    def test_empty_credentials(self, auth_service):
        with pytest.raises(AuthenticationError):
            auth_service.login("", "")


class TestUserStore:
    def test_get_by_email(self, db_session, student_user):
        store = UserStore(db_session)
        assert store.get_by_email("jane@example.com").id == student_user.id
        assert store.get_by_email("unknown@example.com") is None

    def test_create_duplicate_raises_conflict(self, db_session, student_user, hasher):
        with pytest.raises(ConflictError):
            UserStore(db_session).create("Dup", "jane@example.com", hasher.hash("secret1"), Role.COMPANY)
        # Session is usable again after the rollback.
        assert UserStore(db_session).get_by_email("jane@example.com").full_name == "Jane Doe"


class TestEnsureAdminAccount:
    def test_noop_without_credentials(self, db_session, hasher):
        assert ensure_admin_account(db_session, Settings(admin_email="", admin_password=""), hasher) is None
        assert _count_users(db_session) == 0

    def test_creates_admin_once(self, db_session, hasher):
        cfg = Settings(admin_email="Root@Example.com", admin_password="admin-secret", admin_full_name="Root")
        admin = ensure_admin_account(db_session, cfg, hasher)
        assert admin.role == "Admin"
        assert admin.email == "root@example.com"
        again = ensure_admin_account(db_session, cfg, hasher)
        assert again.id == admin.id
        assert _count_users(db_session) == 1

    def test_admin_can_log_in(self, db_session, hasher, auth_service):
        cfg = Settings(admin_email="root@example.com", admin_password="admin-secret")
        ensure_admin_account(db_session, cfg, hasher)
        assert auth_service.login("root@example.com", "admin-secret").role == "Admin"
