from __future__ import annotations

import pytest

from src.school_admin.school_admin.core.enums import Role, SecretPolicy
from src.school_admin.school_admin.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateIdentityError,
    ValidationError,
)
from src.school_admin.school_admin.registrations.credentials import SecretIssuer
from src.school_admin.school_admin.registrations.provisioning import ProvisioningEngine
from src.school_admin.school_admin.users.service import AccountService, AuthService
from tests.fakes import InMemoryIdentityProvider, InMemoryProfiles

TEACHER = {"name": "Rahim", "email": "rahim@x.com", "role": "teacher", "subject": "Math", "password": "teach123"}


@pytest.fixture
def services():
    identities = InMemoryIdentityProvider()
    profiles = InMemoryProfiles()
    engine = ProvisioningEngine(identities, profiles, SecretIssuer(SecretPolicy.SHOW_ONCE))
    return AuthService(identities, profiles), AccountService(engine, profiles), identities, profiles


def test_admin_creates_account_that_can_log_in(services):
    auth, accounts, _, _ = services

    profile = accounts.create_account(current_role=Role.ADMIN, payload=TEACHER)
    user = auth.authenticate("Rahim@X.com", "teach123")

    assert profile.role == Role.TEACHER
    assert user.user_id == profile.profile_id
    assert user.subject == "Math"


def test_duplicate_email_is_refused(services):
    _, accounts, identities, profiles = services
    accounts.create_account(current_role=Role.ADMIN, payload=TEACHER)

    with pytest.raises(DuplicateIdentityError):
        accounts.create_account(current_role=Role.ADMIN, payload={**TEACHER, "name": "Other"})

    assert identities.create_calls == 1
    assert len(profiles.profiles) == 1


def test_short_password_is_refused(services):
    _, accounts, identities, _ = services
    with pytest.raises(ValidationError):
        accounts.create_account(current_role=Role.ADMIN, payload={**TEACHER, "password": "123"})
    assert identities.create_calls == 0


def test_only_admin_creates_accounts(services):
    _, accounts, _, _ = services
    with pytest.raises(AuthorizationError):
        accounts.create_account(current_role=Role.TEACHER, payload=TEACHER)


def test_wrong_password_fails(services):
    auth, accounts, _, _ = services
    accounts.create_account(current_role=Role.ADMIN, payload=TEACHER)
    with pytest.raises(AuthenticationError):
        auth.authenticate("rahim@x.com", "nope")


def test_non_text_credentials_fail_authentication(services):
    auth, _, _, _ = services
    with pytest.raises(AuthenticationError):
        auth.authenticate(["rahim@x.com"], 123456)


def test_identity_without_profile_cannot_log_in(services):
    auth, _, identities, _ = services
    identities.create_identity(email="ghost@x.com", secret="secret1", metadata={})
    with pytest.raises(AuthenticationError):
        auth.authenticate("ghost@x.com", "secret1")


def test_ensure_admin_is_idempotent(services):
    _, accounts, identities, profiles = services

    first = accounts.ensure_admin(name="Admin", email="admin@school.test", password="admin123")
    second = accounts.ensure_admin(name="Admin", email="admin@school.test", password="admin123")

    assert first == second
    assert identities.create_calls == 1
    assert profiles.get_by_id(first).role == Role.ADMIN
    assert profiles.get_by_id(first).class_name is None


def test_ensure_admin_refuses_an_email_owned_by_a_teacher(services):
    _, accounts, identities, profiles = services
    teacher = accounts.create_account(current_role=Role.ADMIN, payload=TEACHER)

    with pytest.raises(ValidationError):
        accounts.ensure_admin(name="Admin", email="rahim@x.com", password="admin123")

    assert identities.create_calls == 1
    assert profiles.get_by_id(teacher.profile_id).role == Role.TEACHER
    assert accounts.list_profiles(current_role=Role.ADMIN, role=Role.ADMIN) == []


def test_list_profiles_filters_by_role(services):
    _, accounts, _, _ = services
    accounts.ensure_admin(name="Admin", email="admin@school.test", password="admin123")
    accounts.create_account(current_role=Role.ADMIN, payload=TEACHER)

    teachers = accounts.list_profiles(current_role=Role.ADMIN, role=Role.TEACHER)

    assert [p.email for p in teachers] == ["rahim@x.com"]
