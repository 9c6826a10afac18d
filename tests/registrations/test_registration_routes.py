from __future__ import annotations

from types import SimpleNamespace

import pytest
from flask import Flask

from src.school_admin.school_admin.core.enums import RequestStatus, SecretPolicy
from src.school_admin.school_admin.registrations.controller import register as register_registrations
from src.school_admin.school_admin.registrations.credentials import SecretIssuer
from src.school_admin.school_admin.registrations.provisioning import ProvisioningEngine
from src.school_admin.school_admin.registrations.service import RegistrationService
from src.school_admin.school_admin.users.controller import register as register_users
from src.school_admin.school_admin.users.service import AccountService, AuthService
from tests.fakes import InMemoryIdentityProvider, InMemoryProfiles, InMemoryRegistrations


@pytest.fixture
def env():
    identities = InMemoryIdentityProvider()
    profiles = InMemoryProfiles()
    requests = InMemoryRegistrations()
    engine = ProvisioningEngine(identities, profiles, SecretIssuer(SecretPolicy.SHOW_ONCE))
    container = SimpleNamespace(
        profiles_repo=profiles,
        registration_service=RegistrationService(requests, engine, identities),
        auth_service=AuthService(identities, profiles),
        account_service=AccountService(engine, profiles),
    )
    container.account_service.ensure_admin(name="Admin", email="admin@school.test", password="admin123")

    app = Flask(__name__)
    app.secret_key = "test"
    app.config["TESTING"] = True
    register_users(app, container)
    register_registrations(app, container)
    return app.test_client(), requests, identities, profiles


def _login_admin(client):
    resp = client.post("/api/auth/login", json={"email": "admin@school.test", "password": "admin123"})
    assert resp.status_code == 200


def _submit(client, **overrides):
    payload = {"name": "Karim", "email": "karim@x.com", "role": "student", "class": "6-A", **overrides}
    return client.post("/api/registrations", json=payload)


def test_public_submission_returns_pending_request(env):
    client, _, _, _ = env

    resp = _submit(client)

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["request"]["status"] == "pending"
    assert body["request"]["class"] == "6-A"


def test_invalid_submission_is_400(env):
    client, requests, _, _ = env

    resp = _submit(client, role="admin")

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False
    assert requests.rows == {}


def test_admin_endpoints_require_login(env):
    client, _, _, _ = env
    assert client.get("/api/admin/registrations").status_code == 401


def test_non_admin_is_forbidden(env):
    client, _, _, _ = env
    _login_admin(client)
    client.post(
        "/api/admin/users",
        json={"name": "T", "email": "t@x.com", "role": "teacher", "subject": "Math", "password": "teach123"},
    )
    client.post("/api/auth/logout")
    client.post("/api/auth/login", json={"email": "t@x.com", "password": "teach123"})

    assert client.get("/api/admin/registrations").status_code == 403


def test_admin_approves_from_pending_list(env):
    client, requests, identities, _ = env
    request_id = _submit(client).get_json()["request"]["id"]
    _login_admin(client)

    listed = client.get("/api/admin/registrations").get_json()["requests"]
    assert [r["id"] for r in listed] == [request_id]

    resp = client.post(f"/api/admin/registrations/{request_id}/approve")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["created_identity"] is True
    assert body["password"] == identities.secrets["karim@x.com"]
    assert requests.get(request_id=request_id).status == RequestStatus.APPROVED
    assert client.get("/api/admin/registrations").get_json()["requests"] == []


def test_provisioning_failure_is_retryable_error(env):
    client, requests, identities, profiles = env
    request_id = _submit(client).get_json()["request"]["id"]
    _login_admin(client)
    profiles.fail_create = True

    resp = client.post(f"/api/admin/registrations/{request_id}/approve")

    assert resp.status_code == 502
    body = resp.get_json()
    assert body["stage"] == "profile"
    assert body["retryable"] is True
    assert identities.find_by_email("karim@x.com") is None
    assert requests.get(request_id=request_id).status == RequestStatus.PENDING


def test_commit_failure_returns_the_generated_password(env):
    client, requests, identities, _ = env
    request_id = _submit(client).get_json()["request"]["id"]
    _login_admin(client)
    requests.fail_mark_approved = True

    resp = client.post(f"/api/admin/registrations/{request_id}/approve")

    assert resp.status_code == 502
    body = resp.get_json()
    assert body["stage"] == "commit"
    assert body["password"] == identities.secrets["karim@x.com"]


def test_non_string_fields_are_a_bad_request(env):
    client, requests, _, _ = env

    resp = _submit(client, name=123, **{"class": 6})

    assert resp.status_code == 400
    assert requests.rows == {}


def test_reject_then_approve_conflicts(env):
    client, _, _, _ = env
    request_id = _submit(client).get_json()["request"]["id"]
    _login_admin(client)

    assert client.post(f"/api/admin/registrations/{request_id}/reject").status_code == 200
    assert client.post(f"/api/admin/registrations/{request_id}/approve").status_code == 409
    rejected = client.get("/api/admin/registrations?status=rejected").get_json()["requests"]
    assert [r["id"] for r in rejected] == [request_id]


def test_unknown_request_is_404(env):
    client, _, _, _ = env
    _login_admin(client)
    assert client.post("/api/admin/registrations/nope/reject").status_code == 404


def test_bad_status_filter_is_400(env):
    client, _, _, _ = env
    _login_admin(client)
    assert client.get("/api/admin/registrations?status=maybe").status_code == 400
