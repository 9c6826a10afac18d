from __future__ import annotations

from datetime import timedelta
from functools import wraps

from flask import Flask, g, request, session

from ..common.http import json_error, json_ok, system_error
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS
from ..core.enums import Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DuplicateIdentityError,
    IdentityProviderError,
    ProvisioningError,
    ValidationError,
)
from .session_state import SessionState


def register(app: Flask, container: Container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.before_request
    def open_session_state():
        g.session_state = SessionState(container.profiles_repo, session).subscribe()

    @app.teardown_request
    def close_session_state(_exc=None):
        state = g.pop("session_state", None)
        if state is not None:
            state.teardown()

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                admin = g.session_state.require_admin()
            except AuthenticationError as e:
                return json_error(str(e), 401)
            except AuthorizationError as e:
                return json_error(str(e), 403)
            return view(admin, *args, **kwargs)

        return wrapper

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = request.get_json(silent=True) or request.form.to_dict()
        try:
            s_user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
            g.session_state.sign_in(s_user)
            session.permanent = bool(data.get("remember_me"))
            return json_ok(message="Logged in", user=s_user.to_dict())
        except AuthenticationError as e:
            return json_error(str(e), 401)
        except IdentityProviderError as e:
            return json_error(str(e), 502)
        except Exception as e:
            return system_error("logging in", e)

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        g.session_state.sign_out()
        return json_ok(message="Logged out")

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    def me():
        try:
            user = g.session_state.require_user()
        except AuthenticationError as e:
            return json_error(str(e), 401)
        return json_ok(user=user.to_dict())

    @app.route("/api/admin/users", methods=["POST"], endpoint="create_account")
    @admin_required
    def create_account(admin):
        data = request.get_json(silent=True) or request.form.to_dict()
        try:
            profile = container.account_service.create_account(current_role=admin.role, payload=data)
            return json_ok(201, message="Account created", profile=profile.to_dict())
        except DuplicateIdentityError as e:
            return json_error(str(e), 409)
        except (ValidationError, AuthorizationError) as e:
            return json_error(str(e), 400)
        except ProvisioningError as e:
            return json_error(str(e), 502, stage=e.stage.value, retryable=True)
        except Exception as e:
            return system_error("creating the account", e)

    @app.route("/api/admin/profiles", methods=["GET"], endpoint="admin_profiles")
    @admin_required
    def admin_profiles(admin):
        role_s = (request.args.get("role") or "").strip().lower()
        try:
            role = Role(role_s) if role_s else None
        except ValueError:
            return json_error("Unknown role filter", 400)

        try:
            profiles = container.account_service.list_profiles(current_role=admin.role, role=role)
            return json_ok(profiles=[p.to_dict() for p in profiles])
        except Exception as e:
            return system_error("loading profiles", e)
