from __future__ import annotations

from functools import wraps

from flask import Flask, g, request

from ..common.http import json_error, json_ok, system_error
from ..container import Container
from ..core.enums import RequestStatus
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ProvisioningError,
    RequestAlreadyDecidedError,
    ValidationError,
)


def register(app: Flask, container: Container) -> None:
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

    def _payload() -> dict:
        data = request.get_json(silent=True)
        if isinstance(data, dict):
            return data
        return request.form.to_dict()

    @app.route("/api/registrations", methods=["POST"], endpoint="submit_registration")
    def submit_registration():
        try:
            req = container.registration_service.submit_request(_payload())
            return json_ok(
                201,
                message="Request submitted. Please wait for approval.",
                request=req.to_dict(),
            )
        except ValidationError as e:
            return json_error(str(e), 400)
        except Exception as e:
            return system_error("submitting the registration", e)

    @app.route("/api/admin/registrations", methods=["GET"], endpoint="admin_registrations")
    @admin_required
    def admin_registrations(admin):
        status_s = (request.args.get("status") or RequestStatus.PENDING.value).strip().lower()
        try:
            status = None if status_s == "all" else RequestStatus(status_s)
        except ValueError:
            return json_error("Unknown status filter", 400)

        try:
            limit = int(request.args.get("limit") or 0) or None
        except ValueError:
            return json_error("limit must be a number", 400)

        try:
            rows = container.registration_service.list_requests(
                current_role=admin.role,
                status=status,
                limit=limit,
            )
            return json_ok(requests=[r.to_dict() for r in rows])
        except AuthorizationError as e:
            return json_error(str(e), 403)
        except Exception as e:
            return system_error("loading registrations", e)

    @app.route("/api/admin/registrations/<request_id>/approve", methods=["POST"], endpoint="approve_registration")
    @admin_required
    def approve_registration(admin, request_id: str):
        try:
            result = container.registration_service.approve(
                current_role=admin.role,
                admin_id=admin.user_id,
                request_id=request_id,
            )
            return json_ok(message="Request approved", **result.to_dict())
        except NotFoundError as e:
            return json_error(str(e), 404)
        except RequestAlreadyDecidedError as e:
            return json_error(str(e), 409)
        except (ValidationError, AuthorizationError) as e:
            return json_error(str(e), 400)
        except ProvisioningError as e:
            extra = {"stage": e.stage.value, "retryable": True}
            if e.generated_secret:
                extra["password"] = e.generated_secret
            return json_error(str(e), 502, **extra)
        except Exception as e:
            return system_error("approving the request", e)

    @app.route("/api/admin/registrations/<request_id>/reject", methods=["POST"], endpoint="reject_registration")
    @admin_required
    def reject_registration(admin, request_id: str):
        try:
            container.registration_service.reject(current_role=admin.role, request_id=request_id)
            return json_ok(message="Request rejected")
        except NotFoundError as e:
            return json_error(str(e), 404)
        except RequestAlreadyDecidedError as e:
            return json_error(str(e), 409)
        except (ValidationError, AuthorizationError) as e:
            return json_error(str(e), 400)
        except Exception as e:
            return system_error("rejecting the request", e)
