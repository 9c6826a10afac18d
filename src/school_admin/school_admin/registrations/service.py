from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_PENDING_LIMIT
from ..core.enums import Decision, ProvisioningStage, RequestStatus, Role
from ..core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ProvisioningError,
    RequestAlreadyDecidedError,
    ValidationError,
)
from ..identity.provider import IdentityProvider
from .applications import parse_application
from .model import ApprovalResult, PendingRequest
from .provisioning import ProvisioningEngine
from .repository import RegistrationRepository

logger = logging.getLogger(__name__)


class RegistrationService:
    """Use cases: submit a registration, list and decide pending ones (admin)."""

    def __init__(
        self,
        requests: RegistrationRepository,
        engine: ProvisioningEngine,
        identities: IdentityProvider,
        *,
        pending_limit: int = DEFAULT_PENDING_LIMIT,
    ):
        self._requests = requests
        self._engine = engine
        self._identities = identities
        self._pending_limit = pending_limit

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin role required")

    def _get(self, request_id: str) -> PendingRequest:
        req = self._requests.get(request_id=str(request_id))
        if not req:
            raise NotFoundError("Registration request not found")
        return req

    def submit_request(self, payload: Mapping[str, Any]) -> PendingRequest:
        application = parse_application(payload)
        req = self._requests.create(
            name=application.name,
            email=application.email,
            role=application.role,
            class_name=application.class_name,
            subject=application.subject,
        )
        logger.info("Registration %s submitted (role=%s)", req.request_id, req.role.value)
        return req

    def list_pending(self, *, current_role: Role, limit: Optional[int] = None) -> Sequence[PendingRequest]:
        return self.list_requests(current_role=current_role, status=RequestStatus.PENDING, limit=limit)

    def list_requests(
        self,
        *,
        current_role: Role,
        status: Optional[RequestStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[PendingRequest]:
        self._require_admin(current_role)
        return self._requests.list_requests(status=status, limit=int(limit or self._pending_limit))

    def decide(
        self,
        *,
        current_role: Role,
        admin_id: str,
        request_id: str,
        decision: Decision,
    ) -> Optional[ApprovalResult]:
        if decision == Decision.APPROVE:
            return self.approve(current_role=current_role, admin_id=admin_id, request_id=request_id)
        if decision == Decision.REJECT:
            self.reject(current_role=current_role, request_id=request_id)
            return None
        raise ValidationError("Unknown decision")

    def approve(self, *, current_role: Role, admin_id: str, request_id: str) -> ApprovalResult:
        self._require_admin(current_role)
        req = self._get(request_id)

        if req.status == RequestStatus.APPROVED:
            return self._reconfirm(req)
        if req.status == RequestStatus.REJECTED:
            raise RequestAlreadyDecidedError("Request was already rejected")

        provisioned = self._engine.provision(req)

        try:
            marked = self._requests.mark_approved(
                request_id=req.request_id,
                approved_by=str(admin_id),
                approved_at=now_local(),
            )
        except Exception as e:
            logger.warning(
                "Request %s provisioned as %s but could not be marked approved: %s",
                req.request_id,
                provisioned.identity_id,
                e,
            )
            raise ProvisioningError(
                "Account created but the request could not be marked approved; retry",
                stage=ProvisioningStage.COMMIT,
                generated_secret=provisioned.generated_secret,
            ) from e

        current = self._get(req.request_id)
        if not marked and current.status != RequestStatus.APPROVED:
            logger.warning(
                "Request %s was %s concurrently; identity %s is kept",
                req.request_id,
                current.status.value,
                provisioned.identity_id,
            )
            raise RequestAlreadyDecidedError(f"Request was already {current.status.value}")

        logger.info(
            "Request %s approved by %s (identity=%s, created=%s)",
            req.request_id,
            admin_id,
            provisioned.identity_id,
            provisioned.created,
        )
        return ApprovalResult(
            request=current,
            identity_id=provisioned.identity_id,
            created_identity=provisioned.created,
            generated_password=provisioned.generated_secret,
        )

    def _reconfirm(self, req: PendingRequest) -> ApprovalResult:
        identity = self._identities.find_by_email(req.email)
        if identity is None:
            raise NotFoundError("Request is approved but its account no longer exists")
        return ApprovalResult(request=req, identity_id=identity.identity_id, created_identity=False)

    def reject(self, *, current_role: Role, request_id: str) -> None:
        self._require_admin(current_role)
        req = self._get(request_id)

        if req.status == RequestStatus.REJECTED:
            return
        if req.status == RequestStatus.APPROVED:
            raise RequestAlreadyDecidedError("Request was already approved")

        if not self._requests.mark_rejected(request_id=req.request_id):
            current = self._get(req.request_id)
            if current.status != RequestStatus.REJECTED:
                raise RequestAlreadyDecidedError(f"Request was already {current.status.value}")

        logger.info("Request %s rejected", req.request_id)
