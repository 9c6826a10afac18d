from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, Role
from .model import PendingRequest


class RegistrationRepository(Protocol):
    """Store for registration requests.

    Status updates are conditional on the row still being pending, so a
    terminal status is never overwritten.
    """

    def create(
        self,
        *,
        name: str,
        email: str,
        role: Role,
        class_name: Optional[str],
        subject: Optional[str],
    ) -> PendingRequest:
        raise NotImplementedError

    def get(self, *, request_id: str) -> Optional[PendingRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[PendingRequest]:
        """Newest first. Only student/teacher rows are ever returned."""

        raise NotImplementedError

    def mark_approved(self, *, request_id: str, approved_by: str, approved_at: datetime) -> bool:
        raise NotImplementedError

    def mark_rejected(self, *, request_id: str) -> bool:
        raise NotImplementedError
