from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RequestStatus, Role


@dataclass(frozen=True)
class PendingRequest:
    """A self-submitted registration awaiting an admin decision.

    `class_name` is set only for students and `subject` only for teachers.
    """

    request_id: str
    name: str
    email: str
    role: Role
    status: RequestStatus
    created_at: datetime
    class_name: Optional[str] = None
    subject: Optional[str] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "class": self.class_name,
            "subject": self.subject,
            "status": self.status.value,
            "created_at": self.created_at.strftime("%Y-%m-%d %H:%M"),
            "approved_at": self.approved_at.strftime("%Y-%m-%d %H:%M") if self.approved_at else None,
            "approved_by": self.approved_by,
        }


@dataclass(frozen=True)
class ProvisionedIdentity:
    identity_id: str
    email: str
    created: bool
    generated_secret: Optional[str] = None


@dataclass(frozen=True)
class ApprovalResult:
    request: PendingRequest
    identity_id: str
    created_identity: bool
    generated_password: Optional[str] = None

    def to_dict(self) -> dict:
        out = {
            "request": self.request.to_dict(),
            "identity_id": self.identity_id,
            "created_identity": self.created_identity,
        }
        if self.generated_password:
            out["password"] = self.generated_password
        return out
