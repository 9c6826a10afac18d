from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class RequestStatus(str, Enum):
    """Registration request lifecycle. Terminal states never change again."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class Decision(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class ProvisioningStage(str, Enum):
    """Step of the approval write sequence that failed."""

    CREDENTIAL = "credential"
    PROFILE = "profile"
    COMMIT = "commit"


class SecretPolicy(str, Enum):
    """How the secret of a newly provisioned identity is handled."""

    SHOW_ONCE = "show_once"
    RESET_REQUIRED = "reset_required"


class IdentityBackend(str, Enum):
    LOCAL = "local"
    SUPABASE = "supabase"
