from __future__ import annotations

from typing import Optional

from .enums import ProvisioningStage


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class RequestAlreadyDecidedError(ValidationError):
    """Raised when a decision would move a request out of a terminal state."""


class DuplicateIdentityError(ValidationError):
    """Raised when an account is created directly for an email that already has one.

    Approval never raises this: an existing identity is reused instead.
    """


class IdentityProviderError(DomainError):
    """Raised by identity provider adapters when the backend refuses a call."""


class ProvisioningError(DomainError):
    """Raised when the approval write sequence aborts.

    The registration request stays pending, so the admin can retry.
    A commit-stage failure happens after the account exists, so it carries the
    password generated for that account; a retry will not show it again.
    """

    def __init__(
        self,
        message: str,
        *,
        stage: ProvisioningStage,
        orphaned_identity_id: Optional[str] = None,
        generated_secret: Optional[str] = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.orphaned_identity_id = orphaned_identity_id
        self.generated_secret = generated_secret
