from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol

from .model import Identity


class IdentityProvider(Protocol):
    """Boundary to the system that owns login credentials.

    Implementations must create identities pre-confirmed (no verification
    step blocking login) and keep at most one identity per email.
    Failures are reported as IdentityProviderError.
    """

    def find_by_email(self, email: str) -> Optional[Identity]:
        raise NotImplementedError

    def create_identity(self, *, email: str, secret: str, metadata: Mapping[str, Any]) -> Identity:
        raise NotImplementedError

    def delete_identity(self, identity_id: str) -> None:
        raise NotImplementedError

    def verify_credentials(self, *, email: str, secret: str) -> Optional[Identity]:
        """Return the identity when the secret matches, otherwise None."""

        raise NotImplementedError
